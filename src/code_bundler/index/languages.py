"""Fixed language-to-extension registry."""

from __future__ import annotations

from collections.abc import Iterable
from types import MappingProxyType
from typing import Final

ALL_LANGUAGES: Final = "all"

LANGUAGE_EXTENSIONS: Final = MappingProxyType(
    {
        "c#": ".cs",
        "javascript": ".js",
        "python": ".py",
    }
)


def supported_languages() -> tuple[str, ...]:
    """Return registered language ids in registration order."""
    return tuple(LANGUAGE_EXTENSIONS.keys())


def resolve_extensions(language_ids: Iterable[str]) -> frozenset[str]:
    """Map language ids to extensions.

    Ids are matched case-insensitively. Unknown ids are dropped without error, so
    the result may be empty. The ``all`` wildcard selects every registered
    extension regardless of the other ids given.
    """
    lowered = {language.strip().lower() for language in language_ids}
    if ALL_LANGUAGES in lowered:
        return frozenset(LANGUAGE_EXTENSIONS.values())
    return frozenset(
        LANGUAGE_EXTENSIONS[language] for language in lowered if language in LANGUAGE_EXTENSIONS
    )
