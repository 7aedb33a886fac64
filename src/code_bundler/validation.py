"""Request validation for the bundle and create-rsp commands."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from code_bundler.bundler.models import BundleRequest
from code_bundler.config import BundleDefaults
from code_bundler.errors import OutputExistsError, StageResult, ValidationError
from code_bundler.index import SORT_KEYS

_DISALLOWED_PATH_CHARS = ("\x00",)


def validate_output_path(raw: str | None, working_dir: Path | None = None) -> Path:
    """Return the output path, raising when it is empty, malformed or taken."""
    if raw is None or not raw.strip():
        raise ValidationError("Output file is required.", hint="Pass --output <path>.")
    if any(char in raw for char in _DISALLOWED_PATH_CHARS):
        raise ValidationError("Output file path contains disallowed characters.")
    output = Path(raw.strip())
    target = output if working_dir is None else working_dir / output
    if target.exists():
        raise OutputExistsError(
            f"Output file '{output}' already exists.",
            hint="Choose a different name or location.",
        )
    return output


def validate_bundle_request(
    output: str | None,
    languages: Sequence[str] | None,
    defaults: BundleDefaults,
) -> StageResult[BundleRequest]:
    """Build a BundleRequest from command-line values and merged defaults."""
    try:
        output_path = validate_output_path(output)
    except ValidationError as error:
        return StageResult.failure(error)
    if not languages:
        return StageResult.failure(
            ValidationError(
                "At least one language is required.",
                hint="Pass --language <id> one or more times, or --language all.",
            )
        )
    return StageResult.success(
        BundleRequest(
            output=output_path,
            languages=tuple(languages),
            note=defaults.note,
            sort=defaults.sort,
            remove_empty_lines=defaults.remove_empty_lines,
            author=defaults.author,
            on_read_error=defaults.on_read_error,
            encoding=defaults.encoding,
        )
    )


def validate_rsp_output_path(raw: str, working_dir: Path) -> str:
    """Check an output path entered at the create-rsp prompt."""
    trimmed = raw.strip()
    if not trimmed:
        raise ValidationError("Output file path cannot be empty.")
    if " " in trimmed:
        raise ValidationError("Output file path cannot contain spaces.")
    validate_output_path(trimmed, working_dir=working_dir)
    return trimmed


def parse_language_list(raw: str) -> tuple[str, ...]:
    """Split a comma-separated language list, requiring at least one entry."""
    languages = tuple(token.strip() for token in raw.split(",") if token.strip())
    if not languages:
        raise ValidationError("At least one programming language must be specified.")
    return languages


def validate_rsp_sort(raw: str) -> str:
    """Accept exactly one of the known sort keys."""
    sort = raw.strip().lower()
    if sort not in SORT_KEYS:
        raise ValidationError(
            "Invalid sort option. Please specify "
            + " or ".join(f"'{key}'" for key in SORT_KEYS)
            + "."
        )
    return sort
