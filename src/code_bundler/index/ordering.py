"""Deterministic ordering of selected files."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Final

from code_bundler.index.models import CandidateFile

SORT_BY_NAME: Final = "name"
SORT_BY_TYPE: Final = "type"
SORT_KEYS: Final = (SORT_BY_NAME, SORT_BY_TYPE)


def order_files(files: Sequence[CandidateFile], key: str) -> tuple[CandidateFile, ...]:
    """Stable-sort files by base name or by extension.

    Comparison is ordinal. Keys other than ``name`` and ``type`` (case-insensitive)
    leave the input order untouched.
    """
    normalized = key.strip().lower()
    if normalized == SORT_BY_NAME:
        return tuple(sorted(files, key=lambda item: item.name))
    if normalized == SORT_BY_TYPE:
        return tuple(sorted(files, key=lambda item: item.extension))
    return tuple(files)
