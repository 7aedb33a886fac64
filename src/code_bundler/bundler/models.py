"""Typed models for bundle requests and results."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from code_bundler.config import DEFAULT_ENCODING, DEFAULT_SORT, READ_ERROR_ABORT


@dataclass(slots=True, frozen=True)
class BundleRequest:
    """Validated settings for one bundling operation."""

    output: Path
    languages: tuple[str, ...]
    note: bool = False
    sort: str = DEFAULT_SORT
    remove_empty_lines: bool = False
    author: str | None = None
    on_read_error: str = READ_ERROR_ABORT
    encoding: str = DEFAULT_ENCODING


@dataclass(slots=True, frozen=True)
class SkippedFile:
    """File left out of the bundle under the skip read-error policy."""

    path: str
    reason: str


@dataclass(slots=True, frozen=True)
class BundleSummary:
    """Outcome of a completed bundle write."""

    output: Path
    files_written: tuple[str, ...]
    skipped: tuple[SkippedFile, ...]
