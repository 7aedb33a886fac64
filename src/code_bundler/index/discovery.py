"""Directory walking and extension-based file selection."""

from __future__ import annotations

import os
from collections.abc import Iterable, Iterator, Sequence
from pathlib import Path, PurePosixPath
from typing import Final

from code_bundler.errors import FilesystemError, StageResult
from code_bundler.index.models import CandidateFile

EXCLUDED_DIR_NAMES: Final = frozenset({"bin", "debug", "obj", "venv", ".vs", ".idea"})


def is_excluded_path(relative_path: str) -> bool:
    """Return True when any directory segment exactly matches an excluded name.

    Matching is case-sensitive and covers whole segments only, so ``binary/app.cs``
    is kept while ``bin/app.cs`` is not. The file name itself is never matched.
    """
    directories = PurePosixPath(relative_path).parts[:-1]
    return any(part in EXCLUDED_DIR_NAMES for part in directories)


def iter_candidate_files(root: Path) -> Iterator[CandidateFile]:
    """Lazily yield files under root, pruning excluded directories.

    Each directory's files come out in name order before its subdirectories are
    visited depth-first. Symlinked files are included; symlinked directories are
    not followed.

    Raises FilesystemError as soon as the root or any directory below it cannot
    be listed.
    """
    base = Path(root)
    if not base.is_dir():
        raise FilesystemError(
            f"Root directory '{base}' does not exist or is not a directory.",
            hint="Pass an existing directory with --root.",
        )
    stack: list[Path] = [base]
    while stack:
        current = stack.pop()
        try:
            with os.scandir(current) as entries:
                ordered_entries = sorted(entries, key=lambda item: item.name)
        except OSError as error:
            raise FilesystemError(f"Cannot list directory '{current}': {error}") from error
        subdirectories: list[Path] = []
        for entry in ordered_entries:
            full_path = Path(entry.path)
            relative = full_path.relative_to(base).as_posix()
            if entry.is_dir(follow_symlinks=False):
                if entry.name not in EXCLUDED_DIR_NAMES:
                    subdirectories.append(full_path)
                continue
            if not entry.is_file():
                continue
            if is_excluded_path(relative):
                continue
            yield CandidateFile(
                relative_path=relative,
                full_path=full_path,
                extension=PurePosixPath(relative).suffix,
                depth=relative.count("/"),
            )
        stack.extend(reversed(subdirectories))


def walk(root: Path) -> StageResult[tuple[CandidateFile, ...]]:
    """Collect every candidate file under root, or fail without partial results."""
    try:
        return StageResult.success(tuple(iter_candidate_files(root)))
    except FilesystemError as error:
        return StageResult.failure(error)


def select_files(
    files: Sequence[CandidateFile], extensions: Iterable[str]
) -> tuple[CandidateFile, ...]:
    """Keep files whose extension is in the set, compared case-insensitively.

    Input order is preserved. An empty extension set selects nothing.
    """
    wanted = {extension.lower() for extension in extensions}
    return tuple(candidate for candidate in files if candidate.extension.lower() in wanted)
