"""Typed models for discovered files."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path, PurePosixPath


@dataclass(slots=True, frozen=True)
class CandidateFile:
    """File found under the bundling root."""

    relative_path: str
    full_path: Path
    extension: str
    depth: int

    @property
    def name(self) -> str:
        """Return the final path segment, extension included."""
        return PurePosixPath(self.relative_path).name

    @classmethod
    def from_relative(cls, root: Path, relative_path: str) -> CandidateFile:
        """Build a candidate from a root and a POSIX path relative to it."""
        posix = PurePosixPath(relative_path)
        return cls(
            relative_path=posix.as_posix(),
            full_path=root.joinpath(*posix.parts),
            extension=posix.suffix,
            depth=len(posix.parts) - 1,
        )
