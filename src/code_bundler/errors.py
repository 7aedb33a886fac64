"""Error taxonomy and explicit stage results."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


class BundleError(Exception):
    """Base failure carried between pipeline stages."""

    code = "BUNDLE_ERROR"

    def __init__(self, message: str, hint: str = "") -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint


class ValidationError(BundleError):
    """Raised when a request or its arguments are rejected before any write."""

    code = "VALIDATION_ERROR"


class OutputExistsError(ValidationError):
    """Raised when the bundle output path already exists."""

    code = "OUTPUT_EXISTS"


class FilesystemError(BundleError):
    """Raised when walking, reading or writing the filesystem fails."""

    code = "FILESYSTEM_ERROR"


class UnexpectedError(BundleError):
    """Wraps any failure outside the known taxonomy."""

    code = "UNEXPECTED_ERROR"


@dataclass(slots=True, frozen=True)
class StageResult(Generic[T]):
    """Value or error returned by a fallible pipeline stage."""

    value: T | None = None
    error: BundleError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> StageResult[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: BundleError) -> StageResult[T]:
        return cls(error=error)
