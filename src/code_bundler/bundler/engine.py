"""Bundle writing and the walk -> select -> order -> write pipeline."""

from __future__ import annotations

import re
from collections.abc import Sequence
from pathlib import Path
from typing import TextIO

from code_bundler.bundler.models import BundleRequest, BundleSummary, SkippedFile
from code_bundler.config import READ_ERROR_SKIP
from code_bundler.errors import (
    BundleError,
    FilesystemError,
    OutputExistsError,
    StageResult,
    UnexpectedError,
)
from code_bundler.index import CandidateFile, order_files, resolve_extensions, select_files, walk

_LINE_BREAK = re.compile(r"(\r\n|\n|\r)")

AUTHOR_HEADER = "// Author: {author}\n"
SOURCE_NOTE = "// Source: {path}\n"


def strip_empty_lines(content: str) -> str:
    """Drop lines that consist of a line terminator only.

    Whitespace-only lines and the terminators of kept lines are preserved, so
    applying this twice gives the same text as applying it once.
    """
    parts = _LINE_BREAK.split(content)
    kept: list[str] = []
    for index in range(0, len(parts) - 1, 2):
        if parts[index]:
            kept.append(parts[index] + parts[index + 1])
    if parts[-1]:
        kept.append(parts[-1])
    return "".join(kept)


def build_bundle(request: BundleRequest, root: Path) -> StageResult[BundleSummary]:
    """Run the full pipeline for one validated request."""
    extensions = resolve_extensions(request.languages)
    walked = walk(root)
    if walked.error is not None:
        return StageResult.failure(walked.error)
    selected = select_files(walked.value or (), extensions)
    ordered = order_files(selected, request.sort)
    return write_bundle(request, ordered)


def write_bundle(
    request: BundleRequest, files: Sequence[CandidateFile]
) -> StageResult[BundleSummary]:
    """Stream files into a newly created output file.

    The output is created exclusively; an existing path fails before anything is
    written. Under the abort policy the first unreadable file stops the run and
    the partial output is removed. Under the skip policy the file is recorded in
    the summary and the run continues.
    """
    try:
        handle = request.output.open("x", encoding=request.encoding, newline="")
    except FileExistsError:
        return StageResult.failure(
            OutputExistsError(
                f"Output file '{request.output}' already exists.",
                hint="Choose a different name or location.",
            )
        )
    except OSError as error:
        return StageResult.failure(
            FilesystemError(f"Cannot create output file '{request.output}': {error}")
        )

    written: list[str] = []
    skipped: list[SkippedFile] = []
    try:
        with handle:
            _write_author_header(handle, request.author)
            for candidate in files:
                try:
                    content = _read_source(candidate, request.encoding)
                except BundleError as error:
                    if request.on_read_error != READ_ERROR_SKIP:
                        raise
                    skipped.append(SkippedFile(path=candidate.relative_path, reason=error.message))
                    continue
                if request.note:
                    handle.write(SOURCE_NOTE.format(path=candidate.relative_path))
                if request.remove_empty_lines:
                    content = strip_empty_lines(content)
                _write_content(handle, content)
                written.append(candidate.relative_path)
    except BundleError as error:
        return StageResult.failure(_with_cleanup_hint(error, request.output))
    except OSError as error:
        return StageResult.failure(
            _with_cleanup_hint(
                FilesystemError(f"Cannot write output file '{request.output}': {error}"),
                request.output,
            )
        )
    except UnicodeError as error:
        return StageResult.failure(
            _with_cleanup_hint(
                UnexpectedError(f"Cannot encode output as {request.encoding}: {error}"),
                request.output,
            )
        )

    return StageResult.success(
        BundleSummary(
            output=request.output,
            files_written=tuple(written),
            skipped=tuple(skipped),
        )
    )


def _write_author_header(handle: TextIO, author: str | None) -> None:
    trimmed = (author or "").strip()
    if trimmed:
        handle.write(AUTHOR_HEADER.format(author=trimmed))


def _write_content(handle: TextIO, content: str) -> None:
    handle.write(content)
    if content.endswith("\r"):
        handle.write("\r")
        return
    if content and not content.endswith("\n"):
        handle.write("\n")
    handle.write("\n")


def _read_source(candidate: CandidateFile, encoding: str) -> str:
    try:
        with candidate.full_path.open("r", encoding=encoding, newline="") as source:
            return source.read()
    except OSError as error:
        raise FilesystemError(f"Cannot read '{candidate.relative_path}': {error}") from error
    except UnicodeDecodeError as error:
        raise UnexpectedError(
            f"Cannot decode '{candidate.relative_path}' as {encoding}: {error.reason}"
        ) from error


def _with_cleanup_hint(error: BundleError, output: Path) -> BundleError:
    """Remove the partial output and note the outcome on the error."""
    try:
        output.unlink(missing_ok=True)
    except OSError as unlink_error:
        error.hint = f"Partial output left at '{output}': {unlink_error}"
        return error
    error.hint = "Partial output was removed."
    return error
