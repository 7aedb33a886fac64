"""Response files: building, writing and the interactive create-rsp flow."""

from __future__ import annotations

import shlex
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO

from code_bundler.errors import BundleError, FilesystemError, StageResult
from code_bundler.validation import (
    parse_language_list,
    validate_rsp_output_path,
    validate_rsp_sort,
)

RSP_FILE_NAME = "bundle.rsp"


@dataclass(slots=True, frozen=True)
class ResponseFileOptions:
    """Answers collected for one replayable bundle invocation."""

    output: str
    languages: tuple[str, ...]
    note: bool
    sort: str
    remove_empty_lines: bool
    author: str | None


def build_rsp_arguments(options: ResponseFileOptions) -> list[str]:
    """Return the bundle command line encoded by the options."""
    arguments = ["bundle", "--output", options.output]
    for language in options.languages:
        arguments.extend(["--language", language])
    if options.note:
        arguments.append("--note")
    arguments.extend(["--sort", options.sort])
    if options.remove_empty_lines:
        arguments.append("--remove-empty-lines")
    if options.author:
        arguments.extend(["--author", options.author])
    return arguments


def render_rsp_line(options: ResponseFileOptions) -> str:
    """Render the arguments as one shell-quoted line."""
    return " ".join(shlex.quote(argument) for argument in build_rsp_arguments(options))


def write_response_file(options: ResponseFileOptions, working_dir: Path) -> Path:
    """Write bundle.rsp into working_dir, replacing any previous one."""
    path = working_dir / RSP_FILE_NAME
    path.write_text(render_rsp_line(options) + "\n", encoding="utf-8")
    return path


def _ask(in_stream: TextIO, out_stream: TextIO, prompt: str) -> str:
    out_stream.write(prompt)
    out_stream.flush()
    return in_stream.readline().rstrip("\r\n")


def prompt_rsp_options(
    in_stream: TextIO, out_stream: TextIO, working_dir: Path
) -> ResponseFileOptions:
    """Ask for each bundle option in turn, validating answers as they arrive."""
    out_stream.write("Please provide the following information for the create-rsp command:\n")
    output = validate_rsp_output_path(
        _ask(in_stream, out_stream, "Output file path and name: "), working_dir
    )
    languages = parse_language_list(
        _ask(in_stream, out_stream, "Programming languages (comma-separated): ")
    )
    note = (
        _ask(in_stream, out_stream, "Include source code comments? (Y/N): ").strip().upper() == "Y"
    )
    sort = validate_rsp_sort(_ask(in_stream, out_stream, "Sort the bundled files (name/type): "))
    remove_empty_lines = (
        _ask(in_stream, out_stream, "Remove empty lines from the bundled file? (Y/N): ")
        .strip()
        .upper()
        == "Y"
    )
    author = _ask(
        in_stream,
        out_stream,
        "Author name to be noted at the top of the bundle file (optional): ",
    ).strip()
    return ResponseFileOptions(
        output=output,
        languages=languages,
        note=note,
        sort=sort,
        remove_empty_lines=remove_empty_lines,
        author=author or None,
    )


def create_response_file(
    in_stream: TextIO, out_stream: TextIO, working_dir: Path
) -> StageResult[Path]:
    """Run the prompt sequence and persist the answers as bundle.rsp."""
    try:
        options = prompt_rsp_options(in_stream, out_stream, working_dir)
    except BundleError as error:
        return StageResult.failure(error)
    try:
        return StageResult.success(write_response_file(options, working_dir))
    except OSError as error:
        return StageResult.failure(
            FilesystemError(f"Cannot write response file '{RSP_FILE_NAME}': {error}")
        )
