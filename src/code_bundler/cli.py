"""Command-line entrypoint for code-bundler."""

from __future__ import annotations

import argparse
import shlex
import sys
from pathlib import Path
from typing import NoReturn, TextIO

from code_bundler.bundler import BundleSummary, build_bundle
from code_bundler.config import BundlerConfig, CliOverrides, load_effective_config
from code_bundler.errors import BundleError, StageResult, UnexpectedError, ValidationError
from code_bundler.index import resolve_extensions, supported_languages
from code_bundler.logging import (
    AuditEvent,
    JsonlAuditLogger,
    new_run_id,
    sanitize_arguments,
    utc_timestamp,
)
from code_bundler.rsp import RSP_FILE_NAME, create_response_file
from code_bundler.validation import validate_bundle_request


class BundlerArgumentParser(argparse.ArgumentParser):
    """Parser that expands @response files with shell-style quoting and exits 1 on misuse."""

    def convert_arg_line_to_args(self, arg_line: str) -> list[str]:
        return shlex.split(arg_line)

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def build_arg_parser() -> BundlerArgumentParser:
    """Build argument parser for the bundle and create-rsp commands."""
    parser = BundlerArgumentParser(
        prog="code-bundler",
        description="Concatenate source files from a directory tree into one file.",
        fromfile_prefix_chars="@",
    )
    subparsers = parser.add_subparsers(dest="command")

    bundle = subparsers.add_parser("bundle", help="Bundle code files into a single file")
    bundle.add_argument(
        "--output", "-o", required=True, help="File path and name for the bundled output"
    )
    bundle.add_argument(
        "--language",
        "-l",
        dest="languages",
        action="append",
        required=True,
        help=(
            "Programming language to include; repeatable. One of: "
            + ", ".join(supported_languages())
            + ", or all"
        ),
    )
    bundle.add_argument(
        "--note",
        "-n",
        action="store_true",
        default=None,
        help="Write a source path comment before each file",
    )
    bundle.add_argument(
        "--sort",
        "-s",
        default=None,
        help="Sort files by 'name' or by code 'type' (default: name)",
    )
    bundle.add_argument(
        "--remove-empty-lines",
        "-re",
        dest="remove_empty_lines",
        action="store_true",
        default=None,
        help="Remove empty lines from the bundled content",
    )
    bundle.add_argument(
        "--author", "-a", default=None, help="Name noted at the top of the bundle file"
    )
    bundle.add_argument(
        "--root", default=".", help="Directory to bundle (default: current directory)"
    )

    subparsers.add_parser("create-rsp", help="Create a response file for the bundle command")
    return parser


def run_bundle(args: argparse.Namespace) -> int:
    """Validate, bundle, audit and report one bundle invocation."""
    overrides = CliOverrides(
        sort=args.sort,
        note=args.note,
        remove_empty_lines=args.remove_empty_lines,
        author=args.author,
    )
    try:
        config = load_effective_config(Path(args.root), overrides)
    except ValueError as error:
        return _report_failure(ValidationError(str(error)))

    try:
        result = _execute_bundle(args, config)
    except Exception as error:
        result = StageResult.failure(UnexpectedError(f"Unhandled error while bundling: {error}"))

    arguments: dict[str, object] = {
        "output": args.output,
        "languages": args.languages or [],
        "root": args.root,
        "note": config.bundle.note,
        "sort": config.bundle.sort,
        "remove_empty_lines": config.bundle.remove_empty_lines,
        "author": config.bundle.author,
        "on_read_error": config.bundle.on_read_error,
    }
    extra: dict[str, object] = {
        "extensions": sorted(resolve_extensions(args.languages or [])),
    }
    summary = result.value
    if summary is not None:
        extra["files_written"] = len(summary.files_written)
        extra["skipped"] = [item.path for item in summary.skipped]
    _record_run(config, "bundle", arguments, result.error, extra)

    if result.error is not None or summary is None:
        return _report_failure(result.error or UnexpectedError("Bundle produced no result."))
    for item in summary.skipped:
        print(f"Warning: skipped {item.path}: {item.reason}", file=sys.stderr)
    if not summary.files_written:
        print("Warning: no files matched the requested languages.", file=sys.stderr)
    print(
        f"Bundle created successfully: {summary.output} ({len(summary.files_written)} files)"
    )
    return 0


def run_create_rsp(in_stream: TextIO, out_stream: TextIO, working_dir: Path) -> int:
    """Run the interactive prompts and write bundle.rsp into working_dir."""
    try:
        config = load_effective_config(working_dir)
    except ValueError as error:
        return _report_failure(ValidationError(str(error)))

    try:
        result = create_response_file(in_stream, out_stream, working_dir)
    except Exception as error:
        result = StageResult.failure(
            UnexpectedError(f"Unhandled error while creating response file: {error}")
        )
    _record_run(config, "create-rsp", {"rsp_file": RSP_FILE_NAME}, result.error, {})

    if result.error is not None or result.value is None:
        return _report_failure(result.error or UnexpectedError("Response file was not written."))
    out_stream.write(
        f"Response file created: {result.value}\n"
        f"Replay it with: code-bundler @{RSP_FILE_NAME}\n"
    )
    return 0


def _execute_bundle(args: argparse.Namespace, config: BundlerConfig) -> StageResult[BundleSummary]:
    validated = validate_bundle_request(args.output, args.languages, config.bundle)
    if validated.error is not None or validated.value is None:
        return StageResult.failure(validated.error or ValidationError("Invalid bundle request."))
    return build_bundle(validated.value, config.root)


def _record_run(
    config: BundlerConfig,
    command: str,
    arguments: dict[str, object],
    error: BundleError | None,
    extra: dict[str, object],
) -> None:
    if not config.audit.enabled:
        return
    metadata = sanitize_arguments(arguments)
    metadata.update(extra)
    event = AuditEvent(
        timestamp=utc_timestamp(),
        run_id=new_run_id(),
        command=command,
        ok=error is None,
        error_code=error.code if error is not None else None,
        metadata=metadata,
    )
    try:
        JsonlAuditLogger(config.audit.path).append(event)
    except OSError as audit_error:
        print(
            f"Warning: cannot write audit log '{config.audit.path}': {audit_error}",
            file=sys.stderr,
        )


def _report_failure(error: BundleError) -> int:
    print(f"Error: {error.message}", file=sys.stderr)
    if error.hint:
        print(f"Hint: {error.hint}", file=sys.stderr)
    return 1


def main(argv: list[str] | None = None) -> int:
    """Entrypoint for the code-bundler command."""
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    if args.command == "bundle":
        return run_bundle(args)
    if args.command == "create-rsp":
        return run_create_rsp(in_stream=sys.stdin, out_stream=sys.stdout, working_dir=Path.cwd())
    parser.print_help(sys.stderr)
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
