from __future__ import annotations

from pathlib import Path

import pytest

from code_bundler.bundler import BundleRequest, build_bundle, engine, write_bundle
from code_bundler.errors import FilesystemError, OutputExistsError, UnexpectedError
from code_bundler.index import CandidateFile


def _make_root(tmp_path: Path) -> Path:
    root = tmp_path / "root"
    root.mkdir()
    (root / "a.py").write_bytes(b"x=1\n\ny=2\n")
    (root / "b.cs").write_bytes(b"int x;\n")
    return root


def test_python_only_bundle_contains_content_plus_one_separator(tmp_path: Path) -> None:
    root = _make_root(tmp_path)
    output = tmp_path / "out.txt"
    request = BundleRequest(output=output, languages=("python",), sort="name")

    result = build_bundle(request, root)

    assert result.ok
    assert result.value is not None
    assert result.value.files_written == ("a.py",)
    assert output.read_bytes() == b"x=1\n\ny=2\n\n"


def test_all_languages_by_type_with_notes(tmp_path: Path) -> None:
    root = _make_root(tmp_path)
    output = tmp_path / "out.txt"
    request = BundleRequest(output=output, languages=("all",), sort="type", note=True)

    result = build_bundle(request, root)

    assert result.ok
    assert output.read_bytes() == (
        b"// Source: b.cs\nint x;\n\n// Source: a.py\nx=1\n\ny=2\n\n"
    )


def test_unmatched_languages_write_an_empty_bundle(tmp_path: Path) -> None:
    root = _make_root(tmp_path)
    output = tmp_path / "out.txt"

    result = build_bundle(BundleRequest(output=output, languages=("cobol",)), root)

    assert result.value is not None
    assert result.value.files_written == ()
    assert output.read_bytes() == b""


def test_note_paths_are_relative_to_root_with_forward_slashes(tmp_path: Path) -> None:
    root = tmp_path / "root"
    (root / "pkg" / "sub").mkdir(parents=True)
    (root / "pkg" / "sub" / "m.js").write_text("let a;\n", encoding="utf-8")
    output = tmp_path / "out.txt"

    build_bundle(BundleRequest(output=output, languages=("javascript",), note=True), root)

    assert output.read_text(encoding="utf-8") == "// Source: pkg/sub/m.js\nlet a;\n\n"


def test_author_header_is_trimmed_and_written_first(tmp_path: Path) -> None:
    root = _make_root(tmp_path)
    output = tmp_path / "out.txt"
    request = BundleRequest(output=output, languages=("c#",), author="  Ada Lovelace  ")

    build_bundle(request, root)

    assert output.read_text(encoding="utf-8") == "// Author: Ada Lovelace\nint x;\n\n"


def test_blank_author_writes_no_header(tmp_path: Path) -> None:
    root = _make_root(tmp_path)
    output = tmp_path / "out.txt"

    build_bundle(BundleRequest(output=output, languages=("c#",), author="   "), root)

    assert output.read_text(encoding="utf-8") == "int x;\n\n"


def test_round_trip_reproduces_every_line_in_order(tmp_path: Path) -> None:
    root = tmp_path / "root"
    root.mkdir()
    sources = {
        "a.py": "import os\n\n\ndef f():\n    return 1\n",
        "b.py": "  \n# only comment\n",
        "c.py": "last = True\n",
    }
    for name, content in sources.items():
        (root / name).write_text(content, encoding="utf-8")
    output = tmp_path / "out.txt"

    build_bundle(BundleRequest(output=output, languages=("python",)), root)

    expected = "".join(content + "\n" for content in sources.values())
    assert output.read_text(encoding="utf-8") == expected


def test_remove_empty_lines_strips_each_file(tmp_path: Path) -> None:
    root = _make_root(tmp_path)
    output = tmp_path / "out.txt"
    request = BundleRequest(output=output, languages=("python",), remove_empty_lines=True)

    build_bundle(request, root)

    assert output.read_bytes() == b"x=1\ny=2\n\n"


def test_content_without_trailing_newline_is_terminated(tmp_path: Path) -> None:
    root = tmp_path / "root"
    root.mkdir()
    (root / "a.js").write_bytes(b"let a")
    (root / "b.js").write_bytes(b"let b\r\n")
    output = tmp_path / "out.txt"

    build_bundle(BundleRequest(output=output, languages=("javascript",)), root)

    assert output.read_bytes() == b"let a\n\nlet b\r\n\n"


def test_existing_output_is_left_untouched(tmp_path: Path) -> None:
    root = _make_root(tmp_path)
    output = tmp_path / "existing.txt"
    output.write_text("keep me", encoding="utf-8")
    files = (CandidateFile.from_relative(root, "a.py"),)

    result = write_bundle(BundleRequest(output=output, languages=("python",)), files)

    assert isinstance(result.error, OutputExistsError)
    assert result.error.code == "OUTPUT_EXISTS"
    assert output.read_text(encoding="utf-8") == "keep me"


def test_missing_root_fails_before_output_is_created(tmp_path: Path) -> None:
    output = tmp_path / "out.txt"

    result = build_bundle(BundleRequest(output=output, languages=("all",)), tmp_path / "nope")

    assert result.ok is False
    assert result.error is not None
    assert result.error.code == "FILESYSTEM_ERROR"
    assert not output.exists()


def test_bare_carriage_return_content_keeps_its_blank_separator(tmp_path: Path) -> None:
    root = tmp_path / "root"
    root.mkdir()
    (root / "a.py").write_bytes(b"a=1\r")
    (root / "b.py").write_bytes(b"b=2\r")
    output = tmp_path / "out.txt"

    build_bundle(BundleRequest(output=output, languages=("python",)), root)

    written = output.read_bytes()
    assert written == b"a=1\r\rb=2\r\r"
    assert written.decode("utf-8").splitlines() == ["a=1", "", "b=2", ""]


def test_unencodable_output_fails_and_removes_partial_file(tmp_path: Path) -> None:
    root = _make_root(tmp_path)
    output = tmp_path / "out.txt"
    request = BundleRequest(
        output=output, languages=("python",), author="Zoë", encoding="ascii"
    )

    result = build_bundle(request, root)

    assert isinstance(result.error, UnexpectedError)
    assert result.error.code == "UNEXPECTED_ERROR"
    assert result.error.hint == "Partial output was removed."
    assert not output.exists()


def test_write_failure_mid_stream_is_a_filesystem_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    root = _make_root(tmp_path)
    output = tmp_path / "out.txt"

    def fail_write(handle: object, content: str) -> None:
        raise OSError(28, "No space left on device")

    monkeypatch.setattr(engine, "_write_content", fail_write)

    result = build_bundle(BundleRequest(output=output, languages=("python",)), root)

    assert isinstance(result.error, FilesystemError)
    assert result.error.code == "FILESYSTEM_ERROR"
    assert "No space left on device" in result.error.message
    assert result.error.hint == "Partial output was removed."
    assert not output.exists()
