from __future__ import annotations

import io
from pathlib import Path

import pytest

from code_bundler.cli import main, run_create_rsp


def test_create_rsp_then_replay_with_at_prefix(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    (tmp_path / "a.py").write_text("a = 1\n", encoding="utf-8")
    (tmp_path / "b.js").write_text("let b;\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    answers = io.StringIO("bundle.txt\nall\nY\ntype\nN\nAda Lovelace\n")
    prompts = io.StringIO()

    assert run_create_rsp(answers, prompts, tmp_path) == 0
    assert "code-bundler @bundle.rsp" in prompts.getvalue()

    assert main(["@bundle.rsp"]) == 0
    assert (tmp_path / "bundle.txt").read_text(encoding="utf-8") == (
        "// Author: Ada Lovelace\n"
        "// Source: b.js\nlet b;\n\n"
        "// Source: a.py\na = 1\n\n"
    )


def test_create_rsp_via_main_reads_stdin(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("sys.stdin", io.StringIO("out.txt\npython\nN\nname\nY\n\n"))

    assert main(["create-rsp"]) == 0
    assert (tmp_path / "bundle.rsp").read_text(encoding="utf-8") == (
        "bundle --output out.txt --language python --sort name --remove-empty-lines\n"
    )
    assert "Response file created" in capsys.readouterr().out


def test_create_rsp_validation_failure_exits_one(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    answers = io.StringIO("has space.txt\n")

    assert run_create_rsp(answers, io.StringIO(), tmp_path) == 1
    assert "cannot contain spaces" in capsys.readouterr().err
    assert not (tmp_path / "bundle.rsp").exists()
