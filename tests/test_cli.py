import io
import sys
from pathlib import Path

import pytest

from typstfmt.cli import build_parser, main, resolve_options
from typstfmt.format import FormatOptions, IndentStyle


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def test_cli_rewrites_file_in_place(tmp_path: Path) -> None:
    document = _write(tmp_path / "doc.typ", "#let x=1\n")

    assert main([str(document)]) == 0
    assert document.read_text(encoding="utf-8") == "#let x = 1\n"


def test_cli_stdout_leaves_file_untouched(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    document = _write(tmp_path / "doc.typ", "#f(a:1)\n")

    assert main([str(document), "--stdout"]) == 0
    assert capsys.readouterr().out == "#f(a: 1)\n"
    assert document.read_text(encoding="utf-8") == "#f(a:1)\n"


def test_cli_check_reports_changes(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    messy = _write(tmp_path / "messy.typ", "#let x=1\n")
    clean = _write(tmp_path / "clean.typ", "#let x = 1\n")

    assert main(["--check", str(clean)]) == 0
    assert main(["--check", str(messy), str(clean)]) == 1
    assert f"{messy} would be reformatted" in capsys.readouterr().err
    assert messy.read_text(encoding="utf-8") == "#let x=1\n"


def test_cli_reports_parse_errors(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    broken = _write(tmp_path / "broken.typ", "a ] b\n")

    assert main([str(broken)]) == 1
    err = capsys.readouterr().err
    assert f"{broken}:1:3: error PARSER_UNEXPECTED_CLOSING_BRACKET" in err
    assert broken.read_text(encoding="utf-8") == "a ] b\n"


def test_cli_missing_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main([str(tmp_path / "missing.typ")]) == 1
    assert "cannot read file" in capsys.readouterr().err


def test_cli_reports_undecodable_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    latin = tmp_path / "latin.typ"
    latin.write_bytes(b"= Caf\xe9\n\xff\n")

    assert main([str(latin)]) == 1
    assert f"{latin}: cannot read file" in capsys.readouterr().err
    assert latin.read_bytes() == b"= Caf\xe9\n\xff\n"


def test_cli_formats_stdin(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setattr(sys, "stdin", io.StringIO("Hello    world\n"))

    assert main([]) == 0
    assert capsys.readouterr().out == "Hello world\n"


def test_cli_check_stdin(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setattr(sys, "stdin", io.StringIO("#let x=1\n"))

    assert main(["--check"]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "<stdin> would be reformatted" in captured.err


def test_cli_warnings_do_not_fail(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setattr(sys, "stdin", io.StringIO("#let x = aaaa + bbbbbb\n"))

    assert main(["--max-line-length", "10"]) == 0
    captured = capsys.readouterr()
    assert captured.out == "#let x = aaaa + bbbbbb\n"
    assert "<stdin>:1:10: warning FORMAT_BINARY_BREAK_UNSUPPORTED" in captured.err


def test_cli_flags_override_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _write(tmp_path / "typstfmt.toml", "max_line_length = 30\nindent_width = 4\n")
    monkeypatch.chdir(tmp_path)

    args = build_parser().parse_args(["--indent-width", "3", "--indent-style", "tab"])
    assert resolve_options(args) == FormatOptions(
        max_line_length=30,
        indent_width=3,
        indent_style=IndentStyle.TAB,
    )


def test_cli_explicit_config(tmp_path: Path) -> None:
    config = _write(tmp_path / "custom.toml", "max_line_length = 10\n")
    document = _write(tmp_path / "doc.typ", "#f(aaa, bbbb)\n")

    assert main(["--config", str(config), str(document)]) == 0
    assert document.read_text(encoding="utf-8") == "#f(\n  aaa,\n  bbbb,\n)\n"


def test_cli_invalid_config(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    config = _write(tmp_path / "typstfmt.toml", "width = 10\n")

    assert main(["--config", str(config)]) == 2
    assert "Invalid configuration" in capsys.readouterr().err
