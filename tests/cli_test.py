from __future__ import annotations

import io
import sys
from pathlib import Path

import pytest

import bangc
from bang.lexer import tokenize


def _write(tmp_path: Path, source: str) -> str:
    path = tmp_path / "prog.bang"
    path.write_text(source, encoding="utf-8")
    return str(path)


def test_emits_c_by_default(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert bangc.main([_write(tmp_path, "var x = 1! print x!")]) == 0
    out = capsys.readouterr().out
    assert out.startswith("#include <stdlib.h>\n")
    assert "    long long x = 1;\n" in out


def test_reads_stdin_when_no_path(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setattr(sys, "stdin", io.StringIO("print 1!"))
    assert bangc.main([]) == 0
    assert 'printf("%lld\\n", (long long)(1));' in capsys.readouterr().out


def test_emit_tokens(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert bangc.main([_write(tmp_path, "var x = 5! print x!"), "--emit", "tokens"]) == 0
    assert capsys.readouterr().out == "VAR IDENTIFIER(x) EQUAL INTEGER(5) BANG\nPRINT IDENTIFIER(x) BANG\n"


def test_emit_ast(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert bangc.main([_write(tmp_path, "var x = 5!"), "--emit", "ast"]) == 0
    assert capsys.readouterr().out == "VariableDeclaration(name='x', value=Integer(value=5))\n"


def test_emit_llvm(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert bangc.main([_write(tmp_path, "print 1!"), "--emit", "llvm"]) == 0
    assert "bang_print_i64" in capsys.readouterr().out


def test_run_prints_program_output(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    source = "var a = 0! var b = 1! loop { if(b == 5){ break! } a = b! b = a + 1! print(a)! }"
    assert bangc.main([_write(tmp_path, source), "--run"]) == 0
    assert capsys.readouterr().out == "1\n2\n3\n4\n"


def test_output_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    target = tmp_path / "out.c"
    assert bangc.main([_write(tmp_path, "print 1!"), "-o", str(target)]) == 0
    assert capsys.readouterr().out == ""
    assert target.read_text(encoding="utf-8").endswith("    return 0;\n}\n")


def test_parse_error_exit_status(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert bangc.main([_write(tmp_path, "var = 5!")]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err.strip() == "parse error: offset 4: Bad variable declaration"


def test_lex_error_exit_status(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert bangc.main([_write(tmp_path, "print 12ab!")]) == 1
    err = capsys.readouterr().err
    assert err.startswith("lex error: offset 6: Invalid number")


def test_scope_error_exit_status(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert bangc.main([_write(tmp_path, "print y!"), "--run"]) == 1
    assert capsys.readouterr().err.strip() == "scope error: Unknown variable y"


def test_missing_source_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert bangc.main([str(tmp_path / "missing.bang")]) == 1
    assert capsys.readouterr().err.startswith("error: unable to read source:")


def test_format_tokens_keeps_trailing_tokens() -> None:
    assert bangc.format_tokens(tokenize("print 1")) == "PRINT INTEGER(1)\n"
    assert bangc.format_tokens([]) == "\n"


def test_deeply_nested_expression(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    source = "print " + "(" * 300 + "1" + ")" * 300 + "!"
    assert bangc.main([_write(tmp_path, source), "--run"]) == 0
    assert capsys.readouterr().out == "1\n"


def test_nesting_too_deep_exit_status(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    source = "print " + "(" * 5000 + "1" + ")" * 5000 + "!"
    assert bangc.main([_write(tmp_path, source)]) == 1
    assert capsys.readouterr().err.strip() == "parse error: Program nesting is too deep"


def test_undecodable_source_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = tmp_path / "binary.bang"
    path.write_bytes(b"print \xff\xfe!")
    assert bangc.main([str(path)]) == 1
    assert capsys.readouterr().err.startswith("error: unable to read source:")
