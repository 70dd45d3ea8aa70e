"""
Compile generated C with the host toolchain and check the program's output.

Skipped when no C compiler is on PATH.
"""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

import pytest

from bang.driver import compile_source


def _find_cc() -> str | None:
    for name in ("cc", "gcc", "clang"):
        path = shutil.which(name)
        if path:
            return path
    return None


CC = _find_cc()

pytestmark = pytest.mark.skipif(CC is None, reason="no C compiler available")


def _build_and_run(source: str, tmp_path: Path) -> str:
    c_file = tmp_path / "prog.c"
    exe = tmp_path / "prog"
    c_file.write_text(compile_source(source), encoding="utf-8")
    subprocess.run([CC, "-std=c99", str(c_file), "-o", str(exe)], check=True)
    result = subprocess.run([str(exe)], check=True, capture_output=True, text=True, timeout=10)
    return result.stdout


def test_worked_example(tmp_path: Path) -> None:
    source = "var a = 0! var b = 1! loop { if(b == 5){ break! } a = b! b = a + 1! print(a)! }"
    assert _build_and_run(source, tmp_path) == "1\n2\n3\n4\n"


def test_precedence_matches_native_backend(tmp_path: Path) -> None:
    source = "print 2 + 3 * 4! print 1 + 2 == 2! print 3 * 2 == 2! print 7 / 2! print 1 ;= 2!"
    assert _build_and_run(source, tmp_path) == "14\n2\n3\n3\n1\n"


def test_shadowing_reads_outer_value(tmp_path: Path) -> None:
    source = "var x = 1! if (1) { var x = x + 1! print x! } print x!"
    assert _build_and_run(source, tmp_path) == "2\n1\n"


def test_names_that_collide_with_c(tmp_path: Path) -> None:
    source = (
        "var int = 1! var EOF = 2! var printf = 3! var int_ = 4! var main = 5! "
        "print int + EOF + printf + int_ + main! "
        "loop { printf = printf - 1! if (printf == 0) { break! } } "
        "print printf! "
        "if (1) { var int = int + 10! print int! } "
        "print int!"
    )
    assert _build_and_run(source, tmp_path) == "15\n0\n11\n1\n"
