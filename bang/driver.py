"""
Pipeline glue: source text -> tokens -> AST -> checked AST -> output.

Each stage consumes the previous stage's complete output and raises its own
``CompileError`` subclass on the first problem, which stops the pipeline.
"""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from typing import Iterator, List, Optional, TextIO

from . import ast
from .c_codegen import generate
from .checker import check
from .errors import NestingError
from .lexer import tokenize
from .llvm_codegen import emit_llvm_ir, run_program
from .parser import parse

_log = logging.getLogger("bang")

# Deepest frame cost of one nesting level: a parenthesized primary re-enters
# expression -> additive -> multiplicative -> equality -> primary.
FRAMES_PER_LEVEL = 6
MAX_RECURSION_LIMIT = 10_000


@contextmanager
def nesting_headroom(source: str, stage: str) -> Iterator[None]:
    """Raise the recursion limit for ``source``'s nesting depth while a stage runs.

    Nesting beyond what ``MAX_RECURSION_LIMIT`` allows is reported as a
    ``NestingError`` for ``stage`` instead of escaping as ``RecursionError``.
    """
    saved = sys.getrecursionlimit()
    levels = source.count("(") + source.count("{")
    needed = min(saved + FRAMES_PER_LEVEL * levels, MAX_RECURSION_LIMIT)
    if needed > saved:
        sys.setrecursionlimit(needed)
    try:
        yield
    except RecursionError:
        raise NestingError(stage) from None
    finally:
        sys.setrecursionlimit(saved)


def parse_source(source: str) -> ast.Program:
    tokens = tokenize(source)
    _log.debug("lexed %d token(s)", len(tokens))
    with nesting_headroom(source, "parse"):
        program = parse(tokens)
    _log.debug("parsed %d top-level statement(s)", len(program.statements))
    return program


def front_end(source: str) -> ast.Program:
    program = parse_source(source)
    with nesting_headroom(source, "scope"):
        check(program)
    _log.debug("scope check passed")
    return program


def format_source_ast(source: str) -> str:
    program = parse_source(source)
    with nesting_headroom(source, "parse"):
        return ast.format_program(program)


def compile_source(source: str) -> str:
    program = front_end(source)
    with nesting_headroom(source, "codegen"):
        code = generate(program)
    _log.debug("generated %d byte(s) of C", len(code))
    return code


def compile_source_to_llvm(source: str) -> str:
    program = front_end(source)
    with nesting_headroom(source, "codegen"):
        return emit_llvm_ir(program)


def run_source(source: str, stdout: Optional[TextIO] = None) -> List[int]:
    program = front_end(source)
    with nesting_headroom(source, "codegen"):
        return run_program(program, stdout=stdout)
