#!/usr/bin/env python3
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Sequence

from bang.driver import compile_source, compile_source_to_llvm, format_source_ast, run_source
from bang.errors import CompileError
from bang.lexer import tokenize
from bang.token import Token, TokenKind

_log = logging.getLogger("bang")


def load_source(path: Path | None) -> tuple[str, str]:
    if path is None:
        return sys.stdin.read(), "<stdin>"
    return path.read_text(encoding="utf-8"), str(path)


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    _log.setLevel(level)
    if _log.handlers:
        return
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s [%(levelname)-5.5s] %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    _log.addHandler(handler)


def format_tokens(tokens: Sequence[Token]) -> str:
    lines: List[str] = []
    current: List[str] = []
    for token in tokens:
        current.append(token.describe())
        if token.kind is TokenKind.BANG:
            lines.append(" ".join(current))
            current = []
    if current:
        lines.append(" ".join(current))
    return "\n".join(lines) + "\n"


def _emit(source: str, kind: str) -> str:
    if kind == "tokens":
        return format_tokens(tokenize(source))
    if kind == "ast":
        return format_source_ast(source) + "\n"
    if kind == "llvm":
        return compile_source_to_llvm(source)
    return compile_source(source)


def _build_parser() -> argparse.ArgumentParser:
    argp = argparse.ArgumentParser(prog="bangc", description="Compile bang programs to C")
    argp.add_argument("source", nargs="?", help="Path to a .bang file (stdin when omitted)")
    argp.add_argument(
        "--emit",
        choices=("c", "llvm", "tokens", "ast"),
        default="c",
        help="What to output (default: c)",
    )
    argp.add_argument("-o", "--output", type=Path, default=None, help="Write output to this file")
    argp.add_argument("--run", action="store_true", help="Compile natively and run in-process")
    argp.add_argument("-v", "--verbose", action="count", default=0, help="-v for info, -vv for debug")
    return argp


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    _configure_logging(args.verbose)

    source_path = Path(args.source) if args.source else None
    try:
        source, source_label = load_source(source_path)
    except (OSError, UnicodeDecodeError) as exc:
        print(f"error: unable to read source: {exc}", file=sys.stderr)
        return 1
    _log.info("compiling %s", source_label)

    try:
        if args.run:
            run_source(source, stdout=sys.stdout)
            return 0
        text = _emit(source, args.emit)
    except CompileError as exc:
        print(f"{exc.stage} error: {exc}", file=sys.stderr)
        return 1

    if args.output is None:
        sys.stdout.write(text)
    else:
        args.output.write_text(text, encoding="utf-8")
        _log.info("wrote %s", args.output)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
