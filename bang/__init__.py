from .ast import Program, format_program
from .c_codegen import generate
from .checker import check
from .driver import (
    compile_source,
    compile_source_to_llvm,
    format_source_ast,
    front_end,
    parse_source,
    run_source,
)
from .errors import (
    CompileError,
    LexError,
    LexErrorKind,
    LimitErrorKind,
    NestingError,
    ParseError,
    ParseErrorKind,
    SemanticError,
    SemanticErrorKind,
)
from .lexer import tokenize
from .parser import parse
from .token import Token, TokenKind

__all__ = [
    "Program",
    "format_program",
    "generate",
    "check",
    "compile_source",
    "compile_source_to_llvm",
    "format_source_ast",
    "front_end",
    "parse_source",
    "run_source",
    "CompileError",
    "LexError",
    "LexErrorKind",
    "LimitErrorKind",
    "NestingError",
    "ParseError",
    "ParseErrorKind",
    "SemanticError",
    "SemanticErrorKind",
    "tokenize",
    "parse",
    "Token",
    "TokenKind",
]
