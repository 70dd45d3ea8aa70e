"""
Structured compile errors, one closed kind enumeration per pipeline stage.

Every stage raises on the first problem it finds; the exception carries the
stage name and the specific kind so callers can format their own messages.
"""

from __future__ import annotations

import enum
from typing import Optional

from .token import TokenKind


class LexErrorKind(enum.Enum):
    # whitespace; skipped by the lexer, never raised
    INSIGNIFICANT_TOKEN = "insignificant token"
    INVALID_NUMBER = "invalid number"


class ParseErrorKind(enum.Enum):
    UNEXPECTED_STATEMENT = "unexpected statement"
    BAD_ASSIGNMENT = "bad assignment"
    BAD_LOOP = "bad loop"
    BAD_VARIABLE_DECLARATION = "bad variable declaration"
    EXPECTED_BANG = "expected bang"
    BAD_IF_STATEMENT = "bad if statement"
    UNEXPECTED_TOKEN = "unexpected token"
    EXPECTED_CLOSING_PARENTHESIS = "expected closing parenthesis"
    EXPECTED_EXPRESSION = "expected expression"


class SemanticErrorKind(enum.Enum):
    VARIABLE_ALREADY_DECLARED = "variable already declared"
    UNKNOWN_VARIABLE = "unknown variable"
    BREAK_OUTSIDE_LOOP = "break outside loop"


class LimitErrorKind(enum.Enum):
    NESTING_TOO_DEEP = "nesting too deep"


class CompileError(Exception):
    stage = "compile"

    def __init__(self, kind: enum.Enum, message: str, position: Optional[int] = None) -> None:
        self.kind = kind
        self.message = message
        self.position = position
        super().__init__(self._render())

    def _render(self) -> str:
        if self.position is None:
            return self.message
        return f"offset {self.position}: {self.message}"


class LexError(CompileError):
    stage = "lex"

    def __init__(self, kind: LexErrorKind, position: int, text: str = "") -> None:
        self.text = text
        message = f"Invalid number '{text}'" if kind is LexErrorKind.INVALID_NUMBER else kind.value
        super().__init__(kind, message, position)


_PARSE_MESSAGES = {
    ParseErrorKind.BAD_LOOP: "Bad loop",
    ParseErrorKind.BAD_VARIABLE_DECLARATION: "Bad variable declaration",
    ParseErrorKind.EXPECTED_BANG: "Expected bang",
    ParseErrorKind.BAD_IF_STATEMENT: "Bad if statement",
    ParseErrorKind.EXPECTED_CLOSING_PARENTHESIS: "Expected closing parenthesis",
    ParseErrorKind.EXPECTED_EXPRESSION: "Expected an expression",
}


class ParseError(CompileError):
    stage = "parse"

    def __init__(
        self,
        kind: ParseErrorKind,
        position: Optional[int] = None,
        token_kind: Optional[TokenKind] = None,
        name: Optional[str] = None,
    ) -> None:
        self.token_kind = token_kind
        self.name = name
        if kind is ParseErrorKind.UNEXPECTED_STATEMENT:
            message = f"Unexpected statement, began with token type {token_kind}"
        elif kind is ParseErrorKind.UNEXPECTED_TOKEN:
            message = f"Unexpected token of type {token_kind}"
        elif kind is ParseErrorKind.BAD_ASSIGNMENT:
            message = f"Bad assignment for {name}"
        else:
            message = _PARSE_MESSAGES[kind]
        super().__init__(kind, message, position)


class SemanticError(CompileError):
    stage = "scope"

    def __init__(self, kind: SemanticErrorKind, name: Optional[str] = None) -> None:
        self.name = name
        if kind is SemanticErrorKind.VARIABLE_ALREADY_DECLARED:
            message = f"Variable {name} already declared"
        elif kind is SemanticErrorKind.UNKNOWN_VARIABLE:
            message = f"Unknown variable {name}"
        else:
            message = "Used break outside of loop"
        super().__init__(kind, message)


class NestingError(CompileError):
    """The program nests deeper than the compiler's recursive walks can follow."""

    def __init__(self, stage: str) -> None:
        self.stage = stage
        super().__init__(LimitErrorKind.NESTING_TOO_DEEP, "Program nesting is too deep")


class CodegenError(RuntimeError):
    pass
