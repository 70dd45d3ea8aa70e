from __future__ import annotations

import enum
from dataclasses import dataclass


class TokenKind(enum.Enum):
    # Simple
    PLUS = "+"
    MINUS = "-"
    STAR = "*"
    SLASH = "/"
    BANG = "!"
    OPEN_PAREN = "("
    CLOSE_PAREN = ")"
    OPEN_BRACE = "{"
    CLOSE_BRACE = "}"

    # Complex
    EQUAL = "="
    EQUAL_EQUAL = "=="
    SEMICOLON = ";"
    SEMICOLON_EQUAL = ";="
    IDENTIFIER = "identifier"
    INTEGER = "integer"
    BOOL = "bool"
    STRING = "string"

    # Keywords
    VAR = "var"
    PRINT = "print"
    IF = "if"
    PREVIOUS = "prev"
    LOOP = "loop"
    BREAK = "break"

    EOF = "eof"
    INVALID = "invalid"

    def __str__(self) -> str:
        return self.name


SINGLE_CHAR_KINDS = {
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "*": TokenKind.STAR,
    "/": TokenKind.SLASH,
    "!": TokenKind.BANG,
    "(": TokenKind.OPEN_PAREN,
    ")": TokenKind.CLOSE_PAREN,
    "{": TokenKind.OPEN_BRACE,
    "}": TokenKind.CLOSE_BRACE,
}

KEYWORDS = {
    "if": TokenKind.IF,
    "print": TokenKind.PRINT,
    "prev": TokenKind.PREVIOUS,
    "loop": TokenKind.LOOP,
    "break": TokenKind.BREAK,
    "var": TokenKind.VAR,
}

BOOL_LITERALS = {"true": True, "false": False}

OPERATOR_RUNS = {
    "=": TokenKind.EQUAL,
    "==": TokenKind.EQUAL_EQUAL,
    ";": TokenKind.SEMICOLON,
    ";=": TokenKind.SEMICOLON_EQUAL,
}


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    position: int
    # identifier name, integer value, bool, string body, or the text of an invalid token
    value: object = None

    def describe(self) -> str:
        if self.kind in (TokenKind.IDENTIFIER, TokenKind.INTEGER, TokenKind.INVALID):
            return f"{self.kind}({self.value})"
        if self.kind is TokenKind.STRING:
            return f'{self.kind}("{self.value}")'
        if self.kind is TokenKind.BOOL:
            return f"{self.kind}({'true' if self.value else 'false'})"
        return str(self.kind)
