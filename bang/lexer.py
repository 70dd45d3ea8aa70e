"""Single-pass lexer: classification is decided by the first character of each token."""

from __future__ import annotations

from typing import List, Optional

from .errors import LexError, LexErrorKind
from .token import (
    BOOL_LITERALS,
    KEYWORDS,
    OPERATOR_RUNS,
    SINGLE_CHAR_KINDS,
    Token,
    TokenKind,
)

WHITESPACE = frozenset(" \t\n\r")
INT64_MAX = 2**63 - 1


def _is_ascii_letter(ch: str) -> bool:
    return ("a" <= ch <= "z") or ("A" <= ch <= "Z")


def _is_ascii_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


class Lexer:
    def __init__(self, source: str) -> None:
        self.source = source
        self.index = 0

    def _peek(self) -> Optional[str]:
        if self.index < len(self.source):
            return self.source[self.index]
        return None

    def _advance(self) -> str:
        ch = self.source[self.index]
        self.index += 1
        return ch

    def tokenize(self) -> List[Token]:
        tokens: List[Token] = []
        while True:
            token = self._next_token()
            if token is None:
                continue
            if token.kind is TokenKind.EOF:
                return tokens
            tokens.append(token)

    def _next_token(self) -> Optional[Token]:
        """Scan one token; ``None`` means whitespace was skipped."""
        start = self.index
        ch = self._peek()
        if ch is None:
            return Token(TokenKind.EOF, start)
        self._advance()

        if ch in WHITESPACE:
            return None
        kind = SINGLE_CHAR_KINDS.get(ch)
        if kind is not None:
            return Token(kind, start)
        if ch == '"':
            return self._string(start)
        if _is_ascii_letter(ch):
            return self._word(start)
        if _is_ascii_digit(ch):
            return self._number(start)
        if ch in "=;":
            return self._operator_run(start)
        return Token(TokenKind.INVALID, start, ch)

    def _string(self, start: int) -> Token:
        # no escapes; an unterminated string runs to the end of input
        chars: List[str] = []
        while self._peek() is not None:
            ch = self._advance()
            if ch == '"':
                break
            chars.append(ch)
        return Token(TokenKind.STRING, start, "".join(chars))

    def _word(self, start: int) -> Token:
        while True:
            ch = self._peek()
            if ch is None or not (ch.isalnum() or ch == "_"):
                break
            self._advance()
        text = self.source[start:self.index]
        if text in KEYWORDS:
            return Token(KEYWORDS[text], start)
        if text in BOOL_LITERALS:
            return Token(TokenKind.BOOL, start, BOOL_LITERALS[text])
        return Token(TokenKind.IDENTIFIER, start, text)

    def _number(self, start: int) -> Token:
        while True:
            ch = self._peek()
            if ch is None:
                break
            if ch.isalpha() or ch == "_":
                self._advance()
                raise LexError(LexErrorKind.INVALID_NUMBER, start, self.source[start:self.index])
            if not _is_ascii_digit(ch):
                break
            self._advance()
        text = self.source[start:self.index]
        value = int(text)
        if value > INT64_MAX:
            raise LexError(LexErrorKind.INVALID_NUMBER, start, text)
        return Token(TokenKind.INTEGER, start, value)

    def _operator_run(self, start: int) -> Token:
        while True:
            ch = self._peek()
            if ch is None or ch.isalnum() or ch.isspace():
                break
            self._advance()
        text = self.source[start:self.index]
        kind = OPERATOR_RUNS.get(text)
        if kind is None:
            return Token(TokenKind.INVALID, start, text)
        return Token(kind, start)


def tokenize(source: str) -> List[Token]:
    return Lexer(source).tokenize()
