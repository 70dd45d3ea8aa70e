"""
Recursive-descent parser, one method per grammar production.

    program     = statement*
    statement   = "break" "!"
                | IDENT "=" expression "!"
                | "loop" block
                | "var" IDENT "=" expression "!"
                | "if" "(" expression ")" block
                | "print" expression "!"
    block       = "{" statement* "}"
    expression  = additive
    additive    = multiplicative ( ("+" | "-") multiplicative )*
    multiplicative = equality ( ("*" | "/") equality )*
    equality    = primary ( ("==" | ";=") primary )*
    primary     = INTEGER | IDENT | "(" expression ")"

The cursor only moves forward; a production never backtracks.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from . import ast
from .errors import ParseError, ParseErrorKind
from .token import Token, TokenKind

ADDITIVE_OPS = {
    TokenKind.PLUS: ast.BinaryOperator.ADD,
    TokenKind.MINUS: ast.BinaryOperator.SUBTRACT,
}

MULTIPLICATIVE_OPS = {
    TokenKind.STAR: ast.BinaryOperator.MULTIPLY,
    TokenKind.SLASH: ast.BinaryOperator.DIVIDE,
}

EQUALITY_OPS = {
    TokenKind.EQUAL_EQUAL: ast.BinaryOperator.EQUAL,
    TokenKind.SEMICOLON_EQUAL: ast.BinaryOperator.NOT_EQUAL,
}


class Parser:
    def __init__(self, tokens: Sequence[Token]) -> None:
        self.tokens = list(tokens)
        self.index = 0

    # ── Cursor ───────────────────────────────────────────────

    def peek(self) -> Optional[Token]:
        return self.peek_ahead(0)

    def peek_ahead(self, amount: int) -> Optional[Token]:
        idx = self.index + amount
        if idx < len(self.tokens):
            return self.tokens[idx]
        return None

    def at(self, kind: TokenKind) -> bool:
        token = self.peek()
        return token is not None and token.kind is kind

    def advance(self) -> Token:
        token = self.tokens[self.index]
        self.index += 1
        return token

    def _position(self) -> Optional[int]:
        token = self.peek()
        return token.position if token is not None else None

    def _expect(self, kind: TokenKind, error: ParseErrorKind, name: Optional[str] = None) -> Token:
        if not self.at(kind):
            raise ParseError(error, self._position(), name=name)
        return self.advance()

    def _expect_bang(self) -> None:
        self._expect(TokenKind.BANG, ParseErrorKind.EXPECTED_BANG)

    # ── Statements ───────────────────────────────────────────

    def parse_program(self) -> ast.Program:
        statements: List[ast.Stmt] = []
        while self.peek() is not None:
            statements.append(self.parse_statement())
        return ast.Program(tuple(statements))

    def parse_statement(self) -> ast.Stmt:
        token = self.advance()
        if token.kind is TokenKind.BREAK:
            self._expect_bang()
            return ast.BreakStatement()
        if token.kind is TokenKind.IDENTIFIER:
            return self.parse_assignment(token.value)
        if token.kind is TokenKind.LOOP:
            return self.parse_loop()
        if token.kind is TokenKind.VAR:
            return self.parse_variable_declaration()
        if token.kind is TokenKind.IF:
            return self.parse_if_statement()
        if token.kind is TokenKind.PRINT:
            return self.parse_print_statement()
        raise ParseError(ParseErrorKind.UNEXPECTED_STATEMENT, token.position, token_kind=token.kind)

    def parse_block(self, error: ParseErrorKind) -> List[ast.Stmt]:
        """Parse ``{ statement* }``; every missing delimiter reports ``error``."""
        self._expect(TokenKind.OPEN_BRACE, error)
        statements: List[ast.Stmt] = []
        while self.peek() is not None and not self.at(TokenKind.CLOSE_BRACE):
            statements.append(self.parse_statement())
        self._expect(TokenKind.CLOSE_BRACE, error)
        return statements

    def parse_assignment(self, name: str) -> ast.Assignment:
        self._expect(TokenKind.EQUAL, ParseErrorKind.BAD_ASSIGNMENT, name=name)
        value = self.parse_expression()
        self._expect_bang()
        return ast.Assignment(name, value)

    def parse_loop(self) -> ast.LoopStatement:
        body = self.parse_block(ParseErrorKind.BAD_LOOP)
        return ast.LoopStatement(tuple(body))

    def parse_variable_declaration(self) -> ast.VariableDeclaration:
        name_tok = self._expect(TokenKind.IDENTIFIER, ParseErrorKind.BAD_VARIABLE_DECLARATION)
        self._expect(TokenKind.EQUAL, ParseErrorKind.BAD_VARIABLE_DECLARATION)
        value = self.parse_expression()
        self._expect_bang()
        return ast.VariableDeclaration(name_tok.value, value)

    def parse_if_statement(self) -> ast.IfStatement:
        self._expect(TokenKind.OPEN_PAREN, ParseErrorKind.BAD_IF_STATEMENT)
        condition = self.parse_expression()
        self._expect(TokenKind.CLOSE_PAREN, ParseErrorKind.BAD_IF_STATEMENT)
        body = self.parse_block(ParseErrorKind.BAD_IF_STATEMENT)
        return ast.IfStatement(condition, tuple(body))

    def parse_print_statement(self) -> ast.PrintStatement:
        value = self.parse_expression()
        self._expect_bang()
        return ast.PrintStatement(value)

    # ── Expressions ──────────────────────────────────────────

    def parse_expression(self) -> ast.Expr:
        return self.parse_additive()

    def parse_additive(self) -> ast.Expr:
        left = self.parse_multiplicative()
        while self.peek() is not None and self.peek().kind in ADDITIVE_OPS:
            op = ADDITIVE_OPS[self.advance().kind]
            right = self.parse_multiplicative()
            left = ast.BinaryOperation(left, op, right)
        return left

    def parse_multiplicative(self) -> ast.Expr:
        left = self.parse_equality()
        while self.peek() is not None and self.peek().kind in MULTIPLICATIVE_OPS:
            op = MULTIPLICATIVE_OPS[self.advance().kind]
            right = self.parse_equality()
            left = ast.BinaryOperation(left, op, right)
        return left

    def parse_equality(self) -> ast.Expr:
        left = self.parse_primary()
        while self.peek() is not None and self.peek().kind in EQUALITY_OPS:
            op = EQUALITY_OPS[self.advance().kind]
            right = self.parse_primary()
            left = ast.BinaryOperation(left, op, right)
        return left

    def parse_primary(self) -> ast.Expr:
        token = self.peek()
        if token is None:
            raise ParseError(ParseErrorKind.EXPECTED_EXPRESSION)
        if token.kind is TokenKind.INTEGER:
            self.advance()
            return ast.Integer(token.value)
        if token.kind is TokenKind.IDENTIFIER:
            self.advance()
            return ast.Variable(token.value)
        if token.kind is TokenKind.OPEN_PAREN:
            self.advance()
            inner = self.parse_expression()
            self._expect(TokenKind.CLOSE_PAREN, ParseErrorKind.EXPECTED_CLOSING_PARENTHESIS)
            return ast.ParenthesisExpression(inner)
        raise ParseError(ParseErrorKind.UNEXPECTED_TOKEN, token.position, token_kind=token.kind)


def parse(tokens: Sequence[Token]) -> ast.Program:
    return Parser(tokens).parse_program()
