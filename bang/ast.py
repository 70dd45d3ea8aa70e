from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import List, Tuple


class BinaryOperator(enum.Enum):
    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"
    EQUAL = "=="
    NOT_EQUAL = "!="

    @property
    def is_comparison(self) -> bool:
        return self in (BinaryOperator.EQUAL, BinaryOperator.NOT_EQUAL)


class Expr:
    pass


@dataclass(frozen=True)
class Integer(Expr):
    value: int


@dataclass(frozen=True)
class Variable(Expr):
    name: str


@dataclass(frozen=True)
class BinaryOperation(Expr):
    left: Expr
    op: BinaryOperator
    right: Expr


@dataclass(frozen=True)
class ParenthesisExpression(Expr):
    inner: Expr


class Stmt:
    pass


@dataclass(frozen=True)
class VariableDeclaration(Stmt):
    name: str
    value: Expr


@dataclass(frozen=True)
class Assignment(Stmt):
    name: str
    value: Expr


@dataclass(frozen=True)
class IfStatement(Stmt):
    condition: Expr
    body: Tuple[Stmt, ...]


@dataclass(frozen=True)
class LoopStatement(Stmt):
    body: Tuple[Stmt, ...]


@dataclass(frozen=True)
class BreakStatement(Stmt):
    pass


@dataclass(frozen=True)
class PrintStatement(Stmt):
    value: Expr


@dataclass(frozen=True)
class Program:
    statements: Tuple[Stmt, ...]


INDENT = "    "


def format_program(program: Program) -> str:
    """Readable indented dump of the tree, one statement per line."""
    lines: List[str] = []
    for stmt in program.statements:
        _format_stmt(stmt, 0, lines)
    return "\n".join(lines)


def _format_stmt(stmt: Stmt, depth: int, lines: List[str]) -> None:
    if isinstance(stmt, LoopStatement):
        lines.append(INDENT * depth + "Loop:")
        for inner in stmt.body:
            _format_stmt(inner, depth + 1, lines)
        return
    if isinstance(stmt, IfStatement):
        lines.append(INDENT * depth + "If:")
        lines.append(INDENT * (depth + 1) + repr(stmt.condition))
        lines.append(INDENT * depth + "Then:")
        for inner in stmt.body:
            _format_stmt(inner, depth + 1, lines)
        return
    lines.append(INDENT * depth + repr(stmt))
