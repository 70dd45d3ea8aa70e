from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Set

from . import ast
from .errors import SemanticError, SemanticErrorKind


class Scope:
    def __init__(self, parent: Optional[Scope] = None) -> None:
        self.parent = parent
        self.names: Set[str] = set()

    def ensure_undeclared(self, name: str) -> None:
        if name in self.names:
            raise SemanticError(SemanticErrorKind.VARIABLE_ALREADY_DECLARED, name)

    def define(self, name: str) -> None:
        self.ensure_undeclared(name)
        self.names.add(name)

    def lookup(self, name: str) -> None:
        if name in self.names:
            return
        if self.parent:
            self.parent.lookup(name)
            return
        raise SemanticError(SemanticErrorKind.UNKNOWN_VARIABLE, name)

    def child(self) -> Scope:
        return Scope(parent=self)


@dataclass(frozen=True)
class BlockContext:
    scope: Scope
    inside_loop: bool


class Checker:
    """Declaration-before-use, one declaration per block, and ``break`` only inside ``loop``.

    Every nested body gets a fresh child scope, so names declared inside an
    ``if`` or ``loop`` body are invisible to the statements after it.
    """

    def check(self, program: ast.Program) -> None:
        ctx = BlockContext(scope=Scope(), inside_loop=False)
        self._check_block(program.statements, ctx)

    def _check_block(self, statements: Sequence[ast.Stmt], ctx: BlockContext) -> None:
        for stmt in statements:
            self._check_stmt(stmt, ctx)

    def _check_stmt(self, stmt: ast.Stmt, ctx: BlockContext) -> None:
        if isinstance(stmt, ast.VariableDeclaration):
            ctx.scope.ensure_undeclared(stmt.name)
            self._check_expr(stmt.value, ctx.scope)
            ctx.scope.define(stmt.name)
            return
        if isinstance(stmt, ast.Assignment):
            ctx.scope.lookup(stmt.name)
            self._check_expr(stmt.value, ctx.scope)
            return
        if isinstance(stmt, ast.IfStatement):
            self._check_expr(stmt.condition, ctx.scope)
            inner = BlockContext(scope=ctx.scope.child(), inside_loop=ctx.inside_loop)
            self._check_block(stmt.body, inner)
            return
        if isinstance(stmt, ast.LoopStatement):
            inner = BlockContext(scope=ctx.scope.child(), inside_loop=True)
            self._check_block(stmt.body, inner)
            return
        if isinstance(stmt, ast.BreakStatement):
            if not ctx.inside_loop:
                raise SemanticError(SemanticErrorKind.BREAK_OUTSIDE_LOOP)
            return
        if isinstance(stmt, ast.PrintStatement):
            self._check_expr(stmt.value, ctx.scope)
            return
        raise TypeError(f"Unsupported statement {stmt!r}")

    def _check_expr(self, expr: ast.Expr, scope: Scope) -> None:
        if isinstance(expr, ast.Integer):
            return
        if isinstance(expr, ast.Variable):
            scope.lookup(expr.name)
            return
        if isinstance(expr, ast.BinaryOperation):
            self._check_expr(expr.left, scope)
            self._check_expr(expr.right, scope)
            return
        if isinstance(expr, ast.ParenthesisExpression):
            self._check_expr(expr.inner, scope)
            return
        raise TypeError(f"Unsupported expression {expr!r}")


def check(program: ast.Program) -> None:
    Checker().check(program)
