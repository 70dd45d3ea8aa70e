from __future__ import annotations

from dataclasses import dataclass

from . import ast


@dataclass(frozen=True)
class Type:
    c_name: str
    bits: int


# The language has exactly one runtime type; comparisons yield 0 or 1 of it.
I64 = Type(c_name="long long", bits=64)

C_PRINT_FORMAT = "%lld\\n"


def infer_type(expr: ast.Expr) -> Type:
    if isinstance(expr, (ast.Integer, ast.Variable, ast.BinaryOperation, ast.ParenthesisExpression)):
        return I64
    raise TypeError(f"Unsupported expression {expr!r}")
