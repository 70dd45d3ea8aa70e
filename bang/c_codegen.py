"""
AST -> C source.

The generator runs after the checker and has no failure mode of its own. The
statement body is wrapped in a fixed prologue/epilogue so the result is a
complete translation unit for any C99 compiler.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence

from . import ast
from .types import C_PRINT_FORMAT, infer_type

PROLOGUE = ["#include <stdlib.h>", "#include <stdio.h>", "", "int main(void) {"]
INDENT = "    "
EPILOGUE = [INDENT + "return 0;", "}", ""]

# Binding strength in C (higher binds tighter).
_C_STRENGTH = {
    ast.BinaryOperator.MULTIPLY: 3,
    ast.BinaryOperator.DIVIDE: 3,
    ast.BinaryOperator.ADD: 2,
    ast.BinaryOperator.SUBTRACT: 2,
    ast.BinaryOperator.EQUAL: 1,
    ast.BinaryOperator.NOT_EQUAL: 1,
}


# Identifiers a bang name cannot take over in the generated unit: C keywords
# through C23, everything <stdio.h> and <stdlib.h> declare (plus the object-like
# macros glibc adds outside strict mode), and main.
C_RESERVED_NAMES = frozenset(
    """
    auto break case char const continue default do double else enum extern float for goto if
    inline int long register restrict return short signed sizeof static struct switch typedef
    union unsigned void volatile while alignas alignof bool constexpr false nullptr
    static_assert thread_local true typeof typeof_unqual

    BUFSIZ EOF FILENAME_MAX FOPEN_MAX L_tmpnam NULL SEEK_CUR SEEK_END SEEK_SET TMP_MAX
    FILE fpos_t size_t stdin stdout stderr va_list
    clearerr fclose feof ferror fflush fgetc fgetpos fgets fopen fprintf fputc fputs fread
    freopen fscanf fseek fsetpos ftell fwrite getc getchar gets perror printf putc putchar
    puts remove rename rewind scanf setbuf setvbuf snprintf sprintf sscanf tmpfile tmpnam
    ungetc vfprintf vfscanf vprintf vscanf vsnprintf vsprintf vsscanf

    EXIT_FAILURE EXIT_SUCCESS MB_CUR_MAX RAND_MAX
    div_t ldiv_t lldiv_t wchar_t
    abort abs aligned_alloc atexit atof atoi atol atoll at_quick_exit bsearch calloc div exit
    free getenv labs ldiv llabs lldiv malloc mblen mbstowcs mbtowc qsort quick_exit rand
    realloc srand strtod strtof strtol strtold strtoll strtoul strtoull system wcstombs wctomb

    L_ctermid P_tmpdir WCONTINUED WEXITED WNOHANG WNOWAIT WSTOPPED WUNTRACED

    main
    """.split()
)


def c_identifier(name: str) -> str:
    """C spelling of a bang identifier.

    Reserved names and names already ending in ``_`` get one more ``_``, which
    keeps the mapping one-to-one (``int`` -> ``int_``, ``int_`` -> ``int__``).
    """
    if name in C_RESERVED_NAMES or name.endswith("_"):
        return name + "_"
    return name


def generate(program: ast.Program) -> str:
    builder = _CBuilder()
    builder.emit_block(program.statements)
    return builder.render()


def compile_expression(expr: ast.Expr) -> str:
    if isinstance(expr, ast.Integer):
        return str(expr.value)
    if isinstance(expr, ast.Variable):
        return c_identifier(expr.name)
    if isinstance(expr, ast.ParenthesisExpression):
        return f"({compile_expression(expr.inner)})"
    if isinstance(expr, ast.BinaryOperation):
        left = _operand(expr.left, expr.op, right_side=False)
        right = _operand(expr.right, expr.op, right_side=True)
        return f"{left} {expr.op.value} {right}"
    raise TypeError(f"Unsupported expression {expr!r}")


def _operand(expr: ast.Expr, parent: ast.BinaryOperator, right_side: bool) -> str:
    text = compile_expression(expr)
    if not isinstance(expr, ast.BinaryOperation):
        return text
    child, outer = _C_STRENGTH[expr.op], _C_STRENGTH[parent]
    # Only where C would regroup the tree; parser output needs this just for
    # equality nested under arithmetic.
    if child < outer or (right_side and child == outer):
        return f"({text})"
    return text


def _mentions(expr: ast.Expr, name: str) -> bool:
    if isinstance(expr, ast.Variable):
        return expr.name == name
    if isinstance(expr, ast.BinaryOperation):
        return _mentions(expr.left, name) or _mentions(expr.right, name)
    if isinstance(expr, ast.ParenthesisExpression):
        return _mentions(expr.inner, name)
    return False


@dataclass
class _CBuilder:
    lines: List[str] = field(default_factory=list)
    depth: int = 1
    temp_counter: int = 0

    def render(self) -> str:
        return "\n".join(PROLOGUE + self.lines + EPILOGUE)

    def _line(self, text: str) -> None:
        self.lines.append(INDENT * self.depth + text)

    def emit_block(self, statements: Sequence[ast.Stmt]) -> None:
        for stmt in statements:
            self.emit_stmt(stmt)

    def _emit_nested(self, header: str, body: Sequence[ast.Stmt]) -> None:
        self._line(header + " {")
        self.depth += 1
        self.emit_block(body)
        self.depth -= 1
        self._line("}")

    def emit_stmt(self, stmt: ast.Stmt) -> None:
        if isinstance(stmt, ast.VariableDeclaration):
            c_type = infer_type(stmt.value).c_name
            value = compile_expression(stmt.value)
            if _mentions(stmt.value, stmt.name):
                # The C declarator is in scope inside its own initializer, so
                # read the shadowed outer variable through a temporary first.
                temp = f"_bang_tmp{self.temp_counter}"
                self.temp_counter += 1
                self._line(f"{c_type} {temp} = {value};")
                value = temp
            self._line(f"{c_type} {c_identifier(stmt.name)} = {value};")
            return
        if isinstance(stmt, ast.Assignment):
            self._line(f"{c_identifier(stmt.name)} = {compile_expression(stmt.value)};")
            return
        if isinstance(stmt, ast.LoopStatement):
            self._emit_nested("while (1)", stmt.body)
            return
        if isinstance(stmt, ast.IfStatement):
            self._emit_nested(f"if ({compile_expression(stmt.condition)})", stmt.body)
            return
        if isinstance(stmt, ast.PrintStatement):
            # literals and comparisons are plain int in C; %lld needs a long long
            value = compile_expression(stmt.value)
            if not isinstance(stmt.value, ast.ParenthesisExpression):
                value = f"({value})"
            c_type = infer_type(stmt.value).c_name
            self._line(f'printf("{C_PRINT_FORMAT}", ({c_type}){value});')
            return
        if isinstance(stmt, ast.BreakStatement):
            self._line("break;")
            return
        raise TypeError(f"Unsupported statement {stmt!r}")
