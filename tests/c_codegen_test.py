from __future__ import annotations

from bang import ast
from bang.c_codegen import c_identifier, compile_expression, generate
from bang.driver import compile_source


def _body(source: str) -> list[str]:
    """Generated lines between the opening of main and its return."""
    lines = compile_source(source).split("\n")
    start = lines.index("int main(void) {") + 1
    end = lines.index("    return 0;")
    return lines[start:end]


def test_full_translation_unit() -> None:
    assert compile_source("var x = 2 + 3 * 4! print x!") == (
        "#include <stdlib.h>\n"
        "#include <stdio.h>\n"
        "\n"
        "int main(void) {\n"
        "    long long x = 2 + 3 * 4;\n"
        '    printf("%lld\\n", (long long)(x));\n'
        "    return 0;\n"
        "}\n"
    )


def test_empty_program_is_still_complete() -> None:
    assert generate(ast.Program(())) == (
        "#include <stdlib.h>\n#include <stdio.h>\n\nint main(void) {\n    return 0;\n}\n"
    )


def test_assignment_loop_and_break() -> None:
    assert _body("var i = 0! loop { i = i + 1! if (i == 3) { break! } }") == [
        "    long long i = 0;",
        "    while (1) {",
        "        i = i + 1;",
        "        if (i == 3) {",
        "            break;",
        "        }",
        "    }",
    ]


def test_not_equal_is_written_in_c_spelling() -> None:
    assert _body("var a = 1! if (a ;= 2) { print a! }") == [
        "    long long a = 1;",
        "    if (a != 2) {",
        '        printf("%lld\\n", (long long)(a));',
        "    }",
    ]


def test_explicit_parentheses_are_not_doubled() -> None:
    assert _body("var a = 1! print(a)!") == [
        "    long long a = 1;",
        '    printf("%lld\\n", (long long)(a));',
    ]


def test_equality_under_arithmetic_gets_parentheses() -> None:
    assert _body("print 1 + 2 == 2!") == ['    printf("%lld\\n", (long long)(1 + (2 == 2)));']


def test_compile_expression_keeps_tree_shape() -> None:
    a, b, c = ast.Variable("a"), ast.Variable("b"), ast.Variable("c")
    mul = ast.BinaryOperator.MULTIPLY
    sub = ast.BinaryOperator.SUBTRACT
    eq = ast.BinaryOperator.EQUAL
    assert compile_expression(ast.BinaryOperation(a, mul, ast.BinaryOperation(b, eq, c))) == "a * (b == c)"
    assert compile_expression(ast.BinaryOperation(ast.BinaryOperation(a, sub, b), sub, c)) == "a - b - c"
    assert compile_expression(ast.BinaryOperation(a, sub, ast.BinaryOperation(b, sub, c))) == "a - (b - c)"
    assert compile_expression(ast.ParenthesisExpression(ast.BinaryOperation(a, sub, b))) == "(a - b)"


def test_shadowing_initializer_goes_through_temporary() -> None:
    """`long long x = x + 1;` would read the new, uninitialized `x` in C."""
    assert _body("var x = 1! if (1) { var x = x + 1! print x! }") == [
        "    long long x = 1;",
        "    if (1) {",
        "        long long _bang_tmp0 = x + 1;",
        "        long long x = _bang_tmp0;",
        '        printf("%lld\\n", (long long)(x));',
        "    }",
    ]


def test_format_program_indents_nested_bodies() -> None:
    program = ast.Program(
        (
            ast.VariableDeclaration("x", ast.Integer(5)),
            ast.LoopStatement((ast.IfStatement(ast.Integer(1), (ast.BreakStatement(),)),)),
        )
    )
    assert ast.format_program(program) == (
        "VariableDeclaration(name='x', value=Integer(value=5))\n"
        "Loop:\n"
        "    If:\n"
        "        Integer(value=1)\n"
        "    Then:\n"
        "        BreakStatement()"
    )


def test_c_reserved_names_are_renamed_consistently() -> None:
    assert _body("var int = 1! var int_ = 2! int = int_! print int + int_!") == [
        "    long long int_ = 1;",
        "    long long int__ = 2;",
        "    int_ = int__;",
        '    printf("%lld\\n", (long long)(int_ + int__));',
    ]


def test_c_identifier_leaves_ordinary_names_alone() -> None:
    assert c_identifier("count") == "count"
    assert c_identifier("EOF") == "EOF_"
    assert c_identifier("printf") == "printf_"
    assert c_identifier("main") == "main_"
    assert c_identifier("x_") == "x__"
