"""AST-to-LLVM lowering and in-process execution (native backend).

Mirrors the C generator's semantics: every value is an i64, comparisons
produce 0/1, `/` is signed division truncating toward zero, and a condition
holds when non-zero. Variables live in entry-block allocas; a nested body
sees a copy of the enclosing name map, so its declarations shadow outer ones
only until the body ends.
"""

from __future__ import annotations

import ctypes
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, TextIO

from llvmlite import ir, binding as llvm  # type: ignore

from . import ast
from .errors import CodegenError
from .runtime import PRINT_SYMBOL, RuntimeContext, callback_address
from .types import I64

_log = logging.getLogger(__name__)

I64_TY = ir.IntType(I64.bits)
I32_TY = ir.IntType(32)
VOID_TY = ir.VoidType()


def lower_program(program: ast.Program) -> ir.Module:
    mod = ir.Module(name="bang_main")
    print_fn = ir.Function(mod, ir.FunctionType(VOID_TY, [I64_TY]), name=PRINT_SYMBOL)
    main_fn = ir.Function(mod, ir.FunctionType(I32_TY, []), name="main")
    entry_bb = main_fn.append_basic_block("entry")
    body_bb = main_fn.append_basic_block("body")

    lowering = _FuncBuilder(
        function=main_fn,
        print_fn=print_fn,
        allocas=ir.IRBuilder(entry_bb),
        builder=ir.IRBuilder(body_bb),
    )
    lowering.lower_block(program.statements, {}, break_target=None)
    if not lowering.builder.block.is_terminated:
        lowering.builder.ret(I32_TY(0))
    lowering.allocas.branch(body_bb)
    return mod


def emit_llvm_ir(program: ast.Program) -> str:
    return str(lower_program(program))


def _target_machine() -> llvm.TargetMachine:
    llvm.initialize_native_target()
    llvm.initialize_native_asmprinter()
    target = llvm.Target.from_default_triple()
    return target.create_target_machine()


def run_program(program: ast.Program, stdout: Optional[TextIO] = None) -> List[int]:
    """JIT-compile ``program`` for the host, run it, and return the printed values."""
    tm = _target_machine()
    llvm_mod = llvm.parse_assembly(emit_llvm_ir(program))
    llvm_mod.verify()

    ctx = RuntimeContext(stdout)
    callback = ctx.make_print_callback()
    llvm.add_symbol(PRINT_SYMBOL, callback_address(callback))

    engine = llvm.create_mcjit_compiler(llvm_mod, tm)
    engine.finalize_object()
    entry = ctypes.CFUNCTYPE(ctypes.c_int32)(engine.get_function_address("main"))
    _log.debug("running JIT-compiled main")
    status = entry()
    if status != 0:
        raise CodegenError(f"main returned {status}")
    _log.debug("program printed %d value(s)", len(ctx.printed))
    return ctx.printed


@dataclass
class _FuncBuilder:
    function: ir.Function
    print_fn: ir.Function
    allocas: ir.IRBuilder
    builder: ir.IRBuilder
    block_counter: int = 0

    def _new_block(self, name: str) -> ir.Block:
        self.block_counter += 1
        return self.function.append_basic_block(f"{name}{self.block_counter}")

    def lower_block(
        self,
        statements: Sequence[ast.Stmt],
        names: Dict[str, ir.AllocaInstr],
        break_target: Optional[ir.Block],
    ) -> None:
        for stmt in statements:
            if self.builder.block.is_terminated:
                # code after `break` is unreachable but must still be well formed
                self.builder.position_at_end(self._new_block("dead"))
            self._lower_stmt(stmt, names, break_target)

    def _lower_stmt(
        self,
        stmt: ast.Stmt,
        names: Dict[str, ir.AllocaInstr],
        break_target: Optional[ir.Block],
    ) -> None:
        if isinstance(stmt, ast.VariableDeclaration):
            # evaluate before binding so the initializer sees the outer name
            value = self._lower_expr(stmt.value, names)
            slot = self.allocas.alloca(I64_TY, name=stmt.name)
            self.builder.store(value, slot)
            names[stmt.name] = slot
            return
        if isinstance(stmt, ast.Assignment):
            value = self._lower_expr(stmt.value, names)
            self.builder.store(value, self._slot(stmt.name, names))
            return
        if isinstance(stmt, ast.PrintStatement):
            value = self._lower_expr(stmt.value, names)
            self.builder.call(self.print_fn, [value])
            return
        if isinstance(stmt, ast.BreakStatement):
            if break_target is None:
                raise CodegenError("break outside of loop")
            self.builder.branch(break_target)
            return
        if isinstance(stmt, ast.LoopStatement):
            loop_bb = self._new_block("loop")
            exit_bb = self._new_block("loop.end")
            self.builder.branch(loop_bb)
            self.builder.position_at_end(loop_bb)
            self.lower_block(stmt.body, dict(names), break_target=exit_bb)
            if not self.builder.block.is_terminated:
                self.builder.branch(loop_bb)
            self.builder.position_at_end(exit_bb)
            return
        if isinstance(stmt, ast.IfStatement):
            cond = self._lower_expr(stmt.condition, names)
            truth = self.builder.icmp_signed("!=", cond, I64_TY(0))
            then_bb = self._new_block("if.then")
            end_bb = self._new_block("if.end")
            self.builder.cbranch(truth, then_bb, end_bb)
            self.builder.position_at_end(then_bb)
            self.lower_block(stmt.body, dict(names), break_target=break_target)
            if not self.builder.block.is_terminated:
                self.builder.branch(end_bb)
            self.builder.position_at_end(end_bb)
            return
        raise CodegenError(f"unsupported statement {stmt!r}")

    def _slot(self, name: str, names: Dict[str, ir.AllocaInstr]) -> ir.AllocaInstr:
        slot = names.get(name)
        if slot is None:
            raise CodegenError(f"unknown variable {name}")
        return slot

    def _lower_expr(self, expr: ast.Expr, names: Dict[str, ir.AllocaInstr]) -> ir.Value:
        if isinstance(expr, ast.Integer):
            return I64_TY(expr.value)
        if isinstance(expr, ast.Variable):
            return self.builder.load(self._slot(expr.name, names))
        if isinstance(expr, ast.ParenthesisExpression):
            return self._lower_expr(expr.inner, names)
        if isinstance(expr, ast.BinaryOperation):
            lhs = self._lower_expr(expr.left, names)
            rhs = self._lower_expr(expr.right, names)
            op = expr.op
            if op.is_comparison:
                cmp = self.builder.icmp_signed(op.value, lhs, rhs)
                return self.builder.zext(cmp, I64_TY)
            if op is ast.BinaryOperator.ADD:
                return self.builder.add(lhs, rhs)
            if op is ast.BinaryOperator.SUBTRACT:
                return self.builder.sub(lhs, rhs)
            if op is ast.BinaryOperator.MULTIPLY:
                return self.builder.mul(lhs, rhs)
            return self.builder.sdiv(lhs, rhs)
        raise CodegenError(f"unsupported expression {expr!r}")
