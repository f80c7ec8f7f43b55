from __future__ import annotations

from typing import Callable, Optional

from .ast import (
    BlockStatement,
    BooleanLiteral,
    CallExpression,
    ExpressionStatement,
    FunctionLiteral,
    Identifier,
    IfExpression,
    InfixExpression,
    IntegerLiteral,
    LetStatement,
    Node,
    PrefixExpression,
    Program,
    ReturnStatement,
)
from .types import Frame, MonkeInteger, MonkeInternalError, MonkeValue, native_bool

from .eval.blocks import eval_block, eval_program as _eval_program
from .eval.control import eval_if, eval_let_stmt, eval_return_stmt
from .eval.expr import eval_infix, eval_prefix
from .eval.fn import eval_call, eval_fn_literal
from .eval.helpers import new_error
from .utils import recursion_limit

EvalFunc = Callable[[Node, Frame], MonkeValue]

# ---------------- Public API ----------------

def eval_program(program: Program, frame: Optional[Frame]=None) -> MonkeValue:
    """Evaluate a parsed program.

    Pass the same frame across calls to keep `let` bindings between programs
    (the REPL does this). Evaluation failures come back as MonkeError values.
    """
    if frame is None:
        frame = Frame()

    try:
        with recursion_limit():
            return eval_node(program, frame)
    except RecursionError:
        return new_error("maximum recursion depth exceeded")

# ---------------- Core evaluator ----------------

def eval_node(n: Node, frame: Frame) -> MonkeValue:
    match n:
        # statements
        case Program():
            return _eval_program(n, frame, eval_node)
        case ExpressionStatement(expression=expr):
            return eval_node(expr, frame)
        case BlockStatement():
            return eval_block(n, frame, eval_node)
        case LetStatement():
            return eval_let_stmt(n, frame, eval_node)
        case ReturnStatement():
            return eval_return_stmt(n, frame, eval_node)

        # literals
        case IntegerLiteral(value=v):
            return MonkeInteger(v)
        case BooleanLiteral(value=b):
            return native_bool(b)
        case Identifier():
            return _eval_identifier(n, frame)

        # expressions
        case PrefixExpression():
            return eval_prefix(n, frame, eval_node)
        case InfixExpression():
            return eval_infix(n, frame, eval_node)
        case IfExpression():
            return eval_if(n, frame, eval_node)
        case FunctionLiteral():
            return eval_fn_literal(n, frame)
        case CallExpression():
            return eval_call(n, frame, eval_node)
        case _:
            raise MonkeInternalError(f"Unknown node: {type(n).__name__}")

def _eval_identifier(n: Identifier, frame: Frame) -> MonkeValue:
    val = frame.get(n.value)

    if val is None:
        return new_error(f"identifier not found: {n.value}")

    return val
