from __future__ import annotations

from typing import Callable, List, Sequence

from ..ast import CallExpression, FunctionLiteral, Node
from ..types import Frame, MonkeFn, MonkeReturn, MonkeValue
from .blocks import eval_block
from .helpers import is_signal, new_error

EvalFunc = Callable[[Node, Frame], MonkeValue]

def eval_fn_literal(n: FunctionLiteral, frame: Frame) -> MonkeValue:
    # Capture the defining frame by reference; later bindings there stay visible.
    return MonkeFn(params=n.parameters, body=n.body, frame=frame)

def eval_call(n: CallExpression, frame: Frame, eval_func: EvalFunc) -> MonkeValue:
    callee = eval_func(n.function, frame)

    if is_signal(callee):
        return callee

    if not isinstance(callee, MonkeFn):
        return new_error(f"not a function: {callee.type_name()}")

    args: List[MonkeValue] = []

    for arg_node in n.arguments:
        val = eval_func(arg_node, frame)

        if is_signal(val):
            return val

        args.append(val)

    return call_fn(callee, args, eval_func)

def call_fn(fn: MonkeFn, args: Sequence[MonkeValue], eval_func: EvalFunc) -> MonkeValue:
    """Apply fn to already-evaluated arguments.

    The call frame encloses the function's captured frame, not the caller's.
    """
    if len(args) != len(fn.params):
        return new_error(f"wrong number of arguments: want={len(fn.params)}, got={len(args)}")

    callee_frame = Frame.enclosed(fn.frame)

    for param, val in zip(fn.params, args):
        callee_frame.define(param.value, val)

    result = eval_block(fn.body, callee_frame, eval_func)

    if isinstance(result, MonkeReturn):
        return result.value

    return result
