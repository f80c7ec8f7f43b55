from __future__ import annotations

from typing import Callable

from ..ast import InfixExpression, Node, PrefixExpression
from ..types import (
    FALSE,
    NULL,
    TRUE,
    Frame,
    MonkeBool,
    MonkeInteger,
    MonkeValue,
    native_bool,
    wrap_int64,
)
from .helpers import is_signal, is_truthy, new_error

EvalFunc = Callable[[Node, Frame], MonkeValue]

def eval_prefix(n: PrefixExpression, frame: Frame, eval_func: EvalFunc) -> MonkeValue:
    right = eval_func(n.right, frame)

    if is_signal(right):
        return right

    return apply_prefix_operator(n.operator, right)

def apply_prefix_operator(op: str, right: MonkeValue) -> MonkeValue:
    match op:
        case '!':
            return _eval_bang(right)
        case '-':
            if not isinstance(right, MonkeInteger):
                return new_error(f"unknown operator: -{right.type_name()}")
            return MonkeInteger(wrap_int64(-right.value))
        case _:
            return new_error(f"unknown operator: {op}{right.type_name()}")

def _eval_bang(right: MonkeValue) -> MonkeValue:
    if right is TRUE:
        return FALSE
    if right is FALSE or right is NULL:
        return TRUE

    return native_bool(not is_truthy(right))

def eval_infix(n: InfixExpression, frame: Frame, eval_func: EvalFunc) -> MonkeValue:
    left = eval_func(n.left, frame)

    if is_signal(left):
        return left

    right = eval_func(n.right, frame)

    if is_signal(right):
        return right

    return apply_binary_operator(n.operator, left, right)

def apply_binary_operator(op: str, left: MonkeValue, right: MonkeValue) -> MonkeValue:
    match (left, right):
        case (MonkeInteger(value=lv), MonkeInteger(value=rv)):
            return _integer_infix(op, lv, rv, left, right)
        case (MonkeBool(value=lv), MonkeBool(value=rv)):
            return _boolean_infix(op, lv, rv, left, right)

    if left.type_name() != right.type_name():
        return new_error(f"type mismatch: {left.type_name()} {op} {right.type_name()}")

    return _unknown_infix(op, left, right)

def _integer_infix(op: str, lv: int, rv: int, left: MonkeValue, right: MonkeValue) -> MonkeValue:
    match op:
        case '==':
            return native_bool(lv == rv)
        case '!=':
            return native_bool(lv != rv)
        case '<':
            return native_bool(lv < rv)
        case '>':
            return native_bool(lv > rv)
        case '<=':
            return native_bool(lv <= rv)
        case '>=':
            return native_bool(lv >= rv)
        case '+':
            return MonkeInteger(wrap_int64(lv + rv))
        case '-':
            return MonkeInteger(wrap_int64(lv - rv))
        case '*':
            return MonkeInteger(wrap_int64(lv * rv))
        case '/':
            if rv == 0:
                return new_error("division by zero")
            return MonkeInteger(wrap_int64(_truncating_div(lv, rv)))
        case _:
            return _unknown_infix(op, left, right)

def _truncating_div(lv: int, rv: int) -> int:
    # Python's // floors; integer division here truncates toward zero.
    q = abs(lv) // abs(rv)
    return q if (lv < 0) == (rv < 0) else -q

def _boolean_infix(op: str, lv: bool, rv: bool, left: MonkeValue, right: MonkeValue) -> MonkeValue:
    match op:
        case '==':
            return native_bool(lv == rv)
        case '!=':
            return native_bool(lv != rv)
        case _:
            return _unknown_infix(op, left, right)

def _unknown_infix(op: str, left: MonkeValue, right: MonkeValue) -> MonkeValue:
    return new_error(f"unknown operator: {left.type_name()} {op} {right.type_name()}")
