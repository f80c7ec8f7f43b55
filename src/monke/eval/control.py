from __future__ import annotations

from typing import Callable

from ..ast import IfExpression, LetStatement, Node, ReturnStatement
from ..types import NULL, Frame, MonkeReturn, MonkeValue
from .blocks import eval_block
from .helpers import is_signal, is_truthy

EvalFunc = Callable[[Node, Frame], MonkeValue]

def eval_if(n: IfExpression, frame: Frame, eval_func: EvalFunc) -> MonkeValue:
    pred = eval_func(n.predicate, frame)

    if is_signal(pred):
        return pred
    if pred is NULL:
        return NULL

    if is_truthy(pred):
        return eval_block(n.consequence, frame, eval_func)

    if n.alternative is None:
        return NULL

    return eval_block(n.alternative, frame, eval_func)

def eval_return_stmt(n: ReturnStatement, frame: Frame, eval_func: EvalFunc) -> MonkeValue:
    if n.return_value is None:
        return MonkeReturn(NULL)

    val = eval_func(n.return_value, frame)

    if is_signal(val):
        return val

    return MonkeReturn(val)

def eval_let_stmt(n: LetStatement, frame: Frame, eval_func: EvalFunc) -> MonkeValue:
    """Bind in the current frame; the statement itself evaluates to null."""
    val = eval_func(n.value, frame)

    if is_signal(val):
        return val

    frame.define(n.name.value, val)
    return NULL
