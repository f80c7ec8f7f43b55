from __future__ import annotations

from typing import Callable, Iterable

from ..ast import BlockStatement, Node, Program, Statement
from ..types import NULL, Frame, MonkeReturn, MonkeValue
from .helpers import is_signal

EvalFunc = Callable[[Node, Frame], MonkeValue]

def eval_program(n: Program, frame: Frame, eval_func: EvalFunc) -> MonkeValue:
    """Run top-level statements, returning the last value.

    A `return` at top level ends the program with its unwrapped value.
    """
    result = eval_statements(n.statements, frame, eval_func)

    if isinstance(result, MonkeReturn):
        return result.value

    return result

def eval_block(n: BlockStatement, frame: Frame, eval_func: EvalFunc) -> MonkeValue:
    """Run a block in the current frame. Return/error signals are relayed still wrapped."""
    return eval_statements(n.statements, frame, eval_func)

def eval_statements(stmts: Iterable[Statement], frame: Frame, eval_func: EvalFunc) -> MonkeValue:
    result: MonkeValue = NULL

    for stmt in stmts:
        result = eval_func(stmt, frame)

        if is_signal(result):
            return result

    return result
