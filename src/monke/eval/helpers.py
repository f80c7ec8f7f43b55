from __future__ import annotations

from ..types import FALSE, NULL, MonkeError, MonkeInteger, MonkeReturn, MonkeValue

def is_truthy(val: MonkeValue) -> bool:
    """false, null and integer zero are falsy; every other value is truthy."""
    if val is FALSE or val is NULL:
        return False

    match val:
        case MonkeInteger(value=num):
            return num != 0
        case _:
            return True

def is_signal(val: MonkeValue) -> bool:
    """True for the values that must halt a block and travel upward untouched."""
    return isinstance(val, (MonkeReturn, MonkeError))

def new_error(message: str) -> MonkeError:
    return MonkeError(message)
