from __future__ import annotations

import os as _os
import sys as _sys
from contextlib import contextmanager
from typing import Iterator, List

from .types import MonkeValue

_TRUTHY_FLAGS = {"1", "true", "yes", "on"}

DEBUG_AST_ENV = "MONKE_DEBUG_AST"
DEBUG_PY_TRACE_ENV = "MONKE_DEBUG_PY_TRACE"

# Host stack budget for parsing and evaluation; each Monke call costs several frames.
RECURSION_LIMIT = 10_000


def env_flag(name: str) -> bool:
    """Read an on/off switch from the environment."""
    return _os.environ.get(name, "").strip().lower() in _TRUTHY_FLAGS


def debug_ast_enabled() -> bool:
    return env_flag(DEBUG_AST_ENV)


def debug_py_trace_enabled() -> bool:
    return env_flag(DEBUG_PY_TRACE_ENV)


def set_env_flag(name: str, enabled: bool) -> None:
    if enabled:
        _os.environ[name] = "1"
    else:
        _os.environ.pop(name, None)


def stringify(value: MonkeValue) -> str:
    """Display form of a value, as echoed by the REPL and CLI."""
    return value.inspect()


def format_parse_errors(errors: List[str]) -> str:
    lines = ["You wrote some really bad code!", " parser errors:"]
    lines.extend(f"\t{msg}" for msg in errors)
    return "\n".join(lines)


@contextmanager
def recursion_limit(limit: int = RECURSION_LIMIT) -> Iterator[None]:
    """Raise the interpreter recursion limit to at least *limit* for the block."""
    old = _sys.getrecursionlimit()
    _sys.setrecursionlimit(max(old, limit))
    try:
        yield
    finally:
        _sys.setrecursionlimit(old)
