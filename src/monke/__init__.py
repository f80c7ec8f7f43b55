"""Monke: a Pratt parser and tree-walking interpreter for a small expression language."""

from .evaluator import eval_program
from .parser import ParseError, parse_program, parse_source
from .runner import run
from .types import Frame

__all__ = [
    "Frame",
    "ParseError",
    "eval_program",
    "parse_program",
    "parse_source",
    "run",
]
