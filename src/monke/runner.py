from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional, Tuple

from .ast import LetStatement, Program, to_tree
from .evaluator import eval_program
from .lexer import Lexer
from .parser import ParseError, parse_program
from .types import Frame, MonkeError, MonkeValue
from .utils import (
    debug_ast_enabled,
    debug_py_trace_enabled,
    format_parse_errors,
    recursion_limit,
    stringify,
)

def parse(src: str) -> Program:
    """Lex and parse source text, raising ParseError if the parser reported anything."""
    program, errors = parse_program(Lexer(src))

    if errors:
        raise ParseError(errors)

    if debug_ast_enabled():
        with recursion_limit():
            print(to_tree(program).pretty(), file=sys.stderr)

    return program

def run(src: str, frame: Optional[Frame]=None) -> MonkeValue:
    return eval_program(parse(src), frame)

def repl_eval(src: str, frame: Frame) -> Tuple[MonkeValue, bool]:
    """Evaluate one REPL input in the session frame.

    Returns the value plus whether the input ended in a `let` statement, which
    the REPL does not echo.
    """
    program = parse(src)
    result = eval_program(program, frame)
    is_stmt = bool(program.statements) and isinstance(program.statements[-1], LetStatement)
    return result, is_stmt

def _load_source(arg: Optional[str]) -> str:
    """
    Resolve CLI input into source text.
    - None or "-" => read stdin.
    - Existing path => read file contents.
    - Otherwise treat the argument as literal source.
    """

    if arg is None or arg == "-":
        data = sys.stdin.read()
        if not data:
            raise SystemExit("No input provided on stdin")
        return data

    candidate = Path(arg)
    if candidate.is_file():
        return candidate.read_text(encoding="utf-8")

    return arg

def main(argv: Optional[list[str]]=None) -> int:
    show_ast = False
    start_repl = False
    arg = None

    for token in (sys.argv[1:] if argv is None else argv):
        if token == "--ast":
            show_ast = True
            continue

        if token == "--repl":
            start_repl = True
            continue

        if arg is None:
            arg = token
        else:
            raise SystemExit(f"Unexpected argument: {token}")

    if start_repl:
        from .repl import repl  # prompt_toolkit is only needed interactively
        repl()
        return 0

    source = _load_source(arg)

    try:
        program = parse(source)
    except ParseError as exc:
        print(format_parse_errors(exc.errors))
        return 1

    if show_ast:
        with recursion_limit():
            print(to_tree(program).pretty(), end="")
        return 0

    try:
        result = eval_program(program, Frame())
    except Exception as exc:
        if debug_py_trace_enabled():
            raise
        print(f"internal error: {type(exc).__name__}: {exc}", file=sys.stderr)
        return 2

    print(stringify(result))
    return 1 if isinstance(result, MonkeError) else 0

if __name__ == "__main__":
    sys.exit(main())
