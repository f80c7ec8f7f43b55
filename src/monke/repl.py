"""Interactive REPL for Monke, powered by prompt_toolkit."""

from __future__ import annotations

import re
import sys
from typing import Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.shortcuts import clear

from .lexer import tokenize
from .parser import ParseError
from .repl_highlight import MonkeLexer
from .runner import repl_eval
from .token_types import TT
from .types import Frame
from .utils import DEBUG_AST_ENV, debug_ast_enabled, format_parse_errors, set_env_flag, stringify

PROMPT = ">> "

# Zero-width and invisible characters to strip from input.
_INVISIBLE_RE = re.compile("[\u200b\u200c\u200d\ufeff\u00a0\r]")

# Slash commands: name => (description, argument_hint).
_SLASH_CMDS = {
    "/clear": ("Clear the terminal screen", ""),
    "/reset": ("Reset the REPL environment", ""),
    "/ast": ("Toggle printing the parse tree before evaluation", "[on|off]"),
    "/env": ("List the bindings in the session environment", ""),
}

_DEPTH_OPEN = {TT.LPAR, TT.LBRACE}
_DEPTH_CLOSE = {TT.RPAR, TT.RBRACE}


def _needs_continuation(text: str) -> bool:
    """Return True while *text* has unclosed parentheses or braces."""
    depth = 0

    for tok in tokenize(text):
        if tok.type in _DEPTH_OPEN:
            depth += 1
        elif tok.type in _DEPTH_CLOSE:
            depth = max(depth - 1, 0)

    return depth > 0


class _SlashCompleter(Completer):
    """Autocomplete slash commands on the primary prompt."""

    def get_completions(self, document, complete_event):
        text = document.text_before_cursor
        if not text.startswith("/"):
            return

        for cmd, (desc, hint) in _SLASH_CMDS.items():
            if cmd.startswith(text):
                yield Completion(
                    cmd,
                    start_position=-len(text),
                    display_meta=desc,
                )


def _handle_slash(line: str, frame_box: list[Frame]) -> bool:
    """Handle slash commands. Returns True if the line was a command."""
    stripped = line.strip()
    if not stripped.startswith("/"):
        return False

    parts = stripped.split(None, 1)
    cmd = parts[0]
    arg = parts[1] if len(parts) > 1 else ""

    if cmd == "/clear":
        clear()
        return True

    if cmd == "/ast":
        if arg.lower() in ("on", "1", "true", "yes"):
            set_env_flag(DEBUG_AST_ENV, True)
        elif arg.lower() in ("off", "0", "false", "no"):
            set_env_flag(DEBUG_AST_ENV, False)
        elif arg == "":
            set_env_flag(DEBUG_AST_ENV, not debug_ast_enabled())
        else:
            print("Usage: /ast [on|off]", file=sys.stderr)
            return True

        state = "on" if debug_ast_enabled() else "off"
        print(f"Parse tree: {state}")
        return True

    if cmd == "/reset":
        frame_box[0] = Frame()
        print("Environment reset.")
        return True

    if cmd == "/env":
        frame = frame_box[0]
        for name in frame.names():
            print(f"{name} = {stringify(frame.get(name))}")
        return True

    print(f"Unknown command: {cmd}", file=sys.stderr)
    return True


def _normalize(text: str) -> str:
    """Strip invisible characters from input."""
    return _INVISIBLE_RE.sub("", text)


def eval_line(text: str, frame: Frame) -> Optional[str]:
    """Evaluate one input and return what the REPL should print, if anything."""
    try:
        result, stmt = repl_eval(text, frame)
    except ParseError as exc:
        return format_parse_errors(exc.errors)

    if stmt:
        return None

    return stringify(result)


def repl() -> None:
    """Interactive read-eval-print loop with prompt_toolkit."""
    # Use a mutable box so /reset can swap the frame.
    frame_box: list[Frame] = [Frame()]

    history = InMemoryHistory()
    bindings = KeyBindings()

    @bindings.add("enter")
    def _enter(event):
        buf = event.app.current_buffer

        if _needs_continuation(buf.text):
            buf.insert_text("\n")
            return

        buf.validate_and_handle()

    session: PromptSession[str] = PromptSession(
        history=history,
        lexer=MonkeLexer(),
        completer=_SlashCompleter(),
        complete_while_typing=True,
        key_bindings=bindings,
        multiline=True,
        prompt_continuation=".. ",
    )

    print("monke repl: Ctrl-D to exit, / for commands")

    while True:
        try:
            text = session.prompt(PROMPT)
        except EOFError:
            print()
            break
        except KeyboardInterrupt:
            print("KeyboardInterrupt")
            continue

        text = _normalize(text)
        if not text.strip():
            continue

        # Slash command?
        if _handle_slash(text, frame_box):
            continue

        out = eval_line(text, frame_box[0])
        if out is not None:
            print(out)
