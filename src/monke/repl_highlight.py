"""prompt_toolkit lexer for live Monke syntax highlighting in the REPL."""

from __future__ import annotations

from typing import Callable

from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.lexers import Lexer

from .lexer import tokenize
from .token_types import TT, Tok

# Map highlight groups → prompt_toolkit style strings.
GROUP_STYLE = {
    "keyword": "bold ansicyan",
    "boolean": "ansicyan",
    "number": "ansimagenta",
    "identifier": "",
    "function": "bold ansiyellow",
    "operator": "",
    "punctuation": "",
    "error": "bold ansired",
}

# Token type → highlight group.
_TT_GROUP = {
    TT.FUNCTION: "keyword",
    TT.LET: "keyword",
    TT.IF: "keyword",
    TT.ELSE: "keyword",
    TT.RETURN: "keyword",
    TT.TRUE: "boolean",
    TT.FALSE: "boolean",
    TT.INT: "number",
    TT.IDENT: "identifier",
    TT.ASSIGN: "operator",
    TT.PLUS: "operator",
    TT.MINUS: "operator",
    TT.STAR: "operator",
    TT.SLASH: "operator",
    TT.NEG: "operator",
    TT.LT: "operator",
    TT.GT: "operator",
    TT.EQ: "operator",
    TT.NEQ: "operator",
    TT.LTE: "operator",
    TT.GTE: "operator",
    TT.COMMA: "punctuation",
    TT.SEMI: "punctuation",
    TT.LPAR: "punctuation",
    TT.RPAR: "punctuation",
    TT.LBRACE: "punctuation",
    TT.RBRACE: "punctuation",
    TT.ILLEGAL: "error",
}


def _token_group(tokens: list[Tok], idx: int) -> str:
    tok = tokens[idx]
    group = _TT_GROUP[tok.type]

    # Identifier in call position.
    if tok.type == TT.IDENT and idx + 1 < len(tokens) and tokens[idx + 1].type == TT.LPAR:
        return "function"

    return group


def highlight_line(text: str) -> StyleAndTextTuples:
    """Style one line of input.

    Tokens never span lines, so a token's column locates it in *text*;
    whatever lies between tokens is whitespace and stays unstyled.
    """
    tokens = tokenize(text)
    fragments: StyleAndTextTuples = []
    end = 0

    for i, tok in enumerate(tokens[:-1]):
        start = tok.column - 1
        fragments.append(("", text[end:start]))
        fragments.append((GROUP_STYLE[_token_group(tokens, i)], tok.value))
        end = start + len(tok.value)

    fragments.append(("", text[end:]))
    return [frag for frag in fragments if frag[1]] or [("", "")]


class MonkeLexer(Lexer):
    """prompt_toolkit Lexer that highlights Monke source line by line."""

    def lex_document(self, document: Document) -> Callable[[int], StyleAndTextTuples]:
        styled = [highlight_line(line) for line in document.lines]

        def get_line(lineno: int) -> StyleAndTextTuples:
            if 0 <= lineno < len(styled):
                return styled[lineno]
            return [("", "")]

        return get_line
