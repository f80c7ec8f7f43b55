"""
Token Types for the Monke Parser

Shared between lexer and parser to avoid circular dependencies.
"""

from dataclasses import dataclass
from enum import Enum


class TT(Enum):
    """Token Types. Values are the names shown in parse errors."""

    ILLEGAL = "ILLEGAL"
    EOF = "EOF"

    # Identifiers + literals
    IDENT = "IDENT"
    INT = "INT"

    # Keywords
    FUNCTION = "FUNCTION"
    LET = "LET"
    IF = "IF"
    ELSE = "ELSE"
    RETURN = "RETURN"
    TRUE = "TRUE"
    FALSE = "FALSE"

    # Operators
    ASSIGN = "="
    PLUS = "+"
    MINUS = "-"
    STAR = "*"
    SLASH = "/"
    NEG = "!"

    # Comparison
    LT = "<"
    GT = ">"
    EQ = "=="
    NEQ = "!="
    LTE = "<="
    GTE = ">="

    # Punctuation
    COMMA = ","
    SEMI = ";"
    LPAR = "("
    RPAR = ")"
    LBRACE = "{"
    RBRACE = "}"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Tok:
    """Token with position info"""

    type: TT
    value: str
    line: int = 0
    column: int = 0

    def __repr__(self):
        return f"Tok({self.type.name}, {self.value!r}, {self.line}:{self.column})"
