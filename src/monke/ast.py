"""AST node model for Monke.

Nodes are immutable dataclasses built bottom-up by the parser. Each node keeps
the token that introduced it (ignored by equality, so two parses of the same
text compare equal regardless of source positions) and renders to the
canonical text form through ``str()``:

    >>> str(parse_source("-a * b")[0])
    '((-a) * b)'

``to_tree`` converts any node into a ``lark.Tree`` for indented debug dumps.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple, Union

from lark import Token, Tree
from typing_extensions import TypeAlias

from .token_types import Tok


def _terminated(text: str) -> str:
    # `if` already renders its own trailing ';'.
    return text if text.endswith(";") else text + ";"


# ---------------- Expressions ----------------

@dataclass(frozen=True)
class Identifier:
    token: Tok = field(compare=False, repr=False)
    value: str

    def token_literal(self) -> str:
        return self.token.value

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class IntegerLiteral:
    token: Tok = field(compare=False, repr=False)
    value: int

    def token_literal(self) -> str:
        return self.token.value

    def __str__(self) -> str:
        return self.token.value


@dataclass(frozen=True)
class BooleanLiteral:
    token: Tok = field(compare=False, repr=False)
    value: bool

    def token_literal(self) -> str:
        return self.token.value

    def __str__(self) -> str:
        return self.token.value


@dataclass(frozen=True)
class PrefixExpression:
    token: Tok = field(compare=False, repr=False)
    operator: str
    right: Expression

    def token_literal(self) -> str:
        return self.token.value

    def __str__(self) -> str:
        return f"({self.operator}{self.right})"


@dataclass(frozen=True)
class InfixExpression:
    token: Tok = field(compare=False, repr=False)
    operator: str
    left: Expression
    right: Expression

    def token_literal(self) -> str:
        return self.token.value

    def __str__(self) -> str:
        return f"({self.left} {self.operator} {self.right})"


@dataclass(frozen=True)
class IfExpression:
    token: Tok = field(compare=False, repr=False)
    predicate: Expression
    consequence: BlockStatement
    alternative: Optional[BlockStatement] = None

    def token_literal(self) -> str:
        return self.token.value

    def __str__(self) -> str:
        out = f"if({self.predicate}){self.consequence}"

        if self.alternative is not None:
            out += f"else{self.alternative}"

        return out + ";"


@dataclass(frozen=True)
class FunctionLiteral:
    """``fn(params) { body }``; the defining scope is captured at evaluation time."""
    token: Tok = field(compare=False, repr=False)
    parameters: Tuple[Identifier, ...]
    body: BlockStatement

    def token_literal(self) -> str:
        return self.token.value

    def __str__(self) -> str:
        params = ", ".join(str(p) for p in self.parameters)
        return f"{self.token_literal()}({params}){self.body}"


@dataclass(frozen=True)
class CallExpression:
    """Application of ``function`` (an identifier or inline literal); token is the ``(``."""
    token: Tok = field(compare=False, repr=False)
    function: Expression
    arguments: Tuple[Expression, ...]

    def token_literal(self) -> str:
        return self.token.value

    def __str__(self) -> str:
        args = ", ".join(str(a) for a in self.arguments)
        return f"{self.function}({args})"


# ---------------- Statements ----------------

@dataclass(frozen=True)
class LetStatement:
    token: Tok = field(compare=False, repr=False)
    name: Identifier
    value: Expression

    def token_literal(self) -> str:
        return self.token.value

    def __str__(self) -> str:
        return _terminated(f"{self.token_literal()} {self.name} = {self.value}")


@dataclass(frozen=True)
class ReturnStatement:
    token: Tok = field(compare=False, repr=False)
    return_value: Optional[Expression] = None

    def token_literal(self) -> str:
        return self.token.value

    def __str__(self) -> str:
        if self.return_value is None:
            return f"{self.token_literal()};"
        return _terminated(f"{self.token_literal()} {self.return_value}")


@dataclass(frozen=True)
class ExpressionStatement:
    token: Tok = field(compare=False, repr=False)
    expression: Expression

    def token_literal(self) -> str:
        return self.token.value

    def __str__(self) -> str:
        return str(self.expression)


@dataclass(frozen=True)
class BlockStatement:
    token: Tok = field(compare=False, repr=False)
    statements: Tuple[Statement, ...]

    def token_literal(self) -> str:
        return self.token.value

    def __str__(self) -> str:
        parts = []

        for stmt in self.statements:
            parts.append(_terminated(str(stmt)))

        return "{ " + "".join(parts) + " }"


@dataclass(frozen=True)
class Program:
    statements: Tuple[Statement, ...]

    def token_literal(self) -> str:
        if self.statements:
            return self.statements[0].token_literal()
        return ""

    def __str__(self) -> str:
        return "".join(str(s) for s in self.statements)


Expression: TypeAlias = Union[
    Identifier,
    IntegerLiteral,
    BooleanLiteral,
    PrefixExpression,
    InfixExpression,
    IfExpression,
    FunctionLiteral,
    CallExpression,
]

Statement: TypeAlias = Union[
    LetStatement,
    ReturnStatement,
    ExpressionStatement,
    BlockStatement,
]

Node: TypeAlias = Union[Program, Statement, Expression]


# ---------------- Debug trees ----------------

def to_tree(node: Node) -> Tree:
    """Convert an AST node into a lark Tree; ``to_tree(n).pretty()`` dumps it."""
    match node:
        case Program(statements=stmts):
            return Tree('program', [to_tree(s) for s in stmts])
        case LetStatement(name=name, value=value):
            return Tree('let', [Token('IDENT', name.value), to_tree(value)])
        case ReturnStatement(return_value=None):
            return Tree('return', [])
        case ReturnStatement(return_value=value):
            return Tree('return', [to_tree(value)])
        case ExpressionStatement(expression=expr):
            return Tree('expr', [to_tree(expr)])
        case BlockStatement(statements=stmts):
            return Tree('block', [to_tree(s) for s in stmts])
        case Identifier(value=name):
            return Tree('ident', [Token('IDENT', name)])
        case IntegerLiteral(token=tok):
            return Tree('int', [Token('INT', tok.value)])
        case BooleanLiteral(token=tok):
            return Tree('bool', [Token(tok.type.name, tok.value)])
        case PrefixExpression(operator=op, right=right):
            return Tree('prefix', [Token('OP', op), to_tree(right)])
        case InfixExpression(operator=op, left=left, right=right):
            return Tree('infix', [to_tree(left), Token('OP', op), to_tree(right)])
        case IfExpression(predicate=pred, consequence=then, alternative=alt):
            children = [to_tree(pred), to_tree(then)]

            if alt is not None:
                children.append(to_tree(alt))

            return Tree('if', children)
        case FunctionLiteral(parameters=params, body=body):
            param_tree = Tree('params', [Token('IDENT', p.value) for p in params])
            return Tree('fn', [param_tree, to_tree(body)])
        case CallExpression(function=fn, arguments=args):
            return Tree('call', [to_tree(fn), Tree('args', [to_tree(a) for a in args])])
        case _:
            raise TypeError(f"Unknown AST node: {type(node).__name__}")
