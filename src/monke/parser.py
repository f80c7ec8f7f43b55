"""
Pratt Parser for Monke

Structure:
- Lexer: token stream pulled one token at a time (one token of lookahead)
- Parser: statement dispatch plus Pratt parsing for expressions
- AST: immutable dataclasses from monke.ast

The parser never raises on malformed input. Every failure appends a message
to ``Parser.errors`` and yields an absent node for that construct; parsing
then resumes at the next statement, so one pass reports every independent
error in source order.
"""

from enum import IntEnum
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Tuple, Union

from . import ast
from .lexer import Lexer
from .token_types import TT, Tok
from .utils import recursion_limit

# ============================================================================
# Precedence
# ============================================================================

class Precedence(IntEnum):
    LOWEST = 1
    EQUALS = 2       # == !=
    LESSGREATER = 3  # < > <= >=
    SUM = 4          # + -
    PRODUCT = 5      # * /
    PREFIX = 6       # -x !x
    CALL = 7         # f(x)


PRECEDENCES: Dict[TT, Precedence] = {
    TT.EQ: Precedence.EQUALS,
    TT.NEQ: Precedence.EQUALS,
    TT.LT: Precedence.LESSGREATER,
    TT.GT: Precedence.LESSGREATER,
    TT.LTE: Precedence.LESSGREATER,
    TT.GTE: Precedence.LESSGREATER,
    TT.PLUS: Precedence.SUM,
    TT.MINUS: Precedence.SUM,
    TT.STAR: Precedence.PRODUCT,
    TT.SLASH: Precedence.PRODUCT,
    TT.LPAR: Precedence.CALL,
}

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

PrefixParseFn = Callable[[], Optional[ast.Expression]]
InfixParseFn = Callable[[ast.Expression], Optional[ast.Expression]]
TokenSource = Union[Lexer, Iterable[Tok]]

# ============================================================================
# Parser
# ============================================================================

class ParseError(Exception):
    """Raised by source-level entry points when parsing reported errors."""
    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) if self.errors else "parse failed")


class Parser:
    """
    Pratt parser for Monke.

    Expression precedence (lowest to highest):
    1. equality (==, !=)
    2. ordering (<, >, <=, >=)
    3. sum (+, -)
    4. product (*, /)
    5. prefix (-, !)
    6. call (f(args))

    Every binary operator is left-associative.
    """

    def __init__(self, source: TokenSource):
        self._next = _token_puller(source)
        self.errors: List[str] = []

        eof = Tok(TT.EOF, '')
        self.cur: Tok = eof
        self.peek: Tok = eof

        self.prefix_parse_fns: Dict[TT, PrefixParseFn] = {}
        self.infix_parse_fns: Dict[TT, InfixParseFn] = {}

        self.register_prefix(TT.IDENT, self.parse_identifier)
        self.register_prefix(TT.INT, self.parse_integer_literal)
        self.register_prefix(TT.TRUE, self.parse_boolean_literal)
        self.register_prefix(TT.FALSE, self.parse_boolean_literal)
        self.register_prefix(TT.NEG, self.parse_prefix_expression)
        self.register_prefix(TT.MINUS, self.parse_prefix_expression)
        self.register_prefix(TT.LPAR, self.parse_grouped_expression)
        self.register_prefix(TT.IF, self.parse_if_expression)
        self.register_prefix(TT.FUNCTION, self.parse_function_literal)

        for tt in (TT.EQ, TT.NEQ, TT.LT, TT.GT, TT.LTE, TT.GTE,
                   TT.PLUS, TT.MINUS, TT.STAR, TT.SLASH):
            self.register_infix(tt, self.parse_infix_expression)
        self.register_infix(TT.LPAR, self.parse_call_expression)

        # Fill cur and peek
        self.next_token()
        self.next_token()

    def register_prefix(self, token_type: TT, fn: PrefixParseFn) -> None:
        self.prefix_parse_fns[token_type] = fn

    def register_infix(self, token_type: TT, fn: InfixParseFn) -> None:
        self.infix_parse_fns[token_type] = fn

    # ========================================================================
    # Token Navigation
    # ========================================================================

    def next_token(self) -> None:
        """Consume the current token and pull the next one into peek"""
        self.cur = self.peek
        self.peek = self._next()

    def cur_is(self, token_type: TT) -> bool:
        return self.cur.type == token_type

    def peek_is(self, token_type: TT) -> bool:
        return self.peek.type == token_type

    def expect_peek(self, token_type: TT) -> bool:
        """Advance if peek matches, otherwise record an error and stay put"""
        if self.peek_is(token_type):
            self.next_token()
            return True

        self.peek_error(token_type)
        return False

    def peek_error(self, token_type: TT) -> None:
        self.errors.append(
            f"expected next token to be '{token_type.value}', got {self.peek.type.value} instead"
        )

    def no_prefix_parse_fn_error(self, token_type: TT) -> None:
        self.errors.append(f"no prefix parse function for {token_type.value} found")

    def peek_precedence(self) -> Precedence:
        return PRECEDENCES.get(self.peek.type, Precedence.LOWEST)

    def cur_precedence(self) -> Precedence:
        return PRECEDENCES.get(self.cur.type, Precedence.LOWEST)

    def synchronize(self) -> None:
        """Skip the rest of a malformed statement.

        Leaves ``cur`` on the statement's closing ``;`` (or just before an
        unmatched ``}``/EOF) so the caller's advance lands on the next
        statement. Braces opened inside the statement are skipped whole.
        """
        if self.cur_is(TT.SEMI) or self.cur_is(TT.EOF):
            return

        depth = 0

        while not self.peek_is(TT.EOF):
            if depth == 0 and (self.peek_is(TT.SEMI) or self.peek_is(TT.RBRACE)):
                break

            if self.peek_is(TT.LBRACE):
                depth += 1
            elif self.peek_is(TT.RBRACE):
                depth -= 1

            self.next_token()

        if self.peek_is(TT.SEMI):
            self.next_token()

    # ========================================================================
    # Top-Level Parsing
    # ========================================================================

    def parse_program(self) -> ast.Program:
        """
        Parse statements until EOF, keeping the ones that parsed cleanly.

        Nesting deeper than the host stack allows ends the parse with an
        error; statements completed before that point are kept.
        """
        stmts: List[ast.Statement] = []

        try:
            with recursion_limit():
                while not self.cur_is(TT.EOF):
                    stmt = self.parse_statement()

                    if stmt is not None:
                        stmts.append(stmt)

                    self.next_token()
        except RecursionError:
            self.errors.append("expression nested too deeply")

        return ast.Program(tuple(stmts))

    # ========================================================================
    # Statements
    # ========================================================================

    def parse_statement(self) -> Optional[ast.Statement]:
        """
        Parse a single statement.

        On return ``cur`` is the statement's last token. A failed statement
        yields None after its remaining tokens are skipped.
        """
        match self.cur.type:
            case TT.LET:
                stmt = self.parse_let_statement()
            case TT.RETURN:
                stmt = self.parse_return_statement()
            case _:
                stmt = self.parse_expression_statement()

        if stmt is None:
            self.synchronize()

        return stmt

    def parse_let_statement(self) -> Optional[ast.LetStatement]:
        """let <ident> = <expr> [;]"""
        let_tok = self.cur

        if not self.expect_peek(TT.IDENT):
            return None

        name = ast.Identifier(self.cur, self.cur.value)

        if not self.expect_peek(TT.ASSIGN):
            return None

        self.next_token()
        value = self.parse_expression(Precedence.LOWEST)

        if value is None:
            return None

        if self.peek_is(TT.SEMI):
            self.next_token()

        return ast.LetStatement(let_tok, name, value)

    def parse_return_statement(self) -> Optional[ast.ReturnStatement]:
        """return [<expr>] [;]"""
        ret_tok = self.cur

        if self.peek_is(TT.SEMI):
            self.next_token()
            return ast.ReturnStatement(ret_tok, None)

        if self.peek_is(TT.RBRACE) or self.peek_is(TT.EOF):
            return ast.ReturnStatement(ret_tok, None)

        self.next_token()
        value = self.parse_expression(Precedence.LOWEST)

        if value is None:
            return None

        if self.peek_is(TT.SEMI):
            self.next_token()

        return ast.ReturnStatement(ret_tok, value)

    def parse_expression_statement(self) -> Optional[ast.ExpressionStatement]:
        """<expr> [;]"""
        start = self.cur
        expr = self.parse_expression(Precedence.LOWEST)

        if expr is None:
            return None

        if self.peek_is(TT.SEMI):
            self.next_token()

        return ast.ExpressionStatement(start, expr)

    def parse_block_statement(self) -> Optional[ast.BlockStatement]:
        """
        Parse ``{ stmt* }`` starting with ``cur`` on ``{``.

        Statements accumulate until ``}`` or EOF; reaching EOF first is an
        error. On success ``cur`` is the closing ``}``.
        """
        open_tok = self.cur
        stmts: List[ast.Statement] = []
        self.next_token()

        while not self.cur_is(TT.RBRACE) and not self.cur_is(TT.EOF):
            stmt = self.parse_statement()

            if stmt is not None:
                stmts.append(stmt)

            self.next_token()

        if not self.cur_is(TT.RBRACE):
            self.errors.append(f"expected next token to be '{TT.RBRACE.value}', got {self.cur.type.value} instead")
            return None

        return ast.BlockStatement(open_tok, tuple(stmts))

    # ========================================================================
    # Expressions (Pratt)
    # ========================================================================

    def parse_expression(self, precedence: Precedence) -> Optional[ast.Expression]:
        """
        Parse an expression whose operators bind tighter than ``precedence``.

        The prefix parser for ``cur`` produces the left operand; the loop then
        folds infix operators into it while the upcoming operator binds
        tighter, which makes equal-precedence chains left-associative.
        """
        prefix = self.prefix_parse_fns.get(self.cur.type)

        if prefix is None:
            self.no_prefix_parse_fn_error(self.cur.type)
            return None

        left = prefix()

        while left is not None and not self.peek_is(TT.SEMI) and precedence < self.peek_precedence():
            infix = self.infix_parse_fns.get(self.peek.type)

            if infix is None:
                return left

            self.next_token()
            left = infix(left)

        return left

    def parse_identifier(self) -> ast.Expression:
        return ast.Identifier(self.cur, self.cur.value)

    def parse_integer_literal(self) -> Optional[ast.Expression]:
        literal = self.cur.value

        try:
            value = int(literal, 10)
        except ValueError:
            value = None

        if value is None or not INT64_MIN <= value <= INT64_MAX:
            self.errors.append(f'could not parse "{literal}" as integer')
            return None

        return ast.IntegerLiteral(self.cur, value)

    def parse_boolean_literal(self) -> ast.Expression:
        return ast.BooleanLiteral(self.cur, self.cur_is(TT.TRUE))

    def parse_prefix_expression(self) -> Optional[ast.Expression]:
        op_tok = self.cur
        self.next_token()
        right = self.parse_expression(Precedence.PREFIX)

        if right is None:
            return None

        return ast.PrefixExpression(op_tok, op_tok.value, right)

    def parse_infix_expression(self, left: ast.Expression) -> Optional[ast.Expression]:
        op_tok = self.cur
        precedence = self.cur_precedence()
        self.next_token()
        right = self.parse_expression(precedence)

        if right is None:
            return None

        return ast.InfixExpression(op_tok, op_tok.value, left, right)

    def parse_grouped_expression(self) -> Optional[ast.Expression]:
        self.next_token()
        expr = self.parse_expression(Precedence.LOWEST)

        if expr is None or not self.expect_peek(TT.RPAR):
            return None

        return expr

    def parse_if_expression(self) -> Optional[ast.Expression]:
        """
        Parse if expression:
        if (<expr>) { ... } [else { ... }]
        """
        if_tok = self.cur

        if not self.expect_peek(TT.LPAR):
            return None

        self.next_token()
        predicate = self.parse_expression(Precedence.LOWEST)

        if predicate is None:
            return None
        if not self.expect_peek(TT.RPAR):
            return None
        if not self.expect_peek(TT.LBRACE):
            return None

        consequence = self.parse_block_statement()

        if consequence is None:
            return None

        alternative = None

        if self.peek_is(TT.ELSE):
            self.next_token()

            if not self.expect_peek(TT.LBRACE):
                return None

            alternative = self.parse_block_statement()

            if alternative is None:
                return None

        return ast.IfExpression(if_tok, predicate, consequence, alternative)

    def parse_function_literal(self) -> Optional[ast.Expression]:
        """fn(<ident>, ...) { ... }"""
        fn_tok = self.cur

        if not self.expect_peek(TT.LPAR):
            return None

        params = self.parse_function_parameters()

        if params is None:
            return None
        if not self.expect_peek(TT.LBRACE):
            return None

        body = self.parse_block_statement()

        if body is None:
            return None

        return ast.FunctionLiteral(fn_tok, tuple(params), body)

    def parse_function_parameters(self) -> Optional[List[ast.Identifier]]:
        params: List[ast.Identifier] = []

        if self.peek_is(TT.RPAR):
            self.next_token()
            return params

        if not self.expect_peek(TT.IDENT):
            return None

        params.append(ast.Identifier(self.cur, self.cur.value))

        while self.peek_is(TT.COMMA):
            self.next_token()

            if not self.expect_peek(TT.IDENT):
                return None

            params.append(ast.Identifier(self.cur, self.cur.value))

        if not self.expect_peek(TT.RPAR):
            return None

        return params

    def parse_call_expression(self, function: ast.Expression) -> Optional[ast.Expression]:
        call_tok = self.cur
        args = self.parse_call_arguments()

        if args is None:
            return None

        return ast.CallExpression(call_tok, function, tuple(args))

    def parse_call_arguments(self) -> Optional[List[ast.Expression]]:
        args: List[ast.Expression] = []

        if self.peek_is(TT.RPAR):
            self.next_token()
            return args

        self.next_token()
        arg = self.parse_expression(Precedence.LOWEST)

        if arg is None:
            return None

        args.append(arg)

        while self.peek_is(TT.COMMA):
            self.next_token()
            self.next_token()
            arg = self.parse_expression(Precedence.LOWEST)

            if arg is None:
                return None

            args.append(arg)

        if not self.expect_peek(TT.RPAR):
            return None

        return args


def _token_puller(source: TokenSource) -> Callable[[], Tok]:
    """Adapt a Lexer or any token iterable into a next-token callable.

    Once the tokens run out (or an EOF token is seen) the callable keeps
    returning EOF.
    """
    if isinstance(source, Lexer):
        return source.next_token

    it: Iterator[Tok] = iter(source)
    last = Tok(TT.EOF, '')
    done = False

    def pull() -> Tok:
        nonlocal last, done
        tok = None if done else next(it, None)

        if tok is None or tok.type == TT.EOF:
            done = True
            return Tok(TT.EOF, '', last.line, last.column)

        last = tok
        return tok

    return pull


# ============================================================================
# Entry Points
# ============================================================================

def parse_program(tokens: TokenSource) -> Tuple[ast.Program, List[str]]:
    """Parse a token stream; returns the program and its ordered error list"""
    parser = Parser(tokens)
    program = parser.parse_program()
    return program, parser.errors


def parse_source(source: str) -> Tuple[ast.Program, List[str]]:
    """Convenience function to lex and parse source text"""
    return parse_program(Lexer(source))
