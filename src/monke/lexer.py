"""
Lexer for Monke

Turns source text into a stream of tokens, one token at a time.

Features:
- Lazy scanning: the parser pulls tokens on demand with next_token()
- EOF is produced forever once the input is exhausted
- Unknown characters become ILLEGAL tokens instead of failing
- Position tracking (line, column)
"""

from typing import Iterator, List

from .token_types import TT, Tok

# ============================================================================
# Lexer Implementation
# ============================================================================

class Lexer:
    """
    Monke lexer.

    Whitespace (spaces, tabs, newlines) only separates tokens; the language
    has no layout rules and no comments.
    """

    # Keyword mapping
    KEYWORDS = {
        'fn': TT.FUNCTION,
        'let': TT.LET,
        'if': TT.IF,
        'else': TT.ELSE,
        'return': TT.RETURN,
        'true': TT.TRUE,
        'false': TT.FALSE,
    }

    # Operator mapping: longest matches first to handle prefixes correctly
    OPERATORS = [
        # Two-character operators
        ('==', TT.EQ),
        ('!=', TT.NEQ),
        ('<=', TT.LTE),
        ('>=', TT.GTE),

        # Single-character operators
        ('=', TT.ASSIGN),
        ('+', TT.PLUS),
        ('-', TT.MINUS),
        ('*', TT.STAR),
        ('/', TT.SLASH),
        ('!', TT.NEG),
        ('<', TT.LT),
        ('>', TT.GT),
        (',', TT.COMMA),
        (';', TT.SEMI),
        ('(', TT.LPAR),
        (')', TT.RPAR),
        ('{', TT.LBRACE),
        ('}', TT.RBRACE),
    ]

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.line = 1
        self.column = 1

    # ========================================================================
    # Main Tokenization
    # ========================================================================

    def next_token(self) -> Tok:
        """Scan and return the next token; EOF once the source is exhausted"""
        self.skip_whitespace()

        if self.pos >= len(self.source):
            return Tok(TT.EOF, '', self.line, self.column)

        ch = self.peek()

        if is_digit(ch):
            return self.scan_number()

        if is_letter(ch):
            return self.scan_identifier()

        return self.scan_operator()

    def tokenize(self) -> List[Tok]:
        """Tokenize entire source, return token list ending in one EOF"""
        return list(self)

    def __iter__(self) -> Iterator[Tok]:
        while True:
            tok = self.next_token()
            yield tok
            if tok.type == TT.EOF:
                return

    # ========================================================================
    # Token Scanners
    # ========================================================================

    def scan_number(self) -> Tok:
        """Scan integer literal"""
        line, column = self.line, self.column
        value = ''

        while is_digit(self.peek()):
            value += self.advance()

        return Tok(TT.INT, value, line, column)

    def scan_identifier(self) -> Tok:
        """Scan identifier or keyword"""
        line, column = self.line, self.column
        value = ''

        while is_letter(self.peek()):
            value += self.advance()

        token_type = self.KEYWORDS.get(value, TT.IDENT)
        return Tok(token_type, value, line, column)

    def scan_operator(self) -> Tok:
        """Scan operators and punctuation"""
        line, column = self.line, self.column

        for op_str, op_type in self.OPERATORS:
            if self.source.startswith(op_str, self.pos):
                self.advance(len(op_str))
                return Tok(op_type, op_str, line, column)

        return Tok(TT.ILLEGAL, self.advance(), line, column)

    # ========================================================================
    # Utilities
    # ========================================================================

    def peek(self, offset: int = 0) -> str:
        """Look ahead at character"""
        idx = self.pos + offset
        if idx < len(self.source):
            return self.source[idx]
        return '\0'

    def advance(self, n: int = 1) -> str:
        """Consume n characters and return them as a string"""
        text = self.source[self.pos:self.pos + n]
        self.pos += len(text)

        for ch in text:
            if ch == '\n':
                self.line += 1
                self.column = 1
            else:
                self.column += 1

        return text

    def skip_whitespace(self) -> None:
        """Skip spaces, tabs and newlines"""
        while self.pos < len(self.source) and self.peek() in ' \t\n\r':
            self.advance()


def is_letter(ch: str) -> bool:
    return ('a' <= ch <= 'z') or ('A' <= ch <= 'Z') or ch == '_'


def is_digit(ch: str) -> bool:
    return '0' <= ch <= '9'


def tokenize(source: str) -> List[Tok]:
    """Convenience function to tokenize source"""
    return Lexer(source).tokenize()
