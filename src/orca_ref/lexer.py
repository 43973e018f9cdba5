"""
Token source for Orca

Terminal matching is delegated to a lark grammar compiled with the basic
lexer; this module converts lark tokens into `Tok` records and exposes the
stream surface the parser relies on:

- next_token(): consume and return the next token
- peek(offset): look past the current token without consuming
"""

from __future__ import annotations

from collections import deque
from functools import lru_cache
from typing import Deque, Iterable, Iterator, List, Optional

from lark import Lark, Token
from lark.exceptions import UnexpectedCharacters

from .token_types import TT, Tok

# Terminal names match TT members one to one.
GRAMMAR = r"""
start: _tok*

_tok: NUMBER | IDENT
    | EQ | GTE | LTE | GT | LT | ASSIGN
    | PLUS | MINUS | STAR | SLASH | CARET
    | LPAR | RPAR | LBRACE | RBRACE | COMMA
    | NEWLINE

NUMBER: /\d+(\.\d+)?/
IDENT: /[A-Za-z_][A-Za-z0-9_]*/

EQ: "=="
GTE: ">="
LTE: "<="
GT: ">"
LT: "<"
ASSIGN: "="

PLUS: "+"
MINUS: "-"
STAR: "*"
SLASH: "/"
CARET: "^"

LPAR: "("
RPAR: ")"
LBRACE: "{"
RBRACE: "}"
COMMA: ","

NEWLINE: /\r?\n/
COMMENT: /#[^\n]*/

%ignore /[ \t]+/
%ignore COMMENT
"""


class LexError(Exception):
    """Lexical analysis error"""

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        self.message = message
        self.line = line
        self.column = column
        super().__init__(
            f"{message} at line {line}, col {column}" if line is not None else message
        )


@lru_cache(maxsize=1)
def _build_lexer() -> Lark:
    return Lark(GRAMMAR, parser="lalr", lexer="basic")


def _end_position(source: str) -> tuple[int, int]:
    line = source.count("\n") + 1
    last_nl = source.rfind("\n")
    return line, len(source) - last_nl


def _convert(raw: Token) -> Tok:
    kind = TT[raw.type]
    value = "\n" if kind is TT.NEWLINE else str(raw.value)
    return Tok(kind, value, raw.line or 0, raw.column or 0)


def lex(source: str) -> Iterator[Tok]:
    """Yield tokens for `source`, finishing with a single EOF token."""
    try:
        for raw in _build_lexer().lex(source):
            yield _convert(raw)
    except UnexpectedCharacters as exc:
        raise LexError(f"Unexpected character {exc.char!r}", exc.line, exc.column) from None

    line, column = _end_position(source)
    yield Tok(TT.EOF, None, line, column)


def tokenize(source: str) -> List[Tok]:
    """Convenience function to tokenize source"""
    return list(lex(source))


class TokenStream:
    """
    Buffered token stream with arbitrary lookahead.

    peek(0) is the token that the next call to next_token() will return.
    Once the underlying iterator runs dry every further request yields EOF.
    """

    def __init__(self, tokens: Iterable[Tok]):
        self._tokens = iter(tokens)
        self._buffer: Deque[Tok] = deque()
        self._eof: Optional[Tok] = None

    @classmethod
    def from_source(cls, source: str) -> TokenStream:
        return cls(lex(source))

    def next_token(self) -> Tok:
        self._fill(1)
        return self._buffer.popleft()

    def peek(self, offset: int = 0) -> Tok:
        if offset < 0:
            raise ValueError(f"peek() requires offset >= 0, got {offset}")
        self._fill(offset + 1)
        return self._buffer[offset]

    def _fill(self, count: int) -> None:
        while len(self._buffer) < count:
            if self._eof is not None:
                self._buffer.append(self._eof)
                continue

            tok = next(self._tokens, None)
            if tok is None or tok.type is TT.EOF:
                last = self._buffer[-1] if self._buffer else None
                self._eof = tok or Tok(TT.EOF, None, last.line if last else 0, last.column if last else 0)
                continue

            self._buffer.append(tok)
