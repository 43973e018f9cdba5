"""prompt_toolkit lexer for live Orca syntax highlighting in the REPL."""

from __future__ import annotations

from typing import Callable, List

from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.lexers import Lexer

from .lexer import LexError, tokenize
from .parser_rd import KW_ELSE, KW_FUNC, KW_IF, KW_RETURN
from .token_types import TT, Tok

# Map highlight groups → prompt_toolkit style strings.
GROUP_STYLE = {
    "keyword": "bold ansicyan",
    "number": "ansimagenta",
    "identifier": "",
    "function": "bold ansiyellow",
    "operator": "",
    "punctuation": "",
    "error": "bold ansired",
}

KEYWORDS = frozenset({KW_FUNC, KW_RETURN, KW_IF, KW_ELSE})

_TT_GROUP = {
    TT.NUMBER: "number",
    TT.IDENT: "identifier",
    TT.PLUS: "operator",
    TT.MINUS: "operator",
    TT.STAR: "operator",
    TT.SLASH: "operator",
    TT.CARET: "operator",
    TT.EQ: "operator",
    TT.LT: "operator",
    TT.LTE: "operator",
    TT.GT: "operator",
    TT.GTE: "operator",
    TT.ASSIGN: "operator",
    TT.LPAR: "punctuation",
    TT.RPAR: "punctuation",
    TT.LBRACE: "punctuation",
    TT.RBRACE: "punctuation",
    TT.COMMA: "punctuation",
}


def token_group(tokens: List[Tok], i: int) -> str:
    tok = tokens[i]

    if tok.type is TT.IDENT:
        if tok.value in KEYWORDS:
            return "keyword"
        if i + 1 < len(tokens) and tokens[i + 1].type is TT.LPAR:
            return "function"

    return _TT_GROUP.get(tok.type, "")


def _highlight_line(text: str) -> StyleAndTextTuples:
    try:
        tokens = [tok for tok in tokenize(text) if tok.type not in (TT.NEWLINE, TT.EOF)]
    except LexError:
        return [(GROUP_STYLE["error"], text)]

    result: StyleAndTextTuples = []
    pos = 0

    for i, tok in enumerate(tokens):
        idx = tok.column - 1
        tok_text = str(tok.value)

        # Whitespace or comments between tokens.
        if idx > pos:
            result.append(("", text[pos:idx]))

        style = GROUP_STYLE.get(token_group(tokens, i), "")
        result.append((style, tok_text))
        pos = idx + len(tok_text)

    # Trailing unstyled text.
    if pos < len(text):
        result.append(("", text[pos:]))

    return result if result else [("", text)]


class OrcaLexer(Lexer):
    """prompt_toolkit Lexer that highlights Orca source using the token source."""

    def lex_document(self, document: Document) -> Callable[[int], StyleAndTextTuples]:
        lines = document.lines
        cache: dict[int, StyleAndTextTuples] = {}

        def get_line(lineno: int) -> StyleAndTextTuples:
            if lineno not in cache:
                if lineno < len(lines):
                    cache[lineno] = _highlight_line(lines[lineno])
                else:
                    cache[lineno] = [("", "")]

            return cache[lineno]

        return get_line
