"""prompt_toolkit lexer for live Monkey syntax highlighting in the REPL."""

from __future__ import annotations

from typing import Callable

from lark import Token
from lark.exceptions import UnexpectedInput
from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.lexers import Lexer

from .parser import KEYWORDS, make_parser

# Map highlight groups → prompt_toolkit style strings.
GROUP_STYLE = {
    "keyword": "bold ansicyan",
    "boolean": "ansicyan",
    "number": "ansimagenta",
    "string": "ansigreen",
    "identifier": "",
    "builtin": "bold ansiyellow",
    "operator": "",
    "punctuation": "",
    "error": "bold ansired",
}

_BUILTINS = {"len", "puts", "first", "last", "rest", "push", "quote", "unquote"}

_OPERATORS = {"EQ", "NOT_EQ", "LT", "GT", "PLUS", "MINUS", "STAR", "SLASH", "BANG", "EQUAL"}

def _group_for(tok: Token) -> str:
    if tok.value in ("true", "false"):
        return "boolean"
    if tok.value in KEYWORDS:
        return "keyword"
    if tok.type == "INT":
        return "number"
    if tok.type == "STRING":
        return "string"
    if tok.type == "IDENT":
        return "builtin" if tok.value in _BUILTINS else "identifier"
    if tok.type in _OPERATORS:
        return "operator"

    return "punctuation"

def _highlight_line(text: str) -> StyleAndTextTuples:
    """Tokenize a single line and return styled fragments."""
    if not text:
        return [("", "")]

    result: StyleAndTextTuples = []
    pos = 0

    try:
        for tok in make_parser().lex(text):
            start = tok.start_pos
            if start is None:
                continue

            # Unstyled gap (whitespace) before token.
            if start > pos:
                result.append(("", text[pos:start]))

            result.append((GROUP_STYLE[_group_for(tok)], tok.value))
            pos = start + len(tok.value)
    except UnexpectedInput:
        # Whatever the lexer could not read is shown as an error.
        result.append((GROUP_STYLE["error"], text[pos:]))
        return result

    # Trailing unstyled text.
    if pos < len(text):
        result.append(("", text[pos:]))

    return result if result else [("", text)]

class MonkeyLexer(Lexer):
    """prompt_toolkit Lexer that highlights Monkey source using the lark lexer."""

    def lex_document(self, document: Document) -> Callable[[int], StyleAndTextTuples]:
        lines = document.lines

        # Pre-compute highlights for all lines.
        cache: dict[int, StyleAndTextTuples] = {}

        def get_line(lineno: int) -> StyleAndTextTuples:
            if lineno not in cache:
                if lineno < len(lines):
                    cache[lineno] = _highlight_line(lines[lineno])
                else:
                    cache[lineno] = [("", "")]

            return cache[lineno]

        return get_line
