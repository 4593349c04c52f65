"""Tokenizer for declaration (.mm0) and proof (.mmp) files.

Comments run from ``--`` to the end of the line. Math strings are kept as
single ``MATH`` tokens; their contents are tokenized later by
``formula.tokenize_math`` once the declared delimiters are known.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from .errors import ParseError


class TokenKind(Enum):
    IDENT = "ident"
    NUM = "num"
    MATH = "math"
    PUNCT = "punct"
    EOF = "eof"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    value: str
    line: int
    column: int

    def is_punct(self, value: str) -> bool:
        return self.kind == TokenKind.PUNCT and self.value == value

    def is_keyword(self, value: str) -> bool:
        return self.kind == TokenKind.IDENT and self.value == value


_TOKEN_RE = re.compile(
    r"""
    (?P<ws>[ \t\r\n]+)
  | (?P<comment>--[^\n]*)
  | (?P<math>\$[^$]*\$)
  | (?P<ident>[A-Za-z_][A-Za-z0-9_]*)
  | (?P<num>[0-9]+)
  | (?P<punct>[(){}:;>=])
    """,
    re.VERBOSE,
)


def tokenize(text: str) -> list[Token]:
    """Split ``text`` into tokens, ending with an EOF token.

    Raises ParseError on an unterminated math string or a stray character.
    """
    tokens: list[Token] = []
    pos = 0
    line = 1
    line_start = 0
    while pos < len(text):
        m = _TOKEN_RE.match(text, pos)
        column = pos - line_start + 1
        if m is None:
            if text[pos] == "$":
                raise ParseError("Unterminated math string", line, column)
            raise ParseError(f"Unexpected character {text[pos]!r}", line, column)
        kind = m.lastgroup
        value = m.group()
        match kind:
            case "math":
                tokens.append(Token(TokenKind.MATH, value[1:-1], line, column))
            case "ident":
                tokens.append(Token(TokenKind.IDENT, value, line, column))
            case "num":
                tokens.append(Token(TokenKind.NUM, value, line, column))
            case "punct":
                tokens.append(Token(TokenKind.PUNCT, value, line, column))
            case _:
                pass
        newlines = value.count("\n")
        if newlines:
            line += newlines
            line_start = pos + value.rindex("\n") + 1
        pos = m.end()
    tokens.append(Token(TokenKind.EOF, "", line, pos - line_start + 1))
    return tokens
