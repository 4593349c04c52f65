"""Math strings: tokenizing, parsing and printing expressions.

A math string ``$ (~a -> ~b) -> b -> a $`` is split on whitespace and on
declared delimiter characters, then parsed by precedence climbing:

- ``( e )`` and variables are atoms;
- a prefix notation parses its argument at the notation's precedence;
- ``infixr`` notations associate to the right, ``infixl`` to the left;
- a bare application ``f x y`` parses each argument at max precedence.

``format_expr`` is the inverse: it inserts exactly the parentheses the
parser needs.
"""

from __future__ import annotations

from dataclasses import dataclass

from .errors import ParseError
from .signature import MAX_PREC, Delimiters, Fixity, Signature
from .terms import App, Expr, Var


@dataclass(frozen=True)
class MathToken:
    value: str
    line: int
    column: int


def tokenize_math(
    text: str, delimiters: Delimiters, line: int = 1, column: int = 1
) -> list[MathToken]:
    """Split a math string; ``line``/``column`` locate its first character."""
    delims = delimiters.chars
    tokens: list[MathToken] = []
    buf: list[str] = []
    start = (line, column)

    def flush() -> None:
        if buf:
            tokens.append(MathToken("".join(buf), *start))
            buf.clear()

    for ch in text:
        if ch.isspace():
            flush()
        elif ch in delims:
            flush()
            tokens.append(MathToken(ch, line, column))
        else:
            if not buf:
                start = (line, column)
            buf.append(ch)
        if ch == "\n":
            line += 1
            column = 1
        else:
            column += 1
    flush()
    return tokens


class MathParser:
    """Precedence-climbing parser over the tokens of one math string.

    Identifiers naming a term constructor become applications; any other
    identifier is read as a variable. Whether that variable is actually
    bound is for the checker to decide.
    """

    def __init__(self, sig: Signature, tokens: list[MathToken], end: tuple[int, int]):
        self.sig = sig
        self.tokens = tokens
        self.pos = 0
        self.end = end

    def peek(self) -> MathToken | None:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def next(self) -> MathToken:
        tok = self.peek()
        if tok is None:
            raise ParseError("Unexpected end of math string", *self.end)
        self.pos += 1
        return tok

    def parse(self) -> Expr:
        expr = self.parse_expr(0)
        tok = self.peek()
        if tok is not None:
            raise ParseError(f"Unexpected token '{tok.value}'", tok.line, tok.column)
        return expr

    def parse_expr(self, prec: int) -> Expr:
        lhs = self.parse_prefix(prec)
        return self.parse_infix(lhs, prec)

    def parse_prefix(self, prec: int) -> Expr:
        tok = self.next()
        if tok.value == "(":
            inner = self.parse_expr(0)
            close = self.next()
            if close.value != ")":
                raise ParseError(
                    f"Expected ')', got '{close.value}'", close.line, close.column
                )
            return inner
        if tok.value == ")":
            raise ParseError("Unexpected ')'", tok.line, tok.column)

        notation = self.sig.get_notation(tok.value)
        if notation is not None:
            if notation.fixity.is_infix:
                raise ParseError(
                    f"Infix operator '{tok.value}' has no left operand",
                    tok.line,
                    tok.column,
                )
            if notation.prec < prec:
                raise ParseError(
                    f"Prefix '{tok.value}' (prec {notation.prec_keyword}) needs "
                    f"parentheses here",
                    tok.line,
                    tok.column,
                )
            arg = self.parse_expr(notation.prec)
            return App(notation.term, (arg,))

        term = self.sig.get_term(tok.value)
        if term is None:
            if not tok.value.isidentifier():
                raise ParseError(f"Unknown token '{tok.value}'", tok.line, tok.column)
            return Var(tok.value)
        if term.is_constant:
            return App(term.name)
        if prec >= MAX_PREC:
            raise ParseError(
                f"Application of '{term.name}' needs parentheses here",
                tok.line,
                tok.column,
            )
        args = tuple(self.parse_expr(MAX_PREC) for _ in term.binders)
        return App(term.name, args)

    def parse_infix(self, lhs: Expr, prec: int) -> Expr:
        while True:
            tok = self.peek()
            if tok is None:
                return lhs
            notation = self.sig.get_notation(tok.value)
            if notation is None or not notation.fixity.is_infix:
                return lhs
            if notation.prec < prec:
                return lhs
            self.pos += 1
            rhs_prec = notation.prec if notation.fixity == Fixity.INFIXR else notation.prec + 1
            rhs = self.parse_expr(rhs_prec)
            lhs = App(notation.term, (lhs, rhs))


def parse_math(
    text: str, sig: Signature, line: int = 1, column: int = 1
) -> Expr:
    """Parse one math string into an expression. Raises ParseError."""
    tokens = tokenize_math(text, sig.delimiters, line, column)
    if not tokens:
        raise ParseError("Empty math string", line, column)
    try:
        return MathParser(sig, tokens, (line, column + len(text))).parse()
    except RecursionError:
        raise ParseError("Math string is too deeply nested", line, column) from None


# ---------------------------------------------------------------------------
# Printing
# ---------------------------------------------------------------------------


def expr_tokens(expr: Expr, sig: Signature, prec: int = 0) -> list[str]:
    """Tokens of ``expr`` printed at context precedence ``prec``."""
    if isinstance(expr, Var):
        return [expr.name]
    if not expr.args:
        return [expr.term]

    notation = sig.notation_for(expr.term)
    if notation is not None and notation.fixity.is_infix and len(expr.args) == 2:
        q = notation.prec
        lhs_prec = q + 1 if notation.fixity == Fixity.INFIXR else q
        rhs_prec = q if notation.fixity == Fixity.INFIXR else q + 1
        toks = [
            *expr_tokens(expr.args[0], sig, lhs_prec),
            notation.token,
            *expr_tokens(expr.args[1], sig, rhs_prec),
        ]
        own = q
    elif notation is not None and notation.fixity == Fixity.PREFIX and len(expr.args) == 1:
        toks = [notation.token, *expr_tokens(expr.args[0], sig, notation.prec)]
        own = notation.prec
    else:
        toks = [expr.term]
        for a in expr.args:
            toks.extend(expr_tokens(a, sig, MAX_PREC))
        own = MAX_PREC - 1
    if own < prec:
        return ["(", *toks, ")"]
    return toks


def join_math_tokens(tokens: list[str], delimiters: Delimiters) -> str:
    """Join tokens with the fewest spaces that still tokenize back the same."""
    if not tokens:
        return ""
    # Both-sided delimiters glue to what follows them (``(``, ``~``); a
    # closing paren glues to what precedes it.
    glued_after = set(delimiters.left) - {")"}
    glued_before = set(delimiters.right - delimiters.left)
    if ")" in delimiters.chars:
        glued_before.add(")")
    out = [tokens[0]]
    for prev, tok in zip(tokens, tokens[1:]):
        if prev not in glued_after and tok not in glued_before:
            out.append(" ")
        out.append(tok)
    return "".join(out)


def format_expr(expr: Expr, sig: Signature) -> str:
    """Render ``expr`` in the signature's notation, e.g. ``(~a -> ~b) -> b -> a``."""
    return join_math_tokens(expr_tokens(expr, sig), sig.delimiters)
