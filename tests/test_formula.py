"""Tests for hilbert.formula: math-string tokenizing, parsing and printing."""

from __future__ import annotations

import pytest

from hilbert.errors import ParseError
from hilbert.formula import format_expr, parse_math, tokenize_math
from hilbert.helpers import app, binder, infixl, infixr, prefix, signature, sort, term, var
from hilbert.signature import Delimiters, Signature
from hilbert.theory import Theory

a, b, c = var("a"), var("b"), var("c")


def im(x, y):
    return app("im", x, y)


def neg(x):
    return app("not", x)


@pytest.fixture
def arith() -> Signature:
    """``+`` infixl 10, ``*`` infixl 20, bare binary ``f``, constant ``z``."""
    s = "num"
    return signature(
        sorts=[sort(s)],
        terms=[
            term("add", [binder("x", s), binder("y", s)], s),
            term("mul", [binder("x", s), binder("y", s)], s),
            term("f", [binder("x", s), binder("y", s)], s),
            term("z", [], s),
            term("neg", [binder("x", s)], s),
        ],
        notations=[infixl("add", "+", 10), infixl("mul", "*", 20), prefix("neg", "-", 30)],
        delimiters="()",
    )


def test_tokenize_with_delimiters() -> None:
    delims = Delimiters(frozenset("()~"), frozenset("()~"))
    toks = tokenize_math("(~a -> ~b)", delims)
    assert [t.value for t in toks] == ["(", "~", "a", "->", "~", "b", ")"]
    assert [t.column for t in toks][:3] == [1, 2, 3]


def test_tokenize_without_delimiters() -> None:
    toks = tokenize_math("a->b  c", Delimiters())
    assert [t.value for t in toks] == ["a->b", "c"]


class TestPropParsing:
    def test_implication_is_right_associative(self, prop: Theory) -> None:
        assert parse_math("a -> b -> c", prop.signature) == im(a, im(b, c))
        assert parse_math("(a -> b) -> c", prop.signature) == im(im(a, b), c)

    def test_negation_binds_tighter(self, prop: Theory) -> None:
        assert parse_math("~a -> b", prop.signature) == im(neg(a), b)
        assert parse_math("~(a -> b)", prop.signature) == neg(im(a, b))
        assert parse_math("~~a", prop.signature) == neg(neg(a))

    @pytest.mark.parametrize(
        "text, message",
        [
            ("a ->", "Unexpected end"),
            ("(a -> b", "Unexpected end"),
            ("a b", "Unexpected token 'b'"),
            ("-> a", "no left operand"),
            ("a -> )", r"Unexpected '\)'"),
            ("a => b", "Unexpected token '=>'"),
            ("   ", "Empty math string"),
        ],
    )
    def test_errors(self, prop: Theory, text: str, message: str) -> None:
        with pytest.raises(ParseError, match=message):
            parse_math(text, prop.signature)

    def test_error_position_is_offset(self, prop: Theory) -> None:
        with pytest.raises(ParseError) as info:
            parse_math("a -> -> b", prop.signature, line=3, column=10)
        assert (info.value.line, info.value.column) == (3, 15)


class TestNotationParsing:
    def test_infixl_is_left_associative(self, arith: Signature) -> None:
        assert parse_math("a + b + c", arith) == app("add", app("add", a, b), c)

    def test_precedence(self, arith: Signature) -> None:
        assert parse_math("a + b * c", arith) == app("add", a, app("mul", b, c))
        assert parse_math("a * b + c", arith) == app("add", app("mul", a, b), c)

    def test_bare_application(self, arith: Signature) -> None:
        assert parse_math("f a b + c", arith) == app("add", app("f", a, b), c)
        assert parse_math("f (f a b) z", arith) == app("f", app("f", a, b), app("z"))

    def test_application_argument_needs_parentheses(self, arith: Signature) -> None:
        with pytest.raises(ParseError, match="needs parentheses"):
            parse_math("f - a b", arith)
        with pytest.raises(ParseError, match="needs parentheses"):
            parse_math("f f a b c", arith)

    def test_prefix_takes_application(self, arith: Signature) -> None:
        assert parse_math("- f a b", arith) == app("neg", app("f", a, b))


class TestFormatting:
    @pytest.mark.parametrize(
        "label, text",
        [
            ("ax_1", "a -> b -> a"),
            ("ax_2", "(a -> b -> c) -> (a -> b) -> a -> c"),
            ("ax_3", "(~a -> ~b) -> b -> a"),
        ],
    )
    def test_axioms(self, prop: Theory, label: str, text: str) -> None:
        assertion = prop.get_assertion(label)
        assert assertion is not None
        assert format_expr(assertion.conclusion, prop.signature) == text

    def test_inserts_needed_parentheses(self, prop: Theory) -> None:
        assert format_expr(neg(im(a, b)), prop.signature) == "~(a -> b)"
        assert format_expr(neg(neg(a)), prop.signature) == "~~a"

    def test_infixl(self, arith: Signature) -> None:
        assert format_expr(app("add", app("add", a, b), c), arith) == "a + b + c"
        assert format_expr(app("add", a, app("add", b, c)), arith) == "a + (b + c)"
        assert format_expr(app("mul", app("add", a, b), c), arith) == "(a + b) * c"

    def test_application(self, arith: Signature) -> None:
        expr = app("f", app("f", a, b), app("neg", c))
        assert format_expr(expr, arith) == "f (f a b) (- c)"
        assert parse_math(format_expr(expr, arith), arith) == expr

    def test_spaces_kept_around_undeclared_parens(self) -> None:
        sig = signature(
            sorts=[sort("wff")],
            terms=[term("im", [binder("a", "wff"), binder("b", "wff")], "wff")],
            notations=[infixr("im", "->", 25)],
        )
        assert format_expr(im(im(a, b), c), sig) == "( a -> b ) -> c"
