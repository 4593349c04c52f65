"""Tests for hilbert.render: printing theories back to declaration syntax."""

from __future__ import annotations

from hilbert.helpers import axiom, bound, binder, hyp, signature, sort, term, var
from hilbert.parser import parse_theory
from hilbert.render import render_binders, render_theory
from hilbert.result import Err, Ok
from hilbert.theory import Theory


def test_prop_round_trip(prop: Theory) -> None:
    text = render_theory(prop)
    match parse_theory(text, name=prop.name):
        case Ok(theory):
            assert theory == prop
        case Err(e):
            raise AssertionError(f"Rendered text does not parse: {e}\n{text}")


def test_prop_lines(prop: Theory) -> None:
    lines = render_theory(prop).splitlines()
    assert lines[0] == "-- prop"
    assert "delimiter $ ( ) ~ $;" in lines
    assert "provable sort wff;" in lines
    assert "infixr im: $ -> $ prec 25;" in lines
    assert "axiom ax_mp (a b: wff): $ a -> b $ > $ a $ > $ b $;" in lines
    assert "theorem a1i (a b: wff) (h: $ a $): $ b -> a $;" in lines


def test_notation_follows_its_term(prop: Theory) -> None:
    lines = render_theory(prop).splitlines()
    assert lines.index("prefix not: $ ~ $ prec 41;") == lines.index("term not (a: wff): wff;") + 1


def test_binder_groups() -> None:
    binders = (
        bound("x", "set"),
        bound("y", "set"),
        binder("p", "wff", "x"),
        binder("q", "wff", "x"),
        binder("r", "wff"),
    )
    assert render_binders(binders) == ["{x y: set}", "(p q: wff x)", "(r: wff)"]


def test_no_delimiters_and_empty_sections() -> None:
    theory = Theory("bare", signature([sort("s")], [term("z", [], "s")]), ())
    assert render_theory(theory) == "-- bare\n\nsort s;\n\nterm z: s;\n"


def test_anonymous_hypothesis_before_named_keeps_order() -> None:
    a, b = var("a"), var("b")
    ax = axiom(
        "ax",
        [binder("a", "wff"), binder("b", "wff")],
        b,
        [hyp(a), hyp(b, "k")],
    )
    theory = Theory("order", signature([sort("wff", "provable")], []), (ax,))
    assert render_theory(theory).splitlines()[-1] == (
        "axiom ax (a b: wff) (h1: $ a $) (k: $ b $): $ b $;"
    )
    match parse_theory(render_theory(theory)):
        case Ok(parsed):
            again = parsed.get_assertion("ax")
            assert again is not None
            assert again.hypothesis_labels == ("h1", "k")
            assert [h.formula for h in again.hypotheses] == [a, b]
        case Err(e):
            raise AssertionError(f"Rendered text does not parse: {e}")


def test_anonymous_hypotheses_after_named_stay_arrows() -> None:
    a, b = var("a"), var("b")
    ax = axiom("ax", [binder("a", "wff"), binder("b", "wff")], b, [hyp(a, "k"), hyp(b)])
    theory = Theory("order", signature([sort("wff", "provable")], []), (ax,))
    assert render_theory(theory).splitlines()[-1] == (
        "axiom ax (a b: wff) (k: $ a $): $ b $ > $ b $;"
    )


def test_definition_round_trip() -> None:
    text = (
        "delimiter $ ( ) ~ $;\n"
        "provable sort wff;\n"
        "term im (a b: wff): wff;\n"
        "infixr im: $->$ prec 25;\n"
        "term not (a: wff): wff;\n"
        "prefix not: $~$ prec 41;\n"
        "def an (a b: wff): wff = $ ~(a -> ~b) $;\n"
        "infixl an: $/\\$ prec 34;\n"
        "def top: wff;\n"
        "axiom simp (a b: wff): $ a /\\ b -> a $;\n"
    )
    match parse_theory(text, name="defs"):
        case Ok(theory):
            pass
        case Err(e):
            raise AssertionError(f"Expected Ok, got Err: {e}")
    rendered = render_theory(theory)
    lines = rendered.splitlines()
    assert "def an (a b: wff): wff = $ ~(a -> ~b) $;" in lines
    assert "def top: wff;" in lines
    match parse_theory(rendered, name="defs"):
        case Ok(again):
            assert again == theory
        case Err(e):
            raise AssertionError(f"Rendered text does not parse: {e}\n{rendered}")
