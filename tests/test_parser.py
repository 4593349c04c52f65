"""Tests for hilbert.parser: declaration statements and proof files."""

from __future__ import annotations

import pytest

from hilbert.errors import ParseError
from hilbert.helpers import app, var
from hilbert.parser import parse_proofs, parse_theory
from hilbert.proof import ExprArg, Hole, ProofApp, ProofRef
from hilbert.result import Err, Ok
from hilbert.signature import MAX_PREC, Binder, Fixity
from hilbert.sorts import SortModifier, SortRef
from hilbert.theory import AssertionKind, Hypothesis, Theory


def parse_ok(text: str) -> Theory:
    match parse_theory(text):
        case Ok(theory):
            return theory
        case Err(e):
            pytest.fail(f"Expected Ok, got Err: {e}")


def parse_err(text: str) -> ParseError:
    match parse_theory(text):
        case Ok(theory):
            pytest.fail(f"Expected Err, got Ok: {theory}")
        case Err(e):
            assert isinstance(e, ParseError)
            return e


class TestPropLibrary:
    def test_signature(self, prop: Theory) -> None:
        sig = prop.signature
        assert set(sig.sorts) == {"wff"}
        assert sig.sorts["wff"].modifiers == SortModifier.PROVABLE
        assert sig.terms["im"].arity == 2
        assert sig.terms["not"].binders == (Binder("a", SortRef("wff")),)
        assert sig.notations["->"].fixity == Fixity.INFIXR
        assert sig.notations["->"].prec == 25
        assert sig.notations["~"].fixity == Fixity.PREFIX
        assert sig.notations["~"].prec == 41
        assert sig.delimiters.both == frozenset("()~")

    def test_assertions_in_declaration_order(self, prop: Theory) -> None:
        assert [a.label for a in prop.assertions] == [
            "ax_1", "ax_2", "ax_3", "ax_mp", "a1i", "id", "mpd", "syl", "con4i",
        ]
        assert [a.label for a in prop.axioms] == ["ax_1", "ax_2", "ax_3", "ax_mp"]

    def test_ax_3(self, prop: Theory) -> None:
        ax_3 = prop.get_assertion("ax_3")
        assert ax_3 is not None
        assert ax_3.kind == AssertionKind.AXIOM
        a, b = var("a"), var("b")
        assert ax_3.conclusion == app(
            "im", app("im", app("not", a), app("not", b)), app("im", b, a)
        )

    def test_modus_ponens_hypotheses(self, prop: Theory) -> None:
        ax_mp = prop.get_assertion("ax_mp")
        assert ax_mp is not None
        a, b = var("a"), var("b")
        assert ax_mp.hypotheses == (
            Hypothesis(None, app("im", a, b)),
            Hypothesis(None, a),
        )
        assert ax_mp.hypothesis_labels == ("h1", "h2")
        assert ax_mp.conclusion == b

    def test_named_hypotheses(self, prop: Theory) -> None:
        syl = prop.get_assertion("syl")
        assert syl is not None
        assert syl.kind == AssertionKind.THEOREM
        assert [b.name for b in syl.binders] == ["a", "b", "c"]
        assert syl.hypothesis_labels == ("h1", "h2")


class TestDeclarations:
    def test_bound_binders_and_dependencies(self) -> None:
        theory = parse_ok(
            """
            provable sort wff;
            pure sort set;
            term all {x: set} (p: wff x): wff;
            """
        )
        all_ = theory.signature.terms["all"]
        assert all_.binders == (
            Binder("x", SortRef("set"), bound=True),
            Binder("p", SortRef("wff"), deps=("x",)),
        )
        assert theory.signature.sorts["set"].is_pure

    def test_arrow_form_term(self) -> None:
        theory = parse_ok("sort wff; term im: wff > wff > wff;")
        im = theory.signature.terms["im"]
        assert [b.name for b in im.binders] == ["_1", "_2"]
        assert im.result_sort == "wff"

    def test_prec_max(self) -> None:
        theory = parse_ok("sort s; term t (a: s): s; prefix t: $!$ prec max;")
        assert theory.signature.notations["!"].prec == MAX_PREC

    def test_comments_are_ignored(self) -> None:
        theory = parse_ok("-- a comment\nsort s; -- trailing\n")
        assert set(theory.signature.sorts) == {"s"}

    def test_two_delimiter_strings(self) -> None:
        theory = parse_ok("delimiter $ ( $ $ ) $;")
        d = theory.signature.delimiters
        assert d.left == frozenset("(")
        assert d.right == frozenset(")")
        assert d.chars == frozenset("()")


class TestParseErrors:
    def test_missing_semicolon_position(self) -> None:
        e = parse_err("provable sort wff\nterm im (a b: wff): wff;")
        assert (e.line, e.column) == (2, 1)
        assert "Expected ';'" in e.message

    def test_unterminated_math(self) -> None:
        e = parse_err("axiom a: $ x")
        assert (e.line, e.column) == (1, 10)

    def test_unsupported_statement(self) -> None:
        e = parse_err("sort s; coercion foo: s > s;")
        assert "Unsupported statement 'coercion'" in e.message

    def test_repeated_modifier(self) -> None:
        e = parse_err("pure pure sort s;")
        assert "Repeated" in e.message

    def test_duplicate_sort(self) -> None:
        e = parse_err("sort s; sort s;")
        assert "already declared" in e.message

    def test_assertion_needs_math(self) -> None:
        e = parse_err("sort s; axiom a: s;")
        assert "needs math strings" in e.message

    def test_bound_variable_with_math_type(self) -> None:
        e = parse_err("sort s; axiom a {x: $ x $}: $ x $;")
        assert "bound variable" in e.message

    def test_math_error_reports_file_position(self) -> None:
        e = parse_err("sort s;\naxiom a (x: s): $ x x $;")
        assert (e.line, e.column) == (2, 21)
        assert "Unexpected token 'x'" in e.message

    def test_duplicate_notation(self) -> None:
        e = parse_err(
            "sort s; term f (a b: s): s; infixl f: $+$ prec 1; infixr f: $+$ prec 2;"
        )
        assert "Notation '+' is already declared" in e.message


class TestProofFiles:
    def test_bundled_proofs(self, prop: Theory, prop_proof_decls) -> None:
        assert list(prop_proof_decls) == ["a1i", "id", "mpd", "syl", "con4i"]
        assert prop_proof_decls["a1i"].proof == ProofApp(
            "ax_mp", (ProofRef("ax_1"), ProofRef("h"))
        )

    def test_expression_arguments_and_holes(self, prop: Theory) -> None:
        match parse_proofs("proof t = (ax_1 $ ~a $ _);", prop):
            case Ok(proofs):
                assert proofs["t"].proof == ProofApp(
                    "ax_1", (ExprArg(app("not", var("a"))), Hole())
                )
            case Err(e):
                pytest.fail(f"Expected Ok, got Err: {e}")

    def test_duplicate_proof(self, prop: Theory) -> None:
        match parse_proofs("proof id = ax_1; proof id = ax_1;", prop):
            case Ok(proofs):
                pytest.fail(f"Expected Err, got Ok: {proofs}")
            case Err(e):
                assert "Duplicate proof of 'id'" in e.message

    def test_unclosed_paren(self, prop: Theory) -> None:
        match parse_proofs("proof id = (ax_mp ax_1", prop):
            case Ok(proofs):
                pytest.fail(f"Expected Err, got Ok: {proofs}")
            case Err(e):
                assert "Unclosed" in e.message

    def test_deep_proof_hits_nesting_limit(self, prop: Theory) -> None:
        text = "proof a1i = " + "(ax_mp " * 3000 + "h" + ")" * 3000 + ";"
        match parse_proofs(text, prop):
            case Ok(proofs):
                pytest.fail(f"Expected Err, got Ok: {list(proofs)}")
            case Err(e):
                assert "exceeds the limit of 256" in e.message
                # the 258th '(' opens the first application past the limit
                assert (e.line, e.column) == (1, 13 + 257 * 7)

    def test_deep_proof_within_raised_limit(self, prop: Theory) -> None:
        text = "proof a1i = " + "(ax_mp " * 3000 + "h" + ")" * 3000 + ";"
        match parse_proofs(text, prop, max_depth=100_000):
            case Ok(proofs):
                pytest.fail(f"Expected Err, got Ok: {list(proofs)}")
            case Err(e):
                assert isinstance(e, ParseError)
                assert "too deeply nested" in e.message


class TestDefinitions:
    PREAMBLE = """
    delimiter $ ( ) ~ $;
    provable sort wff;
    term im (a b: wff): wff;
    infixr im: $->$ prec 25;
    term not (a: wff): wff;
    prefix not: $~$ prec 41;
    """

    def test_definition_with_body(self) -> None:
        theory = parse_ok(
            self.PREAMBLE + r"def an (a b: wff): wff = $ ~(a -> ~b) $; infixl an: $/\$ prec 34;"
        )
        an = theory.signature.terms["an"]
        a, b = var("a"), var("b")
        assert an.is_def
        assert an.binders == (Binder("a", SortRef("wff")), Binder("b", SortRef("wff")))
        assert an.body == app("not", app("im", a, app("not", b)))

    def test_definition_usable_in_later_math(self) -> None:
        theory = parse_ok(
            self.PREAMBLE
            + r"def an (a b: wff): wff = $ ~(a -> ~b) $; infixl an: $/\$ prec 34;"
            + r"axiom simp (a b: wff): $ a /\ b -> a $;"
        )
        simp = theory.get_assertion("simp")
        assert simp is not None
        assert simp.conclusion == app("im", app("an", var("a"), var("b")), var("a"))

    def test_definition_without_body(self) -> None:
        theory = parse_ok(self.PREAMBLE + "def top: wff;")
        top = theory.signature.terms["top"]
        assert top.is_def
        assert top.body is None
        assert top.is_constant

    def test_definition_cannot_refer_to_itself(self) -> None:
        e = parse_err(self.PREAMBLE + "def bad (a: wff): wff = $ bad a $;")
        assert "Unexpected token 'a'" in e.message

    def test_definition_type_must_be_a_sort(self) -> None:
        e = parse_err(self.PREAMBLE + "def bad (a: wff): $ a $;")
        assert "needs a sort" in e.message


def test_deep_math_string_is_reported_as_error() -> None:
    text = (
        "delimiter $ ~ $;\n"
        "provable sort wff;\n"
        "term not (a: wff): wff;\n"
        "prefix not: $~$ prec 41;\n"
        "axiom deep (a: wff): $ " + "~" * 3000 + " a $;"
    )
    e = parse_err(text)
    assert "too deeply nested" in e.message
    assert (e.line, e.column) == (5, 23)
