"""Round-trip tests for serialization."""

import json

from hilbert.helpers import app, binder, definition, prefix, signature, sort, term, var
from hilbert.serialization import (
    dumps,
    expr_to_json,
    loads,
    notation_from_json,
    notation_to_json,
    term_decl_from_json,
    term_decl_to_json,
)
from hilbert.signature import MAX_PREC
from hilbert.terms import App, Var
from hilbert.theory import Theory


def test_prop_round_trip(prop: Theory) -> None:
    restored = loads(dumps(prop))
    assert restored == prop


def test_expression_shape() -> None:
    expr = App("im", (Var("a"), App("not", (Var("b"),))))
    assert expr_to_json(expr) == {
        "type": "app",
        "term": "im",
        "args": [
            {"type": "var", "name": "a"},
            {"type": "app", "term": "not", "args": [{"type": "var", "name": "b"}]},
        ],
    }


def test_anonymous_hypotheses_keep_null_names(prop: Theory) -> None:
    data = json.loads(dumps(prop))
    ax_mp = next(a for a in data["assertions"] if a["label"] == "ax_mp")
    assert [h["name"] for h in ax_mp["hypotheses"]] == [None, None]
    a1i = next(a for a in data["assertions"] if a["label"] == "a1i")
    assert [h["name"] for h in a1i["hypotheses"]] == ["h"]


def test_max_precedence_round_trip() -> None:
    sig = signature(
        [sort("s")],
        [term("t", [binder("a", "s")], "s")],
        notations=[prefix("t", "!", MAX_PREC)],
    )
    d = notation_to_json(sig.notations["!"])
    assert d["prec"] == "max"
    assert notation_from_json(d) == sig.notations["!"]


def test_empty_theory_round_trip() -> None:
    theory = Theory("empty", signature([], []), ())
    assert loads(dumps(theory, indent=None)) == theory


def test_definition_round_trip() -> None:
    an = definition(
        "an",
        [binder("a", "wff"), binder("b", "wff")],
        "wff",
        app("not", app("im", var("a"), app("not", var("b")))),
    )
    d = term_decl_to_json(an)
    assert d["is_def"] is True
    assert d["body"]["term"] == "not"
    assert term_decl_from_json(d) == an


def test_plain_term_has_no_body() -> None:
    t = term("not", [binder("a", "wff")], "wff")
    d = term_decl_to_json(t)
    assert d["is_def"] is False
    assert d["body"] is None
    del d["is_def"], d["body"]
    assert term_decl_from_json(d) == t
