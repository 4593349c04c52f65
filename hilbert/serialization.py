"""JSON serialization for theories.

Every type serializes to a dict with a "type" discriminator field.
Round-trip: from_json(to_json(x)) == x for all x.
"""

from __future__ import annotations

import json
from types import MappingProxyType
from typing import Any

from .signature import (
    MAX_PREC,
    Binder,
    Delimiters,
    Fixity,
    Notation,
    Signature,
    TermDecl,
)
from .sorts import SortDecl, SortModifier, SortRef
from .terms import App, Expr, Var
from .theory import Assertion, AssertionKind, Hypothesis, Theory


# ---------------------------------------------------------------------------
# Sorts
# ---------------------------------------------------------------------------


def sort_to_json(s: SortDecl) -> dict[str, Any]:
    return {"type": "sort", "name": s.name, "modifiers": list(s.modifiers.keywords)}


def sort_from_json(d: dict[str, Any]) -> SortDecl:
    modifiers = SortModifier.NONE
    for word in d.get("modifiers", []):
        modifiers |= SortModifier.from_keyword(word)
    return SortDecl(name=SortRef(d["name"]), modifiers=modifiers)


# ---------------------------------------------------------------------------
# Expressions
# ---------------------------------------------------------------------------


def expr_to_json(e: Expr) -> dict[str, Any]:
    if isinstance(e, Var):
        return {"type": "var", "name": e.name}
    elif isinstance(e, App):
        return {
            "type": "app",
            "term": e.term,
            "args": [expr_to_json(a) for a in e.args],
        }
    raise TypeError(f"Unknown expression type: {type(e)}")


def expr_from_json(d: dict[str, Any]) -> Expr:
    t = d["type"]
    if t == "var":
        return Var(name=d["name"])
    elif t == "app":
        return App(term=d["term"], args=tuple(expr_from_json(a) for a in d["args"]))
    raise ValueError(f"Unknown expression type: {t}")


# ---------------------------------------------------------------------------
# Signature components
# ---------------------------------------------------------------------------


def binder_to_json(b: Binder) -> dict[str, Any]:
    return {
        "type": "binder",
        "name": b.name,
        "sort": b.sort,
        "bound": b.bound,
        "deps": list(b.deps),
    }


def binder_from_json(d: dict[str, Any]) -> Binder:
    return Binder(
        name=d["name"],
        sort=SortRef(d["sort"]),
        bound=d.get("bound", False),
        deps=tuple(d.get("deps", [])),
    )


def term_decl_to_json(t: TermDecl) -> dict[str, Any]:
    return {
        "type": "term",
        "name": t.name,
        "binders": [binder_to_json(b) for b in t.binders],
        "result_sort": t.result_sort,
        "result_deps": list(t.result_deps),
        "is_def": t.is_def,
        "body": expr_to_json(t.body) if t.body is not None else None,
    }


def term_decl_from_json(d: dict[str, Any]) -> TermDecl:
    return TermDecl(
        name=d["name"],
        binders=tuple(binder_from_json(b) for b in d["binders"]),
        result_sort=SortRef(d["result_sort"]),
        result_deps=tuple(d.get("result_deps", [])),
        is_def=d.get("is_def", False),
        body=expr_from_json(d["body"]) if d.get("body") is not None else None,
    )


def notation_to_json(n: Notation) -> dict[str, Any]:
    return {
        "type": "notation",
        "term": n.term,
        "token": n.token,
        "fixity": n.fixity.value,
        "prec": n.prec_keyword,
    }


def notation_from_json(d: dict[str, Any]) -> Notation:
    prec = d["prec"]
    return Notation(
        term=d["term"],
        token=d["token"],
        fixity=Fixity(d["fixity"]),
        prec=MAX_PREC if prec == "max" else int(prec),
    )


def signature_to_json(sig: Signature) -> dict[str, Any]:
    return {
        "type": "signature",
        "sorts": {k: sort_to_json(v) for k, v in sig.sorts.items()},
        "terms": {k: term_decl_to_json(v) for k, v in sig.terms.items()},
        "notations": {k: notation_to_json(v) for k, v in sig.notations.items()},
        "delimiters": {
            "left": "".join(sorted(sig.delimiters.left)),
            "right": "".join(sorted(sig.delimiters.right)),
        },
    }


def signature_from_json(d: dict[str, Any]) -> Signature:
    delims = d.get("delimiters", {})
    return Signature(
        sorts=MappingProxyType(
            {k: sort_from_json(v) for k, v in d["sorts"].items()}
        ),
        terms=MappingProxyType(
            {k: term_decl_from_json(v) for k, v in d["terms"].items()}
        ),
        notations=MappingProxyType(
            {k: notation_from_json(v) for k, v in d.get("notations", {}).items()}
        ),
        delimiters=Delimiters(
            left=frozenset(delims.get("left", "")),
            right=frozenset(delims.get("right", "")),
        ),
    )


# ---------------------------------------------------------------------------
# Assertions and theories
# ---------------------------------------------------------------------------


def assertion_to_json(a: Assertion) -> dict[str, Any]:
    return {
        "type": "assertion",
        "kind": a.kind.value,
        "label": a.label,
        "binders": [binder_to_json(b) for b in a.binders],
        "hypotheses": [
            {"type": "hypothesis", "name": h.name, "formula": expr_to_json(h.formula)}
            for h in a.hypotheses
        ],
        "conclusion": expr_to_json(a.conclusion),
    }


def assertion_from_json(d: dict[str, Any]) -> Assertion:
    return Assertion(
        kind=AssertionKind(d["kind"]),
        label=d["label"],
        binders=tuple(binder_from_json(b) for b in d["binders"]),
        hypotheses=tuple(
            Hypothesis(name=h.get("name"), formula=expr_from_json(h["formula"]))
            for h in d["hypotheses"]
        ),
        conclusion=expr_from_json(d["conclusion"]),
    )


def theory_to_json(t: Theory) -> dict[str, Any]:
    return {
        "type": "theory",
        "name": t.name,
        "signature": signature_to_json(t.signature),
        "assertions": [assertion_to_json(a) for a in t.assertions],
    }


def theory_from_json(d: dict[str, Any]) -> Theory:
    return Theory(
        name=d["name"],
        signature=signature_from_json(d["signature"]),
        assertions=tuple(assertion_from_json(a) for a in d["assertions"]),
    )


def dumps(theory: Theory, indent: int | None = 2) -> str:
    return json.dumps(theory_to_json(theory), indent=indent)


def loads(s: str) -> Theory:
    return theory_from_json(json.loads(s))
