"""Builder helpers for constructing theories in Python.

Handy in tests and for generating theories programmatically; parsed
theories come out of ``parser.parse_theory`` with the same node types.
"""

from collections.abc import Sequence
from types import MappingProxyType

from hilbert.signature import Binder, Delimiters, Fixity, Notation, Signature, TermDecl
from hilbert.sorts import SortDecl, SortModifier, SortRef
from hilbert.terms import App, Expr, Var
from hilbert.theory import Assertion, AssertionKind, Hypothesis

S = SortRef


def sort(name: str, *modifiers: str) -> SortDecl:
    mods = SortModifier.NONE
    for m in modifiers:
        mods |= SortModifier.from_keyword(m)
    return SortDecl(name=S(name), modifiers=mods)


def binder(name: str, sort_name: str, *deps: str) -> Binder:
    return Binder(name=name, sort=S(sort_name), deps=tuple(deps))


def bound(name: str, sort_name: str) -> Binder:
    return Binder(name=name, sort=S(sort_name), bound=True)


def term(name: str, binders: list[Binder], result: str, *deps: str) -> TermDecl:
    return TermDecl(
        name=name, binders=tuple(binders), result_sort=S(result), result_deps=tuple(deps)
    )


def definition(
    name: str, binders: list[Binder], result: str, body: Expr | None = None
) -> TermDecl:
    return TermDecl(
        name=name, binders=tuple(binders), result_sort=S(result), is_def=True, body=body
    )


def infixr(term_name: str, token: str, prec: int) -> Notation:
    return Notation(term=term_name, token=token, fixity=Fixity.INFIXR, prec=prec)


def infixl(term_name: str, token: str, prec: int) -> Notation:
    return Notation(term=term_name, token=token, fixity=Fixity.INFIXL, prec=prec)


def prefix(term_name: str, token: str, prec: int) -> Notation:
    return Notation(term=term_name, token=token, fixity=Fixity.PREFIX, prec=prec)


def signature(
    sorts: list[SortDecl],
    terms: list[TermDecl],
    notations: Sequence[Notation] = (),
    delimiters: str = "",
) -> Signature:
    chars = frozenset(c for c in delimiters if not c.isspace())
    return Signature(
        sorts=MappingProxyType({s.name: s for s in sorts}),
        terms=MappingProxyType({t.name: t for t in terms}),
        notations=MappingProxyType({n.token: n for n in notations}),
        delimiters=Delimiters(chars, chars),
    )


def var(name: str) -> Var:
    return Var(name=name)


def app(term_name: str, *args: Expr) -> App:
    return App(term=term_name, args=tuple(args))


def hyp(formula: Expr, name: str | None = None) -> Hypothesis:
    return Hypothesis(name=name, formula=formula)


def axiom(
    label: str, binders: list[Binder], conclusion: Expr, hyps: Sequence[Hypothesis] = ()
) -> Assertion:
    return Assertion(
        AssertionKind.AXIOM, label, tuple(binders), tuple(hyps), conclusion
    )


def theorem(
    label: str, binders: list[Binder], conclusion: Expr, hyps: Sequence[Hypothesis] = ()
) -> Assertion:
    return Assertion(
        AssertionKind.THEOREM, label, tuple(binders), tuple(hyps), conclusion
    )
