"""Expressions over a signature.

An expression is built from:
  - Variables (references to a binder of the enclosing declaration)
  - Term applications (f(e₁, ..., eₙ) where f is a declared term constructor)

Expressions are untyped syntax trees; their sorts are determined by the
binders and term declarations they refer to (see ``check.check_expr``).

Examples (propositional library):
  a -> b       — App("im", (Var("a"), Var("b")))
  ~a -> ~b     — App("im", (App("not", (Var("a"),)), App("not", (Var("b"),))))
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass

# ---------------------------------------------------------------------------
# Expression AST
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Var:
    """A variable bound by the enclosing declaration."""

    name: str


@dataclass(frozen=True)
class App:
    """Application of a term constructor to arguments.

    A constant is an App with no arguments.
    """

    term: str
    args: tuple[Expr, ...] = ()


# Union of all expression forms
Expr = Var | App


def iter_vars(expr: Expr) -> Iterator[str]:
    """Yield variable names in left-to-right order (with repeats)."""
    if isinstance(expr, Var):
        yield expr.name
    else:
        for a in expr.args:
            yield from iter_vars(a)


def free_vars(expr: Expr) -> frozenset[str]:
    return frozenset(iter_vars(expr))


def iter_terms(expr: Expr) -> Iterator[str]:
    """Yield the names of every term constructor used in ``expr``."""
    if isinstance(expr, App):
        yield expr.term
        for a in expr.args:
            yield from iter_terms(a)


def substitute(expr: Expr, subst: Mapping[str, Expr]) -> Expr:
    """Replace variables according to ``subst``; unmapped variables stay."""
    if isinstance(expr, Var):
        return subst.get(expr.name, expr)
    return App(expr.term, tuple(substitute(a, subst) for a in expr.args))


def is_ground(expr: Expr, subst: Mapping[str, Expr]) -> bool:
    """True if every variable of ``expr`` is mapped by ``subst``."""
    return all(v in subst for v in iter_vars(expr))
