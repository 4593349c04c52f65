"""Signatures for MM0-style theories.

A signature collects everything needed to *write* formulas:

  sorts:      syntactic categories (``wff``)
  terms:      term constructors with a profile  im : wff × wff → wff
  notations:  surface syntax for terms (``->`` infixr 25, ``~`` prefix 41)
  delimiters: characters that always form a token on their own

A term constructor with zero binders is a constant.

A well-formed signature requires that every SortRef appearing in any
binder or result refers to a declared sort (see ``check.check_theory``).
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType

from .sorts import SortDecl, SortRef
from .terms import Expr

# ---------------------------------------------------------------------------
# Binders
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Binder:
    """A variable parameter of a term or assertion.

    Examples:
        (a b: wff)    — Binder("a", wff), Binder("b", wff)
        {x: set}      — Binder("x", set, bound=True)
        (p: wff x)    — Binder("p", wff, deps=("x",))   p may mention x
    """

    name: str
    sort: SortRef
    bound: bool = False
    deps: tuple[str, ...] = ()


# ---------------------------------------------------------------------------
# Term constructors
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TermDecl:
    """A term constructor with a profile.

    Examples:
        term im (a b: wff): wff;     (binary)
        term not (a: wff): wff;      (unary)
        def an (a b: wff): wff = $ ~(a -> ~b) $;

    A definition (``is_def``) may carry a ``body`` over its binders. Proofs
    treat definitions like any other term constructor; they are never
    unfolded.
    """

    name: str
    binders: tuple[Binder, ...]
    result_sort: SortRef
    result_deps: tuple[str, ...] = ()
    is_def: bool = False
    body: Expr | None = None

    @property
    def arity(self) -> int:
        return len(self.binders)

    @property
    def arg_sorts(self) -> tuple[SortRef, ...]:
        return tuple(b.sort for b in self.binders)

    @property
    def is_constant(self) -> bool:
        return self.arity == 0


# ---------------------------------------------------------------------------
# Notations
# ---------------------------------------------------------------------------

# Precedence of atoms and bare applications' arguments. ``prec max`` in the
# declaration language.
MAX_PREC = 2**16


class Fixity(Enum):
    PREFIX = "prefix"
    INFIXL = "infixl"
    INFIXR = "infixr"

    @property
    def is_infix(self) -> bool:
        return self is not Fixity.PREFIX


@dataclass(frozen=True)
class Notation:
    """Surface syntax for a term constructor.

    Example:
        infixr im: $->$ prec 25;   — Notation("im", "->", Fixity.INFIXR, 25)
    """

    term: str
    token: str
    fixity: Fixity
    prec: int

    @property
    def prec_keyword(self) -> str:
        return "max" if self.prec == MAX_PREC else str(self.prec)


@dataclass(frozen=True)
class Delimiters:
    """Characters split out of math strings as single-character tokens.

    ``left`` and ``right`` only differ in how the renderer spaces them;
    a character listed in both is a both-sided delimiter.
    """

    left: frozenset[str] = frozenset()
    right: frozenset[str] = frozenset()

    @property
    def chars(self) -> frozenset[str]:
        return self.left | self.right

    @property
    def both(self) -> frozenset[str]:
        return self.left & self.right


# ---------------------------------------------------------------------------
# Signature
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Signature:
    """Sorts, term constructors and their notations.

    ``notations`` is keyed by token, since a token determines the parse.

    Invariant: every SortRef in ``terms`` references a sort in ``sorts``.
    """

    sorts: Mapping[str, SortDecl]
    terms: Mapping[str, TermDecl]
    notations: Mapping[str, Notation] = field(default_factory=lambda: MappingProxyType({}))
    delimiters: Delimiters = Delimiters()

    def get_sort(self, name: str) -> SortDecl | None:
        return self.sorts.get(name)

    def get_term(self, name: str) -> TermDecl | None:
        return self.terms.get(name)

    def get_notation(self, token: str) -> Notation | None:
        return self.notations.get(token)

    def notation_for(self, term: str) -> Notation | None:
        """The notation used to print ``term``, if it has one."""
        for n in self.notations.values():
            if n.term == term:
                return n
        return None

    @property
    def sort_names(self) -> frozenset[str]:
        return frozenset(self.sorts.keys())

    @property
    def term_names(self) -> frozenset[str]:
        return frozenset(self.terms.keys())
