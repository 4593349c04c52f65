"""Theory: a signature plus an ordered list of assertions.

A theory T = (Σ, A) consists of:
  Σ: a signature (sorts + term constructors + notations)
  A: axioms and theorem statements, in declaration order

Axioms are assumed; theorems must be proved from assertions declared
before them (see ``verify.verify_theory``).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .signature import Binder, Signature
from .terms import Expr


class AssertionKind(Enum):
    AXIOM = "axiom"
    THEOREM = "theorem"


@dataclass(frozen=True)
class Hypothesis:
    """A premise of an assertion.

    ``name`` is None for hypotheses written in arrow form
    (``$ a -> b $ > $ a $ > $ b $``); those are referred to by position.
    """

    name: str | None
    formula: Expr


def hypothesis_label(hyp: Hypothesis, index: int) -> str:
    """Name used to refer to ``hyp`` in proofs: its own name, else ``h<n>`` (1-based)."""
    return hyp.name if hyp.name is not None else f"h{index + 1}"


@dataclass(frozen=True)
class Assertion:
    """An axiom or theorem statement.

    Example:
        axiom ax_mp (a b: wff): $ a -> b $ > $ a $ > $ b $;
    """

    kind: AssertionKind
    label: str
    binders: tuple[Binder, ...]
    hypotheses: tuple[Hypothesis, ...]
    conclusion: Expr

    @property
    def is_axiom(self) -> bool:
        return self.kind == AssertionKind.AXIOM

    @property
    def is_theorem(self) -> bool:
        return self.kind == AssertionKind.THEOREM

    @property
    def hypothesis_labels(self) -> tuple[str, ...]:
        return tuple(hypothesis_label(h, i) for i, h in enumerate(self.hypotheses))

    def get_binder(self, name: str) -> Binder | None:
        for b in self.binders:
            if b.name == name:
                return b
        return None


@dataclass(frozen=True)
class Theory:
    """A named theory.

    Example (propositional calculus):
        provable sort wff;
        term im (a b: wff): wff;
        term not (a: wff): wff;
        axiom ax_1 (a b: wff): $ a -> b -> a $;
        ...
    """

    name: str
    signature: Signature
    assertions: tuple[Assertion, ...]

    def get_assertion(self, label: str) -> Assertion | None:
        for a in self.assertions:
            if a.label == label:
                return a
        return None

    def index_of(self, label: str) -> int | None:
        for i, a in enumerate(self.assertions):
            if a.label == label:
                return i
        return None

    @property
    def axioms(self) -> tuple[Assertion, ...]:
        return tuple(a for a in self.assertions if a.is_axiom)

    @property
    def theorems(self) -> tuple[Assertion, ...]:
        return tuple(a for a in self.assertions if a.is_theorem)
