"""Proof terms for Hilbert-style proofs.

A proof of a theorem is a tree of assertion applications:

  proof a1i = (ax_mp ax_1 h);

- ``ProofRef``: a bare name, either a hypothesis of the theorem being
  proved or an assertion without hypotheses (its arguments are inferred);
- ``ProofApp``: an assertion applied to expression arguments and
  sub-proofs, ``(ref args... hyps...)``;
- ``ExprArg`` / ``Hole``: an explicit expression argument or ``_``.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .terms import Expr


@dataclass(frozen=True)
class ProofRef:
    name: str
    line: int = field(default=0, compare=False)
    column: int = field(default=0, compare=False)


@dataclass(frozen=True)
class ExprArg:
    expr: Expr


@dataclass(frozen=True)
class Hole:
    """``_``: let unification find this argument."""


@dataclass(frozen=True)
class ProofApp:
    ref: str
    items: tuple[ProofItem, ...] = ()
    line: int = field(default=0, compare=False)
    column: int = field(default=0, compare=False)


Proof = ProofRef | ProofApp
ProofItem = ProofRef | ProofApp | ExprArg | Hole


@dataclass(frozen=True)
class ProofDecl:
    """``proof LABEL = proof_term ;``"""

    label: str
    proof: Proof
    line: int = field(default=0, compare=False)
