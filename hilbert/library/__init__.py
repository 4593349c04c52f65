"""Bundled theories: propositional calculus over Lukasiewicz's axioms."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

from hilbert.load import load_proofs, load_theory
from hilbert.proof import ProofDecl
from hilbert.result import Err, Ok
from hilbert.theory import Theory

LIBRARY_DIR = Path(__file__).parent
PROP_MM0 = LIBRARY_DIR / "prop.mm0"
PROP_MMP = LIBRARY_DIR / "prop.mmp"


def prop_theory() -> Theory:
    """The bundled ``prop`` theory. Raises if the packaged file is broken."""
    match load_theory(PROP_MM0):
        case Ok(theory):
            return theory
        case Err(e):
            raise e


def prop_proofs(theory: Theory | None = None) -> Mapping[str, ProofDecl]:
    match load_proofs(PROP_MMP, theory or prop_theory()):
        case Ok(proofs):
            return proofs
        case Err(e):
            raise e
