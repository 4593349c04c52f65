from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

from hilbert.config import DEFAULT_MAX_PROOF_DEPTH
from hilbert.parser import parse_proofs, parse_theory
from hilbert.proof import ProofDecl
from hilbert.result import Err, Ok, Result
from hilbert.theory import Theory


def load_theory(path: str | Path) -> Result[Theory, Exception]:
    """Read and parse a declaration file; the theory is named after the file stem.

    Returns ``Err`` with the OSError or ParseError on failure.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        return Err(e)
    match parse_theory(text, name=path.stem):
        case Ok(theory):
            return Ok(theory)
        case Err(e):
            return Err(e)


def load_proofs(
    path: str | Path, theory: Theory, max_depth: int = DEFAULT_MAX_PROOF_DEPTH
) -> Result[Mapping[str, ProofDecl], Exception]:
    """Read and parse a proof file against ``theory``."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        return Err(e)
    match parse_proofs(text, theory, max_depth):
        case Ok(proofs):
            return Ok(proofs)
        case Err(e):
            return Err(e)
