from __future__ import annotations

import pytest

from hilbert.library import prop_proofs, prop_theory
from hilbert.theory import Theory


@pytest.fixture(scope="session")
def prop() -> Theory:
    return prop_theory()


@pytest.fixture(scope="session")
def prop_proof_decls(prop: Theory):
    return prop_proofs(prop)
