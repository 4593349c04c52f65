"""Exceptions raised inside the parser and the proof checker.

They never escape the public API: ``parse_theory`` / ``parse_proofs`` turn
them into ``Err`` values and ``verify_theory`` turns them into per-theorem
outcomes.
"""

from __future__ import annotations


class HilbertError(Exception):
    """Base class for every error raised by this package."""


class ParseError(HilbertError):
    """A syntax error at a known position (1-based line and column)."""

    def __init__(self, message: str, line: int, column: int) -> None:
        super().__init__(f"{line}:{column}: {message}")
        self.message = message
        self.line = line
        self.column = column


class ProofError(HilbertError):
    """A proof step does not check."""


class UnresolvedArgumentError(ProofError):
    """An assertion argument could not be inferred by unification."""

    def __init__(self, assertion: str, binder: str) -> None:
        super().__init__(
            f"Cannot infer argument '{binder}' of '{assertion}'; supply it explicitly"
        )
        self.assertion = assertion
        self.binder = binder
