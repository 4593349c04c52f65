"""hilbert: MM0-style declarations, well-formedness checks and Hilbert-style proofs."""

from .sorts import SortDecl, SortModifier, SortRef
from .terms import App, Expr, Var, free_vars, substitute
from .signature import (
    MAX_PREC,
    Binder,
    Delimiters,
    Fixity,
    Notation,
    Signature,
    TermDecl,
)
from .theory import Assertion, AssertionKind, Hypothesis, Theory
from .errors import HilbertError, ParseError, ProofError, UnresolvedArgumentError
from .parser import parse_proofs, parse_theory
from .formula import format_expr, parse_math
from .check import CheckResult, Diagnostic, Severity, check_theory
from .verify import ProofStatus, TheoremOutcome, VerifyResult, verify_theory
from .serialization import dumps, loads
from .result import Ok, Err, Result

__all__ = [
    # Sorts
    "SortDecl", "SortModifier", "SortRef",
    # Expressions
    "App", "Expr", "Var", "free_vars", "substitute",
    # Signature
    "MAX_PREC", "Binder", "Delimiters", "Fixity", "Notation", "Signature", "TermDecl",
    # Theory
    "Assertion", "AssertionKind", "Hypothesis", "Theory",
    # Errors
    "HilbertError", "ParseError", "ProofError", "UnresolvedArgumentError",
    # Parsing and printing
    "parse_proofs", "parse_theory", "format_expr", "parse_math",
    # Checking
    "CheckResult", "Diagnostic", "Severity", "check_theory",
    "ProofStatus", "TheoremOutcome", "VerifyResult", "verify_theory",
    # Serialization
    "dumps", "loads",
    # Result
    "Ok", "Err", "Result",
]
