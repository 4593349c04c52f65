"""Proof checking for theorems (Hilbert-style, by substitution).

Every proof step applies an earlier assertion under a substitution of its
binders. Arguments left out (or written ``_``) are found by matching the
assertion's conclusion against the goal (top-down) and its hypotheses
against what the sub-proofs prove (bottom-up). Both directions are retried
until nothing new is learned.

Design principles:
- Errors are raised as ProofError inside the checker and reported as a
  FAILED outcome per theorem; nothing is printed.
- Each verified step is logged at DEBUG, each failed theorem at WARNING.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum

from .config import DEFAULT_MAX_PROOF_DEPTH
from .errors import ProofError, UnresolvedArgumentError
from .formula import format_expr
from .proof import ExprArg, Hole, Proof, ProofApp, ProofDecl, ProofItem, ProofRef
from .signature import Binder
from .sorts import SortRef
from .terms import App, Expr, Var, free_vars, is_ground, substitute
from .theory import Assertion, Theory
from .unify import match_expr

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------


class ProofStatus(Enum):
    VERIFIED = "verified"
    FAILED = "failed"
    MISSING = "missing"     # theorem has no proof


@dataclass(frozen=True)
class TheoremOutcome:
    label: str
    status: ProofStatus
    message: str | None = None


@dataclass(frozen=True)
class VerifyResult:
    theory_name: str
    outcomes: tuple[TheoremOutcome, ...]
    errors: tuple[str, ...]     # proofs that do not belong to any theorem

    def _with(self, status: ProofStatus) -> tuple[TheoremOutcome, ...]:
        return tuple(o for o in self.outcomes if o.status == status)

    @property
    def verified(self) -> tuple[TheoremOutcome, ...]:
        return self._with(ProofStatus.VERIFIED)

    @property
    def failed(self) -> tuple[TheoremOutcome, ...]:
        return self._with(ProofStatus.FAILED)

    @property
    def missing(self) -> tuple[TheoremOutcome, ...]:
        return self._with(ProofStatus.MISSING)

    @property
    def all_verified(self) -> bool:
        return not self.errors and len(self.verified) == len(self.outcomes)


# ---------------------------------------------------------------------------
# Checker
# ---------------------------------------------------------------------------


class ProofChecker:
    """Checks proofs of one theorem against the assertions before it."""

    def __init__(self, theory: Theory, theorem: Assertion, max_depth: int) -> None:
        self.sig = theory.signature
        self.theorem = theorem
        self.max_depth = max_depth
        index = theory.index_of(theorem.label)
        earlier = theory.assertions[:index] if index is not None else ()
        self.available: dict[str, Assertion] = {a.label: a for a in earlier}
        self.later = {a.label for a in theory.assertions} - set(self.available)
        self.binders: dict[str, Binder] = {b.name: b for b in theorem.binders}
        self.hyps: dict[str, Expr] = {
            label: h.formula
            for label, h in zip(theorem.hypothesis_labels, theorem.hypotheses)
        }

    def show(self, expr: Expr) -> str:
        return format_expr(expr, self.sig)

    def check_theorem(self, proof: Proof) -> Expr:
        return self.check(proof, self.theorem.conclusion, 0)

    def check(self, proof: ProofItem, goal: Expr | None, depth: int) -> Expr:
        """Check ``proof`` and return the statement it proves.

        With a ``goal``, the proved statement must equal it.
        """
        if depth > self.max_depth:
            raise ProofError(f"Proof nesting exceeds the limit of {self.max_depth}")
        match proof:
            case ProofRef(name=name) if name in self.hyps:
                proved = self.hyps[name]
                if goal is not None and proved != goal:
                    raise ProofError(
                        f"Hypothesis '{name}' proves `{self.show(proved)}`, "
                        f"expected `{self.show(goal)}`"
                    )
                return proved
            case ProofRef(name=name, line=line, column=column):
                return self.check_app(ProofApp(name, (), line, column), goal, depth)
            case ProofApp():
                if proof.ref in self.hyps:
                    raise ProofError(f"Hypothesis '{proof.ref}' takes no arguments")
                return self.check_app(proof, goal, depth)
            case _:
                raise ProofError("Expected a proof, got an expression argument")

    def resolve(self, label: str) -> Assertion:
        assertion = self.available.get(label)
        if assertion is not None:
            return assertion
        if label in self.later:
            raise ProofError(
                f"'{label}' is not declared before '{self.theorem.label}'"
            )
        raise ProofError(f"Unknown assertion or hypothesis '{label}'")

    def arg_expr(self, item: ProofItem, assertion: Assertion) -> Expr | None:
        match item:
            case ExprArg(expr=expr):
                return expr
            case Hole():
                return None
            case ProofRef(name=name):
                term = self.sig.get_term(name)
                if term is not None and term.is_constant:
                    return App(name)
                return Var(name)
            case _:
                raise ProofError(
                    f"Expected an expression argument to '{assertion.label}', got a proof"
                )

    def unify(
        self,
        pattern: Expr,
        target: Expr,
        subst: dict[str, Expr],
        assertion: Assertion,
        what: str,
    ) -> dict[str, Expr]:
        out = match_expr(pattern, target, subst)
        if out is None:
            shown = {k: self.show(v) for k, v in subst.items()}
            raise ProofError(
                f"'{assertion.label}' {what} `{self.show(pattern)}` does not match "
                f"`{self.show(target)}` (with {shown})"
            )
        return out

    def check_app(self, node: ProofApp, goal: Expr | None, depth: int) -> Expr:
        assertion = self.resolve(node.ref)
        n_binders = len(assertion.binders)
        n_hyps = len(assertion.hypotheses)
        items = node.items
        if len(items) == n_binders + n_hyps:
            arg_items, sub_items = items[:n_binders], items[n_binders:]
        elif len(items) == n_hyps:
            arg_items, sub_items = (Hole(),) * n_binders, items
        else:
            raise ProofError(
                f"'{assertion.label}' takes {n_hyps} sub-proofs "
                f"(or {n_binders} arguments and {n_hyps} sub-proofs), got {len(items)} items"
            )

        subst: dict[str, Expr] = {}
        for binder, item in zip(assertion.binders, arg_items):
            expr = self.arg_expr(item, assertion)
            if expr is not None:
                subst[binder.name] = expr

        if goal is not None:
            subst = self.unify(assertion.conclusion, goal, subst, assertion, "conclusion")

        # Checking a sub-proof without a goal does not depend on ``subst``, so
        # each one is tried bottom-up at most once; after that it waits until
        # its hypothesis is ground.
        pending = dict(enumerate(sub_items))
        tried: set[int] = set()
        progress = True
        while pending and progress:
            progress = False
            for i, sub in list(pending.items()):
                pattern = assertion.hypotheses[i].formula
                if is_ground(pattern, subst):
                    self.check(sub, substitute(pattern, subst), depth + 1)
                elif i in tried:
                    continue
                else:
                    tried.add(i)
                    try:
                        proved = self.check(sub, None, depth + 1)
                    except UnresolvedArgumentError:
                        continue
                    subst = self.unify(pattern, proved, subst, assertion, f"hypothesis {i + 1}")
                del pending[i]
                progress = True

        for binder in assertion.binders:
            if binder.name not in subst:
                raise UnresolvedArgumentError(assertion.label, binder.name)
        if pending:
            i = min(pending)
            raise ProofError(
                f"'{assertion.label}' hypothesis {i + 1} "
                f"`{self.show(assertion.hypotheses[i].formula)}` cannot be checked: "
                f"it has variables that are not binders"
            )

        self.check_substitution(assertion, subst)
        proved = substitute(assertion.conclusion, subst)
        if goal is not None and proved != goal:
            raise ProofError(
                f"'{assertion.label}' proves `{self.show(proved)}`, expected `{self.show(goal)}`"
            )
        logger.debug(
            "%s: %s proves %s", self.theorem.label, assertion.label, self.show(proved)
        )
        return proved

    # -- substitution validity ----------------------------------------------

    def expr_sort(self, expr: Expr) -> SortRef:
        """Sort of ``expr`` over the theorem's binders. Raises ProofError."""
        if isinstance(expr, Var):
            binder = self.binders.get(expr.name)
            if binder is None:
                raise ProofError(
                    f"Variable '{expr.name}' is not a binder of '{self.theorem.label}'"
                )
            return binder.sort
        term = self.sig.get_term(expr.term)
        if term is None:
            raise ProofError(f"Term '{expr.term}' is not declared")
        if len(expr.args) != term.arity:
            raise ProofError(
                f"Term '{expr.term}' expects {term.arity} arguments, got {len(expr.args)}"
            )
        for arg, param in zip(expr.args, term.binders):
            if self.expr_sort(arg) != param.sort:
                raise ProofError(
                    f"Argument `{self.show(arg)}` to '{expr.term}' is not of sort '{param.sort}'"
                )
            if param.bound and not self.is_bound_var(arg):
                raise ProofError(
                    f"Argument `{self.show(arg)}` to '{expr.term}' must be a bound variable"
                )
        return term.result_sort

    def is_bound_var(self, expr: Expr) -> bool:
        if not isinstance(expr, Var):
            return False
        binder = self.binders.get(expr.name)
        return binder is not None and binder.bound

    def check_substitution(self, assertion: Assertion, subst: Mapping[str, Expr]) -> None:
        bound_images: dict[str, str] = {}
        for binder in assertion.binders:
            value = subst[binder.name]
            sort = self.expr_sort(value)
            if sort != binder.sort:
                raise ProofError(
                    f"'{assertion.label}': '{binder.name}' has sort '{binder.sort}', "
                    f"but `{self.show(value)}` has sort '{sort}'"
                )
            if binder.bound:
                if not isinstance(value, Var) or not self.is_bound_var(value):
                    raise ProofError(
                        f"'{assertion.label}': bound variable '{binder.name}' must be "
                        f"replaced by a bound variable, got `{self.show(value)}`"
                    )
                if value.name in bound_images.values():
                    raise ProofError(
                        f"'{assertion.label}': bound variables must be replaced by "
                        f"distinct variables, '{value.name}' is used twice"
                    )
                bound_images[binder.name] = value.name

        for binder in assertion.binders:
            if binder.bound:
                continue
            allowed = {bound_images[d] for d in binder.deps if d in bound_images}
            for v in free_vars(subst[binder.name]):
                vb = self.binders[v]
                if vb.bound:
                    offending = {v} - allowed
                else:
                    offending = set(vb.deps) - allowed
                if offending:
                    raise ProofError(
                        f"'{assertion.label}': disjoint variable violation, "
                        f"'{min(offending)}' may not occur in the substitution "
                        f"for '{binder.name}'"
                    )


def verify_theorem(
    theory: Theory,
    theorem: Assertion,
    proof: Proof,
    max_depth: int = DEFAULT_MAX_PROOF_DEPTH,
) -> TheoremOutcome:
    checker = ProofChecker(theory, theorem, max_depth)
    try:
        checker.check_theorem(proof)
    except ProofError as e:
        logger.warning("Theorem %r failed: %s", theorem.label, e)
        return TheoremOutcome(theorem.label, ProofStatus.FAILED, str(e))
    except RecursionError:
        logger.warning("Theorem %r failed: proof is too deeply nested", theorem.label)
        return TheoremOutcome(
            theorem.label, ProofStatus.FAILED, "Proof is too deeply nested"
        )
    logger.debug("Theorem %r verified", theorem.label)
    return TheoremOutcome(theorem.label, ProofStatus.VERIFIED)


def verify_theory(
    theory: Theory,
    proofs: Mapping[str, ProofDecl],
    max_depth: int = DEFAULT_MAX_PROOF_DEPTH,
) -> VerifyResult:
    errors: list[str] = []
    for label in proofs:
        assertion = theory.get_assertion(label)
        if assertion is None:
            errors.append(f"Proof of unknown theorem '{label}'")
        elif assertion.is_axiom:
            errors.append(f"'{label}' is an axiom and cannot be proved")

    outcomes: list[TheoremOutcome] = []
    for theorem in theory.theorems:
        decl = proofs.get(theorem.label)
        if decl is None:
            logger.warning("Theorem %r has no proof", theorem.label)
            outcomes.append(TheoremOutcome(theorem.label, ProofStatus.MISSING))
            continue
        outcomes.append(verify_theorem(theory, theorem, decl.proof, max_depth))

    return VerifyResult(theory.name, tuple(outcomes), tuple(errors))
