from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum

from .signature import Binder, Signature, TermDecl
from .sorts import SortRef
from .terms import Expr, Var, free_vars, iter_terms
from .theory import Assertion, Theory


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class Diagnostic:
    check: str
    severity: Severity
    assertion: str | None
    message: str
    path: str | None


@dataclass(frozen=True)
class CheckResult:
    theory_name: str
    diagnostics: tuple[Diagnostic, ...]

    @property
    def errors(self) -> tuple[Diagnostic, ...]:
        return tuple(d for d in self.diagnostics if d.severity == Severity.ERROR)

    @property
    def warnings(self) -> tuple[Diagnostic, ...]:
        return tuple(d for d in self.diagnostics if d.severity == Severity.WARNING)

    @property
    def is_well_formed(self) -> bool:
        return len(self.errors) == 0


@dataclass
class CheckContext:
    sig: Signature
    decl_name: str | None
    diagnostics: list[Diagnostic] = field(default_factory=list)
    _binders: dict[str, Binder] = field(default_factory=dict)

    def error(self, check: str, message: str, path: str | None = None) -> None:
        self.diagnostics.append(
            Diagnostic(check, Severity.ERROR, self.decl_name, message, path)
        )

    def warning(self, check: str, message: str, path: str | None = None) -> None:
        self.diagnostics.append(
            Diagnostic(check, Severity.WARNING, self.decl_name, message, path)
        )

    def begin_decl(self, name: str | None, binders: tuple[Binder, ...] = ()) -> None:
        self.decl_name = name
        self._binders = {b.name: b for b in binders}

    def get_binder(self, name: str) -> Binder | None:
        return self._binders.get(name)


# ---------------------------------------------------------------------------
# Binders (shared by terms and assertions)
# ---------------------------------------------------------------------------


def check_binders(
    binders: tuple[Binder, ...], ctx: CheckContext, path: str = "binders"
) -> None:
    seen_bound: set[str] = set()
    for i, b in enumerate(binders):
        bpath = f"{path}[{i}]"
        decl = ctx.sig.get_sort(b.sort)
        if decl is None:
            ctx.error("sort_declared", f"Sort '{b.sort}' of binder '{b.name}' is not declared", bpath)
        elif b.bound and decl.is_strict:
            ctx.error(
                "sort_strict",
                f"Bound variable '{b.name}' has strict sort '{b.sort}'",
                bpath,
            )
        elif not b.bound and decl.is_free and b.deps:
            ctx.error(
                "sort_free",
                f"Variable '{b.name}' of free sort '{b.sort}' cannot have dependencies",
                bpath,
            )
        check_deps(b.deps, seen_bound, ctx, f"'{b.name}'", bpath)
        if b.bound:
            seen_bound.add(b.name)


def check_deps(
    deps: tuple[str, ...],
    bound_names: set[str],
    ctx: CheckContext,
    owner: str,
    path: str,
) -> None:
    for d in deps:
        if d not in bound_names:
            ctx.error(
                "deps_bound",
                f"Dependency '{d}' of {owner} is not an earlier bound variable",
                path,
            )


# ---------------------------------------------------------------------------
# Expressions
# ---------------------------------------------------------------------------


def check_expr(expr: Expr, ctx: CheckContext, path: str) -> SortRef | None:
    """Type ``expr`` against the current declaration's binders."""
    if isinstance(expr, Var):
        binder = ctx.get_binder(expr.name)
        if binder is None:
            ctx.error(
                "var_bound",
                f"Variable '{expr.name}' is not a binder of this declaration",
                path,
            )
            return None
        return binder.sort

    term = ctx.sig.get_term(expr.term)
    if term is None:
        ctx.error("term_declared", f"Term '{expr.term}' is not declared", path)
        return None
    if len(expr.args) != term.arity:
        ctx.error(
            "term_arity",
            f"Term '{expr.term}' expects {term.arity} arguments, got {len(expr.args)}",
            path,
        )
        return term.result_sort

    for i, (arg, param) in enumerate(zip(expr.args, term.binders, strict=True)):
        arg_path = f"{path}.args[{i}]"
        arg_sort = check_expr(arg, ctx, arg_path)
        if arg_sort is not None and arg_sort != param.sort:
            ctx.error(
                "term_arg_sorts",
                f"Argument {i} to '{expr.term}' expected sort '{param.sort}', got '{arg_sort}'",
                arg_path,
            )
        if param.bound:
            binder = ctx.get_binder(arg.name) if isinstance(arg, Var) else None
            if binder is None or not binder.bound:
                ctx.error(
                    "bound_arg",
                    f"Argument {i} to '{expr.term}' must be a bound variable",
                    arg_path,
                )
    return term.result_sort


# ---------------------------------------------------------------------------
# Layer 1: signature
# ---------------------------------------------------------------------------


def check_signature(theory: Theory, ctx: CheckContext) -> None:
    sig = theory.signature
    ctx.begin_decl(None)

    # Registry keys must match declared names
    for key, decl in sig.sorts.items():
        if key != decl.name:
            ctx.error(
                "no_name_collisions",
                f"Sort registered as '{key}' is named '{decl.name}'",
            )

    earlier: set[str] = set()
    for name, term in sig.terms.items():
        ctx.begin_decl(name, term.binders)
        if name != term.name:
            ctx.error("no_name_collisions", f"Term registered as '{name}' is named '{term.name}'")
        check_binders(term.binders, ctx)
        check_binder_names(term.binders, (), ctx)
        result = sig.get_sort(term.result_sort)
        if result is None:
            ctx.error("sort_declared", f"Result sort '{term.result_sort}' is not declared", "result")
        elif result.is_pure:
            ctx.error("sort_pure", f"Term returns pure sort '{term.result_sort}'", "result")
        bound = {b.name for b in term.binders if b.bound}
        check_deps(term.result_deps, bound, ctx, "the result", "result")
        if term.body is not None:
            check_def_body(term, earlier, ctx)
        earlier.add(name)

    ctx.begin_decl(None)
    for token, n in sig.notations.items():
        path = f"notations[{token!r}]"
        term = sig.get_term(n.term)
        if term is None:
            ctx.error("notation_term", f"Notation '{token}' refers to undeclared term '{n.term}'", path)
            continue
        expected = 2 if n.fixity.is_infix else 1
        if term.arity != expected:
            ctx.error(
                "notation_term",
                f"{n.fixity.value} notation '{token}' needs a term of arity {expected}, "
                f"'{n.term}' has {term.arity}",
                path,
            )


def check_def_body(term: TermDecl, earlier: set[str], ctx: CheckContext) -> None:
    """A definition body is typed over the definition's binders, has its
    result sort, and only uses terms declared before the definition."""
    assert term.body is not None
    if not term.is_def:
        ctx.error("def_body", f"Term '{term.name}' has a body but is not a definition", "body")
    for used in sorted(set(iter_terms(term.body)) - earlier):
        if used in ctx.sig.terms:
            ctx.error(
                "def_body",
                f"Body uses '{used}', which is not declared before '{term.name}'",
                "body",
            )
    sort = check_expr(term.body, ctx, "body")
    if sort is not None and sort != term.result_sort:
        ctx.error(
            "def_body",
            f"Body has sort '{sort}', but '{term.name}' returns '{term.result_sort}'",
            "body",
        )


def check_names(theory: Theory, ctx: CheckContext) -> None:
    ctx.begin_decl(None)
    sig = theory.signature
    owners: Counter[str] = Counter()
    owners.update(sig.sorts.keys())
    owners.update(sig.terms.keys())
    owners.update({a.label for a in theory.assertions})
    for name, count in sorted(owners.items()):
        if count > 1:
            ctx.error(
                "no_name_collisions",
                f"Name '{name}' is declared {count} times across sorts, terms and assertions",
            )


def check_binder_names(
    binders: tuple[Binder, ...], hyp_names: tuple[str, ...], ctx: CheckContext
) -> None:
    counts = Counter([b.name for b in binders] + list(hyp_names))
    for name, count in counts.items():
        if count > 1:
            ctx.error(
                "no_name_collisions",
                f"Name '{name}' is used {count} times among binders and hypotheses",
            )


# ---------------------------------------------------------------------------
# Layer 2: assertions
# ---------------------------------------------------------------------------


def check_assertion(assertion: Assertion, ctx: CheckContext) -> None:
    ctx.begin_decl(assertion.label, assertion.binders)
    check_binders(assertion.binders, ctx)
    check_binder_names(assertion.binders, assertion.hypothesis_labels, ctx)

    formulas = [
        (f"hypotheses[{i}]", h.formula) for i, h in enumerate(assertion.hypotheses)
    ] + [("conclusion", assertion.conclusion)]
    for path, formula in formulas:
        sort = check_expr(formula, ctx, path)
        if sort is None:
            continue
        decl = ctx.sig.get_sort(sort)
        if decl is not None and not decl.is_provable:
            ctx.error(
                "sort_provable",
                f"Statement has sort '{sort}', which is not provable",
                path,
            )

    used: set[str] = set()
    for _, formula in formulas:
        used |= free_vars(formula)
    for b in assertion.binders:
        # A bound variable listed as a dependency is used by its dependents.
        if b.name in used or any(b.name in o.deps for o in assertion.binders):
            continue
        ctx.warning(
            "binder_unused",
            f"Binder '{b.name}' does not occur in any hypothesis or the conclusion",
        )


def check_theory(theory: Theory) -> CheckResult:
    ctx = CheckContext(sig=theory.signature, decl_name=None)

    check_names(theory, ctx)
    check_signature(theory, ctx)

    labels: Counter[str] = Counter(a.label for a in theory.assertions)
    for label, count in labels.items():
        if count > 1:
            ctx.begin_decl(label)
            ctx.error("no_name_collisions", f"Assertion label '{label}' is declared {count} times")

    for assertion in theory.assertions:
        check_assertion(assertion, ctx)

    # Sort diagnostics by severity, check, assertion
    def sort_key(d: Diagnostic) -> tuple[int, str, str]:
        severity_order = 0 if d.severity == Severity.ERROR else 1
        return (severity_order, d.check, d.assertion or "")

    sorted_diagnostics = tuple(sorted(ctx.diagnostics, key=sort_key))
    return CheckResult(theory.name, sorted_diagnostics)