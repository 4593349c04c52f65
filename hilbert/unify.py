"""First-order matching of assertion patterns against concrete statements.

The pattern's variables are the binders of the assertion being applied;
the target is a statement about the theorem's own variables, which are
treated as constants. Matching therefore only ever extends the
substitution for pattern variables, and never rewrites the target.
"""

from __future__ import annotations

from collections.abc import Mapping

from .terms import App, Expr, Var


def match_expr(
    pattern: Expr, target: Expr, subst: Mapping[str, Expr]
) -> dict[str, Expr] | None:
    """Extend ``subst`` so that ``pattern[subst] == target``.

    Returns the extended substitution, or None if no extension exists.
    ``subst`` itself is never modified.
    """
    out = dict(subst)
    if _match(pattern, target, out):
        return out
    return None


def _match(pattern: Expr, target: Expr, subst: dict[str, Expr]) -> bool:
    match pattern:
        case Var(name=name):
            bound = subst.get(name)
            if bound is None:
                subst[name] = target
                return True
            return bound == target
        case App(term=term, args=args):
            if not isinstance(target, App) or target.term != term:
                return False
            if len(target.args) != len(args):
                return False
            return all(_match(p, t, subst) for p, t in zip(args, target.args))
    return False  # type: ignore[unreachable]
