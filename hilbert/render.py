"""Render a Theory back into declaration syntax using Jinja2 templates."""

import os
from typing import Any

import jinja2

from hilbert.formula import format_expr
from hilbert.signature import Binder, Signature
from hilbert.theory import Assertion, Theory

# Setup jinja2 environment pointing to hilbert/templates
_TEMPLATE_DIR = os.path.join(os.path.dirname(__file__), "templates")
_ENV = jinja2.Environment(
    loader=jinja2.FileSystemLoader(_TEMPLATE_DIR),
    autoescape=False,
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
)


def render(template_name: str, **kwargs: Any) -> str:
    """Render a Jinja2 template with the given keyword arguments."""
    template = _ENV.get_template(template_name)
    return template.render(**kwargs)


def _math(text: str) -> str:
    return f"$ {text} $"


def render_binders(binders: tuple[Binder, ...]) -> list[str]:
    """Group consecutive binders that share kind, sort and deps: ``(a b: wff)``."""
    groups: list[tuple[list[str], Binder]] = []
    for b in binders:
        if groups:
            names, first = groups[-1]
            if (first.bound, first.sort, first.deps) == (b.bound, b.sort, b.deps):
                names.append(b.name)
                continue
        groups.append(([b.name], b))
    out = []
    for names, b in groups:
        typ = " ".join([b.sort, *b.deps])
        if b.bound:
            out.append(f"{{{' '.join(names)}: {typ}}}")
        else:
            out.append(f"({' '.join(names)}: {typ})")
    return out


def render_assertion(a: Assertion, sig: Signature) -> str:
    parts = [a.kind.value, a.label, *render_binders(a.binders)]
    # Hypotheses up to the last named one become binders, under their labels.
    named = [i for i, h in enumerate(a.hypotheses) if h.name is not None]
    split = named[-1] + 1 if named else 0
    arrows: list[str] = []
    for i, (label, h) in enumerate(zip(a.hypothesis_labels, a.hypotheses)):
        math = _math(format_expr(h.formula, sig))
        if i < split:
            parts.append(f"({label}: {math})")
        else:
            arrows.append(math)
    arrows.append(_math(format_expr(a.conclusion, sig)))
    return f"{' '.join(parts)}: {' > '.join(arrows)};"


def _delimiter_lines(sig: Signature) -> list[str]:
    d = sig.delimiters
    if not d.chars:
        return []
    if d.left == d.right:
        return [f"delimiter {_math(' '.join(sorted(d.left)))};"]
    left = " ".join(sorted(d.left))
    right = " ".join(sorted(d.right))
    return [f"delimiter $ {left} $ $ {right} $;"]


def render_theory(theory: Theory) -> str:
    """Declaration text that parses back to an equal theory.

    Each notation is printed right after its term, so that later math
    strings can use it.
    """
    sig = theory.signature
    sorts = [
        " ".join([*decl.modifiers.keywords, "sort", decl.name]) + ";"
        for decl in sig.sorts.values()
    ]
    terms: list[str] = []
    for t in sig.terms.values():
        keyword = "def" if t.is_def else "term"
        head = " ".join([keyword, t.name, *render_binders(t.binders)])
        result = " ".join([t.result_sort, *t.result_deps])
        body = f" = {_math(format_expr(t.body, sig))}" if t.body is not None else ""
        terms.append(f"{head}: {result}{body};")
        for n in sig.notations.values():
            if n.term == t.name:
                terms.append(
                    f"{n.fixity.value} {n.term}: {_math(n.token)} prec {n.prec_keyword};"
                )
    return render(
        "theory.mm0.j2",
        theory=theory,
        delimiters=_delimiter_lines(sig),
        sorts=sorts,
        terms=terms,
        assertions=[render_assertion(a, sig) for a in theory.assertions],
    )
