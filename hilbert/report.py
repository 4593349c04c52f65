from __future__ import annotations

from typing import Any

from .check import CheckResult, Diagnostic
from .theory import Theory
from .verify import ProofStatus, VerifyResult


def _diag_line(diag: Diagnostic) -> str:
    where = f" '{diag.assertion}':" if diag.assertion else ""
    path = f" [{diag.path}]" if diag.path else ""
    return f"    - [{diag.check}]{where} {diag.message}{path} ({diag.severity.name})"


def format_check_report(theory: Theory, result: CheckResult) -> str:
    """Human-readable report for terminal output."""
    lines = [f"{theory.name}"]

    if result.is_well_formed:
        lines.append("  ✓ Well-formed (0 errors)")
    else:
        lines.append(f"  × Ill-formed ({len(result.errors)} errors)")
        lines.extend(_diag_line(d) for d in result.errors)

    if result.warnings:
        n = len(result.warnings)
        lines.append(f"  ⚠ {n} warning{'s' if n > 1 else ''}")
        lines.extend(_diag_line(d) for d in result.warnings)

    sig = theory.signature
    lines.append(
        f"  Signature: {len(sig.sorts)} sorts, {len(sig.terms)} terms, "
        f"{len(sig.notations)} notations, {len(theory.axioms)} axioms, "
        f"{len(theory.theorems)} theorems"
    )
    return "\n".join(lines)


_STATUS_MARK = {
    ProofStatus.VERIFIED: "✓",
    ProofStatus.FAILED: "×",
    ProofStatus.MISSING: "?",
}


def format_verify_report(result: VerifyResult) -> str:
    lines = [
        f"{result.theory_name} — {len(result.verified)}/{len(result.outcomes)} theorems verified"
    ]
    for o in result.outcomes:
        line = f"  {_STATUS_MARK[o.status]} {o.label} ({o.status.value})"
        if o.message:
            line += f": {o.message}"
        lines.append(line)
    for err in result.errors:
        lines.append(f"  × {err}")
    return "\n".join(lines)


def check_report_json(theory: Theory, result: CheckResult) -> dict[str, Any]:
    """Machine-readable report for pipeline integration."""
    return {
        "theory": theory.name,
        "well_formed": result.is_well_formed,
        "error_count": len(result.errors),
        "warning_count": len(result.warnings),
        "diagnostics": [
            {
                "check": d.check,
                "severity": d.severity.value,
                "assertion": d.assertion,
                "message": d.message,
                "path": d.path,
            }
            for d in result.diagnostics
        ],
    }


def verify_report_json(result: VerifyResult) -> dict[str, Any]:
    return {
        "theory": result.theory_name,
        "all_verified": result.all_verified,
        "theorems": [
            {"label": o.label, "status": o.status.value, "message": o.message}
            for o in result.outcomes
        ],
        "errors": list(result.errors),
    }
