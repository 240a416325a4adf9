"""Structural and diagnostic validation of RunSpecs.

Two validators with different contracts:

- ``validate`` is strict: it raises at the first empty core set. The
  builder runs it on every RunSpec it produces.
- ``validate_spec`` is advisory: it never raises and returns a
  ``ValidationReport`` with structural, closure and accounting messages.

Both share ``empty_core_sets`` so the fail-fast and advisory paths agree
on what an empty core set is.
"""

from __future__ import annotations

import logging
from typing import Any

import pandas as pd

from cgecore.core.sets import CORE_SETS, Sets
from cgecore.core.specs import RunSpec
from cgecore.errors import EmptySetError
from cgecore.qa.reporting import CategoryReport, ReportCategory, ValidationReport

logger = logging.getLogger(__name__)

DEFAULT_ABS_TOL = 1e-6
DEFAULT_REL_TOL = 1e-6


def empty_core_sets(sets: Sets) -> list[str]:
    """Names of the empty core sets, in canonical order."""
    return [name for name in CORE_SETS if len(getattr(sets, name)) == 0]


def _empty_set_message(name: str) -> str:
    return str(EmptySetError(name))


def validate(spec: RunSpec) -> bool:
    """Validate that the RunSpec is structurally consistent (minimal checks).

    Raises on missing core sets. This is intentionally minimal and used by
    the builder; for richer diagnostics use ``validate_spec``.

    Returns:
        True if all checks pass

    Raises:
        EmptySetError: For the first empty core set
    """
    empty = empty_core_sets(spec.model.sets)
    if empty:
        raise EmptySetError(empty[0])
    return True


def _eq_delta(lhs: float, rhs: float) -> tuple[float, float]:
    abs_delta = abs(lhs - rhs)
    rel_delta = abs_delta / max(abs(lhs), abs(rhs), 1.0)
    return abs_delta, rel_delta


def _eq_pass(lhs: float, rhs: float, abs_tol: float, rel_tol: float) -> tuple[bool, float, float]:
    abs_delta, rel_delta = _eq_delta(lhs, rhs)
    return (abs_delta <= abs_tol) or (rel_delta <= rel_tol), abs_delta, rel_delta


def _benchmark_frame(data: Any) -> pd.DataFrame | None:
    if isinstance(data, pd.DataFrame):
        return data
    # SAM containers that wrap a square frame
    frame = getattr(data, "dataframe", None)
    if isinstance(frame, pd.DataFrame):
        return frame
    return None


def _check_structure(spec: RunSpec, category: CategoryReport) -> None:
    if len(spec.model.blocks) == 0:
        category.errors.append("RunSpec has no blocks")
    for name in empty_core_sets(spec.model.sets):
        category.errors.append(_empty_set_message(name))


def _check_closure(spec: RunSpec, category: CategoryReport) -> None:
    num = spec.closure.numeraire
    sets = spec.model.sets
    if not (num in sets.commodities or num in sets.factors):
        category.warnings.append(f"Numeraire {num} not found in commodities or factors")


def _check_accounting(
    data: Any,
    category: CategoryReport,
    abs_tol: float,
    rel_tol: float,
) -> None:
    if data is None:
        category.notes.append("No data provided for SAM or flow consistency checks")
        return

    frame = _benchmark_frame(data)
    if frame is None:
        category.notes.append(
            f"Unsupported benchmark data type {type(data).__name__}; "
            "SAM balance checks skipped"
        )
        return

    if frame.shape[0] != frame.shape[1] or set(frame.index) != set(frame.columns):
        category.errors.append("Benchmark SAM rows and columns do not list the same accounts")
        return

    try:
        values = frame.astype(float)
    except (TypeError, ValueError) as exc:
        category.errors.append(f"Benchmark SAM is not numeric: {exc}")
        return

    row_totals = values.sum(axis=1)
    col_totals = values.sum(axis=0)
    for account in values.index:
        lhs = float(row_totals[account])
        rhs = float(col_totals[account])
        passed, abs_delta, rel_delta = _eq_pass(lhs, rhs, abs_tol, rel_tol)
        if not passed:
            category.errors.append(
                f"Account {account} is unbalanced: row total {lhs:.6g} "
                f"vs column total {rhs:.6g} (abs delta {abs_delta:.3g})"
            )
    logger.debug(f"Checked {len(values.index)} SAM accounts for row/column balance")


def validate_spec(
    spec: RunSpec,
    data: Any = None,
    *,
    abs_tol: float = DEFAULT_ABS_TOL,
    rel_tol: float = DEFAULT_REL_TOL,
) -> ValidationReport:
    """Validate RunSpec structure and closure; returns a report instead of throwing.

    This function is meant for pre-solve diagnostics. It never raises: a
    check that cannot inspect its input records the failure as an error
    of its category.

    Args:
        spec: RunSpec to inspect
        data: Optional benchmark data; a square ``pandas.DataFrame`` SAM
            (or an object exposing one as ``.dataframe``) enables
            row/column balance checks
        abs_tol: Absolute tolerance for balance checks
        rel_tol: Relative tolerance for balance checks

    Returns:
        ValidationReport with structural, closure and accounting categories
    """
    categories = {cat.value: CategoryReport() for cat in ReportCategory}
    structural = categories[ReportCategory.STRUCTURAL.value]
    closure = categories[ReportCategory.CLOSURE.value]
    accounting = categories[ReportCategory.ACCOUNTING.value]

    checks = [
        (structural, lambda: _check_structure(spec, structural)),
        (closure, lambda: _check_closure(spec, closure)),
        (accounting, lambda: _check_accounting(data, accounting, abs_tol, rel_tol)),
    ]
    for category, check in checks:
        try:
            check()
        except Exception as exc:  # noqa: BLE001
            category.errors.append(f"Check failed: {type(exc).__name__}: {exc}")

    report = ValidationReport.from_categories(categories)
    logger.debug(
        f"Validated RunSpec: ok={report.ok} errors={report.errors} warnings={report.warnings}"
    )
    return report
