"""Display formatting and Markdown report rendering.

All amounts in a ProjectionResult are in base currency units; everything here
is a pure display transform (Crore = 1,00,00,000 units).
"""

from __future__ import annotations

import math
from pathlib import Path

from portfolio_projection.params import ProjectionParameters
from portfolio_projection.projection import ProjectionResult

CRORE = 10_000_000

TABLE_COLUMNS = (
    ("Year", "year"),
    ("Portfolio Value", "portfolio"),
    ("Annual Growth", "growth"),
    ("Annual Investment", "investment"),
    ("Annual Income", "income"),
    ("Annual Expenses", "expenses"),
)

# ---------------------------------------------------------------------------
# Format helpers
# ---------------------------------------------------------------------------

def to_crore(v: float) -> float:
    return v / CRORE


def fmt_crore(v: float) -> str:
    """20000000 → "2.00 Cr" """
    return f"{to_crore(v):.2f} Cr"


def fmt_amount(v: float) -> str:
    """1200000 → "1,200,000" """
    if not math.isfinite(v):
        return str(v)
    return f"{v:,.0f}"


def fmt_rate(v: float) -> str:
    """0.125 → "12.50%" """
    return f"{v * 100:.2f}%"


def _cell(key: str, value: float) -> str:
    if key == "year":
        return str(value)
    return fmt_crore(value)


# ---------------------------------------------------------------------------
# Text output
# ---------------------------------------------------------------------------

def render_summary(params: ProjectionParameters, result: ProjectionResult) -> str:
    final = result.final
    lines = []
    if result.converged:
        lines.append(f"Years to reach target: {result.years_to_target}")
    else:
        lines.append(
            f"Target {fmt_crore(params.target_value)} not reached within "
            f"{len(result) - 1} years"
        )
    lines.append(f"Final portfolio value: {fmt_crore(final.portfolio)}")
    return "\n".join(lines)


def render_table(result: ProjectionResult) -> str:
    """Fixed-width yearly table, amounts in Crore."""
    widths = [max(len(label), 6) for label, _ in TABLE_COLUMNS]
    rows = [[_cell(key, getattr(s, key)) for _, key in TABLE_COLUMNS] for s in result]
    for row in rows:
        widths = [max(w, len(c)) for w, c in zip(widths, row)]

    header = " ".join(f"{label:>{w}}" for (label, _), w in zip(TABLE_COLUMNS, widths))
    rule = "-" * len(header)
    lines = [rule, header, rule]
    for row in rows:
        lines.append(" ".join(f"{c:>{w}}" for c, w in zip(row, widths)))
    lines.append(rule)
    return "\n".join(lines)


def render_parameters(params: ProjectionParameters) -> str:
    lines = [
        f"  Initial portfolio: {fmt_amount(params.initial_portfolio)} ({fmt_crore(params.initial_portfolio)})",
        f"  Income: {fmt_amount(params.initial_income)} / post-tax {fmt_amount(params.initial_post_tax_income)}"
        f" (growth {fmt_rate(params.income_growth_rate)})",
        f"  Expenses: {fmt_amount(params.initial_expenses)} (growth {fmt_rate(params.expense_growth_rate)})",
        f"  XIRR: {fmt_rate(params.xirr)} / inflation: {fmt_rate(params.inflation_rate)}",
        f"  Target: {fmt_amount(params.target_value)} ({fmt_crore(params.target_value)})",
    ]
    if params.adjust_for_inflation:
        lines.append(
            f"  Inflation-adjusted: return {fmt_rate(params.effective_return_rate())}"
            f" / income growth {fmt_rate(params.effective_income_growth_rate())}"
            f" (expense growth stays nominal)"
        )
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Markdown report
# ---------------------------------------------------------------------------

def _render_md_parameters(params: ProjectionParameters) -> str:
    rows = [
        ("Initial portfolio", fmt_amount(params.initial_portfolio)),
        ("Initial income", fmt_amount(params.initial_income)),
        ("Initial post-tax income", fmt_amount(params.initial_post_tax_income)),
        ("Initial expenses", fmt_amount(params.initial_expenses)),
        ("Income growth", fmt_rate(params.income_growth_rate)),
        ("Expense growth", fmt_rate(params.expense_growth_rate)),
        ("XIRR", fmt_rate(params.xirr)),
        ("Inflation", fmt_rate(params.inflation_rate)),
        ("Adjust for inflation", "yes" if params.adjust_for_inflation else "no"),
        ("Target value", f"{fmt_amount(params.target_value)} ({fmt_crore(params.target_value)})"),
    ]
    lines = ["## Parameters", "", "| Parameter | Value |", "|---|---:|"]
    lines += [f"| {label} | {value} |" for label, value in rows]
    return "\n".join(lines)


def _render_md_table(result: ProjectionResult) -> str:
    labels = [label for label, _ in TABLE_COLUMNS]
    lines = [
        "## Yearly Projection",
        "",
        "| " + " | ".join(labels) + " |",
        "|" + "|".join("---:" for _ in labels) + "|",
    ]
    for s in result:
        cells = [_cell(key, getattr(s, key)) for _, key in TABLE_COLUMNS]
        lines.append("| " + " | ".join(cells) + " |")
    return "\n".join(lines)


def render_report(
    params: ProjectionParameters,
    result: ProjectionResult,
    chart_path: Path | None = None,
) -> str:
    """Render the full Markdown report."""
    parts = [
        "# Financial Projection",
        _render_md_parameters(params),
        "## Result\n\n" + render_summary(params, result).replace("\n", "  \n"),
    ]
    if chart_path is not None:
        parts.append(f"![Financial Projection Over Time]({chart_path.as_posix()})")
    parts.append(_render_md_table(result))
    return "\n\n".join(parts) + "\n"
