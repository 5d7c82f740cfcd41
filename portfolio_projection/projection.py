"""Core projection engine."""

import math
from dataclasses import asdict, dataclass, field

from portfolio_projection.params import ProjectionParameters

# Iteration cap: the target may never be reached (e.g. return <= -100% with
# non-positive investment), so the loop must not run unbounded.
DEFAULT_MAX_YEARS = 1000


class ProjectionDidNotConverge(RuntimeError):
    """Raised on request when a projection stopped before reaching the target."""

    def __init__(self, result: "ProjectionResult"):
        self.result = result
        final = result.final
        if math.isnan(final.portfolio):
            message = (
                f"portfolio became NaN in year {final.year};"
                f" target {result.target_value:,.0f} not reached"
            )
        else:
            message = (
                f"target {result.target_value:,.0f} not reached within {final.year} years"
                f" (final portfolio {final.portfolio:,.0f})"
            )
        super().__init__(message)


@dataclass(frozen=True)
class YearSnapshot:
    year: int
    portfolio: float
    growth: float
    investment: float
    expenses: float
    income: float


@dataclass
class ProjectionResult:
    """Ordered yearly snapshots from year 0 to the stopping year."""

    target_value: float
    max_years: int
    snapshots: list[YearSnapshot] = field(default_factory=list)
    converged: bool = False

    def __len__(self) -> int:
        return len(self.snapshots)

    def __getitem__(self, idx):
        return self.snapshots[idx]

    def __iter__(self):
        return iter(self.snapshots)

    @property
    def final(self) -> YearSnapshot:
        return self.snapshots[-1]

    @property
    def years_to_target(self) -> int | None:
        """Year at which the target was reached, or None if capped."""
        if not self.converged:
            return None
        return self.final.year

    def raise_for_convergence(self) -> "ProjectionResult":
        if not self.converged:
            raise ProjectionDidNotConverge(self)
        return self

    def to_rows(self) -> list[dict]:
        return [asdict(s) for s in self.snapshots]


def round_half_up(value: float) -> float:
    """Round to the nearest integer, halves toward +inf. Non-finite values pass through."""
    if not math.isfinite(value):
        return value
    # value - r is exact; value + 0.5 is not near 2**52 or just below 0.5
    r = math.floor(value)
    return float(r + 1 if value - r >= 0.5 else r)


def _grow(amount: float, rate: float, years: int) -> float:
    """amount * (1 + rate) ** years, overflowing to +/-inf instead of raising."""
    try:
        factor = (1 + rate) ** years
    except OverflowError:
        factor = -math.inf if (1 + rate) < 0 and years % 2 else math.inf
    return amount * factor


def project(
    params: ProjectionParameters, max_years: int = DEFAULT_MAX_YEARS,
) -> ProjectionResult:
    """Project the portfolio year by year until it reaches params.target_value.

    Income and expenses compound from their year-0 values at independent
    rates; each year the portfolio compounds at the effective return and
    then receives (income - expenses), which may be negative. Reported
    fields are rounded per year; the running portfolio keeps full precision.

    Args:
        params: starting position and rates.
        max_years: hard cap on simulated years. When hit, the result has
            converged=False and holds max_years + 1 snapshots.

    Returns:
        ProjectionResult with snapshots for year 0..N.
    """
    if max_years < 0:
        raise ValueError(f"max_years must be >= 0, got {max_years}")

    return_rate = params.effective_return_rate()
    income_growth = params.effective_income_growth_rate()
    expense_growth = params.expense_growth_rate

    portfolio = params.initial_portfolio
    years = 0
    snapshots = [
        YearSnapshot(
            year=0,
            portfolio=float(portfolio),
            growth=0.0,
            investment=0.0,
            expenses=float(params.initial_expenses),
            income=float(params.initial_post_tax_income),
        )
    ]

    while portfolio < params.target_value and years < max_years:
        post_tax_income = _grow(params.initial_post_tax_income, income_growth, years)
        expenses = _grow(params.initial_expenses, expense_growth, years)
        investment = post_tax_income - expenses
        previous_portfolio = portfolio
        portfolio = portfolio * (1 + return_rate) + investment
        years += 1

        snapshots.append(
            YearSnapshot(
                year=years,
                portfolio=round_half_up(portfolio),
                growth=round_half_up(portfolio - previous_portfolio),
                investment=round_half_up(investment),
                expenses=round_half_up(expenses),
                income=round_half_up(post_tax_income),
            )
        )

    return ProjectionResult(
        target_value=params.target_value,
        max_years=max_years,
        snapshots=snapshots,
        # a NaN portfolio also ends the loop but never counts as reaching the target
        converged=portfolio >= params.target_value,
    )
