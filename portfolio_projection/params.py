"""Projection parameters and derived rates."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ProjectionParameters:

    # Starting position
    initial_portfolio: float = 20_000_000
    initial_income: float = 10_000_000  # display only; the loop uses post-tax income
    initial_expenses: float = 1_200_000
    initial_post_tax_income: float = 6_500_000

    # Growth parameters
    income_growth_rate: float = 0.125
    expense_growth_rate: float = 0.05
    xirr: float = 0.25

    # Economic parameters
    inflation_rate: float = 0.06
    adjust_for_inflation: bool = False

    target_value: float = 8_000_000_000

    def effective_return_rate(self) -> float:
        """Annual return used for compounding (real return when adjusting)."""
        if self.adjust_for_inflation:
            return self.xirr - self.inflation_rate
        return self.xirr

    def effective_income_growth_rate(self) -> float:
        """Annual income growth used for compounding (real growth when adjusting).

        The expense growth rate has no counterpart: it is always nominal.
        """
        if self.adjust_for_inflation:
            return (1 + self.income_growth_rate) / (1 + self.inflation_rate) - 1
        return self.income_growth_rate
