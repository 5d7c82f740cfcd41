"""Tests for project() and the projection result types."""

import math

import pytest
from portfolio_projection import (
    ProjectionParameters,
    ProjectionDidNotConverge,
    project,
    round_half_up,
)


def _reference_trajectory(params: ProjectionParameters) -> list[float]:
    """Unrounded portfolio values straight from the yearly recurrence."""
    if params.adjust_for_inflation:
        r = params.xirr - params.inflation_rate
        g = (1 + params.income_growth_rate) / (1 + params.inflation_rate) - 1
    else:
        r = params.xirr
        g = params.income_growth_rate
    portfolio = params.initial_portfolio
    values = [portfolio]
    years = 0
    while portfolio < params.target_value:
        income = params.initial_post_tax_income * (1 + g) ** years
        expenses = params.initial_expenses * (1 + params.expense_growth_rate) ** years
        portfolio = portfolio * (1 + r) + (income - expenses)
        years += 1
        values.append(portfolio)
    return values


# Dashboard defaults without inflation adjustment
BASE = ProjectionParameters(
    initial_portfolio=20_000_000,
    initial_post_tax_income=6_500_000,
    initial_expenses=1_200_000,
    income_growth_rate=0.125,
    expense_growth_rate=0.05,
    xirr=0.25,
    target_value=8_000_000_000,
    adjust_for_inflation=False,
)


class TestYearZero:
    def test_year_zero_fields(self):
        r = project(BASE)
        s = r[0]
        assert s.year == 0
        assert s.portfolio == 20_000_000
        assert s.growth == 0
        assert s.investment == 0
        assert s.expenses == 1_200_000
        assert s.income == 6_500_000

    def test_year_zero_not_rounded(self):
        """Year 0 reports the raw inputs."""
        params = ProjectionParameters(
            initial_portfolio=100.4, initial_post_tax_income=10.6,
            initial_expenses=2.5, target_value=1000,
        )
        s = project(params)[0]
        assert s.portfolio == 100.4
        assert s.income == 10.6
        assert s.expenses == 2.5


class TestSequence:
    def setup_method(self):
        self.r = project(BASE)

    def test_years_contiguous(self):
        assert [s.year for s in self.r] == list(range(len(self.r)))

    def test_termination_condition(self):
        assert self.r.converged
        assert self.r.final.portfolio >= BASE.target_value
        assert all(s.portfolio < BASE.target_value for s in self.r.snapshots[:-1])

    def test_to_rows(self):
        rows = self.r.to_rows()
        assert len(rows) == len(self.r)
        assert set(rows[0]) == {"year", "portfolio", "growth", "investment", "expenses", "income"}


class TestImmediateTermination:
    def test_target_equal_to_initial(self):
        params = ProjectionParameters(initial_portfolio=5_000, target_value=5_000)
        r = project(params)
        assert len(r) == 1
        assert r.converged
        assert r.years_to_target == 0

    def test_target_below_initial(self):
        params = ProjectionParameters(initial_portfolio=5_000, target_value=100)
        assert len(project(params)) == 1


class TestHandCalculated:
    """Small scenarios checked by hand against the recurrence."""

    def test_constant_flows(self):
        # 1000 → 1000*1.1+50 = 1150 → 1150*1.1+50 = 1315 ≥ 1300
        params = ProjectionParameters(
            initial_portfolio=1000, initial_post_tax_income=100, initial_expenses=50,
            income_growth_rate=0, expense_growth_rate=0, xirr=0.1, target_value=1300,
        )
        r = project(params)
        assert [s.portfolio for s in r] == [1000, 1150, 1315]
        assert [s.growth for s in r] == [0, 150, 165]
        assert [s.investment for s in r] == [0, 50, 50]
        assert r.years_to_target == 2

    def test_income_growth_starts_from_year_zero_value(self):
        """First simulated year uses the unadjusted year-0 income."""
        params = ProjectionParameters(
            initial_portfolio=0, initial_post_tax_income=100, initial_expenses=0,
            income_growth_rate=0.1, expense_growth_rate=0, xirr=0, target_value=250,
        )
        r = project(params)
        assert [s.income for s in r] == [100, 100, 110, 121]
        assert [s.portfolio for s in r] == [0, 100, 210, 331]

    def test_negative_investment(self):
        params = ProjectionParameters(
            initial_portfolio=1000, initial_post_tax_income=0, initial_expenses=100,
            income_growth_rate=0, expense_growth_rate=0, xirr=0.2, target_value=1500,
        )
        r = project(params)
        assert [s.portfolio for s in r] == [1000, 1100, 1220, 1364, 1537]
        assert [s.investment for s in r[1:]] == [-100] * 4
        assert [s.growth for s in r[1:]] == [100, 120, 144, 173]

    def test_expense_growth(self):
        params = ProjectionParameters(
            initial_portfolio=0, initial_post_tax_income=1000, initial_expenses=100,
            income_growth_rate=0, expense_growth_rate=0.5, xirr=0, target_value=2000,
        )
        r = project(params)
        # expenses 100, 150, 225 → investment 900, 850, 775
        assert [s.expenses for s in r] == [100, 100, 150, 225]
        assert [s.portfolio for s in r] == [0, 900, 1750, 2525]


class TestConcreteScenario:
    """20M portfolio, 6.5M post-tax income, 1.2M expenses, 25% XIRR, 8B target."""

    def setup_method(self):
        self.r = project(BASE)
        self.expected = _reference_trajectory(BASE)

    def test_length_matches_recurrence(self):
        assert len(self.r) == len(self.expected)

    def test_years_to_target(self):
        assert self.r.years_to_target == 22

    def test_final_portfolio(self):
        assert self.r.final.portfolio == round_half_up(self.expected[-1])
        assert 8.2e9 < self.r.final.portfolio < 8.35e9

    def test_inflation_adjustment_takes_longer(self):
        import dataclasses

        adjusted = project(dataclasses.replace(BASE, adjust_for_inflation=True))
        assert adjusted.converged
        assert adjusted.years_to_target > self.r.years_to_target


class TestExpenseRateUnadjusted:
    def test_expenses_identical_with_and_without_flag(self):
        import dataclasses

        nominal = project(BASE)
        real = project(dataclasses.replace(BASE, adjust_for_inflation=True))
        n = min(len(nominal), len(real))
        assert [s.expenses for s in nominal[:n]] == [s.expenses for s in real[:n]]

    def test_expenses_follow_nominal_rate(self):
        import dataclasses

        real = project(dataclasses.replace(BASE, adjust_for_inflation=True))
        for s in real[1:]:
            expected = BASE.initial_expenses * (1 + BASE.expense_growth_rate) ** (s.year - 1)
            assert s.expenses == round_half_up(expected)


class TestRoundingIndependence:
    """Reported values are rounded per year; the running state is not."""

    def test_portfolio_matches_unrounded_recurrence(self):
        expected = _reference_trajectory(BASE)
        r = project(BASE)
        assert [s.portfolio for s in r[1:]] == [round_half_up(v) for v in expected[1:]]

    def test_fractional_flows_do_not_accumulate_rounding(self):
        # 0.4/year: rounding the state would keep it at 0 forever
        params = ProjectionParameters(
            initial_portfolio=0, initial_post_tax_income=0.4, initial_expenses=0,
            income_growth_rate=0, expense_growth_rate=0, xirr=0, target_value=2,
        )
        r = project(params)
        assert r.converged
        assert r.years_to_target == 5
        assert [s.portfolio for s in r] == [0, 0, 1, 1, 2, 2]

    def test_half_rounds_up(self):
        params = ProjectionParameters(
            initial_portfolio=0, initial_post_tax_income=2.5, initial_expenses=0,
            income_growth_rate=0, expense_growth_rate=0, xirr=0, target_value=3,
        )
        r = project(params)
        # running 2.5 < 3 keeps going even though the reported value is 3
        assert [s.portfolio for s in r] == [0, 3, 5]
        assert r[1].income == 3


class TestRoundHalfUp:
    def test_positive_half(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(0.5) == 1

    def test_negative_half(self):
        assert round_half_up(-2.5) == -2
        assert round_half_up(-2.6) == -3

    def test_non_finite_passthrough(self):
        assert math.isnan(round_half_up(math.nan))
        assert round_half_up(math.inf) == math.inf
        assert round_half_up(-math.inf) == -math.inf

    def test_just_below_half(self):
        assert round_half_up(0.49999999999999994) == 0
        assert round_half_up(-0.5000000000000001) == -1

    def test_odd_integers_above_2_pow_52(self):
        for v in (2**52 + 1, 2**52 + 3, 2**53 - 1):
            assert round_half_up(float(v)) == v

    def test_returns_float(self):
        assert isinstance(round_half_up(2.5), float)
        assert isinstance(round_half_up(7.0), float)


class TestLargeValues:
    def test_odd_integer_flows_reported_exactly(self):
        params = ProjectionParameters(
            initial_portfolio=0, initial_post_tax_income=2**52 + 1, initial_expenses=0,
            income_growth_rate=0, expense_growth_rate=0, xirr=0, target_value=2**53,
        )
        r = project(params)
        assert len(r) == 3
        assert r[1].portfolio == 2**52 + 1
        assert r[1].growth == 2**52 + 1
        assert r[1].income == 2**52 + 1
        assert r[2].portfolio == 2**53 + 2


class TestSnapshotTypes:
    def test_amounts_are_float(self):
        r = project(BASE)
        for s in r:
            assert isinstance(s.year, int)
            for value in (s.portfolio, s.growth, s.investment, s.expenses, s.income):
                assert isinstance(value, float)


class TestIterationCap:
    def setup_method(self):
        # -100% return with only expenses: stuck at -100 forever
        self.params = ProjectionParameters(
            initial_portfolio=1000, initial_post_tax_income=0, initial_expenses=100,
            income_growth_rate=0, expense_growth_rate=0, xirr=-1.0, target_value=2000,
        )

    def test_capped_result(self):
        r = project(self.params, max_years=50)
        assert not r.converged
        assert len(r) == 51
        assert r.years_to_target is None
        assert r.final.portfolio == -100

    def test_raise_for_convergence(self):
        r = project(self.params, max_years=10)
        with pytest.raises(ProjectionDidNotConverge, match="not reached within 10 years") as exc:
            r.raise_for_convergence()
        assert exc.value.result is r

    def test_raise_for_convergence_passthrough(self):
        r = project(BASE)
        assert r.raise_for_convergence() is r

    def test_zero_max_years(self):
        r = project(self.params, max_years=0)
        assert len(r) == 1
        assert not r.converged

    def test_negative_max_years(self):
        with pytest.raises(ValueError, match="max_years"):
            project(self.params, max_years=-1)

    def test_cap_not_reached_when_converging(self):
        r = project(BASE, max_years=22)
        assert r.converged
        assert len(r) == 23


class TestNonFinite:
    def test_nan_portfolio_stops_loop(self):
        # 0 * (1 + inf) is NaN, which fails `portfolio < target`
        params = ProjectionParameters(
            initial_portfolio=0, initial_post_tax_income=100, initial_expenses=0,
            income_growth_rate=0, expense_growth_rate=0, xirr=math.inf, target_value=1000,
        )
        r = project(params)
        assert len(r) == 2
        assert math.isnan(r.final.portfolio)
        assert r.final.investment == 100
        assert not r.converged

    def test_nan_stop_message(self):
        params = ProjectionParameters(
            initial_portfolio=0, initial_post_tax_income=100, initial_expenses=0,
            income_growth_rate=0, expense_growth_rate=0, xirr=math.inf, target_value=1000,
        )
        with pytest.raises(ProjectionDidNotConverge, match="became NaN in year 1"):
            project(params, max_years=50).raise_for_convergence()

    def test_growth_overflow_becomes_inf(self):
        params = ProjectionParameters(
            initial_portfolio=0, initial_post_tax_income=1, initial_expenses=0,
            income_growth_rate=1e10, expense_growth_rate=0, xirr=0, target_value=math.inf,
        )
        r = project(params)
        assert r.converged
        assert r.final.income == math.inf
        assert r.final.portfolio == math.inf


class TestStateless:
    def test_repeated_calls_identical(self):
        assert project(BASE).to_rows() == project(BASE).to_rows()

    def test_initial_income_unused(self):
        import dataclasses

        a = project(dataclasses.replace(BASE, initial_income=1))
        b = project(dataclasses.replace(BASE, initial_income=10**12))
        assert a.to_rows() == b.to_rows()
