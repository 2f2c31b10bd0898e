"""
Tests for the growth simulator.
"""

import math

import pytest
from pydantic import ValidationError

from finance_tracker.models.growth_simulator import (
    GrowthSimulator,
    SimulationParameters,
    SimulationSummary,
    simulate_growth,
)


def make_params(
    initial_amount=1000.0,
    monthly_contribution=100.0,
    annual_return_rate_percent=7.0,
    horizon_years=10,
    annual_inflation_rate_percent=3.0,
):
    return SimulationParameters(
        initial_amount=initial_amount,
        monthly_contribution=monthly_contribution,
        annual_return_rate_percent=annual_return_rate_percent,
        horizon_years=horizon_years,
        annual_inflation_rate_percent=annual_inflation_rate_percent,
    )


def has_at_most_two_decimals(value: float) -> bool:
    return round(value, 2) == value


class TestSimulationParameters:
    """Test SimulationParameters validation."""

    def test_valid_parameters(self):
        """Test valid parameters by field name."""
        params = make_params()

        assert params.initial_amount == 1000.0
        assert params.monthly_contribution == 100.0
        assert params.horizon_years == 10
        assert params.total_months == 120

    def test_parameters_by_wire_names(self):
        """Test that the wire aliases populate the same fields."""
        params = SimulationParameters.model_validate(
            {
                "initial_amount": 500,
                "monthly_investment": 50,
                "annual_return_rate": 5,
                "years": 2,
                "inflation_rate": 2,
            }
        )

        assert params.monthly_contribution == 50
        assert params.annual_return_rate_percent == 5
        assert params.horizon_years == 2
        assert params.annual_inflation_rate_percent == 2

    def test_negative_return_rate_allowed(self):
        """Test that a negative return rate is accepted."""
        params = make_params(annual_return_rate_percent=-50)
        assert params.annual_return_rate_percent == -50

    @pytest.mark.parametrize(
        "overrides",
        [
            {"initial_amount": -1},
            {"monthly_contribution": -0.01},
            {"horizon_years": -1},
            {"initial_amount": math.inf},
            {"monthly_contribution": math.nan},
            {"annual_return_rate_percent": math.inf},
            {"annual_inflation_rate_percent": -1200},
            {"annual_inflation_rate_percent": -5000},
        ],
    )
    def test_invalid_parameters(self, overrides):
        """Test that out-of-range or non-finite inputs are rejected."""
        with pytest.raises(ValidationError):
            make_params(**overrides)

    @pytest.mark.parametrize("rate", [-100, -150, -1200, -5000])
    def test_any_finite_return_rate_allowed(self, rate):
        """Test that return rates have no lower bound."""
        params = make_params(annual_return_rate_percent=rate)
        assert params.annual_return_rate_percent == rate

    def test_long_horizon_allowed(self):
        """Test that the horizon has no upper bound."""
        params = make_params(horizon_years=150)
        assert params.total_months == 1800

    def test_parameters_are_immutable(self):
        """Test that parameters cannot be changed after construction."""
        params = make_params()
        with pytest.raises(ValidationError):
            params.initial_amount = 5


class TestGrowthSimulator:
    """Test GrowthSimulator behaviour."""

    def test_yearly_sampling(self):
        """Test that a 10 year horizon yields one point per year."""
        result = GrowthSimulator().simulate(make_params(horizon_years=10))

        assert len(result.points) == 10
        assert [p.month_index for p in result.points] == list(range(12, 121, 12))
        assert [p.year_index for p in result.points] == list(range(1, 11))

    def test_one_year_contributions(self):
        """Test total contributions after one year."""
        result = simulate_growth(
            make_params(
                initial_amount=1000,
                monthly_contribution=100,
                annual_return_rate_percent=7,
                horizon_years=1,
                annual_inflation_rate_percent=0,
            )
        )

        assert len(result.points) == 1
        point = result.points[0]
        assert point.month_index == 12
        assert point.total_contributed == 2200
        assert point.nominal_value > 2200
        assert point.real_value == point.nominal_value
        assert point.gains == pytest.approx(point.nominal_value - 2200, abs=0.01)

    def test_known_annuity_value(self):
        """Test contributions compounded at 1% a month for a year."""
        result = simulate_growth(
            make_params(
                initial_amount=0,
                monthly_contribution=100,
                annual_return_rate_percent=12,
                horizon_years=1,
                annual_inflation_rate_percent=0,
            )
        )

        point = result.points[0]
        assert point.nominal_value == 1280.93
        assert point.total_contributed == 1200
        assert point.gains == 80.93
        assert point.return_rate_percent == 6.74

    def test_inflation_deflates_real_value(self):
        """Test that real value is nominal value deflated monthly."""
        result = simulate_growth(
            make_params(
                initial_amount=1000,
                monthly_contribution=0,
                annual_return_rate_percent=0,
                horizon_years=1,
                annual_inflation_rate_percent=12,
            )
        )

        point = result.points[0]
        assert point.nominal_value == 1000
        assert point.real_value == 887.45

    def test_zero_rates_identity(self):
        """Test that without return or inflation all values equal contributions."""
        result = simulate_growth(
            make_params(annual_return_rate_percent=0, annual_inflation_rate_percent=0)
        )

        for point in result.points:
            assert point.nominal_value == point.real_value == point.total_contributed
            assert point.gains == 0
            assert point.return_rate_percent == 0

    def test_monotonic_growth(self):
        """Test that nominal value never decreases with a positive return."""
        result = simulate_growth(make_params(horizon_years=30))

        values = [p.nominal_value for p in result.points]
        assert values == sorted(values)

    def test_negative_return_shrinks_value(self):
        """Test a heavily negative return rate."""
        result = simulate_growth(
            make_params(annual_return_rate_percent=-50, horizon_years=1)
        )

        point = result.points[0]
        assert point.nominal_value < point.total_contributed
        assert point.gains < 0
        assert point.return_rate_percent < 0

    def test_return_rate_below_minus_hundred(self):
        """Test that a return rate below -100% still simulates."""
        result = simulate_growth(
            make_params(
                initial_amount=1000,
                monthly_contribution=0,
                annual_return_rate_percent=-150,
                horizon_years=1,
            )
        )

        point = result.points[0]
        assert point.nominal_value < 1000
        assert point.gains < 0

    def test_horizon_beyond_hundred_years(self):
        """Test that a 150 year horizon yields 150 yearly points."""
        result = simulate_growth(make_params(horizon_years=150))

        assert len(result.points) == 150
        assert result.points[-1].month_index == 1800

    def test_deep_deflation(self):
        """Test that inflation below -100% inflates the real value."""
        result = simulate_growth(
            make_params(annual_inflation_rate_percent=-150, horizon_years=1)
        )

        point = result.points[0]
        assert point.real_value > point.nominal_value

    def test_overflowing_inflation_gives_zero_real_value(self):
        """Test that a deflator too large for a float does not raise."""
        result = simulate_growth(
            make_params(annual_inflation_rate_percent=1e6, horizon_years=100)
        )

        assert len(result.points) == 100
        assert result.points[-1].real_value == 0
        assert math.isfinite(result.points[-1].nominal_value)

    def test_all_fields_rounded(self):
        """Test that every emitted figure has at most two decimals."""
        result = simulate_growth(
            make_params(
                initial_amount=1234.567,
                monthly_contribution=98.765,
                annual_return_rate_percent=6.3,
                annual_inflation_rate_percent=2.7,
            )
        )

        for point in result.points:
            for value in (
                point.nominal_value,
                point.real_value,
                point.total_contributed,
                point.gains,
                point.return_rate_percent,
            ):
                assert has_at_most_two_decimals(value)

    def test_zero_capital_guards_return_rate(self):
        """Test that no contributions at all give a zero return rate."""
        result = simulate_growth(
            make_params(initial_amount=0, monthly_contribution=0, horizon_years=3)
        )

        assert len(result.points) == 3
        for point in result.points:
            assert point.nominal_value == 0
            assert point.return_rate_percent == 0

    def test_zero_horizon_reports_initial_state(self):
        """Test that a zero-year horizon yields the starting state."""
        result = simulate_growth(make_params(initial_amount=2500, horizon_years=0))

        assert len(result.points) == 1
        point = result.points[0]
        assert point.month_index == 0
        assert point.year_index == 0
        assert point.nominal_value == 2500
        assert point.real_value == 2500
        assert point.total_contributed == 2500
        assert point.gains == 0
        assert result.summary.final_nominal_value == 2500

    def test_summary_matches_last_point(self):
        """Test that the summary relabels the last point."""
        result = simulate_growth(make_params(horizon_years=5))
        last = result.points[-1]

        assert result.summary == SimulationSummary(
            final_nominal_value=last.nominal_value,
            final_real_value=last.real_value,
            total_invested=last.total_contributed,
            total_gains=last.gains,
            final_return_rate=last.return_rate_percent,
        )

    def test_repeated_calls_are_independent(self):
        """Test that the simulator keeps no state between calls."""
        simulator = GrowthSimulator()
        params = make_params(horizon_years=3)

        first = simulator.simulate(params)
        simulator.simulate(make_params(horizon_years=20, initial_amount=9999))
        second = simulator.simulate(params)

        assert first == second


class TestSimulationPayload:
    """Test serialization to the wire format."""

    def test_payload_field_names(self):
        """Test that the payload uses the wire field names."""
        payload = simulate_growth(make_params(horizon_years=2)).to_payload()

        assert set(payload) == {"parameters", "simulation", "summary"}
        assert payload["parameters"] == {
            "initial_amount": 1000.0,
            "monthly_investment": 100.0,
            "annual_return_rate": 7.0,
            "years": 2,
            "inflation_rate": 3.0,
        }
        assert set(payload["simulation"][0]) == {
            "month",
            "year",
            "nominal_value",
            "real_value",
            "total_invested",
            "gains",
            "return_rate",
        }
        assert set(payload["summary"]) == {
            "final_nominal_value",
            "final_real_value",
            "total_invested",
            "total_gains",
            "final_return_rate",
        }
        assert payload["simulation"][-1]["month"] == 24
