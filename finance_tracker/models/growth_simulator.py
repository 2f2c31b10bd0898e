"""
Deterministic compound-growth simulator.

Projects a savings plan forward month by month: a starting capital plus a
fixed monthly contribution, compounded monthly at the nominal annual rate and
deflated by the annual inflation rate. The trajectory is sampled once a year
(every 12th month plus the final month) to keep payloads small.
"""

import math
from typing import List

from pydantic import BaseModel, ConfigDict, Field

from .formatting import round_half_up, safe_rate

MONTHS_PER_YEAR = 12

# At -1200% a year the monthly deflation factor (1 + rate / 12) reaches zero.
MIN_INFLATION_RATE_PERCENT = -1200.0


class SimulationParameters(BaseModel):
    """Inputs of a growth simulation.

    Aliases are the field names used on the wire by existing clients.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    initial_amount: float = Field(
        ..., ge=0, allow_inf_nan=False, description="Starting capital"
    )
    monthly_contribution: float = Field(
        ...,
        ge=0,
        allow_inf_nan=False,
        alias="monthly_investment",
        description="Amount added at the start of every month",
    )
    annual_return_rate_percent: float = Field(
        ...,
        allow_inf_nan=False,
        alias="annual_return_rate",
        description="Nominal annual return in percent (may be negative)",
    )
    horizon_years: int = Field(
        ..., ge=0, alias="years", description="Number of years to simulate"
    )
    annual_inflation_rate_percent: float = Field(
        ...,
        gt=MIN_INFLATION_RATE_PERCENT,
        allow_inf_nan=False,
        alias="inflation_rate",
        description="Annual inflation rate in percent",
    )

    @property
    def total_months(self) -> int:
        return self.horizon_years * MONTHS_PER_YEAR


class SimulationPoint(BaseModel):
    """Portfolio state at the end of a sampled month."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    month_index: int = Field(..., ge=0, alias="month")
    year_index: int = Field(..., ge=0, alias="year")
    nominal_value: float
    real_value: float
    total_contributed: float = Field(..., alias="total_invested")
    gains: float
    return_rate_percent: float = Field(..., alias="return_rate")


class SimulationSummary(BaseModel):
    """Final figures of a simulation, taken from its last emitted point."""

    model_config = ConfigDict(frozen=True)

    final_nominal_value: float
    final_real_value: float
    total_invested: float
    total_gains: float
    final_return_rate: float

    @classmethod
    def from_point(cls, point: SimulationPoint) -> "SimulationSummary":
        return cls(
            final_nominal_value=point.nominal_value,
            final_real_value=point.real_value,
            total_invested=point.total_contributed,
            total_gains=point.gains,
            final_return_rate=point.return_rate_percent,
        )


class SimulationResult(BaseModel):
    """Sampled trajectory and summary of a growth simulation."""

    model_config = ConfigDict(frozen=True)

    parameters: SimulationParameters
    points: List[SimulationPoint]
    summary: SimulationSummary

    def to_payload(self) -> dict:
        """Serialize using the wire field names."""
        return {
            "parameters": self.parameters.model_dump(by_alias=True),
            "simulation": [point.model_dump(by_alias=True) for point in self.points],
            "summary": self.summary.model_dump(),
        }


def _deflator(monthly_inflation_rate: float, month: int) -> float:
    """Cumulative inflation factor after ``month`` months (inf once it overflows)."""
    try:
        return (1 + monthly_inflation_rate) ** month
    except OverflowError:
        return math.inf


def _make_point(
    month: int, nominal_value: float, real_value: float, total_contributed: float
) -> SimulationPoint:
    gains = nominal_value - total_contributed
    return SimulationPoint(
        month_index=month,
        year_index=math.ceil(month / MONTHS_PER_YEAR),
        nominal_value=round_half_up(nominal_value),
        real_value=round_half_up(real_value),
        total_contributed=round_half_up(total_contributed),
        gains=round_half_up(gains),
        return_rate_percent=round_half_up(safe_rate(gains, total_contributed)),
    )


class GrowthSimulator:
    """Monthly-compounding growth simulator.

    Stateless: a single instance can serve any number of concurrent calls.
    """

    def simulate(self, params: SimulationParameters) -> SimulationResult:
        """
        Run the simulation.

        Each month the contribution is added first, then the monthly return is
        applied to the whole balance. The real value deflates the nominal
        value by the inflation compounded over the elapsed months.

        Args:
            params: Validated simulation parameters

        Returns:
            SimulationResult with one point per simulated year
        """
        monthly_return_rate = params.annual_return_rate_percent / 100 / MONTHS_PER_YEAR
        monthly_inflation_rate = (
            params.annual_inflation_rate_percent / 100 / MONTHS_PER_YEAR
        )
        total_months = params.total_months

        nominal_value = params.initial_amount
        total_contributed = params.initial_amount
        points: List[SimulationPoint] = []

        if total_months == 0:
            # Nothing to compound: report the starting state.
            points.append(
                _make_point(0, nominal_value, nominal_value, total_contributed)
            )

        for month in range(1, total_months + 1):
            nominal_value += params.monthly_contribution
            total_contributed += params.monthly_contribution
            nominal_value *= 1 + monthly_return_rate

            if month % MONTHS_PER_YEAR == 0 or month == total_months:
                real_value = nominal_value / _deflator(monthly_inflation_rate, month)
                points.append(
                    _make_point(month, nominal_value, real_value, total_contributed)
                )

        return SimulationResult(
            parameters=params,
            points=points,
            summary=SimulationSummary.from_point(points[-1]),
        )


def simulate_growth(params: SimulationParameters) -> SimulationResult:
    """Convenience wrapper around ``GrowthSimulator().simulate``."""
    return GrowthSimulator().simulate(params)
