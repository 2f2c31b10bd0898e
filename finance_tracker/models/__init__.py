"""Calculation engines and domain models for the finance tracker."""

from .formatting import CurrencyFormatter, percent_change, round_half_up
from .growth_simulator import (
    GrowthSimulator,
    SimulationParameters,
    SimulationPoint,
    SimulationResult,
    SimulationSummary,
    simulate_growth,
)
from .portfolio_insights import (
    InvestmentProject,
    PortfolioInsightEngine,
    PortfolioSummary,
    ProjectInsight,
    ReturnEvent,
    analyze_portfolio,
    compute_insight,
    diversification_score,
)
from .transaction_analytics import (
    TransactionRecord,
    build_overview,
    category_breakdown,
    monthly_trends,
    summarize_period,
)

__all__ = [
    "CurrencyFormatter",
    "percent_change",
    "round_half_up",
    "GrowthSimulator",
    "SimulationParameters",
    "SimulationPoint",
    "SimulationResult",
    "SimulationSummary",
    "simulate_growth",
    "InvestmentProject",
    "PortfolioInsightEngine",
    "PortfolioSummary",
    "ProjectInsight",
    "ReturnEvent",
    "analyze_portfolio",
    "compute_insight",
    "diversification_score",
    "TransactionRecord",
    "build_overview",
    "category_breakdown",
    "monthly_trends",
    "summarize_period",
]
