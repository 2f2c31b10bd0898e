"""
Portfolio insight engine for investment projects.

Computes the realised return of every investment project from its recorded
return events, ranks projects by performance, flags over- and
under-performers and scores how well the portfolio is spread across risk
tiers.
"""

from datetime import date, datetime
from typing import List, Literal, Optional, Sequence, get_args

import numpy as np
from pydantic import BaseModel, ConfigDict, Field

from .formatting import round_half_up, safe_rate

RiskTier = Literal["low", "medium", "high"]
ProjectStatus = Literal["active", "completed", "cancelled"]

RISK_TIERS: tuple = get_args(RiskTier)
PROJECT_STATUSES: tuple = get_args(ProjectStatus)

# Number of projects reported as best performing.
TOP_PERFORMERS = 3


class ReturnEvent(BaseModel):
    """A single return paid out by a project (negative for losses)."""

    model_config = ConfigDict(frozen=True)

    id: Optional[int] = Field(default=None, description="Storage identifier")
    return_amount: float = Field(..., allow_inf_nan=False)
    return_date: date = Field(..., description="Date the return was realised")
    notes: Optional[str] = Field(default=None)


class InvestmentProject(BaseModel):
    """An investment project together with the return events it owns."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: Optional[int] = Field(default=None, description="Storage identifier")
    name: str = Field(default="", description="Project name")
    description: Optional[str] = Field(default=None)
    initial_investment: float = Field(..., ge=0, allow_inf_nan=False)
    expected_return_percent: float = Field(
        ..., allow_inf_nan=False, alias="expected_return"
    )
    risk_tier: Optional[RiskTier] = Field(default=None, alias="risk_level")
    status: ProjectStatus = Field(default="active")
    duration_months: Optional[int] = Field(default=None, ge=0)
    created_at: Optional[datetime] = Field(default=None)
    returns: List[ReturnEvent] = Field(default_factory=list)


class ProjectInsight(BaseModel):
    """Realised performance figures of one project."""

    model_config = ConfigDict(frozen=True)

    project: InvestmentProject
    total_returns: float
    actual_return_rate_percent: float
    return_count: int

    @property
    def beats_expectation(self) -> bool:
        return self.actual_return_rate_percent > self.project.expected_return_percent

    @property
    def misses_expectation(self) -> bool:
        return self.actual_return_rate_percent < self.project.expected_return_percent

    def to_payload(self) -> dict:
        """Project record extended with its realised figures."""
        payload = self.project.model_dump(mode="json", by_alias=True)
        payload["total_returns"] = round_half_up(self.total_returns)
        payload["actual_return_rate"] = round_half_up(self.actual_return_rate_percent)
        payload["return_count"] = self.return_count
        return payload


class PortfolioSummary(BaseModel):
    """Aggregated insights over a user's investment projects."""

    model_config = ConfigDict(frozen=True)

    best_performing: List[ProjectInsight] = Field(default_factory=list)
    underperforming: List[ProjectInsight] = Field(default_factory=list)
    high_risk_high_return: List[ProjectInsight] = Field(default_factory=list)
    diversification_score: int = Field(default=0, ge=0, le=100)
    total_portfolio_value: float = 0.0
    avg_portfolio_return_percent: float = 0.0

    def to_payload(self) -> dict:
        return {
            "best_performing": [i.to_payload() for i in self.best_performing],
            "underperforming": [i.to_payload() for i in self.underperforming],
            "high_risk_high_return": [
                i.to_payload() for i in self.high_risk_high_return
            ],
            "diversification_score": self.diversification_score,
            "total_portfolio_value": self.total_portfolio_value,
            "avg_portfolio_return": self.avg_portfolio_return_percent,
        }


def compute_insight(project: InvestmentProject) -> ProjectInsight:
    """
    Compute the realised figures of a single project.

    A project without any capital invested reports a 0% return rather than
    dividing by zero.
    """
    total_returns = float(sum(event.return_amount for event in project.returns))
    return ProjectInsight(
        project=project,
        total_returns=total_returns,
        actual_return_rate_percent=safe_rate(total_returns, project.initial_investment),
        return_count=len(project.returns),
    )


def diversification_score(projects: Sequence[InvestmentProject]) -> int:
    """
    Score the spread of a portfolio across risk tiers (0-100).

    Only tier coverage counts: each populated tier contributes a third of
    the score regardless of how many projects or how much capital it holds.
    Projects without a risk tier are ignored.
    """
    if not projects:
        return 0

    tier_counts = {tier: 0 for tier in RISK_TIERS}
    for project in projects:
        if project.risk_tier:
            tier_counts[project.risk_tier] += 1

    tier_shares = [
        count / len(projects) for count in tier_counts.values() if count > 0
    ]
    return int(round_half_up(len(tier_shares) / len(RISK_TIERS) * 100, 0))


class PortfolioInsightEngine:
    """Derives a PortfolioSummary from a collection of projects."""

    def __init__(self, top_n: int = TOP_PERFORMERS):
        """
        Args:
            top_n: How many projects to report as best performing
        """
        if top_n < 1:
            raise ValueError("top_n must be at least 1")
        self.top_n = top_n

    def analyze(self, projects: Sequence[InvestmentProject]) -> PortfolioSummary:
        """
        Analyze a portfolio.

        Args:
            projects: Validated projects, each carrying its return events

        Returns:
            PortfolioSummary; an empty input yields the all-zero summary
        """
        if not projects:
            return PortfolioSummary()

        insights = [compute_insight(project) for project in projects]
        rates = np.array(
            [insight.actual_return_rate_percent for insight in insights],
            dtype=np.float64,
        )

        # Stable sort keeps input order among equal rates.
        order = np.argsort(-rates, kind="stable")
        best_performing = [insights[i] for i in order[: min(self.top_n, len(insights))]]

        underperforming = [i for i in insights if i.misses_expectation]
        high_risk_high_return = [
            i for i in insights if i.project.risk_tier == "high" and i.beats_expectation
        ]

        total_portfolio_value = sum(
            i.project.initial_investment + i.total_returns for i in insights
        )

        return PortfolioSummary(
            best_performing=best_performing,
            underperforming=underperforming,
            high_risk_high_return=high_risk_high_return,
            diversification_score=diversification_score(projects),
            total_portfolio_value=round_half_up(total_portfolio_value),
            avg_portfolio_return_percent=round_half_up(float(np.mean(rates))),
        )

    def rank_projects(
        self, projects: Sequence[InvestmentProject]
    ) -> List[ProjectInsight]:
        """
        Rank active projects by realised return, then by expected return.

        Args:
            projects: Projects in any status

        Returns:
            Insights for active projects, best first
        """
        insights = [
            compute_insight(project)
            for project in projects
            if project.status == "active"
        ]
        return sorted(
            insights,
            key=lambda i: (
                -i.actual_return_rate_percent,
                -i.project.expected_return_percent,
            ),
        )


def analyze_portfolio(projects: Sequence[InvestmentProject]) -> PortfolioSummary:
    """Convenience wrapper around ``PortfolioInsightEngine().analyze``."""
    return PortfolioInsightEngine().analyze(projects)
