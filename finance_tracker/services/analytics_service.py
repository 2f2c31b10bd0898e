"""
Analytics service coordinating repositories and calculation engines.

This service loads a user's records from the configured repository, runs the
pure engines over them and returns JSON-ready payloads. The engines
themselves never see the repository.
"""

import json
import logging
import math
from datetime import date
from typing import Any, Dict, List, Optional

from finance_tracker.config import Settings
from finance_tracker.models.formatting import CurrencyFormatter
from finance_tracker.models.growth_simulator import (
    MIN_INFLATION_RATE_PERCENT,
    GrowthSimulator,
    SimulationParameters,
)
from finance_tracker.models.portfolio_insights import (
    InvestmentProject,
    PortfolioInsightEngine,
    compute_insight,
)
from finance_tracker.models.transaction_analytics import (
    build_overview,
    category_breakdown,
    monthly_trends,
    period_bounds,
)
from finance_tracker.repositories.base import FinanceRepository

from .validation import InvalidParameterError


class AnalyticsService:
    """Service producing analytics payloads for one repository."""

    def __init__(
        self,
        repository: FinanceRepository,
        settings: Settings,
        simulator: Optional[GrowthSimulator] = None,
        insight_engine: Optional[PortfolioInsightEngine] = None,
    ) -> None:
        """Initialize the analytics service.

        Args:
            repository: Source of transactions, projects and settings
            settings: Application settings (defaults for rates and categories)
            simulator: Growth simulator, a default one if omitted
            insight_engine: Portfolio insight engine, a default one if omitted
        """
        self.repository = repository
        self.settings = settings
        self.simulator = simulator or GrowthSimulator()
        self.insight_engine = insight_engine or PortfolioInsightEngine()
        self.formatter = CurrencyFormatter()
        self.logger = logging.getLogger(__name__)

    def default_inflation_rate(self) -> float:
        """Inflation rate from stored settings, falling back to configuration."""
        stored = self.repository.get_settings().get("inflation_rate")
        if stored is None:
            return self.settings.default_inflation_rate
        try:
            return float(stored)
        except ValueError:
            self.logger.warning(
                f"Ignoring malformed stored inflation_rate {stored!r}"
            )
            return self.settings.default_inflation_rate

    def simulate_growth(self, params: SimulationParameters) -> Dict[str, Any]:
        """Run the growth simulator and return its payload."""
        result = self.simulator.simulate(params)
        self.logger.info(
            f"Simulated {params.horizon_years} years at "
            f"{self.formatter.format_percentage(params.annual_return_rate_percent)}: "
            f"final value {self.formatter.format_currency(result.summary.final_nominal_value)}"
        )
        return result.to_payload()

    def investment_insights(self, user_id: int) -> Dict[str, Any]:
        """Portfolio insights over all of a user's projects."""
        projects = self.repository.list_projects(user_id)
        summary = self.insight_engine.analyze(projects)
        self.logger.debug(
            f"Analyzed {len(projects)} projects for user {user_id}: "
            f"diversification {summary.diversification_score}"
        )
        return summary.to_payload()

    def project_rankings(self, user_id: int) -> List[Dict[str, Any]]:
        """Active projects ordered by realised return."""
        projects = self.repository.list_projects(user_id, status="active")
        return [i.to_payload() for i in self.insight_engine.rank_projects(projects)]

    def project_detail(self, user_id: int, project_id: int) -> Dict[str, Any]:
        """One project with its return events (newest first) and realised return."""
        project = self.repository.get_project(user_id, project_id)
        payload = compute_insight(project).to_payload()
        payload["returns"].sort(key=lambda event: event["return_date"], reverse=True)
        return payload

    def overview(self, user_id: int, months: int, today: Optional[date] = None) -> Dict[str, Any]:
        """Financial overview with changes against the previous period."""
        today = today or date.today()
        previous_start, _ = period_bounds(months, today)
        transactions = self.repository.list_transactions(user_id, start=previous_start)
        projects = self.repository.list_projects(user_id)
        return build_overview(transactions, projects, months, today)

    def monthly_trends(
        self, user_id: int, months: int, today: Optional[date] = None
    ) -> List[Dict[str, Any]]:
        """Cash-flow totals per month over the last ``months`` months."""
        _, start = period_bounds(months, today or date.today())
        return monthly_trends(self.repository.list_transactions(user_id, start=start))

    def category_breakdown(
        self,
        user_id: int,
        transaction_type: str,
        months: int,
        today: Optional[date] = None,
    ) -> List[Dict[str, Any]]:
        """Per-category totals of one transaction type."""
        _, start = period_bounds(months, today or date.today())
        transactions = self.repository.list_transactions(
            user_id, start=start, transaction_type=transaction_type
        )
        return category_breakdown(transactions, transaction_type)

    def get_settings(self) -> Dict[str, Any]:
        """Stored settings merged over configured defaults."""
        stored = self.repository.get_settings()
        return self._decode_settings(stored)

    def update_settings(self, body: Any) -> Dict[str, Any]:
        """
        Update the inflation rate, cost-of-living increase and/or categories.

        Raises:
            InvalidParameterError: If nothing valid is provided
        """
        if not isinstance(body, dict):
            raise InvalidParameterError("Request body must be a JSON object")

        updates: Dict[str, str] = {}
        for key in ("inflation_rate", "cost_of_living_increase"):
            if body.get(key) is not None:
                updates[key] = str(self._parse_rate(key, body[key]))

        categories = body.get("categories")
        if categories is not None:
            if not isinstance(categories, list) or not all(
                isinstance(c, str) and c for c in categories
            ):
                raise InvalidParameterError("categories must be a list of names")
            updates["categories"] = json.dumps(categories)

        if not updates:
            raise InvalidParameterError("No settings to update")

        self.logger.info(f"Updating settings: {', '.join(sorted(updates))}")
        return self._decode_settings(self.repository.put_settings(updates))

    @staticmethod
    def _parse_rate(key: str, value: Any) -> float:
        if isinstance(value, bool):
            raise InvalidParameterError(f"{key} must be a number")
        try:
            rate = float(value)
        except (TypeError, ValueError) as e:
            raise InvalidParameterError(f"{key} must be a number") from e
        if not math.isfinite(rate) or rate <= MIN_INFLATION_RATE_PERCENT:
            raise InvalidParameterError(
                f"{key} must be a finite rate above {MIN_INFLATION_RATE_PERCENT:g}"
            )
        return rate

    def _decode_settings(self, stored: Dict[str, str]) -> Dict[str, Any]:
        decoded: Dict[str, Any] = {
            "inflation_rate": self.settings.default_inflation_rate,
            "cost_of_living_increase": self.settings.cost_of_living_increase,
            "categories": list(self.settings.default_categories),
        }
        for key, value in stored.items():
            if key == "categories":
                try:
                    decoded[key] = json.loads(value)
                except json.JSONDecodeError:
                    self.logger.warning("Stored categories are not valid JSON")
                    decoded[key] = []
            elif key in ("inflation_rate", "cost_of_living_increase"):
                decoded[key] = float(value)
            else:
                decoded[key] = value
        return decoded


def project_payloads(projects: List[InvestmentProject]) -> List[Dict[str, Any]]:
    """Serialize projects without derived figures."""
    return [project.model_dump(mode="json", by_alias=True) for project in projects]
