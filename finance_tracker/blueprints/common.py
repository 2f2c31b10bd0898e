"""Helpers shared by the API blueprints."""

from flask import current_app, request

from finance_tracker.repositories.base import FinanceRepository
from finance_tracker.services.analytics_service import AnalyticsService

USER_HEADER = "X-User-Id"


class MissingUserError(Exception):
    """Raised when a request does not identify its user."""


def get_user_id() -> int:
    """Return the acting user's id from the request headers.

    Raises:
        MissingUserError: If the header is missing or not a positive integer
    """
    raw = request.headers.get(USER_HEADER, "")
    try:
        user_id = int(raw)
    except ValueError as e:
        raise MissingUserError(f"{USER_HEADER} header is required") from e
    if user_id <= 0:
        raise MissingUserError(f"{USER_HEADER} header is required")
    return user_id


def get_repository() -> FinanceRepository:
    """Repository configured for the current application."""
    return current_app.extensions["finance_repository"]


def get_analytics_service() -> AnalyticsService:
    """Analytics service configured for the current application."""
    return current_app.extensions["analytics_service"]
