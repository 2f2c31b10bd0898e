"""
Request validation for the HTTP layer.

Turns loosely typed request data into validated domain models before any
engine runs. Every rejection is reported as an InvalidParameterError carrying
a message suitable for a 400 response.
"""

from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ValidationError

from finance_tracker.models.growth_simulator import SimulationParameters
from finance_tracker.models.portfolio_insights import (
    PROJECT_STATUSES,
    RISK_TIERS,
    InvestmentProject,
    ReturnEvent,
)
from finance_tracker.models.transaction_analytics import (
    TRANSACTION_TYPES,
    TransactionRecord,
)

SIMULATION_DEFAULTS = {
    "initial_amount": 1000,
    "monthly_investment": 100,
    "annual_return_rate": 7,
    "years": 10,
}

# Upper bounds on request input.
MAX_SIMULATION_YEARS = 100
MAX_PERIOD_MONTHS = 1200


class InvalidParameterError(ValueError):
    """Raised when request input is missing, malformed or out of range."""


def _format_errors(exc: ValidationError) -> str:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"])
        messages.append(f"{location}: {error['msg']}" if location else error["msg"])
    return "; ".join(messages)


def _validate(model: type, data: Mapping[str, Any]) -> BaseModel:
    try:
        return model.model_validate(dict(data))
    except ValidationError as e:
        raise InvalidParameterError(_format_errors(e)) from e


def _require_mapping(body: Any) -> Dict[str, Any]:
    if body is None:
        return {}
    if not isinstance(body, Mapping):
        raise InvalidParameterError("Request body must be a JSON object")
    return dict(body)


def _reject_booleans(data: Mapping[str, Any], *fields: str) -> None:
    # JSON true/false would otherwise be coerced to 1/0.
    for field in fields:
        if isinstance(data.get(field), bool):
            raise InvalidParameterError(f"{field}: must be a number")


def parse_simulation_request(
    body: Any, default_inflation_rate: float
) -> SimulationParameters:
    """
    Build SimulationParameters from a request body.

    Missing fields fall back to the documented defaults; the inflation rate
    falls back to the configured default.
    """
    data = {**SIMULATION_DEFAULTS, "inflation_rate": default_inflation_rate}
    data.update(
        {k: v for k, v in _require_mapping(body).items() if v is not None}
    )
    _reject_booleans(data, *SIMULATION_DEFAULTS, "inflation_rate")
    params = _validate(SimulationParameters, data)
    if params.horizon_years > MAX_SIMULATION_YEARS:
        raise InvalidParameterError(f"years must be at most {MAX_SIMULATION_YEARS}")
    return params


def parse_project(body: Any) -> InvestmentProject:
    """Validate a project create/update body."""
    data = _require_mapping(body)

    missing = [
        field
        for field in ("name", "initial_investment", "expected_return")
        if data.get(field) in (None, "")
    ]
    if missing:
        raise InvalidParameterError(f"Missing required fields: {', '.join(missing)}")
    _reject_booleans(data, "initial_investment", "expected_return", "duration_months")

    if data.get("risk_level") in ("", None):
        data["risk_level"] = None
    elif data["risk_level"] not in RISK_TIERS:
        raise InvalidParameterError("Risk level must be low, medium, or high")

    if data.get("status") in ("", None):
        data["status"] = "active"
    elif data["status"] not in PROJECT_STATUSES:
        raise InvalidParameterError("Status must be active, completed, or cancelled")

    project = _validate(
        InvestmentProject,
        {
            key: data.get(key)
            for key in (
                "name",
                "description",
                "initial_investment",
                "expected_return",
                "risk_level",
                "status",
                "duration_months",
            )
        },
    )
    if project.initial_investment <= 0:
        raise InvalidParameterError("Initial investment must be a positive number")
    return project


def parse_return_event(body: Any) -> ReturnEvent:
    """Validate a project return body."""
    data = _require_mapping(body)
    missing = [
        field for field in ("return_amount", "return_date") if data.get(field) in (None, "")
    ]
    if missing:
        raise InvalidParameterError(f"Missing required fields: {', '.join(missing)}")
    _reject_booleans(data, "return_amount")
    return _validate(
        ReturnEvent,
        {key: data.get(key) for key in ("return_amount", "return_date", "notes")},
    )


def parse_transaction(body: Any) -> TransactionRecord:
    """Validate a transaction body."""
    data = _require_mapping(body)
    if data.get("type") not in TRANSACTION_TYPES:
        raise InvalidParameterError("Type must be income, expense, or investment")
    _reject_booleans(data, "amount")
    if data.get("category") == "":
        data["category"] = None
    return _validate(
        TransactionRecord,
        {
            key: data.get(key)
            for key in ("type", "amount", "description", "category", "date")
        },
    )


def parse_positive_int(
    value: Optional[str], name: str, default: int, max_value: Optional[int] = None
) -> int:
    """Parse an optional positive query-string integer, capped at ``max_value``."""
    if value is None or value == "":
        return default
    try:
        parsed = int(value)
    except (TypeError, ValueError) as e:
        raise InvalidParameterError(f"{name} must be a positive integer") from e
    if parsed <= 0:
        raise InvalidParameterError(f"{name} must be a positive integer")
    if max_value is not None and parsed > max_value:
        raise InvalidParameterError(f"{name} must be at most {max_value}")
    return parsed


def parse_choice(value: Optional[str], name: str, choices: tuple) -> Optional[str]:
    """Parse an optional query-string value restricted to ``choices``."""
    if value is None or value == "":
        return None
    if value not in choices:
        raise InvalidParameterError(f"{name} must be one of {', '.join(choices)}")
    return value
