"""
Analytics blueprint.

This module provides API endpoints for the growth simulator, portfolio
insights, transaction overviews and trends, and the analytics settings.
"""

from typing import Any

from flask import Blueprint, current_app, jsonify, request

from finance_tracker.models.transaction_analytics import TRANSACTION_TYPES
from finance_tracker.services.validation import (
    MAX_PERIOD_MONTHS,
    InvalidParameterError,
    parse_choice,
    parse_positive_int,
    parse_simulation_request,
)

from .common import MissingUserError, get_analytics_service, get_user_id

analytics_bp = Blueprint("analytics", __name__, url_prefix="/api/analytics")


@analytics_bp.route("/simulate/growth", methods=["POST"])
def simulate_growth() -> Any:
    """Run a compound-growth simulation.

    Returns:
        JSON response with parameters, yearly points and summary
    """
    try:
        service = get_analytics_service()
        params = parse_simulation_request(
            request.get_json(silent=True), service.default_inflation_rate()
        )
        return jsonify(service.simulate_growth(params)), 200

    except InvalidParameterError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        current_app.logger.error(f"Error running growth simulation: {str(e)}")
        return jsonify({"error": "Internal server error"}), 500


@analytics_bp.route("/insights/investments", methods=["GET"])
def investment_insights() -> Any:
    """Portfolio insights for the current user's projects."""
    try:
        user_id = get_user_id()
        return jsonify(get_analytics_service().investment_insights(user_id)), 200

    except MissingUserError as e:
        return jsonify({"error": str(e)}), 401
    except Exception as e:
        current_app.logger.error(f"Error computing investment insights: {str(e)}")
        return jsonify({"error": "Internal server error"}), 500


@analytics_bp.route("/overview", methods=["GET"])
def overview() -> Any:
    """Financial overview of the last ``months`` months (default 12)."""
    try:
        user_id = get_user_id()
        months = parse_positive_int(
            request.args.get("months"), "months", 12, max_value=MAX_PERIOD_MONTHS
        )
        return jsonify(get_analytics_service().overview(user_id, months)), 200

    except MissingUserError as e:
        return jsonify({"error": str(e)}), 401
    except InvalidParameterError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        current_app.logger.error(f"Error building overview: {str(e)}")
        return jsonify({"error": "Internal server error"}), 500


@analytics_bp.route("/trends/monthly", methods=["GET"])
def trends_monthly() -> Any:
    """Income, expenses, investments and net per month."""
    try:
        user_id = get_user_id()
        months = parse_positive_int(
            request.args.get("months"), "months", 12, max_value=MAX_PERIOD_MONTHS
        )
        return jsonify(get_analytics_service().monthly_trends(user_id, months)), 200

    except MissingUserError as e:
        return jsonify({"error": str(e)}), 401
    except InvalidParameterError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        current_app.logger.error(f"Error computing monthly trends: {str(e)}")
        return jsonify({"error": "Internal server error"}), 500


@analytics_bp.route("/breakdown/categories", methods=["GET"])
def breakdown_categories() -> Any:
    """Per-category totals for one transaction type (default expense)."""
    try:
        user_id = get_user_id()
        transaction_type = (
            parse_choice(request.args.get("type"), "type", TRANSACTION_TYPES)
            or "expense"
        )
        months = parse_positive_int(
            request.args.get("months"), "months", 12, max_value=MAX_PERIOD_MONTHS
        )
        breakdown = get_analytics_service().category_breakdown(
            user_id, transaction_type, months
        )
        return jsonify(breakdown), 200

    except MissingUserError as e:
        return jsonify({"error": str(e)}), 401
    except InvalidParameterError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        current_app.logger.error(f"Error computing category breakdown: {str(e)}")
        return jsonify({"error": "Internal server error"}), 500


@analytics_bp.route("/settings", methods=["GET"])
def get_settings() -> Any:
    """Current analytics settings."""
    try:
        return jsonify(get_analytics_service().get_settings()), 200

    except Exception as e:
        current_app.logger.error(f"Error loading settings: {str(e)}")
        return jsonify({"error": "Internal server error"}), 500


@analytics_bp.route("/settings", methods=["PUT"])
def update_settings() -> Any:
    """Update inflation rate, cost-of-living increase and/or categories."""
    try:
        settings = get_analytics_service().update_settings(
            request.get_json(silent=True)
        )
        return jsonify(settings), 200

    except InvalidParameterError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        current_app.logger.error(f"Error updating settings: {str(e)}")
        return jsonify({"error": "Internal server error"}), 500
