"""Transactions blueprint: list, record and delete transactions."""

from datetime import date
from typing import Any

from flask import Blueprint, current_app, jsonify, request

from finance_tracker.models.transaction_analytics import TRANSACTION_TYPES, period_bounds
from finance_tracker.repositories.base import RecordNotFoundError
from finance_tracker.services.validation import (
    MAX_PERIOD_MONTHS,
    InvalidParameterError,
    parse_choice,
    parse_positive_int,
    parse_transaction,
)

from .common import MissingUserError, get_repository, get_user_id

transactions_bp = Blueprint("transactions", __name__, url_prefix="/api/transactions")


@transactions_bp.route("", methods=["GET"])
def list_transactions() -> Any:
    """List transactions, newest first.

    Optional query parameters: ``type``, ``category`` and ``months`` (only
    the last N months).
    """
    try:
        user_id = get_user_id()
        transaction_type = parse_choice(
            request.args.get("type"), "type", TRANSACTION_TYPES
        )
        start = None
        if request.args.get("months"):
            months = parse_positive_int(
                request.args.get("months"), "months", 12, max_value=MAX_PERIOD_MONTHS
            )
            _, start = period_bounds(months, date.today())
        records = get_repository().list_transactions(
            user_id,
            start=start,
            transaction_type=transaction_type,
            category=request.args.get("category") or None,
        )
        return jsonify([r.model_dump(mode="json") for r in records]), 200

    except MissingUserError as e:
        return jsonify({"error": str(e)}), 401
    except InvalidParameterError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        current_app.logger.error(f"Error listing transactions: {str(e)}")
        return jsonify({"error": "Internal server error"}), 500


@transactions_bp.route("", methods=["POST"])
def create_transaction() -> Any:
    """Record a transaction."""
    try:
        user_id = get_user_id()
        record = parse_transaction(request.get_json(silent=True))
        stored = get_repository().add_transaction(user_id, record)
        return jsonify(stored.model_dump(mode="json")), 201

    except MissingUserError as e:
        return jsonify({"error": str(e)}), 401
    except InvalidParameterError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        current_app.logger.error(f"Error creating transaction: {str(e)}")
        return jsonify({"error": "Internal server error"}), 500


@transactions_bp.route("/<int:transaction_id>", methods=["DELETE"])
def delete_transaction(transaction_id: int) -> Any:
    """Delete a transaction."""
    try:
        user_id = get_user_id()
        get_repository().delete_transaction(user_id, transaction_id)
        return jsonify({"message": "Transaction deleted successfully"}), 200

    except MissingUserError as e:
        return jsonify({"error": str(e)}), 401
    except RecordNotFoundError:
        return jsonify({"error": "Transaction not found"}), 404
    except Exception as e:
        current_app.logger.error(
            f"Error deleting transaction {transaction_id}: {str(e)}"
        )
        return jsonify({"error": "Internal server error"}), 500
