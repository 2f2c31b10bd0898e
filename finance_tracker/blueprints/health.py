"""Health check blueprint."""

from flask import Blueprint, Response, current_app, jsonify

health_bp = Blueprint("health", __name__)


@health_bp.route("/healthz")
def health_check() -> Response:
    """Liveness probe; reports the configured storage backend.

    Returns:
        JSON response with status information
    """
    return jsonify({"status": "ok", "storage": current_app.config["STORAGE_TYPE"]})
