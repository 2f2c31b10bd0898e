"""
Projects blueprint.

This module provides API endpoints for managing investment projects and
recording their returns, plus the performance ranking of active projects.
"""

from typing import Any

from flask import Blueprint, current_app, jsonify, request

from finance_tracker.models.portfolio_insights import PROJECT_STATUSES, RISK_TIERS
from finance_tracker.repositories.base import RecordNotFoundError
from finance_tracker.services.analytics_service import project_payloads
from finance_tracker.services.validation import (
    InvalidParameterError,
    parse_choice,
    parse_project,
    parse_return_event,
)

from .common import (
    MissingUserError,
    get_analytics_service,
    get_repository,
    get_user_id,
)

projects_bp = Blueprint("projects", __name__, url_prefix="/api/projects")


@projects_bp.route("", methods=["GET"])
def list_projects() -> Any:
    """List the current user's projects, optionally filtered by status or risk level."""
    try:
        user_id = get_user_id()
        status = parse_choice(request.args.get("status"), "status", PROJECT_STATUSES)
        risk_level = parse_choice(
            request.args.get("risk_level"), "risk_level", RISK_TIERS
        )
        projects = get_repository().list_projects(
            user_id, status=status, risk_level=risk_level
        )
        return jsonify(project_payloads(projects)), 200

    except MissingUserError as e:
        return jsonify({"error": str(e)}), 401
    except InvalidParameterError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        current_app.logger.error(f"Error listing projects: {str(e)}")
        return jsonify({"error": "Internal server error"}), 500


@projects_bp.route("/<int:project_id>", methods=["GET"])
def get_project(project_id: int) -> Any:
    """Get a project with its returns and realised return rate.

    Args:
        project_id: ID of the project
    """
    try:
        user_id = get_user_id()
        return jsonify(get_analytics_service().project_detail(user_id, project_id)), 200

    except MissingUserError as e:
        return jsonify({"error": str(e)}), 401
    except RecordNotFoundError:
        return jsonify({"error": "Project not found"}), 404
    except Exception as e:
        current_app.logger.error(f"Error getting project {project_id}: {str(e)}")
        return jsonify({"error": "Internal server error"}), 500


@projects_bp.route("", methods=["POST"])
def create_project() -> Any:
    """Create a new project."""
    try:
        user_id = get_user_id()
        project = parse_project(request.get_json(silent=True))
        created = get_repository().add_project(user_id, project)
        current_app.logger.info(f"Created project {created.id} for user {user_id}")
        return jsonify(created.model_dump(mode="json", by_alias=True)), 201

    except MissingUserError as e:
        return jsonify({"error": str(e)}), 401
    except InvalidParameterError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        current_app.logger.error(f"Error creating project: {str(e)}")
        return jsonify({"error": "Internal server error"}), 500


@projects_bp.route("/<int:project_id>", methods=["PUT"])
def update_project(project_id: int) -> Any:
    """Replace a project's attributes.

    Args:
        project_id: ID of the project
    """
    try:
        user_id = get_user_id()
        project = parse_project(request.get_json(silent=True))
        updated = get_repository().update_project(user_id, project_id, project)
        return jsonify(updated.model_dump(mode="json", by_alias=True)), 200

    except MissingUserError as e:
        return jsonify({"error": str(e)}), 401
    except InvalidParameterError as e:
        return jsonify({"error": str(e)}), 400
    except RecordNotFoundError:
        return jsonify({"error": "Project not found"}), 404
    except Exception as e:
        current_app.logger.error(f"Error updating project {project_id}: {str(e)}")
        return jsonify({"error": "Internal server error"}), 500


@projects_bp.route("/<int:project_id>", methods=["DELETE"])
def delete_project(project_id: int) -> Any:
    """Delete a project and all of its returns.

    Args:
        project_id: ID of the project
    """
    try:
        user_id = get_user_id()
        get_repository().delete_project(user_id, project_id)
        current_app.logger.info(f"Deleted project {project_id} for user {user_id}")
        return jsonify({"message": "Project deleted successfully"}), 200

    except MissingUserError as e:
        return jsonify({"error": str(e)}), 401
    except RecordNotFoundError:
        return jsonify({"error": "Project not found"}), 404
    except Exception as e:
        current_app.logger.error(f"Error deleting project {project_id}: {str(e)}")
        return jsonify({"error": "Internal server error"}), 500


@projects_bp.route("/<int:project_id>/returns", methods=["POST"])
def add_project_return(project_id: int) -> Any:
    """Record a return (or loss) for a project.

    Args:
        project_id: ID of the project
    """
    try:
        user_id = get_user_id()
        event = parse_return_event(request.get_json(silent=True))
        stored = get_repository().add_return(user_id, project_id, event)
        payload = stored.model_dump(mode="json")
        payload["project_id"] = project_id
        return jsonify(payload), 201

    except MissingUserError as e:
        return jsonify({"error": str(e)}), 401
    except InvalidParameterError as e:
        return jsonify({"error": str(e)}), 400
    except RecordNotFoundError:
        return jsonify({"error": "Project not found"}), 404
    except Exception as e:
        current_app.logger.error(
            f"Error adding return to project {project_id}: {str(e)}"
        )
        return jsonify({"error": "Internal server error"}), 500


@projects_bp.route("/rankings/best", methods=["GET"])
def project_rankings() -> Any:
    """Active projects ranked by realised, then expected, return."""
    try:
        user_id = get_user_id()
        return jsonify(get_analytics_service().project_rankings(user_id)), 200

    except MissingUserError as e:
        return jsonify({"error": str(e)}), 401
    except Exception as e:
        current_app.logger.error(f"Error ranking projects: {str(e)}")
        return jsonify({"error": "Internal server error"}), 500
