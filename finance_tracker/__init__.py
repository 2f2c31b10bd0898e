"""Personal Finance Tracker Flask Application Factory."""

import logging
from typing import Optional

from flask import Flask

from finance_tracker.config import Settings, get_global_settings
from finance_tracker.repositories import FinanceRepository, create_repository
from finance_tracker.services.analytics_service import AnalyticsService


def create_app(
    settings: Optional[Settings] = None,
    repository: Optional[FinanceRepository] = None,
) -> Flask:
    """Create and configure the Flask application.

    Args:
        settings: Settings to use instead of the global ones
        repository: Repository to use instead of the configured backend

    Returns:
        Flask: Configured Flask application instance
    """
    app = Flask(__name__)

    # Configuration from Pydantic Settings
    settings = settings or get_global_settings()
    app.config["SECRET_KEY"] = settings.secret_key
    app.config["DATABASE_URL"] = settings.db_url
    app.config["STORAGE_TYPE"] = settings.storage_type
    app.config["DEBUG"] = settings.app_env == "development"
    app.config["TESTING"] = settings.app_env == "testing"

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app.logger.setLevel(settings.log_level)

    # Persistence backend and services
    repository = repository or create_repository(settings)
    app.extensions["finance_repository"] = repository
    app.extensions["analytics_service"] = AnalyticsService(repository, settings)

    # Register blueprints
    from finance_tracker.blueprints.analytics import analytics_bp
    from finance_tracker.blueprints.health import health_bp
    from finance_tracker.blueprints.projects import projects_bp
    from finance_tracker.blueprints.transactions import transactions_bp

    app.register_blueprint(health_bp)
    app.register_blueprint(analytics_bp)
    app.register_blueprint(projects_bp)
    app.register_blueprint(transactions_bp)

    app.logger.info(f"Finance tracker started with {settings.storage_type} storage")
    return app
