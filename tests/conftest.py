"""
Pytest configuration and shared fixtures for the finance tracker tests.
"""

from datetime import date

import pytest
from sqlalchemy.orm import sessionmaker

from finance_tracker import create_app
from finance_tracker.config import Settings, reset_global_settings
from finance_tracker.database.base import build_engine, create_tables, drop_tables
from finance_tracker.models.portfolio_insights import InvestmentProject, ReturnEvent
from finance_tracker.repositories import InMemoryFinanceRepository, SqlFinanceRepository

TEST_ENV = {
    "SECRET_KEY": "test-secret-key-123",
    "APP_ENV": "testing",
    "STORAGE_TYPE": "memory",
    "LOG_LEVEL": "WARNING",
}


@pytest.fixture
def settings(monkeypatch):
    """Settings built from a clean test environment."""
    for key, value in TEST_ENV.items():
        monkeypatch.setenv(key, value)
    reset_global_settings()
    yield Settings(_env_file=None)
    reset_global_settings()


@pytest.fixture
def memory_repository():
    """Empty in-memory repository."""
    return InMemoryFinanceRepository()


@pytest.fixture(scope="function")
def db_engine():
    """Create an in-memory SQLite database for testing."""
    engine = build_engine("sqlite://")
    create_tables(engine)
    yield engine
    drop_tables(engine)
    engine.dispose()


@pytest.fixture
def sql_repository(db_engine):
    """Repository backed by the in-memory SQLite database."""
    return SqlFinanceRepository(sessionmaker(bind=db_engine, expire_on_commit=False))


@pytest.fixture(params=["memory", "sql"])
def repository(request):
    """Each repository implementation in turn."""
    if request.param == "memory":
        return InMemoryFinanceRepository()
    return request.getfixturevalue("sql_repository")


@pytest.fixture
def app(settings, memory_repository):
    """Flask app using the in-memory repository."""
    return create_app(settings=settings, repository=memory_repository)


@pytest.fixture
def client(app):
    """Flask test client."""
    return app.test_client()


@pytest.fixture
def user_headers():
    """Headers identifying user 1."""
    return {"X-User-Id": "1"}


@pytest.fixture
def project_factory():
    """Factory building InvestmentProjects with return events of given amounts."""

    def make_project(
        initial_investment=1000.0,
        expected_return=10.0,
        risk_tier=None,
        status="active",
        returns=(),
        name="Project",
        project_id=None,
    ):
        return InvestmentProject(
            id=project_id,
            name=name,
            initial_investment=initial_investment,
            expected_return_percent=expected_return,
            risk_tier=risk_tier,
            status=status,
            returns=[
                ReturnEvent(return_amount=amount, return_date=date(2024, 1, i + 1))
                for i, amount in enumerate(returns)
            ],
        )

    return make_project
