"""
Persistence backends for transactions, projects and settings.

This module provides a unified interface over interchangeable backends
(SQLAlchemy or in-memory) that supply plain domain models to the engines.
"""

from .base import FinanceRepository, RecordNotFoundError, RepositoryError
from .factory import create_repository
from .memory import InMemoryFinanceRepository
from .sql import SqlFinanceRepository

__all__ = [
    "FinanceRepository",
    "RepositoryError",
    "RecordNotFoundError",
    "InMemoryFinanceRepository",
    "SqlFinanceRepository",
    "create_repository",
]
