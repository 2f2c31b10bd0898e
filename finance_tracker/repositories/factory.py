"""
Repository factory for creating repository instances based on configuration.

This module provides a factory function to create the appropriate persistence
backend based on the application configuration.
"""

from finance_tracker.config import Settings

from .base import FinanceRepository
from .memory import InMemoryFinanceRepository
from .sql import SqlFinanceRepository


def create_repository(settings: Settings) -> FinanceRepository:
    """
    Create a repository instance based on configuration.

    Args:
        settings: Application settings containing the storage type

    Returns:
        FinanceRepository: Configured repository instance

    Raises:
        ValueError: If the storage type is not supported
    """
    if settings.storage_type == "memory":
        return InMemoryFinanceRepository()

    if settings.storage_type == "sql":
        from finance_tracker.database.base import create_tables

        create_tables()
        return SqlFinanceRepository()

    raise ValueError(f"Unsupported storage type: {settings.storage_type}")
