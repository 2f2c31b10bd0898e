"""
Base repository interface and exceptions.

This module defines the abstract interface that every persistence backend
must follow. The calculation engines never talk to a repository directly:
services read plain domain models from a repository and hand them over.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Dict, List, Optional

from finance_tracker.models.portfolio_insights import InvestmentProject, ReturnEvent
from finance_tracker.models.transaction_analytics import TransactionRecord


class RepositoryError(Exception):
    """Base exception for persistence errors."""


class RecordNotFoundError(RepositoryError):
    """Raised when a record does not exist or belongs to another user."""


class FinanceRepository(ABC):
    """
    Abstract base class for finance data repositories.

    All user-owned records are scoped by ``user_id``; asking for a record of
    another user behaves exactly like asking for a missing one.
    """

    @abstractmethod
    def list_transactions(
        self,
        user_id: int,
        start: Optional[date] = None,
        transaction_type: Optional[str] = None,
        category: Optional[str] = None,
    ) -> List[TransactionRecord]:
        """
        List a user's transactions, newest first.

        Args:
            user_id: Owner of the transactions
            start: Only include transactions dated on or after this day
            transaction_type: Only include this transaction type
            category: Only include this category
        """

    @abstractmethod
    def add_transaction(self, user_id: int, record: TransactionRecord) -> TransactionRecord:
        """Store a transaction and return it with its assigned id."""

    @abstractmethod
    def delete_transaction(self, user_id: int, transaction_id: int) -> None:
        """
        Delete a transaction.

        Raises:
            RecordNotFoundError: If the transaction does not exist
        """

    @abstractmethod
    def list_projects(
        self,
        user_id: int,
        status: Optional[str] = None,
        risk_level: Optional[str] = None,
    ) -> List[InvestmentProject]:
        """List a user's projects with their return events, newest first."""

    @abstractmethod
    def get_project(self, user_id: int, project_id: int) -> InvestmentProject:
        """
        Fetch one project with its return events.

        Raises:
            RecordNotFoundError: If the project does not exist
        """

    @abstractmethod
    def add_project(self, user_id: int, project: InvestmentProject) -> InvestmentProject:
        """Store a new project and return it with its assigned id."""

    @abstractmethod
    def update_project(
        self, user_id: int, project_id: int, project: InvestmentProject
    ) -> InvestmentProject:
        """
        Replace a project's attributes, keeping its return events.

        Raises:
            RecordNotFoundError: If the project does not exist
        """

    @abstractmethod
    def delete_project(self, user_id: int, project_id: int) -> None:
        """
        Delete a project together with all of its return events.

        Raises:
            RecordNotFoundError: If the project does not exist
        """

    @abstractmethod
    def add_return(
        self, user_id: int, project_id: int, event: ReturnEvent
    ) -> ReturnEvent:
        """
        Record a return event for a project.

        Raises:
            RecordNotFoundError: If the project does not exist
        """

    @abstractmethod
    def get_settings(self) -> Dict[str, str]:
        """Return all stored settings as raw strings."""

    @abstractmethod
    def put_settings(self, updates: Dict[str, str]) -> Dict[str, str]:
        """Upsert settings and return the full stored set."""
