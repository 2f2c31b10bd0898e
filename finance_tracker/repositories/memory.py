"""
In-memory repository implementation.

Keeps all records in process memory. Suitable for development, tests and
single-process demos; everything is lost on restart.
"""

import itertools
import threading
from datetime import date, datetime
from typing import Dict, List, Optional

from finance_tracker.models.portfolio_insights import InvestmentProject, ReturnEvent
from finance_tracker.models.transaction_analytics import TransactionRecord

from .base import FinanceRepository, RecordNotFoundError


class InMemoryFinanceRepository(FinanceRepository):
    """Repository backed by plain dictionaries guarded by a lock."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._ids = itertools.count(1)
        # id -> (user_id, record)
        self._transactions: Dict[int, tuple] = {}
        self._projects: Dict[int, tuple] = {}
        self._returns: Dict[int, List[ReturnEvent]] = {}
        self._settings: Dict[str, str] = {}

    def _owned_project(self, user_id: int, project_id: int) -> InvestmentProject:
        owner, project = self._projects.get(project_id, (None, None))
        if project is None or owner != user_id:
            raise RecordNotFoundError(f"Project {project_id} not found")
        return project

    def _with_returns(self, project: InvestmentProject) -> InvestmentProject:
        events = sorted(self._returns.get(project.id, []), key=lambda e: e.return_date)
        return project.model_copy(update={"returns": events})

    def list_transactions(
        self,
        user_id: int,
        start: Optional[date] = None,
        transaction_type: Optional[str] = None,
        category: Optional[str] = None,
    ) -> List[TransactionRecord]:
        with self._lock:
            records = [
                record
                for owner, record in self._transactions.values()
                if owner == user_id
                and (start is None or record.date >= start)
                and (transaction_type is None or record.type == transaction_type)
                and (category is None or record.category == category)
            ]
        return sorted(records, key=lambda r: (r.date, r.id), reverse=True)

    def add_transaction(self, user_id: int, record: TransactionRecord) -> TransactionRecord:
        with self._lock:
            stored = record.model_copy(update={"id": next(self._ids)})
            self._transactions[stored.id] = (user_id, stored)
        return stored

    def delete_transaction(self, user_id: int, transaction_id: int) -> None:
        with self._lock:
            owner, _ = self._transactions.get(transaction_id, (None, None))
            if owner != user_id:
                raise RecordNotFoundError(f"Transaction {transaction_id} not found")
            del self._transactions[transaction_id]

    def list_projects(
        self,
        user_id: int,
        status: Optional[str] = None,
        risk_level: Optional[str] = None,
    ) -> List[InvestmentProject]:
        with self._lock:
            projects = [
                self._with_returns(project)
                for owner, project in self._projects.values()
                if owner == user_id
                and (status is None or project.status == status)
                and (risk_level is None or project.risk_tier == risk_level)
            ]
        return sorted(projects, key=lambda p: (p.created_at, p.id), reverse=True)

    def get_project(self, user_id: int, project_id: int) -> InvestmentProject:
        with self._lock:
            return self._with_returns(self._owned_project(user_id, project_id))

    def add_project(self, user_id: int, project: InvestmentProject) -> InvestmentProject:
        with self._lock:
            stored = project.model_copy(
                update={
                    "id": next(self._ids),
                    "created_at": datetime.utcnow(),
                    "returns": [],
                }
            )
            self._projects[stored.id] = (user_id, stored)
            self._returns[stored.id] = []
            return self._with_returns(stored)

    def update_project(
        self, user_id: int, project_id: int, project: InvestmentProject
    ) -> InvestmentProject:
        with self._lock:
            current = self._owned_project(user_id, project_id)
            stored = project.model_copy(
                update={"id": project_id, "created_at": current.created_at, "returns": []}
            )
            self._projects[project_id] = (user_id, stored)
            return self._with_returns(stored)

    def delete_project(self, user_id: int, project_id: int) -> None:
        with self._lock:
            self._owned_project(user_id, project_id)
            del self._projects[project_id]
            self._returns.pop(project_id, None)

    def add_return(
        self, user_id: int, project_id: int, event: ReturnEvent
    ) -> ReturnEvent:
        with self._lock:
            self._owned_project(user_id, project_id)
            stored = event.model_copy(update={"id": next(self._ids)})
            self._returns[project_id].append(stored)
        return stored

    def get_settings(self) -> Dict[str, str]:
        with self._lock:
            return dict(self._settings)

    def put_settings(self, updates: Dict[str, str]) -> Dict[str, str]:
        with self._lock:
            self._settings.update(updates)
            return dict(self._settings)
