"""
SQLAlchemy repository implementation.

Each call opens its own session from the configured session factory and
converts ORM rows into the plain domain models used by the engines.
"""

import logging
from contextlib import contextmanager
from datetime import date
from typing import Dict, Iterator, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload, sessionmaker

from finance_tracker.database.base import get_session_factory
from finance_tracker.database.models import Project, ProjectReturn, Setting, Transaction
from finance_tracker.models.portfolio_insights import InvestmentProject, ReturnEvent
from finance_tracker.models.transaction_analytics import TransactionRecord

from .base import FinanceRepository, RecordNotFoundError, RepositoryError

logger = logging.getLogger(__name__)


def _transaction_to_record(row: Transaction) -> TransactionRecord:
    return TransactionRecord(
        id=row.id,
        type=row.type,
        amount=row.amount,
        description=row.description,
        category=row.category,
        date=row.date,
    )


def _return_to_event(row: ProjectReturn) -> ReturnEvent:
    return ReturnEvent(
        id=row.id,
        return_amount=row.return_amount,
        return_date=row.return_date,
        notes=row.notes,
    )


def _project_to_model(row: Project) -> InvestmentProject:
    return InvestmentProject(
        id=row.id,
        name=row.name,
        description=row.description,
        initial_investment=row.initial_investment,
        expected_return_percent=row.expected_return,
        risk_tier=row.risk_level,
        status=row.status,
        duration_months=row.duration_months,
        created_at=row.created_at,
        returns=[_return_to_event(r) for r in row.returns],
    )


def _apply_project_fields(row: Project, project: InvestmentProject) -> None:
    row.name = project.name
    row.description = project.description
    row.initial_investment = project.initial_investment
    row.expected_return = project.expected_return_percent
    row.risk_level = project.risk_tier
    row.status = project.status
    row.duration_months = project.duration_months


class SqlFinanceRepository(FinanceRepository):
    """Repository storing records through SQLAlchemy."""

    def __init__(self, session_factory: Optional[sessionmaker] = None):
        """
        Args:
            session_factory: Factory for sessions; defaults to the global one
        """
        self.session_factory = session_factory or get_session_factory()

    @contextmanager
    def _session(self) -> Iterator[Session]:
        session = self.session_factory()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Database operation failed: {str(e)}")
            raise RepositoryError(f"Database operation failed: {str(e)}") from e
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def _owned_project(self, session: Session, user_id: int, project_id: int) -> Project:
        row = (
            session.query(Project)
            .options(selectinload(Project.returns))
            .filter(Project.id == project_id, Project.user_id == user_id)
            .first()
        )
        if row is None:
            raise RecordNotFoundError(f"Project {project_id} not found")
        return row

    def list_transactions(
        self,
        user_id: int,
        start: Optional[date] = None,
        transaction_type: Optional[str] = None,
        category: Optional[str] = None,
    ) -> List[TransactionRecord]:
        with self._session() as session:
            query = session.query(Transaction).filter(Transaction.user_id == user_id)
            if start is not None:
                query = query.filter(Transaction.date >= start)
            if transaction_type is not None:
                query = query.filter(Transaction.type == transaction_type)
            if category is not None:
                query = query.filter(Transaction.category == category)
            rows = query.order_by(Transaction.date.desc(), Transaction.id.desc()).all()
            return [_transaction_to_record(row) for row in rows]

    def add_transaction(self, user_id: int, record: TransactionRecord) -> TransactionRecord:
        with self._session() as session:
            row = Transaction(
                user_id=user_id,
                type=record.type,
                amount=record.amount,
                description=record.description,
                category=record.category,
                date=record.date,
            )
            session.add(row)
            session.flush()
            return _transaction_to_record(row)

    def delete_transaction(self, user_id: int, transaction_id: int) -> None:
        with self._session() as session:
            row = (
                session.query(Transaction)
                .filter(Transaction.id == transaction_id, Transaction.user_id == user_id)
                .first()
            )
            if row is None:
                raise RecordNotFoundError(f"Transaction {transaction_id} not found")
            session.delete(row)

    def list_projects(
        self,
        user_id: int,
        status: Optional[str] = None,
        risk_level: Optional[str] = None,
    ) -> List[InvestmentProject]:
        with self._session() as session:
            query = (
                session.query(Project)
                .options(selectinload(Project.returns))
                .filter(Project.user_id == user_id)
            )
            if status is not None:
                query = query.filter(Project.status == status)
            if risk_level is not None:
                query = query.filter(Project.risk_level == risk_level)
            rows = query.order_by(Project.created_at.desc(), Project.id.desc()).all()
            return [_project_to_model(row) for row in rows]

    def get_project(self, user_id: int, project_id: int) -> InvestmentProject:
        with self._session() as session:
            return _project_to_model(self._owned_project(session, user_id, project_id))

    def add_project(self, user_id: int, project: InvestmentProject) -> InvestmentProject:
        with self._session() as session:
            row = Project(user_id=user_id)
            _apply_project_fields(row, project)
            session.add(row)
            session.flush()
            session.refresh(row)
            return _project_to_model(row)

    def update_project(
        self, user_id: int, project_id: int, project: InvestmentProject
    ) -> InvestmentProject:
        with self._session() as session:
            row = self._owned_project(session, user_id, project_id)
            _apply_project_fields(row, project)
            session.flush()
            return _project_to_model(row)

    def delete_project(self, user_id: int, project_id: int) -> None:
        with self._session() as session:
            # Returns are removed through the relationship cascade.
            session.delete(self._owned_project(session, user_id, project_id))

    def add_return(
        self, user_id: int, project_id: int, event: ReturnEvent
    ) -> ReturnEvent:
        with self._session() as session:
            self._owned_project(session, user_id, project_id)
            row = ProjectReturn(
                project_id=project_id,
                return_amount=event.return_amount,
                return_date=event.return_date,
                notes=event.notes,
            )
            session.add(row)
            session.flush()
            return _return_to_event(row)

    def get_settings(self) -> Dict[str, str]:
        with self._session() as session:
            return {row.key: row.value for row in session.query(Setting).all()}

    def put_settings(self, updates: Dict[str, str]) -> Dict[str, str]:
        with self._session() as session:
            for key, value in updates.items():
                session.merge(Setting(key=key, value=value))
            session.flush()
            return {row.key: row.value for row in session.query(Setting).all()}
