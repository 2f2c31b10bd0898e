"""
SQLAlchemy database models for the finance tracker.

This module defines the database tables and relationships for transactions,
investment projects, project returns and settings. Users are identified by an
externally issued integer id; no user table is kept here.
"""

from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from .base import Base


class Transaction(Base):
    """Income, expense or investment transaction."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, nullable=False, index=True)
    type = Column(String(20), nullable=False)
    amount = Column(Float, nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String(100))
    date = Column(Date, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint(
            "type IN ('income', 'expense', 'investment')", name="ck_transaction_type"
        ),
        CheckConstraint("amount >= 0", name="ck_transaction_amount"),
        Index("idx_transactions_user_date", "user_id", "date"),
    )

    def __repr__(self):
        return f"<Transaction(id={self.id}, type='{self.type}', amount={self.amount})>"


class Project(Base):
    """Investment project owned by a user."""

    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text)
    initial_investment = Column(Float, nullable=False)
    expected_return = Column(Float, nullable=False)
    risk_level = Column(String(20))
    duration_months = Column(Integer)
    status = Column(String(20), nullable=False, default="active", index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Return events go with their project
    returns = relationship(
        "ProjectReturn",
        back_populates="project",
        cascade="all, delete-orphan",
        order_by="ProjectReturn.return_date",
    )

    __table_args__ = (
        CheckConstraint("initial_investment >= 0", name="ck_project_investment"),
        CheckConstraint(
            "risk_level IS NULL OR risk_level IN ('low', 'medium', 'high')",
            name="ck_project_risk_level",
        ),
        CheckConstraint(
            "status IN ('active', 'completed', 'cancelled')", name="ck_project_status"
        ),
    )

    def __repr__(self):
        return f"<Project(id={self.id}, user_id={self.user_id}, name='{self.name}')>"


class ProjectReturn(Base):
    """A return (or loss) realised by a project."""

    __tablename__ = "project_returns"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(
        Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True
    )
    return_amount = Column(Float, nullable=False)
    return_date = Column(Date, nullable=False)
    notes = Column(Text)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    project = relationship("Project", back_populates="returns")

    def __repr__(self):
        return f"<ProjectReturn(id={self.id}, project_id={self.project_id}, amount={self.return_amount})>"


class Setting(Base):
    """Key/value application setting stored as text."""

    __tablename__ = "settings"

    key = Column(String(100), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    def __repr__(self):
        return f"<Setting(key='{self.key}')>"
