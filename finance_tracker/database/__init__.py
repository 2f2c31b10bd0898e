"""Database models and configuration for the finance tracker."""

from .base import Base, build_engine, create_tables, get_engine, get_session
from .models import Project, ProjectReturn, Setting, Transaction

__all__ = [
    "Base",
    "build_engine",
    "create_tables",
    "get_engine",
    "get_session",
    "Transaction",
    "Project",
    "ProjectReturn",
    "Setting",
]
