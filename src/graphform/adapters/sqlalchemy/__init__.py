"""SQLAlchemy adapter package for graphform."""

from __future__ import annotations

from .mappings import STATE_TYPE_BY_KIND, create_all_tables, metadata, resource_state_table
from .repositories import SqlAlchemyResourceStateRepository
from .unit_of_work import (
    SqlAlchemyStateUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "STATE_TYPE_BY_KIND",
    "SqlAlchemyResourceStateRepository",
    "SqlAlchemyStateUnitOfWork",
    "StartupError",
    "configured_engine",
    "create_all_tables",
    "is_started",
    "metadata",
    "resource_state_table",
    "shutdown",
    "startup",
]
