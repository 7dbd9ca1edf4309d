"""SQLAlchemy adapter package for the local state store."""

from __future__ import annotations

from .mappings import create_all_tables, mapper_registry, start_mappers, tracked_resource_table
from .repositories import SqlAlchemyTrackedResourceRepository
from .unit_of_work import (
    SqlAlchemyStateUnitOfWork,
    StartupError,
    configured_engine,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyStateUnitOfWork",
    "SqlAlchemyTrackedResourceRepository",
    "StartupError",
    "configured_engine",
    "create_all_tables",
    "mapper_registry",
    "shutdown",
    "start_mappers",
    "startup",
    "tracked_resource_table",
]
