"""SQLAlchemy adapter package for Archivist."""

from __future__ import annotations

from .attribute_store import SqlAlchemyAttributeStore
from .persistence import SqlAlchemyPersistence, SqlAlchemyRecordRepository
from .reflection import SqlAlchemyRelationshipReflection, primary_key_type
from .unit_of_work import (
    SqlAlchemyCloneUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyAttributeStore",
    "SqlAlchemyCloneUnitOfWork",
    "SqlAlchemyPersistence",
    "SqlAlchemyRecordRepository",
    "SqlAlchemyRelationshipReflection",
    "StartupError",
    "configured_engine",
    "is_started",
    "primary_key_type",
    "shutdown",
    "startup",
]
