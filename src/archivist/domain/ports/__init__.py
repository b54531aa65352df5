"""Domain port definitions for adapters."""

from __future__ import annotations

from .attributes import AttributeStore
from .persistence import Persistence, RecordRepository
from .reflection import RelationshipReflection
from .unit_of_work import CloneCollaborators, CloneUnitOfWork

__all__ = [
    "AttributeStore",
    "CloneCollaborators",
    "CloneUnitOfWork",
    "Persistence",
    "RecordRepository",
    "RelationshipReflection",
]
