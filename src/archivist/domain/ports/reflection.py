"""Relationship reflection port."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class RelationshipReflection(Protocol):
    """Read-only view of the relationships declared on mapped types."""

    def foreign_key(self, source_type: type, association: str) -> str:
        """Name of the attribute on the related type that points back at ``source_type``."""
        ...

    def related(self, instance: object, association: str) -> tuple[object, ...]:
        """Current related records; a scalar relationship yields at most one."""
        ...

    def identity(self, instance: object) -> object:
        """Identity value other records use to reference ``instance``."""
        ...
