"""Attribute access port."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class AttributeStore(Protocol):
    """Read and write record members by name."""

    def natural_attributes(self, instance: object) -> tuple[str, ...]:
        """Return the names of every persisted field ``instance`` exposes."""
        ...

    def get(self, instance: object, name: str) -> object: ...

    def set(self, instance: object, name: str, value: object) -> None: ...
