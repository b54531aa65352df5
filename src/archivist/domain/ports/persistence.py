"""Ports for persisting clone receivers and loading source records."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class Persistence(Protocol):
    """Save contract used by the clone executor.

    ``save`` either succeeds, leaving the instance's identity assigned, or
    raises with the failure detail.
    """

    def save(self, instance: object) -> None: ...


@runtime_checkable
class RecordRepository(Protocol):
    """Lookup and removal of live source records."""

    def get[T](self, model: type[T], identity: object) -> T | None: ...

    def delete(self, instance: object) -> None: ...
