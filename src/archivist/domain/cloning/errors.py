"""Errors raised by the clone engine.

A blocked clone is not an error and a failed receiver construction is
recovered by the receiver factory, so neither has a class here. Persistence
failures are raised by the persistence adapter and propagate unchanged.
"""

from __future__ import annotations


class CloneError(RuntimeError):
    """Base class for clone engine errors."""


class NotCloneableError(CloneError):
    """Raised when a type has no clone configuration."""

    def __init__(self, source_type: type) -> None:
        super().__init__(f"{source_type.__qualname__} is not declared cloneable")
        self.source_type = source_type


class MissingAttributeError(CloneError, AttributeError):
    """Raised when a configured name does not resolve to a readable/writable member."""

    def __init__(self, owner: type, name: str, *, access: str) -> None:
        super().__init__(f"{owner.__qualname__} has no {access} member {name!r}")
        self.owner = owner
        self.member = name
        self.access = access


class UnsupportedAssociationError(CloneError):
    """Raised when an association cannot be cascaded."""


class CloneCycleError(CloneError):
    """Raised when a cascade reaches a record that is its own ancestor."""


class CloneDepthError(CloneError):
    """Raised when a cascade exceeds the configured maximum depth."""
