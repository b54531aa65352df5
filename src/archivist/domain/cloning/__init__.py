"""Declarative record cloning.

Declare per-type options on a :class:`CloneRegistry`, then hand the registry
and the host ORM's collaborators to a :class:`CloneExecutor`::

    registry = CloneRegistry()
    registry.declare(
        Company,
        to=ArchiveCompany,
        attribute_map={"name": "company_name"},
        exclude="bank_details",
        associations="employees",
    )
    CloneExecutor(registry, store=..., reflection=..., persistence=...).clone(company)
"""

from __future__ import annotations

from .accessors import AccessorTable, ObjectAttributeStore, accessors_for
from .cascade import CascadeWalker, CloneTrail
from .configuration import SELF, CloneConfiguration, block_predicate_from, resolve_reference
from .errors import (
    CloneCycleError,
    CloneDepthError,
    CloneError,
    MissingAttributeError,
    NotCloneableError,
    UnsupportedAssociationError,
)
from .executor import CloneExecutor, CloneInvocation, CloneResult
from .receiver import ReceiverFactory, ReceiverResult
from .registry import CloneRegistry
from .resolver import AttributePair, resolve_attributes

__all__ = [
    "SELF",
    "AccessorTable",
    "AttributePair",
    "CascadeWalker",
    "CloneConfiguration",
    "CloneCycleError",
    "CloneDepthError",
    "CloneError",
    "CloneExecutor",
    "CloneInvocation",
    "CloneRegistry",
    "CloneResult",
    "CloneTrail",
    "MissingAttributeError",
    "NotCloneableError",
    "ObjectAttributeStore",
    "ReceiverFactory",
    "ReceiverResult",
    "UnsupportedAssociationError",
    "accessors_for",
    "block_predicate_from",
    "resolve_attributes",
    "resolve_reference",
]
