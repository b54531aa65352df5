"""Recursive cloning of related records."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Protocol

from .errors import CloneCycleError, CloneDepthError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from archivist.domain.ports import RelationshipReflection

    from .executor import CloneInvocation, CloneResult

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CloneTrail:
    """Guard state for one record and the chain of records above it.

    ``ancestors`` holds the ``(type, identity)`` pairs on the path from the
    root clone down to this record. Siblings get their own copies, so a
    record reached through two associations is cloned once per association.
    It is ``None`` when the cycle guard is off.
    """

    ancestors: frozenset[tuple[type, object]] | None = frozenset()
    depth: int = 0
    max_depth: int | None = None

    @classmethod
    def root(cls, *, cycle_guard: bool = True, max_depth: int | None = None) -> CloneTrail:
        return cls(ancestors=frozenset() if cycle_guard else None, max_depth=max_depth)

    def descend(self) -> CloneTrail:
        return replace(self, depth=self.depth + 1)

    def enter(self, source_type: type, identity: object) -> CloneTrail:
        """Return the trail for cloning the record below this point.

        Raises if the record is one of its own ancestors or lies too deep.
        """

        if self.max_depth is not None and self.depth > self.max_depth:
            raise CloneDepthError(
                f"Cascade reached {source_type.__qualname__} at depth {self.depth}, "
                f"beyond the maximum of {self.max_depth}"
            )
        if self.ancestors is None:
            return self
        key = (source_type, identity)
        if key in self.ancestors:
            raise CloneCycleError(
                f"{source_type.__qualname__} {identity!r} is its own ancestor in this cascade; "
                "check the declared associations for a cycle"
            )
        return replace(self, ancestors=self.ancestors | {key})


class CloneChild(Protocol):
    def __call__(
        self,
        source: object,
        linkage: Mapping[str, object],
        trail: CloneTrail,
    ) -> CloneResult: ...


class CascadeWalker:
    """Clone each record related to an invocation's source through its declared associations."""

    def __init__(self, reflection: RelationshipReflection, clone_child: CloneChild) -> None:
        self.reflection = reflection
        self.clone_child = clone_child

    def cascade(self, invocation: CloneInvocation) -> tuple[CloneResult, ...]:
        """Clone children association by association, in declared order.

        Each child receives the saved receiver's identity under the related
        type's foreign-key attribute. The first failing child stops the walk.
        """

        results: list[CloneResult] = []
        source_type = type(invocation.source)
        for association in invocation.config.associations:
            foreign_key = self.reflection.foreign_key(source_type, association)
            parent_identity = self.reflection.identity(invocation.receiver)
            children = self.reflection.related(invocation.source, association)
            log.debug(
                "Cascading %s.%s to %d record(s) with %s=%r",
                source_type.__qualname__,
                association,
                len(children),
                foreign_key,
                parent_identity,
            )
            linkage = {foreign_key: parent_identity}
            results.extend(
                self.clone_child(child, linkage, invocation.trail.descend()) for child in children
            )
        return tuple(results)
