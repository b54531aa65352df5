"""Clone one record into its receiver, persist it, then cascade."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

from .cascade import CascadeWalker, CloneTrail
from .receiver import ReceiverFactory
from .resolver import resolve_attributes

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

    from archivist.domain.ports import AttributeStore, Persistence, RelationshipReflection

    from .configuration import CloneConfiguration
    from .registry import CloneRegistry

log = logging.getLogger(__name__)


@dataclass(slots=True)
class CloneInvocation:
    """State of one ``clone`` call. Never shared between siblings."""

    source: object
    config: CloneConfiguration
    linkage: Mapping[str, object]
    trail: CloneTrail
    factory: ReceiverFactory = field(init=False)

    def __post_init__(self) -> None:
        self.linkage = MappingProxyType(dict(self.linkage))
        self.factory = ReceiverFactory(self.config, type(self.source))

    @property
    def receiver(self) -> object:
        return self.factory.get_or_create().receiver


@dataclass(frozen=True, slots=True)
class CloneResult:
    """What one clone call did: its saved receiver and its children's results."""

    source: object
    receiver: object | None = None
    blocked: bool = False
    fell_back: bool = False
    children: tuple[CloneResult, ...] = ()

    def walk(self) -> Iterator[CloneResult]:
        """Yield this result and every descendant, depth first."""

        yield self
        for child in self.children:
            yield from child.walk()

    @property
    def saved(self) -> int:
        """Number of receivers persisted in this subtree."""

        return sum(1 for result in self.walk() if result.receiver is not None)


class CloneExecutor:
    """Runs clones for every type declared in ``registry``.

    Persistence errors are not caught: they propagate to the caller and leave
    already-saved parents and siblings in place.
    """

    def __init__(
        self,
        registry: CloneRegistry,
        *,
        store: AttributeStore,
        reflection: RelationshipReflection,
        persistence: Persistence,
        cycle_guard: bool = True,
        max_depth: int | None = None,
    ) -> None:
        self.registry = registry
        self.store = store
        self.reflection = reflection
        self.persistence = persistence
        self.cycle_guard = cycle_guard
        self.max_depth = max_depth
        self.walker = CascadeWalker(reflection, self._clone)

    def clone(self, source: object, linkage: Mapping[str, object] | None = None) -> CloneResult:
        """Clone ``source``; ``linkage`` values are written to the receiver last."""

        trail = CloneTrail.root(cycle_guard=self.cycle_guard, max_depth=self.max_depth)
        return self._clone(source, linkage or {}, trail)

    def _clone(
        self,
        source: object,
        linkage: Mapping[str, object],
        trail: CloneTrail,
    ) -> CloneResult:
        config = self.registry.configuration_for(type(source))
        if config.is_blocked(source):
            log.info("Clone of %s blocked by its predicate", _describe(source))
            return CloneResult(source=source, blocked=True)

        trail = trail.enter(type(source), self._trail_key(source))
        invocation = CloneInvocation(source=source, config=config, linkage=linkage, trail=trail)

        pairs = resolve_attributes(config, source, store=self.store)
        built = invocation.factory.get_or_create()
        receiver = built.receiver
        for pair in pairs:
            self.store.set(receiver, pair.destination, self.store.get(source, pair.source))
        for name, value in invocation.linkage.items():
            self.store.set(receiver, name, value)

        self.persistence.save(receiver)
        log.debug(
            "Cloned %s into %s (%d attribute(s), linkage=%s)",
            _describe(source),
            built.receiver_type.__qualname__,
            len(pairs),
            dict(invocation.linkage),
        )

        children = self.walker.cascade(invocation)
        return CloneResult(
            source=source,
            receiver=receiver,
            fell_back=built.fell_back,
            children=children,
        )

    def _trail_key(self, source: object) -> object:
        identity = self.reflection.identity(source)
        return ("transient", id(source)) if identity is None else identity


def _describe(instance: object) -> str:
    return f"{type(instance).__qualname__}@{id(instance):#x}"
