"""Registry of clone configurations keyed by source type."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .configuration import SELF, CloneConfiguration, block_predicate_from, names_of
from .errors import NotCloneableError

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator, Mapping

    from .configuration import BlockPredicate, CloneTarget

log = logging.getLogger(__name__)


class CloneRegistry:
    """Maps source types to their :class:`CloneConfiguration`.

    Declarations happen at setup time. Lookups walk the source type's MRO, so a
    subclass of a declared type clones with its parent's configuration unless
    it declares its own.
    """

    def __init__(self) -> None:
        self._configurations: dict[type, CloneConfiguration] = {}

    def declare(
        self,
        source_type: type,
        *,
        to: CloneTarget = SELF,
        attribute_map: Mapping[str, str] | None = None,
        include: str | Iterable[str] = (),
        exclude: str | Iterable[str] = (),
        associations: str | Iterable[str] = (),
        unless: BlockPredicate | str | None = None,
    ) -> CloneConfiguration:
        """Declare ``source_type`` cloneable and return its configuration."""

        configuration = CloneConfiguration(
            target=to,
            attribute_map=attribute_map or {},
            include=names_of(include),
            exclude=frozenset(names_of(exclude)),
            associations=names_of(associations),
            block_predicate=block_predicate_from(unless),
        )
        self.register(source_type, configuration)
        return configuration

    def register(self, source_type: type, configuration: CloneConfiguration) -> None:
        if source_type in self._configurations:
            log.warning("Replacing clone configuration for %s", source_type.__qualname__)
        self._configurations[source_type] = configuration

    def cloneable[T: type](
        self,
        *,
        to: CloneTarget = SELF,
        attribute_map: Mapping[str, str] | None = None,
        include: str | Iterable[str] = (),
        exclude: str | Iterable[str] = (),
        associations: str | Iterable[str] = (),
        unless: BlockPredicate | str | None = None,
    ) -> Callable[[T], T]:
        """Class decorator form of :meth:`declare`."""

        def decorate(source_type: T) -> T:
            self.declare(
                source_type,
                to=to,
                attribute_map=attribute_map,
                include=include,
                exclude=exclude,
                associations=associations,
                unless=unless,
            )
            return source_type

        return decorate

    def configuration_for(self, source_type: type) -> CloneConfiguration:
        for klass in source_type.__mro__:
            configuration = self._configurations.get(klass)
            if configuration is not None:
                return configuration
        raise NotCloneableError(source_type)

    def is_cloneable(self, source_type: type) -> bool:
        return any(klass in self._configurations for klass in source_type.__mro__)

    def __contains__(self, source_type: object) -> bool:
        return isinstance(source_type, type) and self.is_cloneable(source_type)

    def __iter__(self) -> Iterator[type]:
        return iter(self._configurations)

    def __len__(self) -> int:
        return len(self._configurations)
