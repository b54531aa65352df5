"""Declared clone configuration for one source type."""

from __future__ import annotations

import importlib
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Final, final

from .accessors import accessors_for

type BlockPredicate = Callable[[object], object]


@final
class _SelfTarget:
    """Marker for "clone into a new instance of the source's own type"."""

    def __repr__(self) -> str:
        return "SELF"


SELF: Final = _SelfTarget()

type CloneTarget = type | str | _SelfTarget


@dataclass(frozen=True, slots=True, kw_only=True)
class CloneConfiguration:
    """Immutable clone options for one source type.

    ``target`` is a type, a ``"module:QualName"`` reference resolved on use, or
    :data:`SELF`. ``exclude`` is applied after ``include``, so a name listed in
    both is never copied.
    """

    target: CloneTarget = SELF
    attribute_map: Mapping[str, str] = field(default_factory=dict)
    include: tuple[str, ...] = ()
    exclude: frozenset[str] = frozenset()
    associations: tuple[str, ...] = ()
    block_predicate: BlockPredicate | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "attribute_map", MappingProxyType(dict(self.attribute_map)))
        object.__setattr__(self, "include", names_of(self.include))
        object.__setattr__(self, "exclude", frozenset(names_of(self.exclude)))
        object.__setattr__(self, "associations", names_of(self.associations))

    def destination_for(self, name: str) -> str:
        return self.attribute_map.get(name, name)

    def is_blocked(self, source: object) -> bool:
        if self.block_predicate is None:
            return False
        return bool(self.block_predicate(source))

    def resolve_target(self, source_type: type) -> type:
        """Return the receiver type; raises if a string reference does not resolve."""

        if isinstance(self.target, _SelfTarget):
            return source_type
        if isinstance(self.target, str):
            resolved = resolve_reference(self.target)
            if not isinstance(resolved, type):
                raise TypeError(f"{self.target!r} does not name a type")
            return resolved
        return self.target


def names_of(value: str | Iterable[str] | None) -> tuple[str, ...]:
    """Normalise a single name or an iterable of names into a tuple."""

    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(value)


def block_predicate_from(unless: BlockPredicate | str | None) -> BlockPredicate | None:
    """Turn ``unless`` into a predicate.

    A string names a member of the source: a method is called without
    arguments, any other member is read as-is.
    """

    if unless is None or callable(unless):
        return unless

    member = unless

    def predicate(source: object) -> object:
        return accessors_for(type(source)).read(source, member)

    predicate.__qualname__ = f"unless_{member}"
    return predicate


def resolve_reference(reference: str) -> object:
    """Import ``"package.module:Qual.Name"`` and return the named object."""

    module_name, sep, qualname = reference.partition(":")
    if not sep or not module_name or not qualname:
        raise ValueError(f"Invalid reference {reference!r}; expected 'module:Name'")
    resolved: object = importlib.import_module(module_name)
    for part in qualname.split("."):
        resolved = getattr(resolved, part)
    return resolved
