"""Resolve which attributes a clone copies and where they land."""

from __future__ import annotations

from typing import TYPE_CHECKING, NamedTuple

if TYPE_CHECKING:
    from archivist.domain.ports import AttributeStore

    from .configuration import CloneConfiguration


class AttributePair(NamedTuple):
    source: str
    destination: str


def resolve_attributes(
    config: CloneConfiguration,
    source: object,
    *,
    store: AttributeStore,
) -> tuple[AttributePair, ...]:
    """Return the ``(source, destination)`` pairs to copy for ``source``.

    The base set is the attribute map's keys, or the source's natural
    attributes when no map is declared. A non-empty map is never topped up
    with unmapped natural attributes; only ``include`` adds to it. Excludes
    are subtracted last and order is first-seen.
    """

    if config.attribute_map:
        base = tuple(config.attribute_map)
    else:
        base = store.natural_attributes(source)
    candidates = (*base, *config.include)
    names = dict.fromkeys(name for name in candidates if name not in config.exclude)
    return tuple(AttributePair(name, config.destination_for(name)) for name in names)
