"""Relationship reflection over SQLAlchemy mappers."""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import ONETOMANY, Mapper, RelationshipProperty

from archivist.domain.cloning import UnsupportedAssociationError

if TYPE_CHECKING:
    from collections.abc import Iterable


class SqlAlchemyRelationshipReflection:
    """Reads one-to-many and one-to-one relationships from the parent side."""

    def foreign_key(self, source_type: type, association: str) -> str:
        prop = self._relationship(source_type, association)
        remote_columns = [remote for _local, remote in prop.local_remote_pairs or ()]
        if len(remote_columns) != 1:
            raise UnsupportedAssociationError(
                f"{source_type.__qualname__}.{association} joins on "
                f"{len(remote_columns)} columns; only single-column foreign keys cascade"
            )
        related_mapper = cast("Mapper[object]", prop.mapper)
        return related_mapper.get_property_by_column(remote_columns[0]).key

    def related(self, instance: object, association: str) -> tuple[object, ...]:
        prop = self._relationship(type(instance), association)
        value = getattr(instance, association)
        if value is None:
            return ()
        if prop.uselist:
            return tuple(cast("Iterable[object]", value))
        return (value,)

    def identity(self, instance: object) -> object:
        state = sa_inspect(instance, raiseerr=False)
        if state is None:
            return getattr(instance, "id", None)
        primary_key = state.mapper.primary_key_from_instance(instance)
        if all(value is None for value in primary_key):
            return None
        return primary_key[0] if len(primary_key) == 1 else tuple(primary_key)

    @staticmethod
    def _relationship(source_type: type, association: str) -> RelationshipProperty[object]:
        mapper: Mapper[object] | None = sa_inspect(source_type, raiseerr=False)
        if mapper is None:
            raise UnsupportedAssociationError(f"{source_type.__qualname__} is not mapped")
        prop = mapper.relationships.get(association)
        if prop is None:
            raise UnsupportedAssociationError(
                f"{source_type.__qualname__} has no relationship {association!r}"
            )
        if prop.direction is not ONETOMANY or prop.secondary is not None:
            raise UnsupportedAssociationError(
                f"{source_type.__qualname__}.{association} is {prop.direction.name.lower()}; "
                "only one-to-many and one-to-one relationships cascade"
            )
        return prop


def primary_key_type(model: type) -> type | None:
    """Return the Python type of ``model``'s single-column primary key, if known."""

    mapper: Mapper[object] | None = sa_inspect(model, raiseerr=False)
    if mapper is None or len(mapper.primary_key) != 1:
        return None
    try:
        return mapper.primary_key[0].type.python_type
    except NotImplementedError:
        return None
