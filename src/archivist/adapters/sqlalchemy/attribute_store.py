"""Attribute store over SQLAlchemy-mapped instances."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import inspect as sa_inspect

from archivist.domain.cloning import ObjectAttributeStore

if TYPE_CHECKING:
    from sqlalchemy.orm import InstanceState


class SqlAlchemyAttributeStore(ObjectAttributeStore):
    """Natural attributes are the mapper's column attributes, keys included.

    Unmapped instances fall back to the plain-object rules.
    """

    def natural_attributes(self, instance: object) -> tuple[str, ...]:
        state: InstanceState[object] | None = sa_inspect(instance, raiseerr=False)
        if state is None:
            return super().natural_attributes(instance)
        return tuple(prop.key for prop in state.mapper.column_attrs)
