"""Per-type member access by name.

Readers and writers are looked up once per ``(type, name)`` and cached on the
type's :class:`AccessorTable`, so cloning many rows of one type does not
repeat the member classification.
"""

from __future__ import annotations

import dataclasses
import inspect
from collections.abc import Callable
from functools import cache
from types import FunctionType
from typing import Final

from .errors import MissingAttributeError

type Reader = Callable[[object], object]
type Writer = Callable[[object, object], None]

_MISSING: Final = object()


class AccessorTable:
    """Name-to-accessor mapping for one type."""

    def __init__(self, owner: type) -> None:
        self.owner = owner
        self._readers: dict[str, Reader] = {}
        self._writers: dict[str, Writer] = {}
        self._declared = _declared_members(owner)

    def read(self, instance: object, name: str) -> object:
        return self.reader(name)(instance)

    def write(self, instance: object, name: str, value: object) -> None:
        self.writer(name)(instance, value)

    def reader(self, name: str) -> Reader:
        reader = self._readers.get(name)
        if reader is None:
            reader = self._readers[name] = self._build_reader(name)
        return reader

    def writer(self, name: str) -> Writer:
        writer = self._writers.get(name)
        if writer is None:
            writer = self._writers[name] = self._build_writer(name)
        return writer

    def _build_reader(self, name: str) -> Reader:
        member = inspect.getattr_static(self.owner, name, _MISSING)
        if isinstance(member, (FunctionType, staticmethod, classmethod)):
            return _method_reader(self.owner, name)
        return _value_reader(self.owner, name)

    def _build_writer(self, name: str) -> Writer:
        member = inspect.getattr_static(self.owner, name, _MISSING)
        if isinstance(member, property):
            if member.fset is None:
                raise MissingAttributeError(self.owner, name, access="writable")
            return _setter(name)
        if isinstance(member, (FunctionType, staticmethod, classmethod)):
            raise MissingAttributeError(self.owner, name, access="writable")
        if member is _MISSING and name not in self._declared:
            return _instance_setter(self.owner, name)
        return _setter(name)


@cache
def accessors_for(owner: type) -> AccessorTable:
    """Return the shared accessor table for ``owner``."""

    return AccessorTable(owner)


def _declared_members(owner: type) -> frozenset[str]:
    names: set[str] = set()
    for klass in inspect.getmro(owner):
        names.update(getattr(klass, "__annotations__", {}))
        slots = getattr(klass, "__slots__", ())
        names.update((slots,) if isinstance(slots, str) else slots)
    if dataclasses.is_dataclass(owner):
        names.update(field.name for field in dataclasses.fields(owner))
    return frozenset(names)


def _method_reader(owner: type, name: str) -> Reader:
    def read(instance: object) -> object:
        return getattr(instance, name)()

    read.__qualname__ = f"read_{owner.__name__}_{name}"
    return read


def _value_reader(owner: type, name: str) -> Reader:
    def read(instance: object) -> object:
        try:
            return getattr(instance, name)
        except AttributeError as exc:
            if isinstance(exc, MissingAttributeError):
                raise
            raise MissingAttributeError(owner, name, access="readable") from exc

    read.__qualname__ = f"read_{owner.__name__}_{name}"
    return read


def _setter(name: str) -> Writer:
    def write(instance: object, value: object) -> None:
        setattr(instance, name, value)

    return write


def _instance_setter(owner: type, name: str) -> Writer:
    # undeclared on the type: only members the instance already carries are writable
    def write(instance: object, value: object) -> None:
        if name not in getattr(instance, "__dict__", {}):
            raise MissingAttributeError(owner, name, access="writable")
        setattr(instance, name, value)

    return write


class ObjectAttributeStore:
    """Attribute store for plain Python objects.

    Natural attributes are a dataclass's fields, or otherwise the public
    slots that are set followed by the public entries of the instance
    ``__dict__``.
    """

    def natural_attributes(self, instance: object) -> tuple[str, ...]:
        if dataclasses.is_dataclass(instance):
            return tuple(field.name for field in dataclasses.fields(instance))
        names = (*_filled_slots(instance), *getattr(instance, "__dict__", {}))
        return tuple(dict.fromkeys(name for name in names if not name.startswith("_")))

    def get(self, instance: object, name: str) -> object:
        return accessors_for(type(instance)).read(instance, name)

    def set(self, instance: object, name: str, value: object) -> None:
        accessors_for(type(instance)).write(instance, name, value)


def _filled_slots(instance: object) -> list[str]:
    names: list[str] = []
    for klass in reversed(inspect.getmro(type(instance))):
        slots = klass.__dict__.get("__slots__", ())
        for name in (slots,) if isinstance(slots, str) else slots:
            if name not in ("__dict__", "__weakref__") and hasattr(instance, name):
                names.append(name)
    return names
