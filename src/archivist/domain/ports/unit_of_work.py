"""Unit-of-work boundary for clone runs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, Self

if TYPE_CHECKING:
    from types import TracebackType

    from .attributes import AttributeStore
    from .persistence import Persistence, RecordRepository
    from .reflection import RelationshipReflection


@dataclass(slots=True)
class CloneCollaborators:
    """Everything a clone run needs from the host ORM."""

    store: AttributeStore
    reflection: RelationshipReflection
    persistence: Persistence
    records: RecordRepository


class CloneUnitOfWork(Protocol):
    """Scope of one clone run; collaborators are only valid inside ``with``."""

    @property
    def collaborators(self) -> CloneCollaborators: ...

    def __enter__(self) -> Self: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...
