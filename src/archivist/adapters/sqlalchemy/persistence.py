"""Session-backed persistence for clone receivers and live records."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

log = logging.getLogger(__name__)


class SqlAlchemyPersistence:
    """Adds receivers to the session and writes them out immediately.

    With ``commit=True`` every save is its own transaction, so a later failure
    leaves earlier receivers committed. With ``commit=False`` saves are only
    flushed (identities assigned) and the surrounding unit of work decides.
    """

    def __init__(self, session: Session, *, commit: bool = True) -> None:
        self.session = session
        self.commit = commit

    def save(self, instance: object) -> None:
        self.session.add(instance)
        if self.commit:
            self.session.commit()
        else:
            self.session.flush()


class SqlAlchemyRecordRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get[T](self, model: type[T], identity: object) -> T | None:
        return self.session.get(model, identity)

    def delete(self, instance: object) -> None:
        log.debug("Deleting %s", type(instance).__qualname__)
        self.session.delete(instance)


if TYPE_CHECKING:
    from typing import cast

    from archivist.domain.ports import Persistence, RecordRepository

    _session_stub = cast("Session", object())
    _persistence_check: Persistence = SqlAlchemyPersistence(_session_stub)
    _records_check: RecordRepository = SqlAlchemyRecordRepository(_session_stub)
