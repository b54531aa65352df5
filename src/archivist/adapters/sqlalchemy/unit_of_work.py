"""Engine binding and the session scope of a clone run."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal, Self

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from archivist.adapters.sqlalchemy.attribute_store import SqlAlchemyAttributeStore
from archivist.adapters.sqlalchemy.persistence import (
    SqlAlchemyPersistence,
    SqlAlchemyRecordRepository,
)
from archivist.adapters.sqlalchemy.reflection import SqlAlchemyRelationshipReflection
from archivist.config import get_database_config
from archivist.domain.ports import CloneCollaborators

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)


class StartupError(RuntimeError):
    """Raised when the SQLAlchemy adapter or a unit of work is used out of order."""


@dataclass(frozen=True, slots=True)
class _Binding:
    engine: Engine
    sessions: sessionmaker[Session]


_binding: _Binding | None = None


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Bind the adapter to ``engine``, or to a new engine for ``database_uri``.

    Without either, the URI comes from :func:`archivist.config.get_database_config`.
    Archivist does not own the schema: the host application creates the live
    and archive tables. Rebinding requires ``force=True``; the previous engine
    is left to its owner.
    """

    global _binding  # noqa: PLW0603
    if _binding is not None and not force:
        raise StartupError(
            f"SQLAlchemy adapter is already bound to {_describe(_binding.engine)}; "
            "pass force=True to rebind"
        )
    bound = engine or create_engine(database_uri or get_database_config().uri, future=True)
    _binding = _Binding(bound, sessionmaker(bind=bound, expire_on_commit=False))
    log.info("Using database %s", _describe(bound))


def configured_engine() -> Engine | None:
    return None if _binding is None else _binding.engine


def is_started() -> bool:
    return _binding is not None


def shutdown() -> None:
    """Dispose the bound engine and forget it."""

    global _binding  # noqa: PLW0603
    if _binding is not None:
        _binding.engine.dispose()
    _binding = None


def _describe(engine: Engine) -> str:
    return engine.url.render_as_string(hide_password=True)


def _bound_sessions() -> sessionmaker[Session]:
    if _binding is None:
        raise StartupError(
            "SQLAlchemy adapter is not bound. Call "
            "archivist.adapters.sqlalchemy.startup() before opening a unit of work."
        )
    return _binding.sessions


class SqlAlchemyCloneUnitOfWork:
    """One session for one clone run.

    ``transactional`` decides who commits. By default the persistence commits
    every receiver as it is saved, so what was saved before a failure stays
    saved and leaving the block only closes the session. With
    ``transactional=True`` receivers are only flushed: nothing is kept unless
    :meth:`commit` is called, and an exception inside the block rolls the
    whole run back.
    """

    def __init__(self, *, transactional: bool = False) -> None:
        self.transactional = transactional
        self._sessions = _bound_sessions()
        self._session: Session | None = None
        self._collaborators: CloneCollaborators | None = None

    def __enter__(self) -> Self:
        if self._session is not None:
            raise StartupError("Clone unit of work is already open")
        session = self._sessions()
        self._session = session
        self._collaborators = CloneCollaborators(
            store=SqlAlchemyAttributeStore(),
            reflection=SqlAlchemyRelationshipReflection(),
            persistence=SqlAlchemyPersistence(session, commit=not self.transactional),
            records=SqlAlchemyRecordRepository(session),
        )
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        session = self.session
        try:
            if exc_type is not None:
                session.rollback()
        finally:
            session.close()
            self._session = None
            self._collaborators = None
        return False

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Clone unit of work is not open; use it in a with block")
        return self._session

    @property
    def collaborators(self) -> CloneCollaborators:
        if self._collaborators is None:
            raise StartupError("Clone unit of work is not open; use it in a with block")
        return self._collaborators

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


if TYPE_CHECKING:
    from archivist.domain.ports import CloneUnitOfWork

    _uow_check: CloneUnitOfWork = SqlAlchemyCloneUnitOfWork()
