from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.orm import Session, sessionmaker

from archivist.adapters.sqlalchemy.unit_of_work import SqlAlchemyCloneUnitOfWork, shutdown, startup
from tests.helpers.models import mapper_registry, start_mappers

os.environ.setdefault("ARCHIVIST_DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator


def _enable_foreign_keys(dbapi_connection: object, _record: object) -> None:
    cursor = dbapi_connection.cursor()  # pyright: ignore[reportAttributeAccessIssue]
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    event.listen(engine, "connect", _enable_foreign_keys)
    start_mappers()
    mapper_registry.metadata.create_all(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_session(sqlite_engine: Engine) -> Iterator[Session]:
    session_factory = sessionmaker(bind=sqlite_engine, future=True, expire_on_commit=False)
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def sqlite_unit_of_work(
    sqlite_engine: Engine,
) -> Iterator[Callable[[bool], SqlAlchemyCloneUnitOfWork]]:
    startup(engine=sqlite_engine, force=True)

    def factory(transactional: bool = False) -> SqlAlchemyCloneUnitOfWork:  # noqa: FBT001, FBT002
        return SqlAlchemyCloneUnitOfWork(transactional=transactional)

    try:
        yield factory
    finally:
        shutdown()
