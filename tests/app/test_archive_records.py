from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal, Self

from archivist.app import archive_records, build_executor
from archivist.config import CloneSettings
from archivist.domain.cloning import CloneRegistry, ObjectAttributeStore
from archivist.domain.ports import CloneCollaborators
from tests.helpers.fakes import (
    FakePersistence,
    Item,
    ItemArchive,
    Shop,
    ShopArchive,
    shop_reflection,
)

if TYPE_CHECKING:
    from types import TracebackType


@dataclass
class FakeRecords:
    rows: dict[object, object] = field(default_factory=dict)
    deleted: list[object] = field(default_factory=list)

    def get[T](self, model: type[T], identity: object) -> T | None:
        row = self.rows.get(identity)
        return row if isinstance(row, model) else None

    def delete(self, instance: object) -> None:
        self.deleted.append(instance)


@dataclass
class FakeUnitOfWork:
    records: FakeRecords
    persistence: FakePersistence = field(default_factory=FakePersistence)
    commits: int = 0
    rollbacks: int = 0

    @property
    def collaborators(self) -> CloneCollaborators:
        return CloneCollaborators(
            store=ObjectAttributeStore(),
            reflection=shop_reflection(),
            persistence=self.persistence,
            records=self.records,
        )

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        if exc_type is not None:
            self.rollback()
        return False

    def commit(self) -> None:
        self.commits += 1

    def rollback(self) -> None:
        self.rollbacks += 1


def _registry() -> CloneRegistry:
    registry = CloneRegistry()
    registry.declare(
        Shop,
        to=ShopArchive,
        attribute_map={"name": "shop_name"},
        associations="items",
        unless="closed",
    )
    registry.declare(Item, to=ItemArchive, exclude=("id", "parts"))
    return registry


def _shops() -> dict[object, object]:
    return {
        1: Shop(id=1, name="open", items=[Item(id=10, title="Lamp")]),
        2: Shop(id=2, name="closed", closed=True),
    }


def test_archive_records_counts_outcomes_and_deletes() -> None:
    uow = FakeUnitOfWork(FakeRecords(_shops()))
    requested: list[bool] = []

    def factory(transactional: bool) -> FakeUnitOfWork:  # noqa: FBT001
        requested.append(transactional)
        return uow

    result = archive_records(
        Shop,
        [1, 2, 3],
        registry=_registry(),
        unit_of_work_factory=factory,
        delete=True,
    )

    assert requested == [False]
    assert (result.requested, result.archived, result.blocked) == (3, 1, 1)
    assert result.saved == 2
    assert result.deleted == 1
    assert result.missing == (3,)
    assert uow.records.deleted == [uow.records.rows[1]]
    assert uow.commits == 2


def test_transactional_archive_commits_once() -> None:
    uow = FakeUnitOfWork(FakeRecords(_shops()))

    result = archive_records(
        Shop,
        [1],
        registry=_registry(),
        unit_of_work_factory=lambda _transactional: uow,
        delete=True,
        transactional=True,
    )

    assert result.deleted == 1
    assert uow.commits == 1


def test_build_executor_applies_settings() -> None:
    uow = FakeUnitOfWork(FakeRecords())

    executor = build_executor(
        _registry(),
        uow.collaborators,
        settings=CloneSettings(cycle_guard=False, max_depth=2),
    )

    assert executor.cycle_guard is False
    assert executor.max_depth == 2
