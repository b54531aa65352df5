"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from archivist.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyCloneUnitOfWork,
    is_started,
    startup,
)
from archivist.config import CloneSettings, get_clone_settings
from archivist.domain.cloning import CloneExecutor, resolve_attributes
from archivist.domain.ports.unit_of_work import CloneCollaborators, CloneUnitOfWork

if TYPE_CHECKING:
    from collections.abc import Sequence

    from archivist.domain.cloning import AttributePair, CloneRegistry

UnitOfWorkFactory = Callable[[bool], CloneUnitOfWork]


log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ArchiveResult:
    requested: int
    archived: int = 0
    blocked: int = 0
    saved: int = 0
    deleted: int = 0
    missing: tuple[object, ...] = ()


def build_executor(
    registry: CloneRegistry,
    collaborators: CloneCollaborators,
    *,
    settings: CloneSettings | None = None,
) -> CloneExecutor:
    effective_settings = settings or get_clone_settings()
    return CloneExecutor(
        registry,
        store=collaborators.store,
        reflection=collaborators.reflection,
        persistence=collaborators.persistence,
        cycle_guard=effective_settings.cycle_guard,
        max_depth=effective_settings.max_depth,
    )


def _default_unit_of_work(transactional: bool) -> CloneUnitOfWork:  # noqa: FBT001
    if not is_started():
        startup()
    return SqlAlchemyCloneUnitOfWork(transactional=transactional)


def archive_records(
    model: type,
    identities: Sequence[object],
    *,
    registry: CloneRegistry,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    delete: bool = False,
    transactional: bool = False,
    settings: CloneSettings | None = None,
) -> ArchiveResult:
    """Clone the ``model`` rows with the given identities, optionally deleting them after.

    Without ``transactional`` every receiver is committed as it is saved and
    each deletion is committed right after its record's cascade, so a failure
    keeps whatever was archived before it. With ``transactional`` the whole
    run commits once at the end and a failure rolls everything back.
    """

    effective_uow = unit_of_work_factory or _default_unit_of_work
    log.info(
        "Starting archive of %d %s record(s): delete=%s, transactional=%s",
        len(identities),
        model.__qualname__,
        delete,
        transactional,
    )

    archived = blocked = saved = deleted = 0
    missing: list[object] = []
    with effective_uow(transactional) as uow:
        collaborators = uow.collaborators
        executor = build_executor(registry, collaborators, settings=settings)
        for identity in identities:
            source = collaborators.records.get(model, identity)
            if source is None:
                log.warning("No %s with identity %r", model.__qualname__, identity)
                missing.append(identity)
                continue

            result = executor.clone(source)
            if result.blocked:
                blocked += 1
                continue
            archived += 1
            saved += result.saved
            if delete:
                collaborators.records.delete(source)
                deleted += 1
                if not transactional:
                    uow.commit()
        uow.commit()

    result = ArchiveResult(
        requested=len(identities),
        archived=archived,
        blocked=blocked,
        saved=saved,
        deleted=deleted,
        missing=tuple(missing),
    )
    log.info(
        f"Finished archive: archived={result.archived}, blocked={result.blocked}, "
        f"saved={result.saved}, deleted={result.deleted}, missing={len(result.missing)}"
    )
    return result


def plan_clone(
    model: type,
    identity: object,
    *,
    registry: CloneRegistry,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> tuple[AttributePair, ...]:
    """Return the attribute pairs a clone of one row would copy, without writing."""

    effective_uow = unit_of_work_factory or _default_unit_of_work
    with effective_uow(True) as uow:
        collaborators = uow.collaborators
        source = collaborators.records.get(model, identity)
        if source is None:
            raise LookupError(f"No {model.__qualname__} with identity {identity!r}")
        config = registry.configuration_for(type(source))
        pairs = resolve_attributes(config, source, store=collaborators.store)
        uow.rollback()
    return pairs
