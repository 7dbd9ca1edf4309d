"""Application orchestration entry points."""

from __future__ import annotations

import dataclasses
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from logging import getLogger
from typing import TYPE_CHECKING, Any

from convergent.adapters.cost_explorer import CostExplorerClient
from convergent.adapters.neptune import NeptuneClient
from convergent.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyStateUnitOfWork,
    is_started,
    startup,
)
from convergent.config import get_cost_explorer_config, get_neptune_config, get_wait_config
from convergent.domain.lifecycle import LifecycleOrchestrator
from convergent.domain.lookup import extract_status
from convergent.domain.model import ResourceKind, TrackedResource
from convergent.domain.ports.persistence import TrackedResourceNotFoundError
from convergent.domain.resources import (
    DEFINITIONS,
    AnomalyMonitorResource,
    ClusterEndpointResource,
)

if TYPE_CHECKING:
    from threading import Event

    from convergent.config import WaitConfig
    from convergent.domain.lifecycle import AnyOrchestrator, LifecycleOutcome
    from convergent.domain.ports.control_plane import AnomalyMonitorApi, ClusterEndpointApi
    from convergent.domain.ports.unit_of_work import StateUnitOfWork

UnitOfWorkFactory = Callable[[], "StateUnitOfWork"]
OrchestratorFactory = Callable[[ResourceKind], "AnyOrchestrator"]

DEFAULT_DESTROY_WORKERS = 4

log = getLogger(__name__)


def build_cluster_endpoint_orchestrator(
    *,
    api: ClusterEndpointApi | None = None,
    waits: WaitConfig | None = None,
    cancel: Event | None = None,
) -> AnyOrchestrator:
    effective_api = api or NeptuneClient(config=get_neptune_config())
    return LifecycleOrchestrator(
        ClusterEndpointResource(effective_api),
        waits=waits or get_wait_config(),
        cancel=cancel,
    )


def build_anomaly_monitor_orchestrator(
    *,
    api: AnomalyMonitorApi | None = None,
    waits: WaitConfig | None = None,
    cancel: Event | None = None,
) -> AnyOrchestrator:
    effective_api = api or CostExplorerClient(config=get_cost_explorer_config())
    return LifecycleOrchestrator(
        AnomalyMonitorResource(effective_api),
        waits=waits or get_wait_config(),
        cancel=cancel,
    )


def build_orchestrator(kind: ResourceKind, *, cancel: Event | None = None) -> AnyOrchestrator:
    """Build an orchestrator for ``kind`` from environment configuration."""

    if kind is ResourceKind.CLUSTER_ENDPOINT:
        return build_cluster_endpoint_orchestrator(cancel=cancel)
    if kind is ResourceKind.ANOMALY_MONITOR:
        return build_anomaly_monitor_orchestrator(cancel=cancel)
    raise ValueError(f"Unsupported resource kind: {kind}")


def create_resource(
    kind: ResourceKind,
    desired: object,
    *,
    orchestrator_factory: OrchestratorFactory | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    cancel: Event | None = None,
) -> LifecycleOutcome[Any]:
    """Create a remote object and track it locally.

    The record is written as soon as the identifier is known, so a failed wait
    leaves it behind (with no status) for a later ``delete`` or ``destroy``.
    """

    orchestrator = _orchestrator(kind, orchestrator_factory, cancel)
    uow_factory = _unit_of_work_factory(unit_of_work_factory)

    def track(identifier: str) -> None:
        with uow_factory() as uow:
            uow.repositories.tracked_resources.add(
                TrackedResource(kind=kind, identifier=identifier)
            )
            uow.commit()

    outcome = orchestrator.create(desired, on_created=track)
    _store_outcome(kind, outcome, uow_factory)
    return outcome


def read_resource(
    kind: ResourceKind,
    identifier: str,
    *,
    orchestrator_factory: OrchestratorFactory | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    cancel: Event | None = None,
) -> LifecycleOutcome[Any]:
    """Refresh a resource; drift (the object vanished) drops the local record."""

    orchestrator = _orchestrator(kind, orchestrator_factory, cancel)
    outcome = orchestrator.read(identifier)
    _store_outcome(kind, outcome, _unit_of_work_factory(unit_of_work_factory))
    return outcome


def update_resource(
    kind: ResourceKind,
    identifier: str,
    changes: object,
    *,
    orchestrator_factory: OrchestratorFactory | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    cancel: Event | None = None,
) -> LifecycleOutcome[Any]:
    orchestrator = _orchestrator(kind, orchestrator_factory, cancel)
    outcome = orchestrator.update(identifier, changes)
    _store_outcome(kind, outcome, _unit_of_work_factory(unit_of_work_factory))
    return outcome


def delete_resource(
    kind: ResourceKind,
    identifier: str,
    *,
    orchestrator_factory: OrchestratorFactory | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    cancel: Event | None = None,
) -> LifecycleOutcome[Any]:
    orchestrator = _orchestrator(kind, orchestrator_factory, cancel)
    outcome = orchestrator.delete(identifier)
    _store_outcome(kind, outcome, _unit_of_work_factory(unit_of_work_factory))
    return outcome


def list_tracked(
    *,
    kind: ResourceKind | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> list[TrackedResource]:
    with _unit_of_work_factory(unit_of_work_factory)() as uow:
        return list(uow.repositories.tracked_resources.query(kind=kind))


def get_tracked(
    kind: ResourceKind,
    identifier: str,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> TrackedResource:
    with _unit_of_work_factory(unit_of_work_factory)() as uow:
        record = uow.repositories.tracked_resources.get(kind, identifier)
    if record is None:
        raise TrackedResourceNotFoundError(f"{kind} ({identifier}) is not tracked")
    return record


@dataclass(slots=True)
class DestroyReport:
    deleted: list[str] = field(default_factory=list[str])
    failed: dict[str, str] = field(default_factory=dict[str, str])

    @property
    def ok(self) -> bool:
        return not self.failed


def destroy_tracked(
    *,
    kind: ResourceKind | None = None,
    max_workers: int = DEFAULT_DESTROY_WORKERS,
    orchestrator_factory: OrchestratorFactory | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    cancel: Event | None = None,
) -> DestroyReport:
    """Delete every tracked resource (optionally of one kind) in parallel.

    Each deletion runs its own orchestrator on a worker thread. Records are
    removed on the calling thread as deletions complete; failures are collected
    and reported rather than aborting the remaining deletions.
    """

    if max_workers < 1:
        raise ValueError("max_workers must be at least 1")
    uow_factory = _unit_of_work_factory(unit_of_work_factory)
    records = list_tracked(kind=kind, unit_of_work_factory=uow_factory)
    targets = [(record.kind, record.identifier) for record in records]
    report = DestroyReport()
    if not targets:
        log.info("Nothing to destroy")
        return report

    log.info("Destroying %s tracked resource(s) with %s worker(s)", len(targets), max_workers)

    def destroy(target_kind: ResourceKind, identifier: str) -> LifecycleOutcome[Any]:
        return _orchestrator(target_kind, orchestrator_factory, cancel).delete(identifier)

    with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="destroy") as pool:
        futures = {
            pool.submit(destroy, target_kind, identifier): (target_kind, identifier)
            for target_kind, identifier in targets
        }
        for future in as_completed(futures):
            target_kind, identifier = futures[future]
            label = f"{target_kind}/{identifier}"
            try:
                outcome = future.result()
            except Exception as exc:  # noqa: BLE001
                log.error("Failed to destroy %s: %s", label, exc)
                report.failed[label] = str(exc)
                continue
            _store_outcome(target_kind, outcome, uow_factory)
            report.deleted.append(label)

    log.info(
        "Finished destroy: deleted=%s, failed=%s", len(report.deleted), len(report.failed)
    )
    return report


def snapshot_attributes(snapshot: object) -> dict[str, object]:
    """Project a snapshot dataclass into JSON-compatible attributes."""

    if not dataclasses.is_dataclass(snapshot) or isinstance(snapshot, type):
        raise TypeError(f"Expected a snapshot dataclass, got {type(snapshot).__name__}")
    return {
        item.name: _jsonable(getattr(snapshot, item.name))
        for item in dataclasses.fields(snapshot)
    }


def _jsonable(value: object) -> object:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, (frozenset, set)):
        return sorted(_jsonable(item) for item in value)  # type: ignore[type-var]
    if isinstance(value, dict):
        return {str(key): _jsonable(item) for key, item in value.items()}
    return value


def _store_outcome(
    kind: ResourceKind,
    outcome: LifecycleOutcome[Any],
    uow_factory: UnitOfWorkFactory,
) -> None:
    with uow_factory() as uow:
        repository = uow.repositories.tracked_resources
        record = repository.get(kind, outcome.identifier)
        if outcome.is_absent:
            if record is not None:
                log.info("Dropping %s (%s) from state", kind, outcome.identifier)
                repository.remove(record)
        elif record is not None:
            record.record(
                snapshot_attributes(outcome.snapshot),
                status=extract_status(DEFINITIONS[kind], outcome.snapshot),
            )
        uow.commit()


def _orchestrator(
    kind: ResourceKind,
    factory: OrchestratorFactory | None,
    cancel: Event | None,
) -> AnyOrchestrator:
    if factory is not None:
        return factory(kind)
    return build_orchestrator(kind, cancel=cancel)


def _unit_of_work_factory(factory: UnitOfWorkFactory | None) -> UnitOfWorkFactory:
    if factory is not None:
        return factory
    if not is_started():
        startup()
    return SqlAlchemyStateUnitOfWork
