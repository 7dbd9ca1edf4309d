from __future__ import annotations

import threading
from datetime import date
from typing import TYPE_CHECKING

import pytest

from convergent import app
from convergent.config import WaitConfig
from convergent.domain.errors import WaitTimeoutError
from convergent.domain.lifecycle import LifecycleOrchestrator
from convergent.domain.model import (
    AnomalyMonitor,
    ClusterEndpointChanges,
    ClusterEndpointSpec,
    MonitorType,
    ResourceKind,
    TrackedResource,
)
from convergent.domain.ports.persistence import TrackedResourceNotFoundError
from convergent.domain.resources import AnomalyMonitorResource, ClusterEndpointResource
from tests.helpers.fakes import (
    ENDPOINT_NOT_FOUND,
    FakeAnomalyMonitorApi,
    FakeClock,
    FakeClusterEndpointApi,
    fault,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from convergent.adapters.sqlalchemy.unit_of_work import SqlAlchemyStateUnitOfWork
    from convergent.domain.lifecycle import AnyOrchestrator

    UowFactory = Callable[[], SqlAlchemyStateUnitOfWork]

IDENTIFIER = "my-cluster:reader-ep"
MONITOR_ARN = "arn:aws:ce::123456789012:anomalymonitor/0b1f2c3d"
SPEC = ClusterEndpointSpec(
    cluster_identifier="my-cluster", endpoint_identifier="reader-ep", endpoint_type="READER"
)


def _factory(
    *,
    endpoints: FakeClusterEndpointApi | None = None,
    monitors: FakeAnomalyMonitorApi | None = None,
    waits: WaitConfig | None = None,
) -> Callable[[ResourceKind], AnyOrchestrator]:
    def build(kind: ResourceKind) -> AnyOrchestrator:
        clock = FakeClock()
        if kind is ResourceKind.CLUSTER_ENDPOINT:
            assert endpoints is not None
            resource: object = ClusterEndpointResource(endpoints)
        else:
            assert monitors is not None
            resource = AnomalyMonitorResource(monitors)
        return LifecycleOrchestrator(
            resource,  # type: ignore[arg-type]
            waits=waits,
            clock=clock,
            sleep=clock.sleep,
        )

    return build


def _records(uow_factory: UowFactory) -> list[TrackedResource]:
    return app.list_tracked(unit_of_work_factory=uow_factory)


def test_create_tracks_converged_resource(sqlite_unit_of_work: UowFactory) -> None:
    api = FakeClusterEndpointApi(statuses=["creating", "available"])

    outcome = app.create_resource(
        ResourceKind.CLUSTER_ENDPOINT,
        SPEC,
        orchestrator_factory=_factory(endpoints=api),
        unit_of_work_factory=sqlite_unit_of_work,
    )

    assert outcome.identifier == IDENTIFIER
    (record,) = _records(sqlite_unit_of_work)
    assert record.identifier == IDENTIFIER
    assert record.status == "available"
    assert record.attributes["static_members"] == ["db-1", "db-2"]
    assert record.attributes["endpoint_type"] == "READER"


def test_failed_create_keeps_record_without_status(sqlite_unit_of_work: UowFactory) -> None:
    api = FakeClusterEndpointApi(statuses=["creating"])

    with pytest.raises(WaitTimeoutError):
        app.create_resource(
            ResourceKind.CLUSTER_ENDPOINT,
            SPEC,
            orchestrator_factory=_factory(endpoints=api, waits=WaitConfig(timeout_seconds=30.0)),
            unit_of_work_factory=sqlite_unit_of_work,
        )

    (record,) = _records(sqlite_unit_of_work)
    assert record.identifier == IDENTIFIER
    assert record.status is None


def test_read_drift_drops_record(sqlite_unit_of_work: UowFactory) -> None:
    with sqlite_unit_of_work() as uow:
        uow.repositories.tracked_resources.add(
            TrackedResource(kind=ResourceKind.CLUSTER_ENDPOINT, identifier=IDENTIFIER)
        )
        uow.commit()
    api = FakeClusterEndpointApi(statuses=[fault(ENDPOINT_NOT_FOUND)])

    outcome = app.read_resource(
        ResourceKind.CLUSTER_ENDPOINT,
        IDENTIFIER,
        orchestrator_factory=_factory(endpoints=api),
        unit_of_work_factory=sqlite_unit_of_work,
    )

    assert outcome.is_absent
    assert _records(sqlite_unit_of_work) == []


def test_read_of_untracked_resource_does_not_track_it(sqlite_unit_of_work: UowFactory) -> None:
    outcome = app.read_resource(
        ResourceKind.ANOMALY_MONITOR,
        MONITOR_ARN,
        orchestrator_factory=_factory(monitors=FakeAnomalyMonitorApi()),
        unit_of_work_factory=sqlite_unit_of_work,
    )

    assert not outcome.is_absent
    assert _records(sqlite_unit_of_work) == []


def test_update_refreshes_record(sqlite_unit_of_work: UowFactory) -> None:
    with sqlite_unit_of_work() as uow:
        uow.repositories.tracked_resources.add(
            TrackedResource(kind=ResourceKind.CLUSTER_ENDPOINT, identifier=IDENTIFIER)
        )
        uow.commit()
    api = FakeClusterEndpointApi(statuses=["modifying", "available"])

    app.update_resource(
        ResourceKind.CLUSTER_ENDPOINT,
        IDENTIFIER,
        ClusterEndpointChanges(endpoint_type="ANY"),
        orchestrator_factory=_factory(endpoints=api),
        unit_of_work_factory=sqlite_unit_of_work,
    )

    record = app.get_tracked(
        ResourceKind.CLUSTER_ENDPOINT, IDENTIFIER, unit_of_work_factory=sqlite_unit_of_work
    )
    assert record.attributes["endpoint_type"] == "ANY"
    assert record.status == "available"


def test_delete_removes_record(sqlite_unit_of_work: UowFactory) -> None:
    with sqlite_unit_of_work() as uow:
        uow.repositories.tracked_resources.add(
            TrackedResource(kind=ResourceKind.ANOMALY_MONITOR, identifier=MONITOR_ARN)
        )
        uow.commit()
    api = FakeAnomalyMonitorApi(visible=[False])

    outcome = app.delete_resource(
        ResourceKind.ANOMALY_MONITOR,
        MONITOR_ARN,
        orchestrator_factory=_factory(monitors=api),
        unit_of_work_factory=sqlite_unit_of_work,
    )

    assert outcome.is_absent
    assert api.deleted == [MONITOR_ARN]
    with pytest.raises(TrackedResourceNotFoundError):
        app.get_tracked(
            ResourceKind.ANOMALY_MONITOR, MONITOR_ARN, unit_of_work_factory=sqlite_unit_of_work
        )


def test_destroy_tracked_deletes_in_parallel(sqlite_unit_of_work: UowFactory) -> None:
    identifiers = [f"my-cluster:ep-{index}" for index in range(5)]
    with sqlite_unit_of_work() as uow:
        for identifier in identifiers:
            uow.repositories.tracked_resources.add(
                TrackedResource(kind=ResourceKind.CLUSTER_ENDPOINT, identifier=identifier)
            )
        uow.repositories.tracked_resources.add(
            TrackedResource(kind=ResourceKind.ANOMALY_MONITOR, identifier=MONITOR_ARN)
        )
        uow.commit()
    threads: set[str] = set()
    lock = threading.Lock()

    def build(kind: ResourceKind) -> AnyOrchestrator:
        with lock:
            threads.add(threading.current_thread().name)
        api = FakeClusterEndpointApi(statuses=["deleting", None])
        return _factory(endpoints=api)(kind)

    report = app.destroy_tracked(
        kind=ResourceKind.CLUSTER_ENDPOINT,
        max_workers=3,
        orchestrator_factory=build,
        unit_of_work_factory=sqlite_unit_of_work,
    )

    assert report.ok
    assert sorted(report.deleted) == sorted(f"cluster-endpoint/{item}" for item in identifiers)
    assert all(name.startswith("destroy") for name in threads)
    (remaining,) = _records(sqlite_unit_of_work)
    assert remaining.kind is ResourceKind.ANOMALY_MONITOR


def test_destroy_tracked_collects_failures(sqlite_unit_of_work: UowFactory) -> None:
    with sqlite_unit_of_work() as uow:
        uow.repositories.tracked_resources.add(
            TrackedResource(kind=ResourceKind.CLUSTER_ENDPOINT, identifier=IDENTIFIER)
        )
        uow.repositories.tracked_resources.add(
            TrackedResource(kind=ResourceKind.ANOMALY_MONITOR, identifier=MONITOR_ARN)
        )
        uow.commit()

    report = app.destroy_tracked(
        orchestrator_factory=_factory(
            endpoints=FakeClusterEndpointApi(delete_error=fault("InvalidStateFault", "busy")),
            monitors=FakeAnomalyMonitorApi(visible=[False]),
        ),
        unit_of_work_factory=sqlite_unit_of_work,
    )

    assert not report.ok
    assert report.deleted == [f"anomaly-monitor/{MONITOR_ARN}"]
    assert "busy" in report.failed[f"cluster-endpoint/{IDENTIFIER}"]
    (remaining,) = _records(sqlite_unit_of_work)
    assert remaining.identifier == IDENTIFIER


def test_destroy_tracked_rejects_bad_worker_count() -> None:
    with pytest.raises(ValueError, match="max_workers"):
        app.destroy_tracked(max_workers=0)


def test_snapshot_attributes_are_json_friendly() -> None:
    monitor = AnomalyMonitor(
        arn=MONITOR_ARN,
        name="service-monitor",
        monitor_type=MonitorType.DIMENSIONAL,
        dimension="SERVICE",
        creation_date=date(2024, 3, 1),
    )

    attributes = app.snapshot_attributes(monitor)

    assert attributes["monitor_type"] == "DIMENSIONAL"
    assert attributes["creation_date"] == "2024-03-01"
    assert attributes["last_updated_date"] is None


def test_snapshot_attributes_rejects_non_dataclass() -> None:
    with pytest.raises(TypeError):
        app.snapshot_attributes({"status": "available"})
