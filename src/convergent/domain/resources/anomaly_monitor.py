"""Cost Explorer anomaly monitors.

Cost Explorer applies changes synchronously and reports no status, so any monitor
that can be described is available. The usual waits still run and converge on the
first poll; deletion keeps polling while the monitor is still visible.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from convergent.domain.identifiers import IdentifierFormat
from convergent.domain.model import (
    AnomalyMonitor,
    AnomalyMonitorChanges,
    AnomalyMonitorSpec,
    RemoteCall,
    ResourceKind,
)

from .base import ResourceDefinition, WaitVocabulary

if TYPE_CHECKING:
    from convergent.domain.ports.control_plane import AnomalyMonitorApi

    from .base import Parts

STATUS_AVAILABLE: Final[str] = "available"

AVAILABLE_TIMEOUT_SECONDS: Final[float] = 10 * 60.0
DELETED_TIMEOUT_SECONDS: Final[float] = 10 * 60.0

UNKNOWN_MONITOR_EXCEPTION: Final[str] = "UnknownMonitorException"

ANOMALY_MONITOR_IDENTIFIER = IdentifierFormat(parts=("MONITOR-ARN",))


def anomaly_monitor_status(snapshot: AnomalyMonitor) -> str | None:
    del snapshot
    return STATUS_AVAILABLE


ANOMALY_MONITOR = ResourceDefinition[AnomalyMonitor](
    kind=ResourceKind.ANOMALY_MONITOR,
    identifier=ANOMALY_MONITOR_IDENTIFIER,
    status_of=anomaly_monitor_status,
    available=WaitVocabulary(
        pending=frozenset(),
        target=frozenset({STATUS_AVAILABLE}),
        timeout=AVAILABLE_TIMEOUT_SECONDS,
    ),
    deleted=WaitVocabulary(
        pending=frozenset({STATUS_AVAILABLE}),
        target=frozenset(),
        timeout=DELETED_TIMEOUT_SECONDS,
    ),
    absent_codes={
        RemoteCall.DESCRIBE: frozenset({UNKNOWN_MONITOR_EXCEPTION}),
        RemoteCall.DELETE: frozenset({UNKNOWN_MONITOR_EXCEPTION}),
    },
)


class AnomalyMonitorResource:
    definition = ANOMALY_MONITOR

    def __init__(self, api: AnomalyMonitorApi) -> None:
        self._api = api

    def create(self, desired: AnomalyMonitorSpec) -> Parts:
        return (self._api.create_anomaly_monitor(desired),)

    def modify(self, parts: Parts, changes: AnomalyMonitorChanges) -> None:
        (arn,) = parts
        self._api.update_anomaly_monitor(arn=arn, changes=changes)

    def delete(self, parts: Parts) -> None:
        (arn,) = parts
        self._api.delete_anomaly_monitor(arn=arn)

    def describe(self, parts: Parts) -> AnomalyMonitor | None:
        (arn,) = parts
        monitors = self._api.get_anomaly_monitors(arns=[arn])
        if not monitors:
            return None
        return monitors[0]
