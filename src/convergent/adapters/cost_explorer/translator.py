"""Translate Cost Explorer payloads into domain snapshots and requests."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from convergent.domain.model import AnomalyMonitor, MonitorType

if TYPE_CHECKING:
    from convergent.domain.model import AnomalyMonitorChanges, AnomalyMonitorSpec

    from .schema import AnomalyMonitorPayload


def translate_anomaly_monitor(payload: AnomalyMonitorPayload) -> AnomalyMonitor:
    specification = None
    if payload.specification is not None:
        specification = json.dumps(payload.specification, sort_keys=True)
    return AnomalyMonitor(
        arn=payload.arn,
        name=payload.name,
        monitor_type=MonitorType(payload.monitor_type),
        dimension=payload.dimension,
        specification=specification,
        creation_date=payload.creation_date,
        last_updated_date=payload.last_updated_date,
    )


def create_request_body(spec: AnomalyMonitorSpec) -> dict[str, object]:
    monitor: dict[str, object] = {
        "MonitorName": spec.name,
        "MonitorType": spec.monitor_type.value,
    }
    if spec.dimension is not None:
        monitor["MonitorDimension"] = spec.dimension
    if spec.specification is not None:
        try:
            monitor["MonitorSpecification"] = json.loads(spec.specification)
        except json.JSONDecodeError as exc:
            raise ValueError(f"monitor specification is not valid JSON: {exc}") from exc
    return {"AnomalyMonitor": monitor}


def update_request_body(changes: AnomalyMonitorChanges) -> dict[str, object]:
    body: dict[str, object] = {}
    if changes.name is not None:
        body["MonitorName"] = changes.name
    return body
