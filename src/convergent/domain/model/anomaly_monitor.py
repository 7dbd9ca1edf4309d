"""Typed snapshot and desired state of a Cost Explorer anomaly monitor."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import date


class MonitorType(StrEnum):
    DIMENSIONAL = "DIMENSIONAL"
    CUSTOM = "CUSTOM"


@dataclass(frozen=True, slots=True, kw_only=True)
class AnomalyMonitor:
    arn: str
    name: str
    monitor_type: MonitorType
    dimension: str | None = None
    specification: str | None = None
    creation_date: date | None = None
    last_updated_date: date | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class AnomalyMonitorSpec:
    """Desired monitor.

    ``specification`` is the JSON cost-category expression used by custom monitors.
    """

    name: str
    monitor_type: MonitorType
    dimension: str | None = None
    specification: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class AnomalyMonitorChanges:
    name: str | None = None

    @property
    def has_changes(self) -> bool:
        return self.name is not None
