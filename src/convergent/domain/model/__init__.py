"""Domain model: snapshots, desired state descriptors and tracked records."""

from __future__ import annotations

from .anomaly_monitor import AnomalyMonitor, AnomalyMonitorChanges, AnomalyMonitorSpec, MonitorType
from .cluster_endpoint import ClusterEndpoint, ClusterEndpointChanges, ClusterEndpointSpec
from .enums import Operation, OutcomeStatus, RemoteCall, ResourceKind
from .tracked import TrackedResource

__all__ = [
    "AnomalyMonitor",
    "AnomalyMonitorChanges",
    "AnomalyMonitorSpec",
    "ClusterEndpoint",
    "ClusterEndpointChanges",
    "ClusterEndpointSpec",
    "MonitorType",
    "Operation",
    "OutcomeStatus",
    "RemoteCall",
    "ResourceKind",
    "TrackedResource",
]
