"""Resource kinds managed by the lifecycle orchestrator."""

from __future__ import annotations

from .anomaly_monitor import ANOMALY_MONITOR, AnomalyMonitorResource
from .base import Changes, ManagedResource, Parts, ResourceDefinition, WaitVocabulary
from .cluster_endpoint import CLUSTER_ENDPOINT, ClusterEndpointResource

DEFINITIONS = {
    definition.kind: definition for definition in (CLUSTER_ENDPOINT, ANOMALY_MONITOR)
}

__all__ = [
    "ANOMALY_MONITOR",
    "CLUSTER_ENDPOINT",
    "DEFINITIONS",
    "AnomalyMonitorResource",
    "Changes",
    "ClusterEndpointResource",
    "ManagedResource",
    "Parts",
    "ResourceDefinition",
    "WaitVocabulary",
]
