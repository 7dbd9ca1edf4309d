"""Public interface for the Cost Explorer adapter."""

from __future__ import annotations

from .client import CostExplorerAPIError, CostExplorerClient
from .schema import AnomalyMonitorPayload, GetAnomalyMonitorsResponse
from .translator import translate_anomaly_monitor

__all__ = [
    "AnomalyMonitorPayload",
    "CostExplorerAPIError",
    "CostExplorerClient",
    "GetAnomalyMonitorsResponse",
    "translate_anomaly_monitor",
]
