"""Ports for talking to remote control planes."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from convergent.domain.model import (
        AnomalyMonitor,
        AnomalyMonitorChanges,
        AnomalyMonitorSpec,
        ClusterEndpoint,
        ClusterEndpointChanges,
        ClusterEndpointSpec,
    )


class ControlPlaneError(RuntimeError):
    """Raised by adapters when a control-plane call fails.

    ``code`` is the service error code when the response carried one. Transport
    failures that survived the retry layer have no code.
    """

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.status_code = status_code


@runtime_checkable
class ClusterEndpointApi(Protocol):
    """Neptune cluster endpoint calls."""

    def create_cluster_endpoint(self, spec: ClusterEndpointSpec) -> ClusterEndpoint: ...

    def modify_cluster_endpoint(
        self,
        *,
        cluster_identifier: str,
        endpoint_identifier: str,
        changes: ClusterEndpointChanges,
    ) -> None: ...

    def delete_cluster_endpoint(
        self, *, cluster_identifier: str, endpoint_identifier: str
    ) -> None: ...

    def describe_cluster_endpoints(
        self, *, cluster_identifier: str, endpoint_identifier: str
    ) -> list[ClusterEndpoint]: ...


@runtime_checkable
class AnomalyMonitorApi(Protocol):
    """Cost Explorer anomaly monitor calls."""

    def create_anomaly_monitor(self, spec: AnomalyMonitorSpec) -> str: ...

    def update_anomaly_monitor(self, *, arn: str, changes: AnomalyMonitorChanges) -> None: ...

    def delete_anomaly_monitor(self, *, arn: str) -> None: ...

    def get_anomaly_monitors(self, *, arns: list[str]) -> list[AnomalyMonitor]: ...


__all__ = ["AnomalyMonitorApi", "ClusterEndpointApi", "ControlPlaneError"]
