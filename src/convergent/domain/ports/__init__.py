"""Domain port definitions for adapters."""

from __future__ import annotations

from .control_plane import AnomalyMonitorApi, ClusterEndpointApi, ControlPlaneError
from .persistence import TrackedResourceNotFoundError, TrackedResourceRepository
from .unit_of_work import RepositoryCollection, StateRepositories, StateUnitOfWork, UnitOfWork

__all__ = [
    "AnomalyMonitorApi",
    "ClusterEndpointApi",
    "ControlPlaneError",
    "RepositoryCollection",
    "StateRepositories",
    "StateUnitOfWork",
    "TrackedResourceNotFoundError",
    "TrackedResourceRepository",
    "UnitOfWork",
]
