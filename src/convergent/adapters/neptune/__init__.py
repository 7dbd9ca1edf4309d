"""Public interface for the Neptune adapter."""

from __future__ import annotations

from .client import NeptuneAPIError, NeptuneClient
from .schema import ClusterEndpointPayload, DescribeClusterEndpointsResponse
from .translator import translate_cluster_endpoint

__all__ = [
    "ClusterEndpointPayload",
    "DescribeClusterEndpointsResponse",
    "NeptuneAPIError",
    "NeptuneClient",
    "translate_cluster_endpoint",
]
