"""Neptune cluster endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from convergent.domain.identifiers import IdentifierFormat
from convergent.domain.model import (
    ClusterEndpoint,
    ClusterEndpointChanges,
    ClusterEndpointSpec,
    RemoteCall,
    ResourceKind,
)

from .base import ResourceDefinition, WaitVocabulary

if TYPE_CHECKING:
    from convergent.domain.ports.control_plane import ClusterEndpointApi

    from .base import Parts

STATUS_AVAILABLE: Final[str] = "available"
STATUS_CREATING: Final[str] = "creating"
STATUS_MODIFYING: Final[str] = "modifying"
STATUS_DELETING: Final[str] = "deleting"

# Maximum time to wait for an endpoint to become available / to disappear.
AVAILABLE_TIMEOUT_SECONDS: Final[float] = 10 * 60.0
DELETED_TIMEOUT_SECONDS: Final[float] = 10 * 60.0

ENDPOINT_NOT_FOUND_FAULT: Final[str] = "DBClusterEndpointNotFoundFault"
CLUSTER_NOT_FOUND_FAULT: Final[str] = "DBClusterNotFoundFault"

CLUSTER_ENDPOINT_IDENTIFIER = IdentifierFormat(parts=("CLUSTER-ID", "CLUSTER-ENDPOINT-ID"))


def cluster_endpoint_status(snapshot: ClusterEndpoint) -> str | None:
    return snapshot.status


CLUSTER_ENDPOINT = ResourceDefinition[ClusterEndpoint](
    kind=ResourceKind.CLUSTER_ENDPOINT,
    identifier=CLUSTER_ENDPOINT_IDENTIFIER,
    status_of=cluster_endpoint_status,
    available=WaitVocabulary(
        pending=frozenset({STATUS_CREATING, STATUS_MODIFYING}),
        target=frozenset({STATUS_AVAILABLE}),
        timeout=AVAILABLE_TIMEOUT_SECONDS,
    ),
    deleted=WaitVocabulary(
        pending=frozenset({STATUS_DELETING}),
        target=frozenset(),
        timeout=DELETED_TIMEOUT_SECONDS,
    ),
    absent_codes={
        RemoteCall.DESCRIBE: frozenset({ENDPOINT_NOT_FOUND_FAULT, CLUSTER_NOT_FOUND_FAULT}),
        RemoteCall.DELETE: frozenset({ENDPOINT_NOT_FOUND_FAULT, CLUSTER_NOT_FOUND_FAULT}),
    },
)


class ClusterEndpointResource:
    """Cluster endpoint calls keyed by ``(cluster id, endpoint id)``."""

    definition = CLUSTER_ENDPOINT

    def __init__(self, api: ClusterEndpointApi) -> None:
        self._api = api

    def create(self, desired: ClusterEndpointSpec) -> Parts:
        created = self._api.create_cluster_endpoint(desired)
        return created.cluster_identifier, created.endpoint_identifier

    def modify(self, parts: Parts, changes: ClusterEndpointChanges) -> None:
        cluster_id, endpoint_id = parts
        self._api.modify_cluster_endpoint(
            cluster_identifier=cluster_id,
            endpoint_identifier=endpoint_id,
            changes=changes,
        )

    def delete(self, parts: Parts) -> None:
        cluster_id, endpoint_id = parts
        self._api.delete_cluster_endpoint(
            cluster_identifier=cluster_id, endpoint_identifier=endpoint_id
        )

    def describe(self, parts: Parts) -> ClusterEndpoint | None:
        cluster_id, endpoint_id = parts
        endpoints = self._api.describe_cluster_endpoints(
            cluster_identifier=cluster_id, endpoint_identifier=endpoint_id
        )
        if not endpoints:
            return None
        return endpoints[0]

