"""Translate Neptune payloads into domain snapshots and requests."""

from __future__ import annotations

from typing import TYPE_CHECKING

from convergent.domain.model import ClusterEndpoint

if TYPE_CHECKING:
    from convergent.domain.model import ClusterEndpointChanges, ClusterEndpointSpec

    from .schema import ClusterEndpointPayload


def translate_cluster_endpoint(payload: ClusterEndpointPayload) -> ClusterEndpoint:
    # The configured type of a custom endpoint is reported as CustomEndpointType;
    # EndpointType is always "CUSTOM" for endpoints created through this API.
    return ClusterEndpoint(
        cluster_identifier=payload.cluster_identifier,
        endpoint_identifier=payload.endpoint_identifier,
        status=payload.status,
        endpoint_type=payload.custom_endpoint_type or payload.endpoint_type,
        endpoint=payload.endpoint,
        arn=payload.arn,
        static_members=frozenset(payload.static_members),
        excluded_members=frozenset(payload.excluded_members),
    )


def create_request_body(spec: ClusterEndpointSpec) -> dict[str, object]:
    body: dict[str, object] = {
        "DBClusterEndpointIdentifier": spec.endpoint_identifier,
        "EndpointType": spec.endpoint_type,
    }
    if spec.static_members:
        body["StaticMembers"] = sorted(spec.static_members)
    if spec.excluded_members:
        body["ExcludedMembers"] = sorted(spec.excluded_members)
    if spec.tags:
        body["Tags"] = [{"Key": key, "Value": value} for key, value in sorted(spec.tags.items())]
    return body


def modify_request_body(changes: ClusterEndpointChanges) -> dict[str, object]:
    body: dict[str, object] = {}
    if changes.endpoint_type is not None:
        body["EndpointType"] = changes.endpoint_type
    if changes.static_members is not None:
        body["StaticMembers"] = sorted(changes.static_members)
    if changes.excluded_members is not None:
        body["ExcludedMembers"] = sorted(changes.excluded_members)
    return body
