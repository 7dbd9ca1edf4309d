from __future__ import annotations

import json

import httpx
import pytest

from convergent.adapters.http_resilience import ResilienceConfig
from convergent.adapters.neptune import NeptuneAPIError, NeptuneClient, translate_cluster_endpoint
from convergent.adapters.neptune.schema import ClusterEndpointPayload
from convergent.config import NeptuneConfig
from convergent.domain.errors import RemoteOperationError
from convergent.domain.lifecycle import LifecycleOrchestrator
from convergent.domain.model import (
    ClusterEndpointChanges,
    ClusterEndpointSpec,
    Operation,
    ResourceKind,
)
from convergent.domain.ports.control_plane import ClusterEndpointApi
from convergent.domain.resources import ClusterEndpointResource
from tests.helpers.http import error_response, make_client_factory

CONFIG = NeptuneConfig(
    resilience=ResilienceConfig(name="neptune", base_url="https://neptune.test/v1/")
)


def _payload(status: str = "available", endpoint_id: str = "reader-ep") -> dict[str, object]:
    return {
        "DBClusterIdentifier": "my-cluster",
        "DBClusterEndpointIdentifier": endpoint_id,
        "Status": status,
        "EndpointType": "CUSTOM",
        "CustomEndpointType": "READER",
        "Endpoint": f"{endpoint_id}.cluster-custom.example.com",
        "DBClusterEndpointArn": f"arn:aws:rds:us-east-1:1:cluster-endpoint:{endpoint_id}",
        "StaticMembers": ["db-2", "db-1"],
        "ExcludedMembers": None,
    }


def test_translate_cluster_endpoint_prefers_custom_type() -> None:
    endpoint = translate_cluster_endpoint(ClusterEndpointPayload.model_validate(_payload()))

    assert endpoint.endpoint_type == "READER"
    assert endpoint.static_members == frozenset({"db-1", "db-2"})
    assert endpoint.excluded_members == frozenset()
    assert endpoint.status == "available"


def test_blank_status_becomes_none() -> None:
    payload = ClusterEndpointPayload.model_validate(_payload(status="  "))

    assert payload.status is None


def test_client_satisfies_port() -> None:
    assert isinstance(NeptuneClient(config=CONFIG), ClusterEndpointApi)


def test_create_posts_request_body() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(201, json=_payload(status="creating"))

    client = NeptuneClient(config=CONFIG, client_factory=make_client_factory(handler))
    spec = ClusterEndpointSpec(
        cluster_identifier="my-cluster",
        endpoint_identifier="reader-ep",
        endpoint_type="READER",
        static_members=frozenset({"db-2", "db-1"}),
        tags={"team": "graph"},
    )

    created = client.create_cluster_endpoint(spec)

    assert created.status == "creating"
    request = seen[0]
    assert request.method == "POST"
    assert request.url.path == "/v1/clusters/my-cluster/endpoints"
    assert json.loads(request.content) == {
        "DBClusterEndpointIdentifier": "reader-ep",
        "EndpointType": "READER",
        "StaticMembers": ["db-1", "db-2"],
        "Tags": [{"Key": "team", "Value": "graph"}],
    }


def test_describe_follows_marker_pagination() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if "Marker" not in request.url.params:
            return httpx.Response(
                200, json={"DBClusterEndpoints": [_payload()], "Marker": "page-2"}
            )
        return httpx.Response(
            200, json={"DBClusterEndpoints": [_payload(endpoint_id="other")], "Marker": ""}
        )

    client = NeptuneClient(config=CONFIG, client_factory=make_client_factory(handler))

    endpoints = client.describe_cluster_endpoints(
        cluster_identifier="my-cluster", endpoint_identifier="reader-ep"
    )

    assert [item.endpoint_identifier for item in endpoints] == ["reader-ep", "other"]
    assert len(seen) == 2
    assert seen[0].url.params["DBClusterEndpointIdentifier"] == "reader-ep"
    assert seen[1].url.params["Marker"] == "page-2"


def test_modify_sends_only_changed_fields() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=_payload(status="modifying"))

    client = NeptuneClient(config=CONFIG, client_factory=make_client_factory(handler))

    client.modify_cluster_endpoint(
        cluster_identifier="my-cluster",
        endpoint_identifier="reader-ep",
        changes=ClusterEndpointChanges(excluded_members=frozenset({"db-3"})),
    )

    assert seen[0].method == "PATCH"
    assert seen[0].url.path == "/v1/clusters/my-cluster/endpoints/reader-ep"
    assert json.loads(seen[0].content) == {"ExcludedMembers": ["db-3"]}


def test_delete_accepts_empty_response() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(204)

    client = NeptuneClient(config=CONFIG, client_factory=make_client_factory(handler))

    client.delete_cluster_endpoint(cluster_identifier="my-cluster", endpoint_identifier="reader-ep")

    assert seen[0].method == "DELETE"


def test_error_code_is_parsed() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return error_response(404, "DBClusterEndpointNotFoundFault", "endpoint not found")

    client = NeptuneClient(config=CONFIG, client_factory=make_client_factory(handler))

    with pytest.raises(NeptuneAPIError) as exc:
        client.delete_cluster_endpoint(
            cluster_identifier="my-cluster", endpoint_identifier="reader-ep"
        )

    assert exc.value.code == "DBClusterEndpointNotFoundFault"
    assert exc.value.status_code == 404
    assert str(exc.value) == "endpoint not found"


def test_error_without_envelope_has_no_code() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="bad gateway")

    client = NeptuneClient(config=CONFIG, client_factory=make_client_factory(handler))

    with pytest.raises(NeptuneAPIError) as exc:
        client.describe_cluster_endpoints(
            cluster_identifier="my-cluster", endpoint_identifier="reader-ep"
        )

    assert exc.value.code is None
    assert exc.value.status_code == 502


def test_transport_failure_becomes_api_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = NeptuneClient(config=CONFIG, client_factory=make_client_factory(handler))

    with pytest.raises(NeptuneAPIError, match="connection refused") as exc:
        client.describe_cluster_endpoints(
            cluster_identifier="my-cluster", endpoint_identifier="reader-ep"
        )

    assert exc.value.code is None


def test_missing_base_url_is_rejected() -> None:
    config = NeptuneConfig(resilience=ResilienceConfig(name="neptune", base_url=None))
    client = NeptuneClient(
        config=config, client_factory=make_client_factory(lambda _: httpx.Response(200))
    )

    with pytest.raises(NeptuneAPIError, match="base_url"):
        client.delete_cluster_endpoint(
            cluster_identifier="my-cluster", endpoint_identifier="reader-ep"
        )


def test_malformed_describe_payload_becomes_api_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"DBClusterEndpoints": [{"Status": "available"}]})

    client = NeptuneClient(config=CONFIG, client_factory=make_client_factory(handler))

    with pytest.raises(NeptuneAPIError, match="Malformed Neptune describe response"):
        client.describe_cluster_endpoints(
            cluster_identifier="my-cluster", endpoint_identifier="reader-ep"
        )


def test_malformed_describe_payload_fails_read_with_context() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"DBClusterEndpoints": [{"Status": "available"}]})

    client = NeptuneClient(config=CONFIG, client_factory=make_client_factory(handler))
    orchestrator = LifecycleOrchestrator(ClusterEndpointResource(client))

    with pytest.raises(RemoteOperationError) as exc:
        orchestrator.read("my-cluster:reader-ep")

    assert exc.value.context is not None
    assert exc.value.context.operation is Operation.READ
    assert exc.value.context.kind is ResourceKind.CLUSTER_ENDPOINT
    assert exc.value.context.identifier == "my-cluster:reader-ep"
    assert isinstance(exc.value.__cause__, NeptuneAPIError)


def test_non_json_success_body_becomes_api_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>oops</html>")

    client = NeptuneClient(config=CONFIG, client_factory=make_client_factory(handler))

    with pytest.raises(NeptuneAPIError, match="invalid JSON"):
        client.describe_cluster_endpoints(
            cluster_identifier="my-cluster", endpoint_identifier="reader-ep"
        )
