"""HTTP client for the Neptune cluster endpoint API."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING
from urllib.parse import quote

import httpx

from convergent.adapters.http_resilience import ResilientClient
from convergent.domain.ports.control_plane import ControlPlaneError

from .schema import ClusterEndpointPayload, DescribeClusterEndpointsResponse, ErrorResponse
from .translator import create_request_body, modify_request_body, translate_cluster_endpoint

if TYPE_CHECKING:
    from collections.abc import Callable

    from convergent.config.http_resilience import ResilienceConfig
    from convergent.config.neptune import NeptuneConfig
    from convergent.domain.model import (
        ClusterEndpoint,
        ClusterEndpointChanges,
        ClusterEndpointSpec,
    )

log = getLogger(__name__)


class NeptuneAPIError(ControlPlaneError):
    """Raised when the Neptune API rejects a request or cannot be reached."""


class NeptuneClient:
    """Synchronous facade over the async Neptune endpoint API."""

    def __init__(
        self,
        *,
        config: NeptuneConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._resilience = config.resilience
        self._client_factory = client_factory or ResilientClient

    def create_cluster_endpoint(self, spec: ClusterEndpointSpec) -> ClusterEndpoint:
        return asyncio.run(self._create_async(spec))

    def modify_cluster_endpoint(
        self,
        *,
        cluster_identifier: str,
        endpoint_identifier: str,
        changes: ClusterEndpointChanges,
    ) -> None:
        asyncio.run(
            self._request(
                "PATCH",
                _endpoint_path(cluster_identifier, endpoint_identifier),
                json=modify_request_body(changes),
            )
        )

    def delete_cluster_endpoint(self, *, cluster_identifier: str, endpoint_identifier: str) -> None:
        asyncio.run(
            self._request("DELETE", _endpoint_path(cluster_identifier, endpoint_identifier))
        )

    def describe_cluster_endpoints(
        self, *, cluster_identifier: str, endpoint_identifier: str
    ) -> list[ClusterEndpoint]:
        return asyncio.run(
            self._describe_async(
                cluster_identifier=cluster_identifier,
                endpoint_identifier=endpoint_identifier,
            )
        )

    async def _create_async(self, spec: ClusterEndpointSpec) -> ClusterEndpoint:
        payload = await self._request(
            "POST",
            _collection_path(spec.cluster_identifier),
            json=create_request_body(spec),
        )
        if not isinstance(payload, dict):
            raise NeptuneAPIError("Unexpected Neptune create response payload")
        try:
            return translate_cluster_endpoint(ClusterEndpointPayload.model_validate(payload))
        except ValueError as exc:
            raise NeptuneAPIError(f"Malformed Neptune create response: {exc}") from exc

    async def _describe_async(
        self, *, cluster_identifier: str, endpoint_identifier: str
    ) -> list[ClusterEndpoint]:
        endpoints: list[ClusterEndpoint] = []
        params: dict[str, str] = {"DBClusterEndpointIdentifier": endpoint_identifier}
        path = _collection_path(cluster_identifier)

        async with self._client_factory(self._resilience) as client:
            while True:
                payload = await self._perform_request(client, "GET", path, params=params)
                if not isinstance(payload, dict):
                    raise NeptuneAPIError("Unexpected Neptune describe response payload")
                try:
                    page = DescribeClusterEndpointsResponse.model_validate(payload)
                    endpoints.extend(translate_cluster_endpoint(item) for item in page.endpoints)
                except ValueError as exc:
                    raise NeptuneAPIError(f"Malformed Neptune describe response: {exc}") from exc
                if page.marker is None:
                    break
                params = {**params, "Marker": page.marker}

        return endpoints

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, object] | None = None,
    ) -> object:
        async with self._client_factory(self._resilience) as client:
            return await self._perform_request(client, method, path, json=json)

    async def _perform_request(
        self,
        client: ResilientClient,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        json: dict[str, object] | None = None,
    ) -> object:
        if self._resilience.base_url is None:
            raise NeptuneAPIError("Missing Neptune base_url in resilience configuration")
        try:
            response = await client.request(method, path, params=params, json=json)
        except httpx.HTTPError as exc:
            raise NeptuneAPIError(f"Neptune {method} {path} failed: {exc}") from exc

        if response.is_error:
            raise _api_error(response)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise NeptuneAPIError(f"Neptune {method} {path} returned invalid JSON") from exc


def _api_error(response: httpx.Response) -> NeptuneAPIError:
    try:
        detail = ErrorResponse.model_validate(response.json()).error
    except ValueError:
        return NeptuneAPIError(
            f"Neptune API returned HTTP {response.status_code}",
            status_code=response.status_code,
        )
    log.debug("Neptune API error %s: %s", detail.code, detail.message)
    return NeptuneAPIError(
        detail.message or detail.code,
        code=detail.code,
        status_code=response.status_code,
    )


def _collection_path(cluster_identifier: str) -> str:
    return f"clusters/{quote(cluster_identifier, safe='')}/endpoints"


def _endpoint_path(cluster_identifier: str, endpoint_identifier: str) -> str:
    return f"{_collection_path(cluster_identifier)}/{quote(endpoint_identifier, safe='')}"
