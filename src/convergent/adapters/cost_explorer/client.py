"""HTTP client for the Cost Explorer anomaly monitor API."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING

import httpx

from convergent.adapters.http_resilience import ResilientClient
from convergent.domain.ports.control_plane import ControlPlaneError

from .schema import CreateAnomalyMonitorResponse, ErrorResponse, GetAnomalyMonitorsResponse
from .translator import create_request_body, translate_anomaly_monitor, update_request_body

if TYPE_CHECKING:
    from collections.abc import Callable

    from convergent.config.cost_explorer import CostExplorerConfig
    from convergent.config.http_resilience import ResilienceConfig
    from convergent.domain.model import AnomalyMonitor, AnomalyMonitorChanges, AnomalyMonitorSpec

log = getLogger(__name__)

MONITORS_PATH = "anomaly-monitors"
type QueryParams = list[tuple[str, str]]


class CostExplorerAPIError(ControlPlaneError):
    """Raised when the Cost Explorer API rejects a request or cannot be reached."""


class CostExplorerClient:
    """Synchronous facade over the async Cost Explorer anomaly monitor API."""

    def __init__(
        self,
        *,
        config: CostExplorerConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._resilience = config.resilience
        self._client_factory = client_factory or ResilientClient

    def create_anomaly_monitor(self, spec: AnomalyMonitorSpec) -> str:
        payload = asyncio.run(self._request("POST", json=create_request_body(spec)))
        if not isinstance(payload, dict):
            raise CostExplorerAPIError("Unexpected Cost Explorer create response payload")
        try:
            return CreateAnomalyMonitorResponse.model_validate(payload).arn
        except ValueError as exc:
            raise CostExplorerAPIError(f"Malformed Cost Explorer create response: {exc}") from exc

    def update_anomaly_monitor(self, *, arn: str, changes: AnomalyMonitorChanges) -> None:
        asyncio.run(
            self._request("PATCH", params=[("MonitorArn", arn)], json=update_request_body(changes))
        )

    def delete_anomaly_monitor(self, *, arn: str) -> None:
        asyncio.run(self._request("DELETE", params=[("MonitorArn", arn)]))

    def get_anomaly_monitors(self, *, arns: list[str]) -> list[AnomalyMonitor]:
        return asyncio.run(self._get_async(arns))

    async def _get_async(self, arns: list[str]) -> list[AnomalyMonitor]:
        monitors: list[AnomalyMonitor] = []
        base_params: QueryParams = [("MonitorArn", arn) for arn in arns]
        params = base_params

        async with self._client_factory(self._resilience) as client:
            while True:
                payload = await self._perform_request(client, "GET", params=params)
                if not isinstance(payload, dict):
                    raise CostExplorerAPIError("Unexpected Cost Explorer list response payload")
                try:
                    page = GetAnomalyMonitorsResponse.model_validate(payload)
                    monitors.extend(translate_anomaly_monitor(item) for item in page.monitors)
                except ValueError as exc:
                    raise CostExplorerAPIError(
                        f"Malformed Cost Explorer list response: {exc}"
                    ) from exc
                if page.next_page_token is None:
                    break
                params = [*base_params, ("NextPageToken", page.next_page_token)]

        return monitors

    async def _request(
        self,
        method: str,
        *,
        params: QueryParams | None = None,
        json: dict[str, object] | None = None,
    ) -> object:
        async with self._client_factory(self._resilience) as client:
            return await self._perform_request(client, method, params=params, json=json)

    async def _perform_request(
        self,
        client: ResilientClient,
        method: str,
        *,
        params: QueryParams | None = None,
        json: dict[str, object] | None = None,
    ) -> object:
        if self._resilience.base_url is None:
            raise CostExplorerAPIError(
                "Missing Cost Explorer base_url in resilience configuration"
            )
        try:
            response = await client.request(method, MONITORS_PATH, params=params, json=json)
        except httpx.HTTPError as exc:
            raise CostExplorerAPIError(f"Cost Explorer {method} failed: {exc}") from exc

        if response.is_error:
            raise _api_error(response)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise CostExplorerAPIError(f"Cost Explorer {method} returned invalid JSON") from exc


def _api_error(response: httpx.Response) -> CostExplorerAPIError:
    try:
        detail = ErrorResponse.model_validate(response.json()).error
    except ValueError:
        return CostExplorerAPIError(
            f"Cost Explorer API returned HTTP {response.status_code}",
            status_code=response.status_code,
        )
    log.debug("Cost Explorer API error %s: %s", detail.code, detail.message)
    return CostExplorerAPIError(
        detail.message or detail.code,
        code=detail.code,
        status_code=response.status_code,
    )
