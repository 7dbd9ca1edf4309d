from __future__ import annotations

import asyncio

import httpx

from convergent.adapters.http_resilience import (
    RateLimit,
    ResilienceConfig,
    ResilientClient,
    RetryPolicy,
    build_retry,
)
from tests.helpers.http import make_client_factory


def test_default_policy_never_retries_create_calls() -> None:
    retry = build_retry(RetryPolicy())

    assert "POST" not in RetryPolicy().allowed_methods
    assert not retry.is_retryable_method("POST")
    assert retry.is_retryable_method("GET")
    assert retry.is_retryable_method("DELETE")


def test_client_sends_through_rate_limiter() -> None:
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(f"{request.method} {request.url.path}")
        return httpx.Response(200, json={"ok": True})

    config = ResilienceConfig(
        name="test",
        base_url="https://service.test/api/",
        ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
    )
    factory = make_client_factory(handler)

    async def exercise() -> list[int]:
        async with factory(config) as client:
            responses = [
                await client.request("GET", "things", params={"page": "1"}),
                await client.request("PATCH", "things/1", json={"name": "x"}),
                await client.request("DELETE", "things/1"),
            ]
        return [response.status_code for response in responses]

    assert asyncio.run(exercise()) == [200, 200, 200]
    assert seen == ["GET /api/things", "PATCH /api/things/1", "DELETE /api/things/1"]


def test_client_uses_configured_base_url_and_timeout() -> None:
    client = ResilientClient(
        ResilienceConfig(name="test", base_url="https://service.test/api/", timeout_seconds=5.0)
    )
    inner = client._client  # noqa: SLF001  # type: ignore[reportPrivateUsage]

    try:
        assert str(inner.base_url) == "https://service.test/api/"
        assert inner.timeout.read == 5.0
    finally:
        asyncio.run(client.aclose())
