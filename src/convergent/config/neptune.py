"""Neptune control-plane configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import require_env_vars
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy

NEPTUNE_TIMEOUT_SECONDS = 15.0


@dataclass(frozen=True, slots=True)
class NeptuneConfig:
    resilience: ResilienceConfig


def get_neptune_config(*, resilience: ResilienceConfig | None = None) -> NeptuneConfig:
    values = require_env_vars(("NEPTUNE_ENDPOINT_URL",))
    return NeptuneConfig(
        resilience=resilience
        or ResilienceConfig(
            name="neptune",
            base_url=values["NEPTUNE_ENDPOINT_URL"],
            timeout_seconds=NEPTUNE_TIMEOUT_SECONDS,
            retry=RetryPolicy(total=4),
            ratelimit=RateLimit(max_calls=5, per_seconds=1.0),
        ),
    )
