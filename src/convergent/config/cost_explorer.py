"""Cost Explorer control-plane configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import require_env_vars
from .http_resilience import RateLimit, ResilienceConfig

COST_EXPLORER_TIMEOUT_SECONDS = 10.0


@dataclass(frozen=True, slots=True)
class CostExplorerConfig:
    resilience: ResilienceConfig


def get_cost_explorer_config(
    *, resilience: ResilienceConfig | None = None
) -> CostExplorerConfig:
    values = require_env_vars(("COST_EXPLORER_ENDPOINT_URL",))
    return CostExplorerConfig(
        resilience=resilience
        or ResilienceConfig(
            name="cost-explorer",
            base_url=values["COST_EXPLORER_ENDPOINT_URL"],
            timeout_seconds=COST_EXPLORER_TIMEOUT_SECONDS,
            ratelimit=RateLimit(max_calls=2, per_seconds=1.0),
        ),
    )
