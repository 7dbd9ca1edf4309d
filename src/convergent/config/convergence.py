"""Polling defaults for convergence waits."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_float_env
from .errors import ConfigurationError

DEFAULT_POLL_INTERVAL_SECONDS = 5.0
DEFAULT_MAX_POLL_INTERVAL_SECONDS = 30.0
DEFAULT_POLL_BACKOFF = 1.5


@dataclass(frozen=True, slots=True)
class WaitConfig:
    """How aggressively waits poll the control plane.

    ``timeout_seconds`` overrides the per-kind available/deleted timeouts when set.
    """

    poll_interval: float = DEFAULT_POLL_INTERVAL_SECONDS
    max_poll_interval: float = DEFAULT_MAX_POLL_INTERVAL_SECONDS
    backoff: float = DEFAULT_POLL_BACKOFF
    timeout_seconds: float | None = None

    def __post_init__(self) -> None:
        if self.poll_interval <= 0:
            raise ConfigurationError("poll_interval must be positive")
        if self.max_poll_interval < self.poll_interval:
            raise ConfigurationError("max_poll_interval must not be below poll_interval")
        if self.backoff < 1.0:
            raise ConfigurationError("backoff must be at least 1.0")


def get_wait_config() -> WaitConfig:
    timeout = optional_float_env("CONVERGENT_WAIT_TIMEOUT", 0.0) or None
    return WaitConfig(
        poll_interval=optional_float_env(
            "CONVERGENT_POLL_INTERVAL", DEFAULT_POLL_INTERVAL_SECONDS
        ),
        max_poll_interval=optional_float_env(
            "CONVERGENT_MAX_POLL_INTERVAL", DEFAULT_MAX_POLL_INTERVAL_SECONDS
        ),
        backoff=optional_float_env("CONVERGENT_POLL_BACKOFF", DEFAULT_POLL_BACKOFF),
        timeout_seconds=timeout,
    )
