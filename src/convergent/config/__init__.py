"""Application configuration helpers."""

from __future__ import annotations

from .convergence import WaitConfig, get_wait_config
from .cost_explorer import CostExplorerConfig, get_cost_explorer_config
from .env import require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .neptune import NeptuneConfig, get_neptune_config
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "ConfigurationError",
    "CostExplorerConfig",
    "DatabaseConfig",
    "MissingConfigurationError",
    "NeptuneConfig",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "WaitConfig",
    "configure_logging",
    "get_cost_explorer_config",
    "get_database_config",
    "get_neptune_config",
    "get_storage_config",
    "get_wait_config",
    "require_env_var",
    "require_env_vars",
]
