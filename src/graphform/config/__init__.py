"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import RateLimit, ResilienceConfig
from .logging import configure_logging
from .platform import PlatformConfig, build_platform_resilience, get_platform_config
from .storage import (
    StateDatabaseConfig,
    StorageConfig,
    get_state_database_config,
    get_storage_config,
)

__all__ = [
    "ConfigurationError",
    "MissingConfigurationError",
    "PlatformConfig",
    "RateLimit",
    "ResilienceConfig",
    "StateDatabaseConfig",
    "StorageConfig",
    "build_platform_resilience",
    "configure_logging",
    "get_platform_config",
    "get_state_database_config",
    "get_storage_config",
    "optional_env_var",
    "require_env_vars",
]
