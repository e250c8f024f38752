"""Config subsystem public API.

Provides:
    get_config() -> AggregatedConfig
    load_config(dir) -> AggregatedConfig (uncached)
    ConfigError  -> raised on validation / unknown key
"""

from .loader import (  # noqa: F401
    AggregatedConfig,
    ConfigError,
    clear_config_cache,
    get_config,
    load_config,
)

__all__ = [
    "AggregatedConfig",
    "ConfigError",
    "clear_config_cache",
    "get_config",
    "load_config",
]
