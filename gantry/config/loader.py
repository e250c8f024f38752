"""Configuration loading & validation.

Precedence (last wins): base.yaml → overrides.local.yaml → ENV (GANTRY__*).

- `schema_version` missing → assume 1, warn.
- Unknown top-level or section keys are rejected.
"""
from __future__ import annotations

import logging
import os
import pathlib
import threading
from functools import lru_cache
from typing import Any, Dict

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError

from gantry.errors import validate_error_type

from .schemas.core import (
    DashboardConfig,
    LifecycleConfig,
    ModulesConfig,
    ServerConfig,
)
from .schemas.observability import LoggingConfig, MetricsConfig

log = logging.getLogger("gantry.config")


class AggregatedConfig(BaseModel):
    schema_version: int = 1
    modules: ModulesConfig = ModulesConfig()
    server: ServerConfig = ServerConfig()
    dashboard: DashboardConfig = DashboardConfig()
    lifecycle: LifecycleConfig = LifecycleConfig()
    logging: LoggingConfig = LoggingConfig()
    metrics: MetricsConfig = MetricsConfig()

    model_config = ConfigDict(extra="forbid")


DEFAULT_CONFIG_DIR = "configs"
ENV_PREFIX = "GANTRY__"


class ConfigError(Exception):
    def __init__(self, msg: str, error_type: str = "config-invalid"):
        super().__init__(msg)
        self.error_type = validate_error_type(error_type)


_RANGE_ERRORS = {
    "greater_than",
    "greater_than_equal",
    "less_than",
    "less_than_equal",
    "too_short",
    "too_long",
}


def _classify(e: ValidationError) -> str:
    kinds = {err["type"] for err in e.errors()}
    if kinds and kinds <= _RANGE_ERRORS:
        return "config-out-of-range"
    return "config-invalid"


def _load_yaml_if_exists(path: pathlib.Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping at top level")
    return data


def _merge_dict(
    base: Dict[str, Any], override: Dict[str, Any]
) -> Dict[str, Any]:
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(base.get(k), dict):
            base[k] = _merge_dict(base[k], v)
        else:
            base[k] = v
    return base


def _cast_env(value: str) -> Any:
    if value.lower() in {"true", "false"}:
        return value.lower() == "true"
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        return value


def _apply_env(cfg: Dict[str, Any]) -> None:
    prefix_len = len(ENV_PREFIX)
    for env_key, value in os.environ.items():
        if not env_key.startswith(ENV_PREFIX):
            continue
        path_parts = env_key[prefix_len:].lower().split("__")
        target = cfg
        for part in path_parts[:-1]:
            if part not in target or not isinstance(target[part], dict):
                target[part] = {}
            target = target[part]
        target[path_parts[-1]] = _cast_env(value)
        log.info(
            "config env override path=%s source=env", ".".join(path_parts)
        )


_lock = threading.Lock()


def _resolve_config_dir() -> pathlib.Path:
    """Resolve config directory each call honoring env var changes."""
    return pathlib.Path(os.getenv("GANTRY_CONFIG_DIR", DEFAULT_CONFIG_DIR))


def _migrate_legacy(data: Dict[str, Any]) -> Dict[str, Any]:
    if "schema_version" not in data:
        log.warning("config schema_version missing -> assuming 1")
        data["schema_version"] = 1
    return data


def load_config(cfg_dir: pathlib.Path) -> AggregatedConfig:
    base_cfg = _load_yaml_if_exists(cfg_dir / "base.yaml")
    overrides_cfg = _load_yaml_if_exists(cfg_dir / "overrides.local.yaml")
    merged = _merge_dict(base_cfg, overrides_cfg)
    _apply_env(merged)
    migrated = _migrate_legacy(merged)
    try:
        return AggregatedConfig.model_validate(migrated)
    except ValidationError as e:
        raise ConfigError(str(e), _classify(e)) from e


@lru_cache(maxsize=1)
def get_config() -> AggregatedConfig:  # noqa: D401
    with _lock:
        return load_config(_resolve_config_dir())


def clear_config_cache() -> None:
    """Clear cached config (primarily for tests)."""
    get_config.cache_clear()
