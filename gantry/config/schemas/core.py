"""Core schemas: module discovery, servers, lifecycle."""
from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field, field_validator


class ModulesConfig(BaseModel):
    # Directories (searched recursively) or files, in discovery order.
    search_path: List[str] = Field(default_factory=lambda: ["configs/modules"])
    file_name: str = "gantry-modules.yaml"
    key: str = "modules"

    @field_validator("file_name", "key")
    @classmethod
    def _not_empty(cls, v: str) -> str:  # noqa: D401
        if not v.strip():
            raise ValueError("cannot be empty")
        return v


class ServerConfig(BaseModel):
    host: str = "127.0.0.1"
    port: int = Field(8000, ge=0, le=65535)
    log_level: str = "warning"


class DashboardConfig(BaseModel):
    enabled: bool = True
    host: str = "127.0.0.1"
    port: int = Field(9091, ge=0, le=65535)


class LifecycleConfig(BaseModel):
    shutdown_signals: List[str] = Field(
        default_factory=lambda: ["SIGTERM", "SIGINT"]
    )
