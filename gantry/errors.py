"""Central error taxonomy for the bootstrap pipeline.

Fatal (abort the bootstrap):
    config-discovery, module-instantiation, graph-resolution, service-start
Non-fatal (logged, shutdown continues):
    service-stop
Programming errors:
    illegal-state
"""
from __future__ import annotations

from pathlib import Path

_ALLOWED_ERROR_TYPES = {
    # discovery / assembly
    "config-discovery",
    "config-invalid",
    "config-out-of-range",
    "module-instantiation",
    "graph-resolution",
    # lifecycle
    "service-start",
    "service-stop",
    "bundle-run",
    "illegal-state",
    # infra
    "event-handler-error",
}


def validate_error_type(code: str) -> str:
    assert (
        code in _ALLOWED_ERROR_TYPES
    ), f"Unknown error_type '{code}' (not in taxonomy)"
    return code


class GantryError(Exception):
    """Base class; ``error_type`` is always a taxonomy code."""

    error_type = "illegal-state"


class ConfigDiscoveryError(GantryError):
    """A module-list file could not be read or parsed."""

    error_type = "config-discovery"

    def __init__(self, message: str, path: Path | None = None):
        super().__init__(message)
        self.path = path


class ModuleInstantiationError(GantryError):
    """Identifier unknown to the catalog or its constructor raised."""

    error_type = "module-instantiation"

    def __init__(
        self,
        message: str,
        identifier: str | None = None,
        path: Path | None = None,
    ):
        super().__init__(message)
        self.identifier = identifier
        self.path = path


class GraphResolutionError(GantryError):
    error_type = "graph-resolution"

    def __init__(self, message: str, key: str | None = None):
        super().__init__(message)
        self.key = key


class ServiceStartError(GantryError):
    error_type = "service-start"

    def __init__(self, message: str, service: str | None = None):
        super().__init__(message)
        self.service = service


class ShutdownError(GantryError):
    """A service raised from stop(); callers log it and carry on."""

    error_type = "service-stop"

    def __init__(self, message: str, service: str | None = None):
        super().__init__(message)
        self.service = service


class LifecycleStateError(GantryError):
    error_type = "illegal-state"


class ModuleSetFrozenError(LifecycleStateError):
    pass


def map_exception(e: BaseException, phase: str) -> str:
    if isinstance(e, GantryError):
        return e.error_type
    if phase == "discovery":
        return "config-discovery"
    if phase == "instantiation":
        return "module-instantiation"
    if phase == "start":
        return "service-start"
    if phase == "stop":
        return "service-stop"
    if phase == "bundle":
        return "bundle-run"
    return "illegal-state"


__all__ = [
    "validate_error_type",
    "map_exception",
    "GantryError",
    "ConfigDiscoveryError",
    "ModuleInstantiationError",
    "GraphResolutionError",
    "ServiceStartError",
    "ShutdownError",
    "LifecycleStateError",
    "ModuleSetFrozenError",
]
