"""Service lifecycle: handles, orchestrator, shutdown hook."""
from __future__ import annotations

from .orchestrator import LifecycleOrchestrator  # noqa: F401
from .service import (  # noqa: F401
    Service,
    ServiceHandle,
    ServiceState,
    service_name,
)
from .shutdown import ShutdownHook, ShutdownSnapshot  # noqa: F401

__all__ = [
    "LifecycleOrchestrator",
    "Service",
    "ServiceHandle",
    "ServiceState",
    "ShutdownHook",
    "ShutdownSnapshot",
    "service_name",
]
