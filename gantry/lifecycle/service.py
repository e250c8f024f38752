"""Lifecycle-managed service interface and per-service handle."""
from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any

from gantry.capabilities import CapabilityRole
from gantry.errors import (
    LifecycleStateError,
    ServiceStartError,
    ShutdownError,
)

log = logging.getLogger("gantry.lifecycle")


class Service(ABC):
    """start() may raise (fatal); stop() failures are tolerated by callers.

    Any object exposing start/stop can be managed; subclassing is optional.
    """

    @abstractmethod
    def start(self) -> None:
        """Start serving; return once the service is up."""

    @abstractmethod
    def stop(self) -> None:
        """Release resources; called at most once after a successful start."""

    @property
    def name(self) -> str:
        return self.__class__.__name__


def service_name(instance: Any) -> str:
    name = getattr(instance, "name", None)
    if isinstance(name, str) and name:
        return name
    return type(instance).__name__


class ServiceState(str, Enum):
    CREATED = "created"
    STARTED = "started"
    STOPPED = "stopped"
    FAILED = "failed"


class ServiceHandle:
    """Owns one service instance and its state.

    CREATED → STARTED | FAILED, STARTED → STOPPED. Each transition happens
    at most once; anything else raises LifecycleStateError.
    """

    __slots__ = ("role", "instance", "state", "error", "start_ms")

    def __init__(
        self,
        instance: Any,
        role: CapabilityRole = CapabilityRole.LIFECYCLE_SERVICE,
    ):
        self.role = role
        self.instance = instance
        self.state = ServiceState.CREATED
        self.error: BaseException | None = None
        self.start_ms: int | None = None

    @property
    def name(self) -> str:
        return service_name(self.instance)

    def start(self) -> None:
        if self.state is not ServiceState.CREATED:
            raise LifecycleStateError(
                f"Cannot start {self.name} in state {self.state.value}"
            )
        t0 = time.perf_counter()
        try:
            self.instance.start()
        except Exception as e:  # noqa: BLE001
            self.state = ServiceState.FAILED
            self.error = e
            raise ServiceStartError(
                f"Error starting a Service : {self.name}: {e}",
                service=self.name,
            ) from e
        self.start_ms = int((time.perf_counter() - t0) * 1000)
        self.state = ServiceState.STARTED

    def stop(self) -> None:
        if self.state is not ServiceState.STARTED:
            raise LifecycleStateError(
                f"Cannot stop {self.name} in state {self.state.value}"
            )
        # Transition first: stop is attempted exactly once even if it raises.
        self.state = ServiceState.STOPPED
        try:
            self.instance.stop()
        except Exception as e:  # noqa: BLE001
            self.error = e
            raise ShutdownError(
                f"Error stopping a Service : {self.name}: {e}",
                service=self.name,
            ) from e

    def __repr__(self) -> str:
        return f"<ServiceHandle {self.name} {self.state.value}>"


__all__ = ["Service", "ServiceHandle", "ServiceState", "service_name"]
