"""Lifecycle orchestrator.

start_all: start services in extraction order; the first failure is fatal.
Services already started are left running (no rollback) and services after
the failing one are never started.

register_shutdown: arm one termination hook over the services that reached
STARTED.
"""
from __future__ import annotations

import atexit
import logging
from typing import Any, Callable, Iterable, Sequence

from gantry.capabilities import CapabilityRole
from gantry.errors import (
    LifecycleStateError,
    ServiceStartError,
    validate_error_type,
)
from gantry.events import EventBus, ServiceStarted, ServiceStartFailed

from .service import ServiceHandle
from .shutdown import DEFAULT_SIGNALS, ShutdownHook, ShutdownSnapshot

log = logging.getLogger("gantry.lifecycle")


class LifecycleOrchestrator:
    def __init__(
        self,
        events: EventBus | None = None,
        signals: Iterable[str] = DEFAULT_SIGNALS,
        register_exit: Callable[[Callable[[], Any]], Any] = atexit.register,
        on_complete: Callable[[], Any] | None = None,
    ):
        self._events = events
        self._signals = tuple(signals)
        self._register_exit = register_exit
        self._on_complete = on_complete
        self._handles: list[ServiceHandle] = []
        self._attempted = False
        self._snapshot: ShutdownSnapshot | None = None
        self._hook: ShutdownHook | None = None

    @property
    def handles(self) -> list[ServiceHandle]:
        return list(self._handles)

    @property
    def snapshot(self) -> ShutdownSnapshot | None:
        return self._snapshot

    @property
    def hook(self) -> ShutdownHook | None:
        return self._hook

    def start_all(
        self,
        services: Sequence[Any],
        role: CapabilityRole = CapabilityRole.LIFECYCLE_SERVICE,
    ) -> list[ServiceHandle]:
        if self._attempted:
            raise LifecycleStateError("Services already started")
        self._attempted = True
        self._handles = [ServiceHandle(s, role) for s in services]
        for handle in self._handles:
            try:
                handle.start()
            except ServiceStartError as e:
                log.error("%s", e, exc_info=e.__cause__)
                if self._events is not None:
                    self._events.emit(
                        ServiceStartFailed(
                            handle.name,
                            role.value,
                            validate_error_type(e.error_type),
                            str(e.__cause__ or e),
                        )
                    )
                raise
            log.info("started %s in %d ms", handle.name, handle.start_ms)
            if self._events is not None:
                self._events.emit(
                    ServiceStarted(handle.name, role.value, handle.start_ms)
                )
        self._snapshot = ShutdownSnapshot.capture(self._handles)
        return self.handles

    def register_shutdown(self) -> ShutdownHook:
        if self._hook is not None:
            raise LifecycleStateError("Shutdown hook already registered")
        if self._snapshot is None:
            raise LifecycleStateError(
                "Cannot register shutdown before start_all completed"
            )
        self._hook = ShutdownHook(
            self._snapshot,
            events=self._events,
            signals=self._signals,
            register_exit=self._register_exit,
            on_complete=self._on_complete,
        )
        self._hook.arm()
        return self._hook

    def shutdown(self) -> bool:
        """Run the armed hook now (e.g. embedded use); idempotent."""
        if self._hook is None:
            raise LifecycleStateError("Shutdown hook not registered")
        return self._hook.run()


__all__ = ["LifecycleOrchestrator"]
