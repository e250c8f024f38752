"""Lifecycle events + in-process EventBus (sync).

Features:
  - subscribe(event_name, handler) / on(handler) for every event
  - emit(event) where event is a BaseEvent dataclass; adds ts
  - handler isolation (exceptions counted, not propagated)
  - metrics collector translating lifecycle events into counters

One bus per ProcessContext; nothing here is a module-level singleton.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from threading import RLock
from time import time
from typing import Any, Callable, Dict, List

from .metrics import MetricRegistry

Handler = Callable[[Dict[str, Any]], None]
EventHandler = Callable[[str, Dict[str, Any]], None]


@dataclass(slots=True)
class BaseEvent:
    def to_event(self) -> Dict[str, Any]:  # noqa: D401
        data = asdict(self)
        data["ts"] = data.get("ts") or time()
        return data


@dataclass(slots=True)
class ModuleFileDiscovered(BaseEvent):
    path: str
    identifiers: int


@dataclass(slots=True)
class ModuleRegistered(BaseEvent):
    identifier: str
    origin: str
    position: int


@dataclass(slots=True)
class ServiceStarted(BaseEvent):
    service: str
    role: str
    start_ms: int


@dataclass(slots=True)
class ServiceStartFailed(BaseEvent):
    service: str
    role: str
    error_type: str
    message: str | None = None


@dataclass(slots=True)
class ServiceStopped(BaseEvent):
    service: str
    role: str


@dataclass(slots=True)
class ServiceStopFailed(BaseEvent):
    service: str
    role: str
    error_type: str
    message: str | None = None


@dataclass(slots=True)
class BootstrapCompleted(BaseEvent):
    startup_ms: int
    host_name: str | None
    modules: int
    services: int


class EventBus:
    def __init__(self, metrics: MetricRegistry | None = None) -> None:
        self._subs: Dict[str, List[Handler]] = {}
        self._any: List[EventHandler] = []
        self._lock = RLock()
        self._metrics = metrics or MetricRegistry()

    def subscribe(self, event: str, handler: Handler) -> None:
        with self._lock:
            self._subs.setdefault(event, []).append(handler)

    def on(self, handler: EventHandler) -> Callable[[], None]:
        with self._lock:
            self._any.append(handler)

        def _unsub() -> None:  # noqa: D401
            with self._lock:
                try:
                    self._any.remove(handler)
                except ValueError:
                    pass
        return _unsub

    def emit(self, ev: BaseEvent) -> None:
        name = ev.__class__.__name__
        payload = ev.to_event()
        with self._lock:
            subs = list(self._subs.get(name, ()))
            any_subs = list(self._any)
        self._metrics.inc("events_emitted_total", {"event": name})
        for h in subs:
            try:
                h(dict(payload))  # shallow copy for safety
            except Exception:  # noqa: BLE001
                self._metrics.inc("handler_exceptions_total", {"event": name})
        for ah in any_subs:
            try:
                ah(name, dict(payload))
            except Exception:  # noqa: BLE001
                self._metrics.inc("handler_exceptions_total", {"event": name})

    def reset(self) -> None:
        with self._lock:
            self._subs.clear()
            self._any.clear()


def metrics_collector(metrics: MetricRegistry) -> EventHandler:
    """Build an any-event handler feeding lifecycle counters."""

    def _collect(name: str, payload: Dict[str, Any]) -> None:
        if name == "ModuleRegistered":
            metrics.inc(
                "modules_loaded_total", {"origin": payload.get("origin")}
            )
        elif name == "ModuleFileDiscovered":
            metrics.inc("module_files_discovered_total")
        elif name == "ServiceStarted":
            metrics.inc("services_started_total")
            metrics.observe(
                "service_start_ms",
                payload.get("start_ms", 0),
                {"service": payload.get("service", "unknown")},
            )
        elif name == "ServiceStartFailed":
            metrics.inc(
                "service_start_failures_total",
                {"error_type": payload.get("error_type", "unknown")},
            )
        elif name == "ServiceStopped":
            metrics.inc("services_stopped_total")
        elif name == "ServiceStopFailed":
            metrics.inc(
                "service_stop_failures_total",
                {"error_type": payload.get("error_type", "unknown")},
            )
        elif name == "BootstrapCompleted":
            metrics.observe("startup_ms", payload.get("startup_ms", 0))

    return _collect


__all__ = [
    "EventBus",
    "BaseEvent",
    "ModuleFileDiscovered",
    "ModuleRegistered",
    "ServiceStarted",
    "ServiceStartFailed",
    "ServiceStopped",
    "ServiceStopFailed",
    "BootstrapCompleted",
    "metrics_collector",
]
