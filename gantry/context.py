"""Process context shared by every bootstrap component.

Created once per bootstrap and passed explicitly (binder, orchestrator,
servers). Owns the metric registry and event bus for its lifetime.
"""
from __future__ import annotations

import socket
import time
from dataclasses import dataclass, field

from .config import AggregatedConfig
from .events import EventBus, metrics_collector
from .metrics import MetricRegistry, register_process_gauges


def _host_name() -> str | None:
    try:
        return socket.gethostname()
    except OSError:
        # not critical information
        return None


@dataclass
class ProcessContext:
    config: AggregatedConfig
    metrics: MetricRegistry
    events: EventBus
    host_name: str | None = None
    started_at: float = field(default_factory=time.monotonic)

    @classmethod
    def create(cls, config: AggregatedConfig | None = None) -> "ProcessContext":
        config = config or AggregatedConfig()
        metrics = MetricRegistry()
        if config.metrics.process_gauges:
            register_process_gauges(metrics)
        events = EventBus(metrics)
        events.on(metrics_collector(metrics))
        return cls(
            config=config,
            metrics=metrics,
            events=events,
            host_name=_host_name(),
        )

    def elapsed_ms(self) -> int:
        return int((time.monotonic() - self.started_at) * 1000)

    def close(self) -> None:
        self.events.reset()
        self.metrics.reset()


__all__ = ["ProcessContext"]
