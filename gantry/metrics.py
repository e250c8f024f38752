"""Minimal in-memory metric registry.

Purpose:
    - Counters, latency samples and gauges describing the bootstrap.
    - Zero external deps; one registry per process context / bootstrap
      container (no module-level singleton).

Core API (intentionally tiny):
    inc(name, labels=None, value=1)
    observe(name, value, labels=None)
    register_gauge(name, fn)
    snapshot() -> dict (copy for safe reading)

Metric names emitted by the lifecycle:
    - modules_loaded_total{origin}
    - module_files_discovered_total
    - services_started_total
    - service_start_failures_total{error_type}
    - services_stopped_total
    - service_stop_failures_total{error_type}
    - service_start_ms{service}
    - handler_exceptions_total{event}

Thread-safety: coarse RLock; writes happen during single-threaded setup and
the shutdown hook, reads from the dashboard thread.
"""
from __future__ import annotations

import gc
import threading
from threading import RLock
from time import time
from typing import Any, Callable, Dict, Tuple

_Key = Tuple[str, Tuple[Tuple[str, str], ...]]
Gauge = Callable[[], Any]


def _norm_labels(labels: dict[str, Any] | None) -> Tuple[Tuple[str, str], ...]:
    if not labels:
        return tuple()
    return tuple(sorted((str(k), str(v)) for k, v in labels.items()))


def _label_str(labels: Tuple[Tuple[str, str], ...]) -> str:
    if not labels:
        return ""
    return "{" + ",".join(f"{k}={v}" for k, v in labels) + "}"


class MetricRegistry:
    def __init__(self) -> None:
        self._counters: Dict[_Key, float] = {}
        self._hist: Dict[_Key, list] = {}
        self._gauges: Dict[str, Gauge] = {}
        self._lock = RLock()

    def inc(
        self,
        name: str,
        labels: dict[str, Any] | None = None,
        value: float = 1.0,
    ) -> None:
        key = (name, _norm_labels(labels))
        with self._lock:
            self._counters[key] = self._counters.get(key, 0.0) + value

    def observe(
        self,
        name: str,
        value: float,
        labels: dict[str, Any] | None = None,
    ) -> None:
        key = (name, _norm_labels(labels))
        with self._lock:
            self._hist.setdefault(key, []).append(value)

    def register_gauge(self, name: str, fn: Gauge) -> None:
        """Register a callable sampled on every snapshot.

        Names are unique per registry; re-registering raises ValueError.
        """
        with self._lock:
            if name in self._gauges:
                raise ValueError(f"A metric named {name} already exists")
            self._gauges[name] = fn

    def counter(self, name: str, labels: dict[str, Any] | None = None) -> float:
        with self._lock:
            return self._counters.get((name, _norm_labels(labels)), 0.0)

    def snapshot(self) -> dict[str, Any]:
        with self._lock:
            counters = {
                name + _label_str(labels): v
                for (name, labels), v in self._counters.items()
            }
            hist = {}
            for (name, labels), vals in self._hist.items():
                if not vals:
                    continue
                hist[name + _label_str(labels)] = {
                    "count": len(vals),
                    "min": min(vals),
                    "max": max(vals),
                    "p50": sorted(vals)[len(vals) // 2],
                    "last": vals[-1],
                }
            gauges = dict(self._gauges)
        sampled: dict[str, Any] = {}
        for name, fn in gauges.items():
            try:
                sampled[name] = fn()
            except Exception:  # noqa: BLE001
                sampled[name] = None
        return {
            "ts": time(),
            "counters": counters,
            "histograms": hist,
            "gauges": sampled,
        }

    def reset(self) -> None:
        with self._lock:
            self._counters.clear()
            self._hist.clear()
            self._gauges.clear()


def register_process_gauges(registry: MetricRegistry) -> None:
    """Interpreter-level gauges (gc generations, live threads)."""
    registry.register_gauge("process.gc", lambda: list(gc.get_count()))
    registry.register_gauge("process.threads", threading.active_count)


__all__ = ["MetricRegistry", "register_process_gauges"]
