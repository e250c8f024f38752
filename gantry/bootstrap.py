"""Pre-start application container.

Bundles register two-phase hooks: ``initialize(bootstrap)`` runs
synchronously inside ``add_bundle`` (keep it light: no blocking I/O),
``run(environment)`` runs later for every bundle in registration order.
The first run failure stops the sequence and propagates; earlier bundles'
run effects are not rolled back.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List

from .config import AggregatedConfig
from .errors import map_exception
from .metrics import MetricRegistry, register_process_gauges
from .modules import ModuleCatalog

log = logging.getLogger("gantry.bootstrap")


@dataclass
class Environment:
    name: str
    metrics: MetricRegistry
    config: AggregatedConfig | None = None
    attributes: Dict[str, Any] = field(default_factory=dict)


class Bundle(ABC):
    @abstractmethod
    def initialize(self, bootstrap: "Bootstrap") -> None:
        """Register shared state on the bootstrap (metrics etc.)."""

    @abstractmethod
    def run(self, environment: Environment) -> None:
        """Apply the bundle to the running environment."""


class Bootstrap:
    def __init__(self, application: Any = None) -> None:
        self.application = application
        self._metric_registry = MetricRegistry()
        register_process_gauges(self._metric_registry)
        self._bundles: List[Bundle] = []
        self._catalog: ModuleCatalog | None = None
        self._closed = False

    @property
    def metric_registry(self) -> MetricRegistry:
        return self._metric_registry

    @property
    def catalog(self) -> ModuleCatalog | None:
        """Resource loader used to resolve module identifiers."""
        return self._catalog

    @catalog.setter
    def catalog(self, catalog: ModuleCatalog) -> None:
        self._catalog = catalog

    @property
    def bundles(self) -> list[Bundle]:
        return list(self._bundles)

    def add_bundle(self, bundle: Bundle) -> None:
        bundle.initialize(self)
        self._bundles.append(bundle)

    def environment(self, name: str = "gantry", **kw: Any) -> Environment:
        return Environment(name=name, metrics=self._metric_registry, **kw)

    def run(self, environment: Environment) -> None:
        for bundle in self._bundles:
            try:
                bundle.run(environment)
            except Exception as e:
                error_type = map_exception(e, "bundle")
                self._metric_registry.inc(
                    "bundle_run_failures_total", {"error_type": error_type}
                )
                log.error(
                    "Bundle %s failed to run (%s)",
                    type(bundle).__name__,
                    error_type,
                    exc_info=True,
                )
                raise

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._metric_registry.reset()

    def __enter__(self) -> "Bootstrap":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()


__all__ = ["Bootstrap", "Bundle", "Environment"]
