"""Runtime initializer: assembles modules, builds the graph, starts services.

Sequence:
 1. Static modules (config, metrics, dashboard, server) + modules listed in
    discovered module-list files
 2. Component graph built from the frozen module set
 3. Network-facing services registered with the API server
 4. Lifecycle services started in binding order, shutdown hook armed
"""
from __future__ import annotations

import atexit
import logging
import os
from typing import Any, Callable, Iterable, Sequence

from gantry.capabilities import CapabilityRole, find_instances
from gantry.config import AggregatedConfig, get_config
from gantry.context import ProcessContext
from gantry.errors import GantryError
from gantry.events import BootstrapCompleted
from gantry.graph import ComponentGraph
from gantry.lifecycle import LifecycleOrchestrator
from gantry.logs import configure_logging
from gantry.modules import ModuleCatalog, ModuleSet, load_modules

from .modules import API_SERVER_KEY, STATIC_MODULES, build_catalog

log = logging.getLogger("gantry.boot")

STARTUP_DISPLAY = (
    "\n*************************************************************\n"
    "  gantry    Startup Time : {elapsed} ms\n"
    "            Host Name: {host}\n"
    "*************************************************************"
)


class Initializer:
    def __init__(
        self,
        catalog: ModuleCatalog | None = None,
        static_modules: Sequence[str] = STATIC_MODULES,
        config: AggregatedConfig | None = None,
        signals: Iterable[str] | None = None,
        register_exit: Callable[[Callable[[], Any]], Any] = atexit.register,
    ):
        self._catalog = catalog
        self._static_modules = tuple(static_modules)
        self._config = config
        self._signals = signals
        self._register_exit = register_exit
        self.context: ProcessContext | None = None
        self.module_set: ModuleSet | None = None
        self.graph: ComponentGraph | None = None
        self.orchestrator: LifecycleOrchestrator | None = None

    def start(self) -> None:
        config = self._config or get_config()
        configure_logging(config.logging)
        log.info("** gantry starting up... **")
        self.context = ProcessContext.create(config)
        self._load_runtime_container(self.context)
        elapsed = self.context.elapsed_ms()
        self.context.events.emit(
            BootstrapCompleted(
                startup_ms=elapsed,
                host_name=self.context.host_name,
                modules=len(self.module_set or ()),
                services=len(self.orchestrator.handles),
            )
        )
        log.info(
            STARTUP_DISPLAY.format(elapsed=elapsed, host=self.context.host_name)
        )
        log.info("** gantry startup complete **")

    def _load_runtime_container(self, ctx: ProcessContext) -> None:
        mcfg = ctx.config.modules
        catalog = self._catalog or build_catalog()
        try:
            self.module_set = load_modules(
                self._static_modules,
                catalog,
                search_path=mcfg.search_path,
                file_name=mcfg.file_name,
                key=mcfg.key,
                events=ctx.events,
            )
            self.graph = ComponentGraph.build(self.module_set, ctx)
        except GantryError:
            log.error("Error loading gantry runtime container", exc_info=True)
            raise
        self.graph.get(API_SERVER_KEY).register_services(
            find_instances(self.graph, CapabilityRole.NETWORK_SERVICE)
        )
        signals = (
            ctx.config.lifecycle.shutdown_signals
            if self._signals is None
            else self._signals
        )
        self.orchestrator = LifecycleOrchestrator(
            events=ctx.events,
            signals=signals,
            register_exit=self._register_exit,
            on_complete=ctx.close,
        )
        self.orchestrator.start_all(
            find_instances(self.graph, CapabilityRole.LIFECYCLE_SERVICE)
        )
        self.orchestrator.register_shutdown()


def main() -> None:  # pragma: no cover
    try:
        Initializer().start()
    except Exception:
        log.critical("gantry startup failed; terminating", exc_info=True)
        logging.shutdown()
        # Services started before the failure are not stopped; os._exit
        # also ends their non-daemon server threads.
        os._exit(1)


if __name__ == "__main__":  # pragma: no cover
    main()
