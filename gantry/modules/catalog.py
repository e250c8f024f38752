"""Identifier → constructor map used to instantiate modules.

Identifiers are opaque strings. Factories are registered explicitly at
build time (``register`` / ``register_module``) or pulled in from
installed distributions via the ``gantry.modules`` entry point group.
"""
from __future__ import annotations

import logging
from importlib.metadata import entry_points
from pathlib import Path
from typing import Callable, Dict

from gantry.errors import ModuleInstantiationError

from .base import Module

ENTRY_POINT_GROUP = "gantry.modules"

ModuleFactory = Callable[[], Module]

log = logging.getLogger("gantry.modules")


class ModuleCatalog:
    def __init__(self, factories: Dict[str, ModuleFactory] | None = None):
        self._factories: Dict[str, ModuleFactory] = {}
        for identifier, factory in (factories or {}).items():
            self.register(identifier, factory)

    def register(self, identifier: str, factory: ModuleFactory) -> None:
        if not identifier or not identifier.strip():
            raise ModuleInstantiationError("Module identifier cannot be empty")
        if identifier in self._factories:
            raise ModuleInstantiationError(
                f"Duplicate module identifier in catalog: {identifier}",
                identifier=identifier,
            )
        self._factories[identifier] = factory

    def register_module(self, identifier: str):
        """Decorator form of ``register`` for Module subclasses."""

        def _wrap(cls):
            self.register(identifier, cls)
            if not getattr(cls, "identifier", ""):
                cls.identifier = identifier
            return cls

        return _wrap

    def load_entry_points(self, group: str = ENTRY_POINT_GROUP) -> int:
        """Register every entry point of ``group``; returns the count."""
        count = 0
        for ep in entry_points(group=group):
            try:
                factory = ep.load()
            except Exception as e:  # noqa: BLE001
                raise ModuleInstantiationError(
                    f"Cannot load module entry point {ep.name}: {e}",
                    identifier=ep.name,
                ) from e
            self.register(ep.name, factory)
            count += 1
        log.debug("registered %d module entry points from %s", count, group)
        return count

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._factories

    def identifiers(self) -> list[str]:
        return list(self._factories)

    def instantiate(
        self, identifier: str, source: Path | None = None
    ) -> Module:
        factory = self._factories.get(identifier)
        where = f" (listed in {source})" if source else ""
        if factory is None:
            raise ModuleInstantiationError(
                f"Unknown module identifier '{identifier}'{where}",
                identifier=identifier,
                path=source,
            )
        try:
            module = factory()
        except Exception as e:  # noqa: BLE001
            raise ModuleInstantiationError(
                f"Error instantiating module '{identifier}'{where}: {e}",
                identifier=identifier,
                path=source,
            ) from e
        if not isinstance(module, Module):
            raise ModuleInstantiationError(
                f"Factory for '{identifier}' returned "
                f"{type(module).__name__}, not a Module",
                identifier=identifier,
                path=source,
            )
        if not module.identifier:
            module.identifier = identifier
        return module


__all__ = ["ModuleCatalog", "ModuleFactory", "ENTRY_POINT_GROUP"]
