"""Component graph: configures modules, then resolves bindings.

Every binding is a singleton, constructed eagerly in binding order with its
declared dependencies constructed first.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List

from gantry.errors import GantryError, GraphResolutionError
from gantry.modules import ModuleSet

from .binder import Binder, Binding

log = logging.getLogger("gantry.graph")


class ComponentGraph:
    def __init__(self, bindings: List[Binding]) -> None:
        self._bindings = list(bindings)
        self._by_key: Dict[str, Binding] = {b.key: b for b in bindings}
        self._instances: Dict[str, Any] = {}

    @classmethod
    def build(cls, module_set: ModuleSet, context) -> "ComponentGraph":
        module_set.freeze()
        binder = Binder(context)
        for desc in module_set:
            try:
                desc.module.configure(binder.for_module(desc.identifier))
            except GantryError:
                raise
            except Exception as e:  # noqa: BLE001
                raise GraphResolutionError(
                    f"Module '{desc.identifier}' failed to configure: {e}"
                ) from e
        graph = cls(binder.bindings())
        graph._resolve_all()
        log.debug(
            "graph built: %d module(s), %d binding(s)",
            len(module_set),
            len(graph._bindings),
        )
        return graph

    def _resolve_all(self) -> None:
        for binding in self._bindings:
            self._resolve(binding.key, ())

    def _resolve(self, key: str, path: tuple[str, ...]) -> Any:
        if key in self._instances:
            return self._instances[key]
        if key in path:
            cycle = " -> ".join(path + (key,))
            raise GraphResolutionError(
                f"Dependency cycle: {cycle}", key=key
            )
        binding = self._by_key.get(key)
        if binding is None:
            needed_by = f" (required by '{path[-1]}')" if path else ""
            raise GraphResolutionError(
                f"No binding for key '{key}'{needed_by}", key=key
            )
        deps = {
            dep: self._resolve(dep, path + (key,)) for dep in binding.requires
        }
        try:
            instance = binding.provider(**deps)
        except GantryError:
            raise
        except Exception as e:  # noqa: BLE001
            raise GraphResolutionError(
                f"Provider for '{key}' failed: {e}", key=key
            ) from e
        self._instances[key] = instance
        return instance

    def get(self, key: str) -> Any:
        if key not in self._by_key:
            raise GraphResolutionError(f"No binding for key '{key}'", key=key)
        return self._resolve(key, ())

    def __contains__(self, key: object) -> bool:
        return key in self._by_key

    def keys(self) -> list[str]:
        return [b.key for b in self._bindings]

    def bindings(self) -> list[Binding]:
        return list(self._bindings)


__all__ = ["ComponentGraph"]
