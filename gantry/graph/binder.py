"""Binding declarations collected from modules."""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Dict, Iterable, List, Tuple

from gantry.capabilities import CapabilityRole, as_role
from gantry.errors import GraphResolutionError

if TYPE_CHECKING:  # pragma: no cover
    from gantry.context import ProcessContext

Provider = Callable[..., Any]


@dataclass(frozen=True)
class Binding:
    key: str
    provider: Provider
    requires: Tuple[str, ...] = ()
    roles: Tuple[CapabilityRole, ...] = ()
    module: str | None = None


class Binder:
    """Handed to ``Module.configure``; records bindings in order.

    Keys are unique across the whole graph. A provider is called with the
    resolved instances of ``requires`` as keyword arguments.
    """

    def __init__(self, context: "ProcessContext") -> None:
        self.context = context
        self._bindings: Dict[str, Binding] = {}
        self._order: List[str] = []
        self._module: str | None = None

    def for_module(self, identifier: str) -> "Binder":
        self._module = identifier
        return self

    def bind(
        self,
        key: str,
        provider: Provider,
        requires: Iterable[str] = (),
        roles: Iterable[CapabilityRole | str] = (),
    ) -> None:
        if key in self._bindings:
            owner = self._bindings[key].module
            raise GraphResolutionError(
                f"Key '{key}' already bound by module '{owner}'", key=key
            )
        self._bindings[key] = Binding(
            key=key,
            provider=provider,
            requires=tuple(requires),
            roles=tuple(as_role(r) for r in roles),
            module=self._module,
        )
        self._order.append(key)

    def bind_instance(
        self,
        key: str,
        instance: Any,
        roles: Iterable[CapabilityRole | str] = (),
    ) -> None:
        self.bind(key, lambda: instance, roles=roles)

    def bindings(self) -> list[Binding]:
        return [self._bindings[k] for k in self._order]
