"""Capability roles and extraction of role-bound instances from the graph."""
from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:  # pragma: no cover
    from gantry.graph import ComponentGraph


class CapabilityRole(str, Enum):
    NETWORK_SERVICE = "network-service"
    LIFECYCLE_SERVICE = "lifecycle-service"


def as_role(role: CapabilityRole | str) -> CapabilityRole:
    try:
        return CapabilityRole(role)
    except ValueError as e:
        raise ValueError(f"Unknown capability role '{role}'") from e


def find_instances(
    graph: "ComponentGraph", role: CapabilityRole | str
) -> list[Any]:
    """Every instance bound under ``role``, in binding order."""
    wanted = as_role(role)
    return [
        graph.get(binding.key)
        for binding in graph.bindings()
        if wanted in binding.roles
    ]


__all__ = ["CapabilityRole", "as_role", "find_instances"]
