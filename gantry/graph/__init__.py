"""Component graph (explicit bindings, declared dependencies)."""
from __future__ import annotations

from .binder import Binder, Binding  # noqa: F401
from .graph import ComponentGraph  # noqa: F401

__all__ = ["Binder", "Binding", "ComponentGraph"]
