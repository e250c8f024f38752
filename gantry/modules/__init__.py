"""Module system: descriptors, catalog and the dynamic loader."""
from __future__ import annotations

from .base import Module  # noqa: F401
from .catalog import ModuleCatalog  # noqa: F401
from .descriptor import ModuleDescriptor, ModuleSet, Origin  # noqa: F401
from .loader import (  # noqa: F401
    find_module_files,
    load_modules,
    read_module_identifiers,
)

__all__ = [
    "Module",
    "ModuleCatalog",
    "ModuleDescriptor",
    "ModuleSet",
    "Origin",
    "find_module_files",
    "load_modules",
    "read_module_identifiers",
]
