"""Module descriptors and the ordered, append-only descriptor set."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable, Iterator, List

from gantry.errors import ModuleSetFrozenError

from .base import Module


class Origin(str, Enum):
    STATIC = "static"
    DYNAMIC = "dynamic"


@dataclass(frozen=True)
class ModuleDescriptor:
    identifier: str
    origin: Origin
    module: Module
    source: Path | None = None  # module-list file for dynamic entries


class ModuleSet:
    """Ordered descriptors; append-only until ``freeze()``."""

    def __init__(self, descriptors: Iterable[ModuleDescriptor] = ()):
        self._items: List[ModuleDescriptor] = list(descriptors)
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def append(self, descriptor: ModuleDescriptor) -> None:
        if self._frozen:
            raise ModuleSetFrozenError(
                f"Module set is frozen; cannot add '{descriptor.identifier}'"
            )
        self._items.append(descriptor)

    def extend(self, descriptors: Iterable[ModuleDescriptor]) -> None:
        batch = list(descriptors)
        if self._frozen and batch:
            raise ModuleSetFrozenError("Module set is frozen")
        self._items.extend(batch)

    def freeze(self) -> None:
        self._frozen = True

    def identifiers(self) -> list[str]:
        return [d.identifier for d in self._items]

    def modules(self) -> list[Module]:
        return [d.module for d in self._items]

    def __iter__(self) -> Iterator[ModuleDescriptor]:
        return iter(tuple(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def __getitem__(self, idx: int) -> ModuleDescriptor:
        return self._items[idx]
