"""Module interface.

A module is zero-argument constructible and declares its bindings (and the
capability roles they satisfy) when the graph calls ``configure``.
Modules must not allocate heavy resources in ``__init__``.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from gantry.graph import Binder


class Module(ABC):
    identifier: str = ""

    @abstractmethod
    def configure(self, binder: "Binder") -> None:
        """Declare bindings on the binder."""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.identifier or '?'}>"
