"""Static modules, always loaded first and in this order."""
from __future__ import annotations

from gantry.modules import ModuleCatalog

from .config import ConfigModule
from .dashboard import DashboardModule
from .metrics import MetricsModule
from .server import API_SERVER_KEY, ServerModule

STATIC_MODULES = ("config", "metrics", "dashboard", "server")


def build_catalog(entry_points: bool = True) -> ModuleCatalog:
    """Catalog with the static modules plus installed plugin modules."""
    catalog = ModuleCatalog(
        {
            ConfigModule.identifier: ConfigModule,
            MetricsModule.identifier: MetricsModule,
            DashboardModule.identifier: DashboardModule,
            ServerModule.identifier: ServerModule,
        }
    )
    if entry_points:
        catalog.load_entry_points()
    return catalog


__all__ = [
    "API_SERVER_KEY",
    "STATIC_MODULES",
    "ConfigModule",
    "DashboardModule",
    "MetricsModule",
    "ServerModule",
    "build_catalog",
]
