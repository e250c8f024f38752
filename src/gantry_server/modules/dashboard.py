from __future__ import annotations

from gantry.graph import Binder
from gantry.modules import Module

from gantry_server.api.dashboard import create_dashboard_app


class DashboardModule(Module):
    identifier = "dashboard"

    def configure(self, binder: Binder) -> None:
        binder.bind(
            "dashboard_app",
            create_dashboard_app,
            requires=("config", "metrics"),
        )
