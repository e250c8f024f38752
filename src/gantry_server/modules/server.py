from __future__ import annotations

from gantry.capabilities import CapabilityRole
from gantry.graph import Binder
from gantry.modules import Module

from gantry_server.api.dashboard import DashboardServer
from gantry_server.api.server import ApiServer

API_SERVER_KEY = "api_server"


class ServerModule(Module):
    """API server and dashboard server, both lifecycle-managed."""

    identifier = "server"

    def configure(self, binder: Binder) -> None:
        binder.bind(
            API_SERVER_KEY,
            ApiServer,
            requires=("config",),
            roles=(CapabilityRole.LIFECYCLE_SERVICE,),
        )
        if binder.context.config.dashboard.enabled:
            binder.bind(
                "dashboard_server",
                lambda config, dashboard_app: DashboardServer(
                    config, dashboard_app
                ),
                requires=("config", "dashboard_app"),
                roles=(CapabilityRole.LIFECYCLE_SERVICE,),
            )
