"""Sample plugin module: a network-facing ``/ping`` service.

Registered through the ``gantry.modules`` entry point group and enabled by
listing ``ping`` in a module-list file.
"""
from __future__ import annotations

from fastapi import APIRouter

from gantry.capabilities import CapabilityRole
from gantry.graph import Binder
from gantry.modules import Module


class PingService:
    prefix = ""

    def __init__(self) -> None:
        self.router = APIRouter()
        self.router.add_api_route("/ping", self.ping, methods=["GET"])

    def ping(self):  # noqa: D401
        return {"pong": True}


class PingModule(Module):
    identifier = "ping"

    def configure(self, binder: Binder) -> None:
        binder.bind(
            "ping_service",
            PingService,
            roles=(CapabilityRole.NETWORK_SERVICE,),
        )
