"""API server: hosts every network-facing service's router."""
from __future__ import annotations

from typing import Any, Protocol, Sequence, runtime_checkable

from fastapi import APIRouter, FastAPI

from gantry.config import AggregatedConfig
from gantry.errors import LifecycleStateError

from .threaded import UvicornService


@runtime_checkable
class NetworkService(Protocol):
    """Network-facing capability: contributes a FastAPI router.

    An optional ``prefix`` attribute mounts the router under a path.
    """

    router: APIRouter


def create_api_app() -> FastAPI:
    app = FastAPI(
        title="gantry API",
        version="0.1.0",
        docs_url=None,
        redoc_url=None,
    )

    @app.get("/health")
    def health():  # noqa: D401
        return {"status": "ok"}

    return app


class ApiServer(UvicornService):
    def __init__(self, config: AggregatedConfig, app: FastAPI | None = None):
        super().__init__(
            app or create_api_app(),
            host=config.server.host,
            port=config.server.port,
            log_level=config.server.log_level,
            name="ApiServer",
        )
        self.services: list[Any] = []

    def register_services(self, services: Sequence[Any]) -> None:
        if self.running:
            raise LifecycleStateError(
                "Cannot register services on a running server"
            )
        for service in services:
            router = getattr(service, "router", None)
            if not isinstance(router, APIRouter):
                raise TypeError(
                    f"{type(service).__name__} has no APIRouter 'router'"
                )
            self.app.include_router(
                router, prefix=getattr(service, "prefix", "") or ""
            )
            self.services.append(service)


__all__ = ["ApiServer", "NetworkService", "create_api_app"]
