"""Dashboard: read-only health, metrics and config over HTTP."""
from __future__ import annotations

from fastapi import FastAPI

from gantry.config import AggregatedConfig
from gantry.metrics import MetricRegistry

from .threaded import UvicornService


def create_dashboard_app(
    config: AggregatedConfig, metrics: MetricRegistry
) -> FastAPI:
    app = FastAPI(
        title="gantry dashboard",
        version="0.1.0",
        docs_url=None,
        redoc_url=None,
    )

    @app.get("/health")
    def health():  # noqa: D401
        return {"status": "ok"}

    @app.get("/metrics")
    def metrics_snapshot():  # noqa: D401
        return metrics.snapshot()

    @app.get("/config")
    def config_dump():  # noqa: D401
        return config.model_dump()

    return app


class DashboardServer(UvicornService):
    def __init__(self, config: AggregatedConfig, app: FastAPI):
        super().__init__(
            app,
            host=config.dashboard.host,
            port=config.dashboard.port,
            log_level=config.server.log_level,
            name="DashboardServer",
        )


__all__ = ["DashboardServer", "create_dashboard_app"]
