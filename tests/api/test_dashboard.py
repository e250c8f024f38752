from fastapi.testclient import TestClient

from gantry.config import AggregatedConfig
from gantry.metrics import MetricRegistry
from gantry_server.api.dashboard import DashboardServer, create_dashboard_app


def test_dashboard_endpoints():
    cfg = AggregatedConfig()
    metrics = MetricRegistry()
    metrics.inc("services_started_total", value=2)
    metrics.register_gauge("process.threads", lambda: 3)
    client = TestClient(create_dashboard_app(cfg, metrics))

    assert client.get("/health").json() == {"status": "ok"}
    snap = client.get("/metrics").json()
    assert snap["counters"]["services_started_total"] == 2
    assert snap["gauges"]["process.threads"] == 3
    conf = client.get("/config").json()
    assert conf["dashboard"]["port"] == cfg.dashboard.port


def test_dashboard_server_uses_dashboard_address():
    cfg = AggregatedConfig.model_validate({"dashboard": {"port": 9999}})
    app = create_dashboard_app(cfg, MetricRegistry())
    server = DashboardServer(cfg, app)
    assert server.port == 9999 and server.app is app
    assert server.name == "DashboardServer"
