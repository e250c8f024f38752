import pytest
from fastapi import APIRouter
from fastapi.testclient import TestClient

from gantry.config import AggregatedConfig
from gantry_server.api.server import ApiServer, NetworkService
from gantry_server.modules.ping import PingService


class _Echo:
    prefix = "/echo"

    def __init__(self):
        self.router = APIRouter()

        @self.router.get("/{word}")
        def echo(word: str):  # noqa: D401
            return {"word": word}


def test_api_health_ok():
    server = ApiServer(AggregatedConfig())
    client = TestClient(server.app)
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_register_services_mounts_routers_in_order():
    server = ApiServer(AggregatedConfig())
    ping, echo = PingService(), _Echo()
    assert isinstance(ping, NetworkService)
    server.register_services([ping, echo])
    assert server.services == [ping, echo]
    client = TestClient(server.app)
    assert client.get("/ping").json() == {"pong": True}
    assert client.get("/echo/hi").json() == {"word": "hi"}


def test_register_services_rejects_objects_without_router():
    server = ApiServer(AggregatedConfig())
    with pytest.raises(TypeError):
        server.register_services([object()])


def test_server_binds_configured_address():
    cfg = AggregatedConfig.model_validate(
        {"server": {"host": "0.0.0.0", "port": 8123}}
    )
    server = ApiServer(cfg)
    assert (server.host, server.port) == ("0.0.0.0", 8123)
    assert server.name == "ApiServer"
    assert not server.running
    # stop before start is a no-op
    server.stop()
