import socket

import pytest

from gantry.config import AggregatedConfig
from gantry.errors import ServiceStartError
from gantry.lifecycle import ServiceHandle, ServiceState
from gantry_server.api.server import ApiServer, create_api_app
from gantry_server.api.threaded import UvicornService


def test_api_server_starts_on_ephemeral_port_and_stops():
    cfg = AggregatedConfig.model_validate(
        {"server": {"host": "127.0.0.1", "port": 0}}
    )
    server = ApiServer(cfg)
    server.start()
    try:
        assert server.running
    finally:
        server.stop()
    assert not server.running


def test_bind_failure_becomes_start_error():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as busy:
        busy.bind(("127.0.0.1", 0))
        busy.listen(1)
        port = busy.getsockname()[1]

        service = UvicornService(create_api_app(), "127.0.0.1", port)
        handle = ServiceHandle(service)
        with pytest.raises(ServiceStartError) as ei:
            handle.start()
    assert isinstance(ei.value.__cause__, RuntimeError)
    assert handle.state is ServiceState.FAILED
    assert not service.running
