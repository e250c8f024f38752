from pathlib import Path

import pytest

from gantry.capabilities import CapabilityRole, find_instances
from gantry.config import AggregatedConfig
from gantry.errors import ModuleInstantiationError, ServiceStartError
from gantry.lifecycle import ServiceState
from gantry.modules import Module, ModuleCatalog, Origin
from gantry_server.boot import Initializer
from gantry_server.modules import ConfigModule, MetricsModule
from tests.core.fakes import LIFECYCLE, NETWORK, RecordingService

CALLS: list = []


class FakeServer(RecordingService):
    def __init__(self):
        super().__init__("api", CALLS)
        self.registered = None

    def register_services(self, services):
        self.registered = list(services)


class FakeDashboardModule(Module):
    identifier = "dashboard"

    def configure(self, binder):
        binder.bind_instance(
            "dashboard_server", RecordingService("dashboard", CALLS), roles=LIFECYCLE
        )


class FakeServerModule(Module):
    identifier = "server"

    def configure(self, binder):
        binder.bind("api_server", FakeServer, roles=LIFECYCLE)


class XModule(Module):
    identifier = "X"
    fail_start = False

    def configure(self, binder):
        binder.bind_instance("x_endpoint", object(), roles=NETWORK)
        binder.bind_instance(
            "x_worker",
            RecordingService("x", CALLS, fail_start=self.fail_start),
            roles=LIFECYCLE,
        )


class FailingXModule(XModule):
    fail_start = True


def _catalog(x=XModule) -> ModuleCatalog:
    return ModuleCatalog(
        {
            "config": ConfigModule,
            "metrics": MetricsModule,
            "dashboard": FakeDashboardModule,
            "server": FakeServerModule,
            "X": x,
        }
    )


def _config(tmp_path: Path) -> AggregatedConfig:
    (tmp_path / "gantry-modules.yaml").write_text("modules: [X]\n", encoding="utf-8")
    return AggregatedConfig.model_validate(
        {
            "modules": {"search_path": [str(tmp_path)]},
            "logging": {"level": "error"},
        }
    )


@pytest.fixture(autouse=True)
def _reset_calls():
    CALLS.clear()
    yield
    CALLS.clear()


def test_end_to_end_assembly_start_and_single_hook(tmp_path: Path):
    exit_hooks: list = []
    init = Initializer(
        catalog=_catalog(),
        config=_config(tmp_path),
        signals=(),
        register_exit=exit_hooks.append,
    )
    init.start()

    assert init.module_set.identifiers() == [
        "config", "metrics", "dashboard", "server", "X"
    ]
    assert init.module_set[-1].origin is Origin.DYNAMIC
    assert init.module_set.frozen

    endpoint = init.graph.get("x_endpoint")
    assert find_instances(init.graph, CapabilityRole.NETWORK_SERVICE) == [endpoint]
    server = init.graph.get("api_server")
    assert server.registered == [endpoint]

    assert CALLS == [("start", "dashboard"), ("start", "api"), ("start", "x")]
    handles = init.orchestrator.handles
    assert all(h.state is ServiceState.STARTED for h in handles)
    assert len(exit_hooks) == 1
    hook = init.orchestrator.hook
    assert [h.name for h in hook.snapshot.handles] == ["dashboard", "api", "x"]
    metrics = init.context.metrics
    assert metrics.counter("services_started_total") == 3
    assert metrics.counter("modules_loaded_total", {"origin": "dynamic"}) == 1

    CALLS.clear()
    exit_hooks[0]()
    assert CALLS == [("stop", "dashboard"), ("stop", "api"), ("stop", "x")]
    # context torn down with the hook
    assert metrics.snapshot()["counters"] == {}


def test_start_failure_aborts_without_arming_hook(tmp_path: Path):
    exit_hooks: list = []
    init = Initializer(
        catalog=_catalog(FailingXModule),
        config=_config(tmp_path),
        signals=(),
        register_exit=exit_hooks.append,
    )
    with pytest.raises(ServiceStartError):
        init.start()
    assert CALLS == [("start", "dashboard"), ("start", "api"), ("start", "x")]
    assert exit_hooks == []
    assert init.orchestrator.hook is None


def test_unknown_dynamic_module_aborts_before_graph(tmp_path: Path):
    cfg = _config(tmp_path)
    (tmp_path / "gantry-modules.yaml").write_text(
        "modules: [X, Missing]\n", encoding="utf-8"
    )
    init = Initializer(
        catalog=_catalog(), config=cfg, signals=(), register_exit=lambda f: None
    )
    with pytest.raises(ModuleInstantiationError):
        init.start()
    assert init.module_set is None
    assert init.graph is None
    assert CALLS == []
