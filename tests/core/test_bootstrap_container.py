import pytest

from gantry.bootstrap import Bootstrap, Bundle, Environment
from gantry.modules import ModuleCatalog


class _Bundle(Bundle):
    def __init__(self, name, log, fail_run=False):
        self.name = name
        self.log = log
        self.fail_run = fail_run

    def initialize(self, bootstrap):
        self.log.append(("init", self.name))
        bootstrap.metric_registry.inc("bundles_initialized_total")

    def run(self, environment):
        self.log.append(("run", self.name))
        if self.fail_run:
            raise RuntimeError(f"{self.name} failed")


def test_initialize_runs_on_add_and_run_follows_registration_order():
    log: list = []
    bootstrap = Bootstrap()
    for n in ("a", "b", "c"):
        bootstrap.add_bundle(_Bundle(n, log))
    assert log == [("init", "a"), ("init", "b"), ("init", "c")]
    assert bootstrap.metric_registry.counter("bundles_initialized_total") == 3

    log.clear()
    bootstrap.run(bootstrap.environment())
    assert log == [("run", "a"), ("run", "b"), ("run", "c")]


def test_first_run_failure_stops_sequence_and_propagates():
    log: list = []
    bootstrap = Bootstrap()
    bootstrap.add_bundle(_Bundle("a", log))
    bootstrap.add_bundle(_Bundle("b", log, fail_run=True))
    bootstrap.add_bundle(_Bundle("c", log))
    log.clear()
    with pytest.raises(RuntimeError, match="b failed"):
        bootstrap.run(bootstrap.environment())
    assert log == [("run", "a"), ("run", "b")]
    assert bootstrap.metric_registry.counter(
        "bundle_run_failures_total", {"error_type": "bundle-run"}
    ) == 1


def test_shared_state_lives_with_the_container():
    app = object()
    with Bootstrap(application=app) as bootstrap:
        assert bootstrap.application is app
        assert bootstrap.catalog is None
        catalog = ModuleCatalog()
        bootstrap.catalog = catalog
        assert bootstrap.catalog is catalog
        registry = bootstrap.metric_registry
        assert registry is bootstrap.metric_registry
        gauges = registry.snapshot()["gauges"]
        assert gauges["process.threads"] >= 1
        assert isinstance(gauges["process.gc"], list)
        env = bootstrap.environment("test", attributes={"k": 1})
        assert isinstance(env, Environment)
        assert env.metrics is registry and env.attributes == {"k": 1}
    assert registry.snapshot()["gauges"] == {}


def test_separate_containers_do_not_share_registries():
    assert Bootstrap().metric_registry is not Bootstrap().metric_registry
