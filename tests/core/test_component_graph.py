import pytest

from gantry.capabilities import CapabilityRole, find_instances
from gantry.errors import GraphResolutionError
from gantry.graph import ComponentGraph
from gantry.modules import Module, ModuleDescriptor, ModuleSet, Origin
from tests.core.fakes import LIFECYCLE, NETWORK


class _Fn(Module):
    def __init__(self, identifier, fn):
        self.identifier = identifier
        self._fn = fn

    def configure(self, binder):
        self._fn(binder)


def _set(*mods: Module) -> ModuleSet:
    return ModuleSet(
        ModuleDescriptor(m.identifier, Origin.STATIC, m) for m in mods
    )


def test_dependencies_built_first_and_singletons_shared(context):
    built = []

    def configure(b):
        b.bind("b", lambda a: built.append("b") or ("B", a), requires=["a"])
        b.bind("a", lambda: built.append("a") or "A")

    graph = ComponentGraph.build(_set(_Fn("m", configure)), context)
    assert built == ["a", "b"]
    assert graph.get("b") == ("B", "A")
    assert graph.get("b") is graph.get("b")
    assert graph.keys() == ["b", "a"]


def test_build_freezes_module_set(context):
    ms = _set(_Fn("m", lambda b: None))
    ComponentGraph.build(ms, context)
    assert ms.frozen


def test_binder_exposes_context(context):
    graph = ComponentGraph.build(
        _set(_Fn("m", lambda b: b.bind_instance("cfg", b.context.config))),
        context,
    )
    assert graph.get("cfg") is context.config


def test_duplicate_key_across_modules_rejected(context):
    first = _Fn("one", lambda b: b.bind_instance("k", 1))
    second = _Fn("two", lambda b: b.bind_instance("k", 2))
    with pytest.raises(GraphResolutionError) as ei:
        ComponentGraph.build(_set(first, second), context)
    assert "one" in str(ei.value)


def test_missing_dependency_and_cycle(context):
    with pytest.raises(GraphResolutionError) as ei:
        ComponentGraph.build(
            _set(_Fn("m", lambda b: b.bind("x", lambda y: y, requires=["y"]))),
            context,
        )
    assert ei.value.key == "y"

    def cyclic(b):
        b.bind("p", lambda q: q, requires=["q"])
        b.bind("q", lambda p: p, requires=["p"])

    with pytest.raises(GraphResolutionError) as ei:
        ComponentGraph.build(_set(_Fn("m", cyclic)), context)
    assert "cycle" in str(ei.value).lower()


def test_provider_and_configure_failures_wrapped(context):
    def bad_provider(b):
        b.bind("x", lambda: 1 / 0)

    with pytest.raises(GraphResolutionError) as ei:
        ComponentGraph.build(_set(_Fn("m", bad_provider)), context)
    assert isinstance(ei.value.__cause__, ZeroDivisionError)

    def bad_configure(b):
        raise KeyError("nope")

    with pytest.raises(GraphResolutionError):
        ComponentGraph.build(_set(_Fn("m", bad_configure)), context)


def test_find_instances_by_role_in_binding_order(context):
    def one(b):
        b.bind_instance("net1", "N1", roles=NETWORK)
        b.bind_instance("svc1", "S1", roles=LIFECYCLE)
        b.bind_instance("plain", "P")

    def two(b):
        b.bind_instance("both", "B", roles=NETWORK + LIFECYCLE)
        b.bind_instance("net2", "N2", roles=["network-service"])

    graph = ComponentGraph.build(_set(_Fn("one", one), _Fn("two", two)), context)
    assert find_instances(graph, CapabilityRole.NETWORK_SERVICE) == ["N1", "B", "N2"]
    assert find_instances(graph, "lifecycle-service") == ["S1", "B"]
    with pytest.raises(ValueError):
        find_instances(graph, "no-such-role")


def test_find_instances_does_not_deduplicate_shared_instances(context):
    shared = object()

    def configure(b):
        b.bind_instance("a", shared, roles=LIFECYCLE)
        b.bind_instance("b", shared, roles=LIFECYCLE)

    graph = ComponentGraph.build(_set(_Fn("m", configure)), context)
    assert find_instances(graph, CapabilityRole.LIFECYCLE_SERVICE) == [shared, shared]
