"""Unit tests for the per-view Registry dispatch object."""

import threading
import time

import pytest

from lackeys import NotDelegatedError, Registry, ServiceBase, lookup, register


class View:
    pass


class SubView(View):
    pass


class CountingService(ServiceBase):
    """Records how often it is built and which events it saw."""

    instances = 0

    def __init__(self):
        super().__init__()
        type(self).instances += 1

    def initialize_internals(self):
        self.events = []
        self.initialized = getattr(self, "initialized", 0) + 1

    def called(self):
        return self.events

    def echo(self, *args, **kwargs):
        return args, kwargs

    def touch(self):
        self.events.append("touch")


@pytest.fixture
def registered():
    """Register CountingService for View."""
    CountingService.instances = 0
    return register(CountingService, View, lambda r: (
        r.add_method("called")
         .add_method("echo")
         .add_callback("before_save", "touch")
         .add_callback("after_create", "touch")
         .add_callback("after_destroy", "missing_method")
    ))


class TestCapabilityQueries:
    """Tests for has_method, method_names and handles_event."""

    def test_has_method(self, registered):
        registry = Registry(View())

        assert registry.has_method("called") is True
        assert registry.has_method("other") is False

    def test_has_method_does_not_build_service(self, registered):
        registry = Registry(View())
        registry.has_method("called")

        assert registry.service_built is False
        assert CountingService.instances == 0

    def test_method_names(self, registered):
        assert Registry(View()).method_names() == frozenset({"called", "echo"})

    def test_handles_event(self, registered):
        registry = Registry(View())

        assert registry.handles_event("before_save") == "touch"
        assert registry.handles_event("after_save") is None

    def test_registration_properties(self, registered):
        registry = Registry(View())

        assert registry.registration is registered
        assert registry.service_class is CountingService


class TestUnregisteredView:
    """A view class without a registration never fails on queries or events."""

    def test_queries_answer_no(self):
        registry = Registry(View())

        assert registry.registration is None
        assert registry.service_class is None
        assert registry.has_method("called") is False
        assert registry.method_names() == frozenset()
        assert registry.handles_event("before_save") is None

    def test_fire_event_is_noop(self):
        Registry(View()).fire_event("before_save")

    def test_call_raises(self):
        with pytest.raises(NotDelegatedError, match="called"):
            Registry(View()).call("called")

    def test_service_raises(self):
        with pytest.raises(NotDelegatedError):
            Registry(View()).service


class TestCall:
    """Tests for forwarding calls to the service."""

    def test_returns_service_result(self, registered):
        registry = Registry(View())

        assert registry.call("echo", 1, key="v") == ((1,), {"key": "v"})

    def test_undeclared_method_raises(self, registered):
        registry = Registry(View())

        with pytest.raises(NotDelegatedError):
            registry.call("touch")
        assert registry.service_built is False

    def test_service_built_once(self, registered):
        registry = Registry(View())
        registry.call("called")
        registry.call("echo")
        registry.fire_event("before_save")

        assert CountingService.instances == 1
        assert registry.service.initialized == 1

    def test_service_knows_its_view(self, registered):
        view = View()
        registry = Registry(view)

        assert registry.service.view is view

    def test_separate_registries_get_separate_services(self, registered):
        first = Registry(View())
        second = Registry(View())

        assert first.service is not second.service

    def test_plain_service_class(self):
        class PlainService:
            def initialize_internals(self):
                self.ready = True

            def ready_state(self):
                return self.ready

        class PlainView:
            pass

        register(PlainService, PlainView, lambda r: r.add_method("ready_state"))
        registry = Registry(PlainView())

        assert registry.call("ready_state") is True
        assert not hasattr(registry.service, "view")

    def test_concurrent_first_access_builds_once(self, registered):
        class SlowService(CountingService):
            def __init__(self):
                time.sleep(0.01)
                super().__init__()

        register(SlowService, View, lambda r: r.add_method("called"))
        CountingService.instances = 0
        registry = Registry(View())
        barrier = threading.Barrier(4)
        seen = []

        def worker():
            barrier.wait()
            seen.append(registry.service)

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len({id(service) for service in seen}) == 1
        assert SlowService.instances == 1


class TestFireEvent:
    """Tests for lifecycle event forwarding."""

    def test_mapped_event_calls_method(self, registered):
        registry = Registry(View())
        registry.fire_event("before_save")

        assert registry.call("called") == ["touch"]

    def test_events_can_share_a_method(self, registered):
        registry = Registry(View())
        registry.fire_event("before_save")
        registry.fire_event("after_create")

        assert registry.call("called") == ["touch", "touch"]

    def test_unmapped_event_does_not_build_service(self, registered):
        registry = Registry(View())
        registry.fire_event("after_save")

        assert registry.service_built is False

    def test_missing_service_method_propagates(self, registered):
        with pytest.raises(AttributeError):
            Registry(View()).fire_event("after_destroy")


class TestClassResolution:
    """Registrations are looked up by the owner's exact runtime class."""

    def test_subclass_does_not_inherit(self, registered):
        registry = Registry(SubView())

        assert registry.has_method("called") is False

    def test_subclass_with_own_registration(self, registered):
        class SubService(ServiceBase):
            def sub_only(self):
                return "sub"

        register(SubService, SubView, lambda r: r.add_method("sub_only"))

        assert Registry(SubView()).call("sub_only") == "sub"
        assert Registry(View()).has_method("sub_only") is False

    def test_register_alias(self):
        class AliasService(ServiceBase):
            pass

        Registry.register(AliasService, View, lambda r: r.add_method("x"))

        assert Registry.lookup(View) is lookup(View)
        assert lookup(View).service_class is AliasService
