"""
Tests for the service container and dependency injection.
"""

import logging
import threading
import time

import pytest

from xizlr import Container, ContainerAware, ServiceProvider
from xizlr.exceptions import (
    ContainerClosedError,
    ContainerNotFoundError,
    DependencyResolutionError,
    ServiceNotFoundError,
)


class DictProvider(ServiceProvider):
    def __init__(self, services):
        self.services = services

    def get_services(self):
        return self.services


class Clock:
    def __init__(self):
        self.ticks = 0


class Scheduler:
    def __init__(self, clock, interval=60):
        self.clock = clock
        self.interval = interval


class TestRegistration:
    """Test registering service providers."""

    def test_register_and_get(self):
        container = Container()
        container.register_services(DictProvider({"clock": Clock}))
        assert container.has("clock")
        assert isinstance(container.get("clock"), Clock)

    def test_first_registration_wins(self):
        container = Container()
        container.register_services(DictProvider({"clock": lambda: "first"}))
        container.register_services(DictProvider({"clock": lambda: "second"}))
        assert container.get("clock") == "first"

    def test_rejects_non_provider(self):
        with pytest.raises(TypeError):
            Container().register_services({"clock": Clock})

    def test_rejects_non_callable_factory(self):
        with pytest.raises(TypeError):
            Container().register_services(DictProvider({"clock": Clock()}))

    def test_unknown_service(self):
        container = Container()
        assert not container.has("clock")
        with pytest.raises(ServiceNotFoundError) as exc_info:
            container.get("clock")
        assert '"clock"' in str(exc_info.value)


class TestServiceResolution:
    """Test lazy creation and caching of services."""

    def test_services_are_created_lazily(self):
        created = []

        def make_clock():
            created.append(True)
            return Clock()

        container = Container()
        container.register_services(DictProvider({"clock": make_clock}))
        assert created == []
        container.get("clock")
        assert created == [True]

    def test_services_are_cached(self):
        container = Container()
        container.register_services(DictProvider({"clock": Clock}))
        assert container.get("clock") is container.get("clock")

    def test_dependencies_injected_by_name(self):
        container = Container()
        container.register_services(DictProvider({"clock": Clock, "scheduler": Scheduler}))
        scheduler = container.get("scheduler")
        assert scheduler.clock is container.get("clock")
        assert scheduler.interval == 60

    def test_circular_dependency(self):
        def make_egg(chicken):
            return "egg"

        def make_chicken(egg):
            return "chicken"

        container = Container()
        container.register_services(DictProvider({"egg": make_egg, "chicken": make_chicken}))
        with pytest.raises(DependencyResolutionError) as exc_info:
            container.get("egg")
        assert "egg -> chicken -> egg" in str(exc_info.value)

    def test_failed_resolution_can_be_retried(self):
        attempts = []

        def make_flaky():
            attempts.append(True)
            if len(attempts) == 1:
                raise RuntimeError("not yet")
            return "ready"

        container = Container()
        container.register_services(DictProvider({"flaky": make_flaky}))
        with pytest.raises(RuntimeError):
            container.get("flaky")
        assert container.get("flaky") == "ready"


class TestCreateNew:
    """Test create_new."""

    def setup_method(self):
        self.container = Container()
        self.container.register_services(DictProvider({"clock": Clock}))

    def test_injects_services(self):
        scheduler = self.container.create_new(Scheduler)
        assert scheduler.clock is self.container.get("clock")

    def test_is_never_cached(self):
        assert self.container.create_new(Scheduler) is not self.container.create_new(Scheduler)

    def test_overrides_take_precedence(self):
        clock = Clock()
        scheduler = self.container.create_new(Scheduler, clock=clock, interval=5)
        assert scheduler.clock is clock
        assert scheduler.interval == 5

    def test_rejects_non_callable_factory(self):
        with pytest.raises(TypeError):
            self.container.create_new("Scheduler")

    def test_unresolvable_parameter(self):
        def needs_database(database):
            return database

        with pytest.raises(DependencyResolutionError) as exc_info:
            self.container.create_new(needs_database)
        assert '"database"' in str(exc_info.value)
        assert "needs_database" in str(exc_info.value)

    def test_var_keyword_receives_extra_overrides(self):
        def factory(clock, **options):
            return clock, options

        clock, options = self.container.create_new(factory, colour="blue")
        assert isinstance(clock, Clock)
        assert options == {"colour": "blue"}

    def test_extra_overrides_ignored_without_var_keyword(self):
        scheduler = self.container.create_new(Scheduler, colour="blue")
        assert not hasattr(scheduler, "colour")

    def test_attaches_container_to_container_aware(self):
        class Widget(ContainerAware):
            pass

        widget = self.container.create_new(Widget)
        assert widget.get_container() is self.container
        assert isinstance(widget.get("clock"), Clock)


class TestContainerAware:
    """Test the ContainerAware mixin."""

    def test_without_container(self):
        with pytest.raises(ContainerNotFoundError) as exc_info:
            ContainerAware().get_container()
        assert "bootstrap" in str(exc_info.value)

    def test_container_is_per_instance(self):
        container = Container()
        first = ContainerAware()
        first.set_container(container)
        assert ContainerAware()._container is None
        assert first.get_container() is container

    def test_create_new_delegates_to_container(self):
        container = Container()
        container.register_services(DictProvider({"clock": Clock}))
        aware = ContainerAware()
        aware.set_container(container)
        scheduler = aware.create_new(Scheduler, interval=1)
        assert scheduler.clock is container.get("clock")


class TestClose:
    """Test tearing services down."""

    def test_closes_in_reverse_creation_order(self):
        closed = []

        class Closable:
            def __init__(self, name):
                self.name = name

            def close(self):
                closed.append(self.name)

        container = Container()
        container.register_services(DictProvider({
            "first": lambda: Closable("first"),
            "second": lambda: Closable("second"),
        }))
        container.get("first")
        container.get("second")
        container.close()
        assert closed == ["second", "first"]

    def test_close_is_idempotent(self):
        closed = []

        class Closable:
            def close(self):
                closed.append(True)

        container = Container()
        container.register_services(DictProvider({"closable": Closable}))
        container.get("closable")
        container.close()
        container.close()
        assert closed == [True]

    def test_close_errors_are_logged(self, caplog):
        closed = []

        class Broken:
            def close(self):
                raise RuntimeError("stuck")

        class Closable:
            def close(self):
                closed.append(True)

        container = Container()
        container.register_services(DictProvider({"closable": Closable, "broken": Broken}))
        container.get("closable")
        container.get("broken")

        with caplog.at_level(logging.ERROR, logger="xizlr.container"):
            container.close()

        assert closed == [True]
        assert "Error closing service broken" in caplog.text

    def test_uncreated_services_are_not_created(self):
        created = []
        container = Container()
        container.register_services(DictProvider({"clock": lambda: created.append(True)}))
        container.close()
        assert created == []

    def test_closed_container_refuses_new_services(self):
        container = Container()
        container.register_services(DictProvider({"clock": Clock}))
        container.close()
        with pytest.raises(ContainerClosedError):
            container.get("clock")
        with pytest.raises(ContainerClosedError):
            container.create_new(Scheduler)


class TestConcurrency:
    """Test services requested from several worker threads at once."""

    def test_concurrent_first_use_creates_one_instance(self):
        created = []

        def make_slow():
            created.append(True)
            time.sleep(0.2)
            return object()

        container = Container()
        container.register_services(DictProvider({"slow": make_slow}))

        results = []
        errors = []

        def worker():
            try:
                results.append(container.get("slow"))
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=worker) for _ in range(2)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        assert len(created) == 1
        assert results[0] is results[1]
