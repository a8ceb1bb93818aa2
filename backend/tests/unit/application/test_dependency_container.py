"""
Unit tests for DependencyContainer.
"""

import logging
import threading

import pytest

from fileshare.application.dependency_container import DependencyContainer, DependencyNotFoundError
from fileshare.application.event_publisher import EventPublisher
from fileshare.domain.events import ExpiredSharesPurgedEvent


class DummyService:
    """Dummy service for testing."""

    def __init__(self, value="default"):
        self.value = value


@pytest.fixture
def container():
    """Create a fresh DependencyContainer for each test."""
    return DependencyContainer()


class TestRegistration:
    def test_register_singleton(self, container):
        service = DummyService("test")
        container.register_singleton(DummyService, service)

        assert container.resolve(DummyService) is service

    def test_transient_builds_new_instance_each_time(self, container):
        container.register_transient(DummyService, lambda: DummyService("transient"))

        first = container.resolve(DummyService)
        second = container.resolve(DummyService)

        assert first is not second

    def test_unregistered_type_raises(self, container):
        with pytest.raises(DependencyNotFoundError):
            container.resolve(DummyService)

    def test_transient_factory_may_resolve_other_services(self, container):
        container.register_singleton(str, "shared")
        container.register_transient(DummyService, lambda: DummyService(container.resolve(str)))

        assert container.resolve(DummyService).value == "shared"


class TestOverrides:
    def test_override_takes_precedence(self, container):
        container.register_singleton(DummyService, DummyService("real"))
        container.override(DummyService, DummyService("fake"))

        assert container.resolve(DummyService).value == "fake"

    def test_clear_overrides_restores_registration(self, container):
        container.register_singleton(DummyService, DummyService("real"))
        container.override(DummyService, DummyService("fake"))
        container.clear_overrides()

        assert container.resolve(DummyService).value == "real"


def test_concurrent_resolution_returns_same_singleton(container):
    service = DummyService()
    container.register_singleton(DummyService, service)
    resolved = []

    threads = [
        threading.Thread(target=lambda: resolved.append(container.resolve(DummyService)))
        for _ in range(20)
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert all(r is service for r in resolved)


def test_setup_event_handlers_logs_events_to_audit_logger(container, caplog, fixed_datetime):
    publisher = EventPublisher()
    container.setup_event_handlers(publisher)

    with caplog.at_level(logging.INFO, logger="fileshare.audit"):
        publisher.publish(ExpiredSharesPurgedEvent(
            aggregate_id="sweep-1", occurred_at=fixed_datetime, grants_purged=3, links_purged=0
        ))

    assert any(
        r.name == "fileshare.audit" and "grants=3" in r.getMessage() for r in caplog.records
    )


def test_failing_handler_class_does_not_abort_setup(container):
    class BrokenHandler:
        def __init__(self):
            raise RuntimeError("cannot build")

    publisher = EventPublisher()
    container.setup_event_handlers(publisher, [BrokenHandler])
