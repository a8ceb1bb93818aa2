"""
Shared pytest fixtures and configuration for the fileshare test suite.

This module provides:
- Hypothesis configuration for property-based testing
- A controllable clock for expiry tests
- In-memory collaborators wired into an AccessControlEngine
"""

from datetime import datetime, timezone

import pytest
from hypothesis import HealthCheck, Phase, settings

from fileshare.application import AccessControlEngine, ExpiryReaper, UploadPolicy
from fileshare.application.event_publisher import EventPublisher
from fileshare.domain.sharing import GrantLedger
from fileshare.domain.users import UserInfo

from tests.fixtures.mock_repositories import (
    InMemoryBlobStore,
    InMemoryObjectCatalog,
    InMemoryShareRepository,
    InMemoryUserDirectory,
    MutableClock,
    RecordingEventHandler,
)

# Register Hypothesis profiles
settings.register_profile(
    "default",
    max_examples=100,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow, HealthCheck.function_scoped_fixture],
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.target, Phase.shrink],
)
settings.register_profile(
    "ci",
    max_examples=200,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow, HealthCheck.function_scoped_fixture],
)
settings.register_profile(
    "dev",
    max_examples=10,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow, HealthCheck.function_scoped_fixture],
)
settings.load_profile("default")


# =============================================================================
# Time Fixtures
# =============================================================================

@pytest.fixture
def fixed_datetime() -> datetime:
    """Provide a fixed aware datetime for deterministic testing."""
    return datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock(fixed_datetime) -> MutableClock:
    """Clock starting at fixed_datetime that tests can advance."""
    return MutableClock(fixed_datetime)


# =============================================================================
# In-memory Collaborators
# =============================================================================

@pytest.fixture
def catalog() -> InMemoryObjectCatalog:
    return InMemoryObjectCatalog()


@pytest.fixture
def share_repository() -> InMemoryShareRepository:
    return InMemoryShareRepository()


@pytest.fixture
def blob_store() -> InMemoryBlobStore:
    return InMemoryBlobStore()


@pytest.fixture
def user_directory() -> InMemoryUserDirectory:
    """User directory pre-populated with alice, bob and carol."""
    directory = InMemoryUserDirectory()
    directory.register(UserInfo("alice", "alice@example.com", "Alice"))
    directory.register(UserInfo("bob", "bob@example.com", "Bob"))
    directory.register(UserInfo("carol", "carol@example.com", "Carol"))
    return directory


@pytest.fixture
def ledger(share_repository, clock) -> GrantLedger:
    return GrantLedger(share_repository, clock=clock)


@pytest.fixture
def event_publisher() -> EventPublisher:
    return EventPublisher()


@pytest.fixture
def recorded_events(event_publisher) -> RecordingEventHandler:
    """Handler capturing every event published during a test."""
    from fileshare.domain.events import DomainEvent

    recorder = RecordingEventHandler()
    event_publisher.subscribe(DomainEvent, recorder.handle)
    return recorder


@pytest.fixture
def engine(catalog, ledger, blob_store, user_directory, event_publisher, clock) -> AccessControlEngine:
    """AccessControlEngine over in-memory collaborators with a permissive upload policy."""
    return AccessControlEngine(
        catalog=catalog,
        ledger=ledger,
        blob_store=blob_store,
        user_directory=user_directory,
        event_publisher=event_publisher,
        upload_policy=UploadPolicy.permissive(),
        clock=clock,
    )


@pytest.fixture
def reaper(ledger, event_publisher) -> ExpiryReaper:
    return ExpiryReaper(ledger, event_publisher)


# =============================================================================
# Pytest Configuration Hooks
# =============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests (require external services)"
    )
    config.addinivalue_line(
        "markers", "contract: Contract tests (verify interface compliance)"
    )
    config.addinivalue_line(
        "markers", "property: Property-based tests using Hypothesis"
    )


def pytest_collection_modifyitems(config, items):
    """
    Automatically mark tests based on their location.

    - tests/unit/* -> @pytest.mark.unit
    - tests/integration/* -> @pytest.mark.integration
    - tests/contracts/* -> @pytest.mark.contract
    - tests/property/* -> @pytest.mark.property
    """
    for item in items:
        test_path = str(item.fspath)

        if "/unit/" in test_path or "\\unit\\" in test_path:
            item.add_marker(pytest.mark.unit)
        elif "/integration/" in test_path or "\\integration\\" in test_path:
            item.add_marker(pytest.mark.integration)
        elif "/contracts/" in test_path or "\\contracts\\" in test_path:
            item.add_marker(pytest.mark.contract)
        elif "/property/" in test_path or "\\property\\" in test_path:
            item.add_marker(pytest.mark.property)
