"""
Test fixtures package.

Provides in-memory repository implementations and test helpers.
"""

from .mock_repositories import (
    FailingBlobStore,
    FailingCatalog,
    InMemoryBlobStore,
    InMemoryObjectCatalog,
    InMemoryShareRepository,
    InMemoryUserDirectory,
    MutableClock,
    RecordingEventHandler,
)

__all__ = [
    "FailingBlobStore",
    "FailingCatalog",
    "InMemoryBlobStore",
    "InMemoryObjectCatalog",
    "InMemoryShareRepository",
    "InMemoryUserDirectory",
    "MutableClock",
    "RecordingEventHandler",
]
