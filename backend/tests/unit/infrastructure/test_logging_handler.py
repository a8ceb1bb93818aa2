"""
Unit tests for LoggingEventHandler.
"""

import logging
from datetime import timedelta
from unittest.mock import Mock

import pytest

from fileshare.domain.events import (
    BlobCleanupFailedEvent,
    DomainEvent,
    GrantCreatedEvent,
    ObjectUploadedEvent,
    ShareLinkAccessedEvent,
)
from fileshare.infrastructure.event_handlers import AUDIT_LOGGER_NAME, LoggingEventHandler

OBJECT_ID = "a" * 32


@pytest.fixture
def logger():
    return Mock(spec=logging.Logger)


@pytest.fixture
def handler(logger):
    return LoggingEventHandler(logger)


def test_audit_logger_name():
    assert AUDIT_LOGGER_NAME == "fileshare.audit"


def test_link_access_is_logged_at_info(handler, logger, fixed_datetime):
    handler.handle(ShareLinkAccessedEvent(
        aggregate_id=OBJECT_ID, occurred_at=fixed_datetime,
        identity="bob", owner_id="alice", access_count=4,
    ))

    logger.info.assert_called_once()
    message = logger.info.call_args[0][0]
    assert "identity=bob" in message
    assert "access_count=4" in message


def test_blob_cleanup_failure_is_logged_at_warning(handler, logger, fixed_datetime):
    handler.handle(BlobCleanupFailedEvent(
        aggregate_id=OBJECT_ID, occurred_at=fixed_datetime, blob_id="b" * 32, reason="disk"
    ))

    logger.warning.assert_called_once()
    assert "b" * 32 in logger.warning.call_args[0][0]


def test_grant_expiry_is_rendered(handler, logger, fixed_datetime):
    handler.handle(GrantCreatedEvent(
        aggregate_id=OBJECT_ID, occurred_at=fixed_datetime, owner_id="alice",
        grantee_id="bob", expires_at=fixed_datetime + timedelta(hours=1),
    ))
    assert (fixed_datetime + timedelta(hours=1)).isoformat() in logger.info.call_args[0][0]


def test_unknown_event_is_logged_at_debug(handler, logger, fixed_datetime):
    from dataclasses import dataclass

    @dataclass(frozen=True)
    class CustomEvent(DomainEvent):
        pass

    handler.handle(CustomEvent(aggregate_id="x", occurred_at=fixed_datetime))

    logger.debug.assert_called_once()
    logger.info.assert_not_called()


def test_logger_failure_is_contained(handler, logger, fixed_datetime):
    logger.info.side_effect = RuntimeError("log sink down")

    handler.handle(ObjectUploadedEvent(
        aggregate_id=OBJECT_ID, occurred_at=fixed_datetime, owner_id="alice", size=3
    ))

    logger.error.assert_called_once()
