"""
Logging Event Handler

Infrastructure event handler that writes domain events to the audit logger.
Domain layer remains unaware of logging infrastructure.
"""

import logging

from fileshare.domain.events import (
    BlobCleanupFailedEvent,
    DomainEvent,
    ExpiredSharesPurgedEvent,
    GrantCreatedEvent,
    GrantRevokedEvent,
    ObjectDeletedEvent,
    ObjectUploadedEvent,
    ShareLinkAccessedEvent,
    ShareLinkCreatedEvent,
    ShareLinkRevokedEvent,
)

AUDIT_LOGGER_NAME = "fileshare.audit"


class LoggingEventHandler:
    """
    Infrastructure event handler for logging domain events.

    Link accesses are logged at INFO so every use of a bearer link leaves a
    trace; blob cleanup failures at WARNING.
    """

    def __init__(self, logger: logging.Logger):
        """
        Initialize with logger instance.

        Args:
            logger: Python logging.Logger instance
        """
        self.logger = logger

    def handle(self, event: DomainEvent) -> None:
        """
        Handle domain event by logging it.

        Args:
            event: Domain event to log
        """
        try:
            if isinstance(event, ObjectUploadedEvent):
                self._handle_object_uploaded(event)
            elif isinstance(event, ObjectDeletedEvent):
                self._handle_object_deleted(event)
            elif isinstance(event, GrantCreatedEvent):
                self._handle_grant_created(event)
            elif isinstance(event, GrantRevokedEvent):
                self._handle_grant_revoked(event)
            elif isinstance(event, ShareLinkCreatedEvent):
                self._handle_link_created(event)
            elif isinstance(event, ShareLinkRevokedEvent):
                self._handle_link_revoked(event)
            elif isinstance(event, ShareLinkAccessedEvent):
                self._handle_link_accessed(event)
            elif isinstance(event, BlobCleanupFailedEvent):
                self._handle_blob_cleanup_failed(event)
            elif isinstance(event, ExpiredSharesPurgedEvent):
                self._handle_shares_purged(event)
            else:
                self.logger.debug(
                    f"Unhandled event: {event.__class__.__name__} "
                    f"(aggregate_id={event.aggregate_id})"
                )
        except Exception as e:
            # Log handler errors but don't fail the operation
            self.logger.error(
                f"Error in logging event handler for {event.__class__.__name__}: {e}",
                exc_info=True,
            )

    def _handle_object_uploaded(self, event: ObjectUploadedEvent) -> None:
        self.logger.info(
            f"Object uploaded: object_id={event.aggregate_id}, "
            f"owner={event.owner_id}, size={event.size} bytes"
        )

    def _handle_object_deleted(self, event: ObjectDeletedEvent) -> None:
        self.logger.info(
            f"Object deleted: object_id={event.aggregate_id}, owner={event.owner_id}, "
            f"grants_removed={event.grants_removed}, links_removed={event.links_removed}"
        )

    def _handle_grant_created(self, event: GrantCreatedEvent) -> None:
        expires = event.expires_at.isoformat() if event.expires_at else "never"
        self.logger.info(
            f"Access granted: object_id={event.aggregate_id}, owner={event.owner_id}, "
            f"grantee={event.grantee_id}, expires={expires}"
        )

    def _handle_grant_revoked(self, event: GrantRevokedEvent) -> None:
        self.logger.info(
            f"Access revoked: object_id={event.aggregate_id}, owner={event.owner_id}, "
            f"grantee={event.grantee_id}, existed={event.existed}"
        )

    def _handle_link_created(self, event: ShareLinkCreatedEvent) -> None:
        expires = event.expires_at.isoformat() if event.expires_at else "never"
        self.logger.info(
            f"Share link created: object_id={event.object_id}, "
            f"owner={event.owner_id}, expires={expires}"
        )

    def _handle_link_revoked(self, event: ShareLinkRevokedEvent) -> None:
        self.logger.info(
            f"Share link revoked: object_id={event.object_id}, owner={event.owner_id}"
        )

    def _handle_link_accessed(self, event: ShareLinkAccessedEvent) -> None:
        self.logger.info(
            f"Share link used: object_id={event.aggregate_id}, identity={event.identity}, "
            f"owner={event.owner_id}, access_count={event.access_count}"
        )

    def _handle_blob_cleanup_failed(self, event: BlobCleanupFailedEvent) -> None:
        self.logger.warning(
            f"Blob cleanup failed: object_id={event.aggregate_id}, "
            f"blob_id={event.blob_id}, reason={event.reason}"
        )

    def _handle_shares_purged(self, event: ExpiredSharesPurgedEvent) -> None:
        self.logger.info(
            f"Expired shares purged: sweep_id={event.aggregate_id}, "
            f"grants={event.grants_purged}, links={event.links_purged}"
        )
