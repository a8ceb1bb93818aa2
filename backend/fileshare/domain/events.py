"""
Domain Events

Immutable records of significant state changes in the domain.
Events decouple side effects (audit logging) from core business logic.
"""

from abc import ABC
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class DomainEvent(ABC):
    """
    Base class for all domain events.

    Attributes:
        aggregate_id: ID of the aggregate that generated the event (object id or token)
        occurred_at: Timestamp when the event occurred
    """
    aggregate_id: str
    occurred_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert event to dictionary for serialization.

        Returns:
            Dictionary representation of the event
        """
        return {
            "event_type": self.__class__.__name__,
            "aggregate_id": self.aggregate_id,
            "occurred_at": self.occurred_at.isoformat(),
        }


@dataclass(frozen=True)
class ObjectUploadedEvent(DomainEvent):
    """
    Event emitted when an object has been stored and catalogued.

    Attributes:
        aggregate_id: Object ID
        owner_id: Uploading identity
        size: Size in bytes
    """
    owner_id: str
    size: int

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for serialization."""
        base_dict = super().to_dict()
        base_dict.update({"owner_id": self.owner_id, "size": self.size})
        return base_dict


@dataclass(frozen=True)
class ObjectDeletedEvent(DomainEvent):
    """
    Event emitted after an object and everything hanging off it is removed.

    Attributes:
        aggregate_id: Object ID
        owner_id: Deleting identity (always the owner)
        grants_removed: Grant rows purged by the cascade
        links_removed: Link rows purged by the cascade
    """
    owner_id: str
    grants_removed: int
    links_removed: int

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for serialization."""
        base_dict = super().to_dict()
        base_dict.update({
            "owner_id": self.owner_id,
            "grants_removed": self.grants_removed,
            "links_removed": self.links_removed,
        })
        return base_dict


@dataclass(frozen=True)
class GrantCreatedEvent(DomainEvent):
    """Event emitted when a grant is created or replaced."""
    owner_id: str
    grantee_id: str
    expires_at: Optional[datetime]

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for serialization."""
        base_dict = super().to_dict()
        base_dict.update({
            "owner_id": self.owner_id,
            "grantee_id": self.grantee_id,
            "expires_at": self.expires_at.isoformat() if self.expires_at else None,
        })
        return base_dict


@dataclass(frozen=True)
class GrantRevokedEvent(DomainEvent):
    """Event emitted when an owner revokes a user's access."""
    owner_id: str
    grantee_id: str
    existed: bool

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for serialization."""
        base_dict = super().to_dict()
        base_dict.update({
            "owner_id": self.owner_id,
            "grantee_id": self.grantee_id,
            "existed": self.existed,
        })
        return base_dict


@dataclass(frozen=True)
class ShareLinkCreatedEvent(DomainEvent):
    """
    Event emitted when a share link is issued.

    The token itself is deliberately not part of the event so it never
    reaches log files.
    """
    object_id: str
    owner_id: str
    expires_at: Optional[datetime]

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for serialization."""
        base_dict = super().to_dict()
        base_dict.update({
            "object_id": self.object_id,
            "owner_id": self.owner_id,
            "expires_at": self.expires_at.isoformat() if self.expires_at else None,
        })
        return base_dict


@dataclass(frozen=True)
class ShareLinkRevokedEvent(DomainEvent):
    """Event emitted when an owner revokes a share link."""
    object_id: str
    owner_id: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for serialization."""
        base_dict = super().to_dict()
        base_dict.update({"object_id": self.object_id, "owner_id": self.owner_id})
        return base_dict


@dataclass(frozen=True)
class ShareLinkAccessedEvent(DomainEvent):
    """
    Event emitted every time a share link is used to read an object.

    Link access bypasses the owner/grant rule, so each use is recorded.

    Attributes:
        aggregate_id: Object ID
        identity: Identity that presented the link
        owner_id: Link owner
        access_count: Counter value after this access
    """
    identity: str
    owner_id: str
    access_count: int

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for serialization."""
        base_dict = super().to_dict()
        base_dict.update({
            "identity": self.identity,
            "owner_id": self.owner_id,
            "access_count": self.access_count,
        })
        return base_dict


@dataclass(frozen=True)
class BlobCleanupFailedEvent(DomainEvent):
    """
    Event emitted when a blob could not be removed and was left orphaned.

    Attributes:
        aggregate_id: Object ID (or blob ID when no object record exists)
        blob_id: Orphaned blob
        reason: Failure description
    """
    blob_id: str
    reason: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for serialization."""
        base_dict = super().to_dict()
        base_dict.update({"blob_id": self.blob_id, "reason": self.reason})
        return base_dict


@dataclass(frozen=True)
class ExpiredSharesPurgedEvent(DomainEvent):
    """
    Event emitted after an expiry sweep.

    Attributes:
        aggregate_id: Sweep identifier
        grants_purged: Expired grant rows deleted
        links_purged: Expired link rows deleted
    """
    grants_purged: int
    links_purged: int

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for serialization."""
        base_dict = super().to_dict()
        base_dict.update({
            "grants_purged": self.grants_purged,
            "links_purged": self.links_purged,
        })
        return base_dict
