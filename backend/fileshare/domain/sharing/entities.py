"""
Sharing Entities

Grants (user-to-user access) and share links (token-bearing access), each
with an optional expiry. An expired entity is semantically absent even while
its row still exists in storage.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Dict, Optional

from ..clock import format_timestamp, is_past, parse_timestamp, utc_now


@dataclass(frozen=True)
class Grant:
    """
    Authorization for one identity to read one object.

    At most one Grant exists per (object_id, grantee_id) pair.
    """

    object_id: str
    grantee_id: str
    owner_id: str
    created_at: datetime
    expires_at: Optional[datetime] = None

    @classmethod
    def create(
        cls,
        object_id: str,
        grantee_id: str,
        owner_id: str,
        expires_at: Optional[datetime] = None,
        now: Optional[datetime] = None,
    ) -> "Grant":
        return cls(
            object_id=object_id,
            grantee_id=grantee_id,
            owner_id=owner_id,
            created_at=now or utc_now(),
            expires_at=expires_at,
        )

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """Check if the grant has expired."""
        return is_past(self.expires_at, now or utc_now())

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "object_id": self.object_id,
            "grantee_id": self.grantee_id,
            "owner_id": self.owner_id,
            "created_at": format_timestamp(self.created_at),
            "expires_at": format_timestamp(self.expires_at),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Grant":
        """Create instance from dictionary."""
        return cls(
            object_id=data["object_id"],
            grantee_id=data["grantee_id"],
            owner_id=data["owner_id"],
            created_at=parse_timestamp(data["created_at"]),
            expires_at=parse_timestamp(data.get("expires_at")),
        )


@dataclass(frozen=True)
class ShareLink:
    """
    Token-bearing authorization usable by any authenticated identity.

    ``access_count`` is best-effort: concurrent accesses may be reported
    late but are never subtracted.
    """

    token: str
    object_id: str
    owner_id: str
    created_at: datetime
    expires_at: Optional[datetime] = None
    access_count: int = 0

    @classmethod
    def create(
        cls,
        token: str,
        object_id: str,
        owner_id: str,
        expires_at: Optional[datetime] = None,
        now: Optional[datetime] = None,
    ) -> "ShareLink":
        return cls(
            token=token,
            object_id=object_id,
            owner_id=owner_id,
            created_at=now or utc_now(),
            expires_at=expires_at,
        )

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """Check if the link has expired."""
        return is_past(self.expires_at, now or utc_now())

    def with_access_count(self, access_count: int) -> "ShareLink":
        return replace(self, access_count=access_count)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "token": self.token,
            "object_id": self.object_id,
            "owner_id": self.owner_id,
            "created_at": format_timestamp(self.created_at),
            "expires_at": format_timestamp(self.expires_at),
            "access_count": self.access_count,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ShareLink":
        """Create instance from dictionary."""
        return cls(
            token=data["token"],
            object_id=data["object_id"],
            owner_id=data["owner_id"],
            created_at=parse_timestamp(data["created_at"]),
            expires_at=parse_timestamp(data.get("expires_at")),
            access_count=int(data.get("access_count", 0)),
        )
