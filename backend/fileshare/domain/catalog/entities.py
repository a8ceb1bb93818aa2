"""
Metadata Catalog Entities

Domain entity describing a stored object. The record is immutable: a
replacement upload produces a new StoredObject with a new id.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict

from ..clock import format_timestamp, parse_timestamp, utc_now


@dataclass(frozen=True)
class StoredObject:
    """
    Entity representing one uploaded file and the blob that holds its bytes.

    Attributes:
        object_id: Opaque unique id (32 lowercase hex characters)
        owner_id: Identity that uploaded the object; never changes
        name: Display name supplied at upload
        content_type: MIME type supplied at upload
        size: Size in bytes
        blob_id: Reference into the blob store; never changes
        created_at: Upload timestamp (UTC)
    """

    object_id: str
    owner_id: str
    name: str
    content_type: str
    size: int
    blob_id: str
    created_at: datetime

    @classmethod
    def create(
        cls, owner_id: str, name: str, content_type: str, size: int, blob_id: str
    ) -> "StoredObject":
        """
        Factory method assigning a fresh id and creation timestamp.

        Args:
            owner_id: Owning identity
            name: Display name
            content_type: MIME type
            size: Size in bytes
            blob_id: Blob store reference returned by ``put``

        Returns:
            New StoredObject instance
        """
        return cls(
            object_id=uuid.uuid4().hex,
            owner_id=owner_id,
            name=name,
            content_type=content_type,
            size=size,
            blob_id=blob_id,
            created_at=utc_now(),
        )

    def is_owned_by(self, identity: str) -> bool:
        return self.owner_id == identity

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "object_id": self.object_id,
            "owner_id": self.owner_id,
            "name": self.name,
            "content_type": self.content_type,
            "size": self.size,
            "blob_id": self.blob_id,
            "created_at": format_timestamp(self.created_at),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StoredObject":
        """Create instance from dictionary."""
        return cls(
            object_id=data["object_id"],
            owner_id=data["owner_id"],
            name=data["name"],
            content_type=data["content_type"],
            size=int(data["size"]),
            blob_id=data["blob_id"],
            created_at=parse_timestamp(data["created_at"]),
        )
