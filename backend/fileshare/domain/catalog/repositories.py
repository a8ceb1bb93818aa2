"""
Metadata Catalog Repositories

Repository interface for stored-object metadata.
Concrete implementations are in the infrastructure layer.

The catalog never touches the blob store or the grant ledger; cascading
deletion is orchestrated by the access control engine.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from .entities import StoredObject


class ObjectCatalog(ABC):
    """Abstract repository interface for stored-object metadata."""

    @abstractmethod
    def create(
        self, owner_id: str, name: str, content_type: str, size: int, blob_id: str
    ) -> StoredObject:
        """
        Create and persist a new object record with a fresh id.

        Args:
            owner_id: Owning identity
            name: Display name
            content_type: MIME type
            size: Size in bytes
            blob_id: Blob store reference

        Returns:
            The persisted StoredObject

        Raises:
            StorageFailureError: If the record cannot be written
        """
        pass  # pragma: no cover

    @abstractmethod
    def get(self, object_id: str) -> Optional[StoredObject]:
        """
        Retrieve an object record.

        Args:
            object_id: Object identifier

        Returns:
            StoredObject if found, None otherwise
        """
        pass  # pragma: no cover

    @abstractmethod
    def list_owned_by(self, owner_id: str) -> List[StoredObject]:
        """
        List every object owned by an identity (order unspecified).

        Args:
            owner_id: Owning identity

        Returns:
            List of StoredObject instances
        """
        pass  # pragma: no cover

    @abstractmethod
    def delete(self, object_id: str) -> bool:
        """
        Remove an object record. Deleting an absent record is a no-op.

        Args:
            object_id: Object identifier

        Returns:
            True if a record was removed, False if it was already absent
        """
        pass  # pragma: no cover
