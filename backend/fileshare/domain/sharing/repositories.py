"""
Sharing Repositories

Storage interface for grant and share-link rows.
Concrete implementations are in the infrastructure layer.

Repositories store and return rows verbatim, expired or not. Expiry
semantics live in GrantLedger so that correctness never depends on a
storage engine's native TTL support.
"""

from abc import ABC, abstractmethod
from typing import ContextManager, List, Optional, Tuple

from .entities import Grant, ShareLink


class ShareRepository(ABC):
    """Abstract repository interface for grant and share-link persistence."""

    # Grants

    @abstractmethod
    def save_grant(self, grant: Grant) -> None:
        """
        Write a grant row, replacing any row for the same (object, grantee).

        Raises:
            StorageFailureError: If the row cannot be written
        """
        pass  # pragma: no cover

    @abstractmethod
    def get_grant(self, object_id: str, grantee_id: str) -> Optional[Grant]:
        """Retrieve the grant row for a pair, or None."""
        pass  # pragma: no cover

    @abstractmethod
    def list_grants_for_object(self, object_id: str) -> List[Grant]:
        """List every grant row for an object."""
        pass  # pragma: no cover

    @abstractmethod
    def list_grants_for_grantee(self, grantee_id: str) -> List[Grant]:
        """List every grant row naming an identity as grantee."""
        pass  # pragma: no cover

    @abstractmethod
    def list_all_grants(self) -> List[Grant]:
        """List every grant row (used by the expiry sweep)."""
        pass  # pragma: no cover

    @abstractmethod
    def delete_grant(self, object_id: str, grantee_id: str) -> bool:
        """
        Delete the grant row for a pair.

        Returns:
            True if a row was removed, False if none existed
        """
        pass  # pragma: no cover

    @abstractmethod
    def grant_lock(self, object_id: str, grantee_id: str) -> ContextManager:
        """
        Lock serializing read-modify-write cycles on one (object, grantee) pair.

        Raises:
            StorageFailureError: If the lock cannot be acquired
        """
        pass  # pragma: no cover

    # Share links

    @abstractmethod
    def save_link(self, link: ShareLink) -> bool:
        """
        Insert a new link row.

        Returns:
            True if written, False if the token is already taken
        """
        pass  # pragma: no cover

    @abstractmethod
    def get_link(self, token: str) -> Optional[ShareLink]:
        """Retrieve a link row by token, or None."""
        pass  # pragma: no cover

    @abstractmethod
    def list_links_for_object(self, object_id: str) -> List[ShareLink]:
        """List every link row for an object."""
        pass  # pragma: no cover

    @abstractmethod
    def list_all_links(self) -> List[ShareLink]:
        """List every link row (used by the expiry sweep)."""
        pass  # pragma: no cover

    @abstractmethod
    def delete_link(self, token: str) -> bool:
        """
        Delete a link row.

        Returns:
            True if a row was removed, False if none existed
        """
        pass  # pragma: no cover

    @abstractmethod
    def increment_link_access(self, token: str) -> int:
        """
        Atomically bump a link's access counter.

        Returns:
            The new counter value, or 0 if the link no longer exists
        """
        pass  # pragma: no cover

    # Cascade

    @abstractmethod
    def delete_all_for_object(self, object_id: str) -> Tuple[int, int]:
        """
        Delete every grant and link row tied to an object.

        Returns:
            Tuple of (grants_removed, links_removed)
        """
        pass  # pragma: no cover
