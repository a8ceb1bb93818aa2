"""
Blob Store Interface

Abstract interface for the content-addressable blob backend.

The access-control core treats the blob store as opaque: bytes go in under
a generated blob id and come back out as a stream. Chunking, replication and
physical layout are implementation details of the concrete store.
"""

from abc import ABC, abstractmethod
from typing import BinaryIO, Optional


class BlobStore(ABC):
    """
    Unified interface for blob storage operations.

    Contract Guarantees:
    - put() generates and returns a new, unique blob id
    - get() returns None for unknown blob ids (no exceptions)
    - delete() succeeds for unknown blob ids (idempotent)
    - exists() never raises for malformed ids

    Thread Safety:
    - Implementations must be safe for concurrent use by request threads
    - get() must not hold locks shared with other operations while the
      caller consumes the returned stream
    """

    @abstractmethod
    def put(self, content: BinaryIO) -> str:
        """
        Store a stream of bytes under a freshly generated blob id.

        Args:
            content: Binary stream positioned at the start of the content

        Returns:
            The new blob id

        Raises:
            StorageFailureError: If the content cannot be written
        """
        pass  # pragma: no cover

    @abstractmethod
    def get(self, blob_id: str) -> Optional[BinaryIO]:
        """
        Open a blob for reading.

        The caller is responsible for closing the returned stream.

        Args:
            blob_id: Blob identifier

        Returns:
            Binary stream if the blob exists, None otherwise

        Raises:
            StorageFailureError: If the backend is unreachable
        """
        pass  # pragma: no cover

    @abstractmethod
    def delete(self, blob_id: str) -> bool:
        """
        Delete a blob. Deleting an unknown blob succeeds.

        Args:
            blob_id: Blob identifier

        Returns:
            True if the blob is gone afterwards

        Raises:
            StorageFailureError: If the backend refuses the deletion
        """
        pass  # pragma: no cover

    @abstractmethod
    def exists(self, blob_id: str) -> bool:
        """
        Check whether a blob exists.

        Args:
            blob_id: Blob identifier

        Returns:
            True if the blob exists, False otherwise
        """
        pass  # pragma: no cover
