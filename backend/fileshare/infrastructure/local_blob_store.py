"""
Local Blob Store Implementation

Concrete implementation of BlobStore for the local filesystem. Blobs are
stored under generated uuid4 ids, fanned out over two directory levels so
no single directory grows unbounded.
"""

import logging
import os
import re
import uuid
from pathlib import Path
from typing import BinaryIO, Optional

from fileshare.domain.blobs import BlobStore
from fileshare.domain.errors import StorageFailureError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 8192

_BLOB_ID_PATTERN = re.compile(r"^[0-9a-f]{32}$")


class LocalBlobStore(BlobStore):
    """
    Local filesystem implementation of BlobStore.

    Writes go to a temporary file in the destination directory and are
    renamed into place, so a crashed upload never leaves a partial blob
    under a valid id. Reads return an open file handle; the caller streams
    and closes it.

    Attributes:
        base_path: Base directory for blob storage
    """

    def __init__(self, base_path: str = "/tmp/fileshare-blobs"):
        """
        Initialize the local blob store.

        Args:
            base_path: Base directory for blob storage
        """
        self.base_path = Path(base_path)
        self._ensure_base_directory()

    def _ensure_base_directory(self) -> None:
        try:
            self.base_path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageFailureError(
                f"Failed to create storage directory: {self.base_path}", e
            ) from e

    def _path_for(self, blob_id: str) -> Optional[Path]:
        """Resolve a blob id to its path, or None for ids this store never issues."""
        if not isinstance(blob_id, str) or not _BLOB_ID_PATTERN.match(blob_id):
            return None
        return self.base_path / blob_id[:2] / blob_id[2:4] / blob_id

    def is_available(self) -> bool:
        """Check if the storage directory is writable."""
        return self.base_path.exists() and os.access(self.base_path, os.W_OK)

    def put(self, content: BinaryIO) -> str:
        blob_id = uuid.uuid4().hex
        full_path = self._path_for(blob_id)
        temp_path = full_path.with_name(f".{blob_id}.partial")

        try:
            with self._open_partial(temp_path) as f:
                while True:
                    chunk = content.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    f.write(chunk)
            os.replace(temp_path, full_path)
        except OSError as e:
            self._remove_partial(temp_path)
            raise StorageFailureError(f"Failed to write blob: {e}", e) from e
        except Exception:
            # Source stream failed mid-copy
            self._remove_partial(temp_path)
            raise

        return blob_id

    @staticmethod
    def _open_partial(temp_path: Path) -> BinaryIO:
        """
        Create the fan-out directory and open the temp file.

        A concurrent delete may prune the fan-out directory between mkdir
        and open, so the pair is retried once.
        """
        try:
            temp_path.parent.mkdir(parents=True, exist_ok=True)
            return open(temp_path, "wb")
        except FileNotFoundError:
            temp_path.parent.mkdir(parents=True, exist_ok=True)
            return open(temp_path, "wb")

    @staticmethod
    def _remove_partial(temp_path: Path) -> None:
        try:
            temp_path.unlink()
        except OSError:
            pass

    def get(self, blob_id: str) -> Optional[BinaryIO]:
        full_path = self._path_for(blob_id)
        if full_path is None:
            return None

        try:
            return open(full_path, "rb")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageFailureError(f"Failed to open blob {blob_id}: {e}", e) from e

    def delete(self, blob_id: str) -> bool:
        full_path = self._path_for(blob_id)
        if full_path is None:
            return True

        try:
            full_path.unlink()
        except FileNotFoundError:
            return True
        except OSError as e:
            raise StorageFailureError(f"Failed to delete blob {blob_id}: {e}", e) from e

        self._prune_empty_parents(full_path.parent)
        return True

    def exists(self, blob_id: str) -> bool:
        full_path = self._path_for(blob_id)
        return full_path is not None and full_path.is_file()

    def _prune_empty_parents(self, directory: Path) -> None:
        """Remove empty fan-out directories left behind by a delete."""
        while directory != self.base_path:
            try:
                directory.rmdir()
            except OSError:
                # Not empty or already gone
                return
            directory = directory.parent
