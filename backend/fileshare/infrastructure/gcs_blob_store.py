"""
Google Cloud Storage Blob Store Implementation

Concrete implementation of BlobStore for Google Cloud Storage. Blobs are
stored as objects named by their generated id under an optional prefix.
"""

import logging
import uuid
from typing import BinaryIO, Optional

from google.cloud import storage
from google.cloud.exceptions import GoogleCloudError, NotFound

from fileshare.domain.blobs import BlobStore
from fileshare.domain.errors import StorageFailureError

logger = logging.getLogger(__name__)


class GCSBlobStore(BlobStore):
    """
    Google Cloud Storage implementation of BlobStore.

    Thread Safety:
        This implementation is thread-safe. The GCS client handles concurrent
        operations safely.

    Attributes:
        bucket_name: Name of the GCS bucket for blob storage
        prefix: Object name prefix inside the bucket
        client: Google Cloud Storage client instance
        bucket: GCS bucket object
    """

    def __init__(self, bucket_name: str, prefix: str = "blobs", client: Optional[storage.Client] = None):
        """
        Initialize the GCS blob store.

        Args:
            bucket_name: Name of the GCS bucket to use for storage
            prefix: Object name prefix inside the bucket
            client: Optional preconfigured storage client

        Raises:
            ValueError: If bucket_name is empty
        """
        if not bucket_name or not bucket_name.strip():
            raise ValueError("bucket_name cannot be empty")

        self.bucket_name = bucket_name
        self.prefix = prefix.strip("/")
        self.client = client or storage.Client()
        self.bucket = self.client.bucket(bucket_name)

    def _blob_name(self, blob_id: str) -> str:
        return f"{self.prefix}/{blob_id}" if self.prefix else blob_id

    @staticmethod
    def _is_valid_id(blob_id: str) -> bool:
        return isinstance(blob_id, str) and bool(blob_id.strip()) and "/" not in blob_id

    def put(self, content: BinaryIO) -> str:
        blob_id = uuid.uuid4().hex
        blob = self.bucket.blob(self._blob_name(blob_id))

        try:
            blob.upload_from_file(content)
        except GoogleCloudError as e:
            raise StorageFailureError(f"Failed to upload blob to GCS: {e}", e) from e

        return blob_id

    def get(self, blob_id: str) -> Optional[BinaryIO]:
        if not self._is_valid_id(blob_id):
            return None

        blob = self.bucket.blob(self._blob_name(blob_id))
        try:
            if not blob.exists():
                return None
            # Streaming reader; the caller consumes and closes it
            return blob.open("rb")
        except NotFound:
            return None
        except GoogleCloudError as e:
            raise StorageFailureError(f"Failed to read blob {blob_id} from GCS: {e}", e) from e

    def delete(self, blob_id: str) -> bool:
        if not self._is_valid_id(blob_id):
            return True

        try:
            self.bucket.blob(self._blob_name(blob_id)).delete()
        except NotFound:
            return True
        except GoogleCloudError as e:
            raise StorageFailureError(f"Failed to delete blob {blob_id} from GCS: {e}", e) from e
        return True

    def exists(self, blob_id: str) -> bool:
        if not self._is_valid_id(blob_id):
            return False
        try:
            return bool(self.bucket.blob(self._blob_name(blob_id)).exists())
        except GoogleCloudError as e:
            logger.warning(f"Could not check blob {blob_id} in GCS: {e}")
            return False
