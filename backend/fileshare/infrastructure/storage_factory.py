"""
Blob Store Factory

Picks the blob store implementation from configuration. GCS is used when a
bucket is configured and reachable; otherwise blobs go to the local
filesystem.
"""

import logging

from fileshare.domain.blobs import BlobStore
from fileshare.infrastructure.local_blob_store import LocalBlobStore

logger = logging.getLogger(__name__)


class BlobStoreFactory:
    """Factory for creating the configured BlobStore."""

    @staticmethod
    def create_blob_store(settings) -> BlobStore:
        """
        Create the blob store described by settings.

        Args:
            settings: Settings with gcs_bucket_name and blob_storage_dir

        Returns:
            GCSBlobStore when a bucket is configured and the client can be
            created, LocalBlobStore otherwise
        """
        if settings.gcs_bucket_name:
            try:
                return BlobStoreFactory._create_gcs_store(settings.gcs_bucket_name)
            except Exception as e:
                logger.warning(
                    f"GCS blob store unavailable for bucket {settings.gcs_bucket_name}, "
                    f"falling back to local storage: {e}"
                )

        return BlobStoreFactory._create_local_store(settings.blob_storage_dir)

    @staticmethod
    def _create_gcs_store(bucket_name: str) -> BlobStore:
        from fileshare.infrastructure.gcs_blob_store import GCSBlobStore

        store = GCSBlobStore(bucket_name)
        logger.info(f"Blob store: using GCS bucket {bucket_name}")
        return store

    @staticmethod
    def _create_local_store(base_path: str) -> BlobStore:
        store = LocalBlobStore(base_path)
        logger.info(f"Blob store: using local filesystem at {base_path}")
        return store
