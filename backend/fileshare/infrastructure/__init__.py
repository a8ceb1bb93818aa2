"""Infrastructure layer for Redis and blob storage backends."""

from .local_blob_store import LocalBlobStore
from .redis_catalog_repository import RedisObjectCatalog
from .redis_repository import RedisConnectionManager, RedisRepository
from .redis_share_repository import RedisShareRepository
from .redis_user_directory import RedisUserDirectory
from .storage_factory import BlobStoreFactory

__all__ = [
    "RedisRepository",
    "RedisConnectionManager",
    "RedisObjectCatalog",
    "RedisShareRepository",
    "RedisUserDirectory",
    "LocalBlobStore",
    "BlobStoreFactory",
]
