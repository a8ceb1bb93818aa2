"""
Redis Object Catalog Implementation

Concrete Redis-based implementation of the ObjectCatalog interface.

Keys:
- ``object:{object_id}``  -> StoredObject JSON
- ``owner_objects:{owner_id}`` -> set of object ids
"""

import logging
from typing import List, Optional

from fileshare.domain.catalog import ObjectCatalog, StoredObject
from fileshare.domain.errors import StorageFailureError

from .redis_repository import RedisRepository

logger = logging.getLogger(__name__)


class RedisObjectCatalog(ObjectCatalog):
    """
    Redis-based implementation of ObjectCatalog.

    The object record is written before the owner index, and removed
    after it, so an index entry may briefly point at nothing but a record
    is never unreachable from its owner. Reads tolerate stale index entries.
    """

    def __init__(self, redis_repository: RedisRepository):
        """
        Initialize with Redis repository.

        Args:
            redis_repository: RedisRepository instance from infrastructure layer
        """
        self.redis_repo = redis_repository
        self.object_prefix = "object"
        self.owner_prefix = "owner_objects"

    def _object_key(self, object_id: str) -> str:
        return f"{self.object_prefix}:{object_id}"

    def _owner_key(self, owner_id: str) -> str:
        return f"{self.owner_prefix}:{owner_id}"

    def create(
        self, owner_id: str, name: str, content_type: str, size: int, blob_id: str
    ) -> StoredObject:
        stored_object = StoredObject.create(owner_id, name, content_type, size, blob_id)

        if not self.redis_repo.set_json_if_absent(
            self._object_key(stored_object.object_id), stored_object.to_dict()
        ):
            raise StorageFailureError(f"Object id collision: {stored_object.object_id}")
        self.redis_repo.add_to_set(self._owner_key(owner_id), stored_object.object_id)
        return stored_object

    def get(self, object_id: str) -> Optional[StoredObject]:
        data = self.redis_repo.get_json(self._object_key(object_id))
        if data is None:
            return None

        try:
            return StoredObject.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Error deserializing object {object_id}: {e}")
            return None

    def list_owned_by(self, owner_id: str) -> List[StoredObject]:
        object_ids = self.redis_repo.set_members(self._owner_key(owner_id))
        records = self.redis_repo.get_many_json([self._object_key(oid) for oid in object_ids])

        objects = []
        for data in records:
            if data is None:
                continue
            stored_object = StoredObject.from_dict(data)
            # Owner never changes, but a stale index entry must not leak objects
            if stored_object.owner_id == owner_id:
                objects.append(stored_object)
        return objects

    def delete(self, object_id: str) -> bool:
        stored_object = self.get(object_id)
        removed = self.redis_repo.delete(self._object_key(object_id)) > 0

        if stored_object is not None:
            self.redis_repo.remove_from_set(self._owner_key(stored_object.owner_id), object_id)
        return removed
