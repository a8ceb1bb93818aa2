"""
Redis Share Repository Implementation

Concrete Redis-based implementation of the ShareRepository interface.
Stores grant and share-link rows verbatim; expiry filtering happens in
GrantLedger, and no Redis TTL is attached to any key.

Keys:
- ``grant:{object_id}:{grantee_id}`` -> Grant JSON
- ``object_grants:{object_id}``      -> set of grantee ids
- ``grantee_grants:{grantee_id}``    -> set of object ids
- ``link:{token}``                   -> ShareLink JSON
- ``object_links:{object_id}``       -> set of tokens
"""

import logging
from typing import ContextManager, List, Optional, Tuple

from fileshare.domain.sharing import Grant, ShareLink, ShareRepository

from .redis_repository import RedisRepository

logger = logging.getLogger(__name__)


class RedisShareRepository(ShareRepository):
    """
    Redis-based implementation of ShareRepository.

    Each row is a single key, so writes to different (object, grantee)
    pairs never contend. Index sets are maintained alongside the rows and
    may briefly hold stale members; every list read skips them.
    """

    def __init__(self, redis_repository: RedisRepository, lock_timeout: int = 10):
        """
        Initialize with Redis repository.

        Args:
            redis_repository: RedisRepository instance from infrastructure layer
            lock_timeout: Seconds before a pair lock auto-expires
        """
        self.redis_repo = redis_repository
        self.lock_timeout = lock_timeout
        self.grant_prefix = "grant"
        self.object_grants_prefix = "object_grants"
        self.grantee_grants_prefix = "grantee_grants"
        self.link_prefix = "link"
        self.object_links_prefix = "object_links"

    def _grant_key(self, object_id: str, grantee_id: str) -> str:
        return f"{self.grant_prefix}:{object_id}:{grantee_id}"

    def _link_key(self, token: str) -> str:
        return f"{self.link_prefix}:{token}"

    # Grants

    def save_grant(self, grant: Grant) -> None:
        self.redis_repo.set_json(self._grant_key(grant.object_id, grant.grantee_id), grant.to_dict())
        self.redis_repo.add_to_set(f"{self.object_grants_prefix}:{grant.object_id}", grant.grantee_id)
        self.redis_repo.add_to_set(f"{self.grantee_grants_prefix}:{grant.grantee_id}", grant.object_id)

    def get_grant(self, object_id: str, grantee_id: str) -> Optional[Grant]:
        data = self.redis_repo.get_json(self._grant_key(object_id, grantee_id))
        return self._grant_from(data)

    def list_grants_for_object(self, object_id: str) -> List[Grant]:
        grantee_ids = self.redis_repo.set_members(f"{self.object_grants_prefix}:{object_id}")
        return self._load_grants([self._grant_key(object_id, g) for g in grantee_ids])

    def list_grants_for_grantee(self, grantee_id: str) -> List[Grant]:
        object_ids = self.redis_repo.set_members(f"{self.grantee_grants_prefix}:{grantee_id}")
        return self._load_grants([self._grant_key(o, grantee_id) for o in object_ids])

    def list_all_grants(self) -> List[Grant]:
        keys = self.redis_repo.get_keys_by_pattern(f"{self.grant_prefix}:*")
        return self._load_grants(keys)

    def delete_grant(self, object_id: str, grantee_id: str) -> bool:
        removed = self.redis_repo.delete(self._grant_key(object_id, grantee_id)) > 0
        self.redis_repo.remove_from_set(f"{self.object_grants_prefix}:{object_id}", grantee_id)
        self.redis_repo.remove_from_set(f"{self.grantee_grants_prefix}:{grantee_id}", object_id)
        return removed

    def grant_lock(self, object_id: str, grantee_id: str) -> ContextManager:
        return self.redis_repo.distributed_lock(
            f"{self.grant_prefix}:{object_id}:{grantee_id}", timeout=self.lock_timeout
        )

    # Share links

    def save_link(self, link: ShareLink) -> bool:
        if not self.redis_repo.set_json_if_absent(self._link_key(link.token), link.to_dict()):
            return False
        self.redis_repo.add_to_set(f"{self.object_links_prefix}:{link.object_id}", link.token)
        return True

    def get_link(self, token: str) -> Optional[ShareLink]:
        return self._link_from(self.redis_repo.get_json(self._link_key(token)))

    def list_links_for_object(self, object_id: str) -> List[ShareLink]:
        tokens = self.redis_repo.set_members(f"{self.object_links_prefix}:{object_id}")
        return self._load_links([self._link_key(t) for t in tokens])

    def list_all_links(self) -> List[ShareLink]:
        keys = self.redis_repo.get_keys_by_pattern(f"{self.link_prefix}:*")
        return self._load_links(keys)

    def delete_link(self, token: str) -> bool:
        link = self.get_link(token)
        removed = self.redis_repo.delete(self._link_key(token)) > 0
        if link is not None:
            self.redis_repo.remove_from_set(f"{self.object_links_prefix}:{link.object_id}", token)
        return removed

    def increment_link_access(self, token: str) -> int:
        count = self.redis_repo.increment_json_field(self._link_key(token), "access_count")
        return count or 0

    # Cascade

    def delete_all_for_object(self, object_id: str) -> Tuple[int, int]:
        object_grants_key = f"{self.object_grants_prefix}:{object_id}"
        object_links_key = f"{self.object_links_prefix}:{object_id}"

        grants_removed = 0
        for grantee_id in self.redis_repo.set_members(object_grants_key):
            grants_removed += self.redis_repo.delete(self._grant_key(object_id, grantee_id))
            self.redis_repo.remove_from_set(f"{self.grantee_grants_prefix}:{grantee_id}", object_id)

        tokens = self.redis_repo.set_members(object_links_key)
        links_removed = self.redis_repo.delete(*[self._link_key(t) for t in tokens])

        self.redis_repo.delete(object_grants_key, object_links_key)
        return grants_removed, links_removed

    # Deserialization

    def _load_grants(self, keys: List[str]) -> List[Grant]:
        grants = []
        for data in self.redis_repo.get_many_json(keys):
            grant = self._grant_from(data)
            if grant is not None:
                grants.append(grant)
        return grants

    def _load_links(self, keys: List[str]) -> List[ShareLink]:
        links = []
        for data in self.redis_repo.get_many_json(keys):
            link = self._link_from(data)
            if link is not None:
                links.append(link)
        return links

    @staticmethod
    def _grant_from(data) -> Optional[Grant]:
        if data is None:
            return None
        try:
            return Grant.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Error deserializing grant: {e}")
            return None

    @staticmethod
    def _link_from(data) -> Optional[ShareLink]:
        if data is None:
            return None
        try:
            return ShareLink.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Error deserializing share link: {e}")
            return None
