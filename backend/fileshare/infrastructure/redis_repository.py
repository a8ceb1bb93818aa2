"""
Redis Repository Base Class

Provides atomic single-key operations, set indexes and distributed locking
for the Redis-backed catalog, ledger and user directory.
"""

import json
import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

import redis
from redis.exceptions import LockError, RedisError

from fileshare.domain.errors import StorageFailureError

logger = logging.getLogger(__name__)


class RedisRepository:
    """
    Base Redis repository with atomic operations and distributed locking.

    Redis failures are raised as StorageFailureError so callers see one
    storage error type regardless of backend.
    """

    _INCREMENT_FIELD_SCRIPT = """
    local data = redis.call('GET', KEYS[1])
    if not data then
        return -1
    end

    local json_data = cjson.decode(data)
    local current = tonumber(json_data[ARGV[1]]) or 0
    json_data[ARGV[1]] = current + tonumber(ARGV[2])

    redis.call('SET', KEYS[1], cjson.encode(json_data))
    return json_data[ARGV[1]]
    """

    def __init__(self, redis_client: redis.Redis, key_prefix: str = ""):
        self.redis = redis_client
        self.key_prefix = key_prefix

    def _make_key(self, key: str) -> str:
        """Create a prefixed key for Redis storage."""
        return f"{self.key_prefix}:{key}" if self.key_prefix else key

    def _strip_prefix(self, key) -> str:
        if isinstance(key, bytes):
            key = key.decode('utf-8')
        if self.key_prefix:
            return key[len(self.key_prefix) + 1:]
        return key

    def set_json(self, key: str, data: Dict[str, Any], ttl: Optional[int] = None) -> bool:
        """
        Atomically set JSON data with optional TTL.

        Args:
            key: Redis key
            data: Dictionary to store as JSON
            ttl: Time to live in seconds

        Returns:
            True if successful

        Raises:
            StorageFailureError: If Redis rejects the write
        """
        try:
            redis_key = self._make_key(key)
            json_data = json.dumps(data)

            if ttl:
                return bool(self.redis.setex(redis_key, ttl, json_data))
            return bool(self.redis.set(redis_key, json_data))
        except RedisError as e:
            raise StorageFailureError(f"Error setting JSON data for key {key}: {e}", e) from e

    def set_json_if_absent(self, key: str, data: Dict[str, Any]) -> bool:
        """
        Set JSON data only if the key does not exist yet.

        Returns:
            True if written, False if the key already existed
        """
        try:
            return bool(self.redis.set(self._make_key(key), json.dumps(data), nx=True))
        except RedisError as e:
            raise StorageFailureError(f"Error setting JSON data for key {key}: {e}", e) from e

    def get_json(self, key: str) -> Optional[Dict[str, Any]]:
        """
        Get JSON data from Redis.

        Args:
            key: Redis key

        Returns:
            Dictionary if found and valid JSON, None otherwise
        """
        try:
            data = self.redis.get(self._make_key(key))
        except RedisError as e:
            raise StorageFailureError(f"Error getting JSON data for key {key}: {e}", e) from e

        if data is None:
            return None

        try:
            if isinstance(data, bytes):
                data = data.decode('utf-8')
            return json.loads(data)
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning(f"Discarding corrupt JSON at key {key}: {e}")
            return None

    def get_many_json(self, keys: List[str]) -> List[Optional[Dict[str, Any]]]:
        """Fetch several JSON values in one round trip (MGET)."""
        if not keys:
            return []
        try:
            raw_values = self.redis.mget([self._make_key(k) for k in keys])
        except RedisError as e:
            raise StorageFailureError(f"Error getting JSON data for {len(keys)} keys: {e}", e) from e

        results: List[Optional[Dict[str, Any]]] = []
        for key, data in zip(keys, raw_values):
            if data is None:
                results.append(None)
                continue
            try:
                if isinstance(data, bytes):
                    data = data.decode('utf-8')
                results.append(json.loads(data))
            except (UnicodeDecodeError, json.JSONDecodeError) as e:
                logger.warning(f"Discarding corrupt JSON at key {key}: {e}")
                results.append(None)
        return results

    def increment_json_field(self, key: str, field: str, amount: int = 1) -> Optional[int]:
        """
        Atomically increment a numeric field of a JSON object using a Lua script.

        Returns:
            The new value, or None if the key does not exist
        """
        try:
            result = self.redis.eval(
                self._INCREMENT_FIELD_SCRIPT, 1, self._make_key(key), field, amount
            )
        except RedisError as e:
            raise StorageFailureError(f"Error incrementing {field} for key {key}: {e}", e) from e

        result = int(result)
        return None if result < 0 else result

    def delete(self, *keys: str) -> int:
        """
        Delete keys from Redis.

        Returns:
            Number of keys removed
        """
        if not keys:
            return 0
        try:
            return int(self.redis.delete(*[self._make_key(k) for k in keys]))
        except RedisError as e:
            raise StorageFailureError(f"Error deleting keys {keys}: {e}", e) from e

    def exists(self, key: str) -> bool:
        """Check if a key exists in Redis."""
        try:
            return self.redis.exists(self._make_key(key)) > 0
        except RedisError as e:
            raise StorageFailureError(f"Error checking existence of key {key}: {e}", e) from e

    def add_to_set(self, key: str, *members: str) -> None:
        try:
            self.redis.sadd(self._make_key(key), *members)
        except RedisError as e:
            raise StorageFailureError(f"Error adding to set {key}: {e}", e) from e

    def remove_from_set(self, key: str, *members: str) -> None:
        try:
            self.redis.srem(self._make_key(key), *members)
        except RedisError as e:
            raise StorageFailureError(f"Error removing from set {key}: {e}", e) from e

    def set_members(self, key: str) -> List[str]:
        """Return the members of a set as strings."""
        try:
            members = self.redis.smembers(self._make_key(key))
        except RedisError as e:
            raise StorageFailureError(f"Error reading set {key}: {e}", e) from e
        return [m.decode('utf-8') if isinstance(m, bytes) else m for m in members]

    def get_keys_by_pattern(self, pattern: str) -> List[str]:
        """
        Get all keys matching a pattern.

        Uses SCAN so large keyspaces do not block the server.

        Returns:
            List of matching keys (without prefix)
        """
        try:
            return [
                self._strip_prefix(key)
                for key in self.redis.scan_iter(match=self._make_key(pattern))
            ]
        except RedisError as e:
            raise StorageFailureError(f"Error getting keys by pattern {pattern}: {e}", e) from e

    @contextmanager
    def distributed_lock(self, lock_name: str, timeout: int = 10, blocking_timeout: int = 5) -> Iterator[Any]:
        """
        Distributed lock context manager using Redis.

        Args:
            lock_name: Name of the lock
            timeout: Lock timeout in seconds
            blocking_timeout: How long to wait for lock acquisition

        Raises:
            StorageFailureError: If the lock cannot be acquired
        """
        lock_key = self._make_key(f"lock:{lock_name}")
        lock = self.redis.lock(lock_key, timeout=timeout, blocking_timeout=blocking_timeout)

        try:
            acquired = lock.acquire(blocking=True, blocking_timeout=blocking_timeout)
        except RedisError as e:
            raise StorageFailureError(f"Could not acquire lock {lock_name}: {e}", e) from e
        if not acquired:
            raise StorageFailureError(f"Could not acquire lock: {lock_name}")

        try:
            yield lock
        finally:
            try:
                lock.release()
            except LockError:
                # Lock may have expired, which is fine
                pass


class RedisConnectionManager:
    """Manages Redis connection with connection pooling."""

    def __init__(self, host: str = 'localhost', port: int = 6379, db: int = 0,
                 max_connections: int = 20, password: Optional[str] = None,
                 decode_responses: bool = False):
        self.connection_pool = redis.ConnectionPool(
            host=host,
            port=port,
            db=db,
            password=password,
            max_connections=max_connections,
            decode_responses=decode_responses,
            retry_on_timeout=True,
            socket_keepalive=True,
        )
        self._client = None

    @property
    def client(self) -> redis.Redis:
        """Get Redis client instance with connection pooling."""
        if self._client is None:
            self._client = redis.Redis(connection_pool=self.connection_pool)
        return self._client

    def health_check(self) -> bool:
        """Check if Redis connection is healthy."""
        try:
            return bool(self.client.ping())
        except RedisError:
            return False

    def close(self):
        """Close the connection pool."""
        if self.connection_pool:
            self.connection_pool.disconnect()
