"""
Redis Configuration

Builds Redis connection managers and repositories from settings.
"""

from typing import Optional

import redis

from fileshare.infrastructure.redis_repository import RedisConnectionManager, RedisRepository

from .settings import Settings


class RedisConfig:
    """Redis connection settings, with REDIS_URL taking precedence."""

    def __init__(self, settings: Settings):
        self.host = settings.redis_host
        self.port = settings.redis_port
        self.db = settings.redis_db
        self.password = settings.redis_password
        self.max_connections = settings.redis_max_connections

        # Redis URL format: redis://[:password@]host:port/db
        self.url = settings.redis_url
        if self.url:
            connection_params = redis.connection.parse_url(self.url)
            self.host = connection_params.get("host", self.host)
            self.port = connection_params.get("port", self.port)
            self.db = connection_params.get("db", self.db)
            self.password = connection_params.get("password", self.password)


def create_redis_manager(settings: Optional[Settings] = None) -> RedisConnectionManager:
    """
    Create a Redis connection manager.

    Args:
        settings: Settings to read from, environment if None

    Returns:
        RedisConnectionManager instance
    """
    if settings is None:
        settings = Settings.from_env()
    config = RedisConfig(settings)

    connection_kwargs = {
        "host": config.host,
        "port": config.port,
        "db": config.db,
        "max_connections": config.max_connections,
    }

    if config.password:
        connection_kwargs["password"] = config.password

    return RedisConnectionManager(**connection_kwargs)


def create_redis_repository(client: redis.Redis, settings: Settings) -> RedisRepository:
    """Create the shared RedisRepository with the configured key prefix."""
    return RedisRepository(client, settings.redis_key_prefix)
