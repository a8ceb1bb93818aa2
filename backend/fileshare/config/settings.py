"""
Application Settings

Environment-driven configuration for the access-control core.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import FrozenSet, Optional

from fileshare.application.upload_policy import (
    DEFAULT_ALLOWED_CONTENT_TYPES,
    DEFAULT_MAX_UPLOAD_MB,
    UploadPolicy,
)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def _parse_content_types(raw: Optional[str]) -> FrozenSet[str]:
    """Parse ALLOWED_CONTENT_TYPES; '*' means any type (empty set)."""
    if raw is None or not raw.strip():
        return DEFAULT_ALLOWED_CONTENT_TYPES
    items = {item.strip().lower() for item in raw.split(",") if item.strip()}
    if "*" in items:
        return frozenset()
    return frozenset(items)


@dataclass(frozen=True)
class Settings:
    """Configuration settings read once at startup."""
    redis_url: Optional[str] = None
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: Optional[str] = None
    redis_max_connections: int = 20
    redis_key_prefix: str = "fileshare"
    blob_storage_dir: str = "/tmp/fileshare-blobs"
    gcs_bucket_name: Optional[str] = None
    max_upload_size_mb: int = DEFAULT_MAX_UPLOAD_MB
    allowed_content_types: FrozenSet[str] = field(default=DEFAULT_ALLOWED_CONTENT_TYPES)
    reaper_interval_seconds: float = 300.0
    log_level: str = "INFO"
    celery_broker_url: str = "redis://localhost:6379/0"
    celery_result_backend: str = "redis://localhost:6379/0"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables."""
        return cls(
            redis_url=os.getenv("REDIS_URL") or None,
            redis_host=os.getenv("REDIS_HOST", "localhost"),
            redis_port=int(os.getenv("REDIS_PORT", 6379)),
            redis_db=int(os.getenv("REDIS_DB", 0)),
            redis_password=os.getenv("REDIS_PASSWORD") or None,
            redis_max_connections=int(os.getenv("REDIS_MAX_CONNECTIONS", 20)),
            redis_key_prefix=os.getenv("REDIS_KEY_PREFIX", "fileshare"),
            blob_storage_dir=os.getenv("BLOB_STORAGE_DIR", "/tmp/fileshare-blobs"),
            gcs_bucket_name=os.getenv("GCS_BUCKET_NAME") or None,
            max_upload_size_mb=int(os.getenv("MAX_UPLOAD_SIZE_MB", DEFAULT_MAX_UPLOAD_MB)),
            allowed_content_types=_parse_content_types(os.getenv("ALLOWED_CONTENT_TYPES")),
            reaper_interval_seconds=float(os.getenv("REAPER_INTERVAL_SECONDS", 300)),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            celery_broker_url=os.getenv("CELERY_BROKER_URL", "redis://localhost:6379/0"),
            celery_result_backend=os.getenv("CELERY_RESULT_BACKEND", "redis://localhost:6379/0"),
        )

    def upload_policy(self) -> UploadPolicy:
        return UploadPolicy(
            max_size_bytes=self.max_upload_size_mb * 1024 * 1024,
            allowed_content_types=self.allowed_content_types,
        )


def configure_logging(settings: Optional[Settings] = None) -> None:
    """
    Configure the root logger from settings.

    Args:
        settings: Settings to read LOG_LEVEL from, environment if None
    """
    if settings is None:
        settings = Settings.from_env()

    level = getattr(logging, settings.log_level, logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger().setLevel(level)
