"""
Unit tests for environment-driven settings.
"""

import logging

import pytest

from fileshare.application.upload_policy import DEFAULT_ALLOWED_CONTENT_TYPES
from fileshare.config.celery_config import PURGE_TASK_NAME, CeleryConfig, make_celery
from fileshare.config.redis_config import RedisConfig
from fileshare.config.settings import Settings, configure_logging

ENV_VARS = [
    "REDIS_URL", "REDIS_HOST", "REDIS_PORT", "REDIS_DB", "REDIS_PASSWORD",
    "REDIS_MAX_CONNECTIONS", "REDIS_KEY_PREFIX", "BLOB_STORAGE_DIR", "GCS_BUCKET_NAME",
    "MAX_UPLOAD_SIZE_MB", "ALLOWED_CONTENT_TYPES", "REAPER_INTERVAL_SECONDS", "LOG_LEVEL",
    "CELERY_BROKER_URL", "CELERY_RESULT_BACKEND",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    settings = Settings.from_env()

    assert settings.redis_key_prefix == "fileshare"
    assert settings.blob_storage_dir == "/tmp/fileshare-blobs"
    assert settings.gcs_bucket_name is None
    assert settings.allowed_content_types == DEFAULT_ALLOWED_CONTENT_TYPES
    assert settings.reaper_interval_seconds == 300.0
    assert settings.upload_policy().max_size_bytes == 20 * 1024 * 1024


def test_environment_overrides(clean_env):
    clean_env.setenv("REDIS_HOST", "cache")
    clean_env.setenv("REDIS_PORT", "6380")
    clean_env.setenv("MAX_UPLOAD_SIZE_MB", "5")
    clean_env.setenv("ALLOWED_CONTENT_TYPES", "text/plain, image/png")
    clean_env.setenv("GCS_BUCKET_NAME", "files")
    clean_env.setenv("LOG_LEVEL", "debug")

    settings = Settings.from_env()

    assert settings.redis_host == "cache"
    assert settings.redis_port == 6380
    assert settings.gcs_bucket_name == "files"
    assert settings.log_level == "DEBUG"
    policy = settings.upload_policy()
    assert policy.max_size_bytes == 5 * 1024 * 1024
    assert policy.allowed_content_types == frozenset({"text/plain", "image/png"})


def test_wildcard_allows_any_content_type(clean_env):
    clean_env.setenv("ALLOWED_CONTENT_TYPES", "*")
    Settings.from_env().upload_policy().validate("run.exe", "application/x-msdownload", 1)


def test_redis_url_takes_precedence():
    config = RedisConfig(Settings(redis_host="ignored", redis_url="redis://:secret@cache:6390/3"))

    assert config.host == "cache"
    assert config.port == 6390
    assert config.db == 3
    assert config.password == "secret"


def test_celery_beat_schedule_uses_reaper_interval():
    config = CeleryConfig(Settings(reaper_interval_seconds=60))
    entry = config.beat_schedule["purge-expired-shares"]

    assert entry["task"] == PURGE_TASK_NAME
    assert entry["schedule"] == 60
    assert config.task_routes[PURGE_TASK_NAME]["queue"] == "cleanup_queue"


def test_make_celery_attaches_container():
    container = object()
    celery = make_celery(container, Settings(celery_broker_url="memory://"))

    assert celery.container is container
    assert celery.conf.broker_url == "memory://"


def test_configure_logging_sets_root_level():
    root = logging.getLogger()
    previous = root.level
    try:
        configure_logging(Settings(log_level="WARNING"))
        assert root.level == logging.WARNING
    finally:
        root.setLevel(previous)
