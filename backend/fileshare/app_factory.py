"""
Application Factory

Builds the dependency container holding the access-control engine, the
expiry reaper and every collaborator they need. Hosts (a web layer, a Celery
worker) call create_container() once and resolve services from it.
"""

import logging
from typing import Optional

import redis

from fileshare.application import AccessControlEngine, ExpiryReaper, UploadPolicy
from fileshare.application.dependency_container import DependencyContainer
from fileshare.application.event_publisher import EventPublisher
from fileshare.config.redis_config import create_redis_manager, create_redis_repository
from fileshare.config.settings import Settings
from fileshare.domain.blobs import BlobStore
from fileshare.domain.catalog import ObjectCatalog
from fileshare.domain.sharing import GrantLedger, ShareRepository
from fileshare.domain.users import UserDirectory
from fileshare.infrastructure.redis_catalog_repository import RedisObjectCatalog
from fileshare.infrastructure.redis_repository import RedisRepository
from fileshare.infrastructure.redis_share_repository import RedisShareRepository
from fileshare.infrastructure.redis_user_directory import RedisUserDirectory
from fileshare.infrastructure.storage_factory import BlobStoreFactory

logger = logging.getLogger(__name__)


def create_container(
    settings: Optional[Settings] = None,
    redis_client: Optional[redis.Redis] = None,
    blob_store: Optional[BlobStore] = None,
) -> DependencyContainer:
    """
    Create and wire the dependency container.

    Args:
        settings: Application settings, read from the environment if None
        redis_client: Redis client to use instead of a new connection pool
        blob_store: Blob store to use instead of the configured one

    Returns:
        DependencyContainer with all services registered as singletons
    """
    if settings is None:
        settings = Settings.from_env()

    if redis_client is None:
        redis_client = create_redis_manager(settings).client

    container = DependencyContainer()

    redis_repo = create_redis_repository(redis_client, settings)
    catalog = RedisObjectCatalog(redis_repo)
    share_repository = RedisShareRepository(redis_repo)
    user_directory = RedisUserDirectory(redis_repo)
    ledger = GrantLedger(share_repository)

    if blob_store is None:
        blob_store = BlobStoreFactory.create_blob_store(settings)

    event_publisher = EventPublisher()
    container.setup_event_handlers(event_publisher)

    upload_policy = settings.upload_policy()

    engine = AccessControlEngine(
        catalog=catalog,
        ledger=ledger,
        blob_store=blob_store,
        user_directory=user_directory,
        event_publisher=event_publisher,
        upload_policy=upload_policy,
    )
    reaper = ExpiryReaper(ledger, event_publisher)

    container.register_singleton(Settings, settings)
    container.register_singleton(RedisRepository, redis_repo)
    container.register_singleton(ObjectCatalog, catalog)
    container.register_singleton(ShareRepository, share_repository)
    container.register_singleton(UserDirectory, user_directory)
    container.register_singleton(GrantLedger, ledger)
    container.register_singleton(BlobStore, blob_store)
    container.register_singleton(EventPublisher, event_publisher)
    container.register_singleton(UploadPolicy, upload_policy)
    container.register_singleton(AccessControlEngine, engine)
    container.register_singleton(ExpiryReaper, reaper)

    logger.info("Dependency container initialized")
    return container
