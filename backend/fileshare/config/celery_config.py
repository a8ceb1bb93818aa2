"""
Celery Configuration

Configures Celery with the Redis broker, task routing and the beat schedule
for the expiry sweep.
"""

from celery import Celery
from kombu import Queue

from .settings import Settings

PURGE_TASK_NAME = "fileshare.tasks.purge_expired_shares"


class CeleryConfig:
    """Celery configuration settings."""

    # Task settings
    task_serializer = "json"
    accept_content = ["json"]
    result_serializer = "json"
    timezone = "UTC"
    enable_utc = True

    # Worker settings
    worker_prefetch_multiplier = 1
    task_acks_late = True

    # Task routing
    task_routes = {
        PURGE_TASK_NAME: {"queue": "cleanup_queue"},
    }

    # Queue definitions
    task_default_queue = "default"
    task_queues = (
        Queue("default", routing_key="default"),
        Queue("cleanup_queue", routing_key="cleanup"),
    )

    # Result backend settings
    result_expires = 3600  # 1 hour

    def __init__(self, settings: Settings):
        self.broker_url = settings.celery_broker_url
        self.result_backend = settings.celery_result_backend
        self.beat_schedule = {
            "purge-expired-shares": {
                "task": PURGE_TASK_NAME,
                "schedule": settings.reaper_interval_seconds,
            },
        }


def make_celery(container, settings: Settings) -> Celery:
    """
    Create a Celery instance bound to a dependency container.

    Tasks reach services through ``self.app.container``.

    Args:
        container: DependencyContainer with the engine and reaper registered
        settings: Application settings

    Returns:
        Configured Celery instance
    """
    config = CeleryConfig(settings)
    celery = Celery(
        "fileshare",
        backend=config.result_backend,
        broker=config.broker_url,
    )
    celery.config_from_object(config)
    celery.container = container
    return celery
