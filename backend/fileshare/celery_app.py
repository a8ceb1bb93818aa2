"""
Celery Application Instance

Creates the Celery app instance for use by workers and the beat scheduler.
Uses the app factory so tasks resolve fully wired services.
"""

from fileshare.app_factory import create_container
from fileshare.config.celery_config import make_celery
from fileshare.config.settings import Settings, configure_logging

settings = Settings.from_env()
configure_logging(settings)

celery_app = make_celery(create_container(settings), settings)

# Task modules are imported by the worker at startup, after celery_app exists
celery_app.conf.imports = (
    "fileshare.tasks.reaper_task",
)
