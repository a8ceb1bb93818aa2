"""Configuration: settings, Redis connections and Celery."""

from .settings import Settings, configure_logging

__all__ = ["Settings", "configure_logging"]
