"""Infrastructure handlers subscribed to domain events."""

from .logging_handler import AUDIT_LOGGER_NAME, LoggingEventHandler

__all__ = ["AUDIT_LOGGER_NAME", "LoggingEventHandler"]
