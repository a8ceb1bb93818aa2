"""
Dependency Injection Container

Manages service lifecycles and dependency resolution. The container is built
once by the app factory and handed to whatever hosts the engine (a web layer,
a Celery worker); nothing in the core reads it from a global.
"""

import logging
import threading
from typing import Any, Callable, Dict, List, Optional, Type, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar('T')


class DependencyNotFoundError(Exception):
    """Raised when attempting to resolve an unregistered dependency."""
    pass


class DependencyContainer:
    """
    Dependency injection container for managing service lifecycles.

    Supports singleton (single instance) and transient (factory-created)
    registration patterns. Thread-safe for concurrent access.
    """

    def __init__(self):
        """Initialize the dependency container."""
        self._singletons: Dict[Type, Any] = {}
        self._transients: Dict[Type, Callable[[], Any]] = {}
        self._overrides: Dict[Type, Any] = {}
        self._lock = threading.Lock()

        logger.debug("DependencyContainer initialized")

    def register_singleton(self, interface: Type[T], implementation: T) -> None:
        """
        Register a singleton service (single instance shared across all resolutions).

        Args:
            interface: The interface or class type to register
            implementation: The concrete instance to use

        Example:
            container.register_singleton(GrantLedger, ledger)
        """
        with self._lock:
            self._singletons[interface] = implementation
            logger.debug(f"Registered singleton: {interface.__name__}")

    def register_transient(self, interface: Type[T], factory: Callable[[], T]) -> None:
        """
        Register a transient service (new instance created on each resolution).

        Args:
            interface: The interface or class type to register
            factory: A callable that creates new instances
        """
        with self._lock:
            self._transients[interface] = factory
            logger.debug(f"Registered transient: {interface.__name__}")

    def resolve(self, interface: Type[T]) -> T:
        """
        Resolve a registered service.

        Args:
            interface: The interface or class type to resolve

        Returns:
            The resolved service instance

        Raises:
            DependencyNotFoundError: If the interface is not registered

        Example:
            engine = container.resolve(AccessControlEngine)
        """
        with self._lock:
            if interface in self._overrides:
                logger.debug(f"Resolved override: {interface.__name__}")
                return self._overrides[interface]

            if interface in self._singletons:
                logger.debug(f"Resolved singleton: {interface.__name__}")
                return self._singletons[interface]

            if interface in self._transients:
                logger.debug(f"Resolved transient: {interface.__name__}")
                factory = self._transients[interface]
            else:
                raise DependencyNotFoundError(
                    f"No registration found for type: {interface.__name__}"
                )

        # Factory runs outside the lock so it may resolve other dependencies
        return factory()

    def override(self, interface: Type[T], implementation: T) -> None:
        """
        Override a registered service (primarily for testing).

        Overrides take precedence over both singleton and transient registrations.

        Args:
            interface: The interface or class type to override
            implementation: The mock or test instance to use
        """
        with self._lock:
            self._overrides[interface] = implementation
            logger.debug(f"Overridden: {interface.__name__}")

    def clear_overrides(self) -> None:
        """
        Clear all overrides.

        Useful for cleaning up after tests.
        """
        with self._lock:
            self._overrides.clear()
            logger.debug("Cleared all overrides")

    def setup_event_handlers(
        self,
        event_publisher,
        event_handler_classes: Optional[List[Type]] = None,
    ) -> None:
        """
        Subscribe infrastructure event handlers to the event publisher.

        Args:
            event_publisher: EventPublisher instance to subscribe handlers to
            event_handler_classes: Handler classes to instantiate and register.
                                   Defaults to [LoggingEventHandler].
        """
        from fileshare.domain.events import DomainEvent
        from fileshare.infrastructure.event_handlers.logging_handler import (
            AUDIT_LOGGER_NAME,
            LoggingEventHandler,
        )

        if event_handler_classes is None:
            event_handler_classes = [LoggingEventHandler]

        for handler_class in event_handler_classes:
            try:
                if handler_class is LoggingEventHandler:
                    handler = handler_class(logging.getLogger(AUDIT_LOGGER_NAME))
                else:
                    handler = handler_class()

                event_publisher.subscribe(DomainEvent, handler.handle)
                logger.debug(f"Registered event handler: {handler_class.__name__}")
            except Exception as e:
                # Event handler setup must not abort initialization
                logger.error(f"Failed to register event handler {handler_class.__name__}: {e}")
                continue
