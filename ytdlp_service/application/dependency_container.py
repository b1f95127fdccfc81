"""
Dependency Container

Holds the extractor and the services built on it for the lifetime of
the Flask app. Request handlers resolve services from here, and tests
swap them with ``override``.
"""

import logging
import threading
from typing import Any, Callable, Dict, Type, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DependencyNotFoundError(Exception):
    """No instance, factory or override is known for the requested type."""


class DependencyContainer:
    """
    Type-keyed registry of shared service instances.

    A service is registered either as a ready instance or as a factory
    that is called once, on first resolution. Either way every caller
    gets the same object, which is why the registered services must be
    safe to share between request threads.
    """

    def __init__(self):
        self._instances: Dict[Type, Any] = {}
        self._factories: Dict[Type, Callable[["DependencyContainer"], Any]] = {}
        self._overrides: Dict[Type, Any] = {}
        self._lock = threading.RLock()

    def register_singleton(self, service_type: Type[T], instance: T) -> None:
        with self._lock:
            self._instances[service_type] = instance
            self._factories.pop(service_type, None)
        logger.debug(f"Registered instance for {service_type.__name__}")

    def register_factory(self, service_type: Type[T], factory: Callable[["DependencyContainer"], T]) -> None:
        """
        Register a factory building the shared instance on first use.

        The factory receives the container so it can resolve its own
        collaborators.
        """
        with self._lock:
            self._factories[service_type] = factory
            self._instances.pop(service_type, None)
        logger.debug(f"Registered factory for {service_type.__name__}")

    def resolve(self, service_type: Type[T]) -> T:
        """
        Return the shared instance for ``service_type``.

        Overrides win over registrations. A factory is called at most
        once; its result replaces it.

        Raises:
            DependencyNotFoundError: If nothing is registered for the type
        """
        with self._lock:
            if service_type in self._overrides:
                return self._overrides[service_type]
            if service_type in self._instances:
                return self._instances[service_type]

            factory = self._factories.get(service_type)
            if factory is None:
                raise DependencyNotFoundError(f"Nothing registered for {service_type.__name__}")

            instance = factory(self)
            self._instances[service_type] = instance
            del self._factories[service_type]
            logger.debug(f"Built {service_type.__name__} from factory")
            return instance

    def override(self, service_type: Type[T], instance: T) -> None:
        """Replace what ``resolve`` returns for a type until ``clear_overrides``."""
        with self._lock:
            self._overrides[service_type] = instance
        logger.debug(f"Overriding {service_type.__name__}")

    def clear_overrides(self) -> None:
        with self._lock:
            self._overrides.clear()
