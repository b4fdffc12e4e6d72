"""
Service Registry

Reference implementation of the host dependency registry. Services are
registered as shared singletons keyed by type and built lazily on first
resolution.
"""

import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Type

from .logging import get_logger
from .plugin_interfaces import ServiceRegistry, ServiceRegistrationError


@dataclass
class ServiceDescriptor:
    """Registration record for one service type"""
    service_type: Type
    factory: Optional[Callable[[], Any]] = None
    instance: Any = None
    built: bool = False


class ServiceCollection(ServiceRegistry):
    """Thread-safe singleton registry"""

    def __init__(self):
        self.logger = get_logger('service_registry')
        self._descriptors: Dict[Type, ServiceDescriptor] = {}
        self._lock = threading.RLock()

    def add_singleton(self, service_type: Type, implementation: Optional[Callable[[], Any]] = None,
                      *, instance: Any = None) -> None:
        if (implementation is None) == (instance is None):
            raise ServiceRegistrationError(
                f"Register {service_type.__name__} with exactly one of implementation or instance"
            )

        with self._lock:
            if service_type in self._descriptors:
                raise ServiceRegistrationError(f"Service already registered: {service_type.__name__}")
            self._descriptors[service_type] = ServiceDescriptor(
                service_type=service_type,
                factory=implementation,
                instance=instance,
                built=implementation is None
            )

        self.logger.debug(f"Registered singleton {service_type.__name__}")

    def get(self, service_type: Type) -> Any:
        """
        Resolve a service.

        Raises:
            ServiceRegistrationError: If nothing is registered for the type
        """
        with self._lock:
            descriptor = self._descriptors.get(service_type)
            if descriptor is None:
                raise ServiceRegistrationError(f"Service not registered: {service_type.__name__}")

            if not descriptor.built:
                descriptor.instance = descriptor.factory()
                descriptor.built = True
                self.logger.debug(f"Built singleton {service_type.__name__}")

            return descriptor.instance

    def remove(self, service_type: Type) -> None:
        """
        Unregister a service.

        Raises:
            ServiceRegistrationError: If nothing is registered for the type
        """
        with self._lock:
            if self._descriptors.pop(service_type, None) is None:
                raise ServiceRegistrationError(f"Service not registered: {service_type.__name__}")
        self.logger.debug(f"Removed singleton {service_type.__name__}")

    def is_registered(self, service_type: Type) -> bool:
        with self._lock:
            return service_type in self._descriptors

    def get_registered_types(self) -> List[Type]:
        with self._lock:
            return list(self._descriptors)

    def __len__(self) -> int:
        with self._lock:
            return len(self._descriptors)
