"""
Plugin Contract Interfaces

Defines the lifecycle contract every plugin implements and the host
capabilities (logging sink, service registry, endpoint builder) a plugin
consumes. Plugins depend only on these abstractions, never on the concrete
web framework or dependency container the host runs on.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Optional, Type

from .logging import get_logger


class PluginError(Exception):
    """Base class for errors raised across the plugin boundary"""
    pass


class LifecycleViolation(PluginError):
    """A lifecycle method was invoked out of order"""

    def __init__(self, plugin_id: str, operation: str, state: 'PluginState'):
        self.plugin_id = plugin_id
        self.operation = operation
        self.state = state
        super().__init__(
            f"Cannot call {operation}() on plugin '{plugin_id}' in state {state.value}"
        )


class InvalidArgument(PluginError, ValueError):
    """An argument was outside the range an operation accepts"""
    pass


class ServiceRegistrationError(PluginError):
    """Service registry misuse (duplicate registration, unknown service)"""
    pass


class EndpointRegistrationError(PluginError):
    """Endpoint declaration rejected by the host"""
    pass


class PluginState(Enum):
    """Plugin lifecycle states"""
    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"
    DISPOSED = "disposed"


@dataclass(frozen=True)
class PluginMetadata:
    """Stable plugin identity"""
    id: str
    name: str
    version: str
    description: str
    author: str = ""

    def __post_init__(self):
        """Validate metadata after initialization"""
        if not self.id or not isinstance(self.id, str):
            raise ValueError("Plugin id must be a non-empty string")
        if not self.version or not isinstance(self.version, str):
            raise ValueError("Plugin version must be a non-empty string")

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'version': self.version,
            'description': self.description,
            'author': self.author,
        }


GetHandler = Callable[[], Awaitable[Any]]
PostHandler = Callable[[Any], Awaitable[Any]]


class PluginHost(ABC):
    """Capabilities the host hands to a plugin during initialization"""

    @abstractmethod
    def log_info(self, message: str) -> None:
        pass

    @abstractmethod
    def log_warning(self, message: str) -> None:
        pass

    @abstractmethod
    def log_error(self, message: str) -> None:
        pass

    @abstractmethod
    def get_plugin_config(self, plugin_id: str) -> Dict[str, Any]:
        """
        Get the configuration section for a plugin.

        Args:
            plugin_id: Plugin identifier

        Returns:
            Configuration dictionary (empty if none is configured)
        """
        pass


class ServiceRegistry(ABC):
    """Host dependency registry"""

    @abstractmethod
    def add_singleton(self, service_type: Type, implementation: Optional[Callable[[], Any]] = None,
                      *, instance: Any = None) -> None:
        """
        Register a shared instance for a service type.

        Args:
            service_type: Key the service is resolved by (usually an interface)
            implementation: Class or zero-argument factory, built once on first use
            instance: Ready-made instance, used instead of an implementation
        """
        pass

    @abstractmethod
    def get(self, service_type: Type) -> Any:
        pass

    @abstractmethod
    def is_registered(self, service_type: Type) -> bool:
        pass


class EndpointBuilder(ABC):
    """Host routing abstraction; plugins declare routes without a framework"""

    @abstractmethod
    def map_get(self, path: str, handler: GetHandler) -> None:
        pass

    @abstractmethod
    def map_post(self, path: str, handler: PostHandler) -> None:
        """
        Declare a POST route.

        The handler receives the request body as the host decoded it. The
        host does not validate bodies; that is left to the handler.
        """
        pass


class BasePlugin(ABC):
    """
    Abstract base class for plugins.

    The public lifecycle methods enforce the state machine
    UNINITIALIZED -> INITIALIZED -> DISPOSED and delegate to the on_* hooks
    concrete plugins implement. Calls made in the wrong state raise
    LifecycleViolation. dispose() is accepted in every state and is a no-op
    once the plugin is already disposed.
    """

    def __init__(self):
        self._state = PluginState.UNINITIALIZED
        self.host: Optional[PluginHost] = None
        self.logger = get_logger(f'plugin_{self.id}')

    @abstractmethod
    def get_metadata(self) -> PluginMetadata:
        pass

    @property
    def id(self) -> str:
        return self.get_metadata().id

    @property
    def name(self) -> str:
        return self.get_metadata().name

    @property
    def version(self) -> str:
        return self.get_metadata().version

    @property
    def description(self) -> str:
        return self.get_metadata().description

    @property
    def state(self) -> PluginState:
        return self._state

    @property
    def is_initialized(self) -> bool:
        return self._state == PluginState.INITIALIZED

    def _require_state(self, operation: str, *allowed: PluginState):
        if self._state not in allowed:
            raise LifecycleViolation(self.id, operation, self._state)

    async def initialize(self, host: PluginHost) -> None:
        """Initialize the plugin. Valid once, before any other lifecycle call."""
        self._require_state('initialize', PluginState.UNINITIALIZED)
        self.host = host
        await self.on_initialize(host)
        self._state = PluginState.INITIALIZED
        self.logger.debug(f"Plugin {self.id} initialized")

    def configure_services(self, registry: ServiceRegistry) -> None:
        """Register the plugin's services into the host registry"""
        self._require_state('configure_services', PluginState.INITIALIZED)
        self.on_configure_services(registry)

    def configure_endpoints(self, builder: EndpointBuilder) -> None:
        """Declare the plugin's routes against the host endpoint builder"""
        self._require_state('configure_endpoints', PluginState.INITIALIZED)
        self.on_configure_endpoints(builder)

    async def dispose(self) -> None:
        """Release plugin resources. Terminal; repeated calls do nothing."""
        if self._state == PluginState.DISPOSED:
            return
        try:
            await self.on_dispose()
        finally:
            self._state = PluginState.DISPOSED
            self.logger.debug(f"Plugin {self.id} disposed")

    @abstractmethod
    async def on_initialize(self, host: PluginHost) -> None:
        pass

    @abstractmethod
    def on_configure_services(self, registry: ServiceRegistry) -> None:
        pass

    @abstractmethod
    def on_configure_endpoints(self, builder: EndpointBuilder) -> None:
        pass

    @abstractmethod
    async def on_dispose(self) -> None:
        pass
