"""
Test utilities and helper classes for the weather plugin host.
"""
from typing import Any, Callable, Dict, List, Optional, Tuple, Type

from src.core.plugin_interfaces import (
    EndpointBuilder,
    EndpointRegistrationError,
    PluginHost,
    ServiceRegistry
)


class RecordingHost(PluginHost):
    """Plugin host double that records log lines"""

    def __init__(self, plugin_config: Optional[Dict[str, Dict[str, Any]]] = None):
        self.plugin_config = plugin_config or {}
        self.messages: List[Tuple[str, str]] = []

    def log_info(self, message: str) -> None:
        self.messages.append(("INFO", message))

    def log_warning(self, message: str) -> None:
        self.messages.append(("WARNING", message))

    def log_error(self, message: str) -> None:
        self.messages.append(("ERROR", message))

    def get_plugin_config(self, plugin_id: str) -> Dict[str, Any]:
        return dict(self.plugin_config.get(plugin_id, {}))

    def lines(self, level: str = "INFO") -> List[str]:
        return [message for lvl, message in self.messages if lvl == level]


class RecordingEndpointBuilder(EndpointBuilder):
    """Endpoint builder double keeping handlers in declaration order"""

    def __init__(self):
        self.routes: Dict[Tuple[str, str], Callable] = {}

    def _add(self, method: str, path: str, handler: Callable):
        if (method, path) in self.routes:
            raise EndpointRegistrationError(f"Route already declared: {method} {path}")
        self.routes[(method, path)] = handler

    def map_get(self, path: str, handler: Callable) -> None:
        self._add("GET", path, handler)

    def map_post(self, path: str, handler: Callable) -> None:
        self._add("POST", path, handler)

    def handler(self, method: str, path: str) -> Callable:
        return self.routes[(method, path)]


class RecordingRegistry(ServiceRegistry):
    """Registry double that keeps raw registrations"""

    def __init__(self):
        self.registrations: Dict[Type, Dict[str, Any]] = {}

    def add_singleton(self, service_type: Type, implementation=None, *, instance=None) -> None:
        self.registrations[service_type] = {'implementation': implementation, 'instance': instance}

    def get(self, service_type: Type) -> Any:
        entry = self.registrations[service_type]
        if entry['instance'] is None:
            entry['instance'] = entry['implementation']()
        return entry['instance']

    def is_registered(self, service_type: Type) -> bool:
        return service_type in self.registrations
