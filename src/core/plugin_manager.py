"""
Plugin Management for the Weather Plugin Host

Reference host runtime: loads plugin classes, drives them through the
lifecycle contract, wires their services into a shared registry and their
routes into a FastAPI application.
"""

import importlib
import inspect
import traceback
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Type

from fastapi import FastAPI

from .config import ConfigurationManager
from .endpoint_builder import FastAPIEndpointBuilder
from .logging import get_logger, get_structured_logger, log_plugin_error
from .plugin_interfaces import BasePlugin, PluginError, PluginHost, PluginMetadata
from .service_registry import ServiceCollection


class PluginStatus(Enum):
    """Plugin status as tracked by the host"""
    LOADED = "loaded"
    STARTING = "starting"
    RUNNING = "running"
    STOPPING = "stopping"
    STOPPED = "stopped"
    FAILED = "failed"
    DISABLED = "disabled"


@dataclass
class PluginInfo:
    """Complete plugin information"""
    metadata: PluginMetadata
    instance: BasePlugin
    status: PluginStatus = PluginStatus.LOADED
    load_time: Optional[datetime] = None
    start_time: Optional[datetime] = None
    last_error: Optional[str] = None
    endpoint_builder: Optional[FastAPIEndpointBuilder] = None

    def get_uptime(self) -> Optional[timedelta]:
        """Get plugin uptime"""
        if self.start_time and self.status == PluginStatus.RUNNING:
            return datetime.now(timezone.utc) - self.start_time
        return None

    def get_metrics(self) -> Dict[str, Any]:
        """Get plugin metrics"""
        uptime = self.get_uptime()
        routes = self.endpoint_builder.routes if self.endpoint_builder else []
        return {
            'status': self.status.value,
            'lifecycle_state': self.instance.state.value,
            'version': self.metadata.version,
            'uptime_seconds': uptime.total_seconds() if uptime else 0,
            'load_time': self.load_time.isoformat() if self.load_time else None,
            'start_time': self.start_time.isoformat() if self.start_time else None,
            'last_error': self.last_error,
            'routes': [f"{route.method} {route.path}" for route in routes]
        }


class HostContext(PluginHost):
    """Host capabilities handed to one plugin"""

    def __init__(self, config_manager: ConfigurationManager, plugin_id: str):
        self.config_manager = config_manager
        self.plugin_id = plugin_id
        self.logger = get_logger(f'plugin_{plugin_id}')

    def log_info(self, message: str) -> None:
        self.logger.info(message)

    def log_warning(self, message: str) -> None:
        self.logger.warning(message)

    def log_error(self, message: str) -> None:
        self.logger.error(message)

    def get_plugin_config(self, plugin_id: str) -> Dict[str, Any]:
        return self.config_manager.get_plugin_config(plugin_id)


def find_plugin_class(module) -> Optional[Type[BasePlugin]]:
    """Find the plugin class in a module"""
    for name, obj in inspect.getmembers(module):
        if (inspect.isclass(obj) and
                issubclass(obj, BasePlugin) and
                not inspect.isabstract(obj)):
            return obj
    return None


class PluginManager:
    """
    Drives plugins through initialize -> configure_services ->
    configure_endpoints -> dispose and exposes their routes over HTTP.
    """

    def __init__(self, config_manager: ConfigurationManager):
        self.config_manager = config_manager
        self.logger = get_logger('plugin_manager')
        self.events = get_structured_logger('plugin_events')

        self.plugins: Dict[str, PluginInfo] = {}
        self.services = ServiceCollection()
        self.startup_order: List[str] = []

        self.logger.info("Plugin manager initialized")

    def add_plugin(self, plugin: BasePlugin) -> str:
        """
        Register a constructed plugin instance.

        Returns:
            The plugin id

        Raises:
            ValueError: If a plugin with the same id is already registered
        """
        metadata = plugin.get_metadata()
        if metadata.id in self.plugins:
            raise ValueError(f"Plugin {metadata.id} already loaded")

        status = PluginStatus.LOADED
        if not self.config_manager.is_plugin_enabled(metadata.id):
            status = PluginStatus.DISABLED

        self.plugins[metadata.id] = PluginInfo(
            metadata=metadata,
            instance=plugin,
            status=status,
            load_time=datetime.now(timezone.utc)
        )
        self.startup_order.append(metadata.id)

        self.logger.info(f"Loaded plugin {metadata.name} v{metadata.version} ({metadata.id})")
        return metadata.id

    def load_plugin(self, plugin_class: Type[BasePlugin], *args, **kwargs) -> str:
        """Construct and register a plugin class"""
        return self.add_plugin(plugin_class(*args, **kwargs))

    def load_plugin_module(self, module_name: str) -> str:
        """
        Import a module and load the plugin class it defines.

        Raises:
            ValueError: If the module defines no concrete plugin class
        """
        module = importlib.import_module(module_name)
        plugin_class = find_plugin_class(module)
        if plugin_class is None:
            raise ValueError(f"No valid plugin class found in {module_name}")
        return self.load_plugin(plugin_class)

    async def start_plugin(self, plugin_id: str) -> bool:
        """
        Run a plugin through initialization, service and endpoint registration.

        Services registered before a later step fails are unregistered again.
        The plugin itself stays initialized, so it cannot be started twice.

        Returns:
            bool: True if the plugin is running, False if it failed to start

        Raises:
            PluginError: Contract violations are logged and re-raised
        """
        plugin_info = self.plugins.get(plugin_id)
        if plugin_info is None:
            self.logger.error(f"Plugin {plugin_id} not found")
            return False

        if plugin_info.status == PluginStatus.RUNNING:
            self.logger.warning(f"Plugin {plugin_id} already running")
            return True

        plugin = plugin_info.instance
        registered_before = set(self.services.get_registered_types())
        try:
            plugin_info.status = PluginStatus.STARTING

            await plugin.initialize(HostContext(self.config_manager, plugin_id))
            plugin.configure_services(self.services)

            builder = FastAPIEndpointBuilder(plugin_id)
            plugin.configure_endpoints(builder)
            plugin_info.endpoint_builder = builder

            plugin_info.status = PluginStatus.RUNNING
            plugin_info.start_time = datetime.now(timezone.utc)
            self.logger.info(f"Successfully started plugin: {plugin_id}")
            self.events.info("plugin_started", plugin_id=plugin_id,
                             routes=[f"{route.method} {route.path}" for route in builder.routes])
            return True

        except PluginError as e:
            self._rollback_services(plugin_id, registered_before)
            self._record_failure(plugin_info, e)
            raise
        except Exception as e:
            self._rollback_services(plugin_id, registered_before)
            self._record_failure(plugin_info, e)
            return False

    def _rollback_services(self, plugin_id: str, registered_before: set):
        """Unregister services a plugin added during a start that then failed"""
        for service_type in self.services.get_registered_types():
            if service_type not in registered_before:
                self.services.remove(service_type)
                self.logger.info(f"Unregistered {service_type.__name__} after failed start of {plugin_id}")

    async def stop_plugin(self, plugin_id: str) -> bool:
        """
        Dispose a plugin.

        Returns:
            bool: True if disposed successfully, False otherwise
        """
        plugin_info = self.plugins.get(plugin_id)
        if plugin_info is None:
            self.logger.error(f"Plugin {plugin_id} not found")
            return False

        if plugin_info.status == PluginStatus.STOPPED:
            return True

        try:
            plugin_info.status = PluginStatus.STOPPING
            await plugin_info.instance.dispose()
            plugin_info.status = PluginStatus.STOPPED
            plugin_info.start_time = None
            self.logger.info(f"Successfully stopped plugin: {plugin_id}")
            self.events.info("plugin_stopped", plugin_id=plugin_id)
            return True

        except Exception as e:
            self._record_failure(plugin_info, e)
            return False

    def _record_failure(self, plugin_info: PluginInfo, error: Exception):
        plugin_info.status = PluginStatus.FAILED
        plugin_info.last_error = str(error)
        log_plugin_error(
            self.logger,
            plugin_info.metadata.id,
            type(error).__name__,
            str(error),
            context={'lifecycle_state': plugin_info.instance.state.value},
            stack_trace=traceback.format_exc()
        )

    async def start_all_plugins(self) -> bool:
        """
        Start every enabled plugin in load order.

        Returns:
            bool: True if all plugins started successfully, False otherwise
        """
        self.logger.info(f"Starting plugins in order: {self.startup_order}")

        success = True
        for plugin_id in self.startup_order:
            if self.plugins[plugin_id].status == PluginStatus.DISABLED:
                self.logger.debug(f"Skipping plugin {plugin_id} (disabled in configuration)")
                continue
            if not await self.start_plugin(plugin_id):
                success = False

        return success

    async def stop_all_plugins(self) -> bool:
        """Dispose every plugin in reverse load order"""
        reverse_order = list(reversed(self.startup_order))
        self.logger.info(f"Stopping plugins in order: {reverse_order}")

        success = True
        for plugin_id in reverse_order:
            if self.plugins[plugin_id].status == PluginStatus.DISABLED:
                continue
            if not await self.stop_plugin(plugin_id):
                success = False

        return success

    def create_app(self) -> FastAPI:
        """
        Build a FastAPI application serving the routes of running plugins.

        Plugins are disposed when the application shuts down.
        """
        @asynccontextmanager
        async def lifespan(app: FastAPI):
            yield
            await self.stop_all_plugins()

        app = FastAPI(
            title=self.config_manager.get('app.name', 'Weather Plugin Host'),
            version=self.config_manager.get('app.version', '1.0.0'),
            debug=self.config_manager.get('app.debug', False),
            lifespan=lifespan
        )

        @app.get("/api/plugins")
        async def list_plugins():
            return self.get_plugin_stats()

        for plugin_id in self.get_running_plugins():
            self.plugins[plugin_id].endpoint_builder.include_in(app)

        return app

    def get_plugin_info(self, plugin_id: str) -> Optional[PluginInfo]:
        return self.plugins.get(plugin_id)

    def get_all_plugins(self) -> Dict[str, PluginInfo]:
        return self.plugins.copy()

    def get_running_plugins(self) -> List[str]:
        return [
            plugin_id for plugin_id, info in self.plugins.items()
            if info.status == PluginStatus.RUNNING
        ]

    def get_plugin_stats(self) -> Dict[str, Any]:
        """Get plugin manager statistics"""
        stats = {
            'total_plugins': len(self.plugins),
            'running_plugins': len(self.get_running_plugins()),
            'failed_plugins': len([p for p in self.plugins.values() if p.status == PluginStatus.FAILED]),
            'registered_services': [t.__name__ for t in self.services.get_registered_types()],
            'plugins': {}
        }

        for plugin_id, info in self.plugins.items():
            stats['plugins'][plugin_id] = info.get_metrics()

        return stats
