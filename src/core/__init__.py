"""
Core module for the weather plugin host

Contains the plugin contract, configuration management, logging and the
reference host binding (service registry, endpoint builder, plugin manager).
"""

from .plugin_interfaces import (
    BasePlugin,
    PluginHost,
    ServiceRegistry,
    EndpointBuilder,
    PluginMetadata,
    PluginState,
    PluginError,
    LifecycleViolation,
    InvalidArgument,
    ServiceRegistrationError,
    EndpointRegistrationError
)

__all__ = [
    'BasePlugin',
    'PluginHost',
    'ServiceRegistry',
    'EndpointBuilder',
    'PluginMetadata',
    'PluginState',
    'PluginError',
    'LifecycleViolation',
    'InvalidArgument',
    'ServiceRegistrationError',
    'EndpointRegistrationError'
]
