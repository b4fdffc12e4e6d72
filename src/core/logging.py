"""
Logging Configuration for the Weather Plugin Host

Configures stdlib logging once for the host process (console and optional
rotating file output, per-plugin levels) and routes structlog through it,
so plugin lifecycle events and plugin errors land in the same handlers as
ordinary log lines.
"""

import json
import logging
import logging.handlers
import re
import sys
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

import structlog


LOGGER_PREFIX = 'weatherhost'

LINE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Libraries that log every request or loop event at INFO
QUIET_LOGGERS = ('asyncio', 'uvicorn.access', 'httpx')

_SIZE_UNITS = {'': 1, 'KB': 1024, 'MB': 1024 ** 2, 'GB': 1024 ** 3}


def parse_size(value) -> int:
    """Convert '10MB', '512KB' or a plain byte count to bytes"""
    match = re.fullmatch(r'\s*(\d+)\s*([KMG]B)?\s*', str(value).upper())
    if not match:
        raise ValueError(f"Invalid size: {value!r}")
    return int(match.group(1)) * _SIZE_UNITS[match.group(2) or '']


@dataclass
class LogSettings:
    """The `logging` configuration section"""
    level: str = 'INFO'
    console: bool = True
    console_level: str = 'INFO'
    file: Optional[str] = None
    max_size: int = 10 * 1024 ** 2
    backup_count: int = 5
    plugins: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> 'LogSettings':
        section = config.get('logging') or {}
        return cls(
            level=str(section.get('level', 'INFO')).upper(),
            console=section.get('console', True),
            console_level=str(section.get('console_level', 'INFO')).upper(),
            file=section.get('file'),
            max_size=parse_size(section.get('max_size', '10MB')),
            backup_count=section.get('backup_count', 5),
            plugins={plugin_id: str(level).upper()
                     for plugin_id, level in (section.get('plugins') or {}).items()}
        )


class HostLogger:
    """Process-wide logging setup for the plugin host"""

    def __init__(self, config: Dict[str, Any]):
        self.settings = LogSettings.from_config(config)
        self._configure_structlog()
        self._configure_root()
        self._apply_plugin_levels()

        for name in QUIET_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    def _configure_structlog(self):
        structlog.configure(
            processors=[
                structlog.stdlib.filter_by_level,
                structlog.stdlib.add_logger_name,
                structlog.stdlib.add_log_level,
                structlog.processors.TimeStamper(fmt="ISO"),
                structlog.processors.format_exc_info,
                structlog.processors.JSONRenderer()
            ],
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )

    def _configure_root(self):
        root = logging.getLogger()
        root.setLevel(getattr(logging, self.settings.level))
        root.handlers.clear()
        for handler in self._build_handlers():
            root.addHandler(handler)

    def _build_handlers(self) -> List[logging.Handler]:
        handlers = []
        settings = self.settings

        if settings.file:
            Path(settings.file).parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.handlers.RotatingFileHandler(
                settings.file,
                maxBytes=settings.max_size,
                backupCount=settings.backup_count,
                encoding='utf-8'
            )
            file_handler.setFormatter(logging.Formatter(LINE_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
            file_handler.setLevel(getattr(logging, settings.level))
            handlers.append(file_handler)

        if settings.console:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setFormatter(logging.Formatter(LINE_FORMAT, datefmt='%H:%M:%S'))
            console_handler.setLevel(getattr(logging, settings.console_level))
            handlers.append(console_handler)

        return handlers

    def _apply_plugin_levels(self):
        for plugin_id, level in self.settings.plugins.items():
            logging.getLogger(plugin_logger_name(plugin_id)).setLevel(getattr(logging, level))


def plugin_logger_name(plugin_id: str) -> str:
    return f'{LOGGER_PREFIX}.plugin_{plugin_id}'


# Global logger instance
_logger_instance: Optional[HostLogger] = None


def initialize_logging(config: Dict[str, Any]) -> HostLogger:
    """Initialize the global logging system"""
    global _logger_instance
    _logger_instance = HostLogger(config)
    return _logger_instance


def get_logger(name: str) -> logging.Logger:
    """Get a `weatherhost.<name>` logger, falling back to basicConfig before setup"""
    if _logger_instance is None:
        logging.basicConfig(level=logging.INFO, format=LINE_FORMAT)
    return logging.getLogger(f'{LOGGER_PREFIX}.{name}')


def get_structured_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger writing JSON events through stdlib logging"""
    if _logger_instance is None and not structlog.is_configured():
        structlog.configure(
            processors=[
                structlog.stdlib.add_log_level,
                structlog.processors.TimeStamper(fmt="ISO"),
                structlog.processors.JSONRenderer()
            ],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )

    return structlog.get_logger(f'{LOGGER_PREFIX}.{name}')


def log_plugin_error(logger: logging.Logger, plugin_id: str, error_type: str,
                     error_message: str, context: Optional[Dict[str, Any]] = None,
                     stack_trace: Optional[str] = None):
    """
    Log a plugin failure as one JSON record.

    Example:
        log_plugin_error(
            logger,
            "adorika-weather-plugin",
            "LifecycleViolation",
            "Cannot call initialize() on plugin 'adorika-weather-plugin' in state disposed",
            context={"lifecycle_state": "disposed"},
            stack_trace=traceback.format_exc()
        )
    """
    record = {
        'timestamp': datetime.now(timezone.utc).isoformat(),
        'plugin': plugin_id,
        'error_type': error_type,
        'error_message': error_message,
    }
    if context:
        record['context'] = context
    if stack_trace:
        record['stack_trace'] = stack_trace

    logger.error(json.dumps(record))
