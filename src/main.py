"""
Weather Plugin Host Entry Point

Loads configuration and logging, drives the configured plugins through their
lifecycle, and serves their routes with uvicorn.
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import uvicorn

# Make the repository root importable when run as a script
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.core.config import ConfigurationManager
from src.core.logging import initialize_logging, get_logger
from src.core.plugin_manager import PluginManager


DEFAULT_PLUGIN_MODULES = ['plugins.weather_forecast']


class WeatherPluginHostApplication:
    """Reference host application"""

    def __init__(self, config_dir: str = "config"):
        self.config_dir = config_dir
        self.config_manager: Optional[ConfigurationManager] = None
        self.plugin_manager: Optional[PluginManager] = None
        self.server: Optional[uvicorn.Server] = None
        self.logger = None

    async def initialize(self, overrides: Optional[Dict[str, Any]] = None):
        """Initialize configuration, logging and plugins"""
        self.config_manager = ConfigurationManager(self.config_dir)
        self.config_manager.load_config()
        if overrides:
            self.config_manager.apply_overrides(overrides)

        initialize_logging(self.config_manager.config)
        self.logger = get_logger('main')
        self.logger.info(f"{self.config_manager.get('app.name')} starting up...")
        self.logger.info(f"Version: {self.config_manager.get('app.version', '1.0.0')}")

        self.plugin_manager = PluginManager(self.config_manager)

        for module_name in self.config_manager.get_plugin_modules() or DEFAULT_PLUGIN_MODULES:
            self.plugin_manager.load_plugin_module(module_name)

        if not await self.plugin_manager.start_all_plugins():
            self.logger.warning("Some plugins failed to start")

    async def start(self, overrides: Optional[Dict[str, Any]] = None):
        """Start the application and serve until shutdown"""
        await self.initialize(overrides)

        app = self.plugin_manager.create_app()
        config = uvicorn.Config(
            app=app,
            host=self.config_manager.get_web_host(),
            port=self.config_manager.get_web_port(),
            log_level="debug" if self.config_manager.get('app.debug', False) else "info"
        )
        self.server = uvicorn.Server(config)

        self.logger.info(
            f"Serving plugins on http://{config.host}:{config.port}"
        )
        try:
            await self.server.serve()
        finally:
            # Lifespan shutdown already disposed plugins; this covers startup failures
            await self.plugin_manager.stop_all_plugins()
            self.logger.info("Shutdown complete")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Weather Plugin Host")
    parser.add_argument("--config-dir", default="config", help="Directory holding default.yaml / config.yaml")
    parser.add_argument("--plugin", action="append", dest="plugins",
                        help="Plugin module to load (repeatable, replaces app.plugin_modules)")
    parser.add_argument("--host", help="Override web.host")
    parser.add_argument("--port", type=int, help="Override web.port")
    return parser.parse_args(argv)


def overrides_from_args(args: argparse.Namespace) -> Dict[str, Any]:
    """Map command line options onto configuration keys"""
    return {
        'app.plugin_modules': args.plugins,
        'web.host': args.host,
        'web.port': args.port,
    }


def main(argv: Optional[List[str]] = None):
    """Main entry point"""
    args = parse_args(argv)
    application = WeatherPluginHostApplication(args.config_dir)

    try:
        asyncio.run(application.start(overrides_from_args(args)))
    except KeyboardInterrupt:
        print("\nApplication interrupted")
        sys.exit(0)
    except Exception as e:
        print(f"Fatal error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
