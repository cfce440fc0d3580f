"""Config file watching for auto-reload"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from .config import CONFIG_FILE_NAME, SuspendConfig, get_config_dir
from .file_watchdog import FileWatchdog

if TYPE_CHECKING:
    from .service import SuspendService

logger = logging.getLogger(__name__)


class ConfigWatcher:
    """Reload suspend.yaml on change and apply it to a running service

    Attributes:
        service: The SuspendService to reconfigure
        config_file: Watched configuration file
    """

    def __init__(self, service: "SuspendService", config_file: Path | None = None, debounce_seconds: float = 1.0):
        self.service = service
        self.config_file = config_file or (get_config_dir() / CONFIG_FILE_NAME)
        self.watcher = FileWatchdog(self.config_file, self._on_config_change, debounce_seconds=debounce_seconds)

    def start(self):
        self.watcher.start()
        if self.watcher.running:
            logger.info("Watching %s for changes", self.config_file)

    def stop(self):
        self.watcher.stop()

    def _on_config_change(self):
        """Callback when suspend.yaml changes"""
        try:
            config = SuspendConfig.from_env(config_file=self.config_file)
            self.service.apply_config(config)
            logger.info("Configuration reloaded from %s", self.config_file)
        except Exception as e:
            logger.error("Failed to reload configuration: %s", e)
