"""OS-level file watching using watchdog library.

This module provides efficient file watching using OS-level events
(inotify on Linux, FSEvents on macOS, ReadDirectoryChanges on Windows).
"""

import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from .debounce import Debouncer, Scheduler

logger = logging.getLogger(__name__)


class FileWatchdog:
    """Watches a specific file for modifications using OS-level events.

    Rapid successive changes (editors writing atomically, partial writes)
    are coalesced by a Debouncer, so the callback runs once per burst on
    the debouncer's timer thread.

    Attributes:
        file_path: Path to the file to watch
        callback: Function to call when file changes
        debounce_seconds: Wait time after last change before triggering callback
    """

    def __init__(
        self,
        file_path: Path,
        callback: Callable[[], None],
        debounce_seconds: float = 0.5,
        scheduler: Scheduler | None = None,
    ):
        self.file_path = Path(file_path)
        self.callback = callback
        self.debounce_seconds = debounce_seconds

        self._debouncer = Debouncer(debounce_seconds, scheduler)
        self._observer: Any = None
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        """Start watching the file for changes."""
        if self._running:
            return

        self._running = True

        handler = _TargetFileHandler(self.file_path, self._on_change)

        self._observer = Observer()
        self._observer.schedule(handler, str(self.file_path.parent), recursive=False)
        try:
            self._observer.start()
        except OSError:
            logger.warning(
                "Failed to start file watcher for %s (inotify limit reached). "
                "File change detection disabled for this path.",
                self.file_path,
            )
            self._observer = None
            self._running = False

    def stop(self) -> None:
        """Stop watching the file."""
        if not self._running:
            return

        self._running = False
        self._debouncer.cancel()

        observer = self._observer
        if observer:
            observer.stop()
            observer.join(timeout=2.0)
            self._observer = None

    def _on_change(self) -> None:
        if self._running:
            self._debouncer.trigger(self.callback)


class _TargetFileHandler(FileSystemEventHandler):
    """Internal handler that filters events down to one file"""

    def __init__(self, target_file: Path, on_change: Callable[[], None]):
        super().__init__()
        self.target_file = target_file
        self.on_change = on_change

    def on_modified(self, event: FileSystemEvent) -> None:
        """Handle file modification events."""
        if event.is_directory:
            return

        event_path = Path(str(event.src_path)).resolve()
        if event_path != self.target_file.resolve():
            return

        self.on_change()

    def on_created(self, event: FileSystemEvent) -> None:
        """Handle file creation events."""
        # Treat creation as modification for our purposes
        self.on_modified(event)
