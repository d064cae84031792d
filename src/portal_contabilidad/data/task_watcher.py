"""File system watcher for the local task document directory."""

import logging
from collections.abc import Callable
from pathlib import Path

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer
from watchdog.observers.api import BaseObserver

logger = logging.getLogger(__name__)

DOCUMENT_SUFFIX = ".yaml"


class TaskWatcher:
    """Watches the task directory for document changes and triggers a callback."""

    def __init__(self, tasks_dir: Path):
        """Initialize watcher for a task directory.

        Args:
            tasks_dir: Directory holding one YAML document per task
        """
        self.tasks_dir = tasks_dir
        self._observer: BaseObserver | None = None
        self._callback: Callable[[str, str], None] | None = None

    @property
    def running(self) -> bool:
        """Whether the observer thread is alive."""
        return self._observer is not None and self._observer.is_alive()

    def set_callback(self, callback: Callable[[str, str], None]) -> None:
        """Set callback for document events.

        Args:
            callback: Function(event_type, task_id) called from the observer thread
        """
        self._callback = callback

    def start(self) -> None:
        """Start watching the task directory in the observer's background thread."""
        handler = _TaskEventHandler(self._callback)
        self._observer = Observer()
        self._observer.schedule(handler, str(self.tasks_dir), recursive=False)
        logger.info(f"[TaskWatcher] Watching {self.tasks_dir}")
        self._observer.start()

    def stop(self) -> None:
        """Stop watching and clean up resources."""
        if self._observer:
            logger.info(f"[TaskWatcher] Stopping watcher for {self.tasks_dir}")
            self._observer.stop()
            self._observer.join()
            self._observer = None


class _TaskEventHandler(FileSystemEventHandler):
    """Internal handler for task document events."""

    def __init__(self, callback: Callable[[str, str], None] | None):
        self.callback = callback

    def _extract_task_id(self, file_path: str | bytes) -> str | None:
        """Extract task ID from a document path.

        Args:
            file_path: Full path to the document

        Returns:
            Task ID (filename without .yaml) or None if not a task document
        """
        if isinstance(file_path, bytes):
            file_path = file_path.decode("utf-8")
        path = Path(file_path)
        if path.suffix == DOCUMENT_SUFFIX and not path.name.startswith("."):
            return path.stem
        return None

    def _handle_event(self, event_type: str, file_path: str | bytes, is_directory: bool) -> None:
        if is_directory:
            return

        task_id = self._extract_task_id(file_path)
        if not task_id:
            return

        logger.debug(f"[TaskEventHandler] {event_type}: {task_id}")

        if self.callback:
            try:
                self.callback(event_type, task_id)
            except Exception as e:
                logger.error(f"[TaskEventHandler] Callback error: {e}", exc_info=True)

    def on_modified(self, event: FileSystemEvent) -> None:
        """Handle document modification events."""
        self._handle_event("modified", event.src_path, event.is_directory)

    def on_created(self, event: FileSystemEvent) -> None:
        """Handle document creation events."""
        self._handle_event("created", event.src_path, event.is_directory)

    def on_deleted(self, event: FileSystemEvent) -> None:
        """Handle document deletion events."""
        self._handle_event("deleted", event.src_path, event.is_directory)

    def on_moved(self, event: FileSystemEvent) -> None:
        """Handle move/rename events; atomic writes land here via their destination."""
        self._handle_event("deleted", event.src_path, event.is_directory)
        self._handle_event("modified", event.dest_path, event.is_directory)
