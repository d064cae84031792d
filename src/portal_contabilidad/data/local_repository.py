"""Task repository backed by a directory of YAML documents."""

import asyncio
import logging
import os
import threading
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from portal_contabilidad.data.models import Task, task_from_document, task_to_document
from portal_contabilidad.data.subscription import Subscription
from portal_contabilidad.data.task_watcher import DOCUMENT_SUFFIX, TaskWatcher
from portal_contabilidad.errors import TaskDocumentError

logger = logging.getLogger(__name__)

_UNSET = object()


@dataclass(eq=False)
class _Listener:
    """Open subscription plus the last snapshot delivered to it."""

    subscription: Subscription[Any]
    task_id: str | None = None  # None = whole collection
    last: Any = field(default=_UNSET)


class LocalTaskRepository:
    """Task repository storing one `<id>.yaml` document per task.

    Changes made by this process refresh subscribers directly; changes made
    by anything else are picked up by a watchdog observer on the directory.
    Documents are listed in key order.
    """

    def __init__(self, data_dir: str | Path, watch: bool = True) -> None:
        """Initialize repository.

        Args:
            data_dir: Directory holding the task documents (created if missing)
            watch: Watch the directory for external changes while subscribed
        """
        self._dir = Path(data_dir)
        self._dir.mkdir(parents=True, exist_ok=True)
        self._watch = watch
        self._watcher: TaskWatcher | None = None
        self._listeners: list[_Listener] = []
        self._lock = threading.RLock()

    # ---- subscriptions ----

    def subscribe_all(self) -> Subscription[list[Task]]:
        """Subscribe to every document in the directory.

        Returns:
            Subscription delivering the full task list on every change
        """
        subscription: Subscription[list[Task]] = Subscription(f"local:{self._dir.name}")
        self._register(_Listener(subscription))
        return subscription

    def subscribe_one(self, task_id: str) -> Subscription[Task | None]:
        """Subscribe to one document.

        Args:
            task_id: Document key

        Returns:
            Subscription delivering the task, or None while it does not exist
        """
        subscription: Subscription[Task | None] = Subscription(f"local:{self._dir.name}/{task_id}")
        self._register(_Listener(subscription, task_id=task_id))
        return subscription

    def _register(self, listener: _Listener) -> None:
        with self._lock:
            self._listeners.append(listener)
            listener.subscription.set_release(lambda: self._unregister(listener))
            if self._watch and self._watcher is None:
                self._watcher = TaskWatcher(self._dir)
                self._watcher.set_callback(self._on_document_event)
                self._watcher.start()
            self._deliver(listener)

    def _unregister(self, listener: _Listener) -> None:
        watcher: TaskWatcher | None = None
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)
            if not self._listeners:
                watcher, self._watcher = self._watcher, None
        # Stop outside the lock; the observer thread may be waiting on it
        if watcher is not None:
            watcher.stop()

    def _on_document_event(self, event_type: str, task_id: str) -> None:
        self.refresh()

    def refresh(self) -> None:
        """Re-read the documents and deliver changed snapshots to subscribers."""
        with self._lock:
            for listener in list(self._listeners):
                self._deliver(listener)

    def _deliver(self, listener: _Listener) -> None:
        try:
            if listener.task_id is None:
                snapshot: Any = self._read_all()
            else:
                snapshot = self._read_one(listener.task_id)
        except TaskDocumentError as e:
            logger.error(f"[LocalTaskRepository] {e}")
            self._listeners.remove(listener)
            listener.subscription.fail(e)
            return

        if snapshot == listener.last:
            return
        listener.last = snapshot
        listener.subscription.push(snapshot)

    # ---- documents ----

    def _path(self, task_id: str) -> Path:
        return self._dir / f"{task_id}{DOCUMENT_SUFFIX}"

    def _read_all(self) -> list[Task]:
        paths = sorted(
            p for p in self._dir.glob(f"*{DOCUMENT_SUFFIX}") if not p.name.startswith(".")
        )
        tasks: list[Task] = []
        for path in paths:
            task = self._read_one(path.stem)
            if task is not None:
                tasks.append(task)
        return tasks

    def _read_one(self, task_id: str) -> Task | None:
        path = self._path(task_id)
        try:
            content = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

        try:
            data = yaml.safe_load(content) or {}
        except yaml.YAMLError as e:
            raise TaskDocumentError(task_id, "invalid YAML") from e
        if not isinstance(data, dict):
            raise TaskDocumentError(task_id, "document is not a mapping")
        return task_from_document(task_id, data)

    def _write(self, task_id: str, document: dict[str, Any]) -> None:
        """Write a document atomically (temp file, then rename)."""
        path = self._path(task_id)
        tmp_path = self._dir / f".{task_id}{DOCUMENT_SUFFIX}.tmp"
        text = yaml.dump(document, default_flow_style=False, sort_keys=False, allow_unicode=True)
        tmp_path.write_text(text, encoding="utf-8")
        os.replace(tmp_path, path)

    # ---- mutations ----

    async def add(self, task: Task) -> str:
        """Create a task document.

        Args:
            task: Task to store; a blank id gets a generated key

        Returns:
            Identity of the stored task
        """
        task_id = task.id or uuid.uuid4().hex[:20]
        document = task_to_document(task)
        document["id"] = task_id
        await asyncio.to_thread(self._write, task_id, document)
        logger.info(f"[LocalTaskRepository] Added task {task_id}")
        await asyncio.to_thread(self.refresh)
        return task_id

    async def update(self, task: Task) -> None:
        """Replace a task document by identity.

        Args:
            task: Task with the new field values
        """
        if not task.id.strip():
            return
        await asyncio.to_thread(self._write, task.id, task_to_document(task))
        logger.info(f"[LocalTaskRepository] Updated task {task.id}")
        await asyncio.to_thread(self.refresh)

    async def delete(self, task_id: str) -> None:
        """Delete a task document by identity.

        Args:
            task_id: Document key
        """
        if not task_id.strip():
            return
        await asyncio.to_thread(self._path(task_id).unlink, missing_ok=True)
        logger.info(f"[LocalTaskRepository] Deleted task {task_id}")
        await asyncio.to_thread(self.refresh)

    def close(self) -> None:
        """Close all open subscriptions and stop the watcher."""
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            listener.subscription.close()
        if self._watcher is not None:
            self._watcher.stop()
            self._watcher = None
