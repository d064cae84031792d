"""Detail screen: one task and its status."""

import asyncio
import logging
from dataclasses import dataclass, replace

from portal_contabilidad.data.models import Task, TaskStatus
from portal_contabilidad.data.repository import TaskRepository
from portal_contabilidad.presentation.state import ViewModel

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DetailState:
    """What the detail screen renders."""

    task_id: str
    task: Task | None = None
    loaded: bool = False  # False until the store delivered for the first time


class TaskDetailViewModel(ViewModel[DetailState]):
    """Mirrors a single task, bound to its identity for the screen's lifetime."""

    def __init__(self, repository: TaskRepository, task_id: str) -> None:
        """Initialize view model.

        Args:
            repository: Task store to subscribe to
            task_id: Identity of the task shown by this screen
        """
        super().__init__(DetailState(task_id=task_id))
        self._repository = repository
        self.task_id = task_id

    def start(self) -> None:
        """Subscribe to the task."""
        self.collect(self._repository.subscribe_one(self.task_id), self.on_task_changed)

    def on_task_changed(self, task: Task | None) -> None:
        """Mirror whatever the store delivered, including absence."""
        self.store.update(lambda s: replace(s, task=task, loaded=True))

    async def load(self) -> Task | None:
        """Read the task once without keeping a subscription open.

        Returns:
            The stored task, or None if it does not exist
        """
        task = await self._repository.subscribe_one(self.task_id).first()
        self.on_task_changed(task)
        return task

    def set_status(self, status: TaskStatus) -> "asyncio.Task[Task] | None":
        """Store the loaded task with a new status.

        Local state is left alone until the subscription reports the change.

        Args:
            status: New status

        Returns:
            Background update task resolving to the stored task, or None when
            no task is loaded

        Raises:
            ValueError: If status is ALL
        """
        task = self.state.task
        if task is None:
            logger.debug(f"[TaskDetailViewModel] No task loaded for {self.task_id}")
            return None
        updated = replace(task, status=status)
        logger.info(f"[TaskDetailViewModel] {task.id}: {task.status.value} -> {status.value}")
        return self.launch(self._store(updated))

    async def _store(self, task: Task) -> Task:
        await self._repository.update(task)
        return task
