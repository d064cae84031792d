"""Home screen: task list filtered by status."""

import asyncio
import logging
from collections.abc import Iterable
from dataclasses import dataclass, replace

from portal_contabilidad.data.models import Task, TaskStatus
from portal_contabilidad.data.repository import TaskRepository
from portal_contabilidad.presentation.state import ViewModel

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HomeState:
    """What the home screen renders."""

    tasks: tuple[Task, ...] = ()
    selected_status: TaskStatus = TaskStatus.ALL


def filter_tasks(tasks: Iterable[Task], status: TaskStatus) -> tuple[Task, ...]:
    """Keep the tasks with the given status, in their original order.

    Args:
        tasks: Tasks in store order
        status: Status to keep, or ALL to keep everything

    Returns:
        Filtered tasks
    """
    if status == TaskStatus.ALL:
        return tuple(tasks)
    return tuple(task for task in tasks if task.status == status)


class HomeViewModel(ViewModel[HomeState]):
    """Mirrors the whole task collection and exposes the filtered view."""

    def __init__(self, repository: TaskRepository) -> None:
        """Initialize view model.

        Args:
            repository: Task store to subscribe to
        """
        super().__init__(HomeState())
        self._repository = repository
        self._all_tasks: tuple[Task, ...] = ()

    @property
    def all_tasks(self) -> tuple[Task, ...]:
        """Unfiltered copy of the last delivered task list."""
        return self._all_tasks

    def start(self) -> None:
        """Subscribe to the task collection."""
        self.collect(self._repository.subscribe_all(), self.on_tasks_changed)

    def on_tasks_changed(self, tasks: Iterable[Task]) -> None:
        """Replace the local copy and re-apply the selected filter.

        Args:
            tasks: Full task list as delivered by the store
        """
        self._all_tasks = tuple(tasks)
        logger.debug(f"[HomeViewModel] {len(self._all_tasks)} tasks received")
        self.set_filter(self.state.selected_status)

    def set_filter(self, status: TaskStatus) -> None:
        """Select a status filter, even if nothing matches it.

        Args:
            status: Status to show, or ALL
        """
        visible = filter_tasks(self._all_tasks, status)
        self.store.update(lambda s: replace(s, tasks=visible, selected_status=status))

    def request_delete(self, task: Task) -> "asyncio.Task[None]":
        """Delete a task in the background.

        The visible list changes only when the store re-delivers the collection.

        Args:
            task: Task to delete

        Returns:
            Background task completing once the store acknowledged the delete
        """
        logger.info(f"[HomeViewModel] Deleting task {task.id}")
        return self.launch(self._repository.delete(task.id))
