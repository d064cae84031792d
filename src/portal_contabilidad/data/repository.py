"""Task repository protocol."""

from typing import Protocol

from portal_contabilidad.data.models import Task
from portal_contabilidad.data.subscription import Subscription


class TaskRepository(Protocol):
    """Protocol for the task document store."""

    def subscribe_all(self) -> Subscription[list[Task]]:
        """Subscribe to the full task list, re-delivered on every change."""
        ...

    def subscribe_one(self, task_id: str) -> Subscription[Task | None]:
        """Subscribe to a single task; delivers None while it does not exist."""
        ...

    async def add(self, task: Task) -> str:
        """Create a task and return its identity once stored."""
        ...

    async def update(self, task: Task) -> None:
        """Replace a task by identity. No-op if the identity is blank."""
        ...

    async def delete(self, task_id: str) -> None:
        """Delete a task by identity. No-op if the identity is blank."""
        ...

    def close(self) -> None:
        """Release backend resources."""
        ...
