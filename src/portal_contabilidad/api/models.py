"""API models for the task portal."""

from pydantic import BaseModel

from portal_contabilidad.data.models import Priority, Task, TaskStatus
from portal_contabilidad.presentation.detail import DetailState
from portal_contabilidad.presentation.display import priority_label, status_label
from portal_contabilidad.presentation.home import HomeState
from portal_contabilidad.presentation.new_task import NewTaskState


class TaskResponse(BaseModel):
    """API response model for tasks."""

    id: str
    title: str
    department: str
    status: TaskStatus
    status_label: str
    status_color: str | None
    due_date: str
    full_due_date: str
    task_number: str
    description: str
    priority: Priority
    priority_label: str
    priority_color: str | None


class HomeStateResponse(BaseModel):
    """Home screen state."""

    tasks: list[TaskResponse]
    selected_status: TaskStatus


class DetailStateResponse(BaseModel):
    """Detail screen state."""

    task_id: str
    task: TaskResponse | None
    loaded: bool


class NewTaskStateResponse(BaseModel):
    """New-task screen state."""

    title: str
    description: str
    due_date_text: str
    department: str
    priority: Priority
    task_created: bool
    user_message: str | None


class NewTaskRequest(BaseModel):
    """Request model for creating a task."""

    title: str = ""
    description: str = ""
    due_date: str = ""  # dd/MM/yyyy
    department: str = ""
    priority: Priority = Priority.LOW


class UpdateStatusRequest(BaseModel):
    """Request model for changing a task's status."""

    status: TaskStatus


class OptionResponse(BaseModel):
    """Selectable value with its display name."""

    value: str
    label: str
    color: str | None = None


class CatalogResponse(BaseModel):
    """Display tables used to build the screens."""

    statuses: list[OptionResponse]
    home_filters: list[OptionResponse]
    detail_statuses: list[OptionResponse]
    priorities: list[OptionResponse]
    creation_priorities: list[OptionResponse]
    departments: list[str]


def task_to_response(task: Task) -> TaskResponse:
    """Convert Task to TaskResponse."""
    status = status_label(task.status)
    priority = priority_label(task.priority)
    return TaskResponse(
        id=task.id,
        title=task.title,
        department=task.department,
        status=task.status,
        status_label=status.name,
        status_color=status.color,
        due_date=task.due_date,
        full_due_date=task.full_due_date,
        task_number=task.task_number,
        description=task.description,
        priority=task.priority,
        priority_label=priority.name,
        priority_color=priority.color,
    )


def home_state_to_response(state: HomeState) -> HomeStateResponse:
    """Convert HomeState to HomeStateResponse."""
    return HomeStateResponse(
        tasks=[task_to_response(task) for task in state.tasks],
        selected_status=state.selected_status,
    )


def detail_state_to_response(state: DetailState) -> DetailStateResponse:
    """Convert DetailState to DetailStateResponse."""
    return DetailStateResponse(
        task_id=state.task_id,
        task=task_to_response(state.task) if state.task else None,
        loaded=state.loaded,
    )


def new_task_state_to_response(state: NewTaskState) -> NewTaskStateResponse:
    """Convert NewTaskState to NewTaskStateResponse."""
    return NewTaskStateResponse(
        title=state.title,
        description=state.description,
        due_date_text=state.due_date_text,
        department=state.department,
        priority=state.priority,
        task_created=state.task_created,
        user_message=state.user_message,
    )
