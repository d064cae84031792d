"""Task API endpoints."""

import logging

from fastapi import APIRouter, HTTPException, Response

from portal_contabilidad.api.models import (
    CatalogResponse,
    NewTaskRequest,
    OptionResponse,
    TaskResponse,
    UpdateStatusRequest,
    task_to_response,
)
from portal_contabilidad.data.models import TaskStatus
from portal_contabilidad.errors import PortalError
from portal_contabilidad.factory import get_repository
from portal_contabilidad.presentation import display
from portal_contabilidad.presentation.detail import TaskDetailViewModel
from portal_contabilidad.presentation.home import filter_tasks
from portal_contabilidad.presentation.new_task import NewTaskViewModel

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/catalog", response_model=CatalogResponse)
async def get_catalog() -> CatalogResponse:
    """List the display names the screens are built from.

    Returns:
        Statuses, filters, priorities and departments with their labels
    """
    return CatalogResponse(
        statuses=[
            OptionResponse(value=status.value, label=label.name, color=label.color)
            for status, label in display.STATUS_LABELS.items()
        ],
        home_filters=[
            OptionResponse(value=status.value, label=name)
            for status, name in display.HOME_FILTER_TABS
        ],
        detail_statuses=[
            OptionResponse(value=status.value, label=name)
            for status, name in display.DETAIL_STATUS_CHOICES
        ],
        priorities=[
            OptionResponse(value=priority.value, label=label.name, color=label.color)
            for priority, label in display.PRIORITY_LABELS.items()
        ],
        creation_priorities=[
            OptionResponse(value=priority.value, label=display.priority_label(priority).name)
            for priority in display.CREATION_PRIORITIES
        ],
        departments=list(display.DEPARTMENTS),
    )


@router.get("/tasks", response_model=list[TaskResponse])
async def list_tasks(status: TaskStatus = TaskStatus.ALL) -> list[TaskResponse]:
    """List the current tasks.

    Args:
        status: Status to filter by; ALL returns every task

    Returns:
        Tasks in store order
    """
    try:
        tasks = await get_repository().subscribe_all().first()
    except PortalError as e:
        logger.error(f"Failed to list tasks: {e}")
        raise HTTPException(status_code=500, detail=str(e)) from e
    return [task_to_response(task) for task in filter_tasks(tasks, status)]


@router.get("/tasks/{task_id}", response_model=TaskResponse)
async def get_task(task_id: str) -> TaskResponse:
    """Get a single task.

    Raises:
        HTTPException: If the task does not exist
    """
    try:
        task = await get_repository().subscribe_one(task_id).first()
    except PortalError as e:
        logger.error(f"Failed to read task {task_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e)) from e
    if task is None:
        raise HTTPException(status_code=404, detail=f"Task not found: {task_id}")
    return task_to_response(task)


@router.post("/tasks", response_model=TaskResponse, status_code=201)
async def create_task(request: NewTaskRequest) -> TaskResponse:
    """Create a task from the new-task form.

    Returns:
        The created task

    Raises:
        HTTPException: 422 with the form message if validation fails
    """
    async with NewTaskViewModel(get_repository()) as view_model:
        view_model.set_title(request.title)
        view_model.set_description(request.description)
        view_model.set_due_date_text(request.due_date)
        view_model.set_department(request.department)
        view_model.set_priority(request.priority)
        try:
            task = await view_model.submit()
        except Exception as e:
            logger.exception(f"Error creating task: {e}")
            raise HTTPException(status_code=500, detail=str(e)) from e
        if task is None:
            raise HTTPException(status_code=422, detail=view_model.state.user_message)
    return task_to_response(task)


@router.patch("/tasks/{task_id}/status", response_model=TaskResponse)
async def update_task_status(task_id: str, request: UpdateStatusRequest) -> TaskResponse:
    """Change a task's status.

    Raises:
        HTTPException: 404 if the task does not exist, 400 for ALL
    """
    view_model = TaskDetailViewModel(get_repository(), task_id)
    try:
        await view_model.load()
        try:
            update = view_model.set_status(request.status)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e
        if update is None:
            raise HTTPException(status_code=404, detail=f"Task not found: {task_id}")
        updated = await update
    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Error updating task {task_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e)) from e
    finally:
        await view_model.close()
    return task_to_response(updated)


@router.delete("/tasks/{task_id}", status_code=204)
async def delete_task(task_id: str) -> Response:
    """Delete a task."""
    try:
        await get_repository().delete(task_id)
    except Exception as e:
        logger.exception(f"Error deleting task {task_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e)) from e
    return Response(status_code=204)
