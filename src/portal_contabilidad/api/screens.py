"""WebSocket screens: one view model per connection, state pushed on every change."""

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from portal_contabilidad.api.models import (
    detail_state_to_response,
    home_state_to_response,
    new_task_state_to_response,
)
from portal_contabilidad.data.models import Priority, TaskStatus
from portal_contabilidad.factory import get_connection_manager, get_repository
from portal_contabilidad.presentation.detail import TaskDetailViewModel
from portal_contabilidad.presentation.home import HomeViewModel
from portal_contabilidad.presentation.new_task import NewTaskViewModel
from portal_contabilidad.presentation.state import ViewModel

logger = logging.getLogger(__name__)

router = APIRouter()

Outbox = asyncio.Queue[dict[str, Any] | str]
ActionHandler = Callable[[dict[str, Any], Outbox], Awaitable[None]]


class ActionError(Exception):
    """A client message could not be applied to the screen."""


def _error(detail: str) -> dict[str, Any]:
    return {"type": "error", "detail": detail}


def _report_failure(outbox: Outbox, action: str) -> Callable[["asyncio.Task[Any]"], None]:
    """Build a done-callback that tells the client when a background action failed."""

    def callback(task: "asyncio.Task[Any]") -> None:
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            outbox.put_nowait(_error(f"{action} failed: {error}"))

    return callback


def _parse_status(message: dict[str, Any]) -> TaskStatus:
    try:
        return TaskStatus(message.get("status"))
    except ValueError as e:
        raise ActionError(f"Unknown status: {message.get('status')!r}") from e


async def _serve_screen(
    websocket: WebSocket,
    screen: str,
    view_model: ViewModel[Any],
    render: Callable[[Any], dict[str, Any]],
    handle: ActionHandler,
) -> None:
    """Run a screen session until the client disconnects.

    Args:
        websocket: Client connection
        screen: Screen name sent with every state message
        view_model: View model owned by this connection
        render: Converts a state snapshot into JSON-ready data
        handle: Applies a decoded client message to the view model
    """
    manager = get_connection_manager()
    await manager.connect(websocket, screen)

    outbox: Outbox = asyncio.Queue()

    def on_state(state: Any) -> None:
        outbox.put_nowait({"type": "state", "screen": screen, "state": render(state)})

    async def send_loop() -> None:
        while True:
            item = await outbox.get()
            if isinstance(item, str):
                await websocket.send_text(item)
            elif not await manager.send_personal(item, websocket):
                return

    remove_listener = view_model.store.add_listener(on_state)
    sender = asyncio.create_task(send_loop())
    try:
        on_state(view_model.state)
        view_model.start()
        while True:
            data = await websocket.receive_text()
            if data == "ping":
                outbox.put_nowait("pong")
                continue
            try:
                message = json.loads(data)
                if not isinstance(message, dict):
                    raise ActionError("Message must be a JSON object")
                await handle(message, outbox)
            except json.JSONDecodeError:
                outbox.put_nowait(_error("Invalid JSON"))
            except ActionError as e:
                outbox.put_nowait(_error(str(e)))

    except WebSocketDisconnect:
        logger.info(f"[Screens] {screen} client disconnected normally")
    except Exception as e:
        logger.error(f"[Screens] {screen} error: {e}", exc_info=True)
        await websocket.close(code=1011, reason="Internal error")
    finally:
        # Synchronous cleanup first; the session may already be cancelled
        remove_listener()
        manager.disconnect(websocket)
        sender.cancel()
        await view_model.close()
        await asyncio.gather(sender, return_exceptions=True)


@router.websocket("/ws/home")
async def home_screen(websocket: WebSocket) -> None:
    """Task list screen.

    Client messages:
        {"action": "filter", "status": "PENDING"}
        {"action": "delete", "task_id": "..."}
    """
    view_model = HomeViewModel(get_repository())

    async def handle(message: dict[str, Any], outbox: Outbox) -> None:
        action = message.get("action")
        if action == "filter":
            view_model.set_filter(_parse_status(message))
        elif action == "delete":
            task_id = message.get("task_id")
            task = next((t for t in view_model.all_tasks if t.id == task_id), None)
            if task is None:
                raise ActionError(f"Task not found: {task_id}")
            view_model.request_delete(task).add_done_callback(_report_failure(outbox, "delete"))
        else:
            raise ActionError(f"Unknown action: {action!r}")

    await _serve_screen(websocket, "home", view_model, _render_home, handle)


@router.websocket("/ws/tasks/{task_id}")
async def detail_screen(websocket: WebSocket, task_id: str) -> None:
    """Task detail screen.

    Client messages:
        {"action": "set_status", "status": "COMPLETED"}
    """
    view_model = TaskDetailViewModel(get_repository(), task_id)

    async def handle(message: dict[str, Any], outbox: Outbox) -> None:
        action = message.get("action")
        if action != "set_status":
            raise ActionError(f"Unknown action: {action!r}")
        status = _parse_status(message)
        try:
            update = view_model.set_status(status)
        except ValueError as e:
            raise ActionError(str(e)) from e
        if update is None:
            raise ActionError(f"Task not loaded: {task_id}")
        update.add_done_callback(_report_failure(outbox, "set_status"))

    await _serve_screen(websocket, "detail", view_model, _render_detail, handle)


@router.websocket("/ws/new-task")
async def new_task_screen(websocket: WebSocket) -> None:
    """New-task form screen.

    Client messages:
        {"action": "set_field", "field": "title", "value": "..."}
        {"action": "submit"}
        {"action": "acknowledge_message"}
        {"action": "acknowledge_navigation"}
    """
    view_model = NewTaskViewModel(get_repository())
    setters: dict[str, Callable[[str], None]] = {
        "title": view_model.set_title,
        "description": view_model.set_description,
        "due_date": view_model.set_due_date_text,
        "department": view_model.set_department,
    }

    async def handle(message: dict[str, Any], outbox: Outbox) -> None:
        action = message.get("action")
        if action == "set_field":
            field_name = message.get("field")
            value = message.get("value", "")
            if field_name == "priority":
                try:
                    view_model.set_priority(Priority(value))
                except ValueError as e:
                    raise ActionError(f"Unknown priority: {value!r}") from e
            elif isinstance(field_name, str) and field_name in setters:
                setters[field_name](str(value))
            else:
                raise ActionError(f"Unknown field: {field_name!r}")
        elif action == "submit":
            view_model.submit().add_done_callback(_report_failure(outbox, "submit"))
        elif action == "acknowledge_message":
            view_model.acknowledge_message()
        elif action == "acknowledge_navigation":
            view_model.acknowledge_navigation()
        else:
            raise ActionError(f"Unknown action: {action!r}")

    await _serve_screen(websocket, "new_task", view_model, _render_new_task, handle)


def _render_home(state: Any) -> dict[str, Any]:
    return home_state_to_response(state).model_dump(mode="json")


def _render_detail(state: Any) -> dict[str, Any]:
    return detail_state_to_response(state).model_dump(mode="json")


def _render_new_task(state: Any) -> dict[str, Any]:
    return new_task_state_to_response(state).model_dump(mode="json")
