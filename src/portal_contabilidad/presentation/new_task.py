"""New-task screen: form state, validation and submission."""

import asyncio
import logging
import re
import uuid
from dataclasses import dataclass, replace
from datetime import date, datetime

from portal_contabilidad.data.models import Priority, Task, TaskStatus
from portal_contabilidad.data.repository import TaskRepository
from portal_contabilidad.presentation.state import ViewModel

logger = logging.getLogger(__name__)

MSG_INVALID_DATE = "Formato de fecha inválido. Usa dd/MM/yyyy."
MSG_REQUIRED_FIELDS = "Por favor, completa todos los campos obligatorios."
MSG_DEPARTMENT_TOO_SHORT = "El departamento debe tener al menos 3 caracteres."
MSG_TASK_CREATED = "Tarea creada con éxito"

DEPARTMENT_PREFIX_LENGTH = 3

_DUE_DATE_RE = re.compile(r"^[0-9]{2}/[0-9]{2}/[0-9]{4}$")


@dataclass(frozen=True)
class NewTaskState:
    """Form values plus the one-shot message and navigation flag."""

    title: str = ""
    description: str = ""
    due_date_text: str = ""  # As typed, dd/MM/yyyy
    department: str = ""
    priority: Priority = Priority.LOW
    task_created: bool = False
    user_message: str | None = None


def parse_due_date(text: str) -> date | None:
    """Parse a dd/MM/yyyy date.

    Day and month need two digits and the year four; the date must exist.

    Args:
        text: Date as typed by the user

    Returns:
        Parsed date, or None if the text is not a valid dd/MM/yyyy date
    """
    if not _DUE_DATE_RE.match(text):
        return None
    try:
        return datetime.strptime(text, "%d/%m/%Y").date()
    except ValueError:
        return None


def format_short_date(value: date) -> str:
    """Format as day and abbreviated month, e.g. "25 Dec"."""
    return f"{value.day} {value.strftime('%b')}"


def format_full_date(value: date) -> str:
    """Format as day, abbreviated month and year, e.g. "25 Dec 2024"."""
    return f"{format_short_date(value)} {value.year:04d}"


def make_task_number(department: str) -> str:
    """Build a display task number such as "#FIS-3F2A".

    Args:
        department: Department name with at least three characters

    Raises:
        ValueError: If the department is shorter than three characters
    """
    prefix = department.strip()[:DEPARTMENT_PREFIX_LENGTH]
    if len(prefix) < DEPARTMENT_PREFIX_LENGTH:
        raise ValueError(f"Department too short for a task number: {department!r}")
    suffix = str(uuid.uuid4())[:4]
    return f"#{prefix.upper()}-{suffix.upper()}"


class NewTaskViewModel(ViewModel[NewTaskState]):
    """Collects form edits and creates the task on submit."""

    def __init__(self, repository: TaskRepository) -> None:
        """Initialize view model.

        Args:
            repository: Task store new tasks are added to
        """
        super().__init__(NewTaskState())
        self._repository = repository

    # ---- field setters ----

    def set_title(self, title: str) -> None:
        """Set the task title."""
        self.store.update(lambda s: replace(s, title=title))

    def set_description(self, description: str) -> None:
        """Set the optional description."""
        self.store.update(lambda s: replace(s, description=description))

    def set_due_date_text(self, text: str) -> None:
        """Set the due date as typed; it is parsed on submit."""
        self.store.update(lambda s: replace(s, due_date_text=text))

    def set_department(self, department: str) -> None:
        """Set the responsible department."""
        self.store.update(lambda s: replace(s, department=department))

    def set_priority(self, priority: Priority) -> None:
        """Set the priority."""
        self.store.update(lambda s: replace(s, priority=priority))

    # ---- submission ----

    def submit(self) -> "asyncio.Task[Task | None]":
        """Validate the form and create the task in the background.

        Returns:
            Background task resolving to the created task, or None when the
            form was rejected. Store failures are raised from it.
        """
        return self.launch(self._submit())

    async def _submit(self) -> Task | None:
        form = self.state

        due = parse_due_date(form.due_date_text)
        if due is None:
            self._show_message(MSG_INVALID_DATE)
            return None

        if not form.title.strip() or not form.department.strip():
            self._show_message(MSG_REQUIRED_FIELDS)
            return None

        try:
            task_number = make_task_number(form.department)
        except ValueError:
            self._show_message(MSG_DEPARTMENT_TOO_SHORT)
            return None

        task = Task(
            id=str(uuid.uuid4()),
            title=form.title,
            description=form.description,
            department=form.department,
            priority=form.priority,
            status=TaskStatus.PENDING,
            due_date=format_short_date(due),
            full_due_date=format_full_date(due),
            task_number=task_number,
        )
        await self._repository.add(task)
        logger.info(f"[NewTaskViewModel] Created task {task.id} ({task.task_number})")
        self.store.update(lambda s: replace(s, task_created=True, user_message=MSG_TASK_CREATED))
        return task

    def _show_message(self, message: str) -> None:
        logger.debug(f"[NewTaskViewModel] Rejected form: {message}")
        self.store.update(lambda s: replace(s, user_message=message))

    # ---- one-shot events ----

    def acknowledge_message(self) -> None:
        """Clear the message once it has been shown."""
        self.store.update(lambda s: replace(s, user_message=None))

    def acknowledge_navigation(self) -> None:
        """Clear the creation flag once the screen navigated away."""
        self.store.update(lambda s: replace(s, task_created=False))
