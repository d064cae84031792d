"""Task domain model and document codec."""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from portal_contabilidad.errors import TaskDocumentError


class TaskStatus(str, Enum):
    """Lifecycle stage of a task.

    ALL is a filter value only and never stored on a task.
    """

    ALL = "ALL"
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    HIGH_PRIORITY = "HIGH_PRIORITY"


class Priority(str, Enum):
    """Urgency of a task, independent of its status."""

    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


@dataclass(frozen=True)
class Task:
    """Task stored in the `tasks` collection."""

    id: str = ""
    title: str = ""
    department: str = ""
    status: TaskStatus = TaskStatus.PENDING
    due_date: str = ""  # Short display date, e.g. "25 Dec"
    full_due_date: str = ""  # Long display date, e.g. "25 Dec 2024"
    task_number: str = ""  # e.g. "#FIS-3F2A"
    description: str = ""
    priority: Priority = Priority.LOW

    def __post_init__(self) -> None:
        if self.status is TaskStatus.ALL:
            raise ValueError("TaskStatus.ALL is a filter value, not a task status")


# Attribute name -> document field name
_FIELDS: dict[str, str] = {
    "id": "id",
    "title": "title",
    "department": "department",
    "status": "status",
    "due_date": "dueDate",
    "full_due_date": "fullDueDate",
    "task_number": "taskNumber",
    "description": "description",
    "priority": "priority",
}

_TEXT_ATTRS = ("title", "department", "due_date", "full_due_date", "task_number", "description")


def task_to_document(task: Task) -> dict[str, Any]:
    """Serialize a task into document fields.

    Args:
        task: Task to serialize

    Returns:
        Dictionary with camelCase field names and enum names as values
    """
    document: dict[str, Any] = {}
    for attr, field_name in _FIELDS.items():
        value = getattr(task, attr)
        document[field_name] = value.value if isinstance(value, Enum) else value
    return document


def task_from_document(doc_id: str, data: dict[str, Any] | None) -> Task:
    """Deserialize document fields into a task.

    Missing fields take the Task defaults. The document key always wins
    over a stored `id` field.

    Args:
        doc_id: Document key
        data: Document fields

    Returns:
        Decoded task

    Raises:
        TaskDocumentError: If the document holds an unknown status or priority
    """
    data = data or {}
    values: dict[str, Any] = {}
    for attr, field_name in _FIELDS.items():
        if attr == "id" or field_name not in data or data[field_name] is None:
            continue
        values[attr] = data[field_name]

    try:
        if "status" in values:
            values["status"] = TaskStatus(values["status"])
        if "priority" in values:
            values["priority"] = Priority(values["priority"])
        for attr in _TEXT_ATTRS:
            if attr in values:
                values[attr] = str(values[attr])
        return Task(id=doc_id, **values)
    except ValueError as e:
        raise TaskDocumentError(doc_id, str(e)) from e
