"""Tests for the task model and document codec."""

import pytest

from portal_contabilidad.data.models import (
    Priority,
    Task,
    TaskStatus,
    task_from_document,
    task_to_document,
)
from portal_contabilidad.errors import TaskDocumentError


def test_task_defaults() -> None:
    """Test a bare task starts pending with low priority."""
    task = Task()
    assert task.id == ""
    assert task.status is TaskStatus.PENDING
    assert task.priority is Priority.LOW


def test_task_rejects_all_status() -> None:
    """Test ALL cannot be stored on a task."""
    with pytest.raises(ValueError):
        Task(id="x", status=TaskStatus.ALL)


def test_task_to_document_uses_camel_case_fields(sample_tasks: list[Task]) -> None:
    """Test document field names and enum encoding."""
    document = task_to_document(sample_tasks[0])

    assert document == {
        "id": "a1",
        "title": "Conciliación Bancaria - Julio",
        "department": "Contabilidad General",
        "status": "PENDING",
        "dueDate": "25 Oct",
        "fullDueDate": "25 Oct 2023",
        "taskNumber": "#CON-84A1",
        "description": "Revisar las facturas del 100 al 150.",
        "priority": "HIGH",
    }


def test_task_from_document_document_key_wins() -> None:
    """Test the document key overrides a stored id field."""
    task = task_from_document("key-1", {"id": "stale", "title": "Cierre", "status": "COMPLETED"})

    assert task.id == "key-1"
    assert task.title == "Cierre"
    assert task.status is TaskStatus.COMPLETED


def test_task_from_document_fills_defaults() -> None:
    """Test missing and null fields take the Task defaults."""
    task = task_from_document("k", {"title": "Solo título", "description": None})

    assert task.status is TaskStatus.PENDING
    assert task.priority is Priority.LOW
    assert task.description == ""
    assert task.due_date == ""


def test_task_from_empty_document() -> None:
    """Test a document without fields decodes to an empty task."""
    assert task_from_document("k", None) == Task(id="k")


@pytest.mark.parametrize(
    "data",
    [
        {"status": "DONE"},
        {"status": "ALL"},
        {"priority": "URGENT"},
    ],
)
def test_task_from_document_rejects_unknown_values(data: dict[str, str]) -> None:
    """Test unknown enum names and the ALL sentinel are rejected."""
    with pytest.raises(TaskDocumentError) as exc_info:
        task_from_document("bad", data)
    assert exc_info.value.doc_id == "bad"


def test_document_round_trip(sample_tasks: list[Task]) -> None:
    """Test encoding then decoding yields the same task."""
    task = sample_tasks[4]
    assert task_from_document(task.id, task_to_document(task)) == task
