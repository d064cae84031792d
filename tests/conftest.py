"""Test fixtures for the task portal."""

from pathlib import Path

import pytest

from portal_contabilidad.data.models import Priority, Task, TaskStatus


@pytest.fixture
def sample_tasks() -> list[Task]:
    """Tasks covering every stored status, in store order."""
    return [
        Task(
            id="a1",
            title="Conciliación Bancaria - Julio",
            department="Contabilidad General",
            status=TaskStatus.PENDING,
            due_date="25 Oct",
            full_due_date="25 Oct 2023",
            task_number="#CON-84A1",
            description="Revisar las facturas del 100 al 150.",
            priority=Priority.HIGH,
        ),
        Task(
            id="b2",
            title="Pago a proveedores",
            department="Cuentas por Pagar",
            status=TaskStatus.IN_PROGRESS,
            task_number="#CUE-11B2",
        ),
        Task(
            id="c3",
            title="Declaración de IVA",
            department="Fiscal",
            status=TaskStatus.COMPLETED,
            task_number="#FIS-22C3",
        ),
        Task(
            id="d4",
            title="Nómina quincenal",
            department="Recursos Humanos",
            status=TaskStatus.HIGH_PRIORITY,
            task_number="#REC-33D4",
        ),
        Task(
            id="e5",
            title="Cierre mensual",
            department="Contabilidad General",
            status=TaskStatus.PENDING,
            task_number="#CON-44E5",
            priority=Priority.MEDIUM,
        ),
    ]


@pytest.fixture
def tasks_dir(tmp_path: Path) -> Path:
    """Create an empty local task document directory."""
    directory = tmp_path / "tasks"
    directory.mkdir()
    return directory
