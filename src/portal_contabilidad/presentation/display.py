"""Display names and colors shown by the screens.

These are rendering concerns; the domain enums carry only identifiers.
"""

from dataclasses import dataclass

from portal_contabilidad.data.models import Priority, TaskStatus


@dataclass(frozen=True)
class Label:
    """Display name plus an optional hex color."""

    name: str
    color: str | None = None


STATUS_LABELS: dict[TaskStatus, Label] = {
    TaskStatus.ALL: Label("Todas"),
    TaskStatus.PENDING: Label("Pendiente", "#E6B800"),
    TaskStatus.IN_PROGRESS: Label("En Progreso", "#1B396A"),
    TaskStatus.COMPLETED: Label("Completada", "#4CAF50"),
    TaskStatus.HIGH_PRIORITY: Label("Alta Prioridad", "#FF0000"),
}

PRIORITY_LABELS: dict[Priority, Label] = {
    Priority.HIGH: Label("Alta", "#FF0000"),
    Priority.MEDIUM: Label("Media", "#FFFF00"),
    Priority.LOW: Label("Baja", "#00FF00"),
}

# Filter tabs on the home screen, in display order
HOME_FILTER_TABS: tuple[tuple[TaskStatus, str], ...] = (
    (TaskStatus.ALL, "Todas"),
    (TaskStatus.PENDING, "Pendientes"),
    (TaskStatus.IN_PROGRESS, "En Progreso"),
    (TaskStatus.COMPLETED, "Completadas"),
)

# Status choices offered on the detail screen
DETAIL_STATUS_CHOICES: tuple[tuple[TaskStatus, str], ...] = (
    (TaskStatus.PENDING, "Pendiente"),
    (TaskStatus.IN_PROGRESS, "En Progreso"),
    (TaskStatus.COMPLETED, "Hecho"),
)

# MEDIUM stays a valid priority but is not offered when creating a task
CREATION_PRIORITIES: tuple[Priority, ...] = (Priority.HIGH, Priority.LOW)

DEPARTMENTS: tuple[str, ...] = (
    "Contabilidad General",
    "Cuentas por Pagar",
    "Fiscal",
    "Recursos Humanos",
)


def status_label(status: TaskStatus) -> Label:
    """Get the display label for a status."""
    return STATUS_LABELS[status]


def priority_label(priority: Priority) -> Label:
    """Get the display label for a priority."""
    return PRIORITY_LABELS[priority]
