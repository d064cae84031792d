"""Tests for the task document watcher's event handling."""

from pathlib import Path

from watchdog.events import DirCreatedEvent, FileCreatedEvent, FileDeletedEvent, FileMovedEvent

from portal_contabilidad.data.task_watcher import _TaskEventHandler


def _recording_handler() -> tuple[_TaskEventHandler, list[tuple[str, str]]]:
    events: list[tuple[str, str]] = []
    return _TaskEventHandler(lambda kind, task_id: events.append((kind, task_id))), events


def test_yaml_document_triggers_callback(tmp_path: Path) -> None:
    """Test a created .yaml document reports its task id."""
    handler, events = _recording_handler()

    handler.on_created(FileCreatedEvent(str(tmp_path / "a1.yaml")))

    assert events == [("created", "a1")]


def test_other_files_are_ignored(tmp_path: Path) -> None:
    """Test temp files, hidden files and directories are ignored."""
    handler, events = _recording_handler()

    handler.on_created(FileCreatedEvent(str(tmp_path / "notes.txt")))
    handler.on_created(FileCreatedEvent(str(tmp_path / ".a1.yaml.tmp")))
    handler.on_created(FileCreatedEvent(str(tmp_path / ".hidden.yaml")))
    handler.on_created(DirCreatedEvent(str(tmp_path / "sub.yaml")))

    assert events == []


def test_atomic_replace_reports_destination(tmp_path: Path) -> None:
    """Test a rename onto a document counts as a modification of it."""
    handler, events = _recording_handler()

    handler.on_moved(FileMovedEvent(str(tmp_path / ".a1.yaml.tmp"), str(tmp_path / "a1.yaml")))

    assert events == [("modified", "a1")]


def test_callback_errors_are_contained(tmp_path: Path) -> None:
    """Test a failing callback does not break the observer thread."""

    def broken(kind: str, task_id: str) -> None:
        raise RuntimeError("boom")

    handler = _TaskEventHandler(broken)
    handler.on_deleted(FileDeletedEvent(str(tmp_path / "a1.yaml")))
