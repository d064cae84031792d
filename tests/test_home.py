"""Tests for the home screen view model."""

import pytest
from fakes import FakeTaskRepository, settle

from portal_contabilidad.data.models import Task, TaskStatus
from portal_contabilidad.presentation.home import HomeState, HomeViewModel, filter_tasks


@pytest.mark.parametrize(
    "status",
    [
        TaskStatus.PENDING,
        TaskStatus.IN_PROGRESS,
        TaskStatus.COMPLETED,
        TaskStatus.HIGH_PRIORITY,
    ],
)
def test_filter_tasks_exact_match(sample_tasks: list[Task], status: TaskStatus) -> None:
    """Test filtering keeps exactly the tasks with that status, in order."""
    result = filter_tasks(sample_tasks, status)

    assert list(result) == [t for t in sample_tasks if t.status == status]


def test_filter_tasks_all_returns_everything(sample_tasks: list[Task]) -> None:
    """Test ALL returns the list unchanged."""
    assert filter_tasks(sample_tasks, TaskStatus.ALL) == tuple(sample_tasks)


def test_filter_tasks_preserves_delivery_order(sample_tasks: list[Task]) -> None:
    """Test pending tasks keep the store order, not a sorted one."""
    reordered = [sample_tasks[4], sample_tasks[1], sample_tasks[0]]

    result = filter_tasks(reordered, TaskStatus.PENDING)

    assert [t.id for t in result] == ["e5", "a1"]


@pytest.mark.asyncio
async def test_initial_state_shows_all(sample_tasks: list[Task]) -> None:
    """Test the first delivery fills the list with the ALL filter selected."""
    repository = FakeTaskRepository(sample_tasks)
    async with HomeViewModel(repository) as view_model:
        assert view_model.state == HomeState()

        await settle()

        assert view_model.state.tasks == tuple(sample_tasks)
        assert view_model.state.selected_status is TaskStatus.ALL


@pytest.mark.asyncio
async def test_set_filter(sample_tasks: list[Task]) -> None:
    """Test selecting a filter restricts the visible list."""
    repository = FakeTaskRepository(sample_tasks)
    async with HomeViewModel(repository) as view_model:
        await settle()

        view_model.set_filter(TaskStatus.PENDING)

        assert [t.id for t in view_model.state.tasks] == ["a1", "e5"]
        assert view_model.state.selected_status is TaskStatus.PENDING


@pytest.mark.asyncio
async def test_set_filter_with_no_matches_still_selects(sample_tasks: list[Task]) -> None:
    """Test the filter is selected even when nothing matches."""
    repository = FakeTaskRepository([t for t in sample_tasks if t.status != TaskStatus.COMPLETED])
    async with HomeViewModel(repository) as view_model:
        await settle()

        view_model.set_filter(TaskStatus.COMPLETED)

        assert view_model.state.tasks == ()
        assert view_model.state.selected_status is TaskStatus.COMPLETED


@pytest.mark.asyncio
async def test_new_delivery_reapplies_selected_filter(sample_tasks: list[Task]) -> None:
    """Test a redelivered list is filtered by the current selection."""
    repository = FakeTaskRepository(sample_tasks[:2])
    async with HomeViewModel(repository) as view_model:
        await settle()
        view_model.set_filter(TaskStatus.PENDING)

        repository.emit_all(sample_tasks)
        await settle()

        assert [t.id for t in view_model.state.tasks] == ["a1", "e5"]
        assert view_model.all_tasks == tuple(sample_tasks)


@pytest.mark.asyncio
async def test_delete_is_not_optimistic(sample_tasks: list[Task]) -> None:
    """Test delete forwards to the store and waits for redelivery."""
    repository = FakeTaskRepository(sample_tasks)
    async with HomeViewModel(repository) as view_model:
        await settle()
        view_model.set_filter(TaskStatus.PENDING)

        await view_model.request_delete(sample_tasks[0])

        assert repository.deleted == ["a1"]
        assert [t.id for t in view_model.state.tasks] == ["a1", "e5"]

        repository.emit_all(t for t in sample_tasks if t.id != "a1")
        await settle()

        assert [t.id for t in view_model.state.tasks] == ["e5"]
        assert view_model.state.selected_status is TaskStatus.PENDING


@pytest.mark.asyncio
async def test_delete_round_trip_through_live_store(sample_tasks: list[Task]) -> None:
    """Test a store that echoes changes removes the task from the visible list."""
    repository = FakeTaskRepository(sample_tasks, echo=True)
    async with HomeViewModel(repository) as view_model:
        await settle()

        await view_model.request_delete(sample_tasks[3])
        await settle()

        assert "d4" not in [t.id for t in view_model.state.tasks]


@pytest.mark.asyncio
async def test_delete_failure_is_surfaced(sample_tasks: list[Task]) -> None:
    """Test a failed delete raises from the returned task."""
    repository = FakeTaskRepository(sample_tasks)
    repository.error = RuntimeError("permission denied")
    async with HomeViewModel(repository) as view_model:
        await settle()

        with pytest.raises(RuntimeError, match="permission denied"):
            await view_model.request_delete(sample_tasks[0])

        assert view_model.state.tasks == tuple(sample_tasks)


@pytest.mark.asyncio
async def test_subscription_failure_keeps_last_state(sample_tasks: list[Task]) -> None:
    """Test a failed subscription leaves the screen showing its last list."""
    repository = FakeTaskRepository(sample_tasks)
    async with HomeViewModel(repository) as view_model:
        await settle()

        repository.fail_all(RuntimeError("stream reset"))
        await settle()

        assert view_model.state.tasks == tuple(sample_tasks)
        assert repository.open_subscriptions() == 0


@pytest.mark.asyncio
async def test_close_releases_subscription(sample_tasks: list[Task]) -> None:
    """Test leaving the screen releases its subscription."""
    repository = FakeTaskRepository(sample_tasks)
    async with HomeViewModel(repository):
        await settle()
        assert repository.open_subscriptions() == 1

    assert repository.open_subscriptions() == 0
