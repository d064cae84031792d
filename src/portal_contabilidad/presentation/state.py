"""Observable screen state and the view model base class."""

import asyncio
import logging
from collections.abc import Callable, Coroutine
from types import TracebackType
from typing import Any, Generic, TypeVar

from portal_contabilidad.data.subscription import Subscription

logger = logging.getLogger(__name__)

S = TypeVar("S")
T = TypeVar("T")


class StateStore(Generic[S]):
    """Holds the current immutable state snapshot and notifies listeners on change."""

    def __init__(self, initial: S) -> None:
        """Initialize store with its first snapshot."""
        self._value = initial
        self._listeners: list[Callable[[S], None]] = []

    @property
    def value(self) -> S:
        """Current snapshot."""
        return self._value

    def update(self, transform: Callable[[S], S]) -> S:
        """Replace the snapshot with `transform(current)`.

        Listeners are notified only if the new snapshot differs.

        Args:
            transform: Function producing the next snapshot

        Returns:
            The snapshot after the update
        """
        new_value = transform(self._value)
        if new_value == self._value:
            return self._value
        self._value = new_value
        for listener in list(self._listeners):
            try:
                listener(new_value)
            except Exception as e:
                logger.error(f"[StateStore] Listener error: {e}", exc_info=True)
        return new_value

    def add_listener(self, listener: Callable[[S], None]) -> Callable[[], None]:
        """Register a change listener.

        Args:
            listener: Called with every new snapshot

        Returns:
            Callable that removes the listener
        """
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove


class ViewModel(Generic[S]):
    """Base class for screen view models.

    Owns the screen's state store, the background tasks it launched and the
    subscriptions it opened. Closing the view model cancels and releases all
    of them.
    """

    def __init__(self, initial: S) -> None:
        """Initialize view model with its first state snapshot."""
        self.store: StateStore[S] = StateStore(initial)
        self._tasks: set[asyncio.Task[Any]] = set()
        self._subscriptions: list[Subscription[Any]] = []
        self._closed = False

    @property
    def state(self) -> S:
        """Current state snapshot."""
        return self.store.value

    def start(self) -> None:
        """Open the screen's subscriptions. No-op by default."""

    def launch(self, coro: Coroutine[Any, Any, T]) -> "asyncio.Task[T]":
        """Run a coroutine in the view model's scope.

        The returned task can be awaited for the result; failures are also logged.

        Args:
            coro: Coroutine to schedule

        Returns:
            The scheduled task
        """
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)
        return task

    def _on_task_done(self, task: "asyncio.Task[Any]") -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(
                f"[{type(self).__name__}] Background task failed: {error}",
                exc_info=error,
            )

    def collect(self, subscription: Subscription[T], handler: Callable[[T], None]) -> None:
        """Feed every snapshot of a subscription into `handler` until it ends.

        Args:
            subscription: Live subscription owned by this view model from now on
            handler: Called on the event loop with each snapshot
        """
        self._subscriptions.append(subscription)

        async def consume() -> None:
            async with subscription:
                async for value in subscription:
                    handler(value)

        self.launch(consume())

    async def close(self) -> None:
        """Cancel background work and release subscriptions. Idempotent."""
        if self._closed:
            return
        self._closed = True
        for subscription in self._subscriptions:
            subscription.close()
        self._subscriptions.clear()
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        logger.debug(f"[{type(self).__name__}] Closed")

    async def __aenter__(self) -> "ViewModel[S]":
        self.start()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()
