"""Live subscription handle fed by backend listener threads."""

import asyncio
import logging
from collections.abc import Callable
from types import TracebackType
from typing import Generic, TypeVar

from portal_contabilidad.errors import SubscriptionError

logger = logging.getLogger(__name__)

T = TypeVar("T")

_CLOSED = object()


class _Failure:
    """Queue marker carrying the error that terminated a subscription."""

    def __init__(self, error: BaseException) -> None:
        self.error = error


class Subscription(Generic[T]):
    """Standing request that yields a snapshot every time the stored data changes.

    Backends call `push` and `fail` from any thread; the consumer iterates on
    the event loop the subscription was created on:

        async with repository.subscribe_all() as updates:
            async for tasks in updates:
                ...

    Closing the subscription releases the backend listener and ends iteration.
    """

    def __init__(self, name: str, loop: asyncio.AbstractEventLoop | None = None) -> None:
        """Initialize an open subscription.

        Args:
            name: Label used in log messages (e.g. "tasks" or "tasks/<id>")
            loop: Event loop that consumes the snapshots. Defaults to the running loop.
        """
        self.name = name
        self._loop = loop or asyncio.get_running_loop()
        self._queue: asyncio.Queue[object] = asyncio.Queue()
        self._release: Callable[[], None] | None = None
        self._closed = False

    @property
    def closed(self) -> bool:
        """Whether the subscription has been closed or failed."""
        return self._closed

    def set_release(self, release: Callable[[], None]) -> None:
        """Register the callable that detaches the backend listener."""
        self._release = release
        if self._closed:
            self._run_release()

    def push(self, value: T) -> None:
        """Deliver a snapshot. Safe to call from any thread."""
        self._post(value)

    def fail(self, error: BaseException) -> None:
        """Terminate the subscription with an error. Safe to call from any thread."""
        self._post(_Failure(error))

    def _post(self, item: object) -> None:
        if self._closed:
            return
        try:
            self._loop.call_soon_threadsafe(self._queue.put_nowait, item)
        except RuntimeError:
            # Loop already closed; nobody is listening anymore
            logger.debug(f"[Subscription] Dropped delivery for {self.name}: loop closed")

    def close(self) -> None:
        """Release the backend listener and end iteration. Idempotent."""
        if self._closed:
            return
        self._closed = True
        self._run_release()
        self._queue.put_nowait(_CLOSED)
        logger.debug(f"[Subscription] Closed {self.name}")

    def _run_release(self) -> None:
        release, self._release = self._release, None
        if release is None:
            return
        try:
            release()
        except Exception as e:
            logger.warning(f"[Subscription] Failed to release listener for {self.name}: {e}")

    def __aiter__(self) -> "Subscription[T]":
        return self

    async def __anext__(self) -> T:
        if self._closed and self._queue.empty():
            raise StopAsyncIteration
        item = await self._queue.get()
        if item is _CLOSED:
            raise StopAsyncIteration
        if isinstance(item, _Failure):
            logger.error(f"[Subscription] {self.name} terminated: {item.error}")
            self.close()
            raise SubscriptionError(f"Subscription {self.name} failed: {item.error}") from item.error
        return item  # type: ignore[return-value]

    async def first(self) -> T:
        """Wait for the next snapshot, then close the subscription.

        Raises:
            SubscriptionError: If the subscription fails or closes before delivering
        """
        try:
            async for value in self:
                return value
            raise SubscriptionError(f"Subscription {self.name} closed before delivering")
        finally:
            self.close()

    async def __aenter__(self) -> "Subscription[T]":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
