# ABOUTME: Fetch-trigger controller driving the idle -> loading -> success/error lifecycle of a client module.
# ABOUTME: Each trigger starts one async request; results from superseded triggers are discarded.

import asyncio
import logging
from enum import Enum
from typing import Awaitable, Callable, Generic, TypeVar

from pydantic import BaseModel

logger = logging.getLogger(__name__)

R = TypeVar("R")
T = TypeVar("T")


class FetchStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


class FetchState(BaseModel, Generic[T]):
    """Display state owned by a single controller."""

    status: FetchStatus = FetchStatus.IDLE
    data: T | None = None
    error_message: str | None = None


class FetchController(Generic[R, T]):
    """Runs one request per trigger and exposes the resulting FetchState.

    trigger() is fire-and-forget: it flips the state to loading and schedules the
    request on the running event loop. Every trigger bumps a generation counter,
    and only the request belonging to the latest generation may write the state,
    so a slow superseded request can never overwrite a newer result.

    Args:
        name: Label used in log lines.
        fetch: Coroutine function performing the request.
        error_message: Fixed user-facing message shown for any failure.
        on_success: Optional hook run with (request, data) before a winning result is published.
    """

    def __init__(
        self,
        name: str,
        fetch: Callable[[R], Awaitable[T]],
        error_message: str,
        on_success: Callable[[R, T], None] | None = None,
    ):
        self.name = name
        self.error_message = error_message
        self._fetch = fetch
        self._on_success = on_success
        self._state: FetchState[T] = FetchState()
        self._generation = 0
        self._last_request: R | None = None
        self._latest: asyncio.Task | None = None
        self._pending: set[asyncio.Task] = set()

    @property
    def state(self) -> FetchState[T]:
        return self._state

    @property
    def last_request(self) -> R | None:
        return self._last_request

    def trigger(self, request: R) -> None:
        """Start a new request, superseding any request still in flight."""
        self._generation += 1
        self._last_request = request
        self._state = FetchState(status=FetchStatus.LOADING)

        task = asyncio.get_running_loop().create_task(self._run(request, self._generation))
        self._latest = task
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    def retry(self) -> None:
        """Re-issue the last request, if there was one."""
        if self._generation:
            self.trigger(self._last_request)

    async def wait(self) -> FetchState[T]:
        """Wait for the most recent trigger to settle and return the resulting state."""
        if self._latest is not None:
            await asyncio.shield(self._latest)
        return self._state

    def cancel(self) -> None:
        """Cancel every in-flight request; used when the owning module is unmounted."""
        for task in list(self._pending):
            task.cancel()

    async def _run(self, request: R, generation: int) -> None:
        try:
            data = await self._fetch(request)
            if generation != self._generation:
                logger.debug("%s: dropping result of superseded request %r", self.name, request)
                return
            if self._on_success is not None:
                self._on_success(request, data)
        except Exception:
            if generation != self._generation:
                logger.debug("%s: dropping failure of superseded request %r", self.name, request)
                return
            logger.exception("%s request failed for %r", self.name, request)
            self._state = FetchState(status=FetchStatus.ERROR, error_message=self.error_message)
            return

        self._state = FetchState(status=FetchStatus.SUCCESS, data=data)
