"""
Rate-limited serial queue for AI provider calls.

Dispatches queued operations one at a time, in FIFO order, with at least
``min_interval`` seconds between dispatches. This keeps bursts of callers
from tripping backend-side rate limits; each queued operation is still
wrapped in retry_with_backoff.
"""

import asyncio
import logging
import time
from collections import deque
from typing import Awaitable, Callable, Deque, Optional, Tuple, TypeVar

from .retry import RetryPolicy, SleepFunc, retry_with_backoff

logger = logging.getLogger(__name__)

T = TypeVar("T")

_QueueItem = Tuple[Callable[[], Awaitable], Optional[RetryPolicy], "asyncio.Future"]


class RateLimitedQueue:
    """
    FIFO queue plus a single processing flag.

    At most one enqueued operation runs at a time. The processing flag
    and the backlog are only touched from the event loop thread.
    """

    def __init__(
        self,
        min_interval: float = 1.0,
        *,
        name: str = "default",
        clock: Callable[[], float] = time.monotonic,
        sleep_func: Optional[SleepFunc] = None,
        logger: Optional[logging.Logger] = None,
    ):
        if min_interval < 0:
            raise ValueError("min_interval cannot be negative")

        self.min_interval = min_interval
        self.name = name
        self._clock = clock
        self._sleep = sleep_func or asyncio.sleep
        self._logger = logger or logging.getLogger(__name__)

        self._pending: Deque[_QueueItem] = deque()
        self._processing = False
        self._last_dispatch: Optional[float] = None
        self._worker: Optional["asyncio.Task"] = None

    async def execute(
        self,
        operation: Callable[[], Awaitable[T]],
        policy: Optional[RetryPolicy] = None,
    ) -> T:
        """
        Enqueue an operation and wait for its turn to complete.

        Args:
            operation: Zero-argument callable returning a fresh awaitable
            policy: Retry policy applied to this operation

        Returns:
            The operation's result; its final error propagates unchanged
        """
        loop = asyncio.get_running_loop()
        future = loop.create_future()
        self._pending.append((operation, policy, future))

        if not self._processing:
            self._processing = True
            self._worker = loop.create_task(self._process_queue())

        return await future

    async def _process_queue(self) -> None:
        try:
            while self._pending:
                if self._pending[0][2].cancelled():
                    self._pending.popleft()
                    continue

                # The head item stays queued until its interval has elapsed
                if self._last_dispatch is not None:
                    wait_time = self.min_interval - (self._clock() - self._last_dispatch)
                    if wait_time > 0:
                        self._logger.debug(
                            f"Queue '{self.name}' waiting {wait_time:.3f}s before next dispatch "
                            f"({len(self._pending)} waiting)"
                        )
                        await self._sleep(wait_time)

                operation, policy, future = self._pending.popleft()
                if future.cancelled():
                    continue

                self._last_dispatch = self._clock()

                try:
                    result = await retry_with_backoff(
                        operation, policy, logger=self._logger, sleep_func=self._sleep
                    )
                except Exception as error:
                    if not future.done():
                        future.set_exception(error)
                else:
                    if not future.done():
                        future.set_result(result)
        finally:
            self._processing = False

    def queue_length(self) -> int:
        """Number of operations waiting to be dispatched"""
        return len(self._pending)

    @property
    def is_processing(self) -> bool:
        return self._processing

    def __repr__(self) -> str:
        return (
            f"RateLimitedQueue(name={self.name}, min_interval={self.min_interval}, "
            f"pending={len(self._pending)})"
        )
