"""
Async retry with exponential backoff, jitter and per-attempt timeouts.

Provides the building blocks every provider call goes through:
- RetryPolicy: immutable retry configuration
- calculate_delay: backoff delay for a given attempt
- with_timeout: race an awaitable against a deadline
- retry_with_backoff: bounded retry loop driven by error classification
- retry_batch: retry many operations concurrently, independently
"""

import asyncio
import logging
import random
from dataclasses import dataclass, field, replace
from typing import Any, Awaitable, Callable, FrozenSet, List, Optional, TypeVar, Union

from .exceptions import ErrorKind, RequestTimeoutError, classify_error

logger = logging.getLogger(__name__)

T = TypeVar("T")

SleepFunc = Callable[[float], Awaitable[Any]]

JITTER_RATIO = 0.25

DEFAULT_RETRYABLE_ERRORS = frozenset(
    {
        ErrorKind.NETWORK,
        ErrorKind.TIMEOUT,
        ErrorKind.EXTERNAL_API,
        ErrorKind.RATE_LIMITED,
    }
)


@dataclass(frozen=True)
class RetryPolicy:
    """
    Immutable retry configuration.

    Attributes:
        max_attempts: Total attempts including the first one (>= 1)
        base_delay: Delay before the second attempt, in seconds
        max_delay: Upper bound for any computed delay, in seconds
        backoff_multiplier: Growth factor applied per attempt
        jitter: Randomize each delay by up to +/-25%
        retryable_errors: Error kinds that trigger another attempt
        timeout: Optional per-attempt deadline, in seconds
    """

    max_attempts: int = 3
    base_delay: float = 1.0
    max_delay: float = 30.0
    backoff_multiplier: float = 2.0
    jitter: bool = True
    retryable_errors: FrozenSet[ErrorKind] = field(
        default_factory=lambda: DEFAULT_RETRYABLE_ERRORS
    )
    timeout: Optional[float] = None

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.base_delay < 0 or self.max_delay < 0:
            raise ValueError("Delays cannot be negative")
        if self.backoff_multiplier <= 0:
            raise ValueError("backoff_multiplier must be positive")
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be positive")
        object.__setattr__(
            self,
            "retryable_errors",
            frozenset(ErrorKind(kind) for kind in self.retryable_errors),
        )

    def with_overrides(self, **changes) -> "RetryPolicy":
        """Return a copy of this policy with some fields replaced"""
        return replace(self, **changes)

    def is_retryable(self, error: BaseException) -> bool:
        return classify_error(error) in self.retryable_errors


DEFAULT_RETRY_POLICY = RetryPolicy()


def calculate_delay(
    attempt: int, policy: RetryPolicy, rng: Optional[random.Random] = None
) -> float:
    """
    Compute the delay to wait after a failed attempt.

    delay = min(base_delay * multiplier ** (attempt - 1), max_delay), then
    shifted by a uniform offset within +/-25% when jitter is enabled.
    """
    if attempt < 1:
        raise ValueError("attempt numbers start at 1")

    delay = min(
        policy.base_delay * policy.backoff_multiplier ** (attempt - 1),
        policy.max_delay,
    )

    if policy.jitter:
        _rng = rng or random
        jitter_range = delay * JITTER_RATIO
        delay = max(0.0, delay + _rng.uniform(-jitter_range, jitter_range))

    return delay


def _consume_abandoned_result(task: "asyncio.Future") -> None:
    """Retrieve the outcome of an operation whose caller stopped waiting"""
    if task.cancelled():
        return
    error = task.exception()
    if error is not None:
        logger.debug(f"Abandoned operation finished with error after timeout: {error!r}")


async def with_timeout(awaitable: Awaitable[T], timeout: float) -> T:
    """
    Race an awaitable against a deadline.

    If the deadline wins, RequestTimeoutError is raised with the elapsed
    time in its message. The underlying operation is shielded, not
    cancelled: it keeps running and its outcome is discarded.

    Args:
        awaitable: Coroutine or future to wait for
        timeout: Deadline in seconds

    Returns:
        The awaitable's result, unchanged

    Raises:
        RequestTimeoutError: If the deadline elapses first
    """
    loop = asyncio.get_running_loop()
    task = asyncio.ensure_future(awaitable)
    started = loop.time()

    try:
        return await asyncio.wait_for(asyncio.shield(task), timeout)
    except asyncio.TimeoutError:
        if task.done():
            # The operation itself raised a timeout error
            raise
        elapsed = loop.time() - started
        task.add_done_callback(_consume_abandoned_result)
        raise RequestTimeoutError(
            f"Operation timed out after {elapsed:.3f}s (limit {timeout}s)",
            timeout_seconds=timeout,
            elapsed_seconds=elapsed,
        ) from None


async def retry_with_backoff(
    operation: Callable[[], Awaitable[T]],
    policy: Optional[RetryPolicy] = None,
    *,
    logger: Optional[logging.Logger] = None,
    sleep_func: Optional[SleepFunc] = None,
    rng: Optional[random.Random] = None,
) -> T:
    """
    Run an async operation, retrying classified transient failures.

    Unclassified errors, non-retryable kinds and the final attempt's error
    propagate immediately and unmodified.

    Args:
        operation: Zero-argument callable returning a fresh awaitable per attempt
        policy: Retry configuration (defaults to DEFAULT_RETRY_POLICY)
        logger: Receives one structured record per retry
        sleep_func: Injectable async sleep, for tests
        rng: Injectable random source for jitter, for tests

    Returns:
        The operation's result

    Example:
        >>> result = await retry_with_backoff(
        ...     lambda: client.chat.completions.create(**params),
        ...     RetryPolicy(max_attempts=3, timeout=60),
        ... )
    """
    policy = policy or DEFAULT_RETRY_POLICY
    log = logger or logging.getLogger(__name__)
    sleep = sleep_func or asyncio.sleep

    for attempt in range(1, policy.max_attempts + 1):
        try:
            if policy.timeout is not None:
                return await with_timeout(operation(), policy.timeout)
            return await operation()
        except Exception as error:
            kind = classify_error(error)
            if attempt >= policy.max_attempts or kind not in policy.retryable_errors:
                raise

            delay = calculate_delay(attempt, policy, rng)
            log.warning(
                f"Attempt {attempt}/{policy.max_attempts} failed ({kind.value}), "
                f"retrying in {delay:.3f}s: {error}",
                extra={
                    "attempt": attempt,
                    "max_attempts": policy.max_attempts,
                    "error_kind": kind.value,
                    "delay": delay,
                },
            )
            await sleep(delay)

    raise RuntimeError("retry_with_backoff: unexpected state")


async def retry_batch(
    operations: List[Callable[[], Awaitable[T]]],
    policy: Optional[RetryPolicy] = None,
    **retry_kwargs,
) -> List[Union[T, BaseException]]:
    """
    Run every operation concurrently, each wrapped by retry_with_backoff.

    Never short-circuits: one failure does not stop the others.

    Returns:
        One entry per input, in input order: the result or the exception
    """
    return await asyncio.gather(
        *(retry_with_backoff(op, policy, **retry_kwargs) for op in operations),
        return_exceptions=True,
    )
