"""
Circuit breaker for backend calls.

Stops calling a failing dependency once its failure threshold is reached
and lets trial traffic through again after a recovery timeout.

State machine:
    CLOSED    --failure_count >= threshold-->  OPEN
    OPEN      --recovery_timeout elapsed--->   HALF_OPEN (on next execute)
    HALF_OPEN --success_threshold successes->  CLOSED
    HALF_OPEN --one expected failure-------->  OPEN

failure_count is not reset when entering HALF_OPEN, so a single expected
failure during the trial window re-opens the breaker.
"""

import logging
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, FrozenSet, Optional, TypeVar

from .exceptions import ErrorKind, ServiceUnavailableError, classify_error

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CircuitState(str, Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


@dataclass(frozen=True)
class CircuitBreakerConfig:
    """
    Immutable breaker configuration.

    Attributes:
        failure_threshold: Expected failures needed to open the circuit
        recovery_timeout: Seconds to stay open before allowing a trial call
        expected_errors: Error kinds that count as breaker-relevant failures
        success_threshold: Consecutive half-open successes needed to close
    """

    failure_threshold: int = 5
    recovery_timeout: float = 60.0
    expected_errors: FrozenSet[ErrorKind] = field(
        default_factory=lambda: frozenset(
            {ErrorKind.NETWORK, ErrorKind.TIMEOUT, ErrorKind.EXTERNAL_API}
        )
    )
    success_threshold: int = 3

    def __post_init__(self):
        if self.failure_threshold < 1:
            raise ValueError("failure_threshold must be at least 1")
        if self.success_threshold < 1:
            raise ValueError("success_threshold must be at least 1")
        if self.recovery_timeout < 0:
            raise ValueError("recovery_timeout cannot be negative")
        object.__setattr__(
            self,
            "expected_errors",
            frozenset(ErrorKind(kind) for kind in self.expected_errors),
        )


@dataclass(frozen=True)
class CircuitBreakerStatus:
    """Read-only snapshot of a breaker's state"""

    state: CircuitState
    failure_count: int
    last_failure_time: float
    success_count: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "state": self.state.value,
            "failure_count": self.failure_count,
            "last_failure_time": self.last_failure_time,
            "success_count": self.success_count,
        }


class CircuitBreaker:
    """
    Per-dependency failure tracking state machine.

    The lock guards counter updates only and is never held while the
    wrapped operation is awaited.
    """

    def __init__(
        self,
        config: Optional[CircuitBreakerConfig] = None,
        *,
        name: str = "default",
        clock: Callable[[], float] = time.monotonic,
        logger: Optional[logging.Logger] = None,
    ):
        self.config = config or CircuitBreakerConfig()
        self.name = name
        self._clock = clock
        self._logger = logger or logging.getLogger(__name__)
        self._lock = threading.Lock()

        self._state = CircuitState.CLOSED
        self._failure_count = 0
        self._last_failure_time = 0.0
        self._success_count = 0

    @property
    def state(self) -> CircuitState:
        return self._state

    async def execute(self, operation: Callable[[], Awaitable[T]]) -> T:
        """
        Run an operation under breaker protection.

        Raises:
            ServiceUnavailableError: If the circuit is open and the recovery
                timeout has not elapsed; the operation is not invoked
        """
        with self._lock:
            if self._state is CircuitState.OPEN:
                elapsed = self._clock() - self._last_failure_time
                if elapsed < self.config.recovery_timeout:
                    raise ServiceUnavailableError(
                        f"Circuit breaker '{self.name}' is OPEN - "
                        "service temporarily unavailable",
                        breaker_name=self.name,
                        retry_after=self.config.recovery_timeout - elapsed,
                    )
                self._transition(CircuitState.HALF_OPEN)
                self._success_count = 0

        try:
            result = await operation()
        except Exception as error:
            self._on_failure(error)
            raise

        self._on_success()
        return result

    def _on_success(self) -> None:
        with self._lock:
            self._failure_count = 0

            if self._state is CircuitState.HALF_OPEN:
                self._success_count += 1
                if self._success_count >= self.config.success_threshold:
                    self._transition(CircuitState.CLOSED)

    def _on_failure(self, error: BaseException) -> None:
        if classify_error(error) not in self.config.expected_errors:
            return

        with self._lock:
            self._failure_count += 1
            self._last_failure_time = self._clock()

            if self._failure_count >= self.config.failure_threshold:
                self._transition(CircuitState.OPEN)

    def _transition(self, new_state: CircuitState) -> None:
        if new_state is self._state:
            return
        self._logger.warning(
            f"Circuit breaker '{self.name}' {self._state.value} -> {new_state.value} "
            f"(failures={self._failure_count})",
            extra={
                "breaker": self.name,
                "from_state": self._state.value,
                "to_state": new_state.value,
                "failure_count": self._failure_count,
            },
        )
        self._state = new_state

    def get_status(self) -> CircuitBreakerStatus:
        with self._lock:
            return CircuitBreakerStatus(
                state=self._state,
                failure_count=self._failure_count,
                last_failure_time=self._last_failure_time,
                success_count=self._success_count,
            )

    def reset(self) -> None:
        """Force the breaker closed with all counters zeroed"""
        with self._lock:
            self._state = CircuitState.CLOSED
            self._failure_count = 0
            self._last_failure_time = 0.0
            self._success_count = 0
        self._logger.info(f"Reset circuit breaker '{self.name}'")

    def __repr__(self) -> str:
        return f"CircuitBreaker(name={self.name}, state={self._state.value})"
