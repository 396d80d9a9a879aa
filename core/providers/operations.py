"""Long-running operation polling shared by every asynchronous vendor job.

Vendors such as Veo and Sora return a job handle instead of a result. The
``OperationPoller`` drives that handle to a terminal state:

    SUBMITTED -> POLLING (repeated) -> SUCCEEDED | FAILED | TIMED_OUT

Before query ``i`` (1-based) the poller sleeps
``min(initial_delay * multiplier ** (i - 1), max_delay)`` seconds. Transient
query failures are logged and count against ``max_attempts``; an explicit
vendor error fails the operation; running out of attempts times it out.

Cancelling the driving task abandons the operation locally. The vendor job is
left alone.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Generic, List, Optional, TypeVar

import httpx

from core.config import PollingSettings
from core.exceptions import OperationTimeoutError, ProviderAPIError, RateLimitError

logger = logging.getLogger(__name__)

T = TypeVar("T")

SleepFunc = Callable[[float], Awaitable[Any]]
ClockFunc = Callable[[], float]


class OperationState(str, Enum):
    SUBMITTED = "submitted"
    POLLING = "polling"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    TIMED_OUT = "timed_out"

    @property
    def terminal(self) -> bool:
        return self in (OperationState.SUCCEEDED, OperationState.FAILED, OperationState.TIMED_OUT)


@dataclass(frozen=True, slots=True)
class PollingConfig:
    initial_delay_seconds: float = 5.0
    multiplier: float = 1.5
    max_delay_seconds: float = 60.0
    max_attempts: int = 120

    def __post_init__(self) -> None:
        if self.initial_delay_seconds < 0 or self.max_delay_seconds < 0:
            raise ValueError("Polling delays must be non-negative")
        if self.multiplier < 1:
            raise ValueError("Polling multiplier must be at least 1")
        if self.max_attempts < 1:
            raise ValueError("Polling max_attempts must be at least 1")

    @classmethod
    def from_settings(cls, settings: PollingSettings) -> "PollingConfig":
        return cls(
            initial_delay_seconds=settings.initial_delay_seconds,
            multiplier=settings.multiplier,
            max_delay_seconds=settings.max_delay_seconds,
            max_attempts=settings.max_attempts,
        )

    def delay_for_attempt(self, attempt: int) -> float:
        """Seconds to wait before query number ``attempt`` (1-based)."""

        if attempt < 1:
            raise ValueError("attempt is 1-based")
        return min(self.initial_delay_seconds * self.multiplier ** (attempt - 1), self.max_delay_seconds)


@dataclass(slots=True)
class PollResult(Generic[T]):
    """Outcome of a single status query.

    ``done`` with ``error`` set means the vendor reported a terminal failure.
    """

    done: bool
    result: Optional[T] = None
    error: Optional[Exception] = None


PollFunc = Callable[[str], Awaitable[PollResult[T]]]


@dataclass(slots=True)
class Operation(Generic[T]):
    """Handle for one vendor job, owned by the task that drives it."""

    name: str
    poll: PollFunc
    provider: Optional[str] = None
    state: OperationState = OperationState.SUBMITTED
    created_at: float = field(default_factory=time.monotonic)
    last_polled_at: Optional[float] = None
    attempts: int = 0
    total_delay: float = 0.0
    result: Optional[T] = None
    error: Optional[Exception] = None
    abandoned: bool = False
    transitions: List[OperationState] = field(default_factory=lambda: [OperationState.SUBMITTED])

    def transition(self, state: OperationState) -> None:
        self.state = state
        self.transitions.append(state)


def is_transient_poll_error(exc: BaseException) -> bool:
    """Return True when a status query failure should simply be retried."""

    if isinstance(exc, (httpx.TransportError, RateLimitError)):
        return True
    if isinstance(exc, ProviderAPIError):
        return exc.status_code == 0 or exc.status_code == 408 or exc.status_code >= 500
    return False


class OperationPoller:
    """Drive ``Operation`` handles to completion with capped exponential backoff."""

    def __init__(
        self,
        config: PollingConfig | None = None,
        *,
        sleep: SleepFunc = asyncio.sleep,
        clock: ClockFunc = time.monotonic,
    ) -> None:
        self.config = config or PollingConfig()
        self._sleep = sleep
        self._clock = clock

    def delay_for_attempt(self, attempt: int) -> float:
        return self.config.delay_for_attempt(attempt)

    def create(self, name: str, poll: PollFunc, *, provider: str | None = None) -> Operation:
        return Operation(name=name, poll=poll, provider=provider, created_at=self._clock())

    async def drive(self, operation: Operation[T]) -> T:
        """Poll ``operation`` until it reaches a terminal state.

        Returns the vendor result on success, raises the vendor error on
        failure and ``OperationTimeoutError`` once ``max_attempts`` queries
        have been spent.
        """

        if operation.state.terminal:
            raise RuntimeError(f"Operation {operation.name} already finished as {operation.state.value}")

        config = self.config
        try:
            while operation.attempts < config.max_attempts:
                attempt = operation.attempts + 1
                delay = config.delay_for_attempt(attempt)
                await self._sleep(delay)
                operation.total_delay += delay

                operation.transition(OperationState.POLLING)
                operation.attempts = attempt
                operation.last_polled_at = self._clock()

                try:
                    outcome = await operation.poll(operation.name)
                except Exception as exc:
                    if not is_transient_poll_error(exc):
                        operation.error = exc
                        operation.transition(OperationState.FAILED)
                        raise
                    logger.warning(
                        "Transient failure polling %s (attempt %s/%s): %s",
                        operation.name,
                        attempt,
                        config.max_attempts,
                        exc,
                    )
                    continue

                if not outcome.done:
                    logger.debug("Operation %s still running after %s polls", operation.name, attempt)
                    continue

                if outcome.error is not None:
                    operation.error = outcome.error
                    operation.transition(OperationState.FAILED)
                    logger.error("Operation %s failed: %s", operation.name, outcome.error)
                    raise outcome.error

                operation.result = outcome.result
                operation.transition(OperationState.SUCCEEDED)
                logger.info(
                    "Operation %s succeeded after %s polls (%.1fs waited)",
                    operation.name,
                    attempt,
                    operation.total_delay,
                )
                return outcome.result  # type: ignore[return-value]
        except asyncio.CancelledError:
            operation.abandoned = True
            logger.info("Stopped polling %s after %s attempts; job left running", operation.name, operation.attempts)
            raise

        operation.transition(OperationState.TIMED_OUT)
        error = OperationTimeoutError(operation.name, operation.attempts, operation.total_delay)
        operation.error = error
        logger.error("%s", error)
        raise error


__all__ = [
    "Operation",
    "OperationPoller",
    "OperationState",
    "PollResult",
    "PollingConfig",
    "is_transient_poll_error",
]
