"""Retry schedules with exponential backoff."""

from __future__ import annotations

import logging
import time
from typing import Callable, Iterator

from pydantic import BaseModel, ConfigDict, Field, model_validator

logger = logging.getLogger("quickassert.retry")


class RetryStrategy(BaseModel):
    """Timing of repeated attempts, in seconds.

    Attributes:
        delay: Wait before the second attempt.
        max_delay: Upper bound on any single wait. 0 means uncapped.
        factor: Multiplier applied to the wait after each attempt. Values
            below 1 are treated as 1 (constant delay).
        max_duration: Total time budget. An attempt is not started if waiting
            for it would exceed the budget. 0 means no time bound, in which
            case ``max_count`` must be set.
        max_count: Maximum number of attempts, including the first one.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    delay: float = Field(default=0.1, ge=0)
    max_delay: float = Field(default=0.0, ge=0)
    factor: float = Field(default=1.0, ge=0)
    max_duration: float = Field(default=0.0, ge=0)
    max_count: int | None = Field(default=None, ge=1)

    @model_validator(mode="after")
    def must_terminate(self) -> RetryStrategy:
        if self.max_duration == 0 and self.max_count is None:
            raise ValueError("retry strategy needs max_duration or max_count")
        return self

    def delays(self) -> Iterator[float]:
        """Yield the successive waits between attempts, before budget checks."""
        delay = self.delay
        factor = max(self.factor, 1.0)
        while True:
            if self.max_delay > 0:
                delay = min(delay, self.max_delay)
            yield delay
            delay *= factor

    def start(
        self,
        clock: Callable[[], float] | None = None,
        sleep: Callable[[float], None] | None = None,
    ) -> RetryTimer:
        """Begin a new run of this schedule; the first attempt happens now."""
        return RetryTimer(self, clock or time.monotonic, sleep or time.sleep)

    def describe(self) -> str:
        if self.max_duration:
            return _format_duration(self.max_duration)
        return f"{self.max_count} attempts"


class RetryTimer:
    """Iteration state of one :class:`RetryStrategy` run.

    Call :meth:`next` after each failed attempt: it sleeps until the next
    attempt is due and returns True, or returns False without sleeping once
    the schedule is exhausted.
    """

    def __init__(
        self,
        strategy: RetryStrategy,
        clock: Callable[[], float],
        sleep: Callable[[float], None],
    ) -> None:
        self.strategy = strategy
        self._clock = clock
        self._sleep = sleep
        self._delays = strategy.delays()
        self._started = clock()
        self.count = 1

    @property
    def elapsed(self) -> float:
        return self._clock() - self._started

    def next(self) -> bool:
        strategy = self.strategy
        if strategy.max_count is not None and self.count >= strategy.max_count:
            return False
        delay = next(self._delays)
        if strategy.max_duration and self.elapsed + delay > strategy.max_duration:
            return False
        logger.debug(f"Attempt {self.count} failed, retrying in {delay:.3f}s")
        if delay > 0:
            self._sleep(delay)
        self.count += 1
        return True


def _format_duration(seconds: float) -> str:
    if seconds < 1:
        return f"{seconds * 1000:g}ms"
    return f"{seconds:g}s"
