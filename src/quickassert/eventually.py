"""Checkers that poll a function until a check passes, and keeps passing."""

from __future__ import annotations

import inspect
import logging
from typing import Any, Callable, Sequence

from quickassert.checker import (
    Checker,
    CheckResult,
    Note,
    bad_invocation,
    call_check,
    failure,
    success,
)
from quickassert.retry import RetryStrategy

logger = logging.getLogger("quickassert.eventually")

DEFAULT_STRATEGY = RetryStrategy(delay=0.1, max_delay=1.0, factor=2.0, max_duration=5.0)
DEFAULT_STABLE_STRATEGY = RetryStrategy(delay=0.1, max_duration=0.15)

_defaults: dict[str, RetryStrategy] = {
    "strategy": DEFAULT_STRATEGY,
    "stable": DEFAULT_STABLE_STRATEGY,
}


def set_default_strategies(
    strategy: RetryStrategy | None = None, stable: RetryStrategy | None = None
) -> None:
    """Change the schedules used by checkers created afterwards.

    Passing None restores the built-in default for that schedule.
    """
    _defaults["strategy"] = strategy or DEFAULT_STRATEGY
    _defaults["stable"] = stable or DEFAULT_STABLE_STRATEGY


def default_strategies() -> tuple[RetryStrategy, RetryStrategy]:
    return _defaults["strategy"], _defaults["stable"]


def _validate_poller(got: Any) -> CheckResult | None:
    """Return a bad invocation unless got can be called without arguments."""
    if not callable(got):
        return bad_invocation("first argument is not a function", Note("got", got))
    try:
        signature = inspect.signature(got)
    except (TypeError, ValueError):
        # Some builtins expose no signature; assume they can be called.
        return None
    try:
        signature.bind()
    except TypeError:
        return bad_invocation(
            "cannot use a function receiving arguments", Note("function", got)
        )
    return None


class EventuallyChecker(Checker):
    """Poll a function and check its result until success or timeout.

    The subject must be a function taking no arguments. It is called
    repeatedly and each returned value is checked with the wrapped checker,
    following the retry strategy, until the check succeeds or the strategy
    runs out. When a stable strategy is set, the function keeps being polled
    after the first success, and any failure before that strategy runs out
    fails the check.
    """

    def __init__(
        self,
        checker: Checker,
        strategy: RetryStrategy,
        stable_strategy: RetryStrategy | None = None,
        clock: Callable[[], float] | None = None,
        sleep: Callable[[float], None] | None = None,
    ) -> None:
        self.checker = checker
        self.strategy = strategy
        self.stable_strategy = stable_strategy
        self._clock = clock
        self._sleep = sleep

    def with_strategy(self, strategy: RetryStrategy) -> EventuallyChecker:
        return EventuallyChecker(
            self.checker, strategy, self.stable_strategy, self._clock, self._sleep
        )

    def with_stable_strategy(self, strategy: RetryStrategy | None) -> EventuallyChecker:
        return EventuallyChecker(
            self.checker, self.strategy, strategy, self._clock, self._sleep
        )

    def with_clock(
        self, clock: Callable[[], float], sleep: Callable[[float], None]
    ) -> EventuallyChecker:
        """Use the given time source and sleep function instead of the real ones."""
        return EventuallyChecker(
            self.checker, self.strategy, self.stable_strategy, clock, sleep
        )

    def check(self, got: Any, args: Sequence[Any]) -> CheckResult:
        invalid = _validate_poller(got)
        if invalid is not None:
            return invalid
        poll: Callable[[], Any] = got

        timer = self.strategy.start(self._clock, self._sleep)
        while True:
            value = poll()
            result = call_check(self.checker, value, args)
            if result.ok:
                break
            if result.is_bad_invocation:
                return result
            if not timer.next():
                logger.debug(f"Gave up after {timer.count} attempt(s)")
                return failure(
                    f"tried for {self.strategy.describe()}, {result.message}",
                    *result.notes,
                    Note("got", value),
                )
        logger.debug(f"Check succeeded after {timer.count} attempt(s)")

        if self.stable_strategy is not None:
            stable_timer = self.stable_strategy.start(self._clock, self._sleep)
            while stable_timer.next():
                value = poll()
                result = call_check(self.checker, value, args)
                if result.is_bad_invocation:
                    return result
                if not result.ok:
                    logger.debug(
                        f"Check stopped passing {stable_timer.elapsed:.3f}s after the initial success"
                    )
                    return failure(
                        f"less than {self.stable_strategy.describe()} after an initial success, "
                        f"{result.message}",
                        *result.notes,
                        Note("got", value),
                    )

        return success(Note("got", value))

    def num_args(self) -> int:
        return self.checker.num_args()

    def arg_names(self) -> list[str]:
        return ["function", *self.checker.arg_names()[1:]]

    def name(self) -> str:
        return f"Eventually({self.checker.name()})"


def Eventually(checker: Checker, strategy: RetryStrategy | None = None) -> EventuallyChecker:
    """Retry ``checker`` on the values returned by the polled function.

    By default the check is retried starting at 100ms with an exponential
    backoff factor of 2, timing out after about 5s. No stability check is
    made; see :func:`EventuallyStable`. For instance::

        c.assert_(lambda: counter.value, Eventually(Equals), 1234)
    """
    default, _ = default_strategies()
    return EventuallyChecker(checker, strategy or default)


def EventuallyStable(checker: Checker) -> EventuallyChecker:
    """Like :func:`Eventually`, also re-checking once about 100ms after success."""
    default, stable = default_strategies()
    return EventuallyChecker(checker, default, stable)
