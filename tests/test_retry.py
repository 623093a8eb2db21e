"""Tests for retry schedules and timers."""

import itertools

import pytest
from pydantic import ValidationError

from quickassert.retry import RetryStrategy


def _take(strategy, n):
    return list(itertools.islice(strategy.delays(), n))


def test_strategy_requires_a_bound():
    with pytest.raises(ValidationError, match="max_duration or max_count"):
        RetryStrategy(delay=0.1)


def test_strategy_rejects_unknown_fields():
    with pytest.raises(ValidationError):
        RetryStrategy(max_duration=1, retries=3)


def test_strategy_rejects_negative_delay():
    with pytest.raises(ValidationError):
        RetryStrategy(delay=-1, max_duration=1)


def test_delays_grow_and_cap():
    strategy = RetryStrategy(delay=0.1, factor=2, max_delay=0.5, max_duration=10)
    assert _take(strategy, 5) == pytest.approx([0.1, 0.2, 0.4, 0.5, 0.5])


def test_factor_below_one_means_constant_delay():
    strategy = RetryStrategy(delay=0.1, factor=0.5, max_duration=10)
    assert _take(strategy, 3) == pytest.approx([0.1, 0.1, 0.1])


def test_timer_stops_before_exceeding_duration(clock):
    timer = RetryStrategy(delay=1, max_duration=3.5).start(clock, clock.sleep)
    assert [timer.next() for _ in range(4)] == [True, True, True, False]
    assert clock.sleeps == [1, 1, 1]
    assert timer.count == 4
    assert timer.elapsed == 3


def test_timer_counts_attempts(clock):
    timer = RetryStrategy(delay=0.5, max_count=3).start(clock, clock.sleep)
    assert timer.count == 1
    assert timer.next()
    assert timer.next()
    assert not timer.next()
    assert timer.count == 3
    assert clock.sleeps == [0.5, 0.5]


def test_timer_single_attempt_never_sleeps(clock):
    timer = RetryStrategy(delay=1, max_count=1).start(clock, clock.sleep)
    assert not timer.next()
    assert clock.sleeps == []


def test_timer_zero_delay_does_not_sleep(clock):
    timer = RetryStrategy(delay=0, max_count=3).start(clock, clock.sleep)
    assert timer.next()
    assert clock.sleeps == []


def test_timer_accounts_for_time_spent_in_attempts(clock):
    timer = RetryStrategy(delay=1, max_duration=3).start(clock, clock.sleep)
    clock.now += 2.5
    assert not timer.next()


def test_timer_logs_retries(clock, caplog):
    timer = RetryStrategy(delay=0.25, max_count=2).start(clock, clock.sleep)
    with caplog.at_level("DEBUG", logger="quickassert.retry"):
        timer.next()
    assert "Attempt 1 failed, retrying in 0.250s" in caplog.text


@pytest.mark.parametrize(
    "strategy, expected",
    [
        (RetryStrategy(max_duration=5), "5s"),
        (RetryStrategy(max_duration=0.15), "150ms"),
        (RetryStrategy(max_count=3), "3 attempts"),
    ],
)
def test_describe(strategy, expected):
    assert strategy.describe() == expected
