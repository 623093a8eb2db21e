"""Pytest configuration and fixtures."""

import logging

import pytest

from quickassert.context import TestContext
from quickassert.eventually import set_default_strategies
from quickassert.sinks import RecordingSink

pytest_plugins = ["pytester"]


@pytest.fixture(autouse=True)
def cleanup_loggers():
    """Detach handlers from quickassert loggers after each test to prevent name collisions."""
    yield

    names = [
        name
        for name in logging.Logger.manager.loggerDict.keys()
        if name.startswith("quickassert")
    ]

    for name in names:
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)


@pytest.fixture(autouse=True)
def reset_default_strategies():
    """Undo any config applied by a test to the Eventually defaults."""
    yield
    set_default_strategies()


class FakeClock:
    """Deterministic time source: sleeping advances the clock instantly."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def c(sink):
    """A TestContext reporting into an in-memory sink."""
    return TestContext(sink)
