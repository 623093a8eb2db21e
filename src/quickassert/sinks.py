"""Failure sinks and subtest hosts connecting a context to a test harness."""

from __future__ import annotations

import logging
from typing import Callable, Collection, Protocol, runtime_checkable

logger = logging.getLogger("quickassert.sinks")


class CheckAborted(Exception):
    """Raised by abort sinks to stop the current test or subtest."""


@runtime_checkable
class FailureSink(Protocol):
    def report_and_continue(self, text: str) -> None:
        """Record a failure and let the test go on."""
        ...

    def report_and_abort(self, text: str) -> None:
        """Record a failure and stop the current test. Must not return."""
        ...


@runtime_checkable
class SubtestHost(Protocol):
    def run_subtest(self, name: str, body: Callable[[FailureSink], None]) -> bool:
        """Run ``body`` as a named child test with its own sink.

        Returns whether the child succeeded.
        """
        ...


def unique_name(name: str, taken: Collection[str]) -> str:
    """Suffix ``name`` with ``#01``, ``#02``... until it is not taken."""
    candidate, n = name, 0
    while candidate in taken:
        n += 1
        candidate = f"{name}#{n:02d}"
    return candidate


class RecordingSink:
    """In-memory sink that keeps every reported failure.

    Useful to embed checks outside a test framework and to test checkers.
    Aborting raises :class:`CheckAborted`. Subtests run inline, each with
    its own ``RecordingSink``; an abort inside a subtest only ends that
    subtest.
    """

    def __init__(self, name: str = "") -> None:
        self.name = name
        self.errors: list[str] = []
        self.fatal: list[str] = []
        self.subtests: dict[str, RecordingSink] = {}

    @property
    def failed(self) -> bool:
        return bool(self.errors or self.fatal) or any(
            s.failed for s in self.subtests.values()
        )

    @property
    def messages(self) -> list[str]:
        return [*self.errors, *self.fatal]

    def report_and_continue(self, text: str) -> None:
        self.errors.append(text)

    def report_and_abort(self, text: str) -> None:
        self.fatal.append(text)
        raise CheckAborted(text)

    def run_subtest(self, name: str, body: Callable[[FailureSink], None]) -> bool:
        name = unique_name(name, self.subtests)
        child = RecordingSink(name=f"{self.name}/{name}" if self.name else name)
        self.subtests[name] = child
        try:
            body(child)
        except CheckAborted:
            logger.debug(f"Subtest '{child.name}' aborted")
        return not child.failed
