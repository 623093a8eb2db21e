from __future__ import annotations

from pathlib import Path
from typing import Callable

from junitparser import Error, Failure, JUnitXml, TestCase, TestSuite

from quickassert.sinks import FailureSink, SubtestHost


def _first_line(text: str) -> str:
    """Return the error line of a rendered diagnostic, for the failure message."""
    lines = [line.strip() for line in text.strip().splitlines()]
    if len(lines) >= 2 and lines[0] == "error:":
        return lines[1]
    return lines[0] if lines else ""


class JUnitSink:
    """Sink that records every diagnostic as a JUnit test case.

    Failures are forwarded to the wrapped sink unchanged, so the host keeps
    deciding whether a test continues or stops. Bad checks are recorded as
    JUnit errors and ordinary failures as JUnit failures.
    """

    def __init__(
        self, inner: FailureSink, suite: TestSuite | None = None, name: str = ""
    ) -> None:
        self.inner = inner
        self.suite = suite if suite is not None else TestSuite("quickassert")
        self.name = name or self.suite.name
        self._count = 0

    def _record(self, text: str, kind: str) -> None:
        self._count += 1
        case = TestCase(f"{self.name} #{self._count}")
        case.classname = self.name
        message = _first_line(text)
        if message.startswith("bad check:"):
            result = Error(message)
        else:
            result = Failure(message)
        result.text = text
        result.type = kind
        case.result = [result]
        self.suite.add_testcase(case)

    def report_and_continue(self, text: str) -> None:
        self._record(text, "check")
        self.inner.report_and_continue(text)

    def report_and_abort(self, text: str) -> None:
        self._record(text, "assert")
        self.inner.report_and_abort(text)

    def run_subtest(self, name: str, body: Callable[[FailureSink], None]) -> bool:
        if not isinstance(self.inner, SubtestHost):
            raise TypeError(
                f"cannot run subtest with sink of type {type(self.inner).__name__}"
            )
        child_name = f"{self.name}/{name}"

        def wrapped(child: FailureSink) -> None:
            body(JUnitSink(child, self.suite, child_name))

        return self.inner.run_subtest(name, wrapped)


def write_junit(path: Path, suites: list[TestSuite]) -> Path:
    """Write the given suites to ``path`` as JUnit XML, return the path."""
    xml = JUnitXml("quickassert")
    for suite in suites:
        xml.append(suite)
    path.parent.mkdir(parents=True, exist_ok=True)
    xml.write(str(path), pretty=True)
    return path
