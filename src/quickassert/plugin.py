"""pytest integration: the ``qt`` fixture and command line options."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Callable, Iterator

import pytest
from junitparser import TestSuite

from quickassert.config import QuickAssertConfig, apply_config, load_config
from quickassert.context import TestContext
from quickassert.reporting.junit import JUnitSink, write_junit
from quickassert.sinks import FailureSink, unique_name
from quickassert.verbose import setup_logger, teardown_logger

CONFIG_ENV = "QUICKASSERT_CONFIG"


class PytestSink:
    """Failure sink reporting through pytest.

    Aborting calls ``pytest.fail`` at once. Failures reported with
    "continue" are held until :meth:`finish`, which the plugin calls when
    the test body returns and again after cleanups have run. Subtests run
    inline; a failed subtest fails its parent without stopping it.
    """

    def __init__(self, name: str = "") -> None:
        self.name = name
        self.errors: list[str] = []
        self._flushed = 0
        self._subtests: set[str] = set()

    def _pending(self) -> list[str]:
        pending = self.errors[self._flushed :]
        self._flushed = len(self.errors)
        return pending

    def report_and_continue(self, text: str) -> None:
        self.errors.append(text)

    def report_and_abort(self, text: str) -> None:
        self.errors.append(text)
        pytest.fail("\n".join(self._pending()), pytrace=False)

    def run_subtest(self, name: str, body: Callable[[FailureSink], None]) -> bool:
        name = unique_name(name, self._subtests)
        self._subtests.add(name)
        child = PytestSink(name=f"{self.name}/{name}" if self.name else name)
        try:
            body(child)
            child.finish()
        except pytest.fail.Exception as e:
            self.errors.append(f"--- FAIL: {child.name}\n{e.msg}")
            return False
        return True

    def finish(self) -> None:
        """Fail the test if failures were reported since the last call."""
        pending = self._pending()
        if pending:
            pytest.fail("\n".join(pending), pytrace=False)


_junit_key = pytest.StashKey["tuple[Path, list[TestSuite]] | None"]()
_sink_key = pytest.StashKey[PytestSink]()


def pytest_addoption(parser: pytest.Parser) -> None:
    group = parser.getgroup("quickassert")
    group.addoption(
        "--quickassert-config",
        default=None,
        help=f"Path to a quickassert YAML config (default: ${CONFIG_ENV})",
    )
    group.addoption(
        "--quickassert-junit",
        default=None,
        help="Write every check failure to this JUnit XML file",
    )
    group.addoption(
        "--quickassert-debug-log",
        default=None,
        help="Write quickassert debug logging to this file",
    )


def _resolve_config(config: pytest.Config) -> QuickAssertConfig:
    path = config.getoption("quickassert_config") or os.environ.get(CONFIG_ENV)
    if path:
        return load_config(Path(path))
    return QuickAssertConfig()


def pytest_configure(config: pytest.Config) -> None:
    qa_config = _resolve_config(config)
    apply_config(qa_config)

    debug_log = config.getoption("quickassert_debug_log") or qa_config.debug_log
    if debug_log:
        setup_logger(Path(debug_log), verbose=qa_config.verbose)

    junit = config.getoption("quickassert_junit") or qa_config.junit
    config.stash[_junit_key] = (Path(junit), []) if junit else None


def pytest_unconfigure(config: pytest.Config) -> None:
    state = config.stash.get(_junit_key, None)
    if state is not None:
        path, suites = state
        write_junit(path, suites)
    teardown_logger()


@pytest.hookimpl(wrapper=True)
def pytest_runtest_call(item: pytest.Item):
    result = yield
    sink = item.stash.get(_sink_key, None)
    if sink is not None:
        sink.finish()
    return result


@pytest.fixture
def qt(request: pytest.FixtureRequest) -> Iterator[TestContext]:
    """A :class:`TestContext` for the current test.

    Failures reported with ``check`` fail the test when its body returns.
    Deferred actions run at teardown.
    """
    sink = PytestSink(name=request.node.nodeid)
    request.node.stash[_sink_key] = sink

    reporting_sink: FailureSink = sink
    state = request.config.stash.get(_junit_key, None)
    if state is not None:
        suite = TestSuite(request.node.nodeid)
        state[1].append(suite)
        reporting_sink = JUnitSink(sink, suite)

    context = TestContext(reporting_sink, name=request.node.name)
    yield context
    try:
        context.done()
    finally:
        sink.finish()
