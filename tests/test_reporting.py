"""Tests for JUnit XML reporting of check failures."""

import junitparser
import pytest

from quickassert.checkers import Equals
from quickassert.context import TestContext
from quickassert.reporting.junit import JUnitSink, write_junit
from quickassert.sinks import CheckAborted, RecordingSink


def _results(suite):
    return [(case.name, case.result[0]) for case in suite]


def test_failures_are_recorded_and_forwarded():
    inner = RecordingSink()
    sink = JUnitSink(inner, junitparser.TestSuite("demo"))
    c = TestContext(sink)
    c.check(1, Equals, 2)

    assert len(inner.errors) == 1
    [(name, result)] = _results(sink.suite)
    assert name == "demo #1"
    assert isinstance(result, junitparser.Failure)
    assert result.message == "values are not equal"
    assert result.type == "check"
    assert "got:\n  1\n" in result.text


def test_bad_checks_are_recorded_as_errors():
    sink = JUnitSink(RecordingSink(), junitparser.TestSuite("demo"))
    TestContext(sink).check(1, Equals)

    [(_, result)] = _results(sink.suite)
    assert isinstance(result, junitparser.Error)
    assert result.message.startswith("bad check: not enough arguments")


def test_abort_is_recorded_before_stopping():
    sink = JUnitSink(RecordingSink(), junitparser.TestSuite("demo"))
    with pytest.raises(CheckAborted):
        TestContext(sink).assert_(1, Equals, 2)

    [(_, result)] = _results(sink.suite)
    assert result.type == "assert"


def test_subtests_share_the_suite():
    inner = RecordingSink()
    sink = JUnitSink(inner, junitparser.TestSuite("demo"))
    c = TestContext(sink)
    c.run("sub", lambda child: child.check(1, Equals, 2))

    [(name, _)] = _results(sink.suite)
    assert name == "demo/sub #1"
    assert inner.subtests["sub"].errors


def test_subtests_need_a_host():
    class PlainSink:
        def report_and_continue(self, text):
            pass

        def report_and_abort(self, text):
            raise CheckAborted(text)

    with pytest.raises(TypeError):
        JUnitSink(PlainSink()).run_subtest("sub", lambda child: None)


def test_write_junit(tmp_path):
    sink = JUnitSink(RecordingSink(), junitparser.TestSuite("demo"))
    TestContext(sink).check(1, Equals, 2)

    path = write_junit(tmp_path / "out" / "checks.xml", [sink.suite])
    assert path.exists()

    xml = junitparser.JUnitXml.fromfile(str(path))
    suites = list(xml)
    assert len(suites) == 1
    assert suites[0].name == "demo"
    assert suites[0].failures == 1
