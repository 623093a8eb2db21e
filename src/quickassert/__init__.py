"""Checkers, retries and cleanups for writing tests."""

from quickassert.checker import (
    Checker,
    CheckResult,
    Note,
    ResultKind,
    Unquoted,
    bad_invocation,
    failure,
    success,
)
from quickassert.checkers import (
    DeepEquals,
    Equals,
    ErrorIs,
    ErrorMatches,
    HasLen,
    IsFalse,
    IsNone,
    IsTrue,
    Matches,
    PanicMatches,
    Satisfies,
)
from quickassert.cleanup import CleanupStack
from quickassert.combinators import AllOf, AnyOf, Contains, IsNotNone, Not
from quickassert.comment import Comment, commentf
from quickassert.context import TestContext
from quickassert.eventually import Eventually, EventuallyChecker, EventuallyStable
from quickassert.retry import RetryStrategy
from quickassert.sinks import CheckAborted, FailureSink, RecordingSink, SubtestHost

__all__ = [
    "AllOf",
    "AnyOf",
    "CheckAborted",
    "CheckResult",
    "Checker",
    "CleanupStack",
    "Comment",
    "Contains",
    "DeepEquals",
    "Equals",
    "ErrorIs",
    "ErrorMatches",
    "Eventually",
    "EventuallyChecker",
    "EventuallyStable",
    "FailureSink",
    "HasLen",
    "IsFalse",
    "IsNone",
    "IsNotNone",
    "IsTrue",
    "Matches",
    "Not",
    "Note",
    "PanicMatches",
    "RecordingSink",
    "ResultKind",
    "RetryStrategy",
    "Satisfies",
    "SubtestHost",
    "TestContext",
    "Unquoted",
    "bad_invocation",
    "commentf",
    "failure",
    "success",
]
