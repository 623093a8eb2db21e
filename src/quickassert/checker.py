"""Checker protocol: the contract every pluggable check satisfies."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Sequence


class ResultKind(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    BAD_INVOCATION = "bad_invocation"


@dataclass(frozen=True)
class Note:
    """A key/value annotation contributed by a checker to the failure report."""

    key: str
    value: Any


class Unquoted(str):
    """A note value rendered verbatim rather than through the formatter."""


@dataclass
class CheckResult:
    """Outcome of a single check or negate call.

    Attributes:
        kind: Whether the check succeeded, failed, or was misused.
        message: Human-readable reason for a failure or bad invocation.
            Empty on success.
        notes: Extra key/value annotations to include in the diagnostic
            record, in the order they were added.
    """

    kind: ResultKind
    message: str = ""
    notes: list[Note] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.kind is ResultKind.SUCCESS

    @property
    def is_bad_invocation(self) -> bool:
        return self.kind is ResultKind.BAD_INVOCATION

    def with_note(self, key: str, value: Any) -> CheckResult:
        """Return a copy of this result with one more note appended."""
        return CheckResult(self.kind, self.message, [*self.notes, Note(key, value)])


def success(*notes: Note) -> CheckResult:
    return CheckResult(ResultKind.SUCCESS, "", list(notes))


def failure(message: str, *notes: Note) -> CheckResult:
    return CheckResult(ResultKind.FAILURE, message, list(notes))


def bad_invocation(message: str, *notes: Note) -> CheckResult:
    """Report a misuse of the checker contract rather than a false assertion.

    Bad invocations cover wrong argument counts or types, values that cannot
    be compared and malformed patterns. They are never retried.
    """
    return CheckResult(ResultKind.BAD_INVOCATION, message, list(notes))


class Checker(ABC):
    """Base class for checks used with ``TestContext.check`` and ``assert_``.

    Subclasses implement :meth:`check` and declare their arity through
    :meth:`num_args` (or by setting ``arg_labels``). The default :meth:`negate`
    is the logical complement of :meth:`check`; override
    :meth:`negation_failure` to customise the message used when a negated
    check unexpectedly succeeds.
    """

    #: Names of the expectation arguments, excluding the subject.
    arg_labels: tuple[str, ...] = ()

    @abstractmethod
    def check(self, got: Any, args: Sequence[Any]) -> CheckResult:
        """Check ``got`` against the expectation ``args``."""
        ...

    def negate(self, got: Any, args: Sequence[Any]) -> CheckResult:
        """Check that the opposite of :meth:`check` holds."""
        result = call_check(self, got, args)
        if result.is_bad_invocation:
            return result
        if result.ok:
            return self.negation_failure(got, args, result)
        return success(*result.notes)

    def negation_failure(
        self, got: Any, args: Sequence[Any], result: CheckResult
    ) -> CheckResult:
        return CheckResult(ResultKind.FAILURE, "unexpected success", list(result.notes))

    def num_args(self) -> int:
        """Number of expectation arguments required, excluding the subject."""
        return len(self.arg_labels)

    def arg_names(self) -> list[str]:
        """Labels for the subject and each expectation argument."""
        labels = list(self.arg_labels)
        count = self.num_args()
        if len(labels) != count:
            labels = ["want"] if count == 1 else [f"arg{i}" for i in range(count)]
        return ["got", *labels]

    def name(self) -> str:
        return type(self).__name__.removesuffix("Checker")

    def __repr__(self) -> str:
        return self.name()


def _validated(checker: Checker, result: Any) -> CheckResult:
    if isinstance(result, CheckResult):
        return result
    return bad_invocation(
        f"checker {checker.name()} returned {type(result).__name__}, not a CheckResult"
    )


def call_check(checker: Checker, got: Any, args: Sequence[Any]) -> CheckResult:
    """Run ``checker.check``, turning a malformed return value into a bad invocation."""
    return _validated(checker, checker.check(got, args))


def call_negate(checker: Checker, got: Any, args: Sequence[Any]) -> CheckResult:
    return _validated(checker, checker.negate(got, args))
