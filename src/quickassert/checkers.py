"""Ready-made checkers (equality, patterns, exceptions, lengths)."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any, Callable, Sequence

from quickassert.checker import (
    Checker,
    CheckResult,
    Note,
    bad_invocation,
    failure,
    success,
)


class EqualsChecker(Checker):
    """Check that ``got == want``."""

    arg_labels = ("want",)

    def check(self, got: Any, args: Sequence[Any]) -> CheckResult:
        want = args[0]
        try:
            equal = bool(got == want)
        except Exception as e:
            return bad_invocation(f"values cannot be compared: {e}")
        if not equal:
            return failure("values are not equal")
        return success()

    def negation_failure(
        self, got: Any, args: Sequence[Any], result: CheckResult
    ) -> CheckResult:
        return failure(f"both values equal {got!r}, but should not")


class DeepEqualsChecker(Checker):
    """Check that two values are recursively equal, including their types.

    Mappings are compared key by key and sequences element by element, so the
    failure message points at the first differing path.
    """

    arg_labels = ("want",)

    def check(self, got: Any, args: Sequence[Any]) -> CheckResult:
        want = args[0]
        try:
            path = _first_difference(got, want, "root")
        except Exception as e:
            return bad_invocation(f"values cannot be compared: {e}")
        if path is not None:
            return failure("values are not deep equal", Note("difference at", path))
        return success()

    def negation_failure(
        self, got: Any, args: Sequence[Any], result: CheckResult
    ) -> CheckResult:
        return failure(f"both values deeply equal {got!r}, but should not")


def _first_difference(got: Any, want: Any, path: str) -> str | None:
    if type(got) is not type(want):
        return f"{path}: type {type(got).__name__} != {type(want).__name__}"
    if isinstance(got, Mapping):
        for key in got.keys() | want.keys():
            if key not in got or key not in want:
                return f"{path}[{key!r}]: key missing on one side"
            diff = _first_difference(got[key], want[key], f"{path}[{key!r}]")
            if diff is not None:
                return diff
        return None
    if isinstance(got, (list, tuple)):
        if len(got) != len(want):
            return f"{path}: length {len(got)} != {len(want)}"
        for i, (g, w) in enumerate(zip(got, want)):
            diff = _first_difference(g, w, f"{path}[{i}]")
            if diff is not None:
                return diff
        return None
    if got != want:
        return path
    return None


def _match(text: str, pattern: Any, message: str) -> CheckResult:
    if not isinstance(pattern, str):
        return bad_invocation(
            f"the regular expression pattern must be a string, got {type(pattern).__name__} instead"
        )
    try:
        regex = re.compile(pattern)
    except re.error as e:
        return bad_invocation(f"cannot compile regular expression {pattern!r}: {e}")
    if regex.fullmatch(text):
        return success()
    return failure(message, Note("text", text), Note("pattern", pattern))


class MatchesChecker(Checker):
    """Check that a string fully matches a regular expression."""

    arg_labels = ("regexp",)

    def check(self, got: Any, args: Sequence[Any]) -> CheckResult:
        if not isinstance(got, str):
            return bad_invocation(
                f"value is not a string, got {type(got).__name__} instead"
            )
        return _match(got, args[0], "value does not match regexp")

    def negation_failure(
        self, got: Any, args: Sequence[Any], result: CheckResult
    ) -> CheckResult:
        return failure(f"{got!r} matches {args[0]!r}, but should not")


class ErrorMatchesChecker(Checker):
    """Check that an exception's message fully matches a regular expression."""

    arg_labels = ("regexp",)

    def check(self, got: Any, args: Sequence[Any]) -> CheckResult:
        if got is None:
            return failure(f"error is None, therefore it does not match {args[0]!r}")
        if not isinstance(got, BaseException):
            return bad_invocation(
                f"did not get an exception, got {type(got).__name__} instead"
            )
        return _match(str(got), args[0], "error does not match regexp")


class PanicMatchesChecker(Checker):
    """Check that calling a function raises with a message matching a regexp."""

    arg_labels = ("regexp",)

    def check(self, got: Any, args: Sequence[Any]) -> CheckResult:
        if not callable(got):
            return bad_invocation(f"expected a function, got {type(got).__name__} instead")
        try:
            got()
        except Exception as e:
            return _match(str(e), args[0], "panic value does not match regexp").with_note(
                "panic value", e
            )
        return failure("function did not panic")


class IsNoneChecker(Checker):
    def check(self, got: Any, args: Sequence[Any]) -> CheckResult:
        if got is None:
            return success()
        return failure("got non-None value")

    def negation_failure(
        self, got: Any, args: Sequence[Any], result: CheckResult
    ) -> CheckResult:
        return failure("got None value unexpectedly")


class _BoolChecker(Checker):
    def __init__(self, expected: bool) -> None:
        self.expected = expected

    def check(self, got: Any, args: Sequence[Any]) -> CheckResult:
        if not isinstance(got, bool):
            return bad_invocation(f"value is not a bool, got {type(got).__name__} instead")
        if got is not self.expected:
            return failure(f"value is not {self.expected}")
        return success()

    def name(self) -> str:
        return f"Is{self.expected}"


class HasLenChecker(Checker):
    """Check that ``len(got)`` equals the given length."""

    arg_labels = ("want length",)

    def check(self, got: Any, args: Sequence[Any]) -> CheckResult:
        want = args[0]
        if not isinstance(want, int) or isinstance(want, bool):
            return bad_invocation(
                f"expected length is of type {type(want).__name__}, not int"
            )
        try:
            length = len(got)
        except TypeError:
            return bad_invocation(f"first argument of type {type(got).__name__} has no length")
        if length != want:
            return failure("unexpected length", Note("len(got)", length))
        return success()

    def negation_failure(
        self, got: Any, args: Sequence[Any], result: CheckResult
    ) -> CheckResult:
        return failure(f"length is {args[0]}, but should not")


class SatisfiesChecker(Checker):
    """Check that a one-argument predicate returns True for the value."""

    arg_labels = ("predicate",)

    def check(self, got: Any, args: Sequence[Any]) -> CheckResult:
        predicate: Callable[[Any], Any] = args[0]
        if not callable(predicate):
            return bad_invocation(
                f"predicate function is not a function, got {type(predicate).__name__} instead"
            )
        outcome = predicate(got)
        if not isinstance(outcome, bool):
            return bad_invocation(
                f"predicate function must return a bool, got {type(outcome).__name__} instead"
            )
        if not outcome:
            return failure("value does not satisfy predicate function")
        return success()


class ErrorIsChecker(Checker):
    """Check that an exception, or one it was raised from, matches ``want``.

    ``want`` may be an exception instance (matched by identity) or an
    exception type (matched with ``isinstance``). The chain follows
    ``__cause__`` and then ``__context__``.
    """

    arg_labels = ("want",)

    def check(self, got: Any, args: Sequence[Any]) -> CheckResult:
        want = args[0]
        if got is None:
            return failure("got None error but want non-None")
        if not isinstance(got, BaseException):
            return bad_invocation(f"got is not an exception, got {type(got).__name__} instead")
        is_type = isinstance(want, type) and issubclass(want, BaseException)
        if not is_type and not isinstance(want, BaseException):
            return bad_invocation(f"want is not an exception, got {type(want).__name__} instead")
        seen: set[int] = set()
        current: BaseException | None = got
        while current is not None and id(current) not in seen:
            seen.add(id(current))
            if current is want or (is_type and isinstance(current, want)):
                return success()
            current = current.__cause__ or current.__context__
        return failure("wanted error is not found in error chain")


Equals = EqualsChecker()
DeepEquals = DeepEqualsChecker()
Matches = MatchesChecker()
ErrorMatches = ErrorMatchesChecker()
PanicMatches = PanicMatchesChecker()
IsNone = IsNoneChecker()
IsTrue = _BoolChecker(True)
IsFalse = _BoolChecker(False)
HasLen = HasLenChecker()
Satisfies = SatisfiesChecker()
ErrorIs = ErrorIsChecker()
