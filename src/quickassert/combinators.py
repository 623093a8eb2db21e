"""Checkers composed from other checkers: Not, AnyOf, AllOf and Contains."""

from __future__ import annotations

from collections.abc import Mapping, Set
from typing import Any, Iterator, Sequence

from quickassert.checker import (
    Checker,
    CheckResult,
    Note,
    Unquoted,
    bad_invocation,
    call_check,
    call_negate,
    failure,
    success,
)
from quickassert.checkers import Equals, IsNone


class Not(Checker):
    """Negate the given checker.

    For instance::

        c.assert_(got, Not(IsNone))
        c.assert_(answer, Not(Equals), 42)
    """

    def __init__(self, checker: Checker) -> None:
        self.checker = checker

    def check(self, got: Any, args: Sequence[Any]) -> CheckResult:
        return call_negate(self.checker, got, args)

    def negate(self, got: Any, args: Sequence[Any]) -> CheckResult:
        return call_check(self.checker, got, args)

    def num_args(self) -> int:
        return self.checker.num_args()

    def arg_names(self) -> list[str]:
        return self.checker.arg_names()

    def name(self) -> str:
        return f"Not({self.checker.name()})"


def _iter_container(container: Any) -> Iterator[tuple[str, Any]] | None:
    """Yield ``(key description, element)`` pairs, or None for non-containers."""
    if isinstance(container, Mapping):
        return ((f"key {k!r}", v) for k, v in container.items())
    if isinstance(container, (str, bytes, bytearray)):
        return None
    if isinstance(container, Set):
        return ((f"element {v!r}", v) for v in container)
    if isinstance(container, Sequence):
        return ((f"index {i}", v) for i, v in enumerate(container))
    return None


class AnyOf(Checker):
    """Succeed if any element of a container passes the given checker.

    Elements of lists, tuples and sets are checked, as are the values of a
    mapping. When no element matches, the failure carries the reason from the
    last element tried.
    """

    def __init__(self, checker: Checker) -> None:
        self.checker = checker

    def check(self, got: Any, args: Sequence[Any]) -> CheckResult:
        elements = _iter_container(got)
        if elements is None:
            return bad_invocation(
                f"mapping, sequence or set required, got {type(got).__name__} instead"
            )
        last: CheckResult | None = None
        last_element: Any = None
        for _, element in elements:
            result = call_check(self.checker, element, args)
            if result.ok:
                return success()
            if result.is_bad_invocation:
                return result
            last, last_element = result, element
        if last is None:
            return failure("no matching element found")
        return failure(
            "no matching element found",
            Note("last element", last_element),
            Note("error", Unquoted(last.message)),
            *last.notes,
        )

    def num_args(self) -> int:
        return self.checker.num_args()

    def arg_names(self) -> list[str]:
        return ["container", *self.checker.arg_names()[1:]]

    def name(self) -> str:
        return f"AnyOf({self.checker.name()})"


class AllOf(Checker):
    """Succeed if every element of a container passes the given checker.

    On failure the key of the first failing element and its reason are
    reported.
    """

    def __init__(self, checker: Checker) -> None:
        self.checker = checker

    def check(self, got: Any, args: Sequence[Any]) -> CheckResult:
        elements = _iter_container(got)
        if elements is None:
            return bad_invocation(
                f"mapping, sequence or set required, got {type(got).__name__} instead"
            )
        for key, element in elements:
            result = call_check(self.checker, element, args)
            if result.ok:
                continue
            if result.is_bad_invocation:
                return result
            return failure(
                f"mismatch at {key}",
                Note("error", Unquoted(result.message)),
                *result.notes,
                Note("first mismatched element", element),
            )
        return success()

    def num_args(self) -> int:
        return self.checker.num_args()

    def arg_names(self) -> list[str]:
        return ["container", *self.checker.arg_names()[1:]]

    def name(self) -> str:
        return f"AllOf({self.checker.name()})"


class ContainsChecker(Checker):
    """Check that a string contains a substring or a container holds a value.

    Strings use substring containment; anything else behaves like
    ``AnyOf(Equals)``.
    """

    arg_labels = ("want",)

    def __init__(self) -> None:
        self._any_equals = AnyOf(Equals)

    def check(self, got: Any, args: Sequence[Any]) -> CheckResult:
        if isinstance(got, str):
            want = args[0]
            if not isinstance(want, str):
                return bad_invocation(
                    f"strings can only contain strings, not {type(want).__name__}"
                )
            if want in got:
                return success()
            return failure("no substring match found")
        return self._any_equals.check(got, args)

    def arg_names(self) -> list[str]:
        return ["container", "want"]


Contains = ContainsChecker()
IsNotNone = Not(IsNone)
