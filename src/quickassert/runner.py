"""The assertion runner shared by the continue and abort entry points."""

from __future__ import annotations

import logging
from typing import Any, Callable, Sequence

from quickassert.checker import Checker, Note, Unquoted, bad_invocation, call_check
from quickassert.comment import Comment
from quickassert.formatting import Formatter, default_format
from quickassert.report import DiagnosticRecord, build_record

logger = logging.getLogger("quickassert.runner")

FailFunc = Callable[[str], Any]


def split_comment(args: Sequence[Any]) -> tuple[list[Any], Comment | None]:
    """Separate a trailing :class:`Comment` from the checker arguments."""
    args = list(args)
    if args and isinstance(args[-1], Comment):
        return args[:-1], args[-1]
    return args, None


def evaluate(
    checker: Checker | None,
    got: Any,
    args: Sequence[Any],
    formatter: Formatter = default_format,
) -> DiagnosticRecord | None:
    """Run a check and describe its failure, or return None on success."""
    args, comment = split_comment(args)

    if checker is None:
        return build_record(
            bad_invocation("nil checker provided"), None, got, args, comment,
            formatter=formatter,
        )

    want_count = checker.num_args()
    arg_names = checker.arg_names()
    if len(args) != want_count:
        notes: list[Note] = []
        if args:
            notes.append(Note("got args", args))
        if len(args) > want_count:
            prefix = "too many arguments provided to checker"
            notes.append(Note("unexpected args", args[want_count:]))
        else:
            prefix = "not enough arguments provided to checker"
        if want_count > 0:
            notes.append(Note("want args", Unquoted(", ".join(arg_names[1:]))))
        result = bad_invocation(f"{prefix}: got {len(args)}, want {want_count}")
        return build_record(result, arg_names, got, args, comment, notes, formatter)

    result = call_check(checker, got, args)
    if result.ok:
        return None
    logger.debug(f"{checker.name()} failed: {result.message}")
    return build_record(result, arg_names, got, args, comment, formatter=formatter)


def run_check(
    fail: FailFunc,
    checker: Checker | None,
    got: Any,
    args: Sequence[Any],
    formatter: Formatter = default_format,
) -> bool:
    """Run a check, hand a rendered report to ``fail`` if it does not pass.

    Returns whether the check succeeded, so that callers using a
    non-aborting ``fail`` can branch on the outcome.
    """
    record = evaluate(checker, got, args, formatter)
    if record is None:
        return True
    fail(record.render())
    return False
