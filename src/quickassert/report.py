"""Diagnostic records built from failed checks, and their text rendering."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

from quickassert.checker import CheckResult, Note, Unquoted
from quickassert.comment import Comment
from quickassert.formatting import Formatter, default_format

INDENT = "  "


@dataclass
class DiagnosticRecord:
    """Ordered key/value description of a failed check.

    Values are stored already formatted. A value identical to one shown
    earlier under another key is replaced by ``<same as "key">``.
    """

    entries: list[tuple[str, str]] = field(default_factory=list)
    bad_invocation: bool = False
    _seen: dict[str, str] = field(default_factory=dict, repr=False)

    def add(self, key: str, text: str, dedupe: bool = True) -> None:
        if dedupe:
            if text in self._seen:
                text = f'<same as "{self._seen[text]}">'
            else:
                self._seen[text] = key
        self.entries.append((key, text))

    def get(self, key: str) -> str | None:
        for k, v in self.entries:
            if k == key:
                return v
        return None

    def keys(self) -> list[str]:
        return [k for k, _ in self.entries]

    def render(self) -> str:
        lines = [""]
        for key, text in self.entries:
            lines.append(f"{key}:")
            lines.extend(INDENT + line for line in text.splitlines() or [""])
        return "\n".join(lines) + "\n"


def _format(formatter: Formatter, value: Any) -> str:
    if isinstance(value, Unquoted):
        return str(value)
    return formatter(value)


def build_record(
    result: CheckResult,
    arg_names: Sequence[str] | None,
    got: Any,
    args: Sequence[Any],
    comment: Comment | None = None,
    notes: Sequence[Note] = (),
    formatter: Formatter = default_format,
) -> DiagnosticRecord:
    """Describe a non-successful check result.

    A bad invocation reports only its message and notes, prefixed with
    ``bad check:``, so that misuse of a checker reads differently from a
    value that did not meet expectations.
    """
    record = DiagnosticRecord(bad_invocation=result.is_bad_invocation)
    if result.is_bad_invocation:
        record.add("error", f"bad check: {result.message}", dedupe=False)
    else:
        record.add("error", result.message, dedupe=False)
    if comment is not None and str(comment):
        record.add("comment", str(comment), dedupe=False)
    if not result.is_bad_invocation and arg_names is not None:
        for name, value in zip(arg_names, [got, *args]):
            record.add(name, _format(formatter, value))
    for note in [*notes, *result.notes]:
        record.add(note.key, _format(formatter, note.value))
    return record
