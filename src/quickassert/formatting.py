"""Value formatting used in failure reports."""

from __future__ import annotations

import pprint
from typing import Any, Callable

Formatter = Callable[[Any], str]


def default_format(value: Any) -> str:
    """Format a value for a failure report.

    Exceptions are shown as ``e"message"`` and strings with their quotes so
    that types stay visible; everything else goes through ``pprint``.
    """
    if isinstance(value, BaseException):
        return "e" + _quote(str(value))
    if isinstance(value, str):
        return _quote(value)
    return pprint.pformat(value, indent=1, width=80, sort_dicts=True)


def _quote(text: str) -> str:
    if '"' in text and "\n" not in text and "'" not in text:
        return "'" + text + "'"
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n") + '"'
