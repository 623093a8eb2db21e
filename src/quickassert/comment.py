"""Human-readable comments attached to checks."""

from __future__ import annotations

from typing import Any


class Comment:
    """Extra information printed when a check fails.

    Pass it as the last argument of a check::

        c.check(got, Equals, 42, commentf("iteration %d", i))
    """

    def __init__(self, fmt: str, *args: Any) -> None:
        self.fmt = fmt
        self.args = args

    def __str__(self) -> str:
        if not self.args:
            return self.fmt
        return self.fmt % self.args

    def __repr__(self) -> str:
        return f"Comment({str(self)!r})"


def commentf(fmt: str, *args: Any) -> Comment:
    return Comment(fmt, *args)
