"""LIFO stack of deferred cleanup actions."""

from __future__ import annotations

import logging
from typing import Callable

logger = logging.getLogger("quickassert.cleanup")

Action = Callable[[], object]


class CleanupStack:
    """Deferred actions run in reverse registration order by :meth:`drain`.

    Each action runs exactly once. An action that raises, including with an
    abort signal such as ``pytest.fail`` or ``KeyboardInterrupt``, does not
    stop the remaining actions. Once every action has run, the exception of
    the earliest registered failing action is re-raised, with later ones
    chained as its ``__context__``, as nested ``try``/``finally`` blocks
    would do.

    A stack is owned by a single test context and is not safe for concurrent
    use.
    """

    def __init__(self) -> None:
        self._actions: list[Action] = []

    def register(self, action: Action) -> None:
        if not callable(action):
            raise TypeError(f"cleanup action must be callable, got {type(action).__name__}")
        self._actions.append(action)

    def drain(self) -> None:
        """Run and forget every registered action, most recent first.

        Actions registered while draining are run before this returns.
        Draining an empty stack does nothing.
        """
        pending: BaseException | None = None
        while self._actions:
            action = self._actions.pop()
            try:
                action()
            except BaseException as e:
                if pending is not None:
                    logger.warning(
                        f"Cleanup {getattr(action, '__name__', action)!s} raised "
                        f"{e!r} while handling {pending!r}"
                    )
                    if e.__context__ is None:
                        e.__context__ = pending
                pending = e
        if pending is not None:
            raise pending

    def __len__(self) -> int:
        return len(self._actions)
