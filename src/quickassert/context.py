"""TestContext: the object test code checks and defers cleanups through."""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Any, Callable

from quickassert.checker import Checker
from quickassert.cleanup import CleanupStack
from quickassert.formatting import Formatter, default_format
from quickassert.runner import run_check
from quickassert.sinks import FailureSink, SubtestHost


class TestContext:
    """Checks values and manages cleanups for one test.

    A context reports failures to a :class:`FailureSink` supplied by the
    host harness. :meth:`check` reports and continues, :meth:`assert_`
    reports and aborts. Cleanups registered with :meth:`defer` run in
    reverse order when :meth:`done` is called, or when leaving a ``with``
    block or a subtest started with :meth:`run`.

    For instance::

        with TestContext(sink) as c:
            c.setenv("HOME", str(c.mkdir()))
            c.assert_(load_config(), Not(IsNone))
    """

    __test__ = False

    def __init__(
        self,
        sink: FailureSink,
        name: str = "",
        formatter: Formatter = default_format,
        host: SubtestHost | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.sink = sink
        self.name = name
        self.host = host
        self.logger = logger or logging.getLogger("quickassert")
        self._formatter = formatter
        self._cleanups = CleanupStack()

    @property
    def formatter(self) -> Formatter:
        return self._formatter

    def set_format(self, formatter: Formatter) -> None:
        """Use ``formatter`` to print values in failure reports."""
        self._formatter = formatter

    def check(self, got: Any, checker: Checker | None, *args: Any) -> bool:
        """Run a check, report a failure and continue.

        Arguments not consumed by the checker are not allowed, except for a
        trailing :class:`~quickassert.comment.Comment`.
        """
        return run_check(self.sink.report_and_continue, checker, got, args, self._formatter)

    def assert_(self, got: Any, checker: Checker | None, *args: Any) -> bool:
        """Run a check, report a failure and stop the test."""
        return run_check(self.sink.report_and_abort, checker, got, args, self._formatter)

    def defer(self, action: Callable[[], object]) -> None:
        """Register ``action`` to run when :meth:`done` is called."""
        self._cleanups.register(action)

    def done(self) -> None:
        """Run deferred actions in reverse registration order.

        Actions only ever run once, so calling this again is harmless.
        """
        self._cleanups.drain()

    @property
    def pending_cleanups(self) -> int:
        return len(self._cleanups)

    def run(self, name: str, body: Callable[[TestContext], None]) -> bool:
        """Run ``body`` as a subtest with its own context and cleanups.

        The child's deferred actions run when ``body`` returns or raises;
        this context's cleanups are left untouched. Returns whether the
        subtest succeeded.
        """
        host = self.host
        if host is None and isinstance(self.sink, SubtestHost):
            host = self.sink
        if host is None:
            raise TypeError(
                f"cannot run subtest with sink of type {type(self.sink).__name__}"
            )

        def child_body(child_sink: FailureSink) -> None:
            child = TestContext(
                child_sink,
                name=f"{self.name}/{name}" if self.name else name,
                formatter=self._formatter,
                logger=self.logger,
            )
            self.logger.debug(f"Running subtest '{child.name}'")
            try:
                body(child)
            finally:
                child.done()

        return host.run_subtest(name, child_body)

    def patch(self, target: Any, attribute: str, value: Any) -> None:
        """Set ``target.attribute`` to ``value`` until the context is done."""
        if not hasattr(target, attribute):
            raise TypeError(f"{target!r} has no attribute {attribute!r} to patch")
        old = getattr(target, attribute)
        # Inherited attributes are shadowed, then unshadowed on restore.
        owned = not hasattr(target, "__dict__") or attribute in vars(target)
        setattr(target, attribute, value)

        def restore() -> None:
            if owned:
                setattr(target, attribute, old)
            else:
                delattr(target, attribute)

        self.defer(restore)

    def setenv(self, name: str, value: str) -> None:
        """Set an environment variable until the context is done."""
        self._save_env(name)
        os.environ[name] = value

    def unsetenv(self, name: str) -> None:
        """Remove an environment variable until the context is done."""
        self._save_env(name)
        os.environ.pop(name, None)

    def _save_env(self, name: str) -> None:
        old = os.environ.get(name)

        def restore() -> None:
            if old is None:
                os.environ.pop(name, None)
            else:
                os.environ[name] = old

        self.defer(restore)

    def mkdir(self) -> Path:
        """Create a temporary directory that is removed when done.

        The test may remove the directory itself; it is then left alone.
        """
        path = Path(tempfile.mkdtemp(prefix="quickassert-"))

        def remove() -> None:
            if path.exists():
                shutil.rmtree(path)

        self.defer(remove)
        return path

    def __enter__(self) -> TestContext:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.done()
