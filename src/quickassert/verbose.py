"""Debug logging for retry schedules, cleanups and failed checks.

Library modules log to children of the ``quickassert`` logger and emit
nothing until :func:`setup_logger` attaches handlers, typically from the
pytest plugin's ``--quickassert-debug-log`` option.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOGGER_NAME = "quickassert"

_FORMAT = logging.Formatter(
    fmt="[%(asctime)s] %(name)s: %(message)s", datefmt="%Y-%m-%dT%H:%M:%S"
)


def _handler(handler: logging.Handler) -> logging.Handler:
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(_FORMAT)
    return handler


def setup_logger(
    debug_file: Path, verbose: bool = False, logger_name: str = LOGGER_NAME
) -> logging.Logger:
    """Send DEBUG records of ``logger_name`` and its children to ``debug_file``.

    Args:
        debug_file: Log file, appended to. Parent directories are created.
        verbose: Also echo records to stderr.
        logger_name: Logger to configure. The default captures every
            quickassert module.

    Raises:
        RuntimeError: If the logger already has handlers, so that two
            sessions never interleave records in one file.
    """
    logger = logging.getLogger(logger_name)
    if logger.handlers:
        raise RuntimeError(
            f"Logger '{logger_name}' already exists with handlers attached"
        )

    debug_file.parent.mkdir(parents=True, exist_ok=True)
    handlers = [logging.FileHandler(debug_file, mode="a")]
    if verbose:
        handlers.append(logging.StreamHandler(sys.stderr))

    logger.disabled = False
    logger.setLevel(logging.DEBUG)
    for handler in handlers:
        logger.addHandler(_handler(handler))
    return logger


def teardown_logger(logger_name: str = LOGGER_NAME) -> None:
    """Close and detach every handler added by :func:`setup_logger`."""
    logger = logging.getLogger(logger_name)
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
