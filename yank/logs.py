"""Logging setup for a session that temporarily owns the terminal.

Records are buffered while the alternate screen is active and written to
stderr once the terminal is restored, so diagnostics never tear the UI.
"""

from __future__ import annotations

import logging
import logging.handlers
import sys
from typing import TextIO

LOG_FORMAT = "%(message)s"
BUFFER_CAPACITY = 10_000


def configure_logging(verbose: bool = False, stream: TextIO | None = None) -> logging.handlers.MemoryHandler:
    """Route ``yank`` loggers into a memory buffer that targets ``stream``.

    Call ``flush_logging`` with the returned handler after the TUI exits.
    """
    target = logging.StreamHandler(stream if stream is not None else sys.stderr)
    target.setFormatter(logging.Formatter(LOG_FORMAT))
    buffer = logging.handlers.MemoryHandler(
        BUFFER_CAPACITY,
        # Never flush on level; output is released explicitly after the UI closes.
        flushLevel=logging.CRITICAL + 1,
        target=target,
        flushOnClose=True,
    )

    logger = logging.getLogger("yank")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.addHandler(buffer)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.propagate = False
    return buffer


def flush_logging(handler: logging.handlers.MemoryHandler) -> None:
    """Release buffered records to their target stream."""
    handler.flush()
