"""Main interactive event loop for the terminal UI.

Coordinates rendering, key dispatch, the transient-status timer, and the
background export. Selection semantics live in ``selection`` and ``keys``.
"""

from __future__ import annotations

import functools
import logging
import os
import shutil
import sys
import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from .clipboard import copy_to_clipboard
from .config import load_clipboard_command, load_show_hidden, load_status_seconds
from .export import ExportOutcome, ExportWorker, run_export
from .keys import DEFAULT_STATUS_SECONDS, SelectionKeyHandler
from .logs import configure_logging, flush_logging
from .reader import read_key
from .render import build_frame, list_rows
from .selection import SelectionModel
from .terminal import TerminalController

logger = logging.getLogger(__name__)

POLL_TIMEOUT_MS = 120


@dataclass(frozen=True)
class RuntimeOptions:
    """Settings resolved once before the loop starts."""

    status_seconds: float = DEFAULT_STATUS_SECONDS
    clipboard_command: list[str] | None = None
    no_color: bool = False
    poll_timeout_ms: int = POLL_TIMEOUT_MS


class StatusTimer:
    """Single cancellable deadline for clearing the transient status."""

    def __init__(self) -> None:
        self.deadline: float | None = None

    def schedule(self, seconds: float, now: float) -> None:
        # A new status replaces any pending clear.
        self.deadline = now + seconds

    def cancel(self) -> None:
        self.deadline = None

    def fired(self, now: float) -> bool:
        if self.deadline is None or now < self.deadline:
            return False
        self.deadline = None
        return True


def run_session(
    model: SelectionModel,
    root: Path,
    terminal: TerminalController,
    stdin_fd: int,
    options: RuntimeOptions,
    read_key_fn: Callable[..., str] = read_key,
    clock: Callable[[], float] = time.monotonic,
) -> ExportOutcome | None:
    """Run the TUI until quit or export completion.

    Returns the export outcome, or ``None`` when the user quit without
    confirming.
    """
    term = shutil.get_terminal_size((80, 24))
    handler = SelectionKeyHandler(
        model,
        status_seconds=options.status_seconds,
        page_rows=lambda: list_rows(term.lines, model),
    )
    copy = functools.partial(copy_to_clipboard, command=options.clipboard_command)
    timer = StatusTimer()
    worker: ExportWorker | None = None
    list_start = 0
    dirty = True
    last_size = None

    with terminal.raw_mode():
        while True:
            term = shutil.get_terminal_size((80, 24))
            if term != last_size:
                last_size = term
                dirty = True
            if timer.fired(clock()) and model.clear_status():
                dirty = True
            if worker is not None:
                outcome = worker.take_outcome()
                if outcome is not None:
                    return outcome

            if dirty:
                frame = build_frame(
                    model,
                    width=term.columns,
                    height=term.lines,
                    list_start=list_start,
                    no_color=options.no_color,
                )
                list_start = frame.list_start
                terminal.write_frame("\r\n".join(frame.lines))
                dirty = False

            try:
                key = read_key_fn(stdin_fd, timeout_ms=options.poll_timeout_ms)
            except KeyboardInterrupt:
                continue
            if key == "":
                continue

            effects = handler.handle_key(key)
            if effects.quit:
                logger.debug("Quit requested; selection not saved.")
                return None
            if effects.clear_status_after is not None:
                timer.schedule(effects.clear_status_after, clock())
            if effects.export_paths is not None:
                timer.cancel()
                worker = ExportWorker(
                    functools.partial(run_export, root, effects.export_paths, copy=copy)
                ).start()
            if effects.dirty:
                dirty = True


def run_app(root: Path, verbose: bool = False) -> int:
    """Build the model for ``root`` and drive one interactive session.

    Returns the process exit code: ``0`` after a clean quit or successful
    export, ``1`` after a startup, clipboard, or save failure.
    """
    stdin_fd = sys.stdin.fileno()
    stdout_fd = sys.stdout.fileno()
    if not os.isatty(stdin_fd) or not os.isatty(stdout_fd):
        raise SystemExit("yank requires an interactive terminal.")

    log_handler = configure_logging(verbose)
    try:
        options = RuntimeOptions(
            status_seconds=load_status_seconds(),
            clipboard_command=load_clipboard_command(),
            no_color=bool(os.environ.get("NO_COLOR")),
        )
        model = SelectionModel.from_root(root, show_hidden=load_show_hidden())
        if model.startup_error is not None:
            logger.error("Error: %s", model.startup_error)
        terminal = TerminalController(stdin_fd, stdout_fd)
        outcome = run_session(model, root, terminal, stdin_fd, options)
    finally:
        flush_logging(log_handler)

    if model.startup_error is not None:
        return 1
    if outcome is None:
        return 0
    return 0 if outcome.ok else 1
