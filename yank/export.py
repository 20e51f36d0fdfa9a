"""Export pipeline: aggregate selected files, copy them, and save the selection.

``run_export`` is synchronous and fully testable. ``ExportWorker`` runs it on
one background thread so the input loop stays responsive to quit requests.
"""

from __future__ import annotations

import datetime
import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from .clipboard import copy_to_clipboard
from .persistence import save_selection

logger = logging.getLogger(__name__)

HEADER_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"
FILE_SEPARATOR = b"\n\n"


def format_header(relative_path: str, modified: float, size: int) -> str:
    """Build the per-file header line placed before raw content."""
    stamp = datetime.datetime.fromtimestamp(modified).strftime(HEADER_TIME_FORMAT)
    return f"--- FILENAME: {relative_path} | Modified: {stamp} | Size: {size} bytes ---\n"


@dataclass(frozen=True)
class PayloadResult:
    payload: bytes
    processed: int
    stat_errors: int
    read_errors: int


def build_payload(root: Path, relative_paths: list[str]) -> PayloadResult:
    """Read metadata and content for each path, counting per-file failures."""
    chunks: list[bytes] = []
    processed = 0
    stat_errors = 0
    read_errors = 0
    for relative_path in relative_paths:
        full_path = root / relative_path
        try:
            stat = full_path.stat()
        except OSError as exc:
            logger.warning("Stat Err %s: %s", relative_path, exc)
            stat_errors += 1
            continue
        try:
            content = full_path.read_bytes()
        except OSError as exc:
            logger.warning("Read Err %s: %s", relative_path, exc)
            read_errors += 1
            continue
        # Undecodable file names come back from os.scandir as lone surrogates.
        header = format_header(relative_path, stat.st_mtime, stat.st_size)
        chunks.append(header.encode("utf-8", errors="surrogateescape"))
        chunks.append(content)
        chunks.append(FILE_SEPARATOR)
        processed += 1
    return PayloadResult(
        payload=b"".join(chunks),
        processed=processed,
        stat_errors=stat_errors,
        read_errors=read_errors,
    )


@dataclass(frozen=True)
class ExportOutcome:
    """Terminal result of one export, consumed once by the host loop."""

    selected_count: int
    processed: int
    stat_errors: int = 0
    read_errors: int = 0
    clipboard_error: Exception | None = None
    save_error: Exception | None = None
    export_error: Exception | None = None
    elapsed_seconds: float = 0.0

    @property
    def ok(self) -> bool:
        return self.clipboard_error is None and self.save_error is None and self.export_error is None

    def summary(self) -> str:
        """Return the one-line human-readable result, per-file error counts included."""
        parts: list[str] = []
        if self.ok:
            if self.selected_count == 0:
                parts.append("Selection cleared.")
            elif self.processed > 0:
                parts.append(f"Copied {self.processed} file(s), saved selection.")
            else:
                parts.append(f"Saved selection ({self.selected_count}), but no content read/processed.")
        if self.export_error is not None:
            parts.append(f"Export Error: {self.export_error}.")
        if self.clipboard_error is not None:
            parts.append(f"Clipboard Error: {self.clipboard_error}.")
        if self.save_error is not None:
            parts.append(f"Save Error: {self.save_error}.")
        if self.read_errors:
            parts.append(f"{self.read_errors} read err(s).")
        if self.stat_errors:
            parts.append(f"{self.stat_errors} stat err(s).")
        return f"{' '.join(parts)} ({self.elapsed_seconds:.2f}s)"


def run_export(
    root: Path,
    relative_paths: list[str],
    copy: Callable[[bytes], None] = copy_to_clipboard,
    save: Callable[[Path, list[str]], Exception | None] = save_selection,
) -> ExportOutcome:
    """Copy the selected files' payload and persist the selection as intended.

    The clipboard is skipped when no file could be read. The full snapshot is
    saved regardless of read or clipboard failures.
    """
    started = time.monotonic()
    result = build_payload(root, relative_paths)

    clipboard_error: Exception | None = None
    if result.processed > 0:
        try:
            copy(result.payload)
        except Exception as exc:
            clipboard_error = exc
    elif relative_paths:
        logger.info("Skip clipboard: No content could be read/processed.")

    save_error = save(root, list(relative_paths))
    outcome = ExportOutcome(
        selected_count=len(relative_paths),
        processed=result.processed,
        stat_errors=result.stat_errors,
        read_errors=result.read_errors,
        clipboard_error=clipboard_error,
        save_error=save_error,
        elapsed_seconds=time.monotonic() - started,
    )
    logger.info("%s", outcome.summary())
    return outcome


class ExportWorker:
    """Run one export on a daemon thread and hand its outcome over exactly once."""

    def __init__(self, export: Callable[[], ExportOutcome]) -> None:
        self._export = export
        self._done = threading.Event()
        self._lock = threading.Lock()
        self._outcome: ExportOutcome | None = None
        self._consumed = False
        self._thread = threading.Thread(target=self._run, name="yank-export", daemon=True)

    def _run(self) -> None:
        try:
            outcome = self._export()
        except Exception as exc:
            logger.exception("Export failed")
            outcome = ExportOutcome(selected_count=0, processed=0, export_error=exc)
        with self._lock:
            self._outcome = outcome
        self._done.set()

    def start(self) -> ExportWorker:
        self._thread.start()
        return self

    def done(self) -> bool:
        return self._done.is_set()

    def wait(self, timeout: float | None = None) -> bool:
        return self._done.wait(timeout)

    def take_outcome(self) -> ExportOutcome | None:
        """Return the finished outcome once; later calls return ``None``."""
        if not self._done.is_set():
            return None
        with self._lock:
            if self._consumed:
                return None
            self._consumed = True
            return self._outcome
