"""System clipboard delivery through platform copy commands.

The payload is piped to the command's stdin while its output is drained,
so large payloads cannot deadlock against a bounded pipe buffer.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import sys
from collections.abc import Callable, Sequence

from .errors import ClipboardError, ClipboardUnavailableError

logger = logging.getLogger(__name__)

LINUX_CLIPBOARD_COMMANDS: tuple[tuple[str, ...], ...] = (
    ("xclip", "-selection", "clipboard"),
    ("xsel", "--clipboard", "--input"),
    ("wl-copy",),
)


def clipboard_command(
    platform: str | None = None,
    which: Callable[[str], str | None] = shutil.which,
) -> list[str]:
    """Return the copy command for ``platform`` or raise ``ClipboardUnavailableError``."""
    platform = sys.platform if platform is None else platform
    if platform == "darwin":
        return ["pbcopy"]
    if platform in {"win32", "cygwin"}:
        return ["clip.exe"]
    if platform.startswith("linux") or platform.startswith("freebsd"):
        for candidate in LINUX_CLIPBOARD_COMMANDS:
            resolved = which(candidate[0])
            if resolved is not None:
                return [resolved, *candidate[1:]]
        logger.warning(
            "Clipboard error: requires 'xclip', 'xsel' or 'wl-copy'. "
            "Please install one via your package manager (e.g., 'sudo apt install xclip')."
        )
        raise ClipboardUnavailableError("clipboard dependency missing: requires 'xclip', 'xsel' or 'wl-copy'")
    raise ClipboardUnavailableError(f"clipboard OS unsupported: {platform}")


def copy_to_clipboard(payload: bytes, command: Sequence[str] | None = None) -> None:
    """Deliver ``payload`` to the clipboard, raising ``ClipboardError`` on failure.

    ``command`` overrides platform detection (e.g. from user config).
    """
    argv = list(command) if command else clipboard_command()
    name = os.path.basename(argv[0])
    try:
        # communicate() writes stdin and reads output concurrently, then closes stdin.
        proc = subprocess.run(
            argv,
            input=payload,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            check=False,
        )
    except OSError as exc:
        raise ClipboardError(f"failed to start {name}: {exc}") from exc
    if proc.returncode != 0:
        output = proc.stdout.decode("utf-8", errors="replace") if proc.stdout else ""
        logger.warning("%s command failed. Output:\n%s", name, output)
        raise ClipboardError(f"{name} command failed: exit status {proc.returncode}")
