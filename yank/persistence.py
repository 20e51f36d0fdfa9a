"""Per-directory selection record stored beside the scanned files.

The record is plain UTF-8 text with one relative path per line. An empty
selection removes the file instead of writing an empty one.
"""

from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Iterable
from pathlib import Path

logger = logging.getLogger(__name__)

PERSISTENCE_FILENAME = ".yank"
PERSISTENCE_FILE_MODE = 0o640


def persistence_path(root: Path) -> Path:
    """Return the record location for ``root``."""
    return root / PERSISTENCE_FILENAME


def parse_selection(content: str) -> list[str]:
    """Split record text into non-empty, whitespace-trimmed relative paths."""
    paths: list[str] = []
    # Only "\n" separates records; other line breaks are legal in file names.
    for line in content.split("\n"):
        stripped = line.strip()
        if stripped:
            paths.append(stripped)
    return paths


def load_selection(root: Path) -> tuple[list[str], OSError | None]:
    """Read the saved selection for ``root``.

    Returns ``(paths, error)``. A missing record is a first run, not an error,
    and yields ``([], None)``.
    """
    try:
        raw = persistence_path(root).read_bytes()
    except FileNotFoundError:
        return [], None
    except OSError as exc:
        return [], exc
    return parse_selection(raw.decode("utf-8", errors="surrogateescape")), None


def validate_selection(paths: Iterable[str], inventory: Iterable[str]) -> list[str]:
    """Keep only saved paths that are still part of ``inventory``."""
    known = set(inventory)
    valid: list[str] = []
    for path in paths:
        if path in known:
            valid.append(path)
        else:
            logger.info(
                "Note: Previously selected file '%s' not found during walk, removing from list.",
                path,
            )
    return valid


def save_selection(root: Path, paths: list[str]) -> OSError | None:
    """Persist ``paths`` for ``root`` and return the failure, if any.

    An empty list deletes the record; deleting an absent record succeeds.
    Non-empty lists replace the record in one step so readers never observe
    a partially written file.
    """
    target = persistence_path(root)
    if not paths:
        try:
            target.unlink()
        except FileNotFoundError:
            pass
        except OSError as exc:
            return OSError(f"failed remove persistence file '{target}': {exc}")
        return None

    content = "\n".join(paths)
    tmp_name: str | None = None
    try:
        fd, tmp_name = tempfile.mkstemp(prefix=f"{PERSISTENCE_FILENAME}.", suffix=".tmp", dir=root)
        with os.fdopen(fd, "w", encoding="utf-8", errors="surrogateescape", newline="\n") as handle:
            handle.write(content)
        os.chmod(tmp_name, PERSISTENCE_FILE_MODE)
        os.replace(tmp_name, target)
        tmp_name = None
    except (OSError, ValueError) as exc:
        return OSError(f"failed write persistence file '{target}': {exc}")
    finally:
        if tmp_name is not None:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
    logger.debug("Saved %d selected path(s) to %s", len(paths), target)
    return None
