"""Recursive file inventory and prior-selection loading.

Walks the root depth-first in name order and emits files only. The
version-control metadata directory is pruned and the root selection record
is never listed as selectable data.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from .errors import InventoryScanError
from .persistence import PERSISTENCE_FILENAME, load_selection, persistence_path, validate_selection

logger = logging.getLogger(__name__)

VCS_DIR_NAME = ".git"


def is_hidden_path(relative_path: str) -> bool:
    """Return whether any slash-separated segment is a dot-prefixed name.

    ``.`` and ``..`` segments do not count as hidden.
    """
    for part in relative_path.split("/"):
        if part.startswith(".") and part not in {".", ".."}:
            return True
    return False


def _sorted_entries(directory: Path) -> list[os.DirEntry[str]]:
    with os.scandir(directory) as entries:
        return sorted(entries, key=lambda entry: entry.name)


def _walk_entries(entries: list[os.DirEntry[str]], prefix: str, files: list[str]) -> None:
    for entry in entries:
        relative_path = f"{prefix}{entry.name}"
        try:
            is_dir = entry.is_dir(follow_symlinks=False)
        except OSError as exc:
            logger.warning("Warning: accessing path '%s': %s", entry.path, exc)
            continue

        if not is_dir:
            if not prefix and entry.name == PERSISTENCE_FILENAME:
                continue
            files.append(relative_path)
            continue

        if entry.name == VCS_DIR_NAME:
            continue
        try:
            children = _sorted_entries(Path(entry.path))
        except OSError as exc:
            # Unreadable directories (permission or transient I/O) lose their subtree only.
            logger.warning("Warning: accessing path '%s': %s", entry.path, exc)
            continue
        _walk_entries(children, f"{relative_path}/", files)


def scan_inventory(root: Path) -> list[str]:
    """Return forward-slash relative paths of every eligible file under ``root``.

    Raises ``InventoryScanError`` when ``root`` itself cannot be listed.
    Per-entry failures below the root are logged and skipped.
    """
    try:
        entries = _sorted_entries(root)
    except OSError as exc:
        raise InventoryScanError(f"error during directory walk: {exc}") from exc

    files: list[str] = []
    _walk_entries(entries, "", files)
    logger.debug("Scanned %d file(s) under %s", len(files), root)
    return files


def load_inventory_and_selection(root: Path) -> tuple[list[str], list[str]]:
    """Scan ``root`` and load the persisted selection restricted to scanned files.

    A missing record yields an empty selection. Any other failure to read the
    record is reported as ``InventoryScanError`` like a failed walk.
    """
    inventory = scan_inventory(root)
    loaded, error = load_selection(root)
    if error is not None:
        raise InventoryScanError(
            f"reading persistence file '{persistence_path(root)}': {error}"
        ) from error
    return inventory, validate_selection(loaded, inventory)
