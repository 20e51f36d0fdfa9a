"""Persistent JSON config helpers.

Stores the initial hidden-path preference, a clipboard command override, and
the transient status duration. Malformed or missing config falls back safely.
"""

from __future__ import annotations

import json
from pathlib import Path

from platformdirs import user_config_dir

from .keys import DEFAULT_STATUS_SECONDS

APP_NAME = "yank"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def load_show_hidden() -> bool:
    """Return the initial hidden-path visibility preference.

    Only explicit boolean values are accepted; any other type falls back to
    ``False``.
    """
    value = load_config().get("show_hidden")
    return value if isinstance(value, bool) else False


def load_clipboard_command() -> list[str] | None:
    """Return a configured clipboard argv, or ``None`` to use platform detection."""
    value = load_config().get("clipboard_command")
    if not isinstance(value, list) or not value:
        return None
    if not all(isinstance(part, str) and part for part in value):
        return None
    return list(value)


def load_status_seconds() -> float:
    """Return how long transient status messages stay visible."""
    value = load_config().get("status_seconds")
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        return DEFAULT_STATUS_SECONDS
    return float(value)
