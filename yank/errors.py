"""Exception hierarchy shared across scanner, clipboard, and runtime layers."""

from __future__ import annotations


class YankError(Exception):
    """Base class for errors raised by yank."""


class InventoryScanError(YankError):
    """The directory walk could not start; the interactive view cannot be built."""


class ClipboardError(YankError):
    """The clipboard command failed or could not be launched."""


class ClipboardUnavailableError(ClipboardError):
    """No clipboard command is known or installed for this platform."""
