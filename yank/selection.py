"""Selection model: inventory, selection set, visibility, and mode state.

The model is the single owner of the selection set. Renderers receive
``ViewItem`` snapshots per paint and the export pipeline receives a sorted
list of selected paths at confirm time; neither holds a live reference.
"""

from __future__ import annotations

import enum
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from .errors import InventoryScanError
from .fuzzy import rank_paths
from .inventory import is_hidden_path, load_inventory_and_selection

BROWSE_TITLE = "Select files:"
PROCESSING_STATUS = "Processing files..."


class Mode(enum.Enum):
    BROWSE = "browse"
    FILTER = "filter"


@dataclass(frozen=True)
class ViewItem:
    """One renderable row: path plus selection and focus flags."""

    path: str
    selected: bool
    focused: bool


class SelectionModel:
    """Authoritative selection state plus the Browse/Filter state machine.

    Mutations return ``True`` when visible state changed so callers can mark
    the screen dirty. Once an export has started, or when the model was
    built around a startup error, every mutation is a no-op.
    """

    def __init__(
        self,
        inventory: Iterable[str],
        selected: Iterable[str] = (),
        show_hidden: bool = False,
        startup_error: str | None = None,
    ) -> None:
        self.inventory: tuple[str, ...] = tuple(inventory)
        self._selected: set[str] = set(selected)
        self.show_hidden = show_hidden
        self.startup_error = startup_error
        self.mode = Mode.BROWSE
        self.query = ""
        self.view: list[str] = []
        self.cursor = 0
        self.status_message = ""
        self.export_started = False
        self.help_visible = False
        self._refresh_view()

    @classmethod
    def from_root(cls, root: Path, show_hidden: bool = False) -> SelectionModel:
        """Scan ``root`` and seed a model, capturing fatal scan errors as state."""
        try:
            inventory, selected = load_inventory_and_selection(root)
        except InventoryScanError as exc:
            return cls((), show_hidden=show_hidden, startup_error=f"failed initial load: {exc}")
        return cls(inventory, selected, show_hidden=show_hidden)

    @property
    def read_only(self) -> bool:
        return self.export_started or self.startup_error is not None

    @property
    def title(self) -> str:
        if self.mode is Mode.FILTER:
            return f"Filter results for '{self.query}':"
        return BROWSE_TITLE

    @property
    def focused_path(self) -> str | None:
        if not self.view or not 0 <= self.cursor < len(self.view):
            return None
        return self.view[self.cursor]

    def is_selected(self, path: str) -> bool:
        return path in self._selected

    def selected_paths(self) -> list[str]:
        """Return a sorted snapshot of every selected path, independent of the view."""
        return sorted(self._selected)

    def is_visible_in_browse(self, path: str) -> bool:
        """Apply the Browse visibility policy to one path."""
        return self.show_hidden or path in self._selected or not is_hidden_path(path)

    def visible_items(self) -> list[ViewItem]:
        return [
            ViewItem(path=path, selected=path in self._selected, focused=idx == self.cursor)
            for idx, path in enumerate(self.view)
        ]

    def _browse_view(self) -> list[str]:
        return [path for path in self.inventory if self.is_visible_in_browse(path)]

    def _set_view(self, paths: list[str]) -> None:
        previous = self.focused_path
        self.view = paths
        if previous is not None and previous in paths:
            self.cursor = paths.index(previous)
        else:
            self.cursor = 0

    def _refresh_view(self) -> None:
        # Empty queries fall back to the Browse policy rather than an unranked match-all.
        if self.mode is Mode.FILTER and self.query:
            self._set_view(rank_paths(self.query, list(self.inventory)))
        else:
            self._set_view(self._browse_view())

    def start_filter(self) -> bool:
        if self.read_only or self.mode is not Mode.BROWSE:
            return False
        self.mode = Mode.FILTER
        self.query = ""
        self._refresh_view()
        return True

    def append_query(self, text: str) -> bool:
        if self.read_only or self.mode is not Mode.FILTER or not text:
            return False
        self.query += text
        self._refresh_view()
        return True

    def backspace_query(self) -> bool:
        if self.read_only or self.mode is not Mode.FILTER or not self.query:
            return False
        # str slicing drops one code point, never a partial multi-byte sequence.
        self.query = self.query[:-1]
        self._refresh_view()
        return True

    def cancel_filter(self) -> bool:
        if self.read_only or self.mode is not Mode.FILTER:
            return False
        self.mode = Mode.BROWSE
        self.query = ""
        self._refresh_view()
        return True

    def move_cursor(self, delta: int) -> bool:
        if self.read_only or not self.view:
            return False
        target = max(0, min(len(self.view) - 1, self.cursor + delta))
        if target == self.cursor:
            return False
        self.cursor = target
        return True

    def move_cursor_to(self, index: int) -> bool:
        if self.read_only or not self.view:
            return False
        if index < 0:
            index = len(self.view) + index
        return self.move_cursor(index - self.cursor)

    def toggle_focused(self) -> bool:
        """Flip the focused path's selection; no-op when nothing is focused."""
        path = self.focused_path
        if self.read_only or path is None:
            return False
        was_selected = path in self._selected
        if was_selected:
            self._selected.discard(path)
        else:
            self._selected.add(path)
        if (
            self.mode is Mode.BROWSE
            and was_selected
            and not self.show_hidden
            and is_hidden_path(path)
        ):
            self._refresh_view()
        return True

    def toggle_show_hidden(self) -> bool:
        if self.read_only or self.mode is not Mode.BROWSE:
            return False
        self.show_hidden = not self.show_hidden
        self._refresh_view()
        return True

    def clear_selection(self) -> bool:
        if self.read_only or self.mode is not Mode.BROWSE:
            return False
        self._selected.clear()
        self._refresh_view()
        return True

    def toggle_help(self) -> bool:
        if self.startup_error is not None:
            return False
        self.help_visible = not self.help_visible
        return True

    def set_status(self, message: str) -> None:
        self.status_message = message

    def clear_status(self) -> bool:
        if not self.status_message:
            return False
        self.status_message = ""
        return True

    def begin_export(self) -> list[str] | None:
        """Freeze the model and return the paths to export, or ``None`` if frozen.

        The snapshot covers the whole selection set, whatever the current mode
        or filtered view shows.
        """
        if self.read_only:
            return None
        self.export_started = True
        self.status_message = PROCESSING_STATUS
        return self.selected_paths()
