"""Keyboard dispatch for Browse and Filter modes.

Each mode owns one key-combo table, so a key only ever reaches the handlers
that are legal in the current mode. Handlers mutate the selection model and
return a ``KeyEffects`` record describing follow-up work for the host loop.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from .selection import Mode, SelectionModel

DEFAULT_STATUS_SECONDS = 2.0
SHOW_HIDDEN_STATUS = "Showing hidden paths"
HIDE_HIDDEN_STATUS = "Hiding hidden paths (except selected)"
CLEAR_SELECTED_STATUS = "Clear Selected"

ALWAYS_QUIT_KEYS = frozenset({"CTRL_C", "CTRL_Q"})
BROWSE_QUIT_KEYS = ALWAYS_QUIT_KEYS | {"q"}
ERROR_EXIT_KEYS = BROWSE_QUIT_KEYS | {"ENTER", "ESC"}


@dataclass
class KeyEffects:
    """Follow-up work requested by one handled key."""

    handled: bool = True
    dirty: bool = False
    quit: bool = False
    export_paths: list[str] | None = None
    clear_status_after: float | None = None


@dataclass(frozen=True)
class KeyBinding:
    """Key tokens that trigger one action."""

    keys: tuple[str, ...]
    action: Callable[[], KeyEffects]


class ModeKeymap:
    """Key table for one selection mode.

    A token has at most one meaning per mode, so binding it twice raises
    ``ValueError``. Unbound tokens go to ``fallback`` when one is given.
    """

    def __init__(
        self,
        mode: Mode,
        *bindings: KeyBinding,
        fallback: Callable[[str], KeyEffects | None] | None = None,
    ) -> None:
        self.mode = mode
        self._fallback = fallback
        self._actions: dict[str, Callable[[], KeyEffects]] = {}
        for binding in bindings:
            for key in binding.keys:
                if key in self._actions:
                    raise ValueError(f"key {key!r} bound twice in {mode.value} mode")
                self._actions[key] = binding.action

    def bound_keys(self) -> frozenset[str]:
        return frozenset(self._actions)

    def dispatch(self, key: str) -> KeyEffects | None:
        """Run the action for ``key``; ``None`` means nothing in this mode takes it."""
        action = self._actions.get(key)
        if action is not None:
            return action()
        if self._fallback is not None:
            return self._fallback(key)
        return None


def _is_query_text(key: str) -> bool:
    return len(key) == 1 and key.isprintable()


class SelectionKeyHandler:
    """Translate key tokens into selection-model transitions."""

    def __init__(
        self,
        model: SelectionModel,
        status_seconds: float = DEFAULT_STATUS_SECONDS,
        page_rows: Callable[[], int] | None = None,
    ) -> None:
        self.model = model
        self.status_seconds = status_seconds
        self._page_rows = page_rows if page_rows is not None else (lambda: 10)
        self._keymaps: dict[Mode, ModeKeymap] = {
            Mode.BROWSE: self._browse_keymap(),
            Mode.FILTER: self._filter_keymap(),
        }

    def _browse_keymap(self) -> ModeKeymap:
        return ModeKeymap(
            Mode.BROWSE,
            KeyBinding(tuple(sorted(BROWSE_QUIT_KEYS)), self._quit),
            KeyBinding(("j", "DOWN"), lambda: self._move(1)),
            KeyBinding(("k", "UP"), lambda: self._move(-1)),
            KeyBinding(("f", "PGDN"), lambda: self._move(self._page())),
            KeyBinding(("b", "PGUP"), lambda: self._move(-self._page())),
            KeyBinding(("g", "HOME"), lambda: self._move_to(0)),
            KeyBinding(("G", "END"), lambda: self._move_to(-1)),
            KeyBinding((" ", "m"), self._toggle_focused),
            KeyBinding((".",), self._toggle_show_hidden),
            KeyBinding(("c", "C"), self._clear_selection),
            KeyBinding(("/",), self._start_filter),
            KeyBinding(("y", "ENTER"), self._confirm),
            KeyBinding(("?",), self._toggle_help),
        )

    def _filter_keymap(self) -> ModeKeymap:
        return ModeKeymap(
            Mode.FILTER,
            KeyBinding(tuple(sorted(ALWAYS_QUIT_KEYS)), self._quit),
            KeyBinding(("ESC",), self._cancel_filter),
            KeyBinding(("BACKSPACE",), self._backspace),
            KeyBinding(("CTRL_J", "DOWN"), lambda: self._move(1)),
            KeyBinding(("CTRL_K", "UP"), lambda: self._move(-1)),
            KeyBinding(("PGDN",), lambda: self._move(self._page())),
            KeyBinding(("PGUP",), lambda: self._move(-self._page())),
            KeyBinding(("ENTER",), self._toggle_focused),
            KeyBinding(("CTRL_Y",), self._confirm),
            fallback=self._append_query_text,
        )

    def handle_key(self, key: str) -> KeyEffects:
        """Apply one key token and report the follow-up work it requires."""
        model = self.model
        if model.startup_error is not None:
            if key in ERROR_EXIT_KEYS:
                return KeyEffects(quit=True)
            return KeyEffects(handled=False)
        if model.export_started:
            # Export freezes the model; only quitting is still honored.
            if key in BROWSE_QUIT_KEYS:
                return KeyEffects(quit=True)
            return KeyEffects(handled=False)

        effects = self._keymaps[model.mode].dispatch(key)
        return effects if effects is not None else KeyEffects(handled=False)

    def _page(self) -> int:
        return max(1, self._page_rows())

    def _status(self, message: str) -> KeyEffects:
        self.model.set_status(message)
        return KeyEffects(dirty=True, clear_status_after=self.status_seconds)

    def _quit(self) -> KeyEffects:
        return KeyEffects(quit=True)

    def _move(self, delta: int) -> KeyEffects:
        return KeyEffects(dirty=self.model.move_cursor(delta))

    def _move_to(self, index: int) -> KeyEffects:
        return KeyEffects(dirty=self.model.move_cursor_to(index))

    def _toggle_focused(self) -> KeyEffects:
        return KeyEffects(dirty=self.model.toggle_focused())

    def _toggle_show_hidden(self) -> KeyEffects:
        self.model.toggle_show_hidden()
        return self._status(SHOW_HIDDEN_STATUS if self.model.show_hidden else HIDE_HIDDEN_STATUS)

    def _clear_selection(self) -> KeyEffects:
        self.model.clear_selection()
        return self._status(CLEAR_SELECTED_STATUS)

    def _start_filter(self) -> KeyEffects:
        return KeyEffects(dirty=self.model.start_filter())

    def _cancel_filter(self) -> KeyEffects:
        return KeyEffects(dirty=self.model.cancel_filter())

    def _backspace(self) -> KeyEffects:
        return KeyEffects(dirty=self.model.backspace_query())

    def _append_query_text(self, key: str) -> KeyEffects | None:
        if not _is_query_text(key):
            return None
        return KeyEffects(dirty=self.model.append_query(key))

    def _toggle_help(self) -> KeyEffects:
        return KeyEffects(dirty=self.model.toggle_help())

    def _confirm(self) -> KeyEffects:
        paths = self.model.begin_export()
        if paths is None:
            return KeyEffects(handled=False)
        return KeyEffects(dirty=True, export_paths=paths)
