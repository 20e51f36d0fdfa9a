"""Frame rendering for the selection list.

Builds plain lists of styled rows from the model; writing them to the
terminal is the runtime's job. Nothing here mutates selection state.
"""

from __future__ import annotations

import unicodedata
from dataclasses import dataclass

from .selection import Mode, SelectionModel, ViewItem

RESET = "\033[0m"
TITLE_STYLE = "\033[1;38;5;62m"
FOCUSED_STYLE = "\033[1;38;5;75m"
CHECKED_STYLE = "\033[38;5;42m"
HELP_STYLE = "\033[38;5;240m"
ERROR_STYLE = "\033[38;5;196m"
FILTER_PROMPT_STYLE = "\033[38;5;205m"

MARGIN_TOP = 1
MARGIN_LEFT = 2
DEFAULT_HINT = "Press ? for help, / to filter"

HELP_BROWSE_LINES: tuple[str, ...] = (
    "j/k, up/down   move        f/b, pgdn/pgup  page",
    "space/m        toggle      .               toggle hidden paths",
    "c/C            clear       /               filter list",
    "y/enter        copy & quit q/ctrl+c        quit",
)

HELP_FILTER_LINES: tuple[str, ...] = (
    "type           edit query  backspace       delete char",
    "ctrl+j/ctrl+k  move        enter           toggle select",
    "ctrl+y         copy & quit esc             clear filter",
    "ctrl+c         quit",
)


def char_display_width(ch: str) -> int:
    """Return terminal column width for one character."""
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def clip_text(text: str, max_cols: int) -> str:
    """Trim unstyled ``text`` to at most ``max_cols`` display columns."""
    if max_cols <= 0:
        return ""
    out: list[str] = []
    col = 0
    for ch in text:
        w = char_display_width(ch)
        if col + w > max_cols:
            break
        out.append(ch)
        col += w
    return "".join(out)


def _style(text: str, style: str, no_color: bool) -> str:
    if no_color or not text:
        return text
    return f"{style}{text}{RESET}"


def list_window_start(cursor: int, total: int, rows: int, previous_start: int = 0) -> int:
    """Return the first visible row index so ``cursor`` stays on screen."""
    rows = max(1, rows)
    start = previous_start
    if cursor < start:
        start = cursor
    elif cursor >= start + rows:
        start = cursor - rows + 1
    return max(0, min(start, max(0, total - rows)))


def render_item(item: ViewItem, max_cols: int, no_color: bool = False) -> str:
    """Render one checkbox row, highlighting the focused row."""
    checkbox = "[x] " if item.selected else "[ ] "
    path_text = clip_text(item.path, max(0, max_cols - len(checkbox)))
    if item.focused:
        return _style(checkbox + path_text, FOCUSED_STYLE, no_color)
    if item.selected:
        return _style(checkbox, CHECKED_STYLE, no_color) + path_text
    return checkbox + path_text


def info_line(model: SelectionModel, no_color: bool = False) -> str:
    """Return the line shown under the list: prompt, progress, status, or hint."""
    if model.mode is Mode.FILTER and not model.export_started:
        return _style("Filter: ", FILTER_PROMPT_STYLE, no_color) + model.query + _style("_", HELP_STYLE, no_color)
    if model.status_message:
        return _style(model.status_message, HELP_STYLE, no_color)
    return _style(DEFAULT_HINT, HELP_STYLE, no_color)


@dataclass(frozen=True)
class Frame:
    lines: list[str]
    list_start: int


def help_lines(model: SelectionModel) -> tuple[str, ...]:
    if not model.help_visible:
        return ()
    return HELP_FILTER_LINES if model.mode is Mode.FILTER else HELP_BROWSE_LINES


def list_rows(height: int, model: SelectionModel) -> int:
    """Return how many list rows fit after title, info, and help rows."""
    chrome = MARGIN_TOP + 2 + 2 + len(help_lines(model))
    return max(1, height - chrome)


def build_error_frame(message: str, width: int, no_color: bool = False) -> Frame:
    pad = " " * MARGIN_LEFT
    usable = max(1, width - MARGIN_LEFT)
    lines = [""] * MARGIN_TOP
    lines.append(pad + _style(clip_text(f"Error: {message}", usable), ERROR_STYLE, no_color))
    lines.append("")
    lines.append(pad + _style("Press q to exit.", HELP_STYLE, no_color))
    return Frame(lines=lines, list_start=0)


def build_frame(
    model: SelectionModel,
    width: int,
    height: int,
    list_start: int = 0,
    no_color: bool = False,
) -> Frame:
    """Lay out title, visible list window, info line, and help rows."""
    if model.startup_error is not None:
        return build_error_frame(model.startup_error, width, no_color)

    pad = " " * MARGIN_LEFT
    usable = max(1, width - MARGIN_LEFT)
    rows = list_rows(height, model)
    items = model.visible_items()
    start = list_window_start(model.cursor, len(items), rows, list_start)

    lines = [""] * MARGIN_TOP
    lines.append(pad + _style(clip_text(model.title, usable), TITLE_STYLE, no_color))
    lines.append("")
    window = items[start : start + rows]
    if not window:
        lines.append(pad + _style("No items.", HELP_STYLE, no_color))
    for item in window:
        lines.append(pad + render_item(item, usable, no_color))
    lines.extend("" for _ in range(rows - max(1, len(window))))
    lines.append("")
    lines.append(pad + info_line(model, no_color))
    for help_row in help_lines(model):
        lines.append(pad + _style(clip_text(help_row, usable), HELP_STYLE, no_color))
    return Frame(lines=lines, list_start=start)
