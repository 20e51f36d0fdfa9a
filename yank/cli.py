"""Command-line front door for yank.

Parses CLI options, resolves the target directory, and dispatches into the
interactive runtime.
"""

from __future__ import annotations

import argparse
from pathlib import Path

from .persistence import PERSISTENCE_FILENAME
from .runtime import run_app

APP_NAME = "yank"

DESCRIPTION = (
    "Recursively scans a directory, allows interactive file selection, and copies the "
    "relative path, metadata (modification time, size), and content of selected files "
    "to the clipboard."
)

KEYBINDINGS_EPILOG = f"""\
Keybindings (within the TUI):
  --- Normal Mode ---
  j, k, down, up     Move cursor down/up.
  f, b, pgdn, pgup   Move cursor one page down/up.
  space, m           Toggle selection for the focused file.
  c, C               Clear selection.
  .                  Toggle visibility of hidden files/directories.
                       Selected hidden items remain visible.
  /                  Enter filter mode (fuzzy search).
  y, enter           Confirm selection, copy data to clipboard, save selection, and quit.
  q, ctrl+c          Quit without copying.
  ?                  Show/hide the help panel.

  --- Filter Mode ---
  (type)             Enter text to filter list (fuzzy search).
  esc                Exit filter mode and clear filter.
  ctrl+j, ctrl+k     Move cursor down/up within filtered list.
  enter              Toggle selection for the focused file in filtered list.
  backspace          Delete last character from filter query.
  ctrl+y             Confirm selection, copy, save, and quit.
  ctrl+c             Quit without copying.

Features:
  - Recursive Scan: Finds files in all subdirectories (incl. hidden, excluding .git).
  - Persistence: Remembers the last selection for each directory in a '{PERSISTENCE_FILENAME}' file.
  - Clipboard Format: Each file's data is preceded by a header:
    --- FILENAME: path/to/file.txt | Modified: YYYY-MM-DD HH:MM:SS | Size: NNN bytes ---
  - Exclusions: Ignores '.git' directories and the root '{PERSISTENCE_FILENAME}' state file.
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description=DESCRIPTION,
        epilog=KEYBINDINGS_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-d",
        "--dir",
        default=".",
        help="Directory to list files from (default: current directory).",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug diagnostics after exit.")
    return parser


def resolve_target_dir(raw: str) -> Path:
    """Resolve ``raw`` to an absolute directory or exit with a message."""
    target = Path(raw).expanduser().resolve()
    if not target.exists():
        raise SystemExit(f"Target directory '{target}' error: no such file or directory")
    if not target.is_dir():
        raise SystemExit(f"Target directory '{target}' error: not a directory")
    return target


def main(argv: list[str] | None = None) -> int:
    """Parse CLI arguments and launch the selector; return the exit code."""
    args = build_parser().parse_args(argv)
    target = resolve_target_dir(args.dir)
    return run_app(target, verbose=args.verbose)


if __name__ == "__main__":
    raise SystemExit(main())
