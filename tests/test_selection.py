"""Selection model state-machine tests.

Covers the hidden-path visibility policy, Browse/Filter transitions,
focus preservation across view recomputes, and the confirm snapshot.
"""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from yank.selection import BROWSE_TITLE, PROCESSING_STATUS, Mode, SelectionModel

INVENTORY = ["a.txt", ".hidden/b.txt", "src/c.go"]


def _focus(model: SelectionModel, path: str) -> None:
    model.move_cursor_to(model.view.index(path))


class VisibilityTests(unittest.TestCase):
    def test_hidden_paths_are_suppressed_until_shown_or_selected(self) -> None:
        model = SelectionModel(INVENTORY)
        self.assertEqual(model.view, ["a.txt", "src/c.go"])

        model.toggle_show_hidden()
        self.assertEqual(model.view, INVENTORY)

        _focus(model, ".hidden/b.txt")
        model.toggle_focused()
        model.toggle_show_hidden()

        self.assertFalse(model.show_hidden)
        self.assertEqual(model.view, INVENTORY)

    def test_deselecting_hidden_path_while_hidden_off_removes_it(self) -> None:
        model = SelectionModel(INVENTORY, selected=[".hidden/b.txt"])
        self.assertIn(".hidden/b.txt", model.view)
        _focus(model, ".hidden/b.txt")

        model.toggle_focused()

        self.assertEqual(model.view, ["a.txt", "src/c.go"])
        self.assertEqual(model.focused_path, "a.txt")

    def test_visible_items_report_selection_and_focus(self) -> None:
        model = SelectionModel(INVENTORY, selected=["src/c.go"])

        items = model.visible_items()

        self.assertEqual([item.path for item in items], ["a.txt", "src/c.go"])
        self.assertEqual([item.selected for item in items], [False, True])
        self.assertEqual([item.focused for item in items], [True, False])


class FilterModeTests(unittest.TestCase):
    def test_start_filter_keeps_browse_view_for_empty_query(self) -> None:
        model = SelectionModel(INVENTORY)

        self.assertTrue(model.start_filter())

        self.assertIs(model.mode, Mode.FILTER)
        self.assertEqual(model.query, "")
        self.assertEqual(model.view, ["a.txt", "src/c.go"])
        self.assertEqual(model.title, "Filter results for '':")

    def test_query_ranks_inventory_and_backspace_restores(self) -> None:
        model = SelectionModel(INVENTORY)
        model.start_filter()

        for ch in "c.go":
            model.append_query(ch)
        self.assertEqual(model.view, ["src/c.go"])
        self.assertEqual(model.focused_path, "src/c.go")

        for _ in range(4):
            model.backspace_query()
        self.assertEqual(model.query, "")
        self.assertEqual(model.view, ["a.txt", "src/c.go"])
        self.assertFalse(model.backspace_query())

    def test_backspace_removes_whole_code_point(self) -> None:
        model = SelectionModel(["naïve.txt", "日本.md"])
        model.start_filter()
        model.append_query("日本")

        model.backspace_query()

        self.assertEqual(model.query, "日")

    def test_same_query_twice_yields_identical_view(self) -> None:
        model = SelectionModel(["b/x.txt", "a/x.txt", "x.md"])
        model.start_filter()
        model.append_query("x")
        first = list(model.view)
        model.backspace_query()
        model.append_query("x")

        self.assertEqual(model.view, first)

    def test_cancel_filter_returns_to_browse_and_keeps_focus(self) -> None:
        model = SelectionModel(INVENTORY)
        model.start_filter()
        model.append_query("c")
        self.assertEqual(model.focused_path, "src/c.go")

        self.assertTrue(model.cancel_filter())

        self.assertIs(model.mode, Mode.BROWSE)
        self.assertEqual(model.query, "")
        self.assertEqual(model.title, BROWSE_TITLE)
        self.assertEqual(model.view, ["a.txt", "src/c.go"])
        self.assertEqual(model.focused_path, "src/c.go")

    def test_browse_only_operations_are_rejected_in_filter(self) -> None:
        model = SelectionModel(INVENTORY, selected=["a.txt"])
        model.start_filter()

        self.assertFalse(model.toggle_show_hidden())
        self.assertFalse(model.clear_selection())
        self.assertFalse(model.start_filter())
        self.assertTrue(model.is_selected("a.txt"))

    def test_query_editing_is_rejected_in_browse(self) -> None:
        model = SelectionModel(INVENTORY)

        self.assertFalse(model.append_query("a"))
        self.assertFalse(model.backspace_query())
        self.assertFalse(model.cancel_filter())

    def test_toggle_in_filter_does_not_recompute_view(self) -> None:
        model = SelectionModel(INVENTORY)
        model.start_filter()
        model.append_query("b.txt")
        self.assertEqual(model.view, [".hidden/b.txt"])

        model.toggle_focused()
        model.toggle_focused()

        self.assertEqual(model.view, [".hidden/b.txt"])
        self.assertFalse(model.is_selected(".hidden/b.txt"))


class CursorAndEmptyViewTests(unittest.TestCase):
    def test_focused_operations_are_noops_on_empty_view(self) -> None:
        model = SelectionModel([])

        self.assertIsNone(model.focused_path)
        self.assertFalse(model.toggle_focused())
        self.assertFalse(model.move_cursor(1))
        self.assertEqual(model.visible_items(), [])

    def test_no_match_query_gives_empty_view(self) -> None:
        model = SelectionModel(INVENTORY)
        model.start_filter()
        model.append_query("zzz")

        self.assertEqual(model.view, [])
        self.assertFalse(model.toggle_focused())

    def test_move_cursor_clamps_to_view(self) -> None:
        model = SelectionModel(["a", "b", "c"])

        self.assertTrue(model.move_cursor(10))
        self.assertEqual(model.focused_path, "c")
        self.assertFalse(model.move_cursor(1))
        self.assertTrue(model.move_cursor_to(0))
        self.assertEqual(model.focused_path, "a")
        self.assertTrue(model.move_cursor_to(-1))
        self.assertEqual(model.focused_path, "c")

    def test_show_hidden_toggle_keeps_focus_on_same_path(self) -> None:
        model = SelectionModel(INVENTORY)
        _focus(model, "src/c.go")

        model.toggle_show_hidden()

        self.assertEqual(model.focused_path, "src/c.go")
        self.assertEqual(model.cursor, 2)


class ConfirmTests(unittest.TestCase):
    def test_confirm_snapshots_full_selection_regardless_of_filter(self) -> None:
        model = SelectionModel(INVENTORY, selected=["a.txt", ".hidden/b.txt"])
        model.start_filter()
        model.append_query("c.go")
        model.toggle_focused()

        paths = model.begin_export()

        self.assertEqual(paths, [".hidden/b.txt", "a.txt", "src/c.go"])
        self.assertEqual(model.status_message, PROCESSING_STATUS)

    def test_model_is_frozen_after_confirm(self) -> None:
        model = SelectionModel(INVENTORY, selected=["a.txt"])
        self.assertEqual(model.begin_export(), ["a.txt"])

        self.assertIsNone(model.begin_export())
        self.assertFalse(model.toggle_focused())
        self.assertFalse(model.clear_selection())
        self.assertFalse(model.start_filter())
        self.assertTrue(model.is_selected("a.txt"))

    def test_clear_selection_empties_set_and_hides_hidden(self) -> None:
        model = SelectionModel(INVENTORY, selected=[".hidden/b.txt", "a.txt"])

        model.clear_selection()

        self.assertEqual(model.selected_paths(), [])
        self.assertEqual(model.view, ["a.txt", "src/c.go"])
        self.assertEqual(model.begin_export(), [])


class FromRootTests(unittest.TestCase):
    def test_from_root_seeds_inventory_and_prior_selection(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "a.txt").write_text("a", encoding="utf-8")
            (root / ".yank").write_text("a.txt\nmissing.txt\n", encoding="utf-8")

            model = SelectionModel.from_root(root)

        self.assertEqual(model.inventory, ("a.txt",))
        self.assertEqual(model.selected_paths(), ["a.txt"])
        self.assertIsNone(model.startup_error)

    def test_from_root_captures_fatal_scan_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            model = SelectionModel.from_root(Path(tmp) / "missing")

        self.assertIsNotNone(model.startup_error)
        self.assertTrue(model.startup_error.startswith("failed initial load:"))
        self.assertTrue(model.read_only)
        self.assertEqual(model.view, [])
        self.assertIsNone(model.begin_export())


if __name__ == "__main__":
    unittest.main()
