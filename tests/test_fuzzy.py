from __future__ import annotations

import unittest

from yank.fuzzy import fuzzy_match, fuzzy_rank_labels, levenshtein_distance, rank_paths

INVENTORY = ["a.txt", ".hidden/b.txt", "src/c.go"]


class FuzzyBehaviorTests(unittest.TestCase):
    def test_fuzzy_match_is_case_insensitive_subsequence(self) -> None:
        self.assertTrue(fuzzy_match("scg", "src/c.go"))
        self.assertTrue(fuzzy_match("SRC", "src/c.go"))
        self.assertFalse(fuzzy_match("gcs", "src/c.go"))
        self.assertFalse(fuzzy_match("zzz", "src/c.go"))

    def test_levenshtein_distance_counts_edits(self) -> None:
        self.assertEqual(levenshtein_distance("kitten", "sitting"), 3)
        self.assertEqual(levenshtein_distance("", "abc"), 3)
        self.assertEqual(levenshtein_distance("abc", "abc"), 0)

    def test_query_ranks_matching_path_and_drops_non_matches(self) -> None:
        self.assertEqual(rank_paths("c.go", INVENTORY), ["src/c.go"])

    def test_closer_paths_rank_first(self) -> None:
        paths = ["docs/readme_long_name.md", "readme.md", "src/read/me.py"]

        ranked = rank_paths("readme", paths)

        self.assertEqual(ranked[0], "readme.md")
        self.assertEqual(set(ranked), {"docs/readme_long_name.md", "readme.md", "src/read/me.py"})

    def test_ties_keep_inventory_order_and_repeat_identically(self) -> None:
        paths = ["b/x.txt", "a/x.txt", "c/x.txt"]

        first = rank_paths("x", paths)
        second = rank_paths("x", paths)

        self.assertEqual(first, ["b/x.txt", "a/x.txt", "c/x.txt"])
        self.assertEqual(first, second)

    def test_rank_labels_reports_index_and_distance(self) -> None:
        matches = fuzzy_rank_labels("A.TXT", INVENTORY)

        self.assertEqual(matches[0], (0, "a.txt", 0))

    def test_empty_query_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            rank_paths("", INVENTORY)


if __name__ == "__main__":
    unittest.main()
