from __future__ import annotations


def fuzzy_match(query: str, candidate: str) -> bool:
    """Return whether ``query`` is a case-insensitive subsequence of ``candidate``."""
    query_folded = query.casefold()
    candidate_folded = candidate.casefold()
    prev_idx = -1
    for needle in query_folded:
        idx = candidate_folded.find(needle, prev_idx + 1)
        if idx < 0:
            return False
        prev_idx = idx
    return True


def levenshtein_distance(source: str, target: str) -> int:
    if source == target:
        return 0
    if not source:
        return len(target)
    if not target:
        return len(source)

    previous = list(range(len(target) + 1))
    for i, source_ch in enumerate(source, start=1):
        current = [i]
        for j, target_ch in enumerate(target, start=1):
            cost = 0 if source_ch == target_ch else 1
            current.append(
                min(
                    previous[j] + 1,
                    current[j - 1] + 1,
                    previous[j - 1] + cost,
                )
            )
        previous = current
    return previous[-1]


def fuzzy_rank_labels(query: str, labels: list[str]) -> list[tuple[int, str, int]]:
    """Rank ``labels`` matching ``query`` as ``(index, label, distance)`` tuples.

    Non-matching labels are dropped. Lower edit distance ranks first and ties
    keep input order, so identical inputs always produce identical output.
    """
    if not query:
        raise ValueError("query must not be empty")

    query_folded = query.casefold()
    ranked: list[tuple[int, int, str]] = []
    for idx, label in enumerate(labels):
        if not fuzzy_match(query_folded, label):
            continue
        ranked.append((levenshtein_distance(query_folded, label.casefold()), idx, label))
    ranked.sort(key=lambda item: (item[0], item[1]))
    return [(idx, label, distance) for distance, idx, label in ranked]


def rank_paths(query: str, paths: list[str]) -> list[str]:
    """Return matching ``paths`` ordered best match first."""
    return [label for _, label, _ in fuzzy_rank_labels(query, paths)]
