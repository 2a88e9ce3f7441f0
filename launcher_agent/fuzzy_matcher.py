"""Fuzzy matching utilities for catalog item names."""

import difflib
from typing import Optional, Sequence, Tuple


def subsequence_span(query: str, text: str) -> Optional[Tuple[int, int]]:
    """
    Find the tightest window of ``text`` containing ``query`` as a subsequence.

    Both strings are expected to be lowercased already.

    Returns:
        (start, end) indices of the window (end exclusive), or None if
        ``query`` is not a subsequence of ``text``
    """
    if not query:
        return (0, 0)

    best = None
    start = text.find(query[0])
    while start != -1:
        pos = start
        for ch in query[1:]:
            pos = text.find(ch, pos + 1)
            if pos == -1:
                return best
        if best is None or (pos + 1 - start) < (best[1] - best[0]):
            best = (start, pos + 1)
        start = text.find(query[0], start + 1)
    return best


def score_match(query: str, name: str) -> Optional[float]:
    """
    Score how well ``query`` matches ``name``, case-insensitively.

    Tiers mirror how a person scans a list: exact names first, then
    prefixes, then substrings, then scattered subsequences. Within the
    subsequence tier, tighter windows and closer overall similarity win.

    Args:
        query: Text typed by the user
        name: Display name of a catalog item

    Returns:
        Score (higher is better), or None if ``query`` is not a
        subsequence of ``name``
    """
    query_lower = query.lower().strip()
    name_lower = name.lower()
    if not query_lower:
        return 0.0

    span = subsequence_span(query_lower, name_lower)
    if span is None:
        return None

    similarity = difflib.SequenceMatcher(None, query_lower, name_lower).ratio()

    # Exact match (highest priority)
    if name_lower == query_lower:
        return 100.0
    # Starts with (high priority)
    if name_lower.startswith(query_lower):
        return 80.0 + (len(query_lower) / len(name_lower)) * 10
    # Contains (medium priority)
    if query_lower in name_lower:
        return 50.0 + (len(query_lower) / len(name_lower)) * 10

    # Subsequence (lower priority)
    start, end = span
    compactness = len(query_lower) / (end - start)
    score = 20.0 + compactness * 20.0 + similarity * 10.0
    if start == 0:
        score += 2.0
    return score


def rank(query: str, names: Sequence[str]) -> list:
    """
    Rank names against a query.

    Returns:
        Indices into ``names`` of every match, best first; ties keep the
        original order
    """
    scored = []
    for index, name in enumerate(names):
        score = score_match(query, name)
        if score is not None:
            scored.append((score, index))
    # sorted() is stable, so equal scores stay in insertion order
    scored = sorted(scored, key=lambda pair: pair[0], reverse=True)
    return [index for _, index in scored]
