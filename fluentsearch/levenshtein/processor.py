# FluentSearch Levenshtein - Processor
# ====================================
"""
Levenshtein (edit) distance between two strings.

The distance is the minimum number of single-character insertions,
deletions and substitutions needed to turn one string into the other.
"""

import logging
from typing import Callable, List, Optional

from rapidfuzz.distance import Levenshtein

from ..settings import LevenshteinBackend, SearchSettings, resolve_settings

logger = logging.getLogger(__name__)


def levenshtein_table(a: str, b: str) -> List[List[int]]:
    """
    Full dynamic-programming cost table for ``a`` -> ``b``.

    cost[i][j] is the distance between a[:i] and b[:j]; the answer is
    cost[len(a)][len(b)].
    """
    a = a or ""
    b = b or ""
    m, n = len(a), len(b)

    cost = [[0] * (n + 1) for _ in range(m + 1)]
    for i in range(m + 1):
        cost[i][0] = i
    for j in range(n + 1):
        cost[0][j] = j

    for i in range(1, m + 1):
        for j in range(1, n + 1):
            substitution = 0 if a[i - 1] == b[j - 1] else 1
            cost[i][j] = min(
                cost[i - 1][j] + 1,
                cost[i][j - 1] + 1,
                cost[i - 1][j - 1] + substitution,
            )
    return cost


def levenshtein_distance(a: Optional[str], b: Optional[str]) -> int:
    """
    Levenshtein distance between ``a`` and ``b``; None counts as "".

    Same recurrence as levenshtein_table, keeping only the previous row.
    """
    a = a or ""
    b = b or ""
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i] + [0] * len(b)
        for j, char_b in enumerate(b, start=1):
            substitution = 0 if char_a == char_b else 1
            current[j] = min(
                previous[j] + 1,
                current[j - 1] + 1,
                previous[j - 1] + substitution,
            )
        previous = current
    return previous[-1]


def rapidfuzz_distance(a: Optional[str], b: Optional[str]) -> int:
    """Levenshtein distance computed by rapidfuzz; None counts as ""."""
    return Levenshtein.distance(a or "", b or "")


def get_distance_function(settings: Optional[SearchSettings] = None) -> Callable[[Optional[str], Optional[str]], int]:
    """Distance implementation selected by ``levenshtein_backend``."""
    backend = resolve_settings(settings).levenshtein_backend
    if backend == LevenshteinBackend.RAPIDFUZZ:
        return rapidfuzz_distance
    return levenshtein_distance
