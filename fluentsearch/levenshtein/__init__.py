# FluentSearch Levenshtein Module
# ===============================
"""
Edit-distance scoring for search chains.

Components:
- levenshtein_distance: Dynamic-programming Levenshtein distance
- DistanceBuilder: Collects source fields, then compares them to targets
- LevenshteinDistance: Distance vector with minimum/maximum for one record
"""

from .processor import (
    levenshtein_distance,
    levenshtein_table,
    rapidfuzz_distance,
    get_distance_function,
)

from .distance import (
    DistanceBuilder,
    DistanceSequence,
    LevenshteinDistance,
    distance_node,
)


__all__ = [
    # Processor
    "levenshtein_distance",
    "levenshtein_table",
    "rapidfuzz_distance",
    "get_distance_function",

    # Distance builder
    "DistanceBuilder",
    "DistanceSequence",
    "LevenshteinDistance",
    "distance_node",
]
