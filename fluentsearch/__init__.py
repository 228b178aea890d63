# FluentSearch
# ============
"""
FluentSearch: fluent text search and Levenshtein scoring over record collections.

    from fluentsearch import search

    matches = search(people, "first_name", "last_name").containing("ann", "bob")
    scored = search(people).levenshtein_distance_of("last_name").compared_to("smith")

Works on Python iterables, pandas DataFrames and DuckDB tables.
"""

from .errors import (
    SearchError,
    InvalidArgumentError,
    UnsupportedExpressionError,
    EmptySequenceError,
)

from .expressions import (
    FieldAccessor,
    text,
    unify,
)

from .search import (
    SearchChain,
    search,
)

from .levenshtein import (
    DistanceBuilder,
    DistanceSequence,
    LevenshteinDistance,
    levenshtein_distance,
)

from .backends import (
    RecordSource,
    MemorySource,
    FrameSource,
    DuckDBSource,
)

from .settings import (
    SearchSettings,
    configure,
    get_settings,
)

__version__ = "0.3.0"

__all__ = [
    # Errors
    "SearchError",
    "InvalidArgumentError",
    "UnsupportedExpressionError",
    "EmptySequenceError",

    # Expressions
    "FieldAccessor",
    "text",
    "unify",

    # Search
    "SearchChain",
    "search",

    # Levenshtein
    "DistanceBuilder",
    "DistanceSequence",
    "LevenshteinDistance",
    "levenshtein_distance",

    # Backends
    "RecordSource",
    "MemorySource",
    "FrameSource",
    "DuckDBSource",

    # Settings
    "SearchSettings",
    "configure",
    "get_settings",
]
