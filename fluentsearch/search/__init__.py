# FluentSearch Search Module
# ==========================
"""
Fluent predicate composition over record collections.

Components:
- search / SearchChain: Immutable fluent chain; each call AND-narrows the result
- PredicateComposer: OR-joins contains / starts-with / equals leaves over fields x terms
"""

from .composer import (
    PredicateComposer,
    SearchOperation,
    build_leaf,
    normalize_terms,
    normalize_values,
)

from .chain import (
    SearchChain,
    search,
)


__all__ = [
    # Composer
    "PredicateComposer",
    "SearchOperation",
    "build_leaf",
    "normalize_terms",
    "normalize_values",

    # Chain
    "SearchChain",
    "search",
]
