# FluentSearch - Lazy Sequences
# =============================
"""
Deferred result sequences.

Nothing is evaluated until the sequence is iterated, and iteration stops
pulling records as soon as the consumer stops. Iterating again starts
over from the source, so a sequence is restartable exactly when its
source is.
"""

from itertools import islice
from typing import Any, Iterator, List, Optional

from .errors import EmptySequenceError


class LazySequence:
    """Base class for chains and distance results."""

    def __iter__(self) -> Iterator[Any]:
        raise NotImplementedError

    def count(self) -> int:
        """Number of elements; enumerates the sequence."""
        return sum(1 for _ in self)

    def first(self) -> Any:
        """First element; raises EmptySequenceError if there is none."""
        for element in self:
            return element
        raise EmptySequenceError(f"{type(self).__name__} contains no elements")

    def first_or_none(self) -> Optional[Any]:
        """First element, or None if the sequence is empty."""
        for element in self:
            return element
        return None

    def take(self, limit: int) -> List[Any]:
        """Up to ``limit`` elements; later elements are never evaluated."""
        return list(islice(self, limit))

    def any(self) -> bool:
        """True when at least one element exists."""
        for _ in self:
            return True
        return False

    def to_list(self) -> List[Any]:
        """Materialize every element."""
        return list(self)
