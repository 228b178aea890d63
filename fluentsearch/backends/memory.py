# FluentSearch Backends - In-Memory Source
# ========================================
"""
Searches Python iterables: lists of dataclasses, pydantic models,
NamedTuples, plain objects or dicts.
"""

import logging
from collections.abc import Iterable, Mapping, Sequence
from itertools import chain, islice
from typing import Any, Iterator, List, Optional, Tuple

from ..errors import InvalidArgumentError
from ..reflection import string_fields_of, string_keys_of
from .base import PythonRecordSource

logger = logging.getLogger(__name__)


class MemorySource(PythonRecordSource):
    """
    Record source over an in-memory iterable.

    A list or tuple can be searched any number of times. A one-shot
    iterator (e.g. a generator) is consumed by the first enumeration.

    Args:
        items: The records to search
        record_type: Record class used for search-all field discovery;
            inferred from the records when omitted
    """

    def __init__(self, items: Iterable[Any], record_type: Optional[type] = None):
        if items is None:
            raise InvalidArgumentError("source", "a record source is required")
        if isinstance(items, (str, bytes)) or not isinstance(items, Iterable):
            raise InvalidArgumentError(
                "source", f"expected an iterable of records, got {type(items).__name__}"
            )
        self.items = items
        self.record_type = record_type
        self._string_fields: Optional[Tuple[str, ...]] = None

    def _records(self) -> Iterator[Any]:
        return iter(self.items)

    def string_field_names(self) -> Tuple[str, ...]:
        if self._string_fields is None:
            self._string_fields = self._discover_string_fields()
            logger.debug(f"String fields of {self!r}: {self._string_fields}")
        return self._string_fields

    def _discover_string_fields(self) -> Tuple[str, ...]:
        if self.record_type is not None:
            return string_fields_of(self.record_type)

        sample = self.items if isinstance(self.items, Sequence) else self._peek()
        if not sample:
            return ()

        first = sample[0]
        if isinstance(first, Mapping):
            return string_keys_of(r for r in sample if isinstance(r, Mapping))
        return string_fields_of(type(first))

    def _peek(self) -> List[Any]:
        """First record of a one-shot iterator, put back in front of the rest."""
        iterator = iter(self.items)
        head = list(islice(iterator, 1))
        self.items = chain(head, iterator)
        return head

    def __repr__(self) -> str:
        return f"MemorySource({type(self.items).__name__})"
