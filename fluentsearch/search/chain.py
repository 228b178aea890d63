# FluentSearch Search - Fluent Chain
# ==================================
"""
The fluent search chain.

    search(people, "first_name", "last_name").containing("ann", "bob").starts_with("a")

search() binds the selected fields to one Parameter. Each operation
returns a NEW chain with its condition AND-ed onto the accumulated
predicate; the chain it was called on is left untouched, so one chain can
be the base of several diverging queries.

Nothing runs until the chain is enumerated. Each enumeration hands the
whole predicate to the record source in one piece.
"""

import logging
from typing import Any, Callable, Iterator, Optional, Sequence, Tuple

from ..backends import RecordSource, as_source, callable_filter
from ..backends.base import python_functions
from ..errors import InvalidArgumentError
from ..expressions import (
    FieldAccessor,
    Lambda,
    Node,
    Parameter,
    and_join,
    compile_predicate,
    describe,
    unify_all,
)
from ..levenshtein.distance import DistanceBuilder
from ..sequence import LazySequence
from ..settings import SearchSettings, resolve_settings
from .composer import PredicateComposer, SearchOperation, normalize_terms, normalize_values

logger = logging.getLogger(__name__)


class SearchChain(LazySequence):
    """
    An in-progress, not yet materialized search.

    Attributes:
        source: The RecordSource the chain reads from
        parameter: The Parameter every field and condition is bound to
        fields: Active field accessors for the next operation, or None
            for every string field of the source (discovered by the first
            operation that needs them)
        predicate: Accumulated condition, or None when nothing filters yet
        post_filters: Python callables applied after the source has filtered
        settings: Settings used for evaluation
    """

    def __init__(self,
                 source: RecordSource,
                 parameter: Parameter,
                 fields: Optional[Tuple[FieldAccessor, ...]],
                 condition: Optional[Node] = None,
                 post_filters: Tuple[Callable[[Any], Any], ...] = (),
                 settings: Optional[SearchSettings] = None):
        self.source = source
        self.parameter = parameter
        self.fields = fields
        self._condition = condition
        self.post_filters = post_filters
        self.settings = resolve_settings(settings)

    @property
    def predicate(self) -> Optional[Lambda]:
        """The accumulated predicate as a Lambda, or None."""
        if self._condition is None:
            return None
        return Lambda(self.parameter, self._condition)

    def _derive(self, **changes) -> "SearchChain":
        state = {
            "source": self.source,
            "parameter": self.parameter,
            "fields": self.fields,
            "condition": self._condition,
            "post_filters": self.post_filters,
            "settings": self.settings,
        }
        state.update(changes)
        return SearchChain(**state)

    # ------------------------------------------------------------------
    # Chain operations
    # ------------------------------------------------------------------

    def search(self, *fields) -> "SearchChain":
        """Select different fields for the following operations, keeping the predicate."""
        return self._derive(fields=_resolve_fields(fields, self.parameter))

    def containing(self, *terms) -> "SearchChain":
        """Keep records where any field contains any term, ignoring case."""
        return self._narrow(SearchOperation.CONTAINS, normalize_terms(terms))

    def starts_with(self, *terms) -> "SearchChain":
        """Keep records where any field starts with any term, ignoring case."""
        return self._narrow(SearchOperation.STARTS_WITH, normalize_terms(terms))

    def is_equal(self, *terms) -> "SearchChain":
        """Keep records where any field equals any term, ignoring case."""
        return self._narrow(SearchOperation.IS_EQUAL, normalize_terms(terms))

    def equal_to(self, *values) -> "SearchChain":
        """Keep records where any field equals any value exactly (any type)."""
        return self._narrow(SearchOperation.EQUAL_TO, normalize_values(values))

    def where(self, condition: Callable[[Any], Any]) -> "SearchChain":
        """
        Add a Python condition evaluated on each record after the source filter.

        Unlike the search operations it is never translated for SQL sources.
        """
        if condition is None or not callable(condition):
            raise InvalidArgumentError("condition", "a callable condition is required")
        return self._derive(post_filters=self.post_filters + (condition,))

    def levenshtein_distance_of(self, *fields) -> DistanceBuilder:
        """Start a distance stage over ``fields`` for the records of this chain."""
        if any(f is None for f in fields):
            raise InvalidArgumentError("fields", "field selectors must not be None")
        accessors = unify_all((FieldAccessor.of(f) for f in fields), self.parameter)
        return DistanceBuilder(self, accessors)

    def _narrow(self, operation: SearchOperation, terms: Sequence[Any]) -> "SearchChain":
        if not terms:
            logger.debug(f"Skipping {operation.value}: no usable terms")
            return self
        fields = self._active_fields()
        if not fields:
            logger.warning(f"Skipping {operation.value}: no string fields found in {self.source!r}")
            return self

        condition = PredicateComposer(self.parameter).compose(operation, fields, terms)
        return self._derive(fields=fields, condition=and_join(self._condition, condition))

    def _active_fields(self) -> Tuple[FieldAccessor, ...]:
        if self.fields is not None:
            return self.fields
        names = self.source.string_field_names()
        return tuple(unify_all((FieldAccessor.for_field(name) for name in names), self.parameter))

    # ------------------------------------------------------------------
    # Enumeration
    # ------------------------------------------------------------------

    def __iter__(self) -> Iterator[Any]:
        records = self.source.filter(self.predicate, self.settings)
        if self.post_filters:
            return callable_filter(records, self.post_filters)
        return records

    def compile(self) -> Callable[[Any], bool]:
        """
        The accumulated search as one Python function of a record.

        Post-filters are included. With no conditions every record matches.
        """
        predicate = self.predicate
        test = (
            compile_predicate(predicate, python_functions(self.settings))
            if predicate is not None else None
        )
        post_filters = self.post_filters

        def matches(record) -> bool:
            if test is not None and not test(record):
                return False
            return all(condition(record) for condition in post_filters)

        return matches

    def __repr__(self) -> str:
        fields = "<all strings>" if self.fields is None else ", ".join(f.label for f in self.fields)
        condition = describe(self._condition) if self._condition is not None else "<all>"
        return f"SearchChain({self.source!r}, fields=[{fields}], where={condition})"


def _resolve_fields(fields: Sequence[Any], parameter: Parameter) -> Optional[Tuple[FieldAccessor, ...]]:
    # no selectors: every string field, resolved when an operation needs them
    if not fields:
        return None
    if any(f is None for f in fields):
        raise InvalidArgumentError("fields", "field selectors must not be None")
    return tuple(unify_all((FieldAccessor.of(f) for f in fields), parameter))


def search(source: Any,
           *fields,
           record_type: Optional[type] = None,
           settings: Optional[SearchSettings] = None) -> SearchChain:
    """
    Start a search chain.

    Args:
        source: A list or other iterable of records, a pandas DataFrame, or
            a RecordSource such as DuckDBSource
        *fields: Field selectors (dotted names, callables or FieldAccessors);
            when none are given every string field of the record type is searched
        record_type: Record class for search-all field discovery; inferred
            from the records when omitted
        settings: Overrides the global settings for this chain

    Returns:
        A SearchChain that, un-narrowed, yields every record of ``source``

    Raises:
        InvalidArgumentError: if ``source`` or any selector is None or invalid
    """
    record_source = as_source(source, record_type=record_type)
    parameter = Parameter()
    chain_fields = _resolve_fields(fields, parameter)
    logger.debug(
        f"Started search over {record_source!r} with "
        f"{'all string' if chain_fields is None else len(chain_fields)} fields"
    )
    return SearchChain(record_source, parameter, chain_fields, settings=settings)
