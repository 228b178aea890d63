# FluentSearch Backends - Base
# ============================
"""
Record source interface.

A record source executes what the chain composes: a single-parameter
boolean predicate for filtering, and a list of per-record computations
for projections such as distance vectors. Sources decide how to run
them (Python evaluation or SQL push-down); the chain never touches the
underlying storage directly.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Iterator, Optional, Sequence, Tuple

from ..expressions import Compiler, Lambda, compile_predicate, default_functions
from ..levenshtein.processor import get_distance_function
from ..settings import SearchSettings

logger = logging.getLogger(__name__)


class RecordSource(ABC):
    """A collection of records that chains can filter and project."""

    @abstractmethod
    def string_field_names(self) -> Tuple[str, ...]:
        """Names of the string-valued fields searched in search-all mode."""

    @abstractmethod
    def filter(self, predicate: Optional[Lambda], settings: SearchSettings) -> Iterator[Any]:
        """Lazily yield records matching ``predicate`` (all records if None)."""

    @abstractmethod
    def project(self,
                predicate: Optional[Lambda],
                columns: Sequence[Lambda],
                settings: SearchSettings) -> Iterator[Tuple[Any, tuple]]:
        """
        Lazily yield ``(record, values)`` for each matching record.

        ``values`` holds the result of each column Lambda, in order. All
        columns and the predicate share one Parameter.
        """


class PythonRecordSource(RecordSource):
    """
    Base for sources evaluated in-process.

    Subclasses provide _records(); filtering and projection compile the
    expression trees once per call and stream records through them.
    """

    @abstractmethod
    def _records(self) -> Iterator[Any]:
        """Fresh iterator over the underlying records."""

    def filter(self, predicate: Optional[Lambda], settings: SearchSettings) -> Iterator[Any]:
        records = self._records()
        if predicate is None:
            return records
        test = compile_predicate(predicate, python_functions(settings))
        return (record for record in records if test(record))

    def project(self,
                predicate: Optional[Lambda],
                columns: Sequence[Lambda],
                settings: SearchSettings) -> Iterator[Tuple[Any, tuple]]:
        records = self.filter(predicate, settings)
        if not columns:
            return ((record, ()) for record in records)
        compiler = Compiler(columns[0].parameter, python_functions(settings))
        evaluate = compiler.compile_many(columns)
        return ((record, evaluate(record)) for record in records)


def python_functions(settings: SearchSettings) -> dict:
    """Function table for in-process evaluation under ``settings``."""
    return default_functions(get_distance_function(settings))


def callable_filter(records: Iterator[Any], conditions: Sequence[Callable[[Any], Any]]) -> Iterator[Any]:
    """Apply opaque Python conditions after a source has filtered."""
    for record in records:
        if all(condition(record) for condition in conditions):
            yield record
