# FluentSearch Backends Module
# ============================
"""
Record sources that execute composed predicates.

Components:
- MemorySource: Python iterables (lists, generators) evaluated in-process
- FrameSource: pandas DataFrames, one dict per row
- DuckDBSource: DuckDB tables; predicates and distances run as SQL
- SqlTranslator: Expression tree to DuckDB SQL
"""

from typing import Any, Optional

import pandas as pd

from ..errors import InvalidArgumentError
from .base import RecordSource, PythonRecordSource, callable_filter
from .memory import MemorySource
from .frame import FrameSource
from .duckdb_source import DuckDBSource
from .sql_translator import SqlTranslator, translate_predicate, quote_identifier


def as_source(source: Any, record_type: Optional[type] = None) -> RecordSource:
    """
    Adapt ``source`` to a RecordSource.

    RecordSources pass through, DataFrames become FrameSources and any
    other iterable becomes a MemorySource.
    """
    if source is None:
        raise InvalidArgumentError("source", "a record source is required")
    if isinstance(source, RecordSource):
        return source
    if isinstance(source, pd.DataFrame):
        return FrameSource(source)
    return MemorySource(source, record_type=record_type)


__all__ = [
    "RecordSource",
    "PythonRecordSource",
    "MemorySource",
    "FrameSource",
    "DuckDBSource",
    "SqlTranslator",
    "translate_predicate",
    "quote_identifier",
    "callable_filter",
    "as_source",
]
