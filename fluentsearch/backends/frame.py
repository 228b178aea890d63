# FluentSearch Backends - DataFrame Source
# ========================================
"""
Searches the rows of a pandas DataFrame.

Rows are produced one at a time as dicts keyed by column name, so field
selectors address columns (``"name"`` or ``lambda r: r["name"]``).
"""

import logging
from typing import Any, Dict, Iterator, Tuple

import pandas as pd

from ..errors import InvalidArgumentError
from .base import PythonRecordSource

logger = logging.getLogger(__name__)


class FrameSource(PythonRecordSource):
    """Record source over a DataFrame; every enumeration restarts at row 0."""

    def __init__(self, frame: pd.DataFrame):
        if not isinstance(frame, pd.DataFrame):
            raise InvalidArgumentError("source", "FrameSource requires a pandas DataFrame")
        self.frame = frame
        self._string_columns = None

    def _records(self) -> Iterator[Dict[str, Any]]:
        columns = list(self.frame.columns)
        for row in self.frame.itertuples(index=False, name=None):
            yield {column: _clean(value) for column, value in zip(columns, row)}

    def string_field_names(self) -> Tuple[Any, ...]:
        """Labels of text columns, as they appear in the frame."""
        if self._string_columns is None:
            self._string_columns = tuple(
                column for column in self.frame.columns
                if pd.api.types.infer_dtype(self.frame[column], skipna=True) == "string"
            )
            logger.debug(f"String columns of frame: {self._string_columns}")
        return self._string_columns

    def __repr__(self) -> str:
        return f"FrameSource({len(self.frame)} rows)"


def _clean(value):
    # pandas missing values (NaN, NA, NaT) read as None
    if value is None:
        return None
    try:
        if pd.isna(value):
            return None
    except (TypeError, ValueError):
        pass
    return value
