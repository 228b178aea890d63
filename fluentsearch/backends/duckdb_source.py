# FluentSearch Backends - DuckDB Source
# =====================================
"""
Searches a DuckDB table by pushing predicates and distance computations
down into SQL.

The composed predicate is translated once per enumeration and executed
as a single parameterized query. Rows are fetched in batches of
``fetch_batch_size`` as the consumer iterates, so stopping early leaves
the remaining rows unfetched.
"""

import logging
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence, Tuple

import duckdb

from ..errors import InvalidArgumentError
from ..expressions import Lambda
from ..settings import SearchSettings
from .base import RecordSource
from .sql_translator import SqlTranslator, quote_identifier, validate_table_name

logger = logging.getLogger(__name__)


# Column types treated as text in search-all mode
STRING_TYPES = ("VARCHAR", "TEXT", "STRING", "CHAR", "BPCHAR")

# Prefix for computed projection columns
COMPUTED_PREFIX = "__fluentsearch_"


class DuckDBSource(RecordSource):
    """
    Record source over a DuckDB table or view.

    Example:
        conn = duckdb.connect("clinical.duckdb", read_only=True)
        source = DuckDBSource(conn, "adverse_events")
        rows = search(source, "term").containing("head").to_list()

    Args:
        connection: An open DuckDB connection
        table: Table or view name, optionally schema-qualified
        row_factory: Builds a record from a ``{column: value}`` dict;
            rows are returned as dicts when omitted
    """

    def __init__(self,
                 connection: duckdb.DuckDBPyConnection,
                 table: str,
                 row_factory: Optional[Callable[[Dict[str, Any]], Any]] = None):
        if connection is None:
            raise InvalidArgumentError("connection", "a DuckDB connection is required")
        self.connection = connection
        self.table = table
        self._table_sql = validate_table_name(table)
        self.row_factory = row_factory
        self._string_columns: Optional[Tuple[str, ...]] = None

    def get_table_columns(self) -> List[Dict[str, str]]:
        """Column names and types of the table."""
        result = self.connection.execute(f"DESCRIBE {self._table_sql}").fetchall()
        return [{"name": row[0], "type": row[1]} for row in result]

    def string_field_names(self) -> Tuple[str, ...]:
        if self._string_columns is None:
            self._string_columns = tuple(
                col["name"] for col in self.get_table_columns()
                if col["type"].upper().split("(")[0] in STRING_TYPES
            )
            logger.debug(f"String columns of {self.table}: {self._string_columns}")
        return self._string_columns

    def build_query(self,
                    predicate: Optional[Lambda],
                    columns: Sequence[Lambda] = ()) -> Tuple[str, List[Any]]:
        """
        SQL and parameters selecting every column plus one computed column
        per entry of ``columns``, filtered by ``predicate``.
        """
        parameter = predicate.parameter if predicate is not None else (
            columns[0].parameter if columns else None
        )
        translator = SqlTranslator(parameter)

        select = ["*"]
        for i, column in enumerate(columns):
            select.append(f"{translator.translate(column)} AS {quote_identifier(COMPUTED_PREFIX + str(i))}")

        sql = f"SELECT {', '.join(select)} FROM {self._table_sql}"
        if predicate is not None:
            sql = f"{sql} WHERE {translator.translate(predicate)}"
        return sql, translator.params

    def filter(self, predicate: Optional[Lambda], settings: SearchSettings) -> Iterator[Any]:
        for record, _ in self._stream(predicate, (), settings):
            yield record

    def project(self,
                predicate: Optional[Lambda],
                columns: Sequence[Lambda],
                settings: SearchSettings) -> Iterator[Tuple[Any, tuple]]:
        return self._stream(predicate, columns, settings)

    def _stream(self,
                predicate: Optional[Lambda],
                columns: Sequence[Lambda],
                settings: SearchSettings) -> Iterator[Tuple[Any, tuple]]:
        sql, params = self.build_query(predicate, columns)
        if settings.log_sql:
            logger.info(f"Executing SQL: {sql} | params={params}")
        else:
            logger.debug(f"Executing SQL: {sql} | params={params}")

        cursor = self.connection.cursor()
        try:
            result = cursor.execute(sql, params)
            names = [desc[0] for desc in result.description]
            record_width = len(names) - len(columns)
            record_names = names[:record_width]

            while True:
                rows = result.fetchmany(settings.fetch_batch_size)
                if not rows:
                    break
                for row in rows:
                    record = dict(zip(record_names, row[:record_width]))
                    if self.row_factory is not None:
                        record = self.row_factory(record)
                    yield record, tuple(row[record_width:])
        finally:
            cursor.close()

    def __repr__(self) -> str:
        return f"DuckDBSource({self.table})"
