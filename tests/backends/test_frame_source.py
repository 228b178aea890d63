# Tests for FrameSource
# =====================

import pytest
import sys
from pathlib import Path

project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

import pandas as pd

from fluentsearch import search, InvalidArgumentError
from fluentsearch.backends import FrameSource, MemorySource, DuckDBSource, as_source


class TestFrameSource:
    """Searching the rows of a DataFrame."""

    def test_string_columns(self, record_frame):
        source = FrameSource(record_frame)
        assert source.string_field_names() == ("id", "string_one", "string_two", "string_three")

    def test_rows_are_dicts(self, record_frame):
        first = search(record_frame).first()
        assert first["string_one"] == "abcd"
        assert first["integer_one"] == 1

    def test_starts_with(self, record_frame):
        result = search(record_frame, "string_two").starts_with("c").to_list()
        assert [r["integer_one"] for r in result] == [4, 5, 6]

    def test_item_selector(self, record_frame):
        result = search(record_frame, lambda r: r["string_one"]).containing("AB").to_list()
        assert [r["integer_one"] for r in result] == [1, 7]

    def test_search_all(self, record_frame):
        assert search(record_frame).containing("cd").count() == 3

    def test_equal_to_integer_column(self, record_frame):
        result = search(record_frame, "integer_one").equal_to(2).to_list()
        assert [r["string_one"] for r in result] == ["efgh"]

    def test_integer_column_labels(self):
        """Search-all keeps labels as they are, so rows are read by label."""
        frame = pd.DataFrame([["alpha", 1], ["beta", 2], [None, 3]])
        assert FrameSource(frame).string_field_names() == (0,)
        result = search(frame).starts_with("AL").to_list()
        assert [r[1] for r in result] == [1]

    def test_missing_values_read_as_none(self):
        frame = pd.DataFrame({"name": ["alpha", float("nan"), None, "beta"]})
        rows = search(frame).to_list()
        assert [r["name"] for r in rows] == ["alpha", None, None, "beta"]
        assert search(frame, "name").containing("a").count() == 2

    def test_distances(self, record_frame):
        result = search(record_frame).levenshtein_distance_of("string_one").compared_to("abcd").to_list()
        assert [x.distance for x in result] == [0, 4, 4, 4, 4, 4, 4]

    def test_restartable(self, record_frame):
        chain = search(record_frame, "string_one").containing("a")
        assert chain.count() == chain.count() == 2

    def test_requires_frame(self):
        with pytest.raises(InvalidArgumentError):
            FrameSource([{"a": "b"}])


class TestAsSource:
    """Choosing a record source for search()."""

    def test_frame(self, record_frame):
        assert isinstance(as_source(record_frame), FrameSource)

    def test_list(self, records):
        assert isinstance(as_source(records), MemorySource)

    def test_source_passes_through(self, duckdb_conn):
        source = DuckDBSource(duckdb_conn, "sample_records")
        assert as_source(source) is source

    def test_none(self):
        with pytest.raises(InvalidArgumentError):
            as_source(None)
