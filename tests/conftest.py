# Pytest configuration for FluentSearch tests
"""
Shared fixtures: a small record set available as a list of dataclasses,
a pandas DataFrame and a DuckDB table.

    id  string_one  string_two  string_three  integer_one
    1   abcd        efgh        wxyz          1
    2   efgh        abcd        mnop          2
    3   ijkl        xcdx        qrst          3
    4   mnop        case        uvwx          4
    5   qrst        CASE        ijkl          5
    6   None        Cobalt      None          6
    7   ABJK        None        efgh          7
"""

import sys
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import duckdb
import pandas as pd
import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from fluentsearch.settings import reset_settings


RECORD_IDS = [
    uuid.UUID("2f75be28-cec8-46d8-852e-e6dae5c8f0a3"),
    uuid.UUID("9a1c7e44-0b7f-4b8e-9d2e-3f6a1b2c4d5e"),
    uuid.UUID("c3d4e5f6-a7b8-4c9d-8e0f-1a2b3c4d5e6f"),
    uuid.UUID("0f1e2d3c-4b5a-4968-8776-a5b4c3d2e1f0"),
    uuid.UUID("11111111-2222-4333-8444-555555555555"),
    uuid.UUID("66666666-7777-4888-9999-aaaaaaaaaaaa"),
    uuid.UUID("bbbbbbbb-cccc-4ddd-8eee-ffffffffffff"),
]

ROWS = [
    ("abcd", "efgh", "wxyz"),
    ("efgh", "abcd", "mnop"),
    ("ijkl", "xcdx", "qrst"),
    ("mnop", "case", "uvwx"),
    ("qrst", "CASE", "ijkl"),
    (None, "Cobalt", None),
    ("ABJK", None, "efgh"),
]


@dataclass
class SampleRecord:
    """Record type used throughout the tests."""
    id: uuid.UUID
    string_one: Optional[str]
    string_two: Optional[str]
    string_three: Optional[str]
    integer_one: int


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Every test starts from default settings."""
    for name in ("FLUENTSEARCH_FETCH_BATCH_SIZE", "FLUENTSEARCH_LEVENSHTEIN_BACKEND", "FLUENTSEARCH_LOG_SQL"):
        monkeypatch.delenv(name, raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def record_ids():
    """Identifiers of the sample records, in record order."""
    return list(RECORD_IDS)


@pytest.fixture
def records():
    """The sample records as dataclass instances."""
    return [
        SampleRecord(
            id=record_id,
            string_one=one,
            string_two=two,
            string_three=three,
            integer_one=i + 1,
        )
        for i, (record_id, (one, two, three)) in enumerate(zip(RECORD_IDS, ROWS))
    ]


@pytest.fixture
def record_frame():
    """The sample records as a DataFrame (ids as text)."""
    return pd.DataFrame(
        [
            {
                "id": str(record_id),
                "string_one": one,
                "string_two": two,
                "string_three": three,
                "integer_one": i + 1,
            }
            for i, (record_id, (one, two, three)) in enumerate(zip(RECORD_IDS, ROWS))
        ]
    )


@pytest.fixture
def duckdb_conn():
    """In-memory DuckDB database holding the sample records in sample_records."""
    conn = duckdb.connect(":memory:")
    conn.execute("""
        CREATE TABLE sample_records (
            id VARCHAR,
            string_one VARCHAR,
            string_two VARCHAR,
            string_three VARCHAR,
            integer_one INTEGER
        )
    """)
    conn.executemany(
        "INSERT INTO sample_records VALUES (?, ?, ?, ?, ?)",
        [
            [str(record_id), one, two, three, i + 1]
            for i, (record_id, (one, two, three)) in enumerate(zip(RECORD_IDS, ROWS))
        ],
    )
    yield conn
    conn.close()
