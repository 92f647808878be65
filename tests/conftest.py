"""
Pytest configuration and shared fixtures
"""

from decimal import Decimal

import pyarrow as pa
import pyarrow.parquet as pq
import pytest

from splitscan.formats.base import FormatService, InputFormat, RecordReader, SplitDescriptor


def write_parquet(path, data, row_group_size=None, schema=None):
    """Write a dict of columns to a Parquet file and return its path"""
    table = pa.table(data, schema=schema)
    pq.write_table(table, path, row_group_size=row_group_size)
    return path


@pytest.fixture
def people_parquet(tmp_path):
    """100 rows of id/name in 5 row groups of 20"""
    data = {
        "id": list(range(100)),
        "name": [f"person{i}" for i in range(100)],
    }
    return write_parquet(tmp_path / "people.parquet", data, row_group_size=20)


@pytest.fixture
def small_parquet(tmp_path):
    """Three rows in a single row group"""
    data = {
        "id": [1, 2, 3],
        "name": ["Alice", "Bob", "Charlie"],
    }
    return write_parquet(tmp_path / "small.parquet", data)


@pytest.fixture
def decimal_parquet(tmp_path):
    """Columns with precision and scale"""
    schema = pa.schema(
        [
            ("id", pa.int64()),
            ("amount", pa.decimal128(10, 2)),
            ("note", pa.string()),
        ]
    )
    data = {
        "id": [1, 2],
        "amount": [Decimal("12.50"), Decimal("7.25")],
        "note": ["first", None],
    }
    return write_parquet(tmp_path / "amounts.parquet", data, schema=schema)


@pytest.fixture
def parquet_dir(tmp_path):
    """Directory with two data files and a non-data marker file"""
    folder = tmp_path / "dataset"
    folder.mkdir()
    write_parquet(folder / "part-0.parquet", {"id": [1, 2], "name": ["a", "b"]})
    write_parquet(folder / "part-1.parquet", {"id": [3], "name": ["c"]})
    (folder / "_SUCCESS").write_text("")
    return folder


@pytest.fixture
def empty_dir(tmp_path):
    """Existing directory without any data files"""
    folder = tmp_path / "empty"
    folder.mkdir()
    return folder


@pytest.fixture
def make_parquet(tmp_path):
    """Factory writing Parquet files into tmp_path"""

    def _make(name, data, row_group_size=None, schema=None):
        return write_parquet(tmp_path / name, data, row_group_size=row_group_size, schema=schema)

    return _make


class FakeRecordReader(RecordReader):
    """Record reader over in-memory rows that logs open/close"""

    def __init__(self, service, split):
        self.service = service
        self.index = split.locator[0]
        self.rows = service.split_rows[self.index]
        service.events.append(("open", self.index))

    def __iter__(self):
        for i, row in enumerate(self.rows):
            if self.service.fail_read_at == (self.index, i):
                raise RuntimeError("corrupt page")
            yield row

    def close(self):
        self.service.events.append(("close", self.index))
        if self.index == self.service.fail_close_at:
            raise OSError("cannot release split")


class FakeInputFormat(InputFormat):
    """Input format serving a fixed schema and fixed splits"""

    def __init__(self, service, context=None):
        super().__init__(context)
        self.service = service

    def read_schema(self, path):
        self.service.schema_reads.append(path)
        if path in self.service.missing:
            raise FileNotFoundError(f"Parquet file not found: {path}")
        if self.service.schema_error is not None:
            raise self.service.schema_error
        return list(self.service.physical)

    def get_splits(self):
        self.service.get_splits_calls += 1
        if self.service.split_error is not None:
            raise self.service.split_error
        return [
            SplitDescriptor(self.input_files[0], (i,), 10)
            for i in range(len(self.service.split_rows))
        ]

    def create_record_reader(self, split):
        if split.locator[0] == self.service.fail_open_at:
            raise OSError("cannot open split")
        return FakeRecordReader(self.service, split)


class FakeFormatService(FormatService):
    """
    Format service double

    split_rows holds the rows of each split; events records reader
    opens and closes in order.
    """

    name = "fake"

    def __init__(self, physical=(), split_rows=(), missing=(), schema_error=None,
                 split_error=None, fail_open_at=None, fail_read_at=None, fail_close_at=None):
        self.physical = list(physical)
        self.split_rows = [list(rows) for rows in split_rows]
        self.missing = set(missing)
        self.schema_error = schema_error
        self.split_error = split_error
        self.fail_open_at = fail_open_at
        self.fail_read_at = fail_read_at
        self.fail_close_at = fail_close_at

        self.events = []
        self.schema_reads = []
        self.get_splits_calls = 0
        self.formats = []

    def create_input_format(self, context=None):
        input_format = FakeInputFormat(self, context)
        self.formats.append(input_format)
        return input_format

    @property
    def opened(self):
        return [i for kind, i in self.events if kind == "open"]

    @property
    def closed(self):
        return [i for kind, i in self.events if kind == "close"]


@pytest.fixture
def fake_service():
    """Factory for FakeFormatService"""
    return FakeFormatService
