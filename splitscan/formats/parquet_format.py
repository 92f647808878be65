"""
Parquet format service backed by pyarrow

Splits follow row group boundaries: consecutive row groups of a file are
packed into one split until the next one would push it past the split
size. A row group is never divided, so a row group larger than the split
size forms a split of its own.

Example:
    Split size 100 MB, row groups of 40, 40, 40 and 150 MB
    -> [rg0, rg1] (80 MB), [rg2] (40 MB), [rg3] (150 MB)
"""

from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

import pyarrow as pa
import pyarrow.parquet as pq

from splitscan.core.config import DEFAULT_SPLIT_SIZE, ClusterContext
from splitscan.core.types import DataType, FieldSpec
from splitscan.formats.base import (
    FormatService,
    InputFormat,
    RecordReader,
    SplitDescriptor,
)

# Rows decoded per batch inside one split
DEFAULT_BATCH_SIZE = 1024


def arrow_type_to_dtype(arrow_type: pa.DataType) -> DataType:
    """
    Convert a PyArrow type to a splitscan type tag

    Args:
        arrow_type: PyArrow data type

    Returns:
        Matching DataType (STRING for types without a closer match)
    """
    types = pa.types
    if types.is_boolean(arrow_type):
        return DataType.BOOLEAN
    if types.is_integer(arrow_type):
        return DataType.INTEGER
    if types.is_floating(arrow_type):
        return DataType.FLOAT
    if types.is_decimal(arrow_type):
        return DataType.DECIMAL
    if types.is_string(arrow_type) or types.is_large_string(arrow_type):
        return DataType.STRING
    if (
        types.is_binary(arrow_type)
        or types.is_large_binary(arrow_type)
        or types.is_fixed_size_binary(arrow_type)
    ):
        return DataType.BINARY
    if types.is_timestamp(arrow_type):
        return DataType.DATETIME
    if types.is_date(arrow_type):
        return DataType.DATE
    if types.is_time(arrow_type):
        return DataType.TIME
    if types.is_null(arrow_type):
        return DataType.NULL
    return DataType.STRING


def arrow_field_to_spec(arrow_field: pa.Field) -> FieldSpec:
    """Describe one Arrow field as a physical FieldSpec"""
    precision = 0
    scale = 0
    if pa.types.is_decimal(arrow_field.type):
        precision = arrow_field.type.precision
        scale = arrow_field.type.scale

    return FieldSpec.physical(
        arrow_field.name,
        arrow_type_to_dtype(arrow_field.type),
        precision=precision,
        scale=scale,
    )


class ParquetRecordReader(RecordReader):
    """
    Reads the row groups of one split

    The file is opened when the reader is constructed and stays open until
    close(). Rows are projected onto the input format's schema; a declared
    column missing from the file comes out as None.
    """

    def __init__(
        self,
        input_format: "ParquetInputFormat",
        split: SplitDescriptor,
        batch_size: int = DEFAULT_BATCH_SIZE,
    ):
        self.split = split
        self.fields = input_format.schema
        self.batch_size = batch_size

        self._source = input_format.open_file(split.path)
        try:
            self._file = pq.ParquetFile(self._source)
        except Exception:
            self._source.close()
            raise

        self._columns = self._columns_to_read()

    def _columns_to_read(self) -> Optional[List[str]]:
        if self.fields is None:
            return None

        available = set(self._file.schema_arrow.names)
        columns: List[str] = []
        for f in self.fields:
            if f.name in available and f.name not in columns:
                columns.append(f.name)
        return columns

    def _project(self, record: Dict[str, Any]) -> Dict[str, Any]:
        if self.fields is None:
            return record
        return {f.column_name: record.get(f.name) for f in self.fields}

    def __iter__(self) -> Iterator[Dict[str, Any]]:
        row_groups = list(self.split.locator)
        if not row_groups:
            return

        # None of the declared columns are in this file: keep the row count
        if self._columns == []:
            metadata = self._file.metadata
            for rg_idx in row_groups:
                for _ in range(metadata.row_group(rg_idx).num_rows):
                    yield self._project({})
            return

        batches = self._file.iter_batches(
            batch_size=self.batch_size,
            row_groups=row_groups,
            columns=self._columns,
            use_threads=False,
        )
        for batch in batches:
            for record in batch.to_pylist():
                yield self._project(record)

    def close(self) -> None:
        self._source.close()


class ParquetInputFormat(InputFormat):
    """
    Parquet input format for local paths and s3:// URIs

    A location can be a single file or a directory; a directory stands for
    the ``*.parquet`` files directly inside it, in name order.
    """

    def __init__(self, context: Optional[ClusterContext] = None):
        super().__init__(context)
        self._fs = None

    # Storage access

    def _is_remote(self, path: str) -> bool:
        return path.startswith("s3://")

    def _filesystem(self):
        if self._fs is None:
            try:
                import s3fs
            except ImportError:
                raise ImportError(
                    "s3fs is required for S3 support. Install `splitscan[s3]`"
                ) from None
            options = {"anon": False}
            options.update(self.context.storage_options)
            self._fs = s3fs.S3FileSystem(**options)
        return self._fs

    def _strip_scheme(self, path: str) -> str:
        # s3fs expects paths without protocol
        return path[len("s3://"):]

    def exists(self, path: str) -> bool:
        if self._is_remote(path):
            return self._filesystem().exists(self._strip_scheme(path))
        return Path(path).exists()

    def expand(self, path: str) -> List[str]:
        """
        List the data files a location stands for

        Raises:
            FileNotFoundError: If the location does not exist
        """
        if not self.exists(path):
            raise FileNotFoundError(f"Parquet file not found: {path}")

        if self._is_remote(path):
            fs = self._filesystem()
            key = self._strip_scheme(path)
            if not fs.isdir(key):
                return [path]
            return [f"s3://{p}" for p in sorted(fs.glob(f"{key.rstrip('/')}/*.parquet"))]

        local = Path(path)
        if not local.is_dir():
            return [path]
        return [str(p) for p in sorted(local.glob("*.parquet")) if p.is_file()]

    def open_file(self, path: str):
        """Open a data file for binary reading"""
        if self._is_remote(path):
            return self._filesystem().open(self._strip_scheme(path), "rb")
        return open(path, "rb")

    # Format service operations

    def read_schema(self, path: str) -> List[FieldSpec]:
        """
        Read the physical schema of a file

        For a directory the first data file is used; a directory without
        data files has an empty schema.
        """
        files = self.expand(path)
        if not files:
            return []

        with self.open_file(files[0]) as source:
            arrow_schema = pq.ParquetFile(source).schema_arrow

        return [arrow_field_to_spec(arrow_schema.field(i)) for i in range(len(arrow_schema))]

    def get_splits(self) -> List[SplitDescriptor]:
        """
        Compute splits for all input files

        Splits are ordered by input file, then by row group.
        """
        if not self.input_files:
            raise ValueError("No input files set")

        split_size = self.split_size or DEFAULT_SPLIT_SIZE
        splits: List[SplitDescriptor] = []

        for location in self.input_files:
            for path in self.expand(location):
                with self.open_file(path) as source:
                    metadata = pq.ParquetFile(source).metadata
                    row_group_sizes = [
                        (rg_idx, metadata.row_group(rg_idx).total_byte_size)
                        for rg_idx in range(metadata.num_row_groups)
                    ]
                splits.extend(self._split_file(path, row_group_sizes, split_size))

        return splits

    def _split_file(
        self, path: str, row_group_sizes: List[Tuple[int, int]], split_size: int
    ) -> Iterator[SplitDescriptor]:
        group: List[int] = []
        group_size = 0

        for rg_idx, size in row_group_sizes:
            if group and group_size + size > split_size:
                yield SplitDescriptor(path, tuple(group), group_size)
                group = []
                group_size = 0
            group.append(rg_idx)
            group_size += size

        if group:
            yield SplitDescriptor(path, tuple(group), group_size)

    def create_record_reader(self, split: SplitDescriptor) -> ParquetRecordReader:
        return ParquetRecordReader(self, split)


class ParquetFormatService(FormatService):
    """Format service for Apache Parquet files"""

    name = "parquet"

    def create_input_format(self, context: Optional[ClusterContext] = None) -> ParquetInputFormat:
        return ParquetInputFormat(context)
