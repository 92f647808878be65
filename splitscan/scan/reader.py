"""
Split reading - open one split and walk its rows
"""

from typing import Any, Dict, Iterator, Optional

from splitscan.core.errors import NotFoundError, ReadError, ReaderOpenError
from splitscan.formats.base import InputFormat, RecordReader, SplitDescriptor


class ReaderHandle:
    """
    Forward-only cursor over the rows of one split

    next() returns None once the split is exhausted and keeps doing so.
    close() releases the record reader; calls after the first are no-ops.
    """

    def __init__(self, split: SplitDescriptor, record_reader: RecordReader):
        self.split = split
        self._reader = record_reader
        self._rows: Optional[Iterator[Dict[str, Any]]] = None
        self._exhausted = False
        self.closed = False
        self.rows_read = 0

    def next(self) -> Optional[Dict[str, Any]]:
        """
        Get the next row of the split

        Raises:
            ReadError: If the handle is closed or the row cannot be decoded
        """
        if self.closed:
            raise ReadError(f"Reader for {self.split} is closed")
        if self._exhausted:
            return None

        try:
            if self._rows is None:
                self._rows = iter(self._reader)
            row = next(self._rows)
        except StopIteration:
            self._exhausted = True
            return None
        except Exception as e:
            raise ReadError(f"Cannot read {self.split}: {e}") from e

        self.rows_read += 1
        return row

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True

        try:
            try:
                close_rows = getattr(self._rows, "close", None)
                if close_rows is not None:
                    close_rows()
            finally:
                self._reader.close()
        except Exception as e:
            raise ReadError(f"Cannot close {self.split}: {e}") from e

    def __iter__(self) -> Iterator[Dict[str, Any]]:
        while True:
            row = self.next()
            if row is None:
                return
            yield row

    def __enter__(self) -> "ReaderHandle":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"ReaderHandle({self.split}, {state})"


class SplitReader:
    """Opens splits of an input format, one record reader per split"""

    def __init__(self, input_format: InputFormat):
        self.input_format = input_format

    def open(self, split: SplitDescriptor) -> ReaderHandle:
        """
        Open a record reader scoped to exactly one split

        Raises:
            NotFoundError: If the split's file disappeared
            ReaderOpenError: If the split cannot be opened
        """
        try:
            record_reader = self.input_format.create_record_reader(split)
        except FileNotFoundError as e:
            raise NotFoundError(f"No input file: {split.path}", path=split.path) from e
        except Exception as e:
            raise ReaderOpenError(f"Cannot open {split}: {e}") from e

        return ReaderHandle(split, record_reader)
