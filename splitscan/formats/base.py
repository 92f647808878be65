"""
Format service interface

A format service knows how to decode one columnar file format. The scan
engine never touches the physical encoding itself; it goes through an
InputFormat handle created for a specific cluster context:

    service.create_input_format(context)  -> InputFormat
    input_format.read_schema(path)        -> physical fields
    input_format.set_schema(...) / set_input_file(...) / set_split_size(...)
    input_format.get_splits()             -> ordered split descriptors
    input_format.create_record_reader(split) -> RecordReader
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Sequence

from splitscan.core.config import ClusterContext
from splitscan.core.types import FieldSpec


@dataclass(frozen=True)
class SplitDescriptor:
    """
    Opaque locator for one independently readable unit of a file

    Attributes:
        path: File the split belongs to
        locator: Format-specific position inside the file
        size_hint: Approximate byte size of the split
    """

    path: str
    locator: tuple = ()
    size_hint: int = 0

    def __repr__(self) -> str:
        return f"Split({self.path}, {self.locator}, ~{self.size_hint}B)"


class RecordReader:
    """
    Row cursor over exactly one split

    Iterating yields rows as dictionaries. close() releases the
    underlying file handle.
    """

    def __iter__(self) -> Iterator[Dict[str, Any]]:
        raise NotImplementedError(f"{self.__class__.__name__} must implement __iter__()")

    def close(self) -> None:
        pass


class InputFormat:
    """
    Handle on a format service, bound to one cluster context

    Subclasses implement schema discovery, split computation and record
    reading for their format.
    """

    def __init__(self, context: Optional[ClusterContext] = None):
        self.context = context or ClusterContext()
        self.schema: Optional[List[FieldSpec]] = None
        self.input_files: List[str] = []
        self.split_size: Optional[int] = None

    def read_schema(self, path: str) -> List[FieldSpec]:
        """
        Read the physical schema of a file

        Raises:
            FileNotFoundError: If the path does not exist
        """
        raise NotImplementedError(f"{self.__class__.__name__} must implement read_schema()")

    def set_schema(self, schema: Optional[Sequence[FieldSpec]]) -> None:
        """
        Set the fields record readers should produce

        An empty or missing schema means every column of each file.
        """
        self.schema = list(schema) if schema else None

    def set_input_file(self, path: str) -> None:
        self.input_files = [path]

    def set_input_files(self, paths: Sequence[str]) -> None:
        self.input_files = list(paths)

    def set_split_size(self, size: int) -> None:
        """Set the target byte size per split"""
        self.split_size = size

    def get_splits(self) -> List[SplitDescriptor]:
        raise NotImplementedError(f"{self.__class__.__name__} must implement get_splits()")

    def create_record_reader(self, split: SplitDescriptor) -> RecordReader:
        raise NotImplementedError(
            f"{self.__class__.__name__} must implement create_record_reader()"
        )


class FormatService:
    """Factory for InputFormat handles of one file format"""

    name = "base"

    def create_input_format(self, context: Optional[ClusterContext] = None) -> InputFormat:
        raise NotImplementedError(
            f"{self.__class__.__name__} must implement create_input_format()"
        )
