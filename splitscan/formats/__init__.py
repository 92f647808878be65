"""
Format services available to the scan engine

Available services:
- parquet: Apache Parquet via pyarrow (local files and s3://)
"""

from splitscan.formats.base import (
    FormatService,
    InputFormat,
    RecordReader,
    SplitDescriptor,
)
from splitscan.formats.parquet_format import ParquetFormatService

__all__ = [
    "FormatService",
    "InputFormat",
    "RecordReader",
    "SplitDescriptor",
    "ParquetFormatService",
    "get_format_service",
    "register_format_service",
]

_SERVICES = {
    "parquet": ParquetFormatService,
}


def register_format_service(name: str, service_class: type) -> None:
    """Make a FormatService subclass available under a name"""
    _SERVICES[name] = service_class


def get_format_service(name: str = "parquet") -> FormatService:
    """
    Get format service by name

    Args:
        name: Name of the format (parquet)

    Returns:
        FormatService instance

    Raises:
        ValueError: If no service is registered under the name
    """
    if name not in _SERVICES:
        available = ", ".join(_SERVICES.keys())
        raise ValueError(f"Unknown format: {name}. Available formats: {available}")

    return _SERVICES[name]()
