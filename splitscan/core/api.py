"""
Main scan API - user-facing entry point for splitscan

Example:
    >>> from splitscan import scan
    >>> for row in scan("sales.parquet", fields=["id", "amount:decimal"]):
    ...     print(row)
"""

from typing import Any, Mapping, Optional, Sequence, Union

from splitscan.core.config import DEFAULT_SPLIT_SIZE, ClusterContext, ScanConfig, parse_field
from splitscan.core.types import FieldSpec
from splitscan.formats import get_format_service
from splitscan.operators.scan import Scan
from splitscan.scan.coordinator import ScanCoordinator

FieldDeclaration = Union[str, Mapping[str, Any], FieldSpec]


def scan(
    files: Union[str, Sequence[str]],
    fields: Optional[Sequence[FieldDeclaration]] = None,
    split_size: int = DEFAULT_SPLIT_SIZE,
    ignore_empty_folder: bool = False,
    context: Optional[ClusterContext] = None,
    format: str = "parquet",
) -> Scan:
    """
    Create a lazy scan over one or more columnar files

    Nothing is read until the returned Scan is iterated.

    Args:
        files: Resolved file or directory location(s); the first one is
            the representative file for schema discovery
        fields: Declared projection (``"name"``, ``"name:type"``,
            ``"name:type:output"``, mappings or FieldSpec); None reads
            every column
        split_size: Target byte size per split
        ignore_empty_folder: Yield zero rows instead of failing when the
            input folder holds no data files
        context: Cluster the format service is bound to
        format: Registered format service name

    Returns:
        Scan operator yielding rows as dictionaries

    Example:
        >>> rows = scan(["part-0.parquet", "part-1.parquet"], split_size=64 * 1024 * 1024)
        >>> rows.to_dataframe()
    """
    if isinstance(files, str):
        files = [files]

    config = ScanConfig(
        files=list(files),
        fields=[parse_field(f) for f in fields or []],
        split_size_bytes=split_size,
        ignore_empty_folder=ignore_empty_folder,
    )
    coordinator = ScanCoordinator(config, context=context, format_service=get_format_service(format))
    return Scan(coordinator)
