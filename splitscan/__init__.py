"""
splitscan - split-based columnar file scanning

This package reads columnar data files (Parquet) lazily, split by split:
it discovers the physical schema, reconciles it with a declared
projection, plans bounded-size splits, and yields rows with every split
reader opened and closed exactly once.
"""

__version__ = "0.1.0"

# Main API
from splitscan.core.api import scan
from splitscan.core.config import ClusterContext, ScanConfig
from splitscan.core.errors import (
    ConfigurationError,
    NotFoundError,
    ReadError,
    ReaderOpenError,
    ScanError,
    SchemaReadError,
    SplitPlanningError,
)
from splitscan.core.types import DataType, FieldSpec
from splitscan.scan.coordinator import PullKind, PullResult, ScanCoordinator, ScanPhase
from splitscan.scan.schema import retrieve_schema

__all__ = [
    "__version__",
    "scan",
    "retrieve_schema",
    "ScanConfig",
    "ClusterContext",
    "ScanCoordinator",
    "ScanPhase",
    "PullKind",
    "PullResult",
    "DataType",
    "FieldSpec",
    "ScanError",
    "ConfigurationError",
    "NotFoundError",
    "SchemaReadError",
    "SplitPlanningError",
    "ReaderOpenError",
    "ReadError",
]
