"""
Scan configuration

ScanConfig is the configuration surface the scan engine consumes;
ClusterContext names the storage runtime the format service is bound to.
Both can be built from plain mappings, e.g. a YAML config file.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from splitscan.core.errors import ConfigurationError
from splitscan.core.types import DataType, FieldSpec

# Target byte size of one split
DEFAULT_SPLIT_SIZE = 128 * 1024 * 1024

_TRUE_STRINGS = {"true", "yes", "on", "1"}
_FALSE_STRINGS = {"false", "no", "off", "0", ""}


def _parse_bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
    raise ConfigurationError(f"Invalid {key}: {value!r}")


def _parse_int(key: str, value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"Invalid {key}: {value!r}") from None


@dataclass
class ClusterContext:
    """
    Storage runtime a format service is created for

    Attributes:
        name: Logical cluster name, "local" for the local filesystem
        storage_options: Keyword arguments for the remote filesystem
            (e.g. S3 credentials or ``anon``)
    """

    name: str = "local"
    storage_options: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "ClusterContext":
        if not data:
            return cls()
        return cls(
            name=str(data.get("name", "local")),
            storage_options=dict(data.get("storage_options") or {}),
        )


@dataclass
class ScanConfig:
    """
    Everything a scan needs to know about its input

    Attributes:
        files: Resolved file or directory locations, first one is the
            representative file
        fields: Declared projection; empty means every physical column
        split_size_bytes: Target byte size per split
        ignore_empty_folder: Treat an empty input folder as zero rows
            instead of an error
    """

    files: List[str] = field(default_factory=list)
    fields: List[FieldSpec] = field(default_factory=list)
    split_size_bytes: int = DEFAULT_SPLIT_SIZE
    ignore_empty_folder: bool = False

    def validate(self) -> None:
        """
        Check the configuration before any I/O happens

        Raises:
            ConfigurationError: If no files are declared or the split
                size is not positive
        """
        if not self.files:
            raise ConfigurationError("No input files defined")
        if self.split_size_bytes <= 0:
            raise ConfigurationError(
                f"Split size must be positive, got {self.split_size_bytes}"
            )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ScanConfig":
        """
        Build a config from a plain mapping

        Example:
            >>> ScanConfig.from_dict({
            ...     "files": ["data.parquet"],
            ...     "fields": ["id", {"name": "amount", "type": "decimal"}],
            ...     "split_size_bytes": 1048576,
            ... })
        """
        files = data.get("files") or []
        if isinstance(files, str):
            files = [files]

        split_size = _parse_int("split size", data.get("split_size_bytes", DEFAULT_SPLIT_SIZE))

        return cls(
            files=[str(f) for f in files],
            fields=[parse_field(f) for f in data.get("fields") or []],
            split_size_bytes=split_size,
            ignore_empty_folder=_parse_bool(
                "ignore_empty_folder", data.get("ignore_empty_folder", False)
            ),
        )


def parse_field(value: Union[str, Mapping[str, Any], FieldSpec]) -> FieldSpec:
    """
    Parse one field declaration

    Accepts ``"name"``, ``"name:type"``, ``"name:type:output_name"`` or a
    mapping with ``name``, ``type``, ``output_name``, ``precision`` and
    ``scale`` keys.

    Raises:
        ConfigurationError: If the declaration has no name or an unknown type
    """
    if isinstance(value, FieldSpec):
        return value

    if isinstance(value, str):
        parts = value.split(":")
        if len(parts) > 3:
            raise ConfigurationError(f"Invalid field declaration: {value!r}")
        parts += [""] * (3 - len(parts))
        data: Mapping[str, Any] = {
            "name": parts[0],
            "type": parts[1],
            "output_name": parts[2],
        }
    else:
        data = value

    name = str(data.get("name") or "").strip()
    if not name:
        raise ConfigurationError(f"Field declaration without a name: {value!r}")

    try:
        declared_type = DataType.parse(data.get("type"))
    except ValueError as e:
        raise ConfigurationError(f"Field '{name}': {e}") from e

    return FieldSpec(
        name=name,
        declared_type=declared_type,
        precision=_parse_int(f"precision of field '{name}'", data.get("precision") or 0),
        scale=_parse_int(f"scale of field '{name}'", data.get("scale") or 0),
        output_name=(data.get("output_name") or None),
    )


def resolve_location(location: str) -> str:
    """
    Turn a user-supplied location into one the scan engine accepts

    Local paths get ``~`` and environment variables expanded and are made
    absolute; ``file://`` URIs become local paths; other URIs
    (``s3://...``) are passed through untouched.
    """
    location = location.strip()

    if location.startswith("file://"):
        location = location[len("file://"):]
    elif "://" in location:
        return location

    expanded = os.path.expandvars(os.path.expanduser(location))
    return str(Path(expanded).absolute())


def load_config_file(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load a YAML config file

    Returns:
        Mapping with optional ``scan`` and ``cluster`` sections; a file
        without sections is treated as the ``scan`` section itself

    Raises:
        ConfigurationError: If the file is not a YAML mapping
    """
    import yaml

    with open(path) as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid config file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping")

    if "scan" not in data and "cluster" not in data:
        data = {"scan": data}

    return data
