"""Type system for splitscan.

This module provides the type tags used to describe columns and the
FieldSpec record that carries a column's declared and physical metadata.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional


class DataType(Enum):
    """Column type tags understood by splitscan."""

    # Declared fields that never recorded a type
    UNSPECIFIED = "UNSPECIFIED"

    # Numeric types
    INTEGER = "INTEGER"
    FLOAT = "FLOAT"
    DECIMAL = "DECIMAL"

    # String and binary types
    STRING = "STRING"
    BINARY = "BINARY"

    # Boolean
    BOOLEAN = "BOOLEAN"

    # Temporal types
    DATE = "DATE"
    TIME = "TIME"
    DATETIME = "DATETIME"

    # Special
    NULL = "NULL"

    def __str__(self) -> str:
        return self.value

    def is_specified(self) -> bool:
        """Check if a concrete type was recorded."""
        return self is not DataType.UNSPECIFIED

    @classmethod
    def parse(cls, name: Optional[str]) -> "DataType":
        """Parse a user-supplied type name.

        Accepts enum values (case-insensitive) and the common aliases
        used in field declarations.

        Args:
            name: Type name such as "int", "string" or "DECIMAL"

        Returns:
            Matching DataType; UNSPECIFIED for an empty name

        Raises:
            ValueError: If the name is not a known type
        """
        if name is None:
            return cls.UNSPECIFIED

        key = name.strip().lower()
        if key in _TYPE_ALIASES:
            return _TYPE_ALIASES[key]

        try:
            return cls(key.upper())
        except ValueError:
            known = ", ".join(sorted(t.value.lower() for t in cls))
            raise ValueError(f"Unknown type: {name}. Known types: {known}") from None


_TYPE_ALIASES = {
    "": DataType.UNSPECIFIED,
    "none": DataType.UNSPECIFIED,
    "int": DataType.INTEGER,
    "long": DataType.INTEGER,
    "bigint": DataType.INTEGER,
    "double": DataType.FLOAT,
    "number": DataType.FLOAT,
    "bignumber": DataType.DECIMAL,
    "str": DataType.STRING,
    "utf8": DataType.STRING,
    "bytes": DataType.BINARY,
    "bool": DataType.BOOLEAN,
    "timestamp": DataType.DATETIME,
}


@dataclass(frozen=True)
class FieldSpec:
    """One column of a declared projection or of a file's physical schema.

    Identity is ``name``, the column name inside the data file. The row
    value is emitted under ``output_name`` when one is given.
    """

    name: str
    declared_type: DataType = DataType.UNSPECIFIED
    physical_type: DataType = DataType.UNSPECIFIED
    precision: int = 0
    scale: int = 0
    output_name: Optional[str] = None

    @classmethod
    def physical(
        cls, name: str, dtype: DataType, precision: int = 0, scale: int = 0
    ) -> "FieldSpec":
        """Build a field as reported by a file's own metadata."""
        return cls(
            name=name,
            declared_type=dtype,
            physical_type=dtype,
            precision=precision,
            scale=scale,
        )

    @property
    def column_name(self) -> str:
        """Name the value is emitted under in output rows."""
        return self.output_name or self.name

    @property
    def effective_type(self) -> DataType:
        """Declared type, falling back to the physical one."""
        if self.declared_type.is_specified():
            return self.declared_type
        return self.physical_type

    def with_physical(self, other: "FieldSpec") -> "FieldSpec":
        """Return a copy refreshed from a physical field.

        Precision and scale always come from ``other``; the declared type
        is only filled in when it was never specified.
        """
        declared_type = self.declared_type
        if not declared_type.is_specified():
            declared_type = other.physical_type

        return replace(
            self,
            declared_type=declared_type,
            physical_type=other.physical_type,
            precision=other.precision,
            scale=other.scale,
        )

    def to_dict(self) -> dict:
        """Plain representation for display and serialization."""
        return {
            "name": self.name,
            "type": str(self.effective_type),
            "precision": self.precision,
            "scale": self.scale,
            "output_name": self.column_name,
        }

    def __repr__(self) -> str:
        return f"FieldSpec({self.name}: {self.effective_type}({self.precision},{self.scale}))"
