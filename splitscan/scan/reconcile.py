"""
Field reconciliation - merge a declared projection with a physical schema

Declarations saved before types were recorded carry UNSPECIFIED; they pick
up the physical type. Precision and scale always follow the file. Fields
the file doesn't have are kept as declared, since they may be filled in
further downstream.
"""

from typing import Dict, List, Sequence

from splitscan.core.types import FieldSpec


def merge_fields(
    declared: Sequence[FieldSpec], physical: Sequence[FieldSpec]
) -> List[FieldSpec]:
    """
    Merge declared fields with the physical fields of a file

    Args:
        declared: Caller's projection, in output order
        physical: Fields read from the representative file

    Returns:
        Effective fields, in declared order

    Example:
        declared: [id (UNSPECIFIED), amount (FLOAT), note (STRING)]
        physical: [id INTEGER, amount DECIMAL(10,2)]
        result:   [id INTEGER, amount FLOAT(10,2), note STRING]
    """
    by_name: Dict[str, FieldSpec] = {f.name: f for f in physical}

    merged = []
    for field in declared:
        match = by_name.get(field.name)
        merged.append(field.with_physical(match) if match is not None else field)

    return merged


def effective_schema(
    declared: Sequence[FieldSpec], physical: Sequence[FieldSpec]
) -> tuple:
    """Schema used to read: the merged projection, or every physical field"""
    if not declared:
        return tuple(physical)
    return tuple(merge_fields(declared, physical))
