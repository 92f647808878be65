"""
Tests for merging declared fields with the physical schema
"""

from splitscan.core.types import DataType, FieldSpec
from splitscan.scan.reconcile import effective_schema, merge_fields

PHYSICAL = [
    FieldSpec.physical("id", DataType.INTEGER),
    FieldSpec.physical("amount", DataType.DECIMAL, 10, 2),
    FieldSpec.physical("name", DataType.STRING),
]


class TestMergeFields:
    """Test the type-if-unspecified, precision/scale-always rule"""

    def test_unspecified_type_taken_from_file(self):
        merged = merge_fields([FieldSpec("amount")], PHYSICAL)

        assert merged[0].declared_type == DataType.DECIMAL
        assert (merged[0].precision, merged[0].scale) == (10, 2)

    def test_explicit_type_kept_precision_overwritten(self):
        declared = FieldSpec("amount", DataType.FLOAT, precision=3, scale=1)

        merged = merge_fields([declared], PHYSICAL)

        assert merged[0].declared_type == DataType.FLOAT
        assert merged[0].physical_type == DataType.DECIMAL
        assert (merged[0].precision, merged[0].scale) == (10, 2)

    def test_precision_overwritten_with_zero(self):
        declared = FieldSpec("id", DataType.INTEGER, precision=9, scale=4)

        merged = merge_fields([declared], PHYSICAL)

        assert (merged[0].precision, merged[0].scale) == (0, 0)

    def test_absent_field_unchanged(self):
        declared = FieldSpec("derived", DataType.STRING, precision=5, scale=1, output_name="d")

        merged = merge_fields([declared], PHYSICAL)

        assert merged[0] is declared

    def test_declared_order_preserved(self):
        declared = [FieldSpec("name"), FieldSpec("missing"), FieldSpec("id")]

        merged = merge_fields(declared, PHYSICAL)

        assert [f.name for f in merged] == ["name", "missing", "id"]

    def test_output_name_preserved(self):
        merged = merge_fields([FieldSpec("name", output_name="customer")], PHYSICAL)
        assert merged[0].column_name == "customer"

    def test_inputs_not_mutated(self):
        declared = [FieldSpec("id")]

        merge_fields(declared, PHYSICAL)

        assert declared[0].declared_type == DataType.UNSPECIFIED

    def test_empty_physical_schema(self):
        declared = [FieldSpec("id"), FieldSpec("name", DataType.STRING)]
        assert merge_fields(declared, []) == declared

    def test_scenario_a_schema(self):
        physical = [
            FieldSpec.physical("id", DataType.INTEGER),
            FieldSpec.physical("name", DataType.STRING),
        ]
        declared = [FieldSpec("id"), FieldSpec("name", DataType.STRING)]

        merged = merge_fields(declared, physical)

        assert [(f.name, f.declared_type, f.precision, f.scale) for f in merged] == [
            ("id", DataType.INTEGER, 0, 0),
            ("name", DataType.STRING, 0, 0),
        ]


class TestEffectiveSchema:
    """Test the schema used to read"""

    def test_no_declaration_reads_everything(self):
        assert effective_schema([], PHYSICAL) == tuple(PHYSICAL)

    def test_declaration_is_merged(self):
        schema = effective_schema([FieldSpec("id")], PHYSICAL)

        assert isinstance(schema, tuple)
        assert schema[0].declared_type == DataType.INTEGER
