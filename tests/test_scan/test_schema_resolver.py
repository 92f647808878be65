"""
Tests for physical schema resolution
"""

import pytest

from splitscan.core.config import ClusterContext
from splitscan.core.errors import NotFoundError, SchemaReadError
from splitscan.core.types import DataType, FieldSpec
from splitscan.scan.schema import SchemaResolver, retrieve_schema


class TestSchemaResolver:
    """Test SchemaResolver against a fake format service"""

    def test_returns_physical_fields(self, fake_service):
        service = fake_service(physical=[FieldSpec.physical("id", DataType.INTEGER)])

        fields = SchemaResolver(service).retrieve_schema("/data/a.parquet")

        assert fields == [FieldSpec.physical("id", DataType.INTEGER)]
        assert service.schema_reads == ["/data/a.parquet"]

    def test_uses_cluster_context(self, fake_service):
        service = fake_service()
        context = ClusterContext("lake")

        SchemaResolver(service, context).retrieve_schema("/data/a.parquet")

        assert service.formats[0].context is context

    def test_missing_path_is_not_found(self, fake_service):
        service = fake_service(missing=["/data/a.parquet"])

        with pytest.raises(NotFoundError) as exc_info:
            SchemaResolver(service).retrieve_schema("/data/a.parquet")

        assert exc_info.value.path == "/data/a.parquet"
        assert isinstance(exc_info.value, FileNotFoundError)

    def test_other_failures_are_schema_read_errors(self, fake_service):
        service = fake_service(schema_error=OSError("permission denied"))

        with pytest.raises(SchemaReadError, match="permission denied") as exc_info:
            SchemaResolver(service).retrieve_schema("/data/a.parquet")

        assert not isinstance(exc_info.value, NotFoundError)
        assert isinstance(exc_info.value.__cause__, OSError)


class TestRetrieveSchemaParquet:
    """Test retrieve_schema against real Parquet files"""

    def test_real_file(self, decimal_parquet):
        fields = retrieve_schema(str(decimal_parquet))

        assert [f.name for f in fields] == ["id", "amount", "note"]
        assert fields[1] == FieldSpec.physical("amount", DataType.DECIMAL, 10, 2)

    def test_missing_file(self, tmp_path):
        with pytest.raises(NotFoundError):
            retrieve_schema(str(tmp_path / "missing.parquet"))

    def test_corrupt_file(self, tmp_path):
        bogus = tmp_path / "bogus.parquet"
        bogus.write_bytes(b"PAR1 but not really")

        with pytest.raises(SchemaReadError):
            retrieve_schema(str(bogus))

    def test_empty_folder(self, empty_dir):
        assert retrieve_schema(str(empty_dir)) == []
