"""
Tests for split planning
"""

import pytest

from splitscan.core.errors import ConfigurationError, NotFoundError, SplitPlanningError
from splitscan.core.types import DataType, FieldSpec
from splitscan.formats import ParquetFormatService
from splitscan.scan.planner import SplitPlanner, require_files

SCHEMA = (FieldSpec.physical("id", DataType.INTEGER),)


class TestPreconditions:
    """Test rejection before any I/O"""

    def test_require_files(self):
        with pytest.raises(ConfigurationError, match="No input files defined"):
            require_files([])

    def test_empty_file_set(self, fake_service):
        service = fake_service(split_rows=[[{"id": 1}]])
        planner = SplitPlanner(service.create_input_format())

        with pytest.raises(ConfigurationError):
            planner.plan([], SCHEMA)

        assert service.get_splits_calls == 0

    def test_empty_file_set_even_with_ignore_empty_folder(self, fake_service):
        planner = SplitPlanner(fake_service().create_input_format())

        with pytest.raises(ConfigurationError):
            planner.plan([], SCHEMA, ignore_empty_folder=True, physical_schema=[])

    def test_non_positive_split_size(self, fake_service):
        planner = SplitPlanner(fake_service().create_input_format())

        with pytest.raises(ConfigurationError, match="Split size"):
            planner.plan(["a"], SCHEMA, split_size_bytes=0)


class TestEmptyFolder:
    """Test the ignore-empty-folder short circuit"""

    def test_short_circuit(self, fake_service):
        service = fake_service(split_rows=[[{"id": 1}]])
        planner = SplitPlanner(service.create_input_format())

        splits = planner.plan(["/data"], SCHEMA, ignore_empty_folder=True, physical_schema=[])

        assert splits == ()
        assert service.get_splits_calls == 0

    def test_flag_off_still_plans(self, fake_service):
        service = fake_service(split_rows=[[{"id": 1}]])
        planner = SplitPlanner(service.create_input_format())

        splits = planner.plan(["/data"], SCHEMA, ignore_empty_folder=False, physical_schema=[])

        assert len(splits) == 1

    def test_non_empty_schema_still_plans(self, fake_service):
        service = fake_service(split_rows=[[{"id": 1}]])
        planner = SplitPlanner(service.create_input_format())

        splits = planner.plan(["/data"], SCHEMA, ignore_empty_folder=True, physical_schema=SCHEMA)

        assert len(splits) == 1


class TestConfiguration:
    """Test how the input format is configured"""

    def test_single_file(self, fake_service):
        input_format = fake_service(split_rows=[[]]).create_input_format()

        SplitPlanner(input_format).plan(["/a.parquet"], SCHEMA, split_size_bytes=4096)

        assert input_format.input_files == ["/a.parquet"]
        assert input_format.schema == list(SCHEMA)
        assert input_format.split_size == 4096

    def test_multiple_files(self, fake_service):
        input_format = fake_service(split_rows=[[]]).create_input_format()
        input_format.set_input_file = None  # single-file call must not be used

        SplitPlanner(input_format).plan(["/a.parquet", "/b.parquet"], SCHEMA)

        assert input_format.input_files == ["/a.parquet", "/b.parquet"]

    def test_order_preserved(self, fake_service):
        input_format = fake_service(split_rows=[[], [], []]).create_input_format()

        splits = SplitPlanner(input_format).plan(["/a.parquet"], SCHEMA)

        assert [s.locator for s in splits] == [(0,), (1,), (2,)]


class TestFailures:
    """Test error mapping"""

    def test_planning_failure(self, fake_service):
        service = fake_service(split_error=RuntimeError("footer unreadable"))

        with pytest.raises(SplitPlanningError, match="footer unreadable"):
            SplitPlanner(service.create_input_format()).plan(["/a.parquet"], SCHEMA)

    def test_missing_file_during_planning(self, tmp_path):
        input_format = ParquetFormatService().create_input_format()

        with pytest.raises(NotFoundError):
            SplitPlanner(input_format).plan([str(tmp_path / "gone.parquet")], SCHEMA)


class TestParquetPlanning:
    """Test planning real Parquet files"""

    def test_idempotent(self, people_parquet):
        files = [str(people_parquet)]

        first = SplitPlanner(ParquetFormatService().create_input_format()).plan(
            files, SCHEMA, split_size_bytes=1
        )
        second = SplitPlanner(ParquetFormatService().create_input_format()).plan(
            files, SCHEMA, split_size_bytes=1
        )

        assert first == second
        assert len(first) == 5

    def test_split_size_controls_granularity(self, people_parquet):
        files = [str(people_parquet)]

        coarse = SplitPlanner(ParquetFormatService().create_input_format()).plan(
            files, SCHEMA, split_size_bytes=1 << 30
        )
        fine = SplitPlanner(ParquetFormatService().create_input_format()).plan(
            files, SCHEMA, split_size_bytes=1
        )

        assert len(coarse) == 1
        assert len(fine) > len(coarse)
