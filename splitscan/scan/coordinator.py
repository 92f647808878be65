"""
Scan coordinator - pull-based driver of a whole scan

The coordinator is a small state machine. Each pull() performs one
control-or-data step and reports what happened:

    UNINITIALIZED --first pull--> PLANNING --no splits--> EXHAUSTED
                                     |
                                     v
                    +------------> IDLE --all splits read--> EXHAUSTED
                    |                |
        split done  |                | open next split
        (CONTINUE)  |                v
                    +----------- READING --row--> READING (ROW)

    Any failure moves to FAILED, which is terminal like EXHAUSTED.

Planning (schema resolution, reconciliation, split computation) happens
exactly once, on the first pull. Crossing a split boundary closes the
reader and returns CONTINUE without a row.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple

from splitscan.core.config import ClusterContext, ScanConfig
from splitscan.core.errors import ScanError, SplitPlanningError
from splitscan.core.types import FieldSpec
from splitscan.formats import get_format_service
from splitscan.formats.base import FormatService, SplitDescriptor
from splitscan.scan.planner import SplitPlanner
from splitscan.scan.reader import ReaderHandle, SplitReader
from splitscan.scan.reconcile import effective_schema
from splitscan.scan.schema import SchemaResolver

logger = logging.getLogger(__name__)


class ScanPhase(Enum):
    """States of a scan"""

    UNINITIALIZED = "uninitialized"
    PLANNING = "planning"
    IDLE = "idle"
    READING = "reading"
    EXHAUSTED = "exhausted"
    FAILED = "failed"

    def is_terminal(self) -> bool:
        return self in (ScanPhase.EXHAUSTED, ScanPhase.FAILED)


class PullKind(Enum):
    """What a single pull produced"""

    ROW = "row"
    CONTINUE = "continue"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class PullResult:
    """Outcome of one pull: a row, a control step, end of data, or a failure"""

    kind: PullKind
    row: Optional[Dict[str, Any]] = None
    error: Optional[ScanError] = None

    @classmethod
    def of_row(cls, row: Dict[str, Any]) -> "PullResult":
        return cls(PullKind.ROW, row=row)

    @classmethod
    def of_failure(cls, error: ScanError) -> "PullResult":
        return cls(PullKind.FAILED, error=error)

    @property
    def is_row(self) -> bool:
        return self.kind is PullKind.ROW

    @property
    def is_done(self) -> bool:
        return self.kind is PullKind.DONE

    @property
    def is_failed(self) -> bool:
        return self.kind is PullKind.FAILED


CONTINUE = PullResult(PullKind.CONTINUE)
DONE = PullResult(PullKind.DONE)


@dataclass
class ScanState:
    """
    Mutable state owned by one coordinator

    An open reader always belongs to the split at current_index.
    """

    splits: Optional[Tuple[SplitDescriptor, ...]] = None
    current_index: int = 0
    open_reader: Optional[ReaderHandle] = None
    rows_emitted: int = 0
    splits_read: int = 0
    split_rows: List[int] = field(default_factory=list)


class ScanCoordinator:
    """
    Drives schema resolution, planning and split-by-split reading

    Usage:
        ```python
        config = ScanConfig(files=["/data/sales.parquet"])
        with ScanCoordinator(config) as scan:
            for row in scan.rows():
                process(row)
        ```

    Or step by step, one pull at a time:
        ```python
        scan = ScanCoordinator(config)
        try:
            while True:
                result = scan.pull()
                if result.is_row:
                    process(result.row)
                elif result.is_done:
                    break
                elif result.is_failed:
                    raise result.error
        finally:
            scan.teardown()
        ```
    """

    def __init__(
        self,
        config: ScanConfig,
        context: Optional[ClusterContext] = None,
        format_service: Optional[FormatService] = None,
    ):
        """
        Initialize coordinator

        Args:
            config: Files, declared fields and split settings
            context: Cluster the format service is bound to (local by default)
            format_service: Format service to use (Parquet by default)
        """
        self.config = config
        self.context = context or ClusterContext()
        self.format_service = format_service or get_format_service()

        self.phase = ScanPhase.UNINITIALIZED
        self.error: Optional[ScanError] = None
        self.physical_schema: Optional[Tuple[FieldSpec, ...]] = None
        self.effective_schema: Optional[Tuple[FieldSpec, ...]] = None

        self._state = ScanState()
        self._split_reader: Optional[SplitReader] = None

    @property
    def splits(self) -> Optional[Tuple[SplitDescriptor, ...]]:
        return self._state.splits

    @property
    def current_index(self) -> int:
        return self._state.current_index

    @property
    def open_reader(self) -> Optional[ReaderHandle]:
        return self._state.open_reader

    def pull(self) -> PullResult:
        """
        Perform one step of the scan

        Returns:
            ROW with the next row, CONTINUE after a split boundary, DONE at
            the end of data, or FAILED with the error that ended the scan
        """
        if self.phase is ScanPhase.FAILED:
            return PullResult.of_failure(self.error)
        if self.phase is ScanPhase.EXHAUSTED:
            return DONE

        try:
            if self.phase is ScanPhase.UNINITIALIZED:
                self._plan()
                if self.phase is ScanPhase.EXHAUSTED:
                    return DONE

            if self.phase is ScanPhase.IDLE:
                if self._state.current_index >= len(self._state.splits):
                    self.phase = ScanPhase.EXHAUSTED
                    return DONE
                self._open_current()

            row = self._state.open_reader.next()
            if row is not None:
                self._state.rows_emitted += 1
                return PullResult.of_row(row)

            self._close_current()
            return CONTINUE

        except ScanError as e:
            return self._fail(e)

    def _plan(self) -> None:
        self.phase = ScanPhase.PLANNING
        config = self.config

        config.validate()

        resolver = SchemaResolver(self.format_service, self.context)
        physical = tuple(resolver.retrieve_schema(config.files[0]))
        schema = effective_schema(config.fields, physical)

        try:
            input_format = self.format_service.create_input_format(self.context)
        except Exception as e:
            raise SplitPlanningError(f"Cannot create input format: {e}") from e

        splits = SplitPlanner(input_format).plan(
            config.files,
            schema,
            split_size_bytes=config.split_size_bytes,
            ignore_empty_folder=config.ignore_empty_folder,
            physical_schema=physical,
        )

        self.physical_schema = physical
        self.effective_schema = schema
        self._split_reader = SplitReader(input_format)
        self._state.splits = splits
        self._state.current_index = 0

        self.phase = ScanPhase.IDLE if splits else ScanPhase.EXHAUSTED

    def _open_current(self) -> None:
        index = self._state.current_index
        logger.debug("Open split %d", index)
        self._state.open_reader = self._split_reader.open(self._state.splits[index])
        self.phase = ScanPhase.READING

    def _close_current(self) -> None:
        reader = self._state.open_reader
        self._state.open_reader = None
        reader.close()
        logger.debug("Close split %d", self._state.current_index)

        self._state.split_rows.append(reader.rows_read)
        self._state.splits_read += 1
        self._state.current_index += 1
        self.phase = ScanPhase.IDLE

    def _fail(self, error: ScanError) -> PullResult:
        reader = self._state.open_reader
        self._state.open_reader = None
        if reader is not None:
            try:
                reader.close()
            except ScanError:
                logger.warning(
                    "Failed to close split %d after error", self._state.current_index,
                    exc_info=True,
                )

        if self._state.splits is None:
            # Failed while planning: keep nothing half-built
            self.physical_schema = None
            self.effective_schema = None
            self._split_reader = None

        self.error = error
        self.phase = ScanPhase.FAILED
        return PullResult.of_failure(error)

    def teardown(self) -> None:
        """
        End the scan, closing the open reader if there is one

        Safe to call at any time and more than once. A failed scan stays
        FAILED, and so does one whose reader fails to close; anything else
        becomes EXHAUSTED.

        Raises:
            ReadError: If the open reader cannot be closed
        """
        reader = self._state.open_reader
        self._state.open_reader = None

        if reader is not None:
            logger.debug("Close split %d on teardown", self._state.current_index)
            try:
                reader.close()
            except ScanError as e:
                self.error = e
                self.phase = ScanPhase.FAILED
                raise

        if self.phase is not ScanPhase.FAILED:
            self.phase = ScanPhase.EXHAUSTED

    close = teardown

    def rows(self) -> Iterator[Dict[str, Any]]:
        """
        Yield every row of the scan

        Raises the error of a failed pull. The open reader is closed when
        the generator finishes, fails, or is abandoned.
        """
        try:
            while True:
                result = self.pull()
                if result.kind is PullKind.ROW:
                    yield result.row
                elif result.kind is PullKind.DONE:
                    return
                elif result.kind is PullKind.FAILED:
                    raise result.error
        finally:
            self.teardown()

    def get_statistics(self) -> Dict[str, Any]:
        """
        Get statistics about the scan so far

        Returns:
            Dictionary with split and row counts
        """
        splits = self._state.splits
        return {
            "phase": self.phase.value,
            "splits_planned": len(splits) if splits is not None else 0,
            "splits_read": self._state.splits_read,
            "rows_emitted": self._state.rows_emitted,
            "rows_per_split": list(self._state.split_rows),
        }

    def __enter__(self) -> "ScanCoordinator":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.teardown()

    def __repr__(self) -> str:
        return f"ScanCoordinator({self.phase.value}, files={len(self.config.files)})"
