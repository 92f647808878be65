"""
Split planning - turn the input files into an ordered list of splits
"""

import logging
from typing import Optional, Sequence, Tuple

from splitscan.core.config import DEFAULT_SPLIT_SIZE
from splitscan.core.errors import ConfigurationError, NotFoundError, SplitPlanningError
from splitscan.core.types import FieldSpec
from splitscan.formats.base import InputFormat, SplitDescriptor

logger = logging.getLogger(__name__)


def require_files(files: Sequence[str]) -> None:
    """
    Reject an empty file set before any I/O

    Raises:
        ConfigurationError: If no files are declared
    """
    if not files:
        raise ConfigurationError("No input files defined")


class SplitPlanner:
    """
    Asks an input format for the splits of a file set

    The split size is a target byte size per split, not a bound on the
    number of splits.
    """

    def __init__(self, input_format: InputFormat):
        self.input_format = input_format

    def plan(
        self,
        files: Sequence[str],
        schema: Sequence[FieldSpec],
        split_size_bytes: int = DEFAULT_SPLIT_SIZE,
        ignore_empty_folder: bool = False,
        physical_schema: Optional[Sequence[FieldSpec]] = None,
    ) -> Tuple[SplitDescriptor, ...]:
        """
        Compute the splits to scan

        Args:
            files: Resolved input locations
            schema: Effective schema the readers should produce
            split_size_bytes: Target byte size per split
            ignore_empty_folder: Plan nothing when the physical schema is empty
            physical_schema: Schema of the representative file, if known

        Returns:
            Splits in scan order

        Raises:
            ConfigurationError: If no files are declared or the split size
                is not positive
            NotFoundError: If an input location disappeared
            SplitPlanningError: If the format service fails
        """
        require_files(files)
        if split_size_bytes <= 0:
            raise ConfigurationError(f"Split size must be positive, got {split_size_bytes}")

        if ignore_empty_folder and physical_schema is not None and not physical_schema:
            logger.info("No Parquet input files found.")
            return ()

        try:
            self.input_format.set_schema(schema)
            if len(files) == 1:
                self.input_format.set_input_file(files[0])
            else:
                self.input_format.set_input_files(files)
            self.input_format.set_split_size(split_size_bytes)

            splits = tuple(self.input_format.get_splits())
        except FileNotFoundError as e:
            raise NotFoundError(str(e), path=e.filename) from e
        except Exception as e:
            raise SplitPlanningError(f"Cannot compute splits: {e}") from e

        logger.debug("Input split count: %d", len(splits))
        return splits
