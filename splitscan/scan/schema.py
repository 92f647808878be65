"""
Schema resolution - read the physical schema of the representative file
"""

import logging
from typing import List, Optional

from splitscan.core.config import ClusterContext
from splitscan.core.errors import NotFoundError, SchemaReadError
from splitscan.core.types import FieldSpec
from splitscan.formats import get_format_service
from splitscan.formats.base import FormatService

logger = logging.getLogger(__name__)


class SchemaResolver:
    """
    Reads a file's physical field list through a format service

    The resolver creates its own input format handle for the cluster
    context it is given, so schema discovery never touches the handle
    used for planning and reading.
    """

    def __init__(
        self,
        format_service: Optional[FormatService] = None,
        context: Optional[ClusterContext] = None,
    ):
        self.format_service = format_service or get_format_service()
        self.context = context or ClusterContext()

    def retrieve_schema(self, path: str) -> List[FieldSpec]:
        """
        Get the physical schema of a file

        Args:
            path: Resolved location of the representative file

        Returns:
            Physical fields in file order (empty for an empty folder)

        Raises:
            NotFoundError: If the path does not exist
            SchemaReadError: If the file cannot be opened or parsed
        """
        try:
            input_format = self.format_service.create_input_format(self.context)
            fields = input_format.read_schema(path)
        except FileNotFoundError as e:
            raise NotFoundError(f"No input file: {path}", path=path) from e
        except Exception as e:
            raise SchemaReadError(f"Cannot read schema of {path}: {e}") from e

        logger.debug("Read %d fields from %s", len(fields), path)
        return list(fields)


def retrieve_schema(
    path: str,
    context: Optional[ClusterContext] = None,
    format_service: Optional[FormatService] = None,
) -> List[FieldSpec]:
    """
    Get the physical schema of a single file

    Example:
        >>> retrieve_schema("/data/sales.parquet")
        [FieldSpec(id: INTEGER(0,0)), FieldSpec(amount: DECIMAL(10,2))]
    """
    return SchemaResolver(format_service, context).retrieve_schema(path)
