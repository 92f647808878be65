"""
Scan operator - yields the rows of a ScanCoordinator

This is a leaf operator (has no child). Iterating it drains the
coordinator; stopping early tears the scan down so the open split is
closed.
"""

from collections.abc import Iterator
from typing import Any

from splitscan.operators.base import Operator
from splitscan.scan.coordinator import ScanCoordinator


class Scan(Operator):
    """
    Scan operator - row sink for a coordinator

    Rows come out in split order, and in reader order within a split.
    """

    def __init__(self, coordinator: ScanCoordinator):
        """
        Initialize scan operator

        Args:
            coordinator: Coordinator to pull rows from
        """
        super().__init__(child=None)
        self.coordinator = coordinator

    def __iter__(self) -> Iterator[dict[str, Any]]:
        yield from self.coordinator.rows()

    def close(self) -> None:
        """Abandon the scan, closing any open split"""
        self.coordinator.teardown()

    def get_statistics(self) -> dict[str, Any]:
        return self.coordinator.get_statistics()

    def __repr__(self) -> str:
        files = ", ".join(self.coordinator.config.files)
        return f"Scan({files})"
