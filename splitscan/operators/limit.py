"""
Limit operator - stop after the first N rows

Stops pulling from the child as soon as enough rows were yielded and
closes the child's iterator, so an underlying scan releases its reader
right away instead of whenever the generator is collected.
"""

from collections.abc import Iterator
from typing import Any

from splitscan.operators.base import Operator


class Limit(Operator):
    """Yields at most ``limit`` rows of its child"""

    def __init__(self, child: Operator, limit: int):
        """
        Initialize limit operator

        Args:
            child: Child operator to pull rows from
            limit: Maximum number of rows to yield
        """
        super().__init__(child)
        self.limit = limit

    def __iter__(self) -> Iterator[dict[str, Any]]:
        if self.limit <= 0:
            return

        rows = iter(self.child)
        try:
            count = 0
            for row in rows:
                yield row
                count += 1
                if count >= self.limit:
                    break
        finally:
            close = getattr(rows, "close", None)
            if close is not None:
                close()

    def __repr__(self) -> str:
        return f"Limit({self.limit})"
