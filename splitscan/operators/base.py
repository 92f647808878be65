"""
Base operator class for pull-based row pipelines

Each operator pulls rows from its child on demand, so rows flow
downstream one at a time and nothing is buffered between operators.
"""

from collections.abc import Iterator
from typing import Any, Optional


class Operator:
    """
    Base class for all row operators

    Operators form a chain where:
    - The leaf operator (Scan) drives a ScanCoordinator
    - Other operators (e.g., Limit) transform or cut the row stream
    - The outermost operator is iterated by the caller
    """

    def __init__(self, child: Optional["Operator"] = None):
        """
        Initialize operator

        Args:
            child: Child operator to pull data from (None for leaf operators)
        """
        self.child = child

    def __iter__(self) -> Iterator[dict[str, Any]]:
        """
        Execute operator and yield results

        Yields:
            Rows as dictionaries
        """
        raise NotImplementedError(f"{self.__class__.__name__} must implement __iter__()")

    def to_dataframe(self):
        """
        Collect the rows into a pandas DataFrame

        Returns:
            pandas.DataFrame with one column per output field
        """
        try:
            import pandas as pd
        except ImportError:
            raise ImportError("Pandas is required for to_dataframe(). Install `splitscan[pandas]`") from None

        return pd.DataFrame(list(self))

    def __repr__(self) -> str:
        """String representation for debugging"""
        return f"{self.__class__.__name__}()"
