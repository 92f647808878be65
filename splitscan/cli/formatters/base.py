"""
Base formatter interface for CLI output

All formatters must implement the format() method.
"""

import base64
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Dict, List, Optional


class BaseFormatter:
    """Base class for all output formatters"""

    def format(self, results: List[Dict[str, Any]], **kwargs) -> str:
        """
        Format rows for output

        Args:
            results: List of row dictionaries
            **kwargs: Formatter-specific options; ``columns`` fixes the
                column order (and the header when there are no rows)

        Returns:
            Formatted string ready for output
        """
        raise NotImplementedError("Formatters must implement format() method")

    def get_name(self) -> str:
        """Get formatter name"""
        return self.__class__.__name__.replace("Formatter", "").lower()

    def columns_of(
        self, results: List[Dict[str, Any]], columns: Optional[List[str]] = None
    ) -> List[str]:
        if columns:
            return list(columns)
        if results:
            return list(results[0].keys())
        return []


def to_text(value: Any) -> Optional[str]:
    """Render a decoded column value as text (None stays None)"""
    if value is None:
        return None
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(value).decode("ascii")
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return format(value, "f")
    return str(value)
