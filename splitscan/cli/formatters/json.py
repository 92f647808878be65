"""
JSON formatter for machine-readable output
"""

import json
import math
from typing import Any

from splitscan.cli.formatters.base import BaseFormatter, to_text


class JSONFormatter(BaseFormatter):
    """Format rows as a JSON array"""

    def format(self, results: list[dict[str, Any]], **kwargs) -> str:
        """
        Format rows as JSON

        Values JSON can't represent (decimals, timestamps, bytes) are
        written as strings; NaN and infinity become null.

        Args:
            results: List of row dictionaries
            **kwargs: Options like 'compact', 'indent'

        Returns:
            JSON string
        """

        def clean_value(val):
            if isinstance(val, float) and (math.isnan(val) or math.isinf(val)):
                return None
            if val is None or isinstance(val, (bool, int, float, str)):
                return val
            if isinstance(val, list):
                return [clean_value(v) for v in val]
            if isinstance(val, dict):
                return {k: clean_value(v) for k, v in val.items()}
            return to_text(val)

        cleaned_results = [{k: clean_value(v) for k, v in row.items()} for row in results]

        if kwargs.get("compact", False):
            return json.dumps(cleaned_results, separators=(",", ":"))
        return json.dumps(cleaned_results, indent=kwargs.get("indent", 2))
