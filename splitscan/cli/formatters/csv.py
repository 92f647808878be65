"""
CSV formatter for Unix-friendly output
"""

import csv
import io
from typing import Any, Dict, List

from splitscan.cli.formatters.base import BaseFormatter, to_text


class CSVFormatter(BaseFormatter):
    """Format rows as CSV"""

    def format(self, results: List[Dict[str, Any]], **kwargs) -> str:
        """
        Format rows as CSV

        Args:
            results: List of row dictionaries
            **kwargs: Options like 'delimiter', 'quote_all', 'columns'

        Returns:
            CSV string (empty when there is neither a row nor a column list)
        """
        columns = self.columns_of(results, kwargs.get("columns"))
        if not columns:
            return ""

        output = io.StringIO()
        writer = csv.writer(
            output,
            delimiter=kwargs.get("delimiter", ","),
            quoting=csv.QUOTE_ALL if kwargs.get("quote_all") else csv.QUOTE_MINIMAL,
        )

        writer.writerow(columns)
        for row in results:
            writer.writerow(["" if row.get(c) is None else to_text(row.get(c)) for c in columns])

        return output.getvalue()
