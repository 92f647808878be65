"""
Rich table formatter for terminal output
"""

from typing import Any, Dict, List

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from splitscan.cli.formatters.base import BaseFormatter, to_text


class TableFormatter(BaseFormatter):
    """Format rows as a Rich table"""

    def format(self, results: List[Dict[str, Any]], **kwargs) -> str:
        """
        Format rows as a Rich table

        Args:
            results: List of row dictionaries
            **kwargs: Options like 'no_color', 'show_footer', 'title', 'columns'

        Returns:
            Formatted table string
        """
        columns = self.columns_of(results, kwargs.get("columns"))
        if not results and not columns:
            return "No rows found."

        console = Console(force_terminal=not kwargs.get("no_color", False))

        # Narrow terminal or many columns: truncate harder
        if console.width < 80 or len(columns) > 8:
            table = Table(
                show_header=True, header_style="bold magenta", box=box.SIMPLE,
                title=kwargs.get("title"),
            )
            max_width, no_wrap = kwargs.get("max_width", 15), True
        else:
            table = Table(show_header=True, header_style="bold magenta", title=kwargs.get("title"))
            max_width, no_wrap = 30, False

        for col in columns:
            table.add_column(col, style="cyan", overflow="ellipsis", max_width=max_width, no_wrap=no_wrap)

        for row in results:
            values = []
            for col in columns:
                text = to_text(row.get(col))
                values.append("[dim]NULL[/dim]" if text is None else escape(text))
            table.add_row(*values)

        with console.capture() as capture:
            console.print(table)
        output = capture.get()

        if kwargs.get("show_footer", True):
            row_count = len(results)
            with console.capture() as capture:
                console.print(f"[dim]{row_count} row{'s' if row_count != 1 else ''}[/dim]")
            output += capture.get()

        return output
