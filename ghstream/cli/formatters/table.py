"""
Rich table formatter for terminal output
"""

from typing import Any, Dict, List, Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ghstream.cli.formatters.base import BaseFormatter


class TableFormatter(BaseFormatter):
    """Format results as a Rich table"""

    def format(
        self, results: List[Dict[str, Any]], columns: Optional[List[str]] = None, **kwargs
    ) -> str:
        """
        Format results as a Rich table

        Args:
            results: List of result dictionaries
            columns: Column order
            **kwargs: Options like 'no_color', 'show_footer', 'max_width'

        Returns:
            Rendered table string
        """
        if not results:
            return "No results found."

        keys = self.resolve_columns(results, columns)
        no_color = kwargs.get("no_color", False)
        console = Console(force_terminal=not no_color, no_color=no_color)

        # Many columns (SELECT * has ten): truncate harder to stay readable
        narrow = console.width < 80 or len(keys) > 8
        max_width = kwargs.get("max_width", 15 if narrow else 40)
        table = Table(
            show_header=True,
            header_style="bold magenta",
            box=box.SIMPLE if narrow else box.HEAVY_HEAD,
        )

        for key in keys:
            table.add_column(key, style="cyan", overflow="ellipsis", max_width=max_width, no_wrap=narrow)

        for row in results:
            table.add_row(
                *[
                    "[dim]NULL[/dim]" if row.get(k) is None else escape(str(row.get(k)))
                    for k in keys
                ]
            )

        with console.capture() as capture:
            console.print(table)
            if kwargs.get("show_footer", True):
                row_count = len(results)
                console.print(f"[dim]{row_count} row{'s' if row_count != 1 else ''}[/dim]")

        return capture.get()
