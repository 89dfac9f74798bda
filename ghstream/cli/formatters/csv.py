"""
CSV formatter for Unix-friendly output
"""

import csv
import io
from typing import Any, Dict, List, Optional

from ghstream.cli.formatters.base import BaseFormatter


class CSVFormatter(BaseFormatter):
    """Format results as CSV; NULLs become empty fields"""

    def format(
        self, results: List[Dict[str, Any]], columns: Optional[List[str]] = None, **kwargs
    ) -> str:
        """
        Format results as CSV

        Args:
            results: List of result dictionaries
            columns: Header order
            **kwargs: Options like 'delimiter', 'quote_all'

        Returns:
            CSV string with a header row (empty string if there are no columns)
        """
        fieldnames = self.resolve_columns(results, columns)
        if not fieldnames:
            return ""

        output = io.StringIO()
        writer = csv.DictWriter(
            output,
            fieldnames=fieldnames,
            delimiter=kwargs.get("delimiter", ","),
            quoting=csv.QUOTE_ALL if kwargs.get("quote_all") else csv.QUOTE_MINIMAL,
            extrasaction="ignore",
            lineterminator="\n",
        )

        writer.writeheader()
        writer.writerows(results)

        return output.getvalue()
