"""
JSON formatter for machine-readable output
"""

import json
from typing import Any, Optional

from ghstream.cli.formatters.base import BaseFormatter


class JSONFormatter(BaseFormatter):
    """Format results as a JSON array of objects"""

    def format(
        self, results: list[dict[str, Any]], columns: Optional[list[str]] = None, **kwargs
    ) -> str:
        """
        Format results as JSON

        Args:
            results: List of result dictionaries
            columns: Key order for each object
            **kwargs: Options like 'compact', 'indent'

        Returns:
            JSON string; NULLs become null
        """
        keys = self.resolve_columns(results, columns)
        ordered = [{k: row.get(k) for k in keys} for row in results]

        if kwargs.get("compact", False):
            return json.dumps(ordered, separators=(",", ":"), ensure_ascii=False)

        indent = kwargs.get("indent", 2)
        return json.dumps(ordered, indent=indent, ensure_ascii=False)
