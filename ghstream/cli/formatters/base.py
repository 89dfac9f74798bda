"""
Base formatter interface for CLI output

All formatters must implement the format() method.
"""

from typing import Any, Dict, List, Optional


class BaseFormatter:
    """Base class for all output formatters"""

    def format(
        self, results: List[Dict[str, Any]], columns: Optional[List[str]] = None, **kwargs
    ) -> str:
        """
        Format query results for output

        Args:
            results: List of result dictionaries
            columns: Column order; taken from the first row when omitted
            **kwargs: Additional formatter-specific options

        Returns:
            Formatted string ready for output
        """
        raise NotImplementedError("Formatters must implement format() method")

    @staticmethod
    def resolve_columns(
        results: List[Dict[str, Any]], columns: Optional[List[str]]
    ) -> List[str]:
        if columns:
            return list(columns)
        if results:
            return list(results[0].keys())
        return []
