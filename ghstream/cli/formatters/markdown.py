"""
Markdown formatter for sharing results in issues and pull requests
"""

from typing import Any, Optional

from ghstream.cli.formatters.base import BaseFormatter


def _cell(value: Any) -> str:
    if value is None:
        return "_NULL_"
    return str(value).replace("|", "\\|").replace("\n", " ")


class MarkdownFormatter(BaseFormatter):
    """Format results as a GitHub Flavored Markdown table"""

    def format(
        self, results: list[dict[str, Any]], columns: Optional[list[str]] = None, **kwargs
    ) -> str:
        """
        Format results as a Markdown table

        Args:
            results: List of result dictionaries
            columns: Column order
            **kwargs: Options like 'show_footer'

        Returns:
            Markdown formatted table string
        """
        if not results:
            return "_No results found._"

        keys = self.resolve_columns(results, columns)

        lines = [
            "| " + " | ".join(keys) + " |",
            "| " + " | ".join(":---" for _ in keys) + " |",
        ]
        for row in results:
            lines.append("| " + " | ".join(_cell(row.get(k)) for k in keys) + " |")

        output = "\n".join(lines)

        if kwargs.get("show_footer", True):
            row_count = len(results)
            output += f"\n\n_{row_count} row{'s' if row_count != 1 else ''}_"

        return output
