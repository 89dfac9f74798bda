"""
Output formatters for CLI

Available formatters:
- TableFormatter: Rich tables for the terminal
- JSONFormatter: Machine-readable JSON
- CSVFormatter: Unix-friendly CSV
- MarkdownFormatter: GitHub Flavored Markdown tables
"""

from ghstream.cli.formatters.base import BaseFormatter
from ghstream.cli.formatters.csv import CSVFormatter
from ghstream.cli.formatters.json import JSONFormatter
from ghstream.cli.formatters.markdown import MarkdownFormatter
from ghstream.cli.formatters.table import TableFormatter

__all__ = ["BaseFormatter", "TableFormatter", "JSONFormatter", "CSVFormatter", "MarkdownFormatter"]

FORMATTERS = {
    "table": TableFormatter,
    "json": JSONFormatter,
    "csv": CSVFormatter,
    "markdown": MarkdownFormatter,
}


def get_formatter(format_name: str) -> BaseFormatter:
    """
    Get formatter by name

    Raises:
        ValueError: If formatter not found
    """
    if format_name not in FORMATTERS:
        available = ", ".join(FORMATTERS.keys())
        raise ValueError(f"Unknown format: {format_name}. Available formats: {available}")

    return FORMATTERS[format_name]()
