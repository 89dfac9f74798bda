"""
SQL parsing for the supported SELECT subset
"""

from ghstream.sql.parser import ParseError, parse

__all__ = ["ParseError", "parse"]
