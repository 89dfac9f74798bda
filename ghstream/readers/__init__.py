"""
Readers - row sources the engine scans
"""

from ghstream.readers.base import BaseReader
from ghstream.readers.table_reader import TableReader

__all__ = ["BaseReader", "TableReader"]
