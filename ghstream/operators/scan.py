"""
Scan operator - reads rows from a reader

This is a leaf operator (has no child).
"""

from collections.abc import Iterator
from typing import Any

from ghstream.operators.base import Operator
from ghstream.readers.base import BaseReader


class Scan(Operator):
    """
    Scan operator - wrapper around a row source reader

    Counts rows pulled from the source, as opposed to how many survived
    the plan; reported by the CLI --time footer.
    """

    def __init__(self, reader: BaseReader):
        super().__init__(child=None)
        self.reader = reader
        self.rows_scanned = 0

    def __iter__(self) -> Iterator[dict[str, Any]]:
        for row in self.reader.read_lazy():
            self.rows_scanned += 1
            yield row

    def __repr__(self) -> str:
        return f"Scan({self.reader!r})"
