"""
Project operator - implements SELECT column list

Selects specific columns from rows (or the visible columns with *).
"""

from typing import Any, Dict, Iterator, List

from ghstream.operators.base import Operator


class Project(Operator):
    """
    Project operator - selects columns (SELECT clause)

    Source rows carry every table column, including hidden ones such as
    ``login``; ``*`` expands to the visible columns only.
    """

    def __init__(self, child: Operator, columns: List[str], star_columns: List[str]):
        """
        Initialize project operator

        Args:
            child: Child operator to pull rows from
            columns: Column names to select, or ['*']
            star_columns: What '*' expands to
        """
        super().__init__(child)
        self.columns = list(star_columns) if columns == ["*"] else columns

    def __iter__(self) -> Iterator[Dict[str, Any]]:
        for row in self.child:
            yield {col: row.get(col) for col in self.columns}

    def __repr__(self) -> str:
        col_str = ", ".join(self.columns)
        return f"Project({col_str})"
