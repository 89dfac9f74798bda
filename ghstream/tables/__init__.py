"""
Table functions and the registry that resolves FROM clauses
"""

from typing import Dict, Iterable, List

from ghstream.errors import UnknownTableError
from ghstream.tables.base import (
    Column,
    ColumnFilter,
    Constraint,
    ConstraintOp,
    OrderBy,
    OrderDirection,
    RowIterator,
    TableFunction,
)


class TableRegistry:
    """Name -> TableFunction lookup (case-insensitive)"""

    def __init__(self, tables: Iterable[TableFunction] = ()):
        self._tables: Dict[str, TableFunction] = {}
        for table in tables:
            self.register(table)

    def register(self, table: TableFunction) -> None:
        self._tables[table.name.lower()] = table

    def get(self, name: str) -> TableFunction:
        """
        Resolve a table name

        Raises:
            UnknownTableError: If no table is registered under that name
        """
        table = self._tables.get(name.lower())
        if table is None:
            available = ", ".join(sorted(self._tables)) or "none"
            raise UnknownTableError(f"Unknown table '{name}'. Available tables: {available}")
        return table

    def names(self) -> List[str]:
        return sorted(self._tables)

    def __contains__(self, name: str) -> bool:
        return name.lower() in self._tables

    def __iter__(self):
        return iter(self._tables[name] for name in self.names())


__all__ = [
    "Column",
    "ColumnFilter",
    "Constraint",
    "ConstraintOp",
    "OrderBy",
    "OrderDirection",
    "RowIterator",
    "TableFunction",
    "TableRegistry",
]
