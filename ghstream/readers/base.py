"""
Base reader interface for all row sources

All readers implement this interface to provide a consistent API
for the query engine.
"""

from typing import Any, Dict, Iterator, List, Optional

from ghstream.core.types import Schema
from ghstream.sql.ast_nodes import Condition, OrderByColumn


class BaseReader:
    """
    Base class for all row source readers

    Readers are responsible for:
    1. Yielding rows as dictionaries (lazy evaluation)
    2. Optionally accepting pushed-down WHERE conditions
    3. Optionally accepting a pushed-down ORDER BY
    """

    def read_lazy(self) -> Iterator[Dict[str, Any]]:
        """
        Yield rows as dictionaries

        This is the core method that all readers must implement.
        It should yield one row at a time rather than loading all
        data into memory.

        Yields:
            Dictionary representing one row of data

        Example:
            {'name': 'linux', 'stargazer_count': 170000}
        """
        raise NotImplementedError("Subclasses must implement read_lazy()")

    def supports_pushdown(self) -> bool:
        """
        Does this reader support predicate pushdown?

        If True, the optimizer calls set_filter() with the WHERE
        conditions the reader can evaluate at the source.

        Returns:
            True if predicate pushdown is supported
        """
        return False

    def can_push_condition(self, condition: Condition) -> bool:
        """
        Can this particular condition be evaluated at the source?

        Args:
            condition: A single WHERE condition

        Returns:
            True if the reader would accept it in set_filter()
        """
        return False

    def set_filter(self, conditions: List[Condition]) -> None:
        """
        Set filter conditions for predicate pushdown

        Args:
            conditions: WHERE conditions to apply during read

        Note:
            Only called if supports_pushdown() returns True
        """
        pass

    def get_consumed_conditions(self) -> List[Condition]:
        """
        Pushed conditions the reader guarantees for every row it yields

        The executor does not re-check these in its Filter operator.

        Returns:
            Subset of the conditions passed to set_filter()
        """
        return []

    def supports_order_pushdown(self) -> bool:
        """
        Does this reader support ORDER BY pushdown?

        Returns:
            True if set_order() may be called
        """
        return False

    def set_order(self, order_by: List[OrderByColumn]) -> bool:
        """
        Ask the source to return rows in the given order

        Args:
            order_by: ORDER BY terms

        Returns:
            True if the source will produce this order, so the engine can
            skip its own sort

        Note:
            Only called if supports_order_pushdown() returns True
        """
        return False

    def get_columns(self) -> List[str]:
        """
        Column names returned by SELECT *

        Returns:
            Column names in output order, empty if unknown
        """
        return []

    def get_schema(self) -> Optional[Schema]:
        """
        Get schema information (column names and types)

        Returns:
            Schema object, or None if unknown
        """
        return None

    def __iter__(self):
        """Allow readers to be used directly in for loops"""
        return self.read_lazy()
