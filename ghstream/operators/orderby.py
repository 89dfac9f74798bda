"""
OrderBy Operator

Sorts rows locally when the source could not produce the requested order.
"""

from functools import cmp_to_key
from typing import Any, Dict, Iterator, List

from ghstream.operators.base import Operator
from ghstream.sql.ast_nodes import OrderByColumn


class OrderByOperator(Operator):
    """
    ORDER BY operator

    Sorts all input rows by the given columns. NULLs sort last in
    both directions.

    Note: This operator materializes every row, which for a remote table
    means fetching every page before the first row is returned.
    """

    def __init__(self, source: Operator, order_by: List[OrderByColumn]):
        super().__init__(source)
        self.order_by = order_by

    def __iter__(self) -> Iterator[Dict[str, Any]]:
        rows = list(self.child)
        yield from sorted(rows, key=cmp_to_key(self._compare))

    def _compare(self, left: Dict[str, Any], right: Dict[str, Any]) -> int:
        for order_col in self.order_by:
            a = left.get(order_col.column)
            b = right.get(order_col.column)

            if a == b:
                continue
            if a is None:
                return 1
            if b is None:
                return -1

            result = -1 if a < b else 1
            return -result if order_col.direction == "DESC" else result

        return 0

    def __repr__(self) -> str:
        order_spec = ", ".join(f"{col.column} {col.direction}" for col in self.order_by)
        return f"OrderBy({order_spec})"
