"""
Table Reader - adapts a TableFunction to the reader interface

Translates pushed-down WHERE conditions and ORDER BY terms into the
table's Constraint/OrderBy descriptors, then drives the table's
RowIterator and turns each current row into a dictionary.
"""

import logging
from typing import Any, Dict, Iterator, List

from ghstream.core.types import Schema
from ghstream.errors import MissingConstraintError
from ghstream.readers.base import BaseReader
from ghstream.sql.ast_nodes import Condition, OrderByColumn
from ghstream.tables.base import (
    Constraint,
    ConstraintOp,
    OrderBy,
    OrderDirection,
    TableFunction,
)

logger = logging.getLogger(__name__)


class TableReader(BaseReader):
    """
    Reader over a remote-backed table function

    Example:
        reader = TableReader(StarredReposTable(client, limiter))
        reader.set_filter([Condition("login", "=", "octocat")])
        for row in reader:
            print(row["name"])
    """

    def __init__(self, table: TableFunction):
        """
        Initialize table reader

        Args:
            table: Table function to scan
        """
        self.table = table
        self.filter_conditions: List[Condition] = []
        self.constraints: List[Constraint] = []
        self.consumed_conditions: List[Condition] = []
        self.orders: List[OrderBy] = []

    def supports_pushdown(self) -> bool:
        return True

    def can_push_condition(self, condition: Condition) -> bool:
        index = self.table.column_index(condition.column)
        op = ConstraintOp.from_sql(condition.operator)
        if index is None or op is None:
            return False
        return self.table.columns[index].accepts(op) is not None

    def set_filter(self, conditions: List[Condition]) -> None:
        """Translate pushable conditions into table constraints"""
        self.filter_conditions = conditions
        self.constraints = []
        self.consumed_conditions = []

        for condition in conditions:
            if not self.can_push_condition(condition):
                continue

            index = self.table.column_index(condition.column)
            op = ConstraintOp.from_sql(condition.operator)
            self.constraints.append(Constraint(column_index=index, op=op, value=condition.value))

            if self.table.columns[index].accepts(op).omit_check:
                self.consumed_conditions.append(condition)

    def get_consumed_conditions(self) -> List[Condition]:
        return list(self.consumed_conditions)

    def supports_order_pushdown(self) -> bool:
        return True

    def set_order(self, order_by: List[OrderByColumn]) -> bool:
        """
        Push a single-column ORDER BY to the table

        Only one term on a column that declares the requested direction
        can be consumed; anything else is left to the engine.
        """
        self.orders = []

        if len(order_by) != 1:
            return False

        term = order_by[0]
        index = self.table.column_index(term.column)
        if index is None:
            return False

        direction = OrderDirection(term.direction)
        if not self.table.columns[index].orderable(direction):
            return False

        self.orders = [OrderBy(column_index=index, desc=direction == OrderDirection.DESC)]
        return True

    def _check_required(self) -> None:
        constrained = {c.column_index for c in self.constraints if c.op == ConstraintOp.EQ}
        for index in self.table.required_columns():
            if index not in constrained:
                column = self.table.columns[index].name
                raise MissingConstraintError(
                    f"{self.table.name} requires an equality filter on '{column}', "
                    f"e.g. WHERE {column} = '...'"
                )

    def read_lazy(self) -> Iterator[Dict[str, Any]]:
        """
        Yield rows from the table lazily

        The first remote call happens on the first pulled row, not here.

        Raises:
            MissingConstraintError: If a required filter was not pushed down
        """
        self._check_required()

        iterator = self.table.create_iterator(list(self.constraints), list(self.orders))
        names = [c.name for c in self.table.columns]

        while iterator.advance():
            yield {name: iterator.value_at(i) for i, name in enumerate(names)}

    def get_columns(self) -> List[str]:
        return self.table.visible_columns()

    def get_schema(self) -> Schema:
        return self.table.get_schema()

    def __repr__(self) -> str:
        return f"TableReader({self.table.name})"
