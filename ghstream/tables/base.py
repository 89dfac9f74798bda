"""
Table function interface

A table function is a row source backed by a remote API. It declares its
columns (including hidden filter-only columns), receives the constraints
and ORDER BY terms the planner managed to push down, and hands back a
RowIterator that the engine pulls from one row at a time.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Sequence

from ghstream.core.types import DataType, Schema


class ConstraintOp(Enum):
    """Comparison operators a column filter can accept"""

    EQ = "="
    GT = ">"
    LT = "<"
    GE = ">="
    LE = "<="
    NE = "!="

    @classmethod
    def from_sql(cls, operator: str) -> Optional["ConstraintOp"]:
        """Map a SQL operator token to a ConstraintOp, or None if unknown"""
        for op in cls:
            if op.value == operator:
                return op
        return None


class OrderDirection(Enum):
    ASC = "ASC"
    DESC = "DESC"


@dataclass(frozen=True)
class ColumnFilter:
    """
    A filter a column accepts for pushdown

    Attributes:
        op: Operator the table can evaluate remotely
        required: Table cannot be scanned without this filter
        omit_check: Table guarantees the filter, engine need not re-check it
    """

    op: ConstraintOp
    required: bool = False
    omit_check: bool = False


@dataclass(frozen=True)
class Column:
    """
    Declared table column

    Attributes:
        name: Column name as used in SQL
        type: Declared type of values returned by RowIterator.value_at()
        not_null: Values are never None
        hidden: Excluded from SELECT *; typically a filter-only parameter
        filters: Filters the table can push to the remote API
        order_by: Directions the remote API can sort this column by
    """

    name: str
    type: DataType
    not_null: bool = False
    hidden: bool = False
    filters: Sequence[ColumnFilter] = field(default_factory=tuple)
    order_by: Sequence[OrderDirection] = field(default_factory=tuple)

    def accepts(self, op: ConstraintOp) -> Optional[ColumnFilter]:
        """Return the filter declaration for an operator, if any"""
        for column_filter in self.filters:
            if column_filter.op == op:
                return column_filter
        return None

    def orderable(self, direction: OrderDirection) -> bool:
        return direction in self.order_by


@dataclass(frozen=True)
class Constraint:
    """A pushed-down predicate: columns[column_index] op value"""

    column_index: int
    op: ConstraintOp
    value: Any

    def __repr__(self) -> str:
        return f"Constraint(#{self.column_index} {self.op.value} {self.value!r})"


@dataclass(frozen=True)
class OrderBy:
    """A pushed-down ORDER BY term"""

    column_index: int
    desc: bool = False


class RowIterator(ABC):
    """
    Pull-based cursor over a table's rows

    Usage:
        while it.advance():
            values = [it.value_at(i) for i in range(n)]

    advance() returns False at end-of-data; failures are raised. After an
    exception an iterator must not be advanced again.
    """

    @abstractmethod
    def advance(self) -> bool:
        """
        Move to the next row

        Returns:
            True if a row is now current, False once the rows are exhausted
        """
        pass

    @abstractmethod
    def value_at(self, column_index: int) -> Any:
        """
        Value of a column in the current row

        Args:
            column_index: Index into the table's declared columns

        Returns:
            A value of the column's declared type, or None
        """
        pass


class TableFunction(ABC):
    """Base class for remote-backed tables"""

    #: Name used in FROM clauses
    name: str = ""

    #: Declared columns, in index order
    columns: List[Column] = []

    @abstractmethod
    def create_iterator(
        self, constraints: List[Constraint], orders: List[OrderBy]
    ) -> RowIterator:
        """
        Build an iterator for one scan

        Args:
            constraints: Pushed-down predicates (always includes required filters)
            orders: Pushed-down ORDER BY terms, possibly empty

        Returns:
            A fresh iterator; no remote call has been made yet
        """
        pass

    def column_index(self, name: str) -> Optional[int]:
        """Index of a column by name (case-insensitive), or None"""
        lowered = name.lower()
        for i, column in enumerate(self.columns):
            if column.name.lower() == lowered:
                return i
        return None

    def visible_columns(self) -> List[str]:
        """Columns returned by SELECT *"""
        return [c.name for c in self.columns if not c.hidden]

    def required_columns(self) -> List[int]:
        """Indexes of columns with a required filter"""
        return [
            i for i, c in enumerate(self.columns) if any(f.required for f in c.filters)
        ]

    def get_schema(self) -> Schema:
        return Schema({c.name: c.type for c in self.columns})

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.name})"
