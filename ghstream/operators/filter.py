"""
Filter operator - implements WHERE clause

Evaluates conditions and only yields rows that match.
"""

from collections.abc import Iterator
from typing import Any

from ghstream.operators.base import Operator
from ghstream.sql.ast_nodes import Condition


class Filter(Operator):
    """
    Filter operator - evaluates WHERE conditions

    Pulls rows from child and only yields those that satisfy
    all conditions (AND logic). Conditions the source already
    guarantees are not passed here.
    """

    def __init__(self, child: Operator, conditions: list[Condition]):
        super().__init__(child)
        self.conditions = conditions

    def __iter__(self) -> Iterator[dict[str, Any]]:
        for row in self.child:
            if self._matches(row):
                yield row

    def _matches(self, row: dict[str, Any]) -> bool:
        return all(self._evaluate_condition(row, c) for c in self.conditions)

    def _evaluate_condition(self, row: dict[str, Any], condition: Condition) -> bool:
        """
        Evaluate a single condition against a row

        NULLs never match, and neither do comparisons between
        incompatible types (e.g. text against a number).
        """
        value = row.get(condition.column)
        if value is None:
            return False

        expected = condition.value
        op = condition.operator

        try:
            if op == "=":
                return value == expected
            elif op == ">":
                return value > expected
            elif op == "<":
                return value < expected
            elif op == ">=":
                return value >= expected
            elif op == "<=":
                return value <= expected
            elif op == "!=":
                return value != expected
            else:
                raise ValueError(f"Unsupported operator: {op}")
        except TypeError:
            return False

    def __repr__(self) -> str:
        cond_str = " AND ".join(str(c) for c in self.conditions)
        return f"Filter({cond_str})"
