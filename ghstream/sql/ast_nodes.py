"""
AST (Abstract Syntax Tree) node definitions for SQL queries

These dataclasses represent the parsed structure of the supported
SELECT subset: column list, one table, AND-ed WHERE conditions,
ORDER BY and LIMIT.
"""

from dataclasses import dataclass
from typing import Any


@dataclass
class Condition:
    """A single WHERE condition: column operator value"""

    column: str
    operator: str  # '=', '>', '<', '>=', '<=', '!='
    value: Any

    def __repr__(self) -> str:
        return f"{self.column} {self.operator} {self.value!r}"


@dataclass
class WhereClause:
    """WHERE clause containing multiple conditions"""

    conditions: list[Condition]

    def __repr__(self) -> str:
        return " AND ".join(str(c) for c in self.conditions)


@dataclass
class OrderByColumn:
    """
    Represents a column in ORDER BY clause

    Examples:
        starred_at DESC, name ASC
    """

    column: str
    direction: str = "ASC"  # 'ASC' or 'DESC', default ASC

    def __repr__(self) -> str:
        return f"{self.column} {self.direction}"


@dataclass
class SelectStatement:
    """
    Represents a complete SELECT statement

    Examples:
        SELECT * FROM github_starred_repos WHERE login = 'octocat'
        SELECT name, starred_at FROM github_starred_repos
            WHERE login = 'octocat' ORDER BY starred_at DESC LIMIT 10
    """

    columns: list[str]  # ['*'] for all columns, or specific column names
    source: str  # Table name (FROM clause)
    where: WhereClause | None = None
    order_by: list[OrderByColumn] | None = None
    limit: int | None = None

    def __repr__(self) -> str:
        parts = [f"SELECT {', '.join(self.columns)}"]
        parts.append(f"FROM {self.source}")
        if self.where:
            parts.append(f"WHERE {self.where}")
        if self.order_by:
            parts.append(f"ORDER BY {', '.join(str(col) for col in self.order_by)}")
        if self.limit is not None:
            parts.append(f"LIMIT {self.limit}")
        return " ".join(parts)
