"""
Query Executor - builds and executes operator trees from AST

Takes a parsed SQL AST and a reader, lets the planner push work down
to the reader, then builds the remaining operators on top of it using
the Volcano pull-based model.
"""

import logging
from typing import Any, Dict, Iterator, Optional

from ghstream.operators.base import Operator
from ghstream.operators.filter import Filter
from ghstream.operators.limit import Limit
from ghstream.operators.orderby import OrderByOperator
from ghstream.operators.project import Project
from ghstream.operators.scan import Scan
from ghstream.optimizers import QueryPlanner
from ghstream.readers.base import BaseReader
from ghstream.sql.ast_nodes import SelectStatement

logger = logging.getLogger(__name__)


class Executor:
    """
    Query executor - builds operator tree from AST

    Operator tree is built bottom-up:
        Limit (root)
          ↓
        Project
          ↓
        OrderBy   (omitted when the reader consumed the ORDER BY)
          ↓
        Filter    (only conditions the reader does not guarantee)
          ↓
        Scan (leaf)
          ↓
        Reader
    """

    def __init__(self):
        self.planner = QueryPlanner()
        self.scan: Optional[Scan] = None

    def execute(self, ast: SelectStatement, reader: BaseReader) -> Iterator[Dict[str, Any]]:
        """
        Execute query and return iterator over results

        Args:
            ast: Parsed SELECT statement
            reader: Row source for the FROM table

        Returns:
            Iterator over result rows

        Example:
            >>> ast = parse("SELECT name FROM github_starred_repos WHERE login = 'octocat'")
            >>> for row in Executor().execute(ast, reader):
            ...     print(row)
        """
        plan = self.build_plan(ast, reader)
        yield from plan

    def build_plan(self, ast: SelectStatement, reader: BaseReader) -> Operator:
        """
        Optimize, validate column names, and build the operator tree

        Raises:
            ValueError: If the query references a column the reader does not have
        """
        self._validate_columns(ast, reader)
        self.planner.optimize(ast, reader)

        self.scan = Scan(reader)
        plan: Operator = self.scan

        if ast.where:
            consumed = reader.get_consumed_conditions()
            remaining = [c for c in ast.where.conditions if c not in consumed]
            if remaining:
                plan = Filter(plan, remaining)

        if ast.order_by and not self.planner.order_consumed:
            plan = OrderByOperator(plan, ast.order_by)

        plan = Project(plan, ast.columns, reader.get_columns())

        if ast.limit is not None:
            plan = Limit(plan, ast.limit)

        logger.debug("Plan for %r: %s", ast, self._format_plan(plan).replace("\n", " <- "))
        return plan

    def _validate_columns(self, ast: SelectStatement, reader: BaseReader) -> None:
        schema = reader.get_schema()
        if schema is None:
            return

        referenced = [c for c in ast.columns if c != "*"]
        if ast.where:
            referenced.extend(c.column for c in ast.where.conditions)
        if ast.order_by:
            referenced.extend(o.column for o in ast.order_by)

        for column in referenced:
            schema.validate_column(column)

    @property
    def rows_scanned(self) -> int:
        """Rows the source produced for the most recently built plan"""
        return self.scan.rows_scanned if self.scan is not None else 0

    def explain(self, ast: SelectStatement, reader: BaseReader) -> str:
        """
        Explain query execution plan

        Example output:
            Query Plan:
            ========================================
            Limit(10)
              Project(name, starred_at)
                Scan(TableReader(github_starred_repos))

            Optimizations applied:
              - Predicate pushdown: login = 'octocat'
              - Order pushdown: starred_at DESC
        """
        plan = self.build_plan(ast, reader)

        output = ["Query Plan:", "=" * 40]
        output.append(self._format_plan(plan))
        output.append("")
        output.append(self.planner.get_optimization_summary())

        return "\n".join(output)

    def _format_plan(self, operator: Operator, indent: int = 0) -> str:
        lines = []
        prefix = "  " * indent

        lines.append(f"{prefix}{operator}")

        if operator.child is not None:
            lines.append(self._format_plan(operator.child, indent + 1))

        return "\n".join(lines)
