"""
ORDER BY Pushdown Optimizer

Asks the reader to return rows already sorted. When the reader accepts,
the engine drops its own OrderBy operator, which for a remote table means
rows stream page by page instead of being fetched in full and sorted.
"""

from ghstream.optimizers.base import Optimizer
from ghstream.readers.base import BaseReader
from ghstream.sql.ast_nodes import SelectStatement


class OrderByPushdownOptimizer(Optimizer):
    """
    Push a single-column ORDER BY to the reader

    Multi-column orderings are never pushed; the reader decides whether
    it can serve the column and direction of a single term.
    """

    name = "Order pushdown"

    def __init__(self):
        super().__init__()
        self.consumed = False

    def reset(self) -> None:
        super().reset()
        self.consumed = False

    def can_optimize(self, ast: SelectStatement, reader: BaseReader) -> bool:
        if not ast.order_by or len(ast.order_by) != 1:
            return False
        return reader.supports_order_pushdown()

    def optimize(self, ast: SelectStatement, reader: BaseReader) -> None:
        self.consumed = reader.set_order(ast.order_by)

        if self.consumed:
            self.mark_pushed(str(ast.order_by[0]))
