"""
Predicate Pushdown Optimizer

Pushes WHERE conditions the reader can evaluate at the source. For a
remote table this is what turns ``WHERE login = 'octocat'`` into the
login variable of the GraphQL query.
"""

from ghstream.optimizers.base import Optimizer
from ghstream.readers.base import BaseReader
from ghstream.sql.ast_nodes import Condition, SelectStatement


class PredicatePushdownOptimizer(Optimizer):
    """
    Push WHERE conditions to the reader

    Only conditions the reader reports as pushable are handed over;
    the rest stay in the engine's Filter operator.
    """

    name = "Predicate pushdown"

    def can_optimize(self, ast: SelectStatement, reader: BaseReader) -> bool:
        if not ast.where:
            return False
        return reader.supports_pushdown()

    def optimize(self, ast: SelectStatement, reader: BaseReader) -> None:
        pushable = self._extract_pushable_conditions(ast.where.conditions, reader)

        if pushable:
            reader.set_filter(pushable)
            self.mark_pushed(", ".join(str(c) for c in pushable))

    def _extract_pushable_conditions(
        self, conditions: list[Condition], reader: BaseReader
    ) -> list[Condition]:
        return [c for c in conditions if reader.can_push_condition(c)]
