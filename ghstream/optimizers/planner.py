"""
Query Planner - orchestrates the optimization pipeline
"""

from ghstream.optimizers.base import Optimizer, OptimizerPipeline
from ghstream.optimizers.order_pushdown import OrderByPushdownOptimizer
from ghstream.optimizers.predicate_pushdown import PredicatePushdownOptimizer
from ghstream.readers.base import BaseReader
from ghstream.sql.ast_nodes import SelectStatement


class QueryPlanner:
    """
    Query planner and optimizer orchestrator

    Applies, in order:
    1. Predicate pushdown - required filters reach the table first
    2. Order pushdown - remote sort instead of a local one

    The planner modifies the reader in-place with optimization hints.

    Example:
        ```python
        planner = QueryPlanner()
        planner.optimize(ast, reader)
        print(planner.get_optimization_summary())
        ```
    """

    def __init__(self):
        self.order_pushdown = OrderByPushdownOptimizer()
        self.pipeline = OptimizerPipeline(
            [
                PredicatePushdownOptimizer(),
                self.order_pushdown,
            ]
        )
        self.optimizations_applied: list[str] = []

    def optimize(self, ast: SelectStatement, reader: BaseReader) -> None:
        """
        Apply all applicable optimizations

        Modifies:
            - reader: Sets pushdown hints (filters, order)
            - self.optimizations_applied: List of applied optimizations
        """
        self.pipeline.optimize(ast, reader)
        self.optimizations_applied = self.pipeline.get_applied_optimizations()

    @property
    def order_consumed(self) -> bool:
        """True if the reader took over the query's ORDER BY"""
        return self.order_pushdown.consumed

    def get_optimization_summary(self) -> str:
        return self.pipeline.get_summary()

    def add_optimizer(self, optimizer: Optimizer) -> None:
        """
        Add a custom optimizer to the end of the pipeline

        Example:
            ```python
            planner = QueryPlanner()
            planner.add_optimizer(MyCustomOptimizer())
            ```
        """
        self.pipeline.optimizers.append(optimizer)
