"""
Query Optimizers - push work from the engine down to row sources

- Base classes: Optimizer, OptimizerPipeline
- Rules: PredicatePushdownOptimizer, OrderByPushdownOptimizer
- QueryPlanner: applies the rules in order

Example:
    ```python
    from ghstream.optimizers import QueryPlanner

    planner = QueryPlanner()
    planner.optimize(ast, reader)
    print(planner.get_optimization_summary())
    ```
"""

from ghstream.optimizers.base import Optimizer, OptimizerPipeline
from ghstream.optimizers.order_pushdown import OrderByPushdownOptimizer
from ghstream.optimizers.planner import QueryPlanner
from ghstream.optimizers.predicate_pushdown import PredicatePushdownOptimizer

__all__ = [
    "Optimizer",
    "OptimizerPipeline",
    "QueryPlanner",
    "PredicatePushdownOptimizer",
    "OrderByPushdownOptimizer",
]
