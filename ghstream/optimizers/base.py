"""
Base classes for pushdown rules

A rule looks at the parsed query and offers part of it (WHERE conditions,
ORDER BY) to the reader before the first row is pulled. Whatever the
reader accepts is recorded so EXPLAIN can show what GitHub does for us.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ghstream.readers.base import BaseReader
from ghstream.sql.ast_nodes import SelectStatement


class Optimizer(ABC):
    """
    A single pushdown rule

    ``pushed`` holds a short description of what the reader took over
    during the last run, or None when the rule did not fire.
    """

    #: Label used in the EXPLAIN summary
    name: str = ""

    def __init__(self):
        self.pushed: Optional[str] = None

    @abstractmethod
    def can_optimize(self, ast: SelectStatement, reader: BaseReader) -> bool:
        """Does the query have something this rule could hand to the reader?"""
        pass

    @abstractmethod
    def optimize(self, ast: SelectStatement, reader: BaseReader) -> None:
        """
        Offer the work to the reader

        Implementations call mark_pushed() only if the reader accepted it.
        """
        pass

    def mark_pushed(self, description: str) -> None:
        self.pushed = description

    def reset(self) -> None:
        self.pushed = None


class OptimizerPipeline:
    """Runs pushdown rules in order against one query and reader"""

    def __init__(self, optimizers: List[Optimizer]):
        self.optimizers = optimizers

    def optimize(self, ast: SelectStatement, reader: BaseReader) -> None:
        for optimizer in self.optimizers:
            optimizer.reset()
            if optimizer.can_optimize(ast, reader):
                optimizer.optimize(ast, reader)

    def get_applied_optimizations(self) -> List[str]:
        return [
            f"{opt.name}: {opt.pushed}" for opt in self.optimizers if opt.pushed is not None
        ]

    def get_summary(self) -> str:
        """
        Summary for EXPLAIN output, e.g.::

            Optimizations applied:
              - Predicate pushdown: login = 'octocat'
        """
        applied = self.get_applied_optimizations()
        if not applied:
            return "No optimizations applied"

        return "\n".join(["Optimizations applied:"] + [f"  - {desc}" for desc in applied])
