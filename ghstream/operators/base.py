"""
Base operator class for Volcano-style query execution

The Volcano model uses pull-based execution where each operator
pulls data from its child operator on demand. For table functions this
is what keeps remote fetching lazy: a page is only requested when the
root operator asks for a row the current page cannot supply.
"""

from collections.abc import Iterator
from typing import Any, Optional


class Operator:
    """
    Base class for all query operators

    Operators form a chain where:
    - The leaf operator (Scan) reads from a reader
    - Internal operators (Filter, OrderBy, Project) transform rows
    - The root operator is pulled by the executor to get results
    """

    def __init__(self, child: Optional["Operator"] = None):
        """
        Initialize operator

        Args:
            child: Child operator to pull data from (None for leaf operators)
        """
        self.child = child

    def __iter__(self) -> Iterator[dict[str, Any]]:
        """
        Execute operator and yield results

        Yields:
            Rows as dictionaries
        """
        raise NotImplementedError(f"{self.__class__.__name__} must implement __iter__()")

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"
