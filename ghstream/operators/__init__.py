"""
Volcano-style operators

Scan -> Filter -> OrderBy -> Project -> Limit, each pulling rows from its child.
"""

from ghstream.operators.base import Operator
from ghstream.operators.filter import Filter
from ghstream.operators.limit import Limit
from ghstream.operators.orderby import OrderByOperator
from ghstream.operators.project import Project
from ghstream.operators.scan import Scan

__all__ = ["Operator", "Scan", "Filter", "OrderByOperator", "Project", "Limit"]
