"""
ghstream - query the GitHub API with SQL

Remote GraphQL connections are exposed as tables. Rows are fetched
lazily, page by page, through a shared rate limiter, and simple
WHERE/ORDER BY clauses are pushed down into the GraphQL query.
"""

__version__ = "0.1.0"

# Main API
from ghstream.core.query import query

__all__ = ["__version__", "query"]
