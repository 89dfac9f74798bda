"""
Main Query API - user-facing interface for ghstream

Example:
    >>> from ghstream import query
    >>> results = query().sql(
    ...     "SELECT name, starred_at FROM github_starred_repos "
    ...     "WHERE login = 'octocat' ORDER BY starred_at DESC LIMIT 10"
    ... )
    >>> for row in results:
    ...     print(row)
"""

import logging
import threading
from typing import Any, Dict, Iterator, List, Optional

from ghstream.config import Settings, load_settings
from ghstream.core.executor import Executor
from ghstream.core.types import Schema
from ghstream.github.client import GitHubClient
from ghstream.github.ratelimit import RateLimiter
from ghstream.github.starred_repos import StarredReposTable
from ghstream.readers.table_reader import TableReader
from ghstream.sql.ast_nodes import SelectStatement
from ghstream.sql.parser import parse
from ghstream.tables import TableFunction, TableRegistry

logger = logging.getLogger(__name__)


class Query:
    """
    Main query builder class

    Owns the collaborators every scan shares: one GitHub client and one
    rate limiter, so concurrent result iterators draw on the same request
    budget.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client=None,
        rate_limiter=None,
        cancel: Optional[threading.Event] = None,
    ):
        """
        Initialize query context

        Args:
            settings: Resolved settings; loaded from the environment if omitted
            client: GraphQL client; built from settings if omitted
            rate_limiter: Shared limiter; built from settings if omitted
            cancel: Event that aborts pending rate limit waits and requests

        Example:
            >>> q = Query()
            >>> q = Query(client=my_client, rate_limiter=NoopRateLimiter())
        """
        if settings is None:
            settings = load_settings().settings

        self.settings = settings
        self._owns_client = client is None
        self.client = client if client is not None else GitHubClient.from_settings(settings)
        self.rate_limiter = (
            rate_limiter
            if rate_limiter is not None
            else RateLimiter(settings.per_second, settings.burst)
        )
        self.cancel = cancel
        self.registry = TableRegistry(
            [
                StarredReposTable(
                    self.client,
                    self.rate_limiter,
                    page_size=settings.page_size,
                    cancel=cancel,
                ),
            ]
        )

    def sql(self, query: str) -> "QueryResult":
        """
        Prepare a SQL query

        Parsing and table lookup happen now; no request is made until the
        result is iterated.

        Args:
            query: SQL query string

        Returns:
            QueryResult object that can be iterated over

        Raises:
            ParseError: If the SQL is invalid
            UnknownTableError: If the FROM table is not registered
        """
        ast = parse(query)
        table = self.registry.get(ast.source)
        return QueryResult(ast=ast, table=table, raw_sql=query)

    def tables(self) -> List[TableFunction]:
        """Registered tables, sorted by name"""
        return list(self.registry)

    def schema(self, table_name: str) -> Schema:
        """
        Get column types of a table

        Example:
            >>> print(query().schema("github_starred_repos"))
            Schema(login: TEXT, name: TEXT, ...)
        """
        return self.registry.get(table_name).get_schema()

    def close(self) -> None:
        """Close the HTTP client if this context created it"""
        if self._owns_client:
            self.client.close()

    def __enter__(self) -> "Query":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


class QueryResult:
    """
    Query result - lazy iterator over query results

    Each iteration runs a fresh scan with its own row iterator; pages
    are never cached between iterations.
    """

    def __init__(self, ast: SelectStatement, table: TableFunction, raw_sql: Optional[str] = None):
        self.ast = ast
        self.table = table
        self.raw_sql = raw_sql
        self._executor: Optional[Executor] = None

    def _new_reader(self) -> TableReader:
        return TableReader(self.table)

    def __iter__(self) -> Iterator[Dict[str, Any]]:
        """
        Execute query and yield results lazily

        Yields:
            Result rows as dictionaries
        """
        self._executor = Executor()
        yield from self._executor.execute(self.ast, self._new_reader())

    @property
    def rows_scanned(self) -> int:
        """Rows pulled from the table by the latest iteration, before filtering"""
        return self._executor.rows_scanned if self._executor is not None else 0

    @property
    def columns(self) -> List[str]:
        """Output column names, in order"""
        if self.ast.columns == ["*"]:
            return self.table.visible_columns()
        return list(self.ast.columns)

    def to_list(self) -> List[Dict[str, Any]]:
        """
        Materialize all results into a list

        Example:
            >>> rows = query().sql("SELECT name FROM github_starred_repos WHERE login = 'octocat'").to_list()
        """
        return list(self)

    def to_dataframe(self):
        """
        Materialize all results into a pandas DataFrame

        Raises:
            ImportError: If pandas is not installed
        """
        try:
            import pandas as pd
        except ImportError:
            raise ImportError("Pandas is required for to_dataframe(). Install `ghstream[pandas]`")

        return pd.DataFrame(self.to_list(), columns=self.columns)

    def explain(self) -> str:
        """
        Get query execution plan without fetching anything

        Returns:
            Human-readable execution plan
        """
        return Executor().explain(self.ast, self._new_reader())

    def __repr__(self) -> str:
        return f"QueryResult({self.ast!r})"


def query(
    settings: Optional[Settings] = None,
    client=None,
    rate_limiter=None,
    cancel: Optional[threading.Event] = None,
) -> Query:
    """
    Create a query context

    This is the main entry point for the ghstream API.

    Example:
        >>> from ghstream import query
        >>> rows = query().sql(
        ...     "SELECT name_with_owner FROM github_starred_repos WHERE login = 'octocat'"
        ... ).to_list()
    """
    return Query(settings=settings, client=client, rate_limiter=rate_limiter, cancel=cancel)
