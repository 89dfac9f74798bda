"""
github_starred_repos - repositories starred by a GitHub user

    SELECT name, stargazer_count, starred_at
    FROM github_starred_repos
    WHERE login = 'octocat'
    ORDER BY starred_at DESC

The hidden ``login`` column is a required equality filter; ``starred_at``
can be ordered remotely in either direction. Rows are fetched lazily, one
page of up to 100 edges per request, and every request waits on the shared
rate limiter first.
"""

import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from enum import Enum, IntEnum
from typing import Any, Dict, List, Optional, Tuple

from ghstream.config import MAX_PAGE_SIZE
from ghstream.core.types import DataType, format_timestamp, parse_timestamp
from ghstream.errors import IteratorFailedError, NoCurrentRowError
from ghstream.tables.base import (
    Column,
    ColumnFilter,
    Constraint,
    ConstraintOp,
    OrderBy,
    OrderDirection,
    RowIterator,
    TableFunction,
)

logger = logging.getLogger(__name__)


STARRED_REPOS_QUERY = """
query StarredRepos($login: String!, $perpage: Int!, $startcursor: String, $orderBy: StarOrder) {
  user(login: $login) {
    login
    starredRepositories(first: $perpage, after: $startcursor, orderBy: $orderBy) {
      edges {
        starredAt
        node {
          name
          url
          description
          createdAt
          pushedAt
          updatedAt
          stargazerCount
          nameWithOwner
        }
      }
      pageInfo {
        endCursor
        hasNextPage
      }
    }
  }
}
"""


class StarOrderField(Enum):
    STARRED_AT = "STARRED_AT"


@dataclass(frozen=True)
class StarOrder:
    """Remote ordering for a starred repositories connection"""

    field: StarOrderField
    direction: OrderDirection

    def to_variables(self) -> Dict[str, str]:
        return {"field": self.field.value, "direction": self.direction.value}


@dataclass(frozen=True)
class StarredRepoNode:
    name: str
    url: str
    description: Optional[str]
    created_at: Optional[datetime]
    pushed_at: Optional[datetime]
    updated_at: Optional[datetime]
    stargazer_count: int
    name_with_owner: str

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "StarredRepoNode":
        return cls(
            name=data.get("name") or "",
            url=data.get("url") or "",
            description=data.get("description"),
            created_at=parse_timestamp(data.get("createdAt")),
            pushed_at=parse_timestamp(data.get("pushedAt")),
            updated_at=parse_timestamp(data.get("updatedAt")),
            stargazer_count=int(data.get("stargazerCount") or 0),
            name_with_owner=data.get("nameWithOwner") or "",
        )


@dataclass(frozen=True)
class StarredRepoEdge:
    """A starred repository plus when it was starred"""

    starred_at: Optional[datetime]
    node: StarredRepoNode

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "StarredRepoEdge":
        return cls(
            starred_at=parse_timestamp(data.get("starredAt")),
            node=StarredRepoNode.from_json(data.get("node") or {}),
        )


@dataclass(frozen=True)
class StarredReposPage:
    """One fetched page; replaced wholesale, never extended"""

    edges: Tuple[StarredRepoEdge, ...]
    has_next_page: bool
    end_cursor: Optional[str]


def fetch_starred_repos(
    client,
    login: str,
    per_page: int = MAX_PAGE_SIZE,
    start_cursor: Optional[str] = None,
    order: Optional[StarOrder] = None,
    cancel: Optional[threading.Event] = None,
) -> StarredReposPage:
    """
    Fetch one page of a user's starred repositories

    Args:
        client: Object with ``query(document, variables, cancel=None) -> dict``
        login: GitHub login whose stars to list
        per_page: Page size, 1..100
        start_cursor: endCursor of the previous page, None for the first page
        order: Remote ordering, None for GitHub's default
        cancel: Forwarded to the client

    Returns:
        StarredReposPage with edges in the order GitHub returned them

    Raises:
        ValueError: If login is empty or per_page is out of range
        Any error raised by the client, unchanged
    """
    if not login:
        raise ValueError("login must be a non-empty string")
    if not 1 <= per_page <= MAX_PAGE_SIZE:
        raise ValueError(f"per_page must be between 1 and {MAX_PAGE_SIZE}, got {per_page}")

    variables = {
        "login": login,
        "perpage": per_page,
        "startcursor": start_cursor,
        "orderBy": order.to_variables() if order else None,
    }

    data = client.query(STARRED_REPOS_QUERY, variables, cancel=cancel)

    user = data.get("user")
    if user is None:
        # No such user: nothing to list
        return StarredReposPage(edges=(), has_next_page=False, end_cursor=None)

    connection = user.get("starredRepositories") or {}
    page_info = connection.get("pageInfo") or {}
    edges = tuple(StarredRepoEdge.from_json(e) for e in connection.get("edges") or [])

    return StarredReposPage(
        edges=edges,
        has_next_page=bool(page_info.get("hasNextPage")),
        end_cursor=page_info.get("endCursor"),
    )


class StarredRepoColumn(IntEnum):
    """Column indexes of github_starred_repos"""

    LOGIN = 0
    NAME = 1
    URL = 2
    DESCRIPTION = 3
    CREATED_AT = 4
    PUSHED_AT = 5
    UPDATED_AT = 6
    STARGAZER_COUNT = 7
    NAME_WITH_OWNER = 8
    STARRED_AT = 9


STARRED_REPOS_COLUMNS = [
    Column(
        "login",
        DataType.TEXT,
        hidden=True,
        filters=(ColumnFilter(ConstraintOp.EQ, required=True, omit_check=True),),
    ),
    Column("name", DataType.TEXT),
    Column("url", DataType.TEXT),
    Column("description", DataType.TEXT),
    Column("created_at", DataType.TIMESTAMP),
    Column("pushed_at", DataType.TIMESTAMP),
    Column("updated_at", DataType.TIMESTAMP),
    Column("stargazer_count", DataType.INTEGER, not_null=True),
    Column("name_with_owner", DataType.TEXT),
    Column(
        "starred_at",
        DataType.TIMESTAMP,
        order_by=(OrderDirection.ASC, OrderDirection.DESC),
    ),
]


class StarredReposIterator(RowIterator):
    """
    Lazy row iterator over all pages of a user's stars

    Holds one page at a time. ``position`` starts at -1 so the first
    advance() lands on index 0; running off the end of a page triggers the
    next fetch when the page said more are available.
    """

    def __init__(
        self,
        login: str,
        client,
        rate_limiter,
        order: Optional[StarOrder] = None,
        page_size: int = MAX_PAGE_SIZE,
        cancel: Optional[threading.Event] = None,
    ):
        self.login = login
        self.client = client
        self.rate_limiter = rate_limiter
        self.order = order
        self.page_size = page_size
        self.cancel = cancel

        self.page: Optional[StarredReposPage] = None
        self.position = -1
        self.pages_fetched = 0
        self._failed = False

    def _in_page(self) -> bool:
        return self.page is not None and 0 <= self.position < len(self.page.edges)

    def _fetch_next_page(self) -> None:
        cursor = self.page.end_cursor if self.page is not None else None

        try:
            self.rate_limiter.wait(self.cancel)
            page = fetch_starred_repos(
                self.client,
                self.login,
                self.page_size,
                cursor,
                self.order,
                cancel=self.cancel,
            )
        except Exception:
            self._failed = True
            raise

        self.pages_fetched += 1
        logger.debug(
            "Fetched page %d of starred repos for %s (cursor=%s): %d edges, has_next_page=%s",
            self.pages_fetched,
            self.login,
            cursor,
            len(page.edges),
            page.has_next_page,
        )

        self.page = page
        self.position = 0

    def advance(self) -> bool:
        if self._failed:
            raise IteratorFailedError("iterator cannot be advanced after a failed fetch")

        self.position += 1
        if self._in_page():
            return True

        # Keep fetching while the remote reports more pages; an empty page
        # with hasNextPage set is skipped rather than ending the scan
        while self.page is None or self.page.has_next_page:
            self._fetch_next_page()
            if self._in_page():
                return True

        return False

    def current(self) -> StarredRepoEdge:
        if not self._in_page():
            raise NoCurrentRowError("no current row; call advance() first")
        return self.page.edges[self.position]

    def value_at(self, column_index: int) -> Any:
        edge = self.current()
        node = edge.node
        column = StarredRepoColumn(column_index)

        if column == StarredRepoColumn.LOGIN:
            return self.login
        elif column == StarredRepoColumn.NAME:
            return node.name
        elif column == StarredRepoColumn.URL:
            return node.url
        elif column == StarredRepoColumn.DESCRIPTION:
            return node.description
        elif column == StarredRepoColumn.CREATED_AT:
            return format_timestamp(node.created_at)
        elif column == StarredRepoColumn.PUSHED_AT:
            return format_timestamp(node.pushed_at)
        elif column == StarredRepoColumn.UPDATED_AT:
            return format_timestamp(node.updated_at)
        elif column == StarredRepoColumn.STARGAZER_COUNT:
            return node.stargazer_count
        elif column == StarredRepoColumn.NAME_WITH_OWNER:
            return node.name_with_owner
        elif column == StarredRepoColumn.STARRED_AT:
            return format_timestamp(edge.starred_at)

    def __repr__(self) -> str:
        return f"StarredReposIterator(login={self.login!r}, order={self.order})"


def translate_constraints(
    constraints: List[Constraint], orders: List[OrderBy]
) -> Tuple[Optional[str], Optional[StarOrder]]:
    """
    Map pushed-down constraints and ORDER BY terms to fetch parameters

    The first equality constraint on ``login`` supplies the login. Ordering
    is only translated when there is exactly one term and it is on
    ``starred_at``; anything else falls back to GitHub's default order.

    Returns:
        (login, order) where either may be None
    """
    login = None
    for constraint in constraints:
        if (
            constraint.op == ConstraintOp.EQ
            and constraint.column_index == StarredRepoColumn.LOGIN
        ):
            login = str(constraint.value)
            break

    order = None
    if len(orders) == 1:
        term = orders[0]
        if term.column_index == StarredRepoColumn.STARRED_AT:
            direction = OrderDirection.DESC if term.desc else OrderDirection.ASC
            order = StarOrder(StarOrderField.STARRED_AT, direction)
        else:
            logger.warning(
                "Cannot order github_starred_repos by column #%d remotely; using default order",
                term.column_index,
            )

    return login, order


class StarredReposTable(TableFunction):
    """Table function for github_starred_repos"""

    name = "github_starred_repos"
    columns = STARRED_REPOS_COLUMNS

    def __init__(
        self,
        client,
        rate_limiter,
        page_size: int = MAX_PAGE_SIZE,
        cancel: Optional[threading.Event] = None,
    ):
        """
        Args:
            client: GitHub GraphQL client shared by all scans
            rate_limiter: Process-wide limiter shared by all scans
            page_size: Edges per request, 1..100
            cancel: Event that aborts pending waits and requests
        """
        self.client = client
        self.rate_limiter = rate_limiter
        self.page_size = page_size
        self.cancel = cancel

    def create_iterator(
        self, constraints: List[Constraint], orders: List[OrderBy]
    ) -> StarredReposIterator:
        login, order = translate_constraints(constraints, orders)
        return StarredReposIterator(
            login,
            self.client,
            self.rate_limiter,
            order=order,
            page_size=self.page_size,
            cancel=self.cancel,
        )
