"""
Tests for the github_starred_repos table function
"""

import logging
import threading

import pytest

from ghstream.errors import (
    GitHubAPIError,
    IteratorFailedError,
    NoCurrentRowError,
    RateLimitWaitError,
)
from ghstream.github.starred_repos import (
    STARRED_REPOS_COLUMNS,
    StarOrder,
    StarOrderField,
    StarredRepoColumn,
    StarredReposIterator,
    StarredReposTable,
    fetch_starred_repos,
    translate_constraints,
)
from ghstream.tables.base import Constraint, ConstraintOp, OrderBy, OrderDirection
from tests.fakes import FakeGraphQLClient, make_edge, make_pages, make_response


def drain(iterator, column=StarredRepoColumn.NAME):
    values = []
    while iterator.advance():
        values.append(iterator.value_at(column))
    return values


class TestFetchStarredRepos:
    """Test the single-page fetch"""

    def test_variables(self):
        """Test the variables sent with the query"""
        client = FakeGraphQLClient([make_response([make_edge(1)])])
        order = StarOrder(StarOrderField.STARRED_AT, OrderDirection.DESC)

        fetch_starred_repos(client, "octocat", 50, "abc", order)

        assert client.calls == [
            {
                "login": "octocat",
                "perpage": 50,
                "startcursor": "abc",
                "orderBy": {"field": "STARRED_AT", "direction": "DESC"},
            }
        ]

    def test_default_order_is_null(self):
        """Test that no order sends a null orderBy"""
        client = FakeGraphQLClient([make_response([])])

        fetch_starred_repos(client, "octocat")

        assert client.calls[0]["orderBy"] is None
        assert client.calls[0]["startcursor"] is None
        assert client.calls[0]["perpage"] == 100

    def test_parses_page(self):
        """Test decoding edges and page info"""
        client = FakeGraphQLClient(
            [make_response([make_edge(1), make_edge(2)], has_next_page=True, end_cursor="c2")]
        )

        page = fetch_starred_repos(client, "octocat")

        assert len(page.edges) == 2
        assert page.has_next_page is True
        assert page.end_cursor == "c2"
        assert page.edges[0].node.name_with_owner == "owner/repo-1"
        assert page.edges[1].node.stargazer_count == 20

    def test_unknown_user(self):
        """Test that a null user is an empty final page"""
        client = FakeGraphQLClient([{"user": None}])

        page = fetch_starred_repos(client, "nobody")

        assert page.edges == ()
        assert page.has_next_page is False

    def test_invalid_arguments(self):
        """Test argument validation happens before any request"""
        client = FakeGraphQLClient([])

        with pytest.raises(ValueError):
            fetch_starred_repos(client, "")
        with pytest.raises(ValueError):
            fetch_starred_repos(client, "octocat", per_page=0)
        with pytest.raises(ValueError):
            fetch_starred_repos(client, "octocat", per_page=101)

        assert client.calls == []


class TestStarredReposIterator:
    """Test lazy pagination"""

    def test_140_rows_two_pages(self, client_140, limiter):
        """Test 100 + 40 rows with exactly two requests and two waits"""
        iterator = StarredReposIterator("octocat", client_140, limiter)

        names = drain(iterator)

        assert names == [f"repo-{i}" for i in range(140)]
        assert len(client_140.calls) == 2
        assert limiter.waits == 2
        assert client_140.calls[0]["startcursor"] is None
        assert client_140.calls[1]["startcursor"] == "cursor-100"

    def test_no_request_before_advance(self, client_140, limiter):
        """Test that creating an iterator does not fetch"""
        StarredReposIterator("octocat", client_140, limiter)

        assert client_140.calls == []
        assert limiter.waits == 0

    def test_page_fetched_only_when_needed(self, client_140, limiter):
        """Test the second page is requested on the 101st advance"""
        iterator = StarredReposIterator("octocat", client_140, limiter)

        for _ in range(100):
            assert iterator.advance()
        assert len(client_140.calls) == 1

        assert iterator.advance()
        assert len(client_140.calls) == 2
        assert iterator.value_at(StarredRepoColumn.NAME) == "repo-100"

    def test_end_signal_without_refetch(self, client_140, limiter):
        """Test that exhausted iterators keep returning False without fetching"""
        iterator = StarredReposIterator("octocat", client_140, limiter)
        drain(iterator)

        assert iterator.advance() is False
        assert iterator.advance() is False
        assert len(client_140.calls) == 2
        assert limiter.waits == 2

    def test_empty_result(self, limiter):
        """Test a user with no stars"""
        client = FakeGraphQLClient([make_response([])])
        iterator = StarredReposIterator("octocat", client, limiter)

        assert iterator.advance() is False
        assert len(client.calls) == 1

    def test_empty_page_with_next_page(self, limiter):
        """Test that an empty page reporting more pages keeps fetching"""
        client = FakeGraphQLClient(
            [
                make_response([], has_next_page=True, end_cursor="c0"),
                make_response([make_edge(7)]),
            ]
        )
        iterator = StarredReposIterator("octocat", client, limiter)

        assert drain(iterator) == ["repo-7"]
        assert len(client.calls) == 2
        assert client.calls[1]["startcursor"] == "c0"

    def test_error_on_second_page(self, limiter):
        """Test that a failed fetch surfaces after the first page's rows"""
        responses = make_pages(140)[:1] + [GitHubAPIError("boom", status_code=502)]
        client = FakeGraphQLClient(responses)
        iterator = StarredReposIterator("octocat", client, limiter)

        for _ in range(100):
            assert iterator.advance()

        with pytest.raises(GitHubAPIError):
            iterator.advance()

        with pytest.raises(IteratorFailedError):
            iterator.advance()
        assert len(client.calls) == 2

    def test_cancelled_wait(self, client_140, limiter):
        """Test that a set cancel event aborts before any request"""
        cancel = threading.Event()
        cancel.set()
        iterator = StarredReposIterator("octocat", client_140, limiter, cancel=cancel)

        with pytest.raises(RateLimitWaitError):
            iterator.advance()
        assert client_140.calls == []

    def test_value_at_is_idempotent(self, limiter):
        """Test that reading a column twice gives the same value"""
        client = FakeGraphQLClient([make_response([make_edge(3)])])
        iterator = StarredReposIterator("octocat", client, limiter)
        iterator.advance()

        for column in StarredRepoColumn:
            assert iterator.value_at(column) == iterator.value_at(column)

    def test_projection(self, limiter):
        """Test every column of a row"""
        edge = make_edge(4, starred_at="2022-03-04T05:06:07.250Z")
        client = FakeGraphQLClient([make_response([edge])])
        iterator = StarredReposIterator("octocat", client, limiter)
        iterator.advance()

        assert iterator.value_at(StarredRepoColumn.LOGIN) == "octocat"
        assert iterator.value_at(StarredRepoColumn.NAME) == "repo-4"
        assert iterator.value_at(StarredRepoColumn.URL) == "https://github.com/owner/repo-4"
        assert iterator.value_at(StarredRepoColumn.DESCRIPTION) == "Repository number 4"
        assert iterator.value_at(StarredRepoColumn.CREATED_AT) == "2020-01-01T00:00:00Z"
        assert iterator.value_at(StarredRepoColumn.PUSHED_AT) == "2021-06-01T12:30:00Z"
        assert iterator.value_at(StarredRepoColumn.UPDATED_AT) == "2021-06-02T08:00:00Z"
        assert iterator.value_at(StarredRepoColumn.STARGAZER_COUNT) == 40
        assert iterator.value_at(StarredRepoColumn.NAME_WITH_OWNER) == "owner/repo-4"
        assert iterator.value_at(StarredRepoColumn.STARRED_AT) == "2022-03-04T05:06:07.25Z"

    def test_zero_and_missing_timestamps(self, limiter):
        """Test that zero and missing timestamps project as None"""
        edge = make_edge(1, pushedAt="0001-01-01T00:00:00Z", updatedAt=None, description=None)
        client = FakeGraphQLClient([make_response([edge])])
        iterator = StarredReposIterator("octocat", client, limiter)
        iterator.advance()

        assert iterator.value_at(StarredRepoColumn.PUSHED_AT) is None
        assert iterator.value_at(StarredRepoColumn.UPDATED_AT) is None
        assert iterator.value_at(StarredRepoColumn.DESCRIPTION) is None
        assert iterator.value_at(StarredRepoColumn.CREATED_AT) == "2020-01-01T00:00:00Z"

    def test_value_at_before_advance(self, client_140, limiter):
        """Test reading without a current row"""
        iterator = StarredReposIterator("octocat", client_140, limiter)

        with pytest.raises(NoCurrentRowError):
            iterator.value_at(StarredRepoColumn.NAME)

    def test_order_and_page_size_forwarded(self, limiter):
        """Test the iterator passes its order and page size to every request"""
        client = FakeGraphQLClient(make_pages(5, page_size=2))
        order = StarOrder(StarOrderField.STARRED_AT, OrderDirection.ASC)
        iterator = StarredReposIterator("octocat", client, limiter, order=order, page_size=2)

        assert len(drain(iterator)) == 5
        assert len(client.calls) == 3
        assert all(c["perpage"] == 2 for c in client.calls)
        assert all(c["orderBy"] == {"field": "STARRED_AT", "direction": "ASC"} for c in client.calls)


class TestTranslateConstraints:
    """Test mapping of pushed constraints and orders"""

    def test_login(self):
        login, order = translate_constraints(
            [Constraint(StarredRepoColumn.LOGIN, ConstraintOp.EQ, "octocat")], []
        )

        assert login == "octocat"
        assert order is None

    def test_first_login_wins(self):
        login, _ = translate_constraints(
            [
                Constraint(StarredRepoColumn.LOGIN, ConstraintOp.EQ, "first"),
                Constraint(StarredRepoColumn.LOGIN, ConstraintOp.EQ, "second"),
            ],
            [],
        )

        assert login == "first"

    def test_non_string_login(self):
        """Test that a numeric login value is used as text"""
        login, _ = translate_constraints(
            [Constraint(StarredRepoColumn.LOGIN, ConstraintOp.EQ, 1234)], []
        )

        assert login == "1234"

    def test_no_login(self):
        login, _ = translate_constraints(
            [Constraint(StarredRepoColumn.NAME, ConstraintOp.EQ, "x")], []
        )

        assert login is None

    @pytest.mark.parametrize(
        "desc,direction", [(False, OrderDirection.ASC), (True, OrderDirection.DESC)]
    )
    def test_starred_at_order(self, desc, direction):
        _, order = translate_constraints([], [OrderBy(StarredRepoColumn.STARRED_AT, desc=desc)])

        assert order == StarOrder(StarOrderField.STARRED_AT, direction)

    def test_multiple_orders_ignored(self):
        _, order = translate_constraints(
            [],
            [
                OrderBy(StarredRepoColumn.STARRED_AT),
                OrderBy(StarredRepoColumn.NAME),
            ],
        )

        assert order is None

    def test_unsupported_order_logs_warning(self, caplog):
        with caplog.at_level(logging.WARNING, logger="ghstream"):
            _, order = translate_constraints([], [OrderBy(StarredRepoColumn.NAME)])

        assert order is None
        assert "default order" in caplog.text


class TestStarredReposTable:
    """Test the table declaration"""

    def test_columns(self):
        names = [c.name for c in STARRED_REPOS_COLUMNS]

        assert names[StarredRepoColumn.LOGIN] == "login"
        assert names[StarredRepoColumn.STARRED_AT] == "starred_at"
        assert len(names) == len(StarredRepoColumn)

    def test_login_is_hidden_and_required(self, client_140, limiter):
        table = StarredReposTable(client_140, limiter)

        assert "login" not in table.visible_columns()
        assert table.required_columns() == [StarredRepoColumn.LOGIN]

    def test_create_iterator(self, client_140, limiter):
        table = StarredReposTable(client_140, limiter, page_size=100)

        iterator = table.create_iterator(
            [Constraint(StarredRepoColumn.LOGIN, ConstraintOp.EQ, "octocat")],
            [OrderBy(StarredRepoColumn.STARRED_AT, desc=True)],
        )

        assert iterator.login == "octocat"
        assert iterator.order.direction == OrderDirection.DESC
        assert client_140.calls == []
