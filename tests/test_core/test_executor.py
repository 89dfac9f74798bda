"""
Tests for plan building and EXPLAIN output
"""

from ghstream.core.executor import Executor
from ghstream.github.starred_repos import StarredReposTable
from ghstream.operators import Filter, Limit, OrderByOperator, Project, Scan
from ghstream.readers.table_reader import TableReader
from ghstream.sql.parser import parse
from tests.fakes import FakeGraphQLClient


def make_reader(limiter):
    return TableReader(StarredReposTable(FakeGraphQLClient([]), limiter))


def operator_chain(plan):
    chain = []
    while plan is not None:
        chain.append(type(plan))
        plan = plan.child
    return chain


class TestExecutor:
    """Test operator tree construction"""

    def test_minimal_plan(self, limiter):
        ast = parse("SELECT name FROM github_starred_repos WHERE login = 'octocat'")

        plan = Executor().build_plan(ast, make_reader(limiter))

        # login = 'octocat' is guaranteed by the source
        assert operator_chain(plan) == [Project, Scan]

    def test_full_plan(self, limiter):
        ast = parse(
            "SELECT name FROM github_starred_repos WHERE login = 'octocat' "
            "AND stargazer_count > 10 ORDER BY name LIMIT 5"
        )

        plan = Executor().build_plan(ast, make_reader(limiter))

        assert operator_chain(plan) == [Limit, Project, OrderByOperator, Filter, Scan]
        assert plan.child.child.child.conditions[0].column == "stargazer_count"

    def test_pushed_order_removes_sort(self, limiter):
        ast = parse(
            "SELECT name FROM github_starred_repos WHERE login = 'octocat' ORDER BY starred_at"
        )

        plan = Executor().build_plan(ast, make_reader(limiter))

        assert OrderByOperator not in operator_chain(plan)

    def test_multi_column_order_not_pushed(self, limiter):
        ast = parse(
            "SELECT name FROM github_starred_repos WHERE login = 'octocat' "
            "ORDER BY starred_at DESC, name"
        )
        reader = make_reader(limiter)

        plan = Executor().build_plan(ast, reader)

        assert OrderByOperator in operator_chain(plan)
        assert reader.orders == []

    def test_explain(self, limiter):
        ast = parse(
            "SELECT name FROM github_starred_repos WHERE login = 'octocat' "
            "ORDER BY starred_at DESC LIMIT 10"
        )

        output = Executor().explain(ast, make_reader(limiter))

        assert output.startswith("Query Plan:\n" + "=" * 40)
        assert "Limit(10)" in output
        assert "Scan(TableReader(github_starred_repos))" in output
        assert "Predicate pushdown: login = 'octocat'" in output
        assert "Order pushdown: starred_at DESC" in output
        assert limiter.waits == 0
