"""
Tests for the GitHub GraphQL client
"""

import json
import threading

import httpx
import pytest

from ghstream.config import Settings
from ghstream.errors import FetchCancelledError, GitHubAPIError, GraphQLError
from ghstream.github.client import GitHubClient


def make_client(handler, token="secret"):
    return GitHubClient(token=token, transport=httpx.MockTransport(handler))


class TestGitHubClient:
    """Test request building and response handling"""

    def test_query_returns_data(self):
        """Test a successful query"""
        seen = {}

        def handler(request):
            seen["request"] = request
            return httpx.Response(200, json={"data": {"viewer": {"login": "octocat"}}})

        client = make_client(handler)
        data = client.query("query { viewer { login } }", {"a": 1})

        assert data == {"viewer": {"login": "octocat"}}
        request = seen["request"]
        assert request.method == "POST"
        assert str(request.url) == "https://api.github.com/graphql"
        assert request.headers["Authorization"] == "Bearer secret"
        assert json.loads(request.content) == {
            "query": "query { viewer { login } }",
            "variables": {"a": 1},
        }

    def test_no_token_no_auth_header(self):
        """Test unauthenticated client"""
        seen = {}

        def handler(request):
            seen["headers"] = request.headers
            return httpx.Response(200, json={"data": {}})

        make_client(handler, token=None).query("query { x }")

        assert "Authorization" not in seen["headers"]

    def test_http_error_status(self):
        """Test non-2xx responses"""
        client = make_client(lambda request: httpx.Response(401, text="Bad credentials"))

        with pytest.raises(GitHubAPIError) as exc_info:
            client.query("query { x }")

        assert exc_info.value.status_code == 401
        assert "Bad credentials" in str(exc_info.value)

    def test_transport_error(self):
        """Test network failures are wrapped"""

        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(GitHubAPIError) as exc_info:
            make_client(handler).query("query { x }")

        assert exc_info.value.status_code is None
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    def test_graphql_errors(self):
        """Test a response carrying an errors array"""
        body = {
            "data": None,
            "errors": [{"type": "NOT_FOUND", "message": "Could not resolve to a User"}],
        }
        client = make_client(lambda request: httpx.Response(200, json=body))

        with pytest.raises(GraphQLError) as exc_info:
            client.query("query { x }")

        assert exc_info.value.types == ["NOT_FOUND"]
        assert "Could not resolve" in str(exc_info.value)

    def test_invalid_json(self):
        """Test an undecodable body"""
        client = make_client(lambda request: httpx.Response(200, text="<html>"))

        with pytest.raises(GraphQLError):
            client.query("query { x }")

    def test_missing_data(self):
        client = make_client(lambda request: httpx.Response(200, json={}))

        with pytest.raises(GraphQLError):
            client.query("query { x }")

    def test_cancelled(self):
        """Test no request is sent once cancel is set"""
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, json={"data": {}})

        cancel = threading.Event()
        cancel.set()

        with pytest.raises(FetchCancelledError):
            make_client(handler).query("query { x }", cancel=cancel)

        assert calls == []

    def test_from_settings(self):
        """Test client built from settings"""
        seen = {}

        def handler(request):
            seen["request"] = request
            return httpx.Response(200, json={"data": {}})

        settings = Settings(github_token="tok", graphql_url="https://ghe.example.com/api/graphql")
        with GitHubClient.from_settings(settings, transport=httpx.MockTransport(handler)) as client:
            client.query("query { x }")

        assert str(seen["request"].url) == "https://ghe.example.com/api/graphql"
        assert seen["request"].headers["Authorization"] == "Bearer tok"
