"""
GitHub GraphQL client

Thin synchronous client: one POST per query, bearer-token auth, decoded
``data`` returned to the caller. No retries; every failure is raised.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Dict, Optional

import httpx

from ghstream.config import DEFAULT_GRAPHQL_URL, Settings
from ghstream.errors import FetchCancelledError, GitHubAPIError, GraphQLError

logger = logging.getLogger(__name__)

USER_AGENT = "ghstream/0.1.0"


class GitHubClient:
    """
    Execute GraphQL documents against the GitHub API

    Example:
        client = GitHubClient(token="ghp_...")
        data = client.query("query { viewer { login } }")
    """

    def __init__(
        self,
        token: Optional[str] = None,
        url: str = DEFAULT_GRAPHQL_URL,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize client

        Args:
            token: GitHub token; unauthenticated requests are rejected by GitHub
            url: GraphQL endpoint
            timeout: Per-request timeout in seconds
            transport: Custom httpx transport (tests use httpx.MockTransport)
        """
        self.url = url
        headers = {
            "Accept": "application/json",
            "User-Agent": USER_AGENT,
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"

        self.client = httpx.Client(timeout=timeout, headers=headers, transport=transport)

    @classmethod
    def from_settings(
        cls, settings: Settings, transport: Optional[httpx.BaseTransport] = None
    ) -> "GitHubClient":
        return cls(
            token=settings.github_token,
            url=settings.graphql_url,
            timeout=settings.timeout_seconds,
            transport=transport,
        )

    def query(
        self,
        document: str,
        variables: Optional[Dict[str, Any]] = None,
        cancel: Optional[threading.Event] = None,
    ) -> Dict[str, Any]:
        """
        Run one GraphQL query

        Args:
            document: GraphQL query text
            variables: Query variables (None values are sent as JSON null)
            cancel: If already set, the request is not sent

        Returns:
            The ``data`` object of the response

        Raises:
            FetchCancelledError: If cancel is set
            GitHubAPIError: On network failure or non-2xx status
            GraphQLError: If the response has ``errors`` or is not valid JSON
        """
        if cancel is not None and cancel.is_set():
            raise FetchCancelledError("GraphQL request cancelled")

        payload = {"query": document, "variables": variables or {}}

        try:
            response = self.client.post(self.url, json=payload)
        except httpx.HTTPError as e:
            raise GitHubAPIError(f"Request to {self.url} failed: {e}") from e

        if response.status_code >= 400:
            message = f"GitHub API returned HTTP {response.status_code}"
            if response.text:
                message += f": {response.text[:200]}"
            raise GitHubAPIError(message, status_code=response.status_code)

        try:
            body = response.json()
        except ValueError as e:
            raise GraphQLError([{"message": f"Invalid JSON response: {e}"}]) from e

        if not isinstance(body, dict):
            raise GraphQLError([{"message": "Response body is not a JSON object"}])

        if body.get("errors"):
            raise GraphQLError(body["errors"])

        data = body.get("data")
        if data is None:
            raise GraphQLError([{"message": "Response has no data"}])

        remaining = response.headers.get("x-ratelimit-remaining")
        if remaining is not None:
            logger.debug("GitHub rate limit remaining: %s", remaining)

        return data

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> "GitHubClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
