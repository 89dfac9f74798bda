"""
Pytest configuration and shared fixtures
"""

import logging

import pytest

from tests.fakes import CountingRateLimiter, FakeGraphQLClient, make_pages


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's GitHub settings out of the tests"""
    for var in (
        "GITHUB_TOKEN",
        "GITHUB_PER_SECOND",
        "GHSTREAM_GRAPHQL_URL",
        "GHSTREAM_BURST",
        "GHSTREAM_PAGE_SIZE",
        "GHSTREAM_TIMEOUT",
        "GHSTREAM_LOG_LEVEL",
    ):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def limiter():
    """Rate limiter that counts waits"""
    return CountingRateLimiter()


@pytest.fixture
def client_140():
    """Client serving 140 stars: one full page of 100, then 40"""
    return FakeGraphQLClient(make_pages(140))


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo configure_logging() calls made by CLI tests"""
    yield
    logger = logging.getLogger("ghstream")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
