"""
GitHub-backed tables and the collaborators they share
"""

from ghstream.github.client import GitHubClient
from ghstream.github.ratelimit import NoopRateLimiter, RateLimiter
from ghstream.github.starred_repos import (
    StarOrder,
    StarredReposIterator,
    StarredReposTable,
    fetch_starred_repos,
)

__all__ = [
    "GitHubClient",
    "RateLimiter",
    "NoopRateLimiter",
    "StarOrder",
    "StarredReposIterator",
    "StarredReposTable",
    "fetch_starred_repos",
]
