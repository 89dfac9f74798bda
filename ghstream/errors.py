"""
Exception hierarchy for ghstream

Every error raised by the package derives from GHStreamError so callers
(and the CLI) can catch a single base class. End-of-data is never an
error: row iterators signal it by returning False from advance().
"""

from typing import Any, Dict, List, Optional


class GHStreamError(Exception):
    """Base class for all ghstream errors"""

    pass


class ConfigError(GHStreamError):
    """Raised when settings are missing or invalid"""

    pass


class GitHubAPIError(GHStreamError):
    """
    Transport or HTTP-level failure talking to the GitHub API

    Args:
        message: Human-readable description
        status_code: HTTP status code, or None for network failures
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class GraphQLError(GHStreamError):
    """
    The GraphQL response carried an ``errors`` array or could not be decoded

    Args:
        errors: Error objects as returned by the server
    """

    def __init__(self, errors: List[Dict[str, Any]]):
        self.errors = errors
        messages = "; ".join(str(e.get("message", e)) for e in errors) or "unknown error"
        super().__init__(f"GraphQL query failed: {messages}")

    @property
    def types(self) -> List[str]:
        """Error types reported by GitHub (e.g. NOT_FOUND, RATE_LIMITED)"""
        return [e["type"] for e in self.errors if "type" in e]


class FetchCancelledError(GHStreamError):
    """A remote call was attempted after cancellation was requested"""

    pass


class RateLimitWaitError(GHStreamError):
    """Waiting on the rate limiter was cancelled or ran past its deadline"""

    pass


class IteratorFailedError(GHStreamError):
    """A row iterator was advanced again after a failed fetch"""

    pass


class NoCurrentRowError(GHStreamError):
    """A column value was requested while no row is current"""

    pass


class MissingConstraintError(GHStreamError):
    """A table was scanned without one of its required equality filters"""

    pass


class UnknownTableError(GHStreamError):
    """The query references a table that is not registered"""

    pass
