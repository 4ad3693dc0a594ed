from __future__ import annotations


class RepoFeedError(Exception):
    """Base class for every failure the client turns into a status."""


class NetworkFailure(RepoFeedError):
    """The request never got a response (connection error, timeout)."""


class BackendFailure(RepoFeedError):
    """The backend answered with a non-success status."""

    def __init__(self, status_code: int, message: str = "") -> None:
        self.status_code = status_code
        super().__init__(message or f"backend returned HTTP {status_code}")


class StaleResponse(RepoFeedError):
    """A response arrived for a request that is no longer current."""


class RenderFailure(RepoFeedError):
    """The document could not be turned into markup."""
