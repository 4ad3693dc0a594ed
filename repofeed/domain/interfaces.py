"""
Domain Layer: Interfaces (Abstract Contracts)
---------------------------------------------
The collaborators the client talks to: the repository-search endpoint,
the README endpoint and the Markdown renderer. The application layer
depends only on these; the infrastructure layer implements them.

Tests substitute fakes for all three without touching application code.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from .entities import RepoRecord


class IRepoSearcher(ABC):
    """Contract for the paginated repository search backend."""

    @abstractmethod
    async def search(self, params: dict[str, str | int]) -> list[RepoRecord]:
        """
        Fetch one page of repositories for the given query parameters.

        Raises:
            NetworkFailure: transport-level problem
            BackendFailure: non-success response
        """
        ...


class IReadmeFetcher(ABC):
    """Contract for retrieving a repository's raw README text."""

    @abstractmethod
    async def fetch_readme(self, owner: str, repo: str) -> str:
        ...


class IDocumentRenderer(ABC):
    """Pure text → markup conversion."""

    @abstractmethod
    def render(self, text: str) -> str:
        """Raises RenderFailure if the document cannot be rendered."""
        ...
