from __future__ import annotations

import logging

import httpx

from repofeed.domain.entities import RepoRecord
from repofeed.domain.errors import BackendFailure, NetworkFailure
from repofeed.domain.interfaces import IReadmeFetcher, IRepoSearcher

log = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:5000"
DEFAULT_TIMEOUT  = 30.0
SEARCH_PATH      = "/api/repos"
README_PATH      = "/api/readme"


class RepoApiClient(IRepoSearcher, IReadmeFetcher):
    """
    HTTP client for the feed backend: repository search and README text.

    The constructor receives an httpx.AsyncClient (injected) rather than
    creating one, so callers own its lifecycle and tests can hand in a
    client built on httpx.MockTransport.

    Every httpx error is translated here; nothing above this layer knows
    httpx exists.
    """

    def __init__(self, client: httpx.AsyncClient, base_url: str = DEFAULT_BASE_URL, timeout: float = DEFAULT_TIMEOUT) -> None:
        self._client   = client
        self._base_url = base_url.rstrip("/")
        self._timeout  = timeout

    # Anti-Corruption Layer
    @staticmethod
    def _parse_item(item: dict) -> RepoRecord | None:
        """
        Backend sends:          We keep as:
          "full_name"       →  full_name
          "owner.login"     →  owner_login
          "html_url"        →  url
        """
        try:
            return RepoRecord(
                id          = item["id"],
                full_name   = item["full_name"],
                description = item.get("description"),
                owner_login = item["owner"]["login"],
                name        = item["name"],
                url         = item.get("html_url", ""),
            )
        except (KeyError, TypeError) as exc:
            log.debug("Skipping malformed search item %s: %s", item.get("id") if isinstance(item, dict) else item, exc)
            return None

    async def _get(self, path: str, params: dict) -> httpx.Response:
        try:
            response = await self._client.get(
                f"{self._base_url}{path}",
                params=params,
                timeout=self._timeout,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise BackendFailure(exc.response.status_code, f"{path} returned HTTP {exc.response.status_code}") from exc
        except httpx.RequestError as exc:
            raise NetworkFailure(f"{path} request failed: {exc!r}") from exc
        return response

    # IRepoSearcher implementation
    async def search(self, params: dict[str, str | int]) -> list[RepoRecord]:
        response = await self._get(SEARCH_PATH, params)
        try:
            items = response.json()["items"]
            if not isinstance(items, list):
                raise TypeError(f"items is {type(items).__name__}, not a list")
        except (ValueError, KeyError, TypeError) as exc:
            raise BackendFailure(response.status_code, f"unexpected search payload: {exc!r}") from exc

        repos = [parsed for item in items if (parsed := self._parse_item(item)) is not None]
        log.debug("Search page %s returned %d items (%d usable)", params.get("page"), len(items), len(repos))
        return repos

    # IReadmeFetcher implementation
    async def fetch_readme(self, owner: str, repo: str) -> str:
        response = await self._get(README_PATH, {"owner": owner, "repo": repo})
        return response.text
