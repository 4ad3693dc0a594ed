import asyncio

import pytest

from repofeed.domain.entities import RepoRecord
from repofeed.domain.errors import NetworkFailure
from repofeed.domain.interfaces import IReadmeFetcher, IRepoSearcher


class FakeSearcher(IRepoSearcher):
    """
    Serves canned pages keyed by (query, page).
    A query can be gated so its response waits until the test releases it.
    """

    def __init__(self):
        self.pages = {}
        self.calls = []
        self.fail_with = None
        self._gates = {}
        self._started = {}

    def gate(self, query):
        self._gates[query] = asyncio.Event()
        self._started[query] = asyncio.Event()
        return self._gates[query]

    async def wait_started(self, query):
        await self._started[query].wait()

    async def search(self, params):
        self.calls.append(params)
        query = params["query"]
        if query in self._gates:
            self._started[query].set()
            await self._gates[query].wait()
        if self.fail_with is not None:
            raise self.fail_with
        return list(self.pages.get((query, params["page"]), []))


class FakeReadmeFetcher(IReadmeFetcher):
    def __init__(self):
        self.documents = {}
        self.gate = None
        self.started = asyncio.Event()

    async def fetch_readme(self, owner, repo):
        self.started.set()
        if self.gate is not None:
            await self.gate.wait()
        try:
            return self.documents[(owner, repo)]
        except KeyError:
            raise NetworkFailure(f"no README for {owner}/{repo}") from None


def make_repos(start, count):
    return [
        RepoRecord(
            id=i,
            full_name=f"owner{i}/repo{i}",
            description=f"repo {i}",
            owner_login=f"owner{i}",
            name=f"repo{i}",
            url=f"https://github.com/owner{i}/repo{i}",
        )
        for i in range(start, start + count)
    ]


@pytest.fixture
def searcher():
    return FakeSearcher()


@pytest.fixture
def readme_fetcher():
    return FakeReadmeFetcher()
