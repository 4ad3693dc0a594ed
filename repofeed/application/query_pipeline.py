from __future__ import annotations
import logging
from repofeed.domain.entities import PAGE_SIZE, Failure, FilterSet, ResultPage
from repofeed.domain.errors import RepoFeedError
from repofeed.domain.interfaces import IRepoSearcher
from .debouncer import Debouncer

log = logging.getLogger(__name__)

DEBOUNCE_WAIT = 0.3


class QueryPipeline:
    """
    Turns (FilterSet, page) into a debounced request against the search
    backend and a tagged ResultPage or a Failure.

    The searcher is injected, so tests can pass a fake and drive the
    pipeline without any network.

    Rapid calls inside the quiet window collapse into the last one; the
    collapsed calls return None and issue no I/O. Nothing is retried here.
    """

    def __init__(self, searcher: IRepoSearcher, debounce_wait: float = DEBOUNCE_WAIT, page_size: int = PAGE_SIZE) -> None:
        self._searcher  = searcher
        self._page_size = page_size
        self._debouncer = Debouncer(self._issue, debounce_wait)

    @property
    def page_size(self) -> int:
        return self._page_size

    async def search(self, filters: FilterSet, page: int, generation: int = 0) -> ResultPage | Failure | None:
        """
        Returns:
            ResultPage: the request ran and succeeded
            Failure:    the request ran and failed
            None:       the call was superseded within the debounce window
        """
        if isinstance(page, bool) or not isinstance(page, int) or page < 1:
            raise ValueError(f"page must be a positive integer, got {page!r}")
        return await self._debouncer.call(filters, page, generation)

    def cancel_pending(self) -> None:
        self._debouncer.cancel()

    async def _issue(self, filters: FilterSet, page: int, generation: int) -> ResultPage | Failure:
        params = filters.to_params(page, self._page_size)
        log.debug("Searching page %d | %s", page, params)
        try:
            items = await self._searcher.search(params)
        except RepoFeedError as exc:
            log.warning("Search for %r page %d failed: %s", filters.text, page, exc)
            return Failure(exc)

        return ResultPage(
            items             = tuple(items),
            requested_page    = page,
            requested_filters = filters,
            generation        = generation,
        )
