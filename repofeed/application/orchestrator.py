from __future__ import annotations
import logging
from repofeed.domain.entities import Failure, FilterSet, ResultPage, SearchSession, SearchStatus
from repofeed.domain.errors import StaleResponse
from .accumulator import ResultAccumulator
from .filter_state import FilterState
from .query_pipeline import QueryPipeline
from .scroll_trigger import ScrollTrigger

log = logging.getLogger(__name__)


class SearchOrchestrator:
    """
    Drives the search session: commits, page advances, retries.

    All dependencies are injected. The pipeline decides how requests are
    made, the accumulator how pages are merged. The orchestrator only
    decides when to ask and whether an answer still counts.

    State machine:
        commit          any state  → LOADING (new session, page 1)
        page response   LOADING    → IDLE | EXHAUSTED
        failure         LOADING    → ERRORED
        scroll_advance  IDLE       → LOADING (page + 1)
        retry           ERRORED    → LOADING (same page)

    Every mutation happens between awaits, on the event loop thread.
    Responses for a replaced session are dropped on arrival.
    """

    def __init__(
        self,
        pipeline:     QueryPipeline,
        filter_state: FilterState | None = None,
        accumulator:  ResultAccumulator | None = None,
    ) -> None:
        self._pipeline    = pipeline
        self.filter_state = filter_state or FilterState()
        self._accumulator = accumulator or ResultAccumulator(pipeline.page_size)
        self._trigger     = ScrollTrigger(self._can_advance)
        self._generation  = 0
        self.session      = SearchSession(
            filters = self.filter_state.committed,
            results = self._accumulator.results,
        )

    @property
    def status(self) -> SearchStatus:
        return self.session.status

    @property
    def results(self):
        return self.session.results

    @property
    def trigger(self) -> ScrollTrigger:
        return self._trigger

    async def commit(self) -> SearchSession:
        """Commit the draft filters and search them from page 1."""
        return await self.start(self.filter_state.commit())

    async def start(self, filters: FilterSet) -> SearchSession:
        self._generation += 1
        self._accumulator.reset()
        session = SearchSession(
            filters    = filters,
            generation = self._generation,
            next_page  = self._accumulator.next_page,
            results    = self._accumulator.results,
            status     = SearchStatus.LOADING,
        )
        self.session = session
        log.info("New search #%d | %s", session.generation, filters)
        await self._request(session)
        return session

    @property
    def started(self) -> bool:
        return self._generation > 0

    async def scroll_advance(self) -> bool:
        if not self.started:
            # Nothing searched yet: the first page comes from a real session
            await self.start(self.session.filters)
            return True
        session = self.session
        if session.status is not SearchStatus.IDLE:
            return False
        session.next_page = self._accumulator.advance()
        session.status    = SearchStatus.LOADING
        await self._request(session)
        return True

    async def on_sentinel(self, visible: bool) -> bool:
        """Visibility-observer callback for the sentinel element."""
        if not self._trigger.observe(visible):
            return False
        return await self.scroll_advance()

    async def retry(self) -> bool:
        session = self.session
        if session.status is not SearchStatus.ERRORED:
            return False
        log.info("Retrying page %d of search #%d", session.next_page, session.generation)
        session.status = SearchStatus.LOADING
        session.error  = None
        await self._request(session)
        return True

    def shutdown(self) -> None:
        self._pipeline.cancel_pending()

    def _can_advance(self) -> bool:
        return self.session.status not in (SearchStatus.LOADING, SearchStatus.EXHAUSTED)

    async def _request(self, session: SearchSession) -> None:
        try:
            result = await self._pipeline.search(session.filters, session.next_page, session.generation)
        except Exception as exc:
            log.error("Search #%d page %d raised unexpectedly: %s", session.generation, session.next_page, exc, exc_info=True)
            result = Failure(exc)
        if result is None:
            log.debug("Request for page %d collapsed by debounce", session.next_page)
            return
        self._apply(session, result)

    def _apply(self, session: SearchSession, result: ResultPage | Failure) -> None:
        if session is not self.session:
            log.debug("Discarding response: %s", StaleResponse(f"search #{session.generation} was replaced"))
            return

        if isinstance(result, Failure):
            session.status = SearchStatus.ERRORED
            session.error  = result.cause
            log.warning("Search #%d errored on page %d: %s", session.generation, session.next_page, result.message)
            return

        if not session.owns(result):
            log.debug("Discarding response: %s", StaleResponse(
                f"page {result.requested_page} of generation {result.generation}, current {session.generation}"
            ))
            return

        fresh = self._accumulator.merge(result)
        session.status = (
            SearchStatus.EXHAUSTED if self._accumulator.is_last_page(result) else SearchStatus.IDLE
        )
        self._trigger.rearm()
        log.info(
            "Page %d | +%d new | %d total | %s",
            result.requested_page, len(fresh), len(session.results), session.status.value,
        )
