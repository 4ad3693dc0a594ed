from __future__ import annotations
import logging
from repofeed.domain.entities import DocumentRequest, DocumentState, DocumentStatus
from repofeed.domain.errors import RepoFeedError, StaleResponse
from repofeed.domain.interfaces import IDocumentRenderer, IReadmeFetcher

log = logging.getLogger(__name__)


class DocumentViewer:
    """
    Single-slot README viewer.

    Only one document is ever displayed. Every open() gets its own request
    id, and a response is applied only if that id is still the current
    one. Closing the viewer, opening another repository, or opening the
    same one again while a fetch is in flight makes the late response a
    no-op.
    """

    def __init__(self, fetcher: IReadmeFetcher, renderer: IDocumentRenderer) -> None:
        self._fetcher  = fetcher
        self._renderer = renderer
        self._opened   = 0
        self.state     = DocumentState()

    @property
    def status(self) -> DocumentStatus:
        return self.state.status

    async def open(self, owner: str, repo: str) -> DocumentState:
        key = DocumentRequest(owner=owner, repo=repo)
        self._opened += 1
        request_id = self._opened
        self.state = DocumentState(key=key, status=DocumentStatus.LOADING, request_id=request_id)
        log.info("Opening README for %s", key)

        try:
            text   = await self._fetcher.fetch_readme(owner, repo)
            markup = self._renderer.render(text)
        except RepoFeedError as exc:
            if self.state.request_id != request_id:
                log.debug("Dropping failure: %s (%s)", StaleResponse(f"README {key} request {request_id}"), exc)
                return self.state
            log.warning("README for %s unavailable: %s", key, exc)
            self.state = DocumentState(status=DocumentStatus.ERRORED, error=exc)
            return self.state

        if self.state.request_id != request_id:
            log.debug("Dropping response: %s", StaleResponse(f"README {key} request {request_id}"))
            return self.state

        self.state = DocumentState(
            key             = key,
            rendered_markup = markup,
            status          = DocumentStatus.SHOWN,
            request_id      = request_id,
        )
        return self.state

    def close(self) -> None:
        self.state = DocumentState()
