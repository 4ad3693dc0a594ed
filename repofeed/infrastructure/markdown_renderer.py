from __future__ import annotations

import logging

from markdown_it import MarkdownIt

from repofeed.domain.errors import RenderFailure
from repofeed.domain.interfaces import IDocumentRenderer

log = logging.getLogger(__name__)


class MarkdownRenderer(IDocumentRenderer):
    """
    README Markdown → HTML.

    Raw HTML inside the document is escaped unless allow_html is set.
    A README is third-party content and the markup goes straight into the
    display, so passing HTML through is opt-in.
    """

    def __init__(self, allow_html: bool = False) -> None:
        self._md = MarkdownIt(
            "commonmark",
            {"html": allow_html, "typographer": True},
        ).enable("table").enable("strikethrough")

    def render(self, text: str) -> str:
        if not isinstance(text, str):
            raise RenderFailure(f"expected document text, got {type(text).__name__}")
        try:
            return self._md.render(text)
        except Exception as exc:
            log.error("Markdown rendering failed: %s", exc, exc_info=True)
            raise RenderFailure(str(exc)) from exc
