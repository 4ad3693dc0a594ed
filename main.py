"""
main.py: Dependency Wiring (Composition Root)
--------------------------------------------
Wires the feed client together and runs a terminal browse session.

It does NOT contain any client logic. It just:
  1. Reads configuration from environment variables
  2. Creates the concrete HTTP client and Markdown renderer
  3. Injects them into the pipeline, orchestrator and viewer
  4. Commits the filters given on the command line and scrolls N pages
  5. Optionally opens one README and prints the rendered markup

Dependency graph:
                        main.py  (wires everything)
                           │
             ┌─────────────┼──────────────┐
             ▼             ▼              ▼
    SearchOrchestrator  DocumentViewer  ClientConfig
             │             │
             ▼             ├──────────────┐
       QueryPipeline       ▼              ▼
             │         RepoApiClient  MarkdownRenderer
             ▼
       RepoApiClient
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

import httpx

# Application layer
from repofeed.application.document_viewer import DocumentViewer
from repofeed.application.filter_state import FilterState
from repofeed.application.orchestrator import SearchOrchestrator
from repofeed.application.query_pipeline import QueryPipeline
from repofeed.config import ClientConfig, load_config
from repofeed.domain.entities import DocumentStatus, SearchStatus, SortKey, SortOrder

# Infrastructure layer
from repofeed.infrastructure.markdown_renderer import MarkdownRenderer
from repofeed.infrastructure.repo_api_client import RepoApiClient

# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s — %(message)s",
    datefmt="%H:%M:%S",
)
log = logging.getLogger(__name__)


def _apply_args(filter_state: FilterState, args: argparse.Namespace) -> None:
    filter_state.set_draft("text", args.query)
    filter_state.set_draft("language", args.language or None)
    filter_state.set_draft("sort_key", args.sort)
    filter_state.set_draft("order", args.order)
    filter_state.set_draft("keywords", args.keywords)
    filter_state.set_draft("topics", args.topics)


async def browse(config: ClientConfig, args: argparse.Namespace) -> int:
    """
    Composition root. The only place that knows which concrete class
    implements each collaborator.
    """
    client = httpx.AsyncClient()
    try:
        api = RepoApiClient(
            client   = client,
            base_url = config.api_url,
            timeout  = config.timeout_secs,
        )
        pipeline     = QueryPipeline(api, debounce_wait=config.debounce_wait)
        orchestrator = SearchOrchestrator(pipeline)
        viewer       = DocumentViewer(api, MarkdownRenderer(allow_html=config.render_html))

        _apply_args(orchestrator.filter_state, args)
        await orchestrator.commit()

        # Each page brings the sentinel into view once more
        for _ in range(args.pages - 1):
            await orchestrator.on_sentinel(False)
            if not await orchestrator.on_sentinel(True):
                break

        for i, repo in enumerate(orchestrator.results, start=1):
            print(f"{i:4d}. {repo.full_name} — {repo.description or ''}")

        if orchestrator.status is SearchStatus.ERRORED:
            log.error("❌ Search failed: %s", orchestrator.session.error)
            return 1
        log.info("✅ %d repos | status=%s", len(orchestrator.results), orchestrator.status.value)

        if args.readme:
            owner, _, repo = args.readme.partition("/")
            state = await viewer.open(owner, repo)
            if state.status is not DocumentStatus.SHOWN:
                log.error("❌ README for %s failed: %s", args.readme, state.error)
                return 1
            print(state.rendered_markup)
            viewer.close()
        return 0

    finally:
        # Always clean up, even if an exception occurred
        await client.aclose()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Browse a paginated GitHub repository feed")
    parser.add_argument("--query", default="c", help="Search text (default: c)")
    parser.add_argument("--language", default="", help="Restrict to one language")
    parser.add_argument("--sort", default=SortKey.STARS.value, choices=[k.value for k in SortKey])
    parser.add_argument("--order", default=SortOrder.DESC.value, choices=[o.value for o in SortOrder])
    parser.add_argument("--keywords", default="")
    parser.add_argument("--topics", default="")
    parser.add_argument("--pages", type=int, default=1, help="Pages to load (default: 1)")
    parser.add_argument("--readme", metavar="OWNER/REPO", help="Render this repository's README after browsing")
    return parser


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    args = build_parser().parse_args()
    if args.pages < 1:
        log.error("--pages must be at least 1")
        sys.exit(2)

    try:
        config = load_config()
    except ValueError as exc:
        log.error("%s", exc)
        sys.exit(2)

    sys.exit(asyncio.run(browse(config, args)))
