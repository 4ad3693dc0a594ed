import asyncio
from unittest.mock import MagicMock

import pytest

from repofeed.application.document_viewer import DocumentViewer
from repofeed.domain.entities import DocumentRequest, DocumentStatus
from repofeed.domain.errors import NetworkFailure, RenderFailure
from repofeed.domain.interfaces import IReadmeFetcher
from repofeed.infrastructure.markdown_renderer import MarkdownRenderer


class TestOpen:
    @pytest.mark.asyncio
    async def test_fetches_renders_and_shows(self, readme_fetcher):
        readme_fetcher.documents[("torvalds", "linux")] = "# Linux kernel"
        viewer = DocumentViewer(readme_fetcher, MarkdownRenderer())

        state = await viewer.open("torvalds", "linux")

        assert state.status is DocumentStatus.SHOWN
        assert state.key == DocumentRequest("torvalds", "linux")
        assert "<h1>Linux kernel</h1>" in state.rendered_markup

    @pytest.mark.asyncio
    async def test_loading_while_fetch_in_flight(self, readme_fetcher):
        readme_fetcher.documents[("torvalds", "linux")] = "text"
        readme_fetcher.gate = asyncio.Event()
        viewer = DocumentViewer(readme_fetcher, MarkdownRenderer())

        task = asyncio.create_task(viewer.open("torvalds", "linux"))
        await readme_fetcher.started.wait()
        assert viewer.status is DocumentStatus.LOADING

        readme_fetcher.gate.set()
        await task
        assert viewer.status is DocumentStatus.SHOWN

    @pytest.mark.asyncio
    async def test_fetch_failure_errors_and_clears_key(self, readme_fetcher):
        viewer = DocumentViewer(readme_fetcher, MarkdownRenderer())

        state = await viewer.open("nobody", "nothing")

        assert state.status is DocumentStatus.ERRORED
        assert state.key is None
        assert isinstance(state.error, NetworkFailure)

    @pytest.mark.asyncio
    async def test_render_failure_errors(self, readme_fetcher):
        readme_fetcher.documents[("a", "b")] = "text"
        renderer = MagicMock()
        renderer.render.side_effect = RenderFailure("bad document")
        viewer = DocumentViewer(readme_fetcher, renderer)

        state = await viewer.open("a", "b")

        assert state.status is DocumentStatus.ERRORED
        assert state.rendered_markup is None


class TestClose:
    @pytest.mark.asyncio
    async def test_close_before_resolution_stays_closed(self, readme_fetcher):
        readme_fetcher.documents[("torvalds", "linux")] = "# Linux"
        readme_fetcher.gate = asyncio.Event()
        viewer = DocumentViewer(readme_fetcher, MarkdownRenderer())

        task = asyncio.create_task(viewer.open("torvalds", "linux"))
        await readme_fetcher.started.wait()
        viewer.close()
        readme_fetcher.gate.set()
        await task

        assert viewer.status is DocumentStatus.IDLE
        assert viewer.state.rendered_markup is None
        assert viewer.state.key is None

    @pytest.mark.asyncio
    async def test_late_failure_after_close_ignored(self, readme_fetcher):
        readme_fetcher.gate = asyncio.Event()
        viewer = DocumentViewer(readme_fetcher, MarkdownRenderer())

        task = asyncio.create_task(viewer.open("missing", "repo"))
        await readme_fetcher.started.wait()
        viewer.close()
        readme_fetcher.gate.set()
        await task

        assert viewer.status is DocumentStatus.IDLE

    @pytest.mark.asyncio
    async def test_close_clears_shown_document(self, readme_fetcher):
        readme_fetcher.documents[("a", "b")] = "hello"
        viewer = DocumentViewer(readme_fetcher, MarkdownRenderer())
        await viewer.open("a", "b")

        viewer.close()

        assert viewer.status is DocumentStatus.IDLE
        assert viewer.state.rendered_markup is None

    @pytest.mark.asyncio
    async def test_newer_open_supersedes_older(self, readme_fetcher):
        readme_fetcher.documents[("a", "old")] = "old"
        readme_fetcher.documents[("a", "new")] = "new"
        readme_fetcher.gate = asyncio.Event()
        viewer = DocumentViewer(readme_fetcher, MarkdownRenderer())

        first = asyncio.create_task(viewer.open("a", "old"))
        second = asyncio.create_task(viewer.open("a", "new"))
        await asyncio.sleep(0)
        readme_fetcher.gate.set()
        await asyncio.gather(first, second)

        assert viewer.state.key == DocumentRequest("a", "new")
        assert "new" in viewer.state.rendered_markup


class ScriptedFetcher(IReadmeFetcher):
    """Each fetch waits on its own gate and then returns or raises its scripted outcome."""

    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.gates = [asyncio.Event() for _ in outcomes]
        self.calls = 0

    async def fetch_readme(self, owner, repo):
        index = self.calls
        self.calls += 1
        await self.gates[index].wait()
        outcome = self.outcomes[index]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class TestReopenSameRepository:
    @pytest.mark.asyncio
    async def test_late_failure_of_earlier_open_does_not_hide_later_success(self):
        fetcher = ScriptedFetcher([NetworkFailure("reset"), "# Linux"])
        viewer = DocumentViewer(fetcher, MarkdownRenderer())

        first = asyncio.create_task(viewer.open("torvalds", "linux"))
        await asyncio.sleep(0)
        viewer.close()
        second = asyncio.create_task(viewer.open("torvalds", "linux"))
        await asyncio.sleep(0)

        fetcher.gates[0].set()
        await first
        assert viewer.status is DocumentStatus.LOADING

        fetcher.gates[1].set()
        await second
        assert viewer.status is DocumentStatus.SHOWN
        assert "<h1>Linux</h1>" in viewer.state.rendered_markup

    @pytest.mark.asyncio
    async def test_double_open_keeps_latest_result(self):
        fetcher = ScriptedFetcher(["# Old", "# New"])
        viewer = DocumentViewer(fetcher, MarkdownRenderer())

        first = asyncio.create_task(viewer.open("torvalds", "linux"))
        second = asyncio.create_task(viewer.open("torvalds", "linux"))
        await asyncio.sleep(0)

        fetcher.gates[1].set()
        await second
        fetcher.gates[0].set()
        await first

        assert viewer.status is DocumentStatus.SHOWN
        assert "New" in viewer.state.rendered_markup
        assert viewer.state.request_id == 2
