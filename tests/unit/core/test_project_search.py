"""Tests for projsearch.core.api module."""

from __future__ import annotations

import asyncio

import pytest

from projsearch import ProjectSearch, SearchConfig
from projsearch.utils.error_handling import ConfigurationError, SupersededCallError

CHANNELS = {
    "searchRipGrep",
    "searchFilesName",
    "searchFilesPath",
    "searchFilesPathGit",
    "searchFilesNameGit",
}


class RecordingDispatcher:
    def __init__(self) -> None:
        self.handlers = {}

    def handle(self, channel, handler) -> None:
        self.handlers[channel] = handler


def _stub_git(engine: ProjectSearch, trees: dict[str, list[str]]) -> list[str]:
    listed: list[str] = []

    async def probe(root: str) -> bool:
        return root in trees

    async def lister(root: str) -> list[str]:
        listed.append(root)
        return trees[root]

    engine.fuzzy_cache._probe = probe
    engine.fuzzy_cache._lister = lister
    return listed


class TestProjectSearch:
    """Test ProjectSearch wiring."""

    def test_invalid_config_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            ProjectSearch(SearchConfig(fuzzy_threshold=2.0))

    def test_handlers_cover_every_channel(self) -> None:
        engine = ProjectSearch()
        assert set(engine.handlers()) == CHANNELS

    def test_register(self) -> None:
        engine = ProjectSearch()
        dispatcher = RecordingDispatcher()
        engine.register(dispatcher)
        assert set(dispatcher.handlers) == CHANNELS
        assert dispatcher.handlers["searchRipGrep"] == engine.search_content

    def test_strategies_share_config_and_collector(self) -> None:
        engine = ProjectSearch(SearchConfig(platform_delimiter="/"))
        assert engine.content.errors is engine.errors
        assert engine.fuzzy_cache.fallback is engine.scanner
        assert engine.fuzzy_cache.config is engine.config

    @pytest.mark.asyncio
    async def test_missing_ripgrep_is_reported_not_raised(self) -> None:
        engine = ProjectSearch(SearchConfig(ripgrep_path="projsearch-no-such-ripgrep-binary"))
        assert await engine.search_content("TODO", ".") == []
        assert engine.errors.has_errors()
        assert "Failed to start ripgrep" in engine.error_report()

    @pytest.mark.asyncio
    async def test_content_request_fields(self) -> None:
        engine = ProjectSearch()
        seen = []

        async def fake_search(request):
            seen.append(request)
            return []

        # the throttle holds the bound method, so patch the callable it wraps
        engine._throttles["searchRipGrep"].func = fake_search
        await engine.search_content(
            "x", "/repo", exclude_paths=["a", "a", "b"], case_sensitive=True
        )

        [request] = seen
        assert request.exclude_paths == frozenset({"a", "b"})
        assert request.case_sensitive is True

    @pytest.mark.asyncio
    async def test_git_search_uses_default_top_results(self) -> None:
        engine = ProjectSearch(SearchConfig(platform_delimiter="/", default_top_results=1))
        _stub_git(engine, {"/repo": ["src/a.ts", "src/b/c.ts", "c.ts"]})
        assert await engine.search_files_path_git("c.ts", "/repo") == ["c.ts"]
        assert await engine.search_files_path_git("c.ts", "/repo", top_results=5) == [
            "c.ts",
            "src/b/c.ts",
        ]

    @pytest.mark.asyncio
    async def test_git_name_search(self) -> None:
        engine = ProjectSearch(SearchConfig(platform_delimiter="/"))
        listed = _stub_git(engine, {"/repo": ["src/a.ts", "src/b/c.ts"]})
        assert await engine.search_files_name_git("c.ts", "/repo") == ["src/b/c.ts"]
        assert await engine.search_files_name_git("a.ts", "/repo") == ["src/a.ts"]
        assert listed == ["/repo"]

    @pytest.mark.asyncio
    async def test_burst_coalesces_to_last_call(self) -> None:
        engine = ProjectSearch(SearchConfig(platform_delimiter="/", throttle_wait=0.05))
        listed = _stub_git(engine, {"/repo": ["alpha.py", "beta.py", "gamma.py"]})

        results = await asyncio.gather(
            engine.search_files_path_git("alpha", "/repo"),
            engine.search_files_path_git("beta", "/repo"),
            engine.search_files_path_git("gamma", "/repo"),
            return_exceptions=True,
        )

        assert results[0] == ["alpha.py"]
        assert isinstance(results[1], SupersededCallError)
        assert results[2] == ["gamma.py"]
        assert listed == ["/repo"]

    @pytest.mark.asyncio
    async def test_cancel_pending(self) -> None:
        engine = ProjectSearch(SearchConfig(platform_delimiter="/", throttle_wait=0.05))
        _stub_git(engine, {"/repo": ["alpha.py"]})
        await engine.search_files_path_git("alpha", "/repo")

        pending = asyncio.ensure_future(engine.search_files_path_git("alpha", "/repo"))
        await asyncio.sleep(0)
        engine.cancel_pending()
        with pytest.raises(SupersededCallError):
            await pending
