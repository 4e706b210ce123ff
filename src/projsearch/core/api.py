"""
Main API module for projsearch.

``ProjectSearch`` owns one instance of every search strategy and the
per-entry-point throttles, so all mutable state (the fuzzy index slot, the
throttle timers, the collected process errors) has an explicit owner and
lifetime.

Entry points:
    search_content: ripgrep content search, list of ``MatchRecord``
    search_files_name / search_files_path: plain filesystem scan
    search_files_name_git / search_files_path_git: fuzzy search over the
        tracked files, falling back to the plain scan outside a git work tree

Example:
    >>> engine = ProjectSearch(SearchConfig(throttle_wait=0.05))
    >>> paths = await engine.search_files_path_git("srcmain", "/repo")
    >>> matches = await engine.search_content("TODO", "/repo")

    Wiring the entry points to a request dispatcher:
        >>> engine.register(dispatcher)  # dispatcher.handle(name, fn) per entry point
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any, Protocol

from ..search.fuzzy_index import FuzzyIndexCache
from ..search.path_scan import PlainPathScan
from ..search.streaming import StreamingProcessSearch
from ..utils.error_handling import ErrorCollector, create_error_report
from ..utils.throttle import RequestThrottler
from .config import SearchConfig
from .types import MatchRecord, SearchRequest


class Dispatcher(Protocol):
    def handle(self, channel: str, handler: Callable[..., Any]) -> None: ...


class ProjectSearch:
    """Coordinates the search strategies behind throttled entry points."""

    def __init__(self, config: SearchConfig | None = None) -> None:
        self.config = config or SearchConfig()
        self.config.validate()

        self.errors = ErrorCollector()
        self.content = StreamingProcessSearch(self.config, self.errors)
        self.scanner = PlainPathScan(self.config)
        self.fuzzy_cache = FuzzyIndexCache(self.config, fallback=self.scanner)

        wait = self.config.throttle_wait
        self._throttles = {
            "searchRipGrep": RequestThrottler(self.content.search, wait),
            "searchFilesName": RequestThrottler(self.scanner.search_names, wait),
            "searchFilesPath": RequestThrottler(self.scanner.search_paths, wait),
            "searchFilesPathGit": RequestThrottler(self.fuzzy_cache.search_paths, wait),
            "searchFilesNameGit": RequestThrottler(self.fuzzy_cache.search_names, wait),
        }

    def _request(self, query: str, root_path: str, top_results: int | None) -> SearchRequest:
        return SearchRequest(
            query=query,
            root_path=root_path,
            max_results=top_results if top_results is not None else self.config.default_top_results,
        )

    async def search_content(
        self,
        query: str,
        root_path: str,
        exclude_paths: Iterable[str] = (),
        case_sensitive: bool = False,
    ) -> list[MatchRecord]:
        request = SearchRequest(
            query=query,
            root_path=root_path,
            exclude_paths=frozenset(exclude_paths),
            case_sensitive=case_sensitive,
        )
        return await self._throttles["searchRipGrep"](request)

    async def search_files_name(
        self, query: str, root_path: str, top_results: int | None = None
    ) -> list[str]:
        return await self._throttles["searchFilesName"](
            self._request(query, root_path, top_results)
        )

    async def search_files_path(
        self, query: str, root_path: str, top_results: int | None = None
    ) -> list[str]:
        return await self._throttles["searchFilesPath"](
            self._request(query, root_path, top_results)
        )

    async def search_files_name_git(
        self, query: str, root_path: str, top_results: int | None = None
    ) -> list[str]:
        return await self._throttles["searchFilesNameGit"](
            self._request(query, root_path, top_results)
        )

    async def search_files_path_git(
        self, query: str, root_path: str, top_results: int | None = None
    ) -> list[str]:
        return await self._throttles["searchFilesPathGit"](
            self._request(query, root_path, top_results)
        )

    def handlers(self) -> dict[str, Callable[..., Any]]:
        """Entry points keyed by channel name."""
        return {
            "searchRipGrep": self.search_content,
            "searchFilesName": self.search_files_name,
            "searchFilesPath": self.search_files_path,
            "searchFilesPathGit": self.search_files_path_git,
            "searchFilesNameGit": self.search_files_name_git,
        }

    def register(self, dispatcher: Dispatcher) -> None:
        for channel, handler in self.handlers().items():
            dispatcher.handle(channel, handler)

    def cancel_pending(self) -> None:
        """Cancel every throttled call that has not run yet."""
        for throttle in self._throttles.values():
            throttle.cancel()

    def error_report(self) -> str:
        return create_error_report(self.errors)
