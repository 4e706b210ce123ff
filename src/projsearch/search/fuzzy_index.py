"""
Fuzzy file name and path search over a repository's tracked files.

``FuzzyIndexCache`` keeps exactly one ``FuzzyIndex`` (the tracked file list
of one root plus a ``FuzzyEngine`` over it). A query against the resident
root reuses it; a query against any other root throws it away and lists the
new root's files. The index is never updated in place, so files added after
a build stay invisible until a root switch forces a rebuild.

Cache states:

    Empty ──build ok──> Valid(A) ──same root──> Valid(A)
                        Valid(A) ──root B, build ok──> Valid(B)
                        Valid(A) ──listing fails──> Empty

When the root is not inside a git work tree (or no index could be built)
the plain filesystem scan is used instead.

Ranking follows the Bitap-style scoring used by editor fuzzy finders: a
candidate's score is its alignment error measured against the whole query (0
for an exact substring) plus how far from the start of the path the match
sits, divided by ``distance``.
Candidates scoring above ``threshold`` are dropped; lower is better.
"""

from __future__ import annotations

import time
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass

from rapidfuzz import fuzz, process

from ..core.config import SearchConfig
from ..core.types import FuzzyHit, SearchRequest
from ..utils.error_handling import SearchError
from ..utils.logging_config import get_logger
from ..utils.process import command_succeeds, run_command
from .path_scan import PlainPathScan

# Any path works: a git work tree answers with status 0 whether or not it is tracked.
PROBE_PATH = "ffff"


@dataclass(frozen=True, slots=True)
class FuzzyOptions:
    include_score: bool = True
    threshold: float = 0.3
    distance: int = 50

    @classmethod
    def from_config(cls, config: SearchConfig) -> FuzzyOptions:
        return cls(
            include_score=config.fuzzy_include_score,
            threshold=config.fuzzy_threshold,
            distance=config.fuzzy_distance,
        )


class FuzzyEngine:
    """Case-insensitive fuzzy matcher over a fixed list of strings."""

    def __init__(self, items: Sequence[str], options: FuzzyOptions | None = None) -> None:
        self.items = list(items)
        self.options = options or FuzzyOptions()
        self._folded = [item.lower() for item in self.items]

    def search(self, query: str) -> list[FuzzyHit]:
        """Return matching items best first; ties keep list order."""
        needle = query.lower()
        if not needle or not self.items:
            return []

        # The alignment error alone must already be within the threshold.
        cutoff = (1.0 - self.options.threshold) * 100
        candidates = process.extract(
            needle, self._folded, scorer=fuzz.partial_ratio, score_cutoff=cutoff, limit=None
        )

        scored: list[tuple[float, int]] = []
        for _choice, _ratio, index in candidates:
            alignment = fuzz.partial_ratio_alignment(needle, self._folded[index])
            if alignment is None:
                continue
            # An item shorter than the query is aligned inside the query;
            # query characters left outside the alignment count as errors.
            coverage = (alignment.src_end - alignment.src_start) / len(needle)
            error = 1.0 - (alignment.score / 100) * coverage
            score = error + alignment.dest_start / self.options.distance
            if score <= self.options.threshold:
                scored.append((score, index))

        scored.sort()
        return [
            FuzzyHit(
                file=self.items[index],
                index=index,
                score=score if self.options.include_score else None,
            )
            for score, index in scored
        ]


@dataclass(frozen=True)
class FuzzyIndex:
    root: str
    files: tuple[str, ...]
    engine: FuzzyEngine


Probe = Callable[[str], Awaitable[bool]]
Lister = Callable[[str], Awaitable[list[str]]]


class FuzzyIndexCache:
    """Single-slot cache of the fuzzy index for the most recently queried root."""

    def __init__(
        self,
        config: SearchConfig,
        fallback: PlainPathScan | None = None,
        probe: Probe | None = None,
        lister: Lister | None = None,
    ) -> None:
        self.config = config
        self.options = FuzzyOptions.from_config(config)
        self.fallback = fallback or PlainPathScan(config)
        self._probe = probe or self.is_version_controlled
        self._lister = lister or self.list_tracked_files
        self._index: FuzzyIndex | None = None
        self.builds = 0
        self.logger = get_logger()

    @property
    def root(self) -> str:
        return self._index.root if self._index else ""

    @property
    def index(self) -> FuzzyIndex | None:
        return self._index

    def clear(self) -> None:
        self._index = None

    async def is_version_controlled(self, root: str) -> bool:
        return await command_succeeds([self.config.git_path, "ls-files", PROBE_PATH], cwd=root)

    async def list_tracked_files(self, root: str) -> list[str]:
        result = await run_command([self.config.git_path, "ls-files", "-z"], cwd=root, check=True)
        return [path for path in result.stdout.split("\0") if path]

    async def index_for(self, root: str) -> FuzzyIndex | None:
        """Return the index for ``root``, rebuilding the slot if it holds another root."""
        if self._index is not None and self._index.root == root:
            return self._index

        start = time.perf_counter()
        try:
            files = await self._lister(root)
        except SearchError as exc:
            self.logger.warning(
                f"Listing tracked files failed for {root}: {exc}",
                operation="index_build_failed",
                root=root,
            )
            self._index = None
            return None

        self._index = FuzzyIndex(
            root=root, files=tuple(files), engine=FuzzyEngine(files, self.options)
        )
        self.builds += 1
        self.logger.log_index_build(root, len(files), (time.perf_counter() - start) * 1000)
        return self._index

    async def _ranked_hits(self, request: SearchRequest) -> list[FuzzyHit] | None:
        if not await self._probe(request.root_path):
            return None
        index = await self.index_for(request.root_path)
        if index is None:
            return None
        return index.engine.search(request.query)[: request.max_results]

    def _normalize(self, path: str) -> str:
        return path.replace("/", self.config.platform_delimiter)

    async def search_paths(self, request: SearchRequest) -> list[str]:
        """Fuzzy path search, falling back to the plain path scan."""
        hits = await self._ranked_hits(request)
        if hits is None:
            return await self.fallback.search_paths(request)
        return [self._normalize(hit.file) for hit in hits]

    async def search_names(self, request: SearchRequest) -> list[str]:
        """Fuzzy search whose hits must also contain the query in their basename."""
        hits = await self._ranked_hits(request)
        if hits is None:
            return await self.fallback.search_names(request)
        needle = request.query.lower()
        return [
            self._normalize(hit.file) for hit in hits if needle in hit.file_name.lower()
        ]
