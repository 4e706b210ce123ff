"""
projsearch: interactive, incremental search over a project's file tree.

Three kinds of search back an editor's "find in files" and "go to file"
features:

    - **Content search**: ripgrep is run in JSON mode and its output is
      streamed, parsed across chunk boundaries and capped at a few hundred
      matches by stopping the process early.
    - **Fuzzy file search**: the tracked files of a git work tree are indexed
      once per root and ranked with rapidfuzz; the index is replaced whenever
      a different root is queried.
    - **Plain file search**: ``find`` (or ``rg --files`` on Windows) with a
      wildcard pattern, used outside git work trees.

Every entry point is wrapped in a throttle that coalesces bursts of calls,
such as one call per keystroke, into the most recent one.

Example Usage:
    >>> import asyncio
    >>> from projsearch import ProjectSearch, SearchConfig
    >>> engine = ProjectSearch(SearchConfig(throttle_wait=0.05))
    >>> matches = asyncio.run(engine.search_content("TODO", "/path/to/repo"))
    >>> for match in matches:
    ...     print(f"{match.file_path}:{match.line_number}: {match.matched_text}")

    CLI usage:
        $ projsearch content TODO --root .
        $ projsearch files readme --mode name
"""

from .core.api import ProjectSearch
from .core.config import SearchConfig
from .core.types import FuzzyHit, MatchRecord, OutputFormat, PathFlavor, SearchRequest
from .search.fuzzy_index import FuzzyEngine, FuzzyIndex, FuzzyIndexCache, FuzzyOptions
from .search.path_scan import PlainPathScan
from .search.streaming import LineBuffer, StreamingProcessSearch
from .utils.error_handling import (
    CommandFailedError,
    ConfigurationError,
    ErrorCollector,
    ProcessSpawnError,
    SearchError,
    SupersededCallError,
)
from .utils.logging_config import (
    configure_logging,
    disable_logging,
    enable_debug_logging,
    get_logger,
)
from .utils.throttle import RequestThrottler

__version__ = "0.1.0"

__all__ = [
    # Main classes
    "ProjectSearch",
    "SearchConfig",
    # Search strategies
    "StreamingProcessSearch",
    "LineBuffer",
    "PlainPathScan",
    "FuzzyIndexCache",
    "FuzzyIndex",
    "FuzzyEngine",
    "FuzzyOptions",
    "RequestThrottler",
    # Types
    "SearchRequest",
    "MatchRecord",
    "FuzzyHit",
    "PathFlavor",
    "OutputFormat",
    # Errors
    "SearchError",
    "SupersededCallError",
    "ProcessSpawnError",
    "CommandFailedError",
    "ConfigurationError",
    "ErrorCollector",
    # Logging
    "configure_logging",
    "disable_logging",
    "enable_debug_logging",
    "get_logger",
]
