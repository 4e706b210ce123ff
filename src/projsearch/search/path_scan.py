"""
File name and path search by plain filesystem enumeration.

The query is turned into a case-insensitive glob and handed to ``find`` (or
to ``rg --files --iglob`` on Windows), piped into ``head -n N`` so the
enumeration stops after ``max_results`` paths.

    name search: each whitespace separated token becomes ``*token*``
                 ("foo bar" -> ``*foo**bar*``) matched against the basename.
    path search: every character is wrapped in wildcards
                 ("abc" -> ``*a*b*c*``) matched against the whole path, a
                 loose subsequence match.
"""

from __future__ import annotations

import time

from ..core.config import SearchConfig
from ..core.types import PathFlavor, SearchRequest
from ..utils.logging_config import get_logger
from ..utils.process import run_pipeline

_CURRENT_DIR_PREFIXES = ("./", ".\\")


def name_glob(query: str) -> str:
    tokens = query.split()
    if not tokens:
        return "*"
    return "".join(f"*{token}*" for token in tokens)


def path_glob(query: str) -> str:
    if not query:
        return "*"
    return "*" + "*".join(query) + "*"


def build_enumeration_args(
    config: SearchConfig, flavor: PathFlavor, query: str
) -> list[str]:
    """Build the enumeration command for ``query``; it runs with cwd = root."""
    pattern = name_glob(query) if flavor == PathFlavor.NAME else path_glob(query)
    if config.windows_commands():
        return [config.ripgrep_path, "--iglob", pattern, "--files", "./"]
    test = "-iname" if flavor == PathFlavor.NAME else "-ipath"
    return [config.find_path, ".", "-type", "f", test, pattern]


def parse_enumeration_output(stdout: str) -> list[str]:
    paths = []
    for line in stdout.splitlines():
        if line.startswith(_CURRENT_DIR_PREFIXES):
            line = line[2:]
        if line:
            paths.append(line)
    return paths


class PlainPathScan:
    """Name and path search without any index."""

    def __init__(self, config: SearchConfig) -> None:
        self.config = config
        self.logger = get_logger()

    async def search_names(self, request: SearchRequest) -> list[str]:
        return await self.search(request, PathFlavor.NAME)

    async def search_paths(self, request: SearchRequest) -> list[str]:
        return await self.search(request, PathFlavor.PATH)

    async def search(self, request: SearchRequest, flavor: PathFlavor) -> list[str]:
        """Return up to ``request.max_results`` paths relative to the root.

        Raises:
            ProcessSpawnError: If the root does not exist or a command is missing.
            CommandFailedError: If the pipeline exits non-zero. Callers should
                read this as "no results available", not as zero matches.
        """
        start = time.perf_counter()
        self.logger.log_search_start(f"{flavor.value} scan", request.query, request.root_path)

        enumerate_cmd = build_enumeration_args(self.config, flavor, request.query)
        head_cmd = [self.config.head_path, "-n", str(request.max_results)]
        result = await run_pipeline(enumerate_cmd, head_cmd, cwd=request.root_path)

        paths = parse_enumeration_output(result.stdout)
        elapsed_ms = (time.perf_counter() - start) * 1000
        self.logger.log_search_complete(
            f"{flavor.value} scan", request.query, len(paths), elapsed_ms
        )
        return paths
