"""
Search strategies:
- Streaming ripgrep content search
- Plain filesystem name/path scan
- Fuzzy search over git tracked files with a single-root index cache
"""

from .fuzzy_index import FuzzyEngine, FuzzyIndex, FuzzyIndexCache, FuzzyOptions
from .path_scan import PlainPathScan, name_glob, path_glob
from .streaming import LineBuffer, StreamingProcessSearch, build_ripgrep_args

__all__ = [
    "FuzzyEngine",
    "FuzzyIndex",
    "FuzzyIndexCache",
    "FuzzyOptions",
    "PlainPathScan",
    "name_glob",
    "path_glob",
    "LineBuffer",
    "StreamingProcessSearch",
    "build_ripgrep_args",
]
