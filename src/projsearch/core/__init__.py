"""
Core functionality: configuration, shared types and the ``ProjectSearch`` API.
"""

from .api import ProjectSearch
from .config import SearchConfig
from .types import FuzzyHit, MatchRecord, OutputFormat, PathFlavor, SearchRequest

__all__ = [
    "ProjectSearch",
    "SearchConfig",
    "FuzzyHit",
    "MatchRecord",
    "OutputFormat",
    "PathFlavor",
    "SearchRequest",
]
