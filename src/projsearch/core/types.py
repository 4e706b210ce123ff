"""
Core type definitions for projsearch.

Key Types:
    OutputFormat: Enumeration of supported CLI output formats
    PathFlavor: Whether a file search matches on the basename or full path
    SearchRequest: A content, name or path search request
    MatchRecord: One line match emitted by the line search tool
    FuzzyHit: One ranked entry returned by the fuzzy engine

Example:
    >>> from projsearch.core.types import SearchRequest
    >>> request = SearchRequest(query="TODO", root_path="/repo", case_sensitive=False)
    >>> request.exclude_paths
    frozenset()
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class OutputFormat(str, Enum):
    TEXT = "text"
    JSON = "json"


class PathFlavor(str, Enum):
    """Which part of a file path a file search query is matched against."""

    NAME = "name"
    PATH = "path"


@dataclass(frozen=True, slots=True)
class SearchRequest:
    """
    A search request, immutable per invocation.

    ``exclude_paths`` and ``case_sensitive`` only apply to content search:
    each exclude path is handed to the line search tool as an ignore file.
    ``max_results`` is the ``topResults`` limit of the name and path searches;
    content search is capped by ``SearchConfig.max_content_results`` instead.
    """

    query: str
    root_path: str
    exclude_paths: frozenset[str] = field(default_factory=frozenset)
    case_sensitive: bool = False
    max_results: int = 50


@dataclass(frozen=True, slots=True)
class MatchRecord:
    """One ``match`` event from the line search tool's JSON stream."""

    file_path: str
    line_number: int
    matched_text: str
    raw_payload: dict[str, Any] = field(compare=False, repr=False)

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> MatchRecord:
        data = payload.get("data") or {}
        path = data.get("path") or {}
        lines = data.get("lines") or {}
        return cls(
            file_path=_text_of(path),
            line_number=int(data.get("line_number") or 0),
            matched_text=_text_of(lines).rstrip("\r\n"),
            raw_payload=payload,
        )


@dataclass(frozen=True, slots=True)
class FuzzyHit:
    """A ranked fuzzy match: lower ``score`` is better, 0.0 is exact."""

    file: str
    index: int
    score: float | None = None

    @property
    def file_name(self) -> str:
        return self.file[self.file.rfind("/") + 1 :]


def _text_of(value: Any) -> str:
    # ripgrep emits {"text": ...} for UTF-8 data and {"bytes": <base64>} otherwise
    if not isinstance(value, dict):
        return ""
    if "text" in value:
        return str(value["text"])
    try:
        raw = base64.b64decode(value.get("bytes") or "", validate=True)
    except (binascii.Error, TypeError):
        return ""
    return raw.decode("utf-8", errors="replace")
