"""
Output formatting for search results.

Functions:
    to_json_bytes: Fast JSON serialization using orjson
    format_matches / format_paths: Plain text output
    render_matches_console: Rich console rendering with highlighted matches
"""

from __future__ import annotations

from typing import Any

import orjson
from rich.console import Console
from rich.text import Text

from ..core.types import MatchRecord, OutputFormat


def to_json_bytes(results: list[MatchRecord] | list[str]) -> bytes:
    """Serialize content matches (as their raw ripgrep payloads) or paths."""
    payload: list[Any] = [
        item.raw_payload if isinstance(item, MatchRecord) else item for item in results
    ]
    return orjson.dumps(payload, option=orjson.OPT_INDENT_2)


def format_matches(matches: list[MatchRecord]) -> str:
    return "\n".join(f"{m.file_path}:{m.line_number}: {m.matched_text}" for m in matches)


def format_paths(paths: list[str]) -> str:
    return "\n".join(paths)


def _submatch_spans(match: MatchRecord) -> list[tuple[int, int]]:
    submatches = (match.raw_payload.get("data") or {}).get("submatches") or []
    spans = []
    for sub in submatches:
        if isinstance(sub, dict) and "start" in sub and "end" in sub:
            spans.append((int(sub["start"]), int(sub["end"])))
    return spans


def render_matches_console(matches: list[MatchRecord], console: Console | None = None) -> None:
    """Render matches grouped by file with the matched spans highlighted."""
    if console is None:
        console = Console()
    current_file = None
    for match in matches:
        if match.file_path != current_file:
            if current_file is not None:
                console.print()
            console.print(Text(match.file_path, style="bold"))
            current_file = match.file_path
        # ripgrep offsets are bytes into the line
        line = match.matched_text.encode("utf-8")
        text = Text(f"{match.line_number:6d} | ", style="dim")
        cursor = 0
        for start, end in _submatch_spans(match):
            text.append(line[cursor:start].decode("utf-8", errors="replace"))
            text.append(line[start:end].decode("utf-8", errors="replace"), style="bold red")
            cursor = end
        text.append(line[cursor:].decode("utf-8", errors="replace"))
        console.print(text)


def format_result(results: list[MatchRecord] | list[str], fmt: OutputFormat) -> str:
    if fmt == OutputFormat.JSON:
        return to_json_bytes(results).decode("utf-8")
    if results and isinstance(results[0], MatchRecord):
        return format_matches(results)  # type: ignore[arg-type]
    return format_paths(results)  # type: ignore[arg-type]
