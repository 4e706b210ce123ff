"""
Streaming content search over ripgrep's JSON output.

ripgrep is started with ``--json`` and its stdout is consumed chunk by chunk
as the process runs. Chunks are arbitrary byte slices, so a JSON record can
straddle two (or more) reads; ``LineBuffer`` carries the unterminated tail of
each chunk over to the next one until the record is complete.

Only ``match`` events are kept. ``begin``/``end``/``context``/``summary``
events are dropped, as are lines that can never parse. Once more than
``max_content_results`` matches have been collected the process is killed and
whatever was collected is returned; hitting the cap is a normal outcome, not
an error.

Example:
    >>> search = StreamingProcessSearch(SearchConfig())
    >>> matches = await search.search(SearchRequest(query="TODO", root_path="/repo"))
    >>> [(m.file_path, m.line_number) for m in matches]
"""

from __future__ import annotations

import asyncio
import time
from typing import Any

import orjson

from ..core.config import SearchConfig
from ..core.types import MatchRecord, SearchRequest
from ..utils.error_handling import CommandFailedError, ErrorCollector, ProcessSpawnError
from ..utils.logging_config import get_logger
from ..utils.process import terminate

MATCH_TYPE = "match"

# Sentinel for "did not parse"; ``None`` means "blank line".
_INCOMPLETE = object()


def _is_match(payload: Any) -> bool:
    return isinstance(payload, dict) and payload.get("type") == MATCH_TYPE


def build_ripgrep_args(request: SearchRequest) -> list[str]:
    """Build ripgrep's argument list (without the executable) for a request."""
    args = ["--json", "--line-number", "--with-filename", "--sort-files"]
    if request.case_sensitive:
        args.append("--case-sensitive")
    else:
        args.append("-i")

    for ignore_file in sorted(request.exclude_paths):
        args.extend(["--ignore-file", ignore_file])

    # "--" keeps a query starting with "-" positional
    args.extend(["--", request.query, request.root_path])
    return args


class LineBuffer:
    """Splits a chunked JSON-lines stream into parsed ``match`` payloads.

    A fragment that does not parse yet is kept and prefixed to the next
    chunk. A newline-terminated line that does not parse can never complete
    and is dropped.
    """

    def __init__(self) -> None:
        self._pending = b""
        self.dropped = 0

    @property
    def pending(self) -> bytes:
        return self._pending

    def feed(self, chunk: bytes) -> list[dict[str, Any]]:
        data = self._pending + chunk
        self._pending = b""

        lines = data.split(b"\n")
        tail = lines.pop()

        kept: list[dict[str, Any]] = []
        for line in lines:
            payload = self._parse(line)
            if payload is _INCOMPLETE:
                self.dropped += 1
            elif payload is not None and _is_match(payload):
                kept.append(payload)

        payload = self._parse(tail)
        if payload is _INCOMPLETE:
            self._pending = tail
        elif payload is not None and _is_match(payload):
            kept.append(payload)
        return kept

    def flush(self) -> list[dict[str, Any]]:
        """Parse whatever is left once the stream has ended."""
        tail, self._pending = self._pending, b""
        payload = self._parse(tail)
        if payload is _INCOMPLETE:
            self.dropped += 1
            return []
        if payload is not None and _is_match(payload):
            return [payload]
        return []

    @staticmethod
    def _parse(line: bytes) -> Any:
        line = line.strip()
        if not line:
            return None
        try:
            return orjson.loads(line)
        except orjson.JSONDecodeError:
            return _INCOMPLETE


class StreamingProcessSearch:
    """Runs ripgrep for a request and streams its matches."""

    def __init__(self, config: SearchConfig, errors: ErrorCollector | None = None) -> None:
        self.config = config
        self.errors = errors if errors is not None else ErrorCollector()
        self.logger = get_logger()

    async def search(self, request: SearchRequest) -> list[MatchRecord]:
        """Return ripgrep's matches for ``request``.

        Never raises for process failures: a missing executable, a crash or
        a bad exit status is recorded in ``self.errors`` and whatever was
        collected so far (possibly nothing) is returned.
        """
        if not request.query:
            return []

        command = [self.config.ripgrep_path, *build_ripgrep_args(request)]
        self.logger.log_search_start("content", request.query, request.root_path)
        start = time.perf_counter()

        try:
            proc = await asyncio.create_subprocess_exec(
                *command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.DEVNULL,
            )
        except OSError as exc:
            error = ProcessSpawnError(f"Failed to start ripgrep: {exc}", command=command)
            self.errors.add_error(error)
            self.logger.log_process_error(command, str(exc))
            return []

        payloads, truncated = await self._consume(proc, command)

        if not truncated and proc.returncode not in (0, 1):
            # 1 means "no matches"; anything else is a ripgrep error
            self.errors.add_error(
                CommandFailedError(
                    f"ripgrep exited with status {proc.returncode}",
                    command=command,
                    returncode=proc.returncode if proc.returncode is not None else -1,
                )
            )
            self.logger.log_process_error(command, f"exit status {proc.returncode}")

        matches = [MatchRecord.from_payload(payload) for payload in payloads]
        elapsed_ms = (time.perf_counter() - start) * 1000
        self.logger.log_search_complete(
            "content", request.query, len(matches), elapsed_ms, truncated=truncated
        )
        return matches

    async def _consume(
        self, proc: asyncio.subprocess.Process, command: list[str]
    ) -> tuple[list[dict[str, Any]], bool]:
        buffer = LineBuffer()
        payloads: list[dict[str, Any]] = []
        truncated = False
        drained = False
        assert proc.stdout is not None

        try:
            while True:
                chunk = await proc.stdout.read(self.config.read_chunk_size)
                if not chunk:
                    drained = True
                    break
                payloads.extend(buffer.feed(chunk))
                if len(payloads) > self.config.max_content_results:
                    truncated = True
                    self.logger.info(
                        f"Content search reached {len(payloads)} matches, stopping ripgrep",
                        operation="result_cap",
                        results_count=len(payloads),
                    )
                    break
            if drained:
                payloads.extend(buffer.flush())
        except OSError as exc:
            self.errors.add_error(exc, command=command)
            self.logger.log_process_error(command, str(exc))
        finally:
            if not drained:
                terminate(proc)
            await proc.wait()

        if buffer.dropped:
            self.logger.debug(
                f"Dropped {buffer.dropped} unparseable ripgrep output line(s)",
                operation="dropped_lines",
            )
        return payloads, truncated
