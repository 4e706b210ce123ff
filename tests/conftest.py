"""
Shared test fixtures and utilities for projsearch tests.

Provides ripgrep JSON event builders, a fake subprocess for driving the
streaming search chunk by chunk, and small project trees on disk.
"""

from __future__ import annotations

import asyncio
import json
import shutil
import subprocess
from pathlib import Path

import pytest

from projsearch import SearchConfig


def rg_event(
    kind: str = "match",
    path: str = "src/a.py",
    line_number: int = 1,
    text: str = "hello world\n",
) -> bytes:
    """Build one newline-terminated ripgrep ``--json`` event."""
    if kind == "match":
        data = {
            "path": {"text": path},
            "lines": {"text": text},
            "line_number": line_number,
            "absolute_offset": 0,
            "submatches": [{"match": {"text": text.strip()}, "start": 0, "end": len(text.strip())}],
        }
    elif kind in ("begin", "end"):
        data = {"path": {"text": path}}
    elif kind == "context":
        data = {"path": {"text": path}, "lines": {"text": text}, "line_number": line_number}
    else:
        data = {"elapsed_total": {"secs": 0, "nanos": 1000, "human": "0.000001s"}}
    return json.dumps({"type": kind, "data": data}, ensure_ascii=False).encode("utf-8") + b"\n"


class FakeStream:
    """Stand-in for ``Process.stdout`` that hands out prepared chunks."""

    def __init__(self, chunks: list[bytes]) -> None:
        self._chunks = list(chunks)
        self.reads = 0

    async def read(self, n: int = -1) -> bytes:
        if not self._chunks:
            return b""
        self.reads += 1
        return self._chunks.pop(0)

    @property
    def remaining(self) -> int:
        return len(self._chunks)


class FakeProcess:
    def __init__(self, chunks: list[bytes], returncode: int = 0) -> None:
        self.stdout = FakeStream(chunks)
        self.returncode: int | None = None
        self._exit_code = returncode
        self.killed = False

    def kill(self) -> None:
        self.killed = True
        self._exit_code = -9

    async def wait(self) -> int:
        self.returncode = self._exit_code
        return self._exit_code


@pytest.fixture(name="rg_event")
def rg_event_fixture():
    """The ``rg_event`` builder, for tests that assemble ripgrep output."""
    return rg_event


@pytest.fixture
def config() -> SearchConfig:
    """Config with '/' as delimiter so expectations are platform independent."""
    return SearchConfig(platform_delimiter="/")


@pytest.fixture
def fake_spawn(monkeypatch):
    """Replace ``asyncio.create_subprocess_exec`` with a fake ripgrep process.

    Call the fixture value with the stdout chunks to serve; it returns the
    ``FakeProcess``. Spawned argument lists are collected in ``.spawned``.
    """
    spawned: list[list[str]] = []

    def install(chunks: list[bytes], returncode: int = 0) -> FakeProcess:
        proc = FakeProcess(chunks, returncode)

        async def fake_exec(*command, **kwargs):
            spawned.append(list(command))
            return proc

        monkeypatch.setattr(asyncio, "create_subprocess_exec", fake_exec)
        return proc

    install.spawned = spawned
    return install


@pytest.fixture
def sample_tree(tmp_path: Path) -> Path:
    """A small project tree: src/a.ts, src/b/c.ts, docs/readme.md."""
    root = tmp_path / "project"
    (root / "src" / "b").mkdir(parents=True)
    (root / "docs").mkdir()
    (root / "src" / "a.ts").write_text("export const a = 1;\n")
    (root / "src" / "b" / "c.ts").write_text("export const c = 3;\n")
    (root / "docs" / "readme.md").write_text("first line\nsecond line\nsome todo here\n")
    return root


@pytest.fixture
def git_repo(sample_tree: Path) -> Path:
    """``sample_tree`` turned into a git work tree with every file staged."""
    if shutil.which("git") is None:
        pytest.skip("git is not installed")
    subprocess.run(["git", "init", "-q"], cwd=sample_tree, check=True)
    subprocess.run(["git", "add", "-A"], cwd=sample_tree, check=True)
    return sample_tree


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
