"""
End-to-end searches against real rg/git/find binaries on a temporary tree.
"""

from __future__ import annotations

import shutil
import subprocess
import sys
from pathlib import Path

import pytest

from projsearch import ProjectSearch, SearchConfig

pytestmark = pytest.mark.integration

needs_rg = pytest.mark.skipif(shutil.which("rg") is None, reason="ripgrep is not installed")
needs_find = pytest.mark.skipif(
    sys.platform == "win32" or shutil.which("find") is None or shutil.which("head") is None,
    reason="find/head not available",
)


@needs_rg
class TestContentSearch:
    @pytest.mark.asyncio
    async def test_case_insensitive_match(self, sample_tree: Path):
        engine = ProjectSearch()
        matches = await engine.search_content("TODO", str(sample_tree))

        assert len(matches) == 1
        assert Path(matches[0].file_path).parts[-2:] == ("docs", "readme.md")
        assert matches[0].line_number == 3
        assert matches[0].matched_text == "some todo here"
        assert not engine.errors.has_errors()

    @pytest.mark.asyncio
    async def test_case_sensitive_miss(self, sample_tree: Path):
        engine = ProjectSearch()
        assert await engine.search_content("TODO", str(sample_tree), case_sensitive=True) == []
        assert not engine.errors.has_errors()

    @pytest.mark.asyncio
    async def test_ignore_file_excludes_paths(self, sample_tree: Path, tmp_path: Path):
        ignore = tmp_path / "search.ignore"
        ignore.write_text("*.md\n")
        engine = ProjectSearch()
        matches = await engine.search_content(
            "export", str(sample_tree), exclude_paths=[str(ignore)]
        )
        assert sorted(Path(m.file_path).name for m in matches) == ["a.ts", "c.ts"]

        matches = await engine.search_content(
            "todo", str(sample_tree), exclude_paths=[str(ignore)]
        )
        assert matches == []

    @pytest.mark.asyncio
    async def test_output_cap(self, tmp_path: Path):
        (tmp_path / "many.txt").write_text("hit\n" * 2000)
        engine = ProjectSearch(SearchConfig(max_content_results=50, read_chunk_size=1024))
        matches = await engine.search_content("hit", str(tmp_path))
        assert 50 < len(matches) < 2000
        assert not engine.errors.has_errors()


@pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")
class TestGitFuzzySearch:
    @pytest.mark.asyncio
    async def test_name_search(self, git_repo: Path):
        engine = ProjectSearch(SearchConfig(platform_delimiter="/"))
        assert await engine.search_files_name_git("c.ts", str(git_repo)) == ["src/b/c.ts"]
        assert engine.fuzzy_cache.builds == 1

    @pytest.mark.asyncio
    async def test_untracked_files_invisible_until_rebuild(self, git_repo: Path, tmp_path: Path):
        engine = ProjectSearch(SearchConfig(platform_delimiter="/"))
        assert await engine.search_files_path_git("zeta", str(git_repo)) == []

        (git_repo / "zeta.py").write_text("")
        subprocess.run(["git", "add", "zeta.py"], cwd=git_repo, check=True)
        # same root: the cached listing is reused
        assert await engine.search_files_path_git("zeta", str(git_repo)) == []

        other = tmp_path / "other"
        other.mkdir()
        subprocess.run(["git", "init", "-q"], cwd=other, check=True)
        await engine.search_files_path_git("x", str(other))
        assert await engine.search_files_path_git("zeta", str(git_repo)) == ["zeta.py"]


@needs_find
class TestPlainFallback:
    @pytest.mark.asyncio
    async def test_outside_git_uses_file_scan(self, sample_tree: Path):
        engine = ProjectSearch(SearchConfig(git_path="projsearch-no-such-git"))
        assert await engine.search_files_name_git("c.ts", str(sample_tree)) == ["src/b/c.ts"]
        assert engine.fuzzy_cache.builds == 0

    @pytest.mark.asyncio
    async def test_plain_path_search(self, sample_tree: Path):
        engine = ProjectSearch()
        paths = await engine.search_files_path("docsread", str(sample_tree), top_results=10)
        assert paths == ["docs/readme.md"]
