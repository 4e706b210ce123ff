"""Tests for projsearch.core.config and projsearch.core.types."""

from __future__ import annotations

import base64
import os
import sys

import pytest

from projsearch.core.config import SearchConfig
from projsearch.core.types import FuzzyHit, MatchRecord, SearchRequest
from projsearch.utils.error_handling import ConfigurationError


class TestSearchConfig:
    """Test SearchConfig class."""

    def test_defaults(self) -> None:
        cfg = SearchConfig()
        assert cfg.ripgrep_path == "rg"
        assert cfg.git_path == "git"
        assert cfg.platform_delimiter == os.sep
        assert cfg.max_content_results == 500
        assert cfg.default_top_results == 50
        assert cfg.throttle_wait == 0.0
        assert cfg.fuzzy_include_score is True
        assert cfg.fuzzy_threshold == 0.3
        assert cfg.fuzzy_distance == 50
        cfg.validate()

    def test_windows_commands_follow_platform_by_default(self) -> None:
        assert SearchConfig().windows_commands() is (sys.platform == "win32")
        assert SearchConfig(use_windows_commands=True).windows_commands() is True
        assert SearchConfig(use_windows_commands=False).windows_commands() is False

    @pytest.mark.parametrize(
        "overrides, field",
        [
            ({"ripgrep_path": ""}, "ripgrep_path"),
            ({"git_path": ""}, "git_path"),
            ({"platform_delimiter": ""}, "platform_delimiter"),
            ({"max_content_results": 0}, "max_content_results"),
            ({"default_top_results": -1}, "default_top_results"),
            ({"read_chunk_size": 0}, "read_chunk_size"),
            ({"throttle_wait": -0.1}, "throttle_wait"),
            ({"fuzzy_threshold": 1.5}, "fuzzy_threshold"),
            ({"fuzzy_distance": 0}, "fuzzy_distance"),
        ],
    )
    def test_validate_rejects(self, overrides, field) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            SearchConfig(**overrides).validate()
        assert exc_info.value.context["field"] == field


class TestTypes:
    def test_search_request_defaults(self) -> None:
        request = SearchRequest(query="q", root_path="/r")
        assert request.exclude_paths == frozenset()
        assert request.case_sensitive is False
        assert request.max_results == 50

    def test_match_record_from_payload(self) -> None:
        payload = {
            "type": "match",
            "data": {
                "path": {"text": "src/a.py"},
                "lines": {"text": "x = 1\r\n"},
                "line_number": 12,
            },
        }
        record = MatchRecord.from_payload(payload)
        assert record.file_path == "src/a.py"
        assert record.line_number == 12
        assert record.matched_text == "x = 1"
        assert record.raw_payload is payload

    def test_match_record_non_utf8_data_is_decoded(self) -> None:
        path = base64.b64encode(b"src/caf\xe9.txt").decode("ascii")
        line = base64.b64encode(b"na\xefve\n").decode("ascii")
        record = MatchRecord.from_payload(
            {
                "type": "match",
                "data": {"path": {"bytes": path}, "lines": {"bytes": line}, "line_number": 4},
            }
        )
        assert record.file_path == "src/caf\ufffd.txt"
        assert record.matched_text == "na\ufffdve"
        assert record.line_number == 4

    def test_match_record_invalid_base64(self) -> None:
        record = MatchRecord.from_payload(
            {"type": "match", "data": {"path": {"bytes": "not base64!"}}}
        )
        assert record.file_path == ""
        assert record.line_number == 0

    def test_match_record_equality_ignores_payload(self) -> None:
        a = MatchRecord("f", 1, "t", raw_payload={"a": 1})
        b = MatchRecord("f", 1, "t", raw_payload={"b": 2})
        assert a == b

    def test_fuzzy_hit_file_name(self) -> None:
        assert FuzzyHit("src/b/c.ts", 0).file_name == "c.ts"
        assert FuzzyHit("top.py", 1).file_name == "top.py"
