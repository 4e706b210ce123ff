"""
Configuration module for projsearch.

``SearchConfig`` is the central configuration object shared by every search
strategy: external binary names, the platform path delimiter, result caps,
the throttle window and the fuzzy engine's tuning.

Example:
    >>> from projsearch.core.config import SearchConfig
    >>> config = SearchConfig(ripgrep_path="/opt/bin/rg", throttle_wait=0.05)
    >>> config.validate()
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass

from ..utils.error_handling import ConfigurationError


@dataclass(slots=True)
class SearchConfig:
    # External executables
    ripgrep_path: str = "rg"
    git_path: str = "git"
    find_path: str = "find"
    head_path: str = "head"

    # Paths returned by the version-control aware searches use this separator
    platform_delimiter: str = os.sep
    # None = derive from sys.platform
    use_windows_commands: bool | None = None

    # Limits
    max_content_results: int = 500
    default_top_results: int = 50
    read_chunk_size: int = 65536

    # Seconds; 0 = only calls arriving in the same instant are coalesced
    throttle_wait: float = 0.0

    # Fuzzy engine
    fuzzy_include_score: bool = True
    fuzzy_threshold: float = 0.3
    fuzzy_distance: int = 50

    def windows_commands(self) -> bool:
        """Whether file enumeration should use the ripgrep glob command."""
        if self.use_windows_commands is None:
            return sys.platform == "win32"
        return self.use_windows_commands

    def validate(self) -> None:
        """Validate configuration and raise ConfigurationError on issues.

        Raises:
            ConfigurationError: If the configuration is invalid.
        """
        for name in ("ripgrep_path", "git_path", "find_path", "head_path"):
            if not getattr(self, name):
                raise ConfigurationError(
                    f"Executable '{name}' must not be empty",
                    context={"field": name},
                )

        if not self.platform_delimiter:
            raise ConfigurationError(
                "Platform delimiter must not be empty",
                context={"field": "platform_delimiter"},
            )

        if self.max_content_results <= 0:
            raise ConfigurationError(
                "Content result cap must be positive",
                context={"field": "max_content_results", "value": self.max_content_results},
            )

        if self.default_top_results <= 0:
            raise ConfigurationError(
                "Default top results must be positive",
                context={"field": "default_top_results", "value": self.default_top_results},
            )

        if self.read_chunk_size <= 0:
            raise ConfigurationError(
                "Read chunk size must be positive",
                context={"field": "read_chunk_size", "value": self.read_chunk_size},
            )

        if self.throttle_wait < 0:
            raise ConfigurationError(
                "Throttle wait must be non-negative",
                context={"field": "throttle_wait", "value": self.throttle_wait},
            )

        if not (0.0 <= self.fuzzy_threshold <= 1.0):
            raise ConfigurationError(
                "Fuzzy threshold must be between 0.0 and 1.0",
                context={"field": "fuzzy_threshold", "value": self.fuzzy_threshold},
            )

        if self.fuzzy_distance <= 0:
            raise ConfigurationError(
                "Fuzzy distance must be positive",
                context={"field": "fuzzy_distance", "value": self.fuzzy_distance},
            )
