"""
Utility modules: error handling, logging, output formatting, subprocess
helpers and call throttling.
"""

from .error_handling import (
    CommandFailedError,
    ConfigurationError,
    ErrorCollector,
    ProcessSpawnError,
    SearchError,
    SupersededCallError,
    create_error_report,
)
from .logging_config import configure_logging, disable_logging, enable_debug_logging, get_logger
from .throttle import RequestThrottler

__all__ = [
    # Error handling
    "CommandFailedError",
    "ConfigurationError",
    "ErrorCollector",
    "ProcessSpawnError",
    "SearchError",
    "SupersededCallError",
    "create_error_report",
    # Logging
    "configure_logging",
    "disable_logging",
    "enable_debug_logging",
    "get_logger",
    # Throttling
    "RequestThrottler",
]
