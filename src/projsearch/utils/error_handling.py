"""
Error handling and reporting for projsearch.

Search operations shell out to external tools (a line search executable, a
version-control executable, a file enumeration command). Failures of those
tools fall into a small taxonomy, and each search kind decides whether a
failure is surfaced to the caller or merely recorded:

    - PROCESS: the executable could not be started or died unexpectedly.
      Content search records these and returns partial results.
    - COMMAND: the command ran but exited non-zero. Plain path scans raise
      these; the version-control probe treats them as "unavailable".
    - PARSING: a malformed output line. Never surfaced; logged only.
    - CONFIGURATION: invalid ``SearchConfig`` values.

Classes:
    ErrorSeverity: Error severity levels (LOW, MEDIUM, HIGH, CRITICAL)
    ErrorCategory: Error classification categories
    ErrorInfo: Detailed error information container
    ErrorCollector: Collects errors that are recorded instead of raised
    SearchError: Base exception class for projsearch errors

Example:
    >>> from projsearch.utils.error_handling import ErrorCollector, ProcessSpawnError
    >>> collector = ErrorCollector()
    >>> collector.add_error(ProcessSpawnError("rg not found", command=["rg"]))
    >>> collector.get_summary()["total_errors"]
    1
"""

from __future__ import annotations

import sys
import time
import traceback
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorSeverity(str, Enum):
    """Error severity levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """Error categories for classification."""

    PROCESS = "process"
    COMMAND = "command"
    PARSING = "parsing"
    CONFIGURATION = "configuration"
    VALIDATION = "validation"
    UNKNOWN = "unknown"


@dataclass
class ErrorInfo:
    """Detailed error information."""

    category: ErrorCategory
    severity: ErrorSeverity
    message: str
    command: list[str] | None = None
    exception_type: str | None = None
    traceback_str: str | None = None
    timestamp: float = field(default_factory=time.time)
    context: dict[str, Any] = field(default_factory=dict)
    suggestions: list[str] = field(default_factory=list)


class SearchError(Exception):
    """Base exception for search-related errors."""

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.UNKNOWN,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        command: list[str] | None = None,
        suggestions: list[str] | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message: str = message
        self.category: ErrorCategory = category
        self.severity: ErrorSeverity = severity
        self.command: list[str] | None = command
        self.suggestions: list[str] = suggestions or []
        self.context: dict[str, Any] = context or {}
        self.timestamp: float = time.time()


class ProcessSpawnError(SearchError):
    """An external executable could not be started."""

    def __init__(
        self, message: str, command: list[str], context: dict[str, Any] | None = None
    ) -> None:
        super().__init__(
            message,
            category=ErrorCategory.PROCESS,
            severity=ErrorSeverity.HIGH,
            command=command,
            suggestions=[
                f"Check that '{command[0]}' is installed and on PATH" if command else
                "Check that the executable is installed",
                "Verify the search root exists and is a directory",
            ],
            context=context,
        )


class CommandFailedError(SearchError):
    """An external command exited with a non-zero status."""

    def __init__(
        self,
        message: str,
        command: list[str],
        returncode: int,
        stderr: str = "",
        context: dict[str, Any] | None = None,
    ) -> None:
        merged_context: dict[str, Any] = {}
        if context:
            merged_context.update(context)
        merged_context["returncode"] = returncode

        super().__init__(
            message,
            category=ErrorCategory.COMMAND,
            severity=ErrorSeverity.MEDIUM,
            command=command,
            context=merged_context,
        )
        self.returncode: int = returncode
        self.stderr: str = stderr


class SupersededCallError(SearchError):
    """A throttled call was replaced by a later one before it ran."""

    def __init__(self, message: str = "Superseded by a later call") -> None:
        super().__init__(message, severity=ErrorSeverity.LOW)


class ConfigurationError(SearchError):
    """Configuration-related errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(
            message,
            category=ErrorCategory.CONFIGURATION,
            severity=ErrorSeverity.HIGH,
            suggestions=[
                "Verify all required settings",
                "Use default configuration",
            ],
            context=context,
        )


class ErrorCollector:
    """Collects errors that are recorded instead of raised."""

    def __init__(self, max_errors: int = 100) -> None:
        self.max_errors = max_errors
        self.errors: list[ErrorInfo] = []
        self.error_counts: dict[ErrorCategory, int] = {}

    def add_error(
        self,
        exception: Exception | SearchError,
        category: ErrorCategory | None = None,
        severity: ErrorSeverity | None = None,
        command: list[str] | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Add an error to the collection."""
        if isinstance(exception, SearchError):
            error_category = exception.category
            error_severity = exception.severity
            error_command = exception.command or command
            error_suggestions = exception.suggestions
            error_context = {**exception.context, **(context or {})}
        else:
            error_category = category or self._classify_exception(exception)
            error_severity = severity or ErrorSeverity.MEDIUM
            error_command = command
            error_suggestions = []
            error_context = context or {}

        error_info = ErrorInfo(
            category=error_category,
            severity=error_severity,
            message=str(exception),
            command=error_command,
            exception_type=type(exception).__name__,
            traceback_str=traceback.format_exc() if sys.exc_info()[0] else None,
            context=error_context,
            suggestions=error_suggestions,
        )

        if len(self.errors) < self.max_errors:
            self.errors.append(error_info)

        self.error_counts[error_category] = self.error_counts.get(error_category, 0) + 1

    def _classify_exception(self, exception: Exception) -> ErrorCategory:
        """Classify exception into error category."""
        if isinstance(exception, (FileNotFoundError, NotADirectoryError, PermissionError)):
            return ErrorCategory.PROCESS
        if isinstance(exception, (ValueError, UnicodeDecodeError)):
            return ErrorCategory.PARSING
        if isinstance(exception, OSError):
            return ErrorCategory.PROCESS
        return ErrorCategory.UNKNOWN

    def get_errors_by_category(self, category: ErrorCategory) -> list[ErrorInfo]:
        """Get all errors of a specific category."""
        return [error for error in self.errors if error.category == category]

    def get_errors_by_severity(self, severity: ErrorSeverity) -> list[ErrorInfo]:
        """Get all errors of a specific severity."""
        return [error for error in self.errors if error.severity == severity]

    def has_errors(self) -> bool:
        return bool(self.errors)

    def get_summary(self) -> dict[str, Any]:
        """Get error summary statistics."""
        return {
            "total_errors": len(self.errors),
            "by_category": {category.value: count for category, count in self.error_counts.items()},
            "by_severity": {
                severity.value: len(self.get_errors_by_severity(severity))
                for severity in ErrorSeverity
            },
        }

    def clear(self) -> None:
        """Clear all collected errors."""
        self.errors.clear()
        self.error_counts.clear()


def create_error_report(error_collector: ErrorCollector) -> str:
    """Create a human-readable error report."""
    if not error_collector.errors:
        return "No errors occurred during the search operation."

    summary = error_collector.get_summary()

    report = ["Search Error Report", "=" * 50, ""]
    report.append(f"Total errors: {summary['total_errors']}")
    report.append("")

    report.append("Errors by category:")
    for category, count in summary["by_category"].items():
        report.append(f"  {category}: {count}")
    report.append("")

    report.append("Details:")
    for error in error_collector.errors:
        report.append(f"  - {error.message}")
        if error.command:
            report.append(f"    Command: {' '.join(error.command)}")
        if error.suggestions:
            report.append(f"    Suggestions: {', '.join(error.suggestions)}")

    return "\n".join(report)
