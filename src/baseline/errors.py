"""Exceptions and error reporting for Baseline Sidekick.

Only ``DataLoadError`` is meant to escape a component boundary. Parse,
validation and timeout failures are recorded through ``ErrorReporter`` and
degrade to "no result" for the unit being analyzed.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


class BaselineError(Exception):
    """Base exception for all Baseline Sidekick errors."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class DataLoadError(BaselineError):
    """The compatibility dataset could not be loaded. Fatal for the process."""

    pass


class ParseError(BaselineError):
    """A source unit failed to parse."""

    def __init__(self, language: str, message: str) -> None:
        super().__init__(f"Failed to parse {language} content: {message}", {"language": language})
        self.language = language


class ValidationError(BaselineError):
    """Invalid or empty input (feature id, content)."""

    pass


class AnalysisTimeoutError(BaselineError, TimeoutError):
    """An analysis pass ran past its timeout."""

    def __init__(self, timeout_ms: float) -> None:
        super().__init__(f"Operation timed out after {timeout_ms:g}ms", {"timeout_ms": timeout_ms})
        self.timeout_ms = timeout_ms


class ErrorCategory(str, Enum):
    PARSER = "parser"
    DATA_LOAD = "data_load"
    VALIDATION = "validation"
    TIMEOUT = "timeout"
    UNKNOWN = "unknown"


class ErrorSeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


_LOG_LEVELS = {
    ErrorSeverity.LOW: logging.DEBUG,
    ErrorSeverity.MEDIUM: logging.WARNING,
    ErrorSeverity.HIGH: logging.ERROR,
    ErrorSeverity.CRITICAL: logging.CRITICAL,
}


@dataclass
class ErrorInfo:
    """A single recorded error."""

    category: ErrorCategory
    severity: ErrorSeverity
    message: str
    context: str
    original_error: Optional[BaseException] = None
    notify_user: bool = False
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class ErrorReporter:
    """Records, logs and (rarely) surfaces errors to the user.

    Usage:
        reporter = ErrorReporter(notifier=lambda info: show_banner(info.message))
        reporter.parser_error(exc, "CSS")
        reporter.data_load_error(exc)   # the only call that reaches the notifier

    The notifier is a host-supplied callback. Transient failures (parse,
    validation, timeout) never reach it so diagnostics do not flap.
    """

    def __init__(
        self,
        notifier: Optional[Callable[[ErrorInfo], None]] = None,
        max_history: int = 100,
    ) -> None:
        self._notifier = notifier
        self._history: deque[ErrorInfo] = deque(maxlen=max_history)

    def parser_error(self, error: BaseException, language: str, context: str | None = None) -> ErrorInfo:
        return self._record(
            ErrorInfo(
                category=ErrorCategory.PARSER,
                severity=ErrorSeverity.LOW,
                message=error.message if isinstance(error, ParseError) else f"Failed to parse {language} content: {error}",
                context=context or f"Parsing {language} content",
                original_error=error,
            )
        )

    def data_load_error(self, error: BaseException, context: str | None = None) -> ErrorInfo:
        return self._record(
            ErrorInfo(
                category=ErrorCategory.DATA_LOAD,
                severity=ErrorSeverity.CRITICAL,
                message=f"Failed to load compatibility data: {error}",
                context=context or "Loading compatibility dataset",
                original_error=error,
                notify_user=True,
            )
        )

    def validation_error(self, message: str, context: str | None = None) -> ErrorInfo:
        return self._record(
            ErrorInfo(
                category=ErrorCategory.VALIDATION,
                severity=ErrorSeverity.MEDIUM,
                message=f"Validation error: {message}",
                context=context or "Input validation",
            )
        )

    def timeout_error(self, error: BaseException, context: str | None = None) -> ErrorInfo:
        return self._record(
            ErrorInfo(
                category=ErrorCategory.TIMEOUT,
                severity=ErrorSeverity.MEDIUM,
                message=str(error),
                context=context or "Analysis pass",
                original_error=error,
            )
        )

    def unknown_error(self, error: BaseException | str, context: str | None = None) -> ErrorInfo:
        original = error if isinstance(error, BaseException) else None
        return self._record(
            ErrorInfo(
                category=ErrorCategory.UNKNOWN,
                severity=ErrorSeverity.HIGH,
                message=f"Unknown error: {error}",
                context=context or "Unknown operation",
                original_error=original,
            )
        )

    @property
    def history(self) -> list[ErrorInfo]:
        return list(self._history)

    def by_category(self, category: ErrorCategory) -> list[ErrorInfo]:
        return [info for info in self._history if info.category == category]

    def has_critical_errors(self) -> bool:
        return any(info.severity == ErrorSeverity.CRITICAL for info in self._history)

    def clear(self) -> None:
        self._history.clear()

    def _record(self, info: ErrorInfo) -> ErrorInfo:
        self._history.append(info)
        logger.log(
            _LOG_LEVELS[info.severity],
            "[%s:%s] %s: %s",
            info.category.value,
            info.severity.value,
            info.context,
            info.message,
            exc_info=info.original_error if info.severity == ErrorSeverity.CRITICAL else None,
        )
        if info.notify_user and self._notifier is not None:
            try:
                self._notifier(info)
            except Exception:
                logger.exception("Error notifier failed for %s", info.category.value)
        return info
