"""
core/parallel/errors.py - Non-fatal error collection

Optional enrichment calls (CODEOWNERS fetches, sub-directory listings, last
commit lookups) never fail a collection. Their failures are recorded here,
logged, and replaced by defaults.

Example:
    errors = ErrorCollector("github")

    content = try_or_default(
        lambda: client.get_file_content(repo, "CODEOWNERS"),
        default="",
        collector=errors,
        target=repo,
        operation="get_file_content",
    )

    if errors.has_errors:
        print(errors.get_summary())
"""

from __future__ import annotations

import logging
import threading
from collections import Counter
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TypeVar

from core.exceptions import CollectionCancelledError

from .decorators import categorize_error, get_error_code
from .types import ErrorCategory

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ErrorSeverity(Enum):
    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"
    DEBUG = "debug"


_LOG_LEVELS = {
    ErrorSeverity.CRITICAL: logging.ERROR,
    ErrorSeverity.WARNING: logging.WARNING,
    ErrorSeverity.INFO: logging.INFO,
    ErrorSeverity.DEBUG: logging.DEBUG,
}


@dataclass(frozen=True)
class CollectedError:
    """One recorded enrichment failure

    ``target`` is the record the failure belongs to (repository name, ARN),
    ``path`` the file involved, if any.
    """

    source: str
    target: str
    operation: str
    error_code: str
    error_message: str
    severity: ErrorSeverity
    category: ErrorCategory
    path: str | None = None
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        where = f"{self.target}:{self.path}" if self.path else self.target
        return f"[{self.severity.value.upper()}] {where} - {self.source}.{self.operation}: {self.error_code}"


class ErrorCollector:
    """Thread-safe list of CollectedError for one data source"""

    def __init__(self, source: str):
        self.source = source
        self._errors: list[CollectedError] = []
        self._lock = threading.Lock()

    def collect(
        self,
        error: Exception,
        target: str,
        operation: str,
        path: str | None = None,
        severity: ErrorSeverity = ErrorSeverity.WARNING,
    ) -> CollectedError:
        """Record and log ``error``

        Access-denied failures are logged at INFO: a token that cannot read
        one repository should not warn once per repository.
        """
        category = categorize_error(error)
        if category == ErrorCategory.ACCESS_DENIED and severity == ErrorSeverity.WARNING:
            severity = ErrorSeverity.INFO

        collected = CollectedError(
            source=self.source,
            target=target,
            operation=operation,
            error_code=get_error_code(error),
            error_message=str(error),
            severity=severity,
            category=category,
            path=path,
        )
        with self._lock:
            self._errors.append(collected)

        logger.log(_LOG_LEVELS[severity], f"{collected} - {collected.error_message}")
        return collected

    @property
    def errors(self) -> list[CollectedError]:
        with self._lock:
            return list(self._errors)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def get_summary(self) -> str:
        """e.g. "3 error(s) (info: 1, warning: 2)" """
        errors = self.errors
        if not errors:
            return "no errors"

        counts = Counter(e.severity.value for e in errors)
        parts = ", ".join(f"{name}: {count}" for name, count in sorted(counts.items()))
        return f"{len(errors)} error(s) ({parts})"


def try_or_default(
    func: Callable[[], T],
    default: T,
    collector: ErrorCollector | None = None,
    target: str = "",
    operation: str = "",
    path: str | None = None,
    severity: ErrorSeverity = ErrorSeverity.WARNING,
) -> T:
    """Return ``func()``, or record the failure and return ``default``

    Cancellation always propagates.
    """
    try:
        return func()
    except CollectionCancelledError:
        raise
    except Exception as e:
        if collector is not None:
            collector.collect(e, target, operation, path=path, severity=severity)
        else:
            logger.warning(f"[{target}] {operation}: {e}")
        return default
