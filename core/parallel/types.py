"""
core/parallel/types.py - Result types for parallel execution

Every worker produces a TaskResult; the executor gathers them into a
ParallelExecutionResult (Map-Reduce).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class ErrorCategory(Enum):
    """Error classification used for retry decisions and reporting"""

    THROTTLING = "throttling"
    ACCESS_DENIED = "access_denied"
    NOT_FOUND = "not_found"
    NETWORK = "network"
    TIMEOUT = "timeout"
    EXPIRED_TOKEN = "expired_token"
    SERVICE_ERROR = "service_error"
    CANCELLED = "cancelled"
    UNKNOWN = "unknown"


@dataclass
class TaskError:
    """Failure of a single worker

    Attributes:
        identifier: target identifier (account name, organization)
        source: data source name
        category: error category
        error_code: backend error code or exception class name
        message: error message
        retries: number of retries performed
        original_exception: the exception that ended the task
        timestamp: time of failure
    """

    identifier: str
    source: str
    category: ErrorCategory
    error_code: str
    message: str
    retries: int = 0
    original_exception: BaseException | None = None
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        return f"[{self.source}/{self.identifier}] {self.error_code}: {self.message}"


@dataclass
class TaskResult(Generic[T]):
    """Outcome of a single worker"""

    identifier: str
    source: str
    success: bool
    data: T | None = None
    error: TaskError | None = None
    duration_ms: float = 0.0

    def __str__(self) -> str:
        status = "OK" if self.success else "FAIL"
        return f"[{self.source}/{self.identifier}] {status} ({self.duration_ms:.0f}ms)"


@dataclass
class ParallelExecutionResult(Generic[T]):
    """Gathered results of one parallel run

    Results are stored in completion order.
    """

    results: tuple[TaskResult[T], ...] | list[TaskResult[T]] = field(default_factory=tuple)

    @property
    def successful(self) -> list[TaskResult[T]]:
        return [r for r in self.results if r.success]

    @property
    def failed(self) -> list[TaskResult[T]]:
        return [r for r in self.results if not r.success]

    @property
    def total_count(self) -> int:
        return len(self.results)

    @property
    def success_count(self) -> int:
        return len(self.successful)

    @property
    def error_count(self) -> int:
        return len(self.failed)

    def has_failures_only(self) -> bool:
        return self.total_count > 0 and self.success_count == 0

    def get_errors(self) -> list[TaskError]:
        return [r.error for r in self.failed if r.error is not None]

    def get_error_summary(self) -> str:
        """One line per failed target"""
        errors = self.get_errors()
        if not errors:
            return "no errors"

        lines = [f"{len(errors)} target(s) failed:"]
        for error in errors:
            lines.append(f"  - {error}")
        return "\n".join(lines)
