"""
core/parallel - Parallel collection runtime

Runs one worker per collection target (AWS account, GitHub organization)
with failure isolation, bounded retries and shared cancellation.

Components:
- ParallelTargetExecutor: Map-Reduce style worker-per-target executor
- CollectContext: shared cancellation flag + deadline
- ErrorCollector / try_or_default: non-fatal error handling

Example:
    from core.parallel import CollectContext, ParallelConfig, ParallelTargetExecutor, TargetTask

    ctx = CollectContext(timeout=600)
    tasks = [TargetTask(identifier=s.target, source=s.name, func=s.collect) for s in sources]
    result = ParallelTargetExecutor(ParallelConfig(max_workers=10)).execute(tasks, ctx)

    if result.error_count > 0:
        print(result.get_error_summary())
"""

from .client import ClientSettings, get_client
from .context import CollectContext
from .decorators import RetryConfig, categorize_error, get_error_code, is_retryable
from .errors import (
    CollectedError,
    ErrorCollector,
    ErrorSeverity,
    try_or_default,
)
from .executor import ParallelConfig, ParallelTargetExecutor, TargetTask
from .types import ErrorCategory, ParallelExecutionResult, TaskError, TaskResult

__all__: list[str] = [
    # Executor
    "ParallelTargetExecutor",
    "ParallelConfig",
    "TargetTask",
    # Context
    "CollectContext",
    # Client
    "ClientSettings",
    "get_client",
    # Retry
    "RetryConfig",
    "categorize_error",
    "get_error_code",
    "is_retryable",
    # Error handling
    "ErrorCollector",
    "ErrorSeverity",
    "CollectedError",
    "try_or_default",
    # Types
    "ErrorCategory",
    "TaskError",
    "TaskResult",
    "ParallelExecutionResult",
]
