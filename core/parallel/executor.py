"""
core/parallel/executor.py - Parallel target executor

Runs one worker per collection target on a ThreadPoolExecutor (fan-out) and
gathers the outcomes with as_completed (fan-in), Map-Reduce style. A
target's failure is captured as a TaskResult and never affects its siblings.
Retryable failures (throttling, 5xx, network) are retried with exponential
backoff; waits are interruptible through the shared CollectContext.

Components:
- ParallelConfig: worker count and retry settings
- TargetTask: one unit of work (identifier, source name, callable)
- ParallelTargetExecutor: the executor

Example:
    from core.parallel import ParallelConfig, ParallelTargetExecutor, TargetTask

    tasks = [
        TargetTask(identifier=src.target, source=src.name, func=src.collect)
        for src in sources
    ]
    result = ParallelTargetExecutor(ParallelConfig(max_workers=10)).execute(tasks, ctx)

    print(f"ok: {result.success_count}, failed: {result.error_count}")
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import TYPE_CHECKING, Generic, TypeVar

from core.exceptions import CollectionCancelledError

from .context import CollectContext
from .decorators import RetryConfig, categorize_error, get_error_code, is_retryable
from .types import ErrorCategory, ParallelExecutionResult, TaskError, TaskResult

if TYPE_CHECKING:
    from cli.ui.progress import ParallelTracker

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _clear_exception_chain(e: BaseException) -> None:
    """Drop tracebacks kept alive by the exception chain"""
    e.__traceback__ = None
    if e.__context__ is not None:
        e.__context__.__traceback__ = None
    if e.__cause__ is not None:
        e.__cause__.__traceback__ = None


@dataclass
class ParallelConfig:
    """Parallel execution settings

    Attributes:
        max_workers: maximum concurrent threads (1~100)
        retry_config: retry settings (None = defaults)
    """

    max_workers: int = 20
    retry_config: RetryConfig | None = None

    def __post_init__(self) -> None:
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {self.max_workers}")
        if self.max_workers > 100:
            self.max_workers = 100


@dataclass
class TargetTask(Generic[T]):
    """One collection target

    Attributes:
        identifier: target identifier (account name, organization)
        source: data source name, used in logs and errors
        func: work to run, receives the shared CollectContext
    """

    identifier: str
    source: str
    func: Callable[[CollectContext], T]


class ParallelTargetExecutor:
    """Worker-per-target parallel executor

    Workers share nothing but the CollectContext; each one builds its own
    backend client inside ``func``.

    Example:
        executor = ParallelTargetExecutor(ParallelConfig(max_workers=10))
        result = executor.execute(tasks, ctx)

        for error in result.get_errors():
            print(error)
    """

    def __init__(self, config: ParallelConfig | None = None):
        self.config = config or ParallelConfig()
        self._retry_config = self.config.retry_config or RetryConfig()

    def execute(
        self,
        tasks: Sequence[TargetTask[T]],
        ctx: CollectContext | None = None,
        progress_tracker: ParallelTracker | None = None,
    ) -> ParallelExecutionResult[T]:
        """Run every task in parallel

        Args:
            tasks: targets to run
            ctx: shared cancellation context (None = never cancelled)
            progress_tracker: optional tracker; receives set_total() once and
                on_complete(success) per finished task

        Returns:
            ParallelExecutionResult[T] in completion order
        """
        if not tasks:
            logger.warning("no targets to collect from")
            return ParallelExecutionResult()

        ctx = ctx or CollectContext()
        workers = min(self.config.max_workers, len(tasks))
        logger.info(f"parallel collection started: {len(tasks)} target(s), max_workers={workers}")

        if progress_tracker:
            progress_tracker.set_total(len(tasks))

        results: list[TaskResult[T]] = []
        start_time = time.monotonic()

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="collect") as executor:
            futures = {executor.submit(self._execute_single, task, ctx): task for task in tasks}

            try:
                for future in as_completed(futures):
                    task = futures[future]
                    try:
                        result = future.result()
                    except Exception as e:
                        logger.error(f"unexpected executor error [{task.source}/{task.identifier}]: {e}")
                        _clear_exception_chain(e)
                        result = TaskResult(
                            identifier=task.identifier,
                            source=task.source,
                            success=False,
                            error=TaskError(
                                identifier=task.identifier,
                                source=task.source,
                                category=ErrorCategory.UNKNOWN,
                                error_code="ExecutorError",
                                message=str(e),
                                original_exception=e,
                            ),
                        )

                    results.append(result)
                    if progress_tracker:
                        progress_tracker.on_complete(result.success)
            except KeyboardInterrupt:
                # workers see the cancelled context before the pool shuts down
                ctx.cancel()
                raise

        total_time = (time.monotonic() - start_time) * 1000
        exec_result = ParallelExecutionResult(results=tuple(results))

        logger.info(
            f"parallel collection finished: ok {exec_result.success_count}, "
            f"failed {exec_result.error_count}, {total_time:.0f}ms"
        )

        return exec_result

    def _execute_single(self, task: TargetTask[T], ctx: CollectContext) -> TaskResult[T]:
        """Run one task inside a worker thread, never raises"""
        start_time = time.monotonic()

        try:
            ctx.raise_if_cancelled()
            return self._execute_with_retry(task, ctx, start_time)
        except Exception as e:
            _clear_exception_chain(e)
            return self._failure(task, e, 0, start_time)

    def _execute_with_retry(
        self,
        task: TargetTask[T],
        ctx: CollectContext,
        start_time: float,
    ) -> TaskResult[T]:
        """Run a task, retrying retryable errors with exponential backoff

        Args:
            task: task to run
            ctx: shared cancellation context
            start_time: monotonic start time (for duration)

        Returns:
            TaskResult[T]
        """
        last_error: Exception | None = None

        for attempt in range(self._retry_config.max_retries + 1):
            try:
                data = task.func(ctx)
                return TaskResult(
                    identifier=task.identifier,
                    source=task.source,
                    success=True,
                    data=data,
                    duration_ms=(time.monotonic() - start_time) * 1000,
                )

            except Exception as e:
                last_error = e

                if not is_retryable(e) or attempt >= self._retry_config.max_retries:
                    _clear_exception_chain(e)
                    return self._failure(task, e, attempt, start_time)

                delay = self._retry_config.get_delay(attempt)
                logger.debug(
                    f"[{task.source}/{task.identifier}] attempt {attempt + 1} failed, retrying in {delay:.2f}s..."
                )
                try:
                    ctx.wait(delay)
                except CollectionCancelledError as cancelled:
                    return self._failure(task, cancelled, attempt + 1, start_time)

        # unreachable: the loop always returns
        return self._failure(task, last_error or RuntimeError("retries exhausted"), self._retry_config.max_retries, start_time)

    def _failure(
        self,
        task: TargetTask[T],
        error: Exception,
        retries: int,
        start_time: float,
    ) -> TaskResult[T]:
        return TaskResult(
            identifier=task.identifier,
            source=task.source,
            success=False,
            error=TaskError(
                identifier=task.identifier,
                source=task.source,
                category=categorize_error(error),
                error_code=get_error_code(error),
                message=str(error),
                retries=retries,
                original_exception=error,
            ),
            duration_ms=(time.monotonic() - start_time) * 1000,
        )
