"""
core/inventory/collector.py - Multi-source inventory collector

Runs DataSource.collect for one target or for many targets concurrently,
always through the parallel executor (bounded retries, cancellation), and
turns the outcome into Inventory values.

Example:
    collector = InventoryCollector(ParallelConfig(max_workers=10))
    result = collector.collect_from_sources(sources, CollectContext(timeout=600))

    for error in result.errors:
        print(f"warning: {error}")
    inventory = result.merged()
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from core.exceptions import CollectionCancelledError, TargetCollectionError
from core.parallel import ParallelConfig, ParallelExecutionResult, ParallelTargetExecutor, TargetTask, TaskResult

from .types import CollectionResult, Inventory, ResourceInfo, merge_inventories

if TYPE_CHECKING:
    from cli.ui.progress import ParallelTracker
    from core.parallel.context import CollectContext
    from core.sources.base import DataSource

logger = logging.getLogger(__name__)

__all__ = ["InventoryCollector", "merge_inventories"]


class InventoryCollector:
    """Collects inventories from DataSources

    Every target runs through ParallelTargetExecutor, so a single target
    gets the same bounded retries as many; with several targets a failing
    target never affects its siblings.
    """

    def __init__(self, config: ParallelConfig | None = None):
        self.config = config or ParallelConfig()

    def _execute(
        self,
        sources: Sequence[DataSource],
        ctx: CollectContext | None,
        progress_tracker: ParallelTracker | None = None,
    ) -> ParallelExecutionResult[list[ResourceInfo]]:
        tasks: list[TargetTask[list[ResourceInfo]]] = [
            TargetTask(identifier=source.target, source=source.name, func=source.collect) for source in sources
        ]
        return ParallelTargetExecutor(self.config).execute(tasks, ctx, progress_tracker=progress_tracker)

    def collect_from_source(self, source: DataSource, ctx: CollectContext | None = None) -> Inventory:
        """Collect one target, retrying retryable failures

        Raises:
            TargetCollectionError: wraps whatever made the source fail
        """
        task_result = self._execute([source], ctx).results[0]
        if not task_result.success:
            error = _target_error(task_result)
            raise error from error.cause

        resources = list(task_result.data or [])
        logger.debug(f"[{source.name}/{source.target}] {len(resources)} resource(s)")
        return Inventory(resources=resources, source=source.name, target=source.target)

    def collect_from_sources(
        self,
        sources: Sequence[DataSource],
        ctx: CollectContext | None = None,
        progress_tracker: ParallelTracker | None = None,
    ) -> CollectionResult:
        """Collect every target concurrently

        Successful targets become inventories (completion order), failed
        ones become TargetCollectionErrors.
        """
        exec_result = self._execute(sources, ctx, progress_tracker)

        result = CollectionResult()
        for task_result in exec_result.results:
            if task_result.success:
                result.inventories.append(
                    Inventory(
                        resources=list(task_result.data or []),
                        source=task_result.source,
                        target=task_result.identifier,
                    )
                )
            else:
                result.errors.append(_target_error(task_result))

        if exec_result.has_failures_only():
            logger.error(exec_result.get_error_summary())

        logger.info(
            f"collection finished: {result.success_count} target(s) ok, "
            f"{result.error_count} failed, {result.total_resources} resource(s)"
        )
        return result


def _target_error(task_result: TaskResult[list[ResourceInfo]]) -> TargetCollectionError:
    cause = task_result.error.original_exception if task_result.error else None
    if not isinstance(cause, Exception):
        cause = CollectionCancelledError() if cause is None else Exception(str(cause))
    return TargetCollectionError(task_result.source, task_result.identifier, cause)
