"""
cli/ui/progress.py - Progress display for multi-target collection

Example:
    with parallel_progress("Collecting inventory") as tracker:
        result = collector.collect_from_sources(sources, ctx, progress_tracker=tracker)

    success, failed, total = tracker.stats
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

from rich.progress import BarColumn, MofNCompleteColumn, Progress, SpinnerColumn, TaskID, TextColumn, TimeElapsedColumn

from .console import console as default_console

if TYPE_CHECKING:
    from rich.console import Console

# success / failure counts live in the task's fields
COUNTS_TEMPLATE = "[green]{task.fields[success]}✓[/green] [red]{task.fields[failed]}✗[/red]"


class ParallelTracker:
    """Counts finished targets and mirrors them onto a rich task

    Works without a Progress as a plain counter. The executor calls
    set_total() once and on_complete() once per target.
    """

    def __init__(self, progress: Progress | None = None, task_id: TaskID | None = None) -> None:
        self._progress = progress
        self._task_id = task_id
        self._lock = threading.Lock()
        self._counts = {"success": 0, "failed": 0}
        self._total = 0

    def _refresh(self, **kwargs) -> None:
        if self._progress is None or self._task_id is None:
            return
        self._progress.update(self._task_id, **kwargs)

    def set_total(self, total: int) -> None:
        with self._lock:
            self._total = total
            self._refresh(total=total)

    def on_complete(self, success: bool) -> None:
        with self._lock:
            self._counts["success" if success else "failed"] += 1
            self._refresh(completed=sum(self._counts.values()), **self._counts)

    @property
    def stats(self) -> tuple[int, int, int]:
        """(success, failed, total)"""
        with self._lock:
            return self._counts["success"], self._counts["failed"], self._total


@contextmanager
def parallel_progress(description: str, console: Console | None = None) -> Iterator[ParallelTracker]:
    """Spinner, counts and bar for one parallel collection; yields the tracker"""
    progress = Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        TextColumn(COUNTS_TEMPLATE),
        MofNCompleteColumn(),
        BarColumn(bar_width=40),
        TimeElapsedColumn(),
        console=console or default_console,
    )

    with progress:
        task_id = progress.add_task(f"[cyan]{description}", total=None, success=0, failed=0)
        yield ParallelTracker(progress, task_id)
