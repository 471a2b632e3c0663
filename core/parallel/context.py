"""
core/parallel/context.py - Shared cancellation context

One CollectContext is shared by every worker of a collection run. Backend
clients call ``raise_if_cancelled()`` before each call so that cancelling
the context (or passing its deadline) makes in-flight workers fail fast
with CollectionCancelledError instead of hanging.

Example:
    ctx = CollectContext(timeout=300)
    result = collector.collect_from_sources(sources, ctx)

    # from another thread (e.g. a signal handler)
    ctx.cancel()
"""

from __future__ import annotations

import threading
import time

from core.exceptions import CollectionCancelledError


class CollectContext:
    """Cancellation flag plus optional deadline

    Attributes:
        timeout: seconds until the deadline (None = no deadline)
    """

    def __init__(self, timeout: float | None = None):
        if timeout is not None and timeout <= 0:
            raise ValueError(f"timeout must be > 0, got {timeout}")
        self._event = threading.Event()
        self._deadline = time.monotonic() + timeout if timeout is not None else None
        self.timeout = timeout

    def cancel(self) -> None:
        """Cancel every worker sharing this context"""
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def expired(self) -> bool:
        return self._deadline is not None and time.monotonic() >= self._deadline

    def remaining(self) -> float | None:
        """Seconds left before the deadline (None if there is none)"""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def raise_if_cancelled(self) -> None:
        """Raise CollectionCancelledError if cancelled or past the deadline"""
        if self._event.is_set():
            raise CollectionCancelledError()
        if self.expired:
            raise CollectionCancelledError(f"collection deadline exceeded ({self.timeout}s)")

    def wait(self, seconds: float) -> None:
        """Sleep up to ``seconds``, waking early and raising on cancellation"""
        remaining = self.remaining()
        if remaining is not None:
            seconds = min(seconds, remaining)
        self._event.wait(seconds)
        self.raise_if_cancelled()
