"""
core/sources/base.py - DataSource abstraction

Every backend (AWS tagging API, GitHub organization) is wrapped in a
DataSource that the collector can query uniformly.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from core.inventory.types import ResourceInfo
    from core.parallel.context import CollectContext


class DataSource(ABC):
    """Uniform collection capability of one backend target

    ``collect`` enumerates every raw record (pagination followed to the
    end), drops records matched by the backend's exclusion rule, and
    classifies the rest. It raises only when nothing can be enumerated:
    AuthenticationError, ConnectivityError, SourceError, or
    CollectionCancelledError. Per-record gaps become sentinel defaults.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Backend kind, e.g. "AWS" or "GitHub" """

    @property
    @abstractmethod
    def target(self) -> str:
        """Queried scope, e.g. the account name or the organization"""

    @abstractmethod
    def collect(self, ctx: CollectContext | None = None) -> list[ResourceInfo]:
        """Fetch, filter and classify every record of the target"""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(target={self.target!r})"
