"""
core/inventory/types.py - Inventory data model

Source-agnostic records produced by the data sources and consumed by the
renderers. ResourceInfo values are immutable once a classifier built them.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from core.exceptions import TargetCollectionError

UNKNOWN = "Unknown"
NO_STACK = "None"


def _empty_tags() -> Mapping[str, str]:
    return MappingProxyType({})


@dataclass(frozen=True)
class ResourceInfo:
    """One normalized inventory record

    Fields are a superset across backends; a source fills only its subset
    and leaves the rest at their zero values.
    """

    # Identity
    app_name: str = UNKNOWN
    source: str = ""
    account: str = ""
    arn: str = ""
    github_repo: str = ""
    repo_url: str = ""

    # Ownership
    owner: str = UNKNOWN
    team: str = UNKNOWN

    # Classification
    platform: str = UNKNOWN
    stack_name: str = ""
    has_cicd: bool = False
    cicd_platform: str = ""
    has_tests: bool = False
    test_framework: str = ""

    # GitHub
    has_code_owners: bool = False
    code_owners: tuple[str, ...] = ()
    is_archived: bool = False
    last_committer: str = ""
    last_commit_date: datetime | None = None

    # Provenance
    resource_tags: Mapping[str, str] = field(default_factory=_empty_tags, hash=False)

    def __post_init__(self) -> None:
        # Owner / Team never leave the classifier empty
        if not self.owner:
            object.__setattr__(self, "owner", UNKNOWN)
        if not self.team:
            object.__setattr__(self, "team", UNKNOWN)
        if not isinstance(self.resource_tags, MappingProxyType):
            object.__setattr__(self, "resource_tags", MappingProxyType(dict(self.resource_tags)))

    @property
    def is_github(self) -> bool:
        return bool(self.github_repo)


@dataclass
class InventorySummary:
    """Summary statistics of an inventory"""

    total_resources: int = 0
    by_platform: dict[str, int] = field(default_factory=dict)
    by_account: dict[str, int] = field(default_factory=dict)
    with_cicd: int = 0
    without_cicd: int = 0


@dataclass
class Inventory:
    """Ordered sequence of ResourceInfo

    Insertion order is source traversal order; nothing is sorted.

    Attributes:
        resources: the records
        source: data source name ("" for merged inventories)
        target: target identifier ("" for merged inventories)
    """

    resources: list[ResourceInfo] = field(default_factory=list)
    source: str = ""
    target: str = ""

    def __len__(self) -> int:
        return len(self.resources)

    def __iter__(self) -> Iterator[ResourceInfo]:
        return iter(self.resources)

    @property
    def is_empty(self) -> bool:
        return not self.resources

    @property
    def is_github(self) -> bool:
        return bool(self.resources) and self.resources[0].is_github

    def summary(self) -> InventorySummary:
        summary = InventorySummary(total_resources=len(self.resources))

        for res in self.resources:
            summary.by_platform[res.platform] = summary.by_platform.get(res.platform, 0) + 1
            account = res.account or res.source
            summary.by_account[account] = summary.by_account.get(account, 0) + 1
            if res.has_cicd:
                summary.with_cicd += 1
            else:
                summary.without_cicd += 1

        return summary


def merge_inventories(inventories: list[Inventory]) -> Inventory:
    """Concatenate inventories in the given order (no dedup)"""
    merged = Inventory()
    for inv in inventories:
        merged.resources.extend(inv.resources)
    return merged


@dataclass
class CollectionResult:
    """Outcome of a multi-target collection

    Attributes:
        inventories: successful inventories, in completion order
        errors: one TargetCollectionError per failed target
    """

    inventories: list[Inventory] = field(default_factory=list)
    errors: list[TargetCollectionError] = field(default_factory=list)

    @property
    def success_count(self) -> int:
        return len(self.inventories)

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def total_resources(self) -> int:
        return sum(len(inv) for inv in self.inventories)

    def merged(self) -> Inventory:
        return merge_inventories(self.inventories)

    def get_error_summary(self) -> str:
        if not self.errors:
            return "no errors"

        lines = [f"{len(self.errors)} target(s) failed:"]
        for error in self.errors:
            lines.append(f"  - {error}")
        return "\n".join(lines)
