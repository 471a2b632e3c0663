"""
core/inventory - Inventory data model and collector

Classes:
    - ResourceInfo: one normalized record
    - Inventory: ordered records of one target (or a merge)
    - CollectionResult: successes and failures of a multi-target run
    - InventoryCollector: runs DataSources, sequentially or in parallel
"""

from .collector import InventoryCollector
from .types import (
    NO_STACK,
    UNKNOWN,
    CollectionResult,
    Inventory,
    InventorySummary,
    ResourceInfo,
    merge_inventories,
)

__all__ = [
    "InventoryCollector",
    "ResourceInfo",
    "Inventory",
    "InventorySummary",
    "CollectionResult",
    "merge_inventories",
    "UNKNOWN",
    "NO_STACK",
]
