# core/__init__.py
"""
core - app-inventory engine

Top-level package of the collection and classification engine.

Architecture:
    core/
    ├── sources/        # DataSource abstraction + AWS / GitHub backends
    ├── inventory/      # data model and multi-target collector
    ├── parallel/       # worker-per-target executor, retry, cancellation
    ├── output/         # table / markdown renderers
    ├── config.py       # accounts file, profiles, GitHub token
    └── exceptions.py   # exception hierarchy

Usage:
    from core.inventory import InventoryCollector
    from core.sources import create_data_source

    source = create_data_source("github", token=token, org="my-org")
    inventory = InventoryCollector().collect_from_source(source)
"""

from core import config, exceptions, inventory, output, parallel, sources

__all__: list[str] = [
    # subpackages
    "inventory",
    "output",
    "parallel",
    "sources",
    # modules
    "config",
    "exceptions",
]
