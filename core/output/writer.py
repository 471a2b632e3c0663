"""
core/output/writer.py - Inventory writer base and factory

A writer renders one Inventory to stdout or to a file path. Cell formatting
shared by the table and markdown layouts lives here as well.
"""

from __future__ import annotations

import logging
import sys
from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, TextIO

from core.exceptions import ConfigError

if TYPE_CHECKING:
    from core.inventory.types import Inventory, ResourceInfo

logger = logging.getLogger(__name__)

STDOUT = "stdout"
FORMATS: tuple[str, ...] = ("table", "markdown")
MAX_LISTED_OWNERS = 3
NO_RESOURCES = "No resources found."


def yes_no(value: bool) -> str:
    return "Yes" if value else "No"


def format_owners(res: ResourceInfo) -> str:
    """First MAX_LISTED_OWNERS code owners, then "(+N more)"; "Unknown" without owners"""
    if not (res.has_code_owners and res.code_owners):
        return "Unknown"

    owners = ", ".join(res.code_owners[:MAX_LISTED_OWNERS])
    extra = len(res.code_owners) - MAX_LISTED_OWNERS
    if extra > 0:
        owners += f" (+{extra} more)"
    return owners


def format_cicd(res: ResourceInfo) -> str:
    """CI/CD platform name for repositories, Yes/No for cloud resources"""
    if res.is_github:
        return res.cicd_platform or "No"
    return yes_no(res.has_cicd)


def format_tests(res: ResourceInfo) -> str:
    if not res.has_tests:
        return "No"
    if res.test_framework:
        return f"Yes ({res.test_framework})"
    return "Yes"


def format_date(res: ResourceInfo) -> str:
    if res.last_commit_date is None:
        return ""
    return res.last_commit_date.strftime("%Y-%m-%d")


class OutputWriter(ABC):
    """Renders an Inventory to stdout or a file

    Args:
        output: "stdout" (or "-" / "") for standard output, else a file path
    """

    def __init__(self, output: str = STDOUT):
        self.output = output or STDOUT

    @property
    def to_stdout(self) -> bool:
        return self.output in (STDOUT, "-")

    def write(self, inventory: Inventory) -> None:
        if self.to_stdout:
            self.render(inventory, sys.stdout)
            return

        path = Path(self.output)
        if path.parent and not path.parent.exists():
            path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w", encoding="utf-8") as f:
            self.render(inventory, f)
        logger.info(f"inventory written to {path}")

    @abstractmethod
    def render(self, inventory: Inventory, stream: TextIO) -> None:
        """Write the rendered inventory to an open text stream"""


def create_writer(fmt: str, output: str = STDOUT) -> OutputWriter:
    """Writer for ``fmt`` ("table" or "markdown")

    Raises:
        ConfigError: unknown format
    """
    # imported here: table / markdown subclass OutputWriter
    from .markdown import MarkdownWriter
    from .table import TableWriter

    fmt = fmt.lower()
    if fmt == "table":
        return TableWriter(output)
    if fmt == "markdown":
        return MarkdownWriter(output)
    raise ConfigError("format", f"unknown output format: {fmt} (expected one of {', '.join(FORMATS)})")
