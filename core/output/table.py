"""
core/output/table.py - Table renderer (rich)

Two layouts picked from the records: repositories (GitHub) or cloud
resources (AWS).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, TextIO

from rich.console import Console
from rich.table import Table

from .writer import STDOUT, NO_RESOURCES, OutputWriter, format_cicd, format_owners, format_tests, yes_no

if TYPE_CHECKING:
    from core.inventory.types import Inventory

# rich wraps at the terminal width; files get a fixed, wide layout
FILE_WIDTH = 200

GITHUB_COLUMNS: tuple[str, ...] = ("Repo Name", "Owner(s)", "Last Committer", "Platform", "CI/CD", "Tests")
AWS_COLUMNS: tuple[str, ...] = ("App Name", "Owner", "Team", "Platform", "Stack Name", "CI/CD", "Account")


def build_table(inventory: Inventory) -> Table:
    """rich Table for a non-empty inventory"""
    if inventory.is_github:
        table = Table(*GITHUB_COLUMNS, title="GitHub Repository Inventory")
        for res in inventory:
            table.add_row(
                res.app_name,
                format_owners(res),
                res.last_committer,
                res.platform,
                format_cicd(res),
                format_tests(res),
            )
        return table

    table = Table(*AWS_COLUMNS, title="AWS Resource Inventory")
    for res in inventory:
        table.add_row(
            res.app_name,
            res.owner,
            res.team,
            res.platform,
            res.stack_name,
            yes_no(res.has_cicd),
            res.account,
        )
    return table


class TableWriter(OutputWriter):
    """Inventory as a rich table

    Example:
        TableWriter().write(inventory)               # stdout
        TableWriter("inventory.txt").write(inventory)
    """

    def __init__(self, output: str = STDOUT, width: int | None = None):
        super().__init__(output)
        self.width = width

    def render(self, inventory: Inventory, stream: TextIO) -> None:
        width = self.width
        if width is None and not stream.isatty():
            width = FILE_WIDTH
        console = Console(file=stream, width=width, highlight=False, soft_wrap=False)

        if inventory.is_empty:
            console.print(NO_RESOURCES)
            return

        console.print(build_table(inventory))
        console.print(f"{len(inventory)} resource(s)")
