"""
core/output/markdown.py - Markdown renderer

Confluence-compatible markdown: title, generation time, summary and one
resources table.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, TextIO

from .writer import NO_RESOURCES, OutputWriter, format_cicd, format_date, format_owners, format_tests, yes_no

if TYPE_CHECKING:
    from core.inventory.types import Inventory

GITHUB_TITLE = "# GitHub Repository Inventory"
AWS_TITLE = "# AWS Resource Inventory"


def escape_markdown(value: str) -> str:
    """Escape characters that break a table cell"""
    return value.replace("|", "\\|").replace("\n", " ")


def _row(values: list[str]) -> str:
    return "| " + " | ".join(escape_markdown(v) for v in values) + " |"


def _header(columns: list[str]) -> list[str]:
    return [_row(columns), "|" + "|".join("-" * (len(c) + 2) for c in columns) + "|"]


def render_markdown(inventory: Inventory, generated_at: datetime | None = None) -> str:
    """Full markdown document of an inventory"""
    generated_at = generated_at or datetime.now()
    lines = [
        GITHUB_TITLE if inventory.is_github else AWS_TITLE,
        "",
        f"**Generated**: {generated_at.strftime('%Y-%m-%d %H:%M:%S')}",
        "",
    ]

    if inventory.is_empty:
        lines.append(NO_RESOURCES)
        return "\n".join(lines) + "\n"

    summary = inventory.summary()
    lines += ["## Summary", "", f"- **Total Resources**: {summary.total_resources}"]
    lines += [f"- **{escape_markdown(platform)}**: {count}" for platform, count in summary.by_platform.items()]
    lines += [
        "",
        f"- **Resources with CI/CD**: {summary.with_cicd}",
        f"- **Resources without CI/CD**: {summary.without_cicd}",
        "",
        "## Resources",
        "",
    ]

    if inventory.is_github:
        lines += _header(["Repo Name", "Owner(s)", "Last Committer", "Last Commit", "Platform", "CI/CD", "Tests"])
        for res in inventory:
            lines.append(
                _row(
                    [
                        f"[{res.app_name}]({res.repo_url})" if res.repo_url else res.app_name,
                        format_owners(res),
                        res.last_committer,
                        format_date(res),
                        res.platform,
                        format_cicd(res),
                        format_tests(res),
                    ]
                )
            )
    else:
        lines += _header(["App Name", "Owner", "Team", "Platform", "Stack Name", "CI/CD", "Account"])
        for res in inventory:
            lines.append(
                _row(
                    [
                        res.app_name,
                        res.owner,
                        res.team,
                        res.platform,
                        res.stack_name,
                        yes_no(res.has_cicd),
                        res.account,
                    ]
                )
            )

    return "\n".join(lines) + "\n"


class MarkdownWriter(OutputWriter):
    """Inventory as markdown

    Example:
        MarkdownWriter("inventory.md").write(inventory)
    """

    def render(self, inventory: Inventory, stream: TextIO) -> None:
        stream.write(render_markdown(inventory))
