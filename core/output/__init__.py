"""
core/output - Inventory renderers

Usage:
    from core.output import create_writer

    create_writer("markdown", "inventory.md").write(inventory)
"""

from .markdown import MarkdownWriter, escape_markdown, render_markdown
from .table import TableWriter, build_table
from .writer import FORMATS, STDOUT, OutputWriter, create_writer, format_owners

__all__ = [
    "OutputWriter",
    "TableWriter",
    "MarkdownWriter",
    "create_writer",
    "build_table",
    "render_markdown",
    "escape_markdown",
    "format_owners",
    "FORMATS",
    "STDOUT",
]
