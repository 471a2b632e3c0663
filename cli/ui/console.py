"""
cli/ui/console.py - Rich console utilities

Status output of the CLI goes to stderr so that an inventory rendered to
stdout stays clean.
"""

import logging
import platform

from rich.console import Console
from rich.logging import RichHandler
from rich.tree import Tree

# Limit noisy botocore logs
NOISY_LOGGERS = (
    "botocore.httpchecksum",
    "botocore.credentials",
    "botocore.loaders",
    "botocore.session",
    "urllib3.connectionpool",
)


def get_console() -> Console:
    """Create the stderr Rich Console"""
    is_windows = platform.system().lower() == "windows"

    return Console(
        stderr=True,
        color_system="auto",
        highlight=True,
        soft_wrap=True,
        markup=True,
        emoji=not is_windows,
    )


# Global console instance
console = get_console()


def setup_logging(verbose: bool = False) -> None:
    """Route logging through Rich, WARNING by default and DEBUG with --verbose"""
    handler = RichHandler(console=console, show_path=False, rich_tracebacks=verbose)
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, handlers=[handler], force=True)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


# =============================================================================
# Standard output styles (Rich styles only, no emoji)
# =============================================================================

SYMBOL_SUCCESS = "✓"
SYMBOL_ERROR = "✗"
SYMBOL_WARNING = "!"
SYMBOL_INFO = "•"


def print_success(message: str) -> None:
    console.print(f"[green]{SYMBOL_SUCCESS} {message}[/green]")


def print_error(message: str) -> None:
    console.print(f"[red]{SYMBOL_ERROR} {message}[/red]")


def print_warning(message: str) -> None:
    console.print(f"[yellow]{SYMBOL_WARNING} {message}[/yellow]")


def print_info(message: str) -> None:
    console.print(f"[blue]{SYMBOL_INFO} {message}[/blue]")


def print_error_tree(errors: list[tuple[str, list[str]]], title: str = "Error summary") -> None:
    """Errors as a tree grouped by category

    Args:
        errors: (category, [detail_items]) tuples

    Example:
        print_error_tree([
            ("AuthenticationError", ["staging"]),
            ("CODEOWNERS", ["my-org/api", "my-org/web"]),
        ])
    """
    tree = Tree(f"[bold yellow]{title}[/bold yellow]")
    for category, items in errors:
        branch = tree.add(f"[red]{category}[/red] ({len(items)})")
        for item in items[:3]:
            branch.add(f"[dim]{item}[/dim]")
        if len(items) > 3:
            branch.add(f"[dim]... and {len(items) - 3} more[/dim]")
    console.print(tree)
