"""
cli/app.py - Main CLI entry point

Click based entry point of app-inventory.

Command structure:
    app-inventory --version
    app-inventory collect --source github --github-org my-org
    app-inventory collect --source aws --account production,staging --format markdown --output inventory.md

Flow of ``collect``:
    1. build one DataSource per target (one organization, or one per account)
    2. collect: inline for a single target, in parallel with a progress bar otherwise
    3. report failed targets and non-fatal enrichment errors as warnings
    4. render the merged inventory; exit 1 when it is empty

Usage:
    $ app-inventory collect --source github --github-org my-org
    $ python -m cli.app collect --source aws --account production
"""

from __future__ import annotations

import logging

import click

from core.config import AccountConfig, get_version, load_config, resolve_github_token
from core.exceptions import ConfigError, TargetCollectionError, format_error_for_user
from core.inventory import Inventory, InventoryCollector
from core.output import FORMATS, STDOUT, create_writer
from core.parallel import CollectContext, ParallelConfig
from core.sources import DataSource, create_data_source

from cli.ui import (
    parallel_progress,
    print_error,
    print_error_tree,
    print_info,
    print_success,
    print_warning,
    setup_logging,
)

logger = logging.getLogger(__name__)

VERSION = get_version()

SOURCES = ("github", "aws")
DEFAULT_MAX_WORKERS = 10


def _split_accounts(values: tuple[str, ...]) -> list[str]:
    """--account may repeat and each value may be comma-separated"""
    names: list[str] = []
    for value in values:
        for name in value.split(","):
            name = name.strip()
            if name and name not in names:
                names.append(name)
    return names


def build_sources(
    source: str,
    github_org: str | None = None,
    github_token: str | None = None,
    exclude_archived: bool = True,
    accounts: list[str] | None = None,
    use_profile: bool = True,
    config_path: str = "config.json",
) -> list[DataSource]:
    """One DataSource per collection target

    Raises:
        ConfigError: missing or invalid options / configuration
    """
    if source == "github":
        if not github_org:
            raise ConfigError("github-org", "--github-org is required for the github source")
        token = resolve_github_token(github_token)
        return [create_data_source("github", token=token, org=github_org, exclude_archived=exclude_archived)]

    if source == "aws":
        if not accounts:
            raise ConfigError("account", "--account is required for the aws source")

        if use_profile:
            account_configs = [AccountConfig.from_profile(name) for name in accounts]
        else:
            app_config = load_config(config_path)
            account_configs = [app_config.get_account(name) for name in accounts]

        return [create_data_source("aws", account=account) for account in account_configs]

    raise ConfigError("source", f"unknown source '{source}'. Use 'github' or 'aws'")


def run_collection(
    sources: list[DataSource],
    ctx: CollectContext,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> Inventory:
    """Collect every source and return the merged inventory

    A single target fails the run; with several targets failures are
    reported as warnings and the successful targets are merged.
    """
    collector = InventoryCollector(ParallelConfig(max_workers=max_workers))

    if len(sources) == 1:
        inventory = collector.collect_from_source(sources[0], ctx)
    else:
        with parallel_progress("Collecting inventory") as tracker:
            result = collector.collect_from_sources(sources, ctx, progress_tracker=tracker)

        if result.errors:
            by_cause: dict[str, list[str]] = {}
            for error in result.errors:
                category = type(error.cause).__name__ if error.cause else "Error"
                by_cause.setdefault(category, []).append(f"{error.source} [{error.target}]")
            print_error_tree(list(by_cause.items()), title=f"{result.error_count} target(s) failed")
        inventory = result.merged()

    for source in sources:
        collected = getattr(source, "errors", None)
        if collected is not None and collected.has_errors:
            print_warning(f"{source.name} [{source.target}]: {collected.get_summary()}")

    return inventory


@click.group()
@click.version_option(VERSION, prog_name="app-inventory")
def cli() -> None:
    """app-inventory - application inventory from AWS accounts and GitHub organizations"""


@cli.command("collect")
@click.option("--source", type=click.Choice(SOURCES), default="github", show_default=True, help="Data source")
@click.option("--github-org", default=None, help="GitHub organization name")
@click.option("--github-token", default=None, help="GitHub personal access token (or GITHUB_TOKEN)")
@click.option(
    "--exclude-archived/--include-archived",
    default=True,
    show_default=True,
    help="Skip archived repositories",
)
@click.option(
    "--account",
    "accounts",
    multiple=True,
    help="AWS account name(s), comma-separated or repeated",
)
@click.option(
    "--use-profile/--no-use-profile",
    default=True,
    show_default=True,
    help="Use AWS shared credential profiles instead of the config file",
)
@click.option("--config", "config_path", default="config.json", show_default=True, help="Path of the accounts file")
@click.option(
    "-f",
    "--format",
    "output_format",
    type=click.Choice(FORMATS),
    default="table",
    show_default=True,
    help="Output format",
)
@click.option("-o", "--output", default=STDOUT, show_default=True, help="stdout or a file path")
@click.option("--max-workers", type=click.IntRange(1, 100), default=DEFAULT_MAX_WORKERS, show_default=True)
@click.option("--timeout", type=click.FloatRange(min=0, min_open=True), default=None, help="Deadline in seconds")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging")
def collect_command(
    source: str,
    github_org: str | None,
    github_token: str | None,
    exclude_archived: bool,
    accounts: tuple[str, ...],
    use_profile: bool,
    config_path: str,
    output_format: str,
    output: str,
    max_workers: int,
    timeout: float | None,
    verbose: bool,
) -> None:
    """Collect the inventory and render it"""
    setup_logging(verbose)

    try:
        sources = build_sources(
            source,
            github_org=github_org,
            github_token=github_token,
            exclude_archived=exclude_archived,
            accounts=_split_accounts(accounts),
            use_profile=use_profile,
            config_path=config_path,
        )
        writer = create_writer(output_format, output)
    except ConfigError as e:
        print_error(format_error_for_user(e))
        raise SystemExit(1) from e

    targets = ", ".join(s.target for s in sources)
    print_info(f"Collecting inventory from {source}: {targets}")

    ctx = CollectContext(timeout=timeout)
    try:
        inventory = run_collection(sources, ctx, max_workers=max_workers)
    except TargetCollectionError as e:
        print_error(format_error_for_user(e))
        raise SystemExit(1) from e
    except KeyboardInterrupt:
        ctx.cancel()
        print_warning("collection cancelled")
        raise SystemExit(130) from None

    if inventory.is_empty:
        print_error("No resources found")
        raise SystemExit(1)

    try:
        writer.write(inventory)
    except OSError as e:
        print_error(f"failed to write output: {e}")
        raise SystemExit(1) from e

    print_success(f"Processed {len(inventory)} resource(s) from {source}")


def main() -> None:
    cli(prog_name="app-inventory")


if __name__ == "__main__":
    main()
