"""
core/sources - Backend data sources

Usage:
    from core.sources import create_data_source

    aws = create_data_source("aws", account=AccountConfig.from_profile("prod"))
    github = create_data_source("github", token=token, org="my-org")
"""

from __future__ import annotations

from typing import Any

from core.exceptions import ConfigError

from .aws import AWSDataSource
from .base import DataSource
from .github import GitHubDataSource

SOURCE_KINDS: dict[str, type[DataSource]] = {
    "aws": AWSDataSource,
    "github": GitHubDataSource,
}


def create_data_source(kind: str, **kwargs: Any) -> DataSource:
    """Build the DataSource variant named by ``kind`` ("aws" or "github")

    Raises:
        ConfigError: unknown kind
    """
    source_cls = SOURCE_KINDS.get(kind.lower())
    if source_cls is None:
        raise ConfigError("source", f"unknown data source: {kind} (expected one of {', '.join(SOURCE_KINDS)})")
    return source_cls(**kwargs)


__all__ = [
    "DataSource",
    "AWSDataSource",
    "GitHubDataSource",
    "SOURCE_KINDS",
    "create_data_source",
]
