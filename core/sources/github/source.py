"""
core/sources/github/source.py - GitHub data source

One GitHubDataSource per organization. For every repository it lists the
root and a few known sub-directories, drops Kubernetes/Helm repositories,
looks up the last commit and CODEOWNERS, and classifies the listing.

Enrichment failures (a listing, the last commit, a CODEOWNERS fetch) are
recorded in the ErrorCollector and the repository is still reported with
default values; only listing the organization itself can fail a collection.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import requests

from core.exceptions import APICallError, CollectionCancelledError, EnrichmentError, is_not_found
from core.inventory.types import ResourceInfo
from core.parallel import ErrorCollector, try_or_default
from core.sources.base import DataSource

from . import detector
from .client import SOURCE_NAME, GitHubClient, Repository

if TYPE_CHECKING:
    from core.parallel.context import CollectContext

logger = logging.getLogger(__name__)

# Sub-directories whose entries are added to the listing as "dir/name"
EXPANDED_DIRS: tuple[str, ...] = (".github", "docs")


def classify_repository(repo: Repository, codeowners_content: str | None = None) -> ResourceInfo:
    """Build the ResourceInfo of one repository

    Pure function of the repository listing and the CODEOWNERS text.
    """
    has_cicd, cicd_platform = detector.detect_cicd(repo.files)
    has_tests, test_reason = detector.detect_tests(repo.files)
    code_owners = tuple(detector.parse_codeowners(codeowners_content)) if codeowners_content else ()
    owner = code_owners[0] if code_owners else ""

    return ResourceInfo(
        app_name=repo.name,
        source=SOURCE_NAME,
        github_repo=repo.name,
        repo_url=repo.html_url,
        owner=owner,
        team=owner,
        platform=detector.detect_platform(repo.files),
        has_cicd=has_cicd,
        cicd_platform=cicd_platform,
        has_tests=has_tests,
        test_framework=test_reason,
        has_code_owners=detector.has_codeowners(repo.files),
        code_owners=code_owners,
        is_archived=repo.is_archived,
        last_committer=repo.last_committer,
        last_commit_date=repo.last_commit_date,
    )


class GitHubDataSource(DataSource):
    """Repositories of one GitHub organization

    Example:
        source = GitHubDataSource(token, "my-org", exclude_archived=True)
        resources = source.collect()

        if source.errors.has_errors:
            print(source.errors.get_summary())
    """

    def __init__(
        self,
        token: str,
        org: str,
        exclude_archived: bool = True,
        client: GitHubClient | None = None,
        errors: ErrorCollector | None = None,
    ):
        self.org = org
        self.exclude_archived = exclude_archived
        self._client = client or GitHubClient(token, org)
        self.errors = errors or ErrorCollector("github")

    @property
    def name(self) -> str:
        return SOURCE_NAME

    @property
    def target(self) -> str:
        return self.org

    def collect(self, ctx: CollectContext | None = None) -> list[ResourceInfo]:
        repos = self._client.list_repositories(self.exclude_archived, ctx)

        infos: list[ResourceInfo] = []
        skipped = 0
        for repo in repos:
            repo.files = self.list_files(repo, ctx)

            # exclusion is decided on the listing alone, before any other lookup
            if detector.is_eks(repo.files):
                logger.debug(f"[{self.org}/{repo.name}] Kubernetes repository skipped")
                skipped += 1
                continue

            repo.last_committer, repo.last_commit_date = try_or_default(
                lambda: self._client.get_last_commit(repo.name, repo.default_branch, ctx),
                default=("", None),
                collector=self.errors,
                target=repo.name,
                operation="get_last_commit",
            )

            infos.append(classify_repository(repo, self.fetch_codeowners(repo, ctx)))

        logger.info(f"[{self.org}] {len(infos)} repositor(ies) collected, {skipped} Kubernetes repositor(ies) skipped")
        return infos

    def list_files(self, repo: Repository, ctx: CollectContext | None = None) -> list[str]:
        """Root entries plus the entries of EXPANDED_DIRS, as relative paths"""
        root = try_or_default(
            lambda: self._client.list_directory(repo.name, "", ctx),
            default=[],
            collector=self.errors,
            target=repo.name,
            operation="list_directory",
            path="/",
        )

        files = [entry.get("name", "") for entry in root if entry.get("name")]
        directories = {entry.get("name") for entry in root if entry.get("type") == "dir"}

        for directory in EXPANDED_DIRS:
            if directory not in directories:
                continue
            entries = try_or_default(
                lambda: self._client.list_directory(repo.name, directory, ctx),
                default=[],
                collector=self.errors,
                target=repo.name,
                operation="list_directory",
                path=directory,
            )
            files.extend(f"{directory}/{entry['name']}" for entry in entries if entry.get("name"))

        return files

    def fetch_codeowners(self, repo: Repository, ctx: CollectContext | None = None) -> str | None:
        """CODEOWNERS text of the first present candidate that can be read

        A 404 falls through to the next candidate. Any other failure is
        recorded as an EnrichmentError and ends the lookup.
        """
        for path in detector.detect_codeowners(repo.files):
            try:
                content = self._client.get_file_content(repo.name, path, ctx)
            except CollectionCancelledError:
                raise
            except APICallError as e:
                if is_not_found(e):
                    continue
                self._record_enrichment_error(repo, path, "API error", e)
                return None
            except (requests.ConnectionError, requests.Timeout) as e:
                self._record_enrichment_error(repo, path, "GitHub API unreachable", e)
                return None

            if content:
                return content

        return None

    def _record_enrichment_error(self, repo: Repository, path: str, message: str, cause: Exception) -> None:
        error = EnrichmentError(f"{self.org}/{repo.name}", path, message, cause)
        self.errors.collect(error, repo.name, "get_file_content", path=path)
