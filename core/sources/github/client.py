"""
core/sources/github/client.py - GitHub REST API client

Thin ``requests`` wrapper for the calls the GitHub data source needs:
organization repositories (paginated via the ``Link`` header), directory
listings, the last commit of the default branch, and file contents.
Every call checks the shared CollectContext first.
"""

from __future__ import annotations

import base64
import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any

import requests

from core.exceptions import (
    APICallError,
    AuthenticationError,
    ConfigError,
    ConnectivityError,
    SourceError,
    is_access_denied,
    is_not_found,
)

if TYPE_CHECKING:
    from core.parallel.context import CollectContext

logger = logging.getLogger(__name__)

SOURCE_NAME = "GitHub"
SERVICE_NAME = "github"
DEFAULT_API_URL = "https://api.github.com"
DEFAULT_PER_PAGE = 100
DEFAULT_TIMEOUT = 30  # seconds


@dataclass
class Repository:
    """Repository metadata plus the enrichment gathered by the data source"""

    name: str
    html_url: str = ""
    default_branch: str = ""
    is_archived: bool = False
    files: list[str] = field(default_factory=list)
    last_committer: str = ""
    last_commit_date: datetime | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Repository:
        return cls(
            name=data.get("name", ""),
            html_url=data.get("html_url", ""),
            default_branch=data.get("default_branch") or "",
            is_archived=bool(data.get("archived", False)),
        )


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse GitHub's ISO 8601 timestamps ("2024-01-01T00:00:00Z")"""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


class GitHubClient:
    """GitHub API client for one organization

    Example:
        client = GitHubClient(token, "my-org")
        for repo in client.list_repositories(exclude_archived=True):
            print(repo.name)
    """

    def __init__(
        self,
        token: str,
        org: str,
        base_url: str = DEFAULT_API_URL,
        session: requests.Session | None = None,
        per_page: int = DEFAULT_PER_PAGE,
        timeout: int = DEFAULT_TIMEOUT,
    ):
        if not token:
            raise ConfigError("github-token", "GitHub token is required")
        if not org:
            raise ConfigError("github-org", "GitHub organization is required")

        self.org = org
        self.base_url = base_url.rstrip("/")
        self.per_page = per_page
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
            }
        )

    def _url(self, path: str) -> str:
        if path.startswith("http://") or path.startswith("https://"):
            return path
        return f"{self.base_url}/{path.lstrip('/')}"

    def _get(
        self,
        path: str,
        operation: str,
        params: dict[str, Any] | None = None,
        ctx: CollectContext | None = None,
    ) -> requests.Response:
        """GET with status check

        Raises:
            APICallError: non-2xx response
            requests.ConnectionError / requests.Timeout: transport failure
            CollectionCancelledError: ctx cancelled
        """
        if ctx:
            ctx.raise_if_cancelled()

        response = self.session.get(self._url(path), params=params, timeout=self.timeout)
        try:
            response.raise_for_status()
        except requests.HTTPError as e:
            raise APICallError.from_http_error(SERVICE_NAME, operation, e) from e
        return response

    def _paginate(
        self,
        path: str,
        operation: str,
        params: dict[str, Any] | None = None,
        ctx: CollectContext | None = None,
    ) -> Iterator[dict[str, Any]]:
        """Yield items of a list endpoint, following rel="next" links"""
        url: str | None = path
        page_params = dict(params or {}, per_page=self.per_page)

        while url:
            response = self._get(url, operation, params=page_params, ctx=ctx)
            items = response.json()
            if not isinstance(items, list):
                raise APICallError(SERVICE_NAME, operation, error_message="expected a JSON array")
            yield from items

            url = response.links.get("next", {}).get("url")
            # the next link already carries the query string
            page_params = None

    def list_repositories(
        self,
        exclude_archived: bool = True,
        ctx: CollectContext | None = None,
    ) -> list[Repository]:
        """All repositories of the organization, in API order

        Raises:
            AuthenticationError: token rejected (401/403)
            ConnectivityError: API unreachable
            SourceError: organization missing or other API failure
        """
        repos: list[Repository] = []

        try:
            for data in self._paginate(f"orgs/{self.org}/repos", "list_repositories", {"type": "all"}, ctx):
                repo = Repository.from_api(data)
                if exclude_archived and repo.is_archived:
                    continue
                repos.append(repo)

        except APICallError as e:
            if is_access_denied(e):
                raise AuthenticationError(SOURCE_NAME, self.org, "token rejected", e) from e
            if is_not_found(e):
                raise SourceError(SOURCE_NAME, self.org, "organization not found", e) from e
            raise SourceError(SOURCE_NAME, self.org, "failed to list repositories", e) from e
        except (requests.ConnectionError, requests.Timeout) as e:
            raise ConnectivityError(SOURCE_NAME, self.org, "GitHub API unreachable", e) from e

        logger.debug(f"[{self.org}] {len(repos)} repositor(ies) listed")
        return repos

    def list_directory(
        self,
        repo: str,
        path: str = "",
        ctx: CollectContext | None = None,
    ) -> list[dict[str, Any]]:
        """Entries of a directory; [] when the path (or the repository content) does not exist"""
        try:
            response = self._get(f"repos/{self.org}/{repo}/contents/{path}", "list_directory", ctx=ctx)
        except APICallError as e:
            if is_not_found(e):
                return []
            raise

        entries = response.json()
        if not isinstance(entries, list):
            # a file, not a directory
            return []
        return entries

    def get_last_commit(
        self,
        repo: str,
        branch: str = "",
        ctx: CollectContext | None = None,
    ) -> tuple[str, datetime | None]:
        """(committer name, commit date) of the newest commit; ("", None) for empty repositories"""
        params: dict[str, Any] = {"per_page": 1}
        if branch:
            params["sha"] = branch

        try:
            response = self._get(f"repos/{self.org}/{repo}/commits", "get_last_commit", params=params, ctx=ctx)
        except APICallError as e:
            # 409: repository is empty
            if e.status_code == 409 or is_not_found(e):
                return "", None
            raise

        commits = response.json()
        if not commits:
            return "", None

        commit = commits[0]
        author = (commit.get("commit") or {}).get("author") or {}
        name = author.get("name") or ((commit.get("author") or {}).get("login") or "")
        return name, parse_timestamp(author.get("date"))

    def get_file_content(
        self,
        repo: str,
        path: str,
        ctx: CollectContext | None = None,
    ) -> str:
        """Decoded content of a file

        Raises:
            APICallError: 404 when the file does not exist, other API failures
        """
        response = self._get(f"repos/{self.org}/{repo}/contents/{path}", "get_file_content", ctx=ctx)
        payload = response.json()
        if not isinstance(payload, dict):
            return ""

        content = payload.get("content", "")
        if payload.get("encoding") == "base64":
            return base64.b64decode(content).decode("utf-8", errors="replace")
        return content
