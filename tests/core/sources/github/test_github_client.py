"""
tests/core/sources/github/test_github_client.py - GitHubClient tests
"""

import base64
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
import requests

from core.exceptions import (
    APICallError,
    AuthenticationError,
    CollectionCancelledError,
    ConfigError,
    ConnectivityError,
    SourceError,
)
from core.parallel import CollectContext, is_retryable
from core.sources.github.client import GitHubClient, Repository, parse_timestamp


@pytest.fixture
def session():
    return MagicMock()


@pytest.fixture
def client(session):
    return GitHubClient("token", "my-org", session=session)


class TestGitHubClientInit:
    """construction"""

    def test_headers(self, session):
        """Bearer token and the GitHub media type are set on the session"""
        GitHubClient("secret", "my-org", session=session)

        headers = session.headers.update.call_args.args[0]
        assert headers["Authorization"] == "Bearer secret"
        assert headers["Accept"] == "application/vnd.github+json"

    def test_requires_token(self, session):
        """An empty token is a ConfigError"""
        with pytest.raises(ConfigError):
            GitHubClient("", "my-org", session=session)

    def test_requires_org(self, session):
        """An empty org is a ConfigError"""
        with pytest.raises(ConfigError):
            GitHubClient("token", "", session=session)


class TestListRepositories:
    """list_repositories"""

    def test_follows_next_links(self, client, session, http_response):
        """Pages are followed through the Link header"""
        next_url = "https://api.github.com/organizations/1/repos?page=2"
        session.get.side_effect = [
            http_response(
                200,
                [{"name": "api", "html_url": "https://github.com/my-org/api", "default_branch": "main"}],
                links={"next": {"url": next_url}},
            ),
            http_response(200, [{"name": "web", "archived": False}]),
        ]

        repos = client.list_repositories()

        assert [r.name for r in repos] == ["api", "web"]
        assert repos[0].default_branch == "main"
        first, second = session.get.call_args_list
        assert first.args[0] == "https://api.github.com/orgs/my-org/repos"
        assert first.kwargs["params"]["per_page"] == 100
        assert second.args[0] == next_url
        assert second.kwargs["params"] is None

    def test_exclude_archived(self, client, session, http_response):
        """Archived repositories are dropped on request"""
        payload = [{"name": "api"}, {"name": "old", "archived": True}]
        session.get.return_value = http_response(200, payload)

        assert [r.name for r in client.list_repositories(exclude_archived=True)] == ["api"]
        assert [r.name for r in client.list_repositories(exclude_archived=False)] == ["api", "old"]

    def test_unauthorized(self, client, session, http_response):
        """401 becomes AuthenticationError"""
        session.get.return_value = http_response(401, {"message": "Bad credentials"})

        with pytest.raises(AuthenticationError) as exc_info:
            client.list_repositories()

        assert isinstance(exc_info.value.cause, APICallError)
        assert exc_info.value.cause.status_code == 401

    def test_rate_limited(self, client, session, http_response):
        """A 403 with no rate limit left is a retryable SourceError"""
        session.get.return_value = http_response(
            403, {"message": "API rate limit exceeded"}, headers={"X-RateLimit-Remaining": "0"}
        )

        with pytest.raises(SourceError) as exc_info:
            client.list_repositories()

        assert not isinstance(exc_info.value, AuthenticationError)
        assert exc_info.value.cause.error_code == "RateLimitExceeded"
        assert is_retryable(exc_info.value)

    def test_forbidden(self, client, session, http_response):
        """A 403 with quota left is AuthenticationError"""
        session.get.return_value = http_response(403, {"message": "Resource not accessible"}, headers={"X-RateLimit-Remaining": "4999"})

        with pytest.raises(AuthenticationError):
            client.list_repositories()

    def test_org_not_found(self, client, session, http_response):
        """404 is a plain SourceError"""
        session.get.return_value = http_response(404, {"message": "Not Found"})

        with pytest.raises(SourceError, match="organization not found") as exc_info:
            client.list_repositories()

        assert not isinstance(exc_info.value, AuthenticationError)

    def test_unreachable(self, client, session):
        """Connection failures become ConnectivityError"""
        session.get.side_effect = requests.ConnectionError("refused")

        with pytest.raises(ConnectivityError):
            client.list_repositories()

    def test_cancelled(self, client, session):
        """A cancelled context raises before any request"""
        ctx = CollectContext()
        ctx.cancel()

        with pytest.raises(CollectionCancelledError):
            client.list_repositories(ctx=ctx)

        session.get.assert_not_called()


class TestListDirectory:
    """list_directory"""

    def test_entries(self, client, session, http_response):
        """Directory entries are returned as-is"""
        session.get.return_value = http_response(200, [{"name": "workflows", "type": "dir"}])

        assert client.list_directory("api", ".github") == [{"name": "workflows", "type": "dir"}]
        assert session.get.call_args.args[0] == "https://api.github.com/repos/my-org/api/contents/.github"

    def test_missing_directory(self, client, session, http_response):
        """404 means an empty listing"""
        session.get.return_value = http_response(404, {"message": "Not Found"})
        assert client.list_directory("api", "docs") == []

    def test_path_is_a_file(self, client, session, http_response):
        """A file path means an empty listing"""
        session.get.return_value = http_response(200, {"name": "docs", "type": "file"})
        assert client.list_directory("api", "docs") == []

    def test_other_errors_raise(self, client, session, http_response):
        """Other failures raise APICallError"""
        session.get.return_value = http_response(500, {"message": "Server Error"})

        with pytest.raises(APICallError):
            client.list_directory("api")


class TestGetLastCommit:
    """get_last_commit"""

    def test_commit(self, client, session, http_response):
        """Committer name and date of the newest commit"""
        session.get.return_value = http_response(
            200,
            [{"commit": {"author": {"name": "Alice", "date": "2024-03-01T12:00:00Z"}}, "author": {"login": "alice"}}],
        )

        name, date = client.get_last_commit("api", "main")

        assert name == "Alice"
        assert date == datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)
        assert session.get.call_args.kwargs["params"] == {"per_page": 1, "sha": "main"}

    def test_empty_repository(self, client, session, http_response):
        """409 on an empty repository gives no commit"""
        session.get.return_value = http_response(409, {"message": "Git Repository is empty."})
        assert client.get_last_commit("api") == ("", None)

    def test_no_commits(self, client, session, http_response):
        """An empty commit list gives no commit"""
        session.get.return_value = http_response(200, [])
        assert client.get_last_commit("api") == ("", None)


class TestGetFileContent:
    """get_file_content"""

    def test_base64(self, client, session, http_response):
        """base64 file content is decoded"""
        encoded = base64.b64encode(b"* @alice\n").decode()
        session.get.return_value = http_response(200, {"content": encoded, "encoding": "base64"})

        assert client.get_file_content("api", "CODEOWNERS") == "* @alice\n"

    def test_not_found_raises(self, client, session, http_response):
        """Missing files raise with the 404 status"""
        session.get.return_value = http_response(404, {"message": "Not Found"})

        with pytest.raises(APICallError) as exc_info:
            client.get_file_content("api", "CODEOWNERS")

        assert exc_info.value.status_code == 404


class TestHelpers:
    """Repository.from_api / parse_timestamp"""

    def test_from_api(self):
        """Missing fields get defaults"""
        repo = Repository.from_api({"name": "api", "html_url": "u", "default_branch": None, "archived": True})

        assert repo.name == "api"
        assert repo.default_branch == ""
        assert repo.is_archived
        assert repo.files == []

    def test_parse_timestamp(self):
        """ISO timestamps parse, anything else is None"""
        assert parse_timestamp("2024-01-01T00:00:00Z") == datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert parse_timestamp(None) is None
        assert parse_timestamp("yesterday") is None
