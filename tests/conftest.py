"""
tests/conftest.py - Shared pytest fixtures

Record builders, botocore / requests error helpers and moto integration.

Usage:
    def test_something(make_repository, fake_source):
        repo = make_repository("api", files=["Dockerfile"])
        source = fake_source("GitHub", "my-org", resources=[...])
"""

import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional
from unittest.mock import MagicMock

import moto
import pytest
import requests
from requests.structures import CaseInsensitiveDict

# Add the project root to sys.path
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from core.inventory.types import ResourceInfo  # noqa: E402
from core.sources.base import DataSource  # noqa: E402
from core.sources.github.client import Repository  # noqa: E402

# =============================================================================
# Environment
# =============================================================================


@pytest.fixture(autouse=True)
def setup_test_environment(monkeypatch):
    """Fake AWS credentials, no GitHub token from the real environment"""
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.delenv("AWS_REGION", raising=False)
    monkeypatch.delenv("AWS_PROFILE", raising=False)
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    yield


# =============================================================================
# Records and sources
# =============================================================================


@pytest.fixture
def make_repository():
    def _make(name: str = "api", files: Optional[List[str]] = None, **kwargs: Any) -> Repository:
        return Repository(
            name=name,
            html_url=kwargs.pop("html_url", f"https://github.com/my-org/{name}"),
            default_branch=kwargs.pop("default_branch", "main"),
            files=list(files or []),
            **kwargs,
        )

    return _make


class FakeSource(DataSource):
    """DataSource returning canned records or raising a canned error

    With ``failures`` set, the error is raised only on the first ``failures`` calls.
    """

    def __init__(
        self,
        name: str,
        target: str,
        resources: Optional[List[ResourceInfo]] = None,
        error: Optional[Exception] = None,
        failures: Optional[int] = None,
    ):
        self._name = name
        self._target = target
        self.resources = resources or []
        self.error = error
        self.failures = failures
        self.calls = 0

    @property
    def name(self) -> str:
        return self._name

    @property
    def target(self) -> str:
        return self._target

    def collect(self, ctx=None) -> List[ResourceInfo]:
        self.calls += 1
        if ctx is not None:
            ctx.raise_if_cancelled()
        if self.error is not None and (self.failures is None or self.calls <= self.failures):
            raise self.error
        return list(self.resources)


@pytest.fixture
def fake_source():
    return FakeSource


def make_records(count: int, account: str = "prod", **kwargs: Any) -> List[ResourceInfo]:
    """``count`` AWS style records named app-0, app-1, ..."""
    return [
        ResourceInfo(
            app_name=f"app-{i}",
            source="AWS",
            account=account,
            arn=f"arn:aws:ec2:us-east-1:123456789012:instance/i-{i:04d}",
            platform="EC2",
            **kwargs,
        )
        for i in range(count)
    ]


# =============================================================================
# Error helpers
# =============================================================================


def create_mock_client_error(
    error_code: str,
    error_message: str = "Test error",
    status_code: int = 400,
    operation: str = "GetResources",
) -> Exception:
    """botocore ClientError helper"""
    from botocore.exceptions import ClientError

    return ClientError(
        {
            "Error": {
                "Code": error_code,
                "Message": error_message,
            },
            "ResponseMetadata": {"HTTPStatusCode": status_code},
        },
        operation,
    )


def create_mock_http_response(
    status_code: int = 200,
    payload: Any = None,
    links: Optional[Dict[str, Dict[str, str]]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> MagicMock:
    """requests.Response stand-in; raise_for_status() raises HTTPError for >= 400"""
    response = MagicMock(spec=requests.Response)
    response.status_code = status_code
    response.json.return_value = payload
    response.links = links or {}
    response.headers = CaseInsensitiveDict(headers or {})

    if status_code >= 400:
        message = payload.get("message", "") if isinstance(payload, dict) else ""
        response.raise_for_status.side_effect = requests.HTTPError(
            f"{status_code} Client Error: {message}", response=response
        )
    else:
        response.raise_for_status.return_value = None
    return response


# =============================================================================
# moto integration
# =============================================================================


@pytest.fixture
def aws_credentials(monkeypatch):
    """AWS credentials for moto"""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")


@pytest.fixture
def moto_aws(aws_credentials):
    """moto mock of every AWS service"""
    with moto.mock_aws():
        yield


@pytest.fixture
def client_error():
    """create_mock_client_error as a fixture"""
    return create_mock_client_error


@pytest.fixture
def http_response():
    """create_mock_http_response as a fixture"""
    return create_mock_http_response


@pytest.fixture
def records():
    """make_records as a fixture"""
    return make_records
