"""
core/parallel/client.py - boto3 clients for collection workers

Every worker builds its own client. botocore handles per-request retries
(throttling inside a paginator); the executor's RetryConfig handles retries
of a whole target.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Literal, cast

from botocore.config import Config

if TYPE_CHECKING:
    import boto3

RetryMode = Literal["legacy", "standard", "adaptive"]


@dataclass(frozen=True)
class ClientSettings:
    """botocore settings of one worker's client

    Attributes:
        max_attempts: botocore attempts per request
        retry_mode: botocore retry mode
        connect_timeout: seconds
        read_timeout: seconds
        max_pool_connections: one worker pages sequentially, a small pool is enough
    """

    max_attempts: int = 5
    retry_mode: RetryMode = "adaptive"
    connect_timeout: int = 10
    read_timeout: int = 30
    max_pool_connections: int = 4

    def to_config(self) -> Config:
        return Config(
            retries={"max_attempts": self.max_attempts, "mode": self.retry_mode},  # pyright: ignore[reportArgumentType]
            connect_timeout=self.connect_timeout,
            read_timeout=self.read_timeout,
            max_pool_connections=self.max_pool_connections,
        )


DEFAULT_SETTINGS = ClientSettings()


def get_client(
    session: boto3.Session,
    service_name: str,
    region_name: str | None = None,
    settings: ClientSettings = DEFAULT_SETTINGS,
) -> Any:
    """boto3 client of ``service_name`` with ``settings`` applied

    Example:
        tagging = get_client(session, "resourcegroupstaggingapi", region_name="us-east-1")
    """
    # boto3-stubs wants a Literal service name
    return session.client(  # pyright: ignore[reportCallIssue]
        cast(Any, service_name),
        region_name=region_name,
        config=settings.to_config(),
    )
