"""
core/sources/aws/client.py - Resource Groups Tagging API client

Lists every tagged compute resource of one account/region through the
``get_resources`` paginator. Records come back in pagination order as
TaggedResource values; classification happens in the data source.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import boto3
from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    ConnectTimeoutError,
    EndpointConnectionError,
    NoCredentialsError,
    PartialCredentialsError,
    ProfileNotFound,
    ReadTimeoutError,
)

from core.exceptions import (
    APICallError,
    AuthenticationError,
    ConnectivityError,
    SourceError,
    is_access_denied,
)
from core.parallel import get_client

if TYPE_CHECKING:
    from core.config import AccountConfig
    from core.parallel.context import CollectContext

logger = logging.getLogger(__name__)

SOURCE_NAME = "AWS"
SERVICE_NAME = "resourcegroupstaggingapi"
PAGE_SIZE = 100

# Non-EKS compute resource types
RESOURCE_TYPES: tuple[str, ...] = (
    "ec2:instance",
    "lambda:function",
    "ecs:service",
    "ecs:cluster",
    "elasticbeanstalk:application",
    "elasticbeanstalk:environment",
    "lightsail:instance",
    "apprunner:service",
)


@dataclass
class TaggedResource:
    """A resource ARN with its tag map, as returned by the tagging API"""

    arn: str
    account: str
    tags: dict[str, str] = field(default_factory=dict)


def parse_tags(raw_tags: list[dict[str, Any]]) -> dict[str, str]:
    """Convert [{"Key": k, "Value": v}, ...] into a dict, skipping incomplete pairs"""
    tags: dict[str, str] = {}
    for tag in raw_tags:
        key = tag.get("Key")
        value = tag.get("Value")
        if key is not None and value is not None:
            tags[key] = value
    return tags


class TaggingClient:
    """Tagging API wrapper for one account

    The boto3 session is built lazily, inside the worker that uses it, so
    credential problems surface as that target's error.
    """

    def __init__(
        self,
        account: AccountConfig,
        session: boto3.Session | None = None,
        resource_types: Sequence[str] = RESOURCE_TYPES,
    ):
        self.account = account
        self._session = session
        self._resource_types = list(resource_types)
        self._client: Any = None

    def _create_session(self) -> boto3.Session:
        if self.account.uses_profile:
            return boto3.Session(profile_name=self.account.profile, region_name=self.account.region)

        return boto3.Session(
            aws_access_key_id=self.account.access_key_id or None,
            aws_secret_access_key=self.account.secret_access_key or None,
            aws_session_token=self.account.session_token or None,
            region_name=self.account.region,
        )

    @property
    def client(self) -> Any:
        if self._client is None:
            if self._session is None:
                self._session = self._create_session()
            self._client = get_client(self._session, SERVICE_NAME, region_name=self.account.region)
        return self._client

    def get_resources(self, ctx: CollectContext | None = None) -> list[TaggedResource]:
        """Fetch every tagged resource, following pagination to the end

        Args:
            ctx: shared cancellation context, checked before every page

        Returns:
            TaggedResource list in pagination order

        Raises:
            AuthenticationError: missing or rejected credentials
            ConnectivityError: endpoint unreachable
            SourceError: any other API failure
            CollectionCancelledError: ctx cancelled
        """
        resources: list[TaggedResource] = []
        pages_read = 0

        try:
            if ctx:
                ctx.raise_if_cancelled()
            paginator = self.client.get_paginator("get_resources")
            pages = paginator.paginate(
                ResourceTypeFilters=self._resource_types,
                ResourcesPerPage=PAGE_SIZE,
            )

            for page in pages:
                pages_read += 1
                for mapping in page.get("ResourceTagMappingList", []):
                    arn = mapping.get("ResourceARN")
                    if not arn:
                        continue
                    resources.append(
                        TaggedResource(
                            arn=arn,
                            account=self.account.name,
                            tags=parse_tags(mapping.get("Tags", [])),
                        )
                    )
                if ctx:
                    ctx.raise_if_cancelled()

        except ClientError as e:
            api_error = APICallError.from_client_error(SERVICE_NAME, "get_resources", e)
            if is_access_denied(e):
                raise AuthenticationError(SOURCE_NAME, self.account.name, "credentials rejected", api_error) from e
            raise SourceError(SOURCE_NAME, self.account.name, "failed to get resources", api_error) from e
        except (NoCredentialsError, PartialCredentialsError, ProfileNotFound) as e:
            raise AuthenticationError(SOURCE_NAME, self.account.name, "no usable credentials", e) from e
        except (EndpointConnectionError, ConnectTimeoutError, ReadTimeoutError) as e:
            raise ConnectivityError(SOURCE_NAME, self.account.name, "tagging API unreachable", e) from e
        except BotoCoreError as e:
            raise SourceError(SOURCE_NAME, self.account.name, "failed to get resources", e) from e

        logger.debug(f"[{self.account.name}] {len(resources)} tagged resource(s) in {pages_read} page(s)")
        return resources
