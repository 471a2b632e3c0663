"""
core/sources/aws/source.py - AWS data source

One AWSDataSource per account: lists tagged resources, drops EKS
resources, classifies the rest from their tags.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from core.sources.base import DataSource

from .classifier import SOURCE_NAME, classify_resource, is_eks_resource
from .client import TaggingClient

if TYPE_CHECKING:
    import boto3

    from core.config import AccountConfig
    from core.inventory.types import ResourceInfo
    from core.parallel.context import CollectContext

logger = logging.getLogger(__name__)


class AWSDataSource(DataSource):
    """Tagged compute resources of one AWS account

    Example:
        source = AWSDataSource(AccountConfig.from_profile("production"))
        resources = source.collect()
    """

    def __init__(
        self,
        account: AccountConfig,
        session: boto3.Session | None = None,
        client: TaggingClient | None = None,
    ):
        self.account = account
        self._client = client or TaggingClient(account, session=session)

    @property
    def name(self) -> str:
        return SOURCE_NAME

    @property
    def target(self) -> str:
        return self.account.name

    def collect(self, ctx: CollectContext | None = None) -> list[ResourceInfo]:
        resources = self._client.get_resources(ctx)

        infos: list[ResourceInfo] = []
        skipped = 0
        for res in resources:
            if is_eks_resource(res.tags):
                skipped += 1
                continue
            infos.append(classify_resource(res))

        logger.info(f"[{self.target}] {len(infos)} resource(s) collected, {skipped} EKS resource(s) skipped")
        return infos
