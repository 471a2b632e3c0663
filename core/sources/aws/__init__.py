"""
core/sources/aws - AWS Resource Groups Tagging API data source
"""

from .classifier import (
    EKS_TAG_KEYS,
    PLATFORM_NAMES,
    classify_resource,
    extract_platform_from_arn,
    is_eks_resource,
    resolve_app_name,
    resolve_owner,
    resolve_stack,
    resolve_team,
)
from .client import RESOURCE_TYPES, TaggedResource, TaggingClient
from .source import AWSDataSource

__all__ = [
    "AWSDataSource",
    "TaggingClient",
    "TaggedResource",
    "RESOURCE_TYPES",
    "EKS_TAG_KEYS",
    "PLATFORM_NAMES",
    "classify_resource",
    "extract_platform_from_arn",
    "is_eks_resource",
    "resolve_app_name",
    "resolve_owner",
    "resolve_team",
    "resolve_stack",
]
