"""
core/sources/aws/classifier.py - Tag-map classification

Resolves inventory attributes from a resource's tag map through ordered
fallback chains (first match wins, sentinel default otherwise), and the
platform from the service segment of the ARN.

    app_name : Name -> aws:cloudformation:logical-id -> "Unknown"
    owner    : owned-by -> team -> "Unknown"
    team     : team -> owned-by -> "Unknown"
    stack    : aws:cloudformation:stack-name -> "None"
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING

from core.inventory.types import NO_STACK, UNKNOWN, ResourceInfo

if TYPE_CHECKING:
    from .client import TaggedResource

SOURCE_NAME = "AWS"

TAG_NAME = "Name"
TAG_LOGICAL_ID = "aws:cloudformation:logical-id"
TAG_STACK_NAME = "aws:cloudformation:stack-name"
TAG_OWNED_BY = "owned-by"
TAG_TEAM = "team"

CLOUDFORMATION = "CloudFormation"

# Any of these keys marks a resource as part of an EKS cluster
EKS_TAG_KEYS: frozenset[str] = frozenset(
    {
        "aws:eks:cluster-name",
        "eks:cluster-name",
        "eks:nodegroup-name",
    }
)

PLATFORM_NAMES: Mapping[str, str] = MappingProxyType(
    {
        "ec2": "EC2",
        "lambda": "Lambda",
        "ecs": "ECS",
        "elasticbeanstalk": "Elastic Beanstalk",
        "lightsail": "Lightsail",
        "apprunner": "App Runner",
    }
)


def _first_tag(tags: Mapping[str, str], *keys: str) -> str:
    for key in keys:
        if key in tags:
            return tags[key]
    return UNKNOWN


def resolve_app_name(tags: Mapping[str, str]) -> str:
    return _first_tag(tags, TAG_NAME, TAG_LOGICAL_ID)


def resolve_owner(tags: Mapping[str, str]) -> str:
    return _first_tag(tags, TAG_OWNED_BY, TAG_TEAM)


def resolve_team(tags: Mapping[str, str]) -> str:
    return _first_tag(tags, TAG_TEAM, TAG_OWNED_BY)


def resolve_stack(tags: Mapping[str, str]) -> tuple[str, bool, str]:
    """CloudFormation stack of the resource

    Returns:
        (stack_name, has_cicd, cicd_platform); ("None", False, "") when the
        resource is not managed by a stack
    """
    if TAG_STACK_NAME in tags:
        return tags[TAG_STACK_NAME], True, CLOUDFORMATION
    return NO_STACK, False, ""


def extract_platform_from_arn(arn: str) -> str:
    """Friendly platform name from the ARN service segment

    arn:partition:service:region:account:resource -> PLATFORM_NAMES[service]
    Unknown services pass through unchanged.
    """
    parts = arn.split(":")
    if len(parts) < 3 or not parts[2]:
        return UNKNOWN

    service = parts[2]
    return PLATFORM_NAMES.get(service, service)


def is_eks_resource(tags: Mapping[str, str]) -> bool:
    return any(key in EKS_TAG_KEYS for key in tags)


def classify_resource(resource: TaggedResource) -> ResourceInfo:
    """Build the ResourceInfo of one tagged resource

    Pure function: classifying the same resource twice yields equal records.
    """
    tags = resource.tags
    stack_name, has_cicd, cicd_platform = resolve_stack(tags)

    return ResourceInfo(
        app_name=resolve_app_name(tags),
        source=SOURCE_NAME,
        account=resource.account,
        arn=resource.arn,
        owner=resolve_owner(tags),
        team=resolve_team(tags),
        platform=extract_platform_from_arn(resource.arn),
        stack_name=stack_name,
        has_cicd=has_cicd,
        cicd_platform=cicd_platform,
        resource_tags=MappingProxyType(dict(tags)),
    )
