"""
tests/core/sources/aws/test_aws_classifier.py - Tag classification
"""

import pytest

from core.inventory.types import NO_STACK, UNKNOWN
from core.sources.aws.classifier import (
    classify_resource,
    extract_platform_from_arn,
    is_eks_resource,
    resolve_app_name,
    resolve_owner,
    resolve_stack,
    resolve_team,
)
from core.sources.aws.client import TaggedResource, parse_tags

EC2_ARN = "arn:aws:ec2:us-east-1:123456789012:instance/i-0abc"


class TestResolveAppName:
    """app name cascade"""

    def test_name_wins(self):
        """Name tag beats the CloudFormation logical id"""
        assert resolve_app_name({"Name": "api", "aws:cloudformation:logical-id": "ApiFn"}) == "api"

    def test_logical_id_fallback(self):
        """Logical id when there is no Name"""
        assert resolve_app_name({"aws:cloudformation:logical-id": "ApiFn"}) == "ApiFn"

    def test_unknown(self):
        """Neither tag present"""
        assert resolve_app_name({}) == UNKNOWN


class TestResolveOwnerTeam:
    """owner / team cross-fallback"""

    def test_owner_prefers_owned_by(self):
        """owned-by beats team for the owner"""
        assert resolve_owner({"owned-by": "alice", "team": "payments"}) == "alice"

    def test_owner_falls_back_to_team(self):
        """team stands in for a missing owner"""
        assert resolve_owner({"team": "payments"}) == "payments"

    def test_team_prefers_team(self):
        """team beats owned-by for the team"""
        assert resolve_team({"owned-by": "alice", "team": "payments"}) == "payments"

    def test_team_falls_back_to_owned_by(self):
        """owned-by stands in for a missing team"""
        assert resolve_team({"owned-by": "alice"}) == "alice"

    def test_both_unknown(self):
        """Neither tag present"""
        assert resolve_owner({}) == UNKNOWN
        assert resolve_team({}) == UNKNOWN


class TestResolveStack:
    """CloudFormation stack"""

    def test_stack_present(self):
        """Stack tag means CloudFormation CI/CD"""
        assert resolve_stack({"aws:cloudformation:stack-name": "api-stack"}) == ("api-stack", True, "CloudFormation")

    def test_stack_absent(self):
        """No stack tag, no CI/CD"""
        assert resolve_stack({"Name": "api"}) == (NO_STACK, False, "")


class TestExtractPlatform:
    """platform from ARN"""

    @pytest.mark.parametrize(
        "arn, expected",
        [
            (EC2_ARN, "EC2"),
            ("arn:aws:lambda:us-east-1:123456789012:function:api", "Lambda"),
            ("arn:aws:ecs:us-east-1:123456789012:service/cluster/api", "ECS"),
            ("arn:aws:elasticbeanstalk:us-east-1:123456789012:environment/app/env", "Elastic Beanstalk"),
            ("arn:aws:lightsail:us-east-1:123456789012:Instance/abc", "Lightsail"),
            ("arn:aws:apprunner:us-east-1:123456789012:service/api/abc", "App Runner"),
        ],
    )
    def test_known_services(self, arn, expected):
        """Known services get a display name"""
        assert extract_platform_from_arn(arn) == expected

    def test_unknown_service_passes_through(self):
        """Unknown services keep the raw ARN service"""
        assert extract_platform_from_arn("arn:aws:sagemaker:us-east-1:123:endpoint/x") == "sagemaker"

    def test_malformed_arn(self):
        """Malformed ARNs are Unknown"""
        assert extract_platform_from_arn("not-an-arn") == UNKNOWN
        assert extract_platform_from_arn("arn:aws") == UNKNOWN


class TestIsEksResource:
    """EKS exclusion"""

    @pytest.mark.parametrize("key", ["aws:eks:cluster-name", "eks:cluster-name", "eks:nodegroup-name"])
    def test_eks_keys(self, key):
        """Any EKS tag key marks the resource"""
        assert is_eks_resource({key: "cluster", "Name": "node"})

    def test_other_keys(self):
        """Ordinary tags do not"""
        assert not is_eks_resource({"Name": "api", "team": "payments"})


class TestClassifyResource:
    """classify_resource"""

    def test_full_record(self):
        """Every field is derived from the tags and ARN"""
        resource = TaggedResource(
            arn=EC2_ARN,
            account="prod",
            tags={"Name": "api", "team": "payments", "aws:cloudformation:stack-name": "api-stack"},
        )

        info = classify_resource(resource)

        assert info.source == "AWS"
        assert info.app_name == "api"
        assert info.owner == "payments"
        assert info.team == "payments"
        assert info.platform == "EC2"
        assert info.stack_name == "api-stack"
        assert info.has_cicd
        assert info.cicd_platform == "CloudFormation"
        assert info.account == "prod"
        assert info.arn == EC2_ARN
        assert dict(info.resource_tags) == resource.tags

    def test_no_tags(self):
        """Untagged resources get Unknown fields"""
        info = classify_resource(TaggedResource(arn=EC2_ARN, account="prod"))

        assert info.app_name == UNKNOWN
        assert info.owner == UNKNOWN
        assert info.team == UNKNOWN
        assert info.stack_name == NO_STACK
        assert not info.has_cicd

    def test_idempotent(self):
        """Classifying twice gives the same record"""
        resource = TaggedResource(arn=EC2_ARN, account="prod", tags={"Name": "api"})
        assert classify_resource(resource) == classify_resource(resource)


def test_parse_tags_skips_incomplete_pairs():
    """Pairs missing a Key or Value are dropped"""
    assert parse_tags([{"Key": "Name", "Value": "api"}, {"Key": "broken"}, {"Value": "x"}]) == {"Name": "api"}
