"""
core/sources/github - GitHub organization data source
"""

from .client import Repository, GitHubClient, parse_timestamp
from .detector import (
    CICD_INDICATORS,
    CODEOWNERS_PATHS,
    EKS_INDICATORS,
    PLATFORM_INDICATORS,
    TEST_DIRS,
    TEST_FILE_PATTERNS,
    detect_cicd,
    detect_codeowners,
    detect_platform,
    detect_tests,
    has_codeowners,
    is_eks,
    parse_codeowners,
)
from .source import GitHubDataSource, classify_repository

__all__ = [
    "GitHubDataSource",
    "GitHubClient",
    "Repository",
    "classify_repository",
    "parse_timestamp",
    "CICD_INDICATORS",
    "CODEOWNERS_PATHS",
    "EKS_INDICATORS",
    "PLATFORM_INDICATORS",
    "TEST_DIRS",
    "TEST_FILE_PATTERNS",
    "detect_cicd",
    "detect_codeowners",
    "detect_platform",
    "detect_tests",
    "has_codeowners",
    "is_eks",
    "parse_codeowners",
]
