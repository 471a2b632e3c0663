"""
core/sources/github/detector.py - Repository file/text classification

Pure heuristics over a flat listing of repository paths (root entries plus
the entries of a few known sub-directories, as "dir/name") and CODEOWNERS
text. All lookup tables are module-level tuples, read-only and shared by
every worker.
"""

from __future__ import annotations

import posixpath
from collections.abc import Iterable, Sequence

from core.inventory.types import UNKNOWN

# (path, platform, is_directory); first match in listing order wins
CICD_INDICATORS: tuple[tuple[str, str, bool], ...] = (
    (".github/workflows", "GitHub Actions", True),
    (".circleci", "CircleCI", True),
    (".gitlab-ci.yml", "GitLab CI", False),
    ("Jenkinsfile", "Jenkins", False),
    (".travis.yml", "Travis CI", False),
    ("bitbucket-pipelines.yml", "Bitbucket Pipelines", False),
    ("azure-pipelines.yml", "Azure Pipelines", False),
)

TEST_DIRS: tuple[str, ...] = (
    "test",
    "tests",
    "__tests__",
    "spec",
    "test_suite",
    "testing",
)

TEST_FILE_PATTERNS: tuple[str, ...] = (
    "_test.go",
    ".spec.js",
    ".test.js",
    ".spec.ts",
    ".test.ts",
    "Test.java",
    "test_",
    "_test.py",
)

REASON_TEST_DIR = "detected test directory"
REASON_TEST_FILES = "detected test files"

# Managed Kubernetes / Helm indicators; a match skips the repository
EKS_INDICATORS: tuple[str, ...] = (
    "k8s",
    "kubernetes",
    ".kube",
    "helm",
    "charts",
    "Chart.yaml",
    "kustomization.yaml",
    "kustomization.yml",
)

# (label, indicators) in output order
PLATFORM_INDICATORS: tuple[tuple[str, tuple[str, ...]], ...] = (
    (
        "ECS",
        (
            "ecs-task-definition.json",
            "ecs-service.json",
            "Dockerfile",
        ),
    ),
    (
        "Lambda",
        (
            "serverless.yml",
            "serverless.yaml",
            "template.yaml",  # SAM
            "template.yml",
            "lambda",
            "functions",
        ),
    ),
    (
        "Elastic Beanstalk",
        (
            ".ebextensions",
            "Procfile",
            ".elasticbeanstalk",
        ),
    ),
)

CODEOWNERS_PATHS: tuple[str, ...] = (
    "CODEOWNERS",
    ".github/CODEOWNERS",
    "docs/CODEOWNERS",
)


def _normalize(path: str) -> str:
    return path.strip().strip("/")


def _matches(path: str, indicator: str, is_directory: bool = True) -> bool:
    if path == indicator:
        return True
    return is_directory and path.startswith(indicator + "/")


def detect_cicd(files: Iterable[str]) -> tuple[bool, str]:
    """CI/CD configuration present in the listing

    Returns:
        (found, platform name); (False, "") when nothing matched
    """
    for raw in files:
        path = _normalize(raw)
        for indicator, platform, is_directory in CICD_INDICATORS:
            if _matches(path, indicator, is_directory):
                return True, platform
    return False, ""


def detect_tests(files: Sequence[str]) -> tuple[bool, str]:
    """Tests present in the listing

    Test directories are checked over the whole listing first, then file
    names against per-language test file patterns.

    Returns:
        (found, reason); (False, "") when neither stage matched
    """
    paths = [_normalize(f) for f in files]

    for path in paths:
        for test_dir in TEST_DIRS:
            if _matches(path, test_dir):
                return True, REASON_TEST_DIR

    for path in paths:
        name = posixpath.basename(path)
        if any(pattern in name for pattern in TEST_FILE_PATTERNS):
            return True, REASON_TEST_FILES

    return False, ""


def is_eks(files: Iterable[str]) -> bool:
    """Whether the repository deploys to managed Kubernetes"""
    for raw in files:
        path = _normalize(raw)
        for indicator in EKS_INDICATORS:
            if _matches(path, indicator):
                return True
    return False


def detect_platform(files: Iterable[str]) -> str:
    """Deployment platform(s) of the repository

    Every indicator set that matches contributes its label once; labels are
    joined with ", " in table order. "Unknown" when nothing matched.
    """
    paths = {_normalize(f) for f in files}

    platforms = [label for label, indicators in PLATFORM_INDICATORS if any(i in paths for i in indicators)]
    if not platforms:
        return UNKNOWN
    return ", ".join(platforms)


def detect_codeowners(files: Iterable[str]) -> list[str]:
    """CODEOWNERS candidate paths present in the listing, in lookup order"""
    paths = {_normalize(f) for f in files}
    return [candidate for candidate in CODEOWNERS_PATHS if candidate in paths]


def has_codeowners(files: Iterable[str]) -> bool:
    return bool(detect_codeowners(files))


def parse_codeowners(content: str) -> list[str]:
    """Owners named in CODEOWNERS text

    Format per line: ``<pattern> @user @org/team user@example.com``.
    Blank lines and comments are skipped, the pattern is dropped, ``@`` is
    stripped from handles, emails are kept as-is. Duplicates are removed
    keeping the first occurrence.
    """
    owners: list[str] = []
    seen: set[str] = set()

    for line in content.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        for part in line.split()[1:]:
            if part.startswith("#"):
                # inline comment
                break
            if part.startswith("@"):
                owner = part[1:]
            elif "@" in part:
                owner = part
            else:
                continue

            if owner and owner not in seen:
                seen.add(owner)
                owners.append(owner)

    return owners
