"""
tests/core/sources/github/test_github_detector.py - Repository classification heuristics
"""

import pytest

from core.inventory.types import UNKNOWN
from core.sources.github.detector import (
    REASON_TEST_DIR,
    REASON_TEST_FILES,
    detect_cicd,
    detect_codeowners,
    detect_platform,
    detect_tests,
    has_codeowners,
    is_eks,
    parse_codeowners,
)


class TestDetectCICD:
    """detect_cicd"""

    @pytest.mark.parametrize(
        "files, platform",
        [
            ([".github", ".github/workflows"], "GitHub Actions"),
            ([".github/workflows/ci.yml"], "GitHub Actions"),
            ([".circleci"], "CircleCI"),
            ([".gitlab-ci.yml"], "GitLab CI"),
            (["Jenkinsfile"], "Jenkins"),
            ([".travis.yml"], "Travis CI"),
            (["bitbucket-pipelines.yml"], "Bitbucket Pipelines"),
            (["azure-pipelines.yml"], "Azure Pipelines"),
        ],
    )
    def test_platforms(self, files, platform):
        """Each CI/CD indicator maps to its platform"""
        assert detect_cicd(files) == (True, platform)

    def test_first_match_in_listing_order(self):
        """The first indicator in the listing wins"""
        assert detect_cicd(["Jenkinsfile", ".travis.yml"]) == (True, "Jenkins")

    def test_file_indicator_is_exact(self):
        """File indicators must match the whole name"""
        assert detect_cicd(["Jenkinsfile.bak", ".github/CODEOWNERS"]) == (False, "")

    def test_none(self):
        """No indicator, no CI/CD"""
        assert detect_cicd(["README.md", "src"]) == (False, "")


class TestDetectTests:
    """detect_tests"""

    @pytest.mark.parametrize("directory", ["test", "tests", "__tests__", "spec", "test_suite", "testing"])
    def test_directories(self, directory):
        """Test directory names"""
        assert detect_tests(["README.md", directory]) == (True, REASON_TEST_DIR)

    @pytest.mark.parametrize(
        "name",
        ["main_test.go", "app.spec.js", "app.test.js", "app.spec.ts", "app.test.ts", "AppTest.java", "test_app.py", "app_test.py"],
    )
    def test_file_patterns(self, name):
        """Test file name patterns"""
        assert detect_tests(["README.md", name]) == (True, REASON_TEST_FILES)

    def test_directory_stage_wins(self):
        """a test directory anywhere in the listing beats an earlier test file"""
        assert detect_tests(["test_app.py", "tests"]) == (True, REASON_TEST_DIR)

    def test_none(self):
        """No test directory or file"""
        assert detect_tests(["README.md", "src", "setup.py"]) == (False, "")


class TestIsEks:
    """is_eks"""

    @pytest.mark.parametrize(
        "path",
        ["k8s", "kubernetes", ".kube", "helm", "charts", "Chart.yaml", "kustomization.yaml", "kustomization.yml"],
    )
    def test_indicators(self, path):
        """Each Kubernetes indicator marks the repository"""
        assert is_eks(["README.md", path])

    def test_not_eks(self):
        """Look-alike names do not"""
        assert not is_eks(["README.md", "Dockerfile", "helmfile.yaml"])

    def test_alongside_other_indicators(self):
        """Kubernetes is detected next to CI/CD, platform and CODEOWNERS indicators"""
        files = [".github/workflows", ".github/CODEOWNERS", "CODEOWNERS", "Dockerfile", "tests", "k8s"]

        assert detect_cicd(files)[0]
        assert detect_platform(files) == "ECS"
        assert is_eks(files)


class TestDetectPlatform:
    """detect_platform"""

    def test_single(self):
        """One indicator, one platform"""
        assert detect_platform(["Dockerfile"]) == "ECS"
        assert detect_platform(["serverless.yml"]) == "Lambda"
        assert detect_platform(["Procfile"]) == "Elastic Beanstalk"

    def test_multiple_in_table_order(self):
        """Several platforms are listed in table order"""
        assert detect_platform(["Procfile", "serverless.yml", "Dockerfile", "ecs-service.json"]) == (
            "ECS, Lambda, Elastic Beanstalk"
        )

    def test_unknown(self):
        """No indicator means Unknown"""
        assert detect_platform(["README.md"]) == UNKNOWN


class TestCodeowners:
    """CODEOWNERS presence and parsing"""

    def test_candidates_in_lookup_order(self):
        """Candidates come back in lookup order"""
        files = ["docs/CODEOWNERS", "README.md", "CODEOWNERS", ".github/CODEOWNERS"]
        assert detect_codeowners(files) == ["CODEOWNERS", ".github/CODEOWNERS", "docs/CODEOWNERS"]

    def test_presence(self):
        """Any candidate counts as present"""
        assert has_codeowners([".github/CODEOWNERS"])
        assert not has_codeowners(["README.md"])

    def test_parse(self):
        """Owners are read without the @ prefix"""
        content = "* @alice @bob user@example.com\n# comment\n"
        assert parse_codeowners(content) == ["alice", "bob", "user@example.com"]

    def test_parse_dedup_and_teams(self):
        """Only @ handles count, each once, team handles included"""
        content = "\n".join(
            [
                "# owners",
                "",
                "*.py @my-org/backend @alice",
                "/docs/ @alice docs-team  # inline comment @ignored",
                "/web/ @my-org/frontend",
            ]
        )

        assert parse_codeowners(content) == ["my-org/backend", "alice", "my-org/frontend"]

    def test_parse_empty(self):
        """Empty or comment-only files have no owners"""
        assert parse_codeowners("") == []
        assert parse_codeowners("# only comments\n\n") == []
