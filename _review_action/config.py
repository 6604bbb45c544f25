"""
Configuration - Review Request Action

All settings are read from environment variables once, at import time. The
GitHub Actions runner provides the GITHUB_* and RUNNER_* values; the rest can
be overridden in the workflow's `env:` block.
"""

import os

# -----------------------------------------------------------------------
# REPOSITORY LAYOUT
# -----------------------------------------------------------------------
# MAIN_DIR: where the student's project repository is cloned
# TEST_DIR: where the test repository is cloned. Must match the directory
#           name used by the pom.xml in the test repository.
# ENTRY_POINT: the one source file allowed to declare a main method
# -----------------------------------------------------------------------

MAIN_DIR = os.environ.get("REVIEW_MAIN_DIR", "project-main")
TEST_DIR = os.environ.get("REVIEW_TEST_DIR", "project-tests")
ENTRY_POINT = os.environ.get("REVIEW_ENTRY_POINT", "Driver.java")

# -----------------------------------------------------------------------
# GITHUB
# -----------------------------------------------------------------------
# WORKFLOW_ID: the workflow that runs the tests when a release is created
# -----------------------------------------------------------------------

GITHUB_API_URL = os.environ.get("GITHUB_API_URL", "https://api.github.com")
GITHUB_SERVER_URL = os.environ.get("GITHUB_SERVER_URL", "https://github.com")
GITHUB_REPOSITORY = os.environ.get("GITHUB_REPOSITORY", "")
WORKFLOW_ID = os.environ.get("REVIEW_WORKFLOW_ID", "run-tests.yml")
REQUEST_TIMEOUT = int(os.environ.get("REVIEW_REQUEST_TIMEOUT", "30"))

# -----------------------------------------------------------------------
# MAVEN CACHE
# -----------------------------------------------------------------------

RUNNER_OS = os.environ.get("RUNNER_OS", "Linux")
MAVEN_HOME_DIR = os.path.expanduser(os.environ.get("REVIEW_MAVEN_DIR", "~/.m2"))
# Docker actions run each stage in a fresh container. Archives only outlive the
# job when REVIEW_CACHE_DIR names a directory mounted from the runner host.
CACHE_DIR_CONFIGURED = "REVIEW_CACHE_DIR" in os.environ
CACHE_DIR = os.environ.get(
    "REVIEW_CACHE_DIR",
    os.path.join(
        os.environ.get("RUNNER_TOOL_CACHE", os.path.expanduser("~/.cache")),
        "review-action",
    ),
)

LOG_LEVEL = os.environ.get("REVIEW_LOG_LEVEL", "INFO")


def repository_context() -> tuple:
    """
    Split GITHUB_REPOSITORY ("owner/repo") into its two parts.

    Read at call time so a workflow (or a test) can change it after import.
    """
    full_name = os.environ.get("GITHUB_REPOSITORY", GITHUB_REPOSITORY)
    owner, _, repo = full_name.partition("/")
    return owner, repo
