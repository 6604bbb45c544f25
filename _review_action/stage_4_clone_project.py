"""
Stage 4: Clone Project - Review Request Action

PURPOSE:
    Clones the student's project repository at the release being reviewed,
    and checks that the release is even with the main branch. Code review
    happens on main, so a release that main has moved past (or that was
    created from another branch) is flagged.

    The test repository is cloned the same way in the main stage so the
    build checker can compile the project with the test repository's pom.xml.

CALLED BY:
    review_request_main.py - clone_project() in the setup stage,
    clone_test_suite() in the main stage.

DEPENDS ON:
    - The `git` CLI on the runner
    - The action token, for cloning private repositories
"""

import logging
from urllib.parse import urlsplit

from . import actions_toolkit
from .command_runner import check_exec
from .config import GITHUB_SERVER_URL, MAIN_DIR, TEST_DIR
from .console_output import WarningCounter, show_success, show_warning
from .errors import CommandFailedError

logger = logging.getLogger(__name__)


def clone_project(
    token: str,
    owner: str,
    repo: str,
    release: str,
    counter: WarningCounter,
    target_dir: str = MAIN_DIR,
) -> bool:
    """
    Clone the project repository and compare the release to main.

    Args:
        token: Action token (masked in the log)
        owner: Repository owner
        repo: Repository name
        release: Release tag to compare against origin/main
        counter: Warning counter for the current stage
        target_dir: Directory to clone into

    Returns:
        True if the release and main are even, False if they differ (a
        warning is shown in that case).
    """
    with actions_toolkit.group(f"Cloning {release} of {repo}..."):
        logger.info("")

        check_exec(
            "git",
            ["clone", "--depth", "1", "--no-tags", _clone_url(token, owner, repo), target_dir],
            title=f"Cloning {repo} into {target_dir}",
            error=f"Failed cloning {repo} repository",
        )

        check_exec(
            "ls",
            ["-m", "src/main/java"],
            title="Listing project main code",
            error="Unable to list main code directory",
            chdir=target_dir,
        )

        check_exec(
            "git",
            ["fetch", "--unshallow", "--tags"],
            title="Fetching commit history and tags",
            error="Unable to fetch history and tags",
            chdir=target_dir,
        )

        check_exec(
            "git",
            ["diff", "--shortstat", "origin/main", release],
            title="Checking main branch and release are even",
            error="Unable to compare main branch and release",
            chdir=target_dir,
        )

        # --exit-code: 0 when even, 1 when there are differences
        changed = check_exec(
            "git",
            ["diff", "--exit-code", "--quiet", "origin/main", release],
            chdir=target_dir,
        )

        if changed > 1:
            raise CommandFailedError("Unable to compare main branch and release", changed)

        if changed == 1:
            show_warning(
                counter,
                f"Differences found between release {release} and the main branch.",
            )
        else:
            show_success(f"The main branch and release {release} are even.")

        logger.info("")

    return changed == 0


def clone_test_suite(token: str, test_repo: str, target_dir: str = TEST_DIR) -> None:
    """Shallow-clone the test repository ("owner/name") into `target_dir`."""
    owner, _, repo = test_repo.partition("/")

    with actions_toolkit.group(f"Cloning {repo}..."):
        check_exec(
            "git",
            ["clone", "--depth", "1", _clone_url(token, owner, repo), target_dir],
            title=f"Cloning {repo} into {target_dir}",
            error=f"Failed cloning {repo} repository",
        )


def _clone_url(token: str, owner: str, repo: str) -> str:
    server = urlsplit(GITHUB_SERVER_URL)
    return f"{server.scheme}://github-actions:{token}@{server.netloc}/{owner}/{repo}"
