"""
Stage 1: Parse Project - Review Request Action

PURPOSE:
    Turns the release reference the student entered (e.g. "v2.3.1" or
    "refs/tags/v2.3.1") into the project details every later step needs.

    Release names encode three numbers:
        v{project}.{reviews}.{patches}
    project  - which course project (1 through 4)
    reviews  - how many code reviews this release has been through
    patches  - how many patches since the last review

CALLED BY:
    review_request_main.py (setup stage) - passes the repository owner and
    name from GITHUB_REPOSITORY and the `release` input.

RETURNS:
    A ProjectReference. Any reference whose last path segment does not match
    the format raises ParseError.
"""

import logging
import re
from dataclasses import dataclass

from . import actions_toolkit
from .config import TEST_DIR
from .errors import ParseError

logger = logging.getLogger(__name__)

VERSION_PATTERN = re.compile(r"^v([1-4])\.(\d+)\.(\d+)$")


@dataclass(frozen=True)
class ProjectReference:
    owner: str
    main_repo: str
    test_repo: str
    project: int
    reviews: int
    patches: int
    version: str


def parse_project(owner: str, repo: str, ref: str) -> ProjectReference:
    """
    Parse the project number, review count and patch count from a release reference.

    Args:
        owner: Repository owner (the student's account or the organization)
        repo: Repository name of the student's project
        ref: Release reference. Only the last "/"-separated segment is used,
             so both "v1.2.0" and "refs/tags/v1.2.0" work.

    Returns:
        ProjectReference with owner/repo names and the parsed numbers.
    """
    with actions_toolkit.group("Parsing project details..."):
        version = ref.split("/")[-1]
        matched = VERSION_PATTERN.match(version)

        if not matched:
            raise ParseError(ref)

        details = ProjectReference(
            owner=owner,
            main_repo=f"{owner}/{repo}",
            test_repo=f"{owner}/{TEST_DIR}",
            project=int(matched.group(1)),
            reviews=int(matched.group(2)),
            patches=int(matched.group(3)),
            version=version,
        )

        logger.info(f"Project version: {details.version}")
        logger.info(f"Project number:  {details.project}")
        logger.info(f"Project reviews: {details.reviews}")
        logger.info(f"Project patches: {details.patches}")
        logger.info("")

    return details
