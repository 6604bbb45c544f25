"""
Stage 3: Check Issues - Review Request Action

PURPOSE:
    Projects go through two review gates, each tracked by an issue labeled
    with the project and the gate name:
        project{N},functionality  - must be passed before code review
        project{N},design         - passed by code review; once passed, no
                                    further code reviews are needed

    An issue counts as passed when it is closed AND locked with the lock
    reason "resolved". Instructors lock the issue that way when approving.

CALLED BY:
    review_request_main.py (setup stage) - passes the GitHub client and the
    project number.

RETURNS:
    IssueApproval for the passing functionality issue. Its number and URL
    go into the pull request body.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from . import actions_toolkit
from .errors import AlreadyReviewedError, FunctionalityNotApprovedError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IssueApproval:
    issue_number: int
    issue_url: str


def check_issues(gh, project: int) -> IssueApproval:
    """
    Check the functionality issue passed and the design issue has not.

    Args:
        gh: GitHubAPI client for the student's repository
        project: Project number (1-4)

    Returns:
        IssueApproval for the passing functionality issue.
    """
    with actions_toolkit.group("Checking issues..."):
        logger.info("")

        functionality = find_passing_issue(gh.list_issues([f"project{project}", "functionality"]))

        if functionality is None:
            raise FunctionalityNotApprovedError(
                f"Unable to detect approved functionality issue for project {project}. "
                "You must pass functionality before requesting code review."
            )

        logger.info(f"Passing functionality issue: {functionality['html_url']}")
        logger.info("")

        design = find_passing_issue(gh.list_issues([f"project{project}", "design"]))

        if design is not None:
            logger.info(f"Passing design issue: {design['html_url']}")
            raise AlreadyReviewedError(
                f"Detected approved design issue #{design['number']} for project {project}. "
                "Additional code reviews are not necessary."
            )

        logger.info(f"No passing design issues for project {project} found.")
        logger.info("")

    return IssueApproval(
        issue_number=functionality["number"],
        issue_url=functionality["html_url"],
    )


def find_passing_issue(issues: list) -> Optional[dict]:
    """Return the first closed issue locked as resolved, if any."""
    return next(
        (
            issue for issue in issues
            if issue.get("state") == "closed"
            and issue.get("locked") is True
            and issue.get("active_lock_reason") == "resolved"
        ),
        None,
    )
