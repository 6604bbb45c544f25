"""
Stage 6: Request Review - Review Request Action

PURPOSE:
    The last step of the main stage. It prepares everything a code review
    pull request needs:
        1. Create and push the review/{version} branch with an empty commit
        2. Find (or create) the "Project {N}" milestone
        3. Look up an existing pull request from that branch
        4. Render the pull request body from the saved state

    Opening or updating the pull request itself is NOT supported yet. The
    rules for matching a release to earlier review pull requests were never
    settled, so this step returns ReviewOutcome.NOT_SUPPORTED and the stage
    reports that students must contact the instructor. The branch push above
    is not rolled back.

CALLED BY:
    review_request_main.py (main stage) - passes the GitHub client, the
    restored RunState and the stage's warning counter.
"""

import logging
from enum import Enum

from . import actions_toolkit
from .command_runner import check_exec
from .config import MAIN_DIR
from .console_output import WarningCounter, show_warning
from .state_store import RunState

logger = logging.getLogger(__name__)

NOT_SUPPORTED_MESSAGE = (
    "This action is not yet implemented. Contact the instructor for "
    "instructions on how to request code review."
)

GIT_IDENTITY = [
    "-c", "user.name=github-actions[bot]",
    "-c", "user.email=41898282+github-actions[bot]@users.noreply.github.com",
]


class ReviewOutcome(Enum):
    REQUESTED = "requested"
    NOT_SUPPORTED = "not-supported"


def request_review(
    gh,
    state: RunState,
    counter: WarningCounter,
    workdir: str = MAIN_DIR,
) -> ReviewOutcome:
    """
    Push the review branch and prepare the pull request details.

    Updates `state` with branch, type and any existing pull request.

    Args:
        gh: GitHubAPI client for the student's repository
        state: RunState restored from the setup stage
        counter: Warning counter for the current stage
        workdir: Directory of the cloned project

    Returns:
        ReviewOutcome.NOT_SUPPORTED until pull request creation is supported.
    """
    branch = f"review/{state.version}"

    with actions_toolkit.group(f"Creating {branch} branch..."):
        check_exec(
            "git",
            ["checkout", "-B", branch, state.version],
            title=f"Checking out {state.version} as {branch}",
            error=f"Unable to create {branch} branch",
            chdir=workdir,
        )
        check_exec(
            "git",
            [*GIT_IDENTITY, "commit", "--allow-empty", "-m", f"Creating review {state.version} branch..."],
            title="Committing review branch",
            error=f"Unable to commit to {branch} branch",
            chdir=workdir,
        )
        check_exec(
            "git",
            ["push", "-u", "origin", branch],
            title=f"Pushing {branch} branch",
            error=f"Unable to push {branch} branch",
            chdir=workdir,
        )

    state.branch = branch
    state.type = "review"

    with actions_toolkit.group("Checking pull requests..."):
        milestone = _find_or_create_milestone(gh, state.project)
        logger.info(f"Using milestone: {milestone.get('html_url', milestone.get('title'))}")

        pulls = gh.list_pull_requests(head=f"{state.owner}:{branch}", state="all")
        if pulls:
            pull = pulls[0]
            state.pull_number = pull.get("number")
            state.pull_url = pull.get("html_url")
            state.pull_date = pull.get("created_at")
            logger.info(f"Found pull request #{state.pull_number}: {state.pull_url}")

            if len(pulls) > 1:
                show_warning(counter, f"Found {len(pulls)} pull requests for the {branch} branch.")
        else:
            logger.info(f"No pull request found for the {branch} branch.")

        logger.info("")
        logger.info(f"Pull request title: {pull_request_title(state)}")
        logger.info(pull_request_body(state))

    return ReviewOutcome.NOT_SUPPORTED


def pull_request_title(state: RunState) -> str:
    return f"Project {state.project} Code Review {state.version}"


def pull_request_body(state: RunState) -> str:
    """Render the Markdown body of the code review pull request."""
    lines = [
        f"## Project {state.project} Code Review",
        "",
        f"**Student:** @{state.owner}",
        f"**Release:** [{state.release_tag}]({state.release_url}) (created {state.release_date})",
        f"**Tests:** [Run #{state.run_number}]({state.run_url}) passed",
        f"**Functionality:** Passed in #{state.issue_number} ({state.issue_url})",
        f"**Reviews:** {state.reviews} completed, {state.patches} patch(es) since",
    ]
    return "\n".join(lines) + "\n"


def _find_or_create_milestone(gh, project: int) -> dict:
    title = f"Project {project}"
    for milestone in gh.list_milestones():
        if milestone.get("title") == title:
            return milestone

    logger.info(f"Creating milestone: {title}")
    return gh.create_milestone(title, f"Pull requests for project {project}.")
