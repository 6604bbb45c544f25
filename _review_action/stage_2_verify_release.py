"""
Stage 2: Verify Release - Review Request Action

PURPOSE:
    A code review is only requested for a release that exists and whose test
    workflow passed. Creating a release triggers the test workflow
    (WORKFLOW_ID) with the release tag as its head branch, so we look for
    that run and check how it ended.

CALLED BY:
    review_request_main.py (setup stage) - passes the GitHub client and the
    parsed version tag.

DEPENDS ON:
    - GitHub API: get release by tag, list workflow runs for WORKFLOW_ID
      filtered to "release" events

RETURNS:
    ReleaseVerification with the release and run metadata. Any failure is
    raised immediately; nothing is retried.
"""

import logging
from dataclasses import dataclass

import requests

from . import actions_toolkit
from .config import WORKFLOW_ID
from .errors import ReleaseNotFoundError, RunNotFoundError, RunNotSuccessfulError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReleaseVerification:
    release_url: str
    release_tag: str
    release_date: str
    run_number: int
    run_id: int
    run_url: str


def verify_release(gh, tag: str, workflow_id: str = WORKFLOW_ID) -> ReleaseVerification:
    """
    Confirm the release exists and its test run completed successfully.

    Args:
        gh: GitHubAPI client for the student's repository
        tag: Release tag, e.g. "v1.2.0"
        workflow_id: Workflow file name (or numeric id) of the test workflow

    Returns:
        ReleaseVerification for the release and its matching run.
    """
    with actions_toolkit.group(f"Verifying release {tag}..."):
        try:
            release = gh.get_release_by_tag(tag)
        except requests.RequestException as e:
            reason = _failure_reason(e)
            raise ReleaseNotFoundError(f"Unable to fetch release {tag} ({reason.lower()}).") from e

        logger.info(f"Found release {release.get('tag_name')}: {release.get('html_url')}")

        try:
            runs = gh.list_workflow_runs(workflow_id, event="release")
        except requests.RequestException as e:
            reason = _failure_reason(e)
            raise RunNotFoundError(
                f"Unable to list {workflow_id} runs for release {tag} ({reason.lower()})."
            ) from e

        run = next((r for r in runs if r.get("head_branch") == tag), None)

        if run is None:
            raise RunNotFoundError(f"Unable to find a {workflow_id} run for release {tag}.")

        if run.get("status") != "completed" or run.get("conclusion") != "success":
            raise RunNotSuccessfulError(
                f"Run #{run.get('run_number')} (id {run.get('id')}) for release {tag} "
                f"did not pass (status: {run.get('status')}, "
                f"conclusion: {run.get('conclusion')})."
            )

        logger.info(f"Found passing run #{run.get('run_number')}: {run.get('html_url')}")
        logger.info("")

    return ReleaseVerification(
        release_url=release.get("html_url"),
        release_tag=release.get("tag_name"),
        release_date=release.get("created_at"),
        run_number=run.get("run_number"),
        run_id=run.get("id"),
        run_url=run.get("html_url"),
    )


def _failure_reason(error: requests.RequestException) -> str:
    """Prefer the HTTP reason phrase ("Not Found") over the full exception text."""
    response = getattr(error, "response", None)
    if response is not None and response.reason:
        return response.reason
    return str(error)
