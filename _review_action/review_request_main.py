"""
Review Request - stage orchestration

PURPOSE:
    Sequences the steps of the action across the three processes the runner
    starts for it:

        setup    parse project -> verify release -> check issues
                 -> clone project -> save state
        main     restore state -> clone tests -> restore Maven cache
                 -> check build -> request review -> save state
        cleanup  restore state -> save Maven cache

    Each stage keeps two mappings: `status` (results of intermediate steps,
    only logged) and the RunState (remembered for later stages). The body of
    every stage runs in a single try block. A ReviewActionError or GitHub
    request error shows a styled error line and fails the step; the finally
    block always logs the status and state snapshots and the warning summary,
    so the log is complete even when a step aborts.

CALLED BY:
    __main__.py - `python -m _review_action {setup,main,cleanup}`.

RETURNS:
    Each run_* function returns the process exit code.
"""

import json
import logging
import os

import requests

from . import actions_toolkit
from .config import CACHE_DIR_CONFIGURED, TEST_DIR, repository_context
from .console_output import (
    WarningCounter,
    check_warnings,
    show_error,
    show_success,
    show_title,
    show_warning,
)
from .errors import ReviewActionError, StateError
from .github_api import GitHubAPI
from .maven_cache import maven_cache_key, restore_maven_cache, save_maven_cache
from .stage_1_parse_project import parse_project
from .stage_2_verify_release import verify_release
from .stage_3_check_issues import check_issues
from .stage_4_clone_project import clone_project, clone_test_suite
from .stage_5_check_build import check_build
from .stage_6_request_review import NOT_SUPPORTED_MESSAGE, ReviewOutcome, request_review
from .state_store import RunState, restore_states, save_states

logger = logging.getLogger(__name__)

STAGE_ERRORS = (ReviewActionError, requests.RequestException)


def run_setup() -> int:
    """Verify the release and approvals, clone the project, save state."""
    show_title("Pre Request Review")
    status = {}
    state = RunState()
    counter = WarningCounter()
    exit_code = 0

    try:
        token = actions_toolkit.get_input("token", required=True)
        actions_toolkit.set_secret(token)

        owner, repo = repository_context()
        gh = GitHubAPI(owner, repo, token)

        release = actions_toolkit.get_input("release", required=True)
        state.update(parse_project(owner, repo, release))
        state.update(verify_release(gh, state.version))
        state.update(check_issues(gh, state.project))

        status["even"] = clone_project(token, owner, repo, state.version, counter)

        save_states(state)
    except STAGE_ERRORS as error:
        exit_code = _fail("Setup", error)
    finally:
        _log_status("setup", status, state)
        check_warnings(counter, '"Pre Request Review"')

    return exit_code


def run_main() -> int:
    """Compile and scan the project, then push the review branch."""
    show_title("Request Review")
    status = {}
    state = RunState()
    counter = WarningCounter()
    exit_code = 0

    try:
        restore_states(state)

        token = actions_toolkit.get_input("token", required=True)
        actions_toolkit.set_secret(token)

        if not state.version or not state.main_repo:
            raise StateError("Project details not found. The setup step must pass first.")

        owner, _, repo = state.main_repo.partition("/")
        gh = GitHubAPI(owner, repo, token)

        clone_test_suite(token, state.test_repo)
        _restore_cache(state, status, counter)

        status.update(check_build(counter))

        outcome = request_review(gh, state, counter)
        status["outcome"] = outcome.value

        if outcome is ReviewOutcome.NOT_SUPPORTED:
            show_error(f"{NOT_SUPPORTED_MESSAGE}\n")
            exit_code = actions_toolkit.set_failed(
                f"Code review request failed. {NOT_SUPPORTED_MESSAGE}"
            )
        else:
            show_success(f"Requested code review for {state.version}.")
    except STAGE_ERRORS as error:
        exit_code = _fail("Code review request", error)
    finally:
        # The cleanup stage needs the Maven keys even if a check failed
        if state.as_dict():
            save_states(state)
        _log_status("main", status, state)
        check_warnings(counter, '"Request Review"')

    return exit_code


def run_cleanup() -> int:
    """Save the Maven cache. Never fails the job."""
    show_title("Post Request Review")
    status = {}
    state = RunState()
    counter = WarningCounter()

    try:
        restore_states(state)

        with actions_toolkit.group("Saving Maven cache..."):
            if state.maven_key is None:
                logger.info("Unable to cache; key not found")
            elif state.maven_key == state.maven_cache:
                logger.info("Skipping; cache already exists.")
            else:
                if not CACHE_DIR_CONFIGURED:
                    logger.info("REVIEW_CACHE_DIR is not set; the cache will not persist past this job.")
                logger.info(f"Saving {state.maven_key} to cache...")
                status["mavenCache"] = save_maven_cache(state.maven_key)
                logger.info(f"Saved cache: {status['mavenCache']}")

            logger.info("")
    except (ReviewActionError, OSError) as error:
        show_warning(counter, f"Encountered issues saving cache. {error}")
    finally:
        _log_status("cleanup", status, state)
        check_warnings(counter, '"Post Request Review"')

    return 0


STAGES = {
    "setup": run_setup,
    "main": run_main,
    "cleanup": run_cleanup,
}


# ---------------------------------------------------------------------------
# PRIVATE HELPER FUNCTIONS
# ---------------------------------------------------------------------------


def _restore_cache(state: RunState, status: dict, counter: WarningCounter) -> None:
    with actions_toolkit.group("Restoring Maven cache..."):
        state.maven_key = maven_cache_key(os.path.join(TEST_DIR, "pom.xml"))
        if state.maven_key is None:
            logger.info("Unable to restore cache; pom.xml not found")
            return

        try:
            state.maven_cache = restore_maven_cache(state.maven_key)
        except OSError as error:
            show_warning(counter, f"Encountered issues restoring cache. {error}")
            return

        status["mavenHit"] = state.maven_cache is not None


def _fail(stage: str, error: Exception) -> int:
    show_error(f"{error}\n")
    return actions_toolkit.set_failed(f"{stage} failed. {error}")


def _log_status(phase: str, status: dict, state: RunState) -> None:
    with actions_toolkit.group(f"Logging {phase} status..."):
        actions_toolkit.info(f"status: {json.dumps(status)}")
        actions_toolkit.info(f"states: {json.dumps(state.as_dict())}")
