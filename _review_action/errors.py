"""
Error kinds raised by the review request stages.

Every error here is fatal to the stage that raises it. None of them are
retried; the stage wrapper in review_request_main.py logs the message and
marks the step as failed. Non-fatal problems are warnings instead (see
console_output.show_warning).
"""


class ReviewActionError(Exception):
    """Base class for all fatal stage errors."""


class MissingInputError(ReviewActionError):
    """A required action input was not provided."""


class ParseError(ReviewActionError):
    """The release reference does not match the v{project}.{reviews}.{patches} format."""

    def __init__(self, ref: str):
        super().__init__(f"Unable to parse project information from: {ref}")
        self.ref = ref


class ReleaseNotFoundError(ReviewActionError):
    """The release could not be fetched from GitHub."""


class RunNotFoundError(ReviewActionError):
    """No workflow run was triggered for the release."""


class RunNotSuccessfulError(ReviewActionError):
    """The workflow run for the release did not complete successfully."""


class FunctionalityNotApprovedError(ReviewActionError):
    """No closed, locked and resolved functionality issue exists for the project."""


class AlreadyReviewedError(ReviewActionError):
    """The project already has an approved design issue."""


class CommandFailedError(ReviewActionError):
    """An external command exited non-zero where that is not allowed."""

    def __init__(self, message: str, returncode: int):
        super().__init__(f"{message} ({returncode}).")
        self.returncode = returncode


class StateError(ReviewActionError):
    """Persisted state from an earlier stage could not be restored."""
