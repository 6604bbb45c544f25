"""
Actions Toolkit - Review Request Action

PURPOSE:
    The small part of the GitHub Actions runner interface this action needs:
    reading inputs, masking secrets, log groups, workflow commands for
    warnings/errors, and the state file used to pass values from the setup
    process to the main and cleanup processes.

    Everything is done through environment variables, files named by
    environment variables, and `::command::` lines on stdout. There is no
    separate runtime to talk to.

DEPENDS ON:
    - INPUT_<NAME> environment variables (action inputs)
    - GITHUB_STATE (file the runner reads state from after a step ends)
    - STATE_<name> environment variables (state saved by an earlier step)

LOGGING:
    configure_logging() installs ActionsLogHandler on the package logger, so
    modules only ever call logging.getLogger(__name__). Registered secrets are
    replaced with "***" before a record is written.
"""

import logging
import os
import sys
import uuid
from contextlib import contextmanager
from typing import Optional

from .errors import MissingInputError

_PACKAGE_LOGGER = "_review_action"
_REDACTED = "***"

# Secrets registered with set_secret(). The runner masks them in its own log
# view, but we also scrub them from anything written through logging.
_SECRETS = set()


def _escape_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def _redact(text: str) -> str:
    for secret in _SECRETS:
        text = text.replace(secret, _REDACTED)
    return text


def _issue(command: str, message: str = "") -> None:
    sys.stdout.write(f"::{command}::{_escape_data(_redact(message))}\n")
    sys.stdout.flush()


# ---------------------------------------------------------------------------
# INPUTS AND SECRETS
# ---------------------------------------------------------------------------


def get_input(name: str, required: bool = False) -> str:
    """Return the value of an action input, stripped of whitespace."""
    key = f"INPUT_{name.replace(' ', '_').upper()}"
    value = os.environ.get(key, "").strip()
    if required and not value:
        raise MissingInputError(f"Input required and not supplied: {name}")
    return value


def set_secret(value: str) -> None:
    """Mask a value in the runner log and in our own log records."""
    if not value:
        return
    _SECRETS.add(value)
    sys.stdout.write(f"::add-mask::{_escape_data(value)}\n")
    sys.stdout.flush()


# ---------------------------------------------------------------------------
# LOG GROUPS AND WORKFLOW COMMANDS
# ---------------------------------------------------------------------------


def start_group(title: str) -> None:
    _issue("group", title)


def end_group() -> None:
    _issue("endgroup")


@contextmanager
def group(title: str):
    """Wrap the enclosed output in a collapsible log group."""
    start_group(title)
    try:
        yield
    finally:
        end_group()


def info(message: str) -> None:
    """
    Write a plain line to the run log whatever the configured log level.

    Used for the styled result lines and the end-of-stage snapshots, which
    must show up even when REVIEW_LOG_LEVEL hides routine records.
    """
    sys.stdout.write(f"{_redact(message)}\n")
    sys.stdout.flush()


def warning(message: str) -> None:
    _issue("warning", message)


def error(message: str) -> None:
    _issue("error", message)


def set_failed(message: str) -> int:
    """
    Report a failed step. Returns the exit code the process should use.

    The runner marks the step as failed from the non-zero exit code; the
    error annotation is what the student sees on the run summary page.
    """
    error(message)
    return 1


# ---------------------------------------------------------------------------
# STATE
# ---------------------------------------------------------------------------


def save_state(name: str, value: str) -> None:
    """
    Persist a value for the later steps of this action.

    The runner reads GITHUB_STATE after the step ends and exposes each entry
    to the following steps as STATE_<name>. Values are written with the
    heredoc form so multi-line values survive.
    """
    value = "" if value is None else str(value)
    state_file = os.environ.get("GITHUB_STATE")
    if not state_file:
        # Older runners only understand the stdout command.
        _issue(f"save-state name={name}", value)
        return

    delimiter = f"ghadelimiter_{uuid.uuid4()}"
    with open(state_file, "a", encoding="utf-8") as handle:
        handle.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")


def get_state(name: str) -> Optional[str]:
    """Return a value saved by an earlier step, or None if it was never saved."""
    return os.environ.get(f"STATE_{name}")


# ---------------------------------------------------------------------------
# LOGGING
# ---------------------------------------------------------------------------


class ActionsLogHandler(logging.Handler):
    """Write log records to stdout using workflow command syntax."""

    _COMMANDS = {
        logging.DEBUG: "debug",
        logging.WARNING: "warning",
        logging.ERROR: "error",
        logging.CRITICAL: "error",
    }

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = _redact(self.format(record))
            command = self._COMMANDS.get(record.levelno)
            if command:
                sys.stdout.write(f"::{command}::{_escape_data(message)}\n")
            else:
                sys.stdout.write(f"{message}\n")
            sys.stdout.flush()
        except Exception:
            self.handleError(record)


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """Install ActionsLogHandler on the package logger and return it."""
    from .config import LOG_LEVEL

    logger = logging.getLogger(_PACKAGE_LOGGER)
    logger.setLevel((level or LOG_LEVEL).upper())
    logger.propagate = False

    for handler in list(logger.handlers):
        if isinstance(handler, ActionsLogHandler):
            logger.removeHandler(handler)

    handler = ActionsLogHandler()
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    return logger
