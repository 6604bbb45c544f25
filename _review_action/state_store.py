"""
State Store - Review Request Action

PURPOSE:
    Carries values from one stage process to the next. The setup process
    saves what it learned (project, release, run, issue); the main process
    restores it, adds the branch and Maven cache keys, and saves again for
    cleanup.

FORMAT:
    Each value is saved under its own name through the runner's state file.
    Two extra entries describe the set:
        keys          JSON list of every name saved, in order
        stateVersion  format version of this record

    restore_states() reads `keys` first and then each listed name, so only
    values from the most recent save are restored. A name listed in `keys`
    but missing from storage restores as None; a stored empty string stays
    an empty string.

VALIDATION:
    Unknown names in `keys`, a different stateVersion, or a value that does
    not convert to its field type raise StateError. Values are never trusted
    just because they were found under a known name.
"""

import json
import logging
from dataclasses import dataclass, field, fields
from typing import Callable, Optional

from . import actions_toolkit
from .errors import StateError

logger = logging.getLogger(__name__)

STATE_VERSION = 1
KEYS_NAME = "keys"
VERSION_NAME = "stateVersion"


def _value(key: str, kind: type = str):
    return field(default=None, metadata={"key": key, "kind": kind})


@dataclass
class RunState:
    """Everything remembered between the setup, main and cleanup stages."""

    owner: Optional[str] = _value("owner")
    main_repo: Optional[str] = _value("mainRepo")
    test_repo: Optional[str] = _value("testRepo")
    project: Optional[int] = _value("project", int)
    reviews: Optional[int] = _value("reviews", int)
    patches: Optional[int] = _value("patches", int)
    version: Optional[str] = _value("version")

    release_url: Optional[str] = _value("releaseUrl")
    release_tag: Optional[str] = _value("releaseTag")
    release_date: Optional[str] = _value("releaseDate")
    run_number: Optional[int] = _value("runNumber", int)
    run_id: Optional[int] = _value("runId", int)
    run_url: Optional[str] = _value("runUrl")

    issue_number: Optional[int] = _value("issueNumber", int)
    issue_url: Optional[str] = _value("issueUrl")

    branch: Optional[str] = _value("branch")
    type: Optional[str] = _value("type")
    pull_number: Optional[int] = _value("pullNumber", int)
    pull_url: Optional[str] = _value("pullUrl")
    pull_date: Optional[str] = _value("pullDate")

    maven_key: Optional[str] = _value("mavenKey")
    maven_cache: Optional[str] = _value("mavenCache")

    @classmethod
    def known_keys(cls) -> list:
        return [f.metadata["key"] for f in fields(cls)]

    def update(self, source) -> "RunState":
        """Copy every same-named, non-None attribute from a dataclass instance."""
        for f in fields(self):
            value = getattr(source, f.name, None)
            if value is not None:
                setattr(self, f.name, value)
        return self

    def as_dict(self) -> dict:
        """Set values keyed by their persisted names, in field order."""
        return {
            f.metadata["key"]: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }

    def set_value(self, key: str, raw: Optional[str]) -> None:
        """
        Set a field from its persisted name and string value.

        None means nothing was stored and clears the field. An empty string
        is a stored value and is kept as-is for text fields.
        """
        for f in fields(self):
            if f.metadata["key"] != key:
                continue
            if raw is None:
                setattr(self, f.name, None)
                return
            try:
                setattr(self, f.name, f.metadata["kind"](raw))
            except ValueError as e:
                raise StateError(f"Invalid value {raw!r} for state {key}: {e}") from e
            return
        raise StateError(f"Unknown state key: {key}")


def save_states(
    state: RunState,
    saver: Callable[[str, str], None] = actions_toolkit.save_state,
) -> list:
    """
    Persist every set value of `state`, followed by the key index.

    Returns the list of names saved.
    """
    values = state.as_dict()

    with actions_toolkit.group("Saving state..."):
        for key, value in values.items():
            saver(key, str(value))
            logger.info(f"Saved value {value} for state {key}.")

        saver(KEYS_NAME, json.dumps(list(values)))
        saver(VERSION_NAME, str(STATE_VERSION))

    return list(values)


def restore_states(
    target: Optional[RunState] = None,
    getter: Callable[[str], Optional[str]] = actions_toolkit.get_state,
) -> RunState:
    """
    Restore the values saved by the previous stage into `target`.

    Returns `target` (or a new RunState if none was given). When nothing was
    saved the returned state is left unchanged.
    """
    state = target if target is not None else RunState()

    with actions_toolkit.group("Restoring state..."):
        raw_keys = getter(KEYS_NAME)
        if not raw_keys:
            logger.info("No saved state found.")
            return state

        raw_version = getter(VERSION_NAME)
        if raw_version and raw_version != str(STATE_VERSION):
            raise StateError(
                f"Saved state version {raw_version} does not match {STATE_VERSION}."
            )

        try:
            keys = json.loads(raw_keys)
        except json.JSONDecodeError as e:
            raise StateError(f"Unable to parse saved state keys: {raw_keys}") from e

        if not isinstance(keys, list) or not all(isinstance(k, str) for k in keys):
            raise StateError(f"Saved state keys must be a list of names: {raw_keys}")

        logger.info(f"Loaded keys: {', '.join(keys)}")

        for key in keys:
            state.set_value(key, getter(key))
            logger.info(f"Restored value {state.as_dict().get(key)} for state {key}.")

    return state
