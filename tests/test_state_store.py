from __future__ import annotations

import json

import pytest

from _review_action.errors import StateError
from _review_action.state_store import RunState, restore_states, save_states

from conftest import read_state_file


@pytest.fixture
def store() -> dict[str, str]:
    return {}


def _saver(store: dict[str, str]):
    return store.__setitem__


def _getter(store: dict[str, str]):
    return store.get


def _sample() -> RunState:
    return RunState(
        owner="student",
        main_repo="student/project-student",
        test_repo="student/project-tests",
        project=2,
        reviews=3,
        patches=1,
        version="v2.3.1",
        release_url="https://github.com/student/project-student/releases/tag/v2.3.1",
        run_number=41,
        run_id=123456789,
        issue_number=17,
    )


def test_save_then_restore_round_trips(store: dict[str, str]) -> None:
    state = _sample()

    saved = save_states(state, saver=_saver(store))
    restored = restore_states(getter=_getter(store))

    assert restored == state
    assert saved == list(state.as_dict())
    assert json.loads(store["keys"]) == saved
    assert store["stateVersion"] == "1"


def test_saved_names_are_the_cross_stage_keys(store: dict[str, str]) -> None:
    save_states(_sample(), saver=_saver(store))

    assert store["mainRepo"] == "student/project-student"
    assert store["runId"] == "123456789"
    assert "issueUrl" not in store


def test_restore_converts_integer_fields(store: dict[str, str]) -> None:
    save_states(_sample(), saver=_saver(store))

    restored = restore_states(getter=_getter(store))

    assert restored.project == 2
    assert restored.run_id == 123456789
    assert restored.version == "v2.3.1"


def test_restore_only_listed_keys(store: dict[str, str]) -> None:
    save_states(RunState(owner="student", project=1), saver=_saver(store))
    store["version"] = "v9.9.9"

    restored = restore_states(getter=_getter(store))

    assert restored.version is None
    assert restored.owner == "student"


def test_restore_missing_value_is_none(store: dict[str, str]) -> None:
    store["keys"] = json.dumps(["owner", "branch"])
    store["owner"] = "student"

    restored = restore_states(getter=_getter(store))

    assert restored.owner == "student"
    assert restored.branch is None


def test_empty_string_survives_save_and_restore(store: dict[str, str]) -> None:
    state = RunState(owner="student", pull_url="")

    save_states(state, saver=_saver(store))
    restored = restore_states(getter=_getter(store))

    assert json.loads(store["keys"]) == ["owner", "pullUrl"]
    assert restored == state
    assert restored.pull_url == ""


def test_restore_is_idempotent(store: dict[str, str]) -> None:
    save_states(_sample(), saver=_saver(store))

    target = RunState()
    restore_states(target, getter=_getter(store))
    restore_states(target, getter=_getter(store))

    assert target == _sample()


def test_restore_without_saved_state_leaves_target(store: dict[str, str]) -> None:
    target = RunState(owner="student")

    assert restore_states(target, getter=_getter(store)) is target
    assert target == RunState(owner="student")


@pytest.mark.parametrize(
    "values, message",
    [
        ({"keys": json.dumps(["owner", "password"]), "owner": "x"}, "Unknown state key"),
        ({"keys": json.dumps(["project"]), "project": "two"}, "Invalid value"),
        ({"keys": "owner,project"}, "Unable to parse"),
        ({"keys": json.dumps({"owner": "x"})}, "list of names"),
        ({"keys": json.dumps(["owner"]), "stateVersion": "0"}, "version"),
    ],
)
def test_restore_rejects_bad_state(store: dict[str, str], values: dict[str, str], message: str) -> None:
    store.update(values)

    with pytest.raises(StateError, match=message):
        restore_states(getter=_getter(store))


def test_save_states_writes_runner_state_file(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    state_file = tmp_path / "state"
    monkeypatch.setenv("GITHUB_STATE", str(state_file))

    save_states(RunState(owner="student", project=4, version="v4.1.0"))

    values = read_state_file(state_file)
    assert values == {
        "owner": "student",
        "project": "4",
        "version": "v4.1.0",
        "keys": json.dumps(["owner", "project", "version"]),
        "stateVersion": "1",
    }

    for name, value in values.items():
        monkeypatch.setenv(f"STATE_{name}", value)

    assert restore_states() == RunState(owner="student", project=4, version="v4.1.0")


def test_update_copies_matching_attributes() -> None:
    from _review_action.stage_3_check_issues import IssueApproval

    state = RunState(issue_number=1)
    state.update(IssueApproval(issue_number=5, issue_url="https://example.test/5"))

    assert state.issue_number == 5
    assert state.issue_url == "https://example.test/5"
