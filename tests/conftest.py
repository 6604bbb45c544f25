from __future__ import annotations

from pathlib import Path

import pytest
import requests

from _review_action.actions_toolkit import configure_logging
from _review_action.command_runner import CommandResult
from _review_action.errors import CommandFailedError


@pytest.fixture(autouse=True)
def _actions_logging() -> None:
    configure_logging("DEBUG")


def http_error(status_code: int, reason: str) -> requests.HTTPError:
    response = requests.Response()
    response.status_code = status_code
    response.reason = reason
    return requests.HTTPError(f"{status_code} Client Error: {reason}", response=response)


def read_state_file(path: Path) -> dict[str, str]:
    """Parse the runner's GITHUB_STATE heredoc format into name -> value."""
    values: dict[str, str] = {}
    lines = path.read_text(encoding="utf-8").splitlines()
    index = 0
    while index < len(lines):
        name, _, delimiter = lines[index].partition("<<")
        end = lines.index(delimiter, index + 1)
        values[name] = "\n".join(lines[index + 1 : end])
        index = end + 1
    return values


def issue(number: int, state: str = "closed", locked: bool = True, reason: str | None = "resolved") -> dict:
    return {
        "number": number,
        "html_url": f"https://github.com/student/project-student/issues/{number}",
        "state": state,
        "locked": locked,
        "active_lock_reason": reason,
    }


class FakeGitHub:
    """In-memory stand-in for GitHubAPI."""

    def __init__(
        self,
        releases: dict | None = None,
        runs: list | None = None,
        issues: dict | None = None,
        milestones: list | None = None,
        pulls: list | None = None,
    ) -> None:
        self.owner = "student"
        self.repo = "project-student"
        self.releases = releases or {}
        self.runs = runs or []
        self.issues = issues or {}
        self.milestones = milestones or []
        self.pulls = pulls or []
        self.calls: list[tuple] = []

    def get_release_by_tag(self, tag: str) -> dict:
        self.calls.append(("get_release_by_tag", tag))
        if tag not in self.releases:
            raise http_error(404, "Not Found")
        return self.releases[tag]

    def list_workflow_runs(self, workflow_id: str, event: str | None = None) -> list:
        self.calls.append(("list_workflow_runs", workflow_id, event))
        return list(self.runs)

    def list_issues(self, labels: list, state: str = "all") -> list:
        self.calls.append(("list_issues", tuple(labels), state))
        return list(self.issues.get(tuple(labels), []))

    def list_milestones(self, state: str = "all") -> list:
        self.calls.append(("list_milestones", state))
        return list(self.milestones)

    def create_milestone(self, title: str, description: str = "") -> dict:
        self.calls.append(("create_milestone", title))
        milestone = {"title": title, "number": len(self.milestones) + 1}
        self.milestones.append(milestone)
        return milestone

    def list_pull_requests(self, head: str | None = None, state: str = "open") -> list:
        self.calls.append(("list_pull_requests", head, state))
        return list(self.pulls)

    def create_pull_request(self, *args, **kwargs) -> dict:
        raise AssertionError("pull requests must not be created")


class FakeRunner:
    """Records commands and answers with configured exit codes and output.

    `codes` and `outputs` are keyed by a substring of the joined command line;
    the first matching key wins.
    """

    def __init__(self, codes: dict | None = None, outputs: dict | None = None) -> None:
        self.codes = codes or {}
        self.outputs = outputs or {}
        self.commands: list[str] = []
        self.chdirs: list[str | None] = []

    def _lookup(self, table: dict, line: str, default):
        for key, value in table.items():
            if key in line:
                return value
        return default

    def run_command(self, command, params=None, chdir=None) -> CommandResult:
        line = " ".join([command, *(params or [])])
        self.commands.append(line)
        self.chdirs.append(chdir)
        return CommandResult(self._lookup(self.codes, line, 0), self._lookup(self.outputs, line, ""))

    def check_exec(self, command, params=None, *, title=None, error=None, chdir=None) -> int:
        result = self.run_command(command, params, chdir=chdir)
        if error and result.returncode != 0:
            raise CommandFailedError(error, result.returncode)
        return result.returncode
