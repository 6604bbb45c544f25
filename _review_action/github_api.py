"""
GitHub REST API client - Review Request Action

Thin wrapper around the GitHub REST API calls the stages need. Uses the token
passed in as the action's `token` input, which must be able to read releases,
workflow runs, issues and pull requests, and to create milestones.

List endpoints are paginated by following the `Link: rel="next"` header that
GitHub returns, so callers always see every matching item.
"""

from typing import Optional

import requests

from .config import GITHUB_API_URL, REQUEST_TIMEOUT


class GitHubAPI:
    """
    Thin wrapper around GitHub REST API for the operations we need.

    Every method raises requests.HTTPError on a non-2xx response and
    requests.RequestException on connection problems. No retries.
    """

    def __init__(self, owner: str, repo: str, token: str, api_url: str = GITHUB_API_URL):
        self.owner = owner
        self.repo = repo
        self.base_url = f"{api_url.rstrip('/')}/repos/{owner}/{repo}"
        self.headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }

    def _get(self, url: str, params: Optional[dict] = None) -> requests.Response:
        resp = requests.get(url, headers=self.headers, params=params, timeout=REQUEST_TIMEOUT)
        resp.raise_for_status()
        return resp

    def _paginate(self, url: str, params: dict, key: Optional[str] = None) -> list:
        """Collect every item of a list endpoint, following next links."""
        items = []
        next_url = url
        next_params = {"per_page": 100, **params}

        while next_url:
            resp = self._get(next_url, next_params)
            payload = resp.json()
            items.extend(payload.get(key, []) if key else payload)
            next_url = resp.links.get("next", {}).get("url")
            # The next link already carries the query string
            next_params = None

        return items

    # -- releases and workflow runs ------------------------------------------

    def get_release_by_tag(self, tag: str) -> dict:
        """Get a published release by its tag name."""
        return self._get(f"{self.base_url}/releases/tags/{tag}").json()

    def list_workflow_runs(self, workflow_id: str, event: Optional[str] = None) -> list:
        """List runs of one workflow, optionally only those triggered by `event`."""
        params = {"event": event} if event else {}
        return self._paginate(
            f"{self.base_url}/actions/workflows/{workflow_id}/runs",
            params,
            key="workflow_runs",
        )

    # -- issues and milestones -----------------------------------------------

    def list_issues(self, labels: list, state: str = "all") -> list:
        """List issues that carry ALL of the given labels."""
        return self._paginate(
            f"{self.base_url}/issues",
            {"labels": ",".join(labels), "state": state},
        )

    def list_milestones(self, state: str = "all") -> list:
        return self._paginate(f"{self.base_url}/milestones", {"state": state})

    def create_milestone(self, title: str, description: str = "") -> dict:
        url = f"{self.base_url}/milestones"
        data = {"title": title, "description": description}
        resp = requests.post(url, headers=self.headers, json=data, timeout=REQUEST_TIMEOUT)
        resp.raise_for_status()
        return resp.json()

    # -- pull requests --------------------------------------------------------

    def list_pull_requests(self, head: Optional[str] = None, state: str = "open") -> list:
        """List pull requests, optionally filtered by "owner:branch" head."""
        params = {"state": state}
        if head:
            params["head"] = head
        return self._paginate(f"{self.base_url}/pulls", params)

    def create_pull_request(self, title: str, body: str, head: str, base: str = "main") -> dict:
        """Create a Pull Request. Returns the created pull request."""
        url = f"{self.base_url}/pulls"
        data = {"title": title, "body": body, "head": head, "base": base}
        resp = requests.post(url, headers=self.headers, json=data, timeout=REQUEST_TIMEOUT)
        resp.raise_for_status()
        return resp.json()
