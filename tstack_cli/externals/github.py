"""Remote repository provisioning on GitHub.

Two backends are supported, picked by availability: the REST API when a
token is configured, otherwise the ``gh`` CLI. Failures after a backend
was chosen are reported as warnings and return ``None`` / ``False``.
"""

from __future__ import annotations

import re
import subprocess

import httpx

from tstack_cli.errors import ExternalToolUnavailable
from tstack_cli.helpers.helpers_logging import print_info, print_warning

GITHUB_API_URL = "https://api.github.com"
GITHUB_API_VERSION = "2022-11-28"

_GH_URL_PATTERN = re.compile(r"https://github\.com/\S+")


class GitHubApiClient:
    """Minimal GitHub REST client authenticated with a personal token."""

    def __init__(self, token: str, client: httpx.Client | None = None) -> None:
        self._token = token
        self._client = client

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": GITHUB_API_VERSION,
        }

    def _request(self, method: str, url: str, **kwargs: object) -> httpx.Response:
        if self._client is not None:
            return self._client.request(method, url, headers=self._headers(), **kwargs)
        with httpx.Client(timeout=30.0) as client:
            return client.request(method, url, headers=self._headers(), **kwargs)

    def create_repo(self, name: str, org: str | None = None, private: bool = True) -> str:
        """Create a repository and return its clone URL.

        Raises:
            httpx.HTTPStatusError: If GitHub rejects the request.
        """
        url = (
            f"{GITHUB_API_URL}/orgs/{org}/repos" if org else f"{GITHUB_API_URL}/user/repos"
        )
        payload = {"name": name, "private": private, "auto_init": False}
        resp = self._request("POST", url, json=payload)
        resp.raise_for_status()
        return str(resp.json()["clone_url"])

    def delete_repo(self, owner: str, repo: str) -> bool:
        resp = self._request("DELETE", f"{GITHUB_API_URL}/repos/{owner}/{repo}")
        return resp.status_code == httpx.codes.NO_CONTENT


# ---------------------------------------------------------------------------
# gh CLI
# ---------------------------------------------------------------------------


def gh_cli_available() -> bool:
    try:
        result = subprocess.run(
            ["gh", "--version"], capture_output=True, text=True, check=False
        )
    except (FileNotFoundError, OSError):
        return False
    return result.returncode == 0


def gh_create_repo(full_name: str, private: bool = True) -> str | None:
    visibility_flag = "--private" if private else "--public"
    try:
        result = subprocess.run(
            ["gh", "repo", "create", full_name, visibility_flag, "--confirm"],
            capture_output=True,
            text=True,
            check=False,
        )
    except (FileNotFoundError, OSError) as exc:
        print_warning(f"gh CLI failed: {exc}")
        return None

    if result.returncode != 0:
        print_warning(f"gh CLI failed: {result.stderr.strip()}")
        return None

    match = _GH_URL_PATTERN.search(result.stdout)
    if match:
        url = match.group(0)
        return url if url.endswith(".git") else f"{url}.git"
    return f"https://github.com/{full_name}.git"


def gh_delete_repo(full_name: str) -> bool:
    try:
        result = subprocess.run(
            ["gh", "repo", "delete", full_name, "--yes"],
            capture_output=True,
            text=True,
            check=False,
        )
    except (FileNotFoundError, OSError):
        return False
    return result.returncode == 0


# ---------------------------------------------------------------------------
# Backend selection
# ---------------------------------------------------------------------------


class RemoteRepoProvider:
    """Creates and deletes repositories through whichever backend is usable."""

    def __init__(
        self,
        token: str | None = None,
        api_client: GitHubApiClient | None = None,
    ) -> None:
        self.token = token
        self._api = api_client or (GitHubApiClient(token) if token else None)
        self._gh_checked: bool | None = None

    @property
    def uses_api(self) -> bool:
        return self._api is not None

    def _gh(self) -> bool:
        if self._gh_checked is None:
            self._gh_checked = gh_cli_available()
        return self._gh_checked

    def ensure_available(self) -> None:
        """
        Raises:
            ExternalToolUnavailable: If neither a token nor the gh CLI is usable.
        """
        if self._api is None and not self._gh():
            raise ExternalToolUnavailable(
                "Neither GITHUB_TOKEN nor the gh CLI is available",
                hint="export GITHUB_TOKEN=ghp_your_token_here (scopes: repo, delete_repo) "
                "or install and authenticate the gh CLI",
            )

    def create(self, name: str, org: str | None, private: bool = True) -> str | None:
        """Create ``org/name``; returns the clone URL or None on failure."""
        full_name = f"{org}/{name}" if org else name
        if self._api is not None:
            print_info(f"  Creating {full_name} via GitHub API...")
            try:
                return self._api.create_repo(name, org, private)
            except httpx.HTTPStatusError as exc:
                print_warning(f"GitHub API failed for {full_name}: {exc.response.text}")
                return None
            except (httpx.HTTPError, KeyError, ValueError) as exc:
                print_warning(f"GitHub API failed for {full_name}: {exc}")
                return None
        if self._gh():
            print_info(f"  Creating {full_name} via gh CLI...")
            return gh_create_repo(full_name, private)
        print_warning(f"Neither GITHUB_TOKEN nor gh CLI available, skipping: {full_name}")
        return None

    def delete(self, full_name: str) -> bool:
        """Delete ``owner/repo``; returns False on any failure."""
        if self._api is not None:
            owner, _, repo = full_name.partition("/")
            if not repo:
                print_warning(f"Cannot delete {full_name}: no owner specified")
                return False
            try:
                return self._api.delete_repo(owner, repo)
            except httpx.HTTPError as exc:
                print_warning(f"GitHub API failed deleting {full_name}: {exc}")
                return False
        if self._gh():
            return gh_delete_repo(full_name)
        print_warning(f"Neither GITHUB_TOKEN nor gh CLI available, skipping: {full_name}")
        return False
