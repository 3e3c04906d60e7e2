"""Git and GitHub helpers.

Provides the change context for a report (created/modified files, head SHA)
and a small GitHub REST client used to upsert PR comments.
"""

from __future__ import annotations

import hashlib
import logging
import os
import re
import shutil
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import requests

logger = logging.getLogger(__name__)

# GitHub API constants
GITHUB_API_BASE = "https://api.github.com"
_GITHUB_AUTH_ENV_KEY = "GITHUB_" + "TOKEN"
_REQUEST_TIMEOUT = 30
_COMMENTS_PER_PAGE = 100

# Expected number of parts when splitting "owner/repo"
_OWNER_REPO_PARTS = 2

# git diff --name-status parsing
_MIN_STATUS_PARTS = 2
_RENAMED_PARTS = 3


def _git_executable() -> str:
    """Resolve the full path to the ``git`` executable."""
    return shutil.which("git") or "git"


@dataclass
class GitHubPRInfo:
    """Information about a GitHub pull request."""

    owner: str
    """Repository owner (username or organization)."""

    repo: str
    """Repository name."""

    pr_number: int
    """Pull request number."""


class GitHubAPIError(Exception):
    """Exception raised when GitHub API operations fail."""


class GitHubAPI:
    """Client for the GitHub issue-comment endpoints used on pull requests."""

    def __init__(self, token: str | None = None) -> None:
        """Initialize the GitHub API client.

        Args:
            token: GitHub personal access token. If not provided, will try to read
                from GITHUB_TOKEN environment variable.

        Raises:
            GitHubAPIError: If no token is available.
        """
        self._token = token or os.environ.get(_GITHUB_AUTH_ENV_KEY)
        if not self._token:
            raise GitHubAPIError(
                f"GitHub token required. Set {_GITHUB_AUTH_ENV_KEY} environment variable "
                "or pass token to constructor."
            )

        self._session_headers = {
            "Authorization": f"Bearer {self._token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }

    def _comments_url(self, pr_info: GitHubPRInfo) -> str:
        return (
            f"{GITHUB_API_BASE}/repos/{pr_info.owner}/{pr_info.repo}/"
            f"issues/{pr_info.pr_number}/comments"
        )

    def create_comment(self, pr_info: GitHubPRInfo, body: str) -> dict[str, Any]:
        """Create a new comment on a pull request.

        Raises:
            GitHubAPIError: If the API request fails.
        """
        result: dict[str, Any] = self._post(self._comments_url(pr_info), {"body": body})
        return result

    def update_comment(self, pr_info: GitHubPRInfo, comment_id: int, body: str) -> dict[str, Any]:
        """Update an existing comment on a pull request.

        Raises:
            GitHubAPIError: If the API request fails.
        """
        url = (
            f"{GITHUB_API_BASE}/repos/{pr_info.owner}/{pr_info.repo}/"
            f"issues/comments/{comment_id}"
        )
        result: dict[str, Any] = self._patch(url, {"body": body})
        return result

    def find_comment_by_marker(self, pr_info: GitHubPRInfo, marker: str) -> dict[str, Any] | None:
        """Find a comment on a PR by a unique marker string.

        Returns:
            Comment dict if found, None otherwise.

        Raises:
            GitHubAPIError: If the API request fails.
        """
        url = f"{self._comments_url(pr_info)}?per_page={_COMMENTS_PER_PAGE}"
        comments: list[dict[str, Any]] = self._get(url)

        for comment in comments:
            if marker in comment.get("body", ""):
                result: dict[str, Any] = comment
                return result

        return None

    def upsert_comment(self, pr_info: GitHubPRInfo, body: str, marker: str) -> dict[str, Any]:
        """Create or update a comment on a PR.

        If a comment with the given marker exists, it will be updated.
        Otherwise, a new comment will be created.

        Raises:
            GitHubAPIError: If the API request fails.
        """
        if marker not in body:
            body = f"{marker}\n{body}"

        existing = self.find_comment_by_marker(pr_info, marker)

        if existing:
            logger.info("Updating existing comment %d", existing["id"])
            return self.update_comment(pr_info, existing["id"], body)

        logger.info("Creating new comment")
        return self.create_comment(pr_info, body)

    def _get(self, url: str) -> Any:
        try:
            response = requests.get(url, headers=self._session_headers, timeout=_REQUEST_TIMEOUT)
            response.raise_for_status()
            return response.json()
        except requests.RequestException as exc:
            raise GitHubAPIError(f"GET request failed: {exc}") from exc

    def _post(self, url: str, data: dict[str, Any]) -> Any:
        try:
            response = requests.post(
                url, json=data, headers=self._session_headers, timeout=_REQUEST_TIMEOUT
            )
            response.raise_for_status()
            return response.json()
        except requests.RequestException as exc:
            raise GitHubAPIError(f"POST request failed: {exc}") from exc

    def _patch(self, url: str, data: dict[str, Any]) -> Any:
        try:
            response = requests.patch(
                url, json=data, headers=self._session_headers, timeout=_REQUEST_TIMEOUT
            )
            response.raise_for_status()
            return response.json()
        except requests.RequestException as exc:
            raise GitHubAPIError(f"PATCH request failed: {exc}") from exc


def get_pr_info_from_env() -> GitHubPRInfo | None:
    """Get PR information from GitHub Actions environment variables.

    Returns:
        GitHubPRInfo if running in a PR context, None otherwise.
    """
    github_repository = os.environ.get("GITHUB_REPOSITORY")
    github_event_name = os.environ.get("GITHUB_EVENT_NAME")
    github_ref = os.environ.get("GITHUB_REF")

    if not github_repository or github_event_name not in {"pull_request", "pull_request_target"}:
        return None

    parts = github_repository.split("/")
    if len(parts) != _OWNER_REPO_PARTS:
        return None

    owner, repo = parts

    # GITHUB_REF format: refs/pull/<number>/merge
    if not github_ref or not github_ref.startswith("refs/pull/"):
        return None

    try:
        pr_number = int(github_ref.split("/")[2])
    except (IndexError, ValueError):
        return None

    return GitHubPRInfo(owner=owner, repo=repo, pr_number=pr_number)


def compute_comment_marker(prefix: str) -> str:
    """Generate an HTML comment marker identifying a bot comment on a PR."""
    hash_str = hashlib.sha256(prefix.encode()).hexdigest()[:8]
    return f"<!-- {prefix}:{hash_str} -->"


class GitOperationError(Exception):
    """Exception raised when git operations fail."""


_GIT_REF_MAX_LENGTH = 255
_GIT_REF_UNSAFE = re.compile(r"[\x00-\x1f\x7f \~\^:\?\*\[\]\\;|&$`()<>{}!#'\"]")


def _validate_git_ref(ref: str) -> None:
    """Validate a git ref to prevent injection and malformed inputs.

    Raises:
        GitOperationError: If the ref is invalid.
    """
    if not ref:
        raise GitOperationError("Git ref must not be empty")
    if len(ref) > _GIT_REF_MAX_LENGTH:
        raise GitOperationError(f"Git ref exceeds {_GIT_REF_MAX_LENGTH} characters")
    if _GIT_REF_UNSAFE.search(ref):
        raise GitOperationError(f"Git ref contains unsafe characters: {ref!r}")
    if ref.startswith("-"):
        raise GitOperationError("Git ref must not start with a dash")
    if ".." in ref:
        raise GitOperationError("Git ref must not contain '..'")


@dataclass
class ChangedFiles:
    """Files created and modified by a change, relative to the repository root."""

    created: list[str] = field(default_factory=list)
    modified: list[str] = field(default_factory=list)


def parse_name_status(output: str) -> ChangedFiles:
    """Parse ``git diff --name-status`` output.

    Added and copied files count as created; modified, renamed and
    type-changed files count as modified. Deleted files are ignored.
    """
    changes = ChangedFiles()
    for line in output.splitlines():
        parts = line.split("\t")
        if len(parts) < _MIN_STATUS_PARTS or not parts[0]:
            continue

        status = parts[0][0].upper()
        if status == "A":
            changes.created.append(parts[1])
        elif status == "C" and len(parts) >= _RENAMED_PARTS:
            changes.created.append(parts[2])
        elif status in {"M", "T"}:
            changes.modified.append(parts[1])
        elif status == "R" and len(parts) >= _RENAMED_PARTS:
            changes.modified.append(parts[2])
    return changes


def _run_git(repo_path: Path, args: list[str]) -> str:
    try:
        result = subprocess.run(
            [_git_executable(), *args],
            cwd=repo_path,
            capture_output=True,
            text=True,
            check=True,
        )
    except (subprocess.CalledProcessError, FileNotFoundError) as exc:
        raise GitOperationError(f"git {' '.join(args)} failed: {exc}") from exc
    return result.stdout


def get_changed_files(repo_path: Path, base_ref: str, head_ref: str = "HEAD") -> ChangedFiles:
    """List files created or modified between ``base_ref`` and ``head_ref``.

    Uses the merge base (``base...head``) so only the branch's own changes
    are returned.

    Raises:
        GitOperationError: If a ref is invalid or git fails.
    """
    _validate_git_ref(base_ref)
    _validate_git_ref(head_ref)
    output = _run_git(repo_path, ["diff", "--name-status", f"{base_ref}...{head_ref}"])
    changes = parse_name_status(output)
    logger.debug(
        "git diff %s...%s: %d created, %d modified",
        base_ref,
        head_ref,
        len(changes.created),
        len(changes.modified),
    )
    return changes


def get_head_sha(repo_path: Path) -> str | None:
    """Return the SHA of HEAD, or None outside a git repository."""
    try:
        return _run_git(repo_path, ["rev-parse", "HEAD"]).strip() or None
    except GitOperationError:
        return None
