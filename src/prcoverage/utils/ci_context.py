"""CI and pull request context detection."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

_DEFAULT_REMOTE = "origin"

_GITHUB_PR_EVENTS = frozenset({"pull_request", "pull_request_target"})


@dataclass
class CIContext:
    """Pull request details detected from the CI environment."""

    base_branch: str | None = None
    """Target branch of the pull request."""

    commit_sha: str | None = None
    """Head commit of the pull request, or the commit being built."""

    @property
    def base_ref(self) -> str | None:
        """Remote-tracking ref of the PR base branch, if known."""
        if not self.base_branch:
            return None
        return f"{_DEFAULT_REMOTE}/{self.base_branch}"


def _read_github_event() -> dict[str, Any]:
    event_path = os.getenv("GITHUB_EVENT_PATH")
    if not event_path:
        return {}
    try:
        payload = json.loads(Path(event_path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning("Could not read GitHub event payload %s: %s", event_path, exc)
        return {}
    return payload if isinstance(payload, dict) else {}


def _github_head_sha(event: dict[str, Any]) -> str | None:
    # On pull_request events GITHUB_SHA is the synthetic merge commit,
    # whose blob links do not resolve once the PR branch moves.
    pull_request = event.get("pull_request")
    if isinstance(pull_request, dict):
        head = pull_request.get("head")
        if isinstance(head, dict) and head.get("sha"):
            return str(head["sha"])
    return os.getenv("GITHUB_SHA") or None


def detect_ci_context() -> CIContext:
    """Detect the PR base branch and head commit from CI environment variables.

    Supports GitHub Actions and GitLab CI. Other environments yield an empty
    context, leaving the caller to fall back to local git.
    """
    if os.getenv("GITHUB_ACTIONS") == "true":
        is_pr = os.getenv("GITHUB_EVENT_NAME", "") in _GITHUB_PR_EVENTS
        event = _read_github_event() if is_pr else {}
        return CIContext(
            base_branch=(os.getenv("GITHUB_BASE_REF") or None) if is_pr else None,
            commit_sha=_github_head_sha(event),
        )

    if os.getenv("GITLAB_CI") == "true":
        is_mr = bool(os.getenv("CI_MERGE_REQUEST_ID"))
        return CIContext(
            base_branch=os.getenv("CI_MERGE_REQUEST_TARGET_BRANCH_NAME") if is_mr else None,
            commit_sha=os.getenv("CI_COMMIT_SHA") or None,
        )

    return CIContext()
