"""GitHub comment reporter for posting coverage reports to pull requests.

The report is upserted: a hidden HTML marker identifies the bot's comment so
re-runs on the same PR edit it instead of adding a new one.
"""

from __future__ import annotations

import logging

from prcoverage.utils.git import (
    GitHubAPI,
    GitHubAPIError,
    GitHubPRInfo,
    compute_comment_marker,
    get_pr_info_from_env,
)

logger = logging.getLogger(__name__)

COMMENT_MARKER_PREFIX = "prcoverage:report"


class GitHubCommentReporter:
    """Posts rendered coverage reports as a single PR comment."""

    def __init__(self, github_token: str | None = None) -> None:
        """Initialize the GitHub comment reporter.

        Args:
            github_token: GitHub personal access token. If not provided,
                will try to read from GITHUB_TOKEN environment variable.

        Raises:
            GitHubAPIError: If no token is available.
        """
        self._api = GitHubAPI(token=github_token)
        self._marker = compute_comment_marker(COMMENT_MARKER_PREFIX)

    def post_report(self, pr_info: GitHubPRInfo, markdown: str) -> dict[str, str]:
        """Create or update the coverage comment on a PR.

        Returns:
            Dict with status and comment URL.

        Raises:
            GitHubAPIError: If posting the comment fails.
        """
        logger.info(
            "Posting coverage report to PR #%d in %s/%s",
            pr_info.pr_number,
            pr_info.owner,
            pr_info.repo,
        )

        body = f"{self._marker}\n{markdown}"
        result = self._api.upsert_comment(pr_info, body, self._marker)

        logger.info("Posted comment: %s", result.get("html_url"))
        return {
            "status": "success",
            "comment_url": result.get("html_url", ""),
        }


def create_reporter_from_env() -> tuple[GitHubCommentReporter, GitHubPRInfo] | None:
    """Create a reporter for the PR in the current GitHub Actions run.

    Returns:
        The reporter and target PR, or None outside a PR context or without a token.
    """
    pr_info = get_pr_info_from_env()
    if not pr_info:
        logger.debug("Not running in a GitHub Actions PR context")
        return None

    try:
        return GitHubCommentReporter(), pr_info
    except GitHubAPIError as exc:
        logger.error("Failed to create GitHub reporter: %s", exc)
        return None
