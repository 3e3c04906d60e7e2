"""Shared fixtures for prcoverage tests."""

from __future__ import annotations

import pytest

from tests.helpers import Sinks


@pytest.fixture
def sinks() -> Sinks:
    return Sinks()


@pytest.fixture(autouse=True)
def _clean_ci_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the host's CI variables out of context detection."""
    for var in (
        "CI",
        "GITHUB_ACTIONS",
        "GITHUB_EVENT_NAME",
        "GITHUB_BASE_REF",
        "GITHUB_SHA",
        "GITHUB_EVENT_PATH",
        "GITHUB_REF",
        "GITHUB_REPOSITORY",
        "GITHUB_TOKEN",
        "GITLAB_CI",
        "CI_MERGE_REQUEST_ID",
        "CI_MERGE_REQUEST_TARGET_BRANCH_NAME",
        "CI_COMMIT_SHA",
    ):
        monkeypatch.delenv(var, raising=False)
