"""Reporters for rendering and delivering coverage reports."""

from __future__ import annotations

from prcoverage.reporters.github_comment import GitHubCommentReporter
from prcoverage.reporters.markdown import build_report, build_summary, build_table, shorten_path
from prcoverage.reporters.terminal import reporter

__all__ = [
    "GitHubCommentReporter",
    "build_report",
    "build_summary",
    "build_table",
    "reporter",
    "shorten_path",
]
