"""Coverage report orchestration: load, filter, render, post."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from prcoverage.adapters.coverage.base import flatten_files
from prcoverage.adapters.coverage.clover import load_clover_report
from prcoverage.analyzers.relevance import (
    build_change_set,
    filter_relevant_files,
    find_missing_files,
)
from prcoverage.config import CoverageOptions
from prcoverage.reporters.markdown import build_report

if TYPE_CHECKING:
    from collections.abc import Callable

    from prcoverage.adapters.coverage.base import FileCoverage

logger = logging.getLogger(__name__)

NO_REPORT_WARNING = (
    "No coverage report was detected. "
    "Please output a report in the `clover.xml` format before running prcoverage"
)


def missing_files_warning(count: int) -> str:
    """Warning text for changed files that have no data in the report."""
    noun = "file" if count == 1 else "files"
    return f"Code coverage has no data on {count} {noun} created or modified in this PR."


@dataclass
class ReportContext:
    """Everything a report run needs from its host."""

    markdown: Callable[[str], None]
    """Sink receiving the rendered report."""

    warn: Callable[[str], None]
    """Sink receiving non-fatal warnings."""

    created_files: list[str] = field(default_factory=list)
    """Paths added by the change."""

    modified_files: list[str] = field(default_factory=list)
    """Paths modified by the change."""

    commit_sha: str | None = None
    """Latest commit of the change, used for file links."""

    root: Path = field(default_factory=Path.cwd)
    """Project root that report and change paths are relative to."""

    @property
    def change_set(self) -> frozenset[str]:
        return build_change_set(self.created_files, self.modified_files, self.root)


@dataclass
class CoverageRun:
    """Outcome of a run that posted a report."""

    markdown: str
    """The report handed to the markdown sink."""

    files: list[FileCoverage]
    """Files included in the report, in report order."""


async def report_coverage(
    context: ReportContext, options: CoverageOptions | None = None
) -> CoverageRun | None:
    """Render the coverage report for the change in ``context`` and post it.

    Returns:
        The posted report, or None when nothing was posted (no report file,
        or no report files touched by the change).

    Raises:
        CloverParseError: If the report exists but is malformed.
    """
    options = options or CoverageOptions()

    tree = await load_clover_report(options.report_path, root=context.root)
    if tree is None:
        if options.warn_on_no_report:
            context.warn(NO_REPORT_WARNING)
        return None

    files = flatten_files(tree)
    change_set = context.change_set

    if options.warn_on_missing_files:
        missing = find_missing_files(files, change_set, context.root)
        if missing:
            logger.debug("Changed files missing from report: %s", ", ".join(missing))
            context.warn(missing_files_warning(len(missing)))

    relevant = filter_relevant_files(
        files, change_set, root=context.root, show_all_files=options.show_all_files
    )
    if not relevant:
        logger.info("No report files match this change; nothing to post")
        return None

    markdown = build_report(relevant, options, root=context.root, commit_sha=context.commit_sha)
    context.markdown(markdown)
    return CoverageRun(markdown=markdown, files=relevant)
