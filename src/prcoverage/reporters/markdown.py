"""Markdown rendering of the coverage table and pass/fail summary."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from prcoverage.analyzers.metrics import MetricCounts
from prcoverage.analyzers.relevance import relative_path
from prcoverage.analyzers.thresholds import has_passed, threshold_misses
from prcoverage.models.coverage import format_percentage

if TYPE_CHECKING:
    from pathlib import Path

    from prcoverage.adapters.coverage.base import FileCoverage
    from prcoverage.config import CoverageOptions

REPORT_HEADING = "## Coverage Report"

PASS_GLYPH = ":white_check_mark:"
FAIL_GLYPH = ":x:"
NO_DATA = "-"

DEFAULT_MAX_PATH_CHARS = 50

_PATH_SEPARATORS = re.compile(r"[\\/]")
_TRUNCATED_MARKER = ".."
_TRUNCATED_COST = len(_TRUNCATED_MARKER) + 1

_COLUMNS = ("% Stmts", "% Branch", "% Funcs", "% Lines", "Uncovered", "")


def shorten_path(path: str, max_chars: int = DEFAULT_MAX_PATH_CHARS) -> str:
    """Shorten ``path`` to at most ``max_chars`` by dropping leading directories.

    The deepest segment is always kept, so a single oversized file name can
    still exceed the budget. Dropped directories are replaced by ``..``.
    """
    parts = [part for part in _PATH_SEPARATORS.split(path) if part]
    if len(parts) <= 1:
        return path

    kept: list[str] = []
    used = 0  # joined length of kept segments, plus one trailing separator
    for part in reversed(parts):
        cost = len(part) + 1
        if kept and used + cost - 1 > max_chars:
            break
        kept.append(part)
        used += cost

    if len(kept) < len(parts):
        while len(kept) > 1 and used - 1 + _TRUNCATED_COST > max_chars:
            used -= len(kept.pop()) + 1
        kept.append(_TRUNCATED_MARKER)

    return "/".join(reversed(kept))


def join_row(cells: list[str]) -> str:
    """Join cells into a Markdown table row."""
    return "|" + "|".join(cells) + "|"


def _blob_link(path: str, commit_sha: str) -> str:
    return f"../blob/{commit_sha}/{path}"


def _file_cell(path: str, commit_sha: str | None) -> str:
    short_path = shorten_path(path)
    if not commit_sha:
        return short_path
    return f"[{short_path}]({_blob_link(path, commit_sha)})"


def _uncovered_cell(
    file_cov: FileCoverage, path: str, commit_sha: str | None, max_uncovered: int
) -> str:
    uncovered = file_cov.uncovered_lines
    numbers: list[str] = []
    for line in uncovered[:max_uncovered]:
        number = str(line.line_number)
        if commit_sha:
            number = f"[{number}]({_blob_link(path, commit_sha)}#L{number})"
        numbers.append(number)

    cell = ",".join(numbers)
    if len(uncovered) > max_uncovered:
        cell += "..."
    return cell


def build_row(
    file_cov: FileCoverage,
    options: CoverageOptions,
    *,
    root: Path | None = None,
    commit_sha: str | None = None,
) -> str:
    """Render one file as a table row."""
    path = relative_path(file_cov.path, root)
    counts = MetricCounts.from_file(file_cov)
    percentages = counts.percentages()

    if counts.has_line_data:
        metric_cells = [format_percentage(value) for _, value in percentages.items()]
        status = PASS_GLYPH if has_passed(options.threshold, percentages) else FAIL_GLYPH
    else:
        metric_cells = [NO_DATA] * 4
        status = NO_DATA

    return join_row(
        [
            _file_cell(path, commit_sha),
            *metric_cells,
            _uncovered_cell(file_cov, path, commit_sha, options.max_uncovered),
            status,
        ]
    )


def build_table(
    files: list[FileCoverage],
    options: CoverageOptions,
    *,
    root: Path | None = None,
    commit_sha: str | None = None,
) -> str:
    """Render the coverage table, collapsing rows past ``max_rows``."""
    first_heading = "Files" if options.show_all_files else "Impacted Files"
    heading_row = join_row([first_heading, *_COLUMNS])
    separator = join_row(["---"] + [":-:"] * len(_COLUMNS))

    rows = [build_row(f, options, root=root, commit_sha=commit_sha) for f in files]
    main_rows = rows[: options.max_rows]
    extra_rows = rows[options.max_rows :]

    table = "\n".join([heading_row, separator, *main_rows])

    if extra_rows:
        table += "\n\n" + "\n".join(
            [
                "<details>",
                "<summary>",
                f"and {len(extra_rows)} more...",
                "</summary>",
                "",
                heading_row,
                separator,
                *extra_rows,
                "</details>",
            ]
        )

    return table


def build_summary(counts: MetricCounts, options: CoverageOptions) -> str:
    """Render the pass/fail banner for the aggregate of all reported files."""
    percentages = counts.percentages()

    if has_passed(options.threshold, percentages):
        return f"> {options.success_message}"

    lines = [f"> {options.failure_message}"]
    misses = threshold_misses(options.threshold, percentages)
    if misses:
        lines.extend(["", "```", *(miss.message for miss in misses), "```"])
    return "\n".join(lines)


def build_report(
    files: list[FileCoverage],
    options: CoverageOptions,
    *,
    root: Path | None = None,
    commit_sha: str | None = None,
) -> str:
    """Render the full Markdown report for ``files``."""
    summary = build_summary(MetricCounts.combine(files), options)
    table = build_table(files, options, root=root, commit_sha=commit_sha)
    return "\n\n".join([REPORT_HEADING, summary, table])
