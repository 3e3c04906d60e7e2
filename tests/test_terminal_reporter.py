"""Tests for the rich terminal reporter."""

from __future__ import annotations

from io import StringIO

import pytest
from rich.console import Console

from prcoverage.adapters.coverage.base import FileCoverage, LineCoverage
from prcoverage.analyzers.thresholds import ThresholdConfig
from prcoverage.reporters.terminal import CLIReporter


@pytest.fixture
def buffer() -> StringIO:
    return StringIO()


@pytest.fixture
def cli_reporter(buffer: StringIO) -> CLIReporter:
    return CLIReporter(Console(file=buffer, width=120, color_system=None))


def test_messages(cli_reporter: CLIReporter, buffer: StringIO) -> None:
    cli_reporter.print_success("done")
    cli_reporter.print_error("broken")
    cli_reporter.print_warning("careful")
    cli_reporter.print_info("fyi")

    assert buffer.getvalue().splitlines() == ["✓ done", "✗ broken", "⚠ careful", "fyi"]


def test_coverage_summary(cli_reporter: CLIReporter, buffer: StringIO) -> None:
    files = [
        FileCoverage(
            path="src/one.js",
            statements=4,
            covered_statements=3,
            conditionals=2,
            covered_conditionals=2,
            methods=1,
            covered_methods=1,
            lines=[LineCoverage(line_number=1, execution_count=1)],
        ),
        FileCoverage(path="src/empty.js"),
    ]

    cli_reporter.print_coverage_summary(files, ThresholdConfig())

    output = buffer.getvalue()
    assert "Coverage Summary" in output
    assert "src/one.js" in output
    assert "75%" in output
    assert "Overall" in output
    empty_row = next(line for line in output.splitlines() if "src/empty.js" in line)
    assert "%" not in empty_row
