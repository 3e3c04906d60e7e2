"""Terminal reporter with rich output formatting."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table

from prcoverage.analyzers.metrics import MetricCounts
from prcoverage.analyzers.relevance import relative_path
from prcoverage.analyzers.thresholds import metric_passed
from prcoverage.models.coverage import NoData, format_percentage

if TYPE_CHECKING:
    from pathlib import Path

    from prcoverage.adapters.coverage.base import FileCoverage
    from prcoverage.analyzers.thresholds import ThresholdConfig
    from prcoverage.models.coverage import MetricPercentages

# Status output goes to stderr so stdout carries only the Markdown report.
console = Console(stderr=True)


class CLIReporter:
    """Rich terminal output for the prcoverage CLI."""

    def __init__(self, output: Console | None = None) -> None:
        self.console = output or console

    def print_success(self, message: str) -> None:
        """Print a success message."""
        self.console.print(f"[green]✓[/green] {message}")

    def print_error(self, message: str) -> None:
        """Print an error message."""
        self.console.print(f"[red]✗[/red] {message}")

    def print_warning(self, message: str) -> None:
        """Print a warning message."""
        self.console.print(f"[yellow]⚠[/yellow] {message}")

    def print_info(self, message: str) -> None:
        """Print an info message."""
        self.console.print(f"[dim]{message}[/dim]")

    def print_coverage_summary(
        self,
        files: list[FileCoverage],
        thresholds: ThresholdConfig,
        root: Path | None = None,
    ) -> None:
        """Print per-file and overall percentages, coloured by threshold."""
        table = Table(title="Coverage Summary", title_style="bold cyan")
        table.add_column("File", style="bold")
        for heading in ("Statements", "Branches", "Functions", "Lines"):
            table.add_column(heading, justify="right")

        for file_cov in files:
            counts = MetricCounts.from_file(file_cov)
            table.add_row(
                relative_path(file_cov.path, root),
                *self._cells(counts.percentages(), thresholds, has_data=counts.has_line_data),
            )

        overall = MetricCounts.combine(files)
        table.add_section()
        table.add_row(
            "[bold]Overall[/bold]",
            *self._cells(overall.percentages(), thresholds, has_data=True),
        )

        self.console.print(table)

    @staticmethod
    def _cells(
        percentages: MetricPercentages, thresholds: ThresholdConfig, *, has_data: bool
    ) -> list[str]:
        if not has_data:
            return ["[dim]-[/dim]"] * 4

        cells: list[str] = []
        for metric, value in percentages.items():
            text = format_percentage(value)
            if isinstance(value, NoData):
                cells.append(f"[dim]{text}[/dim]")
                continue
            color = "green" if metric_passed(value, thresholds.get(metric)) else "red"
            cells.append(f"[{color}]{text}%[/{color}]")
        return cells


reporter = CLIReporter()
