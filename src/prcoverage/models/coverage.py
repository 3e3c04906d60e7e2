"""Coverage percentage models."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum

METRICS = ("statements", "branches", "functions", "lines")


class NoData(Enum):
    """Marker for a percentage that has no applicable total."""

    UNDEFINED = "-"

    def __str__(self) -> str:
        return self.value


UNDEFINED = NoData.UNDEFINED

Percentage = float | NoData


def format_percentage(value: Percentage) -> str:
    """Render a percentage for a report cell (``100``, ``95.24``, ``-``)."""
    if isinstance(value, NoData):
        return str(value)
    return f"{value:.2f}".rstrip("0").rstrip(".")


@dataclass(frozen=True)
class MetricPercentages:
    """Coverage percentages for one file or for an aggregate of files."""

    statements: Percentage
    """Statement coverage percentage (0-100) or UNDEFINED."""

    branches: Percentage
    """Branch (conditional) coverage percentage (0-100) or UNDEFINED."""

    functions: Percentage
    """Function (method) coverage percentage (0-100) or UNDEFINED."""

    lines: Percentage
    """Line coverage percentage (0-100) or UNDEFINED."""

    def items(self) -> Iterator[tuple[str, Percentage]]:
        """Yield ``(metric, percentage)`` pairs in table column order."""
        for metric in METRICS:
            yield metric, getattr(self, metric)
