"""Coverage percentage calculation for single files and aggregates."""

from __future__ import annotations

import math
from dataclasses import dataclass, fields
from typing import TYPE_CHECKING

from prcoverage.models.coverage import UNDEFINED, MetricPercentages, Percentage

if TYPE_CHECKING:
    from collections.abc import Iterable

    from prcoverage.adapters.coverage.base import FileCoverage


def _is_number(value: object) -> bool:
    return isinstance(value, int | float) and not math.isnan(value)


def percentage(covered: float, total: float) -> Percentage:
    """Return ``covered / total`` as a percentage rounded to two places.

    A zero or non-numeric total counts as fully covered (100). A ratio that is
    not a number (for example a malformed ``covered`` count) yields UNDEFINED.
    """
    if not _is_number(total) or total == 0:
        return 100.0

    value = covered / total * 100
    if math.isnan(value):
        return UNDEFINED

    return round(value, 2)


@dataclass
class MetricCounts:
    """Raw covered/total counters for one file or a set of files."""

    statements: float = 0.0
    covered_statements: float = 0.0
    branches: float = 0.0
    covered_branches: float = 0.0
    functions: float = 0.0
    covered_functions: float = 0.0
    lines: int = 0
    covered_lines: int = 0

    @classmethod
    def from_file(cls, file_cov: FileCoverage) -> MetricCounts:
        """Collect the counters for a single file.

        Clover reports carry no lines total, so lines are counted from the
        file's line records.
        """
        covered_lines = sum(1 for line in file_cov.lines if line.is_covered)
        return cls(
            statements=file_cov.statements,
            covered_statements=file_cov.covered_statements,
            branches=file_cov.conditionals,
            covered_branches=file_cov.covered_conditionals,
            functions=file_cov.methods,
            covered_functions=file_cov.covered_methods,
            lines=len(file_cov.lines),
            covered_lines=covered_lines,
        )

    @classmethod
    def combine(cls, files: Iterable[FileCoverage]) -> MetricCounts:
        """Sum the counters of every file into one weighted aggregate.

        A counter the report left missing or malformed contributes 0, so one
        file without metrics cannot mask the totals of the others.
        """
        total = cls()
        for file_cov in files:
            counts = cls.from_file(file_cov)
            for f in fields(cls):
                value = getattr(counts, f.name)
                if not _is_number(value):
                    value = 0
                setattr(total, f.name, getattr(total, f.name) + value)
        return total

    @property
    def has_line_data(self) -> bool:
        return self.lines > 0

    def percentages(self) -> MetricPercentages:
        """Apply :func:`percentage` to each metric."""
        return MetricPercentages(
            statements=percentage(self.covered_statements, self.statements),
            branches=percentage(self.covered_branches, self.branches),
            functions=percentage(self.covered_functions, self.functions),
            lines=percentage(self.covered_lines, self.lines),
        )
