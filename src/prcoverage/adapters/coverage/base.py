"""Data models for parsed coverage reports."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class LineCoverage:
    """Coverage data for a single line of code."""

    line_number: int
    execution_count: int
    kind: str = "stmt"

    @property
    def is_covered(self) -> bool:
        """Return True if this line was executed at least once."""
        return self.execution_count > 0


@dataclass
class FileCoverage:
    """Coverage data for a single source file.

    Counters keep whatever the report supplied. A missing or malformed
    attribute is stored as NaN so the metric calculator can tell it apart
    from a genuine zero.
    """

    path: str
    statements: float = 0.0
    covered_statements: float = 0.0
    conditionals: float = 0.0
    covered_conditionals: float = 0.0
    methods: float = 0.0
    covered_methods: float = 0.0
    lines: list[LineCoverage] = field(default_factory=list)

    @property
    def has_line_data(self) -> bool:
        """Return True when the report lists at least one line for this file."""
        return bool(self.lines)

    @property
    def uncovered_lines(self) -> list[LineCoverage]:
        """Return the lines that were never executed, in report order."""
        return [line for line in self.lines if not line.is_covered]


@dataclass
class FileList:
    """Leaf node of a coverage tree: the files listed directly under an element."""

    files: list[FileCoverage] = field(default_factory=list)


@dataclass
class CoverageGroup:
    """Grouping node of a coverage tree (a ``<project>`` or ``<package>``)."""

    kind: str
    name: str = ""
    children: list[CoverageNode] = field(default_factory=list)


CoverageNode = CoverageGroup | FileList


def flatten_files(node: CoverageNode) -> list[FileCoverage]:
    """Flatten a coverage tree into its file records, in encounter order."""
    if isinstance(node, FileList):
        return list(node.files)

    files: list[FileCoverage] = []
    for child in node.children:
        files.extend(flatten_files(child))
    return files
