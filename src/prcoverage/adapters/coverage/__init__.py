"""Coverage report adapters."""

from prcoverage.adapters.coverage.base import (
    CoverageGroup,
    CoverageNode,
    FileCoverage,
    FileList,
    LineCoverage,
    flatten_files,
)
from prcoverage.adapters.coverage.clover import (
    DEFAULT_REPORT_PATH,
    CloverParseError,
    load_clover_report,
    parse_clover_xml,
)

__all__ = [
    "DEFAULT_REPORT_PATH",
    "CloverParseError",
    "CoverageGroup",
    "CoverageNode",
    "FileCoverage",
    "FileList",
    "LineCoverage",
    "flatten_files",
    "load_clover_report",
    "parse_clover_xml",
]
