"""Clover coverage reports for pull requests."""

from prcoverage.config import CoverageOptions, load_config
from prcoverage.orchestrator import ReportContext, report_coverage

__version__ = "0.1.0"

__all__ = [
    "CoverageOptions",
    "ReportContext",
    "__version__",
    "load_config",
    "report_coverage",
]
