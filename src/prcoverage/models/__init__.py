"""Value objects shared across analyzers and reporters."""

from prcoverage.models.coverage import (
    METRICS,
    UNDEFINED,
    MetricPercentages,
    NoData,
    Percentage,
    format_percentage,
)

__all__ = [
    "METRICS",
    "UNDEFINED",
    "MetricPercentages",
    "NoData",
    "Percentage",
    "format_percentage",
]
