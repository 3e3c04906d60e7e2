"""Coverage analysis: metrics, thresholds and change relevance."""

from prcoverage.analyzers.metrics import MetricCounts, percentage
from prcoverage.analyzers.relevance import (
    build_change_set,
    filter_relevant_files,
    find_missing_files,
    relative_path,
)
from prcoverage.analyzers.thresholds import (
    DEFAULT_THRESHOLD,
    ThresholdConfig,
    ThresholdMiss,
    has_passed,
    metric_passed,
    threshold_misses,
    translate_metric,
)

__all__ = [
    "DEFAULT_THRESHOLD",
    "MetricCounts",
    "ThresholdConfig",
    "ThresholdMiss",
    "build_change_set",
    "filter_relevant_files",
    "find_missing_files",
    "has_passed",
    "metric_passed",
    "percentage",
    "relative_path",
    "threshold_misses",
    "translate_metric",
]
