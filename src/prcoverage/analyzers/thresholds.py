"""Pass/fail evaluation of coverage percentages against thresholds."""

from __future__ import annotations

from dataclasses import dataclass

from prcoverage.models.coverage import (
    METRICS,
    MetricPercentages,
    NoData,
    Percentage,
    format_percentage,
)

DEFAULT_THRESHOLD = 80.0

# Clover metric names -> report metric names
RAW_METRIC_NAMES = {
    "statements": "statements",
    "conditionals": "branches",
    "methods": "functions",
    "lines": "lines",
}


def translate_metric(raw_name: str) -> str:
    """Map a Clover metric name (``conditionals``) to its report name (``branches``)."""
    return RAW_METRIC_NAMES.get(raw_name, raw_name)


@dataclass(frozen=True)
class ThresholdConfig:
    """Minimum coverage percentage per metric. ``None`` disables a metric."""

    statements: float | None = DEFAULT_THRESHOLD
    branches: float | None = DEFAULT_THRESHOLD
    functions: float | None = DEFAULT_THRESHOLD
    lines: float | None = DEFAULT_THRESHOLD

    def get(self, metric: str) -> float | None:
        return getattr(self, translate_metric(metric))


@dataclass(frozen=True)
class ThresholdMiss:
    """A metric whose percentage fell below its threshold."""

    metric: str
    threshold: float
    percentage: float

    @property
    def message(self) -> str:
        return (
            f"Coverage threshold for {self.metric} ({format_percentage(self.threshold)}%) "
            f"not met: {format_percentage(self.percentage)}%"
        )


def metric_passed(value: Percentage, threshold: float | None) -> bool:
    """Return True if a single metric meets its threshold.

    UNDEFINED percentages and unset thresholds always pass.
    """
    if isinstance(value, NoData) or threshold is None:
        return True
    return value >= threshold


def has_passed(thresholds: ThresholdConfig, percentages: MetricPercentages) -> bool:
    """Return True if every metric meets its threshold."""
    return all(
        metric_passed(value, thresholds.get(metric)) for metric, value in percentages.items()
    )


def threshold_misses(
    thresholds: ThresholdConfig, percentages: MetricPercentages
) -> list[ThresholdMiss]:
    """Return one ThresholdMiss per failing metric, in column order."""
    misses: list[ThresholdMiss] = []
    for metric in METRICS:
        value = getattr(percentages, metric)
        threshold = thresholds.get(metric)
        if isinstance(value, NoData) or threshold is None or metric_passed(value, threshold):
            continue
        misses.append(ThresholdMiss(metric=metric, threshold=threshold, percentage=value))
    return misses
