"""Tests for percentage calculation, aggregation and threshold checks."""

from __future__ import annotations

import math

import pytest

from prcoverage.adapters.coverage.base import FileCoverage, LineCoverage
from prcoverage.analyzers.metrics import MetricCounts, percentage
from prcoverage.analyzers.thresholds import (
    ThresholdConfig,
    ThresholdMiss,
    has_passed,
    metric_passed,
    threshold_misses,
    translate_metric,
)
from prcoverage.models.coverage import UNDEFINED, MetricPercentages, NoData, format_percentage


def _file(
    path: str = "a.js",
    statements: tuple[float, float] = (10, 10),
    conditionals: tuple[float, float] = (10, 10),
    methods: tuple[float, float] = (10, 10),
    line_counts: tuple[int, ...] = (1,),
) -> FileCoverage:
    return FileCoverage(
        path=path,
        statements=statements[0],
        covered_statements=statements[1],
        conditionals=conditionals[0],
        covered_conditionals=conditionals[1],
        methods=methods[0],
        covered_methods=methods[1],
        lines=[
            LineCoverage(line_number=i, execution_count=count)
            for i, count in enumerate(line_counts, start=1)
        ],
    )


def _percentages(
    statements: float | NoData = 100.0,
    branches: float | NoData = 100.0,
    functions: float | NoData = 100.0,
    lines: float | NoData = 100.0,
) -> MetricPercentages:
    return MetricPercentages(
        statements=statements, branches=branches, functions=functions, lines=lines
    )


# ── percentage() ─────────────────────────────────────────────────


class TestPercentage:
    @pytest.mark.parametrize(
        ("covered", "total", "expected"),
        [
            (10, 10, 100.0),
            (5, 10, 50.0),
            (0, 10, 0.0),
            (20, 21, 95.24),
            (1, 3, 33.33),
            (2, 3, 66.67),
        ],
    )
    def test_ratio(self, covered: float, total: float, expected: float) -> None:
        assert percentage(covered, total) == expected

    def test_zero_total_is_full(self) -> None:
        assert percentage(0, 0) == 100.0

    def test_nan_total_is_full(self) -> None:
        assert percentage(5, math.nan) == 100.0

    def test_nan_covered_is_undefined(self) -> None:
        assert percentage(math.nan, 10) is UNDEFINED

    def test_result_in_range(self) -> None:
        for covered in range(0, 8):
            value = percentage(covered, 7)
            assert isinstance(value, float)
            assert 0.0 <= value <= 100.0


class TestFormatPercentage:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [(100.0, "100"), (50.0, "50"), (95.24, "95.24"), (12.5, "12.5"), (0.0, "0")],
    )
    def test_trailing_zeros_dropped(self, value: float, expected: str) -> None:
        assert format_percentage(value) == expected

    def test_undefined(self) -> None:
        assert format_percentage(UNDEFINED) == "-"
        assert str(UNDEFINED) == "-"


# ── MetricCounts ─────────────────────────────────────────────────


class TestMetricCounts:
    def test_from_file_counts_lines(self) -> None:
        counts = MetricCounts.from_file(_file(line_counts=(1, 0, 3, 0)))

        assert counts.lines == 4
        assert counts.covered_lines == 2
        assert counts.has_line_data
        assert counts.percentages().lines == 50.0

    def test_from_file_maps_clover_names(self) -> None:
        counts = MetricCounts.from_file(
            _file(statements=(4, 3), conditionals=(2, 1), methods=(5, 5))
        )

        assert (counts.statements, counts.covered_statements) == (4, 3)
        assert (counts.branches, counts.covered_branches) == (2, 1)
        assert (counts.functions, counts.covered_functions) == (5, 5)

    def test_no_lines_has_no_line_data(self) -> None:
        counts = MetricCounts.from_file(_file(line_counts=()))

        assert not counts.has_line_data
        assert counts.percentages().lines == 100.0

    def test_combine_is_weighted(self) -> None:
        files = [
            _file("a.js", statements=(10, 10), line_counts=(1, 1)),
            _file("b.js", statements=(30, 0), line_counts=(0, 0)),
        ]

        combined = MetricCounts.combine(files).percentages()

        assert combined.statements == 25.0
        assert combined.lines == 50.0

    def test_combine_is_order_independent(self) -> None:
        files = [
            _file("a.js", statements=(7, 3), conditionals=(4, 1), line_counts=(1, 0)),
            _file("b.js", statements=(11, 11), methods=(3, 2), line_counts=(0,)),
            _file("c.js", statements=(0, 0), conditionals=(9, 9), line_counts=(2, 2, 0)),
        ]

        assert MetricCounts.combine(files) == MetricCounts.combine(list(reversed(files)))

    def test_combine_empty(self) -> None:
        combined = MetricCounts.combine([])

        assert combined == MetricCounts()
        assert combined.percentages() == _percentages()

    def test_combine_skips_missing_counters(self) -> None:
        files = [
            _file("a.js", statements=(10, 0)),
            _file("b.js", statements=(math.nan, math.nan)),
            _file("c.js", statements=(10, math.nan)),
        ]

        combined = MetricCounts.combine(files)

        assert (combined.statements, combined.covered_statements) == (20, 0)
        assert combined.percentages().statements == 0.0


# ── Thresholds ───────────────────────────────────────────────────


class TestThresholds:
    def test_defaults(self) -> None:
        config = ThresholdConfig()

        assert [config.get(m) for m in ("statements", "branches", "functions", "lines")] == [
            80.0,
            80.0,
            80.0,
            80.0,
        ]

    def test_get_accepts_clover_names(self) -> None:
        config = ThresholdConfig(branches=60.0, functions=70.0)

        assert config.get("conditionals") == 60.0
        assert config.get("methods") == 70.0

    def test_translate_metric(self) -> None:
        assert translate_metric("conditionals") == "branches"
        assert translate_metric("methods") == "functions"
        assert translate_metric("lines") == "lines"

    @pytest.mark.parametrize(
        ("value", "threshold", "expected"),
        [
            (80.0, 80.0, True),
            (79.99, 80.0, False),
            (0.0, None, True),
            (UNDEFINED, 80.0, True),
            (0.0, 0.0, True),
        ],
    )
    def test_metric_passed(
        self, value: float | NoData, threshold: float | None, expected: bool
    ) -> None:
        assert metric_passed(value, threshold) is expected

    def test_has_passed(self) -> None:
        assert has_passed(ThresholdConfig(), _percentages())
        assert not has_passed(ThresholdConfig(), _percentages(lines=79.0))

    def test_monotonic_in_percentages(self) -> None:
        thresholds = ThresholdConfig(statements=50.0, branches=60.0)
        failing = _percentages(statements=40.0, branches=70.0)
        passing = _percentages(statements=55.0, branches=75.0)

        assert not has_passed(thresholds, failing)
        assert has_passed(thresholds, passing)

    @pytest.mark.parametrize(
        ("metric", "first_failing"),
        [("statements", 43), ("branches", None), ("functions", 1), ("lines", None)],
    )
    def test_monotonic_in_thresholds(self, metric: str, first_failing: int | None) -> None:
        percentages = _percentages(
            statements=42.5, branches=UNDEFINED, functions=0.0, lines=100.0
        )
        unchecked = dict.fromkeys(("statements", "branches", "functions", "lines"))

        outcomes = [
            has_passed(ThresholdConfig(**{**unchecked, metric: float(t)}), percentages)
            for t in range(101)
        ]

        cutoff = outcomes.index(False) if False in outcomes else None
        assert cutoff == first_failing
        if cutoff is not None:
            assert all(outcomes[:cutoff])
            assert not any(outcomes[cutoff:])

    def test_misses_in_column_order(self) -> None:
        misses = threshold_misses(
            ThresholdConfig(),
            _percentages(statements=50.0, functions=UNDEFINED, lines=33.33),
        )

        assert misses == [
            ThresholdMiss(metric="statements", threshold=80.0, percentage=50.0),
            ThresholdMiss(metric="lines", threshold=80.0, percentage=33.33),
        ]
        assert [miss.message for miss in misses] == [
            "Coverage threshold for statements (80%) not met: 50%",
            "Coverage threshold for lines (80%) not met: 33.33%",
        ]

    def test_disabled_metric_never_misses(self) -> None:
        assert threshold_misses(ThresholdConfig(branches=None), _percentages(branches=0.0)) == []
