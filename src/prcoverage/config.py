"""Configuration parsing from ``.prcoverage.yml``."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

import yaml

from prcoverage.adapters.coverage.clover import DEFAULT_REPORT_PATH
from prcoverage.analyzers.thresholds import DEFAULT_THRESHOLD, ThresholdConfig
from prcoverage.models.coverage import METRICS

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".prcoverage.yml"

DEFAULT_SUCCESS_MESSAGE = ":+1: Test coverage is looking good."
DEFAULT_FAILURE_MESSAGE = (
    "Test coverage is looking a little low for the files created "
    "or modified in this PR, perhaps we need to improve this."
)

_ENV_VAR_RE = re.compile(r"\$\{(\w+)\}")

_MAX_PERCENTAGE = 100.0


def _resolve_env_vars(value: str) -> str:
    """Replace ``${VAR_NAME}`` placeholders with environment variable values."""

    def _replace(match: re.Match[str]) -> str:
        var = match.group(1)
        resolved = os.environ.get(var)
        if resolved is None:
            logger.warning("Environment variable %s is not set (referenced in config)", var)
            return ""
        return resolved

    return _ENV_VAR_RE.sub(_replace, value)


def _resolve_dict(data: dict[str, Any]) -> dict[str, Any]:
    """Recursively resolve environment variables in a dictionary."""
    result: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, str):
            result[key] = _resolve_env_vars(value)
        elif isinstance(value, dict):
            result[key] = _resolve_dict(value)
        else:
            result[key] = value
    return result


def _parse_bool(value: Any, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() in {"true", "1", "yes", "on"}
    return bool(value)


def _parse_int(value: Any, default: int, key: str) -> int:
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        logger.warning("Ignoring non-integer %s: %r; using %d", key, value, default)
        return default


def _parse_str(value: Any, default: str) -> str:
    return default if value is None else str(value)


@dataclass
class CoverageOptions:
    """Options for a single coverage report run."""

    success_message: str = DEFAULT_SUCCESS_MESSAGE
    """Banner shown when every threshold is met."""

    failure_message: str = DEFAULT_FAILURE_MESSAGE
    """Banner shown when any threshold is missed."""

    report_path: str = DEFAULT_REPORT_PATH
    """Clover report location, relative to the project root."""

    max_rows: int = 5
    """Rows shown before the rest move into a collapsed block."""

    max_uncovered: int = 3
    """Uncovered line numbers listed per row."""

    show_all_files: bool = False
    """Report every file in the report, not only changed ones."""

    warn_on_no_report: bool = True
    """Emit a warning when the report file is missing."""

    warn_on_missing_files: bool = True
    """Emit a warning when changed files have no data in the report."""

    threshold: ThresholdConfig = field(default_factory=ThresholdConfig)
    """Minimum percentage per metric."""

    def with_overrides(self, **overrides: Any) -> CoverageOptions:
        """Return a copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def _parse_threshold(raw: Any) -> ThresholdConfig:
    if not isinstance(raw, dict):
        if raw is not None:
            logger.warning("Ignoring non-mapping threshold config: %r", raw)
        return ThresholdConfig()

    values: dict[str, float | None] = {}
    for metric in METRICS:
        if metric not in raw:
            values[metric] = DEFAULT_THRESHOLD
        elif raw[metric] is None:
            values[metric] = None
        else:
            try:
                values[metric] = float(raw[metric])
            except (TypeError, ValueError):
                logger.warning(
                    "Ignoring non-numeric threshold.%s: %r; using %s",
                    metric,
                    raw[metric],
                    DEFAULT_THRESHOLD,
                )
                values[metric] = DEFAULT_THRESHOLD
    return ThresholdConfig(**values)


def parse_options(raw: dict[str, Any]) -> CoverageOptions:
    """Build CoverageOptions from a parsed configuration mapping."""
    defaults = CoverageOptions()
    return CoverageOptions(
        success_message=_parse_str(raw.get("success_message"), defaults.success_message),
        failure_message=_parse_str(raw.get("failure_message"), defaults.failure_message),
        report_path=str(raw.get("report_path") or defaults.report_path),
        max_rows=_parse_int(raw.get("max_rows"), defaults.max_rows, "max_rows"),
        max_uncovered=_parse_int(
            raw.get("max_uncovered"), defaults.max_uncovered, "max_uncovered"
        ),
        show_all_files=_parse_bool(raw.get("show_all_files"), defaults.show_all_files),
        warn_on_no_report=_parse_bool(raw.get("warn_on_no_report"), defaults.warn_on_no_report),
        warn_on_missing_files=_parse_bool(
            raw.get("warn_on_missing_files"), defaults.warn_on_missing_files
        ),
        threshold=_parse_threshold(raw.get("threshold")),
    )


def load_config(root: str | Path) -> CoverageOptions:
    """Load ``.prcoverage.yml`` from ``root``.

    Falls back to defaults when the file is missing or not a mapping.
    """
    config_file = Path(root).resolve() / CONFIG_FILENAME

    raw: dict[str, Any] = {}
    if config_file.is_file():
        parsed = yaml.safe_load(config_file.read_text(encoding="utf-8"))
        if isinstance(parsed, dict):
            raw = _resolve_dict(parsed)
        elif parsed is not None:
            logger.warning("%s does not contain a mapping; using defaults", config_file)

    return parse_options(raw)


def _validate_threshold(threshold: ThresholdConfig) -> list[str]:
    errors: list[str] = []
    for metric in METRICS:
        value = threshold.get(metric)
        if value is not None and not 0.0 <= value <= _MAX_PERCENTAGE:
            errors.append(f"threshold.{metric} must be between 0 and 100 (got: {value})")
    return errors


def validate_config(options: CoverageOptions) -> list[str]:
    """Validate the options and return a list of error messages.

    Returns an empty list if the configuration is valid.
    """
    errors: list[str] = []

    if not options.report_path.strip():
        errors.append("report_path must not be empty")

    if options.max_rows < 0:
        errors.append(f"max_rows must be non-negative (got: {options.max_rows})")

    if options.max_uncovered < 0:
        errors.append(f"max_uncovered must be non-negative (got: {options.max_uncovered})")

    errors.extend(_validate_threshold(options.threshold))

    return errors
