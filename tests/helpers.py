"""Builders for Clover reports and recording sinks used across tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from prcoverage.orchestrator import ReportContext

DEFAULT_METRICS: dict[str, Any] = {
    "statements": 10,
    "coveredstatements": 10,
    "conditionals": 10,
    "coveredconditionals": 10,
    "methods": 10,
    "coveredmethods": 10,
}

DEFAULT_LINE: dict[str, Any] = {"num": 1, "count": 1, "type": "stmt"}


def file_xml(
    path: str,
    metrics: dict[str, Any] | None = None,
    lines: list[dict[str, Any]] | None = None,
) -> str:
    """Render a Clover ``<file>`` element."""
    metrics = DEFAULT_METRICS if metrics is None else metrics
    lines = [DEFAULT_LINE] if lines is None else lines
    metric_attrs = " ".join(f'{key}="{value}"' for key, value in metrics.items())
    line_elems = "\n".join(
        f'    <line num="{line["num"]}" count="{line["count"]}" type="{line["type"]}"/>'
        for line in lines
    )
    return (
        f"  <file name=\"{Path(path).name}\" path=\"{path}\">\n"
        f"    <metrics {metric_attrs}/>\n"
        f"{line_elems}\n"
        "  </file>"
    )


def wrap_report(body: str) -> str:
    """Wrap elements in a ``<coverage>`` envelope."""
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<coverage generated="1600000000000" clover="3.2.0">\n'
        f"{body}\n"
        "</coverage>\n"
    )


def write_report(root: Path, body: str, rel: str = "coverage/clover.xml") -> Path:
    """Write a wrapped Clover report under ``root``."""
    report = root / rel
    report.parent.mkdir(parents=True, exist_ok=True)
    report.write_text(wrap_report(body), encoding="utf-8")
    return report


class Sinks:
    """Records what a report run posts and warns."""

    def __init__(self) -> None:
        self.markdown: list[str] = []
        self.warnings: list[str] = []

    def context(self, root: Path, **kwargs: Any) -> ReportContext:
        return ReportContext(
            markdown=self.markdown.append,
            warn=self.warnings.append,
            root=root,
            **kwargs,
        )

    @property
    def report_lines(self) -> list[str]:
        assert len(self.markdown) == 1
        return self.markdown[0].split("\n")
