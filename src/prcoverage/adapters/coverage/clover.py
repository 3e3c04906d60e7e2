"""Clover XML coverage adapter.

Clover is the XML format written by Istanbul (Jest, Vitest, nyc), PHPUnit and
OpenClover. A report nests ``<project>`` and ``<package>`` elements down to
``<file>`` elements, each carrying one ``<metrics>`` element and any number of
``<line>`` elements.
"""

from __future__ import annotations

import asyncio
import logging
import math
from pathlib import Path
from typing import TYPE_CHECKING

from defusedxml import DefusedXmlException, ElementTree
from defusedxml.ElementTree import ParseError as DefusedParseError

from prcoverage.adapters.coverage.base import (
    CoverageGroup,
    CoverageNode,
    FileCoverage,
    FileList,
    LineCoverage,
)

if TYPE_CHECKING:
    from xml.etree.ElementTree import Element as XmlElement

logger = logging.getLogger(__name__)

DEFAULT_REPORT_PATH = "coverage/clover.xml"

# Checked in this order; the first tag with children wins.
_GROUP_TAGS = ("project", "package")

# Clover metric attribute -> FileCoverage field
_METRIC_FIELDS = {
    "statements": "statements",
    "coveredstatements": "covered_statements",
    "conditionals": "conditionals",
    "coveredconditionals": "covered_conditionals",
    "methods": "methods",
    "coveredmethods": "covered_methods",
}


class CloverParseError(Exception):
    """Raised when a Clover report cannot be parsed."""


def _float_attr(element: XmlElement, key: str) -> float:
    value = element.get(key)
    if value is None:
        return math.nan
    try:
        return float(value)
    except ValueError:
        return math.nan


def _int_attr(element: XmlElement, key: str, default: int = 0) -> int:
    value = element.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _parse_file(file_elem: XmlElement) -> FileCoverage:
    file_cov = FileCoverage(path=file_elem.get("path") or file_elem.get("name", ""))

    metrics = file_elem.find("metrics")
    for attr, field_name in _METRIC_FIELDS.items():
        value = _float_attr(metrics, attr) if metrics is not None else math.nan
        setattr(file_cov, field_name, value)

    file_cov.lines = [
        LineCoverage(
            line_number=_int_attr(line_elem, "num"),
            execution_count=_int_attr(line_elem, "count"),
            kind=line_elem.get("type", ""),
        )
        for line_elem in file_elem.findall("line")
    ]
    return file_cov


def _build_node(element: XmlElement) -> CoverageNode:
    for tag in _GROUP_TAGS:
        children = element.findall(tag)
        if children:
            return CoverageGroup(
                kind=tag,
                name=element.get("name", ""),
                children=[_build_node(child) for child in children],
            )
    return FileList(files=[_parse_file(file_elem) for file_elem in element.findall("file")])


def parse_clover_xml(data: bytes) -> CoverageNode:
    """Parse raw Clover XML into a coverage tree.

    Raises:
        CloverParseError: If the XML is malformed, uses constructs the hardened
            parser forbids (entities, external references), or the root is
            not ``<coverage>``.
    """
    try:
        root = ElementTree.fromstring(data)
    except DefusedParseError as exc:
        raise CloverParseError(f"Malformed Clover XML: {exc}") from exc
    except DefusedXmlException as exc:
        raise CloverParseError(f"Unsafe Clover XML rejected: {exc!r}") from exc

    if root.tag != "coverage":
        raise CloverParseError(f"Clover XML root is not <coverage>: <{root.tag}>")

    return _build_node(root)


def resolve_report_path(report_path: str | Path | None = None, root: Path | None = None) -> Path:
    """Resolve the configured report path against the project root."""
    base = root if root is not None else Path.cwd()
    return (base / (report_path or DEFAULT_REPORT_PATH)).resolve()


async def load_clover_report(
    report_path: str | Path | None = None,
    *,
    root: Path | None = None,
) -> CoverageNode | None:
    """Load and parse a Clover report.

    Args:
        report_path: Report location relative to ``root`` (default
            ``coverage/clover.xml``). Absolute paths are used as-is.
        root: Directory to resolve against. Defaults to the current directory.

    Returns:
        The parsed coverage tree, or None when no report file exists.

    Raises:
        CloverParseError: If the report exists but cannot be parsed.
    """
    path = resolve_report_path(report_path, root)
    if not path.is_file():
        logger.info("No Clover report at %s", path)
        return None

    logger.debug("Reading Clover report %s", path)
    data = await asyncio.to_thread(path.read_bytes)
    return await asyncio.to_thread(parse_clover_xml, data)
