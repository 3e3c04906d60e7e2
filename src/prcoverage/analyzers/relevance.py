"""Restrict report files to the ones touched by the current change."""

from __future__ import annotations

import logging
import os
import posixpath
from pathlib import Path, PurePath
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from prcoverage.adapters.coverage.base import FileCoverage

logger = logging.getLogger(__name__)


def relative_path(path: str, root: Path | None = None) -> str:
    """Normalize a report path to a POSIX path relative to ``root``.

    Absolute paths are made relative to ``root`` (default: the current
    directory); relative paths are only normalized.
    """
    if os.path.isabs(path):
        base = root if root is not None else Path.cwd()
        path = os.path.relpath(path, base)
    return posixpath.normpath(PurePath(path).as_posix())


def build_change_set(
    created_files: Iterable[str],
    modified_files: Iterable[str],
    root: Path | None = None,
) -> frozenset[str]:
    """Union of created and modified paths, normalized like report paths."""
    return frozenset(
        relative_path(path, root) for path in [*created_files, *modified_files] if path
    )


def filter_relevant_files(
    files: list[FileCoverage],
    change_set: frozenset[str],
    *,
    root: Path | None = None,
    show_all_files: bool = False,
) -> list[FileCoverage]:
    """Return the files to report on, preserving report order.

    With ``show_all_files`` every file is returned; otherwise only files whose
    normalized path is in ``change_set``.
    """
    if show_all_files:
        return list(files)

    relevant = [f for f in files if relative_path(f.path, root) in change_set]
    logger.debug("%d of %d report files touched by this change", len(relevant), len(files))
    return relevant


def find_missing_files(
    files: list[FileCoverage],
    change_set: frozenset[str],
    root: Path | None = None,
) -> list[str]:
    """Return changed paths that have no entry in the report, sorted."""
    reported = {relative_path(f.path, root) for f in files}
    return sorted(change_set - reported)
