# combine.py
# SPDX-License-Identifier: MIT
"""Fold many per-file results into one deduplicated summary."""

from __future__ import annotations

import os
from collections.abc import Iterable

from .globs import relative_posix
from .records import CombinedResult, FileResult

__all__ = ["combine_results"]


def combine_results(
    base: str | os.PathLike[str],
    results: Iterable[FileResult],
) -> CombinedResult:
    """Merge file results into ordered, duplicate-free lists.

    Results are visited in ascending order of their path relative to
    ``base``; within that order each license identifier and copyright
    statement is kept at its first occurrence. Comparison is exact and
    case-sensitive.

    Args:
        base (str | os.PathLike[str]): Directory the sort order is
            computed against.
        results (Iterable[FileResult]): Results to merge. Not modified.

    Returns:
        CombinedResult: The merged summary.
    """
    ordered = sorted(results, key=lambda r: relative_posix(base, r.path))
    # dicts keep insertion order, which gives an ordered set
    licenses: dict[str, None] = {}
    copyrights: dict[str, None] = {}
    for result in ordered:
        for license_id in result.licenses:
            licenses.setdefault(license_id, None)
        for statement in result.copyrights:
            copyrights.setdefault(statement, None)
    return CombinedResult(tuple(licenses), tuple(copyrights))
