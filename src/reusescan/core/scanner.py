# scanner.py
# SPDX-License-Identifier: MIT
"""Scan a directory tree and resolve licensing information for every file.

The dep5 override model is built once, before any file is resolved, and is
then shared read-only by all worker threads. Files are resolved on a
bounded thread pool; the scan returns only when every file is done, and the
first read error aborts the whole scan.
"""

from __future__ import annotations

import os
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ..sources.fs import iter_repo_files
from .combine import combine_results
from .concurrency import Executor, resolve_executor_config
from .config import ScanConfig
from .dep5 import load_dep5
from .globs import relative_posix
from .log import get_logger
from .records import CombinedResult, FileResult
from .resolver import Resolver

__all__ = ["ScanReport", "build_resolver", "scan_directory", "scan_files"]

log = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class ScanReport:
    """Per-file results of one scan, ordered by root-relative path."""

    root: Path
    results: tuple[FileResult, ...]

    def __len__(self) -> int:
        return len(self.results)

    def in_scope(self, scope: str | os.PathLike[str] | None = None) -> tuple[FileResult, ...]:
        """Return the results located under ``scope`` (the root when None)."""
        if scope is None:
            return self.results
        base = self._scope_path(scope)
        selected = []
        for result in self.results:
            rel = relative_posix(base, result.path)
            if rel != ".." and not rel.startswith("../"):
                selected.append(result)
        return tuple(selected)

    def combined(self, scope: str | os.PathLike[str] | None = None) -> CombinedResult:
        """Combine the results of one reporting scope.

        Args:
            scope (str | os.PathLike[str] | None): Directory to report on,
                absolute or relative to :attr:`root`. Defaults to the root.

        Returns:
            CombinedResult: Deduplicated licenses and copyrights, ordered by
            first occurrence over the scope's files.
        """
        base = self.root if scope is None else self._scope_path(scope)
        return combine_results(base, self.in_scope(scope))

    def _scope_path(self, scope: str | os.PathLike[str]) -> Path:
        p = Path(scope)
        return p if p.is_absolute() else self.root / p

    def to_dict(self) -> dict[str, Any]:
        return {
            "root": str(self.root),
            "files": [r.to_dict(self.root) for r in self.results],
        }


def build_resolver(root: str | os.PathLike[str], config: ScanConfig | None = None) -> Resolver:
    """Load the dep5 file below ``root`` and return a resolver for the tree.

    Raises:
        ControlFileFormatError: If the dep5 file is malformed.
        Dep5Error: If a dep5 ``Files`` stanza is incomplete.
    """
    cfg = config or ScanConfig()
    root_path = Path(root).resolve()
    dep5 = load_dep5(root_path, cfg.reuse.dep5_path)
    return Resolver(
        root_path,
        dep5,
        sidecar_suffix=cfg.reuse.sidecar_suffix,
        max_bytes=cfg.decode.max_bytes,
    )


def scan_files(
    resolver: Resolver,
    files: Iterable[Path],
    config: ScanConfig | None = None,
) -> ScanReport:
    """Resolve ``files`` in parallel and join on the results.

    Raises:
        OSError: The first read failure; no partial report is returned.
    """
    cfg = config or ScanConfig()
    exec_cfg = resolve_executor_config(cfg)
    found: list[FileResult] = []
    seen = 0

    def _on_result(result: FileResult | None) -> None:
        nonlocal seen
        seen += 1
        if result is not None:
            found.append(result)

    Executor(exec_cfg).map_unordered(files, resolver.resolve, _on_result, fail_fast=True)

    root = resolver.root
    found.sort(key=lambda r: relative_posix(root, r.path))
    log.info(
        "Scanned %d file(s) under %s: %d with licensing information.",
        seen,
        root,
        len(found),
    )
    return ScanReport(root=root, results=tuple(found))


def scan_directory(root: str | os.PathLike[str], config: ScanConfig | None = None) -> ScanReport:
    """Scan every candidate file below ``root``.

    Args:
        root (str | os.PathLike[str]): Directory to scan.
        config (ScanConfig | None): Scan settings; defaults apply when None.

    Returns:
        ScanReport: Files with licensing information, ordered by path.
        Files without any information are omitted.

    Raises:
        NotADirectoryError: If ``root`` is not a directory.
        ControlFileFormatError: If the dep5 file is malformed.
        OSError: If reading any file fails.
    """
    cfg = config or ScanConfig()
    cfg.validate()
    resolver = build_resolver(root, cfg)
    files = iter_repo_files(
        resolver.root,
        respect_gitignore=cfg.listing.respect_gitignore,
        follow_symlinks=cfg.listing.follow_symlinks,
        skip_dirs=cfg.listing.skip_dirs,
    )
    return scan_files(resolver, files, cfg)
