# sinks.py
# SPDX-License-Identifier: MIT
"""Sinks for writing scan results to files."""
from __future__ import annotations

import json
import os
from collections.abc import Iterable
from pathlib import Path
from typing import Self, TextIO

from ..core.records import CombinedResult, FileResult

__all__ = [
    "FileResultJSONLSink",
    "write_combined_json",
    "write_results_parquet",
]

_PARQUET_COLUMNS = ("path", "licenses", "copyrights", "source")


class FileResultJSONLSink:
    """Stream FileResults to a JSONL file, one object per line.

    Output goes to a temporary file that replaces the target on close, so
    an aborted scan never leaves a truncated report behind.
    """

    def __init__(
        self,
        out_path: str | os.PathLike[str],
        *,
        root: str | os.PathLike[str] | None = None,
    ):
        """Configure a JSONL sink.

        Args:
            out_path (str | os.PathLike[str]): Destination file path.
            root (str | os.PathLike[str] | None): When set, paths are
                written relative to this directory.
        """
        self._path = Path(out_path)
        self._root = root
        self._fp: TextIO | None = None
        self._tmp_path: Path | None = None

    def open(self) -> None:
        """Create the temp file for writing."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._tmp_path = self._path.parent / f"{self._path.name}.tmp"
        self._fp = open(self._tmp_path, "w", encoding="utf-8", newline="")

    def write(self, result: FileResult) -> None:
        """Write a single result as a compact JSON line."""
        assert self._fp is not None
        record = result.to_dict(self._root)
        self._fp.write(json.dumps(record, ensure_ascii=False, separators=(",", ":")) + "\n")

    def write_all(self, results: Iterable[FileResult]) -> None:
        for result in results:
            self.write(result)

    def close(self) -> None:
        """Close any open handle and move the temp file into place."""
        if not self._fp:
            return
        try:
            self._fp.close()
        finally:
            self._fp = None
        if self._tmp_path:
            os.replace(self._tmp_path, self._path)
            self._tmp_path = None

    def abort(self) -> None:
        """Close and discard the temp file without touching the target."""
        if self._fp:
            self._fp.close()
            self._fp = None
        if self._tmp_path:
            self._tmp_path.unlink(missing_ok=True)
            self._tmp_path = None

    def __enter__(self) -> Self:
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is not None:
            self.abort()
        else:
            self.close()


def write_combined_json(
    combined: CombinedResult,
    out_path: str | os.PathLike[str],
    *,
    indent: int = 2,
) -> str:
    """Write a CombinedResult as a JSON document and return its path."""
    target = Path(out_path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(json.dumps(combined.to_dict(), indent=indent, ensure_ascii=False) + "\n", encoding="utf-8")
    return str(target)


def write_results_parquet(
    results: Iterable[FileResult],
    out_path: str | os.PathLike[str],
    *,
    root: str | os.PathLike[str] | None = None,
) -> None:
    """Write FileResults to a Parquet file (one row per file)."""
    try:
        import pyarrow as pa
        import pyarrow.parquet as pq
    except Exception as exc:
        raise RuntimeError(
            "PyArrow is required for Parquet output; install reusescan[parquet]."
        ) from exc

    schema = pa.schema(
        [
            ("path", pa.string()),
            ("licenses", pa.list_(pa.string())),
            ("copyrights", pa.list_(pa.string())),
            ("source", pa.string()),
        ]
    )
    rows = [r.to_dict(root) for r in results]
    table = pa.Table.from_pylist(rows, schema=schema).select(list(_PARQUET_COLUMNS))
    Path(out_path).parent.mkdir(parents=True, exist_ok=True)
    pq.write_table(table, str(out_path))
