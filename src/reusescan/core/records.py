# records.py
# SPDX-License-Identifier: MIT
"""Result records produced by a scan."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal

from .globs import relative_posix

__all__ = [
    "ResultSource",
    "FileResult",
    "CombinedResult",
]

ResultSource = Literal["file", "sidecar", "dep5"]


@dataclass(frozen=True, slots=True)
class FileResult:
    """Licensing information resolved for one file.

    Attributes:
        path (Path): The file the information applies to.
        licenses (tuple[str, ...]): License identifiers in the order they
            were found; duplicates are kept.
        copyrights (tuple[str, ...]): Copyright statements in the order
            they were found; duplicates are kept.
        source (ResultSource): Which tier produced the result: the file's
            own text, its ``.license`` sidecar, or the dep5 file.
    """

    path: Path
    licenses: tuple[str, ...] = ()
    copyrights: tuple[str, ...] = ()
    source: ResultSource = "file"

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", Path(self.path))
        object.__setattr__(self, "licenses", tuple(self.licenses))
        object.__setattr__(self, "copyrights", tuple(self.copyrights))
        if not self.licenses and not self.copyrights:
            raise ValueError(f"FileResult for {self.path} has no licenses and no copyrights")

    def to_dict(self, root: str | os.PathLike[str] | None = None) -> dict[str, Any]:
        """Return a JSON-friendly mapping; ``path`` is root-relative when given."""
        path = relative_posix(root, self.path) if root is not None else self.path.as_posix()
        return {
            "path": path,
            "licenses": list(self.licenses),
            "copyrights": list(self.copyrights),
            "source": self.source,
        }


@dataclass(frozen=True, slots=True)
class CombinedResult:
    """Deduplicated licensing summary for a reporting scope."""

    licenses: tuple[str, ...] = ()
    copyrights: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "licenses": list(self.licenses),
            "copyrights": list(self.copyrights),
        }
