# resolver.py
# SPDX-License-Identifier: MIT
"""Per-file license resolution.

Three sources are consulted in order and the first one that yields any
license identifier or copyright statement wins:

1. tags in the file's own text,
2. tags in the ``<file>.license`` sidecar, when it exists,
3. the last matching stanza of the dep5 override file.

Nothing found at any tier means the file has no result; no default license
is ever invented.
"""

from __future__ import annotations

import functools
import os
from collections.abc import Callable
from pathlib import Path

from .decode import read_text
from .dep5 import Dep5
from .globs import relative_posix
from .log import get_logger
from .records import FileResult, ResultSource
from .tags import extract_tags

__all__ = ["SIDECAR_SUFFIX", "TextReader", "Resolver"]

log = get_logger(__name__)

SIDECAR_SUFFIX = ".license"

TextReader = Callable[[Path], str | None]


class Resolver:
    """Resolve licensing information for files below a root directory.

    The resolver holds no mutable state, so one instance can be shared by
    every worker thread of a scan.

    Attributes:
        root (Path): Directory dep5 patterns are relative to.
        dep5 (Dep5): Override entries for the tree.
        sidecar_suffix (str): Suffix appended to a path to find its sidecar.
    """

    def __init__(
        self,
        root: str | os.PathLike[str],
        dep5: Dep5 | None = None,
        *,
        sidecar_suffix: str = SIDECAR_SUFFIX,
        reader: TextReader | None = None,
        max_bytes: int | None = None,
    ) -> None:
        self.root = Path(root)
        self.dep5 = dep5 if dep5 is not None else Dep5()
        self.sidecar_suffix = sidecar_suffix
        self._read: TextReader = reader or functools.partial(read_text, max_bytes=max_bytes)

    def _from_text(self, path: Path, tag_path: Path, source: ResultSource) -> FileResult | None:
        text = self._read(tag_path)
        if text is None:
            return None
        tags = extract_tags(text)
        if tags is None:
            return None
        return FileResult(path, tags.licenses, tags.copyrights, source)

    def sidecar_for(self, path: str | os.PathLike[str]) -> Path:
        return Path(os.fspath(path) + self.sidecar_suffix)

    def resolve(self, path: str | os.PathLike[str]) -> FileResult | None:
        """Resolve one file.

        Args:
            path (str | os.PathLike[str]): File to resolve. Relative paths
                are taken relative to :attr:`root`.

        Returns:
            FileResult | None: The first non-empty result, or None when no
            tier has information for the file.

        Raises:
            OSError: If reading the file or its sidecar fails for any reason
                other than the file being absent.
        """
        p = Path(path)
        if not p.is_absolute():
            p = self.root / p

        result = self._from_text(p, p, "file")
        if result is not None:
            return result

        result = self._from_text(p, self.sidecar_for(p), "sidecar")
        if result is not None:
            return result

        rel = relative_posix(self.root, p)
        entry = self.dep5.find(rel)
        if entry is not None:
            return FileResult(p, (entry.license,), entry.copyright, "dep5")

        log.debug("No licensing information for %s", rel)
        return None
