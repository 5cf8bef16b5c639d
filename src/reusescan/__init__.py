# __init__.py
# SPDX-License-Identifier: MIT
"""
Top-level package exports for :mod:`reusescan`.

reusescan works out, for every file of a source tree, which license
identifiers and copyright statements apply to it under the REUSE
conventions:

.. REUSE-IgnoreStart

- tags in the file itself (``SPDX-License-Identifier``,
  ``SPDX-FileCopyrightText``, ``Copyright ...``, ``© ...``),

.. REUSE-IgnoreEnd

- tags in a ``<file>.license`` sidecar for files that cannot hold comments,
- the glob-keyed stanzas of ``.reuse/dep5``.

The first of these that yields anything wins. Per-file results can then be
combined into one ordered, deduplicated summary per reporting scope.

Examples:
    Scan a tree and summarise it::

        >>> from reusescan import scan_directory
        >>> report = scan_directory("path/to/repo")
        >>> summary = report.combined()
        >>> summary.licenses, summary.copyrights

    Resolve a single file::

        >>> from reusescan import build_resolver
        >>> resolver = build_resolver("path/to/repo")
        >>> resolver.resolve("src/main.c")
"""


from __future__ import annotations

try:
    from importlib.metadata import version as _pkg_version

    __version__ = _pkg_version("reusescan")
except Exception:  # PackageNotFoundError in source checkouts
    __version__ = "0.0.0+unknown"


from .core.combine import combine_results
from .core.config import ScanConfig, load_config_from_path
from .core.control_file import (
    ControlFile,
    ControlFileFormatError,
    Field,
    Stanza,
    parse_control_file,
    read_control_file,
)
from .core.dep5 import Dep5, Dep5Error, OverrideEntry, load_dep5
from .core.globs import PatternSet
from .core.log import configure_logging, get_logger
from .core.records import CombinedResult, FileResult
from .core.resolver import Resolver
from .core.scanner import ScanReport, build_resolver, scan_directory, scan_files
from .core.tags import ExtractedTags, extract_tags

PRIMARY_API = [
    "scan_directory",
    "build_resolver",
    "combine_results",
    "ScanConfig",
    "load_config_from_path",
    "ScanReport",
    "FileResult",
    "CombinedResult",
]

__all__ = [
    *PRIMARY_API,
    "__version__",
    "scan_files",
    "Resolver",
    "Dep5",
    "Dep5Error",
    "OverrideEntry",
    "load_dep5",
    "PatternSet",
    "ControlFile",
    "ControlFileFormatError",
    "Field",
    "Stanza",
    "parse_control_file",
    "read_control_file",
    "ExtractedTags",
    "extract_tags",
    "configure_logging",
    "get_logger",
]
