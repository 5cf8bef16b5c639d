# tags.py
# SPDX-License-Identifier: MIT
"""Inline license and copyright tag extraction.

Tags are searched line by line: a license identifier follows the SPDX
license marker, and copyright statements are recognised by the patterns in
:data:`COPYRIGHT_PATTERNS`. Lines between the REUSE ignore markers are
skipped.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

__all__ = [
    "LICENSE_MARKER",
    "IGNORE_START",
    "IGNORE_END",
    "COPYRIGHT_PATTERNS",
    "ExtractedTags",
    "split_lines",
    "filter_ignored_blocks",
    "collect_statements",
    "extract_tags",
]

# Split so this module does not carry tags of its own when it is scanned.
LICENSE_MARKER = "SPDX" + "-License-Identifier:"
IGNORE_START = "REUSE" + "-IgnoreStart"
IGNORE_END = "REUSE" + "-IgnoreEnd"

# REUSE-IgnoreStart
COPYRIGHT_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"SPDX-(?:File|Snippet)CopyrightText:\s*(.*)"),
    re.compile(r"Copyright\s?(?:\([Cc]\))?\s+(.*)"),
    re.compile(r"©\s+(.*)"),
)
# REUSE-IgnoreEnd

_LINE_SPLIT_RE = re.compile(r"[\r\n]+")


@dataclass(frozen=True, slots=True)
class ExtractedTags:
    """License identifiers and copyright statements found in one text."""

    licenses: tuple[str, ...]
    copyrights: tuple[str, ...]


def split_lines(text: str) -> list[str]:
    """Split on any run of CR/LF characters, dropping empty lines."""
    return [line for line in _LINE_SPLIT_RE.split(text) if line]


def filter_ignored_blocks(lines: Iterable[str]) -> Iterator[str]:
    """Yield lines outside ignore blocks.

    The ignore state is a plain toggle: repeated start markers do not nest,
    and an end marker outside a block is a no-op. Marker lines are never
    yielded.
    """
    ignoring = False
    for line in lines:
        if IGNORE_START in line:
            ignoring = True
            continue
        if IGNORE_END in line:
            ignoring = False
            continue
        if not ignoring:
            yield line


def collect_statements(lines: Iterable[str]) -> tuple[list[str], list[str]]:
    """Collect license identifiers and copyright statements from lines.

    A line may contribute a license identifier and, independently, one
    copyright statement for every copyright pattern it matches.
    """
    licenses: list[str] = []
    copyrights: list[str] = []
    for line in lines:
        if LICENSE_MARKER in line:
            licenses.append(line.split(LICENSE_MARKER, 1)[1].strip())
        for pattern in COPYRIGHT_PATTERNS:
            match = pattern.search(line)
            if match:
                copyrights.append(match.group(1))
    return licenses, copyrights


def extract_tags(text: str) -> ExtractedTags | None:
    """Extract inline tags from a file's text.

    Returns:
        ExtractedTags | None: The tags found, or None when the text holds
        neither a license identifier nor a copyright statement.
    """
    licenses, copyrights = collect_statements(filter_ignored_blocks(split_lines(text)))
    if not licenses and not copyrights:
        return None
    return ExtractedTags(tuple(licenses), tuple(copyrights))
