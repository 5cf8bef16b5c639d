# globs.py
# SPDX-License-Identifier: MIT
"""Glob matching over slash-separated relative paths.

Supported syntax:

* ``*`` matches any run of characters inside one path segment.
* ``?`` matches a single non-slash character.
* ``[abc]`` / ``[!abc]`` / ``[a-z]`` character classes.
* ``**`` matches any number of whole segments (``**/x``, ``a/**``,
  ``a/**/b``); elsewhere it behaves like ``*`` spanning slashes.

A pattern ending in ``/`` matches everything below that directory. Leading
``./`` and ``/`` are ignored, so patterns are always relative to the base
directory they are evaluated against.
"""

from __future__ import annotations

import functools
import os
import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

__all__ = [
    "translate_glob",
    "PatternSet",
    "relative_posix",
]


def _clean_pattern(pattern: str) -> str:
    pat = pattern.strip().replace("\\", "/")
    while pat.startswith("./"):
        pat = pat[2:]
    pat = pat.lstrip("/")
    if pat.endswith("/"):
        pat += "**"
    return pat


def _translate_class(pattern: str, start: int) -> tuple[str, int] | None:
    """Translate a ``[...]`` class starting at ``start``; None when unclosed."""
    i = start + 1
    n = len(pattern)
    if i < n and pattern[i] in "!^":
        i += 1
    if i < n and pattern[i] == "]":
        i += 1
    while i < n and pattern[i] != "]":
        i += 1
    if i >= n:
        return None
    body = pattern[start + 1 : i]
    negate = body[:1] in ("!", "^")
    if negate:
        body = body[1:]
    body = body.replace("\\", "\\\\").replace("[", "\\[")
    if negate:
        return f"[^/{body}]", i + 1
    return f"[{body}]", i + 1


@functools.lru_cache(maxsize=1024)
def translate_glob(pattern: str) -> re.Pattern[str]:
    """Compile a glob pattern into an anchored regular expression."""
    pat = _clean_pattern(pattern)
    out: list[str] = []
    i = 0
    n = len(pat)
    while i < n:
        ch = pat[i]
        if ch == "*":
            if pat.startswith("**", i):
                at_segment_start = i == 0 or pat[i - 1] == "/"
                j = i + 2
                if at_segment_start and j < n and pat[j] == "/":
                    # "**/" : zero or more leading directories
                    out.append("(?:.*/)?")
                    i = j + 1
                    continue
                if at_segment_start and j == n:
                    if out and out[-1] == "/":
                        # "dir/**" also matches "dir" itself
                        out.pop()
                        out.append("(?:/.*)?")
                    else:
                        out.append(".*")
                    i = j
                    continue
                out.append(".*")
                i = j
                continue
            out.append("[^/]*")
        elif ch == "?":
            out.append("[^/]")
        elif ch == "[":
            translated = _translate_class(pat, i)
            if translated is None:
                out.append(re.escape(ch))
            else:
                chunk, i = translated
                out.append(chunk)
                continue
        elif ch == "/":
            out.append("/")
        else:
            out.append(re.escape(ch))
        i += 1
    return re.compile("".join(out), re.DOTALL)


def relative_posix(base: str | os.PathLike[str], path: str | os.PathLike[str]) -> str:
    """Return ``path`` relative to ``base`` as a normalised slash path.

    Absolute and relative inputs are both accepted; the result may start
    with ``..`` when ``path`` lies outside ``base``.
    """
    rel = os.path.relpath(os.path.normpath(os.fspath(path)), os.path.normpath(os.fspath(base)))
    return Path(rel).as_posix()


@dataclass(frozen=True, slots=True)
class PatternSet:
    """An immutable group of glob patterns matched as a unit.

    A candidate matches the set when any of its patterns matches.
    """

    patterns: tuple[str, ...]
    _compiled: tuple[re.Pattern[str], ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        cleaned = tuple(p for p in self.patterns if p and p.strip())
        object.__setattr__(self, "patterns", cleaned)
        object.__setattr__(self, "_compiled", tuple(translate_glob(p) for p in cleaned))

    @classmethod
    def of(cls, patterns: Iterable[str]) -> PatternSet:
        return cls(tuple(patterns))

    def __bool__(self) -> bool:
        return bool(self.patterns)

    def matches(self, candidate: str) -> bool:
        """Return True when the relative slash path matches any pattern."""
        rel = candidate.replace("\\", "/")
        while rel.startswith("./"):
            rel = rel[2:]
        return any(rx.fullmatch(rel) for rx in self._compiled)

    def matches_relative(
        self,
        base: str | os.PathLike[str],
        candidate: str | os.PathLike[str],
    ) -> bool:
        """Match ``candidate`` after making it relative to ``base``.

        Paths that resolve outside ``base`` never match.
        """
        rel = relative_posix(base, candidate)
        if rel == ".." or rel.startswith("../"):
            return False
        return self.matches(rel)
