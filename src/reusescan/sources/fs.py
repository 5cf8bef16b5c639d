# fs.py
# SPDX-License-Identifier: MIT
"""Filesystem traversal: list the files of a tree that need licensing info.

The lister prunes version-control metadata, honours ``.gitignore`` files
(each one applies to the subtree it sits in) and leaves out license texts,
which are what the metadata points at rather than files that need it.
"""

from __future__ import annotations

import os
import re
import stat
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path

from ..core.globs import translate_glob
from ..core.log import get_logger

__all__ = [
    "DEFAULT_SKIP_DIRS",
    "LICENSE_TEXT_FILE",
    "LICENSES_DIR",
    "IgnoreRule",
    "IgnoreRules",
    "parse_gitignore",
    "is_excluded_file",
    "iter_repo_files",
    "collect_repo_files",
]

log = get_logger(__name__)

DEFAULT_SKIP_DIRS: tuple[str, ...] = (".git",)

LICENSE_TEXT_FILE = "LICENSE.txt"
LICENSES_DIR = "LICENSES"

GITIGNORE_NAME = ".gitignore"


@dataclass(frozen=True, slots=True)
class IgnoreRule:
    """One compiled ``.gitignore`` line.

    Attributes:
        regex (re.Pattern[str]): Matches paths relative to ``base``.
        negate (bool): The line started with ``!`` and re-includes paths.
        dir_only (bool): The line ended with ``/`` and only hits directories.
        base (str): Root-relative directory of the ``.gitignore`` file,
            ``""`` for the root itself.
    """

    regex: re.Pattern[str]
    negate: bool
    dir_only: bool
    base: str

    def applies(self, rel: str, is_dir: bool) -> bool:
        if self.dir_only and not is_dir:
            return False
        if self.base:
            prefix = self.base + "/"
            if not rel.startswith(prefix):
                return False
            rel = rel[len(prefix):]
        return self.regex.fullmatch(rel) is not None


def _compile_rule(line: str, base: str) -> IgnoreRule | None:
    if not line.strip() or line.startswith("#"):
        return None
    negate = line.startswith("!")
    if negate or line.startswith(("\\#", "\\!")):
        line = line[1:]
    # unescaped trailing blanks are dropped, "\ " keeps a literal space
    if not line.endswith("\\ "):
        line = line.rstrip(" \t")
    line = line.replace("\\ ", " ")
    dir_only = line.endswith("/")
    segments = [s for s in line.split("/") if s not in ("", ".")]
    if not segments:
        return None
    body = "/".join(segments)
    # a slash anywhere but at the end pins the pattern to the .gitignore's
    # directory; a bare name may match at any depth
    if "/" not in line.rstrip("/"):
        body = "**/" + body
    return IgnoreRule(translate_glob(body), negate, dir_only, base)


def parse_gitignore(lines: Iterable[str], base: str = "") -> list[IgnoreRule]:
    """Compile ``.gitignore`` lines found in the root-relative dir ``base``."""
    rules = []
    for raw in lines:
        rule = _compile_rule(raw.rstrip("\r\n"), base)
        if rule is not None:
            rules.append(rule)
    return rules


class IgnoreRules:
    """Ordered, immutable chain of ignore rules; the last applicable one wins.

    A negated rule cannot re-include a path below an ignored directory
    because the walker never descends into it.
    """

    __slots__ = ("_rules",)

    def __init__(self, rules: Iterable[IgnoreRule] = ()) -> None:
        self._rules = tuple(rules)

    def __bool__(self) -> bool:
        return bool(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def extended(self, more: Iterable[IgnoreRule]) -> IgnoreRules:
        extra = tuple(more)
        return IgnoreRules(self._rules + extra) if extra else self

    def is_ignored(self, rel: str, is_dir: bool) -> bool:
        for rule in reversed(self._rules):
            if rule.applies(rel, is_dir):
                return not rule.negate
        return False


def _read_gitignore(directory: Path, root: Path) -> list[IgnoreRule]:
    path = directory / GITIGNORE_NAME
    if not path.is_file():
        return []
    base = "" if directory == root else directory.relative_to(root).as_posix()
    text = path.read_text(encoding="utf-8", errors="replace")
    return parse_gitignore(text.splitlines(), base)


def is_excluded_file(rel: str) -> bool:
    """Return True for license texts that never need licensing information.

    ``rel`` is a POSIX-style path relative to the scanned root.
    """
    *parents, name = rel.split("/")
    return name == LICENSE_TEXT_FILE or (bool(parents) and parents[-1] == LICENSES_DIR)


def _link_allowed(path: Path, root: Path, follow_symlinks: bool) -> bool:
    if not path.is_symlink():
        return True
    if not follow_symlinks:
        return False
    try:
        path.resolve().relative_to(root)
    except (OSError, RuntimeError, ValueError):
        return False
    return True


def _sort_key(name: str) -> tuple[str, str]:
    return name.casefold(), name


def iter_repo_files(
    root: os.PathLike[str] | str,
    *,
    respect_gitignore: bool = True,
    follow_symlinks: bool = False,
    skip_dirs: Iterable[str] = DEFAULT_SKIP_DIRS,
) -> Iterator[Path]:
    """Yield the files under root that need licensing information.

    Directories named in ``skip_dirs`` are pruned, paths ignored by
    ``.gitignore`` files are skipped, and license texts (``LICENSE.txt``
    anywhere, anything directly inside a ``LICENSES`` directory) are left
    out. Hidden files are listed like any other file.

    Args:
        root: Directory to traverse.
        respect_gitignore: Honor .gitignore files while walking.
        follow_symlinks: Follow symlinks whose targets stay inside root.
            When False, symlinked files and directories are skipped.
        skip_dirs: Directory names never descended into.

    Yields:
        Path: Absolute paths; files of a directory come before its
        subdirectories, names in case-insensitive order.

    Raises:
        NotADirectoryError: If root is not a directory.
    """
    top = Path(root).resolve()
    if not top.is_dir():
        raise NotADirectoryError(top)
    skip = frozenset(skip_dirs)
    inherited: dict[Path, IgnoreRules] = {top: IgnoreRules()}

    for dirpath, dirnames, filenames in os.walk(top, followlinks=follow_symlinks):
        here = Path(dirpath)
        rules = inherited.pop(here, IgnoreRules())
        if respect_gitignore:
            rules = rules.extended(_read_gitignore(here, top))

        kept_dirs = []
        for name in sorted(dirnames, key=_sort_key):
            sub = here / name
            rel = sub.relative_to(top).as_posix()
            if name in skip or not _link_allowed(sub, top, follow_symlinks):
                continue
            if respect_gitignore and rules.is_ignored(rel, is_dir=True):
                log.debug("gitignore prunes %s/", rel)
                continue
            kept_dirs.append(name)
            inherited[sub] = rules
        dirnames[:] = kept_dirs

        for name in sorted(filenames, key=_sort_key):
            path = here / name
            rel = path.relative_to(top).as_posix()
            if is_excluded_file(rel) or not _link_allowed(path, top, follow_symlinks):
                continue
            if respect_gitignore and rules.is_ignored(rel, is_dir=False):
                continue
            try:
                mode = path.stat().st_mode
            except FileNotFoundError:
                # dangling link, or removed while walking
                continue
            if stat.S_ISREG(mode):
                yield path


def collect_repo_files(root: os.PathLike[str] | str, **kwargs) -> list[Path]:
    """List form of :func:`iter_repo_files`."""
    return list(iter_repo_files(root, **kwargs))
