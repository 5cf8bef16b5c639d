# dep5.py
# SPDX-License-Identifier: MIT
"""Directory-wide license overrides from ``.reuse/dep5``.

The dep5 file uses the Debian machine-readable copyright format: every
stanza carrying a ``Files`` field assigns a copyright and license to the
paths matched by its glob patterns. When several stanzas match one path
the stanza declared last applies, so general stanzas come first and more
specific overrides after them.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path

from .control_file import ControlFile, Stanza, read_control_file
from .globs import PatternSet
from .log import get_logger

__all__ = [
    "DEP5_PATH",
    "Dep5Error",
    "OverrideEntry",
    "Dep5",
    "load_dep5",
]

log = get_logger(__name__)

DEP5_PATH = ".reuse/dep5"


class Dep5Error(ValueError):
    """Raised when a ``Files`` stanza has no ``License`` field."""


@dataclass(frozen=True, slots=True)
class OverrideEntry:
    """One ``Files`` stanza of a dep5 file.

    Attributes:
        patterns (PatternSet): Globs from the ``Files`` field.
        copyright (tuple[str, ...]): One statement per line of the
            ``Copyright`` field.
        license (str): The ``License`` field, verbatim.
    """

    patterns: PatternSet
    copyright: tuple[str, ...]
    license: str

    @classmethod
    def from_stanza(cls, stanza: Stanza) -> OverrideEntry | None:
        """Build an entry from a stanza; None when it has no ``Files`` field.

        Every line of ``Copyright`` becomes one statement, an empty value
        included.

        Raises:
            Dep5Error: If a ``Files`` stanza has no ``Copyright`` or no
                ``License`` field.
        """
        files = stanza.get("Files")
        if files is None:
            return None
        for required in ("Copyright", "License"):
            if required not in stanza:
                raise Dep5Error(f"Files stanza {files!r} is missing {required}")
        return cls(
            patterns=PatternSet.of(files.split("\n")),
            copyright=tuple(stanza.get("Copyright").split("\n")),
            license=stanza.get("License"),
        )

    def matches(self, rel_path: str) -> bool:
        return self.patterns.matches(rel_path)


@dataclass(frozen=True, slots=True)
class Dep5:
    """Immutable, thread-safe set of override entries.

    ``entries`` keeps declaration order; the lookup order (last declared
    first) is fixed once when the instance is created.
    """

    entries: tuple[OverrideEntry, ...] = ()
    _lookup_order: tuple[OverrideEntry, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "entries", tuple(self.entries))
        object.__setattr__(self, "_lookup_order", tuple(reversed(self.entries)))

    @classmethod
    def from_entries(cls, entries: Iterable[OverrideEntry]) -> Dep5:
        return cls(tuple(entries))

    @classmethod
    def from_control_file(cls, control: ControlFile) -> Dep5:
        """Convert every ``Files`` stanza; other stanzas are dropped."""
        entries = []
        for stanza in control:
            entry = OverrideEntry.from_stanza(stanza)
            if entry is not None:
                entries.append(entry)
        return cls(tuple(entries))

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[OverrideEntry]:
        return iter(self.entries)

    def find(self, rel_path: str) -> OverrideEntry | None:
        """Return the last-declared entry matching a root-relative path."""
        for entry in self._lookup_order:
            if entry.matches(rel_path):
                return entry
        return None


def load_dep5(root: str | Path, relative: str = DEP5_PATH) -> Dep5:
    """Load the override file below ``root``.

    A missing file is not an error and yields an empty :class:`Dep5`.

    Raises:
        ControlFileFormatError: If the file exists but is malformed.
        Dep5Error: If a ``Files`` stanza is incomplete.
    """
    path = Path(root) / relative
    try:
        control = read_control_file(path)
    except FileNotFoundError:
        log.debug("No override file at %s", path)
        return Dep5()
    dep5 = Dep5.from_control_file(control)
    log.debug("Loaded %d override entr%s from %s", len(dep5), "y" if len(dep5) == 1 else "ies", path)
    return dep5
