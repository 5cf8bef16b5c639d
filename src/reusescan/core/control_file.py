# control_file.py
# SPDX-License-Identifier: MIT
"""Parser for RFC2822-style control files (Debian ``copyright`` / dep5).

A control file is a sequence of stanzas separated by blank lines. Each
stanza is an ordered list of ``Key: value`` fields; a line starting with
whitespace continues the previous field's value. Lines starting with ``#``
are comments and never end a stanza.

Fields are kept as an ordered list of pairs rather than a mapping so that
duplicate keys survive parsing; consumers choose between "last value wins"
(:meth:`Stanza.get`) and "all values" (:meth:`Stanza.get_all`).
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, NamedTuple

from .decode import read_text
from .log import get_logger

__all__ = [
    "ControlFileFormatError",
    "Field",
    "Stanza",
    "ControlFile",
    "parse_control_file",
    "read_control_file",
]

log = get_logger(__name__)


class ControlFileFormatError(ValueError):
    """Raised when control file text cannot be parsed into stanzas."""

    def __init__(self, message: str, *, line_number: int, line: str) -> None:
        super().__init__(f"line {line_number}: {message}: {line!r}")
        self.line_number = line_number
        self.line = line


class Field(NamedTuple):
    key: str
    value: str


@dataclass(frozen=True, slots=True)
class Stanza:
    """Ordered fields of one control file paragraph."""

    fields: tuple[Field, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", tuple(self.fields))

    def __iter__(self) -> Iterator[Field]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    def get(self, key: str, default: str | None = None) -> str | None:
        """Return the value of the last field named ``key``."""
        for f in reversed(self.fields):
            if f.key == key:
                return f.value
        return default

    def get_all(self, key: str) -> list[str]:
        """Return every value recorded for ``key`` in declaration order."""
        return [f.value for f in self.fields if f.key == key]

    def keys(self) -> list[str]:
        seen: dict[str, None] = {}
        for f in self.fields:
            seen.setdefault(f.key, None)
        return list(seen)

    def __contains__(self, key: object) -> bool:
        return any(f.key == key for f in self.fields)


@dataclass(frozen=True, slots=True)
class ControlFile:
    """All stanzas of a control file, in declaration order."""

    stanzas: tuple[Stanza, ...] = ()

    def __iter__(self) -> Iterator[Stanza]:
        return iter(self.stanzas)

    def __len__(self) -> int:
        return len(self.stanzas)


def _normalize_line_endings(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def parse_control_file(text: str) -> ControlFile:
    """Parse control file text into stanzas.

    The scan is a single pass over the lines with no backtracking:

    * ``#`` in the first column marks a comment line, which is skipped.
    * A whitespace-only line closes the open stanza (empty stanzas are
      not emitted).
    * A line starting with whitespace is a continuation; its stripped text
      is appended to the last field's value after a ``\\n``.
    * Any other line is split on its first ``:``; the key is kept as
      written and the value is stripped.

    Args:
        text (str): Full control file contents.

    Returns:
        ControlFile: Parsed stanzas.

    Raises:
        ControlFileFormatError: If a continuation line has no field to
            extend, or a field line lacks a ``:`` separator.
    """
    stanzas: list[Stanza] = []
    # fields of the open stanza; None between stanzas
    current: list[Field] | None = None

    for number, line in enumerate(_normalize_line_endings(text).split("\n"), start=1):
        if line.startswith("#"):
            continue

        if not line.strip():
            if current:
                stanzas.append(Stanza(tuple(current)))
            current = None
            continue

        if line[0].isspace():
            if current is None:
                raise ControlFileFormatError(
                    "no stanza to append continuation to", line_number=number, line=line
                )
            if not current:
                raise ControlFileFormatError(
                    "no field to append continuation to", line_number=number, line=line
                )
            key, value = current[-1]
            current[-1] = Field(key, value + "\n" + line.strip())
            continue

        key, sep, value = line.partition(":")
        if not sep:
            raise ControlFileFormatError(
                "line has no key/value separator", line_number=number, line=line
            )
        if current is None:
            current = []
        current.append(Field(key, value.strip()))

    if current:
        stanzas.append(Stanza(tuple(current)))

    log.debug("Parsed control file with %d stanza(s).", len(stanzas))
    return ControlFile(tuple(stanzas))


def read_control_file(path: str | Path) -> ControlFile:
    """Read and parse a control file from disk.

    Bytes are decoded like any scanned file (see :func:`.decode.read_text`),
    so an unusual encoding never aborts parsing.

    Raises:
        FileNotFoundError: If no file exists at ``path``.
        ControlFileFormatError: If the contents are malformed.
    """
    text = read_text(path)
    if text is None:
        raise FileNotFoundError(f"No control file at {path}")
    return parse_control_file(text)
