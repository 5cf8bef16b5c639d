# decode.py
# SPDX-License-Identifier: MIT
"""Read files and turn their bytes into text for tag extraction.

Decoding never fails: after BOM sniffing, strict UTF-8 and a UTF-16 guess,
single-byte code pages take whatever is left.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from .log import get_logger

__all__ = [
    "DecodedText",
    "decode_bytes",
    "read_text",
]

log = get_logger(__name__)

# 4-byte UTF-32 marks go first; FF FE 00 00 also starts with the UTF-16-LE mark
_BYTE_ORDER_MARKS = (
    (b"\x00\x00\xfe\xff", "utf-32-be"),
    (b"\xff\xfe\x00\x00", "utf-32-le"),
    (b"\xef\xbb\xbf", "utf-8-sig"),
    (b"\xfe\xff", "utf-16-be"),
    (b"\xff\xfe", "utf-16-le"),
)

_SNIFF_BYTES = 4096


@dataclass(slots=True, frozen=True)
class DecodedText:
    """Text plus the codec that produced it."""

    text: str
    encoding: str


def _bom_encoding(data: bytes) -> str | None:
    return next((enc for mark, enc in _BYTE_ORDER_MARKS if data.startswith(mark)), None)


def _utf16_by_nul_bytes(sample: bytes) -> str | None:
    """Guess UTF-16 byte order from where NUL bytes sit.

    ASCII-range text in UTF-16 has a NUL in every code unit, on the even
    offsets for big-endian and the odd ones for little-endian.
    """
    high = sample[0::2].count(0)
    low = sample[1::2].count(0)
    if high + low < max(4, len(sample) // 64):
        return None
    if high > 2 * low:
        return "utf-16-be"
    if low > 2 * high:
        return "utf-16-le"
    return None


def _try_decode(data: bytes, encoding: str | None) -> DecodedText | None:
    if encoding is None:
        return None
    try:
        text = data.decode(encoding)
    except UnicodeDecodeError:
        return None
    # utf-8-sig drops its mark itself; the UTF-16/32 codecs keep it
    return DecodedText(text.lstrip("\ufeff") if encoding != "utf-8" else text, encoding)


def decode_bytes(data: bytes) -> DecodedText:
    """Decode bytes with the first codec that accepts them.

    Order: the codec named by a byte-order mark, strict UTF-8, UTF-16 when
    the NUL layout suggests it, cp1252, and finally latin-1, which maps
    every byte. Line endings are left as they are.
    """
    if not data:
        return DecodedText("", "utf-8")
    for encoding in (_bom_encoding(data), "utf-8", _utf16_by_nul_bytes(data[:_SNIFF_BYTES]), "cp1252"):
        decoded = _try_decode(data, encoding)
        if decoded is not None:
            return decoded
    return DecodedText(data.decode("latin-1"), "latin-1")


def read_text(path: str | os.PathLike[str], *, max_bytes: int | None = None) -> str | None:
    """Read a file and decode it to text.

    Args:
        path (str | os.PathLike[str]): File to read.
        max_bytes (int | None): Optional cap on the number of bytes read.

    Returns:
        str | None: Decoded text, or None when no regular file exists at
        ``path``.

    Raises:
        OSError: Any read failure other than the file being absent.
    """
    p = Path(path)
    try:
        with p.open("rb") as fh:
            data = fh.read(max_bytes) if max_bytes else fh.read()
    except (FileNotFoundError, IsADirectoryError, NotADirectoryError):
        return None
    decoded = decode_bytes(data)
    if decoded.encoding not in ("utf-8", "utf-8-sig"):
        log.debug("%s decoded as %s", p, decoded.encoding)
    return decoded.text
