# REUSE-IgnoreStart
from pathlib import Path

import pytest

from reusescan.core.control_file import parse_control_file
from reusescan.core.decode import read_text
from reusescan.core.dep5 import Dep5
from reusescan.core.resolver import Resolver
from reusescan.core.tags import IGNORE_END, IGNORE_START, LICENSE_MARKER


DEP5_TEXT = """\
Files: *
Copyright: 2000 Everyone
License: MIT

Files: vendor/*
Copyright: 2010 Vendor
License: Apache-2.0
"""


def _dep5() -> Dep5:
    return Dep5.from_control_file(parse_control_file(DEP5_TEXT))


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


class RecordingReader:
    def __init__(self):
        self.calls: list[Path] = []

    def __call__(self, path: Path):
        self.calls.append(path)
        return read_text(path)


def test_inline_tags_win_and_short_circuit(tmp_path):
    src = _write(tmp_path / "a.py", f"# {LICENSE_MARKER} GPL-3.0\n# Copyright 2024 Own\n")
    _write(tmp_path / "a.py.license", f"{LICENSE_MARKER} BSD-3-Clause\n")
    reader = RecordingReader()
    resolver = Resolver(tmp_path, _dep5(), reader=reader)

    result = resolver.resolve(src)

    assert result.licenses == ("GPL-3.0",)
    assert result.copyrights == ("2024 Own",)
    assert result.source == "file"
    assert reader.calls == [src]


def test_sidecar_used_when_file_has_no_tags(tmp_path):
    img = tmp_path / "logo.png"
    img.write_bytes(b"\x89PNG\r\n\x1a\n\x00\x00")
    _write(tmp_path / "logo.png.license", f"{LICENSE_MARKER} CC0-1.0\n© 2023 Artist\n")

    result = Resolver(tmp_path, _dep5()).resolve(img)

    assert result.licenses == ("CC0-1.0",)
    assert result.copyrights == ("2023 Artist",)
    assert result.source == "sidecar"
    assert result.path == img


def test_dep5_fallback_uses_last_matching_entry(tmp_path):
    _write(tmp_path / "vendor" / "x.c", "int x;\n")
    _write(tmp_path / "other.c", "int y;\n")
    resolver = Resolver(tmp_path, _dep5())

    vendor = resolver.resolve(tmp_path / "vendor" / "x.c")
    other = resolver.resolve(tmp_path / "other.c")

    assert vendor.licenses == ("Apache-2.0",)
    assert vendor.copyrights == ("2010 Vendor",)
    assert vendor.source == "dep5"
    assert other.licenses == ("MIT",)


def test_dep5_text_is_not_reparsed(tmp_path):
    dep5 = Dep5.from_control_file(
        parse_control_file("Files: *\nCopyright: Copyright (C) 2024 Raw\nLicense: MIT\n")
    )
    _write(tmp_path / "f.txt", "nothing\n")

    result = Resolver(tmp_path, dep5).resolve(tmp_path / "f.txt")

    assert result.copyrights == ("Copyright (C) 2024 Raw",)


def test_ignored_license_falls_through_to_dep5(tmp_path):
    _write(
        tmp_path / "hidden.c",
        f"/* {IGNORE_START} */\n// {LICENSE_MARKER} GPL-3.0\n/* {IGNORE_END} */\n",
    )

    result = Resolver(tmp_path, _dep5()).resolve(tmp_path / "hidden.c")

    assert result.source == "dep5"
    assert result.licenses == ("MIT",)


def test_no_information_anywhere_yields_none(tmp_path):
    _write(tmp_path / "plain.txt", "hello\n")

    assert Resolver(tmp_path).resolve(tmp_path / "plain.txt") is None


def test_missing_sidecar_is_not_an_error(tmp_path):
    _write(tmp_path / "plain.txt", "hello\n")
    reader = RecordingReader()

    assert Resolver(tmp_path, reader=reader).resolve(tmp_path / "plain.txt") is None
    assert reader.calls == [tmp_path / "plain.txt", tmp_path / "plain.txt.license"]


def test_relative_paths_resolve_against_root(tmp_path):
    _write(tmp_path / "vendor" / "x.c", "int x;\n")

    result = Resolver(tmp_path, _dep5()).resolve("vendor/x.c")

    assert result.path == tmp_path / "vendor" / "x.c"
    assert result.licenses == ("Apache-2.0",)


def test_custom_sidecar_suffix(tmp_path):
    _write(tmp_path / "data.bin", "")
    _write(tmp_path / "data.bin.lic", f"{LICENSE_MARKER} MIT\n")
    resolver = Resolver(tmp_path, sidecar_suffix=".lic")

    assert resolver.sidecar_for(tmp_path / "data.bin") == tmp_path / "data.bin.lic"
    assert resolver.resolve(tmp_path / "data.bin").source == "sidecar"


def test_read_error_propagates(tmp_path):
    _write(tmp_path / "a.txt", "x")

    def failing_reader(path):
        raise PermissionError(f"denied: {path}")

    with pytest.raises(PermissionError):
        Resolver(tmp_path, reader=failing_reader).resolve(tmp_path / "a.txt")


def test_max_bytes_limits_tag_search(tmp_path):
    _write(tmp_path / "long.txt", "x" * 100 + f"\n{LICENSE_MARKER} MIT\n")

    assert Resolver(tmp_path, max_bytes=50).resolve(tmp_path / "long.txt") is None
    assert Resolver(tmp_path).resolve(tmp_path / "long.txt").licenses == ("MIT",)
# REUSE-IgnoreEnd
