import pytest

from reusescan.core.globs import PatternSet, relative_posix, translate_glob


@pytest.mark.parametrize(
    ("pattern", "path", "expected"),
    [
        ("*", "a.c", True),
        ("*", "dir/a.c", False),
        ("*.c", "main.c", True),
        ("*.c", "src/main.c", False),
        ("src/*.c", "src/main.c", True),
        ("src/*.c", "src/sub/main.c", False),
        ("**/*.c", "main.c", True),
        ("**/*.c", "a/b/c/main.c", True),
        ("src/**", "src", True),
        ("src/**", "src/a/b.txt", True),
        ("src/**", "srcx/a", False),
        ("a/**/b", "a/b", True),
        ("a/**/b", "a/x/y/b", True),
        ("vendor/", "vendor/lib/x.c", True),
        ("./docs/*", "docs/readme.md", True),
        ("/docs/*", "docs/readme.md", True),
        ("file?.txt", "file1.txt", True),
        ("file?.txt", "file10.txt", False),
        ("file?.txt", "file/.txt", False),
        ("[ab].txt", "a.txt", True),
        ("[ab].txt", "c.txt", False),
        ("[!ab].txt", "c.txt", True),
        ("[!ab].txt", "a.txt", False),
        ("[a-c]x", "bx", True),
        ("[abc", "[abc", True),
        ("a+b(c).txt", "a+b(c).txt", True),
    ],
)
def test_translate_glob(pattern: str, path: str, expected: bool) -> None:
    assert (translate_glob(pattern).fullmatch(path) is not None) is expected


def test_negated_class_never_matches_slash() -> None:
    assert translate_glob("a[!x]b").fullmatch("a/b") is None


def test_pattern_set_matches_any() -> None:
    ps = PatternSet.of(["*.md", "docs/**"])

    assert ps.matches("README.md")
    assert ps.matches("docs/img/logo.png")
    assert not ps.matches("src/main.c")


def test_pattern_set_drops_empty_patterns() -> None:
    ps = PatternSet.of(["", "  ", "*.c"])

    assert ps.patterns == ("*.c",)
    assert ps


def test_empty_pattern_set_matches_nothing() -> None:
    ps = PatternSet.of([])

    assert not ps
    assert not ps.matches("anything")


def test_matches_strips_leading_dot_slash() -> None:
    assert PatternSet.of(["src/*.c"]).matches("./src/a.c")


def test_matches_relative(tmp_path) -> None:
    ps = PatternSet.of(["vendor/*"])

    assert ps.matches_relative(tmp_path, tmp_path / "vendor" / "x.c")
    assert not ps.matches_relative(tmp_path, tmp_path / "src" / "x.c")


def test_matches_relative_outside_base_never_matches(tmp_path) -> None:
    base = tmp_path / "repo"
    ps = PatternSet.of(["**"])

    assert not ps.matches_relative(base, tmp_path / "other" / "x.c")
    assert not ps.matches_relative(base, tmp_path)


def test_relative_posix(tmp_path) -> None:
    assert relative_posix(tmp_path, tmp_path / "a" / "b.txt") == "a/b.txt"
    assert relative_posix(tmp_path / "a", tmp_path / "b.txt") == "../b.txt"
    assert relative_posix(tmp_path, tmp_path) == "."


def test_pattern_set_equality_ignores_compiled_cache() -> None:
    assert PatternSet.of(["*.c"]) == PatternSet(("*.c",))
