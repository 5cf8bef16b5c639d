import reusescan
from reusescan import ScanConfig, combine_results, scan_directory
from reusescan.core.tags import LICENSE_MARKER


def test_public_names_are_exported():
    for name in reusescan.__all__:
        assert hasattr(reusescan, name), name
    assert set(reusescan.PRIMARY_API) <= set(reusescan.__all__)


def test_version_is_a_string():
    assert isinstance(reusescan.__version__, str)


def test_scan_and_combine_from_top_level(tmp_path):
    (tmp_path / "a.txt").write_text(f"{LICENSE_MARKER} MIT\n", encoding="utf-8")

    report = scan_directory(tmp_path, ScanConfig())

    assert combine_results(report.root, report.results).licenses == ("MIT",)
