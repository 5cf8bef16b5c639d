import json

import pytest

from reusescan.core.config import (
    ListingConfig,
    ScanConfig,
    load_config_from_path,
)


def test_defaults():
    cfg = ScanConfig()

    assert cfg.listing.respect_gitignore is True
    assert cfg.listing.skip_dirs == (".git",)
    assert cfg.reuse.dep5_path == ".reuse/dep5"
    assert cfg.reuse.sidecar_suffix == ".license"
    assert cfg.decode.max_bytes is None
    assert cfg.pipeline.max_workers is None
    cfg.validate()


def test_json_round_trip(tmp_path):
    cfg = ScanConfig()
    cfg.listing.skip_dirs = (".git", "node_modules")
    cfg.pipeline.max_workers = 4
    cfg.decode.max_bytes = 65536

    path = tmp_path / "cfg.json"
    cfg.to_json(path)
    loaded = ScanConfig.from_json(path)

    assert loaded == cfg
    assert isinstance(loaded.listing.skip_dirs, tuple)


def test_to_dict_skips_none_values():
    data = ScanConfig().to_dict()

    assert "max_workers" not in data["pipeline"]
    assert data["reuse"] == {"dep5_path": ".reuse/dep5", "sidecar_suffix": ".license"}
    json.dumps(data)


def test_from_toml(tmp_path):
    path = tmp_path / "reusescan.toml"
    path.write_text(
        "[listing]\n"
        "respect_gitignore = false\n"
        "skip_dirs = ['.git', '.hg']\n"
        "\n"
        "[pipeline]\n"
        "max_workers = 2\n"
        "\n"
        "[logging]\n"
        "level = 'DEBUG'\n",
        encoding="utf-8",
    )

    cfg = load_config_from_path(path)

    assert cfg.listing == ListingConfig(respect_gitignore=False, follow_symlinks=False, skip_dirs=(".git", ".hg"))
    assert cfg.pipeline.max_workers == 2
    assert cfg.logging.level == "DEBUG"


def test_load_config_rejects_unknown_extension(tmp_path):
    path = tmp_path / "cfg.yaml"
    path.write_text("", encoding="utf-8")

    with pytest.raises(ValueError, match="Unsupported config extension"):
        load_config_from_path(path)


def test_unknown_keys_are_rejected():
    with pytest.raises(ValueError, match="max_worker"):
        ScanConfig.from_dict({"pipeline": {"max_worker": 2}})

    with pytest.raises(ValueError, match="sinks"):
        ScanConfig.from_dict({"sinks": {}})


def test_section_must_be_mapping():
    with pytest.raises(TypeError):
        ScanConfig.from_dict({"reuse": ["not", "a", "table"]})


@pytest.mark.parametrize(
    ("section", "key", "value"),
    [
        ("pipeline", "max_workers", 0),
        ("pipeline", "submit_window", 0),
        ("decode", "max_bytes", 0),
        ("reuse", "sidecar_suffix", ""),
        ("reuse", "dep5_path", "/etc/dep5"),
    ],
)
def test_validate_rejects_bad_values(section, key, value):
    cfg = ScanConfig()
    setattr(getattr(cfg, section), key, value)

    with pytest.raises(ValueError):
        cfg.validate()
