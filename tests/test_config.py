"""Test suite for ConfigManager: verifying loading formats, defaults, validation and merging."""

import json
import pytest

import yaml
import toml

from tsdecomp.core.config import ConfigManager, ConfigValidationError


def test_defaults():
    """Defaults target monthly data with annual seasonality."""
    cfg = ConfigManager()
    assert cfg.period == 12
    assert cfg.normalize_seasonal is True
    assert cfg.get("freq") == "MS"
    assert cfg.get("dataset") == "airpassengers"


def test_load_json(tmp_path):
    """Ensure JSON files load correctly and default values are returned for missing keys."""
    cfg_file = tmp_path / "cfg.json"
    cfg_file.write_text(json.dumps({"period": 4, "value_col": "sales"}), encoding="utf-8")

    cfg = ConfigManager(str(cfg_file))

    assert cfg.period == 4
    assert cfg.get("value_col") == "sales"
    assert cfg.get("missing", "def") == "def"


def test_load_yaml(tmp_path):
    """Verify YAML files are parsed and values retrieved accurately."""
    cfg_file = tmp_path / "cfg.yaml"
    cfg_file.write_text(yaml.safe_dump({"normalize_seasonal": False}), encoding="utf-8")

    cfg = ConfigManager()
    cfg.load(str(cfg_file))

    assert cfg.normalize_seasonal is False
    assert cfg.period == 12


def test_load_toml(tmp_path):
    """Check TOML file loading and value retrieval functionality."""
    cfg_file = tmp_path / "cfg.toml"
    cfg_file.write_text(toml.dumps({"date_col": "month", "period": 7}), encoding="utf-8")

    cfg = ConfigManager()
    cfg.load(str(cfg_file))

    assert cfg.get("date_col") == "month"
    assert cfg.period == 7


def test_load_unsupported_extension(tmp_path):
    """Confirm that loading unsupported file extensions raises ConfigValidationError."""
    cfg_file = tmp_path / "cfg.txt"
    cfg_file.write_text("whatever", encoding="utf-8")

    with pytest.raises(ConfigValidationError):
        ConfigManager().load(str(cfg_file))


def test_load_invalid_content(tmp_path):
    """Ensure invalid JSON content triggers a ConfigValidationError."""
    cfg_file = tmp_path / "bad.json"
    cfg_file.write_text("not a json!", encoding="utf-8")

    with pytest.raises(ConfigValidationError):
        ConfigManager().load(str(cfg_file))


def test_load_non_mapping(tmp_path):
    """A YAML list is not a valid configuration."""
    cfg_file = tmp_path / "list.yaml"
    cfg_file.write_text(yaml.safe_dump([1, 2, 3]), encoding="utf-8")

    with pytest.raises(ConfigValidationError):
        ConfigManager().load(str(cfg_file))


@pytest.mark.parametrize("period", [0, -1, "twelve", 2.5, True])
def test_invalid_period(tmp_path, period):
    """Period must be a positive integer."""
    cfg_file = tmp_path / "cfg.json"
    cfg_file.write_text(json.dumps({"period": period}), encoding="utf-8")

    with pytest.raises(ConfigValidationError):
        ConfigManager().load(str(cfg_file))


def test_invalid_normalize_flag(tmp_path):
    cfg_file = tmp_path / "cfg.json"
    cfg_file.write_text(json.dumps({"normalize_seasonal": "yes"}), encoding="utf-8")

    with pytest.raises(ConfigValidationError):
        ConfigManager().load(str(cfg_file))


def test_merge_configs():
    """Values from the merged config override existing ones."""
    cfg1 = ConfigManager()
    cfg1.config = {"period": 12, "value_col": "a"}

    cfg2 = ConfigManager()
    cfg2.config = {"period": 4}

    cfg1.merge(cfg2)

    assert cfg1.period == 4
    assert cfg1.get("value_col") == "a"


def test_merge_wrong_type():
    """Assert merging with a non-ConfigManager object raises a TypeError."""
    cfg = ConfigManager()
    with pytest.raises(TypeError):
        cfg.merge("not a config manager")
