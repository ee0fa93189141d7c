"""Tests for configuration loading and merging."""

from pathlib import Path

import pytest
import yaml

from apistats.deep_merge import deep_merge
from apistats.load_config import DEFAULT_CONFIG, load_config


def test_deep_merge_scalars() -> None:
    """Verify scalar replacement in deep merge."""
    merged = deep_merge({"a": 1, "b": 2}, {"b": 3, "c": 4})
    assert merged == {"a": 1, "b": 3, "c": 4}


def test_deep_merge_nested() -> None:
    """Verify recursive merging of dictionaries."""
    base = {"output": {"table_format": "simple", "ratio_precision": 4}}
    update = {"output": {"ratio_precision": 2}}
    merged = deep_merge(base, update)
    assert merged == {"output": {"table_format": "simple", "ratio_precision": 2}}


def test_deep_merge_arrays_replace() -> None:
    """Verify that ordinary arrays are replaced."""
    merged = deep_merge({"arr": [1, 2]}, {"arr": [3, 4]})
    assert merged == {"arr": [3, 4]}


def test_deep_merge_exclusions_additive() -> None:
    """Verify that excluded path prefixes accumulate."""
    base = {"exclude_paths": ["demo::a", "demo::b"]}
    update = {"exclude_paths": ["demo::b", "demo::c"]}
    merged = deep_merge(base, update)
    assert merged["exclude_paths"] == ["demo::a", "demo::b", "demo::c"]


def test_deep_merge_leaves_inputs_untouched() -> None:
    """Verify the base mapping is not mutated."""
    base = {"stability": {"unstable_markers": ["#[unstable"]}}
    deep_merge(base, {"stability": {"unstable_markers": ["#[doc(hidden)"]}})
    assert base == {"stability": {"unstable_markers": ["#[unstable"]}}


def test_load_config_defaults() -> None:
    """Verify that default config is loaded when no path is provided."""
    config = load_config(None)
    assert config == DEFAULT_CONFIG
    assert config is not DEFAULT_CONFIG
    assert config["path_separator"] == "::"


def test_load_config_with_file(tmp_path: Path) -> None:
    """Verify that user config correctly overrides defaults."""
    config_file = tmp_path / "config.yml"
    config_data = {
        "output": {"ratio_precision": 2},
        "stability": {"unstable_markers": ["#[doc(hidden)"]},
        "exclude_paths": ["demo::internal"],
    }
    config_file.write_text(yaml.dump(config_data))

    loaded = load_config(str(config_file))
    assert loaded["output"]["ratio_precision"] == 2  # noqa: PLR2004
    assert loaded["output"]["table_format"] == "simple"  # Default
    assert "#[unstable" in loaded["stability"]["unstable_markers"]  # Default
    assert "#[doc(hidden)" in loaded["stability"]["unstable_markers"]  # Added
    assert loaded["exclude_paths"] == ["demo::internal"]


def test_load_config_missing_file(tmp_path: Path) -> None:
    """Verify a missing file falls back to defaults."""
    assert load_config(str(tmp_path / "absent.yml")) == DEFAULT_CONFIG


def test_load_config_rejects_non_mapping(tmp_path: Path) -> None:
    """Verify a YAML list at the top level is refused."""
    config_file = tmp_path / "config.yml"
    config_file.write_text("- a\n- b\n")
    with pytest.raises(ValueError, match="mapping"):
        load_config(str(config_file))
