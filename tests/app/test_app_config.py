from __future__ import annotations

from pathlib import Path

import pytest

from app.config import load_settings
from tests.helpers.scene_fixtures import repo_root

CONFIG_PATH = repo_root() / "config" / "visualizer.yaml"


def test_load_settings_reads_yaml() -> None:
    settings = load_settings(CONFIG_PATH).markers

    assert settings.frame_id == "world"
    assert sorted(settings.layers) == [2, 3, 4]
    assert settings.layers[3].interlayer_edge_insertion_skip == 2
    assert settings.layers[2].use_label
    assert settings.dynamic_layers[2].visualize_interlayer_edges
    assert settings.visualizer.color_places_by_distance
    assert [entry.name for entry in settings.label_names] == ["chair", "table"]
    lookup = settings.label_lookup()
    assert lookup is not None
    assert lookup.name_for(5) == "table"


def test_env_overrides_yaml(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DSGVIZ_MARKERS__FRAME_ID", "map")
    monkeypatch.setenv("DSGVIZ_MARKERS__VISUALIZER__COLLAPSE_LAYERS", "true")

    settings = load_settings(CONFIG_PATH).markers

    assert settings.header(stamp=3.0).frame_id == "map"
    assert settings.header(stamp=3.0).stamp == 3.0
    assert settings.visualizer.collapse_layers
    assert settings.visualizer.layer_z_step == 5.0


def test_config_path_from_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    config = tmp_path / "custom.yaml"
    config.write_text("markers:\n  frame_id: odom\n  layers:\n    7:\n      z_offset_scale: 4\n")
    monkeypatch.setenv("DSGVIZ_CONFIG_PATH", str(config))

    settings = load_settings().markers

    assert settings.frame_id == "odom"
    assert settings.layers[7].z_offset_scale == 4.0


def test_defaults_without_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)

    settings = load_settings().markers

    assert settings.layers == {}
    assert settings.label_lookup() is None
    assert settings.visualizer.layer_z_step == 5.0
    assert settings.frame_id == "world"


def test_blank_frame_id_falls_back_to_world(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DSGVIZ_MARKERS__FRAME_ID", "  ")

    assert load_settings(CONFIG_PATH).markers.frame_id == "world"


def test_missing_config_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError, match="Config file not found"):
        load_settings(tmp_path / "missing.yaml")


def test_invalid_insertion_skip_is_rejected(tmp_path: Path) -> None:
    config = tmp_path / "bad.yaml"
    config.write_text("markers:\n  layers:\n    2:\n      intralayer_edge_insertion_skip: -1\n")

    with pytest.raises(ValueError, match="intralayer_edge_insertion_skip"):
        load_settings(config)
