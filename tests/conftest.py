from __future__ import annotations

import os
from collections.abc import Callable, Generator

import pytest

from domain.config import ColormapConfig, DynamicLayerConfig, LayerConfig, VisualizerConfig
from domain.models import Header


def _clear_dsgviz_env() -> None:
    for key in list(os.environ):
        if key.startswith("DSGVIZ_"):
            os.environ.pop(key, None)


_clear_dsgviz_env()


@pytest.fixture(autouse=True)
def clear_dsgviz_env() -> Generator[None, None, None]:
    _clear_dsgviz_env()
    yield
    _clear_dsgviz_env()


@pytest.fixture
def header() -> Header:
    return Header(frame_id="map", stamp=12.5)


@pytest.fixture
def visualizer_config() -> VisualizerConfig:
    return VisualizerConfig(
        layer_z_step=5.0,
        collapse_layers=False,
        mesh_edge_break_ratio=0.5,
        mesh_layer_offset=1.0,
        places_colormap_min_distance=0.0,
        places_colormap_max_distance=2.0,
    )


@pytest.fixture
def layer_config() -> LayerConfig:
    return LayerConfig(
        z_offset_scale=2.0,
        marker_scale=0.2,
        marker_alpha=0.8,
        bounding_box_alpha=0.5,
        boundary_alpha=0.6,
        boundary_ellipse_alpha=0.7,
        interlayer_edge_alpha=0.4,
        intralayer_edge_alpha=0.9,
        label_height=1.5,
        label_jitter_scale=0.3,
    )


@pytest.fixture
def layer_config_factory(layer_config: LayerConfig) -> Callable[..., LayerConfig]:
    def _factory(**overrides: object) -> LayerConfig:
        return layer_config.model_copy(update=overrides)

    return _factory


@pytest.fixture
def dynamic_config() -> DynamicLayerConfig:
    return DynamicLayerConfig(
        z_offset_scale=1.0,
        node_scale=0.3,
        node_alpha=0.9,
        edge_alpha=0.5,
        label_height=2.0,
        visualize_interlayer_edges=True,
    )


@pytest.fixture
def colormap() -> ColormapConfig:
    return ColormapConfig(
        min_hue=0.0,
        max_hue=0.5,
        min_saturation=1.0,
        max_saturation=1.0,
        min_luminance=0.5,
        max_luminance=0.5,
    )
