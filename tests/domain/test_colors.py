from __future__ import annotations

import math

import pytest

from domain.config import ColormapConfig, VisualizerConfig
from domain.models import Color, ColorRGBA
from domain.services.colors import (
    get_distance_color,
    get_ratio,
    interpolate_colormap,
    make_color_msg,
)


def test_make_color_msg_scales_channels() -> None:
    assert make_color_msg(Color(255, 0, 51), 0.25) == ColorRGBA(1.0, 0.0, 0.2, 0.25)
    assert make_color_msg(Color()).a == 1.0


@pytest.mark.parametrize(
    ("value", "expected"),
    [(-1.0, 0.0), (0.0, 0.0), (1.0, 0.5), (2.0, 1.0), (10.0, 1.0), (math.nan, 0.0)],
)
def test_ratio_is_clamped(value: float, expected: float) -> None:
    assert get_ratio(0.0, 2.0, value) == expected


def test_distance_color_uses_colormap_endpoints(
    visualizer_config: VisualizerConfig, colormap: ColormapConfig
) -> None:
    near = get_distance_color(visualizer_config, colormap, 0.0)
    far = get_distance_color(visualizer_config, colormap, 100.0)

    assert near == interpolate_colormap(colormap, 0.0) == Color(255, 0, 0)
    assert far == interpolate_colormap(colormap, 1.0) == Color(0, 255, 255)


@pytest.mark.parametrize("distance", [-5.0, 0.0, 0.7, 1.3, 2.0, 50.0, math.inf, math.nan])
def test_distance_color_stays_inside_colormap_range(
    visualizer_config: VisualizerConfig, colormap: ColormapConfig, distance: float
) -> None:
    color = get_distance_color(visualizer_config, colormap, distance)
    samples = {interpolate_colormap(colormap, step / 100.0) for step in range(101)}

    assert color in samples


@pytest.mark.parametrize("distance", [-1.0, 0.0, 1.0, 100.0, math.nan])
def test_inverted_colormap_range_returns_default_color(
    colormap: ColormapConfig, distance: float
) -> None:
    config = VisualizerConfig(places_colormap_min_distance=2.0, places_colormap_max_distance=2.0)

    assert not config.colormap_range_is_valid
    assert get_distance_color(config, colormap, distance) == Color()
