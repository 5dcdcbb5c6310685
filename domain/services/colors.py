from __future__ import annotations

import colorsys
import logging
import math
from collections.abc import Callable

from domain.config import ColormapConfig, VisualizerConfig
from domain.models import (
    Color,
    ColorRGBA,
    PlaceNodeAttributes,
    SceneGraphEdge,
    SceneGraphNode,
    SemanticNodeAttributes,
)

logger = logging.getLogger(__name__)

ColorFunction = Callable[[SceneGraphNode], Color]
FilterFunction = Callable[[SceneGraphNode], bool]
# (source, target, edge, is_source) -> color of that endpoint
EdgeColorFunction = Callable[[SceneGraphNode, SceneGraphNode, SceneGraphEdge, bool], Color]


def make_color_msg(color: Color, alpha: float = 1.0) -> ColorRGBA:
    return ColorRGBA(r=color.r / 255.0, g=color.g / 255.0, b=color.b / 255.0, a=float(alpha))


def get_ratio(minimum: float, maximum: float, value: float) -> float:
    try:
        ratio = (value - minimum) / (maximum - minimum)
    except ZeroDivisionError:
        ratio = math.nan
    if not math.isfinite(ratio):
        return 0.0
    return min(max(ratio, 0.0), 1.0)


def interpolate_colormap(colormap: ColormapConfig, ratio: float) -> Color:
    ratio = min(max(ratio, 0.0), 1.0)
    hue = colormap.min_hue + ratio * (colormap.max_hue - colormap.min_hue)
    saturation = colormap.min_saturation + ratio * (
        colormap.max_saturation - colormap.min_saturation
    )
    luminance = colormap.min_luminance + ratio * (colormap.max_luminance - colormap.min_luminance)
    red, green, blue = colorsys.hls_to_rgb(hue, luminance, saturation)
    return Color(
        r=int(round(255 * red)),
        g=int(round(255 * green)),
        b=int(round(255 * blue)),
    )


def get_distance_color(
    visualizer_config: VisualizerConfig,
    colormap: ColormapConfig,
    distance: float,
) -> Color:
    if not visualizer_config.colormap_range_is_valid:
        logger.debug(
            "Colormap range [%s, %s] is empty; using default color.",
            visualizer_config.places_colormap_min_distance,
            visualizer_config.places_colormap_max_distance,
        )
        return Color()

    ratio = get_ratio(
        visualizer_config.places_colormap_min_distance,
        visualizer_config.places_colormap_max_distance,
        distance,
    )
    return interpolate_colormap(colormap, ratio)


def node_color(node: SceneGraphNode) -> Color:
    attrs = node.attributes_as(SemanticNodeAttributes)
    return attrs.color if attrs is not None else Color()


def constant_color(color: Color) -> ColorFunction:
    def _color(_node: SceneGraphNode) -> Color:
        return color

    return _color


def distance_color_function(
    visualizer_config: VisualizerConfig, colormap: ColormapConfig
) -> ColorFunction:
    def _color(node: SceneGraphNode) -> Color:
        attrs = node.attributes_as(PlaceNodeAttributes)
        if attrs is None:
            return Color()
        return get_distance_color(visualizer_config, colormap, attrs.distance)

    return _color


def edge_weight_color_function(
    visualizer_config: VisualizerConfig, colormap: ColormapConfig
) -> EdgeColorFunction:
    def _color(
        _source: SceneGraphNode,
        _target: SceneGraphNode,
        edge: SceneGraphEdge,
        _is_source: bool,
    ) -> Color:
        return get_distance_color(visualizer_config, colormap, edge.weight)

    return _color
