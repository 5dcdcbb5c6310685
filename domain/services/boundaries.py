from __future__ import annotations

import math

import numpy as np

from domain.config import LayerConfig, VisualizerConfig
from domain.models import (
    Color,
    Header,
    MarkerKind,
    Place2dNodeAttributes,
    Point3,
    PrimitiveBatch,
)
from domain.ports.scene_graph import SceneGraphLayer
from domain.services.batches import make_batch
from domain.services.colors import make_color_msg
from domain.services.offsets import get_z_offset, offset_pose

ELLIPSE_SAMPLES = 20


def _boundary_nodes(layer: SceneGraphLayer) -> list[Place2dNodeAttributes]:
    result: list[Place2dNodeAttributes] = []
    for node in layer.nodes():
        attrs = node.attributes_as(Place2dNodeAttributes)
        # a boundary needs at least two points to draw anything
        if attrs is None or len(attrs.boundary) <= 1:
            continue
        result.append(attrs)
    return result


def _ellipse_point(attrs: Place2dNodeAttributes, theta: float) -> Point3:
    matrix = np.array(attrs.ellipse_matrix_expand, dtype=float)
    offset = matrix @ np.array([math.cos(theta), math.sin(theta)])
    return Point3(
        x=float(offset[0]) + attrs.ellipse_centroid.x,
        y=float(offset[1]) + attrs.ellipse_centroid.y,
        z=attrs.position.z,
    )


def make_layer_ellipse_boundaries(
    header: Header,
    config: LayerConfig,
    layer: SceneGraphLayer,
    visualizer_config: VisualizerConfig,
    ns: str,
    num_samples: int = ELLIPSE_SAMPLES,
) -> PrimitiveBatch:
    batch = make_batch(
        header,
        ns,
        MarkerKind.LINE_LIST,
        config.boundary_wireframe_scale,
        pose=offset_pose(get_z_offset(config, visualizer_config), config.collapse_boundary),
    )

    for attrs in _boundary_nodes(layer):
        color = make_color_msg(attrs.color, config.boundary_ellipse_alpha)
        last_point = _ellipse_point(attrs, 0.0)
        for ix in range(1, num_samples + 1):
            point = _ellipse_point(attrs, ix * 2.0 * math.pi / num_samples)
            batch.add_segment(last_point, point, color)
            last_point = point

    return batch


def make_layer_polygon_boundaries(
    header: Header,
    config: LayerConfig,
    layer: SceneGraphLayer,
    visualizer_config: VisualizerConfig,
    ns: str,
) -> PrimitiveBatch:
    batch = make_batch(
        header,
        ns,
        MarkerKind.LINE_LIST,
        config.boundary_wireframe_scale,
        pose=offset_pose(get_z_offset(config, visualizer_config), config.collapse_boundary),
    )

    for attrs in _boundary_nodes(layer):
        base_color = attrs.color if config.boundary_use_node_color else Color()
        color = make_color_msg(base_color, config.boundary_alpha)
        height = attrs.position.z
        last_point = attrs.boundary[-1].with_z(height)
        for vertex in attrs.boundary:
            point = vertex.with_z(height)
            batch.add_segment(last_point, point, color)
            last_point = point

    return batch


def make_layer_polygon_edges(
    header: Header,
    config: LayerConfig,
    layer: SceneGraphLayer,
    visualizer_config: VisualizerConfig,
    ns: str,
) -> PrimitiveBatch:
    batch = make_batch(header, ns, MarkerKind.LINE_LIST, config.boundary_wireframe_scale)
    z_offset = get_z_offset(config, visualizer_config)

    for attrs in _boundary_nodes(layer):
        node_point = attrs.position.shifted(z_offset)
        color = make_color_msg(attrs.color, config.boundary_alpha)
        for vertex in attrs.boundary:
            batch.add_segment(vertex.with_z(attrs.position.z), node_point, color)

    return batch
