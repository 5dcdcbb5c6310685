from __future__ import annotations

from typing import Optional

import numpy as np

from domain.config import LayerConfig, VisualizerConfig
from domain.models import (
    BoundingBox,
    ColorRGBA,
    Header,
    MarkerKind,
    Point3,
    Pose,
    PrimitiveBatch,
    SceneGraphNode,
    SemanticNodeAttributes,
    Vector3,
)
from domain.ports.scene_graph import SceneGraphLayer
from domain.services.batches import make_batch
from domain.services.colors import ColorFunction, FilterFunction, make_color_msg
from domain.services.offsets import get_z_offset, offset_pose

TOP_CORNERS = (4, 5, 6, 7)


def fill_corners_from_bbox(bbox: BoundingBox) -> np.ndarray:
    return bbox.corners()


def _corner(corners: np.ndarray, index: int) -> Point3:
    return Point3.from_array(corners[:, index])


def wireframe_edges(num_corners: int = 8) -> list[tuple[int, int]]:
    edges: list[tuple[int, int]] = []
    for corner in range(num_corners):
        # edges are 1-bit perturbations; only walk towards the set bit
        for bit in (0x01, 0x02, 0x04):
            neighbor = corner | bit
            if neighbor != corner:
                edges.append((corner, neighbor))
    return edges


def add_wireframe_to_batch(corners: np.ndarray, color: ColorRGBA, batch: PrimitiveBatch) -> None:
    for start, end in wireframe_edges(corners.shape[1]):
        batch.add_segment(_corner(corners, start), _corner(corners, end), color)


def add_edges_to_corners(
    corners: np.ndarray,
    node_centroid: Point3,
    color: ColorRGBA,
    batch: PrimitiveBatch,
) -> None:
    for index in TOP_CORNERS:
        batch.add_segment(node_centroid, _corner(corners, index), color)


def _semantic_nodes(
    layer: SceneGraphLayer, filter_func: Optional[FilterFunction]
) -> list[tuple[SceneGraphNode, SemanticNodeAttributes]]:
    result: list[tuple[SceneGraphNode, SemanticNodeAttributes]] = []
    for node in layer.nodes():
        if filter_func is not None and not filter_func(node):
            continue
        attrs = node.attributes_as(SemanticNodeAttributes)
        if attrs is None:
            continue
        result.append((node, attrs))
    return result


def make_edges_to_bounding_boxes(
    header: Header,
    config: LayerConfig,
    layer: SceneGraphLayer,
    visualizer_config: VisualizerConfig,
    ns: str,
    color_func: ColorFunction,
    filter_func: Optional[FilterFunction] = None,
) -> PrimitiveBatch:
    batch = make_batch(header, ns, MarkerKind.LINE_LIST, config.bbox_wireframe_edge_scale)
    z_offset = get_z_offset(config, visualizer_config)

    for node, attrs in _semantic_nodes(layer, filter_func):
        color = make_color_msg(color_func(node), config.bounding_box_alpha)
        corners = fill_corners_from_bbox(attrs.bounding_box)
        node_centroid = attrs.position.shifted(z_offset)
        break_point = attrs.position.shifted(visualizer_config.mesh_edge_break_ratio * z_offset)
        batch.add_segment(node_centroid, break_point, color)
        add_edges_to_corners(corners, break_point, color, batch)

    return batch


def make_layer_wireframe_bounding_boxes(
    header: Header,
    config: LayerConfig,
    layer: SceneGraphLayer,
    visualizer_config: VisualizerConfig,
    ns: str,
    color_func: ColorFunction,
    filter_func: Optional[FilterFunction] = None,
) -> PrimitiveBatch:
    batch = make_batch(
        header,
        ns,
        MarkerKind.LINE_LIST,
        config.bbox_wireframe_scale,
        pose=offset_pose(get_z_offset(config, visualizer_config), config.collapse_bounding_box),
    )

    for node, attrs in _semantic_nodes(layer, filter_func):
        color = make_color_msg(color_func(node), config.bounding_box_alpha)
        add_wireframe_to_batch(fill_corners_from_bbox(attrs.bounding_box), color, batch)

    return batch


def make_bounding_box_marker(
    header: Header,
    config: LayerConfig,
    node: SceneGraphNode,
    visualizer_config: VisualizerConfig,
    ns: str,
    color_func: ColorFunction,
) -> PrimitiveBatch:
    attrs = node.attributes_as(SemanticNodeAttributes)
    bbox = attrs.bounding_box if attrs is not None else BoundingBox()
    z_offset = 0.0 if config.collapse_bounding_box else get_z_offset(config, visualizer_config)
    batch = make_batch(
        header,
        ns,
        MarkerKind.CUBE,
        Vector3(bbox.dimensions.x, bbox.dimensions.y, bbox.dimensions.z),
        marker_id=node.id,
        pose=Pose(position=bbox.center.shifted(z_offset), orientation=bbox.orientation),
    )
    batch.color = make_color_msg(color_func(node), config.bounding_box_alpha)
    return batch
