from __future__ import annotations

from typing import Optional

from domain.config import DynamicLayerConfig, VisualizerConfig
from domain.models import Color, Header, MarkerKind, Point3, Pose, PrimitiveBatch, Vector3
from domain.ports.scene_graph import DynamicSceneGraphLayer
from domain.services.batches import make_batch, point_list_kind
from domain.services.colors import ColorFunction, constant_color, make_color_msg
from domain.services.offsets import get_z_offset

AGENT_LABEL = "Agent"


def make_dynamic_centroid_markers(
    header: Header,
    config: DynamicLayerConfig,
    layer: DynamicSceneGraphLayer,
    visualizer_config: VisualizerConfig,
    ns: str,
    color_func: ColorFunction,
    marker_id: int = 0,
    layer_offset_scale: Optional[float] = None,
) -> PrimitiveBatch:
    batch = make_batch(
        header,
        ns,
        point_list_kind(config.node_use_sphere),
        Vector3.uniform(config.node_scale),
        marker_id=marker_id,
    )
    scale = config.z_offset_scale if layer_offset_scale is None else layer_offset_scale
    z_offset = get_z_offset(scale, visualizer_config)

    for node in layer.nodes():
        if node is None:
            continue
        batch.points.append(node.position.shifted(z_offset))
        batch.colors.append(make_color_msg(color_func(node), config.node_alpha))

    return batch


def make_dynamic_centroid_markers_with_color(
    header: Header,
    config: DynamicLayerConfig,
    layer: DynamicSceneGraphLayer,
    visualizer_config: VisualizerConfig,
    color: Color,
    ns: str,
    marker_id: int = 0,
) -> PrimitiveBatch:
    return make_dynamic_centroid_markers(
        header, config, layer, visualizer_config, ns, constant_color(color), marker_id
    )


def make_dynamic_edge_markers(
    header: Header,
    config: DynamicLayerConfig,
    layer: DynamicSceneGraphLayer,
    visualizer_config: VisualizerConfig,
    color: Color,
    ns: str,
    marker_id: int = 0,
) -> PrimitiveBatch:
    batch = make_batch(header, ns, MarkerKind.LINE_LIST, config.edge_scale, marker_id=marker_id)
    batch.color = make_color_msg(color, config.edge_alpha)
    z_offset = get_z_offset(config, visualizer_config)

    for edge in layer.edges():
        batch.add_segment(
            layer.get_position(edge.source).shifted(z_offset),
            layer.get_position(edge.target).shifted(z_offset),
        )

    return batch


def make_dynamic_label_marker(
    header: Header,
    config: DynamicLayerConfig,
    layer: DynamicSceneGraphLayer,
    visualizer_config: VisualizerConfig,
    ns: str,
    marker_id: int = 0,
) -> PrimitiveBatch:
    batch = make_batch(
        header,
        ns,
        MarkerKind.TEXT_VIEW_FACING,
        Vector3(z=config.label_scale),
        marker_id=marker_id,
    )
    batch.text = AGENT_LABEL
    batch.color = make_color_msg(Color())

    latest = layer.get_position_by_index(layer.num_nodes() - 1) or Point3()
    height = get_z_offset(config, visualizer_config) + config.label_height
    batch.pose = Pose(position=latest.shifted(height))
    return batch
