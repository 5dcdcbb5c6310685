from __future__ import annotations

from typing import Optional

from domain.config import LayerConfig, VisualizerConfig
from domain.models import (
    Header,
    MarkerKind,
    PlaceNodeAttributes,
    Pose,
    PrimitiveBatch,
    SceneGraphNode,
    Vector3,
)
from domain.ports.scene_graph import SceneGraphLayer
from domain.services.batches import make_batch, point_list_kind
from domain.services.colors import ColorFunction, FilterFunction, make_color_msg
from domain.services.offsets import get_z_offset


def make_centroid_markers(
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
        point_list_kind(config.use_sphere_marker),
        Vector3.uniform(config.marker_scale),
    )
    z_offset = get_z_offset(config, visualizer_config)

    for node in layer.nodes():
        if filter_func is not None and not filter_func(node):
            continue
        batch.points.append(node.position.shifted(z_offset))
        batch.colors.append(make_color_msg(color_func(node), config.marker_alpha))

    return batch


def is_real_place(real_place: bool) -> FilterFunction:
    def _filter(node: SceneGraphNode) -> bool:
        attrs = node.attributes_as(PlaceNodeAttributes)
        return attrs is not None and attrs.real_place == real_place

    return _filter


def make_place_centroid_markers(
    header: Header,
    config: LayerConfig,
    layer: SceneGraphLayer,
    visualizer_config: VisualizerConfig,
    ns: str,
    color_func: ColorFunction,
    real_place: bool = True,
) -> PrimitiveBatch:
    return make_centroid_markers(
        header,
        config,
        layer,
        visualizer_config,
        ns,
        color_func,
        filter_func=is_real_place(real_place),
    )


def make_frontier_ellipsoid_markers(
    header: Header,
    config: LayerConfig,
    layer: SceneGraphLayer,
    visualizer_config: VisualizerConfig,
    ns: str,
    color_func: ColorFunction,
) -> list[PrimitiveBatch]:
    z_offset = get_z_offset(config, visualizer_config)
    markers: list[PrimitiveBatch] = []
    for node in layer.nodes():
        attrs = node.attributes_as(PlaceNodeAttributes)
        if attrs is None or attrs.real_place:
            continue
        batch = make_batch(
            header,
            ns,
            MarkerKind.SPHERE,
            attrs.frontier_scale,
            marker_id=len(markers),
            pose=Pose(position=attrs.position.shifted(z_offset), orientation=attrs.orientation),
        )
        color = make_color_msg(color_func(node), config.marker_alpha)
        batch.color = color
        batch.colors.append(color)
        markers.append(batch)
    return markers


def make_gvd_wireframe(
    header: Header,
    config: LayerConfig,
    layer: SceneGraphLayer,
    ns: str,
    color_func: ColorFunction,
    marker_id: int = 0,
) -> list[PrimitiveBatch]:
    if layer.num_nodes() == 0:
        return []

    nodes = make_batch(
        header,
        f"{ns}_nodes",
        MarkerKind.SPHERE_LIST,
        Vector3.uniform(config.intralayer_edge_scale),
        marker_id=marker_id,
    )
    for node in layer.nodes():
        nodes.points.append(node.position)
        nodes.colors.append(make_color_msg(color_func(node), config.marker_alpha))

    if not layer.edges():
        return [nodes]

    edges = make_batch(
        header,
        f"{ns}_edges",
        MarkerKind.LINE_LIST,
        config.intralayer_edge_scale,
        marker_id=marker_id,
    )
    for edge in layer.edges():
        source = layer.get_node(edge.source)
        target = layer.get_node(edge.target)
        edges.add_segment(
            source.position,
            target.position,
            make_color_msg(color_func(source), config.marker_alpha),
            make_color_msg(color_func(target), config.marker_alpha),
        )

    return [nodes, edges]
