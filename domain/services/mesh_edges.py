from __future__ import annotations

import logging

from domain.config import LayerConfig, VisualizerConfig
from domain.models import Color, Header, MarkerKind, Place2dNodeAttributes, PrimitiveBatch
from domain.ports.scene_graph import Mesh, SceneGraphLayer
from domain.services.batches import make_batch
from domain.services.colors import make_color_msg
from domain.services.offsets import get_z_offset

logger = logging.getLogger(__name__)


def make_mesh_edges_marker(
    header: Header,
    config: LayerConfig,
    visualizer_config: VisualizerConfig,
    mesh: Mesh | None,
    layer: SceneGraphLayer,
    ns: str,
) -> PrimitiveBatch:
    batch = make_batch(header, ns, MarkerKind.LINE_LIST, config.interlayer_edge_scale)
    if mesh is None:
        return batch

    z_offset = get_z_offset(config, visualizer_config)
    stride = config.interlayer_edge_insertion_skip + 1
    num_vertices = mesh.num_vertices()
    mesh_offset = 0.0 if visualizer_config.collapse_layers else visualizer_config.mesh_layer_offset

    for node in layer.nodes():
        attrs = node.attributes_as(Place2dNodeAttributes)
        if attrs is None or not attrs.pcl_mesh_connections:
            continue

        base_color = attrs.color if config.interlayer_edge_use_color else Color()
        color = make_color_msg(base_color, config.interlayer_edge_alpha)
        break_point = attrs.position.shifted(visualizer_config.mesh_edge_break_ratio * z_offset)
        batch.add_segment(attrs.position.shifted(z_offset), break_point, color)

        for count, mesh_index in enumerate(attrs.pcl_mesh_connections):
            if count % stride != 0:
                continue
            if mesh_index < 0 or mesh_index >= num_vertices:
                logger.debug(
                    "Node %s references mesh vertex %s outside of %s vertices.",
                    node.id,
                    mesh_index,
                    num_vertices,
                )
                continue
            batch.add_segment(break_point, mesh.pos(mesh_index).shifted(mesh_offset), color)

    return batch
