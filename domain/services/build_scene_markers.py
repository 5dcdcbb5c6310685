from __future__ import annotations

import logging
import random
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Optional

from domain.config import ColormapConfig, DynamicLayerConfig, LayerConfig, VisualizerConfig
from domain.models import (
    Color,
    Header,
    LayerId,
    MarkerKind,
    PlaceNodeAttributes,
    PrimitiveBatch,
    SemanticNodeAttributes,
)
from domain.ports.labels import LabelNameLookup
from domain.ports.scene_graph import SceneGraph, SceneGraphLayer
from domain.services.boundaries import (
    make_layer_ellipse_boundaries,
    make_layer_polygon_boundaries,
    make_layer_polygon_edges,
)
from domain.services.bounding_boxes import (
    make_bounding_box_marker,
    make_edges_to_bounding_boxes,
    make_layer_wireframe_bounding_boxes,
)
from domain.services.centroids import (
    make_centroid_markers,
    make_frontier_ellipsoid_markers,
    make_place_centroid_markers,
)
from domain.services.colors import (
    ColorFunction,
    distance_color_function,
    node_color,
)
from domain.services.dynamic_layers import (
    make_dynamic_centroid_markers_with_color,
    make_dynamic_edge_markers,
    make_dynamic_label_marker,
)
from domain.services.edges import (
    endpoint_edge_color,
    make_dynamic_graph_edge_markers,
    make_graph_edge_markers,
    make_layer_edge_markers,
    make_layer_edge_markers_with_colormap,
)
from domain.services.labels import make_text_marker, make_text_marker_no_height
from domain.services.mesh_edges import make_mesh_edges_marker

logger = logging.getLogger(__name__)

INTERLAYER_EDGE_PREFIX = "interlayer_edges_"
DYNAMIC_INTERLAYER_EDGE_PREFIX = "dynamic_interlayer_edges_"
DYNAMIC_LAYER_COLOR = Color(r=0, g=0, b=255)
_SOLID_KINDS = frozenset({MarkerKind.CUBE, MarkerKind.SPHERE})


def layer_namespace(layer_id: LayerId, feature: str) -> str:
    return f"layer{layer_id}_{feature}"


def dynamic_namespace(layer_id: LayerId, prefix: str, feature: str) -> str:
    return f"dynamic{layer_id}_{prefix}_{feature}"


@dataclass
class SceneMarkerBuilder:
    visualizer_config: VisualizerConfig
    layer_configs: Mapping[LayerId, LayerConfig] = field(default_factory=dict)
    dynamic_configs: Mapping[LayerId, DynamicLayerConfig] = field(default_factory=dict)
    colormap: ColormapConfig = field(default_factory=ColormapConfig)
    label_names: Optional[LabelNameLookup] = None
    rng: Optional[random.Random] = None

    def build(self, graph: SceneGraph, header: Optional[Header] = None) -> list[PrimitiveBatch]:
        header = header or Header()
        batches: list[PrimitiveBatch] = []

        for layer_id in graph.layer_ids():
            config = self.layer_configs.get(layer_id)
            if config is None or not config.visualize:
                continue
            batches.extend(self._build_layer(header, graph, graph.get_layer(layer_id), config))

        batches.extend(
            make_graph_edge_markers(
                header,
                graph,
                self.layer_configs,
                self.visualizer_config,
                INTERLAYER_EDGE_PREFIX,
            )
        )
        batches.extend(
            make_dynamic_graph_edge_markers(
                header,
                graph,
                self.layer_configs,
                self.dynamic_configs,
                self.visualizer_config,
                DYNAMIC_INTERLAYER_EDGE_PREFIX,
            )
        )
        batches.extend(self._build_dynamic_layers(header, graph))

        kept = [batch for batch in batches if _has_content(batch)]
        logger.debug("Built %s batches (%s empty dropped).", len(kept), len(batches) - len(kept))
        return kept

    def color_function(self, layer: SceneGraphLayer) -> ColorFunction:
        if self.visualizer_config.color_places_by_distance and _has_places(layer):
            return distance_color_function(self.visualizer_config, self.colormap)
        return node_color

    def _build_layer(
        self,
        header: Header,
        graph: SceneGraph,
        layer: SceneGraphLayer,
        config: LayerConfig,
    ) -> list[PrimitiveBatch]:
        vis = self.visualizer_config
        color_func = self.color_function(layer)
        ns = layer_namespace(layer.id, "centroids")
        if _has_places(layer):
            # frontiers are drawn as ellipsoids, not centroids
            batches = [
                make_place_centroid_markers(
                    header, config, layer, vis, ns, color_func, real_place=True
                )
            ]
        else:
            batches = [make_centroid_markers(header, config, layer, vis, ns, color_func)]

        if config.use_label:
            for node in layer.nodes():
                if self.label_names is not None:
                    batches.append(
                        make_text_marker_no_height(
                            header,
                            config,
                            node,
                            layer_namespace(layer.id, "labels"),
                            self.label_names,
                        )
                    )
                else:
                    batches.append(
                        make_text_marker(
                            header,
                            config,
                            node,
                            vis,
                            layer_namespace(layer.id, "labels"),
                            rng=self.rng,
                        )
                    )

        if config.use_bounding_box:
            ns = layer_namespace(layer.id, "bounding_boxes")
            if config.use_bounding_box_wireframe:
                batches.append(
                    make_layer_wireframe_bounding_boxes(header, config, layer, vis, ns, color_func)
                )
            else:
                batches.extend(
                    make_bounding_box_marker(header, config, node, vis, ns, color_func)
                    for node in layer.nodes()
                    if node.attributes_as(SemanticNodeAttributes) is not None
                )
            if config.draw_edges_to_bounding_boxes:
                batches.append(
                    make_edges_to_bounding_boxes(
                        header,
                        config,
                        layer,
                        vis,
                        layer_namespace(layer.id, "bounding_box_edges"),
                        color_func,
                    )
                )

        if config.draw_boundaries:
            ns = layer_namespace(layer.id, "boundaries")
            if config.draw_boundary_ellipse:
                batches.append(make_layer_ellipse_boundaries(header, config, layer, vis, ns))
            else:
                batches.append(make_layer_polygon_boundaries(header, config, layer, vis, ns))
            if config.draw_boundary_edges:
                batches.append(
                    make_layer_polygon_edges(
                        header, config, layer, vis, layer_namespace(layer.id, "boundary_edges")
                    )
                )

        if config.draw_frontier_ellipse:
            batches.extend(
                make_frontier_ellipsoid_markers(
                    header, config, layer, vis, layer_namespace(layer.id, "frontiers"), color_func
                )
            )

        edge_ns = layer_namespace(layer.id, "edges")
        if config.color_edges_by_weight:
            batches.append(
                make_layer_edge_markers_with_colormap(
                    header, config, layer, vis, self.colormap, edge_ns
                )
            )
        else:
            batches.append(
                make_layer_edge_markers(
                    header, config, layer, vis, edge_ns, endpoint_edge_color(color_func)
                )
            )

        if config.draw_mesh_edges:
            batches.append(
                make_mesh_edges_marker(
                    header,
                    config,
                    vis,
                    graph.mesh(),
                    layer,
                    layer_namespace(layer.id, "mesh_edges"),
                )
            )

        return batches

    def _build_dynamic_layers(self, header: Header, graph: SceneGraph) -> list[PrimitiveBatch]:
        batches: list[PrimitiveBatch] = []
        for layer in graph.dynamic_layers():
            config = self.dynamic_configs.get(layer.id)
            if config is None or not config.visualize or layer.num_nodes() == 0:
                continue
            vis = self.visualizer_config
            batches.append(
                make_dynamic_centroid_markers_with_color(
                    header,
                    config,
                    layer,
                    vis,
                    DYNAMIC_LAYER_COLOR,
                    dynamic_namespace(layer.id, layer.prefix, "nodes"),
                )
            )
            batches.append(
                make_dynamic_edge_markers(
                    header,
                    config,
                    layer,
                    vis,
                    DYNAMIC_LAYER_COLOR,
                    dynamic_namespace(layer.id, layer.prefix, "edges"),
                )
            )
            batches.append(
                make_dynamic_label_marker(
                    header, config, layer, vis, dynamic_namespace(layer.id, layer.prefix, "label")
                )
            )
        return batches


def _has_content(batch: PrimitiveBatch) -> bool:
    return bool(batch.points) or bool(batch.text) or batch.kind in _SOLID_KINDS


def _has_places(layer: SceneGraphLayer) -> bool:
    return any(node.attributes_as(PlaceNodeAttributes) is not None for node in layer.nodes())
