from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Optional

from domain.config import ColormapConfig, DynamicLayerConfig, LayerConfig, VisualizerConfig
from domain.models import (
    Color,
    Header,
    LayerId,
    MarkerKind,
    PrimitiveBatch,
    SceneGraphEdge,
    SceneGraphNode,
    SemanticNodeAttributes,
)
from domain.ports.scene_graph import SceneGraph, SceneGraphLayer
from domain.services.batches import make_batch
from domain.services.colors import (
    EdgeColorFunction,
    FilterFunction,
    edge_weight_color_function,
    make_color_msg,
)
from domain.services.offsets import get_z_offset

LayerPair = tuple[LayerId, LayerId]


@dataclass
class EdgeBatchRegistry:
    """Per-call edge batches keyed by layer pair, with insertion-skip counters."""

    header: Header
    ns_prefix: str
    batches: dict[LayerPair, PrimitiveBatch] = field(default_factory=dict)
    skipped: dict[LayerPair, int] = field(default_factory=dict)

    def namespace(self, key: LayerPair) -> str:
        return f"{self.ns_prefix}{key[0]}_{key[1]}"

    def admit(
        self,
        key: LayerPair,
        insertion_skip: int,
        scale: float,
    ) -> Optional[PrimitiveBatch]:
        if key not in self.batches:
            self.batches[key] = make_batch(
                self.header, self.namespace(key), MarkerKind.LINE_LIST, scale
            )
            # the first edge of every namespace is always drawn
            self.skipped[key] = insertion_skip

        if self.skipped[key] >= insertion_skip:
            self.skipped[key] = 0
            return self.batches[key]

        self.skipped[key] += 1
        return None

    def collect(self) -> list[PrimitiveBatch]:
        return [
            self.batches[key] for key in sorted(self.batches) if self.batches[key].points
        ]


def should_visualize(
    graph: SceneGraph,
    node: SceneGraphNode,
    configs: Mapping[LayerId, LayerConfig],
    dynamic_configs: Mapping[LayerId, DynamicLayerConfig],
) -> bool:
    if graph.is_dynamic(node.id):
        dynamic_config = dynamic_configs.get(node.layer)
        return (
            dynamic_config is not None
            and dynamic_config.visualize
            and dynamic_config.visualize_interlayer_edges
        )

    config = configs.get(node.layer)
    return config is not None and config.visualize


def get_config_layer(graph: SceneGraph, source: SceneGraphNode, target: SceneGraphNode) -> LayerId:
    return source.layer if graph.is_dynamic(source.id) else target.layer


def _node_z_offset(
    graph: SceneGraph,
    node: SceneGraphNode,
    configs: Mapping[LayerId, LayerConfig],
    dynamic_configs: Mapping[LayerId, DynamicLayerConfig],
    visualizer_config: VisualizerConfig,
) -> float:
    config = configs.get(node.layer)
    if config is None or graph.is_dynamic(node.id):
        dynamic_config = dynamic_configs.get(node.layer)
        if dynamic_config is not None:
            return get_z_offset(dynamic_config, visualizer_config)
    if config is None:
        return 0.0
    return get_z_offset(config, visualizer_config)


def interlayer_edge_color(
    config: LayerConfig, source: SceneGraphNode, target: SceneGraphNode
) -> Color:
    if not config.interlayer_edge_use_color:
        return Color()
    endpoint = source if config.use_edge_source else target
    attrs = endpoint.attributes_as(SemanticNodeAttributes)
    return attrs.color if attrs is not None else Color()


def make_graph_edge_markers(
    header: Header,
    graph: SceneGraph,
    configs: Mapping[LayerId, LayerConfig],
    visualizer_config: VisualizerConfig,
    ns_prefix: str,
    filter_func: Optional[FilterFunction] = None,
) -> list[PrimitiveBatch]:
    registry = EdgeBatchRegistry(header=header, ns_prefix=ns_prefix)

    for edge in graph.interlayer_edges():
        source = graph.get_node(edge.source)
        target = graph.get_node(edge.target)
        if filter_func is not None and (not filter_func(source) or not filter_func(target)):
            continue

        source_config = configs.get(source.layer)
        target_config = configs.get(target.layer)
        if source_config is None or target_config is None:
            continue
        if not source_config.visualize or not target_config.visualize:
            continue

        batch = registry.admit(
            (source.layer, target.layer),
            source_config.interlayer_edge_insertion_skip,
            source_config.interlayer_edge_scale,
        )
        if batch is None:
            continue

        # both endpoints share one color; interlayer edges reuse the intralayer alpha
        color = make_color_msg(
            interlayer_edge_color(source_config, source, target),
            source_config.intralayer_edge_alpha,
        )
        batch.add_segment(
            source.position.shifted(get_z_offset(source_config, visualizer_config)),
            target.position.shifted(get_z_offset(target_config, visualizer_config)),
            color,
        )

    return registry.collect()


def make_dynamic_graph_edge_markers(
    header: Header,
    graph: SceneGraph,
    configs: Mapping[LayerId, LayerConfig],
    dynamic_configs: Mapping[LayerId, DynamicLayerConfig],
    visualizer_config: VisualizerConfig,
    ns_prefix: str,
) -> list[PrimitiveBatch]:
    registry = EdgeBatchRegistry(header=header, ns_prefix=ns_prefix)

    for edge in graph.dynamic_interlayer_edges():
        source = graph.get_node(edge.source)
        target = graph.get_node(edge.target)
        if not should_visualize(graph, source, configs, dynamic_configs):
            continue
        if not should_visualize(graph, target, configs, dynamic_configs):
            continue

        dynamic_config = dynamic_configs.get(get_config_layer(graph, source, target))
        if dynamic_config is None:
            continue

        source_config = configs.get(source.layer)
        scale = (
            source_config.interlayer_edge_scale
            if source_config is not None
            else dynamic_config.edge_scale
        )
        key = (source.layer, target.layer)
        is_new = key not in registry.batches
        batch = registry.admit(key, dynamic_config.interlayer_edge_insertion_skip, scale)
        if is_new:
            registry.batches[key].color = make_color_msg(Color(), dynamic_config.edge_alpha)
        if batch is None:
            continue

        batch.add_segment(
            source.position.shifted(
                _node_z_offset(graph, source, configs, dynamic_configs, visualizer_config)
            ),
            target.position.shifted(
                _node_z_offset(graph, target, configs, dynamic_configs, visualizer_config)
            ),
        )

    return registry.collect()


def make_layer_edge_markers(
    header: Header,
    config: LayerConfig,
    layer: SceneGraphLayer,
    visualizer_config: VisualizerConfig,
    ns: str,
    color_func: EdgeColorFunction,
    filter_func: Optional[FilterFunction] = None,
) -> PrimitiveBatch:
    batch = make_batch(header, ns, MarkerKind.LINE_LIST, config.intralayer_edge_scale)
    z_offset = get_z_offset(config, visualizer_config)
    stride = config.intralayer_edge_insertion_skip + 1

    edges = list(layer.edges())
    index = 0
    while index < len(edges):
        edge = edges[index]
        source = layer.get_node(edge.source)
        target = layer.get_node(edge.target)
        if filter_func is not None and (not filter_func(source) or not filter_func(target)):
            index += 1
            continue

        batch.add_segment(
            source.position.shifted(z_offset),
            target.position.shifted(z_offset),
            make_color_msg(color_func(source, target, edge, True), config.intralayer_edge_alpha),
            make_color_msg(color_func(source, target, edge, False), config.intralayer_edge_alpha),
        )
        index += stride

    return batch


def fixed_edge_color(color: Color) -> EdgeColorFunction:
    def _color(
        _source: SceneGraphNode,
        _target: SceneGraphNode,
        _edge: SceneGraphEdge,
        _is_source: bool,
    ) -> Color:
        return color

    return _color


def endpoint_edge_color(node_color: Callable[[SceneGraphNode], Color]) -> EdgeColorFunction:
    def _color(
        source: SceneGraphNode,
        target: SceneGraphNode,
        _edge: SceneGraphEdge,
        is_source: bool,
    ) -> Color:
        return node_color(source if is_source else target)

    return _color


def make_layer_edge_markers_with_color(
    header: Header,
    config: LayerConfig,
    layer: SceneGraphLayer,
    visualizer_config: VisualizerConfig,
    color: Color,
    ns: str,
    filter_func: Optional[FilterFunction] = None,
) -> PrimitiveBatch:
    return make_layer_edge_markers(
        header, config, layer, visualizer_config, ns, fixed_edge_color(color), filter_func
    )


def make_layer_edge_markers_with_colormap(
    header: Header,
    config: LayerConfig,
    layer: SceneGraphLayer,
    visualizer_config: VisualizerConfig,
    colormap: ColormapConfig,
    ns: str,
    filter_func: Optional[FilterFunction] = None,
) -> PrimitiveBatch:
    return make_layer_edge_markers(
        header,
        config,
        layer,
        visualizer_config,
        ns,
        edge_weight_color_function(visualizer_config, colormap),
        filter_func,
    )
