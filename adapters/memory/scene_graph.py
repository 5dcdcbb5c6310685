from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from domain.models import (
    LayerId,
    MeshDocument,
    NodeId,
    Point3,
    SceneGraphDocument,
    SceneGraphEdge,
    SceneGraphNode,
)


@dataclass
class InMemoryMesh:
    vertices: List[Point3] = field(default_factory=list)

    def num_vertices(self) -> int:
        return len(self.vertices)

    def pos(self, index: int) -> Point3:
        return self.vertices[index]


@dataclass
class InMemoryLayer:
    id: LayerId
    _nodes: Dict[NodeId, SceneGraphNode] = field(default_factory=dict)
    _edges: List[SceneGraphEdge] = field(default_factory=list)

    def add_node(self, node: SceneGraphNode) -> None:
        self._nodes[node.id] = node

    def add_edge(self, edge: SceneGraphEdge) -> None:
        self._edges.append(edge)

    def nodes(self) -> Iterable[SceneGraphNode]:
        return list(self._nodes.values())

    def edges(self) -> Sequence[SceneGraphEdge]:
        return list(self._edges)

    def num_nodes(self) -> int:
        return len(self._nodes)

    def has_node(self, node_id: NodeId) -> bool:
        return node_id in self._nodes

    def get_node(self, node_id: NodeId) -> SceneGraphNode:
        return self._nodes[node_id]


@dataclass
class InMemoryDynamicLayer:
    id: LayerId
    prefix: str = "a"
    _nodes: List[Optional[SceneGraphNode]] = field(default_factory=list)
    _index: Dict[NodeId, int] = field(default_factory=dict)
    _edges: List[SceneGraphEdge] = field(default_factory=list)

    def add_node(self, node: Optional[SceneGraphNode]) -> None:
        if node is not None:
            self._index[node.id] = len(self._nodes)
        self._nodes.append(node)

    def add_edge(self, edge: SceneGraphEdge) -> None:
        self._edges.append(edge)

    def nodes(self) -> Sequence[Optional[SceneGraphNode]]:
        return list(self._nodes)

    def edges(self) -> Sequence[SceneGraphEdge]:
        return list(self._edges)

    def num_nodes(self) -> int:
        return len(self._nodes)

    def has_node(self, node_id: NodeId) -> bool:
        return node_id in self._index

    def get_node(self, node_id: NodeId) -> SceneGraphNode:
        node = self._nodes[self._index[node_id]]
        assert node is not None
        return node

    def get_position(self, node_id: NodeId) -> Point3:
        return self.get_node(node_id).position

    def get_position_by_index(self, index: int) -> Optional[Point3]:
        if index < 0 or index >= len(self._nodes):
            return None
        node = self._nodes[index]
        return node.position if node is not None else None


class InMemorySceneGraph:
    def __init__(self, layer_ids: Iterable[LayerId] = ()) -> None:
        self._layers: Dict[LayerId, InMemoryLayer] = {}
        self._dynamic_layers: Dict[tuple[LayerId, str], InMemoryDynamicLayer] = {}
        self._interlayer_edges: List[SceneGraphEdge] = []
        self._dynamic_interlayer_edges: List[SceneGraphEdge] = []
        self._mesh: Optional[InMemoryMesh] = None
        for layer_id in layer_ids:
            self._layers[layer_id] = InMemoryLayer(id=layer_id)

    @classmethod
    def from_document(cls, document: SceneGraphDocument) -> InMemorySceneGraph:
        graph = cls(document.layer_ids)
        for node in document.nodes:
            graph.add_node(node)
        for dynamic_layer in document.dynamic_layers:
            layer = graph.add_dynamic_layer(dynamic_layer.layer, dynamic_layer.prefix)
            for node in dynamic_layer.nodes:
                layer.add_node(node)
            for edge in dynamic_layer.edges:
                layer.add_edge(edge)
        for edge in document.edges:
            graph.add_edge(edge)
        if document.mesh is not None:
            graph.set_mesh(document.mesh)
        return graph

    def add_node(self, node: SceneGraphNode) -> None:
        layer = self._layers.setdefault(node.layer, InMemoryLayer(id=node.layer))
        layer.add_node(node)

    def add_dynamic_layer(self, layer_id: LayerId, prefix: str = "a") -> InMemoryDynamicLayer:
        return self._dynamic_layers.setdefault(
            (layer_id, prefix), InMemoryDynamicLayer(id=layer_id, prefix=prefix)
        )

    def add_edge(self, edge: SceneGraphEdge) -> None:
        source = self.get_node(edge.source)
        target = self.get_node(edge.target)
        source_dynamic = self.is_dynamic(source.id)
        target_dynamic = self.is_dynamic(target.id)
        if source_dynamic and target_dynamic:
            source_layer = self._dynamic_layer_of(source.id)
            # agents sharing a layer id but not a prefix are separate trajectories
            if source_layer is self._dynamic_layer_of(target.id):
                source_layer.add_edge(edge)
            else:
                self._dynamic_interlayer_edges.append(edge)
        elif source_dynamic or target_dynamic:
            self._dynamic_interlayer_edges.append(edge)
        elif source.layer == target.layer:
            self._layers[source.layer].add_edge(edge)
        else:
            self._interlayer_edges.append(edge)

    def set_mesh(self, mesh: Optional[MeshDocument]) -> None:
        self._mesh = InMemoryMesh(vertices=list(mesh.vertices)) if mesh is not None else None

    def layer_ids(self) -> Sequence[LayerId]:
        return sorted(self._layers)

    def get_layer(self, layer_id: LayerId) -> InMemoryLayer:
        return self._layers[layer_id]

    def dynamic_layers(self) -> Sequence[InMemoryDynamicLayer]:
        return [self._dynamic_layers[key] for key in sorted(self._dynamic_layers)]

    def get_node(self, node_id: NodeId) -> SceneGraphNode:
        for layer in self._layers.values():
            if layer.has_node(node_id):
                return layer.get_node(node_id)
        return self._dynamic_layer_of(node_id).get_node(node_id)

    def is_dynamic(self, node_id: NodeId) -> bool:
        return any(layer.has_node(node_id) for layer in self._dynamic_layers.values())

    def interlayer_edges(self) -> Iterable[SceneGraphEdge]:
        return list(self._interlayer_edges)

    def dynamic_interlayer_edges(self) -> Iterable[SceneGraphEdge]:
        return list(self._dynamic_interlayer_edges)

    def mesh(self) -> Optional[InMemoryMesh]:
        return self._mesh

    def _dynamic_layer_of(self, node_id: NodeId) -> InMemoryDynamicLayer:
        for layer in self._dynamic_layers.values():
            if layer.has_node(node_id):
                return layer
        msg = f"Unknown node id: {node_id}"
        raise KeyError(msg)
