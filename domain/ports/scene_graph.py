from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Optional, Protocol

from domain.models import LayerId, NodeId, Point3, SceneGraphEdge, SceneGraphNode


class Mesh(Protocol):
    def num_vertices(self) -> int: ...

    def pos(self, index: int) -> Point3: ...


class SceneGraphLayer(Protocol):
    id: LayerId

    def nodes(self) -> Iterable[SceneGraphNode]: ...

    def edges(self) -> Sequence[SceneGraphEdge]: ...

    def num_nodes(self) -> int: ...

    def get_node(self, node_id: NodeId) -> SceneGraphNode: ...


class DynamicSceneGraphLayer(Protocol):
    id: LayerId
    prefix: str

    def nodes(self) -> Sequence[Optional[SceneGraphNode]]: ...

    def edges(self) -> Sequence[SceneGraphEdge]: ...

    def num_nodes(self) -> int: ...

    def get_position(self, node_id: NodeId) -> Point3: ...

    def get_position_by_index(self, index: int) -> Optional[Point3]: ...


class SceneGraph(Protocol):
    def layer_ids(self) -> Sequence[LayerId]: ...

    def get_layer(self, layer_id: LayerId) -> SceneGraphLayer: ...

    def dynamic_layers(self) -> Sequence[DynamicSceneGraphLayer]: ...

    def get_node(self, node_id: NodeId) -> SceneGraphNode: ...

    def is_dynamic(self, node_id: NodeId) -> bool: ...

    def interlayer_edges(self) -> Iterable[SceneGraphEdge]: ...

    def dynamic_interlayer_edges(self) -> Iterable[SceneGraphEdge]: ...

    def mesh(self) -> Optional[Mesh]: ...
