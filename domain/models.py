from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Set, Tuple, TypeVar, Union

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

LayerId = int
NodeId = int

AttributesT = TypeVar("AttributesT", bound="NodeAttributes")


def _coerce_xyz(value: Any) -> Any:
    if isinstance(value, (list, tuple)) and len(value) == 3:
        return {"x": value[0], "y": value[1], "z": value[2]}
    return value


def _coerce_wxyz(value: Any) -> Any:
    if isinstance(value, (list, tuple)) and len(value) == 4:
        return {"w": value[0], "x": value[1], "y": value[2], "z": value[3]}
    return value


def _coerce_rgb(value: Any) -> Any:
    if isinstance(value, (list, tuple)) and len(value) == 3:
        return {"r": value[0], "g": value[1], "b": value[2]}
    return value


@dataclass(frozen=True)
class Point3:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def shifted(self, dz: float) -> Point3:
        return Point3(self.x, self.y, self.z + dz)

    def with_z(self, z: float) -> Point3:
        return Point3(self.x, self.y, z)

    def to_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=float)

    @classmethod
    def from_array(cls, values: Any) -> Point3:
        return cls(float(values[0]), float(values[1]), float(values[2]))


@dataclass(frozen=True)
class Vector3:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @classmethod
    def uniform(cls, value: float) -> Vector3:
        return cls(value, value, value)


@dataclass(frozen=True)
class Quaternion:
    w: float = 1.0
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @classmethod
    def identity(cls) -> Quaternion:
        return cls()

    def rotation_matrix(self) -> np.ndarray:
        q = np.array([self.w, self.x, self.y, self.z], dtype=float)
        norm = np.linalg.norm(q)
        if norm == 0.0:
            return np.eye(3)
        w, x, y, z = q / norm
        return np.array(
            [
                [1 - 2 * (y * y + z * z), 2 * (x * y - z * w), 2 * (x * z + y * w)],
                [2 * (x * y + z * w), 1 - 2 * (x * x + z * z), 2 * (y * z - x * w)],
                [2 * (x * z - y * w), 2 * (y * z + x * w), 1 - 2 * (x * x + y * y)],
            ]
        )


@dataclass(frozen=True)
class Pose:
    position: Point3 = field(default_factory=Point3)
    orientation: Quaternion = field(default_factory=Quaternion)

    @classmethod
    def identity(cls) -> Pose:
        return cls()

    def shifted(self, dz: float) -> Pose:
        return Pose(self.position.shifted(dz), self.orientation)


@dataclass(frozen=True)
class Color:
    r: int = 0
    g: int = 0
    b: int = 0


@dataclass(frozen=True)
class ColorRGBA:
    r: float = 0.0
    g: float = 0.0
    b: float = 0.0
    a: float = 0.0


@dataclass(frozen=True)
class BoundingBox:
    center: Point3 = field(default_factory=Point3)
    orientation: Quaternion = field(default_factory=Quaternion)
    dimensions: Vector3 = field(default_factory=Vector3)

    def corners(self) -> np.ndarray:
        """Return a 3x8 matrix of world-frame corners.

        Bit 0/1/2 of a column index selects the positive half-extent along the
        local x/y/z axis, so two corners share a wireframe edge iff their
        indices differ in exactly one bit.
        """
        half = np.array([self.dimensions.x, self.dimensions.y, self.dimensions.z]) / 2.0
        signs = np.array(
            [[1.0 if index & (1 << axis) else -1.0 for axis in range(3)] for index in range(8)]
        ).T
        local = signs * half[:, np.newaxis]
        rotated = self.orientation.rotation_matrix() @ local
        return rotated + self.center.to_array()[:, np.newaxis]


class NodeAttributes(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["generic"] = "generic"
    position: Point3 = Point3()
    orientation: Quaternion = Quaternion()

    @field_validator("position", mode="before")
    @classmethod
    def coerce_position(cls, value: Any) -> Any:
        return _coerce_xyz(value)

    @field_validator("orientation", mode="before")
    @classmethod
    def coerce_orientation(cls, value: Any) -> Any:
        return _coerce_wxyz(value)


class SemanticNodeAttributes(NodeAttributes):
    kind: Literal["semantic"] = "semantic"
    name: str = ""
    color: Color = Color()
    bounding_box: BoundingBox = BoundingBox()
    semantic_label: int = 0

    @field_validator("color", mode="before")
    @classmethod
    def coerce_color(cls, value: Any) -> Any:
        return _coerce_rgb(value)

    @field_validator("bounding_box", mode="before")
    @classmethod
    def coerce_bounding_box(cls, value: Any) -> Any:
        if not isinstance(value, dict):
            return value
        return {
            **value,
            "center": _coerce_xyz(value.get("center", Point3())),
            "orientation": _coerce_wxyz(value.get("orientation", Quaternion())),
            "dimensions": _coerce_xyz(value.get("dimensions", Vector3())),
        }


class PlaceNodeAttributes(SemanticNodeAttributes):
    kind: Literal["place"] = "place"
    distance: float = 0.0
    real_place: bool = True
    frontier_scale: Vector3 = Vector3()

    @field_validator("frontier_scale", mode="before")
    @classmethod
    def coerce_frontier_scale(cls, value: Any) -> Any:
        return _coerce_xyz(value)


class Place2dNodeAttributes(SemanticNodeAttributes):
    kind: Literal["place_2d"] = "place_2d"
    boundary: List[Point3] = Field(default_factory=list)
    ellipse_matrix_expand: Tuple[Tuple[float, float], Tuple[float, float]] = (
        (0.0, 0.0),
        (0.0, 0.0),
    )
    ellipse_centroid: Point3 = Point3()
    pcl_mesh_connections: List[int] = Field(default_factory=list)

    @field_validator("boundary", mode="before")
    @classmethod
    def coerce_boundary(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            return [_coerce_xyz(point) for point in value]
        return value

    @field_validator("ellipse_centroid", mode="before")
    @classmethod
    def coerce_ellipse_centroid(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple)) and len(value) == 2:
            return {"x": value[0], "y": value[1], "z": 0.0}
        return _coerce_xyz(value)


AnyNodeAttributes = Annotated[
    Union[
        Place2dNodeAttributes,
        PlaceNodeAttributes,
        SemanticNodeAttributes,
        NodeAttributes,
    ],
    Field(discriminator="kind"),
]


class SceneGraphNode(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: NodeId
    layer: LayerId
    attributes: AnyNodeAttributes = Field(default_factory=NodeAttributes)

    @field_validator("attributes", mode="before")
    @classmethod
    def default_attribute_kind(cls, value: Any) -> Any:
        if isinstance(value, dict) and "kind" not in value:
            return {**value, "kind": "generic"}
        return value

    @property
    def position(self) -> Point3:
        return self.attributes.position

    def attributes_as(self, kind: type[AttributesT]) -> Optional[AttributesT]:
        if isinstance(self.attributes, kind):
            return self.attributes
        return None


class SceneGraphEdge(BaseModel):
    model_config = ConfigDict(frozen=True)

    source: NodeId
    target: NodeId
    weight: float = 1.0


class DynamicLayerDocument(BaseModel):
    layer: LayerId
    prefix: str = "a"
    nodes: List[SceneGraphNode] = Field(default_factory=list)
    edges: List[SceneGraphEdge] = Field(default_factory=list)


class MeshDocument(BaseModel):
    vertices: List[Point3] = Field(default_factory=list)
    faces: List[Tuple[int, int, int]] = Field(default_factory=list)

    @field_validator("vertices", mode="before")
    @classmethod
    def coerce_vertices(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            return [_coerce_xyz(point) for point in value]
        return value


class SceneGraphDocument(BaseModel):
    layer_ids: List[LayerId] = Field(default_factory=list)
    nodes: List[SceneGraphNode] = Field(default_factory=list)
    edges: List[SceneGraphEdge] = Field(default_factory=list)
    dynamic_layers: List[DynamicLayerDocument] = Field(default_factory=list)
    mesh: Optional[MeshDocument] = None

    @model_validator(mode="after")
    def ensure_consistent_ids(self) -> SceneGraphDocument:
        seen: Set[NodeId] = set()
        all_nodes = list(self.nodes)
        for dynamic_layer in self.dynamic_layers:
            all_nodes.extend(dynamic_layer.nodes)
        for node in all_nodes:
            if node.id in seen:
                msg = f"Duplicate node id found: {node.id}"
                raise ValueError(msg)
            seen.add(node.id)

        all_edges = list(self.edges)
        for dynamic_layer in self.dynamic_layers:
            all_edges.extend(dynamic_layer.edges)
        for edge in all_edges:
            missing = [node_id for node_id in (edge.source, edge.target) if node_id not in seen]
            if missing:
                msg = f"Edge {edge.source} -> {edge.target} references unknown node {missing[0]}"
                raise ValueError(msg)
        return self


class MarkerKind(str, Enum):
    LINE_LIST = "line_list"
    SPHERE_LIST = "sphere_list"
    CUBE_LIST = "cube_list"
    CUBE = "cube"
    SPHERE = "sphere"
    TEXT_VIEW_FACING = "text_view_facing"


class MarkerAction(str, Enum):
    ADD = "add"
    DELETE = "delete"


@dataclass(frozen=True)
class Header:
    frame_id: str = "world"
    stamp: float = 0.0


@dataclass
class PrimitiveBatch:
    header: Header
    namespace: str
    id: int = 0
    kind: MarkerKind = MarkerKind.LINE_LIST
    action: MarkerAction = MarkerAction.ADD
    pose: Pose = field(default_factory=Pose)
    scale: Vector3 = field(default_factory=Vector3)
    color: ColorRGBA = field(default_factory=ColorRGBA)
    points: List[Point3] = field(default_factory=list)
    colors: List[ColorRGBA] = field(default_factory=list)
    text: str = ""

    @property
    def key(self) -> tuple[str, int]:
        return (self.namespace, self.id)

    @property
    def segment_count(self) -> int:
        return len(self.points) // 2 if self.kind == MarkerKind.LINE_LIST else 0

    def add_segment(
        self,
        start: Point3,
        end: Point3,
        start_color: ColorRGBA | None = None,
        end_color: ColorRGBA | None = None,
    ) -> None:
        self.points.append(start)
        self.points.append(end)
        if start_color is not None:
            self.colors.append(start_color)
            self.colors.append(end_color if end_color is not None else start_color)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "header": {"frame_id": self.header.frame_id, "stamp": self.header.stamp},
            "ns": self.namespace,
            "id": self.id,
            "type": self.kind.value,
            "action": self.action.value,
            "pose": {
                "position": _point_dict(self.pose.position),
                "orientation": {
                    "w": self.pose.orientation.w,
                    "x": self.pose.orientation.x,
                    "y": self.pose.orientation.y,
                    "z": self.pose.orientation.z,
                },
            },
            "scale": {"x": self.scale.x, "y": self.scale.y, "z": self.scale.z},
            "color": _color_dict(self.color),
            "points": [_point_dict(point) for point in self.points],
            "colors": [_color_dict(color) for color in self.colors],
            "text": self.text,
        }


def _point_dict(point: Point3) -> Dict[str, float]:
    return {"x": point.x, "y": point.y, "z": point.z}


def _color_dict(color: ColorRGBA) -> Dict[str, float]:
    return {"r": color.r, "g": color.g, "b": color.b, "a": color.a}
