from __future__ import annotations

import math

import pytest
from pydantic import ValidationError

from domain.models import (
    BoundingBox,
    NodeAttributes,
    Place2dNodeAttributes,
    PlaceNodeAttributes,
    Point3,
    Quaternion,
    SceneGraphDocument,
    SceneGraphNode,
    SemanticNodeAttributes,
    Vector3,
)


def test_bounding_box_corners_follow_bit_encoding() -> None:
    bbox = BoundingBox(center=Point3(1.0, 2.0, 3.0), dimensions=Vector3(2.0, 4.0, 6.0))
    corners = bbox.corners()

    assert corners.shape == (3, 8)
    for index in range(8):
        expected = (
            2.0 if index & 0x01 else 0.0,
            4.0 if index & 0x02 else 0.0,
            6.0 if index & 0x04 else 0.0,
        )
        assert tuple(corners[:, index]) == pytest.approx(expected)


def test_bounding_box_corners_respect_orientation() -> None:
    half_turn = math.sqrt(0.5)
    bbox = BoundingBox(
        center=Point3(0.0, 0.0, 0.0),
        orientation=Quaternion(w=half_turn, z=half_turn),
        dimensions=Vector3(2.0, 4.0, 2.0),
    )
    corners = bbox.corners()

    # local +x maps to world +y after a quarter turn about z
    assert tuple(corners[:, 1]) == pytest.approx((2.0, 1.0, -1.0))
    assert tuple(corners[:, 2]) == pytest.approx((-2.0, -1.0, -1.0))


def test_attributes_as_returns_none_for_mismatched_kind() -> None:
    node = SceneGraphNode(id=1, layer=2, attributes=SemanticNodeAttributes(name="chair"))

    assert node.attributes_as(SemanticNodeAttributes) is not None
    assert node.attributes_as(NodeAttributes) is not None
    assert node.attributes_as(Place2dNodeAttributes) is None
    assert node.attributes_as(PlaceNodeAttributes) is None


def test_node_attributes_are_parsed_by_kind() -> None:
    node = SceneGraphNode.model_validate(
        {
            "id": 4,
            "layer": 3,
            "attributes": {
                "kind": "place_2d",
                "position": [1.0, 2.0, 3.0],
                "boundary": [[0.0, 0.0, 0.0], [1.0, 0.0, 0.0]],
                "ellipse_centroid": [0.5, 0.5],
            },
        }
    )

    attrs = node.attributes_as(Place2dNodeAttributes)
    assert attrs is not None
    assert attrs.position == Point3(1.0, 2.0, 3.0)
    assert attrs.boundary[1] == Point3(1.0, 0.0, 0.0)
    assert attrs.ellipse_centroid == Point3(0.5, 0.5, 0.0)


def test_node_attributes_default_to_generic_kind() -> None:
    node = SceneGraphNode.model_validate(
        {"id": 4, "layer": 3, "attributes": {"position": [1, 2, 3]}}
    )

    assert type(node.attributes) is NodeAttributes
    assert node.position == Point3(1.0, 2.0, 3.0)


def test_document_rejects_duplicate_node_ids() -> None:
    payload = {
        "nodes": [
            {"id": 1, "layer": 2},
            {"id": 1, "layer": 3},
        ],
    }
    with pytest.raises(ValidationError, match="Duplicate node id"):
        SceneGraphDocument.model_validate(payload)


def test_document_rejects_edges_to_unknown_nodes() -> None:
    payload = {
        "nodes": [{"id": 1, "layer": 2}],
        "edges": [{"source": 1, "target": 7}],
    }
    with pytest.raises(ValidationError, match="unknown node 7"):
        SceneGraphDocument.model_validate(payload)
