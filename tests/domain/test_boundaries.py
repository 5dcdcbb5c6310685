from __future__ import annotations

import math
from collections.abc import Callable

import pytest

from adapters.memory.scene_graph import InMemoryLayer
from domain.config import LayerConfig, VisualizerConfig
from domain.models import Color, ColorRGBA, Header, MarkerKind, Point3
from domain.services.boundaries import (
    ELLIPSE_SAMPLES,
    make_layer_ellipse_boundaries,
    make_layer_polygon_boundaries,
    make_layer_polygon_edges,
)
from tests.helpers.scene_fixtures import (
    make_layer,
    place_2d_node,
    segments,
    semantic_node,
)

SQUARE = [(0.0, 0.0, 0.0), (2.0, 0.0, 0.0), (2.0, 2.0, 0.0), (0.0, 2.0, 0.0)]


def _mixed_layer() -> InMemoryLayer:
    return make_layer(
        4,
        [
            place_2d_node(1, 4, position=(0.0, 0.0, 1.0), boundary=[]),
            place_2d_node(2, 4, position=(0.0, 0.0, 1.0), boundary=[(1.0, 1.0, 0.0)]),
            place_2d_node(
                3,
                4,
                position=(1.0, 1.0, 1.0),
                boundary=SQUARE,
                ellipse_matrix=((2.0, 0.0), (0.0, 1.0)),
                ellipse_centroid=(1.0, 1.0, 0.0),
                color=Color(0, 0, 255),
            ),
        ],
    )


def test_ellipse_only_drawn_for_nodes_with_boundaries(
    header: Header, layer_config: LayerConfig, visualizer_config: VisualizerConfig
) -> None:
    batch = make_layer_ellipse_boundaries(
        header, layer_config, _mixed_layer(), visualizer_config, "boundaries"
    )

    assert batch.kind == MarkerKind.LINE_LIST
    assert batch.segment_count == ELLIPSE_SAMPLES
    assert len(batch.colors) == len(batch.points)
    assert set(batch.colors) == {ColorRGBA(0.0, 0.0, 1.0, layer_config.boundary_ellipse_alpha)}

    first = batch.points[0]
    assert (first.x, first.y, first.z) == pytest.approx((3.0, 1.0, 1.0))
    last = batch.points[-1]
    assert (last.x, last.y, last.z) == pytest.approx((3.0, 1.0, 1.0))


@pytest.mark.parametrize("num_samples", [4, 20, 33])
def test_ellipse_emits_samples_per_node(
    header: Header,
    layer_config: LayerConfig,
    visualizer_config: VisualizerConfig,
    num_samples: int,
) -> None:
    layer = make_layer(
        4,
        [place_2d_node(idx, 4, boundary=SQUARE) for idx in range(1, 4)],
    )
    batch = make_layer_ellipse_boundaries(
        header, layer_config, layer, visualizer_config, "boundaries", num_samples=num_samples
    )

    assert batch.segment_count == 3 * num_samples
    for start, end in segments(batch.points)[:num_samples]:
        # unit circle around the origin
        assert math.hypot(start.x, start.y) == pytest.approx(1.0)
        assert math.hypot(end.x, end.y) == pytest.approx(1.0)


def test_boundary_pose_offset_and_collapse(
    header: Header,
    layer_config_factory: Callable[..., LayerConfig],
    visualizer_config: VisualizerConfig,
) -> None:
    layer = _mixed_layer()
    raised = make_layer_polygon_boundaries(
        header, layer_config_factory(), layer, visualizer_config, "boundaries"
    )
    collapsed = make_layer_polygon_boundaries(
        header, layer_config_factory(collapse_boundary=True), layer, visualizer_config, "b"
    )

    assert raised.pose.position.z == 10.0
    assert collapsed.pose.position.z == 0.0
    assert raised.header == header
    assert raised.namespace == "boundaries"


def test_polygon_boundary_closes_the_loop(
    header: Header, layer_config: LayerConfig, visualizer_config: VisualizerConfig
) -> None:
    batch = make_layer_polygon_boundaries(
        header, layer_config, _mixed_layer(), visualizer_config, "boundaries"
    )

    pairs = segments(batch.points)
    assert len(pairs) == 4
    assert pairs[0] == (Point3(0.0, 2.0, 1.0), Point3(0.0, 0.0, 1.0))
    assert pairs[-1] == (Point3(2.0, 2.0, 1.0), Point3(0.0, 2.0, 1.0))
    assert batch.colors[0] == ColorRGBA(0.0, 0.0, 1.0, layer_config.boundary_alpha)


def test_polygon_boundary_default_color(
    header: Header,
    layer_config_factory: Callable[..., LayerConfig],
    visualizer_config: VisualizerConfig,
) -> None:
    config = layer_config_factory(boundary_use_node_color=False)
    batch = make_layer_polygon_boundaries(header, config, _mixed_layer(), visualizer_config, "b")

    assert set(batch.colors) == {ColorRGBA(0.0, 0.0, 0.0, config.boundary_alpha)}


def test_polygon_edges_connect_boundary_to_raised_centroid(
    header: Header, layer_config: LayerConfig, visualizer_config: VisualizerConfig
) -> None:
    batch = make_layer_polygon_edges(
        header, layer_config, _mixed_layer(), visualizer_config, "boundary_edges"
    )

    pairs = segments(batch.points)
    assert len(pairs) == len(SQUARE)
    assert {end for _, end in pairs} == {Point3(1.0, 1.0, 11.0)}
    assert [start for start, _ in pairs] == [Point3(x, y, 1.0) for x, y, _ in SQUARE]
    assert batch.pose.position.z == 0.0


def test_boundaries_skip_nodes_without_place_attributes(
    header: Header, layer_config: LayerConfig, visualizer_config: VisualizerConfig
) -> None:
    layer = make_layer(4, [semantic_node(1, 4), semantic_node(2, 4)])

    for builder in (
        make_layer_ellipse_boundaries,
        make_layer_polygon_boundaries,
        make_layer_polygon_edges,
    ):
        batch = builder(header, layer_config, layer, visualizer_config, "boundaries")
        assert batch.points == []
        assert batch.colors == []
