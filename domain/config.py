from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class LayerConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    visualize: bool = True
    z_offset_scale: float = 0.0

    marker_scale: float = 0.1
    marker_alpha: float = 1.0
    use_sphere_marker: bool = True

    use_label: bool = False
    label_height: float = 1.0
    label_scale: float = 0.25
    add_label_jitter: bool = False
    label_jitter_scale: float = 0.2

    use_bounding_box: bool = False
    use_bounding_box_wireframe: bool = True
    collapse_bounding_box: bool = False
    bounding_box_alpha: float = 0.5
    bbox_wireframe_scale: float = 0.05
    bbox_wireframe_edge_scale: float = 0.01
    draw_edges_to_bounding_boxes: bool = False

    draw_boundaries: bool = False
    draw_boundary_ellipse: bool = False
    draw_boundary_edges: bool = False
    boundary_wireframe_scale: float = 0.05
    boundary_alpha: float = 0.5
    boundary_ellipse_alpha: float = 0.5
    boundary_use_node_color: bool = True
    collapse_boundary: bool = False

    draw_frontier_ellipse: bool = False
    draw_mesh_edges: bool = False

    use_edge_source: bool = True
    interlayer_edge_scale: float = 0.01
    interlayer_edge_alpha: float = 0.4
    interlayer_edge_use_color: bool = True
    interlayer_edge_insertion_skip: int = Field(default=0, ge=0)

    intralayer_edge_scale: float = 0.01
    intralayer_edge_alpha: float = 1.0
    intralayer_edge_insertion_skip: int = Field(default=0, ge=0)
    color_edges_by_weight: bool = False


class VisualizerConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    layer_z_step: float = 5.0
    collapse_layers: bool = False
    mesh_edge_break_ratio: float = 0.5
    mesh_layer_offset: float = 0.0
    color_places_by_distance: bool = False
    places_colormap_min_distance: float = 0.0
    places_colormap_max_distance: float = 2.5

    @property
    def colormap_range_is_valid(self) -> bool:
        return self.places_colormap_max_distance > self.places_colormap_min_distance


class DynamicLayerConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    visualize: bool = True
    z_offset_scale: float = 0.0
    node_scale: float = 0.2
    node_alpha: float = 0.9
    node_use_sphere: bool = False
    edge_scale: float = 0.05
    edge_alpha: float = 0.5
    label_scale: float = 0.5
    label_height: float = 1.0
    visualize_interlayer_edges: bool = False
    interlayer_edge_insertion_skip: int = Field(default=0, ge=0)


class ColormapConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    min_hue: float = 0.0
    max_hue: float = 0.45
    min_saturation: float = 0.9
    max_saturation: float = 0.9
    min_luminance: float = 0.45
    max_luminance: float = 0.45
