from __future__ import annotations

from typing import Union

from domain.config import DynamicLayerConfig, LayerConfig, VisualizerConfig
from domain.models import Pose

ZOffsetSource = Union[LayerConfig, DynamicLayerConfig, float]


def get_z_offset(source: ZOffsetSource, visualizer_config: VisualizerConfig) -> float:
    if visualizer_config.collapse_layers:
        return 0.0
    scale = source if isinstance(source, (int, float)) else source.z_offset_scale
    return float(scale) * visualizer_config.layer_z_step


def identity_pose() -> Pose:
    return Pose.identity()


def offset_pose(offset: float, collapse: bool = False) -> Pose:
    return identity_pose().shifted(0.0 if collapse else offset)
