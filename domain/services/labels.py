from __future__ import annotations

import logging
import random
import re
from typing import Optional

from domain.config import LayerConfig, VisualizerConfig
from domain.models import (
    Color,
    Header,
    MarkerAction,
    MarkerKind,
    Pose,
    PrimitiveBatch,
    SceneGraphNode,
    SemanticNodeAttributes,
    Vector3,
)
from domain.node_symbol import node_label
from domain.ports.labels import LabelNameLookup
from domain.services.batches import make_batch
from domain.services.colors import make_color_msg
from domain.services.offsets import get_z_offset

logger = logging.getLogger(__name__)

UNKNOWN_LABEL = "Unknown"
_OBJECT_INDEX_PATTERN = re.compile(r"O\((\d+)\)")
_DEFAULT_RNG = random.Random()


def make_delete_marker(header: Header, marker_id: int, ns: str) -> PrimitiveBatch:
    return PrimitiveBatch(header=header, namespace=ns, id=marker_id, action=MarkerAction.DELETE)


def node_display_name(node: SceneGraphNode) -> str:
    attrs = node.attributes_as(SemanticNodeAttributes)
    name = attrs.name if attrs is not None else ""
    return name or node_label(node.id)


def _text_batch(
    header: Header, config: LayerConfig, node: SceneGraphNode, ns: str, text: str
) -> PrimitiveBatch:
    batch = make_batch(
        header,
        ns,
        MarkerKind.TEXT_VIEW_FACING,
        Vector3(z=config.label_scale),
        marker_id=node.id,
    )
    batch.text = text
    batch.color = make_color_msg(Color())
    return batch


def make_text_marker(
    header: Header,
    config: LayerConfig,
    node: SceneGraphNode,
    visualizer_config: VisualizerConfig,
    ns: str,
    rng: Optional[random.Random] = None,
) -> PrimitiveBatch:
    batch = _text_batch(header, config, node, ns, node_display_name(node))
    height = get_z_offset(config, visualizer_config) + config.label_height
    if config.add_label_jitter:
        height += config.label_jitter_scale * (rng or _DEFAULT_RNG).uniform(-1.0, 1.0)
    batch.pose = Pose(position=node.position.shifted(height))
    return batch


def extract_unique_id(name: str) -> str:
    match = _OBJECT_INDEX_PATTERN.search(name)
    if match is None:
        logger.debug("Could not extract number from name: %s", name)
        return name
    return match.group(1)


def make_text_marker_no_height(
    header: Header,
    config: LayerConfig,
    node: SceneGraphNode,
    ns: str,
    label_names: LabelNameLookup,
) -> PrimitiveBatch:
    """Label a node as ``"<semantic name>(<object index>)"`` without layer offset.

    The display name comes from ``label_names``; the resolved name is recorded
    back through the same lookup so other consumers can reuse it.
    """
    attrs = node.attributes_as(SemanticNodeAttributes)
    semantic_label = attrs.semantic_label if attrs is not None else 0
    unique_id = extract_unique_id(attrs.name if attrs is not None else "")

    label_text = label_names.name_for(semantic_label) or UNKNOWN_LABEL
    label_names.record(unique_id, label_text)

    batch = _text_batch(header, config, node, ns, f"{label_text}({unique_id})")
    batch.pose = Pose(position=node.position.shifted(config.label_height))
    return batch
