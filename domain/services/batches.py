from __future__ import annotations

from domain.models import Header, MarkerKind, Pose, PrimitiveBatch, Vector3
from domain.services.offsets import identity_pose


def make_batch(
    header: Header,
    namespace: str,
    kind: MarkerKind,
    scale: Vector3 | float,
    marker_id: int = 0,
    pose: Pose | None = None,
) -> PrimitiveBatch:
    if not isinstance(scale, Vector3):
        scale = Vector3(x=float(scale))
    return PrimitiveBatch(
        header=header,
        namespace=namespace,
        id=marker_id,
        kind=kind,
        pose=pose or identity_pose(),
        scale=scale,
    )


def point_list_kind(use_sphere: bool) -> MarkerKind:
    return MarkerKind.SPHERE_LIST if use_sphere else MarkerKind.CUBE_LIST
