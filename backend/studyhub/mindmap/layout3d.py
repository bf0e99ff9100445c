from __future__ import annotations

import math
from typing import Optional

from studyhub.mindmap.models import MindMapNode, NodePosition3D

RING_RADIUS = 4.0
LEVEL_HEIGHT = 1.5
BASE_HEIGHT = -2.0
ANGLE_SPREAD = math.pi * 1.5
SIBLING_OFFSET = 0.3

Vector3 = tuple[float, float, float]


def _place(
    node: MindMapNode,
    level: int,
    index: int,
    parent_position: Optional[Vector3],
    angle_offset: float,
    total_siblings: int,
    out: list[NodePosition3D],
) -> None:
    if level == 0:
        position: Vector3 = (0.0, 0.0, 0.0)
    else:
        radius = level * RING_RADIUS
        start_angle = -ANGLE_SPREAD / 2
        angle_step = ANGLE_SPREAD / (total_siblings - 1) if total_siblings > 1 else 0.0
        angle = start_angle + angle_step * index + angle_offset
        position = (
            math.sin(angle) * radius,
            level * LEVEL_HEIGHT + BASE_HEIGHT,
            math.cos(angle) * radius,
        )

    out.append(
        NodePosition3D(
            node=node,
            position=position,
            level=level,
            index=index,
            parent_position=parent_position,
        )
    )

    children = node.children or ()
    center = (len(children) - 1) / 2
    for idx, child in enumerate(children):
        _place(
            child,
            level + 1,
            idx,
            position,
            angle_offset + (idx - center) * SIBLING_OFFSET,
            len(children),
            out,
        )


def layout_radial_3d(root: MindMapNode) -> list[NodePosition3D]:
    """Fan the tree out on stacked rings for the 3D view, root at the origin."""
    positions: list[NodePosition3D] = []
    _place(root, 0, 0, None, 0.0, 1, positions)
    return positions
