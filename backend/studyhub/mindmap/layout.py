from __future__ import annotations

import math
from typing import Optional, Sequence

from core.config import MINDMAP_RADIUS_STEP
from studyhub.mindmap.models import Connector, MindMapNode, NodePosition

FULL_CIRCLE = 2 * math.pi
TOP_ANGLE = -math.pi / 2
# Share of the parent's arc given to its children below the first ring.
CHILD_SPAN_RATIO = 0.8


def _place(
    node: MindMapNode,
    center_x: float,
    center_y: float,
    radius_step: float,
    level: int,
    angle_start: float,
    angle_end: float,
    parent_x: Optional[float],
    parent_y: Optional[float],
    out: list[NodePosition],
) -> None:
    if level == 0:
        x, y = center_x, center_y
    else:
        radius = level * radius_step
        angle = (angle_start + angle_end) / 2
        x = center_x + math.cos(angle) * radius
        y = center_y + math.sin(angle) * radius

    out.append(NodePosition(node=node, x=x, y=y, level=level, parent_x=parent_x, parent_y=parent_y))

    children = node.children or ()
    if not children:
        return

    if level == 0:
        span = FULL_CIRCLE
        first = TOP_ANGLE
    else:
        span = (angle_end - angle_start) * CHILD_SPAN_RATIO
        first = angle_start + (angle_end - angle_start - span) / 2

    step = span / len(children)
    for idx, child in enumerate(children):
        _place(
            child,
            center_x,
            center_y,
            radius_step,
            level + 1,
            first + step * idx,
            first + step * (idx + 1),
            x,
            y,
            out,
        )


def layout_radial(
    root: MindMapNode,
    center_x: float,
    center_y: float,
    radius_step: float = MINDMAP_RADIUS_STEP,
) -> list[NodePosition]:
    """Place every node of the tree on concentric rings around the center.

    The root sits on the center; first-level children share the full circle
    starting from the top, deeper children share the middle 80% of their
    parent's arc. Output is depth-first, root first; consumers should key
    positions by node id.
    """
    positions: list[NodePosition] = []
    _place(root, float(center_x), float(center_y), float(radius_step), 0, 0.0, FULL_CIRCLE, None, None, positions)
    return positions


def build_connectors(positions: Sequence[NodePosition], control_offset: float = 20.0) -> list[Connector]:
    connectors: list[Connector] = []
    for pos in positions:
        if pos.parent_x is None or pos.parent_y is None:
            continue
        mid_x = (pos.x + pos.parent_x) / 2
        mid_y = (pos.y + pos.parent_y) / 2
        connectors.append(
            Connector(
                node_id=pos.node.id,
                start=(pos.parent_x, pos.parent_y),
                control=(mid_x, mid_y - control_offset),
                end=(pos.x, pos.y),
            )
        )
    return connectors


def display_label(label: str, max_chars: int = 15) -> str:
    text = str(label or "")
    if len(text) > max_chars:
        return text[:max_chars] + "..."
    return text
