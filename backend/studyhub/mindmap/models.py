from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Optional, Tuple


class MindMapParseError(ValueError):
    pass


@dataclass(frozen=True)
class MindMapNode:
    id: str
    label: str
    children: Tuple["MindMapNode", ...] = ()

    def to_dict(self) -> dict:
        payload: dict = {"id": self.id, "label": self.label}
        if self.children:
            payload["children"] = [child.to_dict() for child in self.children]
        return payload

    @classmethod
    def from_dict(cls, data: dict, path: str = "1") -> "MindMapNode":
        raw_children = data.get("children") if isinstance(data, dict) else None
        children = tuple(
            cls.from_dict(child, f"{path}.{idx + 1}")
            for idx, child in enumerate(raw_children or ())
            if isinstance(child, dict)
        )
        node_id = str(data.get("id") or "").strip() or path
        return cls(id=node_id, label=str(data.get("label") or ""), children=children)


@dataclass
class NodePosition:
    node: MindMapNode
    x: float
    y: float
    level: int
    parent_x: Optional[float] = None
    parent_y: Optional[float] = None

    def to_dict(self) -> dict:
        return {
            "id": self.node.id,
            "label": self.node.label,
            "x": self.x,
            "y": self.y,
            "level": self.level,
            "parent_x": self.parent_x,
            "parent_y": self.parent_y,
        }


@dataclass
class NodePosition3D:
    node: MindMapNode
    position: Tuple[float, float, float]
    level: int
    index: int
    parent_position: Optional[Tuple[float, float, float]] = None

    def to_dict(self) -> dict:
        return {
            "id": self.node.id,
            "label": self.node.label,
            "position": list(self.position),
            "level": self.level,
            "index": self.index,
            "parent_position": list(self.parent_position) if self.parent_position is not None else None,
        }


@dataclass
class Connector:
    node_id: str
    start: Tuple[float, float]
    control: Tuple[float, float]
    end: Tuple[float, float]

    def svg_path(self) -> str:
        return (
            f"M {self.start[0]:g} {self.start[1]:g} "
            f"Q {self.control[0]:g} {self.control[1]:g} "
            f"{self.end[0]:g} {self.end[1]:g}"
        )

    def to_dict(self) -> dict:
        return {"node_id": self.node_id, "path": self.svg_path()}


_FENCE_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```", re.IGNORECASE)


def _extract_json_dict(text: str) -> dict | None:
    text = (text or "").strip()
    if not text:
        return None

    try:
        parsed = json.loads(text)
        return parsed if isinstance(parsed, dict) else None
    except json.JSONDecodeError:
        pass

    fenced = _FENCE_RE.search(text)
    if fenced:
        try:
            parsed = json.loads(fenced.group(1))
            return parsed if isinstance(parsed, dict) else None
        except json.JSONDecodeError:
            pass

    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end != -1 and end > start:
        try:
            parsed = json.loads(text[start:end + 1])
            return parsed if isinstance(parsed, dict) else None
        except json.JSONDecodeError:
            return None

    return None


def parse_mind_map(content: str) -> MindMapNode:
    """Turn generator output (raw or fenced JSON) into a mind-map tree."""
    data = _extract_json_dict(content)
    if data is None:
        raise MindMapParseError("Failed to parse mind map response")
    if isinstance(data.get("mindMap"), dict):
        data = data["mindMap"]
    if not str(data.get("label") or "").strip():
        raise MindMapParseError("Mind map root has no label")
    return MindMapNode.from_dict(data)
