from fastapi import APIRouter, HTTPException

from studyhub.mindmap import (
    MindMapNode,
    MindMapParseError,
    build_connectors,
    display_label,
    layout_radial,
    layout_radial_3d,
    parse_mind_map,
)
from studyhub.schemas import MindMapLayoutRequest
from studyhub.system_metrics import increment_metric

router = APIRouter(prefix="/api/mindmap")


def _resolve_tree(body: MindMapLayoutRequest) -> MindMapNode:
    if body.mind_map is not None:
        data = body.mind_map.get("mindMap") if isinstance(body.mind_map.get("mindMap"), dict) else body.mind_map
        if not str(data.get("label") or "").strip():
            raise HTTPException(status_code=400, detail="Mind map root has no label")
        return MindMapNode.from_dict(data)
    if body.content:
        try:
            return parse_mind_map(body.content)
        except MindMapParseError as exc:
            raise HTTPException(status_code=400, detail=str(exc))
    raise HTTPException(status_code=400, detail="Provide mind_map or content")


@router.post("/layout")
def mind_map_layout(body: MindMapLayoutRequest):
    root = _resolve_tree(body)

    if body.mode == "3d":
        positions = layout_radial_3d(root)
        payload = {"mode": "3d", "positions": [pos.to_dict() for pos in positions]}
    else:
        positions = layout_radial(root, body.center_x, body.center_y)
        payload = {
            "mode": "2d",
            "positions": [
                dict(pos.to_dict(), display_label=display_label(pos.node.label))
                for pos in positions
            ],
            "connectors": [connector.to_dict() for connector in build_connectors(positions)],
        }

    increment_metric("mind_map_layouts")
    increment_metric("mind_map_nodes_placed", len(positions))
    return payload
