from studyhub.mindmap.layout import build_connectors, display_label, layout_radial
from studyhub.mindmap.layout3d import layout_radial_3d
from studyhub.mindmap.models import MindMapNode, MindMapParseError, NodePosition, parse_mind_map

__all__ = [
    "MindMapNode",
    "MindMapParseError",
    "NodePosition",
    "build_connectors",
    "display_label",
    "layout_radial",
    "layout_radial_3d",
    "parse_mind_map",
]
