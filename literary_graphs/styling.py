"""
Visual encodings for literary graph nodes.

This module defines the per-type lookup tables used by the layout engine
and by renderers:

  - size multipliers (authors and movements read larger than characters)
  - a fixed, distinguishing colour per type
  - screen-space anchors for the optional type-clustering force
  - the depth-aware radius function

Every lookup is total: an unrecognised type falls back to a neutral
default instead of failing.
"""

from __future__ import annotations

from typing import Dict, Tuple, Union

from .model import NodeType

# =============================================================================
# Lookup tables
# =============================================================================

TYPE_SIZE_MULTIPLIERS: Dict[NodeType, float] = {
    NodeType.AUTHOR: 1.3,
    NodeType.BOOK: 1.0,
    NodeType.GENRE: 1.1,
    NodeType.THEME: 0.9,
    NodeType.CHARACTER: 0.8,
    NodeType.MOVEMENT: 1.2,
}
DEFAULT_SIZE_MULTIPLIER = 1.0

TYPE_COLORS: Dict[NodeType, str] = {
    NodeType.AUTHOR: "#8b5cf6",
    NodeType.BOOK: "#3b82f6",
    NodeType.GENRE: "#10b981",
    NodeType.THEME: "#f59e0b",
    NodeType.CHARACTER: "#ef4444",
    NodeType.MOVEMENT: "#ec4899",
}
DEFAULT_COLOR = "#6b7280"

# fractions of (width, height)
TYPE_CLUSTER_ANCHORS: Dict[NodeType, Tuple[float, float]] = {
    NodeType.AUTHOR: (0.3, 0.3),
    NodeType.BOOK: (0.7, 0.3),
    NodeType.GENRE: (0.5, 0.7),
    NodeType.THEME: (0.5, 0.5),
    NodeType.CHARACTER: (0.2, 0.6),
    NodeType.MOVEMENT: (0.8, 0.6),
}
DEFAULT_CLUSTER_ANCHOR = (0.5, 0.5)


# =============================================================================
# Lookups
# =============================================================================

def _lookup(table: dict, node_type: Union[NodeType, str], default):
    if isinstance(node_type, NodeType):
        return table.get(node_type, default)
    try:
        return table.get(NodeType(node_type), default)
    except ValueError:
        return default


def type_multiplier(node_type: Union[NodeType, str]) -> float:
    return _lookup(TYPE_SIZE_MULTIPLIERS, node_type, DEFAULT_SIZE_MULTIPLIER)


def node_color(node_type: Union[NodeType, str]) -> str:
    return _lookup(TYPE_COLORS, node_type, DEFAULT_COLOR)


def cluster_anchor(
    node_type: Union[NodeType, str],
    width: float,
    height: float,
) -> Tuple[float, float]:
    fx, fy = _lookup(TYPE_CLUSTER_ANCHORS, node_type, DEFAULT_CLUSTER_ANCHOR)
    return width * fx, height * fy


def depth_multiplier(depth: int) -> float:
    """
    Closer-to-seed nodes render larger: 1.6 at depth 0, 1.0 at depth 3.
    Depths beyond 3 keep shrinking (and go negative past depth 8).
    """
    return 1.0 + (3 - depth) * 0.2


def node_radius(base_radius: float, node_type: Union[NodeType, str], depth: int) -> float:
    return base_radius * type_multiplier(node_type) * depth_multiplier(depth)


# =============================================================================
# Colour helpers
# =============================================================================

def hex_to_rgba(color: str, alpha: float = 1.0) -> Tuple[float, float, float, float]:
    """Convert '#rrggbb' (or '#rgb') to RGBA with all channels in [0,1]."""
    h = color.lstrip("#")
    if len(h) == 3:
        h = "".join(c * 2 for c in h)
    if len(h) != 6:
        raise ValueError(f"Not a hex colour: {color!r}")
    r = int(h[0:2], 16) / 255.0
    g = int(h[2:4], 16) / 255.0
    b = int(h[4:6], 16) / 255.0
    return float(r), float(g), float(b), float(alpha)
