"""
Data model shared by the layout, analytics and filter engines.

The host owns these objects. The layout engine mutates only the geometry
fields (x, y, z, vx, vy, vz, fx, fy, fz) in place; analytics and filters
only read them.

Node and edge types are closed enumerations. Values arriving from
outside (JSON, older sessions) that do not match an enum member are kept
as raw strings so nothing fails on an unrecognised tag; every lookup
table keyed by type has a default for that case.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Union


class NodeType(str, Enum):
    AUTHOR = "author"
    BOOK = "book"
    GENRE = "genre"
    THEME = "theme"
    CHARACTER = "character"
    MOVEMENT = "movement"


class EdgeType(str, Enum):
    WROTE = "wrote"
    INFLUENCED = "influenced"
    BELONGS_TO = "belongs_to"
    FEATURES = "features"
    RELATED_TO = "related_to"
    PART_OF = "part_of"


def coerce_node_type(value: Union[str, NodeType]) -> Union[NodeType, str]:
    """Return the matching NodeType, or the raw string if none matches."""
    if isinstance(value, NodeType):
        return value
    try:
        return NodeType(str(value))
    except ValueError:
        return str(value)


def coerce_edge_type(value: Union[str, EdgeType]) -> Union[EdgeType, str]:
    if isinstance(value, EdgeType):
        return value
    try:
        return EdgeType(str(value))
    except ValueError:
        return str(value)


def type_name(value: Union[str, Enum]) -> str:
    return value.value if isinstance(value, Enum) else str(value)


# =========================================================================== #
# Metadata
# =========================================================================== #

# camelCase keys used by JSON sessions -> dataclass field names
_METADATA_ALIASES = {
    "imageUrl": "image_url",
    "openLibraryId": "open_library_id",
    "googleBooksId": "google_books_id",
    "aiInsight": "ai_insight",
    "publicationYear": "year",
    "publication_year": "year",
}


@dataclass
class NodeMetadata:
    """
    Typed per-node attributes.

    Books use year/series/isbn/authors, authors use description/image_url,
    and so on; anything without a dedicated field lands in ``extra``.
    """

    description: Optional[str] = None
    year: Optional[int] = None
    series: Optional[str] = None
    image_url: Optional[str] = None
    authors: List[str] = field(default_factory=list)
    genres: List[str] = field(default_factory=list)
    themes: List[str] = field(default_factory=list)
    isbn: Optional[str] = None
    open_library_id: Optional[str] = None
    google_books_id: Optional[str] = None
    ai_insight: Optional[str] = None
    popularity: Optional[float] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "NodeMetadata":
        if not data:
            return cls()
        known = {f.name for f in fields(cls)} - {"extra"}
        kwargs: Dict[str, Any] = {}
        extra: Dict[str, Any] = {}
        for key, value in data.items():
            name = _METADATA_ALIASES.get(key, key)
            if name in known:
                kwargs[name] = value
            else:
                extra[key] = value
        year = kwargs.get("year")
        if year is not None:
            try:
                kwargs["year"] = int(year)
            except (TypeError, ValueError):
                extra["year"] = year
                kwargs["year"] = None
        return cls(extra=extra, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "description": self.description,
            "year": self.year,
            "series": self.series,
            "imageUrl": self.image_url,
            "authors": list(self.authors),
            "genres": list(self.genres),
            "themes": list(self.themes),
            "isbn": self.isbn,
            "openLibraryId": self.open_library_id,
            "googleBooksId": self.google_books_id,
            "aiInsight": self.ai_insight,
            "popularity": self.popularity,
        }
        out = {k: v for k, v in out.items() if v not in (None, [])}
        out.update(self.extra)
        return out


# =========================================================================== #
# Nodes and edges
# =========================================================================== #

@dataclass(eq=False)
class Node:
    """
    A graph node. Identity is ``id``; equality is object identity so that
    the layout engine can hold the very objects the host renders.
    """

    id: str
    type: Union[NodeType, str]
    label: str
    depth: int = 0
    metadata: NodeMetadata = field(default_factory=NodeMetadata)
    expanded: bool = False

    # geometry (owned by the layout engine)
    x: Optional[float] = None
    y: Optional[float] = None
    z: Optional[float] = None
    vx: Optional[float] = None
    vy: Optional[float] = None
    vz: Optional[float] = None
    fx: Optional[float] = None
    fy: Optional[float] = None
    fz: Optional[float] = None

    def __post_init__(self) -> None:
        self.type = coerce_node_type(self.type)

    # ------------------------------------------------------------------ #
    @property
    def is_positioned(self) -> bool:
        return self.x is not None and self.y is not None

    @property
    def is_pinned(self) -> bool:
        return self.fx is not None or self.fy is not None

    @property
    def publication_year(self) -> Optional[int]:
        return self.metadata.year

    @property
    def series(self) -> Optional[str]:
        return self.metadata.series

    @property
    def description(self) -> Optional[str]:
        return self.metadata.description

    @property
    def image_url(self) -> Optional[str]:
        return self.metadata.image_url

    # ------------------------------------------------------------------ #
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Node":
        geometry = {
            k: data.get(k)
            for k in ("x", "y", "z", "vx", "vy", "vz", "fx", "fy", "fz")
        }
        return cls(
            id=str(data["id"]),
            type=data.get("type", ""),
            label=str(data.get("label", data["id"])),
            depth=int(data.get("depth", 0) or 0),
            metadata=NodeMetadata.from_dict(data.get("metadata")),
            expanded=bool(data.get("expanded", False)),
            **geometry,
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "id": self.id,
            "type": type_name(self.type),
            "label": self.label,
            "depth": self.depth,
            "metadata": self.metadata.to_dict(),
            "expanded": self.expanded,
        }
        for k in ("x", "y", "z", "vx", "vy", "vz", "fx", "fy", "fz"):
            value = getattr(self, k)
            if value is not None:
                out[k] = value
        return out


@dataclass
class Edge:
    id: str
    source: str
    target: str
    type: Union[EdgeType, str] = EdgeType.RELATED_TO
    strength: float = 0.5
    label: Optional[str] = None

    def __post_init__(self) -> None:
        self.type = coerce_edge_type(self.type)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Edge":
        return cls(
            id=str(data["id"]),
            source=str(data["source"]),
            target=str(data["target"]),
            type=data.get("type", EdgeType.RELATED_TO),
            strength=float(data["strength"] if data.get("strength") is not None else 0.5),
            label=data.get("label"),
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "id": self.id,
            "source": self.source,
            "target": self.target,
            "type": type_name(self.type),
            "strength": self.strength,
        }
        if self.label is not None:
            out["label"] = self.label
        return out


# =========================================================================== #
# Graph
# =========================================================================== #

@dataclass
class Graph:
    nodes: List[Node] = field(default_factory=list)
    edges: List[Edge] = field(default_factory=list)

    def node_index(self) -> Dict[str, Node]:
        return index_nodes(self.nodes)

    def valid_edges(self) -> List[Edge]:
        return list(iter_valid_edges(self.edges, self.node_index()))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Graph":
        return cls(
            nodes=[Node.from_dict(n) for n in data.get("nodes", [])],
            edges=[Edge.from_dict(e) for e in data.get("edges", [])],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "edges": [e.to_dict() for e in self.edges],
        }


def index_nodes(nodes) -> Dict[str, Node]:
    """Map id -> node; on duplicate ids the first occurrence wins."""
    index: Dict[str, Node] = {}
    for node in nodes:
        index.setdefault(node.id, node)
    return index


def iter_valid_edges(edges, index: Dict[str, Node]) -> Iterator[Edge]:
    """Yield edges whose endpoints both resolve; dangling edges are skipped."""
    for edge in edges:
        if edge.source in index and edge.target in index:
            yield edge
