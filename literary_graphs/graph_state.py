"""
Snapshot container tying the analytics and filter engines together.

GraphState copies the host's node and edge lists on construction, so a
host that keeps mutating its own lists while a computation runs does
not disturb it. Node objects are shared (not deep-copied); analytics and
filters only read them.

Typical use, "stats over the filtered view":

    state = GraphState(host.nodes, host.edges)
    visible = state.filtered(criteria)
    stats = visible.stats()
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

import networkx as nx

from literary_db.utils.json_io import json_read, json_write

from .analytics import GraphStats, build_adjacency, calculate_graph_stats
from .events import EmitFn
from .filters import FilterCriterion, FilterStats, filter_nodes, get_filter_stats
from .model import Edge, Graph, Node, index_nodes, iter_valid_edges


@dataclass
class GraphState:
    nodes: List[Node] = field(default_factory=list)
    edges: List[Edge] = field(default_factory=list)
    emit: Optional[EmitFn] = None
    meta: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.nodes = list(self.nodes)
        self.edges = list(self.edges)

    @classmethod
    def from_graph(cls, graph: Graph, emit: Optional[EmitFn] = None) -> "GraphState":
        return cls(graph.nodes, graph.edges, emit=emit)

    # ------------------------------------------------------------------ #
    def valid_edges(self) -> List[Edge]:
        return list(iter_valid_edges(self.edges, index_nodes(self.nodes)))

    def to_networkx(self) -> nx.Graph:
        """Undirected graph over every node, with node and edge attributes attached."""
        G = build_adjacency(self.nodes, self.edges)
        for node in index_nodes(self.nodes).values():
            G.nodes[node.id].update(
                type=node.type, label=node.label, depth=node.depth
            )
        for edge in self.valid_edges():
            G.edges[edge.source, edge.target].update(
                id=edge.id, type=edge.type, weight=edge.strength
            )
        return G

    def stats(self) -> GraphStats:
        return calculate_graph_stats(self.nodes, self.edges, emit=self.emit)

    # ------------------------------------------------------------------ #
    def save(self, path: Union[str, Path]) -> Path:
        """Write nodes, edges (geometry included) and meta as one JSON session file."""
        dest = Path(path)
        payload = Graph(self.nodes, self.edges).to_dict()
        payload["meta"] = dict(self.meta)
        if not json_write(dest, payload):
            raise OSError(f"Could not write graph session to {dest}")
        return dest

    @classmethod
    def load(cls, path: Union[str, Path], emit: Optional[EmitFn] = None) -> "GraphState":
        data = json_read(Path(path))
        if not isinstance(data, dict):
            raise ValueError(f"No readable graph session at {path}")
        meta = data.get("meta") or {}
        if not isinstance(meta, dict):
            raise ValueError(f"Session meta must be an object in {path}")
        try:
            graph = Graph.from_dict(data)
        except (KeyError, TypeError, AttributeError) as exc:
            raise ValueError(f"Malformed graph session at {path}: {exc!r}") from exc
        return cls(graph.nodes, graph.edges, emit=emit, meta=dict(meta))

    # ------------------------------------------------------------------ #
    def subset(self, node_ids: Iterable[str]) -> "GraphState":
        """
        Sub-view over the given node ids. Edges are kept only when both
        endpoints stay visible.
        """
        keep = set(node_ids)
        nodes = [n for n in self.nodes if n.id in keep]
        edges = [e for e in self.edges if e.source in keep and e.target in keep]
        return GraphState(nodes, edges, emit=self.emit, meta=dict(self.meta))

    def filtered(self, criteria: Sequence[FilterCriterion]) -> "GraphState":
        visible = filter_nodes(self.nodes, criteria)
        return self.subset(n.id for n in visible)

    def filter_stats(self, criteria: Sequence[FilterCriterion]) -> FilterStats:
        return get_filter_stats(self.nodes, criteria)
