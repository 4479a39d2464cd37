"""
Graph analytics for literary exploration graphs.

Pure, read-only statistics over a (nodes, edges) snapshot:
  - node counts by type and by content completeness
  - per-node connection counts and most/least connected rankings
  - connectivity: average degree, density, connected clusters, isolates
  - content: series distribution, top themes, top authors
  - temporal: publication year span and per-decade histogram

Positions are irrelevant here; the layout engine may be running while
these are computed. Every function is total: an empty graph yields
zeros and empty lists, and every ratio is guarded against a zero
denominator. Edges that reference unknown nodes never contribute a
counter or a neighbour for the missing endpoint.
"""

from __future__ import annotations

import logging
import math
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

import networkx as nx

from .events import EmitFn, log_event
from .model import Edge, Node, NodeType, index_nodes, iter_valid_edges, type_name

logger = logging.getLogger(__name__)

RANKING_SIZE = 5
CONTENT_TOP_N = 10


# =========================================================================== #
# Data classes
# =========================================================================== #

@dataclass
class NodeStats:
    total: int = 0
    by_type: Dict[str, int] = field(default_factory=dict)
    with_images: int = 0
    with_descriptions: int = 0
    with_series: int = 0


@dataclass
class ConnectionRank:
    node_id: str
    label: str
    connections: int


@dataclass
class EdgeStats:
    total: int = 0
    average_connections: float = 0.0
    most_connected: List[ConnectionRank] = field(default_factory=list)
    least_connected: List[ConnectionRank] = field(default_factory=list)


@dataclass
class ConnectivityStats:
    average_degree: float = 0.0
    density: float = 0.0
    clusters: int = 0
    isolated_nodes: int = 0


@dataclass
class SeriesCount:
    series: str
    count: int


@dataclass
class ThemeRank:
    theme: str
    connections: int


@dataclass
class AuthorRank:
    author: str
    books: int


@dataclass
class ContentStats:
    total_series: int = 0
    series_distribution: List[SeriesCount] = field(default_factory=list)
    top_themes: List[ThemeRank] = field(default_factory=list)
    top_authors: List[AuthorRank] = field(default_factory=list)


@dataclass
class DecadeCount:
    decade: str
    count: int


@dataclass
class TemporalStats:
    earliest_year: Optional[int] = None
    latest_year: Optional[int] = None
    year_range: int = 0
    books_per_decade: List[DecadeCount] = field(default_factory=list)


@dataclass
class GraphStats:
    nodes: NodeStats
    edges: EdgeStats
    connectivity: ConnectivityStats
    content: ContentStats
    temporal: TemporalStats


# =========================================================================== #
# Helpers
# =========================================================================== #

NodesArg = Union[Sequence[Node], Mapping[str, Node]]


def _round_half_up(value: float, digits: int) -> float:
    scale = 10 ** digits
    return math.floor(value * scale + 0.5) / scale


def _ratio(num: float, den: float) -> float:
    return num / den if den > 0 else 0.0


def snapshot(nodes: NodesArg, edges: Iterable[Edge]) -> Tuple[List[Node], List[Edge]]:
    """
    Take a stable copy of the inputs for the duration of one call.
    Accepts a node sequence or an id -> node mapping. Duplicate ids keep
    the first occurrence.
    """
    node_list = list(nodes.values()) if isinstance(nodes, Mapping) else list(nodes)
    return list(index_nodes(node_list).values()), list(edges)


def build_adjacency(nodes: Sequence[Node], edges: Iterable[Edge]) -> nx.Graph:
    """
    Undirected adjacency over every node id. Disconnected nodes are
    present with no neighbours; dangling edges are left out.
    """
    G = nx.Graph()
    G.add_nodes_from(n.id for n in nodes)
    index = index_nodes(nodes)
    G.add_edges_from((e.source, e.target) for e in iter_valid_edges(edges, index))
    return G


def count_components(G: nx.Graph) -> int:
    """
    Number of connected components: one depth-first traversal is launched
    from every node not yet visited, and every node is visited exactly once.
    """
    visited = set()
    clusters = 0
    for root in G.nodes:
        if root in visited:
            continue
        clusters += 1
        visited.add(root)
        stack = [root]
        while stack:
            current = stack.pop()
            for neighbor in G.adj[current]:
                if neighbor not in visited:
                    visited.add(neighbor)
                    stack.append(neighbor)
    return clusters


def _connection_counts(index: Mapping[str, Node], edges: Iterable[Edge]) -> Dict[str, int]:
    """Per-node count of incident edges, in first-seen order. Unknown endpoints are skipped."""
    counts: Dict[str, int] = {}
    for edge in edges:
        for endpoint in (edge.source, edge.target):
            if endpoint in index:
                counts[endpoint] = counts.get(endpoint, 0) + 1
    return counts


# =========================================================================== #
# Section calculators
# =========================================================================== #

def calculate_node_stats(nodes: Sequence[Node]) -> NodeStats:
    by_type = {t.value: 0 for t in NodeType}
    for node in nodes:
        key = type_name(node.type)
        by_type[key] = by_type.get(key, 0) + 1

    return NodeStats(
        total=len(nodes),
        by_type=by_type,
        with_images=sum(1 for n in nodes if n.image_url),
        with_descriptions=sum(1 for n in nodes if n.description),
        with_series=sum(1 for n in nodes if n.series),
    )


def calculate_edge_stats(index: Mapping[str, Node], edges: Sequence[Edge]) -> EdgeStats:
    counts = _connection_counts(index, edges)

    # stable sort: ties keep first-seen order
    ranked = sorted(
        (
            ConnectionRank(node_id=nid, label=index[nid].label or nid, connections=c)
            for nid, c in counts.items()
        ),
        key=lambda r: r.connections,
        reverse=True,
    )
    average = _ratio(sum(counts.values()), len(counts))

    return EdgeStats(
        total=len(edges),
        average_connections=_round_half_up(average, 1),
        most_connected=ranked[:RANKING_SIZE],
        least_connected=list(reversed(ranked[-RANKING_SIZE:])),
    )


def calculate_connectivity_stats(nodes: Sequence[Node], edges: Sequence[Edge]) -> ConnectivityStats:
    G = build_adjacency(nodes, edges)
    n = G.number_of_nodes()
    valid_edges = sum(1 for _ in iter_valid_edges(edges, index_nodes(nodes)))

    total_degree = sum(len(G.adj[v]) for v in G.nodes)
    max_edges = n * (n - 1) / 2

    return ConnectivityStats(
        average_degree=_round_half_up(_ratio(total_degree, n), 1),
        density=_round_half_up(_ratio(valid_edges, max_edges), 3),
        clusters=count_components(G),
        isolated_nodes=sum(1 for v in G.nodes if len(G.adj[v]) == 0),
    )


def calculate_content_stats(nodes: Sequence[Node], edges: Sequence[Edge]) -> ContentStats:
    index = index_nodes(nodes)

    series_counts = Counter(n.series for n in nodes if n.series)
    series_distribution = sorted(
        (SeriesCount(series=s, count=c) for s, c in series_counts.items()),
        key=lambda s: s.count,
        reverse=True,
    )

    incident: Dict[str, int] = Counter()
    book_incident: Dict[str, int] = Counter()
    for edge in edges:
        endpoints = {edge.source, edge.target}
        touches_book = any(
            ep in index and index[ep].type == NodeType.BOOK for ep in endpoints
        )
        for ep in endpoints:
            incident[ep] += 1
            if touches_book:
                book_incident[ep] += 1

    top_themes = sorted(
        (
            ThemeRank(theme=n.label, connections=incident.get(n.id, 0))
            for n in nodes
            if n.type == NodeType.THEME
        ),
        key=lambda t: t.connections,
        reverse=True,
    )[:CONTENT_TOP_N]

    top_authors = sorted(
        (
            AuthorRank(author=n.label, books=book_incident.get(n.id, 0))
            for n in nodes
            if n.type == NodeType.AUTHOR
        ),
        key=lambda a: a.books,
        reverse=True,
    )[:CONTENT_TOP_N]

    return ContentStats(
        total_series=len(series_counts),
        series_distribution=series_distribution[:CONTENT_TOP_N],
        top_themes=top_themes,
        top_authors=top_authors,
    )


def calculate_temporal_stats(nodes: Sequence[Node]) -> TemporalStats:
    years = [n.publication_year for n in nodes if n.publication_year is not None]
    if not years:
        return TemporalStats()

    earliest, latest = min(years), max(years)
    decades = Counter((year // 10) * 10 for year in years)

    return TemporalStats(
        earliest_year=earliest,
        latest_year=latest,
        year_range=latest - earliest,
        books_per_decade=[
            DecadeCount(decade=f"{d}s", count=c) for d, c in sorted(decades.items())
        ],
    )


# =========================================================================== #
# Main analytic function
# =========================================================================== #

def calculate_graph_stats(
    nodes: NodesArg,
    edges: Iterable[Edge],
    emit: Optional[EmitFn] = None,
) -> GraphStats:
    """
    Compute the full statistics package for one snapshot of the graph.
    Never raises on degenerate or inconsistent topology.
    """
    node_list, edge_list = snapshot(nodes, edges)
    index = index_nodes(node_list)

    stats = GraphStats(
        nodes=calculate_node_stats(node_list),
        edges=calculate_edge_stats(index, edge_list),
        connectivity=calculate_connectivity_stats(node_list, edge_list),
        content=calculate_content_stats(node_list, edge_list),
        temporal=calculate_temporal_stats(node_list),
    )

    log_event(
        f"[analytics] {stats.nodes.total} nodes, {stats.edges.total} edges, "
        f"{stats.connectivity.clusters} clusters",
        emit,
        log=logger,
        n_nodes=stats.nodes.total,
        n_edges=stats.edges.total,
        clusters=stats.connectivity.clusters,
    )
    return stats
