import pytest

from literary_graphs import GraphState
from literary_graphs.filters import FilterCriterion, FilterKind, NodeTypeFilterConfig
from literary_graphs.model import Edge, Graph


def books_only():
    return [
        FilterCriterion(
            id="types",
            name="Types",
            kind=FilterKind.NODE_TYPE,
            config=NodeTypeFilterConfig(
                types={"book": True, "author": False, "theme": False, "genre": False}
            ),
        )
    ]


def test_state_copies_host_lists(abc_graph):
    nodes, edges = abc_graph
    state = GraphState(nodes, edges)
    nodes.pop()
    edges.clear()
    assert len(state.nodes) == 3
    assert len(state.edges) == 2


def test_subset_keeps_edges_with_both_endpoints(library):
    state = GraphState(*library)
    sub = state.subset(["tolkien", "hobbit", "quest"])
    assert [n.id for n in sub.nodes] == ["tolkien", "hobbit", "quest"]
    assert sorted(e.id for e in sub.edges) == ["t1", "w1"]


def test_filtered_view_and_its_stats(library):
    state = GraphState(*library)
    visible = state.filtered(books_only())

    assert {n.id for n in visible.nodes} == {"hobbit", "fellowship", "towers", "silmarillion", "narnia"}
    assert visible.edges == []
    stats = visible.stats()
    assert stats.nodes.total == 5
    assert stats.connectivity.isolated_nodes == 5

    fstats = state.filter_stats(books_only())
    assert (fstats.total, fstats.filtered) == (9, 5)
    assert fstats.percentage == pytest.approx(500 / 9)


def test_to_networkx_attributes(abc_graph):
    nodes, edges = abc_graph
    G = GraphState(nodes, edges + [Edge("d", "a", "ghost")]).to_networkx()
    assert set(G.nodes) == {"a", "b", "c"}
    assert G.number_of_edges() == 2
    assert G.nodes["b"]["depth"] == 1
    assert G.edges["a", "b"]["weight"] == 0.8
    assert G.edges["c", "a"]["id"] == "e2"


def test_from_graph_and_emit(abc_graph):
    events = []
    state = GraphState.from_graph(Graph(*abc_graph), emit=lambda kind, payload: events.append(payload))
    state.stats()
    assert state.valid_edges() == state.edges
    assert events and events[-1]["n_nodes"] == 3


def test_session_save_and_load(tmp_path, library):
    nodes, edges = library
    nodes[0].x, nodes[0].y, nodes[0].fx, nodes[0].fy = 1.5, 2.5, 1.5, 2.5
    state = GraphState(nodes, edges, meta={"seed": "tolkien", "maxDepth": 3})
    path = state.save(tmp_path / "sessions" / "tolkien.json")

    loaded = GraphState.load(path)
    assert [n.id for n in loaded.nodes] == [n.id for n in nodes]
    assert loaded.nodes[0].is_pinned
    assert loaded.nodes[1].publication_year == 1937
    assert [e.to_dict() for e in loaded.edges] == [e.to_dict() for e in edges]
    assert loaded.stats().edges.total == len(edges)
    assert loaded.meta == {"seed": "tolkien", "maxDepth": 3}
    assert loaded.subset(["tolkien"]).meta == loaded.meta


def test_load_rejects_missing_or_corrupt_session(tmp_path):
    with pytest.raises(ValueError):
        GraphState.load(tmp_path / "absent.json")
    bad = tmp_path / "bad.json"
    bad.write_text("[1, 2", encoding="utf-8")
    with pytest.raises(ValueError):
        GraphState.load(bad)


@pytest.mark.parametrize(
    "document",
    [
        '{"nodes": [{"type": "book"}], "edges": []}',
        '{"nodes": [], "edges": [{"id": "e", "source": "a"}]}',
        '{"nodes": ["hobbit"], "edges": []}',
        '{"nodes": [], "edges": [], "meta": [1, 2]}',
    ],
)
def test_load_rejects_malformed_session(tmp_path, document):
    path = tmp_path / "session.json"
    path.write_text(document, encoding="utf-8")
    with pytest.raises(ValueError):
        GraphState.load(path)


def test_load_tolerates_null_edge_strength(tmp_path):
    path = tmp_path / "session.json"
    path.write_text(
        '{"nodes": [{"id": "a", "type": "book"}, {"id": "b", "type": "theme"}],'
        ' "edges": [{"id": "e", "source": "a", "target": "b", "strength": null}]}',
        encoding="utf-8",
    )
    assert GraphState.load(path).edges[0].strength == 0.5
