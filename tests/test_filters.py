import pytest

from literary_graphs.filters import (
    CustomFilterConfig,
    DescriptionFilterConfig,
    FilterCriterion,
    FilterKind,
    NodeTypeFilterConfig,
    PublicationYearFilterConfig,
    SeriesFilterConfig,
    apply_criterion,
    apply_filters,
    filter_nodes,
    get_filter_stats,
)

from conftest import make_node


def crit(kind, config, enabled=True, cid="c"):
    return FilterCriterion(id=cid, name=cid, kind=kind, config=config, enabled=enabled)


def year_crit(**kwargs):
    return crit(FilterKind.PUBLICATION_YEAR, PublicationYearFilterConfig(**kwargs))


def test_node_type_filter():
    c = crit(FilterKind.NODE_TYPE, NodeTypeFilterConfig(types={"book": True, "author": False}))
    assert apply_criterion(make_node("b", "book"), c)
    assert not apply_criterion(make_node("a", "author"), c)
    # types absent from the switch map pass
    assert apply_criterion(make_node("g", "genre"), c)


@pytest.mark.parametrize(
    "config, year, expected",
    [
        ({"mode": "range", "min_year": 1900, "max_year": 1950}, 1900, True),
        ({"mode": "range", "min_year": 1900, "max_year": 1950}, 1950, True),
        ({"mode": "range", "min_year": 1900, "max_year": 1950}, 1951, False),
        ({"mode": "before", "max_year": 1950}, 1949, True),
        ({"mode": "before", "max_year": 1950}, 1950, False),
        ({"mode": "after", "min_year": 1950}, 1950, False),
        ({"mode": "after", "min_year": 1950}, 1951, True),
        ({"mode": "exact", "exact_year": 1954}, 1954, True),
        ({"mode": "exact", "exact_year": 1954}, 1955, False),
        ({"mode": "range"}, 1, True),
    ],
)
def test_year_modes(config, year, expected):
    assert apply_criterion(make_node("b", year=year), year_crit(**config)) is expected


def test_year_filter_rejects_nodes_without_year():
    for mode in ("range", "before", "after", "exact"):
        assert not apply_criterion(make_node("b"), year_crit(mode=mode))


def test_series_include_and_exclude():
    lotr = make_node("f", series="LOTR")
    other = make_node("n", series="Narnia")
    none = make_node("x")

    include = crit(FilterKind.SERIES, SeriesFilterConfig("include", ["LOTR"]))
    exclude = crit(FilterKind.SERIES, SeriesFilterConfig("exclude", ["LOTR"]))

    assert [apply_criterion(n, include) for n in (lotr, other, none)] == [True, False, False]
    assert [apply_criterion(n, exclude) for n in (lotr, other, none)] == [False, True, True]


def test_description_any_all_and_case():
    node = make_node("h", description="A Hobbit goes on an Adventure")

    any_ci = crit(FilterKind.DESCRIPTION, DescriptionFilterConfig(["dragon", "hobbit"], "any"))
    all_ci = crit(FilterKind.DESCRIPTION, DescriptionFilterConfig(["dragon", "hobbit"], "all"))
    cs_hit = crit(FilterKind.DESCRIPTION, DescriptionFilterConfig(["Hobbit"], "any", True))
    cs_miss = crit(FilterKind.DESCRIPTION, DescriptionFilterConfig(["hobbit"], "any", True))

    assert apply_criterion(node, any_ci)
    assert not apply_criterion(node, all_ci)
    assert apply_criterion(node, cs_hit)
    assert not apply_criterion(node, cs_miss)
    assert not apply_criterion(make_node("x"), any_ci)


def test_disabled_and_custom_criteria_pass():
    node = make_node("b")
    disabled = FilterCriterion("d", "d", FilterKind.PUBLICATION_YEAR, PublicationYearFilterConfig(), False)
    assert apply_criterion(node, disabled)
    assert apply_criterion(node, crit(FilterKind.CUSTOM, CustomFilterConfig("lambda n: False")))


def test_and_composition(library):
    nodes, _ = library
    criteria = [
        crit(FilterKind.NODE_TYPE, NodeTypeFilterConfig(types={"author": False}), cid="t"),
        year_crit(mode="after", min_year=1940),
        crit(FilterKind.SERIES, SeriesFilterConfig("exclude", ["Narnia"]), cid="s"),
    ]
    visible = filter_nodes(nodes, criteria)

    assert [n.id for n in visible] == ["fellowship", "towers", "silmarillion"]
    for node in nodes:
        assert apply_filters(node, criteria) == all(apply_criterion(node, c) for c in criteria)


def test_no_or_disabled_criteria_return_everything(library):
    nodes, _ = library
    disabled = [
        crit(FilterKind.NODE_TYPE, NodeTypeFilterConfig(types={"book": False}), enabled=False),
        FilterCriterion("y", "y", FilterKind.PUBLICATION_YEAR, PublicationYearFilterConfig(), False),
    ]
    assert len(filter_nodes(nodes, [])) == len(nodes)
    assert len(filter_nodes(nodes, disabled)) == len(nodes)


def test_filter_mapping_returns_mapping(library):
    nodes, _ = library
    by_id = {n.id: n for n in nodes}
    out = filter_nodes(by_id, [year_crit(mode="exact", exact_year=1954)])
    assert list(out) == ["fellowship", "towers"]


def test_filter_stats(library):
    nodes, _ = library
    stats = get_filter_stats(nodes, [year_crit(mode="before", max_year=1951)])
    assert (stats.total, stats.filtered) == (9, 2)
    assert stats.percentage == pytest.approx(200 / 9)
    assert get_filter_stats([], []).percentage == 0.0


def test_criterion_round_trip_through_dict():
    criterion = crit(FilterKind.DESCRIPTION, DescriptionFilterConfig(["ring"], "all", True), cid="d1")
    data = criterion.to_dict()

    assert data["type"] == "description"
    assert data["config"] == {"keywords": ["ring"], "matchMode": "all", "caseSensitive": True}
    assert FilterCriterion.from_dict(data) == criterion


def test_unknown_criterion_kind_passes():
    c = FilterCriterion.from_dict({"id": "z", "name": "z", "type": "mood", "config": {}})
    assert apply_criterion(make_node("b"), c)
