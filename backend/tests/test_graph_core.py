import pytest

from vitalgraph.graph.catalog import GRAPH_EDGES, GRAPH_NODES, base_edges, base_nodes, core_node_ids
from vitalgraph.graph.graph_schema import MetricEdge, MetricNode
from vitalgraph.graph.graph_store import GraphStore, visible_edges
from vitalgraph.graph.graph_query import (
    GraphQueryEngine,
    impact_score,
    node_status,
    reachable,
    top_impacts,
)
from vitalgraph.metrics.definitions import METRIC_NAMES


def _make_node(node_id: str, tier: str = "core") -> MetricNode:
    return MetricNode(
        id=node_id,
        label=node_id.upper(),
        tier=tier,
        domain="recovery",
        x=0.0,
        y=0.0,
        description=f"{node_id} node",
    )


def _make_edge(
    source: str,
    target: str,
    *,
    strength: str = "moderate",
    type: str = "correlative",
    id: str | None = None,
) -> MetricEdge:
    return MetricEdge.create(
        source=source,
        target=target,
        direction="direct",
        effect_strength=strength,
        type=type,
        description=f"{source} -> {target}",
        id=id or f"{source}_to_{target}",
    )


def _catalog_engine(detail_mode: str = "full") -> GraphQueryEngine:
    return GraphQueryEngine.for_view(GraphStore.from_config(base_nodes(), base_edges()), detail_mode)


def test_catalog_shape():
    assert len(GRAPH_NODES) == 22
    assert len(GRAPH_EDGES) == 39
    assert core_node_ids() == list(METRIC_NAMES)

    node_ids = {node.id for node in GRAPH_NODES}
    assert len(node_ids) == len(GRAPH_NODES)
    assert len({edge.id for edge in GRAPH_EDGES}) == len(GRAPH_EDGES)
    for edge in GRAPH_EDGES:
        assert edge.source in node_ids
        assert edge.target in node_ids


def test_catalog_accessors_return_fresh_lists():
    nodes = base_nodes()
    nodes.append(_make_node("extra"))
    assert len(base_nodes()) == 22


def test_graph_store_skips_dangling_edges_and_keeps_parallel_edges():
    nodes = [_make_node("a"), _make_node("b")]
    edges = [
        _make_edge("a", "b", id="first"),
        _make_edge("a", "b", id="second"),
        _make_edge("a", "ghost"),
    ]
    store = GraphStore.from_config(nodes, edges)

    assert store.node_count() == 2
    assert [edge.id for edge in store.get_edges()] == ["first", "second"]
    assert [edge.id for edge in store.out_edges("a")] == ["first", "second"]
    assert store.in_edges("ghost") == []
    assert store.find_node("ghost") is None


def test_reachable_includes_start_and_terminates_on_cycles():
    nodes = [_make_node(n) for n in ("a", "b", "c", "d")]
    edges = [
        _make_edge("a", "b"),
        _make_edge("b", "c"),
        _make_edge("c", "a"),
        _make_edge("d", "a"),
    ]

    assert reachable(nodes, edges, "a", "downstream") == {"a", "b", "c"}
    assert reachable(nodes, edges, "a", "upstream") == {"a", "b", "c", "d"}
    assert reachable(nodes, edges, "d", "upstream") == {"d"}


def test_reachable_only_follows_edges_between_given_nodes():
    nodes = [_make_node("a"), _make_node("b")]
    edges = [_make_edge("a", "hidden"), _make_edge("hidden", "b")]

    assert reachable(nodes, edges, "a", "downstream") == {"a"}


def test_core_view_reachability_on_catalog():
    engine = _catalog_engine("core")

    downstream = engine.reachable(start="weight", direction="downstream")
    assert downstream == {"weight", "vo2_max", "rhr", "hrv", "sleep", "stress"}

    upstream = engine.reachable(start="weight", direction="upstream")
    assert upstream == {"weight", "body_fat"}


def test_full_view_reaches_supporting_nodes():
    engine = _catalog_engine("full")
    upstream = engine.reachable(start="hrv", direction="upstream")

    assert "training_load" in upstream
    assert "energy_availability" in upstream
    assert engine.reachable(start="hrv", direction="downstream") == {"hrv"}


def test_impact_score_adds_causal_bonus():
    assert impact_score(_make_edge("a", "b", strength="low")) == 1.0
    assert impact_score(_make_edge("a", "b", strength="moderate")) == 2.0
    assert impact_score(_make_edge("a", "b", strength="high", type="causal")) == pytest.approx(3.35)


def test_top_impacts_is_stable_and_limited():
    engine = _catalog_engine("full")

    impacts = engine.top_impacts("hrv", "upstream", limit=5)

    assert [c.edge.id for c in impacts] == [
        "sleep_to_hrv",
        "stress_to_hrv",
        "recovery_to_hrv",
        "vo2_to_hrv",
        "sleep_quality_to_hrv",
    ]
    assert impacts[0].score == pytest.approx(3.35)
    assert impacts[0].node.id == "sleep"


def test_top_impacts_downstream_ranks_causal_first():
    impacts = _catalog_engine("full").top_impacts("stress", "downstream")

    assert [c.edge.id for c in impacts] == [
        "stress_to_sleep",
        "stress_to_sleep_quality",
        "stress_to_hrv",
    ]
    assert [c.node.id for c in impacts] == ["sleep", "sleep_quality", "hrv"]


def test_top_impacts_drops_edges_to_hidden_nodes():
    edges = [_make_edge("a", "b", strength="high"), _make_edge("a", "c", strength="low")]
    node_by_id = {"a": _make_node("a"), "c": _make_node("c")}

    impacts = top_impacts("a", "downstream", edges, node_by_id)

    assert [c.node.id for c in impacts] == ["c"]
    assert top_impacts("a", "downstream", edges, node_by_id, limit=0) == []


def test_core_view_keeps_only_core_to_core_edges():
    store = GraphStore.from_config(base_nodes(), base_edges())
    core = store.view("core")

    assert [node.id for node in core.get_nodes()] == list(METRIC_NAMES)
    assert core.edge_count() == 10
    assert core.metadata["detail_mode"] == "core"

    index = {node.id: node for node in base_nodes()}
    assert len(visible_edges("core", base_edges(), index)) == 10
    assert len(visible_edges("full", base_edges(), index)) == 39

    # The full view is an independent copy.
    full = store.view("full")
    full.add_node(_make_node("extra"))
    assert store.node_count() == 22


def test_node_status():
    assert node_status("weight", 90.0, 89.0) == "improved"
    assert node_status("hrv", 50.0, 45.0) == "worsened"
    assert node_status("sleep", 7.0, 7.00005) == "unchanged"
    assert node_status("weight", None, 89.0) == "unchanged"
    assert node_status("training_load", 1.0, 5.0) == "unchanged"
