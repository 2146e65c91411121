import copy

import pytest

from vitalgraph.errors import ConflictError, InvalidEndpointsError, NotFoundError, ValidationError
from vitalgraph.graph.graph_admin import (
    add_custom_edge,
    add_custom_metric,
    export_graph,
    import_graph,
    merged_graph,
    remove_custom_edge,
    remove_custom_metric,
)
from vitalgraph.state.document import empty_state
from vitalgraph.validation import parse_graph_edge, parse_graph_import, parse_graph_metric


def _metric_payload(metric_id: str, **overrides) -> dict:
    payload = {
        "id": metric_id,
        "label": metric_id.replace("_", " ").title(),
        "description": f"{metric_id} tracked by the lab",
        "domain": "musculoskeletal",
        "x": 100,
        "y": 200,
    }
    payload.update(overrides)
    return payload


def _edge_payload(source: str, target: str, **overrides) -> dict:
    payload = {
        "source": source,
        "target": target,
        "direction": "direct",
        "effect_strength": "moderate",
        "type": "causal",
        "description": f"{source} drives {target}",
    }
    payload.update(overrides)
    return payload


def test_add_metric_stamps_author_and_shows_in_merged_graph():
    doc = empty_state()

    created = add_custom_metric(doc, parse_graph_metric(_metric_payload("grip_strength")), "admin-1")

    assert created.created_by == "admin-1"
    assert created.tier == "supporting"
    assert doc["graph_custom_metrics"][0]["id"] == "grip_strength"

    merged = merged_graph(doc)
    assert len(merged.nodes) == 23
    assert merged.nodes[-1].id == "grip_strength"


def test_add_metric_conflicting_with_builtin_leaves_doc_unchanged():
    doc = empty_state()
    before = copy.deepcopy(doc)

    with pytest.raises(ConflictError) as exc:
        add_custom_metric(doc, parse_graph_metric(_metric_payload("weight")), "admin-1")

    assert exc.value.code == "graph_metric_exists"
    assert exc.value.status_code == 409
    assert doc == before


def test_add_edge_rejects_unknown_endpoints():
    doc = empty_state()

    with pytest.raises(InvalidEndpointsError) as exc:
        add_custom_edge(doc, parse_graph_edge(_edge_payload("sleep", "ghost")), "admin-1")

    assert exc.value.code == "graph_edge_invalid_nodes"
    assert doc["graph_custom_edges"] == []


def test_add_edge_rejects_duplicate_ids():
    doc = empty_state()

    with pytest.raises(ConflictError) as exc:
        add_custom_edge(
            doc,
            parse_graph_edge(_edge_payload("sleep", "rhr", id="sleep_to_hrv")),
            "admin-1",
        )
    assert exc.value.code == "graph_edge_exists"

    add_custom_edge(doc, parse_graph_edge(_edge_payload("sleep", "rhr", id="sleep_to_rhr")), "admin-1")
    with pytest.raises(ConflictError):
        add_custom_edge(
            doc,
            parse_graph_edge(_edge_payload("rhr", "sleep", id="sleep_to_rhr")),
            "admin-1",
        )


def test_add_edge_generates_id_when_blank():
    doc = empty_state()

    created = add_custom_edge(doc, parse_graph_edge(_edge_payload("sleep", "rhr", id="  ")), "admin-1")

    assert len(created.id) == 32
    assert merged_graph(doc).edges[-1].id == created.id


def test_remove_metric_cascades_to_custom_edges_only():
    doc = empty_state()
    add_custom_metric(doc, parse_graph_metric(_metric_payload("grip_strength")), "admin-1")
    add_custom_edge(
        doc,
        parse_graph_edge(_edge_payload("grip_strength", "strength_index", id="grip_to_strength")),
        "admin-1",
    )
    add_custom_edge(doc, parse_graph_edge(_edge_payload("sleep", "rhr", id="sleep_to_rhr")), "admin-1")

    removed = remove_custom_metric(doc, "grip_strength")

    assert removed.id == "grip_strength"
    assert [raw["id"] for raw in doc["graph_custom_edges"]] == ["sleep_to_rhr"]
    assert len(merged_graph(doc).edges) == 40


def test_remove_unknown_or_builtin_entries_is_not_found():
    doc = empty_state()

    with pytest.raises(NotFoundError) as exc:
        remove_custom_metric(doc, "weight")
    assert exc.value.code == "graph_metric_not_found"

    with pytest.raises(NotFoundError) as exc:
        remove_custom_edge(doc, "sleep_to_hrv")
    assert exc.value.code == "graph_edge_not_found"


def test_merge_skips_collisions_and_dangling_edges():
    doc = empty_state()
    doc["graph_custom_metrics"] = [
        dict(_metric_payload("weight", label="Shadow Weight"), tier="supporting"),
        dict(_metric_payload("grip_strength"), tier="supporting"),
    ]
    doc["graph_custom_edges"] = [
        dict(_edge_payload("ghost", "sleep"), id="dangling"),
        dict(_edge_payload("sleep", "hrv"), id="sleep_to_hrv"),
        dict(_edge_payload("grip_strength", "weight"), id="grip_to_weight"),
    ]
    before = copy.deepcopy(doc)

    merged = merged_graph(doc)

    labels = {node.id: node.label for node in merged.nodes}
    assert labels["weight"] == "Weight"
    assert len(merged.nodes) == 23
    assert [edge.id for edge in merged.edges[39:]] == ["grip_to_weight"]
    assert merged.to_config() == merged_graph(doc).to_config()
    assert doc == before


def test_import_lets_edges_reference_metrics_from_same_payload():
    doc = empty_state()
    payload = parse_graph_import(
        {
            "metrics": [_metric_payload("grip_strength")],
            "edges": [_edge_payload("grip_strength", "strength_index", id="grip_to_strength")],
        }
    )

    summary = import_graph(doc, payload, "admin-1")

    assert summary.to_dict() == {"mode": "append", "created_metrics": 1, "created_edges": 1}
    assert merged_graph(doc).edges[-1].id == "grip_to_strength"


def test_import_failure_reports_item_position():
    doc = empty_state()
    payload = parse_graph_import(
        {"metrics": [_metric_payload("grip_strength"), _metric_payload("weight")]}
    )

    with pytest.raises(ConflictError) as exc:
        import_graph(doc, payload, "admin-1")

    assert exc.value.code == "graph_metric_exists"
    assert exc.value.message.startswith("metrics[1]: ")


def test_import_edge_failure_reports_edge_position():
    doc = empty_state()
    payload = parse_graph_import({"edges": [_edge_payload("sleep", "ghost")]})

    with pytest.raises(InvalidEndpointsError) as exc:
        import_graph(doc, payload, "admin-1")

    assert exc.value.message.startswith("edges[0]: ")


def test_import_replace_custom_clears_previous_entries():
    doc = empty_state()
    add_custom_metric(doc, parse_graph_metric(_metric_payload("grip_strength")), "admin-1")

    payload = parse_graph_import(
        {"mode": "replace_custom", "metrics": [_metric_payload("vo2_peak", domain="respiratory")]}
    )
    import_graph(doc, payload, "admin-1")

    assert [raw["id"] for raw in doc["graph_custom_metrics"]] == ["vo2_peak"]


def test_parse_graph_import_errors():
    with pytest.raises(ValidationError) as exc:
        parse_graph_import({"metrics": [], "edges": []})
    assert exc.value.code == "graph_import_empty"

    with pytest.raises(ValidationError) as exc:
        parse_graph_import({"metrics": [_metric_payload("ok_metric"), _metric_payload("Bad Id!")]})
    assert exc.value.code == "graph_metric_invalid_id"
    assert exc.value.message.startswith("metrics[1]: ")

    with pytest.raises(ValidationError) as exc:
        parse_graph_import({"edges": [_edge_payload("sleep", "hrv", effect_strength="huge")]})
    assert exc.value.code == "graph_edge_invalid_strength"
    assert exc.value.message.startswith("edges[0]: ")

    with pytest.raises(ValidationError) as exc:
        parse_graph_import(["not", "an", "object"])
    assert exc.value.code == "invalid_body"


def test_parse_graph_metric_normalizes_fields():
    parsed = parse_graph_metric(_metric_payload("Grip_Strength", tier="elite", x="12.5"))

    assert parsed.id == "grip_strength"
    assert parsed.tier == "supporting"
    assert parsed.x == 12.5

    with pytest.raises(ValidationError) as exc:
        parse_graph_metric(_metric_payload("grip_strength", x=None))
    assert exc.value.code == "graph_metric_invalid_position"

    with pytest.raises(ValidationError) as exc:
        parse_graph_metric(_metric_payload("grip_strength", domain="emotional"))
    assert exc.value.code == "graph_metric_invalid_domain"


def test_parse_graph_edge_accepts_camel_case_strength():
    payload = _edge_payload("sleep", "rhr")
    payload["effectStrength"] = payload.pop("effect_strength")

    assert parse_graph_edge(payload).effect_strength == "moderate"

    with pytest.raises(ValidationError) as exc:
        parse_graph_edge(_edge_payload("", "rhr"))
    assert exc.value.code == "graph_edge_invalid_nodes"


def test_export_template_reimports_cleanly():
    doc = empty_state()
    add_custom_metric(doc, parse_graph_metric(_metric_payload("grip_strength")), "admin-1")
    add_custom_edge(
        doc,
        parse_graph_edge(_edge_payload("grip_strength", "strength_index", id="grip_to_strength")),
        "admin-1",
    )

    exported = export_graph(doc, exported_at="2026-01-01T00:00:00+00:00")

    assert exported["exported_at"] == "2026-01-01T00:00:00+00:00"
    assert len(exported["base"]["nodes"]) == 22
    assert len(exported["merged"]["nodes"]) == 23
    assert exported["custom"]["metrics"][0]["created_by"] == "admin-1"
    assert "created_by" not in exported["import_template"]["metrics"][0]

    fresh = empty_state()
    summary = import_graph(fresh, parse_graph_import(exported), "admin-2")

    assert summary.created_metrics == 1
    assert summary.created_edges == 1
    assert merged_graph(fresh).to_config() == merged_graph(doc).to_config()

    # Re-importing into the source document collides with itself.
    with pytest.raises(ConflictError):
        import_graph(doc, parse_graph_import(exported), "admin-2")


def test_failed_import_through_service_persists_nothing(graph_service, json_store):
    payload = {
        "metrics": [_metric_payload("grip_strength"), _metric_payload("hrv")],
    }

    with pytest.raises(ConflictError):
        graph_service.import_graph(payload, "admin-1")

    assert json_store.read()["graph_custom_metrics"] == []
