from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from vitalgraph.errors import ConflictError, InvalidEndpointsError, NotFoundError, VitalgraphError
from vitalgraph.graph.catalog import base_edges, base_nodes
from vitalgraph.graph.graph_schema import MetricEdge, MetricNode
from vitalgraph.graph.graph_store import GraphStore
from vitalgraph.state.document import Document
from vitalgraph.validation import GraphImportInput, MetricEdgeInput, MetricNodeInput

logger = logging.getLogger("vitalgraph.graph.admin")

NodeInput = Union[MetricNodeInput, MetricNode]
EdgeInput = Union[MetricEdgeInput, MetricEdge]


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


# ---------------------------------------------------------------------
# Merged view
# ---------------------------------------------------------------------


@dataclass(frozen=True)
class MergedGraph:
    """
    Built-in catalog plus user-authored nodes and edges.
    """

    nodes: List[MetricNode]
    edges: List[MetricEdge]

    def node_index(self) -> Dict[str, MetricNode]:
        return {node.id: node for node in self.nodes}

    def to_store(self) -> GraphStore:
        store = GraphStore.from_config(self.nodes, self.edges)
        store.metadata["source"] = "merged"
        return store

    def to_config(self) -> Dict[str, Any]:
        return {
            "nodes": [node.to_config() for node in self.nodes],
            "edges": [edge.to_config() for edge in self.edges],
        }


def custom_metrics(doc: Document) -> List[MetricNode]:
    return [MetricNode.from_dict(raw) for raw in doc["graph_custom_metrics"]]


def custom_edges(doc: Document) -> List[MetricEdge]:
    return [MetricEdge.from_dict(raw) for raw in doc["graph_custom_edges"]]


def merged_graph(doc: Document) -> MergedGraph:
    """
    Merge user-authored data onto the built-in graph.

    Built-ins come first. A user node whose id is already present is
    skipped (first writer wins). A user edge is kept only if its id is
    new and both endpoints exist in the completed node set; anything else
    is dropped silently. The document is not modified.
    """
    nodes = base_nodes()
    seen_nodes = {node.id for node in nodes}
    for node in custom_metrics(doc):
        if node.id in seen_nodes:
            continue
        seen_nodes.add(node.id)
        nodes.append(node)

    edges = base_edges()
    seen_edges = {edge.id for edge in edges}
    for edge in custom_edges(doc):
        if edge.id in seen_edges:
            continue
        if edge.source not in seen_nodes or edge.target not in seen_nodes:
            continue
        seen_edges.add(edge.id)
        edges.append(edge)

    return MergedGraph(nodes=nodes, edges=edges)


# ---------------------------------------------------------------------
# Metrics
# ---------------------------------------------------------------------


def _as_node(node: NodeInput) -> MetricNode:
    return node.to_node() if isinstance(node, MetricNodeInput) else node


def _as_edge(edge: EdgeInput) -> MetricEdge:
    return edge.to_edge() if isinstance(edge, MetricEdgeInput) else edge


def add_custom_metric(doc: Document, node: NodeInput, author_id: str) -> MetricNode:
    node = _as_node(node)

    if any(existing.id == node.id for existing in merged_graph(doc).nodes):
        raise ConflictError("Graph metric id already exists", "graph_metric_exists")

    created = node.stamped(author_id=author_id, now=_now())
    doc["graph_custom_metrics"].append(created.to_dict())

    logger.info("[graph] metric %s added by %s", created.id, author_id)
    return created


def remove_custom_metric(doc: Document, metric_id: str) -> MetricNode:
    """
    Remove a user-authored metric and every user-authored edge touching
    it. Built-in edges are never affected.
    """
    metrics = doc["graph_custom_metrics"]
    index = next((i for i, raw in enumerate(metrics) if raw["id"] == metric_id), None)
    if index is None:
        raise NotFoundError("Graph metric not found", "graph_metric_not_found")

    removed = MetricNode.from_dict(metrics.pop(index))

    before = len(doc["graph_custom_edges"])
    doc["graph_custom_edges"] = [
        raw
        for raw in doc["graph_custom_edges"]
        if raw["source"] != metric_id and raw["target"] != metric_id
    ]

    logger.info(
        "[graph] metric %s removed (%d dependent edge(s) cascaded)",
        metric_id,
        before - len(doc["graph_custom_edges"]),
    )
    return removed


# ---------------------------------------------------------------------
# Edges
# ---------------------------------------------------------------------


def add_custom_edge(doc: Document, edge: EdgeInput, author_id: str) -> MetricEdge:
    edge = _as_edge(edge)
    merged = merged_graph(doc)

    node_ids = {node.id for node in merged.nodes}
    if edge.source not in node_ids or edge.target not in node_ids:
        raise InvalidEndpointsError(
            "source and target must reference existing graph nodes",
            "graph_edge_invalid_nodes",
        )

    # Stored edges hidden from the merged view still own their id.
    if any(existing.id == edge.id for existing in merged.edges) or any(
        raw["id"] == edge.id for raw in doc["graph_custom_edges"]
    ):
        raise ConflictError("Graph edge id already exists", "graph_edge_exists")

    created = edge.stamped(author_id=author_id, now=_now())
    doc["graph_custom_edges"].append(created.to_dict())

    logger.info(
        "[graph] edge %s (%s -> %s) added by %s",
        created.id,
        created.source,
        created.target,
        author_id,
    )
    return created


def remove_custom_edge(doc: Document, edge_id: str) -> MetricEdge:
    edges = doc["graph_custom_edges"]
    index = next((i for i, raw in enumerate(edges) if raw["id"] == edge_id), None)
    if index is None:
        raise NotFoundError("Graph edge not found", "graph_edge_not_found")

    removed = MetricEdge.from_dict(edges.pop(index))
    logger.info("[graph] edge %s removed", edge_id)
    return removed


# ---------------------------------------------------------------------
# Bulk import / export
# ---------------------------------------------------------------------


@dataclass(frozen=True)
class ImportSummary:
    mode: str
    created_metrics: int
    created_edges: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mode": self.mode,
            "created_metrics": self.created_metrics,
            "created_edges": self.created_edges,
        }


def import_graph(doc: Document, payload: GraphImportInput, author_id: str) -> ImportSummary:
    """
    Apply a bulk import to ``doc`` in input order.

    ``replace_custom`` clears every user-authored node and edge first.
    Each item is validated against everything staged before it, so an
    edge may reference a metric created earlier in the same payload. The
    first failure is re-raised with its position (``metrics[i]: `` or
    ``edges[j]: ``) and leaves ``doc`` partially modified; callers run
    this inside ``StateStore.mutate`` so nothing is persisted.
    """
    if payload.mode == "replace_custom":
        doc["graph_custom_metrics"] = []
        doc["graph_custom_edges"] = []

    for index, node in enumerate(payload.metrics):
        try:
            add_custom_metric(doc, node, author_id)
        except VitalgraphError as exc:
            raise exc.with_prefix(f"metrics[{index}]: ") from exc

    for index, edge in enumerate(payload.edges):
        try:
            add_custom_edge(doc, edge, author_id)
        except VitalgraphError as exc:
            raise exc.with_prefix(f"edges[{index}]: ") from exc

    summary = ImportSummary(
        mode=payload.mode,
        created_metrics=len(payload.metrics),
        created_edges=len(payload.edges),
    )
    logger.info(
        "[graph] import (%s) by %s staged %d metric(s), %d edge(s)",
        summary.mode,
        author_id,
        summary.created_metrics,
        summary.created_edges,
    )
    return summary


def export_graph(doc: Document, *, exported_at: Optional[str] = None) -> Dict[str, Any]:
    """
    Snapshot of the built-in, user-authored and merged graph.

    ``import_template`` is accepted unchanged by the import endpoint and
    re-creates the user-authored graph on top of the built-ins.
    """
    metrics = custom_metrics(doc)
    edges = custom_edges(doc)

    return {
        "exported_at": exported_at or _now(),
        "base": {
            "nodes": [node.to_config() for node in base_nodes()],
            "edges": [edge.to_config() for edge in base_edges()],
        },
        "custom": {
            "metrics": [node.to_dict() for node in metrics],
            "edges": [edge.to_dict() for edge in edges],
        },
        "merged": merged_graph(doc).to_config(),
        "import_template": {
            "mode": "append",
            "metrics": [node.to_config() for node in metrics],
            "edges": [edge.to_config() for edge in edges],
        },
    }
