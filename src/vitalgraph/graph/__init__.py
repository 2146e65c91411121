"""
Graph subsystem for vitalgraph.

The causal metric graph: the immutable built-in catalog, an in-memory
networkx-backed store, and read-only traversal/ranking over it.
Administration of user-authored nodes and edges lives in
``vitalgraph.graph.graph_admin``.
"""

from vitalgraph.graph.graph_schema import MetricEdge, MetricNode
from vitalgraph.graph.graph_store import GraphStore, visible_edges
from vitalgraph.graph.graph_query import GraphQueryEngine, ImpactConnection, node_status

__all__ = [
    "MetricNode",
    "MetricEdge",
    "GraphStore",
    "GraphQueryEngine",
    "ImpactConnection",
    "node_status",
    "visible_edges",
]
