from __future__ import annotations

from itertools import count
from typing import Any, Dict, Iterable, List, Literal, Optional

import networkx as nx

from vitalgraph.graph.graph_schema import MetricEdge, MetricNode

DetailMode = Literal["core", "full"]


class GraphStore:
    """
    In-memory metric graph backed by a networkx multigraph.

    Edges are keyed by edge id so two relationships between the same
    pair of metrics can coexist. Insertion order of nodes and edges is
    preserved; ranking relies on it for tie-breaking.
    """

    def __init__(self) -> None:
        self._graph = nx.MultiDiGraph()
        self._seq = count()
        self.metadata: Dict[str, Any] = {}

    @classmethod
    def from_config(
        cls,
        nodes: Iterable[MetricNode],
        edges: Iterable[MetricEdge],
    ) -> "GraphStore":
        """
        Build a store from node/edge lists.

        Edges whose endpoints are not among ``nodes`` are skipped.
        """
        store = cls()
        for node in nodes:
            store.add_node(node)
        for edge in edges:
            if store.has_node(edge.source) and store.has_node(edge.target):
                store.add_edge(edge)
        return store

    # -------------------- Nodes --------------------

    def add_node(self, node: MetricNode) -> None:
        self._graph.add_node(node.id, data=node)

    def has_node(self, node_id: str) -> bool:
        return node_id in self._graph

    def get_node(self, node_id: str) -> MetricNode:
        return self._graph.nodes[node_id]["data"]

    def find_node(self, node_id: str) -> Optional[MetricNode]:
        if node_id not in self._graph:
            return None
        return self.get_node(node_id)

    def get_nodes(self) -> List[MetricNode]:
        return [data["data"] for _, data in self._graph.nodes(data=True)]

    def node_index(self) -> Dict[str, MetricNode]:
        return {node.id: node for node in self.get_nodes()}

    # -------------------- Edges --------------------

    def add_edge(self, edge: MetricEdge) -> None:
        self._graph.add_edge(
            edge.source,
            edge.target,
            key=edge.id,
            data=edge,
            seq=next(self._seq),
        )

    def get_edges(self) -> List[MetricEdge]:
        return self._ordered(self._graph.edges(keys=True, data=True))

    def in_edges(self, node_id: str) -> List[MetricEdge]:
        if node_id not in self._graph:
            return []
        return self._ordered(self._graph.in_edges(node_id, keys=True, data=True))

    def out_edges(self, node_id: str) -> List[MetricEdge]:
        if node_id not in self._graph:
            return []
        return self._ordered(self._graph.out_edges(node_id, keys=True, data=True))

    @staticmethod
    def _ordered(rows) -> List[MetricEdge]:
        return [data["data"] for *_, data in sorted(rows, key=lambda row: row[3]["seq"])]

    # -------------------- Traversal --------------------

    def neighbors(self, node_id: str) -> List[str]:
        if node_id not in self._graph:
            return []
        return list(self._graph.successors(node_id))

    def predecessors(self, node_id: str) -> List[str]:
        if node_id not in self._graph:
            return []
        return list(self._graph.predecessors(node_id))

    # -------------------- Views --------------------

    def view(self, detail_mode: DetailMode) -> "GraphStore":
        """
        Visible subgraph for a detail mode.

        ``core`` keeps core-tier nodes and the edges between them;
        ``full`` is a plain clone.
        """
        if detail_mode == "full":
            return self.clone()

        nodes = [node for node in self.get_nodes() if node.is_core]
        index = {node.id: node for node in nodes}
        g = GraphStore.from_config(nodes, visible_edges("core", self.get_edges(), index))
        g.metadata = dict(self.metadata)
        g.metadata["detail_mode"] = detail_mode
        return g

    # -------------------- Analytics --------------------

    def node_count(self) -> int:
        return self._graph.number_of_nodes()

    def edge_count(self) -> int:
        return self._graph.number_of_edges()

    # -------------------- Cloning --------------------

    def clone(self) -> "GraphStore":
        g = GraphStore()
        g._graph = self._graph.copy()
        last = max(
            (data["seq"] for *_, data in self._graph.edges(keys=True, data=True)),
            default=-1,
        )
        g._seq = count(last + 1)
        g.metadata = dict(self.metadata)
        return g


def visible_edges(
    detail_mode: DetailMode,
    edges: Iterable[MetricEdge],
    node_by_id: Dict[str, MetricNode],
) -> List[MetricEdge]:
    """
    Edges shown for a detail mode; ``core`` keeps core-to-core edges only.
    """
    edges = list(edges)
    if detail_mode != "core":
        return edges

    def _is_core(node_id: str) -> bool:
        node = node_by_id.get(node_id)
        return node is not None and node.is_core

    return [e for e in edges if _is_core(e.source) and _is_core(e.target)]
