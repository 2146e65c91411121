from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Dict, Iterable, List, Literal, Optional, Set

from vitalgraph.graph.graph_schema import MetricEdge, MetricNode
from vitalgraph.graph.graph_store import DetailMode, GraphStore
from vitalgraph.metrics.definitions import classify_change, is_metric_name

TraversalDirection = Literal["upstream", "downstream"]

EDGE_STRENGTH_SCORE: Dict[str, float] = {
    "high": 3.0,
    "moderate": 2.0,
    "low": 1.0,
}
CAUSAL_BONUS = 0.35
NODE_STATUS_EPSILON = 0.0001

DEFAULT_IMPACT_LIMIT = 5


@dataclass(frozen=True)
class ImpactConnection:
    """
    One ranked neighbour of a focused metric.
    """

    edge: MetricEdge
    node: MetricNode
    score: float

    def to_dict(self) -> dict:
        return {
            "edge": self.edge.to_config(),
            "node": self.node.to_config(),
            "score": self.score,
        }


def impact_score(edge: MetricEdge) -> float:
    return EDGE_STRENGTH_SCORE[edge.effect_strength] + (CAUSAL_BONUS if edge.is_causal else 0.0)


def reachable(
    nodes: Iterable[MetricNode],
    edges: Iterable[MetricEdge],
    start: str,
    direction: TraversalDirection,
) -> Set[str]:
    """
    Breadth-first closure of ``start`` against edge direction.

    ``upstream`` follows edges backwards (target -> source), ``downstream``
    forwards. Only edges between the given nodes are explored, so callers
    pre-filter nodes to restrict the traversal (e.g. core tier only). The
    start node is always part of the result.
    """
    return GraphQueryEngine(GraphStore.from_config(nodes, edges)).reachable(
        start=start,
        direction=direction,
    )


def top_impacts(
    node_id: str,
    direction: TraversalDirection,
    edges: Iterable[MetricEdge],
    node_by_id: Dict[str, MetricNode],
    limit: int = DEFAULT_IMPACT_LIMIT,
) -> List[ImpactConnection]:
    """
    Strongest incoming (``upstream``) or outgoing (``downstream``) links.

    Sorting is stable: equal scores keep the input order of ``edges``.
    Edges whose far end is not in ``node_by_id`` are dropped first.
    """
    connections: List[ImpactConnection] = []

    for edge in edges:
        if direction == "upstream":
            if edge.target != node_id:
                continue
            other_id = edge.source
        else:
            if edge.source != node_id:
                continue
            other_id = edge.target

        other = node_by_id.get(other_id)
        if other is None:
            continue

        connections.append(ImpactConnection(edge=edge, node=other, score=impact_score(edge)))

    connections.sort(key=lambda c: c.score, reverse=True)
    return connections[: max(limit, 0)]


class GraphQueryEngine:
    """
    Read-only traversal and ranking over one visible graph.

    Pure and synchronous: no I/O, no shared state beyond the store it
    was built with.
    """

    def __init__(self, store: GraphStore) -> None:
        self.store = store

    @classmethod
    def for_view(cls, store: GraphStore, detail_mode: DetailMode) -> "GraphQueryEngine":
        return cls(store.view(detail_mode))

    def reachable(self, *, start: str, direction: TraversalDirection) -> Set[str]:
        visited: Set[str] = {start}
        queue = deque([start])

        step = self.store.predecessors if direction == "upstream" else self.store.neighbors

        while queue:
            current = queue.popleft()
            for nxt in step(current):
                if nxt in visited:
                    continue
                visited.add(nxt)
                queue.append(nxt)

        return visited

    def top_impacts(
        self,
        node_id: str,
        direction: TraversalDirection,
        limit: int = DEFAULT_IMPACT_LIMIT,
    ) -> List[ImpactConnection]:
        candidates = (
            self.store.in_edges(node_id)
            if direction == "upstream"
            else self.store.out_edges(node_id)
        )
        return top_impacts(
            node_id,
            direction,
            candidates,
            self.store.node_index(),
            limit=limit,
        )

    def node(self, node_id: str) -> Optional[MetricNode]:
        return self.store.find_node(node_id)


def node_status(
    node_id: str,
    current: Optional[float],
    predicted: Optional[float],
) -> str:
    """
    Simulation outcome for a graph node.

    Supporting-tier nodes and metrics without both values are
    ``unchanged``.
    """
    if not is_metric_name(node_id) or current is None or predicted is None:
        return "unchanged"
    return classify_change(node_id, predicted - current, epsilon=NODE_STATUS_EPSILON)
