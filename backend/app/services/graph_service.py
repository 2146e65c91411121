from __future__ import annotations

from typing import Any, Dict, List, Optional

from vitalgraph.config.settings import VitalgraphConfig
from vitalgraph.errors import NotFoundError
from vitalgraph.graph import graph_admin
from vitalgraph.graph.graph_query import (
    GraphQueryEngine,
    ImpactConnection,
    TraversalDirection,
    node_status,
)
from vitalgraph.graph.graph_store import DetailMode
from vitalgraph.interventions.simulator import SimulationResult
from vitalgraph.state.base import StateStore
from vitalgraph.validation import (
    parse_graph_edge,
    parse_graph_import,
    parse_graph_metric,
)

from backend.app.services.retry import mutate_with_retry


class GraphService:
    """
    Read and administer the merged metric graph.

    Reads use the last persisted document. Every write is a single
    state mutation, retried on concurrency failures.
    """

    def __init__(
        self,
        *,
        store: StateStore,
        config: VitalgraphConfig,
    ) -> None:
        self.store = store
        self.config = config

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def merged(self) -> graph_admin.MergedGraph:
        return graph_admin.merged_graph(self.store.read())

    def _engine(self, detail_mode: Optional[DetailMode]) -> GraphQueryEngine:
        mode = detail_mode or self.config.graph.default_detail_mode
        return GraphQueryEngine.for_view(self.merged().to_store(), mode)

    def graph_config(
        self,
        detail_mode: Optional[DetailMode] = None,
        simulation: Optional[SimulationResult] = None,
    ) -> Dict[str, Any]:
        """
        Nodes and edges of the requested view.

        With ``simulation`` every node also carries the ``status`` of its
        projected change.
        """
        mode = detail_mode or self.config.graph.default_detail_mode
        store = self._engine(mode).store

        nodes = []
        for node in store.get_nodes():
            config = node.to_config()
            if simulation is not None:
                config["status"] = node_status(
                    node.id,
                    simulation.current.get(node.id),
                    simulation.predicted.get(node.id),
                )
            nodes.append(config)

        return {
            "detail_mode": mode,
            "nodes": nodes,
            "edges": [edge.to_config() for edge in store.get_edges()],
        }

    def reachable(
        self,
        node_id: str,
        direction: TraversalDirection,
        detail_mode: Optional[DetailMode] = None,
    ) -> List[str]:
        engine = self._engine(detail_mode)
        if engine.node(node_id) is None:
            raise NotFoundError(f"Graph node not found: {node_id}", "graph_node_not_found")

        found = engine.reachable(start=node_id, direction=direction)
        # Stable output: graph order rather than set order.
        return [node.id for node in engine.store.get_nodes() if node.id in found]

    def impacts(
        self,
        node_id: str,
        direction: TraversalDirection,
        limit: Optional[int] = None,
        detail_mode: Optional[DetailMode] = None,
    ) -> List[ImpactConnection]:
        engine = self._engine(detail_mode)
        if engine.node(node_id) is None:
            raise NotFoundError(f"Graph node not found: {node_id}", "graph_node_not_found")

        return engine.top_impacts(
            node_id,
            direction,
            limit=self.config.graph.impact_limit if limit is None else limit,
        )

    def export(self) -> Dict[str, Any]:
        return graph_admin.export_graph(self.store.read())

    # ------------------------------------------------------------------
    # Administration
    # ------------------------------------------------------------------

    def _mutate(self, fn):
        return mutate_with_retry(
            self.store,
            fn,
            attempts=self.config.store.retry_attempts,
        )

    def add_metric(self, payload: Any, author_id: str) -> Dict[str, Any]:
        node = parse_graph_metric(payload)
        created = self._mutate(lambda doc: graph_admin.add_custom_metric(doc, node, author_id))
        return created.to_dict()

    def remove_metric(self, metric_id: str) -> Dict[str, Any]:
        removed = self._mutate(lambda doc: graph_admin.remove_custom_metric(doc, metric_id))
        return removed.to_dict()

    def add_edge(self, payload: Any, author_id: str) -> Dict[str, Any]:
        edge_input = parse_graph_edge(payload)
        # Resolve the id once so a retried attempt reuses it.
        edge = edge_input.to_edge()
        created = self._mutate(lambda doc: graph_admin.add_custom_edge(doc, edge, author_id))
        return created.to_dict()

    def remove_edge(self, edge_id: str) -> Dict[str, Any]:
        removed = self._mutate(lambda doc: graph_admin.remove_custom_edge(doc, edge_id))
        return removed.to_dict()

    def import_graph(self, payload: Any, author_id: str) -> Dict[str, Any]:
        parsed = parse_graph_import(payload)
        summary = self._mutate(lambda doc: graph_admin.import_graph(doc, parsed, author_id))
        return summary.to_dict()
