"""
vitalgraph
==========

Causal metric graph and intervention simulation for personal health
tracking.

Core idea:
- Physiological metrics form a directed graph of causal and
  correlative links.
- Interventions shift metrics by expected amounts; stacking them
  projects a caller's latest readings forward.

Public API:
- GraphStore
- GraphQueryEngine
- InterventionCatalog
- simulate_stack
- create_state_store
"""

from vitalgraph.graph.graph_store import GraphStore
from vitalgraph.graph.graph_query import GraphQueryEngine
from vitalgraph.interventions.catalog import InterventionCatalog
from vitalgraph.interventions.simulator import simulate_stack
from vitalgraph.state.factory import create_state_store

__all__ = [
    "GraphStore",
    "GraphQueryEngine",
    "InterventionCatalog",
    "simulate_stack",
    "create_state_store",
]

__version__ = "0.1.0"
