"""
Serialized persistence for the aggregate application document.

Every mutation in the process passes through one FIFO queue, whichever
backend holds the document.
"""

from vitalgraph.state.base import StateStore
from vitalgraph.state.document import STATE_KEYS, Document, empty_state, normalize_state
from vitalgraph.state.factory import create_state_store
from vitalgraph.state.json_store import JsonFileStateStore
from vitalgraph.state.mutation_queue import MutationQueue, default_queue
from vitalgraph.state.sql_store import SqlStateStore

__all__ = [
    "STATE_KEYS",
    "Document",
    "JsonFileStateStore",
    "MutationQueue",
    "SqlStateStore",
    "StateStore",
    "create_state_store",
    "default_queue",
    "empty_state",
    "normalize_state",
]
