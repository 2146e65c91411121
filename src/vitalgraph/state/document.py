"""
Shape of the aggregate application-state document.

The document is a plain JSON object. Only the keys listed here are
guaranteed to exist after normalization; unknown keys are preserved.
"""

from __future__ import annotations

import copy
import json
from dataclasses import asdict, is_dataclass
from datetime import datetime
from typing import Any, Dict, Mapping

STATE_KEYS = (
    "users",
    "sessions",
    "auth_challenges",
    "metrics",
    "user_preferences",
    "snapshots",
    "audit_logs",
    "events",
    "intervention_versions",
    "graph_custom_metrics",
    "graph_custom_edges",
)

Document = Dict[str, Any]


def empty_state() -> Document:
    return {key: [] for key in STATE_KEYS}


def normalize_state(raw: Mapping[str, Any] | None) -> Document:
    """
    Return a fresh document with every known collection present.

    Collections that are missing or not lists are replaced by empty
    lists. The input is never mutated.
    """
    if not isinstance(raw, Mapping):
        return empty_state()

    doc: Document = copy.deepcopy(dict(raw))
    for key in STATE_KEYS:
        if not isinstance(doc.get(key), list):
            doc[key] = []
    return doc


def encode_value(value: Any) -> Any:
    """
    ``json`` fallback shared by every backend.

    Dataclasses and datetimes are written in their plain form; anything
    else is rejected so no backend stores a lossy rendering.
    """
    if is_dataclass(value) and not isinstance(value, type):
        return asdict(value)
    if isinstance(value, datetime):
        return value.isoformat()
    raise TypeError(f"{type(value).__name__} is not JSON serializable")


def dumps_state(doc: Any) -> str:
    return json.dumps(doc, default=encode_value)
