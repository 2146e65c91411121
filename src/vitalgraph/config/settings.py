from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Tuple

# ---------------------------------------------------------------------
# Graph views & impact ranking
# ---------------------------------------------------------------------


@dataclass(frozen=True)
class GraphConfig:
    """
    Controls how the merged metric graph is presented to callers.
    """

    impact_limit: int = 6
    default_detail_mode: Literal["core", "full"] = "full"


# ---------------------------------------------------------------------
# Intervention simulation
# ---------------------------------------------------------------------


@dataclass(frozen=True)
class SimulationConfig:
    """
    Thresholds and unit fallbacks used when projecting intervention
    stacks onto the caller's latest metrics.
    """

    unchanged_epsilon: float = 0.001
    default_weight_unit: Literal["kg", "lbs"] = "kg"


# ---------------------------------------------------------------------
# State persistence
# ---------------------------------------------------------------------


@dataclass(frozen=True)
class StoreConfig:
    """
    Selects and parameterizes the state backend.

    A non-empty ``database_url`` selects the relational backend;
    otherwise the document lives in the JSON file at ``data_path``.
    """

    data_path: str = ".data/health-db.json"
    database_url: str = ""
    state_key: str = "primary"
    retry_attempts: int = 3


# ---------------------------------------------------------------------
# Top-level runtime configuration
# ---------------------------------------------------------------------


@dataclass(frozen=True)
class VitalgraphConfig:
    graph: GraphConfig = field(default_factory=GraphConfig)
    simulation: SimulationConfig = field(default_factory=SimulationConfig)
    store: StoreConfig = field(default_factory=StoreConfig)
    admin_roles: Tuple[str, ...] = ("admin",)
