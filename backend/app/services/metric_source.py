from __future__ import annotations

from typing import List, Protocol

from vitalgraph.metrics import WEIGHT_UNITS, MetricReading, build_latest_metrics
from vitalgraph.state.base import StateStore


class MetricSource(Protocol):
    """
    The caller's logged metrics, as seen by the simulation endpoints.
    """

    def latest(self, user_id: str) -> List[MetricReading]:
        ...

    def weight_unit(self, user_id: str) -> str:
        ...


class StateMetricSource:
    """
    Reads metric records and unit preferences from the state document.
    """

    def __init__(self, store: StateStore, *, default_weight_unit: str = "kg") -> None:
        self.store = store
        self.default_weight_unit = default_weight_unit

    def latest(self, user_id: str) -> List[MetricReading]:
        records = [
            record
            for record in self.store.read()["metrics"]
            if record.get("user_id") == user_id
        ]
        return build_latest_metrics(records)

    def weight_unit(self, user_id: str) -> str:
        for preference in self.store.read()["user_preferences"]:
            if preference.get("user_id") != user_id:
                continue
            unit = preference.get("weight_unit")
            if unit in WEIGHT_UNITS:
                return unit
        return self.default_weight_unit
