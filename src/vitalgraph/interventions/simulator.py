from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence

from vitalgraph.interventions.catalog import InterventionCatalog
from vitalgraph.interventions.conflicts import (
    ContraindicationDetector,
    KeywordContraindicationDetector,
)
from vitalgraph.interventions.schema import CONFIDENCE_RANK, Intervention, InterventionEffect
from vitalgraph.interventions.units import apply_effect
from vitalgraph.metrics.definitions import METRIC_DEFINITIONS, classify_change
from vitalgraph.metrics.latest import MetricReading

logger = logging.getLogger("vitalgraph.interventions")

DEFAULT_CONFIDENCE = "moderate"
UNCHANGED_EPSILON = 0.001


@dataclass(frozen=True)
class MetricProjection:
    """
    One row of the comparison table.
    """

    metric_name: str
    metric_label: str
    current: float
    predicted: float
    delta: float
    confidence: str
    direction: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "metric_name": self.metric_name,
            "metric_label": self.metric_label,
            "current": self.current,
            "predicted": self.predicted,
            "delta": self.delta,
            "confidence": self.confidence,
            "direction": self.direction,
        }


@dataclass(frozen=True)
class SimulationResult:
    current: Dict[str, float]
    predicted: Dict[str, float]
    table: List[MetricProjection]
    warnings: List[str] = field(default_factory=list)
    interventions: List[Intervention] = field(default_factory=list)

    def row(self, metric_name: str) -> MetricProjection:
        for projection in self.table:
            if projection.metric_name == metric_name:
                return projection
        raise KeyError(metric_name)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "current": dict(self.current),
            "predicted": dict(self.predicted),
            "table": [row.to_dict() for row in self.table],
            "warnings": list(self.warnings),
            "interventions": [item.to_dict() for item in self.interventions],
        }


def combined_confidence(selected: Sequence[Intervention], metric: str) -> str:
    """
    Highest confidence among effects targeting ``metric``; ``moderate``
    when nothing targets it.
    """
    levels = [
        effect.confidence
        for intervention in selected
        for effect in intervention.effects_for(metric)
    ]
    if not levels:
        return DEFAULT_CONFIDENCE
    return max(levels, key=lambda level: CONFIDENCE_RANK[level])


def starting_unit(
    effect: InterventionEffect,
    reading: Optional[MetricReading],
    weight_unit: str,
) -> str:
    """
    Unit of the value an effect is applied to.

    The reading's own unit wins. Without a reading, weight is taken in
    the caller's preferred unit and other metrics in the effect's unit.
    """
    if reading is not None:
        return reading.unit
    if effect.metric == "weight":
        return weight_unit
    return effect.unit


def simulate_stack(
    latest: Iterable[MetricReading],
    selected_ids: Sequence[str],
    weight_unit: str,
    *,
    catalog: Optional[InterventionCatalog] = None,
    detector: Optional[ContraindicationDetector] = None,
    epsilon: float = UNCHANGED_EPSILON,
) -> SimulationResult:
    """
    Project the caller's latest metrics through a stack of interventions.

    Effects are applied in the given order, intervention by intervention
    and effect by effect, each against the running prediction. Unknown
    intervention ids are ignored. A metric with no reading starts at 0.
    """
    catalog = catalog or InterventionCatalog()
    detector = detector or KeywordContraindicationDetector()

    selected = catalog.resolve(selected_ids)
    if len(selected) != len(selected_ids):
        logger.debug(
            "[simulate] dropped %d unknown intervention id(s)",
            len(selected_ids) - len(selected),
        )

    by_metric = {reading.metric_name: reading for reading in latest}

    current: Dict[str, float] = {}
    for definition in METRIC_DEFINITIONS:
        reading = by_metric.get(definition.key)
        current[definition.key] = reading.value if reading is not None else 0.0
    predicted = dict(current)

    for intervention in selected:
        for effect in intervention.effects:
            if effect.metric not in predicted:
                continue
            predicted[effect.metric] = apply_effect(
                effect.metric,
                predicted[effect.metric],
                effect,
                starting_unit(effect, by_metric.get(effect.metric), weight_unit),
                weight_unit,
            )

    table: List[MetricProjection] = []
    for definition in METRIC_DEFINITIONS:
        delta = predicted[definition.key] - current[definition.key]
        table.append(
            MetricProjection(
                metric_name=definition.key,
                metric_label=definition.label,
                current=current[definition.key],
                predicted=predicted[definition.key],
                delta=delta,
                confidence=combined_confidence(selected, definition.key),
                direction=classify_change(definition.key, delta, epsilon=epsilon),
            )
        )

    return SimulationResult(
        current=current,
        predicted=predicted,
        table=table,
        warnings=detector.detect(selected),
        interventions=selected,
    )
