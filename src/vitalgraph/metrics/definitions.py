from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Literal, Optional, Tuple

MetricName = Literal["weight", "body_fat", "vo2_max", "rhr", "hrv", "sleep", "stress"]
WeightUnit = Literal["kg", "lbs"]

METRIC_NAMES: Tuple[str, ...] = (
    "weight",
    "body_fat",
    "vo2_max",
    "rhr",
    "hrv",
    "sleep",
    "stress",
)
WEIGHT_UNITS: Tuple[str, ...] = ("kg", "lbs")

KG_TO_LBS = 2.20462


@dataclass(frozen=True)
class MetricDefinition:
    """
    A directly logged, core-tier metric.
    """

    key: str
    label: str
    default_unit: str
    description: str
    min: Optional[float] = None
    max: Optional[float] = None


METRIC_DEFINITIONS: Tuple[MetricDefinition, ...] = (
    MetricDefinition("weight", "Weight", "kg", "Body mass in kg or lbs.", 30, 300),
    MetricDefinition(
        "body_fat", "Body Fat %", "%", "Estimated or measured body fat percentage.", 2, 70
    ),
    MetricDefinition("vo2_max", "VO2 Max", "ml/kg/min", "Aerobic capacity score.", 10, 90),
    MetricDefinition(
        "rhr", "Resting Heart Rate", "bpm", "Heart beats per minute at rest.", 30, 130
    ),
    MetricDefinition(
        "hrv", "Heart Rate Variability", "ms", "Variability in heartbeat intervals.", 5, 250
    ),
    MetricDefinition("sleep", "Sleep Duration", "hours", "Average nightly sleep duration.", 0, 16),
    MetricDefinition("stress", "Stress Level", "1-10", "Self-reported stress level.", 1, 10),
)

METRIC_LABELS: Dict[str, str] = {d.key: d.label for d in METRIC_DEFINITIONS}

# "higher" means an increase is an improvement.
IMPROVEMENT_DIRECTION: Dict[str, str] = {
    "weight": "lower",
    "body_fat": "lower",
    "vo2_max": "higher",
    "rhr": "lower",
    "hrv": "higher",
    "sleep": "higher",
    "stress": "lower",
}


def is_metric_name(value: object) -> bool:
    return isinstance(value, str) and value in METRIC_NAMES


def is_mass_unit(unit: str) -> bool:
    return unit in WEIGHT_UNITS


def convert_weight(value: float, from_unit: str, to_unit: str) -> float:
    if from_unit == to_unit:
        return value
    if from_unit == "kg":
        return value * KG_TO_LBS
    return value / KG_TO_LBS


def classify_change(metric_name: str, delta: float, epsilon: float = 0.001) -> str:
    """
    Map a signed change to improved / worsened / unchanged using the
    metric's improvement direction.
    """
    if abs(delta) < epsilon:
        return "unchanged"

    if IMPROVEMENT_DIRECTION[metric_name] == "lower":
        return "improved" if delta < 0 else "worsened"
    return "improved" if delta > 0 else "worsened"
