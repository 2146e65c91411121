"""
Built-in intervention catalog.

Effect sizes are population-average estimates for an eight-week (or
four-week) program with average adherence. They are not personalized.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from vitalgraph.errors import NotFoundError
from vitalgraph.interventions.schema import (
    Contraindication,
    Intervention,
    InterventionEffect,
    InterventionVersion,
)


def _effect(
    metric: str,
    change: float,
    unit: str,
    confidence: str,
    assumptions: str,
    range: Tuple[float, float],
) -> InterventionEffect:
    return InterventionEffect(
        metric=metric,
        change_value=change,
        unit=unit,
        confidence=confidence,
        assumptions=assumptions,
        range=range,
    )


INTERVENTIONS: Tuple[Intervention, ...] = (
    Intervention(
        id="weight_training_5x5",
        name="Weight Training (Starting Strength 5x5)",
        category="strength",
        duration_weeks=8,
        frequency="3x/week",
        description=(
            "Barbell compound training focused on progressive overload for "
            "strength and lean mass."
        ),
        effects=(
            _effect(
                "weight", 2.3, "kg", "moderate",
                "Average adherence, sufficient recovery and protein intake.",
                (1.4, 3.2),
            ),
            _effect(
                "body_fat", -1, "%", "low",
                "Assumes mostly maintenance calories.",
                (-2, 0),
            ),
            _effect(
                "vo2_max", 3, "%", "low",
                "Indirect transfer from improved work capacity.",
                (1, 5),
            ),
        ),
        contraindications=(
            Contraindication(
                scenario="heavy_cardio + weight_training + caloric_deficit",
                warning=(
                    "Combining high-volume cardio with strength training in a "
                    "caloric deficit can impair hypertrophy and recovery. "
                    "Prioritize sleep and protein intake."
                ),
            ),
        ),
    ),
    Intervention(
        id="cardio_moderate_3x",
        name="Cardio (Moderate Intensity, 3x/week)",
        category="cardio",
        duration_weeks=8,
        frequency="3x/week",
        description="Zone 2 + moderate interval conditioning for cardiovascular health.",
        effects=(
            _effect(
                "weight", -1.8, "kg", "moderate",
                "No compensatory overeating.",
                (-2.3, -1.3),
            ),
            _effect(
                "vo2_max", 10, "%", "moderate",
                "Consistent frequency and progressive overload.",
                (7, 12),
            ),
            _effect(
                "rhr", -5, "bpm", "moderate",
                "No concurrent illness or overtraining.",
                (-7, -3),
            ),
            _effect(
                "hrv", 10, "%", "moderate",
                "Adequate recovery and sleep quality.",
                (6, 14),
            ),
        ),
        contraindications=(
            Contraindication(
                scenario="heavy_cardio + severe_sleep_debt",
                warning=(
                    "High cardio load with chronic sleep debt may worsen "
                    "stress and blunt recovery."
                ),
            ),
        ),
    ),
    Intervention(
        id="diet_500_deficit",
        name="Diet Intervention (500 kcal/day deficit)",
        category="diet",
        duration_weeks=8,
        frequency="Daily",
        description=(
            "Structured clean eating plan with moderate caloric deficit and "
            "high satiety foods."
        ),
        effects=(
            _effect(
                "weight", -4.1, "kg", "moderate",
                "Average adherence around 500 kcal/day deficit.",
                (-5.4, -3.2),
            ),
            _effect(
                "body_fat", -2.5, "%", "moderate",
                "Protein intake is maintained.",
                (-3.2, -1.8),
            ),
            _effect(
                "sleep", 0, "hours", "low",
                "Neutral effect unless hunger disrupts sleep.",
                (-0.2, 0.2),
            ),
        ),
        contraindications=(
            Contraindication(
                scenario="aggressive_deficit + high_training_volume",
                warning=(
                    "Combining a large caloric deficit with high training "
                    "volume can increase fatigue, hunger, and muscle loss risk."
                ),
            ),
        ),
    ),
    Intervention(
        id="screen_time_reduction",
        name="Screen Time Reduction (No screens 1 hour before bed)",
        category="sleep",
        duration_weeks=4,
        frequency="Daily",
        description="Reduces evening screen exposure to improve sleep onset and recovery.",
        effects=(
            _effect(
                "sleep", 0.75, "hours", "moderate",
                "Consistent digital sunset routine.",
                (0.5, 1),
            ),
            _effect(
                "hrv", 15, "%", "moderate",
                "Sleep quality improves alongside sleep duration.",
                (10, 18),
            ),
            _effect(
                "stress", -2, "1-10", "moderate",
                "Reduced cognitive load and better evening wind-down.",
                (-3, -1),
            ),
        ),
        contraindications=(),
    ),
)

INTERVENTION_MAP: Dict[str, Intervention] = {item.id: item for item in INTERVENTIONS}


def latest_published(versions: Iterable[Mapping[str, Any]]) -> Dict[str, InterventionVersion]:
    """
    Highest-numbered published version per intervention id.
    """
    latest: Dict[str, InterventionVersion] = {}
    for raw in versions:
        if raw.get("status") != "published":
            continue
        version = InterventionVersion.from_dict(dict(raw))
        current = latest.get(version.intervention_id)
        if current is None or version.version_number > current.version_number:
            latest[version.intervention_id] = version
    return latest


class InterventionCatalog:
    """
    Built-in interventions overlaid by published editorial versions.

    A published version replaces the built-in entry of the same id;
    published ids with no built-in counterpart are appended after the
    built-ins in first-seen order.
    """

    def __init__(self, interventions: Iterable[Intervention] = INTERVENTIONS) -> None:
        self._items: Dict[str, Intervention] = {item.id: item for item in interventions}

    @classmethod
    def from_state(cls, versions: Iterable[Mapping[str, Any]]) -> "InterventionCatalog":
        catalog = cls()
        for intervention_id, version in latest_published(versions).items():
            catalog._items[intervention_id] = version.as_intervention()
        return catalog

    def list(self) -> List[Intervention]:
        return list(self._items.values())

    def ids(self) -> List[str]:
        return list(self._items)

    def get(self, intervention_id: str) -> Optional[Intervention]:
        return self._items.get(intervention_id)

    def require(self, intervention_id: str) -> Intervention:
        intervention = self.get(intervention_id)
        if intervention is None:
            raise NotFoundError(
                f"Intervention not found: {intervention_id}",
                "intervention_not_found",
            )
        return intervention

    def resolve(self, intervention_ids: Iterable[str]) -> List[Intervention]:
        """Known interventions in the given order; unknown ids are dropped."""
        resolved: List[Intervention] = []
        for intervention_id in intervention_ids:
            intervention = self.get(intervention_id)
            if intervention is not None:
                resolved.append(intervention)
        return resolved

    def __contains__(self, intervention_id: object) -> bool:
        return intervention_id in self._items

    def __len__(self) -> int:
        return len(self._items)
