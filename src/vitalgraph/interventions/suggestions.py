from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Literal, Tuple

from vitalgraph.metrics.latest import MetricReading

GOAL_SCORE: Dict[str, int] = {
    "recovery": 3,
    "stress_reduction": 2,
    "weight_loss": 2,
}
MAX_SUGGESTIONS = 3


@dataclass(frozen=True)
class RuleCondition:
    metric: str
    operator: Literal["above", "below"]
    value: float
    unit: str

    def matches(self, reading: MetricReading) -> bool:
        # Thresholds compare the raw logged value; units are informational.
        if self.operator == "above":
            return reading.value > self.value
        if self.operator == "below":
            return reading.value < self.value
        return False


@dataclass(frozen=True)
class SuggestionRule:
    id: str
    condition: RuleCondition
    goal: str
    suggested_interventions: Tuple[str, ...]
    message: str

    @property
    def score(self) -> int:
        return GOAL_SCORE.get(self.goal, 1)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "condition": {
                "metric": self.condition.metric,
                "operator": self.condition.operator,
                "value": self.condition.value,
                "unit": self.condition.unit,
            },
            "goal": self.goal,
            "suggested_interventions": list(self.suggested_interventions),
            "message": self.message,
        }


SUGGESTION_RULES: Tuple[SuggestionRule, ...] = (
    SuggestionRule(
        id="weight_loss_priority",
        condition=RuleCondition("weight", "above", 85, "kg"),
        goal="weight_loss",
        suggested_interventions=("diet_500_deficit", "cardio_moderate_3x"),
        message=(
            "Your current weight is above your target range. A moderate caloric "
            "deficit plus cardio is the most evidence-backed starting point."
        ),
    ),
    SuggestionRule(
        id="sleep_recovery_priority",
        condition=RuleCondition("sleep", "below", 6, "hours"),
        goal="recovery",
        suggested_interventions=("screen_time_reduction", "cardio_moderate_3x"),
        message=(
            "Sleep below 6 hours impairs recovery. Start with reduced evening "
            "screen exposure and lower-intensity cardio."
        ),
    ),
    SuggestionRule(
        id="stress_reset_priority",
        condition=RuleCondition("stress", "above", 7, "1-10"),
        goal="stress_reduction",
        suggested_interventions=("screen_time_reduction", "cardio_moderate_3x"),
        message=(
            "Your stress is elevated. Moderate cardio and sleep consistency are "
            "strong first-line interventions."
        ),
    ),
    SuggestionRule(
        id="cardio_capacity_priority",
        condition=RuleCondition("vo2_max", "below", 38, "ml/kg/min"),
        goal="cardio_fitness",
        suggested_interventions=("cardio_moderate_3x", "weight_training_5x5"),
        message=(
            "Your VO2 max suggests low aerobic reserve. Add structured cardio "
            "first, then layer strength."
        ),
    ),
)


def build_suggestions(
    latest: Iterable[MetricReading],
    rules: Iterable[SuggestionRule] = SUGGESTION_RULES,
) -> List[SuggestionRule]:
    """
    Rules triggered by the caller's latest readings, best goal first.

    Ties keep rule order. At most three suggestions are returned.
    """
    by_metric = {reading.metric_name: reading for reading in latest}

    matches = [
        rule
        for rule in rules
        if rule.condition.metric in by_metric
        and rule.condition.matches(by_metric[rule.condition.metric])
    ]
    matches.sort(key=lambda rule: rule.score, reverse=True)
    return matches[:MAX_SUGGESTIONS]
