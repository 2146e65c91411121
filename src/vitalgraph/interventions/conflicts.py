from __future__ import annotations

from typing import List, Protocol, Sequence

from vitalgraph.interventions.schema import Intervention

# (keyword in scenario text, substring of a selected intervention id)
SCENARIO_KEYWORDS = (
    ("cardio", "cardio"),
    ("weight_training", "weight_training"),
    ("deficit", "diet"),
)


class ContraindicationDetector(Protocol):
    def detect(self, selected: Sequence[Intervention]) -> List[str]:
        """Warnings for a resolved intervention stack, de-duplicated."""
        ...


class KeywordContraindicationDetector:
    """
    Substring heuristic over contraindication scenarios.

    Each keyword that appears in a scenario and whose id fragment matches
    any selected intervention adds one to the match strength. A warning
    fires at strength two or more, and also whenever more than one
    intervention is selected at all, whatever the strength. The second
    rule flags any stack, conflicting or not.
    """

    threshold = 2

    def match_strength(self, scenario: str, selected_ids: Sequence[str]) -> int:
        lowered = scenario.lower()
        strength = 0
        for keyword, id_fragment in SCENARIO_KEYWORDS:
            if keyword in lowered and any(id_fragment in i for i in selected_ids):
                strength += 1
        return strength

    def detect(self, selected: Sequence[Intervention]) -> List[str]:
        selected_ids = list(dict.fromkeys(item.id for item in selected))
        stacked = len(selected) > 1

        warnings: List[str] = []
        for intervention in selected:
            for contraindication in intervention.contraindications:
                strength = self.match_strength(contraindication.scenario, selected_ids)
                if strength >= self.threshold or stacked:
                    warnings.append(contraindication.warning)

        return list(dict.fromkeys(warnings))
