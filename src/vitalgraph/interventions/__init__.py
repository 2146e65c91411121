from vitalgraph.interventions.catalog import (
    INTERVENTION_MAP,
    INTERVENTIONS,
    InterventionCatalog,
)
from vitalgraph.interventions.conflicts import (
    ContraindicationDetector,
    KeywordContraindicationDetector,
)
from vitalgraph.interventions.schema import (
    Contraindication,
    Intervention,
    InterventionEffect,
    InterventionVersion,
    StudySource,
    VersionDraft,
)
from vitalgraph.interventions.simulator import (
    MetricProjection,
    SimulationResult,
    simulate_stack,
)
from vitalgraph.interventions.suggestions import SUGGESTION_RULES, build_suggestions
from vitalgraph.interventions.units import apply_effect, normalize_effect

__all__ = [
    "INTERVENTIONS",
    "INTERVENTION_MAP",
    "SUGGESTION_RULES",
    "Contraindication",
    "ContraindicationDetector",
    "Intervention",
    "InterventionCatalog",
    "InterventionEffect",
    "InterventionVersion",
    "KeywordContraindicationDetector",
    "MetricProjection",
    "SimulationResult",
    "StudySource",
    "VersionDraft",
    "apply_effect",
    "build_suggestions",
    "normalize_effect",
    "simulate_stack",
]
