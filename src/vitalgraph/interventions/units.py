from __future__ import annotations

from vitalgraph.interventions.schema import InterventionEffect
from vitalgraph.metrics.definitions import convert_weight, is_mass_unit

# Metrics whose "%" effects scale the baseline instead of adding to it.
RELATIVE_PERCENT_METRICS = frozenset({"vo2_max", "hrv"})


def is_relative(metric: str, effect: InterventionEffect) -> bool:
    return effect.unit == "%" and metric in RELATIVE_PERCENT_METRICS


def normalize_effect(
    metric: str,
    effect: InterventionEffect,
    current_unit: str,
    weight_unit: str,
) -> float:
    """
    Express ``effect.change_value`` in the unit the caller's value is in.

    For weight, mass units are converted into ``current_unit`` when that
    is itself a mass unit, otherwise into the caller's ``weight_unit``
    preference. A ``%`` effect on vo2_max/hrv becomes a fraction. Every
    other combination passes through unchanged.
    """
    if metric == "weight":
        if effect.unit == current_unit:
            return effect.change_value
        if is_mass_unit(effect.unit) and is_mass_unit(current_unit):
            return convert_weight(effect.change_value, effect.unit, current_unit)
        if is_mass_unit(effect.unit):
            return convert_weight(effect.change_value, effect.unit, weight_unit)
        return effect.change_value

    if is_relative(metric, effect):
        return effect.change_value / 100

    return effect.change_value


def apply_effect(
    metric: str,
    baseline: float,
    effect: InterventionEffect,
    current_unit: str,
    weight_unit: str,
) -> float:
    normalized = normalize_effect(metric, effect, current_unit, weight_unit)
    if is_relative(metric, effect):
        return baseline * (1 + normalized)
    return baseline + normalized
