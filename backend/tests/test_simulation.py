import pytest

from vitalgraph.interventions.catalog import INTERVENTIONS, InterventionCatalog
from vitalgraph.interventions.conflicts import KeywordContraindicationDetector
from vitalgraph.interventions.schema import (
    Contraindication,
    Intervention,
    InterventionEffect,
)
from vitalgraph.interventions.simulator import combined_confidence, simulate_stack, starting_unit
from vitalgraph.interventions.units import apply_effect, normalize_effect
from vitalgraph.metrics.definitions import KG_TO_LBS, METRIC_NAMES, classify_change, convert_weight
from vitalgraph.metrics.latest import MetricReading

NOW = "2026-03-01T08:00:00+00:00"


def _reading(metric: str, value: float, unit: str) -> MetricReading:
    return MetricReading(metric_name=metric, value=value, unit=unit, recorded_at=NOW)


def _effect(metric: str, change: float, unit: str, confidence: str = "moderate") -> InterventionEffect:
    return InterventionEffect(
        metric=metric,
        change_value=change,
        unit=unit,
        confidence=confidence,
        assumptions="test fixture",
    )


def test_builtin_catalog_ids_are_ordered():
    assert [item.id for item in INTERVENTIONS] == [
        "weight_training_5x5",
        "cardio_moderate_3x",
        "diet_500_deficit",
        "screen_time_reduction",
    ]


def test_stacked_weight_effects_cancel_partially():
    result = simulate_stack(
        [_reading("weight", 90.0, "kg")],
        ["weight_training_5x5", "cardio_moderate_3x"],
        "kg",
    )

    row = result.row("weight")
    assert row.predicted == pytest.approx(90.5)
    assert row.delta == pytest.approx(0.5)
    assert row.direction == "worsened"
    assert row.confidence == "moderate"


def test_percent_effects_on_vo2_max_compound():
    latest = [_reading("vo2_max", 35.0, "ml/kg/min")]

    single = simulate_stack(latest, ["cardio_moderate_3x"], "kg")
    assert single.predicted["vo2_max"] == pytest.approx(38.5)
    assert single.row("vo2_max").direction == "improved"

    stacked = simulate_stack(latest, ["cardio_moderate_3x", "weight_training_5x5"], "kg")
    assert stacked.predicted["vo2_max"] == pytest.approx(35 * 1.10 * 1.03)


def test_percent_effect_on_body_fat_is_additive():
    result = simulate_stack([_reading("body_fat", 22.0, "%")], ["diet_500_deficit"], "kg")

    assert result.predicted["body_fat"] == pytest.approx(19.5)


def test_empty_selection_changes_nothing():
    latest = [_reading("weight", 80.0, "kg"), _reading("sleep", 7.0, "hours")]

    result = simulate_stack(latest, [], "kg")

    assert result.current == result.predicted
    assert all(row.direction == "unchanged" for row in result.table)
    assert [row.metric_name for row in result.table] == list(METRIC_NAMES)
    assert result.warnings == []


def test_missing_readings_start_at_zero():
    result = simulate_stack([], ["screen_time_reduction"], "kg")

    assert result.current["sleep"] == 0.0
    assert result.predicted["sleep"] == pytest.approx(0.75)
    # Relative change of nothing is still nothing.
    assert result.predicted["hrv"] == 0.0


def test_weight_effects_convert_to_pounds():
    result = simulate_stack([_reading("weight", 200.0, "lbs")], ["diet_500_deficit"], "lbs")

    assert result.predicted["weight"] == pytest.approx(200 - 4.1 * KG_TO_LBS)
    assert result.row("weight").direction == "improved"


def test_weight_reading_unit_wins_over_preference():
    result = simulate_stack([_reading("weight", 90.0, "kg")], ["diet_500_deficit"], "lbs")

    assert result.predicted["weight"] == pytest.approx(85.9)


def test_starting_unit_without_reading_follows_effect_unit():
    assert starting_unit(_effect("vo2_max", 10, "%"), None, "lbs") == "%"
    assert starting_unit(_effect("sleep", 0.5, "hours"), None, "lbs") == "hours"
    assert starting_unit(_effect("weight", -2, "kg"), None, "lbs") == "lbs"
    assert starting_unit(_effect("weight", -2, "kg"), _reading("weight", 90.0, "kg"), "lbs") == "kg"


def test_convert_weight_round_trip():
    for value in (0.0, 1.0, 72.5, 180.3):
        there = convert_weight(value, "kg", "lbs")
        assert convert_weight(there, "lbs", "kg") == pytest.approx(value, abs=1e-6)
    assert convert_weight(10.0, "kg", "kg") == 10.0


def test_normalize_and_apply_effect():
    hrv = _effect("hrv", 10, "%")
    assert normalize_effect("hrv", hrv, "ms", "kg") == pytest.approx(0.1)
    assert apply_effect("hrv", 50.0, hrv, "ms", "kg") == pytest.approx(55.0)

    stress = _effect("stress", -2, "1-10")
    assert apply_effect("stress", 6.0, stress, "1-10", "kg") == pytest.approx(4.0)

    # A non-mass current unit falls back to the caller's preference.
    weight = _effect("weight", 1.0, "kg")
    assert normalize_effect("weight", weight, "stone", "lbs") == pytest.approx(KG_TO_LBS)


def test_classify_change_uses_improvement_direction():
    assert classify_change("rhr", -3) == "improved"
    assert classify_change("sleep", -0.5) == "worsened"
    assert classify_change("stress", 0.0005) == "unchanged"


def test_combined_confidence_takes_highest_level():
    catalog = InterventionCatalog()
    selected = catalog.resolve(["diet_500_deficit", "screen_time_reduction"])

    assert combined_confidence(selected, "sleep") == "moderate"
    assert combined_confidence(catalog.resolve(["weight_training_5x5"]), "body_fat") == "low"
    assert combined_confidence(selected, "rhr") == "moderate"


def test_unknown_intervention_ids_are_ignored():
    latest = [_reading("weight", 90.0, "kg")]

    result = simulate_stack(latest, ["unknown_program", "cardio_moderate_3x"], "kg")

    assert [item.id for item in result.interventions] == ["cardio_moderate_3x"]
    assert result.predicted["weight"] == pytest.approx(88.2)


def test_stacking_always_surfaces_contraindications():
    result = simulate_stack([], ["weight_training_5x5", "cardio_moderate_3x"], "kg")

    assert len(result.warnings) == 2
    assert result.warnings[0].startswith("Combining high-volume cardio")
    assert result.warnings[1].startswith("High cardio load")


def test_single_builtin_intervention_has_no_warning():
    assert simulate_stack([], ["weight_training_5x5"], "kg").warnings == []
    assert simulate_stack([], ["screen_time_reduction"], "kg").warnings == []


def test_warnings_are_deduplicated():
    result = simulate_stack([], ["cardio_moderate_3x", "cardio_moderate_3x"], "kg")

    assert len(result.warnings) == 1


def test_single_intervention_warns_on_strong_keyword_match():
    combo = Intervention(
        id="cardio_weight_training_combo",
        name="Hybrid Block",
        category="hybrid",
        duration_weeks=6,
        frequency="5x/week",
        description="Lifting and conditioning on the same days.",
        effects=(_effect("weight", -1.0, "kg"),),
        contraindications=(
            Contraindication(
                scenario="heavy_cardio + weight_training",
                warning="Split sessions to protect recovery.",
            ),
        ),
    )
    detector = KeywordContraindicationDetector()

    assert detector.match_strength("heavy_cardio + weight_training", [combo.id]) == 2

    result = simulate_stack(
        [],
        [combo.id],
        "kg",
        catalog=InterventionCatalog([combo]),
        detector=detector,
    )
    assert result.warnings == ["Split sessions to protect recovery."]


def test_simulation_result_serializes():
    data = simulate_stack([_reading("sleep", 6.0, "hours")], ["screen_time_reduction"], "kg").to_dict()

    assert set(data) == {"current", "predicted", "table", "warnings", "interventions"}
    assert data["table"][5]["metric_name"] == "sleep"
    assert data["table"][5]["direction"] == "improved"
    assert data["interventions"][0]["id"] == "screen_time_reduction"
