"""
Built-in metric graph.

Seed data created at import time and never mutated. Accessors return
fresh lists so callers may append without touching the catalog.
"""

from __future__ import annotations

from typing import List, Tuple

from vitalgraph.graph.graph_schema import MetricEdge, MetricNode


def _node(
    id: str,
    label: str,
    *,
    tier: str,
    domain: str,
    position: Tuple[int, int],
    description: str,
) -> MetricNode:
    x, y = position
    return MetricNode(
        id=id,
        label=label,
        tier=tier,
        domain=domain,
        x=float(x),
        y=float(y),
        description=description,
    )


def _edge(
    id: str,
    source: str,
    target: str,
    *,
    direction: str,
    strength: str,
    type: str,
    description: str,
) -> MetricEdge:
    return MetricEdge(
        id=id,
        source=source,
        target=target,
        direction=direction,
        effect_strength=strength,
        type=type,
        description=description,
    )


GRAPH_NODES: Tuple[MetricNode, ...] = (
    _node(
        "weight",
        "Weight",
        tier="core",
        domain="metabolic",
        position=(220, 410),
        description="Total body mass; interacts with cardiovascular strain, composition, and performance metrics.",
    ),
    _node(
        "body_fat",
        "Body Fat %",
        tier="core",
        domain="metabolic",
        position=(390, 230),
        description="Body composition marker tied to metabolic flexibility, aerobic efficiency, and risk profile.",
    ),
    _node(
        "vo2_max",
        "VO2 Max",
        tier="core",
        domain="respiratory",
        position=(660, 170),
        description="Integrated cardio-respiratory fitness capacity and a key endurance performance indicator.",
    ),
    _node(
        "rhr",
        "Resting HR",
        tier="core",
        domain="cardiovascular",
        position=(930, 230),
        description="Baseline autonomic/cardiovascular load marker that shifts with fitness, stress, and hydration.",
    ),
    _node(
        "hrv",
        "HRV",
        tier="core",
        domain="nervous",
        position=(1100, 410),
        description="Autonomic nervous system variability signal, often used as a recovery/readiness proxy.",
    ),
    _node(
        "sleep",
        "Sleep",
        tier="core",
        domain="recovery",
        position=(930, 590),
        description="Sleep duration metric linked to cognitive, hormonal, and autonomic recovery outcomes.",
    ),
    _node(
        "stress",
        "Stress",
        tier="core",
        domain="nervous",
        position=(660, 650),
        description="Self-reported stress load that strongly influences sleep, recovery, and training response.",
    ),
    _node(
        "blood_pressure",
        "Blood Pressure",
        tier="supporting",
        domain="cardiovascular",
        position=(1130, 250),
        description="Hemodynamic pressure marker influenced by vascular tone, fluid balance, and sympathetic load.",
    ),
    _node(
        "resting_resp_rate",
        "Resting Resp Rate",
        tier="supporting",
        domain="respiratory",
        position=(980, 90),
        description="Resting respiratory frequency; can increase with stress, illness, poor recovery, or low fitness.",
    ),
    _node(
        "spo2",
        "SpO2",
        tier="supporting",
        domain="respiratory",
        position=(770, 70),
        description="Peripheral oxygen saturation, reflecting blood oxygen loading and respiratory efficiency.",
    ),
    _node(
        "lactate_threshold",
        "Lactate Threshold",
        tier="supporting",
        domain="respiratory",
        position=(540, 90),
        description="Exercise intensity where lactate accumulation accelerates; key endurance adaptation marker.",
    ),
    _node(
        "training_load",
        "Training Load",
        tier="supporting",
        domain="musculoskeletal",
        position=(1170, 560),
        description="Recent internal/external workload aggregate (e.g., sRPE, volume, intensity, monotony).",
    ),
    _node(
        "recovery_readiness",
        "Recovery Readiness",
        tier="supporting",
        domain="recovery",
        position=(1010, 760),
        description="Composite readiness estimate from sleep, HRV, fatigue, soreness, and perceived exertion.",
    ),
    _node(
        "hydration",
        "Hydration",
        tier="supporting",
        domain="metabolic",
        position=(1230, 410),
        description="Hydration/electrolyte status proxy that can influence HR, blood pressure, and training capacity.",
    ),
    _node(
        "glucose_control",
        "Glucose Control",
        tier="supporting",
        domain="metabolic",
        position=(360, 90),
        description="Insulin sensitivity and glycemic stability proxy linked with adiposity and energy regulation.",
    ),
    _node(
        "inflammation",
        "Inflammation",
        tier="supporting",
        domain="recovery",
        position=(760, 810),
        description="Systemic inflammatory load proxy (e.g., soreness, CRP trends, immune stress response).",
    ),
    _node(
        "muscle_mass",
        "Muscle Mass",
        tier="supporting",
        domain="musculoskeletal",
        position=(220, 590),
        description="Lean mass reserve that impacts strength, resting metabolism, and long-term resilience.",
    ),
    _node(
        "strength_index",
        "Strength Index",
        tier="supporting",
        domain="musculoskeletal",
        position=(260, 760),
        description="Relative force output trend (e.g., normalized 1RM/isometric metrics).",
    ),
    _node(
        "energy_availability",
        "Energy Availability",
        tier="supporting",
        domain="metabolic",
        position=(500, 780),
        description="Dietary energy remaining after training demand; low values can suppress recovery/hormones.",
    ),
    _node(
        "hormonal_balance",
        "Hormonal Balance",
        tier="supporting",
        domain="metabolic",
        position=(600, 810),
        description="Stress/anabolic hormone environment shaping adaptation, mood, and body composition shifts.",
    ),
    _node(
        "sleep_quality",
        "Sleep Quality",
        tier="supporting",
        domain="recovery",
        position=(940, 760),
        description="Sleep architecture/restorative quality proxy beyond duration alone.",
    ),
    _node(
        "mood",
        "Mood",
        tier="supporting",
        domain="nervous",
        position=(680, 830),
        description="Affective state impacting stress perception, adherence, and recovery behavior.",
    ),
)

GRAPH_EDGES: Tuple[MetricEdge, ...] = (
    _edge(
        "sleep_to_hrv",
        "sleep",
        "hrv",
        direction="direct",
        strength="high",
        type="causal",
        description="More sleep generally improves HRV through improved recovery and autonomic balance.",
    ),
    _edge(
        "stress_to_sleep",
        "stress",
        "sleep",
        direction="inverse",
        strength="high",
        type="causal",
        description="Higher stress often shortens sleep duration and worsens sleep quality.",
    ),
    _edge(
        "stress_to_hrv",
        "stress",
        "hrv",
        direction="inverse",
        strength="high",
        type="correlative",
        description="Increased stress load is commonly associated with reduced HRV.",
    ),
    _edge(
        "sleep_to_stress",
        "sleep",
        "stress",
        direction="inverse",
        strength="moderate",
        type="causal",
        description="Adequate sleep lowers perceived stress reactivity.",
    ),
    _edge(
        "vo2_to_rhr",
        "vo2_max",
        "rhr",
        direction="inverse",
        strength="high",
        type="correlative",
        description="Improved aerobic fitness is associated with lower resting heart rate.",
    ),
    _edge(
        "vo2_to_hrv",
        "vo2_max",
        "hrv",
        direction="direct",
        strength="moderate",
        type="correlative",
        description="Cardiorespiratory fitness can improve HRV over time.",
    ),
    _edge(
        "weight_to_vo2",
        "weight",
        "vo2_max",
        direction="inverse",
        strength="moderate",
        type="correlative",
        description="Higher body weight can reduce relative VO2 max if capacity does not rise proportionally.",
    ),
    _edge(
        "bodyfat_to_vo2",
        "body_fat",
        "vo2_max",
        direction="inverse",
        strength="moderate",
        type="correlative",
        description="Lower body fat generally improves movement efficiency and relative aerobic metrics.",
    ),
    _edge(
        "bodyfat_to_weight",
        "body_fat",
        "weight",
        direction="direct",
        strength="moderate",
        type="correlative",
        description="Body fat contributes directly to total body weight.",
    ),
    _edge(
        "rhr_to_stress",
        "rhr",
        "stress",
        direction="direct",
        strength="low",
        type="correlative",
        description="Elevated resting heart rate can signal sympathetic load and stress.",
    ),
    _edge(
        "blood_pressure_to_rhr",
        "blood_pressure",
        "rhr",
        direction="direct",
        strength="moderate",
        type="correlative",
        description="Higher vascular pressure load often coexists with elevated resting pulse.",
    ),
    _edge(
        "hydration_to_blood_pressure",
        "hydration",
        "blood_pressure",
        direction="inverse",
        strength="moderate",
        type="causal",
        description="Improved fluid/electrolyte balance can reduce transient blood pressure strain.",
    ),
    _edge(
        "hydration_to_rhr",
        "hydration",
        "rhr",
        direction="inverse",
        strength="low",
        type="correlative",
        description="Dehydration can elevate resting heart rate through reduced plasma volume.",
    ),
    _edge(
        "vo2_to_resting_resp_rate",
        "vo2_max",
        "resting_resp_rate",
        direction="inverse",
        strength="moderate",
        type="correlative",
        description="Higher aerobic efficiency is typically associated with lower resting respiratory rate.",
    ),
    _edge(
        "resting_resp_rate_to_stress",
        "resting_resp_rate",
        "stress",
        direction="direct",
        strength="low",
        type="correlative",
        description="Higher resting respiratory rate often tracks with stress or fatigue load.",
    ),
    _edge(
        "spo2_to_vo2",
        "spo2",
        "vo2_max",
        direction="direct",
        strength="moderate",
        type="correlative",
        description="Better oxygen saturation supports aerobic capacity and exercise tolerance.",
    ),
    _edge(
        "lactate_threshold_to_vo2",
        "lactate_threshold",
        "vo2_max",
        direction="direct",
        strength="high",
        type="causal",
        description="Threshold improvements often accompany VO2 max and endurance performance gains.",
    ),
    _edge(
        "training_load_to_inflammation",
        "training_load",
        "inflammation",
        direction="direct",
        strength="moderate",
        type="causal",
        description="Accumulated workload can increase inflammatory signals and tissue stress.",
    ),
    _edge(
        "training_load_to_recovery",
        "training_load",
        "recovery_readiness",
        direction="inverse",
        strength="high",
        type="causal",
        description="High acute load without recovery tends to reduce readiness.",
    ),
    _edge(
        "training_load_to_rhr",
        "training_load",
        "rhr",
        direction="direct",
        strength="low",
        type="correlative",
        description="Overreaching periods can temporarily elevate resting heart rate.",
    ),
    _edge(
        "recovery_to_hrv",
        "recovery_readiness",
        "hrv",
        direction="direct",
        strength="high",
        type="correlative",
        description="Higher readiness states generally align with improved HRV patterns.",
    ),
    _edge(
        "recovery_to_sleep",
        "recovery_readiness",
        "sleep",
        direction="direct",
        strength="moderate",
        type="correlative",
        description="Readiness and sleep quality usually improve together when load is well-managed.",
    ),
    _edge(
        "sleep_quality_to_sleep",
        "sleep_quality",
        "sleep",
        direction="direct",
        strength="high",
        type="correlative",
        description="Better sleep architecture tends to accompany stable total sleep duration.",
    ),
    _edge(
        "sleep_quality_to_hrv",
        "sleep_quality",
        "hrv",
        direction="direct",
        strength="moderate",
        type="correlative",
        description="High-quality sleep typically yields stronger parasympathetic recovery signatures.",
    ),
    _edge(
        "stress_to_sleep_quality",
        "stress",
        "sleep_quality",
        direction="inverse",
        strength="high",
        type="causal",
        description="Higher stress frequently fragments sleep and lowers restorative depth.",
    ),
    _edge(
        "inflammation_to_hrv",
        "inflammation",
        "hrv",
        direction="inverse",
        strength="moderate",
        type="correlative",
        description="Inflammatory load is often associated with suppressed HRV.",
    ),
    _edge(
        "inflammation_to_sleep_quality",
        "inflammation",
        "sleep_quality",
        direction="inverse",
        strength="moderate",
        type="correlative",
        description="Elevated inflammatory burden can impair sleep continuity and quality.",
    ),
    _edge(
        "glucose_to_bodyfat",
        "glucose_control",
        "body_fat",
        direction="inverse",
        strength="moderate",
        type="correlative",
        description="Improved glucose control is generally associated with lower body fat trends.",
    ),
    _edge(
        "bodyfat_to_glucose",
        "body_fat",
        "glucose_control",
        direction="inverse",
        strength="high",
        type="correlative",
        description="Higher body fat can worsen insulin sensitivity and glycemic regulation.",
    ),
    _edge(
        "energy_to_hormonal",
        "energy_availability",
        "hormonal_balance",
        direction="direct",
        strength="high",
        type="causal",
        description="Sufficient energy availability supports stable endocrine function and adaptation.",
    ),
    _edge(
        "energy_to_recovery",
        "energy_availability",
        "recovery_readiness",
        direction="direct",
        strength="moderate",
        type="correlative",
        description="Fueling adequacy usually improves readiness and tolerance to training demand.",
    ),
    _edge(
        "hormonal_to_stress",
        "hormonal_balance",
        "stress",
        direction="inverse",
        strength="moderate",
        type="correlative",
        description="Balanced endocrine state can reduce stress vulnerability and allostatic load.",
    ),
    _edge(
        "hormonal_to_mood",
        "hormonal_balance",
        "mood",
        direction="direct",
        strength="moderate",
        type="correlative",
        description="Hormonal stability often improves mood regulation and motivation.",
    ),
    _edge(
        "mood_to_stress",
        "mood",
        "stress",
        direction="inverse",
        strength="high",
        type="correlative",
        description="Improved mood and resilience usually track with lower perceived stress.",
    ),
    _edge(
        "sleep_to_mood",
        "sleep",
        "mood",
        direction="direct",
        strength="moderate",
        type="correlative",
        description="Consistent sleep tends to improve mood stability and emotional regulation.",
    ),
    _edge(
        "muscle_to_strength",
        "muscle_mass",
        "strength_index",
        direction="direct",
        strength="high",
        type="correlative",
        description="Greater lean mass generally supports higher strength expression potential.",
    ),
    _edge(
        "hormonal_to_muscle",
        "hormonal_balance",
        "muscle_mass",
        direction="direct",
        strength="moderate",
        type="causal",
        description="Anabolic-friendly hormonal state supports lean mass maintenance and growth.",
    ),
    _edge(
        "strength_to_vo2",
        "strength_index",
        "vo2_max",
        direction="direct",
        strength="low",
        type="correlative",
        description="Strength improvements can indirectly support aerobic training quality and economy.",
    ),
    _edge(
        "weight_to_blood_pressure",
        "weight",
        "blood_pressure",
        direction="direct",
        strength="low",
        type="correlative",
        description="Higher body mass trends can elevate blood pressure load in susceptible individuals.",
    ),
)


def base_nodes() -> List[MetricNode]:
    return list(GRAPH_NODES)


def base_edges() -> List[MetricEdge]:
    return list(GRAPH_EDGES)


def core_node_ids() -> List[str]:
    return [node.id for node in GRAPH_NODES if node.is_core]
