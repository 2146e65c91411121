"""
Payload validation at the edges of the core.

Request bodies arrive as loosely-typed JSON. Each ``parse_*`` function
normalizes one payload with pydantic and either returns a typed input
or raises ``vitalgraph.errors.ValidationError`` carrying the first
failure's code and message. Graph imports attach the position of the
failing item (``metrics[i]: `` / ``edges[j]: ``).
"""

from __future__ import annotations

import math
import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Mapping, Optional, Type, TypeVar

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import PydanticCustomError

from vitalgraph.errors import ValidationError
from vitalgraph.graph.graph_schema import (
    EDGE_DIRECTIONS,
    EDGE_STRENGTHS,
    EDGE_TYPES,
    NODE_DOMAINS,
    MetricEdge,
    MetricNode,
)
from vitalgraph.interventions.schema import (
    CONFIDENCE_LEVELS,
    INTERVENTION_CATEGORIES,
    Contraindication,
    InterventionEffect,
    StudySource,
    VersionDraft,
)
from vitalgraph.metrics.definitions import is_metric_name

NODE_ID_PATTERN = re.compile(r"^[a-z0-9_]+$")

P = TypeVar("P", bound=BaseModel)


def _reject(code: str, message: str) -> PydanticCustomError:
    return PydanticCustomError(code, message, {"vitalgraph": True})


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None
    if isinstance(value, str) and value.strip():
        try:
            parsed = float(value)
        except ValueError:
            return None
        return parsed if math.isfinite(parsed) else None
    return None


def _to_error(exc: PydanticValidationError) -> ValidationError:
    first = exc.errors()[0]
    if (first.get("ctx") or {}).get("vitalgraph"):
        return ValidationError(first["msg"], first["type"])

    location = ".".join(str(part) for part in first.get("loc", ()))
    message = f"{location}: {first['msg']}" if location else first["msg"]
    return ValidationError(message)


def _parse(model: Type[P], raw: Any) -> P:
    if not isinstance(raw, Mapping):
        raise ValidationError("Request body must be an object", "invalid_body")
    try:
        return model.model_validate(dict(raw))
    except PydanticValidationError as exc:
        raise _to_error(exc) from exc


class _Payload(BaseModel):
    model_config = ConfigDict(
        extra="ignore",
        frozen=True,
        populate_by_name=True,
        validate_default=True,
    )


# ---------------------------------------------------------------------
# Graph metrics & edges
# ---------------------------------------------------------------------


class MetricNodeInput(_Payload):
    id: str = ""
    label: str = ""
    description: str = ""
    domain: str = ""
    x: float = Field(default=None)
    y: float = Field(default=None)
    tier: str = "supporting"

    @field_validator("id", mode="before")
    @classmethod
    def _check_id(cls, value: Any) -> str:
        node_id = _text(value).lower()
        if not node_id or not NODE_ID_PATTERN.match(node_id):
            raise _reject(
                "graph_metric_invalid_id",
                "id must be lowercase alphanumeric plus underscores",
            )
        return node_id

    @field_validator("label", mode="before")
    @classmethod
    def _check_label(cls, value: Any) -> str:
        label = _text(value)
        if not label:
            raise _reject("graph_metric_invalid_label", "label is required")
        return label

    @field_validator("description", mode="before")
    @classmethod
    def _check_description(cls, value: Any) -> str:
        description = _text(value)
        if not description:
            raise _reject("graph_metric_invalid_description", "description is required")
        return description

    @field_validator("domain", mode="before")
    @classmethod
    def _check_domain(cls, value: Any) -> str:
        domain = _text(value)
        if domain not in NODE_DOMAINS:
            raise _reject("graph_metric_invalid_domain", "domain is invalid")
        return domain

    @field_validator("x", "y", mode="before")
    @classmethod
    def _check_position(cls, value: Any) -> float:
        number = _number(value)
        if number is None:
            raise _reject("graph_metric_invalid_position", "x and y must be numeric")
        return number

    @field_validator("tier", mode="before")
    @classmethod
    def _coerce_tier(cls, value: Any) -> str:
        return "core" if _text(value) == "core" else "supporting"

    def to_node(self) -> MetricNode:
        return MetricNode(
            id=self.id,
            label=self.label,
            tier=self.tier,
            domain=self.domain,
            x=self.x,
            y=self.y,
            description=self.description,
        )


class MetricEdgeInput(_Payload):
    id: Optional[str] = None
    source: str = ""
    target: str = ""
    direction: str = ""
    effect_strength: str = Field(
        default="",
        validation_alias=AliasChoices("effect_strength", "effectStrength"),
    )
    type: str = ""
    description: str = ""

    @field_validator("id", mode="before")
    @classmethod
    def _blank_id(cls, value: Any) -> Optional[str]:
        return _text(value) or None

    @field_validator("source", "target", mode="before")
    @classmethod
    def _check_endpoint(cls, value: Any) -> str:
        endpoint = _text(value)
        if not endpoint:
            raise _reject("graph_edge_invalid_nodes", "source and target are required")
        return endpoint

    @field_validator("direction", mode="before")
    @classmethod
    def _check_direction(cls, value: Any) -> str:
        direction = _text(value)
        if direction not in EDGE_DIRECTIONS:
            raise _reject("graph_edge_invalid_direction", "direction must be direct or inverse")
        return direction

    @field_validator("effect_strength", mode="before")
    @classmethod
    def _check_strength(cls, value: Any) -> str:
        strength = _text(value)
        if strength not in EDGE_STRENGTHS:
            raise _reject(
                "graph_edge_invalid_strength",
                "effect_strength must be low, moderate, or high",
            )
        return strength

    @field_validator("type", mode="before")
    @classmethod
    def _check_type(cls, value: Any) -> str:
        edge_type = _text(value)
        if edge_type not in EDGE_TYPES:
            raise _reject("graph_edge_invalid_type", "type must be causal or correlative")
        return edge_type

    @field_validator("description", mode="before")
    @classmethod
    def _check_description(cls, value: Any) -> str:
        description = _text(value)
        if not description:
            raise _reject("graph_edge_invalid_description", "description is required")
        return description

    def to_edge(self) -> MetricEdge:
        """Edge with the explicit id, or a generated uuid4 hex id."""
        return MetricEdge.create(
            source=self.source,
            target=self.target,
            direction=self.direction,
            effect_strength=self.effect_strength,
            type=self.type,
            description=self.description,
            id=self.id,
        )


class GraphImportInput(_Payload):
    mode: Literal["append", "replace_custom"] = "append"
    metrics: List[MetricNodeInput] = Field(default_factory=list)
    edges: List[MetricEdgeInput] = Field(default_factory=list)


def parse_graph_metric(raw: Any) -> MetricNodeInput:
    return _parse(MetricNodeInput, raw)


def parse_graph_edge(raw: Any) -> MetricEdgeInput:
    return _parse(MetricEdgeInput, raw)


def _first_list(*candidates: Any) -> List[Any]:
    for candidate in candidates:
        if isinstance(candidate, list):
            return candidate
    return []


def parse_graph_import(raw: Any) -> GraphImportInput:
    """
    Accept a bare ``{mode, metrics, edges}`` payload, or an export bundle
    carrying them under ``import_template`` or ``custom``.
    """
    if not isinstance(raw, Mapping):
        raise ValidationError("Request body must be an object", "invalid_body")

    template = raw.get("import_template") or raw.get("importTemplate")
    template = template if isinstance(template, Mapping) else {}
    custom = raw.get("custom") if isinstance(raw.get("custom"), Mapping) else {}

    metrics_raw = _first_list(raw.get("metrics"), template.get("metrics"), custom.get("metrics"))
    edges_raw = _first_list(raw.get("edges"), template.get("edges"), custom.get("edges"))

    mode = _text(raw.get("mode", template.get("mode"))).lower()

    if not metrics_raw and not edges_raw:
        raise ValidationError(
            "Provide at least one metric or edge for import",
            "graph_import_empty",
        )

    metrics: List[MetricNodeInput] = []
    for index, entry in enumerate(metrics_raw):
        try:
            metrics.append(parse_graph_metric(entry))
        except ValidationError as exc:
            raise exc.with_prefix(f"metrics[{index}]: ") from exc

    edges: List[MetricEdgeInput] = []
    for index, entry in enumerate(edges_raw):
        try:
            edges.append(parse_graph_edge(entry))
        except ValidationError as exc:
            raise exc.with_prefix(f"edges[{index}]: ") from exc

    return GraphImportInput(
        mode="replace_custom" if mode == "replace_custom" else "append",
        metrics=metrics,
        edges=edges,
    )


# ---------------------------------------------------------------------
# Intervention versions
# ---------------------------------------------------------------------


class EffectInput(_Payload):
    metric: str = ""
    change: float = Field(
        default=None,
        validation_alias=AliasChoices("change", "change_value", "changeValue"),
    )
    unit: str = ""
    confidence: str = ""
    assumptions: str = ""
    range: Optional[List[float]] = None

    @field_validator("metric", mode="before")
    @classmethod
    def _check_metric(cls, value: Any) -> str:
        metric = _text(value)
        if not is_metric_name(metric):
            raise _reject("invalid_effect_metric", "effect.metric must be a valid metric name")
        return metric

    @field_validator("change", mode="before")
    @classmethod
    def _check_change(cls, value: Any) -> float:
        number = _number(value)
        if number is None:
            raise _reject("invalid_effect_change", "effect.change must be numeric")
        return number

    @field_validator("unit", mode="before")
    @classmethod
    def _check_unit(cls, value: Any) -> str:
        unit = _text(value)
        if not unit:
            raise _reject("invalid_effect_unit", "effect.unit is required")
        return unit

    @field_validator("confidence", mode="before")
    @classmethod
    def _check_confidence(cls, value: Any) -> str:
        confidence = _text(value).lower()
        if confidence not in CONFIDENCE_LEVELS:
            raise _reject(
                "invalid_effect_confidence",
                "effect.confidence must be low, moderate, or high",
            )
        return confidence

    @field_validator("assumptions", mode="before")
    @classmethod
    def _check_assumptions(cls, value: Any) -> str:
        assumptions = _text(value)
        if not assumptions:
            raise _reject("invalid_effect_assumptions", "effect.assumptions is required")
        return assumptions

    @field_validator("range", mode="before")
    @classmethod
    def _coerce_range(cls, value: Any) -> Optional[List[float]]:
        if not isinstance(value, (list, tuple)) or len(value) != 2:
            return None
        low, high = _number(value[0]), _number(value[1])
        if low is None or high is None:
            return None
        return [low, high]

    def to_effect(self) -> InterventionEffect:
        return InterventionEffect(
            metric=self.metric,
            change_value=self.change,
            unit=self.unit,
            confidence=self.confidence,
            assumptions=self.assumptions,
            range=(self.range[0], self.range[1]) if self.range else None,
        )


class ContraindicationInput(_Payload):
    scenario: str = ""
    warning: str = ""

    @field_validator("scenario", "warning", mode="before")
    @classmethod
    def _check_text(cls, value: Any) -> str:
        text = _text(value)
        if not text:
            raise _reject(
                "invalid_contraindication",
                "contraindication scenario and warning are required",
            )
        return text


def _objects_only(value: Any, code: str, message: str) -> List[Any]:
    if not isinstance(value, list):
        return []
    for item in value:
        if not isinstance(item, Mapping):
            raise _reject(code, message)
    return value


def _study_source(value: Any) -> Optional[Dict[str, Any]]:
    if not isinstance(value, Mapping):
        return None

    url = _text(value.get("url"))
    title = _text(value.get("title"))
    authors = _text(value.get("authors"))
    year = _number(value.get("year"))
    doi = _text(value.get("doi"))
    if not (url and title and authors and year and doi):
        return None

    scraped_raw = _text(value.get("scraped_at") or value.get("scrapedAt"))
    if scraped_raw:
        try:
            scraped = datetime.fromisoformat(scraped_raw.replace("Z", "+00:00"))
        except ValueError:
            raise _reject(
                "invalid_study_source",
                "study_source.scraped_at must be an ISO timestamp",
            ) from None
        if scraped.tzinfo is None:
            scraped = scraped.replace(tzinfo=timezone.utc)
    else:
        scraped = datetime.now(timezone.utc)

    return {
        "url": url,
        "title": title,
        "authors": authors,
        "year": int(year),
        "doi": doi,
        "scraped_at": scraped.isoformat(),
    }


class InterventionVersionInput(_Payload):
    intervention_id: str = Field(
        default="",
        validation_alias=AliasChoices("intervention_id", "interventionId"),
    )
    name: str = ""
    category: str = ""
    duration_weeks: int = Field(
        default=None,
        validation_alias=AliasChoices("duration_weeks", "durationWeeks"),
    )
    frequency: str = ""
    description: str = ""
    effects: List[EffectInput] = Field(default_factory=list)
    contraindications: List[ContraindicationInput] = Field(
        default_factory=list,
        validation_alias=AliasChoices("contraindications", "contraindication"),
    )
    study_source: Optional[Dict[str, Any]] = Field(
        default=None,
        validation_alias=AliasChoices("study_source", "studySource"),
    )

    @field_validator("intervention_id", mode="before")
    @classmethod
    def _check_id(cls, value: Any) -> str:
        intervention_id = _text(value)
        if not intervention_id:
            raise _reject("invalid_intervention_id", "intervention_id is required")
        return intervention_id

    @field_validator("name", mode="before")
    @classmethod
    def _check_name(cls, value: Any) -> str:
        name = _text(value)
        if not name:
            raise _reject("invalid_intervention_name", "name is required")
        return name

    @field_validator("category", mode="before")
    @classmethod
    def _check_category(cls, value: Any) -> str:
        category = _text(value)
        if category not in INTERVENTION_CATEGORIES:
            raise _reject("invalid_intervention_category", "category is invalid")
        return category

    @field_validator("duration_weeks", mode="before")
    @classmethod
    def _check_duration(cls, value: Any) -> int:
        weeks = _number(value)
        if weeks is None or weeks < 1 or not weeks.is_integer():
            raise _reject(
                "invalid_duration_weeks",
                "duration_weeks must be a positive number",
            )
        return int(weeks)

    @field_validator("frequency", mode="before")
    @classmethod
    def _check_frequency(cls, value: Any) -> str:
        frequency = _text(value)
        if not frequency:
            raise _reject("invalid_intervention_frequency", "frequency is required")
        return frequency

    @field_validator("description", mode="before")
    @classmethod
    def _check_description(cls, value: Any) -> str:
        description = _text(value)
        if not description:
            raise _reject("invalid_intervention_description", "description is required")
        return description

    @field_validator("effects", mode="before")
    @classmethod
    def _check_effect_items(cls, value: Any) -> List[Any]:
        return _objects_only(value, "invalid_intervention_effect", "effect must be an object")

    @field_validator("effects")
    @classmethod
    def _require_effects(cls, value: List[EffectInput]) -> List[EffectInput]:
        if not value:
            raise _reject(
                "invalid_intervention_effects",
                "effects must contain at least one item",
            )
        return value

    @field_validator("contraindications", mode="before")
    @classmethod
    def _check_contraindication_items(cls, value: Any) -> List[Any]:
        return _objects_only(
            value,
            "invalid_contraindication",
            "contraindication must be an object",
        )

    @field_validator("study_source", mode="before")
    @classmethod
    def _coerce_study_source(cls, value: Any) -> Optional[Dict[str, Any]]:
        return _study_source(value)

    def to_draft(self) -> VersionDraft:
        return VersionDraft(
            intervention_id=self.intervention_id,
            name=self.name,
            category=self.category,
            duration_weeks=self.duration_weeks,
            frequency=self.frequency,
            description=self.description,
            effects=tuple(effect.to_effect() for effect in self.effects),
            contraindications=tuple(
                Contraindication(scenario=c.scenario, warning=c.warning)
                for c in self.contraindications
            ),
            study_source=StudySource.from_dict(self.study_source),
        )


def parse_intervention_version(raw: Any) -> VersionDraft:
    return _parse(InterventionVersionInput, raw).to_draft()


# ---------------------------------------------------------------------
# Simulation requests
# ---------------------------------------------------------------------


class SimulateInput(_Payload):
    selected_interventions: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices(
            "selectedInterventions",
            "selected_interventions",
            "selectedInterventionIds",
        ),
    )

    @field_validator("selected_interventions", mode="before")
    @classmethod
    def _strings_only(cls, value: Any) -> List[str]:
        if not isinstance(value, list):
            return []
        return [item for item in value if isinstance(item, str)]


def parse_simulate(raw: Any) -> List[str]:
    """Selected intervention ids; anything malformed means none."""
    if not isinstance(raw, Mapping):
        return []
    return list(SimulateInput.model_validate(dict(raw)).selected_interventions)
