from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict, List, Literal, Optional, Tuple

Confidence = Literal["low", "moderate", "high"]
InterventionCategory = Literal["strength", "cardio", "diet", "sleep", "stress", "hybrid"]
VersionStatus = Literal["draft", "published", "archived"]

CONFIDENCE_LEVELS: Tuple[str, ...] = ("low", "moderate", "high")
INTERVENTION_CATEGORIES: Tuple[str, ...] = (
    "strength",
    "cardio",
    "diet",
    "sleep",
    "stress",
    "hybrid",
)
VERSION_STATUSES: Tuple[str, ...] = ("draft", "published", "archived")

CONFIDENCE_RANK: Dict[str, int] = {"low": 1, "moderate": 2, "high": 3}


# ---------------------------------------------------------------------
# Effects & contraindications
# ---------------------------------------------------------------------


@dataclass(frozen=True)
class InterventionEffect:
    """
    Expected change of one metric after completing an intervention.

    ``unit`` decides how the change is applied: mass units are converted
    into the caller's unit, ``%`` on vo2_max/hrv is relative, anything
    else is added as-is.
    """

    metric: str
    change_value: float
    unit: str
    confidence: Confidence
    assumptions: str
    range: Optional[Tuple[float, float]] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "metric": self.metric,
            "change_value": self.change_value,
            "unit": self.unit,
            "confidence": self.confidence,
            "assumptions": self.assumptions,
        }
        if self.range is not None:
            data["range"] = list(self.range)
        return data

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "InterventionEffect":
        raw_range = data.get("range")
        return InterventionEffect(
            metric=str(data["metric"]),
            change_value=float(data.get("change_value", data.get("changeValue", 0.0))),
            unit=str(data.get("unit", "")),
            confidence=data.get("confidence", "moderate"),
            assumptions=str(data.get("assumptions", "")),
            range=(float(raw_range[0]), float(raw_range[1])) if raw_range else None,
        )


@dataclass(frozen=True)
class Contraindication:
    scenario: str
    warning: str

    def to_dict(self) -> Dict[str, Any]:
        return {"scenario": self.scenario, "warning": self.warning}

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Contraindication":
        return Contraindication(
            scenario=str(data.get("scenario", "")),
            warning=str(data.get("warning", "")),
        )


@dataclass(frozen=True)
class StudySource:
    """Citation backing a published intervention version."""

    url: str
    title: str
    authors: str
    year: int
    doi: str
    scraped_at: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "url": self.url,
            "title": self.title,
            "authors": self.authors,
            "year": self.year,
            "doi": self.doi,
            "scraped_at": self.scraped_at,
        }

    @staticmethod
    def from_dict(data: Optional[Dict[str, Any]]) -> Optional["StudySource"]:
        if not data:
            return None
        return StudySource(
            url=str(data["url"]),
            title=str(data["title"]),
            authors=str(data["authors"]),
            year=int(data["year"]),
            doi=str(data["doi"]),
            scraped_at=str(data.get("scraped_at", data.get("scrapedAt", ""))),
        )


# ---------------------------------------------------------------------
# Interventions
# ---------------------------------------------------------------------


@dataclass(frozen=True)
class Intervention:
    """
    A catalog entry: a named program and the metric changes it is
    expected to produce.
    """

    id: str
    name: str
    category: InterventionCategory
    duration_weeks: int
    frequency: str
    description: str
    effects: Tuple[InterventionEffect, ...] = ()
    contraindications: Tuple[Contraindication, ...] = ()

    def effects_for(self, metric: str) -> List[InterventionEffect]:
        return [effect for effect in self.effects if effect.metric == metric]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "duration_weeks": self.duration_weeks,
            "frequency": self.frequency,
            "description": self.description,
            "effects": [effect.to_dict() for effect in self.effects],
            "contraindications": [c.to_dict() for c in self.contraindications],
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Intervention":
        return Intervention(
            id=str(data["id"]),
            name=str(data["name"]),
            category=data["category"],
            duration_weeks=int(data.get("duration_weeks", data.get("durationWeeks", 1))),
            frequency=str(data.get("frequency", "")),
            description=str(data.get("description", "")),
            effects=tuple(InterventionEffect.from_dict(e) for e in data.get("effects", [])),
            contraindications=tuple(
                Contraindication.from_dict(c) for c in data.get("contraindications", [])
            ),
        )


@dataclass(frozen=True)
class InterventionVersion:
    """
    One revision in an intervention's editorial history.

    Versions are stored in the state document as plain dicts; this type
    is the typed view used at the module boundary.
    """

    id: str
    intervention_id: str
    version_number: int
    status: VersionStatus
    name: str
    category: InterventionCategory
    duration_weeks: int
    frequency: str
    description: str
    effects: Tuple[InterventionEffect, ...] = ()
    contraindications: Tuple[Contraindication, ...] = ()
    study_source: Optional[StudySource] = None
    created_by: str = "system"
    created_at: str = ""
    updated_at: str = ""

    @property
    def is_draft(self) -> bool:
        return self.status == "draft"

    def as_intervention(self) -> Intervention:
        return Intervention(
            id=self.intervention_id,
            name=self.name,
            category=self.category,
            duration_weeks=self.duration_weeks,
            frequency=self.frequency,
            description=self.description,
            effects=self.effects,
            contraindications=self.contraindications,
        )

    def with_status(self, status: VersionStatus, *, now: str) -> "InterventionVersion":
        return replace(self, status=status, updated_at=now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "intervention_id": self.intervention_id,
            "version_number": self.version_number,
            "status": self.status,
            "name": self.name,
            "category": self.category,
            "duration_weeks": self.duration_weeks,
            "frequency": self.frequency,
            "description": self.description,
            "effects": [effect.to_dict() for effect in self.effects],
            "contraindications": [c.to_dict() for c in self.contraindications],
            "study_source": self.study_source.to_dict() if self.study_source else None,
            "created_by": self.created_by,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "InterventionVersion":
        return InterventionVersion(
            id=str(data["id"]),
            intervention_id=str(data["intervention_id"]),
            version_number=int(data["version_number"]),
            status=data["status"],
            name=str(data["name"]),
            category=data["category"],
            duration_weeks=int(data["duration_weeks"]),
            frequency=str(data.get("frequency", "")),
            description=str(data.get("description", "")),
            effects=tuple(InterventionEffect.from_dict(e) for e in data.get("effects", [])),
            contraindications=tuple(
                Contraindication.from_dict(c) for c in data.get("contraindications", [])
            ),
            study_source=StudySource.from_dict(data.get("study_source")),
            created_by=str(data.get("created_by", "system")),
            created_at=str(data.get("created_at", "")),
            updated_at=str(data.get("updated_at", "")),
        )


@dataclass(frozen=True)
class VersionDraft:
    """
    Validated editorial input for creating or updating a draft.

    Produced by ``vitalgraph.validation.parse_intervention_version``.
    """

    intervention_id: str
    name: str
    category: InterventionCategory
    duration_weeks: int
    frequency: str
    description: str
    effects: Tuple[InterventionEffect, ...] = ()
    contraindications: Tuple[Contraindication, ...] = ()
    study_source: Optional[StudySource] = None
