"""
Editorial history of intervention definitions.

Versions live in the state document under ``intervention_versions`` as
plain dicts. Every function here edits that list in place and is meant
to run inside a single ``StateStore.mutate`` call.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import uuid4

from vitalgraph.errors import NotFoundError, ValidationError
from vitalgraph.interventions.catalog import INTERVENTIONS
from vitalgraph.interventions.schema import InterventionVersion, VersionDraft
from vitalgraph.state.document import Document

logger = logging.getLogger("vitalgraph.interventions")

INTERVENTION_ID_PATTERN = re.compile(r"^[a-z0-9_]+$")

SYSTEM_AUTHOR = "system"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _versions(doc: Document) -> List[Dict[str, Any]]:
    return doc["intervention_versions"]


def validate_version_input(draft: VersionDraft) -> None:
    if not INTERVENTION_ID_PATTERN.match(draft.intervention_id):
        raise ValidationError(
            "intervention_id must be lowercase alphanumeric plus underscores",
            "invalid_intervention_id",
        )
    if not draft.name.strip():
        raise ValidationError("name is required", "invalid_intervention_name")
    if not draft.frequency.strip():
        raise ValidationError("frequency is required", "invalid_intervention_frequency")
    if not draft.description.strip():
        raise ValidationError("description is required", "invalid_intervention_description")
    if draft.duration_weeks < 1:
        raise ValidationError(
            "duration_weeks must be a positive number",
            "invalid_duration_weeks",
        )
    if not draft.effects:
        raise ValidationError(
            "effects must contain at least one entry",
            "invalid_intervention_effects",
        )
    for effect in draft.effects:
        if not math.isfinite(effect.change_value):
            raise ValidationError(
                "effect change_value must be numeric",
                "invalid_effect_change_value",
            )
        if not effect.assumptions.strip():
            raise ValidationError(
                "effect assumptions are required",
                "invalid_effect_assumptions",
            )


# ---------------------------------------------------------------------
# Seeding
# ---------------------------------------------------------------------


def seed_versions(doc: Document) -> bool:
    """
    Record every built-in intervention as published version 1.

    Does nothing once any version exists. Returns whether it seeded.
    """
    versions = _versions(doc)
    if versions:
        return False

    now = _now()
    for intervention in INTERVENTIONS:
        version = InterventionVersion(
            id=uuid4().hex,
            intervention_id=intervention.id,
            version_number=1,
            status="published",
            name=intervention.name,
            category=intervention.category,
            duration_weeks=intervention.duration_weeks,
            frequency=intervention.frequency,
            description=intervention.description,
            effects=intervention.effects,
            contraindications=intervention.contraindications,
            study_source=None,
            created_by=SYSTEM_AUTHOR,
            created_at=now,
            updated_at=now,
        )
        versions.append(version.to_dict())

    logger.info("[versions] seeded %d built-in interventions", len(INTERVENTIONS))
    return True


# ---------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------


def find_version(
    doc: Document,
    intervention_id: str,
    version_number: int,
) -> Optional[InterventionVersion]:
    """
    Version ``version_number`` of an intervention, or ``None``.

    Publishing can leave an archived draft and its published copy under
    the same number; the live (non-archived) entry wins.
    """
    matches = [
        InterventionVersion.from_dict(raw)
        for raw in _versions(doc)
        if raw["intervention_id"] == intervention_id and raw["version_number"] == version_number
    ]
    if not matches:
        return None
    live = [version for version in matches if version.status != "archived"]
    return (live or matches)[0]


def list_versions(doc: Document, intervention_id: str) -> List[InterventionVersion]:
    """Newest version number first; ties broken by most recent update."""
    matches = [
        InterventionVersion.from_dict(raw)
        for raw in _versions(doc)
        if raw["intervention_id"] == intervention_id
    ]
    matches.sort(key=lambda v: (v.version_number, v.updated_at), reverse=True)
    return matches


def _index_of(doc: Document, intervention_id: str, version_number: int) -> int:
    # A draft shares its number with a published copy in some histories;
    # the draft is the editable one.
    found: Optional[int] = None
    for index, raw in enumerate(_versions(doc)):
        if raw["intervention_id"] != intervention_id or raw["version_number"] != version_number:
            continue
        if raw["status"] == "draft":
            return index
        if found is None:
            found = index
    if found is None:
        raise NotFoundError("Intervention version not found", "intervention_version_not_found")
    return found


# ---------------------------------------------------------------------
# Drafts
# ---------------------------------------------------------------------


def create_draft_version(
    doc: Document,
    draft: VersionDraft,
    author_id: str,
) -> InterventionVersion:
    validate_version_input(draft)

    latest = max(
        (
            raw["version_number"]
            for raw in _versions(doc)
            if raw["intervention_id"] == draft.intervention_id
        ),
        default=0,
    )

    now = _now()
    version = InterventionVersion(
        id=uuid4().hex,
        intervention_id=draft.intervention_id,
        version_number=latest + 1,
        status="draft",
        name=draft.name,
        category=draft.category,
        duration_weeks=draft.duration_weeks,
        frequency=draft.frequency,
        description=draft.description,
        effects=draft.effects,
        contraindications=draft.contraindications,
        study_source=draft.study_source,
        created_by=author_id,
        created_at=now,
        updated_at=now,
    )
    _versions(doc).append(version.to_dict())

    logger.info(
        "[versions] draft %s v%d created by %s",
        version.intervention_id,
        version.version_number,
        author_id,
    )
    return version


def update_draft_version(
    doc: Document,
    intervention_id: str,
    version_number: int,
    draft: VersionDraft,
) -> InterventionVersion:
    validate_version_input(draft)

    index = _index_of(doc, intervention_id, version_number)
    target = InterventionVersion.from_dict(_versions(doc)[index])
    if not target.is_draft:
        raise ValidationError(
            "Only draft versions can be updated",
            "intervention_version_not_draft",
        )

    updated = replace(
        target,
        name=draft.name,
        category=draft.category,
        duration_weeks=draft.duration_weeks,
        frequency=draft.frequency,
        description=draft.description,
        effects=draft.effects,
        contraindications=draft.contraindications,
        study_source=draft.study_source,
        updated_at=_now(),
    )
    _versions(doc)[index] = updated.to_dict()
    return updated


def delete_draft_version(
    doc: Document,
    intervention_id: str,
    version_number: int,
) -> InterventionVersion:
    index = _index_of(doc, intervention_id, version_number)
    target = InterventionVersion.from_dict(_versions(doc)[index])
    if not target.is_draft:
        raise ValidationError(
            "Only draft versions can be deleted",
            "intervention_version_not_draft",
        )

    del _versions(doc)[index]
    logger.info("[versions] draft %s v%d deleted", intervention_id, version_number)
    return target


def publish_latest_draft(
    doc: Document,
    intervention_id: str,
    author_id: str,
) -> InterventionVersion:
    """
    Archive the newest draft and append a published copy of it.

    The published copy is numbered one past the latest published
    version of the same intervention.
    """
    versions = _versions(doc)

    draft_index: Optional[int] = None
    for index, raw in enumerate(versions):
        if raw["intervention_id"] != intervention_id or raw["status"] != "draft":
            continue
        if draft_index is None or raw["version_number"] > versions[draft_index]["version_number"]:
            draft_index = index

    if draft_index is None:
        raise NotFoundError("No draft found for intervention", "intervention_draft_not_found")

    latest_published = max(
        (
            raw["version_number"]
            for raw in versions
            if raw["intervention_id"] == intervention_id and raw["status"] == "published"
        ),
        default=0,
    )

    now = _now()
    draft = InterventionVersion.from_dict(versions[draft_index])
    published = replace(
        draft,
        id=uuid4().hex,
        version_number=latest_published + 1,
        status="published",
        created_by=author_id,
        created_at=now,
        updated_at=now,
    )

    versions[draft_index] = draft.with_status("archived", now=now).to_dict()
    versions.append(published.to_dict())

    logger.info(
        "[versions] %s v%d published by %s (from draft v%d)",
        intervention_id,
        published.version_number,
        author_id,
        draft.version_number,
    )
    return published
