import pytest

from vitalgraph.errors import NotFoundError, ValidationError
from vitalgraph.interventions.catalog import InterventionCatalog
from vitalgraph.interventions.versions import (
    create_draft_version,
    delete_draft_version,
    find_version,
    list_versions,
    publish_latest_draft,
    seed_versions,
    update_draft_version,
)
from vitalgraph.state.document import empty_state
from vitalgraph.validation import parse_intervention_version


def _version_payload(intervention_id: str = "cardio_moderate_3x", **overrides) -> dict:
    payload = {
        "intervention_id": intervention_id,
        "name": "Cardio (Zone 2 focus)",
        "category": "cardio",
        "duration_weeks": 10,
        "frequency": "4x/week",
        "description": "Longer zone 2 sessions with one interval day.",
        "effects": [
            {
                "metric": "vo2_max",
                "change": 12,
                "unit": "%",
                "confidence": "high",
                "assumptions": "Four sessions every week.",
                "range": [9, 15],
            }
        ],
        "contraindications": [
            {"scenario": "heavy_cardio + severe_sleep_debt", "warning": "Watch sleep debt."}
        ],
    }
    payload.update(overrides)
    return payload


def _seeded_doc():
    doc = empty_state()
    seed_versions(doc)
    return doc


def test_seed_versions_records_builtins_once():
    doc = empty_state()

    assert seed_versions(doc) is True
    assert seed_versions(doc) is False

    versions = doc["intervention_versions"]
    assert len(versions) == 4
    assert {v["status"] for v in versions} == {"published"}
    assert {v["version_number"] for v in versions} == {1}
    assert {v["created_by"] for v in versions} == {"system"}


def test_draft_then_publish_updates_catalog():
    doc = _seeded_doc()
    draft = parse_intervention_version(_version_payload())

    created = create_draft_version(doc, draft, "editor-1")
    assert created.version_number == 2
    assert created.status == "draft"

    # Drafts are not served.
    catalog = InterventionCatalog.from_state(doc["intervention_versions"])
    assert catalog.require("cardio_moderate_3x").name == "Cardio (Moderate Intensity, 3x/week)"

    published = publish_latest_draft(doc, "cardio_moderate_3x", "editor-2")
    assert published.status == "published"
    assert published.version_number == 2
    assert published.created_by == "editor-2"
    assert published.id != created.id

    statuses = [(v.version_number, v.status) for v in list_versions(doc, "cardio_moderate_3x")]
    assert sorted(statuses) == [(1, "published"), (2, "archived"), (2, "published")]
    assert find_version(doc, "cardio_moderate_3x", 2).status == "published"

    catalog = InterventionCatalog.from_state(doc["intervention_versions"])
    served = catalog.require("cardio_moderate_3x")
    assert served.name == "Cardio (Zone 2 focus)"
    assert served.duration_weeks == 10
    assert served.effects[0].range == (9.0, 15.0)
    assert catalog.ids()[:4] == [
        "weight_training_5x5",
        "cardio_moderate_3x",
        "diet_500_deficit",
        "screen_time_reduction",
    ]


def test_publishing_a_new_intervention_appends_it_to_catalog():
    doc = _seeded_doc()
    draft = parse_intervention_version(
        _version_payload("sauna_protocol", name="Sauna Protocol", category="hybrid")
    )

    create_draft_version(doc, draft, "editor-1")
    published = publish_latest_draft(doc, "sauna_protocol", "editor-1")

    assert published.version_number == 1
    catalog = InterventionCatalog.from_state(doc["intervention_versions"])
    assert catalog.ids()[-1] == "sauna_protocol"
    assert len(catalog) == 5


def test_publish_without_draft_is_not_found():
    doc = _seeded_doc()

    with pytest.raises(NotFoundError) as exc:
        publish_latest_draft(doc, "cardio_moderate_3x", "editor-1")
    assert exc.value.code == "intervention_draft_not_found"


def test_update_draft_replaces_content():
    doc = _seeded_doc()
    create_draft_version(doc, parse_intervention_version(_version_payload()), "editor-1")

    updated = update_draft_version(
        doc,
        "cardio_moderate_3x",
        2,
        parse_intervention_version(_version_payload(name="Cardio (Revised)")),
    )

    assert updated.name == "Cardio (Revised)"
    assert updated.status == "draft"
    assert find_version(doc, "cardio_moderate_3x", 2).name == "Cardio (Revised)"


def test_only_drafts_can_be_updated_or_deleted():
    doc = _seeded_doc()
    draft = parse_intervention_version(_version_payload())

    with pytest.raises(ValidationError) as exc:
        update_draft_version(doc, "cardio_moderate_3x", 1, draft)
    assert exc.value.code == "intervention_version_not_draft"

    with pytest.raises(ValidationError) as exc:
        delete_draft_version(doc, "cardio_moderate_3x", 1)
    assert exc.value.code == "intervention_version_not_draft"

    with pytest.raises(NotFoundError) as exc:
        delete_draft_version(doc, "cardio_moderate_3x", 7)
    assert exc.value.code == "intervention_version_not_found"


def test_delete_draft_removes_it():
    doc = _seeded_doc()
    create_draft_version(doc, parse_intervention_version(_version_payload()), "editor-1")

    removed = delete_draft_version(doc, "cardio_moderate_3x", 2)

    assert removed.status == "draft"
    assert find_version(doc, "cardio_moderate_3x", 2) is None
    assert len(doc["intervention_versions"]) == 4


def test_draft_numbers_continue_after_publish():
    doc = _seeded_doc()
    create_draft_version(doc, parse_intervention_version(_version_payload()), "editor-1")
    publish_latest_draft(doc, "cardio_moderate_3x", "editor-1")

    next_draft = create_draft_version(doc, parse_intervention_version(_version_payload()), "editor-1")

    assert next_draft.version_number == 3


def test_parse_intervention_version_accepts_camel_case_aliases():
    payload = _version_payload(durationWeeks="6", interventionId="screen_time_reduction")
    del payload["duration_weeks"]
    del payload["intervention_id"]
    payload["effects"][0]["changeValue"] = payload["effects"][0].pop("change")
    payload["studySource"] = {
        "url": "https://example.org/study",
        "title": "Zone 2 outcomes",
        "authors": "Doe, J.",
        "year": 2024,
        "doi": "10.1000/zone2",
    }

    draft = parse_intervention_version(payload)

    assert draft.intervention_id == "screen_time_reduction"
    assert draft.duration_weeks == 6
    assert draft.effects[0].change_value == 12.0
    assert draft.study_source.year == 2024
    assert draft.study_source.scraped_at


@pytest.mark.parametrize(
    "overrides, code",
    [
        ({"intervention_id": ""}, "invalid_intervention_id"),
        ({"name": "   "}, "invalid_intervention_name"),
        ({"category": "meditation"}, "invalid_intervention_category"),
        ({"duration_weeks": 0}, "invalid_duration_weeks"),
        ({"duration_weeks": 2.5}, "invalid_duration_weeks"),
        ({"frequency": ""}, "invalid_intervention_frequency"),
        ({"description": ""}, "invalid_intervention_description"),
        ({"effects": []}, "invalid_intervention_effects"),
        ({"effects": ["vo2_max"]}, "invalid_intervention_effect"),
    ],
)
def test_parse_intervention_version_rejects_bad_fields(overrides, code):
    with pytest.raises(ValidationError) as exc:
        parse_intervention_version(_version_payload(**overrides))

    assert exc.value.code == code
    assert exc.value.status_code == 400


def test_parse_intervention_version_rejects_bad_effects():
    effect = _version_payload()["effects"][0]

    with pytest.raises(ValidationError) as exc:
        parse_intervention_version(_version_payload(effects=[dict(effect, metric="mood")]))
    assert exc.value.code == "invalid_effect_metric"

    with pytest.raises(ValidationError) as exc:
        parse_intervention_version(_version_payload(effects=[dict(effect, change="lots")]))
    assert exc.value.code == "invalid_effect_change"

    with pytest.raises(ValidationError) as exc:
        parse_intervention_version(_version_payload(effects=[dict(effect, assumptions="")]))
    assert exc.value.code == "invalid_effect_assumptions"


def test_create_draft_rejects_malformed_id():
    doc = _seeded_doc()
    draft = parse_intervention_version(_version_payload("Cardio Plus"))

    with pytest.raises(ValidationError) as exc:
        create_draft_version(doc, draft, "editor-1")
    assert exc.value.code == "invalid_intervention_id"


def test_service_seeds_before_first_editorial_change(intervention_service, json_store):
    created = intervention_service.create_draft(_version_payload(), "editor-1")

    assert created["version_number"] == 2
    stored = json_store.read()["intervention_versions"]
    assert len(stored) == 5

    history = intervention_service.version_history("cardio_moderate_3x")
    assert [v["version_number"] for v in history] == [2, 1]

    with pytest.raises(NotFoundError):
        intervention_service.version_history("no_such_program")
