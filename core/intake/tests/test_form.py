"""Tests for the intake form model: merge, edit, visibility, summary."""

import copy
from datetime import datetime, timezone

import pytest

from core.enums import FormType
from core.intake.fields import FieldValueError, UnknownFieldError
from core.intake.form import (
    IntakeResponse,
    has_answers,
    is_visible,
    load_for_edit,
    render_readonly,
    set_field,
    to_submission,
    visible_fields,
)
from core.intake.schemas import (
    CLEARED_WITH_RESTRICTIONS,
    HEALTH_EVALUATION,
    LIFESTYLE_QUESTIONNAIRE,
    SCHEMAS,
)

STORED_LIFESTYLE = {
    "pregnancyNumber": "Second pregnancy",
    "expectedDueDate": "2024-09-01",
    "medicalHistory": ["Back pain", "Knee pain"],
    "takingMedications": "Yes",
    "medicationDetails": "Iron supplement\nVitamin D",
    "consentToContact": True,
}


class TestLoadForEdit:
    @pytest.mark.parametrize("schema", list(SCHEMAS.values()), ids=lambda s: s.form_type.value)
    def test_unedited_round_trip_is_defaults_overlaid_with_stored(self, schema):
        names = schema.field_names
        stored = {name: schema.defaults()[name] for name in names[::2]}
        # Give the stored subset real answers where the kind allows it
        for name in stored:
            if isinstance(stored[name], str):
                stored[name] = f"answer for {name}"
        state = load_for_edit(schema, IntakeResponse(schema.form_type, stored))
        assert to_submission(state) == {**schema.defaults(), **stored}

    def test_lifestyle_round_trip(self):
        state = load_for_edit(LIFESTYLE_QUESTIONNAIRE, STORED_LIFESTYLE)
        assert to_submission(state) == {**LIFESTYLE_QUESTIONNAIRE.defaults(), **STORED_LIFESTYLE}

    def test_first_fill_is_all_defaults(self):
        state = load_for_edit(HEALTH_EVALUATION)
        assert to_submission(state) == HEALTH_EVALUATION.defaults()

    def test_does_not_mutate_existing(self):
        existing = IntakeResponse(FormType.lifestyle_questionnaire, copy.deepcopy(STORED_LIFESTYLE))
        state = load_for_edit(LIFESTYLE_QUESTIONNAIRE, existing)
        set_field(state, "medicalHistory", ["Neck pain"])
        assert existing.responses == STORED_LIFESTYLE

    def test_unknown_keys_are_kept(self):
        stored = {"fullName": "Jane Doe", "legacyNotes": {"v": 1}}
        state = load_for_edit(HEALTH_EVALUATION, stored)
        assert state.extras == {"legacyNotes": {"v": 1}}
        assert to_submission(state)["legacyNotes"] == {"v": 1}

    def test_wrong_kind_value_is_kept_as_stored(self):
        stored = {"consentToContact": "maybe later"}
        state = load_for_edit(LIFESTYLE_QUESTIONNAIRE, stored)
        assert to_submission(state)["consentToContact"] == "maybe later"

    def test_accepts_form_type_string(self):
        state = load_for_edit("health_evaluation", {"fullName": "Jane"})
        assert state.get("fullName") == "Jane"


class TestSetField:
    def test_returns_new_state(self):
        state = load_for_edit(LIFESTYLE_QUESTIONNAIRE)
        updated = set_field(state, "trimester", "Second trimester (13–26 weeks)")
        assert state.get("trimester") == ""
        assert updated.get("trimester") == "Second trimester (13–26 weeks)"

    def test_does_not_check_options(self):
        state = set_field(load_for_edit(LIFESTYLE_QUESTIONNAIRE), "howDidYouHear", "Podcast")
        assert state.get("howDidYouHear") == "Podcast"

    def test_unknown_field(self):
        with pytest.raises(UnknownFieldError):
            set_field(load_for_edit(HEALTH_EVALUATION), "shoeSize", "6")

    def test_wrong_kind(self):
        with pytest.raises(FieldValueError):
            set_field(load_for_edit(LIFESTYLE_QUESTIONNAIRE), "medicalHistory", {"a": 1})

    def test_drops_stale_extra_of_same_name(self):
        state = load_for_edit(LIFESTYLE_QUESTIONNAIRE, {"consentToContact": "maybe later"})
        state = set_field(state, "consentToContact", True)
        assert "consentToContact" not in state.extras
        assert to_submission(state)["consentToContact"] is True


class TestVisibility:
    def test_conditional_field_follows_trigger(self):
        state = load_for_edit(LIFESTYLE_QUESTIONNAIRE)
        assert not is_visible(state, "medicationDetails")
        state = set_field(state, "takingMedications", "Yes")
        assert is_visible(state, "medicationDetails")

    def test_unconditional_field_always_visible(self):
        assert is_visible(load_for_edit(LIFESTYLE_QUESTIONNAIRE), "concerns")

    def test_hidden_field_keeps_its_value(self):
        # Known quirk: switching the trigger off hides the field but the
        # typed-in value is still submitted.
        state = load_for_edit(LIFESTYLE_QUESTIONNAIRE, STORED_LIFESTYLE)
        state = set_field(state, "takingMedications", "No")
        assert not is_visible(state, "medicationDetails")
        assert to_submission(state)["medicationDetails"] == "Iron supplement\nVitamin D"

    def test_visible_fields_in_schema_order(self):
        state = load_for_edit(HEALTH_EVALUATION)
        assert "restrictionDetails" not in visible_fields(state)
        state = set_field(state, "clearanceDecision", CLEARED_WITH_RESTRICTIONS)
        assert visible_fields(state)[-1] == "restrictionDetails"

    def test_uncoercible_trigger_counts_as_unanswered(self):
        # Stored as a list, so the choice keeps its default and the raw
        # value rides along in extras
        stored = {"takingMedications": ["Yes"], "medicationDetails": "Iron"}
        state = load_for_edit(LIFESTYLE_QUESTIONNAIRE, stored)
        assert state.get("takingMedications") == ["Yes"]
        assert not is_visible(state, "medicationDetails")

        state = set_field(state, "takingMedications", "Yes")
        assert is_visible(state, "medicationDetails")


class TestHasAnswers:
    def test_blank_form_has_no_answers(self):
        assert not has_answers(load_for_edit(LIFESTYLE_QUESTIONNAIRE))
        assert not has_answers(load_for_edit(HEALTH_EVALUATION, {"fullName": ""}))

    def test_any_edited_field_counts(self):
        state = set_field(load_for_edit(LIFESTYLE_QUESTIONNAIRE), "consentToContact", True)
        assert has_answers(state)
        assert has_answers(load_for_edit(LIFESTYLE_QUESTIONNAIRE, STORED_LIFESTYLE))

    def test_extras_count(self):
        assert has_answers(load_for_edit(HEALTH_EVALUATION, {"legacyNotes": "kept"}))


class TestRenderReadonly:
    def test_health_evaluation_without_restriction_details(self):
        summary = render_readonly(
            HEALTH_EVALUATION,
            {"fullName": "Jane Doe", "clearanceDecision": CLEARED_WITH_RESTRICTIONS},
        )
        assert summary.get("fullName").value == "Jane Doe"
        assert summary.get("clearanceDecision").value == CLEARED_WITH_RESTRICTIONS
        assert summary.get("restrictionDetails") is None

    def test_health_evaluation_with_restriction_details(self):
        summary = render_readonly(
            HEALTH_EVALUATION,
            {
                "fullName": "Jane Doe",
                "clearanceDecision": CLEARED_WITH_RESTRICTIONS,
                "restrictionDetails": "No supine work after 20 weeks.\n  Low impact only.",
            },
        )
        item = summary.get("restrictionDetails")
        assert item.label == "Restrictions"
        assert item.display == "block"
        assert item.value == "No supine work after 20 weeks.\n  Low impact only."

    def test_restrictions_hidden_when_decision_changes(self):
        summary = render_readonly(
            HEALTH_EVALUATION,
            {"clearanceDecision": "Not cleared for exercise at this time", "restrictionDetails": "old"},
        )
        assert summary.get("restrictionDetails") is None

    def test_empty_sections_are_omitted(self):
        summary = render_readonly(HEALTH_EVALUATION, {"fullName": "Jane Doe"})
        assert [s.title for s in summary.sections] == ["Participant"]

    def test_empty_values_are_omitted(self):
        summary = render_readonly(
            LIFESTYLE_QUESTIONNAIRE,
            {"concerns": "", "medicalHistory": [], "mainGoals": "Stay strong"},
        )
        assert summary.get("concerns") is None
        assert summary.get("medicalHistory") is None
        assert summary.get("mainGoals").display == "block"

    def test_display_kinds(self):
        summary = render_readonly(LIFESTYLE_QUESTIONNAIRE, STORED_LIFESTYLE)
        assert summary.get("medicalHistory").display == "tags"
        assert summary.get("medicalHistory").value == ["Back pain", "Knee pain"]
        assert summary.get("pregnancyNumber").display == "text"
        assert summary.get("consentToContact").value == "Yes"

    def test_false_boolean_renders_no(self):
        summary = render_readonly(LIFESTYLE_QUESTIONNAIRE, {"consentToContact": False})
        assert summary.get("consentToContact").value == "No"

    def test_to_dict(self):
        data = render_readonly(HEALTH_EVALUATION, {"fullName": "Jane Doe"}).to_dict()
        assert data["formType"] == "health_evaluation"
        assert data["sections"][0]["items"][0] == {
            "name": "fullName",
            "label": "Full Name",
            "display": "text",
            "value": "Jane Doe",
        }


class TestIntakeResponse:
    def test_from_api_record(self):
        response = IntakeResponse.from_dict(
            {
                "clientId": 7,
                "formType": "health_evaluation",
                "responses": {"fullName": "Jane"},
                "submittedAt": "2024-03-05T10:00:00Z",
            }
        )
        assert response.client_id == 7
        assert response.form_type == FormType.health_evaluation
        assert response.submitted_at == datetime(2024, 3, 5, 10, tzinfo=timezone.utc)

    def test_from_db_row(self):
        response = IntakeResponse.from_dict(
            {"client_id": 7, "form_type": FormType.lifestyle_questionnaire, "responses": None}
        )
        assert response.responses == {}
        assert response.submitted_at is None
