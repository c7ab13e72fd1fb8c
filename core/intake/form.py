"""
Intake form model: merge, edit, visibility, submission, read-only summary.

All functions are pure. `FormState` is immutable; every edit returns a new
state, and persisted responses passed in are never mutated.

Hidden fields keep whatever value they had when their condition stopped
holding (e.g. switching "Taking Medications" back to "No" leaves
`medicationDetails` in the submitted payload). Whether that value should be
dropped is still an open product question, so it is kept.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal, Mapping

from core.enums import FormType

from .fields import (
    FieldKind,
    FieldValue,
    FieldValueError,
    UnknownFieldError,
    coerce_value,
)
from .schemas import FormSchema, get_schema

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IntakeResponse:
    """A stored questionnaire: one per (client, form type)."""

    form_type: FormType
    responses: dict[str, Any]
    client_id: int | None = None
    submitted_at: datetime | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "IntakeResponse":
        """Build from an API record (camelCase) or a DB row (snake_case)."""
        submitted_at = data.get("submittedAt", data.get("submitted_at"))
        if isinstance(submitted_at, str):
            submitted_at = datetime.fromisoformat(submitted_at.replace("Z", "+00:00"))
        return cls(
            form_type=FormType(data.get("formType", data.get("form_type"))),
            responses=dict(data.get("responses") or {}),
            client_id=data.get("clientId", data.get("client_id")),
            submitted_at=submitted_at,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "clientId": self.client_id,
            "formType": self.form_type.value,
            "responses": dict(self.responses),
            "submittedAt": self.submitted_at.isoformat() if self.submitted_at else None,
        }


@dataclass(frozen=True)
class FormState:
    """In-progress edit of one questionnaire."""

    schema: FormSchema
    values: Mapping[str, FieldValue]
    # Stored keys outside the schema, or stored values of the wrong kind.
    # Round-tripped untouched until the field is edited.
    extras: Mapping[str, Any] = field(default_factory=dict)

    def get(self, name: str) -> Any:
        """Wire value of a field (schema field or extra)."""
        if name in self.extras:
            return self.extras[name]
        if name in self.values:
            return self.values[name].to_wire()
        raise UnknownFieldError(name)


def _schema_for(form: FormSchema | FormType | str) -> FormSchema:
    return form if isinstance(form, FormSchema) else get_schema(form)


def load_for_edit(
    form: FormSchema | FormType | str,
    existing: IntakeResponse | Mapping[str, Any] | None = None,
) -> FormState:
    """
    Start an edit session: schema defaults overlaid with stored answers.

    Args:
        form: Schema (or form type) being edited
        existing: Stored response, its `responses` map, or None for a first fill

    Returns:
        FormState where stored values win and missing fields take defaults
    """
    schema = _schema_for(form)
    if isinstance(existing, IntakeResponse):
        stored: Mapping[str, Any] = existing.responses
    else:
        stored = existing or {}

    values: dict[str, FieldValue] = {}
    extras: dict[str, Any] = {}
    for f in schema.fields:
        if f.name not in stored:
            values[f.name] = f.default()
            continue
        try:
            values[f.name] = coerce_value(f, stored[f.name])
        except FieldValueError as e:
            logger.warning(f"Keeping stored value as-is for {schema.form_type.value}: {e}")
            values[f.name] = f.default()
            extras[f.name] = stored[f.name]

    for key, value in stored.items():
        if not schema.has_field(key):
            extras[key] = value

    return FormState(schema=schema, values=values, extras=extras)


def set_field(state: FormState, name: str, value: Any) -> FormState:
    """
    Return a new state with one field changed.

    The value must fit the field's kind, but is not checked against the
    field's options.

    Raises:
        UnknownFieldError: If `name` is not in the schema
        FieldValueError: If `value` does not fit the field's kind
    """
    form_field = state.schema.get_field(name)
    typed = coerce_value(form_field, value)

    values = dict(state.values)
    values[name] = typed
    extras = {k: v for k, v in state.extras.items() if k != name}
    return FormState(schema=state.schema, values=values, extras=extras)


def is_visible(state: FormState, name: str) -> bool:
    """Whether a field is shown given the rest of the in-progress answers.

    Conditions read the typed values only. A controlling field whose stored
    value could not be coerced (so it sits in `extras`) is shown to the
    operator at its default, and the condition is decided from that default
    until the field is edited.
    """
    form_field = state.schema.get_field(name)
    if form_field.visible_when is None:
        return True
    return form_field.visible_when(state.values)


def visible_fields(state: FormState) -> list[str]:
    """Names of the fields to render, in schema order."""
    return [f.name for f in state.schema.fields if is_visible(state, f.name)]


def has_answers(state: FormState) -> bool:
    """Whether anything differs from a blank form (extras count as answers)."""
    if state.extras:
        return True
    return any(
        value != state.schema.get_field(name).default()
        for name, value in state.values.items()
    )


def to_submission(state: FormState) -> dict[str, Any]:
    """Full responses map to send; hidden fields are not filtered out."""
    submission = {name: value.to_wire() for name, value in state.values.items()}
    submission.update(state.extras)
    return submission


# --- Read-only summary ---

DisplayKind = Literal["text", "tags", "block"]


@dataclass(frozen=True)
class SummaryItem:
    name: str
    label: str
    display: DisplayKind
    value: str | list[str]


@dataclass(frozen=True)
class SummarySection:
    title: str
    items: list[SummaryItem]


@dataclass(frozen=True)
class ReadOnlySummary:
    form_type: FormType
    title: str
    sections: list[SummarySection]

    def get(self, name: str) -> SummaryItem | None:
        for section in self.sections:
            for item in section.items:
                if item.name == name:
                    return item
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "formType": self.form_type.value,
            "title": self.title,
            "sections": [
                {
                    "title": s.title,
                    "items": [
                        {
                            "name": i.name,
                            "label": i.label,
                            "display": i.display,
                            "value": i.value,
                        }
                        for i in s.items
                    ],
                }
                for s in self.sections
            ],
        }


def render_readonly(
    form: FormSchema | FormType | str,
    responses: Mapping[str, Any],
) -> ReadOnlySummary:
    """
    Summarise stored answers for display.

    Only answered fields appear: absent or empty values are left out rather
    than shown blank, as are fields hidden by their visibility condition.
    Sections with nothing to show are dropped.
    """
    schema = _schema_for(form)
    state = load_for_edit(schema, responses)

    sections: list[SummarySection] = []
    for title in schema.sections:
        items: list[SummaryItem] = []
        for f in schema.fields:
            if f.section != title or f.name not in responses:
                continue
            if not is_visible(state, f.name):
                continue
            value = state.values[f.name]
            if value.is_empty():
                continue

            if f.kind == FieldKind.multi_choice:
                items.append(SummaryItem(f.name, f.label, "tags", value.to_wire()))
            elif f.kind == FieldKind.boolean:
                items.append(
                    SummaryItem(f.name, f.label, "text", "Yes" if value.to_wire() else "No")
                )
            elif f.multiline:
                items.append(SummaryItem(f.name, f.label, "block", value.to_wire()))
            else:
                items.append(SummaryItem(f.name, f.label, "text", value.to_wire()))

        if items:
            sections.append(SummarySection(title=title, items=items))

    return ReadOnlySummary(form_type=schema.form_type, title=schema.title, sections=sections)
