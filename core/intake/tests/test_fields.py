"""Tests for intake field values and coercion."""

from datetime import date

import pytest

from core.intake.fields import (
    BoolValue,
    ChoiceValue,
    DateValue,
    FieldKind,
    FieldValueError,
    FormField,
    MultiChoiceValue,
    TextValue,
    VisibleWhen,
    coerce_value,
)


def _field(kind: FieldKind, **kwargs) -> FormField:
    return FormField("f", "F", kind, "Section", **kwargs)


class TestDefaults:
    def test_defaults_per_kind(self):
        assert _field(FieldKind.text).default().to_wire() == ""
        assert _field(FieldKind.choice).default().to_wire() == ""
        assert _field(FieldKind.date).default().to_wire() == ""
        assert _field(FieldKind.multi_choice).default().to_wire() == []
        assert _field(FieldKind.boolean).default().to_wire() is False

    def test_false_is_an_answer(self):
        assert not BoolValue(False).is_empty()
        assert TextValue("").is_empty()
        assert MultiChoiceValue(()).is_empty()


class TestCoerceValue:
    def test_none_gives_default(self):
        assert coerce_value(_field(FieldKind.multi_choice), None) == MultiChoiceValue()

    def test_text_accepts_numbers_but_not_bool(self):
        assert coerce_value(_field(FieldKind.text), 3) == TextValue("3")
        with pytest.raises(FieldValueError):
            coerce_value(_field(FieldKind.text), True)

    def test_choice_does_not_check_options(self):
        f = _field(FieldKind.choice, options=("Yes", "No"))
        assert coerce_value(f, "Maybe") == ChoiceValue("Maybe")

    def test_multi_choice_from_list(self):
        value = coerce_value(_field(FieldKind.multi_choice), ["Knees", "Tailbone"])
        assert value.to_wire() == ["Knees", "Tailbone"]

    def test_multi_choice_from_bare_string(self):
        assert coerce_value(_field(FieldKind.multi_choice), "Knees").to_wire() == ["Knees"]
        assert coerce_value(_field(FieldKind.multi_choice), "").to_wire() == []

    def test_multi_choice_rejects_non_strings(self):
        with pytest.raises(FieldValueError):
            coerce_value(_field(FieldKind.multi_choice), ["ok", 3])

    @pytest.mark.parametrize("raw", ["true", "Yes", "1", "on"])
    def test_boolean_truthy_strings(self, raw):
        assert coerce_value(_field(FieldKind.boolean), raw) == BoolValue(True)

    @pytest.mark.parametrize("raw", ["false", "no", "0", ""])
    def test_boolean_falsy_strings(self, raw):
        assert coerce_value(_field(FieldKind.boolean), raw) == BoolValue(False)

    def test_boolean_rejects_other_values(self):
        with pytest.raises(FieldValueError) as exc_info:
            coerce_value(_field(FieldKind.boolean), "sometimes")
        assert exc_info.value.field_name == "f"
        assert exc_info.value.kind == FieldKind.boolean

    def test_date_from_date_object(self):
        value = coerce_value(_field(FieldKind.date), date(2024, 3, 5))
        assert value == DateValue("2024-03-05")
        assert value.as_date() == date(2024, 3, 5)

    def test_date_keeps_unparseable_text(self):
        value = coerce_value(_field(FieldKind.date), "next spring")
        assert value.to_wire() == "next spring"
        assert value.as_date() is None

    def test_list_is_not_text(self):
        with pytest.raises(FieldValueError):
            coerce_value(_field(FieldKind.text), ["a"])


class TestVisibleWhen:
    def test_matches_wire_value(self):
        predicate = VisibleWhen("takingMedications", "Yes")
        assert predicate({"takingMedications": ChoiceValue("Yes")})
        assert not predicate({"takingMedications": ChoiceValue("No")})

    def test_missing_field_hides(self):
        assert not VisibleWhen("other", "Yes")({})
