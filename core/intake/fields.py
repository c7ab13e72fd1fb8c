"""
Field definitions and typed values for coaching intake forms.

Stored responses are an open JSON map. Inside the model every schema field
holds one of the value dataclasses below; `coerce_value` is the single
place where wire data is checked against a field's kind.
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, ClassVar, Union


class FieldKind(str, Enum):
    text = "text"
    choice = "choice"
    multi_choice = "multi_choice"
    boolean = "boolean"
    date = "date"


CHOICE_KINDS = (FieldKind.choice, FieldKind.multi_choice)


class FieldValueError(ValueError):
    """Raised when a value does not fit the field's kind."""

    def __init__(self, field_name: str, kind: FieldKind, value: Any):
        self.field_name = field_name
        self.kind = kind
        self.value = value
        super().__init__(
            f"Field '{field_name}' expects {kind.value}, got {type(value).__name__}"
        )


class UnknownFieldError(KeyError):
    """Raised when a field name is not part of the form's schema."""

    pass


# --- Typed values ---


@dataclass(frozen=True)
class TextValue:
    value: str = ""
    kind: ClassVar[FieldKind] = FieldKind.text

    def to_wire(self) -> str:
        return self.value

    def is_empty(self) -> bool:
        return self.value == ""


@dataclass(frozen=True)
class ChoiceValue:
    value: str = ""
    kind: ClassVar[FieldKind] = FieldKind.choice

    def to_wire(self) -> str:
        return self.value

    def is_empty(self) -> bool:
        return self.value == ""


@dataclass(frozen=True)
class MultiChoiceValue:
    values: tuple[str, ...] = ()
    kind: ClassVar[FieldKind] = FieldKind.multi_choice

    def to_wire(self) -> list[str]:
        return list(self.values)

    def is_empty(self) -> bool:
        return not self.values


@dataclass(frozen=True)
class BoolValue:
    value: bool = False
    kind: ClassVar[FieldKind] = FieldKind.boolean

    def to_wire(self) -> bool:
        return self.value

    def is_empty(self) -> bool:
        # False is an answer ("No"), not a blank
        return False


@dataclass(frozen=True)
class DateValue:
    """ISO date string as entered; empty string means unset."""

    value: str = ""
    kind: ClassVar[FieldKind] = FieldKind.date

    def to_wire(self) -> str:
        return self.value

    def is_empty(self) -> bool:
        return self.value == ""

    def as_date(self) -> date | None:
        """Parsed date, or None when unset or not a valid ISO date."""
        if not self.value:
            return None
        try:
            return date.fromisoformat(self.value)
        except ValueError:
            return None


FieldValue = Union[TextValue, ChoiceValue, MultiChoiceValue, BoolValue, DateValue]


# --- Field definitions ---


@dataclass(frozen=True)
class VisibleWhen:
    """Show a field only while another field equals a given value."""

    field: str
    equals: Any

    def __call__(self, values: dict[str, FieldValue]) -> bool:
        current = values.get(self.field)
        if current is None:
            return False
        return current.to_wire() == self.equals


@dataclass(frozen=True)
class FormField:
    name: str
    label: str
    kind: FieldKind
    section: str
    options: tuple[str, ...] = ()
    multiline: bool = False
    visible_when: VisibleWhen | None = None
    placeholder: str | None = None

    def default(self) -> FieldValue:
        return _DEFAULTS[self.kind]()


_DEFAULTS = {
    FieldKind.text: TextValue,
    FieldKind.choice: ChoiceValue,
    FieldKind.multi_choice: MultiChoiceValue,
    FieldKind.boolean: BoolValue,
    FieldKind.date: DateValue,
}

_TRUE_STRINGS = {"true", "yes", "1", "on"}
_FALSE_STRINGS = {"false", "no", "0", "off", ""}


def _as_text(form_field: FormField, raw: Any) -> str:
    if isinstance(raw, str):
        return raw
    # bool is an int subclass and is not text
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return str(raw)
    raise FieldValueError(form_field.name, form_field.kind, raw)


def coerce_value(form_field: FormField, raw: Any) -> FieldValue:
    """
    Convert a wire value into the typed value for `form_field`.

    Lenient about shape (None means default, a bare string becomes a
    one-item list for multi-choice, "yes"/"no" strings become booleans) but
    never about kind. Allowed options are not checked: the questionnaire is
    human-entered and the UI constrains choices.

    Raises:
        FieldValueError: If `raw` cannot represent the field's kind.
    """
    if raw is None:
        return form_field.default()

    kind = form_field.kind
    if kind == FieldKind.text:
        return TextValue(_as_text(form_field, raw))
    if kind == FieldKind.choice:
        return ChoiceValue(_as_text(form_field, raw))
    if kind == FieldKind.date:
        if isinstance(raw, date):
            return DateValue(raw.isoformat())
        return DateValue(_as_text(form_field, raw))
    if kind == FieldKind.multi_choice:
        if isinstance(raw, str):
            return MultiChoiceValue((raw,) if raw else ())
        if isinstance(raw, (list, tuple)) and all(isinstance(v, str) for v in raw):
            return MultiChoiceValue(tuple(raw))
        raise FieldValueError(form_field.name, kind, raw)
    if kind == FieldKind.boolean:
        if isinstance(raw, bool):
            return BoolValue(raw)
        if isinstance(raw, str) and raw.strip().lower() in _TRUE_STRINGS:
            return BoolValue(True)
        if isinstance(raw, str) and raw.strip().lower() in _FALSE_STRINGS:
            return BoolValue(False)
        raise FieldValueError(form_field.name, kind, raw)

    raise FieldValueError(form_field.name, kind, raw)
