"""Coaching intake questionnaires: schemas, editing and read-only summaries."""

from .fields import (
    FieldKind,
    FieldValueError,
    FormField,
    UnknownFieldError,
    VisibleWhen,
    coerce_value,
)
from .schemas import (
    HEALTH_EVALUATION,
    LIFESTYLE_QUESTIONNAIRE,
    SCHEMAS,
    FormSchema,
    SchemaError,
    UnknownFormTypeError,
    get_schema,
)
from .form import (
    FormState,
    IntakeResponse,
    ReadOnlySummary,
    has_answers,
    is_visible,
    load_for_edit,
    render_readonly,
    set_field,
    to_submission,
    visible_fields,
)
from .editor import (
    CancellationToken,
    IntakeEditor,
    ResponseCache,
    SaveResult,
)

__all__ = [
    "FieldKind",
    "FieldValueError",
    "FormField",
    "UnknownFieldError",
    "VisibleWhen",
    "coerce_value",
    "HEALTH_EVALUATION",
    "LIFESTYLE_QUESTIONNAIRE",
    "SCHEMAS",
    "FormSchema",
    "SchemaError",
    "UnknownFormTypeError",
    "get_schema",
    "FormState",
    "IntakeResponse",
    "ReadOnlySummary",
    "has_answers",
    "is_visible",
    "load_for_edit",
    "render_readonly",
    "set_field",
    "to_submission",
    "visible_fields",
    "CancellationToken",
    "IntakeEditor",
    "ResponseCache",
    "SaveResult",
]
