"""
Coaching intake questionnaire schemas.

Each schema is an ordered list of fields grouped into sections. Order is
the render order, and a field's visibility may only depend on fields
declared before it.
"""

from dataclasses import dataclass

from core.enums import FormType

from .fields import (
    CHOICE_KINDS,
    FieldKind,
    FormField,
    UnknownFieldError,
    VisibleWhen,
)


class SchemaError(Exception):
    """Raised when a form schema is malformed."""

    pass


class UnknownFormTypeError(Exception):
    """Raised when no schema exists for a form type."""

    pass


@dataclass(frozen=True)
class FormSchema:
    form_type: FormType
    title: str
    fields: tuple[FormField, ...]

    def __post_init__(self):
        seen: set[str] = set()
        for f in self.fields:
            if f.name in seen:
                raise SchemaError(f"{self.form_type.value}: duplicate field '{f.name}'")
            if f.options and f.kind not in CHOICE_KINDS:
                raise SchemaError(
                    f"{self.form_type.value}: '{f.name}' has options but is {f.kind.value}"
                )
            if f.visible_when is not None and f.visible_when.field not in seen:
                # Only earlier fields may be referenced
                raise SchemaError(
                    f"{self.form_type.value}: '{f.name}' depends on "
                    f"'{f.visible_when.field}', which is not declared before it"
                )
            seen.add(f.name)

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]

    @property
    def sections(self) -> list[str]:
        """Section titles in first-appearance order."""
        titles: list[str] = []
        for f in self.fields:
            if f.section not in titles:
                titles.append(f.section)
        return titles

    def get_field(self, name: str) -> FormField:
        for f in self.fields:
            if f.name == name:
                return f
        raise UnknownFieldError(name)

    def has_field(self, name: str) -> bool:
        return any(f.name == name for f in self.fields)

    def defaults(self) -> dict:
        """Wire-format defaults for every field."""
        return {f.name: f.default().to_wire() for f in self.fields}


YES_NO = ("Yes", "No")


# =====================================================
# Lifestyle questionnaire
# =====================================================

LIFESTYLE_MEDICAL_HISTORY_OPTIONS = (
    "Shortness of breath",
    "Chest pain",
    "Vaginal bleeding",
    "Pelvic or abdominal pain/cramps",
    "High blood pressure",
    "Low blood pressure",
    "Diabetes",
    "Hypoglycaemia (low blood sugar)",
    "Seizures",
    "Heart disease",
    "Blood disorders",
    "Eating disorders",
    "Arthritis",
    "Osteoporosis or bone/joint issues",
    "Back pain",
    "Knee pain",
    "Neck pain",
    "Incompetent cervix",
    "Multiple gestation (twins/triplets)",
    "Previous miscarriage",
    "Major surgery in the last 10 years",
    "Minor surgery in the last 10 years",
    "None of the above",
)

MEDICAL_FLAGS_OPTIONS = (
    "Pelvic girdle pain",
    "Sciatica",
    "High BP",
    "Gestational diabetes",
    "Cervical concerns",
    "None",
)

DISCOMFORT_AREAS_OPTIONS = (
    "Lower back / SI joint",
    "Hips or pelvis",
    "Tailbone",
    "Upper back / between shoulder blades",
    "Neck and shoulders",
    "Knees",
    "Feet / arches / heels",
    "Wrists or hands (carpal tunnel-like)",
    "Rib pressure or breath restriction",
    "General heaviness / fatigue, no clear pain",
)

DISCOMFORT_WORSE_OPTIONS = (
    "First thing in the morning",
    "After sitting for long periods",
    "After standing or walking",
    "While sleeping or turning in bed",
    "At the end of the day",
    "During workouts",
    "Random / unpredictable",
)

CORE_AWARENESS_OPTIONS = (
    "Heaviness or pressure downwards",
    "Needing to clench or brace to move",
    "Short or shallow breathing",
    "Difficulty relaxing belly or ribs",
    "None of the above",
)

HELP_NEEDED_OPTIONS = (
    "Relief from aches",
    "Feeling stronger and more supported",
    "Better posture and breathing",
    "Preparing my body for birth",
    "Staying active without fear",
    "Just moving without discomfort",
)

_PREGNANCY = "Pregnancy Details"
_MEDICAL = "Medical History"
_DISCOMFORT = "Discomfort & Pain"
_MOVEMENT = "Movement & Exercise"
_GOALS = "Goals & Lifestyle"
_REFERRAL = "Referral & Consent"

LIFESTYLE_QUESTIONNAIRE = FormSchema(
    form_type=FormType.lifestyle_questionnaire,
    title="Lifestyle Questionnaire",
    fields=(
        FormField(
            "pregnancyNumber",
            "Pregnancy Number",
            FieldKind.choice,
            _PREGNANCY,
            options=("First pregnancy", "Second pregnancy", "Third or more"),
        ),
        FormField("expectedDueDate", "Expected Due Date", FieldKind.date, _PREGNANCY),
        FormField(
            "trimester",
            "Trimester",
            FieldKind.choice,
            _PREGNANCY,
            options=(
                "First trimester (0–12 weeks)",
                "Second trimester (13–26 weeks)",
                "Third trimester (27–40 weeks)",
            ),
        ),
        FormField(
            "medicalHistory",
            "Medical History",
            FieldKind.multi_choice,
            _MEDICAL,
            options=LIFESTYLE_MEDICAL_HISTORY_OPTIONS,
        ),
        FormField(
            "medicalHistoryOther",
            "Other",
            FieldKind.text,
            _MEDICAL,
            placeholder="Any other conditions...",
        ),
        FormField(
            "medicalFlags",
            "Medical Flags",
            FieldKind.multi_choice,
            _MEDICAL,
            options=MEDICAL_FLAGS_OPTIONS,
        ),
        FormField(
            "medicalFlagsOther",
            "Other Flags",
            FieldKind.text,
            _MEDICAL,
            placeholder="Any other flags...",
        ),
        FormField(
            "discomfortAreas",
            "Discomfort Areas",
            FieldKind.multi_choice,
            _DISCOMFORT,
            options=DISCOMFORT_AREAS_OPTIONS,
        ),
        FormField(
            "discomfortWorse",
            "When Worse",
            FieldKind.multi_choice,
            _DISCOMFORT,
            options=DISCOMFORT_WORSE_OPTIONS,
        ),
        FormField(
            "exerciseHistory",
            "Exercise History",
            FieldKind.choice,
            _MOVEMENT,
            options=(
                "Didn't exercise",
                "Walked / did light activity",
                "Strength trained",
                "Did yoga / pilates",
                "Did mixed / athletic workouts",
            ),
        ),
        FormField(
            "movementFeels",
            "Movement Feels",
            FieldKind.choice,
            _MOVEMENT,
            options=("Comforting", "Neutral", "Intimidating", "Pain-provoking"),
        ),
        FormField(
            "coreAwareness",
            "Core Awareness",
            FieldKind.multi_choice,
            _MOVEMENT,
            options=CORE_AWARENESS_OPTIONS,
        ),
        FormField(
            "helpNeeded",
            "Help Needed",
            FieldKind.multi_choice,
            _GOALS,
            options=HELP_NEEDED_OPTIONS,
        ),
        FormField(
            "takingMedications",
            "Taking Medications",
            FieldKind.choice,
            _GOALS,
            options=YES_NO,
        ),
        FormField(
            "medicationDetails",
            "Medication Details",
            FieldKind.text,
            _GOALS,
            multiline=True,
            visible_when=VisibleWhen("takingMedications", "Yes"),
        ),
        FormField(
            "previousPregnancies",
            "Previous Pregnancies",
            FieldKind.text,
            _GOALS,
            multiline=True,
        ),
        FormField("concerns", "Concerns", FieldKind.text, _GOALS, multiline=True),
        FormField("mainGoals", "Main Goals", FieldKind.text, _GOALS, multiline=True),
        FormField(
            "currentLifestyle",
            "Current Lifestyle",
            FieldKind.text,
            _GOALS,
            multiline=True,
        ),
        FormField(
            "howDidYouHear",
            "How Did You Hear",
            FieldKind.choice,
            _REFERRAL,
            options=("Instagram", "Youtube", "Website", "Friend/ word of mouth", "Other"),
        ),
        FormField("referredBy", "Referred By", FieldKind.text, _REFERRAL),
        FormField(
            "usingOnlinePrograms",
            "Using Online Programs",
            FieldKind.choice,
            _REFERRAL,
            options=YES_NO,
        ),
        FormField(
            "whichProgram",
            "Which Program",
            FieldKind.text,
            _REFERRAL,
            visible_when=VisibleWhen("usingOnlinePrograms", "Yes"),
        ),
        FormField(
            "consentToContact",
            "Consent to Contact",
            FieldKind.boolean,
            _REFERRAL,
        ),
    ),
)


# =====================================================
# Health evaluation
# =====================================================

CLEARED_WITHOUT_RESTRICTIONS = "Cleared for exercise without restrictions"
CLEARED_WITH_RESTRICTIONS = "Cleared with restrictions/considerations"
NOT_CLEARED = "Not cleared for exercise at this time"

_PARTICIPANT = "Participant"
_DECLARATION = "Participant Declaration"
_CLEARANCE = "Doctor/Midwife Clearance"

HEALTH_EVALUATION = FormSchema(
    form_type=FormType.health_evaluation,
    title="Health Evaluation",
    fields=(
        FormField("fullName", "Full Name", FieldKind.text, _PARTICIPANT),
        FormField("expectedDueDate", "Expected Due Date", FieldKind.date, _PARTICIPANT),
        FormField(
            "currentTrimester",
            "Trimester",
            FieldKind.choice,
            _PARTICIPANT,
            options=(
                "First (0–12 weeks)",
                "Second (13–26 weeks)",
                "Third (27–40 weeks)",
            ),
        ),
        FormField(
            "participantDeclaration",
            "Declaration",
            FieldKind.choice,
            _DECLARATION,
            options=("I agree", "I do not agree"),
        ),
        FormField("doctorName", "Doctor Name", FieldKind.text, _CLEARANCE),
        FormField("doctorQualification", "Qualification", FieldKind.text, _CLEARANCE),
        FormField("clinicName", "Clinic", FieldKind.text, _CLEARANCE),
        FormField("doctorContact", "Contact", FieldKind.text, _CLEARANCE),
        FormField(
            "clearanceDecision",
            "Clearance Decision",
            FieldKind.choice,
            _CLEARANCE,
            options=(CLEARED_WITHOUT_RESTRICTIONS, CLEARED_WITH_RESTRICTIONS, NOT_CLEARED),
        ),
        FormField(
            "restrictionDetails",
            "Restrictions",
            FieldKind.text,
            _CLEARANCE,
            multiline=True,
            visible_when=VisibleWhen("clearanceDecision", CLEARED_WITH_RESTRICTIONS),
            placeholder="Describe restrictions...",
        ),
    ),
)


SCHEMAS: dict[FormType, FormSchema] = {
    FormType.lifestyle_questionnaire: LIFESTYLE_QUESTIONNAIRE,
    FormType.health_evaluation: HEALTH_EVALUATION,
}


def get_schema(form_type: FormType | str) -> FormSchema:
    """Look up the schema for a form type (enum or its string value)."""
    try:
        return SCHEMAS[FormType(form_type)]
    except (ValueError, KeyError):
        raise UnknownFormTypeError(f"Unknown form type: {form_type}")
