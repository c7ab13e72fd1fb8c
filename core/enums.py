"""SQLAlchemy enum definitions for the database schema."""

import enum

from sqlalchemy import Enum as SQLEnum


# =====================================================
# Python Enum Classes
# =====================================================


class FormType(str, enum.Enum):
    lifestyle_questionnaire = "lifestyle_questionnaire"
    health_evaluation = "health_evaluation"


class CourseStatus(str, enum.Enum):
    draft = "draft"
    published = "published"
    archived = "archived"


class ModuleType(str, enum.Enum):
    educational = "educational"
    workout = "workout"
    faq = "faq"
    progress = "progress"
    nutrition = "nutrition"


class ContentKind(str, enum.Enum):
    video = "video"
    text = "text"
    exercise = "exercise"
    pdf = "pdf"
    workout = "workout"
    other = "other"


class RenewalEmailType(str, enum.Enum):
    expiring = "expiring"
    expired = "expired"


# =====================================================
# SQLAlchemy Enum Types
# These reference PostgreSQL types created by migrations (create_type=False)
# =====================================================

form_type_enum = SQLEnum(
    FormType, name="form_type", create_type=False, native_enum=True
)
course_status_enum = SQLEnum(
    CourseStatus, name="course_status", create_type=False, native_enum=True
)
module_type_enum = SQLEnum(
    ModuleType, name="module_type", create_type=False, native_enum=True
)
renewal_email_type_enum = SQLEnum(
    RenewalEmailType, name="renewal_email_type", create_type=False, native_enum=True
)
